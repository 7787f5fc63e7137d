"""
单据渲染 - 收货单/采购单/形式发票 HTML 文档表面

职责：
1. 收货单/采购单/形式发票记录 -> 通用单据结构
2. jinja2 模板渲染（自动转义用户输入）
3. 输出可直接导出/打印的HTML片段

测试要点：
- test_render_escapes_user_input: 用户输入转义
- test_render_amount_in_words: 大写金额
"""

from __future__ import annotations

from datetime import date

from jinja2 import Environment, PackageLoader, select_autoescape
from pydantic import BaseModel, Field

from ..config import BusinessProfile
from ..models import GoodsReceipt, ProformaInvoice, PurchaseOrder, Supplier
from .formatting import format_date_in, format_inr, number_to_words


class DocumentLine(BaseModel):
    """单据明细行"""
    name: str
    quantity: float
    unit: str = ""
    unit_price: float
    hsn_code: str | None = None

    @property
    def total(self) -> float:
        return self.quantity * self.unit_price


class Charge(BaseModel):
    """附加费用"""
    name: str
    amount: float


class Party(BaseModel):
    """往来方（供应商/客户）"""
    name: str
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    gst_number: str | None = None

    @property
    def contact_line(self) -> str:
        return " | ".join(p for p in (self.email, self.phone) if p)


class TradeDocument(BaseModel):
    """通用单据（收货单/采购单/报价单）"""
    kind: str
    number_label: str = "No"
    number: str
    issued_on: date
    party_label: str = "Supplier"
    party: Party
    lines: list[DocumentLine] = Field(default_factory=list)
    charges: list[Charge] = Field(default_factory=list)
    sgst: float = 0
    cgst: float = 0
    status: str | None = None
    payment_terms: str | None = None
    notes: str | None = None

    @property
    def subtotal(self) -> float:
        return sum(line.total for line in self.lines)

    @property
    def total(self) -> float:
        return self.subtotal + sum(c.amount for c in self.charges) + self.sgst + self.cgst


def _supplier_party(name: str, supplier: Supplier | None) -> Party:
    if supplier is None:
        return Party(name=name)
    return Party(
        name=supplier.name,
        address=supplier.address,
        phone=supplier.phone,
        email=supplier.email,
        gst_number=supplier.gst_number,
    )


def _issued_on(value: str) -> date:
    return date.fromisoformat(value[:10])


def goods_receipt_document(receipt: GoodsReceipt, supplier: Supplier | None = None) -> TradeDocument:
    """收货单记录 -> 单据（税额按 SGST/CGST 对半拆分）"""
    half_tax = receipt.tax_amount / 2
    return TradeDocument(
        kind="GOODS RECEIPT NOTE",
        number_label="GRN No",
        number=receipt.gr_number,
        issued_on=_issued_on(receipt.receipt_date),
        party=_supplier_party(receipt.supplier_name, supplier),
        lines=[
            DocumentLine(
                name=item.item_name,
                quantity=item.quantity_received,
                unit=item.unit,
                unit_price=item.unit_price,
            )
            for item in receipt.items
        ],
        sgst=half_tax,
        cgst=half_tax,
        status=receipt.status,
        notes=receipt.notes,
    )


def purchase_order_document(order: PurchaseOrder, supplier: Supplier | None = None) -> TradeDocument:
    half_tax = (order.tax_amount or 0) / 2
    return TradeDocument(
        kind="PURCHASE ORDER",
        number_label="PO No",
        number=order.po_number,
        issued_on=_issued_on(order.date),
        party=_supplier_party(order.supplier_name, supplier),
        lines=[
            DocumentLine(name=item.item_name, quantity=item.quantity, unit=item.unit, unit_price=item.rate)
            for item in order.items
        ],
        sgst=half_tax,
        cgst=half_tax,
        status=order.status,
        payment_terms=order.payment_terms,
        notes=order.notes,
    )


def proforma_document(invoice: ProformaInvoice) -> TradeDocument:
    """形式发票 -> 单据（往来方为客户，明细带 HSN）"""
    half_tax = (invoice.tax_amount or 0) / 2
    return TradeDocument(
        kind="PROFORMA INVOICE",
        number_label="Invoice No",
        number=invoice.invoice_number,
        issued_on=_issued_on(invoice.date),
        party_label="Bill To",
        party=Party(
            name=invoice.customer_name,
            address=invoice.customer_address,
            gst_number=invoice.customer_gst,
        ),
        lines=[
            DocumentLine(
                name=item.item_name,
                quantity=item.quantity,
                unit=item.unit,
                unit_price=item.rate,
                hsn_code=item.hsn_code,
            )
            for item in invoice.items
        ],
        sgst=half_tax,
        cgst=half_tax,
        payment_terms=invoice.payment_terms,
        notes=invoice.notes,
    )


_env = Environment(
    loader=PackageLoader("bizdesk.documents", "templates"),
    autoescape=select_autoescape(["html", "j2"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
_env.filters["inr"] = format_inr
_env.filters["date_in"] = format_date_in


def render_trade_document(doc: TradeDocument, business: BusinessProfile) -> str:
    """渲染单据HTML片段"""
    template = _env.get_template("trade_document.html.j2")
    return template.render(
        doc=doc,
        business=business,
        amount_words=number_to_words(doc.total),
    )
