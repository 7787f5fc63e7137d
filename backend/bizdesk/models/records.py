"""
业务记录模型 - 与托管后端表结构一一对应

inventory_items / suppliers / goods_receipts / purchase_orders / proforma_invoices
（单据主表各带一张明细子表 *_items）
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, Field


class Record(BaseModel):
    """表记录基类"""

    table: ClassVar[str] = ""
    # 插入时由后端生成的字段
    server_fields: ClassVar[tuple[str, ...]] = ("id", "user_id", "created_at", "updated_at")

    id: str | None = None
    user_id: str | None = None
    created_at: datetime | None = None

    model_config = {"extra": "ignore"}

    def to_insert(self) -> dict[str, Any]:
        """生成插入负载（去掉服务端字段）"""
        return self.model_dump(mode="json", exclude=set(self.server_fields), exclude_none=True)


class InventoryItem(Record):
    """库存物料"""
    table: ClassVar[str] = "inventory_items"

    name: str
    description: str | None = None
    category: str | None = None
    unit: str = "pcs"
    current_stock: float = 0
    reorder_level: float | None = None
    unit_price: float | None = None
    supplier_id: str | None = None
    hsn_code: str | None = None
    updated_at: datetime | None = None

    @property
    def needs_reorder(self) -> bool:
        return self.reorder_level is not None and self.current_stock <= self.reorder_level


class Supplier(Record):
    """供应商"""
    table: ClassVar[str] = "suppliers"

    name: str
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    gst_number: str | None = None
    payment_terms: str | None = None
    notes: str | None = None


class GoodsReceiptItem(Record):
    """收货明细"""
    table: ClassVar[str] = "goods_receipt_items"
    server_fields: ClassVar[tuple[str, ...]] = ("id", "user_id", "created_at")

    goods_receipt_id: str | None = None
    item_id: str | None = None
    item_name: str
    unit: str = "pcs"
    quantity_ordered: float = 0
    quantity_received: float = 0
    unit_price: float = 0
    amount: float = 0
    notes: str | None = None


class GoodsReceipt(Record):
    """收货单"""
    table: ClassVar[str] = "goods_receipts"

    gr_number: str
    purchase_order_id: str | None = None
    supplier_id: str | None = None
    supplier_name: str
    receipt_date: str
    status: str = "RECEIVED"
    subtotal: float = 0
    tax_amount: float = 0
    total: float = 0
    notes: str | None = None
    items: list[GoodsReceiptItem] = Field(default_factory=list, exclude=True)


class PurchaseOrderItem(Record):
    """采购明细"""
    table: ClassVar[str] = "purchase_order_items"
    server_fields: ClassVar[tuple[str, ...]] = ("id", "user_id", "created_at")

    purchase_order_id: str | None = None
    item_id: str | None = None
    item_name: str
    description: str | None = None
    unit: str = "pcs"
    quantity: float = 0
    rate: float = 0
    amount: float = 0


class PurchaseOrder(Record):
    """采购单"""
    table: ClassVar[str] = "purchase_orders"

    po_number: str
    supplier_id: str | None = None
    supplier_name: str
    date: str
    expected_delivery: str | None = None
    subtotal: float = 0
    tax_amount: float | None = None
    total: float = 0
    status: str | None = None
    payment_terms: str | None = None
    notes: str | None = None
    items: list[PurchaseOrderItem] = Field(default_factory=list, exclude=True)


class ProformaInvoiceItem(Record):
    """报价明细"""
    table: ClassVar[str] = "proforma_invoice_items"
    server_fields: ClassVar[tuple[str, ...]] = ("id", "user_id", "created_at")

    proforma_invoice_id: str | None = None
    item_name: str
    description: str | None = None
    hsn_code: str | None = None
    unit: str = "pcs"
    quantity: float = 0
    rate: float = 0
    amount: float = 0


class ProformaInvoice(Record):
    """形式发票（报价单）"""
    table: ClassVar[str] = "proforma_invoices"

    invoice_number: str
    customer_id: str | None = None
    customer_name: str
    customer_address: str | None = None
    customer_gst: str | None = None
    date: str
    subtotal: float = 0
    tax_amount: float | None = None
    total: float = 0
    payment_terms: str | None = None
    notes: str | None = None
    items: list[ProformaInvoiceItem] = Field(default_factory=list, exclude=True)


class User(BaseModel):
    """当前登录用户"""
    id: str
    email: str | None = None

    model_config = {"extra": "ignore"}
