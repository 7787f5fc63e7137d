"""单据模块 - 收货单/采购单/形式发票 HTML 渲染与格式化"""

from .formatting import format_date_in, format_inr, number_to_words
from .render import (
    Charge,
    DocumentLine,
    Party,
    TradeDocument,
    goods_receipt_document,
    proforma_document,
    purchase_order_document,
    render_trade_document,
)

__all__ = [
    "format_inr",
    "format_date_in",
    "number_to_words",
    "Charge",
    "DocumentLine",
    "Party",
    "TradeDocument",
    "goods_receipt_document",
    "purchase_order_document",
    "proforma_document",
    "render_trade_document",
]
