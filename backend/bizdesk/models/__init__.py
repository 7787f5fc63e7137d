"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- CaptureSnapshot/PageFrame/Artifact: 导出流水线中间产物
- DeliveryOutcome: 投递终态
- ExportJob: 单次导出调用记录
- InventoryItem/Supplier/GoodsReceipt/PurchaseOrder/ProformaInvoice: 业务记录
- Notice: 用户通知
"""

from .export import (
    PDF_CONTENT_TYPE,
    Artifact,
    CaptureSnapshot,
    DeliveryIntent,
    DeliveryOutcome,
    DeliveryTag,
    ExportRequest,
    PageFrame,
    PageLayout,
    pdf_filename,
)
from .job import ExportJob, JobStatus
from .notice import Notice, Severity
from .records import (
    GoodsReceipt,
    GoodsReceiptItem,
    InventoryItem,
    ProformaInvoice,
    ProformaInvoiceItem,
    PurchaseOrder,
    PurchaseOrderItem,
    Record,
    Supplier,
    User,
)

__all__ = [
    "PDF_CONTENT_TYPE",
    "Artifact",
    "CaptureSnapshot",
    "DeliveryIntent",
    "DeliveryOutcome",
    "DeliveryTag",
    "ExportRequest",
    "PageFrame",
    "PageLayout",
    "pdf_filename",
    "ExportJob",
    "JobStatus",
    "Notice",
    "Severity",
    "Record",
    "InventoryItem",
    "Supplier",
    "GoodsReceipt",
    "GoodsReceiptItem",
    "PurchaseOrder",
    "PurchaseOrderItem",
    "ProformaInvoice",
    "ProformaInvoiceItem",
    "User",
]
