"""
数据访问层 - 托管后端的仓储抽象与缓存集合

- client: Supabase REST 客户端
- repository: 单表仓储
- collections: 缓存集合与各业务表服务
"""

from .client import SupabaseClient
from .collections import (
    CachedCollection,
    GoodsReceipts,
    InventoryItems,
    ItemizedCollection,
    ProformaInvoices,
    PurchaseOrders,
    Suppliers,
)
from .repository import SupabaseRepository

__all__ = [
    "SupabaseClient",
    "SupabaseRepository",
    "CachedCollection",
    "InventoryItems",
    "Suppliers",
    "ItemizedCollection",
    "GoodsReceipts",
    "PurchaseOrders",
    "ProformaInvoices",
]
