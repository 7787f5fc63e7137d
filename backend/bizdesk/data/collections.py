"""
缓存集合 - 仓储之上的本地缓存与CRUD服务

职责：
1. 列表结果缓存；refresh/invalidate 为显式操作
2. 写操作前校验登录（未登录在任何请求前抛 NotAuthenticated）
3. 写成功后同步缓存
4. 通过通知边界发 success/error，失败原样重新抛出

测试要点：
- test_add_requires_auth: 未登录新增不发请求
- test_add_prepends_cache: 新增记录置顶
- test_failure_notifies_and_reraises: 失败通知后重新抛出
- test_remove_deletes_items_first: 单据先删明细再删主表
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from ..interfaces import IAuthProvider, INotifier, IRepository, NotAuthenticated
from ..models import (
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
from ..notices import reported

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)


class CachedCollection(Generic[R]):
    """单表缓存集合"""

    model: type[R]
    label: str = "record"

    def __init__(self, repository: IRepository, auth: IAuthProvider, notifier: INotifier):
        self.repository = repository
        self.auth = auth
        self.notifier = notifier
        self._items: list[R] = []
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def all(self) -> list[R]:
        """缓存内容（未加载时先拉取）"""
        if not self._loaded:
            self.refresh()
        return list(self._items)

    def get(self, record_id: str) -> R | None:
        return next((r for r in self.all() if r.id == record_id), None)

    def refresh(self) -> list[R]:
        """重新拉取列表"""
        with reported(self.notifier, None, f"Failed to load {self.label}s"):
            rows = self.repository.list()
        self._items = [self.model(**row) for row in rows]
        self._loaded = True
        return list(self._items)

    def invalidate(self) -> None:
        """丢弃缓存，下次访问重新拉取"""
        self._items = []
        self._loaded = False

    def add(self, record: R) -> R:
        """新增记录（置顶）"""
        with reported(self.notifier, f"{self.title} added successfully!", f"Failed to add {self.label}"):
            user = self._require_user()
            row = self.repository.insert({**record.to_insert(), "user_id": user.id})
        created = self.model(**row)
        self._items.insert(0, created)
        return created

    def update(self, record_id: str, patch: dict[str, Any]) -> R:
        """更新记录并合并到缓存"""
        with reported(self.notifier, f"{self.title} updated successfully!", f"Failed to update {self.label}"):
            self._require_user()
            row = self.repository.update(record_id, patch)
        updated = self.model(**row)
        self._items = [updated if r.id == record_id else r for r in self._items]
        return updated

    def remove(self, record_id: str) -> None:
        """删除记录"""
        with reported(self.notifier, f"{self.title} deleted successfully!", f"Failed to delete {self.label}"):
            self._require_user()
            self._delete(record_id)
        self._items = [r for r in self._items if r.id != record_id]

    @property
    def title(self) -> str:
        return self.label[:1].upper() + self.label[1:]

    def _delete(self, record_id: str) -> None:
        self.repository.delete(record_id)

    def _require_user(self) -> User:
        user = self.auth.get_user()
        if user is None:
            raise NotAuthenticated("No authenticated user")
        return user


class InventoryItems(CachedCollection[InventoryItem]):
    model = InventoryItem
    label = "item"

    def low_stock(self) -> list[InventoryItem]:
        return [i for i in self.all() if i.needs_reorder]


class Suppliers(CachedCollection[Supplier]):
    model = Supplier
    label = "supplier"


class ItemizedCollection(CachedCollection[R]):
    """单据主表 + 明细子表（明细以 parent_key 关联主表）"""

    item_model: type[Record]
    parent_key: str

    def __init__(
        self,
        repository: IRepository,
        item_repository: IRepository,
        auth: IAuthProvider,
        notifier: INotifier,
    ):
        super().__init__(repository, auth, notifier)
        self.item_repository = item_repository

    def items_for(self, record_id: str) -> list[Record]:
        rows = self.item_repository.list(order_by="", **{self.parent_key: record_id})
        return [self.item_model(**row) for row in rows]

    def add_with_items(self, record: R, items: list[Record]) -> R:
        """新增单据及明细"""
        with reported(self.notifier, f"{self.title} created successfully!", f"Failed to create {self.label}"):
            user = self._require_user()
            row = self.repository.insert({**record.to_insert(), "user_id": user.id})
            payload = [
                {**item.to_insert(), self.parent_key: row["id"]}
                for item in items
            ]
            item_rows = self.item_repository.insert_many(payload)
        created = self.model(**row)
        created.items = [self.item_model(**r) for r in item_rows]
        self._items.insert(0, created)
        return created

    def _delete(self, record_id: str) -> None:
        # 先删明细再删主表
        self.item_repository.delete_where(**{self.parent_key: record_id})
        self.repository.delete(record_id)


class GoodsReceipts(ItemizedCollection[GoodsReceipt]):
    model = GoodsReceipt
    item_model = GoodsReceiptItem
    parent_key = "goods_receipt_id"
    label = "goods receipt"


class PurchaseOrders(ItemizedCollection[PurchaseOrder]):
    model = PurchaseOrder
    item_model = PurchaseOrderItem
    parent_key = "purchase_order_id"
    label = "purchase order"


class ProformaInvoices(ItemizedCollection[ProformaInvoice]):
    model = ProformaInvoice
    item_model = ProformaInvoiceItem
    parent_key = "proforma_invoice_id"
    label = "proforma invoice"
