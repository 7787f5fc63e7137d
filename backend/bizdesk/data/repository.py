"""
表级仓储 - PostgREST 的 list/insert/update/delete 封装
"""

from __future__ import annotations

from typing import Any

from ..interfaces import IRepository, RemoteOperationFailed
from .client import SupabaseClient

RETURN_REPRESENTATION = {"Prefer": "return=representation"}


def eq_filters(filters: dict[str, Any]) -> dict[str, str]:
    """等值过滤 -> PostgREST 查询参数 col=eq.value"""
    return {k: f"eq.{_literal(v)}" for k, v in filters.items()}


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


class SupabaseRepository(IRepository):
    """单表仓储实现"""

    def __init__(self, client: SupabaseClient, table: str):
        self.client = client
        self.table = table

    @property
    def path(self) -> str:
        return f"rest/v1/{self.table}"

    def list(self, order_by: str = "created_at", descending: bool = True, **filters: Any) -> list[dict[str, Any]]:
        params = {"select": "*", **eq_filters(filters)}
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        response = self.client.request("GET", self.path, params=params)
        return response.json() or []

    def insert(self, record: dict[str, Any]) -> dict[str, Any]:
        rows = self.insert_many([record])
        if not rows:
            raise RemoteOperationFailed(f"插入未返回记录: {self.table}")
        return rows[0]

    def insert_many(self, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if not records:
            return []
        response = self.client.request(
            "POST", self.path, json=records, headers=RETURN_REPRESENTATION
        )
        return response.json() or []

    def update(self, record_id: str, patch: dict[str, Any]) -> dict[str, Any]:
        response = self.client.request(
            "PATCH",
            self.path,
            params=eq_filters({"id": record_id}),
            json=patch,
            headers=RETURN_REPRESENTATION,
        )
        rows = response.json() or []
        if not rows:
            raise RemoteOperationFailed(f"记录不存在: {self.table}/{record_id}", status=404)
        return rows[0]

    def delete(self, record_id: str) -> None:
        self.delete_where(id=record_id)

    def delete_where(self, **filters: Any) -> None:
        if not filters:
            raise ValueError("批量删除必须带过滤条件")
        self.client.request("DELETE", self.path, params=eq_filters(filters))
