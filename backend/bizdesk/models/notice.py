"""
通知模型 - 操作结果的用户可见描述（toast）
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class Severity(str, Enum):
    """通知级别"""
    SUCCESS = "success"
    ERROR = "error"


class Notice(BaseModel):
    """用户通知"""
    title: str
    description: str
    severity: Severity = Severity.SUCCESS

    @classmethod
    def success(cls, description: str, title: str = "Success") -> Notice:
        return cls(title=title, description=description, severity=Severity.SUCCESS)

    @classmethod
    def error(cls, description: str, title: str = "Error") -> Notice:
        return cls(title=title, description=description, severity=Severity.ERROR)
