"""
企业资料加载器 - 读取 config/business.yaml

职责：
- 解析企业抬头、联系方式、GST、银行信息
- 为单据渲染提供类型安全访问
- 缓存加载结果（避免重复解析）

使用方式：
    profile = ProfileLoader.load("config/business.yaml")
    profile.gst.enabled
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field


class BankDetails(BaseModel):
    """银行信息"""
    bank_name: str
    account_number: str
    ifsc_code: str


class GSTSettings(BaseModel):
    """GST税率"""
    enabled: bool = True
    sgst_rate: float = 9.0
    cgst_rate: float = 9.0


class BusinessProfile(BaseModel):
    """企业资料（business.yaml 的结构化表示）"""
    name: str
    address: str = ""
    phone: str = ""
    email: str = ""
    gst_number: str | None = None
    logo_url: str | None = None
    signature_url: str | None = None
    bank_details: BankDetails | None = None
    gst: GSTSettings = Field(default_factory=GSTSettings)

    @property
    def contact_line(self) -> str:
        return " | ".join(p for p in (self.email, self.phone) if p)


class ProfileLoader:
    """企业资料加载器（缓存）"""

    @classmethod
    @lru_cache(maxsize=1)
    def load(cls, profile_path: str | Path = "config/business.yaml") -> BusinessProfile:
        """加载并缓存企业资料"""
        path = Path(profile_path)
        if not path.exists():
            raise FileNotFoundError(f"企业资料文件不存在: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        return BusinessProfile(**data.get("business", data))

    @classmethod
    def reload(cls, profile_path: str | Path = "config/business.yaml") -> BusinessProfile:
        """强制重新加载（清除缓存）"""
        cls.load.cache_clear()
        return cls.load(profile_path)


def load_profile(profile_path: str | Path = "config/business.yaml") -> BusinessProfile:
    """加载企业资料"""
    return ProfileLoader.load(profile_path)
