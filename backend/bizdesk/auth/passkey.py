"""
共享口令登录 - 客户端口令门 + 服务端校验规则

职责：
1. PasskeyGate: 调用 validate-passkey 函数，保存会话令牌与过期时间
2. PasskeyValidator: 查询有效口令，签发24小时会话令牌

服务端响应约定：
- 缺少口令: 400 Invalid request
- 口令有效: 200 valid=True + sessionToken + expiresAt
- 口令无效: 401 Invalid passkey
- 后端错误: 500 Server error

测试要点：
- test_validate_active_passkey: 有效口令签发令牌
- test_validate_unknown_passkey: 无效口令401
- test_gate_session_expiry: 会话过期
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, Field

from ..data.client import SupabaseClient
from ..interfaces import IRepository, RemoteOperationFailed

logger = logging.getLogger(__name__)

SESSION_TTL = timedelta(hours=24)


class PasskeyResult(BaseModel):
    """口令校验结果"""
    status: int = 200
    valid: bool
    message: str
    session_token: str | None = Field(None, alias="sessionToken")
    expires_at: datetime | None = Field(None, alias="expiresAt")

    model_config = {"populate_by_name": True}

    def to_response(self) -> dict:
        """函数响应体（不含状态码）"""
        return self.model_dump(mode="json", by_alias=True, exclude={"status"}, exclude_none=True)


class Session(BaseModel):
    """登录会话"""
    token: str
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(timezone.utc)) >= self.expires_at


class PasskeyValidator:
    """服务端口令校验"""

    def __init__(self, repository: IRepository):
        self.repository = repository

    def validate(self, passkey: str | None, now: datetime | None = None) -> PasskeyResult:
        if not passkey:
            return PasskeyResult(status=400, valid=False, message="Invalid request")

        try:
            rows = self.repository.list(order_by="", passkey=passkey, is_active=True)
        except RemoteOperationFailed as e:
            logger.error(f"口令查询失败: {e}")
            return PasskeyResult(status=500, valid=False, message="Server error")

        if not rows:
            logger.info("口令无效")
            return PasskeyResult(status=401, valid=False, message="Invalid passkey")

        issued = now or datetime.now(timezone.utc)
        logger.info("口令校验通过")
        return PasskeyResult(
            status=200,
            valid=True,
            message="Login successful",
            session_token=str(uuid.uuid4()),
            expires_at=issued + SESSION_TTL,
        )


class PasskeyGate:
    """客户端口令门"""

    FUNCTION_PATH = "functions/v1/validate-passkey"

    def __init__(self, client: SupabaseClient):
        self.client = client
        self.session: Session | None = None

    def login(self, passkey: str) -> PasskeyResult:
        """提交口令；有效则保存会话，无效返回 valid=False"""
        try:
            response = self.client.request("POST", self.FUNCTION_PATH, json={"passkey": passkey})
        except RemoteOperationFailed as e:
            if e.status in (400, 401):
                return PasskeyResult(status=e.status, valid=False, message=str(e))
            raise

        result = PasskeyResult(**response.json())
        if result.valid and result.session_token and result.expires_at:
            self.session = Session(token=result.session_token, expires_at=result.expires_at)
        return result

    def is_authenticated(self, now: datetime | None = None) -> bool:
        return self.session is not None and not self.session.is_expired(now)

    def logout(self) -> None:
        self.session = None
