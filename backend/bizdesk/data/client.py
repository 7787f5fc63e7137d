"""
托管后端客户端 - Supabase REST 访问

职责：
1. 统一 apikey / Authorization 请求头
2. 错误响应转换为 RemoteOperationFailed（带状态码）
3. 网络异常转换为 RemoteOperationFailed

依赖：
- requests: HTTP 客户端
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from ..config.runtime_config import BackendConfig
from ..interfaces import RemoteOperationFailed

logger = logging.getLogger(__name__)


def error_message(response: requests.Response) -> str:
    """从错误响应提取消息（PostgREST/Storage/Auth 字段名各不相同）"""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("message", "error_description", "msg", "error"):
            if body.get(key):
                return str(body[key])
    return str(body)


class SupabaseClient:
    """Supabase REST 客户端"""

    def __init__(
        self,
        config: BackendConfig,
        access_token: str | None = None,
        session: requests.Session | None = None,
    ):
        if not config.url:
            raise ValueError("未配置后端地址 backend.url")
        self.base_url = config.url.rstrip("/")
        self.anon_key = config.anon_key
        self.timeout = config.request_timeout_sec
        self.access_token = access_token
        self.session = session or requests.Session()

    def set_access_token(self, token: str | None) -> None:
        self.access_token = token

    def headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.access_token or self.anon_key}",
        }
        if extra:
            headers.update(extra)
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        """发送请求，>=400 抛出 RemoteOperationFailed"""
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                data=data,
                headers=self.headers(headers),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RemoteOperationFailed(f"后端请求失败: {e}") from e

        if response.status_code >= 400:
            message = error_message(response)
            logger.warning(f"{method} {path} -> {response.status_code}: {message}")
            raise RemoteOperationFailed(message, status=response.status_code)
        return response
