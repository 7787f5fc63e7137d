"""
对象存储 - Supabase Storage 上传与公开URL

上传失败原样透传存储返回的消息，不重试。
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from ..data.client import SupabaseClient
from ..interfaces import IObjectStorage, RemoteOperationFailed, UploadFailed

logger = logging.getLogger(__name__)


class SupabaseStorage(IObjectStorage):
    """Supabase Storage 实现"""

    def __init__(self, client: SupabaseClient, bucket: str):
        self.client = client
        self.bucket = bucket

    def upload(self, path: str, data: bytes, content_type: str, upsert: bool = True) -> str:
        headers = {
            "Content-Type": content_type,
            "x-upsert": "true" if upsert else "false",
        }
        try:
            self.client.request(
                "POST",
                f"storage/v1/object/{self.bucket}/{quote(path)}",
                data=data,
                headers=headers,
            )
        except RemoteOperationFailed as e:
            raise UploadFailed(str(e)) from e

        logger.info(f"上传完成: {self.bucket}/{path} ({len(data)}字节)")
        return path

    def public_url(self, path: str) -> str:
        return f"{self.client.base_url}/storage/v1/object/public/{self.bucket}/{quote(path)}"
