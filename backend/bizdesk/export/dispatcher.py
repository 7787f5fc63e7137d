"""
投递调度器 - 原生分享 / 上传+消息链接 / 本地下载

职责：
1. 按固定优先级选择唯一一种投递方式
2. 原生分享：能力探测通过才调起；用户取消为非错误终态
3. 链接分享：上传对象存储 -> 公开URL -> 消息深链接 -> 新窗口打开
4. 下载：交给下载目标，临时句柄由其负责释放

优先级：
    原生分享（best_effort/link_share 且 can_share）
    > 链接分享（link_share）
    > 下载

原生分享非取消类失败直接抛出 ShareFailed，不自动降级到链接/下载。

测试要点：
- test_download_when_no_share: 无分享能力且非链接意图 -> downloaded
- test_share_cancelled: 用户取消 -> shared-cancelled
- test_upload_failed_verbatim: 上传失败原样抛出，不重试
"""

from __future__ import annotations

import asyncio
import logging

from ..config import get_config
from ..config.runtime_config import ShareConfig
from ..interfaces import (
    IDownloadTarget,
    ILinkOpener,
    IObjectStorage,
    IShareSheet,
    ShareCancelled,
    ShareFailed,
)
from ..models import Artifact, DeliveryIntent, DeliveryOutcome, DeliveryTag
from .messaging import build_messaging_link, compose_message, object_path

logger = logging.getLogger(__name__)


class DeliveryDispatcher:
    """投递调度器实现"""

    def __init__(
        self,
        downloader: IDownloadTarget,
        share_sheet: IShareSheet | None = None,
        storage: IObjectStorage | None = None,
        opener: ILinkOpener | None = None,
        config: ShareConfig | None = None,
    ):
        self.downloader = downloader
        self.share_sheet = share_sheet
        self.storage = storage
        self.opener = opener
        self.config = config or get_config().share

    async def deliver(
        self,
        artifact: Artifact,
        intent: DeliveryIntent = DeliveryIntent.BEST_EFFORT,
        title: str | None = None,
        message: str | None = None,
        phone: str | None = None,
    ) -> DeliveryOutcome:
        """投递产物，返回唯一终态"""
        if intent != DeliveryIntent.DOWNLOAD and await self._can_share(artifact):
            return await self._share(artifact, title or artifact.filename, message)

        if intent == DeliveryIntent.LINK_SHARE:
            return await self._upload_and_link(artifact, message, phone)

        return await self._download(artifact)

    async def _can_share(self, artifact: Artifact) -> bool:
        if self.share_sheet is None:
            return False
        return await self.share_sheet.can_share(artifact)

    async def _share(self, artifact: Artifact, title: str, text: str | None) -> DeliveryOutcome:
        try:
            await self.share_sheet.share(artifact, title=title, text=text)
        except ShareCancelled:
            logger.info(f"用户取消分享: {artifact.filename}")
            return self._outcome(artifact, DeliveryTag.SHARED_CANCELLED)
        except ShareFailed:
            raise
        except Exception as e:
            raise ShareFailed(f"原生分享失败: {e}") from e

        logger.info(f"原生分享完成: {artifact.filename}")
        return self._outcome(artifact, DeliveryTag.SHARED)

    async def _upload_and_link(
        self, artifact: Artifact, message: str | None, phone: str | None
    ) -> DeliveryOutcome:
        if self.storage is None or self.opener is None:
            raise ValueError("链接分享需要对象存储和链接打开器")

        path = object_path(artifact.filename)
        # UploadFailed 原样向上抛出
        stored = await asyncio.to_thread(
            self.storage.upload, path, artifact.data, artifact.content_type, True
        )
        url = await asyncio.to_thread(self.storage.public_url, stored)

        text = compose_message(message, url, artifact.filename, self.config.default_message)
        link = build_messaging_link(self.config.messaging_host, text, phone)
        await self.opener.open_link(link)

        logger.info(f"已上传并生成分享链接: {stored}")
        return self._outcome(artifact, DeliveryTag.UPLOADED_LINKED, url=url, location=stored)

    async def _download(self, artifact: Artifact) -> DeliveryOutcome:
        location = await self.downloader.download(artifact)
        logger.info(f"已下载: {location}")
        return self._outcome(artifact, DeliveryTag.DOWNLOADED, location=location)

    @staticmethod
    def _outcome(artifact: Artifact, tag: DeliveryTag, **kwargs) -> DeliveryOutcome:
        return DeliveryOutcome(
            tag=tag,
            filename=artifact.filename,
            page_count=artifact.page_count,
            **kwargs,
        )
