"""
通知边界 - 操作结果 -> 用户通知

核心逻辑（CRUD/导出）只返回结果或抛异常，由这里决定如何通知：
- CRUD：成功发 success，失败发 error 后原样重新抛出
- 导出：按投递终态发通知，用户取消分享不发错误通知
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from .interfaces import BizdeskError, ElementNotFound, INotifier, UploadFailed
from .models import DeliveryOutcome, DeliveryTag, Notice, Severity

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """写日志的通知器（无界面时的默认实现）"""

    def notify(self, notice: Notice) -> None:
        level = logging.ERROR if notice.severity == Severity.ERROR else logging.INFO
        logger.log(level, f"{notice.title}: {notice.description}")


class CollectingNotifier:
    """收集通知（供调用方批量渲染）"""

    def __init__(self):
        self.notices: list[Notice] = []

    def notify(self, notice: Notice) -> None:
        self.notices.append(notice)


@contextmanager
def reported(notifier: INotifier, success: str | None, failure: str) -> Iterator[None]:
    """成功/失败各发一条通知，失败后原样重新抛出"""
    try:
        yield
    except BizdeskError:
        notifier.notify(Notice.error(failure))
        raise
    if success:
        notifier.notify(Notice.success(success))


OUTCOME_MESSAGES = {
    DeliveryTag.SHARED: "Document shared successfully",
    DeliveryTag.DOWNLOADED: "PDF downloaded",
    DeliveryTag.UPLOADED_LINKED: "Share link opened",
}


def outcome_notice(outcome: DeliveryOutcome) -> Notice | None:
    """投递终态 -> 通知；取消分享返回None"""
    if outcome.is_cancelled:
        return None
    return Notice.success(f"{OUTCOME_MESSAGES[outcome.tag]}: {outcome.filename}")


def failure_notice(error: Exception) -> Notice:
    """导出失败 -> 错误通知"""
    if isinstance(error, ElementNotFound):
        return Notice.error("Document not found on the page")
    if isinstance(error, UploadFailed):
        return Notice.error(f"Upload failed: {error}")
    return Notice.error("Failed to export document")
