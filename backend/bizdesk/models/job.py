"""
导出任务模型 - 记录单次导出调用的状态与结果
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from .export import DeliveryIntent, DeliveryOutcome


class JobStatus(str, Enum):
    """任务状态枚举"""
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


class ExportJob(BaseModel):
    """导出任务实体"""
    job_id: str = Field(..., description="UUID")
    surface_id: str
    filename: str
    intent: DeliveryIntent = DeliveryIntent.BEST_EFFORT

    status: JobStatus = JobStatus.QUEUED
    stage: str = "INIT"

    outcome: DeliveryOutcome | None = None
    page_count: int | None = None
    errors: list[str] = Field(default_factory=list, description="错误信息")

    created_at: datetime = Field(default_factory=datetime.now)
    started_at: datetime | None = None
    finished_at: datetime | None = None

    def mark_running(self, stage: str = "LOCATE_AND_CAPTURE") -> None:
        """标记为运行中"""
        self.status = JobStatus.RUNNING
        self.started_at = datetime.now()
        self.stage = stage

    def mark_succeeded(self, outcome: DeliveryOutcome) -> None:
        """标记为成功；用户取消分享记为 CANCELLED"""
        self.outcome = outcome
        self.status = JobStatus.CANCELLED if outcome.is_cancelled else JobStatus.SUCCEEDED
        self.finished_at = datetime.now()

    def mark_failed(self, error: str) -> None:
        """标记为失败"""
        self.status = JobStatus.FAILED
        self.finished_at = datetime.now()
        self.errors.append(error)
