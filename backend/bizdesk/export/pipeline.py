"""
导出流水线 - 编排截图/分页/打包/投递

职责：
1. 按顺序执行各阶段，记录任务状态
2. 同一文档表面的调用串行化（屏幕外克隆假设独占）
3. 任何阶段失败即终止本次调用，不重试，不投递半成品
4. HTML片段导出：挂载到屏幕外临时容器后按表面导出
5. 按投递终态发用户通知（取消分享不发）

测试要点：
- test_export_full_pipeline: 完整导出
- test_stage_failure_marks_job: 阶段失败标记任务
- test_same_surface_serialized: 同表面串行
- test_surface_locks_released: 表面锁用完即移除
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from ..config import get_config
from ..config.runtime_config import RuntimeConfig
from ..interfaces import IDocumentHost, INotifier
from ..models import DeliveryIntent, DeliveryOutcome, ExportJob, ExportRequest, JobStatus
from ..notices import LoggingNotifier, failure_notice, outcome_notice
from .dispatcher import DeliveryDispatcher
from .packager import ArtifactPackager
from .paginator import Paginator
from .rasterizer import Rasterizer
from .stages import EXPORT_STAGES, StageEnum

logger = logging.getLogger(__name__)

MARKUP_STYLESHEET = """
    .section { margin-bottom: 16px; }
    .header { display: flex; align-items: flex-start; gap: 16px; }
    .header img { max-height: 60px; object-fit: contain; }
    .brand { font-size: 20px; font-weight: 700; color: #1f2937; }
    .muted { font-size: 12px; color: #6b7280; }
    .grid { display: grid; grid-template-columns: 1fr 1fr; gap: 16px; }
    h2 { font-size: 18px; font-weight: 600; margin: 0; color: #1f2937; }
    table { width: 100%; border-collapse: collapse; font-size: 12px; }
    th, td { border: 1px solid #e5e7eb; padding: 8px; text-align: left; }
    th { background: #f9fafb; font-weight: 600; }
    .totals { width: auto; margin-left: auto; border: none; }
    .totals td { border: none; padding: 4px 8px; }
    .totals .label { text-align: right; color: #6b7280; }
    .totals .value { text-align: right; font-weight: 500; }
    .amount-words { margin-top: 8px; font-style: italic; font-size: 12px; color: #374151; }
    .terms { font-size: 11px; }
    .signature-section { margin-top: 24px; text-align: right; }
    .signature-image { max-height: 50px; }
    .footer { margin-top: 16px; padding-top: 8px; border-top: 1px solid #e5e7eb; font-size: 11px; color: #6b7280; }
"""


class ExportPipeline:
    """导出流水线"""

    def __init__(
        self,
        host: IDocumentHost,
        dispatcher: DeliveryDispatcher,
        config: RuntimeConfig | None = None,
        notifier: INotifier | None = None,
    ):
        self.config = config or get_config()
        self.host = host
        self.dispatcher = dispatcher
        self.notifier = notifier or LoggingNotifier()
        self.rasterizer = Rasterizer(host, self.config.export)
        self.paginator = Paginator(self.config.export)
        self.packager = ArtifactPackager(self.config.export.jpeg_quality)

        self._jobs: dict[str, ExportJob] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    async def export(self, request: ExportRequest) -> DeliveryOutcome:
        """导出文档表面并投递"""
        job = ExportJob(
            job_id=str(uuid.uuid4()),
            surface_id=request.surface_id,
            filename=request.filename,
            intent=request.intent,
        )
        self._jobs[job.job_id] = job

        async with self._surface_lock(request.surface_id):
            job.mark_running()
            context: dict[str, Any] = {"request": request}
            try:
                for stage in EXPORT_STAGES:
                    await self._execute_stage(job, stage, context)
            except Exception as e:
                logger.exception(f"导出失败: {job.job_id}")
                job.mark_failed(str(e))
                self.notifier.notify(failure_notice(e))
                raise

        outcome = context["outcome"]
        job.mark_succeeded(outcome)
        # 取消分享不通知
        notice = outcome_notice(outcome)
        if notice is not None:
            self.notifier.notify(notice)
        return outcome

    async def export_markup(
        self,
        html: str,
        filename: str,
        intent: DeliveryIntent = DeliveryIntent.DOWNLOAD,
        **kwargs: Any,
    ) -> DeliveryOutcome:
        """导出HTML片段（挂载到屏幕外临时容器）"""
        async with self.host.mount_markup(html, MARKUP_STYLESHEET) as container_id:
            request = ExportRequest(
                surface_id=container_id,
                filename=filename,
                intent=intent,
                **kwargs,
            )
            return await self.export(request)

    def get_job(self, job_id: str) -> ExportJob | None:
        return self._jobs.get(job_id)

    def list_jobs(self, status: JobStatus | None = None, limit: int = 100) -> list[ExportJob]:
        """列出任务（按创建时间降序）"""
        jobs = list(self._jobs.values())
        if status:
            jobs = [j for j in jobs if j.status == status]
        jobs.sort(key=lambda j: j.created_at, reverse=True)
        return jobs[:limit]

    @asynccontextmanager
    async def _surface_lock(self, surface_id: str) -> AsyncIterator[None]:
        """表面独占锁；最后一个持有/等待者退出时移除"""
        lock = self._locks.get(surface_id)
        if lock is None:
            lock = self._locks[surface_id] = asyncio.Lock()
        self._lock_users[surface_id] = self._lock_users.get(surface_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[surface_id] -= 1
            if self._lock_users[surface_id] == 0:
                del self._lock_users[surface_id]
                del self._locks[surface_id]

    async def _execute_stage(self, job: ExportJob, stage, context: dict) -> None:
        """执行单个阶段"""
        job.stage = stage.name
        logger.info(f"[{job.job_id}] 开始阶段: {stage.name}")

        try:
            if stage.name == StageEnum.LOCATE_AND_CAPTURE.value:
                await self._stage_capture(job, context)

            elif stage.name == StageEnum.PAGINATE.value:
                self._stage_paginate(job, context)

            elif stage.name == StageEnum.PACKAGE.value:
                self._stage_package(job, context)

            elif stage.name == StageEnum.DELIVER.value:
                await self._stage_deliver(job, context)

        except Exception as e:
            logger.error(f"[{job.job_id}] 阶段失败 {stage.name}: {e}")
            raise

    async def _stage_capture(self, job: ExportJob, context: dict) -> None:
        request: ExportRequest = context["request"]
        context["snapshot"] = await self.rasterizer.capture(
            request.surface_id, offscreen=request.offscreen
        )

    def _stage_paginate(self, job: ExportJob, context: dict) -> None:
        snapshot = context["snapshot"]
        layout = self.paginator.layout(snapshot.width, snapshot.height)
        context["layout"] = layout
        context["frames"] = self.paginator.frames(snapshot.height, layout)

    def _stage_package(self, job: ExportJob, context: dict) -> None:
        request: ExportRequest = context["request"]
        artifact = self.packager.package(
            context.pop("snapshot"),
            context["frames"],
            context["layout"],
            request.filename,
        )
        job.page_count = artifact.page_count
        context["artifact"] = artifact

    async def _stage_deliver(self, job: ExportJob, context: dict) -> None:
        request: ExportRequest = context["request"]
        context["outcome"] = await self.dispatcher.deliver(
            context.pop("artifact"),
            intent=request.intent,
            title=request.share_title,
            message=request.message,
            phone=request.phone,
        )
