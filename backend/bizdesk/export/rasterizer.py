"""
栅格化器 - 文档表面截图为位图

职责：
1. 定位文档表面（不存在抛 ElementNotFound）
2. 可选：克隆到屏幕外再截图，避免干扰可见界面
3. 等待所有图片加载/失败/超时后再截图
4. 以固定倍率（>=2）截图并解码尺寸

测试要点：
- test_missing_surface: 表面不存在
- test_waits_images_before_capture: 截图前等待图片
- test_offscreen_clone_removed: 克隆在异常路径上也被移除
"""

from __future__ import annotations

import logging

from ..config import get_config
from ..config.runtime_config import ExportConfig
from ..interfaces import ElementNotFound, IDocumentHost
from ..models import CaptureSnapshot

logger = logging.getLogger(__name__)


class Rasterizer:
    """栅格化器实现"""

    def __init__(self, host: IDocumentHost, config: ExportConfig | None = None):
        self.host = host
        self.config = config or get_config().export

    async def capture(self, surface_id: str, offscreen: bool = False) -> CaptureSnapshot:
        """截取文档表面"""
        if not await self.host.has_surface(surface_id):
            raise ElementNotFound(surface_id)

        if not offscreen:
            return await self._capture_node(surface_id)

        async with self.host.offscreen_clone(surface_id) as clone_id:
            return await self._capture_node(clone_id)

    async def _capture_node(self, node_id: str) -> CaptureSnapshot:
        cfg = self.config
        await self.host.wait_for_images(node_id, cfg.image_timeout_ms)

        data = await self.host.capture(
            node_id,
            scale=cfg.scale,
            image_format=cfg.image_format,
            quality=cfg.jpeg_quality,
            background=cfg.background,
        )
        snapshot = CaptureSnapshot.from_bytes(
            data, lossy=cfg.image_format == "JPEG", scale=cfg.scale
        )
        logger.debug(f"截图完成: {node_id} {snapshot.width}x{snapshot.height}")
        return snapshot
