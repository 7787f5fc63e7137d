"""
产物打包器 - 页帧组装为PDF

职责：
1. 按页帧裁切位图（不重复、不遗漏）
2. 统一缩放比放置到页面顶部
3. 输出PDF字节（可下载/可上传）
4. PDF页数计算

依赖：
- reportlab: PDF绘制
- Pillow: 位图裁切
- PyPDF2: 页数回读

测试要点：
- test_package_page_count: 产物页数等于页帧数
- test_uniform_scale: 各页缩放比一致
- test_filename_extension: 文件名追加 .pdf
"""

from __future__ import annotations

import io
import logging

from PIL import Image
from PyPDF2 import PdfReader
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..interfaces import ExportError
from ..models import Artifact, CaptureSnapshot, PageFrame, PageLayout, pdf_filename

logger = logging.getLogger(__name__)


class ArtifactPackager:
    """产物打包器实现"""

    def __init__(self, jpeg_quality: float = 0.95):
        self.jpeg_quality = jpeg_quality

    def package(
        self,
        snapshot: CaptureSnapshot,
        frames: list[PageFrame],
        layout: PageLayout,
        name: str,
    ) -> Artifact:
        """组装PDF产物"""
        if not frames:
            raise ExportError("没有可打包的页帧")

        filename = pdf_filename(name)
        try:
            data = self._render(snapshot, frames, layout)
        except ExportError:
            raise
        except Exception as e:
            raise ExportError(f"PDF打包失败: {filename}: {e}") from e

        artifact = Artifact(
            filename=filename,
            data=data,
            page_count=len(frames),
            rendered_height_px=sum(f.height_px for f in frames),
        )
        logger.info(f"PDF打包完成: {filename} 共{artifact.page_count}页 {artifact.size}字节")
        return artifact

    def _render(self, snapshot: CaptureSnapshot, frames: list[PageFrame], layout: PageLayout) -> bytes:
        buf = io.BytesIO()
        page_w = layout.page_width_mm * mm
        page_h = layout.page_height_mm * mm
        pdf = canvas.Canvas(buf, pagesize=(page_w, page_h))

        with snapshot.open_image() as img:
            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")

            for frame in frames:
                piece = self._crop(img, frame)
                draw_w = piece.width * layout.scale * mm
                draw_h = piece.height * layout.scale * mm
                x = layout.x_offset_mm * mm
                # reportlab 原点在左下角
                y = page_h - layout.top_margin_mm * mm - draw_h
                pdf.drawImage(self._reader(piece, snapshot.lossy), x, y, width=draw_w, height=draw_h)
                pdf.showPage()

        pdf.save()
        return buf.getvalue()

    def _reader(self, piece: Image.Image, lossy: bool) -> ImageReader:
        """有损截图按JPEG嵌入（保持质量参数），否则无损嵌入"""
        if not lossy:
            return ImageReader(piece)
        buf = io.BytesIO()
        piece.save(buf, format="JPEG", quality=round(self.jpeg_quality * 100))
        buf.seek(0)
        return ImageReader(buf)

    def _crop(self, img: Image.Image, frame: PageFrame) -> Image.Image:
        """按页帧裁切：[top, bottom)，像素边界取整后首尾相接"""
        top = round(frame.top_px)
        bottom = min(round(frame.bottom_px), img.height)
        if bottom <= top:
            raise ExportError(f"页帧为空: 第{frame.index + 1}页")
        return img.crop((0, top, img.width, bottom))


def count_pdf_pages(data: bytes) -> int:
    """计算PDF页数"""
    reader = PdfReader(io.BytesIO(data))
    return len(reader.pages)
