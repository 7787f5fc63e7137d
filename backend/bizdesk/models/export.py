"""
导出模型 - 截图/分页/产物/投递结果

导出流水线各阶段之间只通过这些结构传递数据
"""

from __future__ import annotations

import io
from enum import Enum

from PIL import Image
from pydantic import BaseModel, Field

PDF_CONTENT_TYPE = "application/pdf"
PDF_EXTENSION = ".pdf"


class DeliveryIntent(str, Enum):
    """投递意图"""
    BEST_EFFORT = "best_effort"   # 原生分享优先，否则下载
    LINK_SHARE = "link_share"     # 原生分享优先，否则上传+消息链接
    DOWNLOAD = "download"         # 直接下载


class DeliveryTag(str, Enum):
    """投递终态"""
    SHARED = "shared"
    SHARED_CANCELLED = "shared-cancelled"
    DOWNLOADED = "downloaded"
    UPLOADED_LINKED = "uploaded+linked"


class CaptureSnapshot(BaseModel):
    """截图位图（仅属于当前导出调用）"""
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    image_bytes: bytes
    lossy: bool = True
    scale: float = 2.0

    @classmethod
    def from_bytes(cls, data: bytes, lossy: bool, scale: float) -> CaptureSnapshot:
        """从编码后的位图构建（尺寸以实际解码为准）"""
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
        return cls(width=width, height=height, image_bytes=data, lossy=lossy, scale=scale)

    def open_image(self) -> Image.Image:
        img = Image.open(io.BytesIO(self.image_bytes))
        img.load()
        return img


class PageLayout(BaseModel):
    """页面布局（单位mm，scale为每个位图像素对应的mm）"""
    page_width_mm: float
    page_height_mm: float
    scale: float
    page_height_px: float
    top_margin_mm: float = 0.0
    x_offset_mm: float = 0.0
    paginate: bool = True


class PageFrame(BaseModel):
    """单页切片：offset_px = -(index * H)"""
    index: int
    offset_px: float
    height_px: float

    @property
    def top_px(self) -> float:
        return -self.offset_px

    @property
    def bottom_px(self) -> float:
        return self.top_px + self.height_px


class Artifact(BaseModel):
    """打包产物（PDF字节+页数）"""
    filename: str
    content_type: str = PDF_CONTENT_TYPE
    data: bytes
    page_count: int
    rendered_height_px: float = 0.0

    @property
    def size(self) -> int:
        return len(self.data)


class DeliveryOutcome(BaseModel):
    """投递结果（每次调用恰好一个终态）"""
    tag: DeliveryTag
    filename: str
    page_count: int = 0
    url: str | None = None
    location: str | None = None

    @property
    def is_cancelled(self) -> bool:
        return self.tag == DeliveryTag.SHARED_CANCELLED


class ExportRequest(BaseModel):
    """导出请求"""
    surface_id: str
    filename: str
    intent: DeliveryIntent = DeliveryIntent.BEST_EFFORT
    title: str | None = None
    message: str | None = None
    phone: str | None = None
    offscreen: bool = False

    @property
    def share_title(self) -> str:
        return self.title or self.filename


def pdf_filename(name: str) -> str:
    """追加 .pdf 扩展名（已有则不重复）"""
    if name.lower().endswith(PDF_EXTENSION):
        return name
    return f"{name}{PDF_EXTENSION}"
