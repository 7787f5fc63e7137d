"""
分页器 - 长位图切分为固定页高的页帧

职责：
1. 按纸张尺寸计算统一缩放比（每个产物只算一次）
2. 计算页数 ceil(h / H) 与各页偏移 -(k * H)
3. 短于一页的截图只出一页，顶部留边距，不拉伸

测试要点：
- test_page_count_law: 页数与偏移规律
- test_no_gap_no_overlap: 页帧首尾相接
- test_short_snapshot_single_page: 短截图单页
"""

from __future__ import annotations

import math

from reportlab.lib.pagesizes import A4, A5, LEGAL, LETTER, landscape, portrait
from reportlab.lib.units import mm

from ..config import get_config
from ..config.runtime_config import ExportConfig
from ..models import PageFrame, PageLayout

PAGE_FORMATS = {
    "A4": A4,
    "A5": A5,
    "LETTER": LETTER,
    "LEGAL": LEGAL,
}


def page_size_mm(page_format: str = "A4", orientation: str = "portrait") -> tuple[float, float]:
    """纸张尺寸（mm）"""
    try:
        size = PAGE_FORMATS[page_format.upper()]
    except KeyError:
        raise ValueError(f"不支持的纸张格式: {page_format}") from None
    size = landscape(size) if orientation == "landscape" else portrait(size)
    return size[0] / mm, size[1] / mm


def uniform_scale(
    img_width: float,
    img_height: float,
    page_width: float,
    page_height: float,
    paginate: bool = True,
) -> float:
    """
    统一缩放比 min(pageW/imgW, pageH/imgH)

    分页模式下位图按页高切片，高度不构成约束，只按页宽适配。
    """
    if img_width <= 0 or img_height <= 0:
        raise ValueError("位图尺寸必须为正")
    if paginate:
        return page_width / img_width
    return min(page_width / img_width, page_height / img_height)


def paginate(snapshot_height: float, page_height: float) -> list[PageFrame]:
    """切分页帧：页数 ceil(h/H)，第k页偏移 -(k*H)，高度之和等于 h"""
    if snapshot_height <= 0:
        raise ValueError("截图高度必须为正")
    if page_height <= 0:
        raise ValueError("页高必须为正")

    count = math.ceil(snapshot_height / page_height)
    frames = []
    for index in range(count):
        top = index * page_height
        frames.append(
            PageFrame(
                index=index,
                offset_px=-top,
                height_px=min(page_height, snapshot_height - top),
            )
        )
    return frames


class Paginator:
    """分页器实现"""

    def __init__(self, config: ExportConfig | None = None):
        self.config = config or get_config().export

    def layout(self, img_width: int, img_height: int) -> PageLayout:
        """计算页面布局（单页模式下水平居中，短截图顶部留边距）"""
        cfg = self.config
        page_w, page_h = page_size_mm(cfg.page_format, cfg.orientation)
        scale = uniform_scale(img_width, img_height, page_w, page_h, paginate=cfg.paginate)

        rendered_h = img_height * scale
        if not cfg.paginate or rendered_h <= page_h:
            # 单页：顶部边距放得下才留
            margin = cfg.top_margin_mm if rendered_h + cfg.top_margin_mm <= page_h else 0.0
            return PageLayout(
                page_width_mm=page_w,
                page_height_mm=page_h,
                scale=scale,
                page_height_px=float(img_height),
                top_margin_mm=margin,
                x_offset_mm=(page_w - img_width * scale) / 2,
                paginate=False,
            )

        return PageLayout(
            page_width_mm=page_w,
            page_height_mm=page_h,
            scale=scale,
            # 整像素页高，裁切边界精确
            page_height_px=float(math.floor(page_h / scale)),
            paginate=True,
        )

    def frames(self, img_height: int, layout: PageLayout) -> list[PageFrame]:
        return paginate(img_height, layout.page_height_px)
