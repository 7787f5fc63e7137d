"""
导出模块 - 截图/分页/打包/投递/打印

子模块：
- rasterizer: 文档表面截图
- paginator: 分页与统一缩放
- packager: PDF打包
- dispatcher: 投递调度（分享/链接/下载）
- messaging: 消息深链接
- printing: 打印路径
- stages: 流水线阶段定义
- pipeline: 流水线编排
"""

from .dispatcher import DeliveryDispatcher
from .messaging import build_messaging_link, normalize_phone, object_path
from .packager import ArtifactPackager, count_pdf_pages
from .paginator import Paginator, page_size_mm, paginate, uniform_scale
from .pipeline import ExportPipeline
from .printing import PrintService, build_print_document
from .rasterizer import Rasterizer
from .stages import EXPORT_STAGES, PipelineStage, StageEnum

__all__ = [
    "Rasterizer",
    "Paginator",
    "paginate",
    "page_size_mm",
    "uniform_scale",
    "ArtifactPackager",
    "count_pdf_pages",
    "DeliveryDispatcher",
    "build_messaging_link",
    "normalize_phone",
    "object_path",
    "PrintService",
    "build_print_document",
    "ExportPipeline",
    "EXPORT_STAGES",
    "PipelineStage",
    "StageEnum",
]
