"""
导出流水线阶段定义

测试要点：
- test_stage_order: 阶段顺序固定
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StageEnum(str, Enum):
    """导出阶段枚举"""
    LOCATE_AND_CAPTURE = "LOCATE_AND_CAPTURE"
    PAGINATE = "PAGINATE"
    PACKAGE = "PACKAGE"
    DELIVER = "DELIVER"


@dataclass(frozen=True)
class PipelineStage:
    """流水线阶段"""
    name: str
    description: str


# 导出流水线各阶段（顺序即执行顺序）
EXPORT_STAGES: list[PipelineStage] = [
    PipelineStage(StageEnum.LOCATE_AND_CAPTURE.value, "定位并截图"),
    PipelineStage(StageEnum.PAGINATE.value, "分页"),
    PipelineStage(StageEnum.PACKAGE.value, "打包PDF"),
    PipelineStage(StageEnum.DELIVER.value, "投递"),
]
