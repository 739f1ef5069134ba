"""
服务层模块
"""
from . import assessment_builder
from .assessment_runtime import (
    is_visible,
    validate_answer,
    can_advance,
    section_errors,
    calculate_progress,
    calculate_score,
)
from .reorder import reorder, reorder_page, resolve_group_move
from .seed import seed_database

__all__ = [
    # 测评运行时
    "is_visible",
    "validate_answer",
    "can_advance",
    "section_errors",
    "calculate_progress",
    "calculate_score",
    # 拖拽排序
    "reorder",
    "reorder_page",
    "resolve_group_move",
    # 测评编辑器
    "assessment_builder",
    # 种子数据
    "seed_database",
]
