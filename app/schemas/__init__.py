"""
Pydantic Schemas 模块

定义非持久化的 API 请求/响应模型（表相关 Schema 位于 app.models）
"""
from .base import BaseSchema
from .board import ReorderRequest, JobReorderRequest, DraggableLocation, DragResult
from .builder import SectionCreate, SectionUpdate, QuestionCreate, QuestionUpdate
from .runtime import EvaluateRequest, EvaluateResponse, SectionState

__all__ = [
    # Base
    "BaseSchema",
    # Board
    "ReorderRequest",
    "JobReorderRequest",
    "DraggableLocation",
    "DragResult",
    # Builder
    "SectionCreate",
    "SectionUpdate",
    "QuestionCreate",
    "QuestionUpdate",
    # Runtime
    "EvaluateRequest",
    "EvaluateResponse",
    "SectionState",
]
