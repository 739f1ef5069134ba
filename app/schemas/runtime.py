"""
测评运行时相关 Schema
"""
from typing import Any, Dict, List
from pydantic import Field

from .base import BaseSchema


class EvaluateRequest(BaseSchema):
    """作答状态评估请求"""

    answers: Dict[str, Any] = Field(default_factory=dict, description="题目ID -> 答案")
    section_index: int = Field(0, ge=0, description="当前分区")


class SectionState(BaseSchema):
    """分区状态"""

    section_id: str
    visible_question_ids: List[str]
    can_advance: bool


class EvaluateResponse(BaseSchema):
    """作答状态评估结果"""

    sections: List[SectionState]
    current_section_id: str
    errors: Dict[str, str] = Field(default_factory=dict, description="当前分区可见题目的校验错误")
    can_advance: bool
    progress: float
    answered_count: int
    total_questions: int
