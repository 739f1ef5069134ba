"""
测评编辑器相关 Schema
"""
from typing import List, Optional
from pydantic import Field

from app.models.documents import ConditionalRule, QuestionType, ValidationRule
from .base import BaseSchema


class SectionCreate(BaseSchema):
    """添加分区请求"""

    title: str = Field("New Section", min_length=1)
    description: str = ""


class SectionUpdate(BaseSchema):
    """更新分区请求"""

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None


class QuestionCreate(BaseSchema):
    """添加题目请求"""

    type: QuestionType = QuestionType.SINGLE_CHOICE
    title: str = ""
    description: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = None
    validation: Optional[ValidationRule] = None
    conditional_logic: Optional[ConditionalRule] = None


class QuestionUpdate(BaseSchema):
    """更新题目请求 - 只修改显式传入的字段（传 null 可清除规则）"""

    type: Optional[QuestionType] = None
    title: Optional[str] = None
    description: Optional[str] = None
    required: Optional[bool] = None
    options: Optional[List[str]] = None
    validation: Optional[ValidationRule] = None
    conditional_logic: Optional[ConditionalRule] = None
