"""
内嵌文档模块

候选人的备注 / 时间线 / 测评成绩，以及测评的分区 / 题目 / 规则，
都以 JSON 形式内嵌在所属记录中，不单独建表
"""
import re
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import Field, field_validator

from .base import DocumentBase, utc_now, new_id


# ==================== 候选人内嵌文档 ====================

class TimelineEventType(str, Enum):
    """时间线事件类型"""
    STAGE_CHANGE = "stage_change"
    NOTE_ADDED = "note_added"
    ASSESSMENT_COMPLETED = "assessment_completed"


class Note(DocumentBase):
    """候选人备注（创建后不可修改）"""
    id: str = Field(default_factory=new_id)
    content: str
    mentions: List[str] = Field(default_factory=list)
    author_id: str = "current-user"
    created_at: datetime = Field(default_factory=utc_now)


class TimelineEvent(DocumentBase):
    """时间线事件（只追加）"""
    id: str = Field(default_factory=new_id)
    type: TimelineEventType
    description: str
    created_at: datetime = Field(default_factory=utc_now)
    metadata: Optional[Dict[str, Any]] = None


class AssessmentScore(DocumentBase):
    """测评成绩记录"""
    assessment_id: str
    score: float
    completed_at: datetime = Field(default_factory=utc_now)
    responses: Dict[str, Any] = Field(default_factory=dict)


# ==================== 测评内嵌文档 ====================

class QuestionType(str, Enum):
    """题型"""
    SINGLE_CHOICE = "single-choice"
    MULTI_CHOICE = "multi-choice"
    SHORT_TEXT = "short-text"
    LONG_TEXT = "long-text"
    NUMERIC = "numeric"
    FILE_UPLOAD = "file-upload"


class ConditionOperator(str, Enum):
    """条件显示运算符"""
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"


class ValidationRule(DocumentBase):
    """答案校验规则"""
    min_length: Optional[int] = Field(None, ge=0, description="最少字符数")
    max_length: Optional[int] = Field(None, ge=0, description="最多字符数")
    min: Optional[float] = Field(None, description="最小值")
    max: Optional[float] = Field(None, description="最大值")
    pattern: Optional[str] = Field(None, description="正则表达式")

    @field_validator("pattern")
    @classmethod
    def check_pattern(cls, v: Optional[str]) -> Optional[str]:
        # 无效正则在保存时拒绝，运行时校验器不再处理
        if v:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"Invalid pattern: {e}")
        return v


class ConditionalRule(DocumentBase):
    """条件显示规则：依赖另一道题的答案"""
    depends_on: str = Field(..., min_length=1, description="依赖的题目ID")
    # 保留原始字符串，未知运算符按可见处理
    condition: str = Field(ConditionOperator.EQUALS.value, description="equals / not_equals / contains")
    value: str = Field("", description="比较值")


class Question(DocumentBase):
    """题目"""
    id: str = Field(default_factory=new_id)
    type: QuestionType = QuestionType.SINGLE_CHOICE
    title: str = ""
    description: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = None
    validation: Optional[ValidationRule] = None
    conditional_logic: Optional[ConditionalRule] = None
    order: int = 0


class AssessmentSection(DocumentBase):
    """测评分区"""
    id: str = Field(default_factory=new_id)
    title: str = "New Section"
    description: Optional[str] = ""
    order: int = 0
    questions: List[Question] = Field(default_factory=list)


def check_conditional_references(sections: List[AssessmentSection]) -> List[AssessmentSection]:
    """
    校验条件规则引用

    depends_on 必须指向同一测评中的其他题目，不能指向自身。
    跨题目的循环依赖不做检测。
    """
    question_ids = {q.id for s in sections for q in s.questions}
    for section in sections:
        for question in section.questions:
            rule = question.conditional_logic
            if rule is None:
                continue
            if rule.depends_on == question.id:
                raise ValueError(f"Question {question.id} cannot depend on itself")
            if rule.depends_on not in question_ids:
                raise ValueError(
                    f"Question {question.id} depends on unknown question {rule.depends_on}"
                )
    return sections
