"""
测评模型模块 - SQLModel 版本

测评 -> 分区 -> 题目 为严格的树形结构，整棵树以 JSON 存储在测评记录中
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import field_validator
from sqlmodel import Field, Column, JSON

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse
from .documents import AssessmentSection, check_conditional_references


# ==================== 基础字段定义 ====================

class AssessmentBase(SQLModelBase):
    """测评基础字段"""
    title: str = Field(..., min_length=1, max_length=200, description="测评名称", index=True)
    job_id: str = Field(..., description="关联职位ID", index=True)


# ==================== 表模型 ====================

class Assessment(AssessmentBase, TimestampMixin, IDMixin, table=True):
    """测评表模型"""
    __tablename__ = "assessments"

    sections: List[dict] = Field(default_factory=list, sa_column=Column(JSON), description="分区列表")
    is_published: bool = Field(default=False, index=True, description="是否已发布")
    shareable_link: Optional[str] = Field(None, description="分享链接（仅发布后存在）")

    def __repr__(self) -> str:
        return f"<Assessment(id={self.id}, title={self.title})>"


class AssessmentResponse(IDMixin, SQLModelBase, table=True):
    """测评答卷表模型"""
    __tablename__ = "assessment_responses"

    assessment_id: str = Field(..., index=True, description="测评ID")
    candidate_id: Optional[str] = Field(None, index=True, description="候选人ID")
    responses: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON), description="答案（题目ID -> 答案）")
    completed_at: Optional[datetime] = Field(None, index=True, description="完成时间")
    score: Optional[float] = Field(None, index=True, description="完成度得分")

    def __repr__(self) -> str:
        return f"<AssessmentResponse(id={self.id}, assessment_id={self.assessment_id}, score={self.score})>"


# ==================== 请求 Schema ====================

class AssessmentCreate(AssessmentBase):
    """创建测评请求"""
    sections: List[AssessmentSection] = Field(default_factory=list)

    @field_validator("sections")
    @classmethod
    def check_sections(cls, v: List[AssessmentSection]) -> List[AssessmentSection]:
        return check_conditional_references(v)


class AssessmentUpdate(SQLModelBase):
    """更新测评请求 - 所有字段可选（发布状态请使用发布接口）"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    job_id: Optional[str] = None
    sections: Optional[List[AssessmentSection]] = None

    @field_validator("sections")
    @classmethod
    def check_sections(cls, v: Optional[List[AssessmentSection]]) -> Optional[List[AssessmentSection]]:
        if v is None:
            return v
        return check_conditional_references(v)


class AssessmentResponseCreate(SQLModelBase):
    """提交答卷请求（得分由服务端计算）"""
    assessment_id: str
    candidate_id: Optional[str] = None
    responses: Dict[str, Any] = Field(default_factory=dict)


# ==================== 响应 Schema ====================

class AssessmentDetail(TimestampResponse):
    """测评详情响应"""
    title: str
    job_id: str
    sections: List[AssessmentSection]
    is_published: bool
    shareable_link: Optional[str] = None


class AssessmentListItem(TimestampResponse):
    """测评列表项响应（简化版）"""
    title: str
    job_id: str
    is_published: bool
    shareable_link: Optional[str] = None
    section_count: int = 0
    question_count: int = 0


class AssessmentResponseDetail(SQLModelBase):
    """答卷详情响应"""
    id: str
    assessment_id: str
    candidate_id: Optional[str]
    responses: Dict[str, Any]
    completed_at: Optional[datetime]
    score: Optional[float]
