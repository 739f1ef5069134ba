"""
候选人模型模块 - SQLModel 版本

备注、时间线和测评成绩以 JSON 形式内嵌在候选人记录中，只追加不修改
"""
import re
from enum import Enum
from typing import List, Optional
from sqlmodel import Field, Column, JSON

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse
from .documents import Note, TimelineEvent, AssessmentScore


class CandidateStage(str, Enum):
    """招聘流程阶段（任意阶段之间可直接流转）"""
    APPLIED = "applied"
    SCREENING = "screening"
    INTERVIEW = "interview"
    ASSESSMENT = "assessment"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"


MENTION_PATTERN = re.compile(r"@(\w+)")
DEFAULT_AUTHOR_ID = "current-user"


def extract_mentions(content: str) -> List[str]:
    """提取 @username 形式的提及"""
    return MENTION_PATTERN.findall(content)


# ==================== 基础字段定义 ====================

class CandidateBase(SQLModelBase):
    """候选人基础字段"""
    name: str = Field(..., min_length=1, max_length=100, description="姓名", index=True)
    email: str = Field(..., min_length=3, max_length=200, description="邮箱", index=True)
    phone: Optional[str] = Field(None, max_length=50, description="电话")
    resume: Optional[str] = Field(None, description="简历")
    job_id: str = Field(..., description="应聘职位ID", index=True)


# ==================== 表模型 ====================

class Candidate(CandidateBase, TimestampMixin, IDMixin, table=True):
    """候选人表模型"""
    __tablename__ = "candidates"

    current_stage: CandidateStage = Field(CandidateStage.APPLIED, index=True, description="当前阶段")
    notes: List[dict] = Field(default_factory=list, sa_column=Column(JSON), description="备注")
    timeline: List[dict] = Field(default_factory=list, sa_column=Column(JSON), description="时间线")
    assessment_scores: List[dict] = Field(default_factory=list, sa_column=Column(JSON), description="测评成绩")

    def __repr__(self) -> str:
        return f"<Candidate(id={self.id}, name={self.name}, stage={self.current_stage})>"


# ==================== 请求 Schema ====================

class CandidateCreate(CandidateBase):
    """创建候选人请求"""
    current_stage: CandidateStage = CandidateStage.APPLIED


class CandidateUpdate(SQLModelBase):
    """更新候选人请求（阶段变更请使用专用接口以记录时间线）"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, min_length=3, max_length=200)
    phone: Optional[str] = None
    resume: Optional[str] = None
    job_id: Optional[str] = None


class StageUpdate(SQLModelBase):
    """阶段变更请求"""
    stage: CandidateStage


class NoteCreate(SQLModelBase):
    """添加备注请求，mentions 为空时从内容中提取"""
    content: str = Field(..., min_length=1)
    mentions: Optional[List[str]] = None


# ==================== 响应 Schema ====================

class CandidateResponse(TimestampResponse):
    """候选人详情响应"""
    name: str
    email: str
    phone: Optional[str]
    resume: Optional[str] = None
    current_stage: CandidateStage
    job_id: str
    notes: List[Note]
    timeline: List[TimelineEvent]
    assessment_scores: List[AssessmentScore]


class CandidateListResponse(TimestampResponse):
    """候选人列表项响应（简化版）"""
    name: str
    email: str
    phone: Optional[str]
    current_stage: CandidateStage
    job_id: str
