"""
SQLModel 模型模块

使用 SQLModel 统一 ORM Model 和 Pydantic Schema
"""
from .base import SQLModelBase, DocumentBase, TimestampMixin
from .documents import (
    Note, TimelineEvent, TimelineEventType, AssessmentScore,
    QuestionType, ConditionOperator, ValidationRule, ConditionalRule,
    Question, AssessmentSection,
)
from .job import Job, JobStatus, JobCreate, JobUpdate, JobResponse, slugify
from .candidate import (
    Candidate, CandidateStage, CandidateCreate, CandidateUpdate,
    CandidateResponse, CandidateListResponse, StageUpdate, NoteCreate,
    extract_mentions,
)
from .assessment import (
    Assessment, AssessmentCreate, AssessmentUpdate, AssessmentDetail, AssessmentListItem,
    AssessmentResponse, AssessmentResponseCreate, AssessmentResponseDetail,
)

__all__ = [
    # Base
    "SQLModelBase",
    "DocumentBase",
    "TimestampMixin",
    # Documents
    "Note",
    "TimelineEvent",
    "TimelineEventType",
    "AssessmentScore",
    "QuestionType",
    "ConditionOperator",
    "ValidationRule",
    "ConditionalRule",
    "Question",
    "AssessmentSection",
    # Job
    "Job",
    "JobStatus",
    "JobCreate",
    "JobUpdate",
    "JobResponse",
    "slugify",
    # Candidate
    "Candidate",
    "CandidateStage",
    "CandidateCreate",
    "CandidateUpdate",
    "CandidateResponse",
    "CandidateListResponse",
    "StageUpdate",
    "NoteCreate",
    "extract_mentions",
    # Assessment
    "Assessment",
    "AssessmentCreate",
    "AssessmentUpdate",
    "AssessmentDetail",
    "AssessmentListItem",
    "AssessmentResponse",
    "AssessmentResponseCreate",
    "AssessmentResponseDetail",
]
