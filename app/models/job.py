"""
职位模型模块 - SQLModel 版本

合并了 Model 和 Schema，减少代码重复
"""
import re
from enum import Enum
from typing import Optional, List
from sqlmodel import Field, Column, JSON

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse


class JobStatus(str, Enum):
    """职位状态枚举"""
    ACTIVE = "active"
    ARCHIVED = "archived"


def slugify(title: str) -> str:
    """由职位名称生成 slug：小写，空白替换为连字符"""
    return re.sub(r"\s+", "-", title.strip().lower())


# ==================== 基础字段定义 ====================

class JobBase(SQLModelBase):
    """职位基础字段 - 用于创建和继承"""
    title: str = Field(..., min_length=1, max_length=200, description="职位名称", index=True)
    description: str = Field("", description="职位描述")
    responsibilities: List[str] = Field(default_factory=list, sa_column=Column(JSON), description="岗位职责")
    qualifications: List[str] = Field(default_factory=list, sa_column=Column(JSON), description="任职要求")
    status: JobStatus = Field(JobStatus.ACTIVE, index=True, description="职位状态")
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON), description="标签")


# ==================== 表模型 ====================

class Job(JobBase, TimestampMixin, IDMixin, table=True):
    """职位表模型"""
    __tablename__ = "jobs"

    slug: str = Field(..., index=True, unique=True, description="URL 标识")
    order: int = Field(0, index=True, description="排序（连续排名，从 0 开始）")

    def __repr__(self) -> str:
        return f"<Job(id={self.id}, title={self.title}, order={self.order})>"


# ==================== 请求 Schema ====================

class JobCreate(JobBase):
    """创建职位请求"""
    pass


class JobUpdate(SQLModelBase):
    """更新职位请求 - 所有字段可选"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    responsibilities: Optional[List[str]] = None
    qualifications: Optional[List[str]] = None
    status: Optional[JobStatus] = None
    tags: Optional[List[str]] = None


# ==================== 响应 Schema ====================

class JobResponse(TimestampResponse):
    """职位详情响应"""
    title: str
    slug: str
    description: str
    responsibilities: List[str]
    qualifications: List[str]
    status: JobStatus
    tags: List[str]
    order: int
