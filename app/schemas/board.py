"""
拖拽排序相关 Schema
"""
from typing import Optional
from pydantic import Field

from app.models.job import JobStatus
from .base import BaseSchema


class ReorderRequest(BaseSchema):
    """列表内拖拽排序请求"""

    source_index: int = Field(..., ge=0, description="原位置")
    destination_index: int = Field(..., ge=0, description="目标位置")


class JobReorderRequest(ReorderRequest):
    """职位看板拖拽排序请求（位置为当前筛选结果、当前页内的位置）"""

    page: int = Field(1, ge=1, description="当前页码")
    page_size: Optional[int] = Field(None, ge=1, le=100, description="每页数量，默认取配置")
    search: Optional[str] = Field(None, description="职位名称搜索")
    status: Optional[JobStatus] = Field(None, description="状态筛选")
    tag: Optional[str] = Field(None, description="标签筛选")


class DraggableLocation(BaseSchema):
    """拖拽位置"""

    droppable_id: str = Field(..., description="所在列ID")
    index: int = Field(0, ge=0, description="列内位置")


class DragResult(BaseSchema):
    """看板拖拽结果，destination 为空表示拖到看板外"""

    draggable_id: str = Field(..., description="被拖拽项ID")
    source: DraggableLocation
    destination: Optional[DraggableLocation] = None
