"""
测评 CRUD 操作
"""
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.assessment import Assessment, AssessmentCreate, AssessmentUpdate
from app.models.documents import AssessmentSection
from .base import CRUDBase


def dump_sections(sections: List[AssessmentSection]) -> List[dict]:
    """分区列表 -> JSON 可存储结构"""
    return [s.model_dump(mode="json") for s in sections]


def load_sections(db_obj: Assessment) -> List[AssessmentSection]:
    """JSON 存储结构 -> 分区列表"""
    return [AssessmentSection.model_validate(s) for s in db_obj.sections or []]


class CRUDAssessment(CRUDBase[Assessment]):
    """测评 CRUD 操作类"""

    async def get_by_job(self, db: AsyncSession, job_id: str) -> List[Assessment]:
        """获取某职位的测评"""
        result = await db.execute(
            select(self.model)
            .where(self.model.job_id == job_id)
            .order_by(self.model.created_at.desc())
        )
        return list(result.scalars().all())

    async def create_assessment(
        self,
        db: AsyncSession,
        *,
        obj_in: AssessmentCreate
    ) -> Assessment:
        """创建测评（默认未发布）"""
        return await self.create(db, obj_in={
            "title": obj_in.title,
            "job_id": obj_in.job_id,
            "sections": dump_sections(obj_in.sections),
        })

    async def update_assessment(
        self,
        db: AsyncSession,
        *,
        db_obj: Assessment,
        obj_in: AssessmentUpdate
    ) -> Assessment:
        """更新测评"""
        update_data = obj_in.model_dump(exclude_unset=True, exclude={"sections"})
        if obj_in.sections is not None:
            update_data["sections"] = dump_sections(obj_in.sections)
        return await self.update(db, db_obj=db_obj, obj_in=update_data)

    async def save_sections(
        self,
        db: AsyncSession,
        *,
        db_obj: Assessment,
        sections: List[AssessmentSection]
    ) -> Assessment:
        """保存编辑器修改后的分区列表"""
        return await self.update(db, db_obj=db_obj, obj_in={"sections": dump_sections(sections)})

    async def toggle_publish(
        self,
        db: AsyncSession,
        *,
        db_obj: Assessment,
        link_base: str
    ) -> Assessment:
        """
        切换发布状态

        发布时生成分享链接，取消发布时清除
        """
        published = not db_obj.is_published
        db_obj.is_published = published
        db_obj.shareable_link = f"{link_base.rstrip('/')}/{db_obj.id}" if published else None
        return await self.update(db, db_obj=db_obj, obj_in={})


assessment_crud = CRUDAssessment(Assessment)
