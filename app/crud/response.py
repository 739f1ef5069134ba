"""
测评答卷 CRUD 操作
"""
from typing import List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.assessment import AssessmentResponse
from .base import CRUDBase


class CRUDAssessmentResponse(CRUDBase[AssessmentResponse]):
    """测评答卷 CRUD 操作类"""

    async def get_all(self, db: AsyncSession) -> List[AssessmentResponse]:
        """获取全部答卷（最近完成优先）"""
        result = await db.execute(
            select(self.model).order_by(self.model.completed_at.desc())
        )
        return list(result.scalars().all())

    async def get_by_assessment(
        self,
        db: AsyncSession,
        assessment_id: str
    ) -> List[AssessmentResponse]:
        """获取某测评的答卷"""
        result = await db.execute(
            select(self.model)
            .where(self.model.assessment_id == assessment_id)
            .order_by(self.model.completed_at.desc())
        )
        return list(result.scalars().all())

    async def get_by_candidate(
        self,
        db: AsyncSession,
        candidate_id: str
    ) -> List[AssessmentResponse]:
        """获取某候选人的答卷"""
        result = await db.execute(
            select(self.model)
            .where(self.model.candidate_id == candidate_id)
            .order_by(self.model.completed_at.desc())
        )
        return list(result.scalars().all())


response_crud = CRUDAssessmentResponse(AssessmentResponse)
