"""
候选人 CRUD 操作

备注、时间线、测评成绩为 JSON 列，追加时整体重新赋值以触发变更检测
"""
from typing import Any, Dict, List, Optional
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import utc_now
from app.models.candidate import (
    Candidate,
    CandidateCreate,
    CandidateStage,
    CandidateUpdate,
    DEFAULT_AUTHOR_ID,
    extract_mentions,
)
from app.models.documents import AssessmentScore, Note, TimelineEvent, TimelineEventType
from .base import CRUDBase

NULLABLE_FIELDS = frozenset({"phone", "resume"})


class CRUDCandidate(CRUDBase[Candidate]):
    """候选人 CRUD 操作类"""

    def _filtered_query(
        self,
        query,
        *,
        search: Optional[str] = None,
        job_id: Optional[str] = None,
        stage: Optional[CandidateStage] = None
    ):
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(self.model.name.ilike(pattern), self.model.email.ilike(pattern))
            )
        if job_id:
            query = query.where(self.model.job_id == job_id)
        if stage is not None:
            query = query.where(self.model.current_stage == stage)
        return query

    async def get_filtered(
        self,
        db: AsyncSession,
        *,
        search: Optional[str] = None,
        job_id: Optional[str] = None,
        stage: Optional[CandidateStage] = None,
        skip: int = 0,
        limit: Optional[int] = 100
    ) -> List[Candidate]:
        """按姓名/邮箱搜索、职位、阶段筛选（最新优先）"""
        query = self._filtered_query(
            select(self.model), search=search, job_id=job_id, stage=stage
        ).order_by(self.model.created_at.desc()).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def count_filtered(
        self,
        db: AsyncSession,
        *,
        search: Optional[str] = None,
        job_id: Optional[str] = None,
        stage: Optional[CandidateStage] = None
    ) -> int:
        """统计筛选结果数量"""
        query = self._filtered_query(
            select(func.count()).select_from(self.model),
            search=search, job_id=job_id, stage=stage
        )
        result = await db.execute(query)
        return result.scalar() or 0

    async def create_candidate(
        self,
        db: AsyncSession,
        *,
        obj_in: CandidateCreate
    ) -> Candidate:
        """创建候选人，写入初始时间线事件"""
        data = obj_in.model_dump()
        event = TimelineEvent(
            type=TimelineEventType.STAGE_CHANGE,
            description="Application submitted",
        )
        data.update(notes=[], assessment_scores=[], timeline=[event.model_dump(mode="json")])
        return await self.create(db, obj_in=data)

    async def update_candidate(
        self,
        db: AsyncSession,
        *,
        db_obj: Candidate,
        obj_in: CandidateUpdate
    ) -> Candidate:
        """更新候选人基本信息，电话和简历可显式置空"""
        update_data = obj_in.model_dump(exclude_unset=True)
        return await self.update(
            db, db_obj=db_obj, obj_in=update_data, nullable=NULLABLE_FIELDS
        )

    async def _append(
        self,
        db: AsyncSession,
        db_obj: Candidate,
        updates: Dict[str, Any]
    ) -> Candidate:
        for field, value in updates.items():
            setattr(db_obj, field, value)
        db_obj.updated_at = utc_now()
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def update_stage(
        self,
        db: AsyncSession,
        *,
        db_obj: Candidate,
        stage: CandidateStage
    ) -> Candidate:
        """
        变更阶段

        任意阶段之间均可流转（包括 hired / rejected），每次追加一条 stage_change 事件
        """
        previous = CandidateStage(db_obj.current_stage)
        event = TimelineEvent(
            type=TimelineEventType.STAGE_CHANGE,
            description=f"Moved to {stage.value}",
            metadata={"from": previous.value, "to": stage.value},
        )
        return await self._append(db, db_obj, {
            "current_stage": stage,
            "timeline": [*(db_obj.timeline or []), event.model_dump(mode="json")],
        })

    async def add_note(
        self,
        db: AsyncSession,
        *,
        db_obj: Candidate,
        content: str,
        mentions: Optional[List[str]] = None
    ) -> Candidate:
        """添加备注并追加 note_added 事件"""
        note = Note(
            content=content,
            mentions=mentions if mentions is not None else extract_mentions(content),
            author_id=DEFAULT_AUTHOR_ID,
        )
        event = TimelineEvent(
            type=TimelineEventType.NOTE_ADDED,
            description="Note added",
        )
        return await self._append(db, db_obj, {
            "notes": [*(db_obj.notes or []), note.model_dump(mode="json")],
            "timeline": [*(db_obj.timeline or []), event.model_dump(mode="json")],
        })

    async def add_assessment_score(
        self,
        db: AsyncSession,
        *,
        db_obj: Candidate,
        score: AssessmentScore
    ) -> Candidate:
        """记录测评成绩并追加 assessment_completed 事件"""
        event = TimelineEvent(
            type=TimelineEventType.ASSESSMENT_COMPLETED,
            description=f"Assessment completed with score: {score.score:g}%",
            metadata={"assessment_id": score.assessment_id},
        )
        return await self._append(db, db_obj, {
            "assessment_scores": [*(db_obj.assessment_scores or []), score.model_dump(mode="json")],
            "timeline": [*(db_obj.timeline or []), event.model_dump(mode="json")],
        })


candidate_crud = CRUDCandidate(Candidate)
