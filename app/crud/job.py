"""
职位 CRUD 操作
"""
from typing import Dict, List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import utc_now
from app.models.job import Job, JobCreate, JobUpdate, JobStatus, slugify
from .base import CRUDBase


class CRUDJob(CRUDBase[Job]):
    """职位 CRUD 操作类"""

    async def get_all_ordered(self, db: AsyncSession) -> List[Job]:
        """按 order 获取全部职位"""
        result = await db.execute(
            select(self.model).order_by(self.model.order, self.model.created_at)
        )
        return list(result.scalars().all())

    async def get_by_slug(self, db: AsyncSession, slug: str) -> Optional[Job]:
        """根据 slug 查找"""
        result = await db.execute(
            select(self.model).where(self.model.slug == slug)
        )
        return result.scalar_one_or_none()

    async def get_filtered(
        self,
        db: AsyncSession,
        *,
        search: Optional[str] = None,
        status: Optional[JobStatus] = None,
        tag: Optional[str] = None
    ) -> List[Job]:
        """
        职位看板筛选：名称模糊搜索 + 状态 + 标签，按 order 排序

        标签存储为 JSON 数组，在内存中过滤
        """
        query = select(self.model)
        if search:
            query = query.where(self.model.title.ilike(f"%{search}%"))
        if status is not None:
            query = query.where(self.model.status == status)
        query = query.order_by(self.model.order, self.model.created_at)

        result = await db.execute(query)
        jobs = list(result.scalars().all())
        if tag:
            jobs = [job for job in jobs if tag in (job.tags or [])]
        return jobs

    async def count_by_status(self, db: AsyncSession, status: JobStatus) -> int:
        """统计某状态职位数量"""
        result = await db.execute(
            select(func.count())
            .select_from(self.model)
            .where(self.model.status == status)
        )
        return result.scalar() or 0

    async def get_all_tags(self, db: AsyncSession) -> List[str]:
        """全部标签（按首次出现顺序去重）"""
        tags: Dict[str, None] = {}
        for job in await self.get_all_ordered(db):
            for tag in job.tags or []:
                tags.setdefault(tag, None)
        return list(tags)

    async def create_job(
        self,
        db: AsyncSession,
        *,
        obj_in: JobCreate
    ) -> Job:
        """创建职位，追加到排序末尾"""
        data = obj_in.model_dump()
        data["slug"] = slugify(obj_in.title)
        data["order"] = await self.count(db)
        return await self.create(db, obj_in=data)

    async def update_job(
        self,
        db: AsyncSession,
        *,
        db_obj: Job,
        obj_in: JobUpdate
    ) -> Job:
        """更新职位，名称变化时重新生成 slug"""
        update_data = obj_in.model_dump(exclude_unset=True)
        if update_data.get("title"):
            update_data["slug"] = slugify(update_data["title"])
        return await self.update(db, db_obj=db_obj, obj_in=update_data)

    async def delete_job(self, db: AsyncSession, *, id: str) -> bool:
        """删除职位，并重排剩余职位保持 order 连续"""
        deleted = await self.delete(db, id=id)
        if deleted:
            remaining = await self.get_all_ordered(db)
            await self.apply_orders(db, {job.id: index for index, job in enumerate(remaining)})
        return deleted

    async def apply_orders(self, db: AsyncSession, orders: Dict[str, int]) -> int:
        """
        批量写入排序

        Returns:
            实际变更的记录数
        """
        if not orders:
            return 0
        result = await db.execute(
            select(self.model).where(self.model.id.in_(list(orders)))
        )
        changed = 0
        now = utc_now()
        for job in result.scalars().all():
            new_order = orders[job.id]
            if job.order != new_order:
                job.order = new_order
                job.updated_at = now
                changed += 1
        await db.flush()
        return changed


job_crud = CRUDJob(Job)
