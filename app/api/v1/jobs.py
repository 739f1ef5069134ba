"""
职位管理 API 路由
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.network import NetworkSimulator, get_network
from app.core.response import (
    success_response,
    paged_response,
    ResponseModel,
    PagedResponseModel,
    MessageResponse,
    DictResponse,
)
from app.core.exceptions import NotFoundException, ConflictException
from app.crud import job_crud
from app.models.job import (
    JobCreate,
    JobUpdate,
    JobResponse,
    JobStatus,
    slugify,
)
from app.schemas.board import JobReorderRequest
from app.services.reorder import merge_subset, paginate, reorder_page

router = APIRouter()


@router.get("", summary="获取职位列表", response_model=PagedResponseModel[JobResponse])
async def get_jobs(
    request: Request,
    page: int = Query(1, ge=1, description="页码"),
    page_size: Optional[int] = Query(None, ge=1, le=100, description="每页数量，默认取配置"),
    search: Optional[str] = Query(None, description="职位名称搜索"),
    status: Optional[JobStatus] = Query(None, description="状态筛选"),
    tag: Optional[str] = Query(None, description="标签筛选"),
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    获取职位列表（按 order 排序），支持搜索、状态/标签筛选和分页
    """
    await network.read()

    page_size = page_size or request.app.state.settings.jobs_page_size
    jobs = await job_crud.get_filtered(db, search=search, status=status, tag=tag)
    items = [
        JobResponse.model_validate(job).model_dump(mode="json")
        for job in paginate(jobs, page, page_size)
    ]
    return paged_response(items, len(jobs), page, page_size)


@router.get("/stats/overview", summary="职位统计", response_model=DictResponse)
async def get_job_stats(
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    职位看板概览：总数、启用/归档数量和全部标签
    """
    await network.read()

    return success_response(data={
        "total": await job_crud.count(db),
        "active": await job_crud.count_by_status(db, JobStatus.ACTIVE),
        "archived": await job_crud.count_by_status(db, JobStatus.ARCHIVED),
        "tags": await job_crud.get_all_tags(db),
    })


@router.post("", summary="创建职位", response_model=ResponseModel[JobResponse])
async def create_job(
    data: JobCreate,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    创建新职位，slug 由名称生成，排在列表末尾
    """
    await network.write("create_job")

    slug = slugify(data.title)
    if await job_crud.get_by_slug(db, slug):
        raise ConflictException(f"Job with slug '{slug}' already exists")

    job = await job_crud.create_job(db, obj_in=data)
    return success_response(
        data=JobResponse.model_validate(job).model_dump(mode="json"),
        message="Job created"
    )


@router.post("/reorder", summary="拖拽排序职位", response_model=ResponseModel[list[JobResponse]])
async def reorder_jobs(
    data: JobReorderRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    在当前显示的列表（筛选结果的当前页）内拖拽职位

    筛选条件与列表接口一致。筛选结果重排后依次占据它们在完整列表中原有的位置，
    整体 order 保持 0..n-1 连续。
    写入失败时整个请求回滚，客户端重新拉取列表即可丢弃乐观更新。
    """
    await network.write("reorder_jobs")

    page_size = data.page_size or request.app.state.settings.jobs_page_size
    jobs = [JobResponse.model_validate(job) for job in await job_crud.get_all_ordered(db)]
    visible = [
        JobResponse.model_validate(job)
        for job in await job_crud.get_filtered(
            db, search=data.search, status=data.status, tag=data.tag
        )
    ]
    reordered = reorder_page(
        visible,
        data.page,
        page_size,
        data.source_index,
        data.destination_index,
    )
    merged = merge_subset(jobs, reordered)
    await job_crud.apply_orders(db, {job.id: job.order for job in merged})

    jobs = await job_crud.get_all_ordered(db)
    return success_response(
        data=[JobResponse.model_validate(job).model_dump(mode="json") for job in jobs],
        message="Jobs reordered"
    )


@router.get("/slug/{slug}", summary="根据 slug 获取职位", response_model=ResponseModel[JobResponse])
async def get_job_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    根据 slug 获取职位详情
    """
    await network.read()

    job = await job_crud.get_by_slug(db, slug)
    if not job:
        raise NotFoundException(f"Job not found: {slug}")
    return success_response(data=JobResponse.model_validate(job).model_dump(mode="json"))


@router.get("/{job_id}", summary="获取职位详情", response_model=ResponseModel[JobResponse])
async def get_job(
    job_id: str,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    根据 ID 获取职位详情
    """
    await network.read()

    job = await job_crud.get(db, job_id)
    if not job:
        raise NotFoundException(f"Job not found: {job_id}")
    return success_response(data=JobResponse.model_validate(job).model_dump(mode="json"))


@router.patch("/{job_id}", summary="更新职位", response_model=ResponseModel[JobResponse])
async def update_job(
    job_id: str,
    data: JobUpdate,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    更新职位信息（包括归档 / 取消归档）
    """
    await network.write("update_job")

    job = await job_crud.get(db, job_id)
    if not job:
        raise NotFoundException(f"Job not found: {job_id}")

    # 检查新 slug 是否冲突
    if data.title:
        slug = slugify(data.title)
        if slug != job.slug and await job_crud.get_by_slug(db, slug):
            raise ConflictException(f"Job with slug '{slug}' already exists")

    job = await job_crud.update_job(db, db_obj=job, obj_in=data)
    return success_response(
        data=JobResponse.model_validate(job).model_dump(mode="json"),
        message="Job updated"
    )


@router.delete("/{job_id}", summary="删除职位", response_model=MessageResponse)
async def delete_job(
    job_id: str,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    删除职位，剩余职位重新编号
    """
    await network.write("delete_job")

    if not await job_crud.delete_job(db, id=job_id):
        raise NotFoundException(f"Job not found: {job_id}")
    return success_response(message="Job deleted")
