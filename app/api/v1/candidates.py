"""
候选人管理 API 路由
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
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
from app.core.exceptions import NotFoundException, BadRequestException
from app.crud import candidate_crud, job_crud
from app.models.candidate import (
    CandidateStage,
    CandidateCreate,
    CandidateUpdate,
    CandidateResponse,
    CandidateListResponse,
    StageUpdate,
    NoteCreate,
)
from app.schemas.board import DragResult
from app.services.reorder import resolve_group_move

router = APIRouter()


def _detail(candidate) -> dict:
    return CandidateResponse.model_validate(candidate).model_dump(mode="json")


async def _get_or_404(db: AsyncSession, candidate_id: str):
    candidate = await candidate_crud.get(db, candidate_id)
    if not candidate:
        raise NotFoundException(f"Candidate not found: {candidate_id}")
    return candidate


@router.get("", summary="获取候选人列表", response_model=PagedResponseModel[CandidateListResponse])
async def get_candidates(
    page: int = Query(1, ge=1, description="页码"),
    page_size: int = Query(20, ge=1, le=100, description="每页数量"),
    search: Optional[str] = Query(None, description="姓名/邮箱搜索"),
    job_id: Optional[str] = Query(None, description="职位ID筛选"),
    stage: Optional[CandidateStage] = Query(None, description="阶段筛选"),
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    获取候选人列表（最新优先），支持搜索和多条件筛选
    """
    await network.read()

    skip = (page - 1) * page_size
    candidates = await candidate_crud.get_filtered(
        db, search=search, job_id=job_id, stage=stage, skip=skip, limit=page_size
    )
    total = await candidate_crud.count_filtered(db, search=search, job_id=job_id, stage=stage)

    items = [
        CandidateListResponse.model_validate(c).model_dump(mode="json")
        for c in candidates
    ]
    return paged_response(items, total, page, page_size)


@router.get("/board", summary="获取候选人看板", response_model=DictResponse)
async def get_candidate_board(
    search: Optional[str] = Query(None, description="姓名/邮箱搜索"),
    job_id: Optional[str] = Query(None, description="职位ID筛选"),
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    按阶段分组的看板数据，每列附带数量
    """
    await network.read()

    candidates = await candidate_crud.get_filtered(db, search=search, job_id=job_id, limit=None)
    columns = {stage.value: [] for stage in CandidateStage}
    for candidate in candidates:
        columns[CandidateStage(candidate.current_stage).value].append(
            CandidateListResponse.model_validate(candidate).model_dump(mode="json")
        )

    return success_response(data={
        "columns": [
            {"stage": stage, "count": len(items), "candidates": items}
            for stage, items in columns.items()
        ],
        "total": len(candidates),
    })


@router.post("/board/move", summary="看板拖拽候选人", response_model=ResponseModel[CandidateResponse])
async def move_candidate(
    data: DragResult,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    看板拖拽

    跨列时变更阶段并追加时间线事件；同列内移动或拖出看板不做任何修改。
    源列以候选人当前阶段为准，客户端传入的 source 仅作参考。
    """
    await network.read()
    candidate = await _get_or_404(db, data.draggable_id)

    destination = data.destination.droppable_id if data.destination else None
    current = CandidateStage(candidate.current_stage).value
    new_stage = resolve_group_move(current, destination)
    if new_stage is None:
        return success_response(data=_detail(candidate), message="No change")

    try:
        stage = CandidateStage(new_stage)
    except ValueError:
        raise BadRequestException(f"Invalid stage: {new_stage}")

    await network.write("move_candidate")
    candidate = await candidate_crud.update_stage(db, db_obj=candidate, stage=stage)
    return success_response(data=_detail(candidate), message="Candidate moved")


@router.post("", summary="创建候选人", response_model=ResponseModel[CandidateResponse])
async def create_candidate(
    data: CandidateCreate,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    创建候选人（需关联已存在的职位）
    """
    await network.write("create_candidate")

    if not await job_crud.get(db, data.job_id):
        raise NotFoundException(f"Job not found: {data.job_id}")

    candidate = await candidate_crud.create_candidate(db, obj_in=data)
    return success_response(data=_detail(candidate), message="Candidate created")


@router.get("/{candidate_id}", summary="获取候选人详情", response_model=ResponseModel[CandidateResponse])
async def get_candidate(
    candidate_id: str,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    获取候选人详情（含备注、时间线、测评成绩）
    """
    await network.read()

    candidate = await _get_or_404(db, candidate_id)
    return success_response(data=_detail(candidate))


@router.patch("/{candidate_id}", summary="更新候选人", response_model=ResponseModel[CandidateResponse])
async def update_candidate(
    candidate_id: str,
    data: CandidateUpdate,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    更新候选人基本信息
    """
    await network.write("update_candidate")

    candidate = await _get_or_404(db, candidate_id)
    if data.job_id and not await job_crud.get(db, data.job_id):
        raise NotFoundException(f"Job not found: {data.job_id}")

    candidate = await candidate_crud.update_candidate(db, db_obj=candidate, obj_in=data)
    return success_response(data=_detail(candidate), message="Candidate updated")


@router.patch("/{candidate_id}/stage", summary="变更候选人阶段", response_model=ResponseModel[CandidateResponse])
async def update_candidate_stage(
    candidate_id: str,
    data: StageUpdate,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    直接选择新阶段，追加 stage_change 事件
    """
    await network.write("update_candidate_stage")

    candidate = await _get_or_404(db, candidate_id)
    candidate = await candidate_crud.update_stage(db, db_obj=candidate, stage=data.stage)
    return success_response(data=_detail(candidate), message="Stage updated")


@router.post("/{candidate_id}/notes", summary="添加备注", response_model=ResponseModel[CandidateResponse])
async def add_candidate_note(
    candidate_id: str,
    data: NoteCreate,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    添加备注，支持 @username 提及
    """
    await network.write("add_candidate_note")

    candidate = await _get_or_404(db, candidate_id)
    candidate = await candidate_crud.add_note(
        db, db_obj=candidate, content=data.content, mentions=data.mentions
    )
    return success_response(data=_detail(candidate), message="Note added")


@router.delete("/{candidate_id}", summary="删除候选人", response_model=MessageResponse)
async def delete_candidate(
    candidate_id: str,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    删除候选人
    """
    await network.write("delete_candidate")

    if not await candidate_crud.delete(db, id=candidate_id):
        raise NotFoundException(f"Candidate not found: {candidate_id}")
    return success_response(message="Candidate deleted")
