"""
测评答卷 API 路由
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from app.core.database import get_db
from app.core.network import NetworkSimulator, get_network
from app.core.response import success_response, ResponseModel
from app.core.exceptions import NotFoundException
from app.crud import assessment_crud, candidate_crud, response_crud
from app.crud.assessment import load_sections
from app.models.assessment import AssessmentResponseCreate, AssessmentResponseDetail
from app.models.base import utc_now
from app.models.documents import AssessmentScore
from app.services.assessment_runtime import calculate_score

router = APIRouter()


def _detail(response) -> dict:
    return AssessmentResponseDetail.model_validate(response).model_dump(mode="json")


@router.get("", summary="获取答卷列表", response_model=ResponseModel[list[AssessmentResponseDetail]])
async def get_responses(
    assessment_id: Optional[str] = Query(None, description="测评ID筛选"),
    candidate_id: Optional[str] = Query(None, description="候选人ID筛选"),
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    获取答卷列表，可按测评或候选人筛选
    """
    await network.read()

    if assessment_id:
        responses = await response_crud.get_by_assessment(db, assessment_id)
    elif candidate_id:
        responses = await response_crud.get_by_candidate(db, candidate_id)
    else:
        responses = await response_crud.get_all(db)
    return success_response(data=[_detail(r) for r in responses])


@router.post("", summary="提交答卷", response_model=ResponseModel[AssessmentResponseDetail])
async def submit_response(
    data: AssessmentResponseCreate,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    提交答卷

    得分为作答完成度（已作答数 / 题目总数）。
    候选人存在时同时记录测评成绩并追加 assessment_completed 事件。
    """
    await network.write("submit_response")

    assessment = await assessment_crud.get(db, data.assessment_id)
    if not assessment:
        raise NotFoundException(f"Assessment not found: {data.assessment_id}")

    completed_at = utc_now()
    score = calculate_score(load_sections(assessment), data.responses)
    response = await response_crud.create(db, obj_in={
        "assessment_id": data.assessment_id,
        "candidate_id": data.candidate_id,
        "responses": data.responses,
        "completed_at": completed_at,
        "score": score,
    })

    if data.candidate_id:
        candidate = await candidate_crud.get(db, data.candidate_id)
        if candidate:
            await candidate_crud.add_assessment_score(
                db,
                db_obj=candidate,
                score=AssessmentScore(
                    assessment_id=data.assessment_id,
                    score=score,
                    completed_at=completed_at,
                    responses=data.responses,
                ),
            )
        else:
            logger.warning(f"提交答卷时候选人不存在: {data.candidate_id}")

    return success_response(data=_detail(response), message="Assessment submitted")


@router.get("/{response_id}", summary="获取答卷详情", response_model=ResponseModel[AssessmentResponseDetail])
async def get_response(
    response_id: str,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    根据 ID 获取答卷
    """
    await network.read()

    response = await response_crud.get(db, response_id)
    if not response:
        raise NotFoundException(f"Response not found: {response_id}")
    return success_response(data=_detail(response))
