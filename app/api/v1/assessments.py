"""
测评管理 API 路由

包括测评 CRUD、发布、编辑器操作（分区 / 题目）和作答状态评估
"""
from typing import Callable, List, Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.network import NetworkSimulator, get_network
from app.core.response import (
    success_response,
    ResponseModel,
    MessageResponse,
)
from app.core.exceptions import NotFoundException, BadRequestException
from app.crud import assessment_crud, job_crud
from app.crud.assessment import load_sections
from app.models.assessment import (
    Assessment,
    AssessmentCreate,
    AssessmentUpdate,
    AssessmentDetail,
    AssessmentListItem,
)
from app.models.documents import AssessmentSection, Question, check_conditional_references
from app.schemas.board import ReorderRequest
from app.schemas.builder import SectionCreate, SectionUpdate, QuestionCreate, QuestionUpdate
from app.schemas.runtime import EvaluateRequest, EvaluateResponse, SectionState
from app.services import assessment_builder as builder
from app.services.assessment_runtime import (
    can_advance,
    calculate_progress,
    count_questions,
    section_errors,
    visible_questions,
)

router = APIRouter()


def _detail(assessment: Assessment) -> dict:
    return AssessmentDetail.model_validate(assessment).model_dump(mode="json")


def _list_item(assessment: Assessment) -> dict:
    sections = load_sections(assessment)
    item = AssessmentListItem.model_validate(assessment)
    item.section_count = len(sections)
    item.question_count = count_questions(sections)
    return item.model_dump(mode="json")


def _explicit_updates(data) -> dict:
    """只取请求中显式传入的字段，保留嵌套模型类型"""
    return {field: getattr(data, field) for field in data.model_fields_set}


async def _get_or_404(db: AsyncSession, assessment_id: str) -> Assessment:
    assessment = await assessment_crud.get(db, assessment_id)
    if not assessment:
        raise NotFoundException(f"Assessment not found: {assessment_id}")
    return assessment


async def _edit_sections(
    db: AsyncSession,
    assessment_id: str,
    edit: Callable[[List[AssessmentSection]], List[AssessmentSection]],
) -> Assessment:
    """对分区列表执行一次编辑器操作并保存"""
    assessment = await _get_or_404(db, assessment_id)
    sections = edit(load_sections(assessment))
    try:
        check_conditional_references(sections)
    except ValueError as e:
        raise BadRequestException(str(e))
    return await assessment_crud.save_sections(db, db_obj=assessment, sections=sections)


# ==================== 测评 CRUD ====================

@router.get("", summary="获取测评列表", response_model=ResponseModel[list[AssessmentListItem]])
async def get_assessments(
    job_id: Optional[str] = Query(None, description="职位ID筛选"),
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    获取测评列表（最新优先），可按职位筛选
    """
    await network.read()

    if job_id:
        assessments = await assessment_crud.get_by_job(db, job_id)
    else:
        assessments = await assessment_crud.get_multi(db, limit=1000)
    return success_response(data=[_list_item(a) for a in assessments])


@router.post("", summary="创建测评", response_model=ResponseModel[AssessmentDetail])
async def create_assessment(
    data: AssessmentCreate,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    创建测评（未发布状态）
    """
    await network.write("create_assessment")

    if not await job_crud.get(db, data.job_id):
        raise NotFoundException(f"Job not found: {data.job_id}")

    assessment = await assessment_crud.create_assessment(db, obj_in=data)
    return success_response(data=_detail(assessment), message="Assessment created")


@router.get("/{assessment_id}", summary="获取测评详情", response_model=ResponseModel[AssessmentDetail])
async def get_assessment(
    assessment_id: str,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    获取测评详情（含完整分区和题目）
    """
    await network.read()

    assessment = await _get_or_404(db, assessment_id)
    return success_response(data=_detail(assessment))


@router.patch("/{assessment_id}", summary="更新测评", response_model=ResponseModel[AssessmentDetail])
async def update_assessment(
    assessment_id: str,
    data: AssessmentUpdate,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    更新测评标题、职位或整体替换分区
    """
    await network.write("update_assessment")

    assessment = await _get_or_404(db, assessment_id)
    if data.job_id and not await job_crud.get(db, data.job_id):
        raise NotFoundException(f"Job not found: {data.job_id}")

    assessment = await assessment_crud.update_assessment(db, db_obj=assessment, obj_in=data)
    return success_response(data=_detail(assessment), message="Assessment updated")


@router.delete("/{assessment_id}", summary="删除测评", response_model=MessageResponse)
async def delete_assessment(
    assessment_id: str,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    删除测评
    """
    await network.write("delete_assessment")

    if not await assessment_crud.delete(db, id=assessment_id):
        raise NotFoundException(f"Assessment not found: {assessment_id}")
    return success_response(message="Assessment deleted")


@router.post("/{assessment_id}/publish", summary="切换发布状态", response_model=ResponseModel[AssessmentDetail])
async def publish_assessment(
    assessment_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    发布 / 取消发布，发布后生成分享链接
    """
    await network.write("publish_assessment")

    assessment = await _get_or_404(db, assessment_id)
    assessment = await assessment_crud.toggle_publish(
        db, db_obj=assessment, link_base=request.app.state.settings.shareable_link_base
    )
    message = "Assessment published" if assessment.is_published else "Assessment unpublished"
    return success_response(data=_detail(assessment), message=message)


# ==================== 分区 ====================

@router.post("/{assessment_id}/sections", summary="添加分区", response_model=ResponseModel[AssessmentDetail])
async def add_section(
    assessment_id: str,
    data: SectionCreate,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    await network.write("add_section")
    assessment = await _edit_sections(
        db, assessment_id,
        lambda sections: builder.add_section(sections, data.title, data.description),
    )
    return success_response(data=_detail(assessment), message="Section added")


@router.post("/{assessment_id}/sections/reorder", summary="拖拽排序分区", response_model=ResponseModel[AssessmentDetail])
async def reorder_sections(
    assessment_id: str,
    data: ReorderRequest,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    await network.write("reorder_sections")
    assessment = await _edit_sections(
        db, assessment_id,
        lambda sections: builder.reorder_sections(sections, data.source_index, data.destination_index),
    )
    return success_response(data=_detail(assessment), message="Sections reordered")


@router.patch("/{assessment_id}/sections/{section_id}", summary="更新分区", response_model=ResponseModel[AssessmentDetail])
async def update_section(
    assessment_id: str,
    section_id: str,
    data: SectionUpdate,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    await network.write("update_section")
    updates = {k: v for k, v in _explicit_updates(data).items() if v is not None}
    assessment = await _edit_sections(
        db, assessment_id,
        lambda sections: builder.update_section(sections, section_id, updates),
    )
    return success_response(data=_detail(assessment), message="Section updated")


@router.post("/{assessment_id}/sections/{section_id}/duplicate", summary="复制分区", response_model=ResponseModel[AssessmentDetail])
async def duplicate_section(
    assessment_id: str,
    section_id: str,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    await network.write("duplicate_section")
    assessment = await _edit_sections(
        db, assessment_id,
        lambda sections: builder.duplicate_section(sections, section_id),
    )
    return success_response(data=_detail(assessment), message="Section duplicated")


@router.delete("/{assessment_id}/sections/{section_id}", summary="删除分区", response_model=ResponseModel[AssessmentDetail])
async def delete_section(
    assessment_id: str,
    section_id: str,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    删除分区；若其他题目的条件规则依赖被删除的题目，返回 400
    """
    await network.write("delete_section")
    assessment = await _edit_sections(
        db, assessment_id,
        lambda sections: builder.delete_section(sections, section_id),
    )
    return success_response(data=_detail(assessment), message="Section deleted")


# ==================== 题目 ====================

@router.post("/{assessment_id}/sections/{section_id}/questions", summary="添加题目", response_model=ResponseModel[AssessmentDetail])
async def add_question(
    assessment_id: str,
    section_id: str,
    data: QuestionCreate,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    await network.write("add_question")
    question = Question(**_explicit_updates(data))
    assessment = await _edit_sections(
        db, assessment_id,
        lambda sections: builder.add_question(sections, section_id, question),
    )
    return success_response(data=_detail(assessment), message="Question added")


@router.post("/{assessment_id}/sections/{section_id}/questions/reorder", summary="拖拽排序题目", response_model=ResponseModel[AssessmentDetail])
async def reorder_questions(
    assessment_id: str,
    section_id: str,
    data: ReorderRequest,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    await network.write("reorder_questions")
    assessment = await _edit_sections(
        db, assessment_id,
        lambda sections: builder.reorder_questions(
            sections, section_id, data.source_index, data.destination_index
        ),
    )
    return success_response(data=_detail(assessment), message="Questions reordered")


@router.patch("/{assessment_id}/sections/{section_id}/questions/{question_id}", summary="更新题目", response_model=ResponseModel[AssessmentDetail])
async def update_question(
    assessment_id: str,
    section_id: str,
    question_id: str,
    data: QuestionUpdate,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    await network.write("update_question")
    # 可选字段允许显式置空，其余字段忽略 null
    nullable = {"description", "options", "validation", "conditional_logic"}
    updates = {
        k: v for k, v in _explicit_updates(data).items()
        if v is not None or k in nullable
    }
    assessment = await _edit_sections(
        db, assessment_id,
        lambda sections: builder.update_question(sections, section_id, question_id, updates),
    )
    return success_response(data=_detail(assessment), message="Question updated")


@router.delete("/{assessment_id}/sections/{section_id}/questions/{question_id}", summary="删除题目", response_model=ResponseModel[AssessmentDetail])
async def delete_question(
    assessment_id: str,
    section_id: str,
    question_id: str,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    await network.write("delete_question")
    assessment = await _edit_sections(
        db, assessment_id,
        lambda sections: builder.delete_question(sections, section_id, question_id),
    )
    return success_response(data=_detail(assessment), message="Question deleted")


# ==================== 作答 ====================

@router.post("/{assessment_id}/evaluate", summary="评估作答状态", response_model=ResponseModel[EvaluateResponse])
async def evaluate_answers(
    assessment_id: str,
    data: EvaluateRequest,
    db: AsyncSession = Depends(get_db),
    network: NetworkSimulator = Depends(get_network),
):
    """
    根据当前答案计算：各分区可见题目、当前分区校验错误、能否进入下一分区、作答进度
    """
    await network.read()

    assessment = await _get_or_404(db, assessment_id)
    sections = load_sections(assessment)
    if not 0 <= data.section_index < len(sections):
        raise BadRequestException(f"Section index out of range: {data.section_index}")

    answers = data.answers
    current = sections[data.section_index]
    result = EvaluateResponse(
        sections=[
            SectionState(
                section_id=section.id,
                visible_question_ids=[q.id for q in visible_questions(section, answers)],
                can_advance=can_advance(section, answers),
            )
            for section in sections
        ],
        current_section_id=current.id,
        errors=section_errors(current, answers),
        can_advance=can_advance(current, answers),
        progress=calculate_progress(sections, answers),
        answered_count=len(answers),
        total_questions=count_questions(sections),
    )
    return success_response(data=result.model_dump(mode="json"))
