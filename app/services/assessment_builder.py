"""
测评编辑器

对分区 / 题目列表的增删改、复制和拖拽排序。
所有函数返回新列表，不修改传入的列表。
"""
from typing import Any, Dict, List, Tuple

from app.core.exceptions import NotFoundException
from app.models.base import new_id
from app.models.documents import AssessmentSection, Question
from .reorder import reorder


def _find_section(sections: List[AssessmentSection], section_id: str) -> Tuple[int, AssessmentSection]:
    for index, section in enumerate(sections):
        if section.id == section_id:
            return index, section
    raise NotFoundException(f"Section not found: {section_id}")


def _replace(sections: List[AssessmentSection], index: int, section: AssessmentSection) -> List[AssessmentSection]:
    result = list(sections)
    result[index] = section
    return result


# ==================== 分区 ====================

def add_section(
    sections: List[AssessmentSection],
    title: str = "New Section",
    description: str = "",
) -> List[AssessmentSection]:
    """在末尾添加空分区"""
    section = AssessmentSection(title=title, description=description, order=len(sections))
    return [*sections, section]


def update_section(
    sections: List[AssessmentSection],
    section_id: str,
    updates: Dict[str, Any],
) -> List[AssessmentSection]:
    index, section = _find_section(sections, section_id)
    return _replace(sections, index, section.model_copy(update=updates))


def duplicate_section(sections: List[AssessmentSection], section_id: str) -> List[AssessmentSection]:
    """复制分区到末尾，题目使用新 ID"""
    _, section = _find_section(sections, section_id)
    copy = section.model_copy(
        update={
            "id": new_id(),
            "title": f"{section.title} (Copy)",
            "order": len(sections),
            "questions": [q.model_copy(update={"id": new_id()}, deep=True) for q in section.questions],
        },
        deep=True,
    )
    return [*sections, copy]


def delete_section(sections: List[AssessmentSection], section_id: str) -> List[AssessmentSection]:
    _find_section(sections, section_id)
    return [s for s in sections if s.id != section_id]


def reorder_sections(
    sections: List[AssessmentSection],
    source_index: int,
    destination_index: int,
) -> List[AssessmentSection]:
    return reorder(sections, source_index, destination_index)


# ==================== 题目 ====================

def add_question(
    sections: List[AssessmentSection],
    section_id: str,
    question: Question,
) -> List[AssessmentSection]:
    """在分区末尾添加题目，order 为当前题目数"""
    index, section = _find_section(sections, section_id)
    question = question.model_copy(update={"order": len(section.questions)})
    return _replace(
        sections,
        index,
        section.model_copy(update={"questions": [*section.questions, question]}),
    )


def update_question(
    sections: List[AssessmentSection],
    section_id: str,
    question_id: str,
    updates: Dict[str, Any],
) -> List[AssessmentSection]:
    index, section = _find_section(sections, section_id)
    if not any(q.id == question_id for q in section.questions):
        raise NotFoundException(f"Question not found: {question_id}")

    questions = [
        q.model_copy(update=updates) if q.id == question_id else q
        for q in section.questions
    ]
    return _replace(sections, index, section.model_copy(update={"questions": questions}))


def delete_question(
    sections: List[AssessmentSection],
    section_id: str,
    question_id: str,
) -> List[AssessmentSection]:
    index, section = _find_section(sections, section_id)
    if not any(q.id == question_id for q in section.questions):
        raise NotFoundException(f"Question not found: {question_id}")

    questions = [q for q in section.questions if q.id != question_id]
    return _replace(sections, index, section.model_copy(update={"questions": questions}))


def reorder_questions(
    sections: List[AssessmentSection],
    section_id: str,
    source_index: int,
    destination_index: int,
) -> List[AssessmentSection]:
    index, section = _find_section(sections, section_id)
    questions = reorder(section.questions, source_index, destination_index)
    return _replace(sections, index, section.model_copy(update={"questions": questions}))
