"""
测评编辑器测试
"""
import pytest

from app.core.exceptions import NotFoundException
from app.models.documents import (
    AssessmentSection,
    ConditionalRule,
    Question,
    QuestionType,
    check_conditional_references,
)
from app.services import assessment_builder as builder


@pytest.fixture
def sections():
    return [
        AssessmentSection(
            id="s1",
            title="Basics",
            order=0,
            questions=[
                Question(id="q1", title="Remote?", options=["Yes", "No"], order=0),
                Question(
                    id="q2",
                    type=QuestionType.SHORT_TEXT,
                    title="Timezone",
                    conditional_logic=ConditionalRule(depends_on="q1", value="Yes"),
                    order=1,
                ),
            ],
        )
    ]


def test_add_section_appends(sections):
    result = builder.add_section(sections)
    assert len(result) == 2
    assert result[1].title == "New Section"
    assert result[1].order == 1
    # 原列表不变
    assert len(sections) == 1


def test_update_section(sections):
    result = builder.update_section(sections, "s1", {"title": "Intro"})
    assert result[0].title == "Intro"
    assert sections[0].title == "Basics"


def test_duplicate_section_uses_fresh_ids(sections):
    result = builder.duplicate_section(sections, "s1")
    copy = result[-1]
    assert copy.title == "Basics (Copy)"
    assert copy.id != "s1"
    assert copy.order == 1
    assert [q.title for q in copy.questions] == ["Remote?", "Timezone"]
    assert {q.id for q in copy.questions}.isdisjoint({"q1", "q2"})
    # 复制后的条件规则仍指向原题目
    assert copy.questions[1].conditional_logic.depends_on == "q1"
    check_conditional_references(result)


def test_delete_section(sections):
    result = builder.add_section(sections, title="Extra")
    result = builder.delete_section(result, "s1")
    assert [s.title for s in result] == ["Extra"]


def test_missing_section(sections):
    with pytest.raises(NotFoundException):
        builder.delete_section(sections, "nope")
    with pytest.raises(NotFoundException):
        builder.add_question(sections, "nope", Question())


def test_add_question_sets_order(sections):
    result = builder.add_question(sections, "s1", Question(id="q3", type=QuestionType.NUMERIC))
    assert [q.id for q in result[0].questions] == ["q1", "q2", "q3"]
    assert result[0].questions[-1].order == 2


def test_update_question(sections):
    result = builder.update_question(sections, "s1", "q2", {"required": True, "conditional_logic": None})
    question = result[0].questions[1]
    assert question.required is True
    assert question.conditional_logic is None
    assert sections[0].questions[1].conditional_logic is not None


def test_delete_question(sections):
    result = builder.delete_question(sections, "s1", "q2")
    assert [q.id for q in result[0].questions] == ["q1"]

    with pytest.raises(NotFoundException):
        builder.delete_question(sections, "s1", "missing")


def test_delete_referenced_question_breaks_references(sections):
    result = builder.delete_question(sections, "s1", "q1")
    with pytest.raises(ValueError):
        check_conditional_references(result)


def test_reorder_questions(sections):
    result = builder.reorder_questions(sections, "s1", 1, 0)
    assert [q.id for q in result[0].questions] == ["q2", "q1"]
    assert [q.order for q in result[0].questions] == [0, 1]


def test_reorder_sections(sections):
    result = builder.add_section(sections, title="Second")
    result = builder.reorder_sections(result, 1, 0)
    assert [s.title for s in result] == ["Second", "Basics"]
    assert [s.order for s in result] == [0, 1]
