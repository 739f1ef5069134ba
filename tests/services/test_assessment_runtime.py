"""
测评运行时测试

条件显示、答案校验、分区完成判定和进度计算
"""
import pytest

from app.models.documents import (
    AssessmentSection,
    ConditionalRule,
    Question,
    QuestionType,
    ValidationRule,
)
from app.services.assessment_runtime import (
    REQUIRED_MESSAGE,
    calculate_progress,
    calculate_score,
    can_advance,
    is_empty_answer,
    is_visible,
    section_errors,
    validate_answer,
)


def make_question(qid: str = "q", **kwargs) -> Question:
    return Question(id=qid, title=qid, **kwargs)


def depends(on: str, condition: str, value: str) -> ConditionalRule:
    return ConditionalRule(depends_on=on, condition=condition, value=value)


# ==================== 条件显示 ====================

def test_visible_without_rule():
    assert is_visible(make_question(), {}) is True


def test_hidden_when_dependency_unanswered():
    question = make_question(conditional_logic=depends("q1", "not_equals", "No"))
    assert is_visible(question, {}) is False
    assert is_visible(question, {"q1": ""}) is False
    assert is_visible(question, {"q1": []}) is False


def test_equals_and_not_equals():
    equals = make_question(conditional_logic=depends("q1", "equals", "Yes"))
    assert is_visible(equals, {"q1": "Yes"}) is True
    assert is_visible(equals, {"q1": "No"}) is False

    not_equals = make_question(conditional_logic=depends("q1", "not_equals", "Yes"))
    assert is_visible(not_equals, {"q1": "No"}) is True
    assert is_visible(not_equals, {"q1": "Yes"}) is False


def test_contains_is_case_insensitive():
    question = make_question(conditional_logic=depends("q1", "contains", "react"))
    assert is_visible(question, {"q1": "I use React daily"}) is True
    assert is_visible(question, {"q1": ["Vue", "React"]}) is True
    assert is_visible(question, {"q1": "Angular"}) is False


def test_unknown_condition_defaults_visible():
    question = make_question(conditional_logic=depends("q1", "greater_than", "3"))
    assert is_visible(question, {"q1": "1"}) is True


def test_visibility_is_not_transitive():
    """只看依赖题的原始答案，不检查依赖题本身是否可见"""
    q2 = make_question("q2", conditional_logic=depends("q1", "equals", "Yes"))
    q3 = make_question("q3", conditional_logic=depends("q2", "equals", "Go"))
    answers = {"q1": "No", "q2": "Go"}
    assert is_visible(q2, answers) is False
    assert is_visible(q3, answers) is True


# ==================== 答案校验 ====================

def test_empty_answers():
    assert is_empty_answer(None)
    assert is_empty_answer("")
    assert is_empty_answer([])
    assert not is_empty_answer(0)
    assert not is_empty_answer("0")


def test_required_message():
    question = make_question(required=True)
    assert validate_answer(question, None) == REQUIRED_MESSAGE
    assert validate_answer(question, "") == REQUIRED_MESSAGE
    assert validate_answer(question, []) == REQUIRED_MESSAGE
    assert validate_answer(question, "ok") is None


def test_optional_empty_skips_rules():
    question = make_question(validation=ValidationRule(min_length=5))
    assert validate_answer(question, "") is None


@pytest.mark.parametrize("answer, expected", [
    ("abc", "Minimum length is 5 characters"),
    ("abcdefghijk", "Maximum length is 10 characters"),
    ("abcdef", None),
])
def test_length_rules(answer, expected):
    question = make_question(
        type=QuestionType.SHORT_TEXT,
        validation=ValidationRule(min_length=5, max_length=10),
    )
    assert validate_answer(question, answer) == expected


def test_pattern_must_match_whole_answer():
    question = make_question(validation=ValidationRule(pattern=r"\d{3}"))
    assert validate_answer(question, "123") is None
    assert validate_answer(question, "1234") == "Invalid format"
    assert validate_answer(question, "abc") == "Invalid format"


def test_length_checked_before_pattern():
    question = make_question(validation=ValidationRule(min_length=4, pattern=r"\d+"))
    assert validate_answer(question, "ab") == "Minimum length is 4 characters"


def test_numeric_range():
    question = make_question(
        type=QuestionType.NUMERIC,
        validation=ValidationRule(min=1, max=10),
    )
    assert validate_answer(question, 0) == "Minimum value is 1"
    assert validate_answer(question, 11) == "Maximum value is 10"
    assert validate_answer(question, 5) is None
    assert validate_answer(question, 2.5) is None


def test_zero_satisfies_required():
    question = make_question(type=QuestionType.NUMERIC, required=True)
    assert validate_answer(question, 0) is None


# ==================== 分区完成判定 ====================

def _section() -> AssessmentSection:
    return AssessmentSection(
        id="s1",
        questions=[
            make_question("q1", required=True),
            make_question("q2", required=True, conditional_logic=depends("q1", "equals", "Yes")),
            make_question(
                "q3",
                type=QuestionType.NUMERIC,
                required=True,
                validation=ValidationRule(max=5),
            ),
        ],
    )


def test_hidden_required_question_does_not_block():
    assert can_advance(_section(), {"q1": "No", "q3": 1}) is True


def test_visible_required_question_blocks():
    assert can_advance(_section(), {"q1": "Yes", "q3": 1}) is False


def test_advance_checks_presence_only():
    """超出范围的数值不阻止进入下一分区"""
    answers = {"q1": "No", "q3": 99}
    assert can_advance(_section(), answers) is True
    assert section_errors(_section(), answers) == {"q3": "Maximum value is 5"}


def test_section_errors_skip_hidden():
    assert section_errors(_section(), {"q1": "No"}) == {"q3": REQUIRED_MESSAGE}


# ==================== 进度 / 得分 ====================

def test_progress_counts_answer_keys():
    sections = [
        AssessmentSection(questions=[make_question(f"a{i}") for i in range(5)]),
        AssessmentSection(questions=[make_question(f"b{i}") for i in range(3)]),
    ]
    answers = {"a0": "x", "a1": "y", "b0": "z"}
    assert calculate_progress(sections, answers) == pytest.approx(37.5)
    assert calculate_score(sections, answers) == 38


def test_progress_without_questions():
    assert calculate_progress([], {}) == 0
    assert calculate_progress([AssessmentSection()], {"x": 1}) == 0


def test_stale_hidden_answers_still_count():
    sections = [_section()]
    # q2 已隐藏，但遗留答案仍计入
    answers = {"q1": "No", "q2": "stale"}
    assert calculate_progress(sections, answers) == pytest.approx(200 / 3)
