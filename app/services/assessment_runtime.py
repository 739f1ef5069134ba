"""
测评运行时

- 条件显示：根据其他题目的答案判断题目是否显示
- 答案校验：按 必答 -> 最少字符 -> 最多字符 -> 正则 -> 最小值 -> 最大值 的顺序，
  返回第一条错误
- 分区完成判定：当前分区所有可见必答题均已作答
- 进度 / 得分：已作答数 / 题目总数

全部为纯函数，不持有状态。
"""
import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from app.models.documents import (
    AssessmentSection,
    ConditionOperator,
    Question,
)

REQUIRED_MESSAGE = "This question is required"


def is_empty_answer(value: Any) -> bool:
    """None、空字符串、空列表视为未作答；数值 0 视为已作答"""
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, (str, list, tuple, set, dict)):
        return len(value) == 0
    return False


def _stringify(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(_stringify(v) for v in value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_visible(question: Question, answers: Mapping[str, Any]) -> bool:
    """
    判断题目是否显示

    只看依赖题目的原始答案，不递归检查依赖题目本身是否可见。
    """
    rule = question.conditional_logic
    if rule is None:
        return True

    dependent = answers.get(rule.depends_on)
    if is_empty_answer(dependent):
        return False

    if rule.condition == ConditionOperator.EQUALS.value:
        return dependent == rule.value
    if rule.condition == ConditionOperator.NOT_EQUALS.value:
        return dependent != rule.value
    if rule.condition == ConditionOperator.CONTAINS.value:
        return rule.value.lower() in _stringify(dependent).lower()
    # 未知运算符默认显示
    return True


def validate_answer(question: Question, answer: Any) -> Optional[str]:
    """校验单题答案，返回第一条错误信息或 None"""
    if question.required and is_empty_answer(answer):
        return REQUIRED_MESSAGE

    rule = question.validation
    if rule is None or is_empty_answer(answer):
        return None

    if isinstance(answer, str):
        if rule.min_length and len(answer) < rule.min_length:
            return f"Minimum length is {rule.min_length} characters"
        if rule.max_length and len(answer) > rule.max_length:
            return f"Maximum length is {rule.max_length} characters"
        if rule.pattern and re.fullmatch(rule.pattern, answer) is None:
            return "Invalid format"

    if isinstance(answer, (int, float)) and not isinstance(answer, bool):
        if rule.min is not None and answer < rule.min:
            return f"Minimum value is {_stringify(rule.min)}"
        if rule.max is not None and answer > rule.max:
            return f"Maximum value is {_stringify(rule.max)}"

    return None


def visible_questions(section: AssessmentSection, answers: Mapping[str, Any]) -> List[Question]:
    return [q for q in section.questions if is_visible(q, answers)]


def can_advance(section: AssessmentSection, answers: Mapping[str, Any]) -> bool:
    """
    分区完成判定

    只检查可见必答题是否有答案，不做完整校验（超出范围的数值也允许前进）。
    """
    return all(
        not is_empty_answer(answers.get(q.id))
        for q in visible_questions(section, answers)
        if q.required
    )


def section_errors(section: AssessmentSection, answers: Mapping[str, Any]) -> Dict[str, str]:
    """分区内可见题目的校验错误（题目ID -> 错误信息）"""
    errors = {}
    for question in visible_questions(section, answers):
        error = validate_answer(question, answers.get(question.id))
        if error:
            errors[question.id] = error
    return errors


def count_questions(sections: Iterable[AssessmentSection]) -> int:
    """题目总数（不考虑可见性）"""
    return sum(len(s.questions) for s in sections)


def calculate_progress(sections: Iterable[AssessmentSection], answers: Mapping[str, Any]) -> float:
    """
    作答进度百分比

    分母为全部题目数，分子为答案字典中的键数量；
    已隐藏题目遗留的答案同样计入分子。
    """
    total = count_questions(sections)
    if total == 0:
        return 0.0
    return len(answers) / total * 100


def calculate_score(sections: Iterable[AssessmentSection], answers: Mapping[str, Any]) -> int:
    """提交得分：进度百分比四舍五入（完成度，而非正确率）"""
    return math.floor(calculate_progress(sections, answers) + 0.5)
