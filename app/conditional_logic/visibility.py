"""
Visibility resolver.

Computes, from scratch on every call, which questions a respondent should
currently see. Visibility is never stored; callers re-run the resolver after
every answer change.
"""

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union

from app.conditional_logic.constants import ConditionType
from app.conditional_logic.evaluator import evaluate_condition

AnswerInput = Union[Mapping[Any, Any], Iterable[Any]]


def index_answers(answers: AnswerInput) -> Dict[Any, Any]:
    """Builds a ``question_id -> answer`` lookup. The last answer for a question wins."""
    if answers is None:
        return {}
    if isinstance(answers, Mapping):
        return dict(answers)
    return {answer.question_id: answer for answer in answers}


def group_conditions_by_target(conditions: Iterable[Any]) -> Dict[Any, List[Any]]:
    grouped: Dict[Any, List[Any]] = defaultdict(list)
    for condition in conditions or ():
        grouped[condition.target_question_id].append(condition)
    return grouped


def should_show(target_conditions: Iterable[Any], answer_map: Mapping[Any, Any]) -> bool:
    """
    Combines every condition aimed at one question with logical AND.

    An unmet ``show_if`` or a met ``hide_if`` hides the question. A ``show_if``
    whose source is unanswered also hides it, while a ``hide_if`` with an
    unanswered source has no effect. ``skip_to`` never changes visibility.
    """
    visible = True
    for condition in target_conditions:
        condition_type = condition.condition_type
        verdict = evaluate_condition(condition, answer_map.get(condition.source_question_id))

        if condition_type == ConditionType.SHOW_IF:
            visible = visible and verdict.met
        elif condition_type == ConditionType.HIDE_IF and not verdict.source_absent:
            visible = visible and not verdict.met
    return visible


def resolve_visible(
    questions: Sequence[Any], answers: AnswerInput, conditions: Iterable[Any]
) -> List[Any]:
    """
    Returns the questions that should be shown, in the order they were given.

    ``questions`` is expected in ``order_index`` order, as supplied by the
    question store. ``answers`` is either a mapping keyed by question id or an
    iterable of answer objects with a ``question_id``.
    """
    answer_map = index_answers(answers)
    conditions_by_target = group_conditions_by_target(conditions)

    return [
        question
        for question in questions
        if should_show(conditions_by_target.get(question.id, ()), answer_map)
    ]
