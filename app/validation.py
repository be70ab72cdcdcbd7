"""
Record validation for surveys, questions, conditions and answers.

Each function returns a list of error messages; an empty list means the
record is valid. Endpoints turn a non-empty list into a 400 response.
"""

from typing import Any, Iterable, List, Optional

from app.conditional_logic.constants import (
    CHOICE_QUESTION_TYPES,
    CONDITION_OPERATOR_VALUES,
    CONDITION_TYPE_VALUES,
    QUESTION_TYPE_VALUES,
    RANGE_QUESTION_TYPES,
    VALUELESS_OPERATORS,
)

TITLE_MAX_LENGTH = 255


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def validate_survey_data(title: Optional[str]) -> List[str]:
    errors = []
    if _is_blank(title):
        errors.append("Title is required")
    elif len(title) > TITLE_MAX_LENGTH:
        errors.append(f"Title must be less than {TITLE_MAX_LENGTH} characters")
    return errors


def validate_question_data(
    question_text: Optional[str],
    question_type: Optional[str],
    options: Optional[list],
    validation_rules: Optional[dict],
) -> List[str]:
    errors = []

    if _is_blank(question_text):
        errors.append("Question text is required")

    if question_type not in QUESTION_TYPE_VALUES:
        errors.append("Valid question type is required")
        return errors

    if question_type in CHOICE_QUESTION_TYPES and not options:
        errors.append(f"{question_type} questions must have at least one option")

    if question_type in RANGE_QUESTION_TYPES:
        if not validation_rules or validation_rules.get("max_value") is None:
            errors.append(f"{question_type} questions must have a maximum value")

    return errors


def validate_condition_data(condition: Any, survey_question_ids: Iterable[int]) -> List[str]:
    """
    ``survey_question_ids`` are the ids of the questions that belong to the
    condition's survey. Cycles are checked separately since they are a
    conflict with existing conditions rather than a malformed record.
    """
    errors = []
    question_ids = set(survey_question_ids)

    if condition.source_question_id == condition.target_question_id:
        errors.append("Source and target questions cannot be the same")

    if condition.source_question_id not in question_ids:
        errors.append("Source question must belong to the survey")
    if condition.target_question_id not in question_ids:
        errors.append("Target question must belong to the survey")

    if condition.condition_type not in CONDITION_TYPE_VALUES:
        errors.append("Valid condition type is required")

    if condition.condition_operator not in CONDITION_OPERATOR_VALUES:
        errors.append("Valid condition operator is required")
    elif condition.condition_operator not in VALUELESS_OPERATORS and _is_blank(
        condition.condition_value
    ):
        errors.append("Condition value is required")

    return errors


def validate_answer_data(answer: Any, survey_question_ids: Iterable[int]) -> List[str]:
    errors = []

    if answer.question_id not in set(survey_question_ids):
        errors.append(f"Question {answer.question_id} does not belong to this survey")

    # An explicit empty selection still counts as an answer
    if (
        _is_blank(answer.answer_text)
        and (answer.answer_value is None or answer.answer_value == "")
        and answer.selected_options is None
    ):
        errors.append("Answer data is required")

    return errors
