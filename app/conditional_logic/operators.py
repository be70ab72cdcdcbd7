"""
Comparison operators used by conditions.

Every operator has the signature ``(scalar, options, condition_value) -> bool``
and never raises: malformed input makes the comparison false.
"""

import math
from typing import Any, Callable, Dict, Optional, Sequence

from app.conditional_logic.constants import ConditionOperator
from app.core.logging import get_logger

logger = get_logger(__name__)

OperatorFunc = Callable[[Any, Sequence[Any], Any], bool]


def as_text(value: Any) -> str:
    """String form of an answer or condition value for text comparisons."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_number(value: Any) -> Optional[float]:
    """Parses a number, returning None for anything that is not one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        # Digit separators are not part of an answer's number
        if not text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number):
        return None
    return number


def equals(scalar, options, condition_value) -> bool:
    # Multi-select answers are compared through the scalar only.
    return as_text(scalar).lower() == as_text(condition_value).lower()


def not_equals(scalar, options, condition_value) -> bool:
    return not equals(scalar, options, condition_value)


def contains(scalar, options, condition_value) -> bool:
    if condition_value is None:
        return False
    needle = as_text(condition_value).lower()
    if options:
        return any(needle in as_text(option).lower() for option in options)
    return needle in as_text(scalar).lower()


def not_contains(scalar, options, condition_value) -> bool:
    if condition_value is None:
        return False
    return not contains(scalar, options, condition_value)


def _numeric(compare: Callable[[float, float], bool]) -> OperatorFunc:
    def operator(scalar, options, condition_value) -> bool:
        answer_number = to_number(scalar)
        condition_number = to_number(condition_value)
        if answer_number is None or condition_number is None:
            logger.debug(
                "Non-numeric operand (answer=%r, condition=%r), comparison is false",
                scalar,
                condition_value,
            )
            return False
        return compare(answer_number, condition_number)

    return operator


greater_than = _numeric(lambda a, b: a > b)
less_than = _numeric(lambda a, b: a < b)
greater_equal = _numeric(lambda a, b: a >= b)
less_equal = _numeric(lambda a, b: a <= b)


def is_empty(scalar, options, condition_value) -> bool:
    if options:
        # A non-empty selection is never empty.
        return len(options) == 0
    # "0" and "false" are answers, only blank text is empty
    return as_text(scalar).strip() == ""


def is_not_empty(scalar, options, condition_value) -> bool:
    return not is_empty(scalar, options, condition_value)


OPERATORS: Dict[str, OperatorFunc] = {
    ConditionOperator.EQUALS.value: equals,
    ConditionOperator.NOT_EQUALS.value: not_equals,
    ConditionOperator.CONTAINS.value: contains,
    ConditionOperator.NOT_CONTAINS.value: not_contains,
    ConditionOperator.GREATER_THAN.value: greater_than,
    ConditionOperator.LESS_THAN.value: less_than,
    ConditionOperator.GREATER_EQUAL.value: greater_equal,
    ConditionOperator.LESS_EQUAL.value: less_equal,
    ConditionOperator.IS_EMPTY.value: is_empty,
    ConditionOperator.IS_NOT_EMPTY.value: is_not_empty,
}


def apply_operator(operator: Any, scalar: Any, options: Sequence[Any], condition_value: Any) -> bool:
    """Dispatches to the named operator. Unknown operators evaluate to False."""
    key = operator.value if isinstance(operator, ConditionOperator) else operator
    func = OPERATORS.get(key) if isinstance(key, str) else None
    if func is None:
        logger.debug("Unknown condition operator %r, condition is not met", operator)
        return False
    return func(scalar, options or [], condition_value)
