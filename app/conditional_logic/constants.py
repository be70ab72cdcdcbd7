from enum import Enum


class QuestionType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    DROPDOWN = "dropdown"
    RATING = "rating"
    SCALE = "scale"
    DATE = "date"
    EMAIL = "email"
    NUMBER = "number"


class ConditionType(str, Enum):
    SHOW_IF = "show_if"
    HIDE_IF = "hide_if"
    SKIP_TO = "skip_to"  # Declared for authoring, not interpreted by the resolver


class ConditionOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    GREATER_EQUAL = "greater_equal"
    LESS_EQUAL = "less_equal"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"


CHOICE_QUESTION_TYPES = frozenset(
    {QuestionType.RADIO.value, QuestionType.CHECKBOX.value, QuestionType.DROPDOWN.value}
)
RANGE_QUESTION_TYPES = frozenset({QuestionType.RATING.value, QuestionType.SCALE.value})

# Operators that do not need a condition_value
VALUELESS_OPERATORS = frozenset(
    {ConditionOperator.IS_EMPTY.value, ConditionOperator.IS_NOT_EMPTY.value}
)

QUESTION_TYPE_VALUES = frozenset(t.value for t in QuestionType)
CONDITION_TYPE_VALUES = frozenset(t.value for t in ConditionType)
CONDITION_OPERATOR_VALUES = frozenset(o.value for o in ConditionOperator)
