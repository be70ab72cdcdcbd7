from app.conditional_logic.constants import (
    ConditionOperator,
    ConditionType,
    QuestionType,
)
from app.conditional_logic.evaluator import ConditionVerdict, evaluate_condition
from app.conditional_logic.graph import find_cycle, would_create_cycle
from app.conditional_logic.navigation import (
    NavigationState,
    clamp_index,
    navigation_state,
    next_index,
    previous_index,
)
from app.conditional_logic.normalizer import NormalizedAnswer, normalize_answer
from app.conditional_logic.operators import apply_operator
from app.conditional_logic.visibility import (
    index_answers,
    resolve_visible,
)

__all__ = [
    "ConditionOperator",
    "ConditionType",
    "ConditionVerdict",
    "NavigationState",
    "NormalizedAnswer",
    "QuestionType",
    "apply_operator",
    "clamp_index",
    "evaluate_condition",
    "find_cycle",
    "index_answers",
    "navigation_state",
    "next_index",
    "normalize_answer",
    "previous_index",
    "resolve_visible",
    "would_create_cycle",
]
