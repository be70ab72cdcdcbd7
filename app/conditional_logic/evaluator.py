from dataclasses import dataclass
from typing import Any

from app.conditional_logic.normalizer import normalize_answer
from app.conditional_logic.operators import apply_operator


@dataclass(frozen=True)
class ConditionVerdict:
    met: bool
    source_absent: bool = False


SOURCE_ABSENT = ConditionVerdict(met=False, source_absent=True)


def evaluate_condition(condition: Any, source_answer: Any) -> ConditionVerdict:
    """
    Evaluates one condition against the answer to its source question.

    ``source_answer`` is ``None`` when the source question has not been
    answered; the operator is then not consulted and the verdict carries
    ``source_absent=True`` so the resolver can apply its missing-answer rule.
    """
    normalized = normalize_answer(source_answer)
    if normalized is None:
        return SOURCE_ABSENT

    met = apply_operator(
        getattr(condition, "condition_operator", None),
        normalized.scalar,
        normalized.options,
        getattr(condition, "condition_value", None),
    )
    return ConditionVerdict(met=met)
