"""
Turns a stored or submitted answer into the ``(scalar, options)`` pair the
operator functions work on.
"""

from typing import Any, List, NamedTuple, Optional

from app.conditional_logic.operators import as_text


class NormalizedAnswer(NamedTuple):
    scalar: Optional[str]
    options: List[Any]


def normalize_answer(answer: Any) -> Optional[NormalizedAnswer]:
    """
    Returns ``None`` when there is no answer at all, so callers can tell
    "not answered yet" apart from "answered with an empty value".

    ``answer`` may be an ORM ``QuestionAnswer``, a pydantic schema or any
    object exposing ``answer_value``, ``answer_text`` and ``selected_options``.
    The scalar comes back in the text form answers are stored in, so a
    submitted ``0`` and a stored ``"0"`` evaluate the same way.
    """
    if answer is None:
        return None

    scalar = getattr(answer, "answer_value", None)
    if scalar is None or scalar == "":
        scalar = getattr(answer, "answer_text", None)
    if scalar is not None:
        scalar = as_text(scalar)

    options = getattr(answer, "selected_options", None) or []
    if not isinstance(options, (list, tuple)):
        # A single stored option instead of a list
        options = [options]

    return NormalizedAnswer(scalar=scalar, options=list(options))
