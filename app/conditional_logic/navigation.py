"""
Navigation helpers for the presentation side.

The current position is always derived from the freshly resolved visible
list and clamped into its bounds, so a shrinking list can never leave the
index pointing past the end.
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence


@dataclass(frozen=True)
class NavigationState:
    index: int
    total: int
    current_question_id: Optional[Any]
    progress: float
    has_previous: bool
    has_next: bool
    is_last: bool


def clamp_index(index: Optional[int], total: int) -> int:
    if total <= 0:
        return 0
    if index is None or index < 0:
        return 0
    return min(index, total - 1)


def navigation_state(visible_questions: Sequence[Any], index: Optional[int] = 0) -> NavigationState:
    total = len(visible_questions)
    current = clamp_index(index, total)
    if total == 0:
        return NavigationState(
            index=0,
            total=0,
            current_question_id=None,
            progress=0.0,
            has_previous=False,
            has_next=False,
            is_last=False,
        )
    return NavigationState(
        index=current,
        total=total,
        current_question_id=visible_questions[current].id,
        progress=(current + 1) / total,
        has_previous=current > 0,
        has_next=current < total - 1,
        is_last=current == total - 1,
    )


def next_index(index: Optional[int], total: int) -> int:
    return clamp_index(clamp_index(index, total) + 1, total)


def previous_index(index: Optional[int], total: int) -> int:
    return clamp_index(clamp_index(index, total) - 1, total)
