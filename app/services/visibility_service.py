"""
Glue between the stores and the visibility engine.

The server and the stateless preview both go through ``build_visibility`` so
they always run the same rules over the same question and condition lists.
"""

from typing import Any, Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app import schemas
from app.conditional_logic import navigation_state, resolve_visible
from app.core.logging import get_logger
from app.crud import crud_condition, crud_question

logger = get_logger(__name__)


async def build_visibility(
    db: AsyncSession,
    survey_id: int,
    answers: Iterable[Any],
    current_index: Optional[int] = 0,
    response_id: Optional[int] = None,
) -> schemas.VisibilityOut:
    questions = await crud_question.get_questions_for_survey(db, survey_id)
    conditions = await crud_condition.list_conditions_for_survey(db, survey_id)

    visible = resolve_visible(questions, answers, conditions)
    navigation = navigation_state(visible, current_index)
    logger.debug(
        "Survey %s: %d of %d questions visible", survey_id, len(visible), len(questions)
    )

    return schemas.VisibilityOut(
        survey_id=survey_id,
        response_id=response_id,
        visible_question_ids=[question.id for question in visible],
        questions=[schemas.QuestionOut.model_validate(question) for question in visible],
        total_questions=len(questions),
        navigation=schemas.NavigationOut.model_validate(navigation),
    )
