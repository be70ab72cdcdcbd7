from typing import List, Optional, Tuple

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app import models
from app.core.logging import get_logger
from app.schemas import SurveyCreate, SurveyUpdate

logger = get_logger(__name__)


async def create_survey(db: AsyncSession, survey_in: SurveyCreate) -> models.Survey:
    db_survey = models.Survey(**survey_in.model_dump())
    db.add(db_survey)
    await db.flush()
    await db.refresh(db_survey)
    logger.info("Survey created with id %s", db_survey.id)
    return db_survey


async def get_survey(db: AsyncSession, survey_id: int) -> Optional[models.Survey]:
    result = await db.execute(
        select(models.Survey)
        .where(models.Survey.id == survey_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_surveys(
    db: AsyncSession, creator_id: Optional[int] = None
) -> List[Tuple[models.Survey, int, int]]:
    """Returns ``(survey, question_count, response_count)`` rows, newest first."""
    question_counts = (
        select(models.Question.survey_id, func.count(models.Question.id).label("n"))
        .group_by(models.Question.survey_id)
        .subquery()
    )
    response_counts = (
        select(
            models.SurveyResponse.survey_id,
            func.count(models.SurveyResponse.id).label("n"),
        )
        .group_by(models.SurveyResponse.survey_id)
        .subquery()
    )
    stmt = (
        select(
            models.Survey,
            func.coalesce(question_counts.c.n, 0),
            func.coalesce(response_counts.c.n, 0),
        )
        .outerjoin(question_counts, question_counts.c.survey_id == models.Survey.id)
        .outerjoin(response_counts, response_counts.c.survey_id == models.Survey.id)
        .order_by(models.Survey.created_at.desc(), models.Survey.id.desc())
    )
    if creator_id is not None:
        stmt = stmt.where(models.Survey.creator_id == creator_id)

    result = await db.execute(stmt)
    return [(survey, questions, responses) for survey, questions, responses in result.all()]


async def update_survey(
    db: AsyncSession, db_survey: models.Survey, survey_in: SurveyUpdate
) -> models.Survey:
    for field, value in survey_in.model_dump(exclude_unset=True).items():
        # Only the description may be cleared, the flags and title are not nullable
        if value is None and field != "description":
            continue
        setattr(db_survey, field, value)
    await db.flush()
    await db.refresh(db_survey)
    logger.info("Survey %s updated", db_survey.id)
    return db_survey


async def delete_survey(db: AsyncSession, survey_id: int) -> None:
    """Deletes the survey and everything it owns, children first."""
    response_ids = select(models.SurveyResponse.id).where(
        models.SurveyResponse.survey_id == survey_id
    )
    question_ids = select(models.Question.id).where(models.Question.survey_id == survey_id)

    await db.execute(
        delete(models.QuestionAnswer).where(
            models.QuestionAnswer.response_id.in_(response_ids)
        )
    )
    await db.execute(
        delete(models.SurveyResponse).where(models.SurveyResponse.survey_id == survey_id)
    )
    await db.execute(
        delete(models.QuestionCondition).where(
            models.QuestionCondition.survey_id == survey_id
        )
    )
    await db.execute(
        delete(models.QuestionOption).where(
            models.QuestionOption.question_id.in_(question_ids)
        )
    )
    await db.execute(delete(models.Question).where(models.Question.survey_id == survey_id))
    await db.execute(delete(models.Survey).where(models.Survey.id == survey_id))
    logger.info("Survey %s deleted", survey_id)
