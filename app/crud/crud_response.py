from typing import List, Optional, Sequence, Tuple

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app import models
from app.conditional_logic.operators import as_text
from app.core.logging import get_logger
from app.schemas import AnswerValue, ResponseStart

logger = get_logger(__name__)


async def start_response(
    db: AsyncSession,
    response_in: ResponseStart,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> models.SurveyResponse:
    db_response = models.SurveyResponse(
        survey_id=response_in.survey_id,
        respondent_id=response_in.respondent_id,
        respondent_email=response_in.respondent_email,
        ip_address=ip_address,
        user_agent=user_agent,
        is_complete=False,
    )
    db.add(db_response)
    await db.flush()
    await db.refresh(db_response)
    logger.info(
        "Response %s started for survey %s", db_response.id, db_response.survey_id
    )
    return db_response


async def get_response(db: AsyncSession, response_id: int) -> Optional[models.SurveyResponse]:
    result = await db.execute(
        select(models.SurveyResponse)
        .where(models.SurveyResponse.id == response_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def find_response_by_email(
    db: AsyncSession, survey_id: int, email: str
) -> Optional[models.SurveyResponse]:
    result = await db.execute(
        select(models.SurveyResponse)
        .where(
            models.SurveyResponse.survey_id == survey_id,
            models.SurveyResponse.respondent_email == email,
        )
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_answers(db: AsyncSession, response_id: int) -> List[models.QuestionAnswer]:
    result = await db.execute(
        select(models.QuestionAnswer)
        .where(models.QuestionAnswer.response_id == response_id)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def get_answers_with_questions(
    db: AsyncSession, response_id: int
) -> List[Tuple[models.QuestionAnswer, models.Question]]:
    """Answers joined with their question, in survey order."""
    result = await db.execute(
        select(models.QuestionAnswer, models.Question)
        .join(models.Question, models.Question.id == models.QuestionAnswer.question_id)
        .where(models.QuestionAnswer.response_id == response_id)
        .order_by(models.Question.order_index, models.Question.id)
        .execution_options(populate_existing=True)
    )
    return [(answer, question) for answer, question in result.all()]


async def list_responses_for_survey(
    db: AsyncSession, survey_id: int
) -> List[Tuple[models.SurveyResponse, int]]:
    answer_counts = (
        select(
            models.QuestionAnswer.response_id,
            func.count(models.QuestionAnswer.id).label("n"),
        )
        .group_by(models.QuestionAnswer.response_id)
        .subquery()
    )
    result = await db.execute(
        select(models.SurveyResponse, func.coalesce(answer_counts.c.n, 0))
        .outerjoin(answer_counts, answer_counts.c.response_id == models.SurveyResponse.id)
        .where(models.SurveyResponse.survey_id == survey_id)
        .order_by(models.SurveyResponse.started_at, models.SurveyResponse.id)
    )
    return [(response, count) for response, count in result.all()]


def _apply_answer(db_answer: models.QuestionAnswer, answer_in: AnswerValue) -> None:
    db_answer.answer_text = answer_in.answer_text
    db_answer.answer_value = (
        None if answer_in.answer_value is None else as_text(answer_in.answer_value)
    )
    db_answer.selected_options = (
        None if answer_in.selected_options is None else list(answer_in.selected_options)
    )


async def save_answer(
    db: AsyncSession, response_id: int, question_id: int, answer_in: AnswerValue
) -> models.QuestionAnswer:
    """Records the answer for a question, overwriting any earlier one."""
    result = await db.execute(
        select(models.QuestionAnswer).where(
            models.QuestionAnswer.response_id == response_id,
            models.QuestionAnswer.question_id == question_id,
        )
    )
    db_answer = result.scalar_one_or_none()
    if db_answer is None:
        db_answer = models.QuestionAnswer(response_id=response_id, question_id=question_id)
        db.add(db_answer)
    _apply_answer(db_answer, answer_in)
    await db.flush()
    logger.info("Answer for question %s recorded on response %s", question_id, response_id)
    return db_answer


async def clear_answer(db: AsyncSession, response_id: int, question_id: int) -> bool:
    result = await db.execute(
        delete(models.QuestionAnswer).where(
            models.QuestionAnswer.response_id == response_id,
            models.QuestionAnswer.question_id == question_id,
        )
    )
    cleared = result.rowcount > 0
    if cleared:
        logger.info("Answer for question %s cleared on response %s", question_id, response_id)
    return cleared


async def submit_response(
    db: AsyncSession, db_response: models.SurveyResponse, answers: Sequence
) -> models.SurveyResponse:
    """
    Stores the final answer set and marks the response complete. Runs inside
    the request transaction, so either everything is persisted or nothing.
    """
    for answer_in in answers:
        await save_answer(db, db_response.id, answer_in.question_id, answer_in)

    db_response.is_complete = True
    db_response.completed_at = func.now()
    await db.flush()
    logger.info(
        "Response %s submitted with %d answers", db_response.id, len(answers)
    )
    return await get_response(db, db_response.id)
