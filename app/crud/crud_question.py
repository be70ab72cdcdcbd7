from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from app import models
from app.core.logging import get_logger
from app.schemas import OptionCreate, QuestionCreate, QuestionOrder, QuestionUpdate

logger = get_logger(__name__)


def _build_options(options: Sequence[OptionCreate]) -> List[models.QuestionOption]:
    # The option value defaults to its display text
    return [
        models.QuestionOption(
            option_text=option.option_text,
            option_value=option.option_value or option.option_text,
            order_index=index,
        )
        for index, option in enumerate(options)
    ]


async def get_question(db: AsyncSession, question_id: int) -> Optional[models.Question]:
    result = await db.execute(
        select(models.Question)
        .where(models.Question.id == question_id)
        .options(selectinload(models.Question.options))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_questions_for_survey(
    db: AsyncSession, survey_id: int
) -> List[models.Question]:
    """Questions of a survey in ``order_index`` order, options loaded."""
    result = await db.execute(
        select(models.Question)
        .where(models.Question.survey_id == survey_id)
        .options(selectinload(models.Question.options))
        .order_by(models.Question.order_index, models.Question.id)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def get_question_ids_for_survey(db: AsyncSession, survey_id: int) -> List[int]:
    result = await db.execute(
        select(models.Question.id).where(models.Question.survey_id == survey_id)
    )
    return list(result.scalars().all())


async def order_index_taken(
    db: AsyncSession, survey_id: int, order_index: int, exclude_id: Optional[int] = None
) -> bool:
    stmt = select(models.Question.id).where(
        models.Question.survey_id == survey_id,
        models.Question.order_index == order_index,
    )
    if exclude_id is not None:
        stmt = stmt.where(models.Question.id != exclude_id)
    result = await db.execute(stmt.limit(1))
    return result.scalar_one_or_none() is not None


async def create_question(db: AsyncSession, question_in: QuestionCreate) -> models.Question:
    """Creates the question and its options in the same transaction."""
    db_question = models.Question(
        survey_id=question_in.survey_id,
        question_text=question_in.question_text,
        question_type=question_in.question_type,
        is_required=question_in.is_required,
        order_index=question_in.order_index,
        validation_rules=question_in.validation_rules or {},
        options=_build_options(question_in.options),
    )
    db.add(db_question)
    await db.flush()
    logger.info(
        "Question %s created in survey %s with %d options",
        db_question.id,
        db_question.survey_id,
        len(question_in.options),
    )
    return await get_question(db, db_question.id)


async def update_question(
    db: AsyncSession, db_question: models.Question, question_in: QuestionUpdate
) -> models.Question:
    data = question_in.model_dump(exclude_unset=True, exclude={"options"})
    for field, value in data.items():
        setattr(db_question, field, value)

    if question_in.options is not None:
        # delete-orphan removes the previous options on flush
        db_question.options = _build_options(question_in.options)

    await db.flush()
    logger.info("Question %s updated", db_question.id)
    return await get_question(db, db_question.id)


async def delete_question(db: AsyncSession, question_id: int) -> None:
    """Removes the question together with its options, answers and every condition referencing it."""
    await db.execute(
        delete(models.QuestionCondition).where(
            or_(
                models.QuestionCondition.source_question_id == question_id,
                models.QuestionCondition.target_question_id == question_id,
            )
        )
    )
    await db.execute(
        delete(models.QuestionAnswer).where(models.QuestionAnswer.question_id == question_id)
    )
    await db.execute(
        delete(models.QuestionOption).where(models.QuestionOption.question_id == question_id)
    )
    await db.execute(delete(models.Question).where(models.Question.id == question_id))
    logger.info("Question %s deleted", question_id)


async def reorder_questions(
    db: AsyncSession, survey_id: int, question_orders: Sequence[QuestionOrder]
) -> List[models.Question]:
    questions: Dict[int, models.Question] = {
        q.id: q for q in await get_questions_for_survey(db, survey_id)
    }
    for item in question_orders:
        question = questions.get(item.question_id)
        if question is not None:
            question.order_index = item.order_index
    await db.flush()
    logger.info("Reordered %d questions in survey %s", len(question_orders), survey_id)
    return await get_questions_for_survey(db, survey_id)
