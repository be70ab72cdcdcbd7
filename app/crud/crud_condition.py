from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app import models
from app.core.logging import get_logger
from app.schemas import ConditionCreate

logger = get_logger(__name__)


async def create_condition(
    db: AsyncSession, condition_in: ConditionCreate
) -> models.QuestionCondition:
    db_condition = models.QuestionCondition(**condition_in.model_dump())
    db.add(db_condition)
    await db.flush()
    await db.refresh(db_condition)
    logger.info(
        "Condition %s created: %s %s on question %s -> question %s",
        db_condition.id,
        db_condition.condition_type,
        db_condition.condition_operator,
        db_condition.source_question_id,
        db_condition.target_question_id,
    )
    return db_condition


async def get_condition(
    db: AsyncSession, condition_id: int
) -> Optional[models.QuestionCondition]:
    return await db.get(models.QuestionCondition, condition_id)


async def list_conditions_for_survey(
    db: AsyncSession, survey_id: int
) -> List[models.QuestionCondition]:
    result = await db.execute(
        select(models.QuestionCondition)
        .where(models.QuestionCondition.survey_id == survey_id)
        .order_by(
            models.QuestionCondition.source_question_id, models.QuestionCondition.id
        )
    )
    return list(result.scalars().all())


async def delete_condition(db: AsyncSession, db_condition: models.QuestionCondition) -> None:
    await db.delete(db_condition)
    await db.flush()
    logger.info("Condition %s deleted", db_condition.id)
