from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app import schemas
from app.conditional_logic.graph import condition_edges, would_create_cycle
from app.core.logging import get_logger
from app.crud import crud_condition, crud_question, crud_survey
from app.database import get_db_session
from app.validation import validate_condition_data

logger = get_logger(__name__)

router = APIRouter()


@router.post("", response_model=schemas.ConditionOut, status_code=status.HTTP_201_CREATED)
async def create_condition(
    condition_in: schemas.ConditionCreate, db: AsyncSession = Depends(get_db_session)
):
    if not await crud_survey.get_survey(db, condition_in.survey_id):
        raise HTTPException(status_code=404, detail="Survey not found")

    question_ids = await crud_question.get_question_ids_for_survey(db, condition_in.survey_id)
    errors = validate_condition_data(condition_in, question_ids)
    if errors:
        logger.warning("Rejected condition for survey %s: %s", condition_in.survey_id, errors)
        raise HTTPException(status_code=400, detail=errors)

    existing = await crud_condition.list_conditions_for_survey(db, condition_in.survey_id)
    if would_create_cycle(
        condition_edges(existing),
        condition_in.source_question_id,
        condition_in.target_question_id,
    ):
        logger.warning(
            "Rejected condition %s -> %s in survey %s: cycle",
            condition_in.source_question_id,
            condition_in.target_question_id,
            condition_in.survey_id,
        )
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Condition would create a cycle between questions",
        )

    return await crud_condition.create_condition(db, condition_in)


@router.get("/survey/{survey_id}", response_model=List[schemas.ConditionOut])
async def list_conditions(survey_id: int, db: AsyncSession = Depends(get_db_session)):
    if not await crud_survey.get_survey(db, survey_id):
        raise HTTPException(status_code=404, detail="Survey not found")
    return await crud_condition.list_conditions_for_survey(db, survey_id)


@router.delete("/{condition_id}", response_model=schemas.MessageResponse)
async def delete_condition(condition_id: int, db: AsyncSession = Depends(get_db_session)):
    db_condition = await crud_condition.get_condition(db, condition_id)
    if not db_condition:
        raise HTTPException(status_code=404, detail="Condition not found")
    await crud_condition.delete_condition(db, db_condition)
    return schemas.MessageResponse(message="Condition deleted successfully")
