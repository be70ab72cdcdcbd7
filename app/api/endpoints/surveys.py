from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app import schemas
from app.core.logging import get_logger
from app.crud import crud_condition, crud_question, crud_survey
from app.database import get_db_session
from app.services.visibility_service import build_visibility
from app.validation import validate_survey_data

logger = get_logger(__name__)

router = APIRouter()


async def get_survey_or_404(db: AsyncSession, survey_id: int):
    db_survey = await crud_survey.get_survey(db, survey_id)
    if not db_survey:
        raise HTTPException(status_code=404, detail="Survey not found")
    return db_survey


@router.post("", response_model=schemas.SurveyOut, status_code=status.HTTP_201_CREATED)
async def create_survey(
    survey_in: schemas.SurveyCreate, db: AsyncSession = Depends(get_db_session)
):
    errors = validate_survey_data(survey_in.title)
    if errors:
        logger.warning("Rejected survey: %s", errors)
        raise HTTPException(status_code=400, detail=errors)
    return await crud_survey.create_survey(db, survey_in)


@router.get("", response_model=List[schemas.SurveyListItem])
async def list_surveys(
    creator_id: Optional[int] = None, db: AsyncSession = Depends(get_db_session)
):
    rows = await crud_survey.list_surveys(db, creator_id=creator_id)
    return [
        schemas.SurveyListItem(
            **schemas.SurveyOut.model_validate(survey).model_dump(),
            question_count=question_count,
            response_count=response_count,
        )
        for survey, question_count, response_count in rows
    ]


@router.get("/{survey_id}", response_model=schemas.SurveyDetail)
async def get_survey(survey_id: int, db: AsyncSession = Depends(get_db_session)):
    """Survey with its questions in order (options included) and its conditions."""
    db_survey = await get_survey_or_404(db, survey_id)
    questions = await crud_question.get_questions_for_survey(db, survey_id)
    conditions = await crud_condition.list_conditions_for_survey(db, survey_id)
    return schemas.SurveyDetail(
        **schemas.SurveyOut.model_validate(db_survey).model_dump(),
        questions=[schemas.QuestionOut.model_validate(q) for q in questions],
        conditions=[schemas.ConditionOut.model_validate(c) for c in conditions],
    )


@router.put("/{survey_id}", response_model=schemas.SurveyOut)
async def update_survey(
    survey_id: int,
    survey_in: schemas.SurveyUpdate,
    db: AsyncSession = Depends(get_db_session),
):
    db_survey = await get_survey_or_404(db, survey_id)
    if "title" in survey_in.model_fields_set:
        errors = validate_survey_data(survey_in.title)
        if errors:
            raise HTTPException(status_code=400, detail=errors)
    return await crud_survey.update_survey(db, db_survey, survey_in)


@router.delete("/{survey_id}", response_model=schemas.MessageResponse)
async def delete_survey(survey_id: int, db: AsyncSession = Depends(get_db_session)):
    await get_survey_or_404(db, survey_id)
    await crud_survey.delete_survey(db, survey_id)
    return schemas.MessageResponse(message="Survey deleted successfully")


@router.post("/{survey_id}/visible-questions", response_model=schemas.VisibilityOut)
async def preview_visible_questions(
    survey_id: int,
    preview: schemas.VisibilityPreviewRequest,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Resolves visibility for answers held by the client, without storing them.
    Uses the same rules as the stored-response endpoints.
    """
    await get_survey_or_404(db, survey_id)
    return await build_visibility(
        db, survey_id, preview.answers, current_index=preview.current_index
    )
