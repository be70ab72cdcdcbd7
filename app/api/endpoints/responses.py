from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app import schemas
from app.core.logging import get_logger
from app.crud import crud_question, crud_response, crud_survey
from app.database import get_db_session
from app.services.visibility_service import build_visibility
from app.validation import validate_answer_data

logger = get_logger(__name__)

router = APIRouter()


async def get_response_or_404(db: AsyncSession, response_id: int):
    db_response = await crud_response.get_response(db, response_id)
    if not db_response:
        raise HTTPException(status_code=404, detail="Response not found")
    return db_response


async def get_open_response(db: AsyncSession, response_id: int):
    """The response, as long as it has not been submitted yet."""
    db_response = await get_response_or_404(db, response_id)
    if db_response.is_complete:
        logger.warning("Rejected change to completed response %s", response_id)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Response has already been submitted",
        )
    return db_response


async def visibility_for_response(db: AsyncSession, db_response, current_index: int = 0):
    answers = await crud_response.get_answers(db, db_response.id)
    return await build_visibility(
        db,
        db_response.survey_id,
        answers,
        current_index=current_index,
        response_id=db_response.id,
    )


@router.post("/start", response_model=schemas.ResponseOut, status_code=status.HTTP_201_CREATED)
async def start_response(
    response_in: schemas.ResponseStart,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
):
    db_survey = await crud_survey.get_survey(db, response_in.survey_id)
    if not db_survey:
        raise HTTPException(status_code=404, detail="Survey not found")
    if not db_survey.is_active:
        raise HTTPException(status_code=400, detail="Survey is not accepting responses")

    if response_in.respondent_email and not db_survey.allow_multiple_responses:
        existing = await crud_response.find_response_by_email(
            db, db_survey.id, response_in.respondent_email
        )
        if existing:
            logger.warning(
                "Duplicate response for survey %s rejected (existing response %s)",
                db_survey.id,
                existing.id,
            )
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A response for this email already exists",
            )

    return await crud_response.start_response(
        db,
        response_in,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


@router.put("/{response_id}/answers/{question_id}", response_model=schemas.VisibilityOut)
async def save_answer(
    response_id: int,
    question_id: int,
    answer_in: schemas.AnswerValue,
    current_index: int = 0,
    db: AsyncSession = Depends(get_db_session),
):
    """Records (or overwrites) one answer and returns the recomputed visibility."""
    db_response = await get_open_response(db, response_id)

    answer = schemas.AnswerIn(question_id=question_id, **answer_in.model_dump())
    question_ids = await crud_question.get_question_ids_for_survey(db, db_response.survey_id)
    errors = validate_answer_data(answer, question_ids)
    if errors:
        raise HTTPException(status_code=400, detail=errors)

    await crud_response.save_answer(db, response_id, question_id, answer)
    return await visibility_for_response(db, db_response, current_index)


@router.delete("/{response_id}/answers/{question_id}", response_model=schemas.VisibilityOut)
async def clear_answer(
    response_id: int,
    question_id: int,
    current_index: int = 0,
    db: AsyncSession = Depends(get_db_session),
):
    db_response = await get_open_response(db, response_id)
    await crud_response.clear_answer(db, response_id, question_id)
    return await visibility_for_response(db, db_response, current_index)


@router.get("/{response_id}/visible-questions", response_model=schemas.VisibilityOut)
async def get_visible_questions(
    response_id: int, current_index: int = 0, db: AsyncSession = Depends(get_db_session)
):
    db_response = await get_response_or_404(db, response_id)
    return await visibility_for_response(db, db_response, current_index)


@router.post("/{response_id}/submit", response_model=schemas.ResponseOut)
async def submit_response(
    response_id: int,
    submission: schemas.ResponseSubmit,
    db: AsyncSession = Depends(get_db_session),
):
    db_response = await get_open_response(db, response_id)

    question_ids = await crud_question.get_question_ids_for_survey(db, db_response.survey_id)
    errors = []
    for answer in submission.answers:
        errors.extend(validate_answer_data(answer, question_ids))
    if errors:
        logger.warning("Rejected submission of response %s: %s", response_id, errors)
        raise HTTPException(status_code=400, detail=errors)

    return await crud_response.submit_response(db, db_response, submission.answers)


@router.get("/survey/{survey_id}", response_model=List[schemas.ResponseListItem])
async def list_responses(survey_id: int, db: AsyncSession = Depends(get_db_session)):
    if not await crud_survey.get_survey(db, survey_id):
        raise HTTPException(status_code=404, detail="Survey not found")
    rows = await crud_response.list_responses_for_survey(db, survey_id)
    return [
        schemas.ResponseListItem(
            **schemas.ResponseOut.model_validate(response).model_dump(),
            answer_count=answer_count,
        )
        for response, answer_count in rows
    ]


@router.get("/{response_id}", response_model=schemas.ResponseDetail)
async def get_response(response_id: int, db: AsyncSession = Depends(get_db_session)):
    db_response = await get_response_or_404(db, response_id)
    rows = await crud_response.get_answers_with_questions(db, response_id)
    answers = []
    for answer, question in rows:
        item = schemas.AnswerOut.model_validate(answer)
        item.question_text = question.question_text
        item.question_type = question.question_type
        answers.append(item)
    return schemas.ResponseDetail(
        **schemas.ResponseOut.model_validate(db_response).model_dump(),
        answers=answers,
    )
