from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app import schemas
from app.core.logging import get_logger
from app.crud import crud_question, crud_survey
from app.database import get_db_session
from app.validation import validate_question_data

logger = get_logger(__name__)

router = APIRouter()


async def get_question_or_404(db: AsyncSession, question_id: int):
    db_question = await crud_question.get_question(db, question_id)
    if not db_question:
        raise HTTPException(status_code=404, detail="Question not found")
    return db_question


@router.post("", response_model=schemas.QuestionOut, status_code=status.HTTP_201_CREATED)
async def create_question(
    question_in: schemas.QuestionCreate, db: AsyncSession = Depends(get_db_session)
):
    if not await crud_survey.get_survey(db, question_in.survey_id):
        raise HTTPException(status_code=404, detail="Survey not found")

    errors = validate_question_data(
        question_in.question_text,
        question_in.question_type,
        question_in.options,
        question_in.validation_rules,
    )
    if await crud_question.order_index_taken(
        db, question_in.survey_id, question_in.order_index
    ):
        errors.append("Order index is already used in this survey")
    if errors:
        logger.warning("Rejected question for survey %s: %s", question_in.survey_id, errors)
        raise HTTPException(status_code=400, detail=errors)

    return await crud_question.create_question(db, question_in)


@router.put("/reorder/{survey_id}", response_model=List[schemas.QuestionOut])
async def reorder_questions(
    survey_id: int,
    reorder_in: schemas.QuestionReorderRequest,
    db: AsyncSession = Depends(get_db_session),
):
    if not await crud_survey.get_survey(db, survey_id):
        raise HTTPException(status_code=404, detail="Survey not found")

    current = {
        q.id: q.order_index for q in await crud_question.get_questions_for_survey(db, survey_id)
    }
    unknown = [
        item.question_id
        for item in reorder_in.question_orders
        if item.question_id not in current
    ]
    if unknown:
        raise HTTPException(
            status_code=400,
            detail=[f"Question {question_id} does not belong to this survey" for question_id in unknown],
        )

    for item in reorder_in.question_orders:
        current[item.question_id] = item.order_index
    if len(set(current.values())) != len(current):
        raise HTTPException(status_code=400, detail=["Order indexes must be unique within a survey"])

    questions = await crud_question.reorder_questions(db, survey_id, reorder_in.question_orders)
    return [schemas.QuestionOut.model_validate(q) for q in questions]


@router.put("/{question_id}", response_model=schemas.QuestionOut)
async def update_question(
    question_id: int,
    question_in: schemas.QuestionUpdate,
    db: AsyncSession = Depends(get_db_session),
):
    db_question = await get_question_or_404(db, question_id)

    # Validate the question as it will look after the update
    sent = question_in.model_fields_set
    options = question_in.options if "options" in sent else db_question.options
    errors = validate_question_data(
        question_in.question_text if "question_text" in sent else db_question.question_text,
        question_in.question_type if "question_type" in sent else db_question.question_type,
        options,
        question_in.validation_rules if "validation_rules" in sent else db_question.validation_rules,
    )
    if "is_required" in sent and question_in.is_required is None:
        errors.append("Required flag must be true or false")
    if "order_index" in sent and question_in.order_index is None:
        errors.append("Order index must be a valid integer")
    elif "order_index" in sent and await crud_question.order_index_taken(
        db, db_question.survey_id, question_in.order_index, exclude_id=question_id
    ):
        errors.append("Order index is already used in this survey")
    if errors:
        logger.warning("Rejected update of question %s: %s", question_id, errors)
        raise HTTPException(status_code=400, detail=errors)

    return await crud_question.update_question(db, db_question, question_in)


@router.delete("/{question_id}", response_model=schemas.MessageResponse)
async def delete_question(question_id: int, db: AsyncSession = Depends(get_db_session)):
    await get_question_or_404(db, question_id)
    await crud_question.delete_question(db, question_id)
    return schemas.MessageResponse(message="Question deleted successfully")
