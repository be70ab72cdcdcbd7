from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

AnswerScalar = Union[str, int, float]


# --- Surveys ---


class SurveyBase(BaseModel):
    title: str = Field(..., max_length=255)
    description: Optional[str] = None
    creator_id: Optional[int] = None
    is_active: bool = True
    allow_multiple_responses: bool = False
    requires_login: bool = False


class SurveyCreate(SurveyBase):
    pass


class SurveyUpdate(BaseModel):
    """Partial update, only the fields that were sent are applied."""

    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    is_active: Optional[bool] = None
    allow_multiple_responses: Optional[bool] = None
    requires_login: Optional[bool] = None


class SurveyOut(SurveyBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SurveyListItem(SurveyOut):
    question_count: int = 0
    response_count: int = 0


# --- Questions ---


class OptionCreate(BaseModel):
    option_text: str = Field(..., min_length=1, max_length=255)
    option_value: Optional[str] = Field(default=None, max_length=255)


class OptionOut(BaseModel):
    id: int
    option_text: str
    option_value: str
    order_index: int

    model_config = ConfigDict(from_attributes=True)


class QuestionBase(BaseModel):
    question_text: str
    question_type: str
    is_required: bool = False
    order_index: int
    validation_rules: Optional[Dict[str, Any]] = None


class QuestionCreate(QuestionBase):
    survey_id: int
    options: List[OptionCreate] = Field(default_factory=list)


class QuestionUpdate(BaseModel):
    question_text: Optional[str] = None
    question_type: Optional[str] = None
    is_required: Optional[bool] = None
    order_index: Optional[int] = None
    validation_rules: Optional[Dict[str, Any]] = None
    options: Optional[List[OptionCreate]] = None  # Replaces all options when sent


class QuestionOut(QuestionBase):
    id: int
    survey_id: int
    options: List[OptionOut] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class QuestionOrder(BaseModel):
    question_id: int
    order_index: int


class QuestionReorderRequest(BaseModel):
    question_orders: List[QuestionOrder]


# --- Conditions ---


class ConditionBase(BaseModel):
    survey_id: int
    source_question_id: int
    target_question_id: int
    condition_type: str
    condition_operator: str
    condition_value: Optional[str] = None


class ConditionCreate(ConditionBase):
    pass


class ConditionOut(ConditionBase):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SurveyDetail(SurveyOut):
    questions: List[QuestionOut] = Field(default_factory=list)
    conditions: List[ConditionOut] = Field(default_factory=list)


# --- Answers & responses ---


class AnswerValue(BaseModel):
    answer_text: Optional[str] = None
    answer_value: Optional[AnswerScalar] = None
    selected_options: Optional[List[AnswerScalar]] = None

    @field_validator("answer_value", mode="before")
    @classmethod
    def bool_as_text(cls, v):
        # true/false would otherwise be coerced into 1/0
        if isinstance(v, bool):
            return "true" if v else "false"
        return v


class AnswerIn(AnswerValue):
    question_id: int


class AnswerOut(BaseModel):
    id: int
    question_id: int
    answer_text: Optional[str] = None
    answer_value: Optional[str] = None
    selected_options: Optional[List[Any]] = None
    question_text: Optional[str] = None
    question_type: Optional[str] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ResponseStart(BaseModel):
    survey_id: int
    respondent_id: Optional[int] = None
    respondent_email: Optional[str] = Field(default=None, max_length=255)


class ResponseOut(BaseModel):
    id: int
    survey_id: int
    respondent_id: Optional[int] = None
    respondent_email: Optional[str] = None
    is_complete: bool
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ResponseListItem(ResponseOut):
    answer_count: int = 0


class ResponseDetail(ResponseOut):
    answers: List[AnswerOut] = Field(default_factory=list)


class ResponseSubmit(BaseModel):
    answers: List[AnswerIn] = Field(default_factory=list)


# --- Visibility ---


class VisibilityPreviewRequest(BaseModel):
    answers: List[AnswerIn] = Field(default_factory=list)
    current_index: int = 0


class NavigationOut(BaseModel):
    index: int
    total: int
    current_question_id: Optional[int] = None
    progress: float
    has_previous: bool
    has_next: bool
    is_last: bool

    model_config = ConfigDict(from_attributes=True)


class VisibilityOut(BaseModel):
    survey_id: int
    response_id: Optional[int] = None
    visible_question_ids: List[int]
    questions: List[QuestionOut]
    total_questions: int
    navigation: NavigationOut


class MessageResponse(BaseModel):
    message: str
