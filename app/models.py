from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class Survey(Base):
    __tablename__ = "surveys"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    creator_id = Column(Integer, nullable=True, index=True)  # Owner, managed outside this service
    is_active = Column(Boolean, nullable=False, default=True)
    allow_multiple_responses = Column(Boolean, nullable=False, default=False)
    requires_login = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), onupdate=func.now(), server_default=func.now()
    )

    questions = relationship(
        "Question",
        back_populates="survey",
        cascade="all, delete-orphan",
        order_by="Question.order_index",
    )
    conditions = relationship(
        "QuestionCondition",
        back_populates="survey",
        cascade="all, delete-orphan",
        order_by="QuestionCondition.id",
    )
    responses = relationship(
        "SurveyResponse", back_populates="survey", cascade="all, delete-orphan"
    )


class Question(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    survey_id = Column(
        Integer, ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_text = Column(Text, nullable=False)
    question_type = Column(String(32), nullable=False)  # 'text', 'radio', 'checkbox' etc.
    is_required = Column(Boolean, nullable=False, default=False)
    order_index = Column(Integer, nullable=False, default=0)  # Declaration and navigation order
    validation_rules = Column(JSON, nullable=True)  # e.g. {"min_value": 1, "max_value": 5}
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), onupdate=func.now(), server_default=func.now()
    )

    survey = relationship("Survey", back_populates="questions")
    options = relationship(
        "QuestionOption",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="QuestionOption.order_index",
    )


class QuestionOption(Base):
    __tablename__ = "question_options"

    id = Column(Integer, primary_key=True, index=True)
    question_id = Column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    option_text = Column(String(255), nullable=False)
    option_value = Column(String(255), nullable=False)  # Compared against conditions and stored in answers
    order_index = Column(Integer, nullable=False, default=0)

    question = relationship("Question", back_populates="options")


class QuestionCondition(Base):
    __tablename__ = "question_conditions"
    __table_args__ = (
        CheckConstraint(
            "source_question_id <> target_question_id", name="ck_condition_distinct_questions"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    survey_id = Column(
        Integer, ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False, index=True
    )
    source_question_id = Column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    target_question_id = Column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    condition_type = Column(String(16), nullable=False)  # show_if, hide_if, skip_to
    condition_operator = Column(String(32), nullable=False)
    condition_value = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    survey = relationship("Survey", back_populates="conditions")


class SurveyResponse(Base):
    __tablename__ = "survey_responses"

    id = Column(Integer, primary_key=True, index=True)
    survey_id = Column(
        Integer, ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False, index=True
    )
    respondent_id = Column(Integer, nullable=True, index=True)
    respondent_email = Column(String(255), nullable=True, index=True)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(Text, nullable=True)
    is_complete = Column(Boolean, nullable=False, default=False)
    started_at = Column(DateTime(timezone=True), server_default=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)

    survey = relationship("Survey", back_populates="responses")
    answers = relationship(
        "QuestionAnswer", back_populates="response", cascade="all, delete-orphan"
    )


class QuestionAnswer(Base):
    __tablename__ = "question_answers"
    __table_args__ = (
        UniqueConstraint("response_id", "question_id", name="uq_answer_response_question"),
    )

    id = Column(Integer, primary_key=True, index=True)
    response_id = Column(
        Integer, ForeignKey("survey_responses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_id = Column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    answer_text = Column(Text, nullable=True)
    answer_value = Column(Text, nullable=True)
    selected_options = Column(JSON, nullable=True)  # Multi-select values as a list
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), onupdate=func.now(), server_default=func.now()
    )

    response = relationship("SurveyResponse", back_populates="answers")
    question = relationship("Question")
