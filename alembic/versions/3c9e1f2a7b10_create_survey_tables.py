"""create_survey_tables

Revision ID: 3c9e1f2a7b10
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c9e1f2a7b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str, nullable: bool = True) -> sa.Column:
    return sa.Column(
        name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=nullable
    )


def upgrade() -> None:
    op.create_table(
        "surveys",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("creator_id", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "allow_multiple_responses", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("requires_login", sa.Boolean(), nullable=False, server_default=sa.false()),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_surveys_id", "surveys", ["id"])
    op.create_index("ix_surveys_title", "surveys", ["title"])
    op.create_index("ix_surveys_creator_id", "surveys", ["creator_id"])

    op.create_table(
        "questions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "survey_id",
            sa.Integer(),
            sa.ForeignKey("surveys.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("question_text", sa.Text(), nullable=False),
        sa.Column("question_type", sa.String(length=32), nullable=False),
        sa.Column("is_required", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("order_index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("validation_rules", sa.JSON(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_questions_id", "questions", ["id"])
    op.create_index("ix_questions_survey_id", "questions", ["survey_id"])

    op.create_table(
        "question_options",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "question_id",
            sa.Integer(),
            sa.ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("option_text", sa.String(length=255), nullable=False),
        sa.Column("option_value", sa.String(length=255), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_question_options_id", "question_options", ["id"])
    op.create_index("ix_question_options_question_id", "question_options", ["question_id"])

    op.create_table(
        "question_conditions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "survey_id",
            sa.Integer(),
            sa.ForeignKey("surveys.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "source_question_id",
            sa.Integer(),
            sa.ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "target_question_id",
            sa.Integer(),
            sa.ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("condition_type", sa.String(length=16), nullable=False),
        sa.Column("condition_operator", sa.String(length=32), nullable=False),
        sa.Column("condition_value", sa.Text(), nullable=True),
        _timestamp("created_at"),
        sa.CheckConstraint(
            "source_question_id <> target_question_id", name="ck_condition_distinct_questions"
        ),
    )
    op.create_index("ix_question_conditions_id", "question_conditions", ["id"])
    op.create_index("ix_question_conditions_survey_id", "question_conditions", ["survey_id"])
    op.create_index(
        "ix_question_conditions_source_question_id", "question_conditions", ["source_question_id"]
    )
    op.create_index(
        "ix_question_conditions_target_question_id", "question_conditions", ["target_question_id"]
    )

    op.create_table(
        "survey_responses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "survey_id",
            sa.Integer(),
            sa.ForeignKey("surveys.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("respondent_id", sa.Integer(), nullable=True),
        sa.Column("respondent_email", sa.String(length=255), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("is_complete", sa.Boolean(), nullable=False, server_default=sa.false()),
        _timestamp("started_at"),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_survey_responses_id", "survey_responses", ["id"])
    op.create_index("ix_survey_responses_survey_id", "survey_responses", ["survey_id"])
    op.create_index("ix_survey_responses_respondent_id", "survey_responses", ["respondent_id"])
    op.create_index(
        "ix_survey_responses_respondent_email", "survey_responses", ["respondent_email"]
    )

    op.create_table(
        "question_answers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "response_id",
            sa.Integer(),
            sa.ForeignKey("survey_responses.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "question_id",
            sa.Integer(),
            sa.ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("answer_text", sa.Text(), nullable=True),
        sa.Column("answer_value", sa.Text(), nullable=True),
        sa.Column("selected_options", sa.JSON(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.UniqueConstraint("response_id", "question_id", name="uq_answer_response_question"),
    )
    op.create_index("ix_question_answers_id", "question_answers", ["id"])
    op.create_index("ix_question_answers_response_id", "question_answers", ["response_id"])
    op.create_index("ix_question_answers_question_id", "question_answers", ["question_id"])


def downgrade() -> None:
    op.drop_table("question_answers")
    op.drop_table("survey_responses")
    op.drop_table("question_conditions")
    op.drop_table("question_options")
    op.drop_table("questions")
    op.drop_table("surveys")
