"""Create onboarding_progress table.

Revision ID: 001_onboarding_progress
Revises:
Create Date: 2026-10-19

One row per candidate/employee. current_step is stored as the step's
canonical name so new steps can be inserted without renumbering.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001_onboarding_progress"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_STEPS = (
    "NOT_STARTED",
    "PROFILE_FILLED",
    "INTERVIEW_SCHEDULED",
    "INTERVIEW_ROUND_1",
    "INTERVIEW_ROUND_2",
    "INTERVIEW_ROUND_3",
    "INTERVIEW_PASSED",
    "INTERVIEW_FAILED",
    "DOCS_UPLOADED",
    "OFFER_LETTER_UPLOADED",
    "OFFER_SIGNED",
    "ID_CARD_GENERATED",
    "COMPLETED",
)


def upgrade() -> None:
    step_list = ", ".join(f"'{step}'" for step in _STEPS)
    op.create_table(
        "onboarding_progress",
        sa.Column("subject_id", sa.UUID(), primary_key=True),
        sa.Column(
            "current_step",
            sa.String(32),
            nullable=False,
            server_default=sa.text("'NOT_STARTED'"),
        ),
        sa.Column("failed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("retry_after", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "documents_uploaded",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column(
            "offer_letter_uploaded",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column(
            "onboarding_completed",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column(
            "id_card_generated",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint(
            f"current_step IN ({step_list})",
            name="ck_onboarding_progress_current_step",
        ),
        sa.CheckConstraint(
            "(current_step = 'INTERVIEW_FAILED') = (retry_after IS NOT NULL)",
            name="ck_onboarding_progress_retry_after",
        ),
        sa.CheckConstraint(
            "NOT id_card_generated OR onboarding_completed",
            name="ck_onboarding_progress_id_card_order",
        ),
        sa.CheckConstraint(
            "NOT onboarding_completed OR offer_letter_uploaded",
            name="ck_onboarding_progress_onboarding_order",
        ),
        sa.CheckConstraint(
            "NOT offer_letter_uploaded OR documents_uploaded",
            name="ck_onboarding_progress_offer_order",
        ),
    )


def downgrade() -> None:
    op.drop_table("onboarding_progress")
