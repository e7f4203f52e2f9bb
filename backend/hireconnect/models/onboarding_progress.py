"""OnboardingProgress model - one progression row per subject.

subject_id is owned by the identity subsystem (candidates/employees); the
row is removed only by that subsystem's cascading delete.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, Integer, String, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hireconnect.models.base import Base, TimestampMixin
from hireconnect.services.onboarding_steps import STEP_NAMES

_STEP_NAME_LIST = ", ".join(f"'{name}'" for name in STEP_NAMES)


class OnboardingProgress(Base, TimestampMixin):
    """Persisted onboarding progress.

    Attributes:
        subject_id: Candidate or employee UUID (primary key).
        current_step: Canonical OnboardingStep name.
        failed_at: When the last interview failure happened.
        retry_after: Earliest permitted retry; set iff INTERVIEW_FAILED.
        documents_uploaded: Milestone flag.
        offer_letter_uploaded: Milestone flag.
        onboarding_completed: Milestone flag.
        id_card_generated: Milestone flag.
        version: Optimistic concurrency token.
        created_at: Creation timestamp (from TimestampMixin).
        updated_at: Last modification timestamp (from TimestampMixin).
    """

    __tablename__ = "onboarding_progress"
    __table_args__ = (
        CheckConstraint(
            f"current_step IN ({_STEP_NAME_LIST})",
            name="ck_onboarding_progress_current_step",
        ),
        CheckConstraint(
            "(current_step = 'INTERVIEW_FAILED') = (retry_after IS NOT NULL)",
            name="ck_onboarding_progress_retry_after",
        ),
        CheckConstraint(
            "NOT id_card_generated OR onboarding_completed",
            name="ck_onboarding_progress_id_card_order",
        ),
        CheckConstraint(
            "NOT onboarding_completed OR offer_letter_uploaded",
            name="ck_onboarding_progress_onboarding_order",
        ),
        CheckConstraint(
            "NOT offer_letter_uploaded OR documents_uploaded",
            name="ck_onboarding_progress_offer_order",
        ),
    )

    subject_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
    )
    current_step: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        server_default=text("'NOT_STARTED'"),
        default="NOT_STARTED",
    )
    failed_at: Mapped[datetime | None] = mapped_column(
        nullable=True,
    )
    retry_after: Mapped[datetime | None] = mapped_column(
        nullable=True,
    )
    documents_uploaded: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        server_default=text("false"),
        default=False,
    )
    offer_letter_uploaded: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        server_default=text("false"),
        default=False,
    )
    onboarding_completed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        server_default=text("false"),
        default=False,
    )
    id_card_generated: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        server_default=text("false"),
        default=False,
    )
    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        server_default=text("1"),
        default=1,
    )
