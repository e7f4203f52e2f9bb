"""Onboarding progress request and response schemas.

Step names are the canonical OnboardingStep values; timestamps are
ISO 8601 with timezone.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from hireconnect.services.access_gate import AccessDecision
from hireconnect.services.onboarding_steps import Milestone
from hireconnect.services.progress_record import ProgressRecord
from hireconnect.services.progress_service import (
    ProgressCheck,
    RetryEligibility,
    RouteDecision,
)

# =============================================================================
# Requests
# =============================================================================


class TransitionRequest(BaseModel):
    """Body for POST /staff/progress/{pipeline}/subjects/{subject_id}/transitions.

    target_step is kept as a plain string so unknown names reach the
    state machine and come back as UNKNOWN_STATE.
    """

    model_config = ConfigDict(extra="forbid")

    target_step: str


class MilestoneRequest(BaseModel):
    """Body for POST /staff/progress/{pipeline}/subjects/{subject_id}/milestones."""

    model_config = ConfigDict(extra="forbid")

    milestone: Milestone


# =============================================================================
# Responses
# =============================================================================


class ProgressRecordSchema(BaseModel):
    """Serialized ProgressRecord."""

    subject_id: uuid.UUID
    current_step: str
    failed_at: datetime | None
    retry_after: datetime | None
    documents_uploaded: bool
    offer_letter_uploaded: bool
    onboarding_completed: bool
    id_card_generated: bool
    version: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: ProgressRecord) -> "ProgressRecordSchema":
        return cls(
            subject_id=record.subject_id,
            current_step=record.current_step.value,
            failed_at=record.failed_at,
            retry_after=record.retry_after,
            documents_uploaded=record.documents_uploaded,
            offer_letter_uploaded=record.offer_letter_uploaded,
            onboarding_completed=record.onboarding_completed,
            id_card_generated=record.id_card_generated,
            version=record.version,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class ProgressCheckSchema(BaseModel):
    """Response for GET /progress/{pipeline}/status."""

    current_step: str
    redirect_to: str
    retry_after: datetime | None = None
    message: str | None = None
    progress: ProgressRecordSchema | None = None

    @classmethod
    def from_check(cls, check: ProgressCheck) -> "ProgressCheckSchema":
        return cls(
            current_step=check.current_step.value,
            redirect_to=check.redirect_to,
            retry_after=check.retry_after,
            message=check.message,
            progress=(
                ProgressRecordSchema.from_record(check.record)
                if check.record is not None
                else None
            ),
        )


class RouteDecisionSchema(BaseModel):
    """Response for GET /progress/{pipeline}/route-guard."""

    allowed: bool
    redirect_to: str | None = None

    @classmethod
    def from_decision(cls, decision: RouteDecision) -> "RouteDecisionSchema":
        return cls(allowed=decision.allowed, redirect_to=decision.redirect_to)


class RetryEligibilitySchema(BaseModel):
    """Response for GET /progress/{pipeline}/retry-eligibility."""

    can_retry: bool
    retry_after: datetime | None = None
    days_remaining: int | None = None

    @classmethod
    def from_eligibility(cls, result: RetryEligibility) -> "RetryEligibilitySchema":
        return cls(
            can_retry=result.can_retry,
            retry_after=result.retry_after,
            days_remaining=result.days_remaining,
        )


class AccessDecisionSchema(BaseModel):
    """Response for an admitted GET /progress/{pipeline}/dashboard-access."""

    allowed: bool
    redirect_to: str | None
    reason: str
    current_progress: dict[str, bool]

    @classmethod
    def from_decision(cls, decision: AccessDecision) -> "AccessDecisionSchema":
        return cls(
            allowed=decision.allowed,
            redirect_to=decision.redirect_to,
            reason=decision.reason.value,
            current_progress=decision.snapshot.as_dict(),
        )
