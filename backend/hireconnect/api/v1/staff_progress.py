"""Staff onboarding progress API router.

Endpoints (mounted at /api/v1/staff/progress/{pipeline}/subjects/{subject_id}):
- GET /status: the subject's current step and next-action redirect
- POST /transitions: record an interview outcome or other step change
- POST /milestones: set a milestone flag (document approval, offer
  signing, ID card generation)

All endpoints require the StaffId dependency: an HR user or a
collaborator service whose session token carries a staff role.
"""

import uuid

import structlog
from fastapi import APIRouter

from hireconnect.api.deps import ProgressServiceDep, StaffId
from hireconnect.core.responses import DataResponse
from hireconnect.schemas.progress import (
    MilestoneRequest,
    ProgressCheckSchema,
    ProgressRecordSchema,
    TransitionRequest,
)

logger = structlog.get_logger()

router = APIRouter()


@router.get("/status")
async def get_subject_status(
    subject_id: uuid.UUID,
    _staff: StaffId,
    service: ProgressServiceDep,
) -> DataResponse[ProgressCheckSchema]:
    """Return a subject's current step without creating a record."""
    check = await service.check_progress(subject_id)
    return DataResponse(data=ProgressCheckSchema.from_check(check))


@router.post("/transitions")
async def request_transition(
    subject_id: uuid.UUID,
    body: TransitionRequest,
    staff_id: StaffId,
    service: ProgressServiceDep,
) -> DataResponse[ProgressRecordSchema]:
    """Move a subject to a new onboarding step.

    Write conflicts are retried a bounded number of times before
    surfacing as 409 CONCURRENT_MODIFICATION.

    Raises:
        UnknownStateError: 400 for an unknown step name.
        InvalidTransitionError: 422 for a backward or skip-ahead move.
        TerminalStateError: 422 once onboarding is COMPLETED.
        RetryNotYetAllowedError: 409 inside the interview cooldown.
    """
    record = await service.request_transition_with_retry(subject_id, body.target_step)
    logger.info(
        "onboarding_transition",
        pipeline=service.routes.pipeline.value,
        subject_id=str(subject_id),
        actor_id=str(staff_id),
        step=record.current_step.value,
    )
    return DataResponse(data=ProgressRecordSchema.from_record(record))


@router.post("/milestones")
async def mark_milestone(
    subject_id: uuid.UUID,
    body: MilestoneRequest,
    staff_id: StaffId,
    service: ProgressServiceDep,
) -> DataResponse[ProgressRecordSchema]:
    """Set a milestone flag (idempotent).

    Raises:
        MilestoneOutOfOrderError: 422 if the prerequisite is not set.
        MilestoneStepNotReachedError: 422 if the subject's step is too early.
    """
    record = await service.mark_milestone_with_retry(subject_id, body.milestone)
    logger.info(
        "onboarding_milestone",
        pipeline=service.routes.pipeline.value,
        subject_id=str(subject_id),
        actor_id=str(staff_id),
        milestone=body.milestone.value,
    )
    return DataResponse(data=ProgressRecordSchema.from_record(record))
