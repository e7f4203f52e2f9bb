"""Onboarding progress API router.

Endpoints (mounted at /api/v1/progress/{pipeline}):
- GET /status: current step, next-action redirect, retry message
- GET /route-guard: may an onboarding page be entered
- GET /dashboard-access: dashboard gate; 403 with redirect when refused
- GET /retry-eligibility: interview retry cooldown status

The subject is always the authenticated user, and every endpoint here is
read-only. Steps and milestones are written by staff through
hireconnect.api.v1.staff_progress.
"""

from fastapi import APIRouter

from hireconnect.api.deps import CurrentUserId, ProgressServiceDep
from hireconnect.core.responses import DataResponse
from hireconnect.schemas.progress import (
    AccessDecisionSchema,
    ProgressCheckSchema,
    RetryEligibilitySchema,
    RouteDecisionSchema,
)
from hireconnect.services.progress_errors import DashboardAccessDeniedError

router = APIRouter()


@router.get("/status")
async def get_progress_status(
    user_id: CurrentUserId,
    service: ProgressServiceDep,
) -> DataResponse[ProgressCheckSchema]:
    """Return the subject's current step and where to go next.

    Returns:
        DataResponse with current_step, redirect_to and, while an
        interview retry is blocked, retry_after and message.
    """
    check = await service.check_progress(user_id)
    return DataResponse(data=ProgressCheckSchema.from_check(check))


@router.get("/route-guard")
async def guard_onboarding_route(
    user_id: CurrentUserId,
    service: ProgressServiceDep,
) -> DataResponse[RouteDecisionSchema]:
    """Decide whether the subject may enter an onboarding page."""
    decision = await service.protect_route(user_id)
    return DataResponse(data=RouteDecisionSchema.from_decision(decision))


@router.get("/dashboard-access")
async def check_dashboard_access(
    user_id: CurrentUserId,
    service: ProgressServiceDep,
) -> DataResponse[AccessDecisionSchema]:
    """Gate the post-onboarding dashboard.

    Raises:
        DashboardAccessDeniedError: 403 with redirect_to, reason and the
            current milestone flags when onboarding is incomplete.
    """
    decision = await service.evaluate_access(user_id)
    if not decision.allowed:
        raise DashboardAccessDeniedError(
            redirect_to=decision.redirect_to or service.routes.onboarding_root,
            reason=decision.reason.value,
            current_progress=decision.snapshot.as_dict(),
        )
    return DataResponse(data=AccessDecisionSchema.from_decision(decision))


@router.get("/retry-eligibility")
async def get_retry_eligibility(
    user_id: CurrentUserId,
    service: ProgressServiceDep,
) -> DataResponse[RetryEligibilitySchema]:
    """Report whether a failed interview may be retried yet."""
    result = await service.retry_eligibility(user_id)
    return DataResponse(data=RetryEligibilitySchema.from_eligibility(result))


