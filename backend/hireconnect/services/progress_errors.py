"""Onboarding progress errors.

Error taxonomy for the progress state machine and its store:

    - UnknownStateError: step/event outside the closed enum (caller bug)
    - InvalidTransitionError: backward, same-step or skip-ahead request
    - TerminalStateError: any request from COMPLETED
    - RetryNotYetAllowedError: retry from INTERVIEW_FAILED inside the cooldown
    - ConcurrentModificationError: optimistic-lock conflict, re-read and retry
    - StoreUnavailableError: storage I/O failure or timeout
    - MilestoneOutOfOrderError: milestone flag set before its prerequisite
    - DashboardAccessDeniedError: dashboard gate refused, carries redirect

DataIntegrityWarning is non-fatal and never raised.
"""

import uuid
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from hireconnect.core.errors import (
    APIError,
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    ServiceUnavailableError,
)

if TYPE_CHECKING:
    from hireconnect.services.onboarding_steps import Milestone, OnboardingStep


class UnknownStateError(APIError):
    """Raised when a requested step is not part of the pipeline (400)."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(
            code="UNKNOWN_STATE",
            message=f"Unknown onboarding step: '{value}'",
            status_code=400,
        )


class InvalidTransitionError(InvalidStateError):
    """Raised when a transition is not a permitted forward edge (422)."""

    def __init__(
        self,
        current_step: "OnboardingStep",
        target_step: "OnboardingStep",
        valid_transitions: list["OnboardingStep"],
    ) -> None:
        """Initialize with transition details.

        Args:
            current_step: Step the record is currently in.
            target_step: The attempted target step.
            valid_transitions: Steps reachable from current_step.
        """
        self.current_step = current_step
        self.target_step = target_step
        self.valid_transitions = valid_transitions
        valid_names = [s.value for s in valid_transitions]
        super().__init__(
            f"Cannot transition from {current_step.value} to {target_step.value}. "
            f"Valid transitions: {valid_names or 'none'}",
        )


class TerminalStateError(InvalidStateError):
    """Raised on any transition request from COMPLETED (422)."""

    def __init__(self, current_step: "OnboardingStep") -> None:
        self.current_step = current_step
        super().__init__(
            f"Onboarding is already {current_step.value}; no further transitions",
            code="TERMINAL_STATE",
        )


class RetryNotYetAllowedError(ConflictError):
    """Raised when rescheduling a failed interview inside the cooldown (409).

    The message is meant to be shown to the end user verbatim.

    Attributes:
        retry_after: Earliest permitted retry, None if unknown.
        remaining: Time left in the cooldown, None if unknown.
        days_remaining: Remaining whole days, rounded up.
    """

    def __init__(
        self,
        *,
        retry_after: datetime | None,
        remaining: timedelta | None,
        days_remaining: int | None,
        message: str,
    ) -> None:
        self.retry_after = retry_after
        self.remaining = remaining
        self.days_remaining = days_remaining
        super().__init__(
            code="RETRY_NOT_YET_ALLOWED",
            message=message,
            details=[
                {
                    "retry_after": retry_after.isoformat() if retry_after else None,
                    "remaining_seconds": (
                        int(remaining.total_seconds()) if remaining else None
                    ),
                    "days_remaining": days_remaining,
                }
            ],
        )


class ConcurrentModificationError(ConflictError):
    """Raised when the stored record changed between read and write (409)."""

    def __init__(self, subject_id: uuid.UUID, expected_version: int) -> None:
        self.subject_id = subject_id
        self.expected_version = expected_version
        super().__init__(
            code="CONCURRENT_MODIFICATION",
            message="Onboarding progress was modified concurrently; please retry",
        )


class StoreUnavailableError(ServiceUnavailableError):
    """Raised when the progress store cannot be reached (503)."""

    def __init__(self, message: str = "Progress store unavailable") -> None:
        super().__init__(message, code="STORE_UNAVAILABLE")


class MilestoneOutOfOrderError(InvalidStateError):
    """Raised when a milestone is set before its prerequisite (422)."""

    def __init__(self, milestone: "Milestone", prerequisite: "Milestone") -> None:
        self.milestone = milestone
        self.prerequisite = prerequisite
        super().__init__(
            f"Cannot set {milestone.value} before {prerequisite.value}",
            code="MILESTONE_OUT_OF_ORDER",
        )


class MilestoneStepNotReachedError(InvalidStateError):
    """Raised when a milestone is set before the subject reaches its step (422)."""

    def __init__(
        self,
        milestone: "Milestone",
        required_step: "OnboardingStep",
        current_step: "OnboardingStep",
    ) -> None:
        self.milestone = milestone
        self.required_step = required_step
        self.current_step = current_step
        super().__init__(
            f"Cannot set {milestone.value} at {current_step.value}; "
            f"requires {required_step.value}",
            code="MILESTONE_STEP_NOT_REACHED",
            details=[
                {
                    "milestone": milestone.value,
                    "required_step": required_step.value,
                    "current_step": current_step.value,
                }
            ],
        )


class DashboardAccessDeniedError(ForbiddenError):
    """Raised by the HTTP layer when the dashboard gate refuses entry (403)."""

    def __init__(
        self,
        *,
        redirect_to: str,
        reason: str,
        current_progress: dict[str, bool],
    ) -> None:
        self.redirect_to = redirect_to
        self.reason = reason
        super().__init__(
            "Onboarding process not completed",
            code="ONBOARDING_INCOMPLETE",
            details=[
                {
                    "redirect_to": redirect_to,
                    "reason": reason,
                    "current_progress": current_progress,
                }
            ],
        )


class DataIntegrityWarning(UserWarning):
    """A progress record was observed in an inconsistent state."""
