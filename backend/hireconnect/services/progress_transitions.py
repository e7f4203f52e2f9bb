"""Onboarding step transitions.

Implements the state machine for onboarding steps. Transitions are
forward-only and follow explicit edges; anything else (backward,
same-step, skip-ahead) is rejected.

- INTERVIEW_FAILED only leads back to INTERVIEW_SCHEDULED, and only once
  the retry cooldown has elapsed
- COMPLETED is terminal

Pure logic: no I/O, "now" is supplied by the caller.
"""

from datetime import datetime, timedelta

from hireconnect.services.onboarding_steps import (
    Milestone,
    OnboardingStep,
    has_reached,
)
from hireconnect.services.progress_errors import (
    InvalidTransitionError,
    MilestoneOutOfOrderError,
    MilestoneStepNotReachedError,
    RetryNotYetAllowedError,
    TerminalStateError,
    UnknownStateError,
)
from hireconnect.services.progress_record import ProgressRecord
from hireconnect.services.retry_gate import (
    DEFAULT_RETRY_WINDOW,
    can_retry,
    days_remaining,
    format_retry_message,
    remaining_cooldown,
)

# =============================================================================
# State Machine Definition
# =============================================================================

_S = OnboardingStep

# Keys are current steps, values are the steps reachable in one move.
# INTERVIEW_FAILED → INTERVIEW_SCHEDULED is additionally gated by the
# retry cooldown. COMPLETED has no outgoing edges.
_VALID_TRANSITIONS: dict[OnboardingStep, list[OnboardingStep]] = {
    _S.NOT_STARTED: [_S.PROFILE_FILLED],
    _S.PROFILE_FILLED: [_S.INTERVIEW_SCHEDULED],
    _S.INTERVIEW_SCHEDULED: [_S.INTERVIEW_ROUND_1, _S.INTERVIEW_FAILED],
    _S.INTERVIEW_ROUND_1: [
        _S.INTERVIEW_ROUND_2,
        _S.INTERVIEW_PASSED,
        _S.INTERVIEW_FAILED,
    ],
    _S.INTERVIEW_ROUND_2: [
        _S.INTERVIEW_ROUND_3,
        _S.INTERVIEW_PASSED,
        _S.INTERVIEW_FAILED,
    ],
    _S.INTERVIEW_ROUND_3: [_S.INTERVIEW_PASSED, _S.INTERVIEW_FAILED],
    _S.INTERVIEW_PASSED: [_S.DOCS_UPLOADED],
    _S.INTERVIEW_FAILED: [_S.INTERVIEW_SCHEDULED],
    _S.DOCS_UPLOADED: [_S.OFFER_LETTER_UPLOADED],
    _S.OFFER_LETTER_UPLOADED: [_S.OFFER_SIGNED],
    _S.OFFER_SIGNED: [_S.ID_CARD_GENERATED],
    _S.ID_CARD_GENERATED: [_S.COMPLETED],
    _S.COMPLETED: [],  # Terminal state
}


# =============================================================================
# Public Functions
# =============================================================================


def parse_step(event: OnboardingStep | str) -> OnboardingStep:
    """Normalize a requested target step.

    Args:
        event: Step enum or its canonical name.

    Returns:
        The OnboardingStep.

    Raises:
        UnknownStateError: If the value is not a known step.
    """
    if isinstance(event, OnboardingStep):
        return event
    if isinstance(event, str):
        return OnboardingStep.from_string(event)
    raise UnknownStateError(event)


def is_valid_transition(current: OnboardingStep, target: OnboardingStep) -> bool:
    """Check if a step transition is a permitted edge.

    The retry cooldown is not considered here.

    Args:
        current: The current step.
        target: The desired target step.

    Returns:
        True if the edge exists, False otherwise.
    """
    return target in _VALID_TRANSITIONS.get(current, [])


def get_valid_transitions(step: OnboardingStep) -> list[OnboardingStep]:
    """Get the steps reachable from a step in one move."""
    return list(_VALID_TRANSITIONS.get(step, []))


def apply_transition(
    record: ProgressRecord,
    event: OnboardingStep | str,
    *,
    now: datetime,
    retry_window: timedelta = DEFAULT_RETRY_WINDOW,
) -> ProgressRecord:
    """Compute the record that results from moving to a new step.

    The returned record keeps the input version; the store bumps it on
    write.

    Args:
        record: Current progress record.
        event: Requested target step (enum or canonical name).
        now: Current timestamp (timezone-aware).
        retry_window: Cooldown applied when the interview fails.

    Returns:
        New ProgressRecord with the target step and updated timestamps.

    Raises:
        TerminalStateError: If the record is COMPLETED.
        UnknownStateError: If the target is not a known step.
        RetryNotYetAllowedError: If retrying a failed interview too early.
        InvalidTransitionError: If the move is not a permitted edge.
    """
    current = record.current_step
    if current == OnboardingStep.COMPLETED:
        raise TerminalStateError(current)

    target = parse_step(event)

    if current == OnboardingStep.INTERVIEW_FAILED:
        if target != OnboardingStep.INTERVIEW_SCHEDULED:
            raise InvalidTransitionError(current, target, get_valid_transitions(current))
        if not can_retry(record, now):
            remaining = remaining_cooldown(record, now)
            days = days_remaining(remaining) if remaining is not None else None
            raise RetryNotYetAllowedError(
                retry_after=record.retry_after,
                remaining=remaining,
                days_remaining=days,
                message=format_retry_message(days),
            )
        # failed_at is kept as history of the last failure
        return record.replace(current_step=target, retry_after=None, updated_at=now)

    if not is_valid_transition(current, target):
        raise InvalidTransitionError(current, target, get_valid_transitions(current))

    if target == OnboardingStep.INTERVIEW_FAILED:
        return record.replace(
            current_step=target,
            failed_at=now,
            retry_after=now + retry_window,
            updated_at=now,
        )

    return record.replace(current_step=target, retry_after=None, updated_at=now)


def apply_milestone(
    record: ProgressRecord,
    milestone: Milestone,
    *,
    now: datetime,
) -> ProgressRecord | None:
    """Compute the record that results from setting a milestone flag.

    Flags only move false → true. Each requires its prerequisite and a
    current step at or past the milestone's required step.

    Args:
        record: Current progress record.
        milestone: Milestone to set.
        now: Current timestamp.

    Returns:
        New ProgressRecord, or None if the milestone is already set.

    Raises:
        MilestoneOutOfOrderError: If the prerequisite milestone is not set.
        MilestoneStepNotReachedError: If the subject has not reached the
            milestone's required step.
    """
    if record.has_milestone(milestone):
        return None
    prerequisite = milestone.prerequisite
    if prerequisite is not None and not record.has_milestone(prerequisite):
        raise MilestoneOutOfOrderError(milestone, prerequisite)
    if not has_reached(record.current_step, milestone):
        raise MilestoneStepNotReachedError(
            milestone, milestone.required_step, record.current_step
        )
    return record.replace(**{milestone.value: True, "updated_at": now})
