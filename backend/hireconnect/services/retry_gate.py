"""Interview retry cooldown gate.

After an interview failure the subject must wait out a fixed window
(30 days by default) before the interview can be rescheduled. These are
pure functions over a ProgressRecord and a caller-supplied "now".

Inconsistent data (INTERVIEW_FAILED without retry_after) fails safe:
the retry is refused and a DataIntegrityWarning is emitted.
"""

import logging
import math
import warnings
from datetime import datetime, timedelta

from hireconnect.services.onboarding_steps import OnboardingStep
from hireconnect.services.progress_errors import DataIntegrityWarning
from hireconnect.services.progress_record import ProgressRecord

logger = logging.getLogger(__name__)

DEFAULT_RETRY_WINDOW = timedelta(days=30)
"""Cooldown between an interview failure and the permitted retry."""

_ONE_DAY = timedelta(days=1)


def _warn_missing_retry_after(record: ProgressRecord) -> None:
    logger.warning(
        "Progress record for subject %s is INTERVIEW_FAILED without retry_after",
        record.subject_id,
    )
    warnings.warn(
        f"Subject {record.subject_id} is INTERVIEW_FAILED without retry_after; "
        "treating retry as not allowed",
        DataIntegrityWarning,
        stacklevel=3,
    )


def can_retry(record: ProgressRecord, now: datetime) -> bool:
    """Check whether the retry cooldown has elapsed.

    Records outside INTERVIEW_FAILED are not gated. The boundary is
    inclusive: now == retry_after is retryable.

    Args:
        record: Progress record to check.
        now: Current timestamp (timezone-aware).

    Returns:
        True if the subject may proceed, False while the cooldown runs or
        when retry_after is missing.
    """
    if record.current_step != OnboardingStep.INTERVIEW_FAILED:
        return True
    if record.retry_after is None:
        _warn_missing_retry_after(record)
        return False
    return now >= record.retry_after


def remaining_cooldown(record: ProgressRecord, now: datetime) -> timedelta | None:
    """Time left before a retry is allowed.

    Args:
        record: Progress record to check.
        now: Current timestamp.

    Returns:
        Remaining duration, or None when the record is not blocked or the
        retry date is unknown.
    """
    if record.current_step != OnboardingStep.INTERVIEW_FAILED:
        return None
    if record.retry_after is None or now >= record.retry_after:
        return None
    return record.retry_after - now


def days_remaining(remaining: timedelta) -> int:
    """Round a remaining duration up to whole days."""
    return math.ceil(remaining / _ONE_DAY)


def format_retry_message(days: int | None) -> str:
    """Build the user-facing message for a blocked retry.

    Args:
        days: Whole days left, or None when the retry date is unknown.

    Returns:
        Message suitable for showing to the subject verbatim.
    """
    if days is None:
        return "Interview failed. Retry date is unavailable; please contact HR."
    unit = "day" if days == 1 else "days"
    return f"Interview failed. Retry available in {days} {unit}."
