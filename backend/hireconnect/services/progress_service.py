"""Onboarding progress service.

Orchestrates the progress store, the transition engine, the retry gate
and the dashboard access gate for one pipeline. Each call loads the
subject's record, asks the pure components a question and, for
transitions and milestone updates only, persists the result with a
compare-and-swap on the record version.

Store I/O is the only suspension point. Every store call runs under the
configured timeout; timeouts and storage failures surface as
StoreUnavailableError. Engine errors (UnknownStateError,
InvalidTransitionError, TerminalStateError, RetryNotYetAllowedError)
propagate unchanged.
"""

import asyncio
import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TypeVar

from hireconnect.services import access_gate
from hireconnect.services.access_gate import AccessDecision
from hireconnect.services.conflict_retry import (
    DEFAULT_MAX_ATTEMPTS,
    with_conflict_retries,
)
from hireconnect.services.onboarding_steps import Milestone, OnboardingStep
from hireconnect.services.pipeline_routes import DASHBOARD_PATH, PipelineRoutes
from hireconnect.services.progress_errors import (
    ConcurrentModificationError,
    StoreUnavailableError,
)
from hireconnect.services.progress_record import ProgressRecord
from hireconnect.services.progress_store import ProgressStore
from hireconnect.services.progress_transitions import apply_milestone, apply_transition
from hireconnect.services.retry_gate import (
    DEFAULT_RETRY_WINDOW,
    can_retry,
    days_remaining,
    format_retry_message,
    remaining_cooldown,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_STORE_TIMEOUT_SECONDS = 5.0


def _utc_now() -> datetime:
    return datetime.now(UTC)


# =============================================================================
# Result Types
# =============================================================================


@dataclass(frozen=True)
class ProgressCheck:
    """Where a subject stands and where the UI should send them.

    Attributes:
        current_step: Current pipeline step (NOT_STARTED if no record).
        redirect_to: Next-action path.
        retry_after: Earliest retry while blocked after a failed interview.
        message: User-facing retry message while blocked.
        record: The stored record, None if the subject has none yet.
    """

    current_step: OnboardingStep
    redirect_to: str
    retry_after: datetime | None = None
    message: str | None = None
    record: ProgressRecord | None = None


@dataclass(frozen=True)
class RouteDecision:
    """Whether an onboarding page may be entered."""

    allowed: bool
    redirect_to: str | None = None


@dataclass(frozen=True)
class RetryEligibility:
    """Interview retry eligibility for a subject.

    Attributes:
        can_retry: True unless blocked by the cooldown.
        retry_after: Earliest retry, only when the subject failed an interview.
        days_remaining: Whole days left (0 once eligible), None when unknown.
    """

    can_retry: bool
    retry_after: datetime | None = None
    days_remaining: int | None = None


# =============================================================================
# Service
# =============================================================================


class ProgressService:
    """Onboarding progress operations for one pipeline.

    Args:
        store: Progress store (relational repository or in-memory fake).
        routes: Route configuration of the pipeline being served.
        retry_window: Cooldown after an interview failure.
        clock: Returns the current timezone-aware time.
        timeout: Seconds allowed per store call, None for no limit.
    """

    def __init__(
        self,
        store: ProgressStore,
        routes: PipelineRoutes,
        *,
        retry_window: timedelta = DEFAULT_RETRY_WINDOW,
        clock: Callable[[], datetime] = _utc_now,
        timeout: float | None = DEFAULT_STORE_TIMEOUT_SECONDS,
    ) -> None:
        self._store = store
        self._routes = routes
        self._retry_window = retry_window
        self._clock = clock
        self._timeout = timeout

    @property
    def routes(self) -> PipelineRoutes:
        return self._routes

    # -------------------------------------------------------------------------
    # Store access
    # -------------------------------------------------------------------------

    async def _call_store(self, operation: Awaitable[T]) -> T:
        try:
            async with asyncio.timeout(self._timeout):
                return await operation
        except TimeoutError as exc:
            logger.warning(
                "Progress store call timed out after %ss (pipeline=%s)",
                self._timeout,
                self._routes.pipeline.value,
            )
            raise StoreUnavailableError("Progress store timed out") from exc

    async def _load(self, subject_id: uuid.UUID) -> ProgressRecord | None:
        return await self._call_store(self._store.load(subject_id))

    async def _write(
        self, current: ProgressRecord, new_record: ProgressRecord
    ) -> ProgressRecord:
        written = await self._call_store(
            self._store.compare_and_swap(
                current.subject_id, current.version, new_record
            )
        )
        if not written:
            logger.warning(
                "Stale progress write for subject %s (expected version %d)",
                current.subject_id,
                current.version,
            )
            raise ConcurrentModificationError(current.subject_id, current.version)
        return new_record.replace(version=current.version + 1)

    # -------------------------------------------------------------------------
    # Read operations
    # -------------------------------------------------------------------------

    async def get_status(self, subject_id: uuid.UUID) -> ProgressRecord:
        """Return the subject's record, creating the default on first access.

        Args:
            subject_id: Candidate or employee identifier.

        Returns:
            Existing record, or a new NOT_STARTED record.

        Raises:
            StoreUnavailableError: On storage failure or timeout.
        """
        record = await self._load(subject_id)
        if record is not None:
            return record
        record = await self._call_store(self._store.create(subject_id))
        logger.info(
            "Created onboarding progress for subject %s (pipeline=%s)",
            subject_id,
            self._routes.pipeline.value,
        )
        return record

    async def resolve_redirect(self, subject_id: uuid.UUID) -> str:
        """Map the subject's current step to its next-action path.

        Subjects without a record get the NOT_STARTED entry.
        """
        record = await self._load(subject_id)
        step = record.current_step if record else OnboardingStep.NOT_STARTED
        return self._routes.redirect_for(step)

    async def can_proceed(
        self, subject_id: uuid.UUID, now: datetime | None = None
    ) -> bool:
        """False only while a failed interview's cooldown is running."""
        record = await self._load(subject_id)
        if record is None:
            return True
        return can_retry(record, now or self._clock())

    async def retry_message(
        self, subject_id: uuid.UUID, now: datetime | None = None
    ) -> str | None:
        """User-facing remaining-days message while blocked, else None."""
        record = await self._load(subject_id)
        if record is None:
            return None
        return self._blocked_message(record, now or self._clock())

    async def retry_eligibility(
        self, subject_id: uuid.UUID, now: datetime | None = None
    ) -> RetryEligibility:
        """Report whether and when a failed interview may be retried."""
        record = await self._load(subject_id)
        if record is None or record.current_step != OnboardingStep.INTERVIEW_FAILED:
            return RetryEligibility(can_retry=True)

        now = now or self._clock()
        allowed = can_retry(record, now)
        remaining = remaining_cooldown(record, now)
        if allowed:
            days: int | None = 0
        else:
            days = days_remaining(remaining) if remaining is not None else None
        return RetryEligibility(
            can_retry=allowed,
            retry_after=record.retry_after,
            days_remaining=days,
        )

    async def check_progress(
        self, subject_id: uuid.UUID, now: datetime | None = None
    ) -> ProgressCheck:
        """Current step plus where the UI should go next.

        A subject still inside the interview cooldown is sent to the
        dashboard with the retry message.
        """
        record = await self._load(subject_id)
        if record is None:
            return ProgressCheck(
                current_step=OnboardingStep.NOT_STARTED,
                redirect_to=self._routes.redirect_for(OnboardingStep.NOT_STARTED),
            )

        message = self._blocked_message(record, now or self._clock())
        if message is not None:
            return ProgressCheck(
                current_step=record.current_step,
                redirect_to=DASHBOARD_PATH,
                retry_after=record.retry_after,
                message=message,
                record=record,
            )

        return ProgressCheck(
            current_step=record.current_step,
            redirect_to=self._routes.redirect_for(record.current_step),
            record=record,
        )

    async def protect_route(
        self, subject_id: uuid.UUID, now: datetime | None = None
    ) -> RouteDecision:
        """Guard an onboarding page.

        No record → registration page; blocked failure → dashboard.
        """
        record = await self._load(subject_id)
        if record is None:
            return RouteDecision(
                allowed=False, redirect_to=self._routes.registration_path
            )
        if not can_retry(record, now or self._clock()):
            return RouteDecision(allowed=False, redirect_to=DASHBOARD_PATH)
        return RouteDecision(allowed=True)

    async def evaluate_access(self, subject_id: uuid.UUID) -> AccessDecision:
        """Run the dashboard access gate over the stored record."""
        record = await self._load(subject_id)
        decision = access_gate.evaluate(record, self._routes)
        if not decision.allowed:
            logger.info(
                "Dashboard access denied for subject %s: %s",
                subject_id,
                decision.reason.value,
            )
        return decision

    def _blocked_message(self, record: ProgressRecord, now: datetime) -> str | None:
        if can_retry(record, now):
            return None
        remaining = remaining_cooldown(record, now)
        days = days_remaining(remaining) if remaining is not None else None
        return format_retry_message(days)

    # -------------------------------------------------------------------------
    # Write operations
    # -------------------------------------------------------------------------

    async def request_transition(
        self, subject_id: uuid.UUID, event: OnboardingStep | str
    ) -> ProgressRecord:
        """Move the subject to a new step.

        Args:
            subject_id: Candidate or employee identifier.
            event: Requested target step (enum or canonical name).

        Returns:
            The persisted record with its new version.

        Raises:
            TerminalStateError: If the subject is COMPLETED.
            UnknownStateError: If the target is not a known step.
            RetryNotYetAllowedError: If retrying inside the cooldown.
            InvalidTransitionError: If the move is not a permitted edge.
            ConcurrentModificationError: If the record changed since it was read.
            StoreUnavailableError: On storage failure or timeout.
        """
        record = await self.get_status(subject_id)
        new_record = apply_transition(
            record,
            event,
            now=self._clock(),
            retry_window=self._retry_window,
        )
        saved = await self._write(record, new_record)
        logger.info(
            "Onboarding step for subject %s: %s -> %s",
            subject_id,
            record.current_step.value,
            saved.current_step.value,
        )
        return saved

    async def request_transition_with_retry(
        self,
        subject_id: uuid.UUID,
        event: OnboardingStep | str,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> ProgressRecord:
        """request_transition, re-read and retried on write conflicts."""
        return await with_conflict_retries(
            lambda: self.request_transition(subject_id, event),
            max_attempts=max_attempts,
        )

    async def mark_milestone(
        self, subject_id: uuid.UUID, milestone: Milestone
    ) -> ProgressRecord:
        """Set a milestone flag on behalf of a collaborator subsystem.

        Already-set milestones are returned without a write.

        Raises:
            MilestoneOutOfOrderError: If the prerequisite milestone is not set.
            ConcurrentModificationError: If the record changed since it was read.
            StoreUnavailableError: On storage failure or timeout.
        """
        record = await self.get_status(subject_id)
        new_record = apply_milestone(record, milestone, now=self._clock())
        if new_record is None:
            return record
        saved = await self._write(record, new_record)
        logger.info("Milestone %s set for subject %s", milestone.value, subject_id)
        return saved

    async def mark_milestone_with_retry(
        self,
        subject_id: uuid.UUID,
        milestone: Milestone,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> ProgressRecord:
        """mark_milestone, re-read and retried on write conflicts."""
        return await with_conflict_retries(
            lambda: self.mark_milestone(subject_id, milestone),
            max_attempts=max_attempts,
        )
