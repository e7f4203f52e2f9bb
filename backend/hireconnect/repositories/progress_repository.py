"""Relational ProgressStore backed by the onboarding_progress table.

Writes use optimistic concurrency: a single
UPDATE ... WHERE subject_id = :id AND version = :expected, so a write is
all-or-nothing and a stale writer affects zero rows. Lazy creation uses
a savepoint + IntegrityError recovery for the primary-key race.
"""

import logging
import uuid

from sqlalchemy import exc as sa_exc
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hireconnect.models.onboarding_progress import OnboardingProgress
from hireconnect.services.onboarding_steps import OnboardingStep
from hireconnect.services.progress_errors import StoreUnavailableError
from hireconnect.services.progress_record import ProgressRecord

logger = logging.getLogger(__name__)

# Driver, pool and connection failures. IntegrityError is a DBAPIError
# but is never mapped here: create() recovers from it and compare_and_swap
# lets constraint violations propagate.
_UNAVAILABLE_ERRORS = (
    sa_exc.DBAPIError,
    sa_exc.TimeoutError,
    sa_exc.DisconnectionError,
    OSError,
)


def _to_record(row: OnboardingProgress) -> ProgressRecord:
    """Convert an ORM row to the domain record."""
    return ProgressRecord(
        subject_id=row.subject_id,
        current_step=OnboardingStep.from_string(row.current_step),
        failed_at=row.failed_at,
        retry_after=row.retry_after,
        documents_uploaded=row.documents_uploaded,
        offer_letter_uploaded=row.offer_letter_uploaded,
        onboarding_completed=row.onboarding_completed,
        id_card_generated=row.id_card_generated,
        version=row.version,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class ProgressRepository:
    """ProgressStore implementation over an async SQLAlchemy session.

    The session's transaction is committed or rolled back by the caller
    (the get_db request dependency).
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def load(self, subject_id: uuid.UUID) -> ProgressRecord | None:
        """Fetch a subject's progress.

        Args:
            subject_id: Candidate or employee UUID.

        Returns:
            ProgressRecord if found, None otherwise.

        Raises:
            StoreUnavailableError: On connection failure.
        """
        # populate_existing: CAS updates bypass the identity map
        stmt = (
            select(OnboardingProgress)
            .where(OnboardingProgress.subject_id == subject_id)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self._db.execute(stmt)
        except _UNAVAILABLE_ERRORS as exc:
            raise StoreUnavailableError() from exc
        row = result.scalar_one_or_none()
        return _to_record(row) if row is not None else None

    async def create(self, subject_id: uuid.UUID) -> ProgressRecord:
        """Insert the default NOT_STARTED row, or return the existing one.

        Args:
            subject_id: Candidate or employee UUID.

        Returns:
            The created or already-existing ProgressRecord.

        Raises:
            StoreUnavailableError: On connection failure.
        """
        try:
            try:
                async with self._db.begin_nested():
                    row = OnboardingProgress(
                        subject_id=subject_id,
                        current_step=OnboardingStep.NOT_STARTED.value,
                        version=1,
                    )
                    self._db.add(row)
                    await self._db.flush()
                await self._db.refresh(row)
                return _to_record(row)
            except sa_exc.IntegrityError:
                logger.debug("Progress row already exists for subject %s", subject_id)
        except _UNAVAILABLE_ERRORS as exc:
            raise StoreUnavailableError() from exc

        existing = await self.load(subject_id)
        if existing is None:
            raise StoreUnavailableError(
                "Progress row vanished after a concurrent create"
            )
        return existing

    async def compare_and_swap(
        self,
        subject_id: uuid.UUID,
        expected_version: int,
        new_record: ProgressRecord,
    ) -> bool:
        """Write new_record if the stored version still matches.

        Args:
            subject_id: Candidate or employee UUID.
            expected_version: Version observed when the record was read.
            new_record: Record to persist.

        Returns:
            True if exactly one row was updated, False on a version mismatch.

        Raises:
            StoreUnavailableError: On connection failure.
        """
        stmt = (
            update(OnboardingProgress)
            .where(
                OnboardingProgress.subject_id == subject_id,
                OnboardingProgress.version == expected_version,
            )
            .values(
                current_step=new_record.current_step.value,
                failed_at=new_record.failed_at,
                retry_after=new_record.retry_after,
                documents_uploaded=new_record.documents_uploaded,
                offer_letter_uploaded=new_record.offer_letter_uploaded,
                onboarding_completed=new_record.onboarding_completed,
                id_card_generated=new_record.id_card_generated,
                version=expected_version + 1,
                updated_at=new_record.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._db.execute(stmt)
        except sa_exc.IntegrityError:
            raise
        except _UNAVAILABLE_ERRORS as exc:
            raise StoreUnavailableError() from exc
        row_count: int = result.rowcount  # type: ignore[attr-defined]
        return row_count == 1
