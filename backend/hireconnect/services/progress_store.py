"""Progress store interface and in-memory implementation.

The progress service talks to storage only through ProgressStore:

- load: read a subject's record, or None
- create: insert the default record (idempotent; returns the existing
  record if another writer created it first)
- compare_and_swap: write a new record only if the stored version still
  equals the version that was read

The relational implementation lives in
hireconnect.repositories.progress_repository. InMemoryProgressStore is
used by tests and local tooling.
"""

import asyncio
import uuid
from datetime import UTC, datetime
from typing import Protocol

from hireconnect.services.progress_record import ProgressRecord


class ProgressStore(Protocol):
    """Narrow read/write interface over persisted progress records."""

    async def load(self, subject_id: uuid.UUID) -> ProgressRecord | None:
        """Return the subject's record, or None if none exists."""
        ...

    async def create(self, subject_id: uuid.UUID) -> ProgressRecord:
        """Create the default record, or return the one that already exists."""
        ...

    async def compare_and_swap(
        self,
        subject_id: uuid.UUID,
        expected_version: int,
        new_record: ProgressRecord,
    ) -> bool:
        """Persist new_record if the stored version equals expected_version.

        The stored version becomes expected_version + 1 on success.

        Returns:
            True if written, False if the stored record changed (or vanished).
        """
        ...


class InMemoryProgressStore:
    """Dict-backed ProgressStore guarded by a single asyncio lock.

    Attributes:
        create_calls: Number of records actually inserted.
    """

    def __init__(self, records: list[ProgressRecord] | None = None) -> None:
        self._records: dict[uuid.UUID, ProgressRecord] = {
            r.subject_id: r for r in records or []
        }
        self._lock = asyncio.Lock()
        self.create_calls = 0

    async def load(self, subject_id: uuid.UUID) -> ProgressRecord | None:
        async with self._lock:
            return self._records.get(subject_id)

    async def create(self, subject_id: uuid.UUID) -> ProgressRecord:
        async with self._lock:
            existing = self._records.get(subject_id)
            if existing is not None:
                return existing
            record = ProgressRecord.new(subject_id, datetime.now(UTC))
            self._records[subject_id] = record
            self.create_calls += 1
            return record

    async def compare_and_swap(
        self,
        subject_id: uuid.UUID,
        expected_version: int,
        new_record: ProgressRecord,
    ) -> bool:
        async with self._lock:
            current = self._records.get(subject_id)
            if current is None or current.version != expected_version:
                return False
            self._records[subject_id] = new_record.replace(
                version=expected_version + 1
            )
            return True

    def __len__(self) -> int:
        return len(self._records)
