"""Onboarding progress record.

One record per subject (candidate or employee). The record carries two
views of progress that are written by different owners:

- current_step: written only through the transition engine
- milestone flags: written by collaborator subsystems (document approval,
  offer signing, ID card generation) through ProgressService.mark_milestone

The dashboard gate trusts the milestone flags; step redirects trust
current_step.
"""

import dataclasses
import uuid
from dataclasses import dataclass
from datetime import datetime

from hireconnect.services.onboarding_steps import Milestone, OnboardingStep


@dataclass(frozen=True)
class ProgressRecord:
    """Immutable snapshot of a subject's onboarding progress.

    Attributes:
        subject_id: Candidate or employee identifier (unique key).
        current_step: Current pipeline step.
        failed_at: When the last interview failure happened.
        retry_after: Earliest permitted retry; set iff INTERVIEW_FAILED.
        documents_uploaded: Documents approved by HR.
        offer_letter_uploaded: Offer letter issued.
        onboarding_completed: Offer signed and onboarding wrapped up.
        id_card_generated: ID card issued.
        version: Optimistic concurrency token, bumped on every write.
        created_at: When the record was created.
        updated_at: When the record was last written.
    """

    subject_id: uuid.UUID
    current_step: OnboardingStep
    created_at: datetime
    updated_at: datetime
    failed_at: datetime | None = None
    retry_after: datetime | None = None
    documents_uploaded: bool = False
    offer_letter_uploaded: bool = False
    onboarding_completed: bool = False
    id_card_generated: bool = False
    version: int = 1

    @classmethod
    def new(cls, subject_id: uuid.UUID, now: datetime) -> "ProgressRecord":
        """Build the default record for a subject with no progress yet."""
        return cls(
            subject_id=subject_id,
            current_step=OnboardingStep.NOT_STARTED,
            created_at=now,
            updated_at=now,
        )

    def has_milestone(self, milestone: Milestone) -> bool:
        """Read a milestone flag by enum."""
        value: bool = getattr(self, milestone.value)
        return value

    def replace(self, **changes: object) -> "ProgressRecord":
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)  # type: ignore[arg-type]
