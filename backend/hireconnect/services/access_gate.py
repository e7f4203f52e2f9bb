"""Post-onboarding dashboard access gate.

Decides whether a subject may enter the dashboard and, if not, which
onboarding page to send them to. Admission trusts only the milestone
flags: onboarding_completed AND id_card_generated. The rules are
priority-ordered, first match wins:

1. No progress record → registration page
2. Onboarding completed and ID card generated → allowed
3. Onboarding completed, no ID card → /generate-id-card
4. Documents uploaded, onboarding not completed → /offer-letter
5. Interview passed, documents not uploaded → /upload-documents
6. Otherwise → onboarding wizard root

Read-only: evaluation never mutates the record.
"""

from dataclasses import dataclass
from enum import Enum

from hireconnect.services.onboarding_steps import has_passed_interview
from hireconnect.services.pipeline_routes import (
    GENERATE_ID_CARD_PATH,
    OFFER_LETTER_PATH,
    UPLOAD_DOCUMENTS_PATH,
    PipelineRoutes,
)
from hireconnect.services.progress_record import ProgressRecord


class AccessReason(Enum):
    """Why the gate admitted or refused a subject."""

    NOT_STARTED = "NotStarted"
    GRANTED = "Granted"
    ID_CARD_PENDING = "IdCardPending"
    OFFER_PENDING = "OfferPending"
    DOCUMENTS_PENDING = "DocumentsPending"
    IN_PROGRESS = "InProgress"


@dataclass(frozen=True)
class MilestoneSnapshot:
    """Milestone flags exposed to callers for UI hints."""

    documents_uploaded: bool = False
    offer_letter_uploaded: bool = False
    onboarding_completed: bool = False
    id_card_generated: bool = False
    interview_completed: bool = False

    @classmethod
    def from_record(cls, record: ProgressRecord | None) -> "MilestoneSnapshot":
        if record is None:
            return cls()
        return cls(
            documents_uploaded=record.documents_uploaded,
            offer_letter_uploaded=record.offer_letter_uploaded,
            onboarding_completed=record.onboarding_completed,
            id_card_generated=record.id_card_generated,
            interview_completed=has_passed_interview(record.current_step),
        )

    def as_dict(self) -> dict[str, bool]:
        return {
            "documents_uploaded": self.documents_uploaded,
            "offer_letter_uploaded": self.offer_letter_uploaded,
            "onboarding_completed": self.onboarding_completed,
            "id_card_generated": self.id_card_generated,
            "interview_completed": self.interview_completed,
        }


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of a dashboard access check.

    Attributes:
        allowed: True if the subject may enter the dashboard.
        redirect_to: Page to send a refused subject to; None when allowed.
        reason: Which rule matched.
        snapshot: Milestone flags at evaluation time.
    """

    allowed: bool
    redirect_to: str | None
    reason: AccessReason
    snapshot: MilestoneSnapshot


def evaluate(record: ProgressRecord | None, routes: PipelineRoutes) -> AccessDecision:
    """Decide dashboard admission for a subject.

    Args:
        record: The subject's progress record, or None if none exists.
        routes: Route configuration for the subject's pipeline.

    Returns:
        AccessDecision with the first matching rule applied.
    """
    snapshot = MilestoneSnapshot.from_record(record)

    if record is None:
        return AccessDecision(
            allowed=False,
            redirect_to=routes.registration_path,
            reason=AccessReason.NOT_STARTED,
            snapshot=snapshot,
        )

    if record.onboarding_completed and record.id_card_generated:
        return AccessDecision(
            allowed=True,
            redirect_to=None,
            reason=AccessReason.GRANTED,
            snapshot=snapshot,
        )

    if record.onboarding_completed:
        redirect_to, reason = GENERATE_ID_CARD_PATH, AccessReason.ID_CARD_PENDING
    elif record.documents_uploaded:
        redirect_to, reason = OFFER_LETTER_PATH, AccessReason.OFFER_PENDING
    elif snapshot.interview_completed:
        redirect_to, reason = UPLOAD_DOCUMENTS_PATH, AccessReason.DOCUMENTS_PENDING
    else:
        redirect_to, reason = routes.onboarding_root, AccessReason.IN_PROGRESS

    return AccessDecision(
        allowed=False,
        redirect_to=redirect_to,
        reason=reason,
        snapshot=snapshot,
    )
