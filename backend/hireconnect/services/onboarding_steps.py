"""Onboarding pipeline steps and milestones.

Closed set of steps a candidate or employee moves through, in nominal
forward order:

    NOT_STARTED → PROFILE_FILLED → INTERVIEW_SCHEDULED → INTERVIEW_ROUND_1
    → INTERVIEW_ROUND_2 → INTERVIEW_ROUND_3 → {INTERVIEW_PASSED |
    INTERVIEW_FAILED} → DOCS_UPLOADED → OFFER_LETTER_UPLOADED
    → OFFER_SIGNED → ID_CARD_GENERATED → COMPLETED

Values are the canonical names persisted in the onboarding_progress table.
"""

from enum import Enum

from hireconnect.services.progress_errors import UnknownStateError

# =============================================================================
# Enums
# =============================================================================


class OnboardingStep(Enum):
    """Onboarding step values.

    Values match the database check constraint in onboarding_progress.
    Declaration order is the nominal pipeline order.
    """

    NOT_STARTED = "NOT_STARTED"
    PROFILE_FILLED = "PROFILE_FILLED"
    INTERVIEW_SCHEDULED = "INTERVIEW_SCHEDULED"
    INTERVIEW_ROUND_1 = "INTERVIEW_ROUND_1"
    INTERVIEW_ROUND_2 = "INTERVIEW_ROUND_2"
    INTERVIEW_ROUND_3 = "INTERVIEW_ROUND_3"
    INTERVIEW_PASSED = "INTERVIEW_PASSED"
    INTERVIEW_FAILED = "INTERVIEW_FAILED"
    DOCS_UPLOADED = "DOCS_UPLOADED"
    OFFER_LETTER_UPLOADED = "OFFER_LETTER_UPLOADED"
    OFFER_SIGNED = "OFFER_SIGNED"
    ID_CARD_GENERATED = "ID_CARD_GENERATED"
    COMPLETED = "COMPLETED"

    @classmethod
    def from_string(cls, value: str) -> "OnboardingStep":
        """Convert a persisted or requested step name to enum.

        Args:
            value: Step name, e.g. "INTERVIEW_PASSED".

        Returns:
            The corresponding OnboardingStep.

        Raises:
            UnknownStateError: If the name is not a known step.
        """
        for step in cls:
            if step.value == value:
                return step
        raise UnknownStateError(value)

    @property
    def position(self) -> int:
        """Zero-based position in the nominal pipeline order."""
        return _STEP_ORDER.index(self)


class Milestone(Enum):
    """Coarse-grained completion flags owned by collaborator subsystems.

    Declaration order is the prerequisite chain: each milestone requires
    the one before it.
    """

    DOCUMENTS_UPLOADED = "documents_uploaded"
    OFFER_LETTER_UPLOADED = "offer_letter_uploaded"
    ONBOARDING_COMPLETED = "onboarding_completed"
    ID_CARD_GENERATED = "id_card_generated"

    @property
    def prerequisite(self) -> "Milestone | None":
        """Milestone that must already be set, or None for the first."""
        chain = list(Milestone)
        index = chain.index(self)
        return chain[index - 1] if index > 0 else None

    @property
    def required_step(self) -> OnboardingStep:
        """Earliest pipeline step at which this milestone may be set."""
        return _MILESTONE_REQUIRED_STEPS[self]


_STEP_ORDER: tuple[OnboardingStep, ...] = tuple(OnboardingStep)

STEP_NAMES: tuple[str, ...] = tuple(step.value for step in OnboardingStep)
"""Canonical step names, used for the database check constraint."""

_MILESTONE_REQUIRED_STEPS: dict[Milestone, OnboardingStep] = {
    Milestone.DOCUMENTS_UPLOADED: OnboardingStep.INTERVIEW_PASSED,
    Milestone.OFFER_LETTER_UPLOADED: OnboardingStep.DOCS_UPLOADED,
    Milestone.ONBOARDING_COMPLETED: OnboardingStep.OFFER_SIGNED,
    Milestone.ID_CARD_GENERATED: OnboardingStep.OFFER_SIGNED,
}


def has_passed_interview(step: OnboardingStep) -> bool:
    """Check whether a step lies at or beyond a passed interview.

    INTERVIEW_FAILED sits after INTERVIEW_PASSED in declaration order
    but is not a pass.

    Args:
        step: Current onboarding step.

    Returns:
        True for INTERVIEW_PASSED and every later non-failed step.
    """
    if step == OnboardingStep.INTERVIEW_FAILED:
        return False
    return step.position >= OnboardingStep.INTERVIEW_PASSED.position


def has_reached(step: OnboardingStep, milestone: Milestone) -> bool:
    """Check whether a subject at a step may have a milestone set.

    Every milestone lies beyond a passed interview, so INTERVIEW_FAILED
    never qualifies.

    Args:
        step: Current onboarding step.
        milestone: Milestone a collaborator wants to set.

    Returns:
        True if the step is at or past the milestone's required step.
    """
    return (
        has_passed_interview(step)
        and step.position >= milestone.required_step.position
    )
