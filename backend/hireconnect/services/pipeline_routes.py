"""Frontend routes for the candidate and employee onboarding pipelines.

Both pipelines share one state machine; they differ only in where an
unregistered or in-progress subject is sent. The step redirect table
answers "where to go next" while the pipeline is running, and is
separate from the dashboard gate's redirects (see access_gate).
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from hireconnect.services.onboarding_steps import OnboardingStep

DASHBOARD_PATH = "/dashboard"
"""Fallback for steps without a dedicated page."""

INTERVIEW_PATH = "/interview"
UPLOAD_DOCUMENTS_PATH = "/upload-documents"
OFFER_LETTER_PATH = "/offer-letter"
GENERATE_ID_CARD_PATH = "/generate-id-card"

_S = OnboardingStep

STEP_REDIRECTS: Mapping[OnboardingStep, str] = MappingProxyType(
    {
        _S.NOT_STARTED: "/create-account",
        _S.PROFILE_FILLED: INTERVIEW_PATH,
        _S.INTERVIEW_SCHEDULED: INTERVIEW_PATH,
        _S.INTERVIEW_ROUND_1: INTERVIEW_PATH,
        _S.INTERVIEW_ROUND_2: INTERVIEW_PATH,
        _S.INTERVIEW_ROUND_3: INTERVIEW_PATH,
        _S.INTERVIEW_PASSED: UPLOAD_DOCUMENTS_PATH,
        _S.INTERVIEW_FAILED: DASHBOARD_PATH,
        _S.DOCS_UPLOADED: OFFER_LETTER_PATH,
        _S.OFFER_LETTER_UPLOADED: OFFER_LETTER_PATH,
        _S.OFFER_SIGNED: GENERATE_ID_CARD_PATH,
        _S.ID_CARD_GENERATED: DASHBOARD_PATH,
        _S.COMPLETED: DASHBOARD_PATH,
    }
)
"""Canonical next-action path for each step."""


class Pipeline(Enum):
    """Onboarding pipelines served by the application."""

    CANDIDATE = "candidate"
    EMPLOYEE = "employee"


@dataclass(frozen=True)
class PipelineRoutes:
    """Route configuration for one onboarding pipeline.

    Attributes:
        pipeline: Pipeline these routes belong to.
        registration_path: Where subjects without a progress record go.
        onboarding_root: Entry page of the onboarding wizard.
        step_redirects: Next-action path per step.
    """

    pipeline: Pipeline
    registration_path: str
    onboarding_root: str
    step_redirects: Mapping[OnboardingStep, str] = field(
        default_factory=lambda: STEP_REDIRECTS
    )

    def redirect_for(self, step: OnboardingStep) -> str:
        """Look up the next-action path for a step.

        NOT_STARTED resolves to this pipeline's registration page.
        """
        if step == OnboardingStep.NOT_STARTED:
            return self.registration_path
        return self.step_redirects.get(step, DASHBOARD_PATH)


CANDIDATE_ROUTES = PipelineRoutes(
    pipeline=Pipeline.CANDIDATE,
    registration_path="/create-account",
    onboarding_root="/candidate-onboarding",
)

EMPLOYEE_ROUTES = PipelineRoutes(
    pipeline=Pipeline.EMPLOYEE,
    registration_path="/register",
    onboarding_root="/employee-onboarding",
)

PIPELINE_ROUTES: Mapping[Pipeline, PipelineRoutes] = MappingProxyType(
    {
        Pipeline.CANDIDATE: CANDIDATE_ROUTES,
        Pipeline.EMPLOYEE: EMPLOYEE_ROUTES,
    }
)
