"""Tests for onboarding step and milestone enums and the route tables."""

import pytest

from hireconnect.services.onboarding_steps import (
    STEP_NAMES,
    Milestone,
    OnboardingStep,
    has_passed_interview,
    has_reached,
)
from hireconnect.services.pipeline_routes import (
    CANDIDATE_ROUTES,
    EMPLOYEE_ROUTES,
    PIPELINE_ROUTES,
    STEP_REDIRECTS,
    Pipeline,
)
from hireconnect.services.progress_errors import UnknownStateError

_S = OnboardingStep


class TestOnboardingStep:
    def test_has_thirteen_steps(self) -> None:
        assert len(OnboardingStep) == 13

    def test_values_are_canonical_names(self) -> None:
        assert all(step.value == step.name for step in OnboardingStep)
        assert STEP_NAMES[0] == "NOT_STARTED"
        assert STEP_NAMES[-1] == "COMPLETED"

    def test_from_string(self) -> None:
        assert OnboardingStep.from_string("OFFER_SIGNED") == _S.OFFER_SIGNED

    @pytest.mark.parametrize("value", ["", "offer_signed", "HIRED", "3"])
    def test_from_string_rejects_unknown(self, value) -> None:
        with pytest.raises(UnknownStateError) as exc_info:
            OnboardingStep.from_string(value)

        assert exc_info.value.status_code == 400

    def test_positions_follow_declaration_order(self) -> None:
        assert [s.position for s in OnboardingStep] == list(range(13))

    @pytest.mark.parametrize(
        ("step", "passed"),
        [
            (_S.INTERVIEW_ROUND_3, False),
            (_S.INTERVIEW_PASSED, True),
            (_S.INTERVIEW_FAILED, False),
            (_S.DOCS_UPLOADED, True),
            (_S.COMPLETED, True),
        ],
    )
    def test_has_passed_interview(self, step, passed) -> None:
        assert has_passed_interview(step) is passed


class TestMilestone:
    def test_prerequisite_chain(self) -> None:
        assert Milestone.DOCUMENTS_UPLOADED.prerequisite is None
        assert Milestone.OFFER_LETTER_UPLOADED.prerequisite == Milestone.DOCUMENTS_UPLOADED
        assert Milestone.ID_CARD_GENERATED.prerequisite == Milestone.ONBOARDING_COMPLETED

    def test_required_steps(self) -> None:
        assert Milestone.DOCUMENTS_UPLOADED.required_step == _S.INTERVIEW_PASSED
        assert Milestone.OFFER_LETTER_UPLOADED.required_step == _S.DOCS_UPLOADED
        assert Milestone.ONBOARDING_COMPLETED.required_step == _S.OFFER_SIGNED
        assert Milestone.ID_CARD_GENERATED.required_step == _S.OFFER_SIGNED

    @pytest.mark.parametrize(
        ("step", "reached"),
        [
            (_S.NOT_STARTED, False),
            (_S.INTERVIEW_ROUND_3, False),
            (_S.INTERVIEW_PASSED, True),
            (_S.INTERVIEW_FAILED, False),
            (_S.COMPLETED, True),
        ],
    )
    def test_documents_reached(self, step, reached) -> None:
        assert has_reached(step, Milestone.DOCUMENTS_UPLOADED) is reached

    def test_id_card_needs_offer_signed(self) -> None:
        assert has_reached(_S.OFFER_LETTER_UPLOADED, Milestone.ID_CARD_GENERATED) is False
        assert has_reached(_S.OFFER_SIGNED, Milestone.ID_CARD_GENERATED) is True


class TestPipelineRoutes:
    def test_every_step_has_a_redirect(self) -> None:
        assert set(STEP_REDIRECTS) == set(OnboardingStep)

    def test_redirect_table_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            STEP_REDIRECTS[_S.COMPLETED] = "/elsewhere"  # type: ignore[index]

    def test_pipelines_share_step_redirects(self) -> None:
        for step in OnboardingStep:
            if step == _S.NOT_STARTED:
                continue
            assert CANDIDATE_ROUTES.redirect_for(step) == EMPLOYEE_ROUTES.redirect_for(step)

    def test_not_started_goes_to_pipeline_registration(self) -> None:
        assert CANDIDATE_ROUTES.redirect_for(_S.NOT_STARTED) == "/create-account"
        assert EMPLOYEE_ROUTES.redirect_for(_S.NOT_STARTED) == "/register"

    def test_pipeline_lookup(self) -> None:
        assert PIPELINE_ROUTES[Pipeline("employee")] is EMPLOYEE_ROUTES
