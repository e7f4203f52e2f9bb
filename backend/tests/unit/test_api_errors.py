"""Tests for API error classes and the onboarding progress errors."""

from datetime import UTC, datetime, timedelta

from hireconnect.core.errors import (
    APIError,
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    ServiceUnavailableError,
    StaffRequiredError,
    ValidationError,
)
from hireconnect.services.onboarding_steps import Milestone, OnboardingStep
from hireconnect.services.progress_errors import (
    ConcurrentModificationError,
    DashboardAccessDeniedError,
    InvalidTransitionError,
    MilestoneOutOfOrderError,
    MilestoneStepNotReachedError,
    RetryNotYetAllowedError,
    StoreUnavailableError,
    TerminalStateError,
    UnknownStateError,
)
from tests.conftest import TEST_SUBJECT_ID


class TestAPIError:
    """Tests for base APIError class."""

    def test_api_error_has_required_attributes(self):
        """APIError should have code, message, status_code, details."""
        error = APIError(
            code="TEST_ERROR",
            message="Test message",
            status_code=418,
            details=[{"field": "test"}],
        )
        assert error.code == "TEST_ERROR"
        assert error.message == "Test message"
        assert error.status_code == 418
        assert error.details == [{"field": "test"}]

    def test_api_error_defaults_to_500(self):
        """APIError should default to 500 status code."""
        error = APIError(code="TEST", message="Test")
        assert error.status_code == 500

    def test_api_error_is_exception(self):
        """APIError should be an Exception subclass."""
        error = APIError(code="TEST", message="Test")
        assert isinstance(error, Exception)
        assert str(error) == "Test"


class TestGenericErrors:
    def test_validation_error(self):
        error = ValidationError("Validation failed")
        assert (error.code, error.status_code) == ("VALIDATION_ERROR", 400)

    def test_forbidden_error_defaults(self):
        error = ForbiddenError()
        assert error.code == "FORBIDDEN"
        assert error.status_code == 403
        assert error.message == "Access denied"

    def test_staff_required_is_forbidden(self):
        error = StaffRequiredError()
        assert isinstance(error, ForbiddenError)
        assert (error.code, error.status_code) == ("STAFF_REQUIRED", 403)

    def test_conflict_error_accepts_custom_code(self):
        error = ConflictError(code="DUPLICATE", message="Duplicate found")
        assert error.code == "DUPLICATE"
        assert error.status_code == 409

    def test_invalid_state_error(self):
        error = InvalidStateError("Invalid transition")
        assert error.code == "INVALID_STATE_TRANSITION"
        assert error.status_code == 422

    def test_service_unavailable_error(self):
        error = ServiceUnavailableError()
        assert error.status_code == 503


class TestProgressErrors:
    """Each progress error maps to a distinct code and HTTP status."""

    def test_unknown_state(self):
        error = UnknownStateError("HIRED")
        assert (error.code, error.status_code) == ("UNKNOWN_STATE", 400)
        assert "HIRED" in error.message

    def test_invalid_transition_lists_valid_targets(self):
        error = InvalidTransitionError(
            OnboardingStep.PROFILE_FILLED,
            OnboardingStep.COMPLETED,
            [OnboardingStep.INTERVIEW_SCHEDULED],
        )
        assert error.status_code == 422
        assert "INTERVIEW_SCHEDULED" in error.message

    def test_terminal_state(self):
        error = TerminalStateError(OnboardingStep.COMPLETED)
        assert (error.code, error.status_code) == ("TERMINAL_STATE", 422)
        assert isinstance(error, InvalidStateError)

    def test_retry_not_yet_allowed_details(self):
        retry_after = datetime(2024, 1, 31, tzinfo=UTC)
        error = RetryNotYetAllowedError(
            retry_after=retry_after,
            remaining=timedelta(days=16),
            days_remaining=16,
            message="Interview failed. Retry available in 16 days.",
        )
        assert (error.code, error.status_code) == ("RETRY_NOT_YET_ALLOWED", 409)
        assert error.details == [
            {
                "retry_after": "2024-01-31T00:00:00+00:00",
                "remaining_seconds": 16 * 86400,
                "days_remaining": 16,
            }
        ]

    def test_concurrent_modification(self):
        error = ConcurrentModificationError(TEST_SUBJECT_ID, 3)
        assert (error.code, error.status_code) == ("CONCURRENT_MODIFICATION", 409)
        assert error.expected_version == 3

    def test_store_unavailable(self):
        error = StoreUnavailableError()
        assert (error.code, error.status_code) == ("STORE_UNAVAILABLE", 503)

    def test_milestone_out_of_order(self):
        error = MilestoneOutOfOrderError(
            Milestone.ID_CARD_GENERATED, Milestone.ONBOARDING_COMPLETED
        )
        assert (error.code, error.status_code) == ("MILESTONE_OUT_OF_ORDER", 422)

    def test_milestone_step_not_reached(self):
        error = MilestoneStepNotReachedError(
            Milestone.DOCUMENTS_UPLOADED,
            OnboardingStep.INTERVIEW_PASSED,
            OnboardingStep.PROFILE_FILLED,
        )
        assert (error.code, error.status_code) == ("MILESTONE_STEP_NOT_REACHED", 422)
        assert error.details == [
            {
                "milestone": "documents_uploaded",
                "required_step": "INTERVIEW_PASSED",
                "current_step": "PROFILE_FILLED",
            }
        ]

    def test_dashboard_access_denied(self):
        error = DashboardAccessDeniedError(
            redirect_to="/offer-letter",
            reason="OfferPending",
            current_progress={"documents_uploaded": True},
        )
        assert (error.code, error.status_code) == ("ONBOARDING_INCOMPLETE", 403)
        assert error.details[0]["redirect_to"] == "/offer-letter"
