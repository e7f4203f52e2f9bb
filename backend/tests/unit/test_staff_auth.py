"""Tests for staff authentication.

Progress writes go through require_staff: the session JWT must carry a
"role" claim listed in settings.staff_roles. Subject sessions may only
read their own progress.
"""

import uuid

import pytest
from fastapi import HTTPException, Request
from pydantic import SecretStr

from hireconnect.api.deps import get_current_user_id, require_staff
from hireconnect.core.config import settings
from hireconnect.core.errors import StaffRequiredError
from tests.conftest import (
    TEST_AUTH_SECRET,
    TEST_STAFF_ID,
    TEST_SUBJECT_ID,
    create_test_jwt,
)


def _request_with_cookie(token: str | None) -> Request:
    headers = []
    if token is not None:
        headers.append(
            (b"cookie", f"{settings.auth_cookie_name}={token}".encode())
        )
    return Request({"type": "http", "headers": headers})


@pytest.fixture
def hosted_auth(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "auth_enabled", True)
    monkeypatch.setattr(settings, "auth_secret", SecretStr(TEST_AUTH_SECRET))


@pytest.mark.usefixtures("hosted_auth")
class TestRequireStaff:
    @pytest.mark.parametrize("role", ["hr", "admin", "onboarding-service"])
    def test_staff_roles_pass(self, role) -> None:
        request = _request_with_cookie(create_test_jwt(TEST_STAFF_ID, role=role))

        assert require_staff(request) == TEST_STAFF_ID

    def test_subject_token_is_forbidden(self) -> None:
        request = _request_with_cookie(create_test_jwt(TEST_SUBJECT_ID))

        with pytest.raises(StaffRequiredError) as exc_info:
            require_staff(request)

        assert exc_info.value.status_code == 403

    def test_unlisted_role_is_forbidden(self) -> None:
        request = _request_with_cookie(create_test_jwt(TEST_STAFF_ID, role="intern"))

        with pytest.raises(StaffRequiredError):
            require_staff(request)

    def test_missing_cookie_is_401(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            require_staff(_request_with_cookie(None))

        assert exc_info.value.status_code == 401

    def test_wrong_secret_is_401_not_403(self) -> None:
        token = create_test_jwt(
            TEST_STAFF_ID, role="hr", secret="another-secret-that-is-32-characters-long"
        )

        with pytest.raises(HTTPException) as exc_info:
            require_staff(_request_with_cookie(token))

        assert exc_info.value.status_code == 401

    def test_roles_are_configurable(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "staff_roles", ["registrar"])
        request = _request_with_cookie(create_test_jwt(TEST_STAFF_ID, role="hr"))

        with pytest.raises(StaffRequiredError):
            require_staff(request)

    def test_staff_token_still_identifies_subject(self) -> None:
        request = _request_with_cookie(create_test_jwt(TEST_STAFF_ID, role="hr"))

        assert get_current_user_id(request) == TEST_STAFF_ID


class TestLocalMode:
    def test_local_operator_acts_as_staff(self, monkeypatch) -> None:
        local_id = uuid.uuid4()
        monkeypatch.setattr(settings, "auth_enabled", False)
        monkeypatch.setattr(settings, "default_user_id", local_id)

        assert require_staff(_request_with_cookie(None)) == local_id

    def test_no_default_user_is_401(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "auth_enabled", False)
        monkeypatch.setattr(settings, "default_user_id", None)

        with pytest.raises(HTTPException) as exc_info:
            require_staff(_request_with_cookie(None))

        assert exc_info.value.status_code == 401
