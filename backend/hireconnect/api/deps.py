"""Shared dependencies for API endpoints.

Authentication and progress-service wiring. Local-first mode uses
DEFAULT_USER_ID; hosted mode validates the JWT from the session cookie.
Token issuance belongs to the identity service; this module only
verifies.
"""

import uuid
from typing import Annotated, Any

import jwt
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from hireconnect.core.config import settings
from hireconnect.core.database import get_db
from hireconnect.core.errors import StaffRequiredError
from hireconnect.repositories.progress_repository import ProgressRepository
from hireconnect.services.pipeline_routes import PIPELINE_ROUTES, Pipeline
from hireconnect.services.progress_service import ProgressService
from hireconnect.services.progress_store import ProgressStore

# Generic 401 detail. Never include specifics about WHY auth failed.
_UNAUTHORIZED_DETAIL = {
    "code": "UNAUTHORIZED",
    "message": "Authentication required",
}


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=_UNAUTHORIZED_DETAIL,
    )


def _decode_session_token(request: Request) -> dict[str, Any]:
    """Read and verify the session JWT (signature, exp, aud, iss).

    Raises:
        HTTPException: 401 if the cookie is missing or the token is invalid.
    """
    token = request.cookies.get(settings.auth_cookie_name)
    if not token:
        raise _unauthorized()
    try:
        return jwt.decode(
            token,
            settings.auth_secret.get_secret_value(),
            algorithms=["HS256"],
            audience=settings.auth_audience,
            issuer=settings.auth_issuer,
        )
    except jwt.InvalidTokenError as exc:
        raise _unauthorized() from exc


def _subject_from_claims(payload: dict[str, Any]) -> uuid.UUID:
    try:
        return uuid.UUID(payload["sub"])
    except (KeyError, ValueError, TypeError) as exc:
        raise _unauthorized() from exc


def get_current_user_id(request: Request) -> uuid.UUID:
    """Get the current subject ID from auth context.

    Validation steps (hosted mode):
    1. Read JWT from cookie
    2. Decode + verify signature (HS256)
    3. Verify exp, aud, iss claims
    4. Extract sub as UUID

    Args:
        request: HTTP request (injected by FastAPI).

    Returns:
        UUID of the authenticated candidate or employee.

    Raises:
        HTTPException: 401 for any auth failure.
    """
    if not settings.auth_enabled:
        if settings.default_user_id is None:
            raise _unauthorized()
        return settings.default_user_id

    return _subject_from_claims(_decode_session_token(request))


def require_staff(request: Request) -> uuid.UUID:
    """Require an HR or collaborator-service session.

    The token's "role" claim must be one of settings.staff_roles. In
    local-first mode the single local operator acts as staff.

    Args:
        request: HTTP request (injected by FastAPI).

    Returns:
        UUID of the acting staff member or service account.

    Raises:
        HTTPException: 401 for any auth failure.
        StaffRequiredError: 403 if the token carries no staff role.
    """
    if not settings.auth_enabled:
        if settings.default_user_id is None:
            raise _unauthorized()
        return settings.default_user_id

    payload = _decode_session_token(request)
    actor_id = _subject_from_claims(payload)
    if payload.get("role") not in settings.staff_roles:
        raise StaffRequiredError()
    return actor_id


def get_progress_store(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProgressStore:
    """Relational progress store bound to the request's session."""
    return ProgressRepository(db)


def get_progress_service(
    pipeline: Pipeline,
    store: Annotated[ProgressStore, Depends(get_progress_store)],
) -> ProgressService:
    """Progress service for the pipeline named in the URL path.

    Args:
        pipeline: "candidate" or "employee" (path parameter).
        store: Progress store (injected).

    Returns:
        ProgressService configured with the pipeline's routes and the
        configured interview retry window.
    """
    return ProgressService(
        store,
        PIPELINE_ROUTES[pipeline],
        retry_window=settings.interview_retry_window,
    )


# Reusable type aliases for dependency injection
CurrentUserId = Annotated[uuid.UUID, Depends(get_current_user_id)]
StaffId = Annotated[uuid.UUID, Depends(require_staff)]
ProgressServiceDep = Annotated[ProgressService, Depends(get_progress_service)]
