"""API error classes.

HTTP status codes and machine-readable error codes shared by services
and the FastAPI exception handler.
"""


class APIError(Exception):
    """Base class for API errors.

    All API errors have a code, message, and HTTP status.
    Subclasses set default status_code.

    Attributes:
        code: Machine-readable error code (e.g., "NOT_FOUND").
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Optional list of additional error details.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: list[dict] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ValidationError(APIError):
    """Field validation failed (400).

    Use for request body validation errors, query param errors, etc.
    """

    def __init__(
        self,
        message: str,
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=400,
            details=details,
        )


class ForbiddenError(APIError):
    """Not allowed to access resource (403).

    Use when auth is valid but the subject may not enter the resource yet.
    """

    def __init__(
        self,
        message: str = "Access denied",
        *,
        code: str = "FORBIDDEN",
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=403,
            details=details,
        )


class StaffRequiredError(ForbiddenError):
    """HR or collaborator-service role required (403).

    Raised by require_staff when the session token lacks a staff role.
    """

    def __init__(self) -> None:
        super().__init__(
            "Staff access required",
            code="STAFF_REQUIRED",
        )


class ConflictError(APIError):
    """Duplicate or conflicting resource (409).

    Use for conflicting state, lost optimistic-lock races, etc.
    Accepts custom code for specific conflict types.
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details,
        )


class InvalidStateError(APIError):
    """Business rule violation (422).

    Use when request is syntactically valid but violates business rules.
    E.g., trying to move an onboarding record backwards.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "INVALID_STATE_TRANSITION",
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details,
        )


class ServiceUnavailableError(APIError):
    """Backing service unreachable (503).

    Use when storage or another dependency fails with an I/O error.
    The caller owns any retry/backoff policy.
    """

    def __init__(
        self,
        message: str = "Service temporarily unavailable",
        *,
        code: str = "SERVICE_UNAVAILABLE",
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=503,
        )
