"""Response envelope models.

Consistent response format for all API endpoints: success bodies use
{"data": ...}, errors use {"error": {...}}.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Standard response envelope for single resources.

    Usage:
        @router.get("/status")
        async def get_status(...) -> DataResponse[ProgressCheckSchema]:
            check = await service.check_progress(subject_id)
            return DataResponse(data=ProgressCheckSchema.from_check(check))
    """

    data: T


class ErrorDetail(BaseModel):
    """Error detail for response body.

    Attributes:
        code: Machine-readable error code (e.g., "INVALID_STATE_TRANSITION").
        message: Human-readable error message.
        details: Optional list of structured details (redirects, retry info).
    """

    code: str
    message: str
    details: list[dict] | None = None


class ErrorResponse(BaseModel):
    """Standard error response envelope.

    Usage in exception handlers:
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=ErrorDetail(code=exc.code, message=exc.message)
            ).model_dump(),
        )
    """

    error: ErrorDetail
