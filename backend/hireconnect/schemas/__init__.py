"""Pydantic request/response schemas for API endpoints."""

from hireconnect.schemas.progress import (
    AccessDecisionSchema,
    MilestoneRequest,
    ProgressCheckSchema,
    ProgressRecordSchema,
    RetryEligibilitySchema,
    RouteDecisionSchema,
    TransitionRequest,
)

__all__ = [
    "AccessDecisionSchema",
    "MilestoneRequest",
    "ProgressCheckSchema",
    "ProgressRecordSchema",
    "RetryEligibilitySchema",
    "RouteDecisionSchema",
    "TransitionRequest",
]
