"""SQLAlchemy ORM models for HireConnect onboarding.

All models are exported from this module for convenient imports:
    from hireconnect.models import OnboardingProgress

- base.py: Base, TimestampMixin
- onboarding_progress.py: OnboardingProgress
"""

from hireconnect.models.base import Base, TimestampMixin
from hireconnect.models.onboarding_progress import OnboardingProgress

__all__ = [
    "Base",
    "OnboardingProgress",
    "TimestampMixin",
]
