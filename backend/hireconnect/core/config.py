"""Application configuration loaded from environment variables.

Settings for the database, API, authentication, and the onboarding
interview retry window. Uses pydantic-settings for validation and .env
file support.
"""

import uuid
from datetime import timedelta

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Known insecure default password that must not be used in production
_INSECURE_DEFAULT_PASSWORD = "hireconnect_dev_password"  # nosec B105

# Minimum length for AUTH_SECRET in production (256 bits = 32 bytes)
_MIN_AUTH_SECRET_LENGTH = 32

# Cooldown after a failed interview before the candidate may be rescheduled
_DEFAULT_INTERVIEW_RETRY_WINDOW = timedelta(days=30)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_host: str = "localhost"
    database_port: int = 5432
    database_name: str = "hireconnect_portal"
    database_user: str = "hireconnect_user"
    database_password: str = _INSECURE_DEFAULT_PASSWORD
    # Seconds to wait for a pooled connection
    database_pool_timeout: float = 5.0

    # CORS
    # Default allows localhost:3000 for Next.js development
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Application
    environment: str = "development"

    # Authentication
    # Local-first mode: DEFAULT_USER_ID provides subject context without JWT
    # Hosted mode: auth_enabled=True, JWT cookie required on every request
    default_user_id: uuid.UUID | None = None
    auth_enabled: bool = False
    auth_secret: SecretStr = SecretStr("")
    auth_issuer: str = "hireconnect"
    auth_audience: str = "hireconnect"
    auth_cookie_name: str = "hireconnect.session-token"
    # JWT "role" claim values allowed to write any subject's progress
    staff_roles: list[str] = ["hr", "admin", "onboarding-service"]

    # Onboarding
    # Accepts seconds or an ISO 8601 duration (e.g. "P30D")
    interview_retry_window: timedelta = _DEFAULT_INTERVIEW_RETRY_WINDOW

    @property
    def database_url(self) -> str:
        """Async database URL for SQLAlchemy."""
        return (
            f"postgresql+asyncpg://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @model_validator(mode="after")
    def check_production_security(self) -> "Settings":
        """Validate configuration invariants.

        Checks:
        - Interview retry window must be positive (all environments)
        - CORS must not use wildcard origin (incompatible with credentials)
        - Database password must not be the default in production
        - AUTH_SECRET must be set and >= 32 chars when auth is enabled in production
        """
        if self.interview_retry_window <= timedelta(0):
            msg = (
                "INTERVIEW_RETRY_WINDOW must be positive. "
                f"Got: {self.interview_retry_window}"
            )
            raise ValueError(msg)

        if "*" in self.allowed_origins:
            msg = (
                "ALLOWED_ORIGINS must not contain '*' (wildcard). "
                "This application uses credentials (cookies) which are "
                "incompatible with wildcard CORS origins."
            )
            raise ValueError(msg)

        if self.environment == "production":
            if self.database_password == _INSECURE_DEFAULT_PASSWORD:
                msg = (
                    "Cannot use default database password in production. "
                    "Set DATABASE_PASSWORD environment variable to a secure value."
                )
                raise ValueError(msg)

            if self.auth_enabled:
                secret_value = self.auth_secret.get_secret_value()
                if not secret_value:
                    msg = "AUTH_SECRET must be set when AUTH_ENABLED=true in production."
                    raise ValueError(msg)
                if len(secret_value) < _MIN_AUTH_SECRET_LENGTH:
                    msg = (
                        f"AUTH_SECRET must be at least {_MIN_AUTH_SECRET_LENGTH} "
                        "characters for adequate security."
                    )
                    raise ValueError(msg)

        return self


settings = Settings()
