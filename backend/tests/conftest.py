import socket
import uuid
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from hireconnect.core.config import settings
from hireconnect.models.base import Base
from hireconnect.services.onboarding_steps import OnboardingStep
from hireconnect.services.pipeline_routes import CANDIDATE_ROUTES
from hireconnect.services.progress_record import ProgressRecord
from hireconnect.services.progress_service import ProgressService
from hireconnect.services.progress_store import InMemoryProgressStore

# Use separate test database
TEST_DATABASE_URL = settings.database_url.replace(
    settings.database_name, f"{settings.database_name}_test"
)

# Test subject ID (consistent across tests for predictable auth)
TEST_SUBJECT_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")

# HR user acting on subjects through the staff endpoints
TEST_STAFF_ID = uuid.UUID("00000000-0000-0000-0000-0000000000aa")

# Security: This is a test-only secret. Production uses a real secret from env.
TEST_AUTH_SECRET = "test-secret-key-that-is-at-least-32-characters-long"  # nosec B105  # gitleaks:allow

# Fixed "now" for deterministic cooldown arithmetic
FROZEN_NOW = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)


def create_test_jwt(
    subject_id: uuid.UUID = TEST_SUBJECT_ID,
    *,
    secret: str = TEST_AUTH_SECRET,
    expires_delta: timedelta | None = None,
    role: str | None = None,
) -> str:
    """Create a signed JWT for test authentication.

    Args:
        subject_id: Subject UUID to encode in the sub claim.
        secret: Signing secret (must match settings.auth_secret in tests).
        expires_delta: Time until expiration. Defaults to 1 hour.
        role: Optional "role" claim (e.g. "hr" for staff endpoints).

    Returns:
        Encoded JWT string.
    """
    now = datetime.now(UTC)
    payload = {
        "sub": str(subject_id),
        "aud": settings.auth_audience,
        "iss": settings.auth_issuer,
        "exp": now + (expires_delta or timedelta(hours=1)),
        "iat": now,
    }
    if role is not None:
        payload["role"] = role
    return jwt.encode(payload, secret, algorithm="HS256")


def make_record(
    step: OnboardingStep = OnboardingStep.NOT_STARTED,
    *,
    subject_id: uuid.UUID = TEST_SUBJECT_ID,
    now: datetime = FROZEN_NOW,
    **fields: object,
) -> ProgressRecord:
    """Build a ProgressRecord at a given step.

    INTERVIEW_FAILED records get failed_at/retry_after 30 days out unless
    overridden.
    """
    if step == OnboardingStep.INTERVIEW_FAILED:
        fields.setdefault("failed_at", now)
        fields.setdefault("retry_after", now + timedelta(days=30))
    return ProgressRecord.new(subject_id, now).replace(current_step=step, **fields)


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = FROZEN_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


def _is_postgres_available() -> bool:
    """Check if PostgreSQL is accepting connections.

    Returns:
        True if PostgreSQL is reachable on port 5432, False otherwise.
    """
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.settimeout(1)
        result = sock.connect_ex(("127.0.0.1", 5432))
        sock.close()
        return result == 0
    except OSError:
        return False


# Check once at module load time
_POSTGRES_AVAILABLE = _is_postgres_available()


def skip_if_no_postgres() -> None:
    """Skip test if PostgreSQL is not available.

    Called by fixtures that require database connection.
    """
    if not _POSTGRES_AVAILABLE:
        pytest.skip(
            "PostgreSQL not available on port 5432. "
            "Start database with: docker compose up -d"
        )


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine.

    Skips test if PostgreSQL is not available (e.g., Docker not running).
    """
    skip_if_no_postgres()

    engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


# =============================================================================
# Service Fixtures
# =============================================================================


@pytest.fixture
def clock() -> FrozenClock:
    """Clock frozen at FROZEN_NOW."""
    return FrozenClock()


@pytest.fixture
def store() -> InMemoryProgressStore:
    """Empty in-memory progress store."""
    return InMemoryProgressStore()


@pytest.fixture
def service(store: InMemoryProgressStore, clock: FrozenClock) -> ProgressService:
    """Candidate-pipeline progress service over the in-memory store."""
    return ProgressService(store, CANDIDATE_ROUTES, clock=clock)


# =============================================================================
# API Test Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def client(
    store: InMemoryProgressStore,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for authenticated API tests.

    Sets up:
    - In-memory progress store via dependency override
    - JWT auth with test secret
    - httpx.AsyncClient with ASGI transport + auth cookie

    Args:
        store: In-memory store shared with the test for arranging records.

    Yields:
        Configured AsyncClient for making authenticated API requests.
    """
    from hireconnect.api.deps import get_progress_store
    from hireconnect.main import app

    app.dependency_overrides[get_progress_store] = lambda: store

    original_auth_enabled = settings.auth_enabled
    original_auth_secret = settings.auth_secret
    settings.auth_enabled = True
    settings.auth_secret = SecretStr(TEST_AUTH_SECRET)

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        cookies={settings.auth_cookie_name: create_test_jwt(TEST_SUBJECT_ID)},
    ) as ac:
        yield ac

    settings.auth_enabled = original_auth_enabled
    settings.auth_secret = original_auth_secret
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def unauthenticated_client(
    store: InMemoryProgressStore,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client without authentication.

    Auth is enabled but no JWT cookie is provided.

    Yields:
        AsyncClient with no auth cookie.
    """
    from hireconnect.api.deps import get_progress_store
    from hireconnect.main import app

    app.dependency_overrides[get_progress_store] = lambda: store

    original_auth_enabled = settings.auth_enabled
    original_auth_secret = settings.auth_secret
    settings.auth_enabled = True
    settings.auth_secret = SecretStr(TEST_AUTH_SECRET)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    settings.auth_enabled = original_auth_enabled
    settings.auth_secret = original_auth_secret
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def staff_client(
    store: InMemoryProgressStore,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client authenticated as an HR user.

    Shares the in-memory store with ``client`` so a test can write as
    staff and read back as the subject.

    Yields:
        AsyncClient whose cookie carries role "hr".
    """
    from hireconnect.api.deps import get_progress_store
    from hireconnect.main import app

    app.dependency_overrides[get_progress_store] = lambda: store

    original_auth_enabled = settings.auth_enabled
    original_auth_secret = settings.auth_secret
    settings.auth_enabled = True
    settings.auth_secret = SecretStr(TEST_AUTH_SECRET)

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        cookies={
            settings.auth_cookie_name: create_test_jwt(TEST_STAFF_ID, role="hr")
        },
    ) as ac:
        yield ac

    settings.auth_enabled = original_auth_enabled
    settings.auth_secret = original_auth_secret
    app.dependency_overrides.clear()
