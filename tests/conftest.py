"""
Shared test fixtures for Newsgate API tests.

Provides database session management, test clients, collaborator fakes and
user fixtures for every role.
"""

from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from newsgate.auth.jwt import create_access_token
from newsgate.config import settings
from newsgate.database import Base, get_db
from newsgate.main import app
from newsgate.middleware.rate_limit import reset_limiter

# Import models so they're registered with Base.metadata before table creation
from newsgate import models  # noqa: F401
from newsgate.models import Role

from factories import make_user

# In-memory SQLite; StaticPool keeps one connection so every session sees the same data
TEST_DATABASE_URL = settings.test_database_url


# --- Rate Limiter Reset Fixture ---


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Reset rate limiter before each test to ensure test isolation."""
    reset_limiter()
    yield


# --- Database Fixtures ---


@pytest_asyncio.fixture(scope="function")
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Create tables before each test function, drop after.
    Provides isolated database state per test.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Session shared by the test body and the app under test."""
    session_factory = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


class FaultySession(AsyncSession):
    """
    Session that fails selected writes, for exercising storage error paths.

    ``fail_on`` is called with each statement passed to ``execute``; a truthy
    result raises before the statement reaches the database. ``fail_commit``
    makes every commit raise.
    """

    def __init__(self, *args, fail_on=None, fail_commit: bool = False, **kwargs):
        super().__init__(*args, **kwargs)
        self.fail_on = fail_on
        self.fail_commit = fail_commit

    async def execute(self, statement, *args, **kwargs):
        if self.fail_on is not None and self.fail_on(statement):
            raise OperationalError(str(statement), {}, Exception("database is locked"))
        return await super().execute(statement, *args, **kwargs)

    async def commit(self) -> None:
        if self.fail_commit:
            raise OperationalError("COMMIT", {}, Exception("database is locked"))
        await super().commit()


@pytest_asyncio.fixture
async def faulty_db(db_engine: AsyncEngine):
    """
    Factory fixture that routes the app to a FaultySession.

    Usage:
        faulty_db(fail_on=lambda stmt: ...)  # or fail_commit=True
    """
    sessions: list[FaultySession] = []

    def _install(fail_on=None, fail_commit: bool = False) -> FaultySession:
        session = FaultySession(
            bind=db_engine,
            expire_on_commit=False,
            autoflush=False,
            fail_on=fail_on,
            fail_commit=fail_commit,
        )
        sessions.append(session)

        async def override_get_db():
            yield session

        app.dependency_overrides[get_db] = override_get_db
        return session

    yield _install

    for session in sessions:
        await session.close()


# --- Outbound HTTP ---


class RecordingTransport:
    """
    httpx mock transport that records requests and replies from a route table.

    Routes map a URL substring to a JSON body (and optional status code).
    Unmatched requests get a 404.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: list[tuple[str, int, Any]] = []

    def add(self, url_part: str, json: Any, status_code: int = 200) -> None:
        self.routes.append((url_part, status_code, json))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for url_part, status_code, body in self.routes:
            if url_part in str(request.url):
                return httpx.Response(status_code, json=body)
        return httpx.Response(404, json={"error": "no route"})

    def calls_to(self, url_part: str) -> list[httpx.Request]:
        return [r for r in self.requests if url_part in str(r.url)]


@pytest.fixture
def http_mock() -> RecordingTransport:
    return RecordingTransport()


@pytest_asyncio.fixture(scope="function")
async def async_client(
    db_session: AsyncSession, http_mock: RecordingTransport
) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client configured for testing.
    Overrides database dependency with test session and routes outbound
    HTTP through the recording transport.
    """

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.state.http_client = httpx.AsyncClient(transport=httpx.MockTransport(http_mock.handler))

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True,
    ) as client:
        yield client

    await app.state.http_client.aclose()
    del app.state.http_client
    app.dependency_overrides.clear()


# --- Authentication Helper Fixtures ---


@pytest.fixture
def auth_headers() -> Callable[[dict[str, Any]], dict[str, str]]:
    """Factory fixture for creating bearer headers for a user fixture."""

    def _auth_headers(user: dict[str, Any]) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user['auth_id'])}"}

    return _auth_headers


# --- User Fixtures ---


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> dict[str, Any]:
    """A regular reader."""
    return await make_user(db_session, "reader-auth", "reader@example.com")


@pytest_asyncio.fixture
async def second_user(db_session: AsyncSession) -> dict[str, Any]:
    return await make_user(db_session, "second-auth", "second@example.com")


@pytest_asyncio.fixture
async def test_journalist(db_session: AsyncSession) -> dict[str, Any]:
    return await make_user(
        db_session, "journalist-auth", "journalist@example.com", role=Role.JOURNALIST
    )


@pytest_asyncio.fixture
async def test_moderator(db_session: AsyncSession) -> dict[str, Any]:
    return await make_user(
        db_session, "moderator-auth", "moderator@example.com", role=Role.MODERATOR
    )


@pytest_asyncio.fixture
async def test_admin(db_session: AsyncSession) -> dict[str, Any]:
    return await make_user(db_session, "admin-auth", "admin@example.com", role=Role.ADMIN)


# --- Utility Fixtures ---


@pytest.fixture
def frozen_time():
    """
    Fixture for time-based testing using freezegun.

    Usage:
        with frozen_time("2026-02-01 12:00:00"):
            # time is frozen
    """
    from freezegun import freeze_time

    return freeze_time
