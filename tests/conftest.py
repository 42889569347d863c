"""Test fixtures — a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own in-memory SQLite engine (aiosqlite). StaticPool
   keeps a single connection alive, so every session sees the same database.
2. Tables come straight from Base.metadata.create_all.
3. get_db is overridden so each HTTP request opens its own session on that
   engine, exactly like production does on the real engine.

The settings below are applied before taskhub is imported, so the app
module never needs a running PostgreSQL server.
"""

import os

os.environ.setdefault("TASKHUB_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("TASKHUB_ENVIRONMENT", "test")
os.environ.setdefault("TASKHUB_BCRYPT_ROUNDS", "4")

import uuid  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from taskhub.auth.context import AuthContext, Role  # noqa: E402
from taskhub.auth.jwt import issue_token  # noqa: E402
from taskhub.config import settings  # noqa: E402
from taskhub.db.engine import get_db  # noqa: E402
from taskhub.db.models import Base  # noqa: E402
from taskhub.main import app  # noqa: E402

TEST_DB_URL = "sqlite+aiosqlite://"
PASSWORD = "password1"


@pytest_asyncio.fixture()
async def engine():
    engine = create_async_engine(
        TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """A session for service-level tests and for inspecting rows."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client with get_db pointed at the per-test database.

    Learn: Auth is NOT overridden. Tests register and log in through the
    real endpoints (see make_user), so the whole token pipeline runs.
    """
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(client):
    """Register + log in a fresh user; returns the login body plus headers."""

    async def _make(username: str | None = None, password: str = PASSWORD) -> dict:
        username = username or f"user-{uuid.uuid4().hex[:8]}"
        r = await client.post(
            "/api/v1/users/register",
            json={
                "username": username,
                "email": f"{username}@example.com",
                "password": password,
            },
        )
        assert r.status_code == 200, r.text

        r = await client.post(
            "/api/v1/users/login",
            json={"username": username, "password": password},
        )
        assert r.status_code == 200, r.text
        body = r.json()
        body["headers"] = {"Authorization": f"Bearer {body['token']}"}
        return body

    return _make


@pytest.fixture()
def bearer_for():
    """Build an Authorization header for a user acting in org with role.

    Login always binds the caller's own organization as admin; tests that
    need a plain member of someone else's organization mint the token here.
    """

    def _bearer(user: dict, org: dict, role: Role) -> dict:
        context = AuthContext(
            user_id=user["id"],
            username=user["username"],
            email=user["email"],
            org_id=org["id"],
            org_name=org["name"],
            role=role,
        )
        token = issue_token(context, settings.jwt_secret, ttl=settings.token_ttl)
        return {"Authorization": f"Bearer {token}"}

    return _bearer
