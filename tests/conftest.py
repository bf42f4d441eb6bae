"""Test fixtures — in-memory SQLite app per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets a fresh in-memory SQLite database (aiosqlite + StaticPool,
   so every session shares the one connection that holds the schema).
2. The schema comes straight from Base.metadata, no migrations needed.
3. create_app() gets explicit Settings; the engine on app.state is swapped
   for the test engine. Nothing global to reset between tests.

bcrypt runs with rounds=4 so hashing doesn't dominate test time.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from fittrack.auth.jwt import TokenCodec
from fittrack.auth.password import PasswordHasher
from fittrack.config import Settings
from fittrack.db.engine import build_session_factory
from fittrack.db.models import Base
from fittrack.main import create_app

TEST_SECRET = "test-secret-for-hs256-signing-0123456789"
TEST_DB_URL = "sqlite+aiosqlite://"


@pytest.fixture()
def settings():
    return Settings(
        jwt_secret=TEST_SECRET,
        database_url=TEST_DB_URL,
        bcrypt_rounds=4,
        environment="test",
    )


@pytest.fixture()
def codec(settings):
    return TokenCodec(settings)


@pytest.fixture()
def hasher():
    return PasswordHasher(rounds=4)


@pytest_asyncio.fixture()
async def engine():
    engine = create_async_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(engine):
    session = AsyncSession(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()


@pytest.fixture()
def app(settings, engine):
    app = create_app(settings)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    return app


@pytest_asyncio.fixture()
async def client(app):
    """HTTP client running the full middleware stack against the test DB."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture()
async def auth_headers(client):
    """Register a throwaway user and return its bearer header."""
    r = await client.post(
        "/auth/register",
        json={
            "username": "fixture_user",
            "email": "fixture@example.com",
            "password": "fixture_pw_123",
        },
    )
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['token']}"}
