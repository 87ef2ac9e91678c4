"""Test fixtures — an isolated in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Environment is pointed at SQLite (aiosqlite) *before* todoapp is
   imported, so the module-level engine never needs a Postgres server.
2. Each test gets its own in-memory engine (StaticPool keeps the single
   connection alive) with freshly created tables.
3. get_db is overridden to hand out sessions bound to that engine, so
   every request still gets its own session, like in production.
"""

import os

os.environ.setdefault("TODOAPP_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("TODOAPP_BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from todoapp.db.engine import create_tables, get_db  # noqa: E402
from todoapp.main import app  # noqa: E402

TEST_DB_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture()
async def db_engine():
    engine = create_async_engine(TEST_DB_URL, poolclass=StaticPool)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(db_engine):
    """A session for arranging or inspecting data directly."""
    async with AsyncSession(db_engine, expire_on_commit=False) as session:
        yield session


@pytest_asyncio.fixture()
async def client(db_engine):
    """HTTP client against the app with get_db bound to the test engine.

    Learn: No auth override here. Task routes must behave correctly for
    anonymous, valid-token and invalid-token callers, so tests send real
    tokens obtained from /api/register and /api/login.
    """
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Factory: register a user and return (token, user)."""

    async def _register(email: str, name: str = "Test User", password: str = "pw123"):
        r = await client.post(
            "/api/register",
            json={"email": email, "password": password, "name": name},
        )
        assert r.status_code == 201, r.text
        body = r.json()
        return body["token"], body["user"]

    return _register
