"""
Pytest fixtures: a fresh in-memory database per test, service-level sessions
and an HTTP client bound to the FastAPI app.
"""
import os

# Must be set before devconnector.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from devconnector.core.security import get_password_hash, gravatar_url
from devconnector.crud import user as user_crud
from devconnector.db.models import Base
from devconnector.db.session import get_db
from main import app

TEST_DATABASE_URL = "sqlite+aiosqlite://"

# Hashing is slow by design; every test user shares one hash
TEST_PASSWORD = "secret123"
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


@pytest.fixture
async def engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db(session_factory):
    """Session used directly by service tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(db):
    """Factory inserting a user row and returning it."""
    async def _make_user(name: str = "Jane Doe", email: str = "jane@example.com"):
        return await user_crud.create_user(
            db,
            name=name,
            email=email,
            password_hash=TEST_PASSWORD_HASH,
            avatar=gravatar_url(email),
        )
    return _make_user


@pytest.fixture
async def client(session_factory):
    """HTTP client with the request-scoped session bound to the test database."""
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register a user through the API and return auth headers for it."""
    async def _register(name: str = "Jane Doe", email: str = "jane@example.com"):
        response = await client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": TEST_PASSWORD},
        )
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}
    return _register
