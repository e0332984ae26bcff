# tests/conftest.py
import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-jwt-signing-only")

from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.auth import User
from app.core.database import Base, get_async_session
from app.crud.badge import seed_default_badges
from app.main import app


@pytest_asyncio.fixture
async def engine(tmp_path):
    """A fresh SQLite file per test; separate connections behave like separate clients."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def badges(db_session):
    return await seed_default_badges(db_session)


@pytest.fixture
def make_user(db_session):
    async def _make_user(username: str = "alice") -> User:
        user = User(
            email=f"{username}@example.com",
            username=username,
            hashed_password="not-a-real-hash",
            is_active=True,
            is_superuser=False,
            is_verified=True,
            saved_amount=Decimal("0.00"),
            streak=0,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_async_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def register_and_login(client):
    """Register through the auth routes and return bearer headers for the new user."""
    async def _register_and_login(username: str = "alice", password: str = "s3cret-passw0rd") -> dict:
        email = f"{username}@example.com"
        res = await client.post(
            "/api/v1/auth/register",
            json={"email": email, "password": password, "username": username},
        )
        assert res.status_code == 201, res.text
        res = await client.post(
            "/api/v1/auth/jwt/login",
            data={"username": email, "password": password},
        )
        assert res.status_code == 200, res.text
        return {"Authorization": f"Bearer {res.json()['access_token']}"}

    return _register_and_login
