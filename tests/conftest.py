"""Test configuration and fixtures."""

import os
from datetime import UTC, datetime, timedelta

# Set test environment variables BEFORE importing app modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from runrun.auth import hash_password
from runrun.database import Base, get_db
from runrun.main import app
from runrun.models import Result, Runner, User, UserRole
from runrun.rate_limit import limiter

ADMIN_TOKEN = "admin_token"
RUNNER_TOKEN = "runner_token"


@pytest.fixture
async def async_engine():
    """Create async test database engine."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def async_session(async_engine):
    """Create async session factory."""
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Reset rate limiter state between tests to avoid cross-test pollution."""
    limiter.reset()
    yield


@pytest.fixture
def test_client(async_session):
    """Create test client with async database override."""
    from httpx import ASGITransport, AsyncClient

    async def override_get_db():
        async with async_session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    client = AsyncClient(transport=transport, base_url="http://test")
    yield client
    app.dependency_overrides.clear()


def _session_user(username: str, role: UserRole, token: str) -> User:
    return User(
        username=username,
        password_hash=hash_password("password"),
        role=role,
        access_token=token,
        access_token_expiry=datetime.now(UTC) + timedelta(minutes=15),
    )


@pytest.fixture
async def admin(async_session):
    """Create an admin user with a live session token."""
    async with async_session() as db:
        user = _session_user("admin", UserRole.ADMIN, ADMIN_TOKEN)
        db.add(user)
        await db.commit()
        return user


@pytest.fixture
async def runner_user(async_session):
    """Create a runner-role user with a live session token."""
    async with async_session() as db:
        user = _session_user("runner", UserRole.RUNNER, RUNNER_TOKEN)
        db.add(user)
        await db.commit()
        return user


@pytest.fixture
async def runner(async_session):
    """Create an active runner without results."""
    async with async_session() as db:
        runner = Runner(first_name="John", last_name="Doe", age=30, country="Canada")
        db.add(runner)
        await db.commit()
        return runner


@pytest.fixture
def add_result(async_session):
    """Insert a result row directly, bypassing best-time reconciliation."""

    async def _add(runner_id, race_result: str, year: int, location: str = "Toronto") -> Result:
        async with async_session() as db:
            result = Result(
                runner_id=runner_id,
                race_result=race_result,
                location=location,
                position=1,
                year=year,
            )
            db.add(result)
            await db.commit()
            return result

    return _add


@pytest.fixture
def set_bests(async_session):
    """Overwrite a runner's cached best times."""

    async def _set(runner_id, personal_best: str | None, season_best: str | None) -> None:
        async with async_session() as db:
            runner = await db.get(Runner, runner_id)
            runner.personal_best = personal_best
            runner.season_best = season_best
            await db.commit()

    return _set


@pytest.fixture
def load_runner(async_session):
    """Read a runner back from the database in a fresh session."""

    async def _load(runner_id) -> Runner:
        async with async_session() as db:
            return await db.get(Runner, runner_id)

    return _load
