"""API-specific test fixtures."""

import os

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from weekline.core.auth import CurrentUser, optional_auth, require_auth
from weekline.db.base import Base


@pytest.fixture
async def engine(tmp_path) -> AsyncEngine:
    """Create a test engine and install it as the global session factory.

    Defaults to a throwaway SQLite file; set TEST_DATABASE_URL to run against
    PostgreSQL instead.
    """
    import weekline.db.base as db_mod

    url = os.getenv("TEST_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'weekline_test.db'}")
    engine = create_async_engine(url, echo=False)

    # Import all models so metadata is populated
    import weekline.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    db_mod._engine = engine
    db_mod._session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    db_mod._engine = None
    db_mod._session_factory = None
    await engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncSession:
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def app(engine):
    """Full application wired to the test database (lifespan not run)."""
    from weekline.main import create_app

    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def override_auth(user: CurrentUser | None):
    """Dependency override factory for require_auth / optional_auth."""

    async def _override():
        return user

    return _override


@pytest.fixture
def sign_in(app):
    """Authenticate every request as ``user`` (mutations and reads alike)."""

    def _sign_in(user: CurrentUser) -> None:
        app.dependency_overrides[require_auth] = override_auth(user)
        app.dependency_overrides[optional_auth] = override_auth(user)

    return _sign_in


@pytest.fixture
def alice():
    return CurrentUser(user_id="user_alice", email="alice@example.com", claims={"sub": "user_alice"})


@pytest.fixture
def bob():
    return CurrentUser(user_id="user_bob", email="bob@example.com", claims={"sub": "user_bob"})


@pytest.fixture
def seed(db_session):
    """Helpers that insert committed rows straight through the ORM."""
    from datetime import timedelta

    from weekline.db.models import Project, UserSettings, WorkSession

    class _Seed:
        async def project(self, owner_id: str, name: str = "Alpha", color: str | None = "blue", archived=False):
            project = Project(owner_id=owner_id, name=name, color=color, is_archived=archived)
            db_session.add(project)
            await db_session.commit()
            await db_session.refresh(project)
            return project

        async def work_session(self, project, start, minutes: float, intention: str = "Deep work", notes=None):
            duration_ms = int(minutes * 60_000)
            work_session = WorkSession(
                owner_id=project.owner_id,
                project_id=project.id,
                intention=intention,
                notes=notes,
                start_time=start,
                end_time=start + timedelta(milliseconds=duration_ms),
                duration_ms=duration_ms,
            )
            db_session.add(work_session)
            await db_session.commit()
            await db_session.refresh(work_session)
            return work_session

        async def settings(self, owner_id: str, **fields):
            settings = UserSettings(owner_id=owner_id, **fields)
            db_session.add(settings)
            await db_session.commit()
            await db_session.refresh(settings)
            return settings

    return _Seed()
