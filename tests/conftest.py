"""Test fixtures and configuration."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from viewerwatch.dependencies import get_db
from viewerwatch.main import create_app
from viewerwatch.models import Base, Channel, Group
from viewerwatch.routers.producers import _run_limiter
from viewerwatch.services.peaks import _peak_locks


@pytest.fixture(autouse=True)
def _reset_process_state():
    """Clear the producer run limiter and peak locks before every test."""
    _run_limiter.reset()
    _peak_locks.clear()
    yield
    _run_limiter.reset()
    _peak_locks.clear()


@pytest_asyncio.fixture
async def db_engine():
    """Create an in-memory SQLite engine for tests."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session bound to the test engine."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def app(session_factory) -> FastAPI:
    """Create the application with the DB dependency pointed at the test engine."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application = create_app()
    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client for the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def group_with_channels(db_session: AsyncSession) -> dict:
    """Persist one group with a Twitch and a YouTube channel.

    Returns a dict with keys: ``group``, ``twitch``, ``youtube``.
    """
    group = Group(name="Fixture group")
    db_session.add(group)
    await db_session.flush()

    twitch = Channel(
        group_id=group.id,
        platform="twitch",
        platform_channel_id="1001",
        display_name="alpha",
    )
    youtube = Channel(
        group_id=group.id,
        platform="youtube",
        platform_channel_id="UCbeta",
        display_name="@beta",
    )
    db_session.add_all([twitch, youtube])
    await db_session.commit()
    return {"group": group, "twitch": twitch, "youtube": youtube}
