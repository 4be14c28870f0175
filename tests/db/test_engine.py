"""Tests for viewerwatch.db.engine against a file-backed SQLite database."""

import pytest
import pytest_asyncio
from sqlalchemy import select, text

from viewerwatch.config import get_settings
from viewerwatch.db.engine import dispose_engine, get_session, get_session_factory, init_db
from viewerwatch.models import Group


@pytest_asyncio.fixture
async def file_database(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'viewerwatch.db'}")
    get_settings.cache_clear()
    await init_db()
    yield
    await dispose_engine()
    get_settings.cache_clear()


class TestEngine:
    @pytest.mark.asyncio
    async def test_session_commits_on_success(self, file_database):
        async for session in get_session():
            session.add(Group(name="persisted"))

        async with get_session_factory()() as session:
            names = (await session.execute(select(Group.name))).scalars().all()
        assert names == ["persisted"]

    @pytest.mark.asyncio
    async def test_session_rolls_back_on_error(self, file_database):
        sessions = get_session()
        session = await sessions.__anext__()
        session.add(Group(name="discarded"))
        await session.flush()

        with pytest.raises(RuntimeError):
            await sessions.athrow(RuntimeError("boom"))

        async with get_session_factory()() as session:
            names = (await session.execute(select(Group.name))).scalars().all()
        assert names == []

    @pytest.mark.asyncio
    async def test_file_database_uses_wal(self, file_database):
        async with get_session_factory()() as session:
            mode = (await session.execute(text("PRAGMA journal_mode"))).scalar_one()
        assert mode.lower() == "wal"

    @pytest.mark.asyncio
    async def test_dispose_resets_factory(self, file_database):
        first = get_session_factory()
        await dispose_engine()
        assert get_session_factory() is not first
