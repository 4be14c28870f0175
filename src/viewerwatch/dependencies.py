"""FastAPI dependency injection functions."""

from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from viewerwatch.config import Settings, get_settings
from viewerwatch.db.engine import get_session
from viewerwatch.models.group import Group
from viewerwatch.services.producers import Producer
from viewerwatch.services.sample_store import SampleStore


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session."""
    async for session in get_session():
        yield session


def get_app_settings() -> Settings:
    """Return application settings."""
    return get_settings()


def get_store(db: AsyncSession = Depends(get_db)) -> SampleStore:
    """Return a sample store bound to the request's session."""
    return SampleStore(db)


def get_producers(request: Request) -> dict[str, Producer]:
    """Return the producers built at startup, keyed by platform."""
    return getattr(request.app.state, "producers", {})


async def get_group_or_404(
    group_id: str,
    db: AsyncSession = Depends(get_db),
) -> Group:
    """Load the group named in the path or fail with 404."""
    result = await db.execute(select(Group).where(Group.id == group_id))
    group = result.scalar_one_or_none()

    if group is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found",
        )

    return group
