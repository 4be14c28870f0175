"""Single-channel endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from viewerwatch.dependencies import get_db
from viewerwatch.models.channel import Channel
from viewerwatch.schemas.channel import ChannelResponse
from viewerwatch.services.peaks import forget_channels

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/channels", tags=["channels"])


async def _get_channel_or_404(channel_id: str, db: AsyncSession) -> Channel:
    result = await db.execute(select(Channel).where(Channel.id == channel_id))
    channel = result.scalar_one_or_none()
    if channel is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Channel not found",
        )
    return channel


@router.get("/{channel_id}", response_model=ChannelResponse)
async def get_channel(
    channel_id: str,
    db: AsyncSession = Depends(get_db),
) -> ChannelResponse:
    """Return a channel with its stored peak."""
    channel = await _get_channel_or_404(channel_id, db)
    return ChannelResponse.model_validate(channel)


@router.delete("/{channel_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_channel(
    channel_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Remove a channel from its group. Its samples are retained."""
    channel = await _get_channel_or_404(channel_id, db)
    await db.delete(channel)
    await db.flush()
    forget_channels([channel.id])
    logger.info("Removed channel %s (%s)", channel.id, channel.display_name)
