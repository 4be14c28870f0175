"""Group and channel registration endpoints."""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from viewerwatch.dependencies import get_db, get_group_or_404, get_producers, get_store
from viewerwatch.models.channel import Channel
from viewerwatch.models.group import Group
from viewerwatch.schemas.channel import ChannelCreate, ChannelResponse
from viewerwatch.schemas.group import GroupCreate, GroupResponse, GroupUpdate
from viewerwatch.services.peaks import forget_channels
from viewerwatch.services.producers import Producer, ProducerError
from viewerwatch.services.sample_store import SampleStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/groups", tags=["groups"])


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    body: GroupCreate,
    db: AsyncSession = Depends(get_db),
) -> GroupResponse:
    """Create a new, empty group."""
    group = Group(name=body.name)
    db.add(group)
    await db.flush()
    return GroupResponse.model_validate(group)


@router.get("", response_model=list[GroupResponse])
async def list_groups(db: AsyncSession = Depends(get_db)) -> list[GroupResponse]:
    """List all groups, oldest first."""
    result = await db.execute(select(Group).order_by(Group.created_at.asc()))
    return [GroupResponse.model_validate(g) for g in result.scalars().all()]


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(group: Group = Depends(get_group_or_404)) -> GroupResponse:
    return GroupResponse.model_validate(group)


@router.patch("/{group_id}", response_model=GroupResponse)
async def rename_group(
    body: GroupUpdate,
    group: Group = Depends(get_group_or_404),
    db: AsyncSession = Depends(get_db),
) -> GroupResponse:
    """Rename a group."""
    group.name = body.name
    await db.flush()
    return GroupResponse.model_validate(group)


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(
    group: Group = Depends(get_group_or_404),
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a group and its channels.

    Recorded samples are kept; they stay queryable by channel id.
    """
    result = await db.execute(select(Channel.id).where(Channel.group_id == group.id))
    channel_ids = list(result.scalars().all())
    await db.execute(delete(Channel).where(Channel.group_id == group.id))
    await db.delete(group)
    await db.flush()
    forget_channels(channel_ids)
    logger.info("Deleted group %s", group.id)


@router.post(
    "/{group_id}/channels",
    response_model=ChannelResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_channel(
    body: ChannelCreate,
    group: Group = Depends(get_group_or_404),
    db: AsyncSession = Depends(get_db),
    producers: dict[str, Producer] = Depends(get_producers),
) -> ChannelResponse:
    """Register a channel in a group.

    Twitch channels registered by login are resolved to their user id
    through Helix, which requires Twitch credentials.
    """
    platform_channel_id = body.platform_channel_id
    if platform_channel_id is None and body.platform == "twitch":
        platform_channel_id = await _resolve_twitch_user_id(
            producers.get("twitch"), body.display_name
        )
    elif platform_channel_id is None:
        platform_channel_id = body.display_name

    channel = Channel(
        group_id=group.id,
        platform=body.platform,
        platform_channel_id=platform_channel_id,
        display_name=body.display_name,
        peak_viewers_count=0,
    )
    db.add(channel)
    await db.flush()
    return ChannelResponse.model_validate(channel)


@router.get("/{group_id}/channels", response_model=list[ChannelResponse])
async def list_group_channels(
    group: Group = Depends(get_group_or_404),
    store: SampleStore = Depends(get_store),
) -> list[ChannelResponse]:
    channels = await store.list_channels(group_id=group.id)
    return [ChannelResponse.model_validate(c) for c in channels]


async def _resolve_twitch_user_id(producer: Producer | None, login: str) -> str:
    if producer is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Twitch credentials are not configured; pass platform_channel_id",
        )

    try:
        user = await producer.lookup_user(login)
    except (httpx.TimeoutException, httpx.RequestError, ProducerError) as exc:
        logger.error("Twitch user lookup for %s failed: %s", login, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Twitch user lookup failed",
        ) from exc

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Twitch channel '{login}' not found",
        )
    return user["id"]
