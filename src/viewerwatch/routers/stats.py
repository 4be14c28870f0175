"""Dashboard statistics endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from viewerwatch.dependencies import get_db, get_group_or_404, get_store
from viewerwatch.models.group import Group
from viewerwatch.schemas.stats import (
    ChannelState,
    DashboardResponse,
    GroupRollup,
    GroupStatsResponse,
)
from viewerwatch.services.latest_state import resolve
from viewerwatch.services.sample_store import SampleStore
from viewerwatch.services.stats import aggregate, aggregate_groups
from viewerwatch.services.types import ensure_utc

router = APIRouter(prefix="/v1", tags=["stats"])


@router.get("/stats", response_model=DashboardResponse)
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    store: SampleStore = Depends(get_store),
) -> DashboardResponse:
    """Overall and per-group totals from each channel's latest sample.

    Only currently registered channels are counted.
    """
    channels = await store.list_channels()
    channel_ids = [c.id for c in channels]
    latest = resolve(await store.query(channel_ids))

    overall = aggregate(latest, channel_ids)
    rollup = aggregate_groups(latest, channels)

    result = await db.execute(select(Group).order_by(Group.created_at.asc()))
    groups = [
        GroupRollup(group_id=group.id, name=group.name, **rollup.get(group.id, {}))
        for group in result.scalars().all()
    ]

    return DashboardResponse(
        generated_at=datetime.now(timezone.utc),
        total_channels=len(channels),
        live_channel_count=overall.live_channel_count,
        total_viewers=overall.total_viewers,
        groups=groups,
    )


@router.get("/groups/{group_id}/stats", response_model=GroupStatsResponse)
async def get_group_stats(
    group: Group = Depends(get_group_or_404),
    store: SampleStore = Depends(get_store),
) -> GroupStatsResponse:
    """Totals for one group plus the latest state of each of its channels."""
    channels = await store.list_channels(group_id=group.id)
    channel_ids = [c.id for c in channels]
    latest = resolve(await store.query(channel_ids))
    stats = aggregate(latest, channel_ids)

    states = []
    for channel in channels:
        sample = latest.get(channel.id)
        states.append(
            ChannelState(
                channel_id=channel.id,
                display_name=channel.display_name,
                platform=channel.platform,
                is_live=sample.is_live if sample else None,
                viewers_count=sample.viewers_count if sample else None,
                last_seen_at=sample.timestamp if sample else None,
                peak_viewers_count=channel.peak_viewers_count,
                peak_viewers_timestamp=(
                    ensure_utc(channel.peak_viewers_timestamp)
                    if channel.peak_viewers_timestamp
                    else None
                ),
            )
        )

    return GroupStatsResponse(
        group_id=group.id,
        name=group.name,
        generated_at=datetime.now(timezone.utc),
        total_channels=len(channels),
        live_channel_count=stats.live_channel_count,
        total_viewers=stats.total_viewers,
        channels=states,
    )
