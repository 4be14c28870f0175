"""Schemas for dashboard statistics endpoints."""

from datetime import datetime

from pydantic import BaseModel


class GroupRollup(BaseModel):
    """Stats card for one group."""

    group_id: str
    name: str
    total_channels: int = 0
    live_channel_count: int = 0
    total_viewers: int = 0


class DashboardResponse(BaseModel):
    """Response for GET /v1/stats."""

    generated_at: datetime
    total_channels: int
    live_channel_count: int
    total_viewers: int
    groups: list[GroupRollup]


class ChannelState(BaseModel):
    """Latest known state of one channel.

    ``is_live``, ``viewers_count`` and ``last_seen_at`` are None when the
    channel has never reported.
    """

    channel_id: str
    display_name: str
    platform: str
    is_live: bool | None = None
    viewers_count: int | None = None
    last_seen_at: datetime | None = None
    peak_viewers_count: int = 0
    peak_viewers_timestamp: datetime | None = None


class GroupStatsResponse(BaseModel):
    """Response for GET /v1/groups/{group_id}/stats."""

    group_id: str
    name: str
    generated_at: datetime
    total_channels: int
    live_channel_count: int
    total_viewers: int
    channels: list[ChannelState]
