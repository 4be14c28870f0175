"""Schemas for channel registration endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from viewerwatch.services.types import ensure_utc


class ChannelCreate(BaseModel):
    """Request body for registering a channel in a group.

    ``display_name`` is the name as typed by the user (Twitch login,
    YouTube ``@handle``, TikTok username). When ``platform_channel_id`` is
    omitted it is derived from it: looked up through Helix for Twitch, used
    as-is otherwise.
    """

    platform: Literal["twitch", "youtube", "tiktok"]
    display_name: str = Field(min_length=1, max_length=255)
    platform_channel_id: str | None = Field(default=None, min_length=1, max_length=128)


class ChannelResponse(BaseModel):
    id: str
    group_id: str
    platform: str
    platform_channel_id: str
    display_name: str
    peak_viewers_count: int
    peak_viewers_timestamp: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("peak_viewers_timestamp", "created_at")
    @classmethod
    def as_utc(cls, v: datetime | None) -> datetime | None:
        """SQLite returns naive datetimes; they are stored as UTC."""
        return ensure_utc(v) if v is not None else None
