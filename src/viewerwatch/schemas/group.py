"""Schemas for group management endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from viewerwatch.services.types import ensure_utc


class GroupCreate(BaseModel):
    """Request body for creating a group."""

    name: str = Field(min_length=1, max_length=255)


class GroupUpdate(BaseModel):
    """Request body for renaming a group."""

    name: str = Field(min_length=1, max_length=255)


class GroupResponse(BaseModel):
    id: str
    name: str
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("created_at")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)
