"""Schemas for the sample ingest endpoint."""

from datetime import datetime

from pydantic import BaseModel, Field


class SampleCreate(BaseModel):
    """One observation pushed by an external producer."""

    channel_id: str = Field(min_length=1, max_length=36)
    viewers_count: int = Field(ge=0)
    is_live: bool
    timestamp: datetime | None = Field(
        default=None, description="Observation time; defaults to the time of receipt."
    )


class SampleResponse(BaseModel):
    channel_id: str
    viewers_count: int
    is_live: bool
    timestamp: datetime
    peak_viewers_count: int
    new_peak: bool
