"""Schemas for chart and history endpoints."""

from datetime import datetime

from pydantic import BaseModel


class ChartPointResponse(BaseModel):
    bucket_start: datetime
    total_viewers: int
    per_channel: dict[str, int]

    model_config = {"from_attributes": True}


class ChartResponse(BaseModel):
    """A minute-bucketed, multi-series viewer chart."""

    start: datetime
    end: datetime
    peak_total: int
    points: list[ChartPointResponse]
