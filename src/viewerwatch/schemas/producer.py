"""Schemas for producer endpoints."""

from pydantic import BaseModel


class ProducerRunResponse(BaseModel):
    platform: str
    samples_recorded: int
    live_channel_count: int
