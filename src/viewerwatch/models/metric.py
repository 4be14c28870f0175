"""Metric model: append-only viewer-count samples.

channel_id carries no foreign key: samples outlive the channel and group
they were recorded for. The integer id grows with every insert and breaks
ties between samples that share a timestamp.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from viewerwatch.models.base import Base


class Metric(Base):
    __tablename__ = "metrics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    channel_id: Mapped[str] = mapped_column(String(36), nullable=False)
    viewers_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_live: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    __table_args__ = (
        Index("ix_metrics_channel_id_timestamp", "channel_id", "timestamp"),
        Index("ix_metrics_timestamp", "timestamp"),
        # Never reuse ids, even after the newest row is deleted
        {"sqlite_autoincrement": True},
    )
