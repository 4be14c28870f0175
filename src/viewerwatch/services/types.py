"""Value types shared by the aggregation services.

These are plain frozen dataclasses so the pure services never touch the ORM;
the sample store converts ``Metric`` rows into ``Sample`` values.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


def ensure_utc(value: datetime) -> datetime:
    """Return *value* as an aware UTC datetime.

    SQLite hands back naive datetimes for ``DateTime(timezone=True)``
    columns; those are stored in UTC, so naive values are tagged as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True, slots=True)
class Sample:
    """One immutable viewer-count observation for a channel."""

    channel_id: str
    viewers_count: int
    is_live: bool
    timestamp: datetime


@dataclass(frozen=True, slots=True)
class ChartSample:
    """A sample labelled with its channel's display name, ready for charting."""

    channel_name: str
    viewers: int
    timestamp: datetime


@dataclass(frozen=True, slots=True)
class ChartPoint:
    """Viewer totals for one minute bucket."""

    bucket_start: datetime
    total_viewers: int
    per_channel: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ViewerStats:
    total_viewers: int = 0
    live_channel_count: int = 0


@dataclass(frozen=True, slots=True)
class PeakUpdate:
    new_peak: int
    new_peak_timestamp: datetime | None
    changed: bool
