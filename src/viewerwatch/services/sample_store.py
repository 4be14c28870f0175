"""Sample store: read/write access to the metrics and channel peak columns."""

import logging
from collections.abc import Collection
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from viewerwatch.models.channel import Channel
from viewerwatch.models.metric import Metric
from viewerwatch.services.types import Sample, ensure_utc

logger = logging.getLogger(__name__)


def _to_sample(row: Metric) -> Sample:
    return Sample(
        channel_id=row.channel_id,
        viewers_count=row.viewers_count,
        is_live=row.is_live,
        timestamp=ensure_utc(row.timestamp),
    )


class SampleStore:
    """Append-only sample table plus the conditional peak update path.

    Wraps a request- or job-scoped ``AsyncSession``; committing is left to
    whoever owns the session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def query(
        self,
        channel_ids: Collection[str],
        time_from: datetime | None = None,
        time_to: datetime | None = None,
    ) -> list[Sample]:
        """Return samples of *channel_ids*, oldest first.

        Samples sharing a timestamp come back in insertion order. Both bounds
        are inclusive and optional; omitting them queries all time.
        """
        if not channel_ids:
            return []

        stmt = select(Metric).where(Metric.channel_id.in_(list(channel_ids)))
        if time_from is not None:
            stmt = stmt.where(Metric.timestamp >= ensure_utc(time_from))
        if time_to is not None:
            stmt = stmt.where(Metric.timestamp <= ensure_utc(time_to))
        stmt = stmt.order_by(Metric.timestamp.asc(), Metric.id.asc())

        result = await self.db.execute(stmt)
        return [_to_sample(row) for row in result.scalars().all()]

    async def insert(self, sample: Sample) -> Sample:
        """Append one sample."""
        row = Metric(
            channel_id=sample.channel_id,
            viewers_count=sample.viewers_count,
            is_live=sample.is_live,
            timestamp=ensure_utc(sample.timestamp),
        )
        self.db.add(row)
        await self.db.flush()
        return _to_sample(row)

    async def get_peak(self, channel_id: str) -> tuple[int, datetime | None] | None:
        """Return ``(peak, timestamp)`` for a channel, or None if it does not exist."""
        stmt = select(
            Channel.peak_viewers_count, Channel.peak_viewers_timestamp
        ).where(Channel.id == channel_id)
        result = await self.db.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return None
        peak_ts = ensure_utc(row.peak_viewers_timestamp) if row.peak_viewers_timestamp else None
        return row.peak_viewers_count, peak_ts

    async def update_channel_peak(
        self, channel_id: str, viewers: int, timestamp: datetime
    ) -> bool:
        """Raise the channel's peak to *viewers* if it is strictly greater.

        The comparison happens inside the UPDATE, so a concurrent writer that
        already stored a higher peak makes this a no-op. Returns whether a
        row was changed.
        """
        stmt = (
            update(Channel)
            .where(Channel.id == channel_id)
            .where(Channel.peak_viewers_count < viewers)
            .values(
                peak_viewers_count=viewers,
                peak_viewers_timestamp=ensure_utc(timestamp),
            )
        )
        result = await self.db.execute(stmt)
        changed = result.rowcount == 1
        if changed:
            logger.debug("New peak for channel %s: %d viewers", channel_id, viewers)
        return changed

    async def list_channels(
        self,
        group_id: str | None = None,
        platform: str | None = None,
    ) -> list[Channel]:
        """Return registered channels, optionally filtered by group and platform."""
        stmt = select(Channel)
        if group_id is not None:
            stmt = stmt.where(Channel.group_id == group_id)
        if platform is not None:
            stmt = stmt.where(Channel.platform == platform)
        stmt = stmt.order_by(Channel.created_at.asc())

        result = await self.db.execute(stmt)
        return list(result.scalars().all())
