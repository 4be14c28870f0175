"""Common producer plumbing: the live-status type and the run loop body.

A producer only answers "which of these channels are live, and with how many
viewers". ``run_producer`` turns that answer into samples: every channel of
the producer's platform gets exactly one sample per run, and channels the
producer could not check are recorded as offline rather than skipped.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from viewerwatch.models.channel import Channel
from viewerwatch.services.peaks import observe
from viewerwatch.services.sample_store import SampleStore
from viewerwatch.services.types import Sample

logger = logging.getLogger(__name__)


class ProducerError(Exception):
    """A platform API answered with an error status or an unusable body."""


@dataclass(frozen=True, slots=True)
class LiveStatus:
    is_live: bool
    viewers_count: int = 0


OFFLINE = LiveStatus(is_live=False, viewers_count=0)


class Producer:
    """Base class for platform pollers."""

    platform: str = ""

    async def fetch_statuses(self, channels: list[Channel]) -> dict[str, LiveStatus]:
        """Return live status keyed by ``Channel.id``.

        Channels missing from the result are treated as offline.
        """
        raise NotImplementedError

    async def close(self) -> None:
        """Release network resources. Called on app shutdown."""


async def run_producer(
    producer: Producer,
    db: AsyncSession,
    now: datetime | None = None,
) -> list[Sample]:
    """Poll one platform and append a sample for each of its channels."""
    store = SampleStore(db)
    channels = await store.list_channels(platform=producer.platform)
    if not channels:
        logger.debug("No %s channels registered, nothing to poll", producer.platform)
        return []

    statuses = await producer.fetch_statuses(channels)
    observed_at = now or datetime.now(timezone.utc)

    samples = []
    for channel in channels:
        status = statuses.get(channel.id, OFFLINE)
        sample = await store.insert(
            Sample(
                channel_id=channel.id,
                viewers_count=status.viewers_count if status.is_live else 0,
                is_live=status.is_live,
                timestamp=observed_at,
            )
        )
        await observe(store, sample)
        samples.append(sample)

    live = sum(1 for s in samples if s.is_live)
    logger.info(
        "Recorded %d %s samples (%d live)", len(samples), producer.platform, live
    )
    return samples
