"""Peak tracker: per-channel maximum viewers and when it happened.

The peak is a materialized column on the channel row. It only ever goes up:
a candidate replaces it when strictly greater, and the write itself is a
conditional UPDATE so concurrent producers cannot lower it.
"""

import asyncio
import logging
from collections.abc import Iterable
from datetime import datetime

from viewerwatch.config import get_settings
from viewerwatch.services.sample_store import SampleStore
from viewerwatch.services.types import PeakUpdate, Sample, ensure_utc

logger = logging.getLogger(__name__)

# Per-channel locks serialize read-then-write within this process
_peak_locks: dict[str, asyncio.Lock] = {}


def _get_lock(channel_id: str) -> asyncio.Lock:
    if channel_id not in _peak_locks:
        _peak_locks[channel_id] = asyncio.Lock()
    return _peak_locks[channel_id]


def forget_channels(channel_ids: Iterable[str]) -> None:
    """Drop the locks of removed channels."""
    for channel_id in channel_ids:
        _peak_locks.pop(channel_id, None)


def update_peak(
    existing_peak: int,
    existing_timestamp: datetime | None,
    candidate_viewers: int,
    candidate_timestamp: datetime,
) -> PeakUpdate:
    """Apply the max rule to one candidate observation.

    The timestamp moves only when the candidate is strictly greater, so an
    equal later observation keeps the original peak time.
    """
    if candidate_viewers > existing_peak:
        return PeakUpdate(
            new_peak=candidate_viewers,
            new_peak_timestamp=candidate_timestamp,
            changed=True,
        )
    return PeakUpdate(
        new_peak=existing_peak,
        new_peak_timestamp=existing_timestamp,
        changed=False,
    )


async def observe(
    store: SampleStore,
    sample: Sample,
    max_attempts: int | None = None,
) -> PeakUpdate:
    """Feed one newly stored sample to its channel's peak.

    Writes only when the peak changes. If the conditional write loses to a
    concurrent writer the peak is re-read and the rule re-applied, up to
    *max_attempts* times. Samples of unknown channels are ignored.
    """
    if max_attempts is None:
        max_attempts = get_settings().peak_update_max_attempts

    channel_id = sample.channel_id
    timestamp = ensure_utc(sample.timestamp)

    async with _get_lock(channel_id):
        for attempt in range(1, max_attempts + 1):
            current = await store.get_peak(channel_id)
            if current is None:
                logger.debug("Skipping peak update for unknown channel %s", channel_id)
                return PeakUpdate(new_peak=0, new_peak_timestamp=None, changed=False)

            peak, peak_timestamp = current
            result = update_peak(peak, peak_timestamp, sample.viewers_count, timestamp)
            if not result.changed:
                return result

            if await store.update_channel_peak(
                channel_id, result.new_peak, result.new_peak_timestamp
            ):
                logger.info(
                    "Channel %s reached a new peak of %d viewers",
                    channel_id,
                    result.new_peak,
                )
                return result

            logger.warning(
                "Peak update for channel %s lost a race (attempt %d/%d), retrying",
                channel_id,
                attempt,
                max_attempts,
            )

        current = await store.get_peak(channel_id)
        peak, peak_timestamp = current if current is not None else (0, None)
        return PeakUpdate(new_peak=peak, new_peak_timestamp=peak_timestamp, changed=False)
