"""Latest-state resolver: the most recent sample per channel."""

from collections.abc import Iterable

from viewerwatch.services.types import Sample


def resolve(samples: Iterable[Sample]) -> dict[str, Sample]:
    """Reduce *samples* to the newest sample for each channel.

    Input order does not matter except for ties: when two samples of the same
    channel share a timestamp, the one encountered last wins. Channels with
    no samples get no entry, which callers must read as "never reported"
    rather than offline.
    """
    latest: dict[str, Sample] = {}
    for sample in samples:
        current = latest.get(sample.channel_id)
        if current is None or sample.timestamp >= current.timestamp:
            latest[sample.channel_id] = sample
    return latest
