"""Time-window chart builder.

Turns a flat list of labelled samples into one point per minute with a
per-channel breakdown, the shape a multi-series line chart consumes.

Rules:
- the window is open at its lower bound: a sample exactly ``window_hours``
  old is dropped;
- buckets are whole minutes, seconds are truncated (never rounded);
- two samples of one channel in the same bucket do not add up, the one
  processed later replaces the earlier one;
- minutes without samples produce no point.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta

from viewerwatch.services.types import ChartPoint, ChartSample, Sample, ensure_utc

UNKNOWN_CHANNEL = "Unknown"


def _bucket_key(timestamp: datetime) -> datetime:
    return ensure_utc(timestamp).replace(second=0, microsecond=0)


def build_chart(
    samples: Iterable[ChartSample],
    window_hours: float,
    now: datetime,
) -> list[ChartPoint]:
    """Bucket the samples of the last *window_hours* by minute.

    Returns points in ascending ``bucket_start`` order; no samples in the
    window means an empty list.
    """
    cutoff = ensure_utc(now) - timedelta(hours=window_hours)

    buckets: dict[datetime, dict[str, int]] = {}
    for sample in samples:
        if ensure_utc(sample.timestamp) <= cutoff:
            continue
        per_channel = buckets.setdefault(_bucket_key(sample.timestamp), {})
        per_channel[sample.channel_name] = sample.viewers

    return [
        ChartPoint(
            bucket_start=bucket_start,
            total_viewers=sum(per_channel.values()),
            per_channel=dict(per_channel),
        )
        for bucket_start, per_channel in sorted(buckets.items())
    ]


def densify(points: Iterable[ChartPoint]) -> list[ChartPoint]:
    """Fill channel keys missing from a bucket with 0.

    Only existing buckets are touched; gaps between minutes stay gaps.
    """
    points = list(points)
    names: list[str] = []
    for point in points:
        for name in point.per_channel:
            if name not in names:
                names.append(name)

    dense = []
    for point in points:
        per_channel = {name: point.per_channel.get(name, 0) for name in names}
        dense.append(
            ChartPoint(
                bucket_start=point.bucket_start,
                total_viewers=sum(per_channel.values()),
                per_channel=per_channel,
            )
        )
    return dense


def peak_total(points: Iterable[ChartPoint]) -> int:
    """Highest bucket total, 0 when there are no points."""
    return max((point.total_viewers for point in points), default=0)


def to_chart_samples(
    samples: Iterable[Sample],
    channel_names: Mapping[str, str],
) -> list[ChartSample]:
    """Label store samples with their channel display names."""
    return [
        ChartSample(
            channel_name=channel_names.get(sample.channel_id, UNKNOWN_CHANNEL),
            viewers=sample.viewers_count,
            timestamp=sample.timestamp,
        )
        for sample in samples
    ]
