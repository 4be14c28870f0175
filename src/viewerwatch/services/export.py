"""Tabular export of raw samples."""

import csv
import io
from collections.abc import Iterable

from viewerwatch.models.channel import Channel
from viewerwatch.services.chart import UNKNOWN_CHANNEL
from viewerwatch.services.types import Sample, ensure_utc

EXPORT_COLUMNS = ["channel", "timestamp", "viewers", "peak_viewers", "is_live"]


def export_rows(samples: Iterable[Sample], channels: Iterable[Channel]) -> list[dict]:
    """One row per sample, with the channel's stored peak alongside."""
    by_id = {channel.id: channel for channel in channels}

    rows = []
    for sample in samples:
        channel = by_id.get(sample.channel_id)
        rows.append({
            "channel": channel.display_name if channel else UNKNOWN_CHANNEL,
            "timestamp": ensure_utc(sample.timestamp).isoformat(),
            "viewers": sample.viewers_count,
            "peak_viewers": channel.peak_viewers_count if channel else 0,
            "is_live": "yes" if sample.is_live else "no",
        })
    return rows


def render_csv(rows: Iterable[dict]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS, lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()
