"""Stats aggregator: live-channel counts and viewer totals."""

from collections.abc import Iterable, Mapping

from viewerwatch.models.channel import Channel
from viewerwatch.services.types import Sample, ViewerStats


def aggregate(
    latest: Mapping[str, Sample],
    scope: Iterable[str] | None = None,
) -> ViewerStats:
    """Sum viewers and count live channels over the latest samples.

    When *scope* is given only channels in it are considered; scope members
    without a latest sample simply contribute nothing. Offline channels never
    add viewers, even if their last sample carries a stale nonzero count.
    """
    if scope is None:
        entries = latest.values()
    else:
        entries = [latest[cid] for cid in set(scope) if cid in latest]

    total_viewers = 0
    live_channel_count = 0
    for sample in entries:
        if not sample.is_live:
            continue
        live_channel_count += 1
        total_viewers += sample.viewers_count

    return ViewerStats(
        total_viewers=total_viewers,
        live_channel_count=live_channel_count,
    )


def aggregate_groups(
    latest: Mapping[str, Sample],
    channels: Iterable[Channel],
) -> dict[str, dict]:
    """Roll up stats per group for the dashboard cards.

    ``total_channels`` counts every registered channel of the group, whether
    or not it has reported yet.
    """
    members: dict[str, list[str]] = {}
    for channel in channels:
        members.setdefault(channel.group_id, []).append(channel.id)

    rollup = {}
    for group_id, channel_ids in members.items():
        stats = aggregate(latest, channel_ids)
        rollup[group_id] = {
            "total_channels": len(channel_ids),
            "live_channel_count": stats.live_channel_count,
            "total_viewers": stats.total_viewers,
        }
    return rollup
