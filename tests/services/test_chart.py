"""Tests for viewerwatch.services.chart."""

from datetime import datetime, timedelta, timezone

from viewerwatch.services.chart import (
    UNKNOWN_CHANNEL,
    build_chart,
    densify,
    peak_total,
    to_chart_samples,
)
from viewerwatch.services.types import ChartPoint, ChartSample, Sample

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _cs(name: str, viewers: int, ts: datetime) -> ChartSample:
    return ChartSample(channel_name=name, viewers=viewers, timestamp=ts)


# ---------------------------------------------------------------------------
# build_chart
# ---------------------------------------------------------------------------


class TestBuildChart:
    def test_empty_input_gives_empty_chart(self):
        assert build_chart([], 1, NOW) == []

    def test_buckets_by_minute_with_per_channel_breakdown(self):
        samples = [
            _cs("A", 100, datetime(2026, 3, 1, 11, 30, 10, tzinfo=timezone.utc)),
            _cs("B", 40, datetime(2026, 3, 1, 11, 30, 50, tzinfo=timezone.utc)),
        ]
        points = build_chart(samples, 1, NOW)

        assert len(points) == 1
        assert points[0].bucket_start == datetime(2026, 3, 1, 11, 30, tzinfo=timezone.utc)
        assert points[0].per_channel == {"A": 100, "B": 40}
        assert points[0].total_viewers == 140

    def test_same_channel_in_same_bucket_last_write_wins(self):
        samples = [
            _cs("A", 100, datetime(2026, 3, 1, 11, 59, 0, tzinfo=timezone.utc)),
            _cs("A", 120, datetime(2026, 3, 1, 11, 59, 30, tzinfo=timezone.utc)),
            _cs("B", 50, datetime(2026, 3, 1, 11, 59, 10, tzinfo=timezone.utc)),
        ]
        points = build_chart(samples, 1, NOW)

        assert len(points) == 1
        assert points[0].per_channel == {"A": 120, "B": 50}
        assert points[0].total_viewers == 170

    def test_later_processed_sample_wins_even_with_earlier_timestamp(self):
        samples = [
            _cs("A", 120, datetime(2026, 3, 1, 11, 59, 30, tzinfo=timezone.utc)),
            _cs("A", 100, datetime(2026, 3, 1, 11, 59, 0, tzinfo=timezone.utc)),
        ]
        points = build_chart(samples, 1, NOW)

        assert len(points) == 1
        assert points[0].per_channel == {"A": 100}
        assert points[0].total_viewers == 100

    def test_seconds_are_truncated_not_rounded(self):
        ts = datetime(2026, 3, 1, 11, 45, 59, 999999, tzinfo=timezone.utc)
        points = build_chart([_cs("A", 1, ts)], 1, NOW)
        assert points[0].bucket_start == datetime(2026, 3, 1, 11, 45, tzinfo=timezone.utc)

    def test_lower_bound_is_exclusive(self):
        boundary = NOW - timedelta(hours=1)
        samples = [
            _cs("A", 999, boundary),
            _cs("A", 10, boundary + timedelta(seconds=1)),
        ]
        points = build_chart(samples, 1, NOW)

        assert len(points) == 1
        assert points[0].per_channel == {"A": 10}

    def test_samples_older_than_window_are_dropped(self):
        old = NOW - timedelta(hours=2)
        assert build_chart([_cs("A", 5, old)], 1, NOW) == []

    def test_fractional_window(self):
        samples = [
            _cs("A", 1, NOW - timedelta(minutes=20)),
            _cs("A", 2, NOW - timedelta(minutes=40)),
        ]
        points = build_chart(samples, 0.5, NOW)
        assert [p.per_channel["A"] for p in points] == [1]

    def test_points_ascending_and_gaps_left_empty(self):
        samples = [
            _cs("A", 3, datetime(2026, 3, 1, 11, 50, tzinfo=timezone.utc)),
            _cs("A", 1, datetime(2026, 3, 1, 11, 40, tzinfo=timezone.utc)),
        ]
        points = build_chart(samples, 1, NOW)

        assert [p.bucket_start.minute for p in points] == [40, 50]

    def test_total_equals_sum_of_breakdown(self):
        samples = [
            _cs(name, viewers, NOW - timedelta(minutes=minutes))
            for name, viewers, minutes in [
                ("A", 10, 1), ("B", 20, 1), ("C", 30, 2), ("A", 5, 3),
            ]
        ]
        for point in build_chart(samples, 1, NOW):
            assert point.total_viewers == sum(point.per_channel.values())

    def test_naive_timestamps_read_as_utc(self):
        naive = datetime(2026, 3, 1, 11, 30)
        points = build_chart([_cs("A", 7, naive)], 1, NOW)
        assert points[0].bucket_start == datetime(2026, 3, 1, 11, 30, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# densify / peak_total
# ---------------------------------------------------------------------------


class TestDensify:
    def test_missing_channels_filled_with_zero(self):
        t1 = datetime(2026, 3, 1, 11, 0, tzinfo=timezone.utc)
        t2 = t1 + timedelta(minutes=1)
        points = [
            ChartPoint(bucket_start=t1, total_viewers=10, per_channel={"A": 10}),
            ChartPoint(bucket_start=t2, total_viewers=5, per_channel={"B": 5}),
        ]
        dense = densify(points)

        assert dense[0].per_channel == {"A": 10, "B": 0}
        assert dense[1].per_channel == {"A": 0, "B": 5}
        assert [p.total_viewers for p in dense] == [10, 5]

    def test_does_not_add_missing_minutes(self):
        t1 = datetime(2026, 3, 1, 11, 0, tzinfo=timezone.utc)
        points = [
            ChartPoint(bucket_start=t1, total_viewers=1, per_channel={"A": 1}),
            ChartPoint(bucket_start=t1 + timedelta(minutes=5), total_viewers=1, per_channel={"A": 1}),
        ]
        assert len(densify(points)) == 2

    def test_empty(self):
        assert densify([]) == []


class TestPeakTotal:
    def test_zero_for_no_points(self):
        assert peak_total([]) == 0

    def test_highest_bucket_total(self):
        points = [
            ChartPoint(bucket_start=NOW, total_viewers=total)
            for total in (10, 250, 40)
        ]
        assert peak_total(points) == 250


class TestToChartSamples:
    def test_labels_with_display_names(self):
        samples = [
            Sample(channel_id="a", viewers_count=3, is_live=True, timestamp=NOW),
            Sample(channel_id="gone", viewers_count=4, is_live=True, timestamp=NOW),
        ]
        labelled = to_chart_samples(samples, {"a": "alpha"})

        assert [s.channel_name for s in labelled] == ["alpha", UNKNOWN_CHANNEL]
        assert [s.viewers for s in labelled] == [3, 4]
