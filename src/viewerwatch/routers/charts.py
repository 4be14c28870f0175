"""Viewer chart endpoints: rolling windows and arbitrary history."""

from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, status

from viewerwatch.dependencies import get_group_or_404, get_store
from viewerwatch.models.group import Group
from viewerwatch.schemas.chart import ChartPointResponse, ChartResponse
from viewerwatch.services.chart import build_chart, densify, peak_total, to_chart_samples
from viewerwatch.services.sample_store import SampleStore
from viewerwatch.services.types import ChartPoint, ensure_utc

router = APIRouter(prefix="/v1", tags=["charts"])

CHART_RANGES = {
    "30min": 0.5,
    "1h": 1,
    "5h": 5,
    "1d": 24,
}


def _range_to_hours(value: str) -> float:
    """Convert a range label to a window length in hours."""
    hours = CHART_RANGES.get(value)
    if hours is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid range. Use: {', '.join(CHART_RANGES)}",
        )
    return hours


def _chart_response(
    points: list[ChartPoint], start: datetime, end: datetime, dense: bool
) -> ChartResponse:
    if dense:
        points = densify(points)
    return ChartResponse(
        start=start,
        end=end,
        peak_total=peak_total(points),
        points=[ChartPointResponse.model_validate(p) for p in points],
    )


async def _channel_names(store: SampleStore, group_id: str | None) -> dict[str, str]:
    channels = await store.list_channels(group_id=group_id)
    return {c.id: c.display_name for c in channels}


@router.get("/groups/{group_id}/chart", response_model=ChartResponse)
async def get_group_chart(
    range_: str = Query("1h", alias="range"),
    dense: bool = False,
    group: Group = Depends(get_group_or_404),
    store: SampleStore = Depends(get_store),
) -> ChartResponse:
    """Per-minute viewer totals for a group over a rolling window.

    ``dense=true`` fills channels missing from a minute with 0 so every
    series has a value at every point.
    """
    hours = _range_to_hours(range_)
    now = datetime.now(timezone.utc)
    start = now - timedelta(hours=hours)

    names = await _channel_names(store, group.id)
    samples = await store.query(names.keys(), time_from=start, time_to=now)
    points = build_chart(to_chart_samples(samples, names), hours, now)

    return _chart_response(points, start, now, dense)


@router.get("/history", response_model=ChartResponse)
async def get_history(
    start: datetime,
    end: datetime | None = None,
    group_id: str | None = None,
    dense: bool = False,
    store: SampleStore = Depends(get_store),
) -> ChartResponse:
    """Per-minute viewer totals between two instants.

    Covers every registered channel unless ``group_id`` narrows it down.
    Naive datetimes are read as UTC.
    """
    start = ensure_utc(start)
    end = ensure_utc(end) if end else datetime.now(timezone.utc)
    if end <= start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end must be after start",
        )

    names = await _channel_names(store, group_id)
    samples = await store.query(names.keys(), time_from=start, time_to=end)
    hours = (end - start).total_seconds() / 3600
    points = build_chart(to_chart_samples(samples, names), hours, end)

    return _chart_response(points, start, end, dense)
