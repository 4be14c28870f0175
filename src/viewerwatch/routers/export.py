"""CSV export of raw samples."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Response, status

from viewerwatch.dependencies import get_store
from viewerwatch.services.export import export_rows, render_csv
from viewerwatch.services.sample_store import SampleStore
from viewerwatch.services.types import ensure_utc

router = APIRouter(prefix="/v1/export", tags=["export"])


@router.get("")
async def export_samples(
    group_id: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    store: SampleStore = Depends(get_store),
) -> Response:
    """Download samples as CSV, one row per sample, oldest first."""
    start = ensure_utc(start) if start else None
    end = ensure_utc(end) if end else None
    if start and end and end <= start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end must be after start",
        )

    channels = await store.list_channels(group_id=group_id)
    samples = await store.query([c.id for c in channels], time_from=start, time_to=end)
    body = render_csv(export_rows(samples, channels))

    filename = datetime.now(timezone.utc).strftime("viewerwatch_%Y-%m-%d_%H-%M.csv")
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
