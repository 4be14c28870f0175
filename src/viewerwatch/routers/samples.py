"""Sample ingest endpoint for externally produced observations."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from viewerwatch.dependencies import get_store
from viewerwatch.schemas.sample import SampleCreate, SampleResponse
from viewerwatch.services.peaks import observe
from viewerwatch.services.sample_store import SampleStore
from viewerwatch.services.types import Sample, ensure_utc

router = APIRouter(prefix="/v1/samples", tags=["samples"])


@router.post("", response_model=SampleResponse, status_code=status.HTTP_201_CREATED)
async def ingest_sample(
    body: SampleCreate,
    store: SampleStore = Depends(get_store),
) -> SampleResponse:
    """Store one observation and feed it to the channel's peak.

    Offline observations are stored with zero viewers whatever count was
    sent.
    """
    if await store.get_peak(body.channel_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Channel not found",
        )

    timestamp = ensure_utc(body.timestamp) if body.timestamp else datetime.now(timezone.utc)
    sample = await store.insert(
        Sample(
            channel_id=body.channel_id,
            viewers_count=body.viewers_count if body.is_live else 0,
            is_live=body.is_live,
            timestamp=timestamp,
        )
    )
    peak = await observe(store, sample)

    return SampleResponse(
        channel_id=sample.channel_id,
        viewers_count=sample.viewers_count,
        is_live=sample.is_live,
        timestamp=sample.timestamp,
        peak_viewers_count=peak.new_peak,
        new_peak=peak.changed,
    )
