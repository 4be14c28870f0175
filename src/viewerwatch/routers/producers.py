"""Manual producer runs."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from viewerwatch.config import get_settings
from viewerwatch.dependencies import get_db, get_producers
from viewerwatch.models.channel import PLATFORMS
from viewerwatch.schemas.producer import ProducerRunResponse
from viewerwatch.services.producers import Producer, run_producer
from viewerwatch.services.rate_limit import InMemoryRateLimiter

router = APIRouter(prefix="/v1/producers", tags=["producers"])

_run_limiter = InMemoryRateLimiter(
    max_requests=get_settings().producer_run_rate_limit_per_hour,
    window_seconds=3600,
)


@router.get("")
async def list_producers(
    producers: dict[str, Producer] = Depends(get_producers),
) -> dict:
    """List platforms with a configured producer."""
    return {"platforms": sorted(producers)}


@router.post("/{platform}/run", response_model=ProducerRunResponse)
async def run_platform_producer(
    platform: str,
    db: AsyncSession = Depends(get_db),
    producers: dict[str, Producer] = Depends(get_producers),
) -> ProducerRunResponse:
    """Poll one platform now instead of waiting for the next scheduled run.

    Limited per platform to protect the platform's API quota.
    """
    if platform not in PLATFORMS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown platform. Use: {', '.join(PLATFORMS)}",
        )

    producer = producers.get(platform)
    if producer is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"No producer configured for {platform}",
        )

    if not _run_limiter.is_allowed(platform):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded. Try again later.",
        )

    samples = await run_producer(producer, db)
    return ProducerRunResponse(
        platform=platform,
        samples_recorded=len(samples),
        live_channel_count=sum(1 for s in samples if s.is_live),
    )
