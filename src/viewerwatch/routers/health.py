"""Health check endpoint."""

from fastapi import APIRouter, Depends

from viewerwatch import __version__
from viewerwatch.dependencies import get_producers
from viewerwatch.services.producers import Producer

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    producers: dict[str, Producer] = Depends(get_producers),
) -> dict:
    """Return service status, version and the platforms being polled."""
    return {
        "status": "ok",
        "version": __version__,
        "producers": sorted(producers),
    }
