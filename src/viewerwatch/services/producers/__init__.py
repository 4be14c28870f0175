"""Platform polling producers."""

from viewerwatch.config import Settings
from viewerwatch.services.cache import ExpiringCache
from viewerwatch.services.producers.base import (
    LiveStatus,
    Producer,
    ProducerError,
    run_producer,
)
from viewerwatch.services.producers.tiktok import TikTokProducer
from viewerwatch.services.producers.twitch import TwitchProducer
from viewerwatch.services.producers.youtube import YouTubeProducer

__all__ = [
    "LiveStatus",
    "Producer",
    "ProducerError",
    "TikTokProducer",
    "TwitchProducer",
    "YouTubeProducer",
    "build_producers",
    "run_producer",
]


def build_producers(settings: Settings, cache: ExpiringCache | None = None) -> dict[str, Producer]:
    """Instantiate a producer for every enabled platform."""
    producers: dict[str, Producer] = {}
    enabled = settings.enabled_platforms()

    if "twitch" in enabled:
        producers["twitch"] = TwitchProducer(
            settings.twitch_client_id,
            settings.twitch_client_secret,
            timeout=settings.producer_timeout_seconds,
        )
    if "youtube" in enabled:
        producers["youtube"] = YouTubeProducer(
            settings.youtube_api_key,
            cache=cache or ExpiringCache(),
            timeout=settings.producer_timeout_seconds,
            channel_id_ttl=settings.youtube_channel_id_ttl_seconds,
            live_ttl=settings.youtube_live_ttl_seconds,
            offline_ttl=settings.youtube_offline_ttl_seconds,
        )
    if "tiktok" in enabled:
        producers["tiktok"] = TikTokProducer(timeout=settings.producer_timeout_seconds)
    return producers
