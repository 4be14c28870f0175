"""YouTube producer: live status from the Data API v3.

A search call costs 100 quota units, so resolved channel ids and live
statuses go through the injected cache. Offline results get a longer TTL
than live ones.
"""

import logging

import httpx

from viewerwatch.models.channel import Channel
from viewerwatch.services.cache import MISSING, ExpiringCache
from viewerwatch.services.producers.base import LiveStatus, Producer, ProducerError

logger = logging.getLogger(__name__)

API_BASE = "https://www.googleapis.com/youtube/v3"


class YouTubeProducer(Producer):
    platform = "youtube"

    def __init__(
        self,
        api_key: str,
        cache: ExpiringCache,
        http: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
        channel_id_ttl: float = 120,
        live_ttl: float = 60,
        offline_ttl: float = 120,
    ) -> None:
        if not api_key:
            raise ValueError("YouTube api_key is required")

        self.api_key = api_key
        self.cache = cache
        self.channel_id_ttl = channel_id_ttl
        self.live_ttl = live_ttl
        self.offline_ttl = offline_ttl
        self._http = http or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        await self._http.aclose()

    async def _get(self, path: str, params: dict) -> httpx.Response:
        return await self._http.get(
            f"{API_BASE}/{path}", params={**params, "key": self.api_key}
        )

    async def resolve_channel_id(self, handle: str) -> str | None:
        """Map an ``@handle`` to a channel id; plain ids pass through.

        Returns None when the search finds no channel. Misses are cached
        like hits so a dead handle costs one search per TTL.
        """
        if not handle.startswith("@"):
            return handle

        cache_key = f"channel:{handle}"
        cached = self.cache.get(cache_key)
        if cached is not MISSING:
            return cached

        response = await self._get(
            "search", {"part": "snippet", "type": "channel", "q": handle}
        )
        if response.status_code != 200:
            raise ProducerError(
                f"YouTube channel search for {handle} returned {response.status_code}"
            )

        items = response.json().get("items") or []
        if not items:
            logger.warning("YouTube channel not found: %s", handle)
            self.cache.set(cache_key, None, self.channel_id_ttl)
            return None

        channel_id = items[0]["id"]["channelId"]
        self.cache.set(cache_key, channel_id, self.channel_id_ttl)
        return channel_id

    async def fetch_live_status(self, channel_id: str) -> LiveStatus:
        """Sum concurrent viewers across all of a channel's live videos."""
        cache_key = f"live:{channel_id}"
        cached = self.cache.get(cache_key)
        if cached is not MISSING:
            return cached

        response = await self._get(
            "search",
            {
                "part": "id",
                "channelId": channel_id,
                "eventType": "live",
                "type": "video",
                "maxResults": 50,
            },
        )
        if response.status_code != 200:
            raise ProducerError(
                f"YouTube live search for {channel_id} returned {response.status_code}"
            )

        items = response.json().get("items") or []
        if not items:
            status = LiveStatus(is_live=False)
            self.cache.set(cache_key, status, self.offline_ttl)
            return status

        video_ids = ",".join(item["id"]["videoId"] for item in items)
        stats_response = await self._get(
            "videos", {"part": "liveStreamingDetails", "id": video_ids}
        )
        videos = (
            stats_response.json().get("items") or []
            if stats_response.status_code == 200
            else []
        )
        if not videos:
            logger.warning(
                "No live statistics for %s (status %d)",
                channel_id,
                stats_response.status_code,
            )
            return LiveStatus(is_live=False)

        total_viewers = 0
        for video in videos:
            details = video.get("liveStreamingDetails") or {}
            total_viewers += int(details.get("concurrentViewers") or 0)

        status = LiveStatus(is_live=True, viewers_count=total_viewers)
        self.cache.set(cache_key, status, self.live_ttl)
        return status

    async def fetch_statuses(self, channels: list[Channel]) -> dict[str, LiveStatus]:
        statuses: dict[str, LiveStatus] = {}
        for channel in channels:
            try:
                channel_id = await self.resolve_channel_id(channel.platform_channel_id)
                if channel_id is None:
                    continue
                statuses[channel.id] = await self.fetch_live_status(channel_id)
            except (httpx.TimeoutException, httpx.RequestError, ProducerError) as exc:
                logger.error(
                    "YouTube lookup failed for channel %s: %s", channel.display_name, exc
                )
        return statuses
