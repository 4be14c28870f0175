"""TikTok producer: live status through a TikTok LIVE webcast connection.

TikTok has no public live API. Each check asks TikTokLive whether the user
is live and, if so, connects long enough to read the room's viewer count
before disconnecting. A check that fails or runs out of time records the
channel as offline.
"""

import asyncio
import logging
from collections.abc import Callable

from TikTokLive import TikTokLiveClient

from viewerwatch.models.channel import Channel
from viewerwatch.services.producers.base import OFFLINE, LiveStatus, Producer

logger = logging.getLogger(__name__)


def _unique_id(channel: Channel) -> str:
    unique_id = channel.platform_channel_id
    return unique_id if unique_id.startswith("@") else f"@{unique_id}"


class TikTokProducer(Producer):
    platform = "tiktok"

    def __init__(
        self,
        timeout: float = 10.0,
        client_factory: Callable[..., TikTokLiveClient] = TikTokLiveClient,
    ) -> None:
        self.timeout = timeout
        self._client_factory = client_factory

    async def fetch_live_status(self, unique_id: str) -> LiveStatus:
        client = self._client_factory(unique_id=unique_id)
        if not await client.is_live():
            return OFFLINE

        await client.start(fetch_room_info=True)
        try:
            room_info = client.room_info or {}
            return LiveStatus(
                is_live=True, viewers_count=int(room_info.get("user_count") or 0)
            )
        finally:
            await client.disconnect()

    async def _check(self, unique_id: str) -> LiveStatus:
        try:
            return await asyncio.wait_for(
                self.fetch_live_status(unique_id), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "TikTok check for %s timed out after %.0fs", unique_id, self.timeout
            )
        except Exception:
            # TikTokLive raises for offline, unknown and blocked users alike
            logger.exception("TikTok check for %s failed", unique_id)
        return OFFLINE

    async def fetch_statuses(self, channels: list[Channel]) -> dict[str, LiveStatus]:
        # One connection per user, shared by channels registered in several groups
        unique_ids = {channel.id: _unique_id(channel) for channel in channels}
        targets = sorted(set(unique_ids.values()))
        results = await asyncio.gather(*(self._check(u) for u in targets))
        by_user = dict(zip(targets, results))
        return {channel_id: by_user[u] for channel_id, u in unique_ids.items()}
