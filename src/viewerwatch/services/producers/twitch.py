"""Twitch producer: live status from the Helix streams endpoint."""

import asyncio
import logging
import time

import httpx

from viewerwatch.models.channel import Channel
from viewerwatch.services.producers.base import LiveStatus, Producer, ProducerError

logger = logging.getLogger(__name__)

HELIX_BASE = "https://api.twitch.tv/helix"
OAUTH_BASE = "https://id.twitch.tv/oauth2"

# Helix accepts at most 100 user_id parameters per streams request
STREAMS_BATCH_SIZE = 100


class TwitchProducer(Producer):
    """Polls Twitch with an app access token.

    The token is fetched with the client-credentials grant and reused until
    five minutes before it expires.
    """

    platform = "twitch"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        http: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        if not client_id or not client_secret:
            raise ValueError("Twitch client_id and client_secret are required")

        self.client_id = client_id
        self.client_secret = client_secret
        self._http = http or httpx.AsyncClient(timeout=timeout)

        self._app_token: str | None = None
        self._app_token_expires_at: float = 0.0
        self._app_token_lock = asyncio.Lock()

    async def close(self) -> None:
        await self._http.aclose()

    async def _ensure_app_token(self) -> str:
        now = time.monotonic()
        if self._app_token and now < self._app_token_expires_at:
            return self._app_token

        async with self._app_token_lock:
            now = time.monotonic()
            if self._app_token and now < self._app_token_expires_at:
                return self._app_token

            response = await self._http.post(
                f"{OAUTH_BASE}/token",
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "grant_type": "client_credentials",
                },
            )
            if response.status_code != 200:
                raise ProducerError(
                    f"Twitch token request failed with {response.status_code}"
                )

            data = response.json()
            self._app_token = data.get("access_token")
            if not self._app_token:
                raise ProducerError("Twitch token response has no access_token")
            expires_in = data.get("expires_in", 0)
            self._app_token_expires_at = now + max(expires_in - 300, 0)
            return self._app_token

    async def _helix_get(self, path: str, params: list[tuple[str, str]]) -> dict:
        token = await self._ensure_app_token()
        response = await self._http.get(
            f"{HELIX_BASE}/{path}",
            params=params,
            headers={"Authorization": f"Bearer {token}", "Client-Id": self.client_id},
        )
        if response.status_code == 401:
            # Token revoked or expired early; fetch a fresh one next time
            self._app_token = None
        if response.status_code != 200:
            raise ProducerError(f"Helix GET /{path} returned {response.status_code}")
        return response.json()

    async def lookup_user(self, login: str) -> dict | None:
        """Resolve a login name to its Helix user object, None if unknown."""
        data = await self._helix_get("users", [("login", login.lower())])
        users = data.get("data", [])
        return users[0] if users else None

    async def fetch_statuses(self, channels: list[Channel]) -> dict[str, LiveStatus]:
        by_user_id: dict[str, list[Channel]] = {}
        for channel in channels:
            by_user_id.setdefault(channel.platform_channel_id, []).append(channel)
        user_ids = list(by_user_id)

        statuses: dict[str, LiveStatus] = {}
        for start in range(0, len(user_ids), STREAMS_BATCH_SIZE):
            batch = user_ids[start:start + STREAMS_BATCH_SIZE]
            params = [("user_id", uid) for uid in batch] + [("first", "100")]
            try:
                data = await self._helix_get("streams", params)
            except (httpx.TimeoutException, httpx.RequestError, ProducerError) as exc:
                logger.error(
                    "Twitch streams lookup failed for %d channels: %s", len(batch), exc
                )
                continue

            for stream in data.get("data", []):
                viewers = int(stream.get("viewer_count") or 0)
                for channel in by_user_id.get(stream.get("user_id"), []):
                    statuses[channel.id] = LiveStatus(is_live=True, viewers_count=viewers)

            # Checked channels absent from the response are offline
            for uid in batch:
                for channel in by_user_id[uid]:
                    statuses.setdefault(channel.id, LiveStatus(is_live=False))

        return statuses
