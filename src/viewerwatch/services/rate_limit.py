"""In-memory sliding-window rate limiter."""

import time
from collections import defaultdict
from collections.abc import Callable


class InMemoryRateLimiter:
    """Allow at most ``max_requests`` per key inside a sliding window.

    Guards manual producer runs so a client cannot burn platform API quota.
    State is per process.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, list[float]] = defaultdict(list)

    def is_allowed(self, key: str) -> bool:
        """Record a hit for *key* and return False if it is over the limit."""
        now = self._clock()
        cutoff = now - self.window_seconds

        hits = [t for t in self._hits[key] if t > cutoff]
        if len(hits) >= self.max_requests:
            self._hits[key] = hits
            return False

        hits.append(now)
        self._hits[key] = hits
        return True

    def reset(self, key: str | None = None) -> None:
        """Forget hits for *key*, or for every key when omitted."""
        if key is None:
            self._hits.clear()
        else:
            self._hits.pop(key, None)
