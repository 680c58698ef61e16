"""In-memory TTL cache of upstream proxy responses keyed by request signature."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 600


@dataclass(frozen=True)
class CachedResponse:
    status: int
    body: bytes
    content_type: str
    expires: float


class ResponseCache:
    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CachedResponse] = {}

    def get(self, key: str) -> CachedResponse | None:
        """Return a live entry; expired entries are evicted on read."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expires:
            # Concurrent readers may evict the same key.
            self._entries.pop(key, None)
            return None
        logger.debug("Cache hit: %s", key)
        return entry

    def put(
        self, key: str, status: int, body: bytes, content_type: str = "application/json"
    ) -> bool:
        """Store a response. Only status 200 is cached; returns whether it was."""
        if status != 200:
            return False
        self._entries[key] = CachedResponse(
            status=status,
            body=body,
            content_type=content_type,
            expires=self._clock() + self.ttl_seconds,
        )
        return True

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
