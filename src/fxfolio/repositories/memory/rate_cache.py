"""In-memory implementation of RateCache."""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from fxfolio.domain.models import ExchangeRate
from fxfolio.repositories.protocols.rate_cache import RateCacheKey


@dataclass(frozen=True)
class CacheEntry:
    """A cached rate and the monotonic time it stops being valid."""

    rate: ExchangeRate
    expires_at: float


class InMemoryRateCache:
    """
    Dict-backed rate cache with lazy TTL expiry.

    The clock is injectable so tests can move time forward.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[RateCacheKey, CacheEntry] = {}

    def get(self, key: RateCacheKey) -> Optional[ExchangeRate]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.rate

    def set(self, key: RateCacheKey, rate: ExchangeRate, ttl_seconds: float) -> None:
        self._entries[key] = CacheEntry(rate=rate, expires_at=self._clock() + ttl_seconds)

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> dict:
        keys = [str(k) for k in self._entries]
        return {"size": len(keys), "keys": keys}
