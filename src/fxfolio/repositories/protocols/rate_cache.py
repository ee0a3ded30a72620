"""Rate cache protocol."""

from typing import NamedTuple, Optional, Protocol

from fxfolio.domain.models import ExchangeRate


class RateCacheKey(NamedTuple):
    """Cache key: (base, target) for latest rates, plus date for historical ones."""

    base: str
    target: str
    date: Optional[str] = None

    def __str__(self) -> str:
        key = f"{self.base}_{self.target}"
        return f"{key}_{self.date}" if self.date else key


class RateCache(Protocol):
    """
    Interface for the process-wide exchange rate cache.

    Writes are idempotent value replacements; concurrent writers on the
    same key may overwrite each other. Expired entries are dropped lazily
    on read.
    """

    def get(self, key: RateCacheKey) -> Optional[ExchangeRate]:
        """Return the cached rate, or None when absent or expired."""
        ...

    def set(self, key: RateCacheKey, rate: ExchangeRate, ttl_seconds: float) -> None:
        """Store a rate that expires ttl_seconds from now."""
        ...

    def clear(self) -> None:
        """Drop every entry."""
        ...

    def stats(self) -> dict:
        """Return {"size": int, "keys": list[str]} for debugging."""
        ...
