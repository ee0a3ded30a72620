"""In-memory repository implementations."""

from fxfolio.repositories.memory.rate_cache import InMemoryRateCache, CacheEntry

__all__ = [
    "InMemoryRateCache",
    "CacheEntry",
]
