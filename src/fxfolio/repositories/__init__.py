"""Repository layer - data access abstractions and implementations."""

from fxfolio.repositories.protocols import (
    RateCache,
    RateCacheKey,
    PositionRepository,
)
from fxfolio.repositories.memory import InMemoryRateCache

__all__ = [
    "RateCache",
    "RateCacheKey",
    "PositionRepository",
    "InMemoryRateCache",
]
