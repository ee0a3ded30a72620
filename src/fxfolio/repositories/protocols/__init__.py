"""Repository protocol definitions (interfaces)."""

from fxfolio.repositories.protocols.rate_cache import RateCache, RateCacheKey
from fxfolio.repositories.protocols.position_repo import PositionRepository

__all__ = [
    "RateCache",
    "RateCacheKey",
    "PositionRepository",
]
