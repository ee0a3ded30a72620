"""Quote service for live price samples."""

import logging
import time
from typing import Callable, Optional

from fxfolio.domain.views import Quote
from fxfolio.providers.quote_provider import QuoteProvider

logger = logging.getLogger(__name__)


class QuoteService:
    """
    Service for fetching quotes.

    Wraps a provider with per-symbol caching and graceful degradation:
    provider failures are logged and answered from cache, never raised.
    """

    def __init__(
        self,
        provider: QuoteProvider,
        cache_ttl_seconds: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._provider = provider
        self._cache_ttl = cache_ttl_seconds
        self._clock = clock
        # symbol -> (quote, cached_at)
        self._quote_cache: dict[str, tuple[Quote, float]] = {}

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """
        Fetch quotes for symbols with caching.

        Symbols without a quote (fresh or cached) are omitted.
        """
        if not symbols:
            return {}

        symbols = [s.upper() for s in symbols]
        now = self._clock()

        result: dict[str, Quote] = {}
        missing: list[str] = []
        for symbol in symbols:
            cached = self._quote_cache.get(symbol)
            if cached and now - cached[1] < self._cache_ttl:
                result[symbol] = cached[0]
            elif symbol not in missing:
                missing.append(symbol)

        if missing:
            try:
                new_quotes = self._provider.get_quotes(missing)
            except Exception as exc:  # provider failures degrade to cached data
                logger.warning("Quote fetch failed for %s: %s", ", ".join(missing), exc)
                new_quotes = {}
                for symbol in missing:
                    stale = self._quote_cache.get(symbol)
                    if stale:
                        result[symbol] = stale[0]

            for symbol, quote in new_quotes.items():
                self._quote_cache[symbol.upper()] = (quote, now)
                result[symbol.upper()] = quote

        return {s: result[s] for s in symbols if s in result}

    def get_quote(self, symbol: str) -> Optional[Quote]:
        """Fetch a single quote, or None if unavailable."""
        return self.get_quotes([symbol]).get(symbol.upper())
