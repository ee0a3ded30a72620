"""Exchange rate provider with TTL caching and fallback rates."""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional, Union

from fxfolio.core.clock import parse_iso_date, today_iso
from fxfolio.core.exceptions import RateSourceError
from fxfolio.domain.models import ExchangeRate, RateSource, normalize_currency
from fxfolio.providers.fallback_rates import get_fallback_rate
from fxfolio.providers.rate_source import ExchangeRateSource, RatesPayload
from fxfolio.repositories.memory import InMemoryRateCache
from fxfolio.repositories.protocols import RateCache, RateCacheKey

logger = logging.getLogger(__name__)

LATEST_TTL_SECONDS = 60 * 60
HISTORICAL_TTL_SECONDS = 24 * 60 * 60

DateLike = Union[str, date, datetime]


@dataclass(frozen=True)
class RateResult:
    """Either a rate or an error message; a missing rate is not an exception."""

    rate: Optional[ExchangeRate] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.rate is not None

    @classmethod
    def success(cls, rate: ExchangeRate) -> "RateResult":
        return cls(rate=rate)

    @classmethod
    def failure(cls, error: str) -> "RateResult":
        return cls(error=error)


class ExchangeRateProvider:
    """
    Fetches exchange rates from an external source.

    Latest rates are cached for an hour, historical rates for a day. When
    the source fails, latest lookups degrade to the static fallback table
    and historical lookups degrade to the latest rate. Fallback rates are
    never cached.
    """

    def __init__(
        self,
        source: ExchangeRateSource,
        cache: Optional[RateCache] = None,
        latest_ttl_seconds: float = LATEST_TTL_SECONDS,
        historical_ttl_seconds: float = HISTORICAL_TTL_SECONDS,
        fallback_lookup: Callable[[str, str], Optional[Decimal]] = get_fallback_rate,
    ):
        self._source = source
        self._cache = cache if cache is not None else InMemoryRateCache()
        self._latest_ttl = latest_ttl_seconds
        self._historical_ttl = historical_ttl_seconds
        self._fallback_lookup = fallback_lookup

    def get_latest_rate(self, base: str, target: str) -> RateResult:
        """Get the latest rate for one pair."""
        base = normalize_currency(base)
        target = normalize_currency(target)

        if base == target:
            return RateResult.success(self._identity_rate(base, today_iso()))

        key = RateCacheKey(base, target)
        cached = self._cache.get(key)
        if cached is not None:
            return RateResult.success(cached)

        try:
            payload = self._source.fetch_latest(base, [target])
            rate = self._rate_from_payload(payload, base, target)
        except Exception as exc:  # any source failure degrades, never propagates
            logger.error("Failed to fetch FX rate for %s/%s: %s", base, target, exc)
            return self._fallback_result(base, target)

        self._cache.set(key, rate, self._latest_ttl)
        return RateResult.success(rate)

    def get_historical_rate(self, base: str, target: str, on: DateLike) -> RateResult:
        """
        Get the rate published for a past date.

        On failure this returns the latest rate rather than the fallback
        table directly.
        """
        base = normalize_currency(base)
        target = normalize_currency(target)
        try:
            rate_date = parse_iso_date(on)
        except ValueError as exc:
            return RateResult.failure(str(exc))
        date_key = rate_date.isoformat()

        if base == target:
            return RateResult.success(self._identity_rate(base, date_key))

        key = RateCacheKey(base, target, date_key)
        cached = self._cache.get(key)
        if cached is not None:
            return RateResult.success(cached)

        try:
            payload = self._source.fetch_historical(base, [target], rate_date)
            rate = self._rate_from_payload(payload, base, target)
        except Exception as exc:  # any source failure degrades, never propagates
            logger.error(
                "Failed to fetch historical FX rate for %s/%s on %s: %s",
                base, target, date_key, exc,
            )
            return self.get_latest_rate(base, target)

        self._cache.set(key, rate, self._historical_ttl)
        return RateResult.success(rate)

    def get_latest_rates(self, base: str, targets: list[str]) -> dict[str, ExchangeRate]:
        """
        Get latest rates from one base to many targets.

        Uncached targets are fetched in a single request. Targets missing
        from the response use the fallback table; targets with no rate at
        all are omitted from the result.
        """
        base = normalize_currency(base)
        results: dict[str, ExchangeRate] = {}
        uncached: list[str] = []

        for raw_target in targets:
            target = normalize_currency(raw_target)
            if target in results or target in uncached:
                continue
            if target == base:
                results[target] = self._identity_rate(base, today_iso())
                continue
            cached = self._cache.get(RateCacheKey(base, target))
            if cached is not None:
                results[target] = cached
            else:
                uncached.append(target)

        if not uncached:
            return results

        try:
            payload = self._source.fetch_latest(base, uncached)
        except Exception as exc:  # any source failure degrades, never propagates
            logger.error("Failed to batch fetch FX rates for %s: %s", base, exc)
            payload = None

        if payload is not None:
            for target in uncached:
                value = payload.rates.get(target)
                if value:
                    rate = ExchangeRate(
                        base=base,
                        target=target,
                        rate=value,
                        date=payload.date.isoformat(),
                        source=RateSource.PRIMARY,
                    )
                    self._cache.set(RateCacheKey(base, target), rate, self._latest_ttl)
                    results[target] = rate

        for target in uncached:
            if target not in results:
                fallback = self._fallback_rate(base, target)
                if fallback is not None:
                    results[target] = fallback

        return results

    def clear_cache(self) -> None:
        """Drop all cached rates."""
        self._cache.clear()

    def cache_stats(self) -> dict:
        """Return cache size and keys for debugging."""
        return self._cache.stats()

    # Helpers

    @staticmethod
    def _identity_rate(currency: str, rate_date: str) -> ExchangeRate:
        return ExchangeRate(
            base=currency,
            target=currency,
            rate=Decimal("1"),
            date=rate_date,
            source=RateSource.PRIMARY,
        )

    @staticmethod
    def _rate_from_payload(payload: RatesPayload, base: str, target: str) -> ExchangeRate:
        value = payload.rates.get(target)
        if not value:
            raise RateSourceError(f"Rate not found for {base}/{target}")
        return ExchangeRate(
            base=base,
            target=target,
            rate=value,
            date=payload.date.isoformat(),
            source=RateSource.PRIMARY,
        )

    def _fallback_rate(self, base: str, target: str) -> Optional[ExchangeRate]:
        value = self._fallback_lookup(base, target)
        if value is None:
            return None
        logger.warning("Using fallback rate for %s/%s: %s", base, target, value)
        return ExchangeRate(
            base=base,
            target=target,
            rate=value,
            date=today_iso(),
            source=RateSource.FALLBACK,
        )

    def _fallback_result(self, base: str, target: str) -> RateResult:
        fallback = self._fallback_rate(base, target)
        if fallback is not None:
            return RateResult.success(fallback)
        return RateResult.failure(f"Failed to fetch exchange rate for {base}/{target}")
