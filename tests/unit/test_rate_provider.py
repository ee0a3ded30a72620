"""
Unit tests for ExchangeRateProvider.

Tests cover:
- Identity rates for same-currency pairs
- Caching and TTL expiry for latest and historical rates
- Degradation to the fallback table (never cached)
- Historical lookups degrading to the latest rate
- Batch lookups with a single external request
"""

from datetime import date
from decimal import Decimal

import pytest

from fxfolio.core.exceptions import InvalidMoneyError
from fxfolio.domain.models import RateSource
from fxfolio.repositories.memory import InMemoryRateCache
from fxfolio.services import ExchangeRateProvider
from fxfolio.services.rate_provider import HISTORICAL_TTL_SECONDS, LATEST_TTL_SECONDS

from tests.conftest import ManualClock, ScriptedRateSource


def _latest_calls(source: ScriptedRateSource) -> list:
    return [c for c in source.calls if c[0] == "latest"]


# =============================================================================
# LATEST RATE TESTS
# =============================================================================


class TestGetLatestRate:
    """Tests for single-pair latest rates."""

    def test_same_currency_is_identity_without_request(self, rate_provider, rate_source):
        result = rate_provider.get_latest_rate("usd", "USD")

        assert result.ok
        assert result.rate.rate == Decimal("1")
        assert result.rate.source == RateSource.PRIMARY
        assert rate_source.calls == []

    def test_fetches_from_source(self, rate_provider, rate_source):
        """
        GIVEN an empty cache
        WHEN I request USD -> INR
        THEN the source is called once and the rate carries its date
        """
        result = rate_provider.get_latest_rate("USD", "INR")

        assert result.ok
        assert result.rate.base == "USD"
        assert result.rate.target == "INR"
        assert result.rate.rate == Decimal("83.22")
        assert result.rate.date == "2024-06-14"
        assert result.rate.source == RateSource.PRIMARY
        assert rate_source.calls == [("latest", "USD", ["INR"])]

    def test_second_call_within_ttl_hits_cache(self, rate_provider, rate_source, clock):
        rate_provider.get_latest_rate("USD", "INR")
        clock.advance(LATEST_TTL_SECONDS - 1)
        result = rate_provider.get_latest_rate("USD", "INR")

        assert result.rate.rate == Decimal("83.22")
        assert len(rate_source.calls) == 1

    def test_expired_entry_is_refetched(self, rate_provider, rate_source, clock):
        """
        GIVEN a cached USD -> INR rate
        WHEN the latest TTL has elapsed and the source has moved
        THEN the new rate is fetched
        """
        rate_provider.get_latest_rate("USD", "INR")
        rate_source.rates["USD"]["INR"] = Decimal("83.40")
        clock.advance(LATEST_TTL_SECONDS)

        result = rate_provider.get_latest_rate("USD", "INR")

        assert result.rate.rate == Decimal("83.40")
        assert len(rate_source.calls) == 2

    def test_source_failure_uses_fallback(self, failing_rate_source, rate_cache):
        provider = ExchangeRateProvider(source=failing_rate_source, cache=rate_cache)

        result = provider.get_latest_rate("USD", "INR")

        assert result.ok
        assert result.rate.rate == Decimal("83.50")
        assert result.rate.source == RateSource.FALLBACK

    def test_fallback_rate_is_never_cached(self, failing_rate_source, rate_cache):
        """
        GIVEN a failing source
        WHEN I request the same pair twice
        THEN the source is retried on the second call
        """
        provider = ExchangeRateProvider(source=failing_rate_source, cache=rate_cache)

        provider.get_latest_rate("USD", "INR")
        provider.get_latest_rate("USD", "INR")

        assert len(failing_rate_source.calls) == 2
        assert rate_cache.stats()["size"] == 0

    def test_recovers_once_source_is_back(self, failing_rate_source, rate_cache):
        provider = ExchangeRateProvider(source=failing_rate_source, cache=rate_cache)
        provider.get_latest_rate("USD", "INR")

        failing_rate_source.failing = False
        result = provider.get_latest_rate("USD", "INR")

        assert result.rate.source == RateSource.PRIMARY
        assert result.rate.rate == Decimal("83.22")

    def test_missing_target_in_response_uses_fallback(self, rate_provider):
        result = rate_provider.get_latest_rate("USD", "JPY")

        assert result.ok
        assert result.rate.rate == Decimal("154.50")
        assert result.rate.source == RateSource.FALLBACK

    def test_no_rate_anywhere_is_a_failure_result(self, failing_rate_source):
        provider = ExchangeRateProvider(
            source=failing_rate_source,
            cache=InMemoryRateCache(),
            fallback_lookup=lambda base, target: None,
        )

        result = provider.get_latest_rate("USD", "XYZ")

        assert not result.ok
        assert result.rate is None
        assert "USD/XYZ" in result.error

    def test_invalid_currency_raises(self, rate_provider):
        with pytest.raises(InvalidMoneyError):
            rate_provider.get_latest_rate("USD", "RUPEE")


# =============================================================================
# HISTORICAL RATE TESTS
# =============================================================================


class TestGetHistoricalRate:
    """Tests for historical rates."""

    def test_fetches_rate_for_date(self, rate_provider, rate_source):
        rate_source.historical[date(2024, 1, 15)] = {"USD": {"INR": Decimal("83.05")}}

        result = rate_provider.get_historical_rate("USD", "INR", "2024-01-15")

        assert result.ok
        assert result.rate.rate == Decimal("83.05")
        assert result.rate.date == "2024-01-15"
        assert rate_source.calls == [("2024-01-15", "USD", ["INR"])]

    def test_historical_cache_is_separate_and_long_lived(self, rate_provider, rate_source, clock):
        """
        GIVEN a cached historical rate
        WHEN more than the latest TTL but less than the historical TTL passes
        THEN the cached rate is still used
        """
        rate_source.historical[date(2024, 1, 15)] = {"USD": {"INR": Decimal("83.05")}}
        rate_provider.get_historical_rate("USD", "INR", date(2024, 1, 15))

        clock.advance(LATEST_TTL_SECONDS * 2)
        rate_provider.get_historical_rate("USD", "INR", date(2024, 1, 15))
        assert len(rate_source.calls) == 1

        clock.advance(HISTORICAL_TTL_SECONDS)
        rate_provider.get_historical_rate("USD", "INR", date(2024, 1, 15))
        assert len(rate_source.calls) == 2

    def test_failure_degrades_to_latest_rate(self, rate_provider, rate_source):
        """
        GIVEN no rate published for the requested date
        WHEN I request the historical rate
        THEN the latest rate is returned instead
        """
        result = rate_provider.get_historical_rate("USD", "INR", "2020-01-01")

        assert result.ok
        assert result.rate.rate == Decimal("83.22")
        assert result.rate.date == "2024-06-14"
        assert len(_latest_calls(rate_source)) == 1

    def test_unparseable_date_is_a_failure_result(self, rate_provider, rate_source):
        result = rate_provider.get_historical_rate("USD", "INR", "not a date")

        assert not result.ok
        assert rate_source.calls == []

    def test_same_currency_keeps_requested_date(self, rate_provider):
        result = rate_provider.get_historical_rate("EUR", "EUR", "2023-03-01")

        assert result.rate.rate == Decimal("1")
        assert result.rate.date == "2023-03-01"


# =============================================================================
# BATCH TESTS
# =============================================================================


class TestGetLatestRates:
    """Tests for batch latest rates."""

    def test_single_request_for_all_uncached_targets(self, rate_provider, rate_source):
        rates = rate_provider.get_latest_rates("USD", ["INR", "EUR", "GBP"])

        assert set(rates) == {"INR", "EUR", "GBP"}
        assert rate_source.calls == [("latest", "USD", ["INR", "EUR", "GBP"])]

    def test_cached_targets_are_not_refetched(self, rate_provider, rate_source):
        rate_provider.get_latest_rate("USD", "INR")

        rate_provider.get_latest_rates("USD", ["INR", "EUR"])

        assert rate_source.calls[-1] == ("latest", "USD", ["EUR"])

    def test_duplicates_and_base_target(self, rate_provider, rate_source):
        rates = rate_provider.get_latest_rates("USD", ["eur", "EUR", "USD"])

        assert rates["USD"].rate == Decimal("1")
        assert rate_source.calls == [("latest", "USD", ["EUR"])]

    def test_missing_targets_use_fallback_and_unknown_are_omitted(self, rate_provider):
        """
        GIVEN the source has no JPY or XYZ rate
        WHEN I batch request INR, JPY and XYZ
        THEN JPY comes from the fallback table and XYZ is omitted
        """
        rates = rate_provider.get_latest_rates("USD", ["INR", "JPY", "XYZ"])

        assert rates["INR"].source == RateSource.PRIMARY
        assert rates["JPY"].source == RateSource.FALLBACK
        assert "XYZ" not in rates

    def test_failing_source_uses_fallback_for_all(self, failing_rate_source):
        provider = ExchangeRateProvider(source=failing_rate_source, cache=InMemoryRateCache(clock=ManualClock()))

        rates = provider.get_latest_rates("USD", ["INR", "EUR"])

        assert rates["INR"].rate == Decimal("83.50")
        assert rates["EUR"].rate == Decimal("0.92")
        assert all(r.source == RateSource.FALLBACK for r in rates.values())

    def test_unusable_rate_falls_back_for_that_target_only(self):
        source = ScriptedRateSource(rates={"USD": {"INR": Decimal("0"), "EUR": Decimal("0.9150")}})
        provider = ExchangeRateProvider(source=source, cache=InMemoryRateCache(clock=ManualClock()))

        rates = provider.get_latest_rates("USD", ["INR", "EUR"])

        assert rates["EUR"].source == RateSource.PRIMARY
        assert rates["EUR"].rate == Decimal("0.9150")
        assert rates["INR"].source == RateSource.FALLBACK
        assert rates["INR"].rate == Decimal("83.50")
        assert source.calls == [("latest", "USD", ["INR", "EUR"])]


class TestCacheManagement:
    """Tests for cache housekeeping."""

    def test_stats_and_clear(self, rate_provider):
        rate_provider.get_latest_rate("USD", "INR")
        rate_provider.get_latest_rate("USD", "EUR")

        stats = rate_provider.cache_stats()
        assert stats["size"] == 2
        assert "USD_INR" in stats["keys"]

        rate_provider.clear_cache()
        assert rate_provider.cache_stats() == {"size": 0, "keys": []}
