"""Currency conversion service.

Conversion happens at display time only. Every result carries the original
value and the rate used, and a missing rate degrades to the unconverted
value instead of raising.
"""

import logging
from decimal import Decimal
from typing import Optional

from fxfolio.core.exceptions import RateUnavailableError
from fxfolio.domain.models import (
    ConvertedMoney,
    ExchangeRate,
    Money,
    RateSource,
    is_valid_currency_code,
    normalize_currency,
)
from fxfolio.domain.views import BatchConversionResult, ConversionError, ConvertedTotal
from fxfolio.services.formatting import conversion_disclosure
from fxfolio.services.rate_provider import DateLike, ExchangeRateProvider, RateResult

logger = logging.getLogger(__name__)


def _degraded(source: Money) -> ConvertedMoney:
    return ConvertedMoney.unconverted(source, rate_source=RateSource.FALLBACK)


def _apply_rate(source: Money, target: str, rate: ExchangeRate) -> ConvertedMoney:
    return ConvertedMoney(
        amount=source.amount * rate.rate,
        currency=target,
        original_amount=source.amount,
        original_currency=source.currency,
        exchange_rate=rate.rate,
        rate_date=rate.date,
        rate_source=rate.source,
        was_converted=True,
    )


class ConversionService:
    """Converts Money values into a display currency."""

    def __init__(self, rate_provider: ExchangeRateProvider):
        self._rates = rate_provider

    def convert_money(
        self,
        source: Money,
        target_currency: str,
        historical_date: Optional[DateLike] = None,
    ) -> ConvertedMoney:
        """
        Convert one value, using the historical rate for a date if given.

        Never raises for a missing rate: the original value comes back with
        was_converted=False and a warning is logged.
        """
        target = normalize_currency(target_currency)

        if source.currency == target:
            return ConvertedMoney.unconverted(source)

        result = self._lookup(source.currency, target, historical_date)
        if not result.ok:
            logger.warning("Currency conversion failed: %s", result.error)
            return _degraded(source)

        return _apply_rate(source, target, result.rate)

    def convert_money_batch(self, sources: list[Money], target_currency: str) -> BatchConversionResult:
        """
        Convert many values, fetching at most one rate per source currency.

        The output always has one entry per input, in order.
        """
        target = normalize_currency(target_currency)

        rates: dict[str, ExchangeRate] = {}
        for currency in dict.fromkeys(s.currency for s in sources if s.currency != target):
            result = self._rates.get_latest_rate(currency, target)
            if result.ok:
                rates[currency] = result.rate

        batch = BatchConversionResult()
        for index, source in enumerate(sources):
            if source.currency == target:
                batch.converted.append(ConvertedMoney.unconverted(source))
                continue

            rate = rates.get(source.currency)
            if rate is None:
                error = RateUnavailableError(source.currency, target)
                batch.errors.append(ConversionError(index=index, error=error.message))
                batch.converted.append(_degraded(source))
                continue

            batch.converted.append(_apply_rate(source, target, rate))

        return batch

    def sum_money_with_conversion(self, values: list[Money], target_currency: str) -> ConvertedTotal:
        """
        Convert and sum many values.

        Items that could not be converted are added in their original
        amount; see ConvertedTotal for what has_conversions means.
        """
        target = normalize_currency(target_currency)
        batch = self.convert_money_batch(values, target)

        if batch.errors:
            logger.warning("Some conversions failed during sum: %s", batch.errors)

        total = sum((item.amount for item in batch.converted), Decimal("0"))
        conversion_count = sum(1 for item in batch.converted if item.was_converted)

        return ConvertedTotal(
            total=Money(total, target),
            items=batch.converted,
            errors=batch.errors,
            conversion_count=conversion_count,
        )

    # Rate helpers

    def get_exchange_rate(self, from_currency: str, to_currency: str) -> Decimal:
        """Return the latest rate as a number, or 1 if unavailable."""
        if from_currency.upper() == to_currency.upper():
            return Decimal("1")
        result = self._rates.get_latest_rate(from_currency, to_currency)
        return result.rate.rate if result.ok else Decimal("1")

    def get_exchange_rate_details(
        self,
        from_currency: str,
        to_currency: str,
        historical_date: Optional[DateLike] = None,
    ) -> Optional[ExchangeRate]:
        """Return the full rate record, or None if unavailable."""
        result = self._lookup(
            normalize_currency(from_currency),
            normalize_currency(to_currency),
            historical_date,
        )
        return result.rate

    def _lookup(self, base: str, target: str, historical_date: Optional[DateLike]) -> RateResult:
        if historical_date is not None:
            return self._rates.get_historical_rate(base, target, historical_date)
        return self._rates.get_latest_rate(base, target)


def needs_conversion(source_currency: str, target_currency: str) -> bool:
    return source_currency.upper() != target_currency.upper()


def can_convert(from_currency: str, to_currency: str) -> bool:
    return is_valid_currency_code(from_currency) and is_valid_currency_code(to_currency)


def describe_conversion(converted: ConvertedMoney) -> str:
    """Provenance disclosure for a converted value, or an empty string."""
    return conversion_disclosure(converted) or ""
