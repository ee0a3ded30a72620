"""Exchange rate and conversion endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query

from fxfolio.api.deps import get_conversion_service, get_rate_provider
from fxfolio.api.schemas import (
    ConvertedMoneyResponse,
    ConvertRequest,
    ExchangeRateResponse,
    LatestRatesResponse,
)
from fxfolio.core.exceptions import RateUnavailableError
from fxfolio.domain.models import ExchangeRate, Money, normalize_currency
from fxfolio.services import ConversionService, ExchangeRateProvider
from fxfolio.services.formatting import conversion_disclosure, format_converted_money

router = APIRouter(prefix="/fx", tags=["fx"])


def _rate_response(rate: ExchangeRate) -> ExchangeRateResponse:
    return ExchangeRateResponse.model_validate(rate)


@router.get("/rates/latest", response_model=ExchangeRateResponse)
def get_latest_rate(
    base: str = Query(..., description="Base currency code"),
    target: str = Query(..., description="Target currency code"),
    rates: ExchangeRateProvider = Depends(get_rate_provider),
) -> ExchangeRateResponse:
    """Get the latest rate for one currency pair."""
    base, target = normalize_currency(base), normalize_currency(target)
    result = rates.get_latest_rate(base, target)
    if not result.ok:
        raise RateUnavailableError(base, target)
    return _rate_response(result.rate)


@router.get("/rates/latest/batch", response_model=LatestRatesResponse)
def get_latest_rates(
    base: str = Query(..., description="Base currency code"),
    targets: str = Query(..., description="Comma-separated target currency codes"),
    rates: ExchangeRateProvider = Depends(get_rate_provider),
) -> LatestRatesResponse:
    """Get latest rates from one base to many targets."""
    base = normalize_currency(base)
    wanted = [normalize_currency(t) for t in targets.split(",") if t.strip()]
    found = rates.get_latest_rates(base, wanted)
    return LatestRatesResponse(
        base=base,
        rates={target: _rate_response(rate) for target, rate in found.items()},
        missing=[t for t in dict.fromkeys(wanted) if t not in found],
    )


@router.get("/rates/historical", response_model=ExchangeRateResponse)
def get_historical_rate(
    base: str = Query(..., description="Base currency code"),
    target: str = Query(..., description="Target currency code"),
    on: date = Query(..., alias="date", description="Rate publication date (YYYY-MM-DD)"),
    rates: ExchangeRateProvider = Depends(get_rate_provider),
) -> ExchangeRateResponse:
    """Get the rate for a past date (degrades to the latest rate)."""
    base, target = normalize_currency(base), normalize_currency(target)
    result = rates.get_historical_rate(base, target, on)
    if not result.ok:
        raise RateUnavailableError(base, target)
    return _rate_response(result.rate)


@router.post("/convert", response_model=ConvertedMoneyResponse)
def convert(
    data: ConvertRequest,
    conversion: ConversionService = Depends(get_conversion_service),
) -> ConvertedMoneyResponse:
    """Convert a value; an unavailable rate returns it unconverted."""
    converted = conversion.convert_money(
        Money(data.amount, data.currency),
        data.target_currency,
        historical_date=data.rate_date,
    )
    return ConvertedMoneyResponse(
        amount=converted.amount,
        currency=converted.currency,
        original_amount=converted.original_amount,
        original_currency=converted.original_currency,
        exchange_rate=converted.exchange_rate,
        rate_date=converted.rate_date,
        rate_source=converted.rate_source,
        was_converted=converted.was_converted,
        formatted=format_converted_money(converted),
        disclosure=conversion_disclosure(converted),
    )
