"""External data providers: exchange rates and quotes."""

from fxfolio.providers.rate_source import (
    ExchangeRateSource,
    FrankfurterRateSource,
    RatesPayload,
)
from fxfolio.providers.fallback_rates import FALLBACK_RATES, get_fallback_rate
from fxfolio.providers.quote_provider import QuoteProvider, QuotePayload
from fxfolio.providers.stub_provider import StubQuoteProvider
from fxfolio.providers.yfinance_provider import YFinanceQuoteProvider

__all__ = [
    "ExchangeRateSource",
    "FrankfurterRateSource",
    "RatesPayload",
    "FALLBACK_RATES",
    "get_fallback_rate",
    "QuoteProvider",
    "QuotePayload",
    "StubQuoteProvider",
    "YFinanceQuoteProvider",
]
