"""Stub quote provider for offline/testing use."""

from decimal import Decimal
import random

from fxfolio.core.clock import now_utc
from fxfolio.domain.views import Quote
from fxfolio.providers.quote_provider import QuotePayload


# Deterministic fake prices: (price, previous close, currency)
_STUB_QUOTES: dict[str, tuple[Decimal, Decimal, str]] = {
    "AAPL": (Decimal("185.50"), Decimal("184.25"), "USD"),
    "GOOGL": (Decimal("142.75"), Decimal("141.50"), "USD"),
    "MSFT": (Decimal("378.25"), Decimal("376.80"), "USD"),
    "TSLA": (Decimal("248.75"), Decimal("250.10"), "USD"),
    "SPY": (Decimal("485.25"), Decimal("484.10"), "USD"),
    "VOD.L": (Decimal("72.30"), Decimal("71.90"), "GBP"),
    "SAP.DE": (Decimal("178.40"), Decimal("177.10"), "EUR"),
    "RELIANCE.NS": (Decimal("2950.00"), Decimal("2932.50"), "INR"),
    "7203.T": (Decimal("3350.00"), Decimal("3371.00"), "JPY"),
    "SHOP.TO": (Decimal("104.20"), Decimal("102.85"), "CAD"),
}


class StubQuoteProvider:
    """
    Stub provider with deterministic fake data for offline operation.

    Uses predefined quotes for known symbols; generates seeded random USD
    prices for unknown symbols.
    """

    def __init__(self, seed: int = 42):
        self._rng = random.Random(seed)

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """Return stub quotes for requested symbols."""
        as_of = now_utc()
        result: dict[str, Quote] = {}

        for symbol in symbols:
            upper_symbol = symbol.upper()
            if upper_symbol in _STUB_QUOTES:
                price, previous_close, currency = _STUB_QUOTES[upper_symbol]
            else:
                base_price = Decimal(str(50 + self._rng.random() * 200))
                price = base_price.quantize(Decimal("0.01"))
                change_pct = Decimal(str((self._rng.random() - 0.5) * 0.04))
                previous_close = (price / (1 + change_pct)).quantize(Decimal("0.01"))
                currency = "USD"

            payload = QuotePayload(
                symbol=upper_symbol,
                price=price,
                previous_close=previous_close,
                currency=currency,
            )
            result[upper_symbol] = payload.to_quote(as_of=as_of)

        return result
