"""Live quote provider backed by Yahoo Finance via yfinance."""

import logging
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from fxfolio.core.clock import now_utc
from fxfolio.domain.views import Quote
from fxfolio.providers.quote_provider import QuotePayload

logger = logging.getLogger(__name__)


# Lazy import so tests can patch before import
def _get_yf():
    import yfinance as yf
    return yf


def _payload_from_info(symbol: str, info: Any) -> Optional[QuotePayload]:
    """Narrow a yfinance info dict to a QuotePayload, or None if unusable."""
    if not isinstance(info, dict):
        return None
    price = info.get("currentPrice")
    if price is None:
        price = info.get("regularMarketPrice")
    if price is None:
        return None
    previous_close = info.get("previousClose")
    if previous_close is None:
        previous_close = info.get("regularMarketPreviousClose")
    try:
        return QuotePayload(
            symbol=symbol,
            price=str(price),
            previous_close=None if previous_close is None else str(previous_close),
            day_change=None if info.get("regularMarketChange") is None else str(info["regularMarketChange"]),
            currency=info.get("currency") or "USD",
        )
    except PydanticValidationError:
        logger.warning("Discarding malformed quote payload for %s", symbol)
        return None


class YFinanceQuoteProvider:
    """
    Fetches quotes from Yahoo Finance.

    Per-symbol failures drop that symbol from the result; a failure of the
    whole request propagates to the caller.
    """

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        if not symbols:
            return {}
        upper_symbols = [s.upper() for s in symbols]
        yf = _get_yf()
        tickers = yf.Tickers(" ".join(upper_symbols))
        as_of = now_utc()

        result: dict[str, Quote] = {}
        for symbol in upper_symbols:
            ticker = tickers.tickers.get(symbol)
            if ticker is None:
                continue
            try:
                info = ticker.info
            except Exception as exc:  # yfinance raises assorted network/parse errors
                logger.warning("Quote lookup failed for %s: %s", symbol, exc)
                continue
            payload = _payload_from_info(symbol, info)
            if payload is not None:
                result[symbol] = payload.to_quote(as_of=as_of)
        return result
