"""Service layer - rates, conversion, cost basis and valuation."""

from fxfolio.services.rate_provider import ExchangeRateProvider, RateResult
from fxfolio.services.conversion_service import (
    ConversionService,
    needs_conversion,
    can_convert,
    describe_conversion,
)
from fxfolio.services.quote_service import QuoteService
from fxfolio.services.cost_basis import (
    PositionTracker,
    PositionBuy,
    PositionSell,
    TradeResult,
    calculate_position_metrics,
    position_status,
)
from fxfolio.services.valuation_service import ValuationService

__all__ = [
    "ExchangeRateProvider",
    "RateResult",
    "ConversionService",
    "needs_conversion",
    "can_convert",
    "describe_conversion",
    "QuoteService",
    "PositionTracker",
    "PositionBuy",
    "PositionSell",
    "TradeResult",
    "calculate_position_metrics",
    "position_status",
    "ValuationService",
]
