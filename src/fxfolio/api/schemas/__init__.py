"""Pydantic schemas for API request/response."""

from fxfolio.api.schemas.fx import (
    ExchangeRateResponse,
    LatestRatesResponse,
    ConvertRequest,
    ConvertedMoneyResponse,
)
from fxfolio.api.schemas.position import (
    BuyRequest,
    SellRequest,
    PositionResponse,
    PositionListResponse,
    TransactionResponse,
    TransactionListResponse,
    RefreshResponse,
    RefreshAllResponse,
    TradeResponse,
)
from fxfolio.api.schemas.portfolio import (
    MoneyResponse,
    PerformerResponse,
    ConversionErrorResponse,
    PortfolioSummaryResponse,
)

__all__ = [
    "ExchangeRateResponse",
    "LatestRatesResponse",
    "ConvertRequest",
    "ConvertedMoneyResponse",
    "BuyRequest",
    "SellRequest",
    "PositionResponse",
    "PositionListResponse",
    "TransactionResponse",
    "TransactionListResponse",
    "RefreshResponse",
    "RefreshAllResponse",
    "TradeResponse",
    "MoneyResponse",
    "PerformerResponse",
    "ConversionErrorResponse",
    "PortfolioSummaryResponse",
]
