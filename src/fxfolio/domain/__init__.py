"""Domain layer - pure business models with no external dependencies."""

from fxfolio.domain.models import (
    Money,
    ConvertedMoney,
    ExchangeRate,
    Position,
    PositionTransaction,
    TransactionKind,
    PositionStatus,
    RateSource,
)

__all__ = [
    "Money",
    "ConvertedMoney",
    "ExchangeRate",
    "Position",
    "PositionTransaction",
    "TransactionKind",
    "PositionStatus",
    "RateSource",
]
