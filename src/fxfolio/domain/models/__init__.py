"""Domain models package."""

from fxfolio.domain.models.enums import TransactionKind, PositionStatus, RateSource
from fxfolio.domain.models.money import (
    Money,
    ConvertedMoney,
    try_money,
    is_valid_currency_code,
    normalize_currency,
    to_decimal,
)
from fxfolio.domain.models.rates import ExchangeRate
from fxfolio.domain.models.position import Position, PositionTransaction

__all__ = [
    "TransactionKind",
    "PositionStatus",
    "RateSource",
    "Money",
    "ConvertedMoney",
    "try_money",
    "is_valid_currency_code",
    "normalize_currency",
    "to_decimal",
    "ExchangeRate",
    "Position",
    "PositionTransaction",
]
