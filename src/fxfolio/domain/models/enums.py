"""Enumerations for domain models."""

from enum import Enum


class TransactionKind(str, Enum):
    """Kinds of position transactions."""

    BUY = "buy"
    SELL = "sell"


class PositionStatus(str, Enum):
    """Lifecycle state of a position, derived from its history."""

    EMPTY = "empty"  # no transactions yet
    OPEN = "open"  # quantity > 0
    CLOSED = "closed"  # quantity == 0, history retained


class RateSource(str, Enum):
    """Where an exchange rate came from."""

    PRIMARY = "primary"  # live rate source
    FALLBACK = "fallback"  # static approximate table
