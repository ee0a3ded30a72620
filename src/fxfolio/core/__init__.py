"""Core utilities and shared functionality."""

from fxfolio.core.clock import (
    now_utc,
    today_iso,
    to_utc,
    parse_iso_date,
    UTC,
)
from fxfolio.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    InvalidMoneyError,
    CurrencyMismatchError,
    RateUnavailableError,
    PersistenceError,
    InsufficientQuantityError,
    RateSourceError,
)

__all__ = [
    "now_utc",
    "today_iso",
    "to_utc",
    "parse_iso_date",
    "UTC",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "InvalidMoneyError",
    "CurrencyMismatchError",
    "RateUnavailableError",
    "PersistenceError",
    "InsufficientQuantityError",
    "RateSourceError",
]
