"""Money value objects.

A Money is an (amount, currency) pair. Arithmetic and comparison across
different currencies is rejected; values must be converted first.
"""

import math
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional, Union

from fxfolio.core.clock import today_iso
from fxfolio.core.exceptions import CurrencyMismatchError, InvalidMoneyError
from fxfolio.domain.models.enums import RateSource

Numeric = Union[Decimal, int, float, str]

CURRENCY_CODE_PATTERN = re.compile(r"^[A-Z]{3}$")


def is_valid_currency_code(code: Any) -> bool:
    """Return True if code is a 3-letter ISO 4217 style code (any case)."""
    return isinstance(code, str) and bool(CURRENCY_CODE_PATTERN.match(code.strip().upper()))


def normalize_currency(code: Any) -> str:
    """Uppercase and validate a currency code."""
    if not is_valid_currency_code(code):
        raise InvalidMoneyError(f"Invalid currency code: {code!r}")
    return code.strip().upper()


def to_decimal(value: Any) -> Decimal:
    """
    Coerce a numeric value to a finite Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1").
    """
    if isinstance(value, bool):
        raise InvalidMoneyError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidMoneyError(f"Invalid amount: {value!r}")
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as exc:
            raise InvalidMoneyError(f"Invalid amount: {value!r}") from exc
    else:
        raise InvalidMoneyError(f"Invalid amount: {value!r}")

    if not result.is_finite():
        raise InvalidMoneyError(f"Invalid amount: {value!r}")
    return result


@dataclass(frozen=True)
class Money:
    """
    Immutable monetary value with its currency.

    All operations return new instances. add, subtract, compare and equals
    raise CurrencyMismatchError when currencies differ.
    """

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))
        object.__setattr__(self, "currency", normalize_currency(self.currency))

    # Constructors

    @classmethod
    def of(cls, amount: Numeric, currency: str) -> "Money":
        """Create a Money, raising InvalidMoneyError on bad input."""
        return cls(amount, currency)

    @classmethod
    def zero(cls, currency: str) -> "Money":
        """Create a zero amount in the given currency."""
        return cls(Decimal("0"), currency)

    # Currency-guarded operations

    def _require_same_currency(self, other: "Money", operation: str) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Cannot {operation} Money and {type(other).__name__}")
        if self.currency != other.currency:
            raise CurrencyMismatchError(operation, self.currency, other.currency)

    def add(self, other: "Money") -> "Money":
        self._require_same_currency(other, "add")
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._require_same_currency(other, "subtract")
        return Money(self.amount - other.amount, self.currency)

    def compare(self, other: "Money") -> int:
        """Return -1, 0 or 1 as self is less than, equal to or greater than other."""
        self._require_same_currency(other, "compare")
        if self.amount < other.amount:
            return -1
        if self.amount > other.amount:
            return 1
        return 0

    def equals(self, other: "Money") -> bool:
        self._require_same_currency(other, "compare")
        return self.amount == other.amount

    # Single-currency operations

    def multiply(self, scalar: Numeric) -> "Money":
        return Money(self.amount * to_decimal(scalar), self.currency)

    def negate(self) -> "Money":
        return Money(-self.amount, self.currency)

    def abs(self) -> "Money":
        return Money(abs(self.amount), self.currency)

    def round(self, decimals: int = 2) -> "Money":
        """Round half away from zero to the given number of decimal places."""
        exponent = Decimal(1).scaleb(-decimals)
        return Money(self.amount.quantize(exponent, rounding=ROUND_HALF_UP), self.currency)

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    # Operator support

    def __add__(self, other: "Money") -> "Money":
        return self.add(other)

    def __sub__(self, other: "Money") -> "Money":
        return self.subtract(other)

    def __neg__(self) -> "Money":
        return self.negate()

    def __abs__(self) -> "Money":
        return self.abs()

    def __mul__(self, scalar: Numeric) -> "Money":
        if isinstance(scalar, Money):
            return NotImplemented
        return self.multiply(scalar)

    __rmul__ = __mul__

    def __round__(self, ndigits: Optional[int] = None) -> "Money":
        return self.round(2 if ndigits is None else ndigits)

    def __lt__(self, other: "Money") -> bool:
        return self.compare(other) < 0

    def __le__(self, other: "Money") -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: "Money") -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: "Money") -> bool:
        return self.compare(other) >= 0

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"


def try_money(amount: Any, currency: Any) -> Optional[Money]:
    """Create a Money, returning None instead of raising on bad input."""
    try:
        return Money(amount, currency)
    except InvalidMoneyError:
        return None


@dataclass(frozen=True)
class ConvertedMoney:
    """
    Money in a display currency plus the provenance of its conversion.

    When was_converted is False the value is the original, untouched:
    amount == original_amount, currency == original_currency and
    exchange_rate == 1.
    """

    amount: Decimal
    currency: str
    original_amount: Decimal
    original_currency: str
    exchange_rate: Decimal
    rate_date: str
    rate_source: RateSource
    was_converted: bool

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))
        object.__setattr__(self, "currency", normalize_currency(self.currency))
        object.__setattr__(self, "original_amount", to_decimal(self.original_amount))
        object.__setattr__(self, "original_currency", normalize_currency(self.original_currency))
        object.__setattr__(self, "exchange_rate", to_decimal(self.exchange_rate))
        object.__setattr__(self, "rate_source", RateSource(self.rate_source))

        if not self.was_converted and (
            self.amount != self.original_amount
            or self.currency != self.original_currency
            or self.exchange_rate != 1
        ):
            raise InvalidMoneyError("Unconverted value must equal its original with rate 1")

    @classmethod
    def unconverted(
        cls,
        money: Money,
        rate_date: Optional[str] = None,
        rate_source: RateSource = RateSource.PRIMARY,
    ) -> "ConvertedMoney":
        """Wrap a Money that was not (or could not be) converted."""
        return cls(
            amount=money.amount,
            currency=money.currency,
            original_amount=money.amount,
            original_currency=money.currency,
            exchange_rate=Decimal("1"),
            rate_date=rate_date or today_iso(),
            rate_source=rate_source,
            was_converted=False,
        )

    @property
    def money(self) -> Money:
        """The displayed value as plain Money."""
        return Money(self.amount, self.currency)

    @property
    def original(self) -> Money:
        return Money(self.original_amount, self.original_currency)

    def to_dict(self) -> dict:
        """Display shape consumed by UI layers."""
        return {
            "amount": self.amount,
            "currency": self.currency,
            "originalAmount": self.original_amount,
            "originalCurrency": self.original_currency,
            "exchangeRate": self.exchange_rate,
            "rateDate": self.rate_date,
            "rateSource": self.rate_source.value,
            "wasConverted": self.was_converted,
        }
