"""Exchange rate domain model."""

from dataclasses import dataclass
from decimal import Decimal

from fxfolio.domain.models.enums import RateSource
from fxfolio.domain.models.money import normalize_currency, to_decimal


@dataclass(frozen=True)
class ExchangeRate:
    """
    Rate to convert one unit of base into target.

    date is the ISO date the rate source published the rate for.
    """

    base: str
    target: str
    rate: Decimal
    date: str
    source: RateSource = RateSource.PRIMARY

    def __post_init__(self) -> None:
        object.__setattr__(self, "base", normalize_currency(self.base))
        object.__setattr__(self, "target", normalize_currency(self.target))
        object.__setattr__(self, "rate", to_decimal(self.rate))
        object.__setattr__(self, "source", RateSource(self.source))
        if self.rate <= 0:
            raise ValueError(f"Exchange rate must be positive: {self.rate}")
