"""View models for conversion results."""

from dataclasses import dataclass, field

from fxfolio.domain.models import ConvertedMoney, Money


@dataclass(frozen=True)
class ConversionError:
    """A conversion failure at a given input position."""

    index: int
    error: str


@dataclass
class BatchConversionResult:
    """
    Result of converting many values to one currency.

    converted always has one entry per input, in input order. Entries
    that could not be converted are included unconverted and listed in
    errors by index.
    """

    converted: list[ConvertedMoney] = field(default_factory=list)
    errors: list[ConversionError] = field(default_factory=list)


@dataclass
class ConvertedTotal:
    """
    Sum of many values after conversion to one currency.

    This is not a single conversion record: has_conversions only says that
    at least one item was converted. Items that failed to convert are
    summed in their original amount and listed in errors.
    """

    total: Money
    items: list[ConvertedMoney] = field(default_factory=list)
    errors: list[ConversionError] = field(default_factory=list)
    conversion_count: int = 0

    @property
    def has_conversions(self) -> bool:
        return self.conversion_count > 0
