"""Quote provider protocol and boundary schema."""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field

from fxfolio.domain.views import Quote


class QuotePayload(BaseModel):
    """
    Validated quote payload: {price, previousClose, dayChange, currency}.

    Untyped provider data is narrowed through this schema before it
    becomes a Quote.
    """

    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    price: Decimal = Field(ge=0)
    previous_close: Optional[Decimal] = Field(default=None, ge=0, alias="previousClose")
    day_change: Optional[Decimal] = Field(default=None, alias="dayChange")
    currency: str = Field(default="USD", pattern=r"^[A-Za-z]{3}$")

    def to_quote(self, as_of: Optional[datetime] = None) -> Quote:
        """Build a Quote, deriving day change from previous close when absent."""
        previous_close = self.previous_close if self.previous_close is not None else self.price
        day_change = self.day_change
        if day_change is None:
            day_change = self.price - previous_close
        return Quote(
            symbol=self.symbol.upper(),
            price=self.price,
            previous_close=previous_close,
            day_change=day_change,
            currency=self.currency.upper(),
            as_of=as_of,
        )


class QuoteProvider(Protocol):
    """
    Protocol for quote providers.

    Implementations fetch the current price, previous close, day change and
    currency for symbols. Symbols without a usable quote are omitted.
    """

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """Fetch quotes for multiple symbols, keyed by uppercase symbol."""
        ...
