"""Position and position transaction domain models."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from fxfolio.domain.models.enums import TransactionKind


@dataclass
class PositionTransaction:
    """
    A single buy or sell against a position.

    Append-only: transactions are never edited, and only removed together
    with their position.
    """

    position_id: str
    kind: TransactionKind
    quantity: Decimal
    price: Decimal
    txn_date: date
    fees: Decimal = field(default_factory=lambda: Decimal("0"))
    taxes: Decimal = field(default_factory=lambda: Decimal("0"))
    currency: str = "USD"
    note: Optional[str] = None
    txn_id: Optional[int] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if isinstance(self.kind, str):
            self.kind = TransactionKind(self.kind)

    @property
    def total_amount(self) -> Decimal:
        """Cash paid for a buy (incl. costs) or received for a sell (net of costs)."""
        gross = self.quantity * self.price
        if self.kind == TransactionKind.BUY:
            return gross + self.fees + self.taxes
        return gross - self.fees - self.taxes


@dataclass
class Position:
    """
    A tracked holding in one symbol.

    Metric fields are derived from the full transaction history plus one
    price sample. Never patch them incrementally; recompute instead.
    """

    position_id: str
    symbol: str
    native_currency: str
    name: Optional[str] = None
    quantity: Decimal = field(default_factory=lambda: Decimal("0"))
    average_price: Decimal = field(default_factory=lambda: Decimal("0"))
    total_invested: Decimal = field(default_factory=lambda: Decimal("0"))
    current_price: Decimal = field(default_factory=lambda: Decimal("0"))
    current_value: Decimal = field(default_factory=lambda: Decimal("0"))
    total_gain_loss: Decimal = field(default_factory=lambda: Decimal("0"))
    total_gain_loss_percent: Decimal = field(default_factory=lambda: Decimal("0"))
    day_gain_loss: Decimal = field(default_factory=lambda: Decimal("0"))
    is_active: bool = True
    last_updated: Optional[datetime] = None
    created_at: Optional[datetime] = None
