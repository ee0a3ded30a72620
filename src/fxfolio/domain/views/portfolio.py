"""View models for positions and portfolio outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from fxfolio.domain.models import Money, PositionStatus
from fxfolio.domain.views.conversion import ConversionError


@dataclass
class Quote:
    """Live price sample for a symbol from the quote collaborator."""

    symbol: str
    price: Decimal
    previous_close: Decimal
    day_change: Decimal
    currency: str
    as_of: Optional[datetime] = None


@dataclass(frozen=True)
class PositionMetrics:
    """Derived metrics of a position for one price sample."""

    quantity: Decimal
    average_price: Decimal
    total_invested: Decimal
    current_price: Decimal
    current_value: Decimal
    total_gain_loss: Decimal
    total_gain_loss_percent: Decimal
    day_gain_loss: Decimal
    status: PositionStatus

    @property
    def is_active(self) -> bool:
        return self.quantity > 0


@dataclass
class MetricsRefreshResult:
    """Outcome of recomputing a position's metrics."""

    position_id: str
    metrics: Optional[PositionMetrics] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class PerformerView:
    """A position singled out by its total gain/loss percent."""

    symbol: str
    total_gain_loss_percent: Decimal


@dataclass
class PortfolioSummary:
    """Portfolio totals in a single display currency."""

    currency: str
    total_invested: Money
    current_value: Money
    total_gain_loss: Money
    total_gain_loss_percent: Decimal
    day_gain_loss: Money
    day_gain_loss_percent: Decimal
    previous_day_value: Money
    investment_count: int = 0
    conversion_count: int = 0
    best_performer: Optional[PerformerView] = None
    worst_performer: Optional[PerformerView] = None
    errors: list[ConversionError] = field(default_factory=list)
