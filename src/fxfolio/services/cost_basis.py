"""Position cost-basis tracking.

Metrics use the weighted-average cost method: a sell removes invested
capital in proportion to the average cost so far, rather than matching
discrete lots.
"""

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from fxfolio.core.clock import now_utc, parse_iso_date
from fxfolio.core.exceptions import (
    AppError,
    InsufficientQuantityError,
    InvalidMoneyError,
    NotFoundError,
    ValidationError,
)
from fxfolio.domain.models import (
    Position,
    PositionStatus,
    PositionTransaction,
    TransactionKind,
    normalize_currency,
    to_decimal,
)
from fxfolio.domain.views import MetricsRefreshResult, PositionMetrics
from fxfolio.repositories.protocols import PositionRepository
from fxfolio.services.quote_service import QuoteService

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _chronological(transactions: Iterable[PositionTransaction]) -> list[PositionTransaction]:
    # sorted() is stable, so same-day transactions keep their recorded order
    return sorted(transactions, key=lambda t: t.txn_date)


def calculate_position_metrics(
    transactions: Iterable[PositionTransaction],
    current_price: Decimal,
    day_price_change: Decimal = ZERO,
) -> PositionMetrics:
    """
    Replay a transaction history into position metrics for one price sample.

    average_price divides by the quantity ever bought, not the quantity
    currently held. Reported gain/loss figures depend on this.
    """
    history = _chronological(transactions)
    quantity = ZERO
    total_invested = ZERO
    total_buy_quantity = ZERO

    for txn in history:
        if txn.kind == TransactionKind.BUY:
            quantity += txn.quantity
            total_buy_quantity += txn.quantity
            total_invested += txn.quantity * txn.price + txn.fees + txn.taxes
        else:
            quantity -= txn.quantity
            if total_buy_quantity > 0:
                total_invested -= (total_invested / total_buy_quantity) * txn.quantity

    average_price = total_invested / total_buy_quantity if total_buy_quantity > 0 else ZERO
    current_value = quantity * current_price
    held_cost = quantity * average_price
    total_gain_loss = current_value - held_cost
    total_gain_loss_percent = total_gain_loss / held_cost * 100 if held_cost > 0 else ZERO
    day_gain_loss = quantity * day_price_change

    return PositionMetrics(
        quantity=quantity,
        average_price=average_price,
        total_invested=total_invested,
        current_price=current_price,
        current_value=current_value,
        total_gain_loss=total_gain_loss,
        total_gain_loss_percent=total_gain_loss_percent,
        day_gain_loss=day_gain_loss,
        status=_status_for(bool(history), quantity),
    )


def _status_for(has_history: bool, quantity: Decimal) -> PositionStatus:
    if not has_history:
        return PositionStatus.EMPTY
    return PositionStatus.OPEN if quantity > 0 else PositionStatus.CLOSED


def position_status(transactions: Iterable[PositionTransaction]) -> PositionStatus:
    """Derive EMPTY / OPEN / CLOSED from a transaction history."""
    history = list(transactions)
    quantity = ZERO
    for txn in history:
        quantity += txn.quantity if txn.kind == TransactionKind.BUY else -txn.quantity
    return _status_for(bool(history), quantity)


@dataclass
class PositionBuy:
    """Input data for a buy. Creates the position on first buy of a symbol."""

    symbol: str
    quantity: Decimal
    price: Decimal
    currency: str = "USD"
    txn_date: Optional[date] = None
    fees: Decimal = Decimal("0")
    taxes: Decimal = Decimal("0")
    name: Optional[str] = None
    note: Optional[str] = None


@dataclass
class PositionSell:
    """Input data for a sell against an existing position."""

    position_id: str
    quantity: Decimal
    price: Decimal
    txn_date: Optional[date] = None
    fees: Decimal = Decimal("0")
    taxes: Decimal = Decimal("0")
    note: Optional[str] = None


@dataclass
class TradeResult:
    """A recorded transaction, its position and the metrics refresh outcome."""

    position: Position
    transaction: PositionTransaction
    refresh: MetricsRefreshResult


class PositionTracker:
    """
    Records buys/sells and keeps position metrics in sync with history.

    Persistence errors raised by the repository pass through unchanged,
    except during a metrics refresh, which reports failure through its
    result and leaves stored metrics untouched.
    """

    def __init__(self, position_repo: PositionRepository, quote_service: QuoteService):
        self._positions = position_repo
        self._quotes = quote_service

    # Queries

    def get_position(self, position_id: str) -> Position:
        position = self._positions.get_by_id(position_id)
        if not position:
            raise NotFoundError("Position", position_id)
        return position

    def list_positions(self, active_only: bool = False) -> list[Position]:
        return self._positions.list_positions(active_only=active_only)

    def list_transactions(self, position_id: str) -> list[PositionTransaction]:
        self.get_position(position_id)
        return self._positions.list_transactions(position_id)

    # Commands

    def record_buy(self, data: PositionBuy) -> TradeResult:
        """Record a buy, creating or reactivating the position as needed."""
        symbol = (data.symbol or "").strip().upper()
        if not symbol:
            raise ValidationError("Symbol is required")
        currency = self._validate_currency(data.currency)
        quantity, price, fees, taxes = self._validate_amounts(data.quantity, data.price, data.fees, data.taxes)

        position = self._positions.get_by_symbol(symbol)
        if position is not None and position.native_currency != currency:
            raise ValidationError(
                f"{symbol} is held in {position.native_currency}, not {currency}"
            )

        transaction = PositionTransaction(
            position_id=position.position_id if position else str(uuid.uuid4()),
            kind=TransactionKind.BUY,
            quantity=quantity,
            price=price,
            fees=fees,
            taxes=taxes,
            currency=currency,
            txn_date=self._txn_date(data.txn_date),
            note=data.note,
            created_at=now_utc(),
        )
        if position is None:
            position, transaction = self._positions.create_with_transaction(
                Position(
                    position_id=transaction.position_id,
                    symbol=symbol,
                    native_currency=currency,
                    name=data.name or symbol,
                    created_at=now_utc(),
                ),
                transaction,
            )
        else:
            transaction = self._positions.add_transaction(transaction)
        return self._finish_trade(position.position_id, transaction)

    def record_sell(self, data: PositionSell) -> TradeResult:
        """Record a sell; the quantity may not exceed the quantity held."""
        position = self.get_position(data.position_id)
        quantity, price, fees, taxes = self._validate_amounts(data.quantity, data.price, data.fees, data.taxes)

        history = self._positions.list_transactions(position.position_id)
        held = calculate_position_metrics(history, position.current_price).quantity
        if quantity > held:
            raise InsufficientQuantityError(position.symbol, str(quantity), str(held))

        transaction = self._positions.add_transaction(
            PositionTransaction(
                position_id=position.position_id,
                kind=TransactionKind.SELL,
                quantity=quantity,
                price=price,
                fees=fees,
                taxes=taxes,
                currency=position.native_currency,
                txn_date=self._txn_date(data.txn_date),
                note=data.note,
                created_at=now_utc(),
            )
        )
        return self._finish_trade(position.position_id, transaction)

    def refresh_metrics(self, position_id: str) -> MetricsRefreshResult:
        """
        Recompute a position's metrics from its full history and a live quote.

        Falls back to the stored price (and zero day change) when no quote
        is available. Never raises; on failure the stored metrics are left
        as they were.
        """
        try:
            position = self._positions.get_by_id(position_id)
            if not position:
                return MetricsRefreshResult(position_id=position_id, error=f"Position not found: {position_id}")

            transactions = self._positions.list_transactions(position_id)

            quote = self._quotes.get_quote(position.symbol)
            if quote is not None:
                if quote.currency != position.native_currency:
                    logger.warning(
                        "Quote for %s is in %s but position is held in %s",
                        position.symbol, quote.currency, position.native_currency,
                    )
                price, day_change = quote.price, quote.day_change
            else:
                price, day_change = position.current_price, ZERO

            metrics = calculate_position_metrics(transactions, price, day_change)
            self._positions.save_metrics(
                replace(
                    position,
                    quantity=metrics.quantity,
                    average_price=metrics.average_price,
                    total_invested=metrics.total_invested,
                    current_price=metrics.current_price,
                    current_value=metrics.current_value,
                    total_gain_loss=metrics.total_gain_loss,
                    total_gain_loss_percent=metrics.total_gain_loss_percent,
                    day_gain_loss=metrics.day_gain_loss,
                    is_active=metrics.is_active,
                    last_updated=now_utc(),
                )
            )
        except (AppError, ArithmeticError) as exc:
            message = getattr(exc, "message", str(exc))
            logger.error("Update position metrics error for %s: %s", position_id, message)
            return MetricsRefreshResult(position_id=position_id, error=message)

        return MetricsRefreshResult(position_id=position_id, metrics=metrics)

    def refresh_all(self, active_only: bool = True) -> list[MetricsRefreshResult]:
        """Refresh every (active) position."""
        return [
            self.refresh_metrics(p.position_id)
            for p in self._positions.list_positions(active_only=active_only)
        ]

    def delete_position(self, position_id: str) -> None:
        """Irrevocably delete a position and its whole history."""
        if not self._positions.delete(position_id):
            raise NotFoundError("Position", position_id)

    # Helpers

    def _finish_trade(self, position_id: str, transaction: PositionTransaction) -> TradeResult:
        refresh = self.refresh_metrics(position_id)
        return TradeResult(
            position=self.get_position(position_id),
            transaction=transaction,
            refresh=refresh,
        )

    @staticmethod
    def _validate_currency(currency: str) -> str:
        try:
            return normalize_currency(currency)
        except InvalidMoneyError as exc:
            raise ValidationError(exc.message) from exc

    @staticmethod
    def _validate_amounts(quantity, price, fees, taxes) -> tuple[Decimal, Decimal, Decimal, Decimal]:
        try:
            quantity, price, fees, taxes = (to_decimal(v) for v in (quantity, price, fees or 0, taxes or 0))
        except InvalidMoneyError as exc:
            raise ValidationError(exc.message) from exc
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than zero")
        if price < 0:
            raise ValidationError("Price cannot be negative")
        if fees < 0 or taxes < 0:
            raise ValidationError("Fees and taxes cannot be negative")
        return quantity, price, fees, taxes

    @staticmethod
    def _txn_date(value: Optional[date]) -> date:
        if value is None:
            return now_utc().date()
        try:
            return parse_iso_date(value)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
