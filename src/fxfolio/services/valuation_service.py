"""Valuation service for portfolio summaries in a display currency."""

import logging
from decimal import Decimal
from typing import Optional

from fxfolio.domain.models import Money, Position, normalize_currency
from fxfolio.domain.views import ConversionError, PerformerView, PortfolioSummary
from fxfolio.services.conversion_service import ConversionService

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# Per-position values converted for the summary, in this order
_FIELDS = ("current_value", "total_invested", "total_gain_loss", "day_gain_loss")


class ValuationService:
    """
    Aggregates position metrics into portfolio totals.

    Only active positions count. Values that cannot be converted are
    summed in their native amount and reported in the summary's errors.
    """

    def __init__(self, conversion_service: ConversionService):
        self._conversion = conversion_service

    def summarize(self, positions: list[Position], display_currency: str) -> PortfolioSummary:
        currency = normalize_currency(display_currency)
        active = [p for p in positions if p.is_active]

        values = [
            Money(getattr(position, name), position.native_currency)
            for position in active
            for name in _FIELDS
        ]
        batch = self._conversion.convert_money_batch(values, currency)

        totals = {name: ZERO for name in _FIELDS}
        for index, item in enumerate(batch.converted):
            totals[_FIELDS[index % len(_FIELDS)]] += item.amount
        conversion_count = sum(1 for item in batch.converted if item.was_converted)

        total_invested = totals["total_invested"]
        current_value = totals["current_value"]
        total_gain_loss = totals["total_gain_loss"]
        day_gain_loss = totals["day_gain_loss"]

        total_gain_loss_percent = total_gain_loss / total_invested * 100 if total_invested > 0 else ZERO
        previous_day_value = current_value - day_gain_loss
        day_gain_loss_percent = day_gain_loss / previous_day_value * 100 if previous_day_value > 0 else ZERO

        errors = self._position_errors(active, batch.errors)
        if errors:
            logger.warning("Portfolio summary in %s has %d unconverted position(s)", currency, len(errors))

        best, worst = _performers(active)

        return PortfolioSummary(
            currency=currency,
            total_invested=Money(total_invested, currency),
            current_value=Money(current_value, currency),
            total_gain_loss=Money(total_gain_loss, currency),
            total_gain_loss_percent=total_gain_loss_percent,
            day_gain_loss=Money(day_gain_loss, currency),
            day_gain_loss_percent=day_gain_loss_percent,
            previous_day_value=Money(previous_day_value, currency),
            investment_count=len(active),
            conversion_count=conversion_count,
            best_performer=best,
            worst_performer=worst,
            errors=errors,
        )

    @staticmethod
    def _position_errors(active: list[Position], errors: list[ConversionError]) -> list[ConversionError]:
        """Collapse per-value errors into one entry per position index."""
        seen: dict[int, ConversionError] = {}
        for error in errors:
            position_index = error.index // len(_FIELDS)
            if position_index not in seen:
                symbol = active[position_index].symbol
                seen[position_index] = ConversionError(index=position_index, error=f"{symbol}: {error.error}")
        return list(seen.values())


def _performers(active: list[Position]) -> tuple[Optional[PerformerView], Optional[PerformerView]]:
    if not active:
        return None, None

    best = worst = active[0]
    for position in active[1:]:
        if position.total_gain_loss_percent > best.total_gain_loss_percent:
            best = position
        if position.total_gain_loss_percent < worst.total_gain_loss_percent:
            worst = position

    return (
        PerformerView(best.symbol, best.total_gain_loss_percent),
        PerformerView(worst.symbol, worst.total_gain_loss_percent),
    )
