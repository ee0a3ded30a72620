"""Portfolio summary endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from fxfolio.api.deps import get_position_tracker, get_valuation_service
from fxfolio.api.schemas import PortfolioSummaryResponse
from fxfolio.config.settings import get_settings
from fxfolio.services import PositionTracker, ValuationService

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


@router.get("/summary", response_model=PortfolioSummaryResponse)
def get_summary(
    currency: Optional[str] = Query(None, description="Display currency (defaults to settings)"),
    tracker: PositionTracker = Depends(get_position_tracker),
    valuation: ValuationService = Depends(get_valuation_service),
) -> PortfolioSummaryResponse:
    """Portfolio totals converted into one display currency."""
    display_currency = currency or get_settings().default_display_currency
    summary = valuation.summarize(tracker.list_positions(active_only=True), display_currency)
    return PortfolioSummaryResponse.model_validate(summary)
