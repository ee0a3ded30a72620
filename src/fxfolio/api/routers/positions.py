"""Position endpoints."""

from fastapi import APIRouter, Depends, Query

from fxfolio.api.deps import get_position_tracker
from fxfolio.api.schemas import (
    BuyRequest,
    PositionListResponse,
    PositionResponse,
    RefreshAllResponse,
    RefreshResponse,
    SellRequest,
    TradeResponse,
    TransactionListResponse,
    TransactionResponse,
)
from fxfolio.domain.views import MetricsRefreshResult
from fxfolio.services import PositionBuy, PositionSell, PositionTracker, TradeResult

router = APIRouter(prefix="/positions", tags=["positions"])


def _refresh_response(result: MetricsRefreshResult) -> RefreshResponse:
    return RefreshResponse(position_id=result.position_id, ok=result.ok, error=result.error)


def _trade_response(result: TradeResult) -> TradeResponse:
    return TradeResponse(
        position=PositionResponse.model_validate(result.position),
        transaction=TransactionResponse.model_validate(result.transaction),
        refresh=_refresh_response(result.refresh),
    )


@router.get("", response_model=PositionListResponse)
def list_positions(
    active_only: bool = Query(False, description="Only positions with quantity > 0"),
    tracker: PositionTracker = Depends(get_position_tracker),
) -> PositionListResponse:
    """List positions."""
    positions = tracker.list_positions(active_only=active_only)
    return PositionListResponse(
        positions=[PositionResponse.model_validate(p) for p in positions],
        count=len(positions),
    )


@router.post("/buy", response_model=TradeResponse, status_code=201)
def record_buy(
    data: BuyRequest,
    tracker: PositionTracker = Depends(get_position_tracker),
) -> TradeResponse:
    """Record a buy, opening the position on the first buy of a symbol."""
    result = tracker.record_buy(PositionBuy(**data.model_dump()))
    return _trade_response(result)


@router.post("/refresh", response_model=RefreshAllResponse)
def refresh_all(
    active_only: bool = Query(True),
    tracker: PositionTracker = Depends(get_position_tracker),
) -> RefreshAllResponse:
    """Recompute metrics for all positions."""
    results = tracker.refresh_all(active_only=active_only)
    refreshed = sum(1 for r in results if r.ok)
    return RefreshAllResponse(
        results=[_refresh_response(r) for r in results],
        refreshed=refreshed,
        failed=len(results) - refreshed,
    )


@router.get("/{position_id}", response_model=PositionResponse)
def get_position(
    position_id: str,
    tracker: PositionTracker = Depends(get_position_tracker),
) -> PositionResponse:
    """Get a single position."""
    return PositionResponse.model_validate(tracker.get_position(position_id))


@router.get("/{position_id}/transactions", response_model=TransactionListResponse)
def list_transactions(
    position_id: str,
    tracker: PositionTracker = Depends(get_position_tracker),
) -> TransactionListResponse:
    """List a position's transactions in chronological order."""
    transactions = tracker.list_transactions(position_id)
    return TransactionListResponse(
        transactions=[TransactionResponse.model_validate(t) for t in transactions],
        count=len(transactions),
    )


@router.post("/{position_id}/sell", response_model=TradeResponse, status_code=201)
def record_sell(
    position_id: str,
    data: SellRequest,
    tracker: PositionTracker = Depends(get_position_tracker),
) -> TradeResponse:
    """Record a sell against a position."""
    result = tracker.record_sell(PositionSell(position_id=position_id, **data.model_dump()))
    return _trade_response(result)


@router.post("/{position_id}/refresh", response_model=RefreshResponse)
def refresh_position(
    position_id: str,
    tracker: PositionTracker = Depends(get_position_tracker),
) -> RefreshResponse:
    """Recompute one position's metrics from its history and a live quote."""
    return _refresh_response(tracker.refresh_metrics(position_id))


@router.delete("/{position_id}", status_code=204)
def delete_position(
    position_id: str,
    tracker: PositionTracker = Depends(get_position_tracker),
) -> None:
    """Delete a position and its whole history."""
    tracker.delete_position(position_id)
