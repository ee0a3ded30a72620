"""Pydantic schemas for position endpoints."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from fxfolio.domain.models import TransactionKind


class BuyRequest(BaseModel):
    """Request schema for recording a buy."""

    symbol: str = Field(..., min_length=1, max_length=32)
    quantity: Decimal = Field(..., gt=0)
    price: Decimal = Field(..., ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    txn_date: Optional[date] = None
    fees: Decimal = Field(default=Decimal("0"), ge=0)
    taxes: Decimal = Field(default=Decimal("0"), ge=0)
    name: Optional[str] = None
    note: Optional[str] = None


class SellRequest(BaseModel):
    """Request schema for recording a sell."""

    quantity: Decimal = Field(..., gt=0)
    price: Decimal = Field(..., ge=0)
    txn_date: Optional[date] = None
    fees: Decimal = Field(default=Decimal("0"), ge=0)
    taxes: Decimal = Field(default=Decimal("0"), ge=0)
    note: Optional[str] = None


class PositionResponse(BaseModel):
    """Response schema for a single position."""

    model_config = {"from_attributes": True}

    position_id: str
    symbol: str
    name: Optional[str] = None
    native_currency: str
    quantity: Decimal
    average_price: Decimal
    total_invested: Decimal
    current_price: Decimal
    current_value: Decimal
    total_gain_loss: Decimal
    total_gain_loss_percent: Decimal
    day_gain_loss: Decimal
    is_active: bool
    last_updated: Optional[datetime] = None


class PositionListResponse(BaseModel):
    """Response schema for listing positions."""

    positions: list[PositionResponse]
    count: int


class TransactionResponse(BaseModel):
    """Response schema for a single position transaction."""

    model_config = {"from_attributes": True}

    txn_id: Optional[int] = None
    position_id: str
    kind: TransactionKind
    quantity: Decimal
    price: Decimal
    fees: Decimal
    taxes: Decimal
    currency: str
    txn_date: date
    note: Optional[str] = None


class TransactionListResponse(BaseModel):
    """Response schema for a position's transaction history."""

    transactions: list[TransactionResponse]
    count: int


class RefreshResponse(BaseModel):
    """Response schema for a metrics refresh outcome."""

    position_id: str
    ok: bool
    error: Optional[str] = None


class RefreshAllResponse(BaseModel):
    """Response schema for refreshing many positions."""

    results: list[RefreshResponse]
    refreshed: int
    failed: int


class TradeResponse(BaseModel):
    """Response schema for a recorded buy or sell."""

    position: PositionResponse
    transaction: TransactionResponse
    refresh: RefreshResponse
