"""Pydantic schemas for portfolio summary endpoints."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class MoneyResponse(BaseModel):
    model_config = {"from_attributes": True}

    amount: Decimal
    currency: str


class PerformerResponse(BaseModel):
    model_config = {"from_attributes": True}

    symbol: str
    total_gain_loss_percent: Decimal


class ConversionErrorResponse(BaseModel):
    model_config = {"from_attributes": True}

    index: int
    error: str


class PortfolioSummaryResponse(BaseModel):
    """Response schema for portfolio totals in one display currency."""

    model_config = {"from_attributes": True}

    currency: str
    total_invested: MoneyResponse
    current_value: MoneyResponse
    total_gain_loss: MoneyResponse
    total_gain_loss_percent: Decimal
    day_gain_loss: MoneyResponse
    day_gain_loss_percent: Decimal
    previous_day_value: MoneyResponse
    investment_count: int
    conversion_count: int
    best_performer: Optional[PerformerResponse] = None
    worst_performer: Optional[PerformerResponse] = None
    errors: list[ConversionErrorResponse]
