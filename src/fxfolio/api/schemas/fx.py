"""Pydantic schemas for exchange rate and conversion endpoints."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from fxfolio.domain.models import RateSource


class ExchangeRateResponse(BaseModel):
    """Response schema for a single exchange rate."""

    model_config = {"from_attributes": True}

    base: str
    target: str
    rate: Decimal
    date: str
    source: RateSource


class LatestRatesResponse(BaseModel):
    """Response schema for a batch of latest rates from one base."""

    base: str
    rates: dict[str, ExchangeRateResponse]
    missing: list[str] = Field(default_factory=list)


class ConvertRequest(BaseModel):
    """Request schema for converting a money value."""

    amount: Decimal
    currency: str = Field(..., min_length=3, max_length=3)
    target_currency: str = Field(..., min_length=3, max_length=3)
    rate_date: Optional[date] = Field(default=None, description="Use the rate published for this date")


class ConvertedMoneyResponse(BaseModel):
    """Response schema for a converted value with its provenance."""

    amount: Decimal
    currency: str
    original_amount: Decimal
    original_currency: str
    exchange_rate: Decimal
    rate_date: str
    rate_source: RateSource
    was_converted: bool
    formatted: str
    disclosure: Optional[str] = None
