"""Dependency injection for FastAPI."""

from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from fxfolio.config.settings import get_settings
from fxfolio.providers import FrankfurterRateSource, QuoteProvider, StubQuoteProvider, YFinanceQuoteProvider
from fxfolio.repositories import InMemoryRateCache
from fxfolio.repositories.sqlalchemy import SqlAlchemyPositionRepository, get_db
from fxfolio.services import (
    ConversionService,
    ExchangeRateProvider,
    PositionTracker,
    QuoteService,
    ValuationService,
)

# Process-wide services; their caches must outlive a single request
_rate_provider: Optional[ExchangeRateProvider] = None
_quote_service: Optional[QuoteService] = None


def get_rate_provider() -> ExchangeRateProvider:
    """Provide the shared ExchangeRateProvider."""
    global _rate_provider
    if _rate_provider is None:
        settings = get_settings()
        _rate_provider = ExchangeRateProvider(
            source=FrankfurterRateSource(
                base_url=settings.rate_source_base_url,
                timeout_seconds=settings.rate_fetch_timeout_seconds,
            ),
            cache=InMemoryRateCache(),
            latest_ttl_seconds=settings.latest_rate_ttl_seconds,
            historical_ttl_seconds=settings.historical_rate_ttl_seconds,
        )
    return _rate_provider


def get_quote_provider() -> QuoteProvider:
    """Provide the QuoteProvider selected in settings."""
    if get_settings().quote_provider == "yfinance":
        return YFinanceQuoteProvider()
    return StubQuoteProvider()


def get_quote_service() -> QuoteService:
    """Provide the shared QuoteService."""
    global _quote_service
    if _quote_service is None:
        _quote_service = QuoteService(
            provider=get_quote_provider(),
            cache_ttl_seconds=get_settings().quote_cache_ttl_seconds,
        )
    return _quote_service


def reset_services() -> None:
    """Drop shared services so they are rebuilt from current settings."""
    global _rate_provider, _quote_service
    _rate_provider = None
    _quote_service = None


def get_position_repo(db: Session = Depends(get_db)) -> SqlAlchemyPositionRepository:
    """Provide PositionRepository instance."""
    return SqlAlchemyPositionRepository(db)


def get_conversion_service(
    rate_provider: ExchangeRateProvider = Depends(get_rate_provider),
) -> ConversionService:
    """Provide ConversionService instance."""
    return ConversionService(rate_provider)


def get_position_tracker(
    position_repo: SqlAlchemyPositionRepository = Depends(get_position_repo),
    quote_service: QuoteService = Depends(get_quote_service),
) -> PositionTracker:
    """Provide PositionTracker instance."""
    return PositionTracker(position_repo=position_repo, quote_service=quote_service)


def get_valuation_service(
    conversion_service: ConversionService = Depends(get_conversion_service),
) -> ValuationService:
    """Provide ValuationService instance."""
    return ValuationService(conversion_service)
