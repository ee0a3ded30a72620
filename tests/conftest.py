"""
Pytest configuration and fixtures for fxfolio tests.

This module provides:
- In-memory SQLite database fixtures
- A scriptable exchange rate source and a manual clock
- Deterministic and failing quote providers
- Service and repository fixtures
- Factory helpers for positions and transactions
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from fxfolio.main import app
from fxfolio.api.deps import get_quote_service, get_rate_provider
from fxfolio.config.settings import Settings, reset_settings, set_settings
from fxfolio.core.clock import UTC
from fxfolio.core.exceptions import RateSourceError
from fxfolio.repositories.sqlalchemy.database import Base, get_db, reset_database
# Import ORM models to register them with Base before creating tables
from fxfolio.repositories.sqlalchemy import orm_models  # noqa: F401
from fxfolio.repositories.sqlalchemy import SqlAlchemyPositionRepository
from fxfolio.repositories.memory import InMemoryRateCache
from fxfolio.providers import RatesPayload
from fxfolio.domain.models import Position, PositionTransaction, TransactionKind
from fxfolio.domain.views import Quote
from fxfolio.services import (
    ConversionService,
    ExchangeRateProvider,
    PositionTracker,
    QuoteService,
    ValuationService,
)


# =============================================================================
# TIME HELPERS
# =============================================================================


class ManualClock:
    """Monotonic clock stand-in that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return UTC.localize(datetime(2024, 6, 14, 16, 0, 0))


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def position_repo(test_session) -> SqlAlchemyPositionRepository:
    """Provide test PositionRepository."""
    return SqlAlchemyPositionRepository(test_session)


# =============================================================================
# EXCHANGE RATE FIXTURES
# =============================================================================


class ScriptedRateSource:
    """
    Exchange rate source answering from a fixed table.

    Records every call so tests can count external requests. Set
    `failing = True` to make every call raise RateSourceError.
    """

    DEFAULT_RATES = {
        "USD": {"INR": Decimal("83.22"), "EUR": Decimal("0.9150"), "GBP": Decimal("0.7890")},
        "EUR": {"USD": Decimal("1.0930"), "INR": Decimal("90.95")},
        "GBP": {"USD": Decimal("1.2675"), "INR": Decimal("105.48")},
        "INR": {"USD": Decimal("0.012016")},
    }

    def __init__(
        self,
        rates: Optional[dict[str, dict[str, Decimal]]] = None,
        rate_date: date = date(2024, 6, 14),
        failing: bool = False,
    ):
        self.rates = rates if rates is not None else {k: dict(v) for k, v in self.DEFAULT_RATES.items()}
        self.rate_date = rate_date
        self.failing = failing
        self.calls: list[tuple[str, str, list[str]]] = []
        # date -> {base: {target: rate}}
        self.historical: dict[date, dict[str, dict[str, Decimal]]] = {}

    def fetch_latest(self, base: str, targets: list[str]) -> RatesPayload:
        self.calls.append(("latest", base, list(targets)))
        return self._payload(base, targets, self.rates, self.rate_date)

    def fetch_historical(self, base: str, targets: list[str], on: date) -> RatesPayload:
        self.calls.append((on.isoformat(), base, list(targets)))
        return self._payload(base, targets, self.historical.get(on, {}), on)

    def _payload(self, base, targets, table, on) -> RatesPayload:
        if self.failing:
            raise RateSourceError("Rate source unreachable")
        found = {t: table[base][t] for t in targets if t in table.get(base, {})}
        return RatesPayload(base=base, date=on, rates=found)


@pytest.fixture
def rate_source() -> ScriptedRateSource:
    return ScriptedRateSource()


@pytest.fixture
def failing_rate_source() -> ScriptedRateSource:
    return ScriptedRateSource(failing=True)


@pytest.fixture
def rate_cache(clock) -> InMemoryRateCache:
    return InMemoryRateCache(clock=clock)


@pytest.fixture
def rate_provider(rate_source, rate_cache) -> ExchangeRateProvider:
    """Provide ExchangeRateProvider over the scripted source."""
    return ExchangeRateProvider(source=rate_source, cache=rate_cache)


@pytest.fixture
def conversion_service(rate_provider) -> ConversionService:
    return ConversionService(rate_provider)


# =============================================================================
# QUOTE FIXTURES
# =============================================================================


class DeterministicQuoteProvider:
    """
    Deterministic quote provider for testing.

    Provides fixed quotes with no randomness; `prices` can be edited to
    move the market between calls.
    """

    FIXED_QUOTES = {
        "AAPL": (Decimal("200"), Decimal("195"), "USD"),
        "MSFT": (Decimal("378.25"), Decimal("376.80"), "USD"),
        "TSLA": (Decimal("248.75"), Decimal("250.10"), "USD"),
        "VOD.L": (Decimal("72.30"), Decimal("71.90"), "GBP"),
        "RELIANCE.NS": (Decimal("2950.00"), Decimal("2932.50"), "INR"),
    }

    def __init__(self, as_of: Optional[datetime] = None):
        self._as_of = as_of
        self.prices = dict(self.FIXED_QUOTES)
        self.calls: list[list[str]] = []

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """Return deterministic quotes for requested symbols."""
        self.calls.append(list(symbols))
        result = {}
        for symbol in symbols:
            upper_symbol = symbol.upper()
            if upper_symbol in self.prices:
                price, previous_close, currency = self.prices[upper_symbol]
                result[upper_symbol] = Quote(
                    symbol=upper_symbol,
                    price=price,
                    previous_close=previous_close,
                    day_change=price - previous_close,
                    currency=currency,
                    as_of=self._as_of,
                )
        return result


class FailingQuoteProvider:
    """Quote provider that always raises an exception."""

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        raise ConnectionError("Network unavailable")


@pytest.fixture
def quote_provider(fixed_now) -> DeterministicQuoteProvider:
    return DeterministicQuoteProvider(as_of=fixed_now)


@pytest.fixture
def quote_service(quote_provider, clock) -> QuoteService:
    return QuoteService(provider=quote_provider, cache_ttl_seconds=60, clock=clock)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def position_tracker(position_repo, quote_service) -> PositionTracker:
    """Provide test PositionTracker."""
    return PositionTracker(position_repo=position_repo, quote_service=quote_service)


@pytest.fixture
def valuation_service(conversion_service) -> ValuationService:
    return ValuationService(conversion_service)


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(test_engine, rate_provider, quote_service) -> TestClient:
    """Provide FastAPI test client with test database and offline collaborators."""
    set_settings(Settings(database_url="sqlite://"))
    reset_database()
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rate_provider] = lambda: rate_provider
    app.dependency_overrides[get_quote_service] = lambda: quote_service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    reset_database()
    reset_settings()


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.01"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(Decimal(str(actual)) - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"


def buy(
    quantity: str,
    price: str,
    txn_date: date = date(2024, 1, 2),
    fees: str = "0",
    taxes: str = "0",
    position_id: str = "pos-1",
) -> PositionTransaction:
    """Helper to create a BUY transaction."""
    return PositionTransaction(
        position_id=position_id,
        kind=TransactionKind.BUY,
        quantity=Decimal(quantity),
        price=Decimal(price),
        txn_date=txn_date,
        fees=Decimal(fees),
        taxes=Decimal(taxes),
    )


def sell(
    quantity: str,
    price: str,
    txn_date: date = date(2024, 2, 1),
    fees: str = "0",
    taxes: str = "0",
    position_id: str = "pos-1",
) -> PositionTransaction:
    """Helper to create a SELL transaction."""
    return PositionTransaction(
        position_id=position_id,
        kind=TransactionKind.SELL,
        quantity=Decimal(quantity),
        price=Decimal(price),
        txn_date=txn_date,
        fees=Decimal(fees),
        taxes=Decimal(taxes),
    )


def make_position(
    symbol: str,
    currency: str,
    total_invested: str,
    current_value: str,
    day_gain_loss: str = "0",
    total_gain_loss_percent: Optional[str] = None,
    quantity: str = "1",
    is_active: bool = True,
) -> Position:
    """Helper to build a Position with stored metrics for aggregation tests."""
    invested = Decimal(total_invested)
    value = Decimal(current_value)
    gain = value - invested
    if total_gain_loss_percent is None:
        percent = gain / invested * 100 if invested else Decimal("0")
    else:
        percent = Decimal(total_gain_loss_percent)
    return Position(
        position_id=f"id-{symbol}",
        symbol=symbol,
        native_currency=currency,
        quantity=Decimal(quantity) if is_active else Decimal("0"),
        total_invested=invested,
        current_value=value,
        total_gain_loss=gain,
        total_gain_loss_percent=percent,
        day_gain_loss=Decimal(day_gain_loss),
        is_active=is_active,
    )
