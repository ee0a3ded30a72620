"""Exchange rate source protocol and the Frankfurter HTTP client."""

import logging
from datetime import date as date_type
from decimal import Decimal
from typing import Optional, Protocol

import httpx
from pydantic import BaseModel, field_validator

from fxfolio.core.exceptions import RateSourceError

logger = logging.getLogger(__name__)


class RatesPayload(BaseModel):
    """Validated rate source response: {amount, base, date, rates: {CCY: rate}}."""

    amount: Decimal = Decimal("1")
    base: str
    date: date_type
    rates: dict[str, Optional[Decimal]]

    @field_validator("rates")
    @classmethod
    def drop_unusable_rates(cls, rates: dict[str, Optional[Decimal]]) -> dict[str, Optional[Decimal]]:
        # A null or non-positive rate counts as missing for that target only
        return {code: value for code, value in rates.items() if value is not None and value > 0}


class ExchangeRateSource(Protocol):
    """
    Protocol for external exchange rate sources.

    Each call is one external request. Implementations raise
    RateSourceError on any failure; they never retry.
    """

    def fetch_latest(self, base: str, targets: list[str]) -> RatesPayload:
        """Fetch the latest rates from base to each target."""
        ...

    def fetch_historical(self, base: str, targets: list[str], on: date_type) -> RatesPayload:
        """Fetch rates from base to each target as published for a date."""
        ...


class FrankfurterRateSource:
    """
    Frankfurter API client (ECB reference rates).

    GET {base_url}/latest?base=X&symbols=Y,Z
    GET {base_url}/{YYYY-MM-DD}?base=X&symbols=Y,Z
    """

    def __init__(
        self,
        base_url: str = "https://api.frankfurter.dev/v1",
        timeout_seconds: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout_seconds)

    def fetch_latest(self, base: str, targets: list[str]) -> RatesPayload:
        return self._fetch("latest", base, targets)

    def fetch_historical(self, base: str, targets: list[str], on: date_type) -> RatesPayload:
        return self._fetch(on.isoformat(), base, targets)

    def close(self) -> None:
        """Close the underlying HTTP client if this source created it."""
        if self._owns_client:
            self._client.close()

    def _fetch(self, endpoint: str, base: str, targets: list[str]) -> RatesPayload:
        url = f"{self._base_url}/{endpoint}"
        params = {"base": base, "symbols": ",".join(targets)}

        try:
            response = self._client.get(url, params=params, headers={"Accept": "application/json"})
        except httpx.HTTPError as exc:
            raise RateSourceError(f"Rate source request failed: {exc}") from exc

        if response.status_code != 200:
            raise RateSourceError(
                f"Rate source error: {response.status_code} {response.reason_phrase}"
            )

        try:
            return RatesPayload.model_validate(response.json())
        except ValueError as exc:
            raise RateSourceError(f"Rate source returned an invalid payload: {exc}") from exc
