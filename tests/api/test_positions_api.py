"""
API tests for position endpoints.

Tests cover:
- Recording buys and sells
- Listing positions and transaction history
- Metrics refresh
- Deletion and not-found handling
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient


# =============================================================================
# HELPER FIXTURES
# =============================================================================


@pytest.fixture
def aapl_position(client: TestClient) -> dict:
    """Buy 10 AAPL @ 150 with 5 in fees."""
    response = client.post(
        "/positions/buy",
        json={"symbol": "aapl", "quantity": "10", "price": "150", "fees": "5", "txn_date": "2024-01-02"},
    )
    assert response.status_code == 201
    return response.json()["position"]


# =============================================================================
# TRADE TESTS
# =============================================================================


class TestBuyAPI:
    """Tests for POST /positions/buy."""

    def test_buy_creates_position(self, client: TestClient):
        """
        GIVEN no positions
        WHEN I POST a buy
        THEN the position is created with refreshed metrics
        """
        response = client.post(
            "/positions/buy",
            json={"symbol": "aapl", "quantity": "10", "price": "150", "fees": "5"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["refresh"]["ok"] is True
        assert data["position"]["symbol"] == "AAPL"
        assert Decimal(data["position"]["total_invested"]) == Decimal("1505")
        assert Decimal(data["position"]["current_value"]) == Decimal("2000")
        assert data["transaction"]["kind"] == "buy"

    def test_buy_validation_returns_422(self, client: TestClient):
        response = client.post("/positions/buy", json={"symbol": "AAPL", "quantity": "0", "price": "1"})

        assert response.status_code == 422

    def test_buy_currency_mismatch_returns_400(self, client: TestClient, aapl_position):
        response = client.post(
            "/positions/buy",
            json={"symbol": "AAPL", "quantity": "1", "price": "1", "currency": "EUR"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"


class TestSellAPI:
    """Tests for POST /positions/{id}/sell."""

    def test_partial_sell(self, client: TestClient, aapl_position):
        response = client.post(
            f"/positions/{aapl_position['position_id']}/sell",
            json={"quantity": "4", "price": "170", "txn_date": "2024-02-01"},
        )

        assert response.status_code == 201
        position = response.json()["position"]
        assert Decimal(position["quantity"]) == Decimal("6")
        assert Decimal(position["total_invested"]) == Decimal("903")
        assert Decimal(position["average_price"]) == Decimal("90.3")
        assert Decimal(position["total_gain_loss"]) == Decimal("658.2")

    def test_oversell_returns_400(self, client: TestClient, aapl_position):
        response = client.post(
            f"/positions/{aapl_position['position_id']}/sell",
            json={"quantity": "11", "price": "170"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "INSUFFICIENT_QUANTITY"

    def test_sell_unknown_position_returns_404(self, client: TestClient):
        response = client.post("/positions/missing/sell", json={"quantity": "1", "price": "1"})

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"


# =============================================================================
# QUERY TESTS
# =============================================================================


class TestPositionQueries:
    """Tests for listing and fetching positions."""

    def test_list_positions(self, client: TestClient, aapl_position):
        response = client.get("/positions")

        assert response.status_code == 200
        assert response.json()["count"] == 1
        assert response.json()["positions"][0]["position_id"] == aapl_position["position_id"]

    def test_list_active_only_hides_closed(self, client: TestClient, aapl_position):
        client.post(f"/positions/{aapl_position['position_id']}/sell", json={"quantity": "10", "price": "190"})

        assert client.get("/positions", params={"active_only": True}).json()["count"] == 0
        assert client.get("/positions").json()["count"] == 1

    def test_get_position(self, client: TestClient, aapl_position):
        response = client.get(f"/positions/{aapl_position['position_id']}")

        assert response.status_code == 200
        assert response.json()["symbol"] == "AAPL"

    def test_get_missing_position_returns_404(self, client: TestClient):
        response = client.get("/positions/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "NOT_FOUND", "message": "Position not found: nope"}

    def test_transactions_in_chronological_order(self, client: TestClient, aapl_position):
        position_id = aapl_position["position_id"]
        client.post(f"/positions/{position_id}/sell", json={"quantity": "4", "price": "170", "txn_date": "2024-02-01"})

        response = client.get(f"/positions/{position_id}/transactions")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert [t["kind"] for t in data["transactions"]] == ["buy", "sell"]


# =============================================================================
# REFRESH AND DELETE TESTS
# =============================================================================


class TestRefreshAndDelete:
    """Tests for refresh and delete endpoints."""

    def test_refresh_position(self, client: TestClient, aapl_position):
        response = client.post(f"/positions/{aapl_position['position_id']}/refresh")

        assert response.status_code == 200
        assert response.json() == {"position_id": aapl_position["position_id"], "ok": True, "error": None}

    def test_refresh_missing_position_reports_failure(self, client: TestClient):
        response = client.post("/positions/missing/refresh")

        assert response.status_code == 200
        assert response.json()["ok"] is False

    def test_refresh_all(self, client: TestClient, aapl_position):
        client.post(
            "/positions/buy",
            json={"symbol": "VOD.L", "quantity": "100", "price": "70", "currency": "GBP"},
        )

        response = client.post("/positions/refresh")

        assert response.status_code == 200
        data = response.json()
        assert data["refreshed"] == 2
        assert data["failed"] == 0

    def test_delete_position(self, client: TestClient, aapl_position):
        position_id = aapl_position["position_id"]

        response = client.delete(f"/positions/{position_id}")

        assert response.status_code == 204
        assert client.get(f"/positions/{position_id}").status_code == 404
        assert client.delete(f"/positions/{position_id}").status_code == 404
