"""
Tests for GET /api/v1/analytics and /api/v1/analytics/break-even.
"""
import asyncio
from datetime import datetime
from decimal import Decimal

import pytest

from panelera.api.v1.deps import get_analytics_store, get_current_admin_user
from panelera.core.security import create_access_token
from panelera.core.settings import settings
from panelera.exceptions import PermissionDeniedError
from panelera.main import app
from tests.factories import (
    create_test_lot,
    create_test_purchase,
    create_test_sale,
    create_test_supplier,
    create_test_user,
)

URL = "/api/v1/analytics"

SECTIONS = {
    "production_monthly",
    "sales_monthly",
    "cost_breakdown",
    "lot_states",
    "profitability_monthly",
    "top_suppliers",
    "operator_performance",
}


def parse_decimal(value) -> Decimal:
    """Parse a JSON value (string or number) as Decimal for comparison."""
    return Decimal(str(value))


class TestAnalyticsAuth:
    """Authorization is checked before any report work."""

    def test_requires_token(self, client):
        response = client.get(URL)
        assert response.status_code == 401
        assert response.json()["error"] == "AUTHENTICATION_ERROR"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_invalid_token(self, client):
        response = client.get(URL, headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["error"] == "INVALID_TOKEN"

    def test_token_for_unknown_user(self, client):
        headers = {"Authorization": f"Bearer {create_access_token(424242)}"}
        response = client.get(URL, headers=headers)
        assert response.status_code == 401

    def test_inactive_user(self, client, db_session):
        user = create_test_user(db_session, role="ADMIN", is_active=False)
        headers = {"Authorization": f"Bearer {create_access_token(user.id)}"}

        response = client.get(URL, headers=headers)

        assert response.status_code == 403

    def test_operator_allowed_by_default(self, client, operator_headers):
        response = client.get(URL, headers=operator_headers)
        assert response.status_code == 200

    def test_operator_denied_when_admin_only(self, client, operator_headers, monkeypatch):
        monkeypatch.setattr(settings, "ANALYTICS_ADMIN_ONLY", True)

        response = client.get(URL, headers=operator_headers)

        assert response.status_code == 403
        assert response.json()["error"] == "PERMISSION_DENIED"
        assert response.json()["message"] == "Admin access required"

    def test_admin_allowed_when_admin_only(self, client, admin_headers, monkeypatch):
        monkeypatch.setattr(settings, "ANALYTICS_ADMIN_ONLY", True)

        response = client.get(URL, headers=admin_headers)

        assert response.status_code == 200


class TestAdminGuard:

    def test_operator_rejected(self, operator_user):
        with pytest.raises(PermissionDeniedError):
            asyncio.run(get_current_admin_user(operator_user))

    def test_admin_passes_through(self, admin_user):
        assert asyncio.run(get_current_admin_user(admin_user)) is admin_user


class TestAnalyticsReport:

    def test_default_window_shape(self, client, admin_headers):
        """Empty database: six zero-valued months and all seven sections."""
        response = client.get(URL, headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert SECTIONS <= set(data)
        assert data["months_back"] == 6
        assert len(data["production_monthly"]) == 6
        assert len(data["sales_monthly"]) == 6
        assert len(data["profitability_monthly"]) == 6
        assert data["cost_breakdown"] == []
        assert data["top_suppliers"] == []
        assert [s["state"] for s in data["lot_states"]] == [
            "IN_PRODUCTION", "AVAILABLE", "SOLD", "EXPIRED"
        ]

    def test_months_back_clamped_low(self, client, admin_headers):
        response = client.get(URL, params={"months_back": 1}, headers=admin_headers)

        assert response.status_code == 200
        assert len(response.json()["production_monthly"]) == 3

    def test_months_back_clamped_high(self, client, admin_headers):
        response = client.get(URL, params={"months_back": 20}, headers=admin_headers)

        assert response.status_code == 200
        assert len(response.json()["production_monthly"]) == 12

    def test_months_back_strict(self, client, admin_headers, monkeypatch):
        monkeypatch.setattr(settings, "ANALYTICS_STRICT_MONTHS_BACK", True)

        response = client.get(URL, params={"months_back": 20}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["details"]["parameter"] == "months_back"

    def test_months_back_not_a_number(self, client, admin_headers):
        response = client.get(URL, params={"months_back": "six"}, headers=admin_headers)
        assert response.status_code == 422

    def test_monthly_series_oldest_first(self, client, admin_headers):
        response = client.get(URL, params={"months_back": 12}, headers=admin_headers)

        starts = [m["start"] for m in response.json()["production_monthly"]]
        assert starts == sorted(starts)

    def test_current_month_data(self, client, db_session, admin_headers, operator_user):
        now = datetime.now()
        lot = create_test_lot(
            db_session,
            operator=operator_user,
            produced_at=now,
            quantity=Decimal("500"),
            cane_cost=Decimal("100000"),
            labor_cost=Decimal("50000"),
            state="SOLD",
        )
        create_test_sale(db_session, lot, quantity=Decimal("500"), unit_price=Decimal("400"), sold_at=now)
        supplier = create_test_supplier(db_session, name="Trapiche El Roble")
        create_test_purchase(db_session, supplier, total=Decimal("80000"), purchased_at=now)

        response = client.get(URL, headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        current = data["production_monthly"][-1]
        assert current["lots"] == 1
        assert parse_decimal(current["cost"]) == Decimal("150000")

        breakdown = data["cost_breakdown"]
        assert [c["category"] for c in breakdown] == ["cane", "labor"]
        assert breakdown[0]["label"] == "Caña"
        assert round(breakdown[0]["percentage"], 1) == 66.7
        assert round(sum(c["percentage"] for c in breakdown), 6) == 100.0

        profit = data["profitability_monthly"][-1]
        assert parse_decimal(profit["profit"]) == Decimal("50000")
        assert round(profit["margin"], 2) == 33.33

        assert data["top_suppliers"][0]["name"] == "Trapiche El Roble"
        assert parse_decimal(data["top_suppliers"][0]["total"]) == Decimal("80000")
        assert data["operator_performance"][0]["name"] == "Pedro Operario"

    def test_read_failure_returns_500(self, client, admin_headers):
        class BrokenStore:
            def __getattr__(self, name):
                async def read(*args):
                    raise ConnectionError("database unreachable")
                return read

        app.dependency_overrides[get_analytics_store] = BrokenStore

        response = client.get(URL, headers=admin_headers)

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "ANALYTICS_READ_ERROR"
        assert "production_monthly" in body["details"]["families"]
        assert "timestamp" in body


class TestBreakEven:

    def test_break_even(self, client, admin_headers):
        response = client.get(
            f"{URL}/break-even",
            params={"fixed_costs": "1000", "variable_cost_per_unit": "3", "selling_price_per_unit": "6"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["units"] == 334
        assert parse_decimal(data["revenue"]) == Decimal("2004")
        assert parse_decimal(data["contribution_margin"]) == Decimal("3")

    def test_no_break_even_point(self, client, admin_headers):
        response = client.get(
            f"{URL}/break-even",
            params={"fixed_costs": "1000", "variable_cost_per_unit": "8", "selling_price_per_unit": "6"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["units"] == 0

    def test_negative_values_rejected(self, client, admin_headers):
        response = client.get(
            f"{URL}/break-even",
            params={"fixed_costs": "-1", "variable_cost_per_unit": "3", "selling_price_per_unit": "6"},
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_requires_token(self, client):
        response = client.get(f"{URL}/break-even")
        assert response.status_code == 401
