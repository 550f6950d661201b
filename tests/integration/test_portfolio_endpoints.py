"""Integration tests for the portfolio analytics endpoints."""

from __future__ import annotations

from http import HTTPStatus

import pytest
from flask.testing import FlaskClient

HOLDINGS = [
    {
        "name": "Total Stock Market",
        "ticker": "VTI",
        "value": 6_000,
        "cost_basis": 5_000,
        "asset_class": "stocks",
        "account_type": "tax_deferred",
        "expense_ratio": 0.03,
        "dividend_yield": 1.4,
    },
    {
        "name": "Total Bond Market",
        "ticker": "BND",
        "value": 3_000,
        "cost_basis": 3_400,
        "asset_class": "bonds",
        "account_type": "taxable",
        "expense_ratio": 0.03,
        "dividend_yield": 3.6,
    },
    {
        "name": "Real Estate",
        "ticker": "VNQ",
        "value": 1_000,
        "cost_basis": 1_000,
        "asset_class": "real_estate",
        "account_type": "tax_free",
    },
]


def test_allocation_endpoint_with_risk_profile(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/portfolio/allocation",
        json={"holdings": HOLDINGS, "risk_profile": "moderate"},
    )

    assert response.status_code == HTTPStatus.OK
    allocation = response.get_json()["allocation"]
    assert [bucket["asset_class"] for bucket in allocation] == [
        "stocks",
        "bonds",
        "real_estate",
    ]
    assert allocation[0]["current_allocation_pct"] == pytest.approx(60)
    assert allocation[0]["target_allocation_pct"] == pytest.approx(30)
    assert allocation[0]["drift_pct"] == pytest.approx(30)


def test_allocation_endpoint_rejects_unknown_risk_profile(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/portfolio/allocation",
        json={"holdings": HOLDINGS, "risk_profile": "reckless"},
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert "reckless" in response.get_json()["message"]


def test_performance_endpoint(client: FlaskClient) -> None:
    response = client.post("/api/v1/portfolio/performance", json={"holdings": HOLDINGS})

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["total_value"] == pytest.approx(10_000)
    assert payload["total_gain"] == pytest.approx(600)
    assert payload["total_gain_pct"] == pytest.approx(6.38, abs=0.01)


def test_tax_efficiency_endpoint(client: FlaskClient) -> None:
    response = client.post("/api/v1/portfolio/tax-efficiency", json={"holdings": HOLDINGS})

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["efficiency_score"] == pytest.approx(73)
    assert payload["tax_advantaged_pct"] == pytest.approx(70)
    assert len(payload["recommendations"]) == 2


def test_correlation_endpoint_is_reproducible(client: FlaskClient) -> None:
    first = client.post("/api/v1/portfolio/correlation", json={"holdings": HOLDINGS})
    second = client.post("/api/v1/portfolio/correlation", json={"holdings": HOLDINGS})

    assert first.status_code == HTTPStatus.OK
    assert first.get_json() == second.get_json()
    payload = first.get_json()
    assert payload["assets"] == ["VTI", "BND", "VNQ"]
    assert payload["method"] == "asset_class_heuristic"
    assert [row[index] for index, row in enumerate(payload["matrix"])] == [1.0, 1.0, 1.0]


def test_rebalancing_endpoint_uses_configured_threshold(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/portfolio/rebalancing",
        json={"holdings": HOLDINGS, "targets": {"stocks": 50, "bonds": 40, "real_estate": 10}},
    )

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["threshold"] == 5.0
    actions = {entry["asset_class"]: entry for entry in payload["actions"]}
    assert actions["stocks"]["action"] == "sell"
    assert actions["bonds"]["action"] == "buy"
    assert actions["bonds"]["amount"] == pytest.approx(1_000)
    assert actions["real_estate"]["action"] == "hold"


def test_rebalancing_requires_targets(client: FlaskClient) -> None:
    response = client.post("/api/v1/portfolio/rebalancing", json={"holdings": HOLDINGS})

    assert response.status_code == HTTPStatus.BAD_REQUEST


def test_harvesting_endpoint(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/portfolio/tax-loss-harvesting", json={"holdings": HOLDINGS}
    )

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["tax_rate"] == pytest.approx(0.15)
    assert len(payload["opportunities"]) == 1
    opportunity = payload["opportunities"][0]
    assert opportunity["holding"] == "BND"
    assert opportunity["potential_tax_savings"] == pytest.approx(60)
    assert opportunity["alternatives"] == ["AGG", "SCHZ", "IUSB"]


def test_dividend_projection_endpoint(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/portfolio/dividends",
        json={"holdings": HOLDINGS, "years": 2, "growth_rate": 0.0},
    )

    assert response.status_code == HTTPStatus.OK
    projections = response.get_json()["projections"]
    assert len(projections) == 2
    assert projections[0]["dividend_amount"] == pytest.approx(84 + 108)
    assert projections[1]["cumulative_dividends"] == pytest.approx(2 * 192)


def test_portfolio_rejects_negative_holding_value(client: FlaskClient) -> None:
    holdings = [dict(HOLDINGS[0], value=-1)]

    response = client.post("/api/v1/portfolio/performance", json={"holdings": holdings})

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json()["error"] == "validation_error"


def test_fee_comparison_endpoint_uses_configured_projection(client: FlaskClient) -> None:
    response = client.post("/api/v1/portfolio/fees", json={"holdings": HOLDINGS})

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["growth_rate"] == pytest.approx(0.07)
    assert payload["years"] == 10
    assert [entry["holding"] for entry in payload["comparisons"]] == ["VTI", "BND"]
    vti = payload["comparisons"][0]
    assert vti["alternative"] == "Fidelity ZERO Total Market Index Fund (FZROX)"
    assert vti["annual_savings"] == pytest.approx(1.8)
    assert vti["projection_years"] == 10


def test_fee_comparison_rejects_negative_years(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/portfolio/fees", json={"holdings": HOLDINGS, "years": -1}
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert "years" in response.get_json()["message"]


def test_dividend_projection_rejects_collapsing_growth(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/portfolio/dividends",
        json={"holdings": HOLDINGS, "growth_rate": -1},
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json()["error"] == "validation_error"
