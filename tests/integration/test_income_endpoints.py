"""Integration tests for the cashflow and income diversification endpoints."""

from __future__ import annotations

from http import HTTPStatus

import pytest
from flask.testing import FlaskClient


def test_cashflow_forecast_endpoint(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/cashflow/forecast",
        json={
            "as_of": "2024-03-15",
            "horizon_months": 3,
            "income": [
                {"source_name": "Salary", "amount": 5_000, "start_date": "2023-01-01"},
                {
                    "source_name": "Bonus",
                    "amount": 2_000,
                    "recurrence": "one-time",
                    "start_date": "2024-04-05",
                },
            ],
            "expenses": [
                {"name": "Rent", "amount": 1_500, "category": "Housing"},
                {"name": "Insurance", "amount": 1_200, "recurrence": "annually"},
            ],
        },
    )

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["projected_income"] == pytest.approx(5_000)
    assert payload["projected_expenses"] == pytest.approx(1_600)
    assert payload["net_cashflow"] == pytest.approx(3_400)
    assert payload["savings_rate"] == pytest.approx(68)
    assert [point["month"] for point in payload["monthly_trend"]] == [
        "2024-03",
        "2024-04",
        "2024-05",
    ]
    assert payload["monthly_trend"][1]["income"] == pytest.approx(7_000)
    assert payload["month_over_month"]["income_delta"] == pytest.approx(
        (5_000 - 7_000) / 7_000 * 100, abs=0.01
    )
    assert payload["meta"] == {"as_of": "2024-03-15", "horizon_months": 3}


def test_cashflow_uses_configured_horizon(client: FlaskClient) -> None:
    response = client.post("/api/v1/cashflow/forecast", json={"as_of": "2024-01-31"})

    assert response.status_code == HTTPStatus.OK
    assert len(response.get_json()["monthly_trend"]) == 6


def test_cashflow_rejects_negative_horizon(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/cashflow/forecast",
        json={"as_of": "2024-01-31", "horizon_months": -2},
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert "horizon" in response.get_json()["message"]


def test_cashflow_rejects_infinite_amounts(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/cashflow/forecast",
        data=(
            '{"as_of": "2024-03-15", "horizon_months": 2,'
            ' "income": [{"source_name": "Salary", "amount": Infinity}],'
            ' "expenses": [{"name": "Rent", "amount": Infinity}]}'
        ),
        content_type="application/json",
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json()["error"] == "validation_error"


def test_cashflow_rejects_unknown_recurrence(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/cashflow/forecast",
        json={"income": [{"source_name": "Tips", "amount": 10, "recurrence": "daily"}]},
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert "income.0.recurrence" in response.get_json()["message"]


def test_diversification_endpoint(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/income/diversification",
        json={
            "income": [
                {"source_name": "Salary", "amount": 6_000},
                {"source_name": "Freelance", "amount": 2_000, "category": "side_hustle"},
                {
                    "source_name": "Dividends",
                    "amount": 3_000,
                    "recurrence": "quarterly",
                    "category": "investment",
                },
            ]
        },
    )

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["source_count"] == 3
    assert payload["primary_dependency_pct"] == pytest.approx(66.67)
    assert sum(entry["percentage"] for entry in payload["breakdown"]) == pytest.approx(
        100, abs=0.01
    )
    assert payload["recommendations"] == []


def test_diversification_endpoint_with_no_income(client: FlaskClient) -> None:
    response = client.post("/api/v1/income/diversification", json={})

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["overall_score"] == 0
    assert payload["source_count"] == 0
    assert payload["breakdown"] == []
