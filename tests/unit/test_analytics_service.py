"""Unit tests for the analytics service orchestration layer."""

from __future__ import annotations

import logging

import pytest

from fintrack.backend.services import analytics_service


def test_calculate_tax_falls_back_to_configured_brackets(
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.INFO, logger=analytics_service.__name__):
        result = analytics_service.calculate_tax({"taxable_income": 50_000, "year": 2024})

    assert result["meta"] == {
        "year": 2024,
        "brackets_source": "configuration",
        "filing_status": "single",
    }
    assert result["total_tax"] == pytest.approx(1_160 + 4_266 + 627)
    assert "No brackets supplied" in caplog.text


def test_calculate_tax_prefers_request_brackets(three_brackets) -> None:
    result = analytics_service.calculate_tax(
        {"taxable_income": 10_000, "brackets": three_brackets}
    )

    assert result["meta"]["brackets_source"] == "request"
    assert result["meta"]["year"] == 2025
    assert result["total_tax"] == pytest.approx(1_000)


def test_validation_errors_are_reported_as_value_errors() -> None:
    with pytest.raises(ValueError, match="current_income: value cannot be negative"):
        analytics_service.calculate_tax_impact(
            {"current_income": -1, "predicted_income": 10}
        )


def test_non_mapping_payload_is_rejected() -> None:
    with pytest.raises(ValueError, match="mapping"):
        analytics_service.calculate_tax([1, 2, 3])  # type: ignore[arg-type]


def test_unknown_year_raises_file_not_found() -> None:
    with pytest.raises(FileNotFoundError):
        analytics_service.calculate_tax({"taxable_income": 1, "year": 1999})


def test_unknown_risk_profile_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown risk profile 'yolo'"):
        analytics_service.plan_rebalancing({"holdings": [], "risk_profile": "yolo"})


def test_rebalancing_uses_configured_defaults() -> None:
    result = analytics_service.plan_rebalancing(
        {"holdings": [], "risk_profile": "aggressive", "year": 2024}
    )

    assert result["threshold"] == 5.0
    assert {action["asset_class"] for action in result["actions"]} == {
        "stocks",
        "international_stocks",
        "bonds",
        "real_estate",
        "alternatives",
        "crypto",
    }


def test_profiling_logs_timings(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("FINTRACK_PROFILE_CALCULATIONS", "true")

    with caplog.at_level(logging.DEBUG, logger=analytics_service.__name__):
        analytics_service.project_dividend_income({"holdings": [], "years": 1})

    assert "project_dividend_income timings (ms)" in caplog.text
    assert "project_dividends" in caplog.text


def test_profiling_disabled_by_default(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.delenv("FINTRACK_PROFILE_CALCULATIONS", raising=False)

    with caplog.at_level(logging.DEBUG, logger=analytics_service.__name__):
        analytics_service.analyse_performance({"holdings": []})

    assert "timings" not in caplog.text
