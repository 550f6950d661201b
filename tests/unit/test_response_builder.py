"""Unit tests for response formatting helpers."""

from __future__ import annotations

from flask import Flask

from fintrack.backend.services.response_builder import build_analytics_response


def test_build_analytics_response_returns_json(app: Flask) -> None:
    """Formatting helper should generate a JSON response tuple."""

    with app.app_context():
        response, status = build_analytics_response({"total_tax": 6053.0})

    assert status == 200
    assert response.get_json() == {"total_tax": 6053.0}
