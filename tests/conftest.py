"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Make ``src`` importable when tests run without an editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from fintrack.backend.app import create_app  # noqa: E402
from fintrack.backend.config.year_config import TaxBracket  # noqa: E402


@pytest.fixture()
def app() -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app()
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()


@pytest.fixture()
def three_brackets() -> list[TaxBracket]:
    """Truncated US table: 10% to 11,600, 12% to 47,150, then 22%."""

    return [
        TaxBracket(lower_bound=0, upper_bound=11_600, rate=0.10),
        TaxBracket(lower_bound=11_600, upper_bound=47_150, rate=0.12),
        TaxBracket(lower_bound=47_150, upper_bound=None, rate=0.22),
    ]
