"""Blueprint registrations for application routes."""

from flask import Flask

from .config import blueprint as config_blueprint
from .income import blueprint as income_blueprint
from .portfolio import blueprint as portfolio_blueprint
from .tax import blueprint as tax_blueprint


def register_routes(app: Flask) -> None:
    """Register all Flask blueprints with the provided application."""

    app.register_blueprint(tax_blueprint)
    app.register_blueprint(income_blueprint)
    app.register_blueprint(portfolio_blueprint)
    app.register_blueprint(config_blueprint)
