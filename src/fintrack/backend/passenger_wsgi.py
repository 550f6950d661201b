"""WSGI entrypoint for serving the FinTrack analytics API behind Passenger."""

from fintrack.backend.app import create_app

# Passenger looks up a module-level variable named ``application``.
application = create_app()
