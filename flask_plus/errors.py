"""Exception taxonomy and the JSON error handler.

Setup-time misuse raises ``ConfigurationError`` synchronously. Request-time
failures are rendered in one standardized JSON shape::

    {"error": {"status": 404, "title": "Not Found", "detail": "..."}}
"""
from typing import Any, Dict
from flask import Flask
from werkzeug.exceptions import HTTPException


class FlaskPlusError(Exception):
    """Base class for errors raised by flask_plus."""


class ConfigurationError(FlaskPlusError, ValueError):
    """Raised at setup time for registrations that can never be satisfied."""


def error_payload(status: int, title: str, detail: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {'status': status, 'title': title, 'detail': detail}
    body.update(extra)
    return {'error': body}


def register_error_handlers(app: Flask) -> None:
    """Install the unified error handler producing the standard JSON shape."""

    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            return error_payload(e.code or 500, e.name, e.description or ''), e.code
        # Unhandled exception
        app.logger.exception('Unhandled exception')
        return error_payload(500, 'Internal Server Error', 'Unexpected error'), 500


__all__ = ['FlaskPlusError', 'ConfigurationError', 'error_payload', 'register_error_handlers']
