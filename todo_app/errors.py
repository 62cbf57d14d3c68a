"""
JSON error handlers for the todo application.

Every failing request is answered with the ``ErrorResponse`` shape
``{"status": int, "message": str, "details": str}``:

- ``InvalidArgumentError`` from the core becomes a ``400``.
- Werkzeug HTTP errors (unknown route, wrong method, ...) keep their code.
- Anything else is logged with its traceback and becomes a ``500``.
"""

from __future__ import annotations

import logging

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

from .exceptions import InvalidArgumentError
from .schemas import ErrorResponse

logger = logging.getLogger(__name__)


def error_response(status: int, message: str) -> tuple[Response, int]:
    """Build a JSON ``ErrorResponse`` for the current request."""
    body = ErrorResponse(status=status, message=message, details=f"uri={request.path}")
    return jsonify(body.to_dict()), status


def register_error_handlers(app: Flask) -> None:
    """Attach the application-wide error handlers to ``app``."""

    @app.errorhandler(InvalidArgumentError)
    def invalid_argument(error: InvalidArgumentError) -> tuple[Response, int]:
        """Handle rejected input from the core."""
        logger.warning("Invalid argument on %s %s: %s", request.method, request.path, error)
        return error_response(400, error.message)

    @app.errorhandler(HTTPException)
    def http_error(error: HTTPException) -> tuple[Response, int]:
        """Handle 4xx/5xx errors raised by Flask and Werkzeug."""
        return error_response(error.code or 500, error.description or error.name)

    @app.errorhandler(Exception)
    def internal_error(error: Exception) -> tuple[Response, int]:
        """Handle 500 Internal Server errors."""
        logger.exception("Internal server error: %s", error)
        return error_response(500, "Internal server error")
