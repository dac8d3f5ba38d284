"""Render errors in the callable error envelope."""

from flask import Blueprint, current_app, jsonify
from werkzeug.exceptions import HTTPException

from .errors import CallableError, InternalError

error_handlers_bp = Blueprint("error_handlers", __name__)


def _envelope(error):
    return jsonify({"error": error.to_dict()}), error.status_code


@error_handlers_bp.app_errorhandler(CallableError)
def handle_callable_error(error):
    """Handles typed errors raised by handlers and services."""
    if error.status_code >= 500:
        current_app.logger.error(f"{error.status}: {error.message}")
    else:
        current_app.logger.warning(f"{error.status}: {error.message}")
    return _envelope(error)


@error_handlers_bp.app_errorhandler(HTTPException)
def handle_http_exception(e):
    """Lets routing errors such as 404 and 405 through unchanged."""
    return e


@error_handlers_bp.app_errorhandler(Exception)
def handle_unexpected_error(e):
    """Handles unexpected server errors without exposing their details."""
    current_app.logger.exception(f"Internal Server Error: {e}")
    return _envelope(InternalError())
