"""Routes for the main blueprint."""

from __future__ import annotations

from typing import TYPE_CHECKING

from firebase_functions import logger
from firebase_functions.logger import LogSeverity
from flask import current_app, jsonify, make_response, request

from teamboard.utils import with_cors

from . import bp

if TYPE_CHECKING:
    from flask import Response

SEVERITY_LEVELS = {
    "DEBUG": LogSeverity.DEBUG,
    "INFO": LogSeverity.INFO,
    "WARN": LogSeverity.WARNING,
    "WARNING": LogSeverity.WARNING,
    "ERROR": LogSeverity.ERROR,
    "CRITICAL": LogSeverity.CRITICAL,
}


@bp.route("/health")
def health_check():
    """Scaling probe. No auth, no body."""
    return (
        current_app.config["PROBE_MESSAGE"],
        200,
        {"Content-Type": "text/plain; charset=utf-8"},
    )


def _severity(severity: object) -> LogSeverity:
    """Map a client severity name onto a Cloud Logging severity, defaulting to INFO."""
    level = SEVERITY_LEVELS.get(str(severity).upper())
    if level is None:
        logger.warn(
            f"logClientEvent: Received unknown severity level '{severity}'. "
            "Defaulting to INFO."
        )
        return LogSeverity.INFO
    return level


@bp.route(
    "/logClientEvent",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
)
def log_client_event() -> Response:
    """Receive a structured log line from the web client.

    Expects a POST with a JSON body like
    ``{"severity": "INFO", "message": "...", "payload": {...}}``. The event
    is written as one JSON line through the Cloud Functions logger, so it
    reaches Cloud Logging whatever the app's logging setup is.
    """
    if request.method == "OPTIONS":
        return with_cors(make_response("", 204))

    if request.method != "POST":
        return with_cors(make_response("Method Not Allowed", 405))

    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        logger.warn("logClientEvent: Received invalid request body type.")
        return with_cors(
            make_response("Invalid request body: Expected JSON object.", 400)
        )

    client_message = body.get("message") or "Missing client log message"
    logger.write(
        {
            "severity": _severity(body.get("severity") or "INFO"),
            "message": f"Client Event: {client_message}",
            "clientMessage": client_message,
            "clientPayload": body.get("payload") or {},
            "clientIp": request.remote_addr,
        }
    )
    return with_cors(make_response(jsonify({"success": True}), 200))
