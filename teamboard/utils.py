"""Utility functions for the application."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any

from flask import current_app, jsonify, request
from flask.json.provider import DefaultJSONProvider
from google.cloud.firestore_v1.transforms import Sentinel

from .constants import CORS_ALLOW_HEADERS, CORS_ALLOW_METHODS
from .errors import InvalidArgumentError

if TYPE_CHECKING:
    from flask import Response


class FirestoreJSONProvider(DefaultJSONProvider):
    """JSON provider that understands Firestore value types."""

    @staticmethod
    def default(o: Any) -> Any:
        """Serialize timestamps as ISO-8601 and unresolved sentinels as null."""
        if isinstance(o, datetime):
            return o.isoformat()
        if isinstance(o, date):
            return o.isoformat()
        if isinstance(o, Sentinel):
            return None
        return DefaultJSONProvider.default(o)


def utcnow() -> datetime:
    """Return the current time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 string into a timezone-aware datetime.

    Naive values are taken to be UTC.
    """
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError as e:
        raise InvalidArgumentError(f"Invalid date: {value}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def callable_data() -> dict[str, Any]:
    """Return the ``data`` member of a callable request body."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise InvalidArgumentError("Request body must be a JSON object.")
    data = body.get("data")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidArgumentError("Request data must be an object.")
    return data


def callable_result(result: Any) -> Response:
    """Wrap a handler result in the callable response envelope."""
    return jsonify({"result": result})


def require_fields(data: dict[str, Any], *fields: str, message: str) -> None:
    """Raise InvalidArgumentError unless every field is present and truthy."""
    for field in fields:
        if not data.get(field):
            raise InvalidArgumentError(message)


def with_cors(response: Response) -> Response:
    """Add the browser CORS headers configured for the app."""
    response.headers["Access-Control-Allow-Origin"] = current_app.config[
        "CORS_ALLOW_ORIGIN"
    ]
    response.headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
    response.headers["Access-Control-Allow-Headers"] = CORS_ALLOW_HEADERS
    if current_app.config["CORS_ALLOW_ORIGIN"] != "*":
        response.vary.add("Origin")
    return response
