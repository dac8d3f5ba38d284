"""The user blueprint."""

from flask import Blueprint

from teamboard.utils import with_cors

bp = Blueprint("user", __name__, url_prefix="/api")
bp.after_request(with_cors)

from . import routes  # noqa: E402

__all__ = ["routes"]
