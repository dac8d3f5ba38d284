"""Decorators for the callable endpoints."""

from functools import wraps

from firebase_admin import auth
from flask import current_app, g, request

from teamboard.errors import UnauthenticatedError


def _bearer_token():
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def login_required(f=None, message="You must be logged in."):
    """Reject the request unless it carries a valid Firebase ID token.

    On success the caller's uid is stored in ``g.uid`` and the decoded token
    in ``g.token``.

    Usage:
    @login_required
    def protected_view():
        ...

    @login_required(message="You must be logged in to create a team")
    def create_team():
        ...
    """

    def decorator(func):
        @wraps(func)
        def decorated_function(*args, **kwargs):
            id_token = _bearer_token()
            if id_token is None:
                raise UnauthenticatedError(message)
            try:
                decoded_token = auth.verify_id_token(id_token)
            except (
                ValueError,
                auth.InvalidIdTokenError,
                auth.CertificateFetchError,
                auth.UserDisabledError,
            ) as e:
                current_app.logger.warning(f"Rejected ID token: {e}")
                raise UnauthenticatedError(message) from e
            g.uid = decoded_token["uid"]
            g.token = decoded_token
            return func(*args, **kwargs)

        return decorated_function

    if f:
        return decorator(f)
    return decorator
