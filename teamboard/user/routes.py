"""Callable endpoints for the user blueprint."""

from firebase_admin import firestore
from flask import current_app, g

from teamboard.auth.decorators import login_required
from teamboard.errors import InvalidArgumentError
from teamboard.utils import callable_data, callable_result, require_fields

from . import bp
from . import services


@bp.route("/getUserProfile", methods=["POST"])
@login_required(message="You must be logged in to fetch user profile")
def get_user_profile():
    """Return a user's profile with their teams and assigned tasks."""
    data = callable_data()
    require_fields(
        data,
        "userId",
        message='The function must be called with a "userId" argument.',
    )
    current_app.logger.debug(f"Profile of {data['userId']} requested by {g.uid}")

    db = firestore.client()
    return callable_result(services.get_user_profile(db, data["userId"]))


@bp.route("/updateUserProfile", methods=["POST"])
@login_required(message="You must be logged in to update profile")
def update_user_profile():
    """Update the caller's own profile fields."""
    data = callable_data()
    require_fields(
        data,
        "userId",
        "profileData",
        message="Missing userId or profileData in request.",
    )
    if not isinstance(data["profileData"], dict):
        raise InvalidArgumentError("profileData must be an object.")

    db = firestore.client()
    services.update_user_profile(db, g.uid, data["userId"], data["profileData"])
    return callable_result({"success": True, "message": "Profile updated successfully"})


@bp.route("/updateUserAvatar", methods=["POST"])
@login_required(message="You must be logged in to update avatar")
def update_user_avatar():
    """Replace the caller's avatar URL."""
    data = callable_data()
    require_fields(
        data, "userId", "photoURL", message="Missing userId or photoURL in request."
    )

    db = firestore.client()
    services.update_user_avatar(db, g.uid, data["userId"], data["photoURL"])
    return callable_result({"success": True, "message": "Avatar updated successfully"})
