"""Service for user profile management."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore
from google.api_core import exceptions

from teamboard.constants import PROFILE_FIELDS, TEAMS_COLLECTION, USERS_COLLECTION
from teamboard.errors import NotFoundError, PermissionDeniedError

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client


def get_user_by_id(db: Client, user_id: str) -> dict[str, Any] | None:
    """Fetch a user by their ID."""
    user_doc = cast(
        "DocumentSnapshot", db.collection(USERS_COLLECTION).document(user_id).get()
    )
    if not user_doc.exists:
        return None
    data = user_doc.to_dict() or {}
    data["id"] = user_id
    return data


def get_user_teams(db: Client, user_id: str) -> list[dict[str, Any]]:
    """Fetch every team that lists the user as a member."""
    teams_query = (
        db.collection(TEAMS_COLLECTION)
        .where(filter=firestore.FieldFilter("members", "array_contains", user_id))
        .stream()
    )
    teams = []
    for doc in teams_query:
        data = doc.to_dict() or {}
        data["id"] = doc.id
        teams.append(data)
    return teams


def get_assigned_tasks(
    teams: list[dict[str, Any]], user_id: str
) -> list[dict[str, Any]]:
    """Collect tasks assigned to the user, tagged with their team."""
    tasks = []
    for team in teams:
        for task in team.get("tasks") or []:
            assignees = task.get("assignees") or []
            if any(assignee.get("uid") == user_id for assignee in assignees):
                tasks.append({**task, "teamId": team["id"], "teamName": team.get("name")})
    return tasks


def get_user_profile(db: Client, user_id: str) -> dict[str, Any]:
    """Return the user record with their teams and assigned tasks."""
    user = get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")

    teams = get_user_teams(db, user_id)
    return {"user": user, "teams": teams, "tasks": get_assigned_tasks(teams, user_id)}


def _check_self(caller_id: str, user_id: str, message: str) -> None:
    if caller_id != user_id:
        raise PermissionDeniedError(message)


def _update_user(db: Client, user_id: str, update_data: dict[str, Any]) -> None:
    try:
        db.collection(USERS_COLLECTION).document(user_id).update(update_data)
    except exceptions.NotFound as e:
        raise NotFoundError("User not found") from e


def update_user_profile(
    db: Client, caller_id: str, user_id: str, profile_data: dict[str, Any]
) -> None:
    """Merge whitelisted profile fields into the user's document.

    Fields missing from ``profile_data`` are left untouched.
    """
    _check_self(caller_id, user_id, "You can only update your own profile")

    update_data: dict[str, Any] = {
        field: profile_data[field] for field in PROFILE_FIELDS if field in profile_data
    }
    update_data["updatedAt"] = firestore.SERVER_TIMESTAMP
    _update_user(db, user_id, update_data)


def update_user_avatar(
    db: Client, caller_id: str, user_id: str, photo_url: str
) -> None:
    """Overwrite the user's photo URL."""
    _check_self(caller_id, user_id, "You can only update your own avatar")
    _update_user(
        db, user_id, {"photoURL": photo_url, "updatedAt": firestore.SERVER_TIMESTAMP}
    )
