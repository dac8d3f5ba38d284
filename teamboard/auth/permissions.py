"""Team-role checks.

Every check reads a single team document and fails closed: a missing team or
a failed read yields ``False`` instead of an exception.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, cast

from teamboard.constants import MANAGER_ROLES, ROLE_ADMIN, TEAMS_COLLECTION

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)


def _check_team(
    db: Client, team_id: str, predicate: Callable[[dict[str, Any]], bool]
) -> bool:
    try:
        team_doc = cast(
            "DocumentSnapshot", db.collection(TEAMS_COLLECTION).document(team_id).get()
        )
        if not team_doc.exists:
            return False
        return bool(predicate(team_doc.to_dict() or {}))
    except Exception as e:
        logger.error(f"Error checking permissions on team {team_id}: {e}")
        return False


def is_team_member(db: Client, team_id: str, user_id: str) -> bool:
    """Return True if the user is listed in the team's ``members``."""
    return _check_team(db, team_id, lambda team: user_id in team.get("members", []))


def is_team_admin(db: Client, team_id: str, user_id: str) -> bool:
    """Return True if the user holds the admin role in the team."""
    return _check_team(
        db,
        team_id,
        lambda team: any(
            member.get("uid") == user_id and member.get("role") == ROLE_ADMIN
            for member in team.get("membersData", [])
        ),
    )


def is_team_manager(db: Client, team_id: str, user_id: str) -> bool:
    """Return True if the user is an admin or a manager of the team."""
    return _check_team(
        db,
        team_id,
        lambda team: any(
            member.get("uid") == user_id and member.get("role") in MANAGER_ROLES
            for member in team.get("membersData", [])
        ),
    )
