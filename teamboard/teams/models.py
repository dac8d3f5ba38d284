"""Data helpers for team member lists."""

from __future__ import annotations

from typing import Any, cast

from teamboard.constants import ROLE_ADMIN, TEAM_ROLES
from teamboard.core.types import MemberData
from teamboard.errors import InvalidArgumentError, PermissionDeniedError


def build_member(uid: str, user_data: dict[str, Any], role: str) -> MemberData:
    """Build a ``membersData`` entry from a user document."""
    return {
        "uid": uid,
        "email": user_data.get("email"),
        "displayName": user_data.get("displayName"),
        "role": role,
    }


def member_ids(members_data: list[Any]) -> list[str]:
    """Project ``membersData`` onto the ``members`` uid list used for queries."""
    return [member["uid"] for member in members_data]


def validate_member(member: Any) -> MemberData:
    """Check that a member entry is an object with a uid."""
    if not isinstance(member, dict) or not member.get("uid"):
        raise InvalidArgumentError("Member data must include a uid")
    return cast(MemberData, member)


def validate_members(members: Any) -> list[MemberData]:
    """Check a caller-supplied member list. ``None`` means no members."""
    if members is None:
        return []
    if not isinstance(members, list):
        raise InvalidArgumentError("Members must be a list")
    return [validate_member(member) for member in members]


def check_assignable_role(role: Any) -> str:
    """Reject roles that can't be handed out. Admin is reserved for the creator."""
    if role == ROLE_ADMIN:
        raise PermissionDeniedError("Cannot assign admin role to members")
    if role not in TEAM_ROLES:
        raise InvalidArgumentError(f"Unknown role: {role}")
    return role
