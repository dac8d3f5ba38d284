"""Service layer for team-related operations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from teamboard.auth.permissions import is_team_admin, is_team_manager
from teamboard.constants import (
    DEFAULT_DISPLAY_NAME,
    DEFAULT_PHOTO_URL,
    NOTIFICATION_ROLE_UPDATE,
    NOTIFICATION_TEAM_CREATED,
    NOTIFICATION_TEAM_DISBANDED,
    NOTIFICATION_TEAM_INVITATION,
    NOTIFICATION_TEAM_REMOVAL,
    PREFIX_RANGE_END,
    ROLE_ADMIN,
    ROLE_MEMBER,
    SEARCH_MIN_LENGTH,
    TEAMS_COLLECTION,
    USERS_COLLECTION,
)
from teamboard.errors import (
    AlreadyExistsError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
)
from teamboard.notifications.services import NotificationService

from .models import (
    build_member,
    check_assignable_role,
    member_ids,
    validate_members,
)

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference

    from teamboard.core.types import MemberData, Notification

logger = logging.getLogger(__name__)


def _inviter_name(user_data: dict[str, Any]) -> str:
    return user_data.get("displayName") or user_data.get("email") or "a teammate"


def _invitation(
    member_uid: str,
    team_id: str,
    team_name: str,
    inviter_id: str,
    inviter_data: dict[str, Any],
) -> Notification:
    return NotificationService.build(
        member_uid,
        "Team Invitation",
        f'You have been invited to join "{team_name}" by '
        f"{_inviter_name(inviter_data)}",
        NOTIFICATION_TEAM_INVITATION,
        teamId=team_id,
        teamName=team_name,
        invitedBy={
            "uid": inviter_id,
            "displayName": inviter_data.get("displayName"),
            "email": inviter_data.get("email"),
        },
    )


class TeamService:
    """Service class for team-related operations."""

    @staticmethod
    def get_user_data(db: Client, user_id: str, message: str) -> dict[str, Any]:
        """Fetch a user document or raise NotFoundError with ``message``."""
        user_doc = cast(
            "DocumentSnapshot", db.collection(USERS_COLLECTION).document(user_id).get()
        )
        if not user_doc.exists:
            raise NotFoundError(message)
        return user_doc.to_dict() or {}

    @staticmethod
    def get_team(db: Client, team_id: str) -> tuple[DocumentReference, dict[str, Any]]:
        """Fetch a team document and its reference, or raise NotFoundError."""
        team_ref = db.collection(TEAMS_COLLECTION).document(team_id)
        team_doc = cast("DocumentSnapshot", team_ref.get())
        if not team_doc.exists:
            raise NotFoundError("Team not found")
        return team_ref, team_doc.to_dict() or {}

    @staticmethod
    def create_team(
        db: Client, user_id: str, name: str, members: list[Any] | None = None
    ) -> str:
        """Create a team owned by ``user_id`` and notify everyone on it.

        The creator is always the sole admin. Roles supplied for the other
        members are stored as given.
        """
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgumentError("Team name is required")
        name = name.strip()
        others = [m for m in validate_members(members) if m["uid"] != user_id]

        user_data = TeamService.get_user_data(db, user_id, "User not found")
        members_data = [build_member(user_id, user_data, ROLE_ADMIN)] + others

        _, team_ref = db.collection(TEAMS_COLLECTION).add(
            {
                "name": name,
                "createdBy": user_id,
                "createdAt": firestore.SERVER_TIMESTAMP,
                "updatedAt": firestore.SERVER_TIMESTAMP,
                "members": member_ids(members_data),
                "membersData": members_data,
                "tasks": [],
            }
        )

        notifications = [
            NotificationService.build(
                user_id,
                "Team Created Successfully",
                f'You have created team "{name}". Start team work now!',
                NOTIFICATION_TEAM_CREATED,
                teamId=team_ref.id,
                teamName=name,
            )
        ]
        notifications.extend(
            _invitation(member["uid"], team_ref.id, name, user_id, user_data)
            for member in others
        )
        NotificationService.fan_out(db, notifications)

        logger.info(f"User {user_id} created team {team_ref.id}")
        return team_ref.id

    @staticmethod
    def disband_team(db: Client, user_id: str, team_id: str) -> None:
        """Delete a team, then tell every former member."""
        if not is_team_admin(db, team_id, user_id):
            raise PermissionDeniedError("Only team admins can disband a team")

        team_ref, team_data = TeamService.get_team(db, team_id)
        team_ref.delete()

        team_name = team_data.get("name")
        NotificationService.fan_out(
            db,
            [
                NotificationService.build(
                    member_id,
                    "Team Disbanded",
                    f'The team "{team_name}" has been disbanded.',
                    NOTIFICATION_TEAM_DISBANDED,
                )
                for member_id in team_data.get("members", [])
            ],
        )
        logger.info(f"User {user_id} disbanded team {team_id}")

    @staticmethod
    def rename_team(db: Client, user_id: str, team_id: str, name: str) -> None:
        """Rename a team. Managers and admins only."""
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgumentError("Team name is required")
        if not is_team_manager(db, team_id, user_id):
            raise PermissionDeniedError("Only team managers or admins can update a team")

        team_ref, _ = TeamService.get_team(db, team_id)
        team_ref.update({"name": name.strip(), "updatedAt": firestore.SERVER_TIMESTAMP})

    @staticmethod
    def add_member(
        db: Client, user_id: str, team_id: str, member_data: dict[str, Any]
    ) -> list[MemberData]:
        """Append a member to a team and send them an invitation."""
        if not is_team_manager(db, team_id, user_id):
            raise PermissionDeniedError("Only team managers or admins can add members")

        inviter_data = TeamService.get_user_data(db, user_id, "Current user not found")
        team_ref, team_data = TeamService.get_team(db, team_id)

        if member_data["uid"] in team_data.get("members", []):
            raise AlreadyExistsError("This user is already added to the team")

        new_member = dict(member_data)
        new_member["role"] = check_assignable_role(
            new_member.get("role") or ROLE_MEMBER
        )
        updated_members_data = list(team_data.get("membersData", [])) + [
            cast("MemberData", new_member)
        ]
        team_ref.update(
            {
                "members": member_ids(updated_members_data),
                "membersData": updated_members_data,
                "updatedAt": firestore.SERVER_TIMESTAMP,
            }
        )

        NotificationService.fan_out(
            db,
            [
                _invitation(
                    new_member["uid"],
                    team_id,
                    team_data.get("name", ""),
                    user_id,
                    inviter_data,
                )
            ],
        )
        return updated_members_data

    @staticmethod
    def remove_member(
        db: Client, user_id: str, team_id: str, member_id: str
    ) -> list[MemberData]:
        """Remove a non-admin member from a team."""
        if not is_team_admin(db, team_id, user_id):
            raise PermissionDeniedError("Only team admins can remove members")

        team_ref, team_data = TeamService.get_team(db, team_id)
        members_data = team_data.get("membersData", [])

        target = next((m for m in members_data if m.get("uid") == member_id), None)
        if target is None:
            raise NotFoundError("Member not found in team")
        if target.get("role") == ROLE_ADMIN:
            raise PermissionDeniedError("Cannot remove an admin from the team")

        updated_members_data = [m for m in members_data if m.get("uid") != member_id]
        team_ref.update(
            {
                "members": member_ids(updated_members_data),
                "membersData": updated_members_data,
                "updatedAt": firestore.SERVER_TIMESTAMP,
            }
        )

        NotificationService.fan_out(
            db,
            [
                NotificationService.build(
                    member_id,
                    "Removed from Team",
                    f'You have been removed from the team "{team_data.get("name")}".',
                    NOTIFICATION_TEAM_REMOVAL,
                )
            ],
        )
        return updated_members_data

    @staticmethod
    def update_member_role(
        db: Client, user_id: str, team_id: str, member_id: str, new_role: str
    ) -> list[MemberData]:
        """Change a member's role. Admin status can't be granted or revoked."""
        if not is_team_admin(db, team_id, user_id):
            raise PermissionDeniedError("Only team admins can update member roles")

        team_ref, team_data = TeamService.get_team(db, team_id)
        members_data = team_data.get("membersData", [])

        target = next((m for m in members_data if m.get("uid") == member_id), None)
        if target is None:
            raise NotFoundError("Member not found in team")
        if target.get("role") == ROLE_ADMIN:
            raise PermissionDeniedError("Cannot change an admin's role")
        check_assignable_role(new_role)

        updated_members_data = [
            {**m, "role": new_role} if m.get("uid") == member_id else m
            for m in members_data
        ]
        team_ref.update(
            {
                "membersData": updated_members_data,
                "updatedAt": firestore.SERVER_TIMESTAMP,
            }
        )

        team_name = team_data.get("name")
        NotificationService.fan_out(
            db,
            [
                NotificationService.build(
                    member_id,
                    "Role Updated",
                    f'Your role in the team "{team_name}" has been updated to '
                    f"{new_role}.",
                    NOTIFICATION_ROLE_UPDATE,
                    teamId=team_id,
                    teamName=team_name,
                )
            ],
        )
        return cast("list[MemberData]", updated_members_data)

    @staticmethod
    def search_users(
        db: Client,
        user_id: str,
        search_text: str | None,
        min_length: int = SEARCH_MIN_LENGTH,
    ) -> list[dict[str, Any]]:
        """Find users whose email or display name starts with ``search_text``."""
        if not search_text or len(search_text) < min_length:
            return []

        users_ref = db.collection(USERS_COLLECTION)
        queries = [
            users_ref.where(
                filter=firestore.FieldFilter(field, ">=", search_text)
            ).where(
                filter=firestore.FieldFilter(
                    field, "<=", search_text + PREFIX_RANGE_END
                )
            )
            for field in ("email", "displayName")
        ]

        # Combine, skip the caller, and remove duplicates
        users_map: dict[str, dict[str, Any]] = {}
        for query in queries:
            for doc in query.stream():
                if doc.id == user_id or doc.id in users_map:
                    continue
                data = doc.to_dict() or {}
                users_map[doc.id] = {
                    "uid": doc.id,
                    "email": data.get("email"),
                    "displayName": data.get("displayName") or DEFAULT_DISPLAY_NAME,
                    "photoURL": data.get("photoURL") or DEFAULT_PHOTO_URL,
                }
        return list(users_map.values())
