"""Callable endpoints for the teams blueprint."""

from firebase_admin import firestore
from flask import current_app, g

from teamboard.auth.decorators import login_required
from teamboard.auth.permissions import is_team_admin, is_team_manager
from teamboard.errors import InvalidArgumentError
from teamboard.utils import callable_data, callable_result, require_fields

from . import bp
from .models import validate_member
from .services import TeamService


@bp.route("/createTeam", methods=["POST"])
@login_required(message="You must be logged in to create a team")
def create_team():
    """Create a team with the caller as its admin."""
    data = callable_data()
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise InvalidArgumentError("Team name is required")

    db = firestore.client()
    team_id = TeamService.create_team(db, g.uid, name, data.get("members"))
    return callable_result(
        {"success": True, "teamId": team_id, "message": "Team created successfully"}
    )


@bp.route("/disbandTeam", methods=["POST"])
@login_required(message="You must be logged in to disband a team")
def disband_team():
    """Delete a team. Admins only."""
    data = callable_data()
    require_fields(data, "teamId", message="Team ID is required")

    db = firestore.client()
    TeamService.disband_team(db, g.uid, data["teamId"])
    return callable_result({"success": True, "message": "Team disbanded successfully"})


@bp.route("/updateTeam", methods=["POST"])
@login_required(message="You must be logged in to update a team")
def update_team():
    """Rename a team. Managers and admins only."""
    data = callable_data()
    require_fields(data, "teamId", "name", message="Team ID and name are required")

    db = firestore.client()
    TeamService.rename_team(db, g.uid, data["teamId"], data["name"])
    return callable_result({"success": True, "message": "Team updated successfully"})


@bp.route("/addTeamMember", methods=["POST"])
@login_required(message="You must be logged in to add a team member")
def add_team_member():
    """Add a member to a team. Managers and admins only."""
    data = callable_data()
    require_fields(
        data, "teamId", "memberData", message="Team ID and member data are required"
    )
    member_data = validate_member(data["memberData"])

    db = firestore.client()
    updated_members = TeamService.add_member(db, g.uid, data["teamId"], member_data)
    return callable_result(
        {
            "success": True,
            "message": "Team member added successfully",
            "updatedMembers": updated_members,
        }
    )


@bp.route("/removeTeamMember", methods=["POST"])
@login_required(message="You must be logged in to remove a team member")
def remove_team_member():
    """Remove a member from a team. Admins only."""
    data = callable_data()
    require_fields(
        data, "teamId", "memberId", message="Team ID and member ID are required"
    )

    db = firestore.client()
    updated_members = TeamService.remove_member(
        db, g.uid, data["teamId"], data["memberId"]
    )
    return callable_result(
        {
            "success": True,
            "message": "Team member removed successfully",
            "updatedMembers": updated_members,
        }
    )


@bp.route("/updateTeamMemberRole", methods=["POST"])
@login_required(message="You must be logged in to update a team member role")
def update_team_member_role():
    """Change a member's role. Admins only."""
    data = callable_data()
    require_fields(
        data,
        "teamId",
        "memberId",
        "newRole",
        message="Team ID, member ID, and new role are required",
    )

    db = firestore.client()
    updated_members = TeamService.update_member_role(
        db, g.uid, data["teamId"], data["memberId"], data["newRole"]
    )
    return callable_result(
        {
            "success": True,
            "message": "Team member role updated successfully",
            "updatedMembers": updated_members,
        }
    )


@bp.route("/searchUsers", methods=["POST"])
@login_required(message="You must be logged in to search users")
def search_users():
    """Search users by email or display name prefix."""
    data = callable_data()
    search_text = data.get("searchText")
    if not isinstance(search_text, str):
        return callable_result({"results": []})

    db = firestore.client()
    results = TeamService.search_users(
        db, g.uid, search_text, current_app.config["SEARCH_MIN_LENGTH"]
    )
    return callable_result({"results": results})


@bp.route("/checkIsTeamAdmin", methods=["POST"])
@login_required(message="You must be logged in to check team permissions")
def check_is_team_admin():
    """Report whether the caller is an admin of the team."""
    data = callable_data()
    require_fields(data, "teamId", message="Team ID is required")

    db = firestore.client()
    return callable_result({"isAdmin": is_team_admin(db, data["teamId"], g.uid)})


@bp.route("/checkIsTeamManager", methods=["POST"])
@login_required(message="You must be logged in to check team permissions")
def check_is_team_manager():
    """Report whether the caller is a manager or admin of the team."""
    data = callable_data()
    require_fields(data, "teamId", message="Team ID is required")

    db = firestore.client()
    return callable_result({"isManager": is_team_manager(db, data["teamId"], g.uid)})
