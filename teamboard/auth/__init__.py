"""Identity and team-role checks shared by the callable blueprints."""

from .decorators import login_required
from .permissions import is_team_admin, is_team_manager, is_team_member

__all__ = ["login_required", "is_team_admin", "is_team_manager", "is_team_member"]
