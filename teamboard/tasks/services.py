"""Service layer for task-related operations.

Tasks live in the ``tasks`` array of their team document. Creation appends
with ``ArrayUnion``; updates and deletes rewrite the whole array, so two
concurrent edits to the same team keep only the last write.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from teamboard.auth.permissions import is_team_member
from teamboard.constants import NOTIFICATION_TASK_ASSIGNMENT, TASK_START_DATE
from teamboard.errors import NotFoundError, PermissionDeniedError
from teamboard.notifications.services import NotificationService
from teamboard.teams.services import TeamService
from teamboard.utils import utcnow

from .models import build_task, new_task_id, same_task_id

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from teamboard.core.types import Task

logger = logging.getLogger(__name__)

NOT_A_MEMBER = "You are not a member of this team."


class TaskService:
    """Service class for task-related operations."""

    @staticmethod
    def create_task(
        db: Client, user_id: str, team_id: str, task_data: dict[str, Any]
    ) -> Task:
        """Append a task to a team and notify its assignees."""
        if not is_team_member(db, team_id, user_id):
            raise PermissionDeniedError(NOT_A_MEMBER)

        team_ref, team_data = TeamService.get_team(db, team_id)
        existing_ids = {str(t.get("id")) for t in team_data.get("tasks") or []}
        task = build_task(task_data, new_task_id(existing_ids))

        team_ref.update({"tasks": firestore.ArrayUnion([task])})

        team_name = team_data.get("name")
        NotificationService.fan_out(
            db,
            [
                NotificationService.build(
                    assignee.get("uid"),
                    "New Task Assignment",
                    f'You\'ve been assigned to "{task["text"]}" in team "{team_name}"',
                    NOTIFICATION_TASK_ASSIGNMENT,
                    teamId=team_id,
                    teamName=team_name,
                    taskId=task["id"],
                    taskName=task["text"],
                )
                for assignee in task.get("assignees", [])
                if assignee.get("uid") and assignee.get("uid") != user_id
            ],
        )
        return task

    @staticmethod
    def update_task(
        db: Client,
        user_id: str,
        team_id: str,
        task_id: Any,
        task_data: dict[str, Any],
    ) -> Task:
        """Shallow-merge ``task_data`` into a task.

        The stored start date and ID always win over the incoming values.
        """
        if not is_team_member(db, team_id, user_id):
            raise PermissionDeniedError(NOT_A_MEMBER)

        team_ref, team_data = TeamService.get_team(db, team_id)
        tasks = list(team_data.get("tasks") or [])

        index = next(
            (i for i, t in enumerate(tasks) if same_task_id(t, task_id)), None
        )
        if index is None:
            raise NotFoundError("Task not found.")

        original = tasks[index]
        incoming = {
            k: v for k, v in task_data.items() if k not in (TASK_START_DATE, "id")
        }
        if TASK_START_DATE in task_data:
            logger.debug(f"Ignoring start date change on task {task_id}")

        updated_task = {
            **original,
            **incoming,
            "id": original.get("id"),
            TASK_START_DATE: original.get(TASK_START_DATE),
            "updatedBy": user_id,
            "updatedAt": utcnow(),
        }
        tasks[index] = updated_task
        team_ref.update({"tasks": tasks})
        return cast("Task", updated_task)

    @staticmethod
    def delete_task(db: Client, user_id: str, team_id: str, task_id: Any) -> None:
        """Remove a task from a team's task list."""
        if not is_team_member(db, team_id, user_id):
            raise PermissionDeniedError(NOT_A_MEMBER)

        team_ref, team_data = TeamService.get_team(db, team_id)
        tasks = team_data.get("tasks") or []
        remaining = [t for t in tasks if not same_task_id(t, task_id)]
        if len(remaining) == len(tasks):
            raise NotFoundError("Task not found.")

        team_ref.update({"tasks": remaining})
