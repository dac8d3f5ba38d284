"""Callable endpoints for the tasks blueprint."""

from firebase_admin import firestore
from flask import g

from teamboard.auth.decorators import login_required
from teamboard.errors import InvalidArgumentError
from teamboard.utils import callable_data, callable_result

from . import bp
from .services import TaskService


def _task_payload(data, *required, message):
    """Check required keys, allowing an empty ``taskData`` object."""
    for key in required:
        value = data.get(key)
        if key == "taskData":
            if not isinstance(value, dict):
                raise InvalidArgumentError(message)
        elif value is None or value == "":
            raise InvalidArgumentError(message)
    return data


@bp.route("/createTask", methods=["POST"])
@login_required(message="You must be logged in to create tasks.")
def create_task():
    """Create a task in a team."""
    data = _task_payload(
        callable_data(),
        "teamId",
        "taskData",
        message="Team ID and task data are required.",
    )

    db = firestore.client()
    task = TaskService.create_task(db, g.uid, data["teamId"], data["taskData"])
    return callable_result({"success": True, "taskId": task["id"], "task": task})


@bp.route("/updateTask", methods=["POST"])
@login_required(message="You must be logged in to update tasks.")
def update_task():
    """Update a task in a team. The start date can't be changed."""
    data = _task_payload(
        callable_data(),
        "teamId",
        "taskId",
        "taskData",
        message="Team ID, task ID, and task data are required.",
    )

    db = firestore.client()
    task = TaskService.update_task(
        db, g.uid, data["teamId"], data["taskId"], data["taskData"]
    )
    return callable_result({"success": True, "taskId": task["id"], "task": task})


@bp.route("/deleteTask", methods=["POST"])
@login_required(message="You must be logged in to delete tasks.")
def delete_task():
    """Delete a task from a team."""
    data = _task_payload(
        callable_data(),
        "teamId",
        "taskId",
        message="Team ID and task ID are required.",
    )

    db = firestore.client()
    TaskService.delete_task(db, g.uid, data["teamId"], data["taskId"])
    return callable_result({"success": True, "taskId": data["taskId"]})
