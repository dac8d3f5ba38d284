"""Data helpers for tasks embedded in team documents."""

from __future__ import annotations

import secrets
import time
from datetime import datetime, timezone
from typing import Any

from teamboard.constants import (
    DEFAULT_TASK_DURATION,
    DEFAULT_TASK_PRIORITY,
    DEFAULT_TASK_PROGRESS,
    DEFAULT_TASK_STATUS,
    DEFAULT_TASK_TYPE,
)
from teamboard.core.types import Task
from teamboard.errors import InvalidArgumentError
from teamboard.utils import parse_timestamp, utcnow


def _to_int(value: Any, default: int) -> int:
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
    return number or default


def to_timestamp(value: Any) -> datetime:
    """Coerce a start date into a timezone-aware datetime.

    Accepts ISO-8601 strings, datetimes and ``{seconds, nanoseconds}`` maps.
    Empty values mean "now".
    """
    if not value:
        return utcnow()
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str):
        return parse_timestamp(value)
    if isinstance(value, dict) and "seconds" in value:
        seconds = value["seconds"] + value.get("nanoseconds", 0) / 1e9
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    raise InvalidArgumentError(f"Invalid start date: {value!r}")


def new_task_id(existing_ids: set[str]) -> int:
    """Generate a numeric task ID from the clock plus random low digits.

    IDs are compared as strings, so ``existing_ids`` holds string forms.
    """
    millis = time.time_ns() // 1_000_000
    while True:
        task_id = millis * 1000 + secrets.randbelow(1000)
        if str(task_id) not in existing_ids:
            return task_id


def build_task(task_data: dict[str, Any], task_id: int) -> Task:
    """Build a stored task from caller-supplied data, filling in defaults."""
    text = task_data.get("text")
    if not isinstance(text, str) or not text.strip():
        raise InvalidArgumentError("Task text is required.")

    assignees = task_data.get("assignees") or []
    if not isinstance(assignees, list) or not all(
        isinstance(assignee, dict) for assignee in assignees
    ):
        raise InvalidArgumentError("Task assignees must be a list of users.")

    return {
        "id": task_id,
        "text": text,
        "description": task_data.get("description") or "",
        "start_date": to_timestamp(task_data.get("start_date")),
        "duration": _to_int(task_data.get("duration"), DEFAULT_TASK_DURATION),
        "type": task_data.get("type") or DEFAULT_TASK_TYPE,
        "priority": task_data.get("priority") or DEFAULT_TASK_PRIORITY,
        "progress": _to_int(task_data.get("progress"), DEFAULT_TASK_PROGRESS),
        "status": task_data.get("status") or DEFAULT_TASK_STATUS,
        "assignees": assignees,
    }


def same_task_id(task: dict[str, Any], task_id: Any) -> bool:
    """Compare task IDs as strings; clients send them as either type."""
    return str(task.get("id")) == str(task_id)
