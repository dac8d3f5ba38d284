"""Core data types for the teamboard application."""

from typing import Any, Dict, List, Optional, TypedDict  # noqa: UP035


class MemberData(TypedDict):
    """One entry of a team's ``membersData`` list."""

    uid: str
    email: Optional[str]
    displayName: Optional[str]
    role: str


class Assignee(TypedDict, total=False):
    """A user assigned to a task."""

    uid: str
    displayName: str
    email: str


class _TaskBase(TypedDict):
    id: int
    text: str
    start_date: Any


class Task(_TaskBase, total=False):
    """A task embedded in a team document's ``tasks`` array."""

    description: str
    duration: int
    type: str
    priority: str
    progress: int
    status: str
    assignees: List[Assignee]  # noqa: UP006
    updatedBy: str
    updatedAt: Any


class _NotificationBase(TypedDict):
    userId: str
    title: str
    message: str
    type: str
    read: bool


class Notification(_NotificationBase, total=False):
    """A ``notifications/{id}`` document."""

    teamId: Optional[str]
    teamName: Optional[str]
    taskId: Optional[Any]
    taskName: Optional[str]
    invitedBy: Dict[str, Any]  # noqa: UP006
    createdAt: Any
    readAt: Any
