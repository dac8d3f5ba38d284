"""Core module for the teamboard application."""

from .types import Assignee, MemberData, Notification, Task

__all__ = ["Assignee", "MemberData", "Notification", "Task"]
