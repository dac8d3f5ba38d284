"""Callable endpoints for the notifications blueprint."""

from firebase_admin import firestore
from flask import g

from teamboard.auth.decorators import login_required
from teamboard.utils import callable_data, callable_result, require_fields

from . import bp
from .services import NotificationService


@bp.route("/sendNotification", methods=["POST"])
@login_required(message="You must be logged in to send notifications.")
def send_notification():
    """Insert a notification for any user."""
    data = callable_data()
    require_fields(
        data,
        "userId",
        "title",
        "message",
        "type",
        message="Notification details are required.",
    )

    db = firestore.client()
    notification = NotificationService.build(
        data["userId"],
        data["title"],
        data["message"],
        data["type"],
        teamId=data.get("teamId") or None,
        teamName=data.get("teamName") or None,
        taskId=data.get("taskId") or None,
        taskName=data.get("taskName") or None,
    )
    notification_id = NotificationService.send(db, notification)
    return callable_result({"success": True, "notificationId": notification_id})


@bp.route("/getUnreadNotificationsCount", methods=["POST"])
@login_required(message="You must be logged in to get notifications count.")
def get_unread_notifications_count():
    """Return the caller's unread notification count."""
    db = firestore.client()
    return callable_result({"count": NotificationService.get_unread_count(db, g.uid)})


@bp.route("/markNotificationAsRead", methods=["POST"])
@login_required(message="You must be logged in to mark notifications as read.")
def mark_notification_as_read():
    """Mark one of the caller's notifications as read."""
    data = callable_data()
    require_fields(data, "notificationId", message="Notification ID is required.")

    db = firestore.client()
    NotificationService.mark_read(db, g.uid, data["notificationId"])
    return callable_result({"success": True})


@bp.route("/markAllNotificationsAsRead", methods=["POST"])
@login_required(message="You must be logged in to mark notifications as read.")
def mark_all_notifications_as_read():
    """Mark all of the caller's notifications as read."""
    db = firestore.client()
    count = NotificationService.mark_all_read(db, g.uid)
    return callable_result({"success": True, "count": count})
