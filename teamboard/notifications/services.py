"""Service layer for notification-related operations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterator, TypeVar, cast

from firebase_admin import firestore

from teamboard.constants import (
    FIRESTORE_BATCH_LIMIT,
    NOTIFICATIONS_COLLECTION,
    USERS_COLLECTION,
)
from teamboard.errors import NotFoundError, PermissionDeniedError

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.query import Query

    from teamboard.core.types import Notification

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _chunks(items: list[T], size: int = FIRESTORE_BATCH_LIMIT) -> Iterator[list[T]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


class NotificationService:
    """Service class for notification-related operations."""

    @staticmethod
    def build(
        user_id: str,
        title: str,
        message: str,
        notification_type: str,
        **correlations: Any,
    ) -> Notification:
        """Build an unread notification document.

        ``correlations`` may carry teamId, teamName, taskId, taskName and
        invitedBy; only the keys that are given are stored.
        """
        notification: dict[str, Any] = {
            "userId": user_id,
            "title": title,
            "message": message,
            "type": notification_type,
            "read": False,
            "createdAt": firestore.SERVER_TIMESTAMP,
        }
        notification.update(correlations)
        return cast("Notification", notification)

    @staticmethod
    def send(db: Client, notification: Notification) -> str:
        """Insert a single notification and return its ID."""
        _, doc_ref = db.collection(NOTIFICATIONS_COLLECTION).add(dict(notification))
        return doc_ref.id

    @staticmethod
    def fan_out(db: Client, notifications: list[Notification]) -> bool:
        """Write notifications in batches, logging instead of raising.

        Fan-out runs after the primary write has committed, so a failure here
        must not fail the enclosing operation. Batches already committed
        before a failure stay written.
        """
        if not notifications:
            return True
        try:
            collection = db.collection(NOTIFICATIONS_COLLECTION)
            for chunk in _chunks(notifications):
                batch = db.batch()
                for notification in chunk:
                    batch.set(collection.document(), dict(notification))
                batch.commit()
        except Exception as e:
            logger.error(f"Failed to send {len(notifications)} notification(s): {e}")
            return False
        return True

    @staticmethod
    def _unread_query(db: Client, user_id: str) -> Query:
        return (
            db.collection(NOTIFICATIONS_COLLECTION)
            .where(filter=firestore.FieldFilter("userId", "==", user_id))
            .where(filter=firestore.FieldFilter("read", "==", False))
        )

    @staticmethod
    def get_unread_count(db: Client, user_id: str) -> int:
        """Count the user's unread notifications with an aggregation query."""
        results = NotificationService._unread_query(db, user_id).count().get()
        return int(results[0][0].value)

    @staticmethod
    def mark_read(db: Client, user_id: str, notification_id: str) -> None:
        """Mark one of the user's notifications as read."""
        notification_ref = db.collection(NOTIFICATIONS_COLLECTION).document(
            notification_id
        )
        notification_doc = cast("DocumentSnapshot", notification_ref.get())
        if not notification_doc.exists:
            raise NotFoundError("Notification not found.")

        data = notification_doc.to_dict() or {}
        if data.get("userId") != user_id:
            raise PermissionDeniedError(
                "You do not have permission to mark this notification as read."
            )

        notification_ref.update({"read": True, "readAt": firestore.SERVER_TIMESTAMP})

    @staticmethod
    def mark_all_read(db: Client, user_id: str) -> int:
        """Mark every unread notification of the user as read.

        Writes go out in batches of at most ``FIRESTORE_BATCH_LIMIT``.
        """
        unread_docs = list(NotificationService._unread_query(db, user_id).stream())
        for chunk in _chunks(unread_docs):
            batch = db.batch()
            for doc in chunk:
                batch.update(
                    doc.reference, {"read": True, "readAt": firestore.SERVER_TIMESTAMP}
                )
            batch.commit()
        return len(unread_docs)

    @staticmethod
    def sync_unread_count(
        db: Client, before: dict[str, Any] | None, after: dict[str, Any] | None
    ) -> dict[str, Any] | None:
        """Recompute ``unreadNotifications`` on the owner's user document.

        Runs on every notification update. Does nothing unless the read flag
        changed. The counter is rebuilt from a full count rather than
        adjusted. Errors are returned, not raised.
        """
        if not after:
            return None
        if before is not None and before.get("read") == after.get("read"):
            return None

        user_id = after.get("userId")
        if not user_id:
            return None

        try:
            unread_count = NotificationService.get_unread_count(db, user_id)
            db.collection(USERS_COLLECTION).document(user_id).update(
                {"unreadNotifications": unread_count}
            )
        except Exception as e:
            logger.error(f"Error updating unread notifications count: {e}")
            return {"error": str(e)}
        return {"success": True, "unreadNotifications": unread_count}
