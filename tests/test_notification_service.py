"""Tests for NotificationService and the unread counter."""

from __future__ import annotations

import unittest
from unittest.mock import MagicMock

from teamboard.constants import FIRESTORE_BATCH_LIMIT
from teamboard.errors import NotFoundError, PermissionDeniedError
from teamboard.notifications.services import NotificationService
from tests.mock_utils import MockBatch, make_db


class NotificationServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_db()
        self.db.collection("users").document("alice").set({"displayName": "Alice"})

    def _send(self, uid: str = "alice", **extra) -> str:
        return NotificationService.send(
            self.db,
            NotificationService.build(uid, "Hello", "Hi there", "custom", **extra),
        )

    def _get(self, notification_id: str) -> dict:
        return (
            self.db.collection("notifications")
            .document(notification_id)
            .get()
            .to_dict()
        )

    def test_build(self) -> None:
        notification = NotificationService.build(
            "alice", "T", "M", "team_created", teamId="t1"
        )
        self.assertEqual(notification["userId"], "alice")
        self.assertFalse(notification["read"])
        self.assertEqual(notification["teamId"], "t1")
        self.assertNotIn("taskId", notification)
        self.assertIn("createdAt", notification)

    def test_send_and_count(self) -> None:
        notification_id = self._send(teamId="t1")

        self.assertEqual(self._get(notification_id)["teamId"], "t1")
        self.assertEqual(NotificationService.get_unread_count(self.db, "alice"), 1)
        self.assertEqual(NotificationService.get_unread_count(self.db, "bob"), 0)

    def test_fan_out(self) -> None:
        ok = NotificationService.fan_out(
            self.db,
            [
                NotificationService.build(uid, "T", "M", "custom")
                for uid in ("alice", "bob", "bob")
            ],
        )
        self.assertTrue(ok)
        self.assertEqual(NotificationService.get_unread_count(self.db, "bob"), 2)

    def test_fan_out_nothing(self) -> None:
        self.assertTrue(NotificationService.fan_out(self.db, []))

    def test_fan_out_failure_is_logged(self) -> None:
        db = MagicMock()
        db.batch.return_value.commit.side_effect = RuntimeError("quota")
        with self.assertLogs("teamboard.notifications.services", level="ERROR"):
            ok = NotificationService.fan_out(
                db, [NotificationService.build("alice", "T", "M", "custom")]
            )
        self.assertFalse(ok)

    def test_mark_read(self) -> None:
        notification_id = self._send()
        NotificationService.mark_read(self.db, "alice", notification_id)

        stored = self._get(notification_id)
        self.assertTrue(stored["read"])
        self.assertIn("readAt", stored)
        self.assertEqual(NotificationService.get_unread_count(self.db, "alice"), 0)

    def test_mark_read_other_users_notification(self) -> None:
        notification_id = self._send("bob")
        with self.assertRaises(PermissionDeniedError):
            NotificationService.mark_read(self.db, "alice", notification_id)
        self.assertFalse(self._get(notification_id)["read"])

    def test_mark_read_missing(self) -> None:
        with self.assertRaises(NotFoundError):
            NotificationService.mark_read(self.db, "alice", "missing")

    def test_mark_all_read(self) -> None:
        for _ in range(3):
            self._send()
        other = self._send("bob")

        self.assertEqual(NotificationService.mark_all_read(self.db, "alice"), 3)
        self.assertEqual(NotificationService.get_unread_count(self.db, "alice"), 0)
        self.assertFalse(self._get(other)["read"])
        self.assertEqual(NotificationService.mark_all_read(self.db, "alice"), 0)


    def _count_batches(self) -> MagicMock:
        make_batch = MagicMock(side_effect=lambda: MockBatch(self.db))
        self.db.batch = make_batch
        return make_batch

    def test_fan_out_splits_large_batches(self) -> None:
        make_batch = self._count_batches()
        ok = NotificationService.fan_out(
            self.db,
            [NotificationService.build("bob", "T", "M", "custom")]
            * (FIRESTORE_BATCH_LIMIT + 1),
        )

        self.assertTrue(ok)
        self.assertEqual(make_batch.call_count, 2)
        self.assertEqual(
            NotificationService.get_unread_count(self.db, "bob"),
            FIRESTORE_BATCH_LIMIT + 1,
        )

    def test_mark_all_read_splits_large_batches(self) -> None:
        collection = self.db.collection("notifications")
        for i in range(FIRESTORE_BATCH_LIMIT + 1):
            collection.document(f"n{i}").set({"userId": "alice", "read": False})
        make_batch = self._count_batches()

        count = NotificationService.mark_all_read(self.db, "alice")

        self.assertEqual(count, FIRESTORE_BATCH_LIMIT + 1)
        self.assertEqual(make_batch.call_count, 2)
        self.assertEqual(NotificationService.get_unread_count(self.db, "alice"), 0)


class SyncUnreadCountTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_db()
        self.db.collection("users").document("alice").set({"displayName": "Alice"})
        for read in (False, False, True):
            self.db.collection("notifications").add(
                {"userId": "alice", "read": read, "title": "T"}
            )

    def _unread_field(self):
        return (
            self.db.collection("users").document("alice").get().to_dict()
        ).get("unreadNotifications")

    def test_read_flag_change_recounts(self) -> None:
        result = NotificationService.sync_unread_count(
            self.db, {"userId": "alice", "read": False}, {"userId": "alice", "read": True}
        )
        self.assertEqual(result, {"success": True, "unreadNotifications": 2})
        self.assertEqual(self._unread_field(), 2)

    def test_unchanged_read_flag_is_noop(self) -> None:
        result = NotificationService.sync_unread_count(
            self.db,
            {"userId": "alice", "read": False, "title": "A"},
            {"userId": "alice", "read": False, "title": "B"},
        )
        self.assertIsNone(result)
        self.assertIsNone(self._unread_field())

    def test_missing_after_or_user_is_noop(self) -> None:
        self.assertIsNone(NotificationService.sync_unread_count(self.db, None, None))
        self.assertIsNone(
            NotificationService.sync_unread_count(
                self.db, {"read": False}, {"read": True}
            )
        )

    def test_failure_is_returned(self) -> None:
        db = MagicMock()
        db.collection.side_effect = RuntimeError("unavailable")
        with self.assertLogs("teamboard.notifications.services", level="ERROR"):
            result = NotificationService.sync_unread_count(
                db, {"userId": "alice", "read": False}, {"userId": "alice", "read": True}
            )
        self.assertEqual(result, {"error": "unavailable"})


if __name__ == "__main__":
    unittest.main()
