"""Shared base classes for the callable endpoint tests."""

import unittest
from unittest.mock import MagicMock, patch

from teamboard import create_app
from tests.mock_utils import make_db

ROUTE_MODULES = (
    "teamboard.user.routes",
    "teamboard.teams.routes",
    "teamboard.tasks.routes",
    "teamboard.notifications.routes",
)


def make_user(uid, display_name=None, email=None, **extra):
    """Return a user document body with both search fields filled in."""
    data = {
        "uid": uid,
        "displayName": display_name or uid.capitalize(),
        "email": email or f"{uid}@example.com",
        "photoURL": f"https://example.com/{uid}.png",
    }
    data.update(extra)
    return data


class CallableTestCase(unittest.TestCase):
    """Runs the app against an in-memory Firestore.

    ID tokens are the caller's uid, so ``call(..., uid="alice")`` acts as
    alice.
    """

    def setUp(self):
        self.db = make_db()
        self.mock_firestore = MagicMock()
        self.mock_firestore.client.return_value = self.db

        patchers = [
            patch("firebase_admin.initialize_app"),
            patch(
                "firebase_admin.auth.verify_id_token",
                side_effect=lambda token: {"uid": token},
            ),
        ]
        patchers.extend(
            patch(f"{module}.firestore", new=self.mock_firestore)
            for module in ROUTE_MODULES
        )
        for p in patchers:
            p.start()
            self.addCleanup(p.stop)

        self.app = create_app({"TESTING": True})
        self.client = self.app.test_client()
        self.app_context = self.app.app_context()
        self.app_context.push()

    def tearDown(self):
        self.app_context.pop()

    def add_user(self, uid, **kwargs):
        data = make_user(uid, **kwargs)
        self.db.collection("users").document(uid).set(data)
        return data

    def add_team(self, team_id, name, members_data, tasks=None):
        """Store a team; ``members_data`` maps uid to role."""
        data = {
            "name": name,
            "createdBy": next(iter(members_data)),
            "members": list(members_data),
            "membersData": [
                {
                    "uid": uid,
                    "displayName": uid.capitalize(),
                    "email": f"{uid}@example.com",
                    "photoURL": "",
                    "role": role,
                }
                for uid, role in members_data.items()
            ],
            "tasks": tasks or [],
        }
        self.db.collection("teams").document(team_id).set(data)
        return data

    def team(self, team_id):
        doc = self.db.collection("teams").document(team_id).get()
        return doc.to_dict() if doc.exists else None

    def notifications_for(self, uid):
        return [
            doc.to_dict()
            for doc in self.db.collection("notifications").stream()
            if doc.to_dict().get("userId") == uid
        ]

    def call(self, name, data=None, uid=None):
        """POST a callable request, authenticated as ``uid`` when given."""
        headers = {"Authorization": f"Bearer {uid}"} if uid else {}
        return self.client.post(f"/api/{name}", json={"data": data}, headers=headers)

    def assertCallableError(self, response, status, code):
        self.assertEqual(response.status_code, code)
        self.assertEqual(response.get_json()["error"]["status"], status)
