"""Shared base test case for route tests."""

import unittest
from unittest.mock import MagicMock

from mockfirestore import MockFirestore

from campusrides import create_app
from campusrides.core.context import init_context
from tests.mock_utils import MockBatch, inline_transactions, patch_mockfirestore

MOCK_USER_ID = "user1"
MOCK_USER_DATA = {"fullName": "Riley Rider", "email": "riley@example.edu"}


class RouteTestCase(unittest.TestCase):
    """Flask test client wired to an in-memory Firestore."""

    def setUp(self):
        """Set up a test client and a mock Firestore."""
        patch_mockfirestore()
        self.db = MockFirestore()
        self.bucket = MagicMock()
        self.db.batch = MagicMock(side_effect=MockBatch)
        inline_transactions(self, self.db)

        self.app = create_app(
            {"TESTING": True, "WTF_CSRF_ENABLED": False, "SERVER_NAME": "localhost"}
        )
        init_context(self.app, db=self.db, bucket=self.bucket)
        self.client = self.app.test_client()
        self.app_context = self.app.app_context()
        self.app_context.push()

    def tearDown(self):
        """Tear down the test client."""
        self.app_context.pop()
        self.db.reset()

    def add_user(self, user_id=MOCK_USER_ID, **data):
        """Store a user profile document."""
        profile = dict(MOCK_USER_DATA, **data)
        self.db.collection("users").document(user_id).set(profile)
        return profile

    def login(self, user_id=MOCK_USER_ID):
        """Open a session for a stored user."""
        if not self.db.collection("users").document(user_id).get().exists:
            self.add_user(user_id)
        with self.client.session_transaction() as sess:
            sess["user_id"] = user_id
