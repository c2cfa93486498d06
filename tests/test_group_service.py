"""Tests for the group service."""

from __future__ import annotations

import unittest
from unittest.mock import MagicMock, patch

from mockfirestore import MockFirestore

from campusrides.core.types import CONFLICT, NOT_FOUND, STORE, VALIDATION
from campusrides.group.services import GroupService
from campusrides.group.utils import generate_group_id
from tests.mock_utils import inline_transactions, make_timestamp, patch_mockfirestore


def _create(db, bucket=None, **overrides):
    kwargs = {
        "name": "Downtown Commuters",
        "destination": "Main Campus",
        "description": None,
        "color": "#3366ff",
        "image": None,
        "owner_id": "owner",
    }
    kwargs.update(overrides)
    return GroupService.create_group(db, bucket, **kwargs)


class GroupServiceTestCase(unittest.TestCase):
    """Test case for GroupService against an in-memory Firestore."""

    def setUp(self) -> None:
        patch_mockfirestore()
        self.db = MockFirestore()
        inline_transactions(self, self.db)

    def tearDown(self) -> None:
        self.db.reset()

    def test_create_group_adds_owner_as_member(self) -> None:
        result = _create(self.db)

        self.assertTrue(result.ok)
        self.assertEqual(result.message, "Group created!")
        group = self.db.collection("groups").document(result.id).get().to_dict()
        self.assertEqual(group["members"], ["owner"])
        self.assertEqual(group["ownerId"], "owner")
        self.assertEqual(group["description"], "")
        self.assertIsNone(group["imageUrl"])
        self.assertEqual(len(result.id), 10)

    def test_create_group_requires_fields(self) -> None:
        db = MagicMock()
        cases = [
            ({"name": ""}, "Name is required to make a group!"),
            ({"destination": ""}, "Destination is required to make a group!"),
            ({"color": ""}, "Color is required to make a group!"),
            ({"owner_id": ""}, "Error making group!"),
        ]
        for overrides, message in cases:
            with self.subTest(message=message):
                result = _create(db, **overrides)
                self.assertEqual(result.kind, VALIDATION)
                self.assertEqual(result.message, message)
        db.collection.assert_not_called()

    @patch("campusrides.group.services.generate_group_id")
    def test_create_group_retries_taken_code(self, mock_generate) -> None:
        self.db.collection("groups").document("TAKEN").set({"name": "Existing"})
        mock_generate.side_effect = ["TAKEN", "FRESH"]

        result = _create(self.db)

        self.assertTrue(result.ok)
        self.assertEqual(result.id, "FRESH")
        taken = self.db.collection("groups").document("TAKEN").get().to_dict()
        self.assertEqual(taken, {"name": "Existing"})

    @patch("campusrides.group.services.generate_group_id")
    def test_create_group_gives_up_after_collisions(self, mock_generate) -> None:
        self.db.collection("groups").document("TAKEN").set({"name": "Existing"})
        mock_generate.return_value = "TAKEN"

        result = _create(self.db)

        self.assertEqual(result.kind, CONFLICT)
        self.assertEqual(mock_generate.call_count, 5)

    def test_create_group_store_error(self) -> None:
        db = MagicMock()
        db.collection.return_value.document.return_value.create.side_effect = (
            RuntimeError("unavailable")
        )

        result = _create(db)

        self.assertEqual(result.kind, STORE)
        self.assertEqual(result.message, "An error occurred!")

    @patch("campusrides.group.services.upload_image")
    def test_create_group_with_image_sets_url(self, mock_upload) -> None:
        mock_upload.return_value = "https://storage.example.com/groups/x/pic.png"
        bucket = MagicMock()
        image = MagicMock(filename="pic.png")

        result = _create(self.db, bucket=bucket, image=image)

        self.assertTrue(result.ok)
        mock_upload.assert_called_once_with(bucket, f"groups/{result.id}", image)
        group = self.db.collection("groups").document(result.id).get().to_dict()
        self.assertEqual(group["imageUrl"], mock_upload.return_value)

    @patch("campusrides.group.services.upload_image")
    def test_failed_upload_keeps_group(self, mock_upload) -> None:
        mock_upload.side_effect = RuntimeError("quota")

        result = _create(self.db, bucket=MagicMock(), image=MagicMock())

        self.assertTrue(result.ok)
        group = self.db.collection("groups").document(result.id).get().to_dict()
        self.assertIsNone(group["imageUrl"])

    def test_add_member(self) -> None:
        self.db.collection("groups").document("g1").set({"members": ["owner"]})

        result = GroupService.add_member(self.db, "alice", "g1")

        self.assertTrue(result.ok)
        self.assertEqual(result.message, "Joined group!")
        group = self.db.collection("groups").document("g1").get().to_dict()
        self.assertEqual(group["members"], ["owner", "alice"])

    def test_add_member_twice_is_conflict(self) -> None:
        self.db.collection("groups").document("g1").set({"members": ["owner"]})

        GroupService.add_member(self.db, "alice", "g1")
        result = GroupService.add_member(self.db, "alice", "g1")

        self.assertEqual(result.kind, CONFLICT)
        self.assertEqual(result.message, "You are already in this group!")
        group = self.db.collection("groups").document("g1").get().to_dict()
        self.assertEqual(group["members"], ["owner", "alice"])

    def test_add_member_to_missing_group(self) -> None:
        result = GroupService.add_member(self.db, "alice", "nope")

        self.assertEqual(result.kind, NOT_FOUND)
        self.assertEqual(result.message, "Group does not exist!")

    def test_get_group_by_id(self) -> None:
        self.db.collection("groups").document("g1").set({"name": "Carpool"})

        found = GroupService.get_group_by_id(self.db, "g1")
        missing = GroupService.get_group_by_id(self.db, "g2")

        self.assertEqual(found.data, {"name": "Carpool", "id": "g1"})
        self.assertEqual(missing.kind, NOT_FOUND)
        self.assertEqual(missing.message, "Group code g2 doesn't exist!")

    def test_get_groups_by_user_id_newest_first(self) -> None:
        groups = self.db.collection("groups")
        groups.document("old").set(
            {"name": "Old", "members": ["alice"], "createdAt": make_timestamp(0)}
        )
        groups.document("new").set(
            {"name": "New", "members": ["bob", "alice"], "createdAt": make_timestamp(5)}
        )
        groups.document("other").set(
            {"name": "Other", "members": ["bob"], "createdAt": make_timestamp(9)}
        )

        result = GroupService.get_groups_by_user_id(self.db, "alice")

        self.assertEqual([g["id"] for g in result], ["new", "old"])


class GroupUtilsTestCase(unittest.TestCase):
    """Test case for group code generation."""

    def test_generate_group_id_alphabet(self) -> None:
        allowed = set(
            "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-"
        )
        for _ in range(20):
            code = generate_group_id()
            self.assertEqual(len(code), 10)
            self.assertTrue(set(code) <= allowed)

    def test_generate_group_id_length(self) -> None:
        self.assertEqual(len(generate_group_id(6)), 6)


if __name__ == "__main__":
    unittest.main()
