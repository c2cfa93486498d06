"""Tests for the campus marketplace."""

import unittest
from unittest.mock import MagicMock, patch

from mockfirestore import MockFirestore

from campusrides.listing.services import ListingService
from campusrides.listing.utils import in_price_range, matches_terms
from tests.helpers import MOCK_USER_ID, RouteTestCase
from tests.mock_utils import make_timestamp, patch_mockfirestore

LISTINGS = {
    "l1": {
        "title": "Calculus textbook",
        "description": "Barely used",
        "price": 40.0,
        "category": "textbooks",
        "condition": "good",
        "location": "Library",
        "imageUrls": ["https://cdn.example.edu/calc.png"],
        "sellerId": "s1",
        "status": "active",
        "createdAt": make_timestamp(0),
    },
    "l2": {
        "title": "Mini fridge",
        "description": "Keeps drinks cold",
        "price": 60.0,
        "category": "dorm-supplies",
        "condition": "like-new",
        "location": "Dorm B",
        "sellerId": "s2",
        "status": "active",
        "createdAt": make_timestamp(5),
    },
    "l3": {
        "title": "Chemistry textbook bundle",
        "price": 25.0,
        "category": "textbooks",
        "condition": "fair",
        "sellerId": "s2",
        "status": "sold",
        "createdAt": make_timestamp(10),
        "soldAt": make_timestamp(12),
    },
    "l4": {
        "title": "Physics textbook",
        "price": 80.0,
        "category": "textbooks",
        "condition": "new",
        "sellerId": "s1",
        "createdAt": make_timestamp(15),
    },
}

NEW_LISTING = {
    "title": "Desk lamp",
    "description": "",
    "price": 12.5,
    "category": "furniture",
    "condition": "good",
    "location": "",
}


def seed_listings(db):
    for listing_id, data in LISTINGS.items():
        db.collection("marketplace_listings").document(listing_id).set(dict(data))


def ids(listings):
    return [listing["id"] for listing in listings]


class ListingServiceTestCase(unittest.TestCase):
    """Test case for ListingService."""

    def setUp(self):
        patch_mockfirestore()
        self.db = MockFirestore()
        seed_listings(self.db)

    def tearDown(self):
        self.db.reset()

    def _listing(self, listing_id):
        return (
            self.db.collection("marketplace_listings")
            .document(listing_id)
            .get()
            .to_dict()
        )

    def test_category_hides_sold_items(self):
        listings = ListingService.get_listings_by_category(self.db, "textbooks")
        self.assertEqual(ids(listings), ["l4", "l1"])

    def test_search_by_text(self):
        search = ListingService.search_listings
        self.assertEqual(ids(search(self.db, "textbook")), ["l4", "l1"])
        self.assertEqual(ids(search(self.db, "drinks")), ["l2"])
        self.assertEqual(ids(search(self.db, "dorm")), ["l2"])
        self.assertEqual(ids(search(self.db, "library")), ["l1"])
        self.assertEqual(search(self.db, "bicycle"), [])

    def test_relevance_puts_better_title_matches_first(self):
        listings = ListingService.search_listings(self.db, "calculus textbook")
        self.assertEqual(ids(listings), ["l1", "l4"])

    def test_price_sorts_and_ranges(self):
        search = ListingService.search_listings
        self.assertEqual(ids(search(self.db, sort="price_low")), ["l1", "l2", "l4"])
        self.assertEqual(
            ids(search(self.db, sort="price_low", min_price=50)), ["l2", "l4"]
        )
        self.assertEqual(
            ids(search(self.db, sort="price_high", max_price=60)), ["l2", "l1"]
        )

    def test_filters(self):
        search = ListingService.search_listings
        self.assertEqual(
            ids(search(self.db, conditions=["new", "good"])), ["l4", "l1"]
        )
        self.assertEqual(ids(search(self.db, exclude_seller="s1")), ["l2"])
        self.assertEqual(ids(search(self.db, category="dorm-supplies")), ["l2"])

    def test_seller_listings(self):
        self.assertEqual(
            ids(ListingService.get_listings_by_seller(self.db, "s1")), ["l4", "l1"]
        )
        self.assertEqual(
            ids(ListingService.get_listings_by_seller(self.db, "s1", status="active")),
            ["l1"],
        )
        self.assertEqual(ids(ListingService.get_sold_items(self.db, "s2")), ["l3"])

    def test_create_listing(self):
        result = ListingService.create_listing(
            self.db, "s9", {"fullName": "Sam Seller"}, dict(NEW_LISTING, price=12)
        )

        self.assertTrue(result.ok)
        listing = self._listing(result.id)
        self.assertEqual(listing["title"], "Desk lamp")
        self.assertEqual(listing["price"], 12.0)
        self.assertIsInstance(listing["price"], float)
        self.assertEqual(listing["status"], "active")
        self.assertEqual(listing["sellerId"], "s9")
        self.assertEqual(listing["sellerName"], "Sam Seller")
        self.assertEqual(listing["imageUrls"], [])

    def test_create_listing_validates(self):
        cases = [
            (dict(NEW_LISTING, title=" "), "Please fill in all required fields"),
            (dict(NEW_LISTING, price=-1), "Price must be zero or more."),
            (dict(NEW_LISTING, category="cars"), "Please select a category."),
            (dict(NEW_LISTING, condition="broken"), "Please select a condition."),
        ]
        for fields, message in cases:
            with self.subTest(message=message):
                result = ListingService.create_listing(self.db, "s9", {}, fields)
                self.assertEqual(result.kind, "validation")
                self.assertEqual(result.message, message)

    @patch("campusrides.listing.services.upload_image")
    def test_create_listing_uploads_photos(self, mock_upload):
        mock_upload.side_effect = ["https://cdn/1.png", "https://cdn/2.png"]
        bucket = MagicMock()
        images = [MagicMock(filename="1.png"), MagicMock(filename="2.png")]

        result = ListingService.create_listing(
            self.db, "s9", {}, NEW_LISTING, bucket=bucket, images=images
        )

        self.assertEqual(
            self._listing(result.id)["imageUrls"],
            ["https://cdn/1.png", "https://cdn/2.png"],
        )
        mock_upload.assert_any_call(bucket, "marketplace/s9", images[0])

    def test_only_seller_changes_listing(self):
        update = ListingService.update_listing(self.db, "l1", "s2", NEW_LISTING)
        sold = ListingService.set_status(self.db, "l1", "s2", "sold")
        delete = ListingService.delete_listing(self.db, "l1", "s2")

        for result in (update, sold, delete):
            self.assertEqual(result.kind, "forbidden")
        self.assertEqual(self._listing("l1")["title"], "Calculus textbook")

    def test_update_listing(self):
        result = ListingService.update_listing(
            self.db, "l1", "s1", dict(NEW_LISTING, title="Calculus II textbook")
        )

        self.assertTrue(result.ok)
        listing = self._listing("l1")
        self.assertEqual(listing["title"], "Calculus II textbook")
        self.assertEqual(listing["price"], 12.5)
        self.assertEqual(listing["imageUrls"], ["https://cdn.example.edu/calc.png"])
        self.assertEqual(listing["sellerId"], "s1")

    def test_mark_sold_and_relist(self):
        sold = ListingService.set_status(self.db, "l1", "s1", "sold")
        self.assertEqual(sold.message, "Item marked as sold!")
        self.assertEqual(self._listing("l1")["status"], "sold")
        self.assertIn("soldAt", self._listing("l1"))

        again = ListingService.set_status(self.db, "l1", "s1", "sold")
        self.assertEqual(again.kind, "conflict")
        self.assertEqual(again.message, "This listing is already sold.")

        relisted = ListingService.set_status(self.db, "l1", "s1", "active")
        self.assertEqual(relisted.message, "Item is back on sale!")
        self.assertEqual(self._listing("l1")["status"], "active")
        self.assertIsNone(self._listing("l1")["soldAt"])

    def test_legacy_listing_counts_as_active(self):
        result = ListingService.set_status(self.db, "l4", "s1", "active")
        self.assertEqual(result.kind, "conflict")

    def test_save_and_unsave(self):
        first = ListingService.save_listing(self.db, "u9", "l1")
        ListingService.save_listing(self.db, "u9", "l1")

        self.assertEqual(first.message, "Item saved!")
        self.assertTrue(ListingService.is_saved(self.db, "u9", "l1"))
        saved = ListingService.get_saved_items(self.db, "u9")
        self.assertEqual(len(saved), 1)
        self.assertEqual(saved[0]["id"], "u9_l1")
        self.assertEqual(saved[0]["title"], "Calculus textbook")
        self.assertEqual(saved[0]["imageUrl"], "https://cdn.example.edu/calc.png")
        self.assertEqual(saved[0]["listingId"], "l1")

        ListingService.unsave_listing(self.db, "u9", "l1")
        self.assertFalse(ListingService.is_saved(self.db, "u9", "l1"))
        self.assertEqual(ListingService.get_saved_items(self.db, "u9"), [])

    def test_saved_items_newest_first(self):
        saved = self.db.collection("saved_items")
        saved.document("u9_l1").set(
            {"userId": "u9", "listingId": "l1", "savedAt": make_timestamp(1)}
        )
        saved.document("u9_l2").set(
            {"userId": "u9", "listingId": "l2", "savedAt": make_timestamp(2)}
        )
        saved.document("u8_l2").set(
            {"userId": "u8", "listingId": "l2", "savedAt": make_timestamp(3)}
        )

        self.assertEqual(
            ids(ListingService.get_saved_items(self.db, "u9")), ["u9_l2", "u9_l1"]
        )

    def test_save_missing_listing(self):
        result = ListingService.save_listing(self.db, "u9", "nope")
        self.assertEqual(result.kind, "not_found")
        self.assertEqual(result.message, "Listing does not exist!")

    def test_delete_listing(self):
        result = ListingService.delete_listing(self.db, "l2", "s2")

        self.assertTrue(result.ok)
        self.assertEqual(
            ids(ListingService.get_listings_by_category(self.db, "dorm-supplies")), []
        )

    def test_store_failure(self):
        db = MagicMock()
        db.collection.return_value.add.side_effect = RuntimeError("down")

        result = ListingService.create_listing(db, "s9", {}, NEW_LISTING)

        self.assertEqual(result.kind, "store")
        self.assertEqual(result.message, "Failed to create listing. Please try again.")


class ListingUtilsTestCase(unittest.TestCase):
    """Test case for the search helpers."""

    def test_matches_terms(self):
        listing = LISTINGS["l2"]
        self.assertTrue(matches_terms(listing, ["fridge"]))
        self.assertTrue(matches_terms(listing, ["bike", "supplies"]))
        self.assertFalse(matches_terms(listing, ["bike"]))

    def test_in_price_range(self):
        self.assertTrue(in_price_range({"price": 10}, 10, 10))
        self.assertFalse(in_price_range({"price": 10}, 11))
        self.assertFalse(in_price_range({}, 0))
        self.assertTrue(in_price_range({}))


class ListingRoutesTestCase(RouteTestCase):
    """Test case for the marketplace blueprint."""

    def setUp(self):
        super().setUp()
        seed_listings(self.db)
        self.add_user("s1", fullName="Sol Seller", email="sol@example.edu")

    def test_categories(self):
        response = self.client.get("/marketplace/categories")

        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertIn(
            {"id": "textbooks", "name": "Textbooks & School Supplies"},
            data["categories"],
        )
        self.assertIn({"id": "like-new", "name": "Used - Like New"}, data["conditions"])

    def test_search(self):
        response = self.client.get("/marketplace/?q=textbook&sort=price_low")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(ids(response.get_json()["listings"]), ["l1", "l4"])

    def test_search_hides_own_listings(self):
        self.login("s1")
        response = self.client.get("/marketplace/")
        self.assertEqual(ids(response.get_json()["listings"]), ["l2"])

    def test_search_rejects_unknown_sort(self):
        response = self.client.get("/marketplace/?sort=cheapest")
        self.assertEqual(response.status_code, 400)

    def test_category_page(self):
        response = self.client.get("/marketplace/category/textbooks")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(ids(response.get_json()["listings"]), ["l4", "l1"])
        self.assertEqual(
            self.client.get("/marketplace/category/boats").status_code, 404
        )

    def test_create_requires_login(self):
        response = self.client.post("/marketplace/listings", data={})
        self.assertEqual(response.status_code, 401)

    def test_create_listing(self):
        self.login()
        response = self.client.post(
            "/marketplace/listings",
            data={
                "title": "Desk lamp",
                "price": "12.5",
                "category": "furniture",
                "condition": "good",
            },
        )

        self.assertEqual(response.status_code, 201)
        listing = (
            self.db.collection("marketplace_listings")
            .document(response.get_json()["id"])
            .get()
            .to_dict()
        )
        self.assertEqual(listing["sellerId"], MOCK_USER_ID)
        self.assertEqual(listing["sellerName"], "Riley Rider")
        self.assertEqual(listing["price"], 12.5)

    def test_create_listing_requires_title(self):
        self.login()
        response = self.client.post(
            "/marketplace/listings",
            data={"price": "5", "category": "furniture", "condition": "good"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.get_json()["error"], "Please fill in all required fields"
        )

    def test_view_listing(self):
        self.login()
        self.client.post("/marketplace/listings/l1/save")

        response = self.client.get("/marketplace/listings/l1")

        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data["listing"]["title"], "Calculus textbook")
        self.assertTrue(data["isSaved"])
        self.assertFalse(data["isOwner"])

    def test_view_missing_listing(self):
        response = self.client.get("/marketplace/listings/nope")
        self.assertEqual(response.status_code, 404)

    def test_edit_listing(self):
        self.login("s1")
        response = self.client.post(
            "/marketplace/listings/l1/edit",
            data={
                "title": "Calculus textbook, 9th ed.",
                "price": "35",
                "category": "textbooks",
                "condition": "good",
            },
        )

        self.assertEqual(response.status_code, 200)
        listing = self.db.collection("marketplace_listings").document("l1").get()
        self.assertEqual(listing.to_dict()["price"], 35.0)

    def test_status_routes(self):
        self.login()
        self.assertEqual(
            self.client.post("/marketplace/listings/l1/sold").status_code, 403
        )

        self.login("s1")
        sold = self.client.post("/marketplace/listings/l1/sold")
        self.assertEqual(sold.status_code, 200)
        again = self.client.post("/marketplace/listings/l1/sold")
        self.assertEqual(again.status_code, 409)
        relist = self.client.post("/marketplace/listings/l1/relist")
        self.assertEqual(relist.get_json()["success"], "Item is back on sale!")

    def test_my_and_sold_listings(self):
        self.login("s1")
        mine = self.client.get("/marketplace/my-listings?status=active")
        self.assertEqual(ids(mine.get_json()["listings"]), ["l1"])

        self.login("s2")
        sold = self.client.get("/marketplace/sold-items")
        self.assertEqual(ids(sold.get_json()["listings"]), ["l3"])

    def test_saved_items(self):
        self.login()
        self.assertEqual(
            self.client.post("/marketplace/listings/l2/save").status_code, 200
        )
        saved_doc = self.db.collection("saved_items").document(f"{MOCK_USER_ID}_l2")
        self.assertEqual(saved_doc.get().to_dict()["title"], "Mini fridge")
        saved_doc.update({"savedAt": make_timestamp(20)})

        saved = self.client.get("/marketplace/saved-items").get_json()["items"]
        self.assertEqual([item["listingId"] for item in saved], ["l2"])

        self.client.post("/marketplace/listings/l2/unsave")
        self.assertEqual(
            self.client.get("/marketplace/saved-items").get_json()["items"], []
        )

    def test_delete_listing(self):
        self.login()
        self.assertEqual(
            self.client.post("/marketplace/listings/l4/delete").status_code, 403
        )
        self.login("s1")
        self.assertEqual(
            self.client.post("/marketplace/listings/l4/delete").status_code, 200
        )

    @patch("campusrides.listing.routes.send_chat_notification")
    def test_contact_seller_opens_one_chat(self, mock_notify):
        self.login()
        first = self.client.post(
            "/marketplace/listings/l1/contact", json={"message": "Still available?"}
        )

        self.assertEqual(first.status_code, 201)
        chat_id = first.get_json()["id"]
        chat = self.db.collection("chats").document(chat_id).get().to_dict()
        self.assertEqual(chat["participants"], [MOCK_USER_ID, "s1"])
        self.assertEqual(chat["chatType"], "marketplace")
        self.assertEqual(chat["listingId"], "l1")
        self.assertEqual(chat["lastMessage"], "Still available?")
        self.assertEqual(chat["unreadCount"]["s1"], 1)

        notifications = [
            doc.to_dict() for doc in self.db.collection("notifications").stream()
        ]
        self.assertEqual(len(notifications), 1)
        self.assertEqual(notifications[0]["userId"], "s1")
        self.assertEqual(
            notifications[0]["title"], 'New message about "Calculus textbook"'
        )
        self.assertEqual(
            mock_notify.call_args[0][1:],
            ("sol@example.edu", "Riley Rider", "Still available?", chat_id),
        )

        second = self.client.post(
            "/marketplace/listings/l1/contact", json={"message": "I can pay cash"}
        )
        self.assertEqual(second.get_json()["id"], chat_id)
        chat = self.db.collection("chats").document(chat_id).get().to_dict()
        self.assertEqual(chat["unreadCount"]["s1"], 2)
        self.assertEqual(len(list(self.db.collection("chats").stream())), 1)

    def test_contact_own_listing(self):
        self.login("s1")
        response = self.client.post(
            "/marketplace/listings/l1/contact", json={"message": "Hello me"}
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "You cannot message yourself.")

    def test_contact_requires_message(self):
        self.login()
        response = self.client.post("/marketplace/listings/l1/contact", json={})
        self.assertEqual(response.status_code, 400)


if __name__ == "__main__":
    unittest.main()
