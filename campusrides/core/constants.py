"""Global constants for the campusrides application."""

# Collections
USERS_COLLECTION = "users"
GROUPS_COLLECTION = "groups"
RIDES_SUBCOLLECTION = "rides"
RIDES_COLLECTION = "rides"
BOOKINGS_COLLECTION = "bookings"
CARS_COLLECTION = "cars"
BLOGS_COLLECTION = "blogs"
LISTINGS_COLLECTION = "marketplace_listings"
SAVED_ITEMS_COLLECTION = "saved_items"
CHATS_COLLECTION = "chats"
MESSAGES_SUBCOLLECTION = "messages"
NOTIFICATIONS_COLLECTION = "notifications"

# Group ids are nanoid-style tokens
GROUP_ID_LENGTH = 10
GROUP_ID_ALPHABET = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-"
)
GROUP_ID_MAX_ATTEMPTS = 5

# Firestore retries a transaction body this many times on contention
TRANSACTION_MAX_ATTEMPTS = 5

# Booking and ride status values
BOOKING_CONFIRMED = "confirmed"
CURRENT_RIDE_STATUSES = ("not_started", "waiting_for_customer", "started")
PREVIOUS_RIDE_STATUSES = ("finished", "cancelled")

# Seats a car may offer, driver excluded
MAX_CAR_CAPACITY = 8

# Ride capacity states
RIDE_HAS_CAPACITY = "has_capacity"
RIDE_FULL = "full"

# Blogs
BLOG_SLUG_MAX_LENGTH = 50
BLOG_SEARCH_LIMIT = 20
DEFAULT_BLOG_PAGE_SIZE = 10

# Uploads
ALLOWED_IMAGE_EXTENSIONS = ["jpg", "jpeg", "png", "webp"]

# Email
MAIL_SENDER_NAME = "Campus Rides"
SMTP_AUTH_ERROR_CODE = 534

# Profile fields a user may write
PROFILE_FIELDS = (
    "fullName",
    "email",
    "university",
    "bio",
    "location",
    "profilePicUrl",
)

# Marketplace
LISTING_ACTIVE = "active"
LISTING_SOLD = "sold"
LISTING_CATEGORIES = {
    "sports-tickets": "Sports Tickets",
    "dorm-supplies": "Dorm Supplies",
    "textbooks": "Textbooks & School Supplies",
    "electronics": "Electronics & Gadgets",
    "clothing": "Clothing & Accessories",
    "furniture": "Furniture & Appliances",
    "miscellaneous": "Miscellaneous",
}
LISTING_CONDITIONS = {
    "new": "New",
    "like-new": "Used - Like New",
    "good": "Used - Good",
    "fair": "Used - Fair",
    "poor": "Used - Poor",
}
LISTING_SORTS = ("relevance", "newest", "price_low", "price_high")
LISTING_PAGE_SIZE = 24
LISTING_MAX_IMAGES = 5

# Chat
CHAT_MARKETPLACE = "marketplace"
CHAT_DIRECT = "direct"
CHAT_PREVIEW_LENGTH = 30
