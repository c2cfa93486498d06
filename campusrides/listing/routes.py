"""Routes for the marketplace blueprint."""

from flask import current_app, g, jsonify, request, session

from campusrides.auth.decorators import login_required
from campusrides.chat.services import ChatService
from campusrides.core.constants import (
    LISTING_ACTIVE,
    LISTING_CATEGORIES,
    LISTING_CONDITIONS,
    LISTING_SOLD,
    LISTING_SORTS,
)
from campusrides.core.context import get_context
from campusrides.core.responses import first_form_error, respond
from campusrides.errors import NotFoundError, ValidationError, raise_for_failure
from campusrides.notifications.services import send_chat_notification

from . import bp
from .forms import ListingForm
from .services import ListingService


def _validated_form():
    form = ListingForm()
    if not form.validate_on_submit():
        raise ValidationError(first_form_error(form))
    return form


@bp.route("/", methods=["GET"])
def search():
    """Search available listings by text, category, condition and price."""
    sort = request.args.get("sort", "relevance")
    if sort not in LISTING_SORTS:
        raise ValidationError(f"Unknown sort order: {sort}")

    listings = ListingService.search_listings(
        get_context().db,
        query_text=request.args.get("q"),
        category=request.args.get("category"),
        conditions=request.args.getlist("condition"),
        min_price=request.args.get("min_price", type=float),
        max_price=request.args.get("max_price", type=float),
        sort=sort,
        exclude_seller=session.get("user_id"),
    )
    return jsonify({"listings": listings})


@bp.route("/categories", methods=["GET"])
def list_categories():
    """List the categories and item conditions."""
    return jsonify(
        {
            "categories": [
                {"id": key, "name": name} for key, name in LISTING_CATEGORIES.items()
            ],
            "conditions": [
                {"id": key, "name": name} for key, name in LISTING_CONDITIONS.items()
            ],
        }
    )


@bp.route("/category/<string:category_id>", methods=["GET"])
def view_category(category_id):
    """List a category's available items, newest first."""
    if category_id not in LISTING_CATEGORIES:
        raise NotFoundError("Category not found.")
    listings = ListingService.get_listings_by_category(get_context().db, category_id)
    return jsonify(
        {"category": LISTING_CATEGORIES[category_id], "listings": listings}
    )


@bp.route("/listings", methods=["POST"])
@login_required
def create_listing():
    """Put an item up for sale as the current user."""
    form = _validated_form()
    context = get_context()
    result = ListingService.create_listing(
        context.db,
        session["user_id"],
        g.user or {},
        form.listing_fields(),
        bucket=context.bucket,
        images=form.images.data,
    )
    return respond(result, 201)


@bp.route("/listings/<string:listing_id>", methods=["GET"])
def view_listing(listing_id):
    """Show a listing, and whether the current user saved or owns it."""
    db = get_context().db
    listing = raise_for_failure(ListingService.get_listing(db, listing_id)).data
    user_id = session.get("user_id")
    return jsonify(
        {
            "listing": listing,
            "isOwner": user_id is not None and listing.get("sellerId") == user_id,
            "isSaved": bool(user_id)
            and ListingService.is_saved(db, user_id, listing_id),
        }
    )


@bp.route("/listings/<string:listing_id>/edit", methods=["POST"])
@login_required
def edit_listing(listing_id):
    """Change one of the current user's listings."""
    form = _validated_form()
    context = get_context()
    result = ListingService.update_listing(
        context.db,
        listing_id,
        session["user_id"],
        form.listing_fields(),
        bucket=context.bucket,
        images=form.images.data,
    )
    return respond(result)


@bp.route("/listings/<string:listing_id>/delete", methods=["POST"])
@login_required
def delete_listing(listing_id):
    """Delete one of the current user's listings."""
    return respond(
        ListingService.delete_listing(get_context().db, listing_id, session["user_id"])
    )


@bp.route("/listings/<string:listing_id>/sold", methods=["POST"])
@login_required
def mark_sold(listing_id):
    """Mark one of the current user's listings as sold."""
    return respond(
        ListingService.set_status(
            get_context().db, listing_id, session["user_id"], LISTING_SOLD
        )
    )


@bp.route("/listings/<string:listing_id>/relist", methods=["POST"])
@login_required
def relist(listing_id):
    """Put a sold listing back on sale."""
    return respond(
        ListingService.set_status(
            get_context().db, listing_id, session["user_id"], LISTING_ACTIVE
        )
    )


@bp.route("/listings/<string:listing_id>/save", methods=["POST"])
@login_required
def save_listing(listing_id):
    """Add a listing to the current user's saved items."""
    return respond(
        ListingService.save_listing(get_context().db, session["user_id"], listing_id)
    )


@bp.route("/listings/<string:listing_id>/unsave", methods=["POST"])
@login_required
def unsave_listing(listing_id):
    """Remove a listing from the current user's saved items."""
    return respond(
        ListingService.unsave_listing(get_context().db, session["user_id"], listing_id)
    )


@bp.route("/listings/<string:listing_id>/contact", methods=["POST"])
@login_required
def contact_seller(listing_id):
    """Message a listing's seller, reusing any chat the two already have."""
    text = ((request.get_json(silent=True) or {}).get("message") or "").strip()
    if not text:
        raise ValidationError("Message cannot be empty.")

    db = get_context().db
    user_id = session["user_id"]
    listing = raise_for_failure(ListingService.get_listing(db, listing_id)).data
    seller_id = listing.get("sellerId")

    chat = raise_for_failure(
        ChatService.start_chat(db, user_id, seller_id, listing_id=listing_id)
    )
    sender_name = (g.user or {}).get("fullName") or "Someone"
    sent = raise_for_failure(
        ChatService.send_message(
            db,
            chat.id,
            user_id,
            text,
            sender_name=sender_name,
            title=f'New message about "{listing.get("title")}"',
        )
    )

    recipient_email = sent.data.get("recipientEmail")
    if recipient_email:
        send_chat_notification(
            current_app._get_current_object(),
            recipient_email,
            sender_name,
            text,
            chat.id,
        )
    return jsonify({"success": "Message sent!", "id": chat.id}), 201


@bp.route("/my-listings", methods=["GET"])
@login_required
def my_listings():
    """List the current user's listings, optionally by status."""
    status = request.args.get("status")
    listings = ListingService.get_listings_by_seller(
        get_context().db, session["user_id"], status=status
    )
    return jsonify({"listings": listings})


@bp.route("/saved-items", methods=["GET"])
@login_required
def saved_items():
    """List the current user's saved items."""
    items = ListingService.get_saved_items(get_context().db, session["user_id"])
    return jsonify({"items": items})


@bp.route("/sold-items", methods=["GET"])
@login_required
def sold_items():
    """List the current user's sold listings."""
    listings = ListingService.get_sold_items(get_context().db, session["user_id"])
    return jsonify({"listings": listings})
