"""Routes for the chat blueprint."""

from flask import current_app, g, jsonify, request, session

from campusrides.auth.decorators import login_required
from campusrides.core.context import get_context
from campusrides.core.responses import respond
from campusrides.errors import raise_for_failure
from campusrides.notifications.services import send_chat_notification

from . import bp
from .services import ChatService


@bp.route("/", methods=["GET"])
@login_required
def my_chats():
    """List the current user's chats, most recent first."""
    chats = ChatService.get_chats_for_user(get_context().db, session["user_id"])
    return jsonify({"chats": chats})


@bp.route("/", methods=["POST"])
@login_required
def start_chat():
    """Open a chat with another user."""
    payload = request.get_json(silent=True) or {}
    result = ChatService.start_chat(
        get_context().db,
        session["user_id"],
        payload.get("userId"),
        listing_id=payload.get("listingId"),
    )
    return respond(result)


@bp.route("/<string:chat_id>", methods=["GET"])
@login_required
def view_chat(chat_id):
    """Show a chat and its messages, oldest first."""
    db = get_context().db
    chat = raise_for_failure(ChatService.get_chat(db, chat_id, session["user_id"])).data
    return jsonify({"chat": chat, "messages": ChatService.get_messages(db, chat_id)})


@bp.route("/<string:chat_id>/messages", methods=["POST"])
@login_required
def send_message(chat_id):
    """Send a message and email the other participant about it."""
    text = (request.get_json(silent=True) or {}).get("message")
    sender_name = (g.user or {}).get("fullName") or "Someone"
    result = ChatService.send_message(
        get_context().db, chat_id, session["user_id"], text, sender_name=sender_name
    )
    raise_for_failure(result)

    recipient_email = result.data.get("recipientEmail")
    if recipient_email:
        send_chat_notification(
            current_app._get_current_object(),  # type: ignore[attr-defined]
            recipient_email,
            sender_name,
            text.strip(),
            chat_id,
        )
    return jsonify({"success": result.message, "id": result.id}), 201


@bp.route("/<string:chat_id>/seen", methods=["POST"])
@login_required
def mark_seen(chat_id):
    """Mark the other participant's messages as seen."""
    return respond(
        ChatService.mark_messages_seen(get_context().db, chat_id, session["user_id"])
    )
