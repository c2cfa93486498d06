"""Routes for the notifications blueprint."""

from flask import current_app, jsonify, request

from campusrides.auth.decorators import login_required
from campusrides.errors import ValidationError
from campusrides.utils import EmailError, send_email

from . import bp
from .services import notify_ride_booking, send_chat_notification


@bp.route("/send-email", methods=["POST"])
@login_required
def send_email_route():
    """Send a prebuilt HTML email."""
    payload = request.get_json(silent=True) or {}
    to = payload.get("to")
    subject = payload.get("subject")
    html = payload.get("html")
    if not to or not subject or not html:
        raise ValidationError("to, subject and html are required.")

    try:
        send_email(to=to, subject=subject, html=html)
    except EmailError as e:
        current_app.logger.error(f"Error sending email to {to}: {e}")
        return jsonify({"error": str(e)}), 502
    return jsonify({"status": "sent"})


@bp.route("/notify/booking", methods=["POST"])
@login_required
def notify_booking():
    """Email the driver and passenger of a new booking."""
    payload = request.get_json(silent=True) or {}
    owner_email = payload.get("ownerEmail")
    passenger_email = payload.get("passengerEmail")
    if not owner_email or not passenger_email:
        raise ValidationError("ownerEmail and passengerEmail are required.")

    notify_ride_booking(
        current_app._get_current_object(),  # type: ignore[attr-defined]
        payload.get("rideDetails") or {},
        owner_email,
        passenger_email,
    )
    return jsonify({"status": "queued"}), 202


@bp.route("/notify/chat", methods=["POST"])
@login_required
def notify_chat():
    """Email a user about a new chat message."""
    payload = request.get_json(silent=True) or {}
    to = payload.get("to")
    chat_id = payload.get("chatId")
    if not to or not chat_id:
        raise ValidationError("to and chatId are required.")

    send_chat_notification(
        current_app._get_current_object(),  # type: ignore[attr-defined]
        to,
        payload.get("senderName") or "Someone",
        payload.get("message") or "",
        chat_id,
    )
    return jsonify({"status": "queued"}), 202
