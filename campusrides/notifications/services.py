"""Email notifications for bookings and chat messages."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from campusrides.utils import send_email_background

if TYPE_CHECKING:
    from flask import Flask


def notify_ride_booking(
    app: Flask, ride_details: dict[str, Any], owner_email: str, passenger_email: str
) -> None:
    """Tell the driver and the passenger about a new booking.

    Both emails are sent in the background; failures are only logged.
    """
    send_email_background(
        app,
        {
            "to": owner_email,
            "subject": "New Booking on Your Ride",
            "template": "email/ride_booking.html",
            "ride": ride_details,
            "role": "driver",
        },
    )
    send_email_background(
        app,
        {
            "to": passenger_email,
            "subject": "Your Ride Booking Confirmation",
            "template": "email/ride_booking.html",
            "ride": ride_details,
            "role": "passenger",
        },
    )


def send_chat_notification(
    app: Flask, to: str, sender_name: str, message: str, chat_id: str
) -> None:
    """Email a user that someone sent them a chat message."""
    app_url = (app.config.get("APP_URL") or "").rstrip("/")
    send_email_background(
        app,
        {
            "to": to,
            "subject": f"New message from {sender_name}",
            "template": "email/chat_notification.html",
            "sender_name": sender_name,
            "message": message,
            "chat_url": f"{app_url}/chat/{chat_id}",
        },
    )
