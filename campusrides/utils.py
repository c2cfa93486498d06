"""Utility functions for the application."""

import logging
import smtplib
import threading

from flask import current_app, render_template
from flask_mail import Message

from .core.constants import SMTP_AUTH_ERROR_CODE
from .extensions import mail

logger = logging.getLogger(__name__)


class EmailError(Exception):
    """Base class for email errors."""

    pass


def _deliver(msg):
    try:
        mail.send(msg)
    except smtplib.SMTPAuthenticationError as e:
        if e.smtp_code == SMTP_AUTH_ERROR_CODE:
            raise EmailError(
                "Authentication failed. The mail provider requires an app password. "
                "Please verify your MAIL_USERNAME and MAIL_PASSWORD settings."
            ) from e
        raise EmailError(f"SMTP Authentication failed: {e}") from e
    except Exception as e:
        raise EmailError(f"Failed to send email: {e}") from e


def send_email(to, subject, template=None, html=None, **kwargs):
    """Send an email rendered from ``template``, or with a prebuilt ``html`` body.

    Raises:
        EmailError: If sending the email fails.
    """
    if html is None:
        html = render_template(template, **kwargs)
    recipients = to if isinstance(to, (list, tuple)) else [to]
    msg = Message(
        subject,
        recipients=list(recipients),
        html=html,
        sender=current_app.config["MAIL_DEFAULT_SENDER"],
    )
    _deliver(msg)


def send_email_background(app, email_data):
    """Send an email in a background thread without waiting for delivery."""

    def task():
        with app.app_context():
            try:
                send_email(**email_data)
            except EmailError as e:
                logger.error(f"Email to {email_data.get('to')} failed: {e}")

    thread = threading.Thread(target=task, daemon=True)
    thread.start()
    return thread
