"""Tests for email sending errors."""

import smtplib
import unittest
from unittest.mock import patch

from campusrides import create_app
from campusrides.utils import EmailError, send_email, send_email_background


class EmailErrorTestCase(unittest.TestCase):
    def setUp(self):
        self.app = create_app({"TESTING": True, "MAIL_SUPPRESS_SEND": False})
        self.app_context = self.app.app_context()
        self.app_context.push()

    def tearDown(self):
        self.app_context.pop()

    @patch("campusrides.utils.mail.send")
    def test_send_email_app_password_required(self, mock_send):
        """Test that EmailError is raised with specific message for 534 error."""
        mock_send.side_effect = smtplib.SMTPAuthenticationError(
            534, b"5.7.9 Application-specific password required."
        )

        with self.assertRaises(EmailError) as cm:
            send_email("test@example.com", "Subject", html="<p>Hi</p>")

        self.assertIn("app password", str(cm.exception))

    @patch("campusrides.utils.mail.send")
    def test_send_email_other_auth_error(self, mock_send):
        mock_send.side_effect = smtplib.SMTPAuthenticationError(535, b"Bad login")

        with self.assertRaises(EmailError) as cm:
            send_email("test@example.com", "Subject", html="<p>Hi</p>")

        self.assertIn("SMTP Authentication failed", str(cm.exception))

    @patch("campusrides.utils.mail.send")
    def test_send_email_generic_error(self, mock_send):
        """Test that EmailError is raised for other errors."""
        mock_send.side_effect = Exception("Some other error")

        with self.assertRaises(EmailError) as cm:
            send_email("test@example.com", "Subject", html="<p>Hi</p>")

        self.assertIn("Failed to send email", str(cm.exception))
        self.assertIn("Some other error", str(cm.exception))

    @patch("campusrides.utils.mail.send")
    def test_send_email_renders_template(self, mock_send):
        send_email(
            ["a@example.com", "b@example.com"],
            "New message from Sam",
            template="email/chat_notification.html",
            sender_name="Sam",
            message="Running late",
            chat_url="http://localhost:3000/chat/c1",
        )

        msg = mock_send.call_args[0][0]
        self.assertEqual(msg.recipients, ["a@example.com", "b@example.com"])
        self.assertIn("Running late", msg.html)
        self.assertIn("http://localhost:3000/chat/c1", msg.html)
        self.assertIn("notifications@campusrides.com", str(msg.sender))

    @patch("campusrides.utils.mail.send")
    def test_background_send_logs_failures(self, mock_send):
        mock_send.side_effect = Exception("down")

        with self.assertLogs("campusrides.utils", level="ERROR"):
            thread = send_email_background(
                self.app, {"to": "a@example.com", "subject": "Hi", "html": "<p/>"}
            )
            thread.join(timeout=5)


class MailConfigTestCase(unittest.TestCase):
    @patch.dict(
        "os.environ",
        {"MAIL_USERNAME": '"rides@example.edu"', "MAIL_PASSWORD": "'abcd efgh ijkl'"},
    )
    def test_mail_credentials_are_cleaned(self):
        app = create_app({"TESTING": True})

        self.assertEqual(app.config["MAIL_USERNAME"], "rides@example.edu")
        self.assertEqual(app.config["MAIL_PASSWORD"], "abcdefghijkl")


if __name__ == "__main__":
    unittest.main()
