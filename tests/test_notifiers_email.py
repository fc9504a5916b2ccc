"""Tests for EmailNotifier."""

import logging
import smtplib
from typing import Any

import pytest

from tradealerter.notifiers import EmailNotifier, NotificationError


def _notifier(**kwargs: Any) -> EmailNotifier:
    options = {
        "host": "smtp.example.com",
        "port": 587,
        "from_address": "alerts@example.com",
        "to_addresses": ["desk@example.com"],
    }
    options.update(kwargs)
    return EmailNotifier(**options)


class TestEmailNotifier:
    """Email notifier tests."""

    def test_send_success(self, mocker: Any) -> None:
        """Ensure email sends with TLS and no auth when not provided."""
        smtp_mock = mocker.patch("smtplib.SMTP")
        conn_mock = smtp_mock.return_value.__enter__.return_value

        _notifier(use_tls=True).send("Hello", subject="Digest")

        smtp_mock.assert_called_once_with("smtp.example.com", 587, timeout=30)
        conn_mock.starttls.assert_called_once()
        conn_mock.login.assert_not_called()
        conn_mock.send_message.assert_called_once()

    def test_send_with_auth(self, mocker: Any) -> None:
        """Ensure SMTP auth is used when credentials provided."""
        smtp_mock = mocker.patch("smtplib.SMTP")
        conn_mock = smtp_mock.return_value.__enter__.return_value

        _notifier(username="user", password="pass", use_tls=False).send("Hello")

        conn_mock.starttls.assert_not_called()
        conn_mock.login.assert_called_once_with("user", "pass")

    def test_send_with_html(self, mocker: Any) -> None:
        """Ensure multipart/alternative is created when HTML is provided."""
        smtp_mock = mocker.patch("smtplib.SMTP")
        conn_mock = smtp_mock.return_value.__enter__.return_value

        _notifier().send(text="Plain", html="<p>HTML</p>")

        sent_msg = conn_mock.send_message.call_args.args[0]
        assert sent_msg.is_multipart()
        parts = sent_msg.get_payload()
        assert [p.get_content_type() for p in parts] == ["text/plain", "text/html"]

    def test_subject_prefix(self) -> None:
        message = _notifier(subject_prefix="Gas Desk").build_message(
            "Body", subject="Trading Alert: 2 Pipeline Notices Detected"
        )

        assert message["Subject"] == (
            "Gas Desk | Trading Alert: 2 Pipeline Notices Detected"
        )
        assert message["From"] == "alerts@example.com"

    def test_default_subject_and_recipients(self) -> None:
        notifier = _notifier(to_addresses=["a@example.com", "b@example.com"])

        message = notifier.build_message("Body")

        assert message["Subject"] == "TradeAlerter | Trading Alert"
        assert message["To"] == "a@example.com, b@example.com"

    def test_send_no_recipients(self) -> None:
        """Raise when no recipients configured."""
        with pytest.raises(NotificationError, match="no recipients configured"):
            _notifier(to_addresses=[]).send("Hello")

    def test_smtp_failure_raises(self, mocker: Any) -> None:
        smtp_mock = mocker.patch("smtplib.SMTP")
        conn_mock = smtp_mock.return_value.__enter__.return_value
        conn_mock.send_message.side_effect = smtplib.SMTPException("rejected")

        with pytest.raises(NotificationError, match="rejected"):
            _notifier().send("Hello")

    def test_connection_failure_raises(self, mocker: Any) -> None:
        mocker.patch("smtplib.SMTP", side_effect=OSError("connection refused"))

        with pytest.raises(NotificationError, match="connection refused"):
            _notifier().send("Hello")

    def test_partial_refusal_logged(self, mocker: Any, caplog) -> None:
        smtp_mock = mocker.patch("smtplib.SMTP")
        conn_mock = smtp_mock.return_value.__enter__.return_value
        conn_mock.send_message.return_value = {
            "risk@example.com": (550, b"No such user")
        }
        notifier = _notifier(to_addresses=["desk@example.com", "risk@example.com"])

        with caplog.at_level(logging.INFO, logger="tradealerter.notifiers.email"):
            notifier.send("Hello")

        assert "refused recipients: risk@example.com" in caplog.text
        assert "sent to 1 recipient(s)" in caplog.text

    def test_all_recipients_refused_raises(self, mocker: Any) -> None:
        smtp_mock = mocker.patch("smtplib.SMTP")
        conn_mock = smtp_mock.return_value.__enter__.return_value
        conn_mock.send_message.side_effect = smtplib.SMTPRecipientsRefused(
            {"desk@example.com": (550, b"No such user")}
        )

        with pytest.raises(NotificationError):
            _notifier().send("Hello")
