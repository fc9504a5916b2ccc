"""Email notifier implementation using SMTP."""

import logging
import smtplib
from email.message import EmailMessage
from typing import List, Optional

from .base import NotificationError

logger = logging.getLogger(__name__)


class EmailNotifier:
    """Sends trading alerts via SMTP email."""

    def __init__(
        self,
        host: str,
        port: int,
        from_address: str,
        to_addresses: List[str],
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        subject_prefix: str = "TradeAlerter",
        timeout: float = 30,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_address = from_address
        self.to_addresses = to_addresses
        self.use_tls = use_tls
        self.subject_prefix = subject_prefix or "TradeAlerter"
        self.timeout = timeout

    def build_message(
        self, text: str, subject: Optional[str] = None, html: Optional[str] = None
    ) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = f"{self.subject_prefix} | {subject or 'Trading Alert'}"
        message["From"] = self.from_address
        message["To"] = ", ".join(self.to_addresses)
        message.set_content(text or "")
        if html:
            message.add_alternative(html, subtype="html")
        return message

    def send(
        self, text: str, subject: Optional[str] = None, html: Optional[str] = None
    ) -> None:
        """Send a plain-text alert (with optional HTML alternative).

        Args:
            text: Message body to send (plain text).
            subject: Optional subject; the prefix is applied automatically.
            html: Optional HTML body for multipart/alternative delivery.

        Raises:
            NotificationError: If sending fails.
        """
        if not self.to_addresses:
            raise NotificationError(
                "Email notification failed: no recipients configured"
            )

        message = self.build_message(text, subject, html)
        logger.debug(
            f"Sending email from {self.from_address} to "
            f"{message['To']} via {self.host}:{self.port}"
        )

        try:
            refused = self._deliver(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(
                f"Failed to send email via {self.host}:{self.port} "
                f"to {message['To']}: {exc}"
            )
            raise NotificationError(f"Email notification failed: {exc}") from exc

        if refused:
            logger.warning(f"SMTP server refused recipients: {', '.join(refused)}")
        delivered = len(self.to_addresses) - len(refused)
        logger.info(f"Email alert sent to {delivered} recipient(s)")

    def _deliver(self, message: EmailMessage) -> List[str]:
        """Hand a message to the SMTP relay; returns the refused addresses.

        smtplib raises SMTPRecipientsRefused when every recipient is refused,
        so a non-empty return means partial delivery.
        """
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
            return sorted(server.send_message(message) or {})
