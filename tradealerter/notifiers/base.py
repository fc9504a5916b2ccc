"""Base notifier interface."""

from typing import Optional, Protocol


class Notifier(Protocol):
    """Protocol for alert delivery channels."""

    def send(
        self, text: str, subject: Optional[str] = None, html: Optional[str] = None
    ) -> None:
        """Deliver an alert.

        Raises:
            NotificationError: If the alert fails to send
        """
        ...


class NotificationError(Exception):
    """Raised when an alert fails to send."""

    pass
