"""Alert delivery for TradeAlerter."""

from .base import NotificationError, Notifier
from .email import EmailNotifier

__all__ = ["Notifier", "NotificationError", "EmailNotifier"]
