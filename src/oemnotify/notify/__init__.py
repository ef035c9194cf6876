"""Email notification dispatch."""

from oemnotify.notify.dispatcher import NotificationDispatcher
from oemnotify.notify.transport import SMTPTransport

__all__ = ["NotificationDispatcher", "SMTPTransport"]
