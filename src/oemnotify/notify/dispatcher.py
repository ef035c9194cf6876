"""Notification dispatcher: formats OEM alerts and hands them to the transport."""

import logging
from email.errors import HeaderParseError
from email.message import EmailMessage

from oemnotify.config import NotificationConfig
from oemnotify.enums import Priority
from oemnotify.errors import ConfigIncompleteError, TransportError
from oemnotify.notify.transport import SMTPTransport
from oemnotify.schemas.event import Event
from oemnotify.schemas.rule import Rule

logger = logging.getLogger(__name__)

SUBJECT_TEMPLATE = (
    "OEM Alert: {event_name} - {severity} on {target_name} ({target_lifecycle_status})"
)

BODY_TEMPLATE = """\
Oracle Enterprise Manager Event Notification

Event Name: {event_name}
Event Type: {severity}
Target: {target_name}
Target Type: {target_type}
Lifecycle Status: {target_lifecycle_status}

Details:
{message}

Please address this issue promptly."""


def resolve_priority(value: str | int | None) -> Priority:
    """Map a configured priority to a Priority. Unknown values are Normal."""
    text = str(value).strip() if value is not None else ""
    if text == "1":
        return Priority.HIGH
    if text == "5":
        return Priority.LOW
    return Priority.NORMAL


def normalize_recipients(recipients: str) -> str:
    """Convert a ';'-delimited recipient string to the comma form mail tools expect."""
    return recipients.replace(";", ",")


def split_recipients(recipients: str) -> list[str]:
    """Split a comma-delimited recipient string into envelope addresses."""
    return [r.strip() for r in recipients.split(",") if r.strip()]


def _single_line(value: str) -> str:
    return " ".join(value.splitlines())


def format_subject(event: Event) -> str:
    """Render the subject line. Line breaks in event fields become spaces."""
    fields = {name: _single_line(value) for name, value in event.model_dump().items()}
    return SUBJECT_TEMPLATE.format(**fields)


def format_body(event: Event) -> str:
    return BODY_TEMPLATE.format(**event.model_dump())


def build_message(
    sender: str,
    recipients: str,
    subject: str,
    body: str,
    priority: Priority,
) -> EmailMessage:
    """Build a plain-text email message with priority headers."""
    message = EmailMessage()
    message["From"] = sender
    message["To"] = recipients
    message["Subject"] = subject
    message["X-Priority"] = str(priority.value)
    message["Importance"] = priority.label
    message.set_content(body)
    return message


class NotificationDispatcher:
    """Sends one email per matched rule using the [SMTP] settings.

    Failures are logged and reported to the caller; they are never retried
    or raised.
    """

    def __init__(
        self,
        config: NotificationConfig,
        timeout: float = 30.0,
        transport: SMTPTransport | None = None,
    ):
        self.config = config
        self.timeout = timeout
        self.transport = transport

    def _get_transport(self, server: str, port: int) -> SMTPTransport:
        if self.transport is not None:
            return self.transport
        smtp = self.config.smtp
        return SMTPTransport(
            hostname=server,
            port=port,
            timeout=self.timeout,
            start_tls=smtp.starttls,
            username=smtp.username,
            password=smtp.password,
        )

    def dispatch(
        self,
        recipients: str,
        subject: str,
        body: str,
        priority: str | int | None = None,
    ) -> tuple[bool, str | None]:
        """Send a notification email.

        Args:
            recipients: ',' or ';'-delimited recipient addresses
            subject: Email subject
            body: Plain-text body
            priority: Configured priority (1, 3 or 5; anything else is Normal)

        Returns:
            Tuple of (success, error_message)
        """
        if not self.config.sendmail_enabled:
            logger.info(
                "Email sending is disabled (SENDMAIL_enable=false). "
                f"Skipping email to: {recipients}"
            )
            return True, None

        try:
            server, port, sender = self.config.smtp.require()
        except ConfigIncompleteError as e:
            logger.error(str(e))
            return False, str(e)

        resolved = resolve_priority(priority)
        logger.info(
            f"Sending email to: {recipients} with priority {priority or ''} "
            f"(X-Priority: {resolved.value})"
        )
        logger.debug(f"Subject: {subject}")

        recipient_list = normalize_recipients(recipients)
        logger.debug(f"recipients: {recipient_list}")

        envelope = split_recipients(recipient_list)
        if not envelope:
            logger.error(f"No valid recipients in: '{recipients}'")
            return False, "No recipients"

        try:
            message = build_message(sender, recipient_list, subject, body, resolved)
        except (ValueError, IndexError, AttributeError, HeaderParseError) as e:
            logger.error(f"Failed to build email to: {recipients} ({e!r})")
            return False, f"Invalid message headers: {e!r}"

        try:
            self._get_transport(server, port).send(message, envelope)
        except TransportError as e:
            logger.error(f"Failed to send email to: {recipients} ({e.reason})")
            return False, str(e)

        logger.info(f"Email successfully sent to: {recipients}")
        return True, None

    def notify(self, rule: Rule, event: Event) -> bool:
        """Send the notification for a matched rule. Returns True on success."""
        success, _ = self.dispatch(
            rule.action.recipients,
            format_subject(event),
            format_body(event),
            rule.action.priority,
        )
        return success
