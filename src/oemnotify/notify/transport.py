"""SMTP mail transport."""

import asyncio
import logging
from email.message import EmailMessage

import aiosmtplib

from oemnotify.errors import TransportError

logger = logging.getLogger(__name__)


class SMTPTransport:
    """Delivers messages to an SMTP relay, one connection per message."""

    def __init__(
        self,
        hostname: str,
        port: int,
        timeout: float = 30.0,
        start_tls: bool = False,
        username: str | None = None,
        password: str | None = None,
    ):
        self.hostname = hostname
        self.port = port
        self.timeout = timeout
        self.start_tls = start_tls
        self.username = username
        self.password = password

    async def send_async(self, message: EmailMessage, recipients: list[str]) -> None:
        """Send a message to the relay.

        Raises:
            TransportError: If the relay cannot be reached, times out, or
                rejects the message
        """
        try:
            errors, response = await aiosmtplib.send(
                message,
                recipients=recipients,
                hostname=self.hostname,
                port=self.port,
                username=self.username,
                password=self.password,
                start_tls=self.start_tls,
                timeout=self.timeout,
            )
        except aiosmtplib.SMTPException as e:
            raise TransportError(recipients, str(e)) from e
        except OSError as e:
            raise TransportError(recipients, f"Connection error: {e}") from e

        if errors:
            logger.warning(f"Relay refused some recipients: {', '.join(errors)}")
        logger.debug(f"Relay response: {response}")

    def send(self, message: EmailMessage, recipients: list[str]) -> None:
        """Send a message synchronously (blocks until delivered or timed out)."""
        asyncio.run(self.send_async(message, recipients))
