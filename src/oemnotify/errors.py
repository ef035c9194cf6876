"""Exception types raised by the notification relay."""

from pathlib import Path


class OEMNotifyError(Exception):
    """Base class for relay errors."""


class ConfigFileMissingError(OEMNotifyError):
    """Raised when the configuration file does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Configuration file not found: {path}")


class ConfigIncompleteError(OEMNotifyError):
    """Raised when the [SMTP] section lacks settings required to send email."""

    def __init__(self, missing: list[str], reason: str | None = None):
        self.missing = missing
        message = reason or (
            "SMTP configuration is missing or incomplete "
            f"(missing: {', '.join(missing)}). "
            "Please check the [SMTP] section in your configuration file."
        )
        super().__init__(message)


class TransportError(OEMNotifyError):
    """Raised when the mail transport fails to deliver a message."""

    def __init__(self, recipients: list[str], reason: str):
        self.recipients = recipients
        self.reason = reason
        super().__init__(f"Failed to send email to {', '.join(recipients)}: {reason}")
