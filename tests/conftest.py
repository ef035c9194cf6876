"""Pytest configuration and fixtures for oem-notify tests."""

from collections.abc import Callable
from email.message import EmailMessage
from pathlib import Path

import pytest

from oemnotify.config import NotificationConfig, SMTPConfig, clear_settings_cache
from oemnotify.errors import TransportError

SAMPLE_CONFIG = """\
[SMTP]
server = smtp.example.com
port = 25
sender = oem@example.com

[SENDMAIL]
enable = true

[DEBUG]
debug = true

[RULES]
evaluation_mode = all_match
; ";" starts a comment, so multiple recipients are comma-separated
rule1.condition.target_name = all
rule1.condition.target_type = oracle_database
rule1.condition.lifecycle_status = Production
rule1.action.recipients = dba@example.com,oncall@example.com
rule1.action.priority = 1

rule2.condition.target_type = all
rule2.action.recipients = ops@example.com
rule2.action.priority = 5
"""


class FakeTransport:
    """Records messages instead of talking to an SMTP relay."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[tuple[EmailMessage, list[str]]] = []

    def send(self, message: EmailMessage, recipients: list[str]) -> None:
        if self.fail:
            raise TransportError(recipients, "relay unavailable")
        self.sent.append((message, recipients))


@pytest.fixture(autouse=True)
def _clear_settings(monkeypatch):
    """Isolate tests from OEMNOTIFY_* variables and cached settings."""
    for name in ("CONFIG_FILE", "LOG_FILE", "SMTP_TIMEOUT", "MAX_RULES"):
        monkeypatch.delenv(f"OEMNOTIFY_{name}", raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    """Write config text to a temporary configurations.ini."""

    def _write(text: str = SAMPLE_CONFIG) -> Path:
        path = tmp_path / "config" / "configurations.ini"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def smtp_config() -> NotificationConfig:
    """Config with a complete [SMTP] section and no rules."""
    return NotificationConfig(
        smtp=SMTPConfig(server="smtp.example.com", port="25", sender="oem@example.com"),
    )


@pytest.fixture
def failing_transport() -> FakeTransport:
    return FakeTransport(fail=True)
