"""oem-notify configuration.

Two layers:

- ``Settings``: process-level options read from ``OEMNOTIFY_*`` environment
  variables with pydantic-settings (file locations, transport timeout).
- ``NotificationConfig``: the typed view of the INI configuration file
  (SMTP relay, sendmail switch, debug flag and the rule table).
"""

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from oemnotify.enums import EvaluationMode
from oemnotify.errors import ConfigIncompleteError
from oemnotify.ini import ConfigValues
from oemnotify.rules.table import build_rule_table
from oemnotify.schemas.rule import Rule


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="OEMNOTIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    config_file: Path = Field(
        default=Path("config/configurations.ini"),
        description="INI configuration file, relative to the working directory",
    )
    log_file: Path = Field(
        default=Path("logs/oem_notification.log"),
        description="Append-only log file, relative to the working directory",
    )
    smtp_timeout: float = Field(
        default=30.0,
        description="Timeout (seconds) for a single SMTP delivery",
    )
    max_rules: int | None = Field(
        default=None,
        description="Highest rule index considered. None = no limit.",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Use clear_settings_cache() to reload after environment changes.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache."""
    get_settings.cache_clear()


def _is_true(value: str | None) -> bool:
    return (value or "").lower() == "true"


def _is_false(value: str | None) -> bool:
    return (value or "").lower() == "false"


class SMTPConfig(BaseModel):
    """Mail relay settings from the [SMTP] section."""

    server: str = ""
    port: str = ""
    sender: str = ""
    starttls: bool = False
    username: str | None = None
    password: str | None = None

    @classmethod
    def from_section(cls, section: dict[str, str]) -> "SMTPConfig":
        return cls(
            server=section.get("server", ""),
            port=section.get("port", ""),
            sender=section.get("sender", ""),
            starttls=_is_true(section.get("starttls")),
            username=section.get("username") or None,
            password=section.get("password") or None,
        )

    def require(self) -> tuple[str, int, str]:
        """Return (server, port, sender), validating that all are usable.

        Raises:
            ConfigIncompleteError: If any required value is missing or the
                port is not a number
        """
        missing = [
            name for name in ("server", "port", "sender") if not getattr(self, name)
        ]
        if missing:
            raise ConfigIncompleteError(missing)
        try:
            port = int(self.port)
        except ValueError:
            raise ConfigIncompleteError(
                ["port"], f"SMTP port is not a number: '{self.port}'"
            ) from None
        return self.server, port, self.sender


class NotificationConfig(BaseModel):
    """Typed notification configuration built from the parsed INI file."""

    smtp: SMTPConfig = Field(default_factory=SMTPConfig)
    sendmail_enabled: bool = True
    debug: bool = False
    evaluation_mode: EvaluationMode = EvaluationMode.ALL_MATCH
    rules: list[Rule] = Field(default_factory=list)

    @classmethod
    def from_values(
        cls,
        values: ConfigValues,
        max_rules: int | None = None,
    ) -> "NotificationConfig":
        """Build the config from parsed INI values.

        Section names are case-sensitive: only [SMTP], [SENDMAIL], [DEBUG]
        and [RULES] are read.
        """
        rules_section = values.get("RULES", {})
        return cls(
            smtp=SMTPConfig.from_section(values.get("SMTP", {})),
            # Only an explicit "false" disables sending
            sendmail_enabled=not _is_false(values.get("SENDMAIL", {}).get("enable")),
            debug=_is_true(values.get("DEBUG", {}).get("debug")),
            evaluation_mode=EvaluationMode.parse(rules_section.get("evaluation_mode")),
            rules=build_rule_table(rules_section, max_rules=max_rules),
        )
