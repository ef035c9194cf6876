"""Relay one OEM event: load config, match rules, send notifications."""

import logging
from collections.abc import Mapping
from pathlib import Path

from oemnotify.config import NotificationConfig, Settings, get_settings
from oemnotify.ini import load_ini
from oemnotify.notify.dispatcher import NotificationDispatcher
from oemnotify.notify.transport import SMTPTransport
from oemnotify.rules.engine import RuleEvaluationResult, evaluate_rules
from oemnotify.schemas.event import Event

logger = logging.getLogger(__name__)


def load_config(config_path: Path, settings: Settings | None = None) -> NotificationConfig:
    """Load and type the notification config file.

    Raises:
        ConfigFileMissingError: If the file does not exist
    """
    settings = settings or get_settings()
    values = load_ini(config_path)
    return NotificationConfig.from_values(values, max_rules=settings.max_rules)


def run_notification(
    config_path: Path,
    environ: Mapping[str, str],
    settings: Settings | None = None,
    transport: SMTPTransport | None = None,
) -> RuleEvaluationResult:
    """Process a single OEM event end to end.

    Args:
        config_path: INI configuration file
        environ: Environment holding the OEM event variables
        settings: Application settings
        transport: Optional transport override (defaults to SMTP from config)

    Returns:
        RuleEvaluationResult for the event

    Raises:
        ConfigFileMissingError: If the config file does not exist. No rule is
            evaluated in that case.
    """
    settings = settings or get_settings()
    config = load_config(config_path, settings)
    event = Event.from_environ(environ)

    if config.debug:
        logger.debug("Event Details:")
        for line in event.as_log_lines():
            logger.debug(line)

    dispatcher = NotificationDispatcher(
        config, timeout=settings.smtp_timeout, transport=transport
    )

    logger.info("Applying notification rules...")
    result = evaluate_rules(
        event,
        config.rules,
        mode=config.evaluation_mode,
        notify=dispatcher.notify,
    )

    if not result.any_rule_matched:
        logger.warning("No rules matched for the event. Check your configurations and rules.")

    if not result.any_email_sent:
        logger.info("No email was sent. Email sending is either disabled or no rules matched.")

    return result
