"""oem-notify CLI."""

import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from oemnotify import __version__
from oemnotify.config import get_settings
from oemnotify.errors import ConfigFileMissingError
from oemnotify.log import log_to_file
from oemnotify.relay import load_config, run_notification
from oemnotify.rules.engine import evaluate_rules
from oemnotify.schemas.event import Event

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="oem-notify",
    help="oem-notify - Oracle Enterprise Manager email notification relay",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Configuration file (default: OEMNOTIFY_CONFIG_FILE or config/configurations.ini)",
)


@app.command()
def send(
    config: Path | None = ConfigOption,
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Log file (default: OEMNOTIFY_LOG_FILE or logs/oem_notification.log)"
    ),
    workdir: Path | None = typer.Option(
        None, "--workdir", "-w", help="Change to this directory before resolving relative paths"
    ),
):
    """Notify for the OEM event described by the environment.

    Reads EVENT_NAME, SEVERITY, TARGET_NAME, TARGET_TYPE,
    TARGET_LIFECYCLE_STATUS and MESSAGE. Exits non-zero only when the
    configuration file is missing or the working directory is unusable.
    """
    if workdir is not None:
        try:
            os.chdir(workdir)
        except OSError as e:
            err_console.print(f"[red]Failed to change to working directory: {workdir} ({e})[/red]")
            raise typer.Exit(1) from None

    settings = get_settings()
    config_path = config or settings.config_file

    with log_to_file(log_file or settings.log_file, console=err_console):
        try:
            run_notification(config_path, os.environ, settings)
        except ConfigFileMissingError as e:
            logger.error(str(e))
            raise typer.Exit(1) from None


@app.command()
def check_config(config: Path | None = ConfigOption):
    """Parse the configuration file and show the rule table."""
    settings = get_settings()
    config_path = config or settings.config_file

    try:
        notification_config = load_config(config_path, settings)
    except ConfigFileMissingError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from None

    smtp = notification_config.smtp
    table = Table(title="Notification Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("SMTP server", smtp.server or "[red]missing[/red]")
    table.add_row("SMTP port", smtp.port or "[red]missing[/red]")
    table.add_row("SMTP sender", smtp.sender or "[red]missing[/red]")
    table.add_row("SMTP password", "********" if smtp.password else "")
    table.add_row("Sending enabled", str(notification_config.sendmail_enabled))
    table.add_row("Debug", str(notification_config.debug))
    table.add_row("Evaluation mode", notification_config.evaluation_mode.value)
    console.print(table)

    if not notification_config.rules:
        console.print("[yellow]No rules configured[/yellow]")
        return

    rules_table = Table(title="Rules")
    rules_table.add_column("Rule", style="cyan")
    rules_table.add_column("Target Name")
    rules_table.add_column("Target Type")
    rules_table.add_column("Lifecycle Status")
    rules_table.add_column("Recipients")
    rules_table.add_column("Priority")
    for rule in notification_config.rules:
        rules_table.add_row(
            rule.name,
            rule.condition.target_name or "all",
            rule.condition.target_type or "all",
            rule.condition.lifecycle_status or "all",
            rule.action.recipients or "[dim]inactive[/dim]",
            rule.action.priority or "3",
        )
    console.print(rules_table)


@app.command()
def match(
    config: Path | None = ConfigOption,
    target_name: str | None = typer.Option(None, envvar="TARGET_NAME"),
    target_type: str | None = typer.Option(None, envvar="TARGET_TYPE"),
    lifecycle_status: str | None = typer.Option(None, envvar="TARGET_LIFECYCLE_STATUS"),
):
    """Show which rules match an event, without sending email."""
    settings = get_settings()
    config_path = config or settings.config_file

    try:
        notification_config = load_config(config_path, settings)
    except ConfigFileMissingError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from None

    # Unset or empty values fall back to the same placeholders as `send`
    event = Event.from_environ(
        {
            "TARGET_NAME": target_name or "",
            "TARGET_TYPE": target_type or "",
            "TARGET_LIFECYCLE_STATUS": lifecycle_status or "",
        }
    )
    result = evaluate_rules(
        event, notification_config.rules, mode=notification_config.evaluation_mode
    )

    if not result.any_rule_matched:
        console.print("[yellow]No rules matched[/yellow]")
        return

    for rule_index in result.matched_rules:
        console.print(f"[green]Matched rule{rule_index}[/green]")
    if result.stopped_early:
        console.print("[dim]Stopped after first match (evaluation_mode=first_match)[/dim]")


@app.command()
def version():
    """Show version information."""
    console.print(f"oem-notify version {__version__}")


if __name__ == "__main__":
    app()
