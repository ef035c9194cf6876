"""Log file and console handlers for a relay run."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Parent logger for every module in the package
PACKAGE_LOGGER = "oemnotify"


@contextmanager
def log_to_file(
    log_file: Path,
    console: Console | None = None,
    level: int = logging.DEBUG,
) -> Iterator[logging.Logger]:
    """Append package log records to a file (and the console) for one run.

    The log directory is created if needed. Handlers are flushed, detached
    and closed when the block exits, including on errors.
    """
    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(PACKAGE_LOGGER)
    previous_level = logger.level

    file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    handlers: list[logging.Handler] = [file_handler]
    if console is not None:
        console_handler = RichHandler(
            console=console,
            show_path=False,
            log_time_format=f"[{LOG_DATE_FORMAT}]",
        )
        handlers.append(console_handler)

    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)
    logger.setLevel(level)

    try:
        yield logger
    finally:
        for handler in handlers:
            handler.flush()
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(previous_level)
