"""Parser for the INI-style notification configuration file.

The format is deliberately loose and mirrors what existing OEM notification
configs rely on:

- ``;`` and ``#`` start a comment anywhere on the line, including inside
  quoted values.
- Tabs, carriage returns and newlines are removed before the line is trimmed.
- Key dots are replaced with underscores (``rule1.action.priority`` becomes
  ``rule1_action_priority``).
- Values lose at most one trailing and one leading double quote, and are
  trimmed afterwards.
- Lines that are neither a section header nor a key/value pair are ignored.
"""

import logging
import re
from pathlib import Path

from oemnotify.errors import ConfigFileMissingError

logger = logging.getLogger(__name__)

SECTION_RE = re.compile(r"^\[(.*)\]$")
KEY_VALUE_RE = re.compile(r"^([^=]+)=(.*)$")

# Characters removed from every line before matching
_STRIPPED_CHARS = str.maketrans("", "", "\t\r\n")

ConfigValues = dict[str, dict[str, str]]


def clean_line(line: str) -> str:
    """Drop comments and control whitespace from a raw config line."""
    line = line.split(";", 1)[0]
    line = line.split("#", 1)[0]
    line = line.translate(_STRIPPED_CHARS)
    return line.strip()


def clean_value(value: str) -> str:
    """Strip one trailing and one leading double quote, then whitespace."""
    if value.endswith('"'):
        value = value[:-1]
    if value.startswith('"'):
        value = value[1:]
    return value.strip()


def parse_ini(text: str) -> ConfigValues:
    """Parse config text into a section -> key -> value mapping.

    Args:
        text: Raw file contents

    Returns:
        Mapping of section names to their key/value pairs. Keys defined before
        the first section header are dropped; duplicate keys keep the last value.
    """
    values: ConfigValues = {}
    section = ""

    for raw_line in text.split("\n"):
        line = clean_line(raw_line)

        section_match = SECTION_RE.match(line)
        if section_match:
            section = section_match.group(1)
            continue

        pair_match = KEY_VALUE_RE.match(line)
        if not pair_match:
            continue

        if not section:
            continue

        key = pair_match.group(1).replace(".", "_").strip()
        value = clean_value(pair_match.group(2))
        values.setdefault(section, {})[key] = value

    return values


def load_ini(path: Path) -> ConfigValues:
    """Read and parse a configuration file.

    Raises:
        ConfigFileMissingError: If the path does not point to a file
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigFileMissingError(path)

    logger.info(f"Parsing configuration file: {path}")
    # Undecodable bytes (e.g. Latin-1 comments) must not abort the run
    return parse_ini(path.read_bytes().decode("utf-8", errors="replace"))
