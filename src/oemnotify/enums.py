"""Enum types for evaluation modes and notification priorities."""

from enum import Enum


class EvaluationMode(str, Enum):
    """How many rules may fire for one event."""

    FIRST_MATCH = "first_match"
    ALL_MATCH = "all_match"

    @classmethod
    def parse(cls, value: str | None) -> "EvaluationMode":
        """Parse a config value; anything other than first_match means all_match."""
        if value and value.lower() == cls.FIRST_MATCH.value:
            return cls.FIRST_MATCH
        return cls.ALL_MATCH


class Priority(int, Enum):
    """Email priority, valued as the X-Priority header number."""

    HIGH = 1
    NORMAL = 3
    LOW = 5

    @property
    def label(self) -> str:
        return self.name.capitalize()
