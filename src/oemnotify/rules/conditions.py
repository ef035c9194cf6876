"""Rule condition matchers."""

from oemnotify.schemas.rule import WILDCARD


def is_wildcard(pattern: str | None) -> bool:
    """Empty patterns and "all" (any case) match every value."""
    return not pattern or pattern.lower() == WILDCARD


def match_equals(value: str, pattern: str, case_sensitive: bool = True) -> bool:
    """Match if value equals pattern exactly."""
    if not case_sensitive:
        return value.lower() == pattern.lower()
    return value == pattern


def match_field(value: str, pattern: str | None, case_sensitive: bool = True) -> bool:
    """Match a single condition field, honouring wildcards."""
    if is_wildcard(pattern):
        return True
    return match_equals(value, pattern, case_sensitive=case_sensitive)


# Condition field -> (event attribute, case sensitive)
CONDITION_FIELDS = {
    "target_name": ("target_name", True),
    "target_type": ("target_type", True),
    "lifecycle_status": ("target_lifecycle_status", False),
}
