"""Pydantic schemas for rules and events."""

from oemnotify.schemas.event import Event
from oemnotify.schemas.rule import Rule, RuleAction, RuleCondition

__all__ = ["Event", "Rule", "RuleAction", "RuleCondition"]
