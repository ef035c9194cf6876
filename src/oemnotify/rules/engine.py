"""Rules engine for OEM events."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from oemnotify.enums import EvaluationMode
from oemnotify.rules.conditions import CONDITION_FIELDS, match_field
from oemnotify.schemas.event import Event
from oemnotify.schemas.rule import Rule

logger = logging.getLogger(__name__)

# Called for each matched rule; returns True if the notification was sent
Notifier = Callable[[Rule, Event], bool]


@dataclass
class RuleOutcome:
    """Result of evaluating one active rule."""

    rule_index: int
    matched: bool
    dispatched: bool = False
    succeeded: bool = False


@dataclass
class RuleEvaluationResult:
    """Result of evaluating the rule table for an event."""

    outcomes: list[RuleOutcome] = field(default_factory=list)
    stopped_early: bool = False

    @property
    def matched_rules(self) -> list[int]:
        return [o.rule_index for o in self.outcomes if o.matched]

    @property
    def any_rule_matched(self) -> bool:
        """Check if at least one rule matched the event."""
        return any(o.matched for o in self.outcomes)

    @property
    def any_email_sent(self) -> bool:
        """Check if at least one notification was sent successfully."""
        return any(o.succeeded for o in self.outcomes)


def evaluate_rule(rule: Rule, event: Event) -> bool:
    """Evaluate a single rule's condition against an event.

    All three condition fields must match. Mismatches are logged at debug level.
    """
    matched = True
    for condition_field, (event_field, case_sensitive) in CONDITION_FIELDS.items():
        expected = getattr(rule.condition, condition_field)
        found = getattr(event, event_field)
        if not match_field(found, expected, case_sensitive=case_sensitive):
            logger.debug(
                f"Rule {rule.index}: {condition_field} mismatch - "
                f"expected: '{expected}', found: '{found}'"
            )
            matched = False
    return matched


def evaluate_rules(
    event: Event,
    rules: list[Rule],
    mode: EvaluationMode = EvaluationMode.ALL_MATCH,
    notify: Notifier | None = None,
) -> RuleEvaluationResult:
    """Evaluate rules in index order and notify for each match.

    Rules are evaluated in ascending index order:
    1. Rules without recipients are skipped and produce no outcome
    2. A matching rule triggers notify(rule, event)
    3. In first_match mode, evaluation stops after the first matching rule,
       whether or not its notification succeeded

    Args:
        event: Event to match
        rules: Rule table
        mode: Evaluation mode
        notify: Notification callback; None evaluates without dispatching

    Returns:
        RuleEvaluationResult with one outcome per evaluated rule
    """
    result = RuleEvaluationResult()

    for rule in sorted(rules, key=lambda r: r.index):
        if not rule.is_active:
            logger.debug(f"Rule {rule.index} skipped: action recipients are undefined.")
            continue

        logger.debug(f"Evaluating Rule {rule.index}:")
        logger.debug(
            f"  Condition - target_name: '{rule.condition.target_name}', "
            f"target_type: '{rule.condition.target_type}', "
            f"lifecycle_status: '{rule.condition.lifecycle_status}'"
        )
        logger.debug(
            f"  Action - recipients: '{rule.action.recipients}', "
            f"priority: '{rule.action.priority}'"
        )

        outcome = RuleOutcome(rule_index=rule.index, matched=evaluate_rule(rule, event))
        result.outcomes.append(outcome)

        if not outcome.matched:
            continue

        logger.info(f"Rule matched: {rule.name}")
        if notify is not None:
            outcome.dispatched = True
            outcome.succeeded = notify(rule, event)

        if mode == EvaluationMode.FIRST_MATCH:
            logger.info(f"Evaluation mode is first_match. Stopping after {rule.name}.")
            result.stopped_early = True
            break

    logger.debug(
        f"Rule evaluation complete: {len(result.outcomes)} evaluated, "
        f"matched={result.matched_rules}"
    )
    return result
