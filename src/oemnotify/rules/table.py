"""Build the ordered rule table from the [RULES] config section."""

import logging
import re

from oemnotify.schemas.rule import Rule, RuleAction, RuleCondition

logger = logging.getLogger(__name__)

# Dots in keys are already underscores at this point (see oemnotify.ini)
RULE_KEY_RE = re.compile(
    r"^rule(?P<index>[1-9][0-9]*)_"
    r"(?P<field>condition_target_name|condition_target_type|condition_lifecycle_status"
    r"|action_recipients|action_priority)$"
)


def build_rule_table(section: dict[str, str], max_rules: int | None = None) -> list[Rule]:
    """Group rule<N>_* keys into Rule records ordered by N.

    Args:
        section: Key/value pairs of the [RULES] section
        max_rules: Optional highest index to keep; higher rules are dropped

    Returns:
        Rules in ascending index order. Rules without recipients are kept
        (they are skipped at evaluation time).
    """
    fields_by_index: dict[int, dict[str, str]] = {}

    for key, value in section.items():
        match = RULE_KEY_RE.match(key)
        if not match:
            continue
        index = int(match.group("index"))
        fields_by_index.setdefault(index, {})[match.group("field")] = value

    rules = []
    for index in sorted(fields_by_index):
        if max_rules is not None and index > max_rules:
            logger.debug(f"Rule {index} ignored: index exceeds max_rules={max_rules}")
            continue
        fields = fields_by_index[index]
        rules.append(
            Rule(
                index=index,
                condition=RuleCondition(
                    target_name=fields.get("condition_target_name", ""),
                    target_type=fields.get("condition_target_type", ""),
                    lifecycle_status=fields.get("condition_lifecycle_status", ""),
                ),
                action=RuleAction(
                    recipients=fields.get("action_recipients", ""),
                    priority=fields.get("action_priority", ""),
                ),
            )
        )

    return rules
