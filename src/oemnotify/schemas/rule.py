"""Rule schemas for the notification rule table."""

from pydantic import BaseModel, Field

# Condition values that match any event value (compared case-insensitively)
WILDCARD = "all"


class RuleCondition(BaseModel):
    """Condition triple; empty or "all" matches anything."""

    target_name: str = ""
    target_type: str = ""
    lifecycle_status: str = ""


class RuleAction(BaseModel):
    """What to do when a rule matches."""

    recipients: str = Field(default="", description="',' or ';'-delimited email addresses")
    priority: str = Field(default="", description="1 (High), 3 (Normal) or 5 (Low)")

    @property
    def recipient_list(self) -> list[str]:
        """Individual addresses, trimmed, without empty entries."""
        addresses = self.recipients.replace(";", ",").split(",")
        return [r.strip() for r in addresses if r.strip()]


class Rule(BaseModel):
    """A numbered notification rule."""

    index: int = Field(..., ge=1)
    condition: RuleCondition = Field(default_factory=RuleCondition)
    action: RuleAction = Field(default_factory=RuleAction)

    @property
    def name(self) -> str:
        return f"rule{self.index}"

    @property
    def is_active(self) -> bool:
        """Rules without recipients are inert and never evaluated."""
        return bool(self.action.recipients)
