"""OEM event schema."""

from collections.abc import Mapping

from pydantic import BaseModel

# Environment variable name -> (field name, placeholder when unset or empty)
EVENT_ENVIRONMENT = {
    "EVENT_NAME": ("event_name", "Unknown Event"),
    "SEVERITY": ("severity", "Unknown Severity"),
    "TARGET_NAME": ("target_name", "Unknown Target"),
    "TARGET_TYPE": ("target_type", "Unknown Type"),
    "TARGET_LIFECYCLE_STATUS": ("target_lifecycle_status", "Unknown Status"),
    "MESSAGE": ("message", "No details provided."),
}


class Event(BaseModel):
    """An Oracle Enterprise Manager alert passed to the notification script."""

    event_name: str = "Unknown Event"
    severity: str = "Unknown Severity"
    target_name: str = "Unknown Target"
    target_type: str = "Unknown Type"
    target_lifecycle_status: str = "Unknown Status"
    message: str = "No details provided."

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> "Event":
        """Build an event from OEM environment variables.

        Empty variables are treated like missing ones.
        """
        data = {}
        for env_name, (field_name, default) in EVENT_ENVIRONMENT.items():
            data[field_name] = environ.get(env_name) or default
        return cls(**data)

    def as_log_lines(self) -> list[str]:
        return [
            f"  {env_name}: {getattr(self, field_name)}"
            for env_name, (field_name, _) in EVENT_ENVIRONMENT.items()
        ]
