"""Tests for processing a single event end to end."""

import pytest

from oemnotify.config import Settings
from oemnotify.errors import ConfigFileMissingError
from oemnotify.relay import load_config, run_notification

OEM_ENVIRONMENT = {
    "EVENT_NAME": "Tablespace full",
    "SEVERITY": "Critical",
    "TARGET_NAME": "PRODDB",
    "TARGET_TYPE": "oracle_database",
    "TARGET_LIFECYCLE_STATUS": "production",
    "MESSAGE": "Tablespace USERS is 98% full",
}


class TestLoadConfig:
    """Tests for load_config."""

    def test_loads_rules(self, write_config):
        config = load_config(write_config(), Settings())
        assert [r.index for r in config.rules] == [1, 2]
        assert config.smtp.server == "smtp.example.com"

    def test_respects_max_rules(self, write_config):
        config = load_config(write_config(), Settings(max_rules=1))
        assert [r.index for r in config.rules] == [1]


class TestRunNotification:
    """Tests for run_notification."""

    def test_all_matching_rules_send(self, write_config, transport):
        result = run_notification(write_config(), OEM_ENVIRONMENT, Settings(), transport)

        assert result.matched_rules == [1, 2]
        assert result.any_email_sent is True
        recipients = [r for _, r in transport.sent]
        assert recipients == [["dba@example.com", "oncall@example.com"], ["ops@example.com"]]
        priorities = [m["X-Priority"] for m, _ in transport.sent]
        assert priorities == ["1", "5"]

    def test_target_type_all_rule_sends_high_priority(self, write_config, transport):
        text = (
            "[SMTP]\nserver = relay\nport = 25\nsender = oem@example.com\n"
            "[RULES]\nrule1.condition.target_type = all\n"
            "rule1.action.recipients = ops@example.com\nrule1.action.priority = 1\n"
        )
        result = run_notification(
            write_config(text), {"TARGET_TYPE": "Database"}, Settings(), transport
        )
        assert result.matched_rules == [1]
        message, recipients = transport.sent[0]
        assert recipients == ["ops@example.com"]
        assert message["X-Priority"] == "1"
        assert message["Importance"] == "High"

    def test_first_match(self, write_config, transport):
        text = (
            "[SMTP]\nserver = relay\nport = 25\nsender = oem@example.com\n"
            "[RULES]\nevaluation_mode = first_match\n"
            "rule1.action.recipients = first@example.com\n"
            "rule2.action.recipients = second@example.com\n"
        )
        result = run_notification(write_config(text), OEM_ENVIRONMENT, Settings(), transport)
        assert result.matched_rules == [1]
        assert [r for _, r in transport.sent] == [["first@example.com"]]

    def test_no_match_logs_warning(self, write_config, transport, caplog):
        text = "[RULES]\nrule1.condition.target_type = host\nrule1.action.recipients = a@example.com\n"
        result = run_notification(write_config(text), OEM_ENVIRONMENT, Settings(), transport)
        assert result.any_rule_matched is False
        assert transport.sent == []
        assert "No rules matched for the event" in caplog.text

    def test_sendmail_disabled(self, write_config, transport):
        text = "[SENDMAIL]\nenable = FALSE\n[RULES]\nrule1.action.recipients = a@example.com\n"
        result = run_notification(write_config(text), OEM_ENVIRONMENT, Settings(), transport)
        assert result.any_email_sent is True
        assert transport.sent == []

    def test_incomplete_smtp_continues_with_next_rule(self, write_config, transport, caplog):
        caplog.set_level("INFO", logger="oemnotify")
        text = (
            "[SMTP]\nserver = relay\nsender = oem@example.com\n"
            "[RULES]\n"
            "rule1.action.recipients = a@example.com\n"
            "rule2.action.recipients = b@example.com\n"
        )
        result = run_notification(write_config(text), OEM_ENVIRONMENT, Settings(), transport)
        assert result.matched_rules == [1, 2]
        assert all(o.dispatched and not o.succeeded for o in result.outcomes)
        assert transport.sent == []
        assert "No email was sent" in caplog.text

    def test_debug_logs_event_details(self, write_config, transport, caplog):
        caplog.set_level("DEBUG", logger="oemnotify")
        run_notification(write_config(), OEM_ENVIRONMENT, Settings(), transport)
        assert "Event Details:" in caplog.text
        assert "  TARGET_NAME: PRODDB" in caplog.text

    def test_missing_config_evaluates_nothing(self, tmp_path, transport, monkeypatch):
        calls = []
        monkeypatch.setattr(
            "oemnotify.relay.evaluate_rules", lambda *args, **kwargs: calls.append(args)
        )
        with pytest.raises(ConfigFileMissingError):
            run_notification(tmp_path / "missing.ini", OEM_ENVIRONMENT, Settings(), transport)
        assert calls == []
        assert transport.sent == []
