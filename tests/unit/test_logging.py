"""Unit tests for botagent.logging_config and botagent.logger."""

import structlog
from structlog.testing import capture_logs

from botagent import logging_config
from botagent.config import LoggingSettings
from botagent.logger import get_logger, log_with_context
from botagent.logging_config import (
    MAX_LOGGED_USER_AGENT,
    add_timestamp,
    truncate_user_agent,
)


class TestProcessors:
    def test_add_timestamp(self):
        event = add_timestamp(None, "info", {"event": "x"})
        assert event["timestamp"].endswith("+00:00")

    def test_long_user_agent_truncated(self):
        event = truncate_user_agent(None, "info", {"user_agent": "a" * 1000})
        assert len(event["user_agent"]) == MAX_LOGGED_USER_AGENT + 3
        assert event["user_agent"].endswith("...")

    def test_short_user_agent_untouched(self):
        event = truncate_user_agent(None, "info", {"user_agent": "curl/8.4.0"})
        assert event["user_agent"] == "curl/8.4.0"

    def test_missing_user_agent_untouched(self):
        assert truncate_user_agent(None, "info", {"event": "x"}) == {"event": "x"}


class TestSetupLogging:
    def _capture_configure(self, monkeypatch):
        calls = []
        monkeypatch.setattr(
            logging_config.structlog, "configure", lambda **kw: calls.append(kw)
        )
        monkeypatch.setattr(logging_config, "configure_stdlib_logging", lambda level: None)
        return calls

    def test_json_renderer(self, monkeypatch):
        calls = self._capture_configure(monkeypatch)
        logging_config.setup_logging(LoggingSettings(log_format="json"))
        processors = calls[0]["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert truncate_user_agent in processors

    def test_console_renderer(self, monkeypatch):
        calls = self._capture_configure(monkeypatch)
        logging_config.setup_logging(LoggingSettings(log_format="console"))
        assert isinstance(calls[0]["processors"][-1], structlog.dev.ConsoleRenderer)

    def test_defaults_to_env_settings(self, monkeypatch):
        monkeypatch.setenv("BOTAGENT_LOG_FORMAT", "json")
        calls = self._capture_configure(monkeypatch)
        logging_config.setup_logging()
        assert isinstance(calls[0]["processors"][-1], structlog.processors.JSONRenderer)


class TestLogger:
    def test_bound_context_is_emitted(self):
        with capture_logs() as logs:
            log = log_with_context(get_logger("botagent.test"), source="p.json")
            log.info("patterns_loaded", count=3)
        assert logs == [
            {"event": "patterns_loaded", "log_level": "info", "source": "p.json", "count": 3}
        ]
