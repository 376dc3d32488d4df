"""Tests for logging configuration helpers."""

import logging

import structlog

from shipping.utils.logging import (
    REDACTED,
    add_context,
    clear_context,
    get_log_level,
    redact_secrets,
    setup_stdlib_logging,
    use_json_logs,
)


class TestRedactSecrets:
    def test_masks_credentials(self):
        event = redact_secrets(None, "info", {"event": "carrier_call", "password": "hunter2", "endpoint": "Rate"})
        assert event == {"event": "carrier_call", "password": REDACTED, "endpoint": "Rate"}

    def test_masks_nested_credentials(self):
        event = redact_secrets(
            None,
            "info",
            {"event": "request", "headers": {"Authorization": "Bearer s3cr3t", "Accept": "application/json"}},
        )
        assert event["headers"] == {"Authorization": REDACTED, "Accept": "application/json"}

    def test_label_images_are_not_logged(self):
        assert redact_secrets(None, "info", {"label_data": "R0lGOD=="})["label_data"] == REDACTED


class TestLogLevel:
    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "error")
        assert get_log_level() == "ERROR"

    def test_level_follows_environment(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("ENVIRONMENT", "production")
        assert get_log_level() == "INFO"


class TestLogFormat:
    def test_json_in_production(self, monkeypatch):
        monkeypatch.delenv("LOG_FORMAT", raising=False)
        monkeypatch.setenv("ENVIRONMENT", "production")
        assert use_json_logs() is True

    def test_console_in_development(self, monkeypatch):
        monkeypatch.delenv("LOG_FORMAT", raising=False)
        monkeypatch.setenv("ENVIRONMENT", "development")
        assert use_json_logs() is False

    def test_explicit_format_wins(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "development")
        monkeypatch.setenv("LOG_FORMAT", "json")
        assert use_json_logs() is True


class TestStdlibLogging:
    def test_writes_log_files_to_log_dir(self, tmp_path):
        root = logging.getLogger()
        previous_handlers, previous_level = root.handlers[:], root.level
        try:
            setup_stdlib_logging(tmp_path / "logs")
            assert len(root.handlers) == 3
            assert (tmp_path / "logs" / "shipping-connector.log").exists()
            assert (tmp_path / "logs" / "shipping-connector_error.log").exists()
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers = previous_handlers
            root.setLevel(previous_level)


class TestContext:
    def test_bound_context_is_cleared(self):
        add_context(request_id="abc")
        assert structlog.contextvars.get_contextvars()["request_id"] == "abc"
        clear_context()
        assert structlog.contextvars.get_contextvars() == {}
