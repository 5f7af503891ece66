"""Tests for environment-driven configuration."""

import logging

import pytest
from pydantic import ValidationError

from chainable import ComposerSettings, compose, get_settings, reset_settings
from chainable.settings import LoggingSettings, resolve_unknown_fields
from chainable.utils import configure_logging


class TestComposerSettings:
    """Defaults, environment overrides and caching."""

    def test_defaults(self):
        settings = ComposerSettings()
        assert settings.unknown_fields == "raise"
        assert settings.log_level == "WARNING"
        assert settings.quiet is False

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("CHAINABLE_UNKNOWN_FIELDS", "IGNORE")
        monkeypatch.setenv("CHAINABLE_LOG_LEVEL", "debug")
        monkeypatch.setenv("CHAINABLE_QUIET", "true")
        reset_settings()
        settings = get_settings()
        assert settings.unknown_fields == "ignore"
        assert settings.log_level == "DEBUG"
        assert settings.quiet is True

    def test_invalid_environment_value(self, monkeypatch):
        monkeypatch.setenv("CHAINABLE_UNKNOWN_FIELDS", "sometimes")
        reset_settings()
        with pytest.raises(ValidationError):
            get_settings()

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_reset_rereads_environment(self, monkeypatch):
        assert get_settings().unknown_fields == "raise"
        monkeypatch.setenv("CHAINABLE_UNKNOWN_FIELDS", "ignore")
        assert get_settings().unknown_fields == "raise"
        reset_settings()
        assert get_settings().unknown_fields == "ignore"

    def test_frozen(self):
        with pytest.raises(ValidationError):
            get_settings().unknown_fields = "ignore"


class TestUnknownFieldPolicy:
    """Per-call policies override the configured default."""

    def test_default_policy(self):
        assert resolve_unknown_fields() == "raise"

    def test_explicit_policy(self):
        assert resolve_unknown_fields("ignore") == "ignore"

    def test_invalid_policy(self):
        with pytest.raises(ValidationError):
            resolve_unknown_fields("sometimes")

    def test_invalid_policy_leaves_recipient_alone(self, target):
        with pytest.raises(ValueError):
            compose(target, {"a": 1}, unknown_fields="sometimes")
        assert not hasattr(target, "a")


class TestLogging:
    """Composition is traced on the package logger."""

    def test_composition_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="chainable"):
            compose({"alpha": 1, "beta": 2})
        assert "Composed 2 field(s)" in caplog.text
        assert "alpha, beta" in caplog.text

    def test_ignored_keys_are_logged(self, caplog):
        actual = compose({"a": 1}, unknown_fields="ignore")
        with caplog.at_level(logging.DEBUG, logger="chainable"):
            actual.values({"zzz": 1})
        assert "Ignored unknown field 'zzz'" in caplog.text

    def test_silent_by_default(self, caplog):
        with caplog.at_level(logging.INFO):
            compose({"a": 1})
        assert caplog.records == []


class TestImportTimeLogging:
    """Logger setup reads only the logging variables."""

    def test_logging_settings_ignore_policy(self, monkeypatch):
        monkeypatch.setenv("CHAINABLE_UNKNOWN_FIELDS", "sometimes")
        monkeypatch.setenv("CHAINABLE_LOG_LEVEL", "info")
        settings = LoggingSettings.from_env()
        assert settings.log_level == "INFO"
        assert not hasattr(settings, "unknown_fields")

    def test_configure_logging_with_bad_policy(self, monkeypatch):
        """A bad policy value does not break logger setup; composition reports it."""
        package_logger = logging.getLogger("chainable")
        previous = package_logger.level
        monkeypatch.setenv("CHAINABLE_UNKNOWN_FIELDS", "sometimes")
        monkeypatch.setenv("CHAINABLE_LOG_LEVEL", "error")
        reset_settings()
        try:
            assert configure_logging() is package_logger
            assert package_logger.level == logging.ERROR
        finally:
            package_logger.setLevel(previous)
        with pytest.raises(ValidationError):
            compose({"a": 1})

    def test_configure_logging_adds_one_null_handler(self):
        package_logger = configure_logging(LoggingSettings())
        configure_logging(LoggingSettings())
        handlers = [h for h in package_logger.handlers if isinstance(h, logging.NullHandler)]
        assert len(handlers) == 1
        assert package_logger.level == logging.WARNING
