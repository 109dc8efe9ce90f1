"""
Tests for settings and logging configuration.
"""

import pytest
import structlog
from pydantic import ValidationError

from redline.core.config import Settings
from redline.core.logging import (
    MAX_LOGGED_TEXT,
    LoggerMixin,
    app_context_processor,
    configure_logging,
    get_logger,
    truncate_long_values,
)


def test_defaults(settings):
    """Defaults match the documented thresholds."""
    assert settings.similarity_pair_threshold == 0.7
    assert settings.structural_length_threshold == 500
    assert settings.section_body_probe_length == 40
    assert settings.section_chars_per_word == 6
    assert settings.report_whitespace_changes is True


def test_log_level_normalized():
    """Log level is upper-cased."""
    assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"


def test_invalid_log_level_rejected():
    """Unknown log levels fail validation."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_level="chatty")


def test_invalid_log_format_rejected():
    """Only json and console formats are supported."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_format="xml")


def test_threshold_range_enforced():
    """The pairing threshold is a ratio."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, similarity_pair_threshold=1.5)


def test_environment_override(monkeypatch):
    """Prefixed environment variables override defaults."""
    monkeypatch.setenv("REDLINE_SIMILARITY_PAIR_THRESHOLD", "0.5")
    monkeypatch.setenv("REDLINE_REPORT_WHITESPACE_CHANGES", "false")

    settings = Settings(_env_file=None)

    assert settings.similarity_pair_threshold == 0.5
    assert settings.report_whitespace_changes is False


@pytest.mark.parametrize("log_format", ["json", "console"])
def test_configure_logging(log_format):
    """Both renderers configure without error and loggers are usable."""
    try:
        configure_logging(Settings(_env_file=None, log_format=log_format))
        get_logger(__name__).info("redline_test_event", value=1)
    finally:
        structlog.reset_defaults()


def test_logger_mixin_named_after_class():
    """The mixin hands out a logger per class."""
    class Sample(LoggerMixin):
        pass

    assert Sample().logger is not None


def test_long_text_values_clipped():
    """Contract text in log events is clipped; the event name is not."""
    long_text = "x" * (MAX_LOGGED_TEXT + 50)
    event = {"event": long_text, "original_text": long_text, "from_pos": 3}

    result = truncate_long_values(None, "info", event)

    assert result["event"] == long_text
    assert result["original_text"].startswith("x" * MAX_LOGGED_TEXT)
    assert result["original_text"].endswith(f"({len(long_text)} chars)")
    assert result["from_pos"] == 3


def test_app_context_reflects_debug_flag():
    """The environment tag follows the debug setting."""
    add_context = app_context_processor(Settings(_env_file=None, debug=True))

    event = add_context(None, "info", {"event": "redline_test_event"})

    assert event["app"] == "redline_comparator"
    assert event["environment"] == "development"
