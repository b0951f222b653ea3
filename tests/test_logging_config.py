"""
Tests for logging configuration.
"""

import json
import logging

import pytest
import structlog

from armforge.config.models import LoggingSettings
from armforge.logging_config import configure_from_settings, configure_logging


@pytest.fixture(autouse=True)
def reset_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_level_from_string():
    configure_logging("debug")

    assert logging.getLogger().level == logging.DEBUG


def test_json_output(capsys):
    """Test that structured events render as one JSON object per line."""
    configure_logging(logging.INFO, json_output=True)

    structlog.get_logger("armforge.test").info("stack_synthesized", resources=3)

    line = capsys.readouterr().out.strip().splitlines()[-1]
    event = json.loads(line)
    assert event["event"] == "stack_synthesized"
    assert event["resources"] == 3
    assert event["level"] == "info"


def test_console_output(capsys):
    configure_logging(logging.INFO)

    structlog.get_logger("armforge.test").warning("assembly_written", files=2)

    out = capsys.readouterr().out
    assert "assembly_written" in out
    assert "files=2" in out


def test_configure_from_settings():
    configure_from_settings(LoggingSettings(level="error"))

    assert logging.getLogger().level == logging.ERROR
