"""
Tests for environment-driven settings.
"""

import importlib
import logging

from url_shortener import config


def test_log_level_is_case_insensitive(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    try:
        importlib.reload(config)
        assert config.LOGGING["level"] == "DEBUG"
        assert getattr(logging, config.LOGGING["level"]) == logging.DEBUG
    finally:
        monkeypatch.delenv("LOG_LEVEL")
        importlib.reload(config)
