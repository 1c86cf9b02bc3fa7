"""Tests for logging setup."""

import logging

import pytest
import structlog

from sessiongate.logging import DRIVER_LOGGERS, setup_logging, uses_console_renderer


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    driver_levels = {name: logging.getLogger(name).level for name in DRIVER_LOGGERS}
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, driver_level in driver_levels.items():
        logging.getLogger(name).setLevel(driver_level)
    structlog.reset_defaults()


class TestRendererChoice:
    """Tests for uses_console_renderer."""

    def test_follows_debug_by_default(self, config):
        assert uses_console_renderer(config)
        assert not uses_console_renderer(config.model_copy(update={"debug": False}))

    def test_explicit_format_wins(self, config):
        assert not uses_console_renderer(config.model_copy(update={"log_format": "json"}))
        assert uses_console_renderer(config.model_copy(update={"debug": False, "log_format": "console"}))


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_driver_loggers_quieted(self, config, restore_logging):
        setup_logging(config)
        for name in DRIVER_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
        assert logging.getLogger().level == logging.DEBUG

    def test_json_renderer_outside_debug(self, config, restore_logging):
        setup_logging(config.model_copy(update={"debug": False}))
        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)
        assert logging.getLogger().level == logging.INFO

    def test_console_renderer_in_debug(self, config, restore_logging):
        setup_logging(config)
        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)
