from __future__ import annotations

import logging

from rich.logging import RichHandler

from config import LogSettings, Settings
from utils.logger import configure_from_settings, get_logger, setup_logger


def test_setup_logger_does_not_stack_handlers():
    logger = setup_logger("action_plan.test.stack", level="debug", use_rich=False)
    again = setup_logger("action_plan.test.stack", level="debug", use_rich=False)

    assert logger is again
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_rich_console_handler_is_default():
    logger = setup_logger("action_plan.test.rich")
    assert isinstance(logger.handlers[0], RichHandler)


def test_configure_from_settings_sets_root_level(monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)

    configured = configure_from_settings(Settings(log=LogSettings(level="WARNING", rich=False)))

    assert configured is root
    assert root.level == logging.WARNING
    assert get_logger("action_plan.test.child").handlers == []
