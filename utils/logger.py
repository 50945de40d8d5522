"""
Logger Configuration
Shared logging setup
"""
import logging
import sys
from pathlib import Path
from typing import Optional, Union

from rich.logging import RichHandler
from rich.console import Console


console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_FORMAT_SIMPLE = "%(message)s"

LOG_DIR = Path(__file__).parent.parent / "logs"

ROOT_LOGGER_NAME = "action_plan"


def _level(value: Union[int, str]) -> int:
    if isinstance(value, int):
        return value
    return logging.getLevelName(str(value).upper()) if str(value).strip() else logging.INFO


def setup_logger(
    name: Optional[str] = None,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    use_rich: bool = True,
) -> logging.Logger:
    """
    Configure a logger with a console handler and an optional file handler

    Args:
        name: logger name; None configures the root logger so module loggers inherit it
        level: log level (int or name)
        log_file: file name under logs/ (optional)
        use_rich: use RichHandler for console output

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    resolved = _level(level)
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logger.setLevel(resolved)

    # avoid duplicate handlers
    if logger.handlers:
        return logger

    if use_rich:
        console_handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
        )
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE))
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    console_handler.setLevel(resolved)
    logger.addHandler(console_handler)

    if log_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_DIR / log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(resolved)
        logger.addHandler(file_handler)

    return logger


def configure_from_settings(settings=None) -> logging.Logger:
    """Configure the root logger from LOG_* settings."""
    if settings is None:
        from config import get_settings
        settings = get_settings()
    return setup_logger(
        None,
        level=settings.log.level,
        log_file=settings.log.file,
        use_rich=settings.log.rich,
    )


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Return a logger, configuring it on first use."""
    logger = logging.getLogger(name)
    if not logger.handlers and not logging.getLogger().handlers:
        return setup_logger(name)
    return logger
