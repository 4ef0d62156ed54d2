"""
Centralized logging configuration.

Every module logs through the standard library logger returned by
get_logger(__name__). setup_logging() attaches the handlers once:
- stdout, at the configured level (what the hosting platform collects)
- an optional daily file under logs/, capturing DEBUG and up

Hosted containers usually have an ephemeral disk, so the file handler can be
switched off with LOG_TO_FILE=false.
"""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Client libraries that log every request at DEBUG/INFO
NOISY_LOGGERS = ("httpx", "httpcore", "telegram", "aiosqlite", "asyncio")

DEFAULT_LOG_DIR = Path(__file__).parent.parent.parent / "logs"

_logging_configured = False


def _console_handler(level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler


def _daily_file_handler(log_dir: Path, formatter: logging.Formatter) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"hith_{datetime.now().strftime('%Y%m%d')}.log"
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(formatter)
    handler.setLevel(logging.DEBUG)
    return handler


def quiet_loggers(names: Iterable[str] = NOISY_LOGGERS, level: int = logging.WARNING) -> None:
    """Raise the threshold of third-party loggers."""
    for name in names:
        logging.getLogger(name).setLevel(level)


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    log_to_file: bool = True,
) -> logging.Logger:
    """
    Configure application-wide logging.

    Safe to call more than once; only the first call attaches handlers.

    Args:
        log_level: Console level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the daily log file, 'logs/' by default
        log_to_file: Set False to log to stdout only

    Returns:
        The root logger

    Example:
        >>> from hith.core.logging_config import setup_logging
        >>> setup_logging("INFO", log_to_file=False).info("Webhook ready")
    """
    global _logging_configured

    root_logger = logging.getLogger()
    if _logging_configured:
        return root_logger

    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: List[logging.Handler] = [_console_handler(level, formatter)]
    if log_to_file:
        handlers.append(_daily_file_handler(log_dir or DEFAULT_LOG_DIR, formatter))

    # Root passes everything; each handler applies its own threshold
    root_logger.setLevel(logging.DEBUG)
    for handler in handlers:
        root_logger.addHandler(handler)

    quiet_loggers()
    _logging_configured = True

    root_logger.debug(
        f"Logging configured: level={logging.getLevelName(level)}, "
        f"file={'on' if log_to_file else 'off'}"
    )
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Reply sent")
        2024-01-15 10:30:45 | INFO     | hith.services.chat_service:42 | Reply sent
    """
    return logging.getLogger(name)


class LoggerMixin:
    """Gives a class a `logger` property named after the class."""

    @property
    def logger(self) -> logging.Logger:
        return get_logger(self.__class__.__name__)
