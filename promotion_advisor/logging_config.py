"""Logging configuration for the Config Promotion Advisor."""

import logging
import os
import sys
from typing import Optional, TextIO


LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for different log levels."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, fmt=None, datefmt=None, stream: Optional[TextIO] = None):
        super().__init__(fmt, datefmt=datefmt)
        self.stream = stream

    def _use_colors(self) -> bool:
        stream = self.stream if self.stream is not None else sys.stdout
        isatty = getattr(stream, "isatty", None)
        return bool(isatty and isatty())

    def format(self, record):
        if self._use_colors():  # Only use colors when the handler's own stream is a terminal
            record = logging.makeLogRecord(record.__dict__)
            log_color = self.COLORS.get(record.levelname, '')
            record.levelname = f"{log_color}{record.levelname}{self.RESET}"
            record.name = f"\033[34m{record.name}{self.RESET}"  # Blue for logger name

        return super().format(record)


def setup_logging(log_level: Optional[str] = None, stream: Optional[TextIO] = None) -> None:
    """Setup centralized logging configuration for the engine, CLI and API.

    The CLI passes sys.stderr so that suggestions on stdout stay pasteable.
    """

    if log_level is None:
        log_level = os.getenv("LOG_LEVEL", "INFO")

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[
            logging.StreamHandler(stream or sys.stdout)
        ],
        force=True,
    )

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if isinstance(handler, logging.StreamHandler):
            handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt=DATE_FORMAT, stream=handler.stream))

    configure_package_loggers(log_level)
    configure_external_loggers()


def configure_package_loggers(log_level: str) -> None:
    """Configure logging for the advisor's own modules."""
    package_loggers = [
        'promotion_advisor',
        'promotion_advisor.suggestion_engine',
        'promotion_advisor.file_diff',
        'promotion_advisor.cli',
        'promotion_advisor.api',
    ]

    for logger_name in package_loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def configure_external_loggers() -> None:
    """Configure logging levels for external libraries."""
    external_loggers = {
        'uvicorn.access': logging.WARNING,
        'asyncio': logging.WARNING,
        'urllib3': logging.WARNING,
    }

    for logger_name, level in external_loggers.items():
        logging.getLogger(logger_name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Get a properly configured logger for a module of the advisor."""
    return logging.getLogger(f"promotion_advisor.{name}")
