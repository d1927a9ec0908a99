"""Colored logging configuration for webtask-analyzer."""

from __future__ import annotations

import logging
import sys
from typing import ClassVar

_PACKAGE_PREFIX = "webtask_analyzer."


def _short_module_name(name: str) -> str:
    """Drop the package prefix from a logger name for compact output."""
    if name.startswith(_PACKAGE_PREFIX):
        return name[len(_PACKAGE_PREFIX) :]
    if name == "webtask_analyzer":
        return "WebtaskAnalyzer"
    return name


class PlainFormatter(logging.Formatter):
    """Formatter producing ``[L YYYY-MM-DD HH:MM:SS.mmm module] message`` lines."""

    LEVEL_CODES: ClassVar[dict[str, str]] = {
        "DEBUG": "D",
        "INFO": "I",
        "WARNING": "W",
        "ERROR": "E",
        "CRITICAL": "C",
    }

    def _prefix(self, record: logging.LogRecord) -> str:
        level_code = self.LEVEL_CODES.get(record.levelname, record.levelname[0])
        ct = self.converter(record.created)
        timestamp = f"{ct.tm_year:04d}-{ct.tm_mon:02d}-{ct.tm_mday:02d} {ct.tm_hour:02d}:{ct.tm_min:02d}:{ct.tm_sec:02d}.{int(record.msecs):03d}"
        return f"[{level_code} {timestamp} {_short_module_name(record.name)}]"

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record without colors."""
        message = f"{self._prefix(record)} {record.getMessage()}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


class ColoredFormatter(PlainFormatter):
    """Same layout as :class:`PlainFormatter`, with the prefix colored by level."""

    # ANSI color codes
    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET: ClassVar[str] = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with color."""
        color = self.COLORS.get(record.levelname, self.RESET)
        message = f"{color}{self._prefix(record)}{self.RESET} {record.getMessage()}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def setup_colored_logging(level: int = logging.INFO) -> None:
    """Configure root logging for the command line tool.

    Args:
        level: The logging level to use (e.g., logging.INFO, logging.DEBUG)
    """
    supports_color = hasattr(sys.stderr, "isatty") and sys.stderr.isatty()
    formatter = ColoredFormatter() if supports_color else PlainFormatter()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
