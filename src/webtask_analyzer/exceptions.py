"""Exceptions raised by webtask-analyzer."""

from __future__ import annotations


class WebtaskAnalyzerError(Exception):
    """Base class for all analyzer errors."""


class ParseError(WebtaskAnalyzerError, ValueError):
    """The analyzed source is not valid JavaScript."""

    def __init__(self, message: str, line: int, column: int, offset: int):
        super().__init__(f"{message} ({line}:{column})")
        self.message = message
        self.line = line
        self.column = column
        self.offset = offset


class CatalogError(WebtaskAnalyzerError, RuntimeError):
    """The module catalog could not be loaded from the cluster."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
