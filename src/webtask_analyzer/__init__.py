"""Static dependency analysis for webtask scripts."""

from __future__ import annotations

from . import constants as types
from ._analyzer import ParsedSource, find_global_names, find_requires, parse
from ._version import __version__
from .analyzer import Analyzer, resolve_dependencies
from .catalog import ModuleCatalog
from .config import AnalyzerConfig
from .exceptions import CatalogError, ParseError, WebtaskAnalyzerError
from .models import (
    DynamicImportOccurrence,
    GlobalOccurrence,
    Occurrence,
    StaticImportOccurrence,
)

__all__ = [
    "Analyzer",
    "AnalyzerConfig",
    "CatalogError",
    "DynamicImportOccurrence",
    "GlobalOccurrence",
    "ModuleCatalog",
    "Occurrence",
    "ParseError",
    "ParsedSource",
    "StaticImportOccurrence",
    "WebtaskAnalyzerError",
    "__version__",
    "find_global_names",
    "find_requires",
    "parse",
    "resolve_dependencies",
    "types",
]
