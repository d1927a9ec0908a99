"""
Analyzer components: parsing, tree walkers, specifier parsing and resolution.
"""

from __future__ import annotations

from .globals_finder import GlobalsFinder, find_global_names
from .require_walker import RequireWalker, find_requires
from .resolver import resolve_global, resolve_import
from .specifier import parse_verquire_spec
from .ts_parser import ParsedSource, parse

__all__ = [
    "GlobalsFinder",
    "ParsedSource",
    "RequireWalker",
    "find_global_names",
    "find_requires",
    "parse",
    "parse_verquire_spec",
    "resolve_global",
    "resolve_import",
]
