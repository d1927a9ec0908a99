"""Tree-sitter JavaScript parser singleton with parse caching.

Provides a single tree-sitter JavaScript parser for the whole package, an LRU
cache of parse trees keyed by source hash, and the :class:`ParsedSource` handle
that the walkers accept in place of source text.
"""

from __future__ import annotations

import hashlib
import os
from collections import OrderedDict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from tree_sitter import Language, Parser
from tree_sitter_javascript import language

from webtask_analyzer.exceptions import ParseError

if TYPE_CHECKING:
    from tree_sitter import Node, Tree


@dataclass(frozen=True)
class ParsedSource:
    """A parse tree together with the exact bytes it was produced from."""

    tree: Tree
    source: bytes

    @property
    def root(self) -> Node:
        return self.tree.root_node


SourceOrTree = Union[str, bytes, ParsedSource]

_parser: Parser | None = None

# Parse tree cache: hash(source) -> ParsedSource
_parse_cache: OrderedDict[str, ParsedSource] = OrderedDict()

_CACHE_ENABLED = os.environ.get("WEBTASK_ANALYZER_DISABLE_CACHE") != "1"
_MAX_CACHE_SIZE = int(os.environ.get("WEBTASK_ANALYZER_CACHE_SIZE", "100"))


def _get_parser() -> Parser:
    """Get or create the tree-sitter JavaScript parser singleton."""
    global _parser  # noqa: PLW0603
    if _parser is None:
        _parser = Parser(Language(language()))
    return _parser


def _compute_hash(source_bytes: bytes) -> str:
    return hashlib.sha256(source_bytes).hexdigest()


def _cache_get(cache_key: str) -> ParsedSource | None:
    if not _CACHE_ENABLED:
        return None

    if cache_key in _parse_cache:
        _parse_cache.move_to_end(cache_key)
        return _parse_cache[cache_key]

    return None


def _cache_put(cache_key: str, parsed: ParsedSource) -> None:
    if not _CACHE_ENABLED:
        return

    _parse_cache[cache_key] = parsed

    # LRU eviction
    while len(_parse_cache) > _MAX_CACHE_SIZE:
        _parse_cache.popitem(last=False)


def clear_cache() -> None:
    """Clear the parse tree cache."""
    _parse_cache.clear()


def get_cache_stats() -> dict[str, int]:
    """Get cache statistics.

    Returns:
        Dictionary with cache size, capacity and whether caching is enabled
    """
    return {
        "size": len(_parse_cache),
        "capacity": _MAX_CACHE_SIZE,
        "enabled": _CACHE_ENABLED,
    }


def _find_error_node(node: Node) -> Node | None:
    """Return the first ERROR or MISSING node in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_error or current.is_missing:
            return current
        stack.extend(
            child for child in reversed(current.children) if child.has_error or child.is_missing
        )
    return None


def _raise_for_errors(parsed: ParsedSource) -> None:
    root = parsed.root
    if not root.has_error:
        return

    error_node = _find_error_node(root) or root
    line, column = error_node.start_point
    if error_node.is_missing:
        message = f"Missing {error_node.type!r}"
    else:
        token = parsed.source[error_node.start_byte : error_node.end_byte]
        snippet = token.decode("utf-8", errors="replace").split("\n", 1)[0][:20]
        message = f"Unexpected token {snippet!r}" if snippet else "Unexpected end of input"
    raise ParseError(message, line=line + 1, column=column, offset=error_node.start_byte)


def parse(source_or_tree: SourceOrTree) -> ParsedSource:
    """Parse JavaScript source code, or pass an already parsed source through.

    Trees are cached by source hash, so re-analysing the same script does not
    re-parse it.

    Args:
        source_or_tree: Source text, UTF-8 bytes, or a previous parse result

    Returns:
        The parsed source

    Raises:
        ParseError: If the source contains syntax errors
    """
    if isinstance(source_or_tree, ParsedSource):
        return source_or_tree

    source_bytes = (
        source_or_tree.encode("utf-8") if isinstance(source_or_tree, str) else source_or_tree
    )

    cache_key = _compute_hash(source_bytes)
    parsed = _cache_get(cache_key)
    # Hash collision protection
    if parsed is None or parsed.source != source_bytes:
        parsed = ParsedSource(tree=_get_parser().parse(source_bytes), source=source_bytes)
        _cache_put(cache_key, parsed)

    _raise_for_errors(parsed)
    return parsed
