"""
Utilities for working with tree-sitter JavaScript nodes.
Provides helper functions for common node operations.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tree_sitter import Node

LITERAL_TYPES = frozenset({"string", "number", "true", "false", "null", "regex"})

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_ESCAPE_RE = re.compile(
    r"\\(?:u\{(?P<code_point>[0-9a-fA-F]+)\}|u(?P<unicode>[0-9a-fA-F]{4})|x(?P<hex>[0-9a-fA-F]{2})|(?P<newline>\r\n|[\n\r\u2028\u2029])|(?P<char>.))",
    re.DOTALL,
)


def node_key(node: Node) -> tuple[int, int, str]:
    """Stable identity for a node within one tree."""
    return (node.start_byte, node.end_byte, node.type)


def get_text(node: Node, source: bytes) -> str:
    """Source text covered by a node."""
    return source[node.start_byte : node.end_byte].decode("utf-8")


def get_named_children(node: Node) -> list[Node]:
    """Named children of a node, without comments."""
    return [child for child in node.named_children if child.type != "comment"]


def unwrap_parentheses(node: Node) -> Node:
    """The expression inside any number of grouping parentheses."""
    while node.type == "parenthesized_expression":
        inner = get_named_children(node)
        if len(inner) != 1:
            break
        node = inner[0]
    return node


def _unescape_match(match: re.Match) -> str:
    if match.group("code_point") is not None:
        return chr(int(match.group("code_point"), 16))
    if match.group("unicode") is not None:
        return chr(int(match.group("unicode"), 16))
    if match.group("hex") is not None:
        return chr(int(match.group("hex"), 16))
    if match.group("newline") is not None:
        # Line continuation
        return ""
    char = match.group("char")
    return _SIMPLE_ESCAPES.get(char, char)


def unescape_string(body: str) -> str:
    """Resolve JavaScript escape sequences in the body of a string literal."""
    return _ESCAPE_RE.sub(_unescape_match, body)


def literal_value(node: Node, source: bytes) -> str:
    """Value of a literal node as text.

    Strings are unquoted and unescaped; other literals keep their source text.
    """
    text = get_text(node, source)
    if node.type == "string":
        return unescape_string(text[1:-1])
    return text
