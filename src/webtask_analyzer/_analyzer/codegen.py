"""Re-serialize expression nodes back to compact JavaScript source.

Output is rebuilt from the node's tokens, so it is stable regardless of the
original formatting: comments are dropped and whitespace between tokens is
normalized.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .ts_utils import get_text

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tree_sitter import Node

# Copied verbatim, never split into sub-tokens
ATOMIC_TYPES = frozenset({"string", "template_string", "regex", "number"})

NO_SPACE_AFTER = frozenset({"(", "[", ".", "?.", "..."})
NO_SPACE_BEFORE = frozenset({")", "]", ",", ".", "?.", ";"})


def _tokens(node: Node) -> Iterator[Node]:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "comment":
            continue
        if current.child_count == 0 or current.type in ATOMIC_TYPES:
            yield current
            continue
        stack.extend(reversed(current.children))


def generate(node: Node, source: bytes) -> str:
    """Generate source text for ``node``."""
    parts: list[str] = []
    previous: Node | None = None
    previous_text = ""

    for token in _tokens(node):
        text = get_text(token, source)
        if not text:
            # Zero-width tokens such as automatic semicolons
            continue
        if (
            previous is not None
            and token.start_byte > previous.end_byte
            and previous_text not in NO_SPACE_AFTER
            and text not in NO_SPACE_BEFORE
        ):
            parts.append(" ")
        parts.append(text)
        previous, previous_text = token, text

    return "".join(parts)
