"""
Discovery of ``require(...)`` call sites.

Only calls whose callee is the bare ``require`` identifier are considered;
aliases and member expressions such as ``module.require`` are not followed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from webtask_analyzer.constants import REQUIRE_FUNCTION_NAME
from webtask_analyzer.models import RequireCall

from .codegen import generate
from .ts_parser import parse
from .ts_utils import (
    LITERAL_TYPES,
    get_named_children,
    get_text,
    literal_value,
    unwrap_parentheses,
)

if TYPE_CHECKING:
    from tree_sitter import Node

    from .ts_parser import SourceOrTree

logger = logging.getLogger(__name__)


class RequireWalker:
    """Collects require calls from a parse tree in traversal order.

    Every node's children are visited before the node itself is tested, so
    for ``require(require("a"))`` the inner call is reported first.
    """

    def __init__(self, source: bytes):
        self.source = source
        self.requires: list[RequireCall] = []

    def visit(self, root: Node) -> None:
        # Explicit stack: long operator chains nest one level per operand
        stack: list[tuple[Node, bool]] = [(root, False)]
        while stack:
            node, children_visited = stack.pop()
            if children_visited:
                if node.type == "call_expression":
                    self.visit_call_expression(node)
                continue

            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))

    def visit_call_expression(self, node: Node) -> None:
        callee = node.child_by_field_name("function")
        if callee is None or callee.type != "identifier":
            return
        if get_text(callee, self.source) != REQUIRE_FUNCTION_NAME:
            return

        arguments = node.child_by_field_name("arguments")
        # Tagged templates (require`x`) share the node type but are not calls
        if arguments is None or arguments.type != "arguments":
            return

        args = get_named_children(arguments)
        argument = unwrap_parentheses(args[0]) if len(args) == 1 else None
        if argument is not None and argument.type in LITERAL_TYPES:
            self.requires.append(self._create_static_require(node, argument))
        else:
            self.requires.append(self._create_dynamic_require(node, args))

    def _create_static_require(self, node: Node, argument: Node) -> RequireCall:
        return RequireCall(
            spec=literal_value(argument, self.source),
            start=node.start_byte,
            end=node.end_byte,
        )

    def _create_dynamic_require(self, node: Node, args: list[Node]) -> RequireCall:
        return RequireCall(
            spec="".join(generate(arg, self.source) for arg in args),
            start=node.start_byte,
            end=node.end_byte,
            dynamic=True,
        )


def find_requires(source_or_tree: SourceOrTree) -> list[RequireCall]:
    """Find all require calls in a body of code.

    Args:
        source_or_tree: Source text or an already parsed source

    Returns:
        Require calls in traversal order, static and dynamic interleaved
    """
    parsed = parse(source_or_tree)
    walker = RequireWalker(parsed.source)
    walker.visit(parsed.root)

    logger.debug(
        f"Found {len(walker.requires)} require call(s), "
        f"{sum(1 for r in walker.requires if r.dynamic)} dynamic"
    )
    return walker.requires
