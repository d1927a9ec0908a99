"""
Free identifier analysis for JavaScript parse trees.

Runs in two passes. The first records every declared name on the node that
scopes it (functions, blocks, classes, catch clauses, the program). The second
visits every identifier in reference position and reports those that no
enclosing node declares.

Scoping follows the usual CommonJS-script rules:

* ``var`` and function declarations bind in the nearest function scope
* ``let``, ``const`` and class declarations bind in the nearest block
* parameters and the names of function and class expressions bind in the
  function or class itself
* ``arguments`` is implicitly bound inside every non-arrow function
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from webtask_analyzer.models import GlobalReference

from .ts_parser import parse
from .ts_utils import get_named_children, get_text, node_key

if TYPE_CHECKING:
    from collections.abc import Callable

    from tree_sitter import Node

    from .ts_parser import SourceOrTree

logger = logging.getLogger(__name__)

FUNCTION_DECLARATION_TYPES = frozenset({"function_declaration", "generator_function_declaration"})
FUNCTION_EXPRESSION_TYPES = frozenset(
    {
        "function_expression",
        "function",  # name used by older grammar releases
        "generator_function",
        "arrow_function",
        "method_definition",
    }
)
FUNCTION_SCOPE_TYPES = FUNCTION_DECLARATION_TYPES | FUNCTION_EXPRESSION_TYPES | {"program"}
BLOCK_SCOPE_TYPES = FUNCTION_SCOPE_TYPES | {
    "statement_block",
    "for_statement",
    "for_in_statement",
    "class_static_block",
}
ARGUMENTS_SCOPE_TYPES = FUNCTION_SCOPE_TYPES - {"program", "arrow_function"}

REFERENCE_TYPES = frozenset(
    {"identifier", "shorthand_property_identifier", "shorthand_property_identifier_pattern"}
)
# Identifiers under these parents name exports or imported members, not bindings in scope
NON_REFERENCE_PARENTS = frozenset({"import_specifier", "export_specifier", "namespace_export"})
JSX_ELEMENT_TYPES = frozenset(
    {"jsx_opening_element", "jsx_closing_element", "jsx_self_closing_element"}
)


def _nearest(ancestors: list[Node], types: frozenset[str]) -> Node:
    for ancestor in reversed(ancestors):
        if ancestor.is_named and ancestor.type in types:
            return ancestor
    return ancestors[0]


class GlobalsFinder:
    """Finds references to identifiers that are not declared anywhere in scope."""

    def __init__(self, source: bytes):
        self.source = source
        self.locals: dict[tuple[int, int, str], set[str]] = defaultdict(set)
        self.bindings: set[tuple[int, int, str]] = set()
        self.references: list[GlobalReference] = []

        self._declarators: dict[str, Callable[[Node, list[Node]], None]] = {
            "variable_declaration": self._declare_var,
            "lexical_declaration": self._declare_lexical,
            "for_in_statement": self._declare_for_in,
            "class_declaration": self._declare_class_declaration,
            "class": self._declare_class_expression,
            "catch_clause": self._declare_catch,
            "import_statement": self._declare_imports,
        }
        for node_type in FUNCTION_DECLARATION_TYPES:
            self._declarators[node_type] = self._declare_function_declaration
        for node_type in FUNCTION_EXPRESSION_TYPES:
            self._declarators[node_type] = self._declare_function

    def find(self, root: Node) -> list[GlobalReference]:
        """Run both passes and return references grouped by sorted name."""
        self._collect_declarations(root)
        self._collect_references(root)

        grouped: dict[str, list[GlobalReference]] = defaultdict(list)
        for reference in self.references:
            grouped[reference.name].append(reference)

        return [reference for name in sorted(grouped) for reference in grouped[name]]

    # Declaration pass

    def _collect_declarations(self, root: Node) -> None:
        ancestors: list[Node] = []
        # (node, leaving): a leaving entry pops the node off the ancestors
        stack: list[tuple[Node, bool]] = [(root, False)]
        while stack:
            node, leaving = stack.pop()
            if leaving:
                ancestors.pop()
                continue

            declarator = self._declarators.get(node.type) if node.is_named else None
            if declarator is not None:
                declarator(node, ancestors)

            ancestors.append(node)
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))

    def _declare_name(self, node: Node, scope: Node) -> None:
        self.locals[node_key(scope)].add(get_text(node, self.source))
        self.bindings.add(node_key(node))

    def _declare_pattern(self, node: Node | None, scope: Node) -> None:
        if node is None:
            return

        node_type = node.type
        if node_type in ("identifier", "shorthand_property_identifier_pattern"):
            self._declare_name(node, scope)
        elif node_type in ("object_pattern", "array_pattern", "rest_pattern"):
            for child in get_named_children(node):
                self._declare_pattern(child, scope)
        elif node_type == "pair_pattern":
            self._declare_pattern(node.child_by_field_name("value"), scope)
        elif node_type in ("assignment_pattern", "object_assignment_pattern"):
            self._declare_pattern(node.child_by_field_name("left"), scope)

    def _declare_declarators(self, node: Node, scope: Node) -> None:
        for declarator in get_named_children(node):
            if declarator.type == "variable_declarator":
                self._declare_pattern(declarator.child_by_field_name("name"), scope)

    def _declare_var(self, node: Node, ancestors: list[Node]) -> None:
        self._declare_declarators(node, _nearest(ancestors, FUNCTION_SCOPE_TYPES))

    def _declare_lexical(self, node: Node, ancestors: list[Node]) -> None:
        self._declare_declarators(node, _nearest(ancestors, BLOCK_SCOPE_TYPES))

    def _declare_for_in(self, node: Node, ancestors: list[Node]) -> None:
        kind = node.child_by_field_name("kind")
        if kind is None:
            # Plain assignment target, e.g. for (x in obj)
            return
        if get_text(kind, self.source) == "var":
            scope = _nearest(ancestors, FUNCTION_SCOPE_TYPES)
        else:
            scope = node
        self._declare_pattern(node.child_by_field_name("left"), scope)

    def _declare_parameters(self, node: Node) -> None:
        parameters = node.child_by_field_name("parameters")
        if parameters is not None:
            for parameter in get_named_children(parameters):
                self._declare_pattern(parameter, node)
        # Arrow functions with a single unparenthesized parameter
        self._declare_pattern(node.child_by_field_name("parameter"), node)

    def _declare_function_declaration(self, node: Node, ancestors: list[Node]) -> None:
        name = node.child_by_field_name("name")
        if name is not None:
            self._declare_name(name, _nearest(ancestors, FUNCTION_SCOPE_TYPES))
        self._declare_parameters(node)

    def _declare_function(self, node: Node, ancestors: list[Node]) -> None:
        if node.type != "method_definition":
            name = node.child_by_field_name("name")
            if name is not None and name.type == "identifier":
                self._declare_name(name, node)
        self._declare_parameters(node)

    def _declare_class_declaration(self, node: Node, ancestors: list[Node]) -> None:
        name = node.child_by_field_name("name")
        if name is not None:
            self._declare_name(name, _nearest(ancestors, BLOCK_SCOPE_TYPES))
            self.locals[node_key(node)].add(get_text(name, self.source))

    def _declare_class_expression(self, node: Node, ancestors: list[Node]) -> None:
        name = node.child_by_field_name("name")
        if name is not None and name.type == "identifier":
            self._declare_name(name, node)

    def _declare_catch(self, node: Node, ancestors: list[Node]) -> None:
        self._declare_pattern(node.child_by_field_name("parameter"), node)

    def _declare_imports(self, node: Node, ancestors: list[Node]) -> None:
        program = ancestors[0] if ancestors else node
        for clause in get_named_children(node):
            if clause.type != "import_clause":
                continue
            for item in get_named_children(clause):
                if item.type == "identifier":
                    self._declare_name(item, program)
                elif item.type == "namespace_import":
                    for name in get_named_children(item):
                        self._declare_name(name, program)
                elif item.type == "named_imports":
                    for specifier in get_named_children(item):
                        local = specifier.child_by_field_name(
                            "alias"
                        ) or specifier.child_by_field_name("name")
                        if local is not None and local.type == "identifier":
                            self._declare_name(local, program)

    # Reference pass

    def _is_reference(self, node: Node) -> bool:
        if node.type not in REFERENCE_TYPES or node_key(node) in self.bindings:
            return False

        parent = node.parent
        if parent is None:
            return True
        if parent.type in NON_REFERENCE_PARENTS:
            return False
        # Intrinsic JSX elements like <div> are tag names, not variables
        if parent.type in JSX_ELEMENT_TYPES:
            return not get_text(node, self.source)[:1].islower()
        return True

    def _is_scope(self, node: Node) -> bool:
        if not node.is_named:
            return False
        return node.type in ARGUMENTS_SCOPE_TYPES or node_key(node) in self.locals

    def _is_declared(self, name: str, scopes: list[Node]) -> bool:
        for scope in scopes:
            if name == "arguments" and scope.type in ARGUMENTS_SCOPE_TYPES:
                return True
            scope_locals = self.locals.get(node_key(scope))
            if scope_locals and name in scope_locals:
                return True
        return False

    def _collect_references(self, root: Node) -> None:
        # Only enclosing nodes that declare something are tracked
        scopes: list[Node] = []
        stack: list[tuple[Node, bool]] = [(root, False)]
        while stack:
            node, leaving = stack.pop()
            if leaving:
                scopes.pop()
                continue

            if self._is_reference(node):
                name = get_text(node, self.source)
                if name != "undefined" and not self._is_declared(name, scopes):
                    self.references.append(
                        GlobalReference(name=name, start=node.start_byte, end=node.end_byte)
                    )

            if self._is_scope(node):
                scopes.append(node)
                stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))


def find_global_names(source_or_tree: SourceOrTree) -> list[GlobalReference]:
    """Find all undeclared names referenced in code.

    Args:
        source_or_tree: Source text or an already parsed source

    Returns:
        One reference per site, grouped by name in sorted order and in
        document order within each name
    """
    parsed = parse(source_or_tree)
    references = GlobalsFinder(parsed.source).find(parsed.root)

    logger.debug(
        f"Found {len(references)} global reference(s) to "
        f"{len({r.name for r in references})} name(s)"
    )
    return references
