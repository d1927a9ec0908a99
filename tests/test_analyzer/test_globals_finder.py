"""Tests for free identifier analysis."""

from __future__ import annotations

import pytest

from webtask_analyzer._analyzer.globals_finder import find_global_names
from webtask_analyzer.models import GlobalReference


def global_names(code_js: str) -> list[str]:
    return [reference.name for reference in find_global_names(code_js)]


class TestReferences:
    """Every reference site is reported."""

    def test_repeated_references_are_not_deduplicated(self):
        assert find_global_names("foo(); foo;") == [
            GlobalReference(name="foo", start=0, end=3),
            GlobalReference(name="foo", start=7, end=10),
        ]

    def test_grouped_by_sorted_name(self):
        code_js = "zeta; alpha; zeta; beta;"
        assert global_names(code_js) == ["alpha", "beta", "zeta", "zeta"]

    def test_reference_order_within_name(self):
        references = find_global_names("x; y; x;")
        assert [(r.name, r.start) for r in references] == [("x", 0), ("x", 6), ("y", 3)]

    def test_assignment_to_undeclared_name(self):
        assert global_names("counter = 1;") == ["counter"]

    def test_shorthand_property_is_a_reference(self):
        assert global_names("({ value });") == ["value"]

    def test_member_and_property_names_are_not_references(self):
        assert global_names("obj.prop; ({ key: 1 }); obj?.other;") == ["obj", "obj"]

    @pytest.mark.parametrize("code_js", ["undefined;", "this;", "loop: for (;;) { break loop; }"])
    def test_keywords_and_labels_are_ignored(self, code_js):
        assert global_names(code_js) == []


class TestDeclarations:
    """Declared names are never reported."""

    def test_var_let_const(self):
        code_js = "var a = 1; let b = 2; const c = 3; a + b + c + d;"
        assert global_names(code_js) == ["d"]

    def test_function_declarations_are_hoisted(self):
        assert global_names("run(); function run() {}") == []

    def test_parameters_and_destructuring(self):
        code_js = """\
function f(x, { y, z: [w] }, [v = fallback], ...rest) {
    return x + y + w + v + rest + other;
}
"""
        assert global_names(code_js) == ["fallback", "other"]

    def test_destructuring_declaration(self):
        code_js = "const { a = b, c: [d], ...e } = obj; a; d; e;"
        assert global_names(code_js) == ["b", "obj"]

    def test_arrow_function_parameters(self):
        assert global_names("const f = x => x + y; const g = (a, b) => a + b;") == ["y"]

    def test_let_is_block_scoped(self):
        references = find_global_names("{ let a = 1; a; } a;")
        assert references == [GlobalReference(name="a", start=18, end=19)]

    def test_var_is_function_scoped(self):
        assert global_names("function g() { { var a = 1; } return a; } a;") == ["a"]

    def test_for_loop_bindings(self):
        code_js = "for (let i = 0; i < n; i++) {} for (const item of items) { item; } i;"
        assert global_names(code_js) == ["i", "items", "n"]

    def test_for_in_var_is_function_scoped(self):
        assert global_names("for (var k in o) {} k;") == ["o"]
        assert global_names("function f() { for (var k in o) {} } k;") == ["k", "o"]

    def test_catch_parameter(self):
        references = find_global_names("try {} catch (err) { err; } err;")
        assert [(r.name, r.start) for r in references] == [("err", 28)]

    def test_class_declaration_and_expression(self):
        code_js = "class A {} new A(); const C = class D { m() { return D; } }; new B();"
        assert global_names(code_js) == ["B"]

    def test_named_function_expression(self):
        assert global_names("const f = function inner() { return inner; }; inner;") == ["inner"]

    def test_import_bindings(self):
        code_js = "import x, { y as z } from 'm'; import * as ns from 'n'; x; z; ns; y;"
        assert global_names(code_js) == ["y"]


class TestArguments:
    """``arguments`` is only implicitly declared in non-arrow functions."""

    def test_inside_function(self):
        assert global_names("function f() { return arguments.length; }") == []

    def test_inside_method(self):
        assert global_names("({ m() { return arguments; } });") == []

    def test_inside_arrow_at_top_level(self):
        assert global_names("const g = () => arguments;") == ["arguments"]

    def test_arrow_inside_function(self):
        assert global_names("function f() { return () => arguments; }") == []


class TestDeepNesting:
    def test_long_chain_inside_function(self):
        code_js = "function f(a) { return " + " + ".join(["a"] * 5000) + " + b; }"
        assert global_names(code_js) == ["b"]
