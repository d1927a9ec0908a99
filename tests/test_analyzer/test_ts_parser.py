"""Tests for the tree-sitter parser wrapper."""

from __future__ import annotations

import pytest

from webtask_analyzer._analyzer import ts_parser
from webtask_analyzer._analyzer.ts_parser import ParsedSource, parse
from webtask_analyzer.exceptions import ParseError


class TestParse:
    def test_returns_program(self):
        parsed = parse("module.exports = 1;")
        assert isinstance(parsed, ParsedSource)
        assert parsed.root.type == "program"
        assert parsed.source == b"module.exports = 1;"

    def test_accepts_bytes(self):
        assert parse(b"var a;").root.type == "program"

    def test_parsed_source_passes_through(self):
        parsed = parse("var a;")
        assert parse(parsed) is parsed

    def test_top_level_return_is_allowed(self):
        assert parse("return 1;").root.type == "program"

    @pytest.mark.skipif(not ts_parser._CACHE_ENABLED, reason="parse cache disabled")
    def test_same_source_is_cached(self):
        ts_parser.clear_cache()
        first = parse("var cached = true;")
        second = parse("var cached = true;")
        assert first is second
        assert ts_parser.get_cache_stats()["size"] == 1


class TestParseErrors:
    @pytest.mark.parametrize("code_js", ["var = ;", "require('a'", "function (", "}"])
    def test_invalid_source_raises(self, code_js):
        with pytest.raises(ParseError):
            parse(code_js)

    def test_error_location(self):
        with pytest.raises(ParseError) as exc_info:
            parse("var ok = 1;\nvar = ;")
        assert exc_info.value.line == 2
        assert str(exc_info.value).endswith(f"({exc_info.value.line}:{exc_info.value.column})")

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse("var = ;")

    def test_invalid_source_raises_every_time(self):
        for _ in range(2):
            with pytest.raises(ParseError):
                parse("var = ;")

    def test_error_after_long_chain(self):
        with pytest.raises(ParseError):
            parse("var s = " + " + ".join(["'a'"] * 5000) + " + ;")
