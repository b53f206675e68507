"""Tests for the debug AST dump."""

from __future__ import annotations

import io

from liquid_doc.debug import dump_ast
from liquid_doc.parser import parse, parse_template


def _dump(ast) -> str:
    out = io.StringIO()
    dump_ast(ast, file=out)
    return out.getvalue()


class TestDumpAst:
    def test_empty(self) -> None:
        assert _dump(parse("")) == "LiquidAST\n"

    def test_param(self) -> None:
        text = _dump(parse("@param {String} [title] - The title", 10))
        assert text.splitlines() == [
            "LiquidAST",
            "  Param optional @10..45",
            "    type='String' @18..24",
            "    name='title' @27..32",
            "    description='The title' @36..45",
        ]

    def test_description_and_example(self) -> None:
        text = _dump(parse("Intro\n@example\nx\n"))
        assert "  Description implicit @0..6\n" in text
        assert "    content='Intro\\n' @0..6\n" in text
        assert "  Example @6..17\n" in text

    def test_unsupported(self) -> None:
        text = _dump(parse("@since 1.0"))
        assert "  Unsupported fallback @0..10\n" in text
        assert "    source='@since 1.0'\n" in text

    def test_raw_tag_children_nested(self) -> None:
        text = _dump(parse_template("{%- doc %}@param x{% enddoc %}"))
        lines = text.splitlines()
        assert lines[1].startswith("  RawTag {%- doc %}")
        assert lines[2].startswith("    Param required")
