"""Integration tests: parse the sample templates under tests/fixtures/."""

from __future__ import annotations

from pathlib import Path

import pytest

from liquid_doc.ast import (
    LiquidDocDescriptionNode,
    LiquidDocExampleNode,
    LiquidDocParamNode,
    LiquidDocUnsupportedNode,
    LiquidRawTag,
)
from liquid_doc.parser import parse_template
from liquid_doc.serialize import from_json, to_json

FIXTURES = Path(__file__).parent / "fixtures"
TEMPLATES = sorted(FIXTURES.glob("*.liquid"))


def _load(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


@pytest.mark.parametrize("path", TEMPLATES, ids=lambda p: p.name)
def test_fixture_parses(path: Path, text_nodes, source_slice) -> None:
    source = path.read_text(encoding="utf-8")
    ast = parse_template(source)
    assert ast is not None

    for node in ast:
        assert 0 <= node.position.start <= node.position.end <= len(source.encode("utf-8"))
        assert source_slice(source, node.position.start, node.position.end) == node.source
        if isinstance(node, LiquidRawTag):
            start, end = node.block_start_position, node.block_end_position
            assert source_slice(source, start.start, start.end).startswith("{%")
            assert source_slice(source, end.start, end.end).endswith("%}")
    for text in text_nodes(ast):
        assert source_slice(source, text.position.start, text.position.end) == text.value


@pytest.mark.parametrize("path", TEMPLATES, ids=lambda p: p.name)
def test_fixture_json_round_trip(path: Path) -> None:
    ast = parse_template(path.read_text(encoding="utf-8"))
    assert ast is not None
    text = to_json(ast)
    assert to_json(from_json(text)) == text


class TestProductCard:
    def test_single_doc_block(self) -> None:
        ast = parse_template(_load("product-card.liquid"))
        assert ast is not None
        assert len(ast) == 1
        tag = ast.head()
        assert isinstance(tag, LiquidRawTag)
        assert tag.name == "doc"

    def test_children(self) -> None:
        ast = parse_template(_load("product-card.liquid"))
        assert ast is not None
        tag = ast.head()
        assert isinstance(tag, LiquidRawTag)
        kinds = [type(child) for child in tag.children]
        assert kinds == [
            LiquidDocDescriptionNode,
            LiquidDocParamNode,
            LiquidDocParamNode,
            LiquidDocParamNode,
            LiquidDocExampleNode,
        ]

    def test_params(self) -> None:
        ast = parse_template(_load("product-card.liquid"))
        assert ast is not None
        tag = ast.head()
        assert isinstance(tag, LiquidRawTag)
        params = [c for c in tag.children if isinstance(c, LiquidDocParamNode)]
        assert [p.param_name.value for p in params] == ["product", "badge", "show_price"]
        assert [p.required for p in params] == [True, False, False]
        assert params[0].param_type is not None
        assert params[0].param_type.value == "Object"
        assert params[2].param_description is None

    def test_example_content(self) -> None:
        ast = parse_template(_load("product-card.liquid"))
        assert ast is not None
        tag = ast.head()
        assert isinstance(tag, LiquidRawTag)
        example = tag.children[-1]
        assert isinstance(example, LiquidDocExampleNode)
        assert example.content.value.startswith("{% render 'product-card'")


class TestHeader:
    def test_whitespace_controls(self) -> None:
        ast = parse_template(_load("header.liquid"))
        assert ast is not None
        tag = ast.head()
        assert isinstance(tag, LiquidRawTag)
        assert (tag.whitespace_start, tag.whitespace_end) == ("-", "-")
        assert (tag.delimiter_whitespace_start, tag.delimiter_whitespace_end) == ("-", "-")

    def test_unsupported_tags(self) -> None:
        ast = parse_template(_load("header.liquid"))
        assert ast is not None
        tag = ast.head()
        assert isinstance(tag, LiquidRawTag)
        unsupported = [c for c in tag.children if isinstance(c, LiquidDocUnsupportedNode)]
        assert [u.name for u in unsupported] == ["fallback", "prompt"]
        assert unsupported[0].source == "@deprecated use the section header instead"


def test_template_without_doc_block() -> None:
    ast = parse_template(_load("no-doc.liquid"))
    assert ast is not None
    assert len(ast) == 0
