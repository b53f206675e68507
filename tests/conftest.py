"""Shared test fixtures and helpers."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from liquid_doc.ast import (
    LiquidAST,
    LiquidDocDescriptionNode,
    LiquidDocExampleNode,
    LiquidDocParamNode,
    LiquidNode,
    LiquidRawTag,
    TextNode,
)
from liquid_doc.parser import parse

OFFSET = 10


@pytest.fixture
def parse_doc():
    """Return a helper that parses source (offset 10 by default) and asserts success."""

    def _parse(source: str, position_offset: int | None = OFFSET) -> LiquidAST:
        ast = parse(source, position_offset)
        assert ast is not None, f"Expected {source!r} to parse"
        return ast

    return _parse


def _walk_text(node: LiquidNode) -> Iterator[TextNode]:
    if isinstance(node, TextNode):
        yield node
    elif isinstance(node, (LiquidDocDescriptionNode, LiquidDocExampleNode)):
        yield node.content
    elif isinstance(node, LiquidDocParamNode):
        if node.param_type is not None:
            yield node.param_type
        yield node.param_name
        if node.param_description is not None:
            yield node.param_description
    elif isinstance(node, LiquidRawTag):
        for child in node.children:
            yield from _walk_text(child)


@pytest.fixture
def text_nodes():
    """Return a helper that yields every TextNode in an AST, including nested ones."""

    def _text_nodes(ast: LiquidAST) -> list[TextNode]:
        return [text for node in ast.nodes for text in _walk_text(node)]

    return _text_nodes


@pytest.fixture
def source_slice():
    """Return a helper that cuts [start, end) UTF-8 byte offsets out of source."""

    def _slice(source: str, start: int, end: int) -> str:
        return source.encode("utf-8")[start:end].decode("utf-8")

    return _slice
