"""Tests for @example parsing."""

from __future__ import annotations

from liquid_doc.ast import LiquidDocExampleNode, LiquidDocParamNode, Position


def _example(ast) -> LiquidDocExampleNode:
    node = ast.head()
    assert isinstance(node, LiquidDocExampleNode), f"Expected LiquidDocExampleNode, got {type(node).__name__}"
    return node


class TestInlineExample:
    def test_simple_inline(self, parse_doc) -> None:
        example = _example(parse_doc("@example simple inline example\n"))
        assert example.name == "example"
        assert example.content.value == "simple inline example\n"
        assert example.is_inline

    def test_positions(self, parse_doc) -> None:
        example = _example(parse_doc("@example simple inline example\n"))
        assert example.position == Position(10, 41)
        assert example.content.position == Position(19, 41)
        assert example.source == "@example simple inline example\n"
        assert example.content.source == example.source


class TestMultilineExample:
    def test_marker_and_newline_trimmed(self, parse_doc) -> None:
        source = (
            "@example\n"
            "{% render 'resource-card', resource: product, resource_type: 'product', "
            "image_width: 300, image_aspect_ratio: '1/1' %}\n"
        )
        example = _example(parse_doc(source))
        assert example.content.value.startswith("{% render 'resource-card'")
        assert example.content.position.start == 10 + len("@example\n")

    def test_example_stops_at_next_tag(self, parse_doc) -> None:
        ast = parse_doc("@example\n{{ product.title }}\n@param product\n")
        assert _example(ast).content.value == "{{ product.title }}\n"
        assert isinstance(ast.nodes[1], LiquidDocParamNode)

    def test_at_sign_inside_example(self, parse_doc) -> None:
        example = _example(parse_doc("@example mail to support@shop.com\n"))
        assert example.content.value == "mail to support@shop.com\n"

    def test_two_examples(self, parse_doc) -> None:
        ast = parse_doc("@example one\n@example two\n")
        assert [n.content.value for n in ast.nodes] == ["one\n", "two\n"]

    def test_empty_example_is_kept(self, parse_doc) -> None:
        ast = parse_doc("@example\n@param x\n")
        assert _example(ast).content.is_empty()
        assert len(ast) == 2
