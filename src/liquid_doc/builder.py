"""AST builder: walks a grammar syntax tree and collects documentation nodes."""

from __future__ import annotations

from liquid_doc.ast import (
    LiquidAST,
    LiquidDocDescriptionNode,
    LiquidDocExampleNode,
    LiquidDocParamNode,
    LiquidDocUnsupportedNode,
    LiquidRawTag,
    Position,
    TextNode,
)
from liquid_doc.errors import RuleMismatchError
from liquid_doc.syntax import Rule, Span, SyntaxNode

# Productions that carry no documentation of their own
_STRUCTURAL = frozenset({Rule.EOI, Rule.TEMPLATE_TEXT})


def build(tree: SyntaxNode, position_offset: int | None = None) -> LiquidAST:
    """Build a fresh, sealed AST from a syntax tree."""
    ast = LiquidAST()
    visit(ast, tree, position_offset)
    return ast.seal()


def visit(ast: LiquidAST, node: SyntaxNode, position_offset: int | None = None) -> None:
    """Append the documentation nodes found under node to ast, in source order."""
    rule = node.rule

    if rule is Rule.DOCUMENT or rule is Rule.TEMPLATE:
        # Roots emit nothing themselves
        for child in node.children:
            visit(ast, child, position_offset)
    elif rule is Rule.IMPLICIT_DESCRIPTION:
        description = LiquidDocDescriptionNode.implicit(node, position_offset)
        if not description.content.is_empty():
            ast.add_node(description)
    elif rule is Rule.LIQUID_DOC_NODE:
        if len(node.children) != 1:
            raise RuleMismatchError("doc node must wrap exactly one tag production", rule)
        _visit_tag(ast, node.children[0], position_offset)
    elif rule is Rule.TEXT_NODE:
        text = TextNode.from_syntax(node, position_offset)
        if not text.is_empty():
            ast.add_node(text)
    elif rule is Rule.RAW_TAG:
        ast.add_node(_build_raw_tag(node, position_offset))
    elif rule in _STRUCTURAL:
        pass
    else:
        raise RuleMismatchError("unhandled production", rule)


def _visit_tag(ast: LiquidAST, node: SyntaxNode, position_offset: int | None) -> None:
    rule = node.rule
    if rule is Rule.PARAM_NODE:
        ast.add_node(LiquidDocParamNode.from_syntax(node, position_offset))
    elif rule is Rule.EXAMPLE_NODE:
        ast.add_node(LiquidDocExampleNode.from_syntax(node, position_offset))
    elif rule is Rule.DESCRIPTION_NODE:
        ast.add_node(LiquidDocDescriptionNode.explicit(node, position_offset))
    elif rule is Rule.PROMPT_NODE or rule is Rule.FALLBACK_NODE:
        ast.add_node(LiquidDocUnsupportedNode.from_syntax(node, position_offset))
    else:
        raise RuleMismatchError("unexpected production inside a doc node", rule)


def _build_raw_tag(node: SyntaxNode, position_offset: int | None) -> LiquidRawTag:
    if len(node.children) != 6:
        raise RuleMismatchError("raw tag must have open tag, body, and close tag parts", node.rule)
    ws_start, tag_name, ws_end, body, delim_ws_start, delim_ws_end = node.children
    if body.rule is not Rule.RAW_TAG_BODY:
        raise RuleMismatchError("expected a raw tag body", body.rule)

    # The delimiter tags sit on either side of the body
    open_span = Span(node.span.start, body.span.start)
    close_span = Span(body.span.end, node.span.end)

    # Body spans are already relative to the same source as the tag itself
    children = LiquidAST()
    for inner in body.children:
        visit(children, inner, position_offset)

    return LiquidRawTag(
        name=tag_name.text,
        body=body.text,
        children=children.nodes,
        whitespace_start=ws_start.text,
        whitespace_end=ws_end.text,
        delimiter_whitespace_start=delim_ws_start.text,
        delimiter_whitespace_end=delim_ws_end.text,
        block_start_position=Position.from_span(open_span, position_offset),
        block_end_position=Position.from_span(close_span, position_offset),
        position=Position.from_span(node.span, position_offset),
        source=node.text,
    )
