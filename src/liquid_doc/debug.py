"""Human-readable AST dump for the debug output format."""

from __future__ import annotations

import sys
from typing import TextIO

from liquid_doc.ast import (
    LiquidAST,
    LiquidDocDescriptionNode,
    LiquidDocExampleNode,
    LiquidDocParamNode,
    LiquidDocUnsupportedNode,
    LiquidNode,
    LiquidRawTag,
    Position,
    TextNode,
)


def dump_ast(ast: LiquidAST, *, file: TextIO = sys.stdout) -> None:
    """Print a human-readable AST tree to *file*."""
    file.write("LiquidAST\n")
    for node in ast.nodes:
        _dump_node(node, 1, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _span(position: Position) -> str:
    return f"@{position.start}..{position.end}"


def _dump_node(node: LiquidNode, depth: int, f: TextIO) -> None:
    if isinstance(node, TextNode):
        f.write(f"{_indent(depth)}Text({node.value!r}) {_span(node.position)}\n")
    elif isinstance(node, LiquidDocDescriptionNode):
        kind = "implicit" if node.is_implicit else "explicit"
        f.write(f"{_indent(depth)}Description {kind} {_span(node.position)}\n")
        _dump_field("content", node.content, depth + 1, f)
    elif isinstance(node, LiquidDocParamNode):
        required = "required" if node.required else "optional"
        f.write(f"{_indent(depth)}Param {required} {_span(node.position)}\n")
        _dump_field("type", node.param_type, depth + 1, f)
        _dump_field("name", node.param_name, depth + 1, f)
        _dump_field("description", node.param_description, depth + 1, f)
    elif isinstance(node, LiquidDocExampleNode):
        f.write(f"{_indent(depth)}Example {_span(node.position)}\n")
        _dump_field("content", node.content, depth + 1, f)
    elif isinstance(node, LiquidDocUnsupportedNode):
        f.write(f"{_indent(depth)}Unsupported {node.name} {_span(node.position)}\n")
        f.write(f"{_indent(depth + 1)}source={node.source!r}\n")
    elif isinstance(node, LiquidRawTag):
        f.write(
            f"{_indent(depth)}RawTag {{%{node.whitespace_start} {node.name} {node.whitespace_end}%}}"
            f" {_span(node.position)}\n"
        )
        for child in node.children:
            _dump_node(child, depth + 1, f)


def _dump_field(label: str, text: TextNode | None, depth: int, f: TextIO) -> None:
    if text is None:
        f.write(f"{_indent(depth)}{label}=None\n")
    else:
        f.write(f"{_indent(depth)}{label}={text.value!r} {_span(text.position)}\n")
