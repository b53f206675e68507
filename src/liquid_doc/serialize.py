"""JSON interchange format for LiquidDoc ASTs.

Every node is an object tagged by its ``type`` field; keys are emitted in a
fixed order so that serialize -> deserialize -> serialize is byte-identical.
"""

from __future__ import annotations

import json
from typing import Any

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
from liquid_doc.errors import SerializationError


def ast_to_dict(ast: LiquidAST) -> dict[str, Any]:
    return {"nodes": [node_to_dict(node) for node in ast.nodes]}


def ast_from_dict(data: dict[str, Any]) -> LiquidAST:
    nodes = _require_list(data, "nodes")
    return LiquidAST(node_from_dict(item) for item in nodes).seal()


def to_json(ast: LiquidAST, indent: int | None = 2) -> str:
    return json.dumps(ast_to_dict(ast), indent=indent, ensure_ascii=False)


def from_json(text: str) -> LiquidAST:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SerializationError(f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise SerializationError("expected a JSON object with a 'nodes' list")
    return ast_from_dict(data)


# ----------------------------------------------------------------------
# Nodes → dicts
# ----------------------------------------------------------------------


def node_to_dict(node: LiquidNode) -> dict[str, Any]:
    if isinstance(node, TextNode):
        return _text_to_dict(node)
    if isinstance(node, LiquidDocDescriptionNode):
        return {
            "type": node.NODE_TYPE,
            "name": node.name,
            "position": _position_to_dict(node.position),
            "source": node.source,
            "content": _text_to_dict(node.content),
            "isImplicit": node.is_implicit,
            "isInline": node.is_inline,
        }
    if isinstance(node, LiquidDocParamNode):
        return {
            "type": node.NODE_TYPE,
            "name": node.name,
            "position": _position_to_dict(node.position),
            "source": node.source,
            "paramType": _optional_text_to_dict(node.param_type),
            "paramName": _text_to_dict(node.param_name),
            "paramDescription": _optional_text_to_dict(node.param_description),
            "required": node.required,
        }
    if isinstance(node, LiquidDocExampleNode):
        return {
            "type": node.NODE_TYPE,
            "name": node.name,
            "position": _position_to_dict(node.position),
            "source": node.source,
            "content": _text_to_dict(node.content),
            "isInline": node.is_inline,
        }
    if isinstance(node, LiquidDocUnsupportedNode):
        return {
            "type": node.NODE_TYPE,
            "name": node.name,
            "position": _position_to_dict(node.position),
            "source": node.source,
        }
    if isinstance(node, LiquidRawTag):
        return {
            "type": node.NODE_TYPE,
            "name": node.name,
            "body": node.body,
            "children": [node_to_dict(child) for child in node.children],
            "whitespaceStart": node.whitespace_start,
            "whitespaceEnd": node.whitespace_end,
            "delimiterWhitespaceStart": node.delimiter_whitespace_start,
            "delimiterWhitespaceEnd": node.delimiter_whitespace_end,
            "blockStartPosition": _position_to_dict(node.block_start_position),
            "blockEndPosition": _position_to_dict(node.block_end_position),
            "position": _position_to_dict(node.position),
            "source": node.source,
        }
    raise TypeError(f"not a LiquidDoc node: {type(node).__name__}")


def _position_to_dict(position: Position) -> dict[str, int]:
    return {"start": position.start, "end": position.end}


def _text_to_dict(text: TextNode) -> dict[str, Any]:
    return {
        "type": TextNode.NODE_TYPE,
        "value": text.value,
        "position": _position_to_dict(text.position),
        "source": text.source,
    }


def _optional_text_to_dict(text: TextNode | None) -> dict[str, Any] | None:
    return None if text is None else _text_to_dict(text)


# ----------------------------------------------------------------------
# Dicts → nodes
# ----------------------------------------------------------------------


def node_from_dict(data: dict[str, Any]) -> LiquidNode:
    if not isinstance(data, dict):
        raise SerializationError(f"expected a node object, got {type(data).__name__}")
    node_type = _require(data, "type")

    if node_type == TextNode.NODE_TYPE:
        return _text_from_dict(data)
    if node_type == LiquidDocDescriptionNode.NODE_TYPE:
        _check_name(data, "description")
        return LiquidDocDescriptionNode(
            content=_text_from_dict(_require(data, "content")),
            is_implicit=_require_bool(data, "isImplicit"),
            is_inline=_require_bool(data, "isInline"),
            position=_position_from_dict(_require(data, "position")),
            source=_require(data, "source"),
        )
    if node_type == LiquidDocParamNode.NODE_TYPE:
        _check_name(data, "param")
        return LiquidDocParamNode(
            param_type=_optional_text_from_dict(data.get("paramType")),
            param_name=_text_from_dict(_require(data, "paramName")),
            param_description=_optional_text_from_dict(data.get("paramDescription")),
            required=_require_bool(data, "required"),
            position=_position_from_dict(_require(data, "position")),
            source=_require(data, "source"),
        )
    if node_type == LiquidDocExampleNode.NODE_TYPE:
        _check_name(data, "example")
        return LiquidDocExampleNode(
            content=_text_from_dict(_require(data, "content")),
            is_inline=_require_bool(data, "isInline"),
            position=_position_from_dict(_require(data, "position")),
            source=_require(data, "source"),
        )
    if node_type == LiquidDocUnsupportedNode.NODE_TYPE:
        return LiquidDocUnsupportedNode(
            name=_require(data, "name"),
            position=_position_from_dict(_require(data, "position")),
            source=_require(data, "source"),
        )
    if node_type == LiquidRawTag.NODE_TYPE:
        return LiquidRawTag(
            name=_require(data, "name"),
            body=_require(data, "body"),
            children=tuple(node_from_dict(child) for child in _require_list(data, "children")),
            whitespace_start=_require(data, "whitespaceStart"),
            whitespace_end=_require(data, "whitespaceEnd"),
            delimiter_whitespace_start=_require(data, "delimiterWhitespaceStart"),
            delimiter_whitespace_end=_require(data, "delimiterWhitespaceEnd"),
            block_start_position=_position_from_dict(_require(data, "blockStartPosition")),
            block_end_position=_position_from_dict(_require(data, "blockEndPosition")),
            position=_position_from_dict(_require(data, "position")),
            source=_require(data, "source"),
        )
    raise SerializationError(f"unknown node type {node_type!r}")


def _require(data: Any, key: str) -> Any:
    if not isinstance(data, dict):
        raise SerializationError(f"expected an object with key {key!r}, got {type(data).__name__}")
    try:
        return data[key]
    except KeyError:
        raise SerializationError(f"missing required key {key!r}") from None


def _require_bool(data: Any, key: str) -> bool:
    value = _require(data, key)
    if not isinstance(value, bool):
        raise SerializationError(f"{key!r} must be a boolean, got {value!r}")
    return value


def _require_list(data: Any, key: str) -> list[Any]:
    value = _require(data, key)
    if not isinstance(value, list):
        raise SerializationError(f"{key!r} must be a list, got {type(value).__name__}")
    return value


def _check_name(data: dict[str, Any], expected: str) -> None:
    name = data.get("name", expected)
    if name != expected:
        raise SerializationError(f"{data['type']} must have name {expected!r}, got {name!r}")


def _position_from_dict(data: Any) -> Position:
    start = _require(data, "start")
    end = _require(data, "end")
    for value in (start, end):
        if not isinstance(value, int) or isinstance(value, bool):
            raise SerializationError(f"invalid position: offsets must be integers, got {value!r}")
    try:
        return Position(start, end)
    except ValueError as exc:
        raise SerializationError(f"invalid position: {exc}") from exc


def _text_from_dict(data: Any) -> TextNode:
    # The "type" tag is written on output only
    return TextNode(
        value=_require(data, "value"),
        position=_position_from_dict(_require(data, "position")),
        source=_require(data, "source"),
    )


def _optional_text_from_dict(data: dict[str, Any] | None) -> TextNode | None:
    return None if data is None else _text_from_dict(data)
