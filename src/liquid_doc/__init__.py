"""LiquidDoc comment parser."""

from __future__ import annotations

from typing import Any

__version__ = "0.1.0"


def parse_liquid(text: str, position_offset: int | None = None) -> dict[str, Any] | None:
    """Parse a doc comment body into its interchange dict, or None on a grammar failure."""
    from liquid_doc.parser import parse
    from liquid_doc.serialize import ast_to_dict

    ast = parse(text, position_offset)
    if ast is None:
        return None
    return ast_to_dict(ast)
