"""LiquidDoc parser: runs the grammar engine and builds the AST."""

from __future__ import annotations

import logging

from liquid_doc.ast import LiquidAST
from liquid_doc.builder import build
from liquid_doc.errors import GrammarError
from liquid_doc.grammar import GrammarEngine, LiquidDocGrammar
from liquid_doc.syntax import Rule

logger = logging.getLogger(__name__)


def parse_or_raise(
    text: str,
    position_offset: int | None = None,
    *,
    grammar: GrammarEngine | None = None,
) -> LiquidAST:
    """Parse a doc comment body. Raises GrammarError if the text does not match."""
    return _parse(Rule.DOCUMENT, text, position_offset, grammar)


def parse(
    text: str,
    position_offset: int | None = None,
    *,
    grammar: GrammarEngine | None = None,
) -> LiquidAST | None:
    """Parse a doc comment body, returning None if the text does not match.

    ``position_offset`` is added to every position, for text that was cut
    out of a larger document.
    """
    try:
        return parse_or_raise(text, position_offset, grammar=grammar)
    except GrammarError as exc:
        logger.debug("LiquidDoc parse failed:\n%s", exc)
        return None


def parse_template_or_raise(
    text: str,
    position_offset: int | None = None,
    *,
    grammar: GrammarEngine | None = None,
) -> LiquidAST:
    """Parse every {% doc %} block of a Liquid template into LiquidRawTag nodes."""
    return _parse(Rule.TEMPLATE, text, position_offset, grammar)


def parse_template(
    text: str,
    position_offset: int | None = None,
    *,
    grammar: GrammarEngine | None = None,
) -> LiquidAST | None:
    """Like parse_template_or_raise, but returns None on a grammar failure."""
    try:
        return parse_template_or_raise(text, position_offset, grammar=grammar)
    except GrammarError as exc:
        logger.debug("Liquid template parse failed:\n%s", exc)
        return None


def _parse(
    rule: Rule,
    text: str,
    position_offset: int | None,
    grammar: GrammarEngine | None,
) -> LiquidAST:
    if position_offset is not None and position_offset < 0:
        raise ValueError(f"position offset must be non-negative, got {position_offset}")
    engine = grammar if grammar is not None else LiquidDocGrammar()
    tree = engine.parse(rule, text)
    return build(tree, position_offset)
