"""Grammar rule kinds, syntax tree structures, and character classification helpers."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum, auto
from itertools import accumulate


class Rule(Enum):
    # LiquidDoc
    DOCUMENT = auto()  # root of a doc comment body
    IMPLICIT_DESCRIPTION = auto()  # leading free text
    DESCRIPTION_CONTENT = auto()  # inner content of IMPLICIT_DESCRIPTION
    LIQUID_DOC_NODE = auto()  # container for exactly one tag production
    PARAM_NODE = auto()  # @param {type} name - description
    PARAM_TYPE = auto()  # {type}
    PARAM_NAME = auto()  # name or [name]
    PARAM_DESCRIPTION = auto()  # rest of the @param line
    EXAMPLE_NODE = auto()  # @example ...
    DESCRIPTION_NODE = auto()  # @description ...
    PROMPT_NODE = auto()  # @prompt ...
    FALLBACK_NODE = auto()  # @anything-else ...
    MULTILINE_TEXT = auto()  # free-form tag content
    TEXT_NODE = auto()  # plain text between tags

    # Liquid template
    TEMPLATE = auto()  # root of a full template
    TEMPLATE_TEXT = auto()  # markup outside doc blocks
    RAW_TAG = auto()  # {% doc %} ... {% enddoc %}
    RAW_TAG_BODY = auto()  # interior of RAW_TAG, wraps a DOCUMENT
    TAG_NAME = auto()  # name of the opening tag
    WHITESPACE_CONTROL = auto()  # "-" or "" next to a tag delimiter

    EOI = auto()


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open range of UTF-8 byte offsets matched by a production."""

    start: int
    end: int


@dataclass(frozen=True, slots=True)
class SyntaxNode:
    """A production in the grammar engine's output tree."""

    rule: Rule
    text: str
    span: Span
    children: tuple[SyntaxNode, ...] = ()


def is_ident_char(ch: str) -> bool:
    """Return True if ch may appear in a tag or parameter name."""
    return ch.isalnum() or ch == "_" or ch == "-"


def is_strict_space(ch: str) -> bool:
    """Return True for horizontal whitespace (no newlines)."""
    return ch == " " or ch == "\t"


def is_space(ch: str) -> bool:
    """Return True for any whitespace, including newlines."""
    return ch in " \t\r\n\f\v"


def utf8_offsets(text: str) -> list[int]:
    """Return the UTF-8 byte offset of every index into text, end index included.

    Lone surrogates are counted as their 3-byte surrogatepass encoding.
    """
    if text.isascii():
        return list(range(len(text) + 1))
    return list(accumulate((utf8_len(ch) for ch in text), initial=0))


def utf8_len(text: str) -> int:
    """Return the number of bytes text occupies in UTF-8."""
    return len(text.encode("utf-8", "surrogatepass"))


def char_index(text: str, byte_offset: int) -> int:
    """Convert a UTF-8 byte offset into text back into a string index.

    A byte offset inside a multi-byte character maps to that character.
    """
    if text.isascii():
        return max(0, min(byte_offset, len(text)))
    return max(0, bisect_right(utf8_offsets(text), byte_offset) - 1)
