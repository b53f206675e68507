"""AST node types for parsed LiquidDoc comments."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from typing import ClassVar, Union

from liquid_doc.errors import RuleMismatchError
from liquid_doc.syntax import Rule, Span, SyntaxNode, utf8_len


def _expect_rule(node: SyntaxNode, rule: Rule) -> None:
    if node.rule is not rule:
        raise RuleMismatchError(f"expected a {rule.name} production", node.rule)


@dataclass(frozen=True, slots=True)
class Position:
    """Half-open range [start, end) of UTF-8 byte offsets into the original source."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"position start {self.start} is past end {self.end}")

    @classmethod
    def from_span(cls, span: Span, position_offset: int | None = None) -> Position:
        offset = position_offset or 0
        return cls(span.start + offset, span.end + offset)

    def shift_start(self, n: int) -> Position:
        """Move start forward by n, after n leading characters were trimmed."""
        return Position(self.start + n, self.end)

    def shift_end(self, n: int) -> Position:
        """Move end back by n, after n trailing characters were trimmed."""
        return Position(self.start, self.end - n)


@dataclass(frozen=True, slots=True)
class TextNode:
    """A slice of source text with its position.

    ``source`` is the text of the production the value was taken from, so
    ``value`` may be a sub-slice of it once brackets or prefixes are trimmed.
    """

    NODE_TYPE: ClassVar[str] = "TextNode"

    value: str
    position: Position
    source: str

    @classmethod
    def from_syntax(
        cls,
        node: SyntaxNode,
        position_offset: int | None = None,
        source: str | None = None,
    ) -> TextNode:
        return cls(
            node.text,
            Position.from_span(node.span, position_offset),
            node.text if source is None else source,
        )

    @classmethod
    def without_brackets(
        cls,
        node: SyntaxNode,
        position_offset: int | None = None,
        source: str | None = None,
    ) -> TextNode:
        """Build from node, dropping leading '{'/'[' and trailing '}'/']'."""
        text = cls.from_syntax(node, position_offset, source)
        value = text.value.lstrip("{[")
        leading = len(text.value) - len(value)
        stripped = value.rstrip("}]")
        trailing = len(value) - len(stripped)
        # Brackets are single-byte, so character counts are byte counts
        if leading == 0 and trailing == 0:
            return text
        position = text.position.shift_start(leading).shift_end(trailing)
        return replace(text, value=stripped, position=position)

    def trim_prefix(self, prefix: str) -> TextNode:
        if not prefix or not self.value.startswith(prefix):
            return self
        return replace(
            self,
            value=self.value[len(prefix) :],
            position=self.position.shift_start(utf8_len(prefix)),
        )

    def is_empty(self) -> bool:
        return len(self.value) == 0


@dataclass(frozen=True, slots=True)
class LiquidDocDescriptionNode:
    """Description text, either introduced by @description or leading free text."""

    NODE_TYPE: ClassVar[str] = "LiquidDocDescriptionNode"

    content: TextNode
    is_implicit: bool
    is_inline: bool
    position: Position
    source: str
    name: str = field(default="description", init=False)

    @classmethod
    def explicit(cls, node: SyntaxNode, position_offset: int | None = None) -> LiquidDocDescriptionNode:
        _expect_rule(node, Rule.DESCRIPTION_NODE)
        content = TextNode.from_syntax(node, position_offset).trim_prefix(_marker(node))
        return cls(
            content,
            is_implicit=False,
            is_inline=True,
            position=Position.from_span(node.span, position_offset),
            source=node.text,
        )

    @classmethod
    def implicit(cls, node: SyntaxNode, position_offset: int | None = None) -> LiquidDocDescriptionNode:
        _expect_rule(node, Rule.IMPLICIT_DESCRIPTION)
        if len(node.children) != 1:
            raise RuleMismatchError("implicit description must wrap one content production", node.rule)
        content = TextNode.from_syntax(node.children[0], position_offset)
        return cls(
            content,
            is_implicit=True,
            is_inline=True,
            position=Position.from_span(node.span, position_offset),
            source=node.text,
        )


@dataclass(frozen=True, slots=True)
class LiquidDocParamNode:
    """A @param line: optional {type}, name or [name], optional description."""

    NODE_TYPE: ClassVar[str] = "LiquidDocParamNode"

    param_type: TextNode | None
    param_name: TextNode
    param_description: TextNode | None
    required: bool
    position: Position
    source: str
    name: str = field(default="param", init=False)

    @classmethod
    def from_syntax(cls, node: SyntaxNode, position_offset: int | None = None) -> LiquidDocParamNode:
        _expect_rule(node, Rule.PARAM_NODE)
        children = iter(node.children)
        first = next(children, None)
        if first is None:
            raise RuleMismatchError("param production has no children", node.rule)

        param_type: TextNode | None = None
        if first.rule is Rule.PARAM_TYPE:
            param_type = TextNode.without_brackets(first, position_offset, node.text)
            name = next(children, None)
            if name is None:
                raise RuleMismatchError("expected a param name after the param type", node.rule)
        else:
            name = first

        # Brackets on the raw name token mark the parameter optional
        required = not (name.text.startswith("[") and name.text.endswith("]"))
        param_name = TextNode.without_brackets(name, position_offset, node.text)

        param_description: TextNode | None = None
        description = next(children, None)
        if description is not None and description.text:
            param_description = TextNode.from_syntax(description, position_offset, node.text)

        return cls(
            param_type,
            param_name,
            param_description,
            required,
            Position.from_span(node.span, position_offset),
            node.text,
        )


@dataclass(frozen=True, slots=True)
class LiquidDocExampleNode:
    """Example code introduced by @example."""

    NODE_TYPE: ClassVar[str] = "LiquidDocExampleNode"

    content: TextNode
    is_inline: bool
    position: Position
    source: str
    name: str = field(default="example", init=False)

    @classmethod
    def from_syntax(cls, node: SyntaxNode, position_offset: int | None = None) -> LiquidDocExampleNode:
        _expect_rule(node, Rule.EXAMPLE_NODE)
        content = TextNode.from_syntax(node, position_offset).trim_prefix(_marker(node))
        return cls(
            content,
            is_inline=True,
            position=Position.from_span(node.span, position_offset),
            source=node.text,
        )


@dataclass(frozen=True, slots=True)
class LiquidDocUnsupportedNode:
    """Placeholder for a recognized tag that has no structured form (@prompt, unknown tags)."""

    NODE_TYPE: ClassVar[str] = "LiquidDocUnsupportedNode"

    name: str
    position: Position
    source: str

    @classmethod
    def from_syntax(cls, node: SyntaxNode, position_offset: int | None = None) -> LiquidDocUnsupportedNode:
        if node.rule is Rule.PROMPT_NODE:
            name = "prompt"
        elif node.rule is Rule.FALLBACK_NODE:
            name = "fallback"
        else:
            raise RuleMismatchError("expected a prompt or fallback production", node.rule)
        return cls(name, Position.from_span(node.span, position_offset), node.text)


@dataclass(frozen=True, slots=True)
class LiquidRawTag:
    """A {% doc %} block whose body was parsed into child nodes.

    ``block_start_position`` covers the opening tag and ``block_end_position``
    the closing one.
    """

    NODE_TYPE: ClassVar[str] = "LiquidRawTag"

    name: str
    body: str
    children: tuple[LiquidNode, ...]
    whitespace_start: str
    whitespace_end: str
    delimiter_whitespace_start: str
    delimiter_whitespace_end: str
    block_start_position: Position
    block_end_position: Position
    position: Position
    source: str


LiquidNode = Union[
    LiquidDocDescriptionNode,
    LiquidDocParamNode,
    LiquidDocExampleNode,
    LiquidDocUnsupportedNode,
    TextNode,
    LiquidRawTag,
]


class LiquidAST:
    """Ordered documentation nodes, in source order.

    The builder appends nodes while it walks the syntax tree, then seals the
    AST; a sealed AST is a read-only value.
    """

    __slots__ = ("_nodes", "_sealed")

    def __init__(self, nodes: Iterable[LiquidNode] = ()) -> None:
        self._nodes = list(nodes)
        self._sealed = False

    @property
    def nodes(self) -> tuple[LiquidNode, ...]:
        return tuple(self._nodes)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def add_node(self, node: LiquidNode) -> None:
        if self._sealed:
            raise TypeError("cannot add nodes to a sealed LiquidAST")
        self._nodes.append(node)

    def seal(self) -> LiquidAST:
        self._sealed = True
        return self

    def head(self) -> LiquidNode:
        return self._nodes[0]

    def __iter__(self) -> Iterator[LiquidNode]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LiquidAST):
            return NotImplemented
        return self._nodes == other._nodes

    def __repr__(self) -> str:
        return f"LiquidAST(nodes={self.nodes!r})"


def _marker(node: SyntaxNode) -> str:
    """The tag keyword plus the whitespace the grammar consumed after it."""
    if not node.children:
        return ""
    width = node.children[0].span.start - node.span.start
    encoded = node.text.encode("utf-8", "surrogatepass")
    return encoded[:width].decode("utf-8", "surrogatepass")
