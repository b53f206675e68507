"""LiquidDoc grammar: matches source text against the rule set and builds a syntax tree."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from liquid_doc.errors import GrammarError
from liquid_doc.syntax import (
    Rule,
    Span,
    SyntaxNode,
    is_ident_char,
    is_space,
    is_strict_space,
    utf8_offsets,
)

# Tags that terminate free-form (multiline) content
_SUPPORTED_TAGS = ("@prompt", "@example", "@description", "@param")


class GrammarEngine(Protocol):
    """Turns raw text into a syntax tree rooted at the given rule.

    Span offsets are UTF-8 byte offsets into text. Implementations raise
    GrammarError when no tree can be derived.
    """

    def parse(self, rule: Rule, text: str) -> SyntaxNode: ...


class LiquidDocGrammar:
    """Default grammar engine for doc comments and {% doc %} blocks in templates."""

    def parse(self, rule: Rule, text: str) -> SyntaxNode:
        matcher = _Matcher(text)
        if rule is Rule.DOCUMENT:
            return matcher.document()
        if rule is Rule.TEMPLATE:
            return matcher.template()
        raise ValueError(f"{rule.name} is not an entry rule")


class _Matcher:
    """Backtracking recursive descent matcher over a single source string."""

    def __init__(self, source: str) -> None:
        self._source = source
        # Spans are reported in UTF-8 bytes; matching works on str indexes
        self._offsets = utf8_offsets(source)
        self._pos = 0
        # Where "end of input" is; narrowed while matching a doc block body
        self._limit = len(source)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < self._limit:
            return self._source[idx]
        return ""

    def _at_end(self) -> bool:
        return self._pos >= self._limit

    def _at_literal(self, literal: str, pos: int | None = None) -> bool:
        if pos is None:
            pos = self._pos
        return self._source.startswith(literal, pos, self._limit)

    def _at_keyword(self, keyword: str) -> bool:
        """Literal match that does not run on into an identifier."""
        if not self._at_literal(keyword):
            return False
        after = self._pos + len(keyword)
        return after >= self._limit or not is_ident_char(self._source[after])

    def _strict_space_end(self, pos: int) -> int:
        while pos < self._limit and is_strict_space(self._source[pos]):
            pos += 1
        return pos

    def _skip_strict_space(self) -> None:
        self._pos = self._strict_space_end(self._pos)

    def _skip_space(self) -> None:
        while self._pos < self._limit and is_space(self._source[self._pos]):
            self._pos += 1

    def _skip_ident(self) -> int:
        """Consume identifier characters, returning how many were consumed."""
        start = self._pos
        while self._pos < self._limit and is_ident_char(self._source[self._pos]):
            self._pos += 1
        return self._pos - start

    def _scan_until(self, stop: Callable[[int], bool]) -> None:
        while self._pos < self._limit and not stop(self._pos):
            self._pos += 1

    def _node(self, rule: Rule, start: int, children: list[SyntaxNode] | None = None) -> SyntaxNode:
        return SyntaxNode(
            rule,
            self._source[start : self._pos],
            Span(self._offsets[start], self._offsets[self._pos]),
            tuple(children) if children else (),
        )

    def _error(self, message: str, offset: int | None = None) -> GrammarError:
        if offset is None:
            offset = self._pos
        return GrammarError(message, offset, self._source)

    # ------------------------------------------------------------------
    # Lookahead predicates
    # ------------------------------------------------------------------

    def _at_open_control(self, pos: int) -> bool:
        pos = self._strict_space_end(pos)
        return pos >= self._limit or self._source[pos] == "@"

    def _at_end_of_param(self, pos: int) -> bool:
        pos = self._strict_space_end(pos)
        return pos >= self._limit or self._at_literal("\n", pos) or self._at_literal("\r\n", pos)

    def _at_end_of_multiline(self, pos: int) -> bool:
        pos = self._strict_space_end(pos)
        if pos >= self._limit:
            return True
        return any(self._at_literal(tag, pos) for tag in _SUPPORTED_TAGS)

    # ------------------------------------------------------------------
    # Document level
    # ------------------------------------------------------------------

    def document(self) -> SyntaxNode:
        start = self._pos
        self._skip_space()
        children = [self._implicit_description()]

        while True:
            self._skip_space()
            if self._at_end():
                break
            node = self._liquid_doc_node()
            if node is None:
                node = self._text_node()
            if node is None:
                break
            children.append(node)

        if not self._at_end():
            # Only a bare '@' can stop the loop early
            raise self._error("expected a tag name after '@'")

        children.append(self._node(Rule.EOI, self._pos))
        return self._node(Rule.DOCUMENT, start, children)

    def _implicit_description(self) -> SyntaxNode:
        start = self._pos
        self._scan_until(self._at_open_control)
        content = self._node(Rule.DESCRIPTION_CONTENT, start)
        return self._node(Rule.IMPLICIT_DESCRIPTION, start, [content])

    def _text_node(self) -> SyntaxNode | None:
        start = self._pos
        self._scan_until(self._at_open_control)
        if self._pos == start:
            return None
        return self._node(Rule.TEXT_NODE, start)

    def _liquid_doc_node(self) -> SyntaxNode | None:
        if self._peek() != "@":
            return None
        start = self._pos
        alternatives = (self._param, self._example, self._description, self._prompt, self._fallback)
        for alternative in alternatives:
            node = alternative()
            if node is not None:
                return self._node(Rule.LIQUID_DOC_NODE, start, [node])
            self._pos = start
        return None

    # ------------------------------------------------------------------
    # @param
    # ------------------------------------------------------------------

    def _param(self) -> SyntaxNode | None:
        start = self._pos
        if not self._at_keyword("@param"):
            return None
        self._pos += len("@param")
        self._skip_strict_space()

        children: list[SyntaxNode] = []
        if self._peek() == "{":
            param_type = self._param_type()
            if param_type is None:
                return None
            children.append(param_type)
            self._skip_strict_space()

        name = self._param_name()
        if name is None:
            return None
        children.append(name)

        # Optional "-" separating the name from the description
        saved = self._pos
        self._skip_strict_space()
        if self._peek() == "-":
            self._pos += 1
        else:
            self._pos = saved
        self._skip_strict_space()

        children.append(self._param_description())
        return self._node(Rule.PARAM_NODE, start, children)

    def _param_type(self) -> SyntaxNode | None:
        start = self._pos
        self._pos += 1  # consume {
        while self._pos < self._limit:
            ch = self._source[self._pos]
            if ch == "}" or is_space(ch):
                break
            self._pos += 1
        if self._peek() != "}":
            self._pos = start
            return None
        self._pos += 1
        return self._node(Rule.PARAM_TYPE, start)

    def _param_name(self) -> SyntaxNode | None:
        start = self._pos
        bracketed = self._peek() == "["
        if bracketed:
            self._pos += 1
        if self._skip_ident() == 0:
            self._pos = start
            return None
        if bracketed:
            if self._peek() != "]":
                self._pos = start
                return None
            self._pos += 1
        return self._node(Rule.PARAM_NAME, start)

    def _param_description(self) -> SyntaxNode:
        start = self._pos
        if self._peek() != "]":
            self._scan_until(self._at_end_of_param)
        return self._node(Rule.PARAM_DESCRIPTION, start)

    # ------------------------------------------------------------------
    # Free-form tags
    # ------------------------------------------------------------------

    def _tag_with_content(self, keyword: str, rule: Rule, skip_space: bool) -> SyntaxNode | None:
        start = self._pos
        if not self._at_keyword(keyword):
            return None
        self._pos += len(keyword)
        if skip_space:
            self._skip_space()
        content_start = self._pos
        self._scan_until(self._at_end_of_multiline)
        content = self._node(Rule.MULTILINE_TEXT, content_start)
        return self._node(rule, start, [content])

    def _example(self) -> SyntaxNode | None:
        return self._tag_with_content("@example", Rule.EXAMPLE_NODE, skip_space=True)

    def _description(self) -> SyntaxNode | None:
        return self._tag_with_content("@description", Rule.DESCRIPTION_NODE, skip_space=True)

    def _prompt(self) -> SyntaxNode | None:
        # Leading whitespace is kept to preserve indentation
        return self._tag_with_content("@prompt", Rule.PROMPT_NODE, skip_space=False)

    def _fallback(self) -> SyntaxNode | None:
        start = self._pos
        self._pos += 1  # consume @
        if self._skip_ident() == 0:
            self._pos = start
            return None
        self._scan_until(self._at_end_of_param)
        return self._node(Rule.FALLBACK_NODE, start)

    # ------------------------------------------------------------------
    # Liquid templates
    # ------------------------------------------------------------------

    def template(self) -> SyntaxNode:
        start = self._pos
        children: list[SyntaxNode] = []
        while not self._at_end():
            if self._at_tag(self._pos, "doc"):
                children.append(self._raw_tag())
            else:
                children.append(self._template_text())
        children.append(self._node(Rule.EOI, self._pos))
        return self._node(Rule.TEMPLATE, start, children)

    def _template_text(self) -> SyntaxNode:
        start = self._pos
        self._pos += 1
        while not self._at_end() and not self._at_tag(self._pos, "doc"):
            self._pos += 1
        return self._node(Rule.TEMPLATE_TEXT, start)

    def _raw_tag(self) -> SyntaxNode:
        start = self._pos
        open_tag = self._liquid_tag("doc")
        if open_tag is None:
            raise self._error("expected '{% doc %}'")
        ws_start, tag_name, ws_end = open_tag

        body_start = self._pos
        while not self._at_end() and not self._at_tag(self._pos, "enddoc"):
            self._pos += 1
        if self._at_end():
            raise self._error("unterminated '{% doc %}' block, expected '{% enddoc %}'", start)
        body_end = self._pos

        # The body is a document of its own whose end is the closing tag
        self._pos = body_start
        saved_limit = self._limit
        self._limit = body_end
        try:
            document = self.document()
        finally:
            self._limit = saved_limit
        body = self._node(Rule.RAW_TAG_BODY, body_start, [document])

        close_tag = self._liquid_tag("enddoc")
        if close_tag is None:
            raise self._error("expected '{% enddoc %}'")
        delim_ws_start, _, delim_ws_end = close_tag

        return self._node(
            Rule.RAW_TAG,
            start,
            [ws_start, tag_name, ws_end, body, delim_ws_start, delim_ws_end],
        )

    def _liquid_tag(self, name: str) -> tuple[SyntaxNode, SyntaxNode, SyntaxNode] | None:
        """Match {%- name -%} at the current position; whitespace controls are optional."""
        start = self._pos
        if not self._at_literal("{%"):
            return None
        self._pos += 2
        ws_start = self._whitespace_control()
        self._skip_space()

        name_start = self._pos
        if not self._at_literal(name):
            self._pos = start
            return None
        self._pos += len(name)
        after = self._peek()
        if after.isalnum() or after == "_":
            self._pos = start
            return None
        tag_name = self._node(Rule.TAG_NAME, name_start)

        self._skip_space()
        ws_end = self._whitespace_control()
        if not self._at_literal("%}"):
            self._pos = start
            return None
        self._pos += 2
        return ws_start, tag_name, ws_end

    def _whitespace_control(self) -> SyntaxNode:
        start = self._pos
        if self._peek() == "-":
            self._pos += 1
        return self._node(Rule.WHITESPACE_CONTROL, start)

    def _at_tag(self, pos: int, name: str) -> bool:
        saved = self._pos
        self._pos = pos
        try:
            return self._liquid_tag(name) is not None
        finally:
            self._pos = saved
