"""Error types with formatted source context."""

from __future__ import annotations

from liquid_doc.syntax import Rule


def line_col(source: str, offset: int) -> tuple[int, int]:
    """Return the 1-based (line, column) of a string index into source."""
    offset = max(0, min(offset, len(source)))
    line = source.count("\n", 0, offset) + 1
    line_start = source.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


class GrammarError(Exception):
    """Raised when the grammar cannot derive a syntax tree for the input.

    ``offset`` is a string index into ``source``, for caret diagrams.
    """

    def __init__(self, message: str, offset: int, source: str) -> None:
        self.message = message
        self.offset = offset
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "<input>") -> str:
        line, col = line_col(self.source, self.offset)
        lines = self.source.splitlines(keepends=True)
        line_idx = line - 1

        # Build the source line (strip trailing newline for display)
        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        pad = " " * (col - 1)

        line_num = str(line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}^"
        )


class RuleMismatchError(Exception):
    """Raised when a production reaches code that does not handle its rule kind.

    This means the grammar and the builder's rule table have drifted apart;
    it is a defect, never a property of the input.
    """

    def __init__(self, message: str, rule: Rule) -> None:
        self.message = message
        self.rule = rule
        super().__init__(f"{message} (rule {rule.name})")


class SerializationError(ValueError):
    """Raised when interchange data cannot be turned back into AST nodes."""
