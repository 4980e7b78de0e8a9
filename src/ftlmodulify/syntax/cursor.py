"""Immutable cursor infrastructure for parsing.

Every grammar rule takes a Cursor and returns ``ParseResult[T] | None``;
``None`` means the rule did not match. Because ``advance()`` returns a new
cursor, a loop that forgets to reassign cannot spin forever.

Line endings are normalized to LF before a Cursor is created, so ``\\n`` is
the only line delimiter.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass

from ftlmodulify.diagnostics.templates import ErrorTemplate

__all__ = ["Cursor", "ParseResult"]


@dataclass(frozen=True, slots=True)
class Cursor:
    """Immutable source position tracker.

    Example:
        >>> cursor = Cursor("hello", 0)
        >>> cursor.current
        'h'
        >>> cursor.advance().current
        'e'
        >>> cursor.current  # original unchanged
        'h'
        >>> Cursor("hi", 2).is_eof
        True
    """

    source: str
    pos: int

    @property
    def is_eof(self) -> bool:
        """True once the position reaches the end of the source."""
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        """Character at the current position.

        Raises:
            EOFError: If at end of input. Check ``is_eof`` first.
        """
        if self.is_eof:
            raise EOFError(ErrorTemplate.unexpected_eof(self.pos).message)
        return self.source[self.pos]

    def peek(self, offset: int = 0) -> str | None:
        """Character at ``pos + offset``, or None past the end."""
        target_pos = self.pos + offset
        if target_pos >= len(self.source):
            return None
        return self.source[target_pos]

    def advance(self, count: int = 1) -> "Cursor":
        """Return a new cursor moved forward by ``count`` characters."""
        return Cursor(self.source, min(self.pos + count, len(self.source)))

    def slice_to(self, end_pos: int) -> str:
        """Source text from the current position up to ``end_pos``."""
        return self.source[self.pos : end_pos]

    def skip_spaces(self) -> "Cursor":
        """Skip U+0020 only (Fluent ``blank_inline``)."""
        c = self
        while not c.is_eof and c.current == " ":
            c = c.advance()
        return c

    def skip_whitespace(self) -> "Cursor":
        """Skip spaces and newlines (Fluent ``blank``)."""
        c = self
        while not c.is_eof and c.current in (" ", "\n"):
            c = c.advance()
        return c

    def skip_to_line_end(self) -> "Cursor":
        """Advance to the next newline (or EOF) without consuming it."""
        end = self.source.find("\n", self.pos)
        return Cursor(self.source, len(self.source) if end == -1 else end)

    def skip_line_end(self) -> "Cursor":
        """Consume one newline if present."""
        if not self.is_eof and self.current == "\n":
            return self.advance()
        return self

    def compute_line_col(self) -> tuple[int, int]:
        """Return the 1-indexed (line, column) of the current position.

        O(n) in the position; only used for error reporting.
        """
        line = self.source.count("\n", 0, self.pos) + 1
        line_start = self.source.rfind("\n", 0, self.pos) + 1
        return line, self.pos - line_start + 1


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """Successful rule match: the parsed value and the cursor after it."""

    value: T
    cursor: Cursor
