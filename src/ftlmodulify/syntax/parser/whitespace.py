"""Whitespace handling for the FTL parser.

Fluent only treats U+0020 as inline whitespace; tabs are ordinary text.
Line endings are normalized to LF before parsing starts.
"""

from ftlmodulify.syntax.cursor import Cursor

# First characters that end a block pattern even when indented:
# closing brace, attribute, variant and default variant.
_NON_CONTINUATION_CHARS: frozenset[str] = frozenset("}.[*")


def skip_blank_inline(cursor: Cursor) -> Cursor:
    """Skip inline whitespace.

    Per Fluent EBNF:
        blank_inline ::= " "+
    """
    return cursor.skip_spaces()


def skip_blank(cursor: Cursor) -> Cursor:
    """Skip spaces and line endings.

    Per Fluent EBNF:
        blank ::= (blank_inline | line_end)+

    Used between variants, inside placeables and inside call arguments.
    """
    return cursor.skip_whitespace()


def skip_blank_block(cursor: Cursor) -> tuple[str, Cursor]:
    """Skip whole blank lines.

    Per Fluent EBNF:
        blank_block ::= (blank_inline? line_end)+

    Returns:
        Tuple of (one "\\n" per consumed line, cursor at column 1 of the
        first non-blank line). Trailing spaces before EOF are consumed.
    """
    newlines: list[str] = []
    while True:
        line_start = cursor
        cursor = cursor.skip_spaces()
        if cursor.is_eof:
            return "".join(newlines), cursor
        if cursor.current != "\n":
            return "".join(newlines), line_start
        newlines.append("\n")
        cursor = cursor.advance()


def is_value_continuation(line_start: Cursor) -> bool:
    """Check whether the line at ``line_start`` continues a pattern.

    A continuation line is indented and does not start with ``}``, ``.``,
    ``[`` or ``*``. A line whose first non-space character is ``{`` always
    continues the pattern, indented or not.

    Args:
        line_start: Cursor at column 1 of a non-blank line
    """
    content = line_start.skip_spaces()
    if content.is_eof:
        return False
    if content.current == "{":
        return True
    if content.pos == line_start.pos:
        return False
    return content.current not in _NON_CONTINUATION_CHARS
