"""Primitive parsers for identifiers, numbers and string literals.

Error Context:
    Rules signal failure by returning None. The reason is stored per thread
    via ``_set_parse_error()`` and read back with ``get_last_parse_error()``
    when the parser turns the failed entry into Junk.
"""

from dataclasses import dataclass
from threading import local as thread_local

from ftlmodulify.diagnostics.codes import DiagnosticCode
from ftlmodulify.syntax.cursor import Cursor, ParseResult

# \uXXXX = 4 hex digits, \UXXXXXX = 6 hex digits
_UNICODE_ESCAPE_LEN_SHORT: int = 4
_UNICODE_ESCAPE_LEN_LONG: int = 6

_MAX_UNICODE_CODE_POINT: int = 0x10FFFF
_SURROGATE_RANGE_START: int = 0xD800
_SURROGATE_RANGE_END: int = 0xDFFF

_HEX_DIGITS: str = "0123456789abcdefABCDEF"

# str.isdigit() accepts characters like "²" that int() rejects.
ASCII_DIGITS: str = "0123456789"

_ASCII_LETTERS: frozenset[str] = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
)
_IDENTIFIER_CHARS: frozenset[str] = _ASCII_LETTERS | frozenset(ASCII_DIGITS + "-_")
_CALLEE_CHARS: frozenset[str] = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ" + ASCII_DIGITS + "-_"
)

_error_thread_local = thread_local()


@dataclass(frozen=True, slots=True)
class ParseErrorContext:
    """Why and where the most recent rule failed."""

    message: str
    position: int
    code: DiagnosticCode = DiagnosticCode.PARSE_JUNK


def _set_parse_error(
    message: str,
    position: int,
    code: DiagnosticCode = DiagnosticCode.PARSE_JUNK,
) -> None:
    """Store parse error context for later retrieval."""
    _error_thread_local.last_error = ParseErrorContext(
        message=message, position=position, code=code
    )


def get_last_parse_error() -> ParseErrorContext | None:
    """Return the last recorded failure on this thread, if any."""
    return getattr(_error_thread_local, "last_error", None)


def clear_parse_error() -> None:
    """Forget the last failure (called at the start of each entry)."""
    _error_thread_local.last_error = None


def is_identifier_start(ch: str) -> bool:
    """ASCII letter check; Fluent identifiers never start with other scripts."""
    return ch in _ASCII_LETTERS


def is_identifier_char(ch: str) -> bool:
    return ch in _IDENTIFIER_CHARS


def is_callee_name(name: str) -> bool:
    """Function names are upper-case: [A-Z][A-Z0-9_-]*"""
    return bool(name) and name[0].isupper() and all(ch in _CALLEE_CHARS for ch in name)


def parse_identifier(cursor: Cursor) -> ParseResult[str] | None:
    """Parse identifier: [a-zA-Z][a-zA-Z0-9_-]*

    Examples:
        hello -> "hello"
        brand-name -> "brand-name"
    """
    if cursor.is_eof or not is_identifier_start(cursor.current):
        _set_parse_error("Expected identifier (must start with a letter)", cursor.pos)
        return None

    start_pos = cursor.pos
    cursor = cursor.advance()
    while not cursor.is_eof and is_identifier_char(cursor.current):
        cursor = cursor.advance()

    return ParseResult(Cursor(cursor.source, start_pos).slice_to(cursor.pos), cursor)


def parse_number_value(num_str: str) -> int | float:
    """Convert a number literal to int, or float when it has a fraction."""
    return int(num_str) if "." not in num_str else float(num_str)


def parse_number(cursor: Cursor) -> ParseResult[str] | None:
    """Parse number literal: -?[0-9]+(.[0-9]+)?

    Returns the raw text; use parse_number_value() for the numeric value.
    """
    start_pos = cursor.pos

    if not cursor.is_eof and cursor.current == "-":
        cursor = cursor.advance()

    if cursor.is_eof or cursor.current not in ASCII_DIGITS:
        _set_parse_error("Expected number", cursor.pos)
        return None

    while not cursor.is_eof and cursor.current in ASCII_DIGITS:
        cursor = cursor.advance()

    if not cursor.is_eof and cursor.current == ".":
        cursor = cursor.advance()
        if cursor.is_eof or cursor.current not in ASCII_DIGITS:
            _set_parse_error("Expected digit after decimal point", cursor.pos)
            return None
        while not cursor.is_eof and cursor.current in ASCII_DIGITS:
            cursor = cursor.advance()

    return ParseResult(Cursor(cursor.source, start_pos).slice_to(cursor.pos), cursor)


def _parse_unicode_escape(cursor: Cursor, length: int) -> tuple[str, Cursor] | None:
    hex_digits = cursor.source[cursor.pos : cursor.pos + length]
    if len(hex_digits) < length or not all(c in _HEX_DIGITS for c in hex_digits):
        _set_parse_error(
            f"Invalid Unicode escape (expected {length} hex digits)", cursor.pos
        )
        return None

    code_point = int(hex_digits, 16)
    if code_point > _MAX_UNICODE_CODE_POINT:
        _set_parse_error(f"Invalid Unicode code point: U+{hex_digits}", cursor.pos)
        return None
    if _SURROGATE_RANGE_START <= code_point <= _SURROGATE_RANGE_END:
        # Fluent decodes lone surrogates to the replacement character.
        return ("�", cursor.advance(length))
    return (chr(code_point), cursor.advance(length))


def parse_escape_sequence(cursor: Cursor) -> tuple[str, Cursor] | None:  # noqa: PLR0911
    """Parse the escape after a backslash inside a string literal.

    Supported: \\" \\\\ \\uXXXX \\UXXXXXX
    """
    if cursor.is_eof:
        _set_parse_error("Unexpected EOF in escape sequence", cursor.pos)
        return None

    escape_ch = cursor.current
    if escape_ch == '"':
        return ('"', cursor.advance())
    if escape_ch == "\\":
        return ("\\", cursor.advance())
    if escape_ch == "u":
        return _parse_unicode_escape(cursor.advance(), _UNICODE_ESCAPE_LEN_SHORT)
    if escape_ch == "U":
        return _parse_unicode_escape(cursor.advance(), _UNICODE_ESCAPE_LEN_LONG)

    _set_parse_error(f"Invalid escape sequence: \\{escape_ch}", cursor.pos)
    return None


def parse_string_literal(cursor: Cursor) -> ParseResult[str] | None:
    """Parse string literal: "text"

    Examples:
        "hello" -> "hello"
        "with \\"quotes\\"" -> 'with "quotes"'
        "\\u00E4" -> "ä"
    """
    if cursor.is_eof or cursor.current != '"':
        _set_parse_error("Expected opening quote", cursor.pos)
        return None

    cursor = cursor.advance()
    chars: list[str] = []

    while not cursor.is_eof:
        ch = cursor.current
        if ch == '"':
            return ParseResult("".join(chars), cursor.advance())
        if ch == "\n":
            break
        if ch == "\\":
            escape_result = parse_escape_sequence(cursor.advance())
            if escape_result is None:
                return None
            escaped_char, cursor = escape_result
            chars.append(escaped_char)
        else:
            chars.append(ch)
            cursor = cursor.advance()

    _set_parse_error("Unterminated string literal", cursor.pos)
    return None
