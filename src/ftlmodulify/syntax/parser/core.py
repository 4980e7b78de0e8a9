"""Core FTL parser implementation.

This module provides the FluentParser class that turns source text into a
:class:`~ftlmodulify.syntax.ast.Resource`.

Architecture:
    The parser uses an immutable cursor (:class:`~ftlmodulify.syntax.cursor.Cursor`)
    to traverse source text. Grammar rules in
    :mod:`~ftlmodulify.syntax.parser.rules` return a ParseResult or None.

Recovery:
    ``parse()`` never raises on syntax. An entry that fails to parse becomes
    a :class:`~ftlmodulify.syntax.ast.Junk` node with one Annotation, and
    parsing resumes at the next line that looks like an entry start
    (``#``, ``-`` or an ASCII letter in column 1).

    ``parse_strict()`` runs the same parse and raises FluentSyntaxError on
    the first Junk entry or on a repeated message/term id.

Security:
    Configurable input size and placeable nesting limits.
"""

import logging
from dataclasses import replace

from ftlmodulify.constants import MAX_DEPTH, MAX_SOURCE_SIZE, TERM_PREFIX
from ftlmodulify.diagnostics import (
    DiagnosticCode,
    ErrorTemplate,
    FluentSyntaxError,
    SourceSpan,
)
from ftlmodulify.enums import CommentType
from ftlmodulify.syntax.ast import (
    Annotation,
    Comment,
    Entry,
    Junk,
    Message,
    Resource,
    Span,
    Term,
)
from ftlmodulify.syntax.cursor import Cursor, ParseResult
from ftlmodulify.syntax.parser.primitives import (
    _set_parse_error,
    clear_parse_error,
    get_last_parse_error,
    is_identifier_start,
)
from ftlmodulify.syntax.parser.rules import (
    ParseContext,
    _expect_line_end,
    parse_comment,
    parse_message,
    parse_term,
)
from ftlmodulify.syntax.parser.whitespace import skip_blank_block

__all__ = ["FluentParser"]

logger = logging.getLogger(__name__)

# Longest excerpt of a Junk entry quoted in strict-mode errors.
_EXCERPT_LENGTH: int = 40


def _parse_entry(
    cursor: Cursor, context: ParseContext
) -> ParseResult[Message] | ParseResult[Term] | ParseResult[Comment] | None:
    ch = cursor.current
    if ch == "#":
        return parse_comment(cursor)
    if ch == "-":
        return parse_term(cursor, context)
    if is_identifier_start(ch):
        return parse_message(cursor, context)
    _set_parse_error(f"Expected an entry start, found {ch!r}", cursor.pos)
    return None


def _skip_to_next_entry_start(start: Cursor, error_pos: int) -> Cursor:
    """Find where the Junk that starts at ``start`` ends.

    Per Fluent EBNF:
        Junk ::= junk_line (junk_line - "#" - "-" - [a-zA-Z])*

    Scanning resumes from the last line break before the error, so lines the
    failed rule had already consumed are never re-parsed as new entries.
    """
    last_newline = start.source.rfind("\n", 0, error_pos)
    cursor = Cursor(start.source, last_newline) if last_newline > start.pos else start

    while not cursor.is_eof:
        cursor = cursor.skip_to_line_end().skip_line_end()
        if cursor.is_eof:
            break
        ch = cursor.current
        if ch in ("#", "-") or is_identifier_start(ch):
            break
    return cursor


def _excerpt(content: str) -> str:
    first_line = content.split("\n", 1)[0]
    if len(first_line) > _EXCERPT_LENGTH:
        return first_line[:_EXCERPT_LENGTH] + "..."
    return first_line


class FluentParser:
    """FTL parser using the immutable cursor pattern.

    Attributes:
        max_source_size: Maximum allowed source size in characters (default: 10 MiB)
        max_nesting_depth: Maximum allowed placeable nesting depth (default: 100)
    """

    __slots__ = ("_max_nesting_depth", "_max_source_size")

    def __init__(
        self,
        *,
        max_source_size: int | None = None,
        max_nesting_depth: int | None = None,
    ) -> None:
        """Initialize parser with optional size and nesting depth limits.

        Args:
            max_source_size: Maximum source size (default: 10 MiB).
                            Set to 0 to disable the size limit.
            max_nesting_depth: Maximum placeable nesting depth (default: 100).
        """
        self._max_source_size = (
            max_source_size if max_source_size is not None else MAX_SOURCE_SIZE
        )
        self._max_nesting_depth = (
            max_nesting_depth if max_nesting_depth is not None else MAX_DEPTH
        )

    @property
    def max_source_size(self) -> int:
        """Maximum allowed source size in characters."""
        return self._max_source_size

    @property
    def max_nesting_depth(self) -> int:
        """Maximum allowed placeable nesting depth."""
        return self._max_nesting_depth

    def parse(self, source: str) -> Resource:
        """Parse FTL source into a Resource, keeping malformed entries as Junk.

        Args:
            source: FTL text (CRLF line endings are accepted)

        Returns:
            Resource whose entries are Message, Term, Comment or Junk nodes
            in source order. Spans are offsets into the LF-normalized text.

        Raises:
            ValueError: If source exceeds max_source_size

        Example:
            >>> resource = FluentParser().parse("hello = World")
            >>> resource.entries[0].id.name
            'hello'
        """
        if self._max_source_size > 0 and len(source) > self._max_source_size:
            msg = (
                f"Source size ({len(source):,} characters) exceeds maximum "
                f"({self._max_source_size:,}). "
                "Configure max_source_size in FluentParser constructor to increase limit."
            )
            raise ValueError(msg)

        source = source.replace("\r\n", "\n")
        context = ParseContext(max_nesting_depth=self._max_nesting_depth)
        entries: list[Entry] = []

        # A "#" comment immediately followed by a message or term belongs to
        # it; otherwise the comment stands alone.
        pending_comment: Comment | None = None

        _, cursor = skip_blank_block(Cursor(source, 0))
        while not cursor.is_eof:
            entry, cursor = self._parse_entry_or_junk(cursor, context)
            blank_lines, cursor = skip_blank_block(cursor)

            if (
                isinstance(entry, Comment)
                and entry.type is CommentType.COMMENT
                and not blank_lines
                and not cursor.is_eof
            ):
                pending_comment = entry
                continue

            if pending_comment is not None:
                if isinstance(entry, (Message, Term)):
                    entry = replace(entry, comment=pending_comment)
                else:
                    entries.append(pending_comment)
                pending_comment = None

            entries.append(entry)

        return Resource(entries=tuple(entries))

    def parse_strict(self, source: str) -> Resource:
        """Parse FTL source, rejecting malformed entries and duplicate ids.

        Raises:
            ValueError: If source exceeds max_source_size
            FluentSyntaxError: On the first Junk entry or repeated id. The
                diagnostic carries the line and column of the problem.
        """
        resource = self.parse(source)
        normalized = source.replace("\r\n", "\n")
        seen: set[str] = set()

        for entry in resource.entries:
            match entry:
                case Junk(content=content, annotations=annotations, span=span):
                    reason = annotations[0].message if annotations else "Parse error"
                    error_pos = span.start if span is not None else 0
                    if annotations and annotations[0].span is not None:
                        error_pos = annotations[0].span.start
                    raise FluentSyntaxError(
                        ErrorTemplate.junk_entry(
                            reason,
                            _excerpt(content),
                            self._source_span(normalized, error_pos, span),
                        )
                    )
                case Message(id=identifier, span=span) | Term(id=identifier, span=span):
                    key = identifier.name
                    if isinstance(entry, Term):
                        key = TERM_PREFIX + key
                    if key in seen:
                        location = (
                            self._source_span(normalized, span.start, span)
                            if span is not None
                            else None
                        )
                        raise FluentSyntaxError(ErrorTemplate.duplicate_entry(key, location))
                    seen.add(key)
                case _:
                    pass

        return resource

    @staticmethod
    def _source_span(source: str, pos: int, span: Span | None) -> SourceSpan:
        line, column = Cursor(source, pos).compute_line_col()
        end = span.end if span is not None else pos
        return SourceSpan(start=pos, end=max(end, pos), line=line, column=column)

    def _parse_entry_or_junk(
        self, cursor: Cursor, context: ParseContext
    ) -> tuple[Entry, Cursor]:
        clear_parse_error()
        result = _parse_entry(cursor, context)
        if result is not None:
            end = _expect_line_end(result.cursor)
            if end is not None:
                return result.value, end
        return self._make_junk(cursor)

    def _make_junk(self, start: Cursor) -> tuple[Junk, Cursor]:
        error = get_last_parse_error()
        error_pos = start.pos if error is None else max(error.position, start.pos)

        end = _skip_to_next_entry_start(start, error_pos)
        error_pos = min(error_pos, end.pos)

        if error is not None:
            code, reason = error.code.name, error.message
        else:
            code, reason = DiagnosticCode.PARSE_JUNK.name, "Parse error"
        annotation = Annotation(code=code, message=reason, span=Span(error_pos, error_pos))

        logger.debug("Junk at offset %d: %s", start.pos, reason)
        junk = Junk(
            content=start.slice_to(end.pos),
            annotations=(annotation,),
            span=Span(start=start.pos, end=end.pos),
        )
        return junk, end
