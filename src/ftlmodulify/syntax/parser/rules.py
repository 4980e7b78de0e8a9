"""Grammar rules for the FTL parser.

This module provides all parsing rules for FTL grammar constructs:
- Pattern parsing (text, placeables, block indentation)
- Expression parsing (inline expressions, select expressions, calls)
- Entry parsing (messages, terms, attributes, comments)

All grammar rules are co-located in a single module because patterns,
placeables and expressions are mutually recursive.

Every rule takes a Cursor and returns ``ParseResult[T] | None``. On None the
reason is available from ``get_last_parse_error()``.

Lookahead:
    - ``{`` starts a Placeable
    - ``$`` starts a VariableReference
    - ``-`` followed by a digit starts a NumberLiteral, otherwise a TermReference
    - ``(`` after an identifier (blank allowed) makes it a FunctionReference
    - ``->`` after an inline expression starts a SelectExpression
    - ``[`` or ``*[`` at the start of a line starts a Variant

Block patterns:
    Continuation lines are collected with their indentation, then the
    smallest indentation of all lines is removed and trailing blank text is
    trimmed from the end of the pattern.
"""

from dataclasses import dataclass

from ftlmodulify.constants import MAX_DEPTH
from ftlmodulify.diagnostics.codes import DiagnosticCode
from ftlmodulify.enums import CommentType
from ftlmodulify.syntax.ast import (
    Attribute,
    CallArguments,
    Comment,
    Expression,
    FunctionReference,
    Identifier,
    InlineExpression,
    Message,
    MessageReference,
    NamedArgument,
    NumberLiteral,
    Pattern,
    PatternElement,
    Placeable,
    SelectExpression,
    Span,
    StringLiteral,
    Term,
    TermReference,
    TextElement,
    VariableReference,
    Variant,
    VariantKey,
)
from ftlmodulify.syntax.cursor import Cursor, ParseResult
from ftlmodulify.syntax.parser.primitives import (
    ASCII_DIGITS,
    _set_parse_error,
    is_callee_name,
    is_identifier_start,
    parse_identifier,
    parse_number,
    parse_number_value,
    parse_string_literal,
)
from ftlmodulify.syntax.parser.whitespace import (
    is_value_continuation,
    skip_blank,
    skip_blank_block,
    skip_blank_inline,
)

__all__ = [
    "ParseContext",
    "parse_comment",
    "parse_expression",
    "parse_message",
    "parse_pattern",
    "parse_placeable",
    "parse_term",
]

_COMMENT_TYPES: dict[int, CommentType] = {
    1: CommentType.COMMENT,
    2: CommentType.GROUP,
    3: CommentType.RESOURCE,
}

# Text stops at placeable braces and at the end of the line.
_TEXT_STOP_CHARS: frozenset[str] = frozenset("{}\n")


@dataclass(frozen=True, slots=True)
class ParseContext:
    """Explicit context passed through placeable-producing rules.

    Attributes:
        max_nesting_depth: Maximum allowed nesting depth for placeables
        current_depth: Current nesting depth (0 = top level)
    """

    max_nesting_depth: int = MAX_DEPTH
    current_depth: int = 0

    def is_depth_exceeded(self) -> bool:
        """Check if maximum nesting depth has been reached."""
        return self.current_depth >= self.max_nesting_depth

    def enter_placeable(self) -> "ParseContext":
        """Create new context with incremented depth for entering a placeable."""
        return ParseContext(
            max_nesting_depth=self.max_nesting_depth,
            current_depth=self.current_depth + 1,
        )


@dataclass(slots=True)
class _Indent:
    """Indentation collected while parsing a block pattern.

    Holds the preceding line breaks plus the leading spaces of the line.
    Dedenting turns it back into text (or drops it).
    """

    value: str


def _is_digit(ch: str | None) -> bool:
    return ch is not None and ch in ASCII_DIGITS


def _expect_char(cursor: Cursor, ch: str) -> Cursor | None:
    if cursor.is_eof or cursor.current != ch:
        found = "EOF" if cursor.is_eof else repr(cursor.current)
        _set_parse_error(f"Expected {ch!r}, found {found}", cursor.pos)
        return None
    return cursor.advance()


def _expect_line_end(cursor: Cursor) -> Cursor | None:
    """Consume a line end (LF or EOF)."""
    if cursor.is_eof:
        return cursor
    if cursor.current == "\n":
        return cursor.advance()
    _set_parse_error(f"Expected line end, found {cursor.current!r}", cursor.pos)
    return None


# =============================================================================
# Pattern Parsing
# =============================================================================


def parse_text_element(cursor: Cursor) -> ParseResult[TextElement]:
    """Parse text up to the next brace or line end."""
    source = cursor.source
    end = cursor.pos
    while end < len(source) and source[end] not in _TEXT_STOP_CHARS:
        end += 1
    return ParseResult(TextElement(cursor.slice_to(end)), Cursor(source, end))


def _dedent(
    elements: list[TextElement | Placeable | _Indent], common_indent: int
) -> tuple[PatternElement, ...]:
    """Strip the common indent, join adjacent text and trim trailing blanks."""
    trimmed: list[PatternElement] = []

    for element in elements:
        if isinstance(element, Placeable):
            trimmed.append(element)
            continue

        value = element.value
        if isinstance(element, _Indent):
            value = value[: len(value) - common_indent]
            if not value:
                continue

        if trimmed and isinstance(trimmed[-1], TextElement):
            trimmed[-1] = TextElement(trimmed[-1].value + value)
        else:
            trimmed.append(TextElement(value))

    if trimmed and isinstance(trimmed[-1], TextElement):
        last = trimmed[-1].value.rstrip(" \n")
        if last:
            trimmed[-1] = TextElement(last)
        else:
            trimmed.pop()

    return tuple(trimmed)


def parse_pattern(
    cursor: Cursor, context: ParseContext, *, is_block: bool
) -> ParseResult[Pattern] | None:
    """Parse a pattern body.

    Args:
        cursor: Start of the pattern (column 1 of the first line for block
            patterns, first value character for inline patterns)
        context: Parse context for nesting depth tracking
        is_block: True when the pattern starts on a new line

    Returns:
        ParseResult with the Pattern and a cursor at the line end (or EOF)
        that terminated it, or None on error.
    """
    elements: list[TextElement | Placeable | _Indent] = []
    common_indent: int | None = None

    if is_block:
        content = cursor.skip_spaces()
        indent = cursor.slice_to(content.pos)
        elements.append(_Indent(indent))
        common_indent = len(indent)
        cursor = content

    while not cursor.is_eof:
        ch = cursor.current

        if ch == "\n":
            blank_lines, line_start = skip_blank_block(cursor)
            if not is_value_continuation(line_start):
                break
            content = line_start.skip_spaces()
            indent = line_start.slice_to(content.pos)
            if common_indent is None or len(indent) < common_indent:
                common_indent = len(indent)
            elements.append(_Indent(blank_lines + indent))
            cursor = content
            continue

        if ch == "}":
            _set_parse_error("Unbalanced closing brace in text", cursor.pos)
            return None

        if ch == "{":
            placeable = parse_placeable(cursor, context)
            if placeable is None:
                return None
            elements.append(placeable.value)
            cursor = placeable.cursor
            continue

        text = parse_text_element(cursor)
        elements.append(text.value)
        cursor = text.cursor

    return ParseResult(Pattern(_dedent(elements, common_indent or 0)), cursor)


def parse_pattern_start(
    cursor: Cursor, context: ParseContext
) -> ParseResult[Pattern | None] | None:
    """Parse an optional pattern after ``=`` or a variant key.

    The pattern may start on the same line or on a following indented line.

    Returns:
        ParseResult whose value is None when no pattern follows (cursor
        unchanged), or None on a syntax error inside the pattern.
    """
    inline = skip_blank_inline(cursor)
    if not inline.is_eof and inline.current != "\n":
        return parse_pattern(inline, context, is_block=False)

    _, line_start = skip_blank_block(inline)
    if is_value_continuation(line_start):
        return parse_pattern(line_start, context, is_block=True)

    return ParseResult(None, cursor)


# =============================================================================
# Placeables and Select Expressions
# =============================================================================


def parse_placeable(cursor: Cursor, context: ParseContext) -> ParseResult[Placeable] | None:
    """Parse placeable: { expression }

    Nesting depth is checked before entering, so ``{ { { ... } } }`` beyond
    the configured limit fails instead of exhausting the stack.
    """
    if context.is_depth_exceeded():
        _set_parse_error(
            f"Maximum nesting depth ({context.max_nesting_depth}) exceeded",
            cursor.pos,
            DiagnosticCode.PARSE_NESTING_DEPTH_EXCEEDED,
        )
        return None

    start = _expect_char(cursor, "{")
    if start is None:
        return None

    expression = parse_expression(skip_blank(start), context.enter_placeable())
    if expression is None:
        return None

    end = _expect_char(expression.cursor, "}")
    if end is None:
        return None

    return ParseResult(Placeable(expression.value), end)


def _check_selector(selector: InlineExpression, position: int) -> bool:
    match selector:
        case MessageReference(attribute=None):
            _set_parse_error("Message references cannot be used as selectors", position)
            return False
        case MessageReference():
            _set_parse_error("Message attributes cannot be used as selectors", position)
            return False
        case TermReference(attribute=None):
            _set_parse_error("Terms cannot be used as selectors", position)
            return False
        case Placeable():
            _set_parse_error("Placeables cannot be used as selectors", position)
            return False
        case _:
            return True


def parse_expression(cursor: Cursor, context: ParseContext) -> ParseResult[Expression] | None:
    """Parse the body of a placeable: an inline or a select expression.

    The returned cursor is past any trailing blank, at the closing brace.
    """
    selector = parse_inline_expression(cursor, context)
    if selector is None:
        return None

    cursor = skip_blank(selector.cursor)

    if cursor.peek() == "-" and cursor.peek(1) == ">":
        if not _check_selector(selector.value, selector.cursor.pos):
            return None
        arrow_end = _expect_line_end(skip_blank_inline(cursor.advance(2)))
        if arrow_end is None:
            return None
        variants = parse_variants(arrow_end, context)
        if variants is None:
            return None
        return ParseResult(SelectExpression(selector.value, variants.value), variants.cursor)

    if isinstance(selector.value, TermReference) and selector.value.attribute is not None:
        _set_parse_error("Term attributes can only be used as selectors", selector.cursor.pos)
        return None

    return ParseResult(selector.value, cursor)


def _is_variant_start(cursor: Cursor) -> bool:
    offset = 1 if cursor.peek() == "*" else 0
    return cursor.peek(offset) == "[" and cursor.peek(offset + 1) != "["


def parse_variant_key(cursor: Cursor) -> ParseResult[VariantKey] | None:
    """Parse variant key: identifier or number literal."""
    if cursor.is_eof:
        _set_parse_error("Expected variant key", cursor.pos)
        return None

    if _is_digit(cursor.current) or cursor.current == "-":
        number = parse_number(cursor)
        if number is None:
            return None
        return ParseResult(
            NumberLiteral(value=parse_number_value(number.value), raw=number.value),
            number.cursor,
        )

    identifier = parse_identifier(cursor)
    if identifier is None:
        return None
    return ParseResult(Identifier(identifier.value), identifier.cursor)


def parse_variant(
    cursor: Cursor, context: ParseContext, *, has_default: bool
) -> ParseResult[Variant] | None:
    """Parse variant: [key] pattern  or  *[key] pattern"""
    default = False
    if cursor.current == "*":
        if has_default:
            _set_parse_error("Only one variant can be marked as default (*)", cursor.pos)
            return None
        default = True
        cursor = cursor.advance()

    open_bracket = _expect_char(cursor, "[")
    if open_bracket is None:
        return None

    key = parse_variant_key(skip_blank(open_bracket))
    if key is None:
        return None

    close_bracket = _expect_char(skip_blank(key.cursor), "]")
    if close_bracket is None:
        return None

    pattern = parse_pattern_start(close_bracket, context)
    if pattern is None:
        return None
    if pattern.value is None:
        _set_parse_error("Expected variant value", close_bracket.pos)
        return None

    return ParseResult(Variant(key=key.value, value=pattern.value, default=default), pattern.cursor)


def parse_variants(
    cursor: Cursor, context: ParseContext
) -> ParseResult[tuple[Variant, ...]] | None:
    """Parse the variant list of a select expression.

    Each variant sits on its own line; exactly one must be the default.
    """
    variants: list[Variant] = []
    has_default = False
    cursor = skip_blank(cursor)

    while _is_variant_start(cursor):
        result = parse_variant(cursor, context, has_default=has_default)
        if result is None:
            return None
        variants.append(result.value)
        has_default = has_default or result.value.default

        line_end = _expect_line_end(result.cursor)
        if line_end is None:
            return None
        cursor = skip_blank(line_end)

    if not variants:
        _set_parse_error("Expected at least one variant after '->'", cursor.pos)
        return None
    if not has_default:
        _set_parse_error("Expected one of the variants to be marked as default (*)", cursor.pos)
        return None

    return ParseResult(tuple(variants), cursor)


# =============================================================================
# Inline Expressions
# =============================================================================


def _parse_number_literal(cursor: Cursor) -> ParseResult[NumberLiteral] | None:
    number = parse_number(cursor)
    if number is None:
        return None
    return ParseResult(
        NumberLiteral(value=parse_number_value(number.value), raw=number.value),
        number.cursor,
    )


def _parse_string_literal(cursor: Cursor) -> ParseResult[StringLiteral] | None:
    string = parse_string_literal(cursor)
    if string is None:
        return None
    return ParseResult(StringLiteral(string.value), string.cursor)


def _parse_literal(cursor: Cursor) -> ParseResult[StringLiteral | NumberLiteral] | None:
    """Parse the value of a named argument."""
    if not cursor.is_eof and cursor.current == '"':
        return _parse_string_literal(cursor)
    if _is_digit(cursor.peek()) or (cursor.peek() == "-" and _is_digit(cursor.peek(1))):
        return _parse_number_literal(cursor)
    _set_parse_error("Named argument values must be string or number literals", cursor.pos)
    return None


def parse_variable_reference(cursor: Cursor) -> ParseResult[VariableReference] | None:
    """Parse variable reference: $variable"""
    identifier = parse_identifier(cursor.advance())
    if identifier is None:
        return None
    return ParseResult(VariableReference(Identifier(identifier.value)), identifier.cursor)


def _parse_attribute_accessor(cursor: Cursor) -> ParseResult[Identifier | None] | None:
    if cursor.peek() != ".":
        return ParseResult(None, cursor)
    attribute = parse_identifier(cursor.advance())
    if attribute is None:
        return None
    return ParseResult(Identifier(attribute.value), attribute.cursor)


def parse_term_reference(
    cursor: Cursor, context: ParseContext
) -> ParseResult[TermReference] | None:
    """Parse term reference: -term, -term.attr, -term(key: "value")"""
    identifier = parse_identifier(cursor.advance())
    if identifier is None:
        return None

    attribute = _parse_attribute_accessor(identifier.cursor)
    if attribute is None:
        return None
    cursor = attribute.cursor

    arguments: CallArguments | None = None
    lookahead = skip_blank(cursor)
    if lookahead.peek() == "(":
        call = parse_call_arguments(lookahead, context)
        if call is None:
            return None
        arguments = call.value
        cursor = call.cursor

    return ParseResult(
        TermReference(
            id=Identifier(identifier.value), attribute=attribute.value, arguments=arguments
        ),
        cursor,
    )


def _parse_identifier_expression(
    cursor: Cursor, context: ParseContext
) -> ParseResult[MessageReference | FunctionReference] | None:
    """Parse message reference or function call starting with an identifier."""
    identifier = parse_identifier(cursor)
    if identifier is None:
        return None
    name = identifier.value

    lookahead = skip_blank(identifier.cursor)
    if lookahead.peek() == "(":
        if not is_callee_name(name):
            _set_parse_error(
                f"Function names must be upper-case, got {name!r}", identifier.cursor.pos
            )
            return None
        call = parse_call_arguments(lookahead, context)
        if call is None:
            return None
        return ParseResult(FunctionReference(Identifier(name), call.value), call.cursor)

    attribute = _parse_attribute_accessor(identifier.cursor)
    if attribute is None:
        return None
    return ParseResult(
        MessageReference(id=Identifier(name), attribute=attribute.value), attribute.cursor
    )


def parse_inline_expression(  # noqa: PLR0911
    cursor: Cursor, context: ParseContext
) -> ParseResult[InlineExpression] | None:
    """Parse inline expression (everything except select expressions)."""
    if cursor.is_eof:
        _set_parse_error("Expected an inline expression, found EOF", cursor.pos)
        return None

    ch = cursor.current

    if ch == "{":
        return parse_placeable(cursor, context)
    if _is_digit(ch) or (ch == "-" and _is_digit(cursor.peek(1))):
        return _parse_number_literal(cursor)
    if ch == '"':
        return _parse_string_literal(cursor)
    if ch == "$":
        return parse_variable_reference(cursor)
    if ch == "-":
        return parse_term_reference(cursor, context)
    if is_identifier_start(ch):
        return _parse_identifier_expression(cursor, context)

    _set_parse_error(f"Expected an inline expression, found {ch!r}", cursor.pos)
    return None


def _parse_call_argument(
    cursor: Cursor, context: ParseContext
) -> ParseResult[InlineExpression | NamedArgument] | None:
    expression = parse_inline_expression(cursor, context)
    if expression is None:
        return None

    after = skip_blank(expression.cursor)
    if after.peek() != ":":
        return ParseResult(expression.value, after)

    match expression.value:
        case MessageReference(id=name, attribute=None):
            literal = _parse_literal(skip_blank(after.advance()))
            if literal is None:
                return None
            return ParseResult(NamedArgument(name=name, value=literal.value), literal.cursor)
        case _:
            _set_parse_error("Named argument names must be plain identifiers", after.pos)
            return None


def parse_call_arguments(
    cursor: Cursor, context: ParseContext
) -> ParseResult[CallArguments] | None:
    """Parse call arguments: ( positional..., name: literal... )

    Named argument names must be unique and positional arguments may not
    follow named ones. Blank lines are allowed between arguments.
    """
    cursor = skip_blank(cursor.advance())
    positional: list[InlineExpression] = []
    named: list[NamedArgument] = []
    names: set[str] = set()

    while cursor.peek() != ")":
        argument = _parse_call_argument(cursor, context)
        if argument is None:
            return None

        value = argument.value
        if isinstance(value, NamedArgument):
            if value.name.name in names:
                _set_parse_error(f"Duplicate named argument: {value.name.name}", cursor.pos)
                return None
            names.add(value.name.name)
            named.append(value)
        elif named:
            _set_parse_error("Positional arguments must not follow named arguments", cursor.pos)
            return None
        else:
            positional.append(value)

        cursor = skip_blank(argument.cursor)
        if cursor.peek() != ",":
            break
        cursor = skip_blank(cursor.advance())

    end = _expect_char(cursor, ")")
    if end is None:
        return None
    return ParseResult(CallArguments(positional=tuple(positional), named=tuple(named)), end)


# =============================================================================
# Entries
# =============================================================================


def parse_attribute(cursor: Cursor, context: ParseContext) -> ParseResult[Attribute] | None:
    """Parse attribute: .name = pattern"""
    identifier = parse_identifier(cursor.advance())
    if identifier is None:
        return None

    equals = _expect_char(skip_blank_inline(identifier.cursor), "=")
    if equals is None:
        return None

    pattern = parse_pattern_start(equals, context)
    if pattern is None:
        return None
    if pattern.value is None:
        _set_parse_error(f"Expected a value for attribute '{identifier.value}'", equals.pos)
        return None

    return ParseResult(Attribute(Identifier(identifier.value), pattern.value), pattern.cursor)


def parse_attributes(
    cursor: Cursor, context: ParseContext
) -> ParseResult[tuple[Attribute, ...]] | None:
    """Parse zero or more attributes, each on its own (indented) line."""
    attributes: list[Attribute] = []
    while True:
        lookahead = skip_blank(cursor)
        if lookahead.peek() != ".":
            break
        attribute = parse_attribute(lookahead, context)
        if attribute is None:
            return None
        attributes.append(attribute.value)
        cursor = attribute.cursor
    return ParseResult(tuple(attributes), cursor)


def parse_message(cursor: Cursor, context: ParseContext) -> ParseResult[Message] | None:
    """Parse message: identifier = pattern attributes*

    A message needs a value, at least one attribute, or both.
    """
    start = cursor.pos
    identifier = parse_identifier(cursor)
    if identifier is None:
        return None

    equals = _expect_char(skip_blank_inline(identifier.cursor), "=")
    if equals is None:
        return None

    pattern = parse_pattern_start(equals, context)
    if pattern is None:
        return None

    attributes = parse_attributes(pattern.cursor, context)
    if attributes is None:
        return None

    if pattern.value is None and not attributes.value:
        _set_parse_error(
            f"Expected message '{identifier.value}' to have a value or attributes",
            equals.pos,
        )
        return None

    end = attributes.cursor
    return ParseResult(
        Message(
            id=Identifier(identifier.value),
            value=pattern.value,
            attributes=attributes.value,
            span=Span(start=start, end=end.pos),
        ),
        end,
    )


def parse_term(cursor: Cursor, context: ParseContext) -> ParseResult[Term] | None:
    """Parse term: -identifier = pattern attributes*

    Unlike messages, terms always need a value.
    """
    start = cursor.pos
    identifier = parse_identifier(cursor.advance())
    if identifier is None:
        return None

    equals = _expect_char(skip_blank_inline(identifier.cursor), "=")
    if equals is None:
        return None

    pattern = parse_pattern_start(equals, context)
    if pattern is None:
        return None
    if pattern.value is None:
        _set_parse_error(f"Expected term '-{identifier.value}' to have a value", equals.pos)
        return None

    attributes = parse_attributes(pattern.cursor, context)
    if attributes is None:
        return None

    end = attributes.cursor
    return ParseResult(
        Term(
            id=Identifier(identifier.value),
            value=pattern.value,
            attributes=attributes.value,
            span=Span(start=start, end=end.pos),
        ),
        end,
    )


def _is_next_line_comment(cursor: Cursor, level: int) -> bool:
    """Check whether the next line is a comment line of the same level."""
    if cursor.peek() != "\n":
        return False
    for offset in range(1, level + 1):
        if cursor.peek(offset) != "#":
            return False
    return cursor.peek(level + 1) in (" ", "\n", None)


def parse_comment(cursor: Cursor) -> ParseResult[Comment] | None:
    """Parse comment: # text, ## group, ### resource

    Consecutive lines with the same number of ``#`` are merged into one
    Comment whose content joins the lines with ``\\n``. The returned cursor
    is at the line end of the last comment line.
    """
    start = cursor.pos
    level = 0
    lines: list[str] = []

    while True:
        max_hashes = level or 3
        hashes = 0
        while hashes < max_hashes and cursor.peek() == "#":
            cursor = cursor.advance()
            hashes += 1
        level = level or hashes

        if cursor.is_eof or cursor.current == "\n":
            lines.append("")
        else:
            if cursor.current != " ":
                _set_parse_error("Expected a space after the comment sigil", cursor.pos)
                return None
            line_end = cursor.skip_to_line_end()
            lines.append(cursor.advance().slice_to(line_end.pos))
            cursor = line_end

        if not _is_next_line_comment(cursor, level):
            break
        cursor = cursor.advance()

    return ParseResult(
        Comment(
            content="\n".join(lines),
            type=_COMMENT_TYPES[level],
            span=Span(start=start, end=cursor.pos),
        ),
        cursor,
    )
