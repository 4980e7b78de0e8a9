"""Fluent syntax package.

Provides the parser, AST definitions, serializer and entry index. Separate
from the runtime so tooling (analysis, validation, code generation) can use
it without Babel.

Python 3.13+.
"""

from .ast import (
    Annotation,
    Attribute,
    CallArguments,
    Comment,
    Entry,
    Expression,
    FunctionReference,
    Identifier,
    InlineExpression,
    Junk,
    Message,
    MessageReference,
    NamedArgument,
    NumberLiteral,
    Pattern,
    PatternElement,
    Placeable,
    Resource,
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
from .cursor import Cursor, ParseResult
from .entry_index import EntryIndex, build_entry_index, entry_key, get_message_keys, missing_keys
from .parser import FluentParser
from .serializer import SerializationValidationError, serialize

__all__ = [
    "Annotation",
    "Attribute",
    "CallArguments",
    "Comment",
    "Cursor",
    "Entry",
    "EntryIndex",
    "Expression",
    "FluentParser",
    "FunctionReference",
    "Identifier",
    "InlineExpression",
    "Junk",
    "Message",
    "MessageReference",
    "NamedArgument",
    "NumberLiteral",
    "ParseResult",
    "Pattern",
    "PatternElement",
    "Placeable",
    "Resource",
    "SelectExpression",
    "SerializationValidationError",
    "Span",
    "StringLiteral",
    "Term",
    "TermReference",
    "TextElement",
    "VariableReference",
    "Variant",
    "VariantKey",
    "build_entry_index",
    "entry_key",
    "get_message_keys",
    "missing_keys",
    "parse",
    "parse_strict",
    "serialize",
]


def parse(source: str) -> Resource:
    """Parse FTL source into AST, keeping malformed entries as Junk.

    Convenience function for FluentParser.parse().

    Example:
        >>> from ftlmodulify.syntax import parse
        >>> resource = parse("hello = Hello, world!")
        >>> resource.entries[0].id.name
        'hello'
    """
    return FluentParser().parse(source)


def parse_strict(source: str) -> Resource:
    """Parse FTL source, raising FluentSyntaxError on any malformed entry.

    Convenience function for FluentParser.parse_strict().
    """
    return FluentParser().parse_strict(source)
