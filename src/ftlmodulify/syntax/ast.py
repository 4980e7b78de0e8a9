"""Fluent AST node definitions.

Immutable, slotted dataclasses for the Fluent 1.0 syntax tree. Expression
kinds form a closed union, so consumers dispatch with ``match`` rather than
subclassing.

Attribute access (``msg.attr`` / ``-term.attr``) is carried on the reference
node itself; function calls are ``FunctionReference`` nodes with
``CallArguments``.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass

from ftlmodulify.enums import CommentType

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Base types
    "Span",
    "Annotation",
    "Identifier",
    # Resource structure
    "Resource",
    "Message",
    "Term",
    "Attribute",
    "Comment",
    "Junk",
    # Pattern elements
    "Pattern",
    "TextElement",
    "Placeable",
    # Expressions
    "SelectExpression",
    "Variant",
    "StringLiteral",
    "NumberLiteral",
    "VariableReference",
    "MessageReference",
    "TermReference",
    "FunctionReference",
    "CallArguments",
    "NamedArgument",
    # Type aliases
    "Entry",
    "PatternElement",
    "Expression",
    "InlineExpression",
    "VariantKey",
]

# ============================================================================
# BASE TYPES
# ============================================================================


@dataclass(frozen=True, slots=True)
class Span:
    """Character offsets of a node in its source text (end exclusive)."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            msg = f"Span start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"Span end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Annotation:
    """Parse error attached to a Junk entry.

    Attributes:
        code: Diagnostic code name (e.g., "PARSE_JUNK")
        message: Human-readable reason
        span: Where the parser gave up
    """

    code: str
    message: str
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Identifier:
    """Identifier: [a-zA-Z][a-zA-Z0-9_-]*"""

    name: str


# ============================================================================
# TOP-LEVEL ENTRIES
# ============================================================================


@dataclass(frozen=True, slots=True)
class Resource:
    """Parsed form of one source text: an ordered tuple of entries."""

    entries: tuple["Entry", ...]


@dataclass(frozen=True, slots=True)
class Message:
    """Message definition.

    Examples:
        hello = Hello, world!
        button = Save
            .tooltip = Click to save
    """

    id: Identifier
    value: "Pattern | None"
    attributes: tuple["Attribute", ...] = ()
    comment: "Comment | None" = None
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Term:
    """Term definition, private to the resource.

    Example:
        -brand = Firefox
    """

    id: Identifier
    value: "Pattern"
    attributes: tuple["Attribute", ...] = ()
    comment: "Comment | None" = None
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Attribute:
    """Named sub-pattern of a message or term: ``.tooltip = ...``"""

    id: Identifier
    value: "Pattern"


@dataclass(frozen=True, slots=True)
class Comment:
    """Comment block (# single, ## group, ### resource)."""

    content: str
    type: CommentType
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Junk:
    """Unparseable source kept verbatim by the lossy parser.

    Junk never reaches an entry index; it exists so that tooling can report
    what was dropped and where.
    """

    content: str
    annotations: tuple[Annotation, ...] = ()
    span: Span | None = None


# ============================================================================
# PATTERNS
# ============================================================================


@dataclass(frozen=True, slots=True)
class Pattern:
    """Renderable body: text interleaved with placeables."""

    elements: tuple["PatternElement", ...]


@dataclass(frozen=True, slots=True)
class TextElement:
    """Plain text segment."""

    value: str


@dataclass(frozen=True, slots=True)
class Placeable:
    """Embedded expression: { expression }"""

    expression: "Expression"


# ============================================================================
# EXPRESSIONS
# ============================================================================


@dataclass(frozen=True, slots=True)
class SelectExpression:
    """Branching expression.

    Example:
        { $count ->
            [one] 1 item
           *[other] { $count } items
        }
    """

    selector: "InlineExpression"
    variants: tuple["Variant", ...]


@dataclass(frozen=True, slots=True)
class Variant:
    """One branch of a select expression; ``default`` marks the ``*`` branch."""

    key: "VariantKey"
    value: Pattern
    default: bool = False


@dataclass(frozen=True, slots=True)
class StringLiteral:
    """String literal with escapes already decoded."""

    value: str


@dataclass(frozen=True, slots=True)
class NumberLiteral:
    """Number literal: 42 or -3.14

    ``raw`` keeps the source spelling for serialization; ``value`` is the
    parsed number.
    """

    value: int | float
    raw: str


@dataclass(frozen=True, slots=True)
class VariableReference:
    """External parameter: $variable"""

    id: Identifier


@dataclass(frozen=True, slots=True)
class MessageReference:
    """Message reference: message-id or message-id.attribute"""

    id: Identifier
    attribute: Identifier | None = None


@dataclass(frozen=True, slots=True)
class TermReference:
    """Term reference: -term-id, -term-id.attribute or -term-id(arg: "x")"""

    id: Identifier
    attribute: Identifier | None = None
    arguments: "CallArguments | None" = None


@dataclass(frozen=True, slots=True)
class FunctionReference:
    """Function call: FUNCTION(arg1, key: value)"""

    id: Identifier
    arguments: "CallArguments"


@dataclass(frozen=True, slots=True)
class CallArguments:
    """Positional and named call arguments."""

    positional: tuple["InlineExpression", ...] = ()
    named: tuple["NamedArgument", ...] = ()


@dataclass(frozen=True, slots=True)
class NamedArgument:
    """Named argument: name: value (value is a literal)"""

    name: Identifier
    value: "StringLiteral | NumberLiteral"


# ============================================================================
# TYPE ALIASES
# ============================================================================

type Entry = Message | Term | Comment | Junk
type PatternElement = TextElement | Placeable
type Expression = SelectExpression | InlineExpression
type InlineExpression = (
    StringLiteral
    | NumberLiteral
    | VariableReference
    | MessageReference
    | TermReference
    | FunctionReference
    | Placeable
)
type VariantKey = Identifier | NumberLiteral
