"""Serialize Fluent AST back to FTL syntax.

Converts AST nodes to canonical FTL source. Useful for:
- Formatters
- Code generators
- Property-based testing (roundtrip: parse -> serialize -> parse)

Layout rules:
- Patterns that contain a line break or a select expression start on a new
  line, indented by four spaces.
- Every variant sits on its own line; the closing brace of a select
  expression gets its own line as well.
- Literal braces in text, and ``[``, ``*`` or ``.`` at the start of a line,
  are written as string-literal placeables (``{ "{" }``) so the output
  re-parses to the same text.

Python 3.13+.
"""

from ftlmodulify.enums import CommentType

from .ast import (
    Attribute,
    CallArguments,
    Comment,
    Entry,
    Expression,
    FunctionReference,
    Identifier,
    Junk,
    Message,
    MessageReference,
    NumberLiteral,
    Pattern,
    Placeable,
    Resource,
    SelectExpression,
    StringLiteral,
    Term,
    TermReference,
    TextElement,
    VariableReference,
)

__all__ = ["FluentSerializer", "SerializationValidationError", "serialize"]

_INDENT: str = "    "

_COMMENT_PREFIXES: dict[CommentType, str] = {
    CommentType.COMMENT: "#",
    CommentType.GROUP: "##",
    CommentType.RESOURCE: "###",
}

# Characters that cannot start a continuation line as plain text.
_LINE_START_SPECIALS: frozenset[str] = frozenset("[*.")


class SerializationValidationError(ValueError):
    """Raised when an AST cannot be written as valid FTL.

    Common causes:
    - SelectExpression without exactly one default variant
    - SelectExpression without variants
    """


def _validate_pattern(pattern: Pattern, context: str) -> None:
    for element in pattern.elements:
        if isinstance(element, Placeable):
            _validate_expression(element.expression, context)


def _validate_expression(expr: Expression, context: str) -> None:
    match expr:
        case SelectExpression(variants=variants):
            defaults = sum(1 for variant in variants if variant.default)
            if not variants or defaults != 1:
                msg = (
                    f"Invalid SelectExpression in {context}: expected exactly one "
                    f"default variant among {len(variants)}, found {defaults}"
                )
                raise SerializationValidationError(msg)
            for variant in variants:
                _validate_pattern(variant.value, context)
        case Placeable(expression=inner):
            _validate_expression(inner, context)
        case _:
            pass


def _validate_resource(resource: Resource) -> None:
    for entry in resource.entries:
        match entry:
            case Message(id=identifier, value=value, attributes=attributes) | Term(
                id=identifier, value=value, attributes=attributes
            ):
                if value is not None:
                    _validate_pattern(value, f"'{identifier.name}'")
                for attribute in attributes:
                    _validate_pattern(
                        attribute.value, f"'{identifier.name}.{attribute.id.name}'"
                    )
            case _:
                pass


def _indent_except_first_line(content: str) -> str:
    return _INDENT.join(content.splitlines(keepends=True))


def _escape_string_literal(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return escaped.replace("\n", "\\u000A")


def _is_select_placeable(element: object) -> bool:
    match element:
        case Placeable(expression=SelectExpression()):
            return True
        case Placeable(expression=Placeable() as inner):
            return _is_select_placeable(inner)
        case _:
            return False


def _starts_on_new_line(pattern: Pattern) -> bool:
    for element in pattern.elements:
        if isinstance(element, TextElement) and "\n" in element.value:
            return True
        if _is_select_placeable(element):
            return True
    return False


class FluentSerializer:
    """Converts AST back to FTL source string.

    Holds no mutable state; every call builds its output locally.

    Usage:
        >>> from ftlmodulify.syntax import parse
        >>> FluentSerializer().serialize(parse("hello = Hello, world!"))
        'hello = Hello, world!\\n'
    """

    __slots__ = ()

    def serialize(
        self, resource: Resource, *, validate: bool = False, with_junk: bool = False
    ) -> str:
        """Serialize Resource to FTL string.

        Args:
            resource: Resource AST node
            validate: Check select expressions before writing anything
            with_junk: Write Junk entries verbatim instead of skipping them

        Raises:
            SerializationValidationError: If validate=True and the AST is invalid
        """
        if validate:
            _validate_resource(resource)

        output: list[str] = []
        has_entries = False
        for entry in resource.entries:
            if isinstance(entry, Junk) and not with_junk:
                continue
            self._serialize_entry(entry, output, has_entries=has_entries)
            has_entries = True
        return "".join(output)

    def _serialize_entry(self, entry: Entry, output: list[str], *, has_entries: bool) -> None:
        match entry:
            case Message() | Term():
                self._serialize_definition(entry, output)
            case Comment():
                # Blank lines around standalone comments keep them from
                # attaching to the next message on re-parse.
                if has_entries:
                    output.append("\n")
                self._serialize_comment(entry, output)
                output.append("\n")
            case Junk(content=content):
                output.append(content if content.endswith("\n") else content + "\n")

    def _serialize_definition(self, node: Message | Term, output: list[str]) -> None:
        if node.comment is not None:
            self._serialize_comment(node.comment, output)

        prefix = "-" if isinstance(node, Term) else ""
        output.append(f"{prefix}{node.id.name} =")

        if node.value is not None:
            output.append(self._serialize_pattern(node.value))

        for attribute in node.attributes:
            output.append(self._serialize_attribute(attribute))

        output.append("\n")

    def _serialize_attribute(self, node: Attribute) -> str:
        pattern = _indent_except_first_line(self._serialize_pattern(node.value))
        return f"\n{_INDENT}.{node.id.name} ={pattern}"

    def _serialize_comment(self, node: Comment, output: list[str]) -> None:
        prefix = _COMMENT_PREFIXES[node.type]
        for line in node.content.split("\n"):
            output.append(f"{prefix} {line}\n" if line else f"{prefix}\n")

    def _serialize_pattern(self, pattern: Pattern) -> str:
        """Serialize pattern including the leading separator after ``=``."""
        parts: list[str] = []
        at_line_start = True

        for element in pattern.elements:
            if isinstance(element, TextElement):
                parts.append(self._serialize_text(element.value, at_line_start=at_line_start))
                at_line_start = element.value.endswith("\n")
            else:
                parts.append(self._serialize_placeable(element))
                at_line_start = False

        content = _indent_except_first_line("".join(parts))
        if _starts_on_new_line(pattern):
            return f"\n{_INDENT}{content}"
        return f" {content}"

    def _serialize_text(self, text: str, *, at_line_start: bool) -> str:
        parts: list[str] = []
        # True until the first non-space character of the current line.
        line_start = at_line_start
        for ch in text:
            if ch in "{}" or (line_start and ch in _LINE_START_SPECIALS):
                parts.append(f'{{ "{ch}" }}')
                line_start = False
                continue
            parts.append(ch)
            if ch == "\n":
                line_start = True
            elif ch != " ":
                line_start = False
        return "".join(parts)

    def _serialize_placeable(self, placeable: Placeable) -> str:
        match placeable.expression:
            case Placeable() as inner:
                return f"{{{self._serialize_placeable(inner)}}}"
            case SelectExpression() as select:
                return f"{{ {self._serialize_select_expression(select)}}}"
            case expression:
                return f"{{ {self._serialize_expression(expression)} }}"

    def _serialize_expression(self, expr: Expression) -> str:
        """Serialize an inline expression using structural pattern matching."""
        match expr:
            case StringLiteral(value=value):
                return f'"{_escape_string_literal(value)}"'
            case NumberLiteral(raw=raw):
                return raw
            case VariableReference(id=identifier):
                return f"${identifier.name}"
            case MessageReference(id=identifier, attribute=attribute):
                suffix = f".{attribute.name}" if attribute is not None else ""
                return f"{identifier.name}{suffix}"
            case TermReference(id=identifier, attribute=attribute, arguments=arguments):
                suffix = f".{attribute.name}" if attribute is not None else ""
                call = self._serialize_call_arguments(arguments) if arguments else ""
                return f"-{identifier.name}{suffix}{call}"
            case FunctionReference(id=identifier, arguments=arguments):
                return f"{identifier.name}{self._serialize_call_arguments(arguments)}"
            case Placeable() as inner:
                return self._serialize_placeable(inner)
            case SelectExpression() as select:
                return self._serialize_select_expression(select)

    def _serialize_call_arguments(self, args: CallArguments) -> str:
        positional = [self._serialize_expression(arg) for arg in args.positional]
        named = [
            f"{arg.name.name}: {self._serialize_expression(arg.value)}" for arg in args.named
        ]
        return f"({', '.join(positional + named)})"

    def _serialize_select_expression(self, expr: SelectExpression) -> str:
        parts = [f"{self._serialize_expression(expr.selector)} ->"]
        for variant in expr.variants:
            marker = "   *" if variant.default else _INDENT
            match variant.key:
                case Identifier(name=name):
                    key = name
                case NumberLiteral(raw=raw):
                    key = raw
            pattern = _indent_except_first_line(self._serialize_pattern(variant.value))
            parts.append(f"\n{marker}[{key}]{pattern}")
        parts.append("\n")
        return "".join(parts)


def serialize(
    resource: Resource, *, validate: bool = False, with_junk: bool = False
) -> str:
    """Serialize Resource to FTL string.

    Convenience function for FluentSerializer.serialize().

    Example:
        >>> from ftlmodulify.syntax import parse, serialize
        >>> serialize(parse("hello = Hello, world!"))
        'hello = Hello, world!\\n'
    """
    return FluentSerializer().serialize(resource, validate=validate, with_junk=with_junk)
