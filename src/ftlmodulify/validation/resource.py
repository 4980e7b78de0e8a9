"""FTL resource validation.

Authoring-time checks for resources that will be compiled into message
modules. Useful for CI pipelines and build steps that must refuse broken
content before it ships.

Architecture:
    - validate_resource(): Main entry point, orchestrates validation passes
    - _extract_syntax_errors(): Pass 1 - Junk entries become errors
    - _check_entries(): Pass 2 - Duplicate ids, dashed message ids, terms
      with placeables
    - _check_references(): Pass 3 - Undefined terms (error) and undefined
      messages (warning)
    - _detect_circular_references(): Pass 4 - Reference cycles (warning)
    - verify_resource(): Raises FluentValidationError when errors exist

Python 3.13+.
"""

import logging

from ftlmodulify.analysis import build_reference_graph, detect_cycles
from ftlmodulify.constants import TERM_PREFIX
from ftlmodulify.diagnostics import (
    DiagnosticCode,
    ErrorTemplate,
    FluentValidationError,
    ValidationError,
    ValidationResult,
    ValidationWarning,
)
from ftlmodulify.syntax import (
    Annotation,
    EntryIndex,
    FluentParser,
    Junk,
    Message,
    Placeable,
    Resource,
    Term,
    build_entry_index,
    entry_key,
)
from ftlmodulify.syntax.cursor import Cursor

__all__ = ["validate_resource", "verify_resource"]

logger = logging.getLogger(__name__)

# Validation error codes and the diagnostic each one maps to.
_ERROR_CODES: dict[str, DiagnosticCode] = {
    "parse-error": DiagnosticCode.VALIDATION_PARSE_ERROR,
    "duplicate-id": DiagnosticCode.VALIDATION_DUPLICATE_ID,
    "dashed-message-id": DiagnosticCode.VALIDATION_DASHED_MESSAGE_ID,
    "term-has-placeable": DiagnosticCode.VALIDATION_TERM_HAS_PLACEABLE,
    "undefined-term": DiagnosticCode.VALIDATION_UNDEFINED_REFERENCE,
}


class _Positions:
    """Line/column lookup for offsets into the LF-normalized source."""

    __slots__ = ("_source",)

    def __init__(self, source: str) -> None:
        self._source = source

    def of(self, entry: Message | Term | Junk) -> tuple[int | None, int | None]:
        if entry.span is None:
            return None, None
        return Cursor(self._source, entry.span.start).compute_line_col()


def _extract_syntax_errors(
    resource: Resource, positions: _Positions
) -> tuple[list[ValidationError], list[Annotation]]:
    """Convert Junk entries to ValidationErrors, keeping their annotations."""
    errors: list[ValidationError] = []
    annotations: list[Annotation] = []

    for entry in resource.entries:
        if isinstance(entry, Junk):
            line, column = positions.of(entry)
            reason = entry.annotations[0].message if entry.annotations else "Parse error"
            errors.append(
                ValidationError(
                    code="parse-error",
                    message=f"Failed to parse FTL content: {reason}",
                    content=entry.content,
                    line=line,
                    column=column,
                )
            )
            annotations.extend(entry.annotations)

    return errors, annotations


def _check_entries(resource: Resource, positions: _Positions) -> list[ValidationError]:
    """Check duplicate ids, dashed message ids and terms with placeables.

    Message ids become attribute names in generated code, so they must not
    contain dashes. Terms may not contain placeables because a term used in
    a placeable cannot receive the caller's variables.
    """
    errors: list[ValidationError] = []
    seen: set[str] = set()

    for entry in resource.entries:
        if not isinstance(entry, (Message, Term)):
            continue

        key = entry_key(entry)
        line, column = positions.of(entry)

        if key in seen:
            errors.append(
                ValidationError(
                    code="duplicate-id",
                    message=f"Duplicate id '{key}'",
                    content=key,
                    line=line,
                    column=column,
                )
            )
        seen.add(key)

        match entry:
            case Message(id=identifier) if "-" in identifier.name:
                errors.append(
                    ValidationError(
                        code="dashed-message-id",
                        message=f"Message id '{identifier.name}' must not contain dashes",
                        content=identifier.name,
                        line=line,
                        column=column,
                    )
                )
            case Term(id=identifier, value=value) if any(
                isinstance(element, Placeable) for element in value.elements
            ):
                errors.append(
                    ValidationError(
                        code="term-has-placeable",
                        message=f"Term '-{identifier.name}' must not contain placeables",
                        content=f"-{identifier.name}",
                        line=line,
                        column=column,
                    )
                )
            case _:
                pass

    return errors


def _check_references(
    index: EntryIndex, graph: dict[str, set[str]], positions: _Positions
) -> tuple[list[ValidationError], list[ValidationWarning]]:
    """Undefined terms are errors; undefined messages are warnings."""
    errors: list[ValidationError] = []
    warnings: list[ValidationWarning] = []

    for key, targets in graph.items():
        line, column = positions.of(index[key])
        for target in sorted(targets - index.keys()):
            if target.startswith(TERM_PREFIX):
                errors.append(
                    ValidationError(
                        code="undefined-term",
                        message=f"'{key}' references undefined term '{target}'",
                        content=target,
                        line=line,
                        column=column,
                    )
                )
            else:
                warnings.append(
                    ValidationWarning(
                        code="undefined-reference",
                        message=f"'{key}' references undefined message '{target}'",
                        context=target,
                        line=line,
                        column=column,
                    )
                )

    return errors, warnings


def _detect_circular_references(graph: dict[str, set[str]]) -> list[ValidationWarning]:
    """Report each distinct reference cycle once."""
    warnings: list[ValidationWarning] = []
    for cycle in detect_cycles(graph):
        cycle_str = " -> ".join(cycle)
        warnings.append(
            ValidationWarning(
                code="circular-reference",
                message=f"Circular reference: {cycle_str}",
                context=cycle_str,
            )
        )
    return warnings


def validate_resource(source: str, *, parser: FluentParser | None = None) -> ValidationResult:
    """Validate an FTL resource for message-module generation.

    Errors:
        parse-error, duplicate-id, dashed-message-id, term-has-placeable,
        undefined-term

    Warnings:
        undefined-reference (messages), circular-reference

    Args:
        source: FTL file content
        parser: Optional parser instance (creates default if not provided)

    Example:
        >>> result = validate_resource("hello = Hi { -brand }")
        >>> [error.code for error in result.errors]
        ['undefined-term']
    """
    if parser is None:
        parser = FluentParser()

    resource = parser.parse(source)
    positions = _Positions(source.replace("\r\n", "\n"))
    index = build_entry_index(resource)
    graph = build_reference_graph(index)

    syntax_errors, annotations = _extract_syntax_errors(resource, positions)
    entry_errors = _check_entries(resource, positions)
    reference_errors, reference_warnings = _check_references(index, graph, positions)
    cycle_warnings = _detect_circular_references(graph)

    errors = syntax_errors + entry_errors + reference_errors
    warnings = reference_warnings + cycle_warnings

    logger.debug("Validated resource: %d errors, %d warnings", len(errors), len(warnings))

    return ValidationResult(
        errors=tuple(errors),
        warnings=tuple(warnings),
        annotations=tuple(annotations),
    )


def verify_resource(source: str, *, parser: FluentParser | None = None) -> ValidationResult:
    """Validate and raise if the resource has any errors.

    Returns:
        The ValidationResult (possibly carrying warnings) when there are no
        errors.

    Raises:
        FluentValidationError: With the full result attached as ``.result``
    """
    result = validate_resource(source, parser=parser)
    if result.is_valid:
        return result

    first = result.errors[0]
    diagnostic = ErrorTemplate.validation_failed(
        _ERROR_CODES[first.code], result.error_count, first.format(sanitize=True)
    )
    raise FluentValidationError(diagnostic, result=result)
