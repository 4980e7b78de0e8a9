"""Diagnostic codes and data structures.

Defines error codes, source spans, and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "SourceSpan",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Reference errors (missing messages, terms, variables)
        2000-2999: Resolution errors (runtime evaluation failures)
        3000-3999: Syntax errors (parser failures)
        5000-5999: Validation errors and warnings (authoring checks)
    """

    # Reference errors (1000-1999)
    MESSAGE_NOT_FOUND = 1001
    ATTRIBUTE_NOT_FOUND = 1002
    TERM_NOT_FOUND = 1003
    TERM_ATTRIBUTE_NOT_FOUND = 1004
    VARIABLE_NOT_PROVIDED = 1005
    MESSAGE_NO_VALUE = 1006
    MESSAGE_NOT_IN_CHAIN = 1007

    # Resolution errors (2000-2999)
    CYCLIC_REFERENCE = 2001
    NO_VARIANTS = 2002
    FUNCTION_NOT_FOUND = 2003
    FUNCTION_FAILED = 2004
    MAX_DEPTH_EXCEEDED = 2010

    # Syntax errors (3000-3999)
    UNEXPECTED_EOF = 3001
    PARSE_JUNK = 3004
    PARSE_NESTING_DEPTH_EXCEEDED = 3005
    DUPLICATE_ENTRY = 3006

    # Validation (5000-5999)
    VALIDATION_PARSE_ERROR = 5100
    VALIDATION_DUPLICATE_ID = 5102
    VALIDATION_UNDEFINED_REFERENCE = 5104
    VALIDATION_DASHED_MESSAGE_ID = 5110
    VALIDATION_TERM_HAS_PLACEABLE = 5111
    VALIDATION_KEY_COLLISION = 5112


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Source code location for error reporting.

    Attributes:
        start: Starting character offset (0-indexed)
        end: Ending character offset (exclusive)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    start: int
    end: int
    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate SourceSpan invariants."""
        if self.start < 0:
            msg = f"SourceSpan.start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"SourceSpan.end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)
        if self.line < 1 or self.column < 1:
            msg = f"SourceSpan line/column are 1-indexed, got {self.line}:{self.column}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        span: Source location (None for non-syntax errors)
        hint: Suggestion for fixing the error
        severity: Error severity level
        resolution_path: Resolution stack at time of error (nested references)
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    hint: str | None = None
    severity: Literal["error", "warning"] = "error"
    resolution_path: tuple[str, ...] | None = None

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like a compiler message.

        Example output:
            error[MESSAGE_NOT_FOUND]: Message 'hello' not found
              --> line 5, column 10
              = help: Check that the message is defined in the loaded resources

        Control characters in the message are escaped so that source excerpts
        cannot inject terminal sequences into logs.
        """
        message = "".join(
            ch if ch.isprintable() else repr(ch)[1:-1] for ch in self.message
        )
        lines = [f"{self.severity}[{self.code.name}]: {message}"]
        if self.span is not None:
            lines.append(f"  --> line {self.span.line}, column {self.span.column}")
        if self.resolution_path:
            lines.append(f"  = path: {' -> '.join(self.resolution_path)}")
        if self.hint:
            lines.append(f"  = help: {self.hint}")
        return "\n".join(lines)
