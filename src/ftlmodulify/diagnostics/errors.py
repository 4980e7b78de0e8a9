"""Exception hierarchy with structured diagnostics.

All exceptions accept either a plain message or a Diagnostic; the
Diagnostic is kept on the instance for tooling.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .codes import Diagnostic

if TYPE_CHECKING:
    from .validation import ValidationResult


class FluentError(Exception):
    """Base exception for all ftlmodulify errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class FluentSyntaxError(FluentError):
    """FTL syntax error.

    Only raised by the strict parser. The tooling parser turns syntax
    errors into Junk entries instead.
    """


class FluentReferenceError(FluentError):
    """Unknown message, term, attribute or variable reference."""


class MissingMessageError(FluentReferenceError):
    """A key was found in no bundle along the whole fallback chain.

    This is content that cannot be released; callers must not swallow it.

    Attributes:
        key: The message id that could not be resolved
        locales: The fallback chain that was searched, in order
    """

    def __init__(
        self, message: str | Diagnostic, *, key: str, locales: tuple[str, ...] = ()
    ) -> None:
        super().__init__(message)
        self.key = key
        self.locales = locales


class FluentResolutionError(FluentError):
    """Runtime error while formatting a pattern (bad function call, no variants)."""


class FluentCyclicReferenceError(FluentReferenceError):
    """Cyclic reference detected while formatting.

    Example:
        hello = { hello }
    """


class FluentValidationError(FluentError):
    """Resource failed authoring-time verification.

    Attributes:
        result: The full ValidationResult with every error and warning
    """

    def __init__(self, message: str | Diagnostic, *, result: ValidationResult) -> None:
        super().__init__(message)
        self.result = result
