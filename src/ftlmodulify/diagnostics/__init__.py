"""Diagnostic system: error codes, exceptions and validation results.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan
from .errors import (
    FluentCyclicReferenceError,
    FluentError,
    FluentReferenceError,
    FluentResolutionError,
    FluentSyntaxError,
    FluentValidationError,
    MissingMessageError,
)
from .templates import ErrorTemplate
from .validation import ValidationError, ValidationResult, ValidationWarning

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "ErrorTemplate",
    "FluentCyclicReferenceError",
    "FluentError",
    "FluentReferenceError",
    "FluentResolutionError",
    "FluentSyntaxError",
    "FluentValidationError",
    "MissingMessageError",
    "SourceSpan",
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
]
