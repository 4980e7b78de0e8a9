"""Validation result types for authoring-time resource checks.

Python 3.13+.
"""

from dataclasses import dataclass

from ftlmodulify.syntax.ast import Annotation

__all__ = [
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
]

# Maximum content length before truncation when sanitizing
_SANITIZE_MAX_CONTENT_LENGTH: int = 100


@dataclass(frozen=True, slots=True)
class ValidationError:
    """Structured error from resource validation.

    Attributes:
        code: Error code (e.g., "parse-error", "dashed-message-id")
        message: Human-readable error message
        content: The offending FTL content or id
        line: Line number where error occurred (1-indexed, optional)
        column: Column number where error occurred (1-indexed, optional)
    """

    code: str
    message: str
    content: str
    line: int | None = None
    column: int | None = None

    def format(self, *, sanitize: bool = False) -> str:
        """Format error as human-readable string.

        Args:
            sanitize: If True, truncate content to 100 characters.
        """
        content_display = self.content
        if sanitize and len(content_display) > _SANITIZE_MAX_CONTENT_LENGTH:
            content_display = content_display[:_SANITIZE_MAX_CONTENT_LENGTH] + "..."

        location = ""
        if self.line is not None:
            location = f" at line {self.line}"
            if self.column is not None:
                location += f", column {self.column}"
        return f"[{self.code}]{location}: {self.message} (content: {content_display!r})"


@dataclass(frozen=True, slots=True)
class ValidationWarning:
    """Structured warning from resource validation.

    Attributes:
        code: Warning code (e.g., "undefined-reference", "circular-reference")
        message: Human-readable warning message
        context: Additional context (e.g., the referenced id)
        line: Line number (1-indexed, optional)
        column: Column number (1-indexed, optional)
    """

    code: str
    message: str
    context: str | None = None
    line: int | None = None
    column: int | None = None


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Immutable outcome of validating one resource.

    Attributes:
        errors: Problems that make the resource unusable for code generation
        warnings: Informational findings
        annotations: Parser-level annotations from Junk entries
    """

    errors: tuple[ValidationError, ...]
    warnings: tuple[ValidationWarning, ...]
    annotations: tuple[Annotation, ...] = ()

    @property
    def is_valid(self) -> bool:
        """True when there are no errors. Warnings do not affect validity."""
        return not self.errors

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @staticmethod
    def valid() -> "ValidationResult":
        """Create a result with no findings."""
        return ValidationResult(errors=(), warnings=())

    def format(self, *, sanitize: bool = False, include_warnings: bool = True) -> str:
        """Format all findings, one per line."""
        lines: list[str] = []

        if self.errors:
            lines.append(f"Errors ({len(self.errors)}):")
            lines.extend(f"  {error.format(sanitize=sanitize)}" for error in self.errors)

        if include_warnings and self.warnings:
            lines.append(f"Warnings ({len(self.warnings)}):")
            for warning in self.warnings:
                context = f" ({warning.context})" if warning.context else ""
                lines.append(f"  [{warning.code}]: {warning.message}{context}")

        if not lines:
            return "Validation passed: no errors or warnings"

        return "\n".join(lines)
