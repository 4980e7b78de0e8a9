"""Error message templates.

Every Diagnostic the package emits is built here, which keeps wording
consistent and lets tests assert on codes instead of strings.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan


class ErrorTemplate:
    """Centralized error message templates."""

    @staticmethod
    def message_not_found(message_id: str) -> Diagnostic:
        """Message reference not found in bundle."""
        return Diagnostic(
            code=DiagnosticCode.MESSAGE_NOT_FOUND,
            message=f"Message '{message_id}' not found",
            hint="Check that the message is defined in the loaded resources",
        )

    @staticmethod
    def message_not_in_chain(message_id: str, locales: tuple[str, ...]) -> Diagnostic:
        """Key missing from every bundle of a fallback chain."""
        return Diagnostic(
            code=DiagnosticCode.MESSAGE_NOT_IN_CHAIN,
            message=(
                f"Message '{message_id}' not found in any locale of the "
                f"fallback chain [{', '.join(locales)}]"
            ),
            hint="Add the message to the base locale resource",
        )

    @staticmethod
    def attribute_not_found(attribute: str, message_id: str) -> Diagnostic:
        """Message attribute not found."""
        return Diagnostic(
            code=DiagnosticCode.ATTRIBUTE_NOT_FOUND,
            message=f"Attribute '{attribute}' not found in message '{message_id}'",
        )

    @staticmethod
    def term_not_found(term_id: str) -> Diagnostic:
        """Term reference not found."""
        return Diagnostic(
            code=DiagnosticCode.TERM_NOT_FOUND,
            message=f"Term '-{term_id}' not found",
        )

    @staticmethod
    def term_attribute_not_found(attribute: str, term_id: str) -> Diagnostic:
        """Term attribute not found."""
        return Diagnostic(
            code=DiagnosticCode.TERM_ATTRIBUTE_NOT_FOUND,
            message=f"Attribute '{attribute}' not found in term '-{term_id}'",
        )

    @staticmethod
    def variable_not_provided(variable_name: str) -> Diagnostic:
        """Variable used in a pattern but absent from the arguments."""
        return Diagnostic(
            code=DiagnosticCode.VARIABLE_NOT_PROVIDED,
            message=f"Variable '${variable_name}' not provided",
            hint=f"Pass '{variable_name}' in the arguments mapping",
        )

    @staticmethod
    def message_no_value(message_id: str) -> Diagnostic:
        """Message has attributes only."""
        return Diagnostic(
            code=DiagnosticCode.MESSAGE_NO_VALUE,
            message=f"Message '{message_id}' has no value",
        )

    @staticmethod
    def cyclic_reference(resolution_path: list[str]) -> Diagnostic:
        """Reference cycle detected while formatting."""
        return Diagnostic(
            code=DiagnosticCode.CYCLIC_REFERENCE,
            message=f"Cyclic reference detected: {' -> '.join(resolution_path)}",
            resolution_path=tuple(resolution_path),
        )

    @staticmethod
    def max_depth_exceeded(message_id: str, max_depth: int) -> Diagnostic:
        """Reference chain deeper than the configured limit."""
        return Diagnostic(
            code=DiagnosticCode.MAX_DEPTH_EXCEEDED,
            message=f"Maximum resolution depth ({max_depth}) exceeded at '{message_id}'",
        )

    @staticmethod
    def no_variants() -> Diagnostic:
        """Select expression without a usable variant."""
        return Diagnostic(
            code=DiagnosticCode.NO_VARIANTS,
            message="Select expression has no variants",
        )

    @staticmethod
    def function_not_found(function_name: str) -> Diagnostic:
        """Call to an unregistered function."""
        return Diagnostic(
            code=DiagnosticCode.FUNCTION_NOT_FOUND,
            message=f"Function '{function_name}' not found",
            hint="Register the function on the Bundle before formatting",
        )

    @staticmethod
    def function_failed(function_name: str, error_msg: str) -> Diagnostic:
        """Registered function raised."""
        return Diagnostic(
            code=DiagnosticCode.FUNCTION_FAILED,
            message=f"Function '{function_name}' failed: {error_msg}",
        )

    @staticmethod
    def unexpected_eof(position: int) -> Diagnostic:
        """Cursor read past end of input."""
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_EOF,
            message=f"Unexpected EOF at position {position}",
        )

    @staticmethod
    def junk_entry(reason: str, excerpt: str, span: SourceSpan) -> Diagnostic:
        """Strict parse rejected a malformed entry."""
        return Diagnostic(
            code=DiagnosticCode.PARSE_JUNK,
            message=f"{reason}: {excerpt!r}",
            span=span,
        )

    @staticmethod
    def duplicate_entry(entry_id: str, span: SourceSpan | None) -> Diagnostic:
        """Strict parse found the same id twice."""
        return Diagnostic(
            code=DiagnosticCode.DUPLICATE_ENTRY,
            message=f"Entry '{entry_id}' is defined more than once",
            span=span,
        )

    @staticmethod
    def validation_failed(code: DiagnosticCode, error_count: int, first_error: str) -> Diagnostic:
        """Resource verification found errors."""
        suffix = "" if error_count == 1 else f" (and {error_count - 1} more)"
        return Diagnostic(
            code=code,
            message=f"Resource failed validation: {first_error}{suffix}",
        )

    @staticmethod
    def key_collision(key: str, paths: tuple[str, ...]) -> Diagnostic:
        """Two authoring paths flatten to the same message key."""
        return Diagnostic(
            code=DiagnosticCode.VALIDATION_KEY_COLLISION,
            message=f"Message key '{key}' is produced by several paths: {', '.join(paths)}",
            hint="Rename one of the entries so the flattened keys differ",
        )
