"""Bundle - one locale's parsed messages, ready for formatting.

Python 3.13+. External dependency: Babel (CLDR locale data).
"""

import logging
import threading
from collections.abc import Mapping
from types import MappingProxyType

from ftlmodulify.constants import FALLBACK_MISSING_MESSAGE
from ftlmodulify.diagnostics import (
    ErrorTemplate,
    FluentError,
    FluentReferenceError,
    FluentSyntaxError,
)
from ftlmodulify.syntax import (
    EntryIndex,
    FluentParser,
    Message,
    Pattern,
    Resource,
    Term,
    build_entry_index,
)

from .functions import FluentFunction, FluentValue, FunctionRegistry, create_default_registry
from .resolver import FluentResolver

__all__ = ["Bundle"]

logger = logging.getLogger(__name__)

# Longest formatted result quoted in debug logs.
_LOG_TRUNCATE_DEBUG: int = 50


class Bundle:
    """Messages and terms of one locale, parsed strictly.

    A Bundle is immutable after construction. add_function swaps in an
    extended copy of the function registry, so a bundle shared between
    threads never sees a registry change halfway through formatting.
    Construction fails on any malformed entry or repeated id; a partially
    parsed locale never ships.

    Examples:
        >>> bundle = Bundle("es", "hello = Hola, { $name }!")
        >>> bundle.has_message("hello")
        True
        >>> bundle.format_message("hello", {"name": "Ana"})
        ('Hola, Ana!', ())
    """

    __slots__ = (
        "_function_registry",
        "_functions_lock",
        "_locale",
        "_messages",
        "_resource",
        "_terms",
        "_use_isolating",
    )

    @staticmethod
    def _validate_locale_format(locale: str) -> None:
        """Check locale code is non-empty and alphanumeric with ``_``/``-``.

        Raises:
            ValueError: If locale code is empty or has invalid format
        """
        if not locale:
            msg = "Locale code cannot be empty"
            raise ValueError(msg)

        if not locale.replace("_", "").replace("-", "").isalnum():
            msg = f"Invalid locale code format: '{locale}'"
            raise ValueError(msg)

    def __init__(
        self,
        locale: str,
        source: str,
        /,
        *,
        use_isolating: bool = False,
        functions: FunctionRegistry | None = None,
        parser: FluentParser | None = None,
    ) -> None:
        """Parse ``source`` strictly and index its entries.

        Args:
            locale: Locale code (es_MX, en, pt-BR) [positional-only]
            source: FTL text [positional-only]
            use_isolating: Wrap interpolated values in Unicode bidi isolation
                marks (default: False)
            functions: Function registry to copy (default: NUMBER only)
            parser: Parser with custom size/nesting limits

        Raises:
            ValueError: If locale code is invalid or source is too large
            FluentSyntaxError: On the first malformed entry or repeated id
        """
        Bundle._validate_locale_format(locale)

        self._locale = locale
        self._use_isolating = use_isolating
        self._function_registry = (
            functions.copy() if functions is not None else create_default_registry()
        )
        self._functions_lock = threading.Lock()

        if parser is None:
            parser = FluentParser()
        try:
            self._resource = parser.parse_strict(source)
        except FluentSyntaxError as e:
            logger.error("Failed to parse resource for locale %s: %s", locale, e)
            raise

        messages: dict[str, Message] = {}
        terms: dict[str, Term] = {}
        for entry in self._resource.entries:
            match entry:
                case Message(id=identifier):
                    messages[identifier.name] = entry
                case Term(id=identifier):
                    terms[identifier.name] = entry
                case _:
                    pass
        self._messages: Mapping[str, Message] = MappingProxyType(messages)
        self._terms: Mapping[str, Term] = MappingProxyType(terms)

        logger.info(
            "Bundle created for locale %s: %d messages, %d terms",
            locale,
            len(messages),
            len(terms),
        )

    @property
    def locale(self) -> str:
        """Locale code of this bundle."""
        return self._locale

    @property
    def use_isolating(self) -> bool:
        return self._use_isolating

    @property
    def resource(self) -> Resource:
        """Parsed resource, entries in source order."""
        return self._resource

    @property
    def message_ids(self) -> tuple[str, ...]:
        """Message ids in source order. Terms are not included."""
        return tuple(self._messages)

    @property
    def entry_index(self) -> EntryIndex:
        """Read-only index of messages and ``-``-prefixed terms for analysis."""
        return build_entry_index(self._resource)

    def has_message(self, message_id: str) -> bool:
        return message_id in self._messages

    def get_message(self, message_id: str) -> Message | None:
        return self._messages.get(message_id)

    def has_term(self, term_id: str) -> bool:
        """Check for a term by id, with or without the leading ``-``."""
        return term_id.removeprefix("-") in self._terms

    def __repr__(self) -> str:
        return f"Bundle(locale={self._locale!r}, messages={len(self._messages)})"

    def add_function(
        self, name: str, func: FluentFunction, *, inject_locale: bool = False
    ) -> None:
        """Register a custom function callable from this bundle's messages.

        Named FTL arguments arrive as snake_case keyword arguments. The
        registry is copied, extended and swapped in under a lock; formatting
        already in progress keeps the registry it started with.

        Raises:
            ValueError: If name is not an upper-case FTL function name
        """
        with self._functions_lock:
            registry = self._function_registry.copy()
            registry.register(name, func, inject_locale=inject_locale)
            self._function_registry = registry
        logger.debug("Added custom function %s to bundle %s", name, self._locale)

    def _resolver(self) -> FluentResolver:
        return FluentResolver(
            locale=self._locale,
            messages=self._messages,
            terms=self._terms,
            function_registry=self._function_registry,
            use_isolating=self._use_isolating,
        )

    def _log_errors(self, label: str, errors: tuple[FluentError, ...]) -> None:
        if errors:
            logger.warning(
                "Formatting errors in %s (%s): %d error(s)", label, self._locale, len(errors)
            )
            for err in errors:
                logger.debug("  - %s: %s", type(err).__name__, err)

    def format_pattern(
        self,
        pattern: Pattern,
        args: Mapping[str, FluentValue] | None = None,
    ) -> tuple[str, tuple[FluentError, ...]]:
        """Format a pattern taken from one of this bundle's messages.

        Returns:
            Tuple of (formatted_string, errors). The string always holds a
            readable result; problems are reported in ``errors``.
        """
        result, errors = self._resolver().resolve_pattern(pattern, args)
        self._log_errors("pattern", errors)
        return result, errors

    def format_message(
        self,
        message_id: str,
        /,
        args: Mapping[str, FluentValue] | None = None,
        *,
        attribute: str | None = None,
    ) -> tuple[str, tuple[FluentError, ...]]:
        """Format a message value or attribute by id.

        Examples:
            >>> bundle = Bundle("en", "msg = Hello { $name }!")
            >>> result, errors = bundle.format_message("msg", {})
            >>> result
            'Hello {$name}!'
            >>> type(errors[0]).__name__
            'FluentReferenceError'
        """
        message = self._messages.get(message_id)
        if message is None:
            logger.warning("Message '%s' not found in %s", message_id, self._locale)
            error = FluentReferenceError(ErrorTemplate.message_not_found(message_id))
            return FALLBACK_MISSING_MESSAGE.format(id=message_id), (error,)

        result, errors = self._resolver().resolve_message(message, args, attribute)
        if errors:
            self._log_errors(f"'{message_id}'", errors)
        else:
            logger.debug("Resolved message '%s': %s", message_id, result[:_LOG_TRUNCATE_DEBUG])
        return result, errors
