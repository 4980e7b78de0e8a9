"""Message modules: locale-reactive access to every message of a resource.

build_module() parses each locale's source into a Bundle and returns one
LocalizedMessage per message id of the base locale. Each LocalizedMessage
follows a locale property: when the locale changes, it walks the fallback
chain again and picks the first bundle that defines the message.

Example:
    >>> locale = Property("es_MX")
    >>> module = build_module(
    ...     {"en": "hello = Hello\\nbye = Bye", "es": "hello = Hola"},
    ...     locale_property=locale,
    ...     locale_data={"es_MX": LocaleInfo(("es",))},
    ... )
    >>> module["hello"].format(), module["bye"].format()
    ('Hola', 'Bye')

Python 3.13+.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import cast

from ftlmodulify.constants import DEFAULT_BASE_LOCALE, FALLBACK_MISSING_MESSAGE
from ftlmodulify.diagnostics import ErrorTemplate, MissingMessageError
from ftlmodulify.syntax import Message

from .bundle import Bundle
from .fallback import LocaleFallbackChain, LocaleInfo
from .functions import FluentValue
from .observable import DerivedProperty, ReadOnlyProperty

__all__ = [
    "LocalizedMessage",
    "PatternMessage",
    "ResolvedMessage",
    "build_module",
    "find_bundle",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedMessage:
    """A message as found along the fallback chain.

    Attributes:
        key: Message id
        locale: Locale of the bundle that defines the message
        message: The message AST
        bundle: The bundle to format it with
    """

    key: str
    locale: str
    message: Message
    bundle: Bundle


def find_bundle(key: str, chain: tuple[str, ...], bundles: Mapping[str, Bundle]) -> Bundle:
    """Return the first bundle along ``chain`` that defines ``key``.

    Raises:
        MissingMessageError: If no bundle in the chain has the message
    """
    for locale in chain:
        bundle = bundles.get(locale)
        if bundle is not None and bundle.has_message(key):
            if locale != chain[0]:
                logger.debug("Message '%s' requested in %s found in %s", key, chain[0], locale)
            return bundle

    logger.error("Message '%s' not found in any of: %s", key, ", ".join(chain))
    raise MissingMessageError(
        ErrorTemplate.message_not_in_chain(key, chain), key=key, locales=chain
    )


class LocalizedMessage(DerivedProperty[ResolvedMessage]):
    """One message id, resolved for the current value of a locale property.

    ``bundle_property`` holds the winning Bundle; ``value`` holds the
    ResolvedMessage. Both recompute only when the locale changes, and only
    publish when the winning bundle changes.
    """

    __slots__ = ("bundle_property", "key")

    def __init__(
        self,
        key: str,
        locale_property: ReadOnlyProperty[str],
        bundles: Mapping[str, Bundle],
        fallback_chain: LocaleFallbackChain,
    ) -> None:
        """Resolve ``key`` for the current locale.

        Raises:
            MissingMessageError: If the current locale's chain has no bundle
                defining ``key``
        """
        self.key = key
        self.bundle_property: DerivedProperty[Bundle] = DerivedProperty(
            [locale_property],
            lambda locale: find_bundle(key, fallback_chain.for_locale(locale), bundles),
        )
        super().__init__([self.bundle_property], self._resolve)

    def _resolve(self, bundle: Bundle) -> ResolvedMessage:
        message = bundle.get_message(self.key)
        if message is None:
            # find_bundle only returns bundles that define the key.
            raise MissingMessageError(
                ErrorTemplate.message_not_found(self.key), key=self.key, locales=(bundle.locale,)
            )
        return ResolvedMessage(self.key, bundle.locale, message, bundle)

    def format(
        self, args: Mapping[str, FluentValue] | None = None, *, attribute: str | None = None
    ) -> str:
        """Format the message with the winning bundle.

        Formatting problems are logged by the bundle and leave readable
        fallbacks in the result.
        """
        resolved = self.value
        if attribute is None and resolved.message.value is None:
            return FALLBACK_MISSING_MESSAGE.format(id=self.key)
        result, _errors = resolved.bundle.format_message(self.key, args, attribute=attribute)
        return result

    def __repr__(self) -> str:
        return f"LocalizedMessage({self.key!r}, locale={self.value.locale!r})"


def _argument_value(value: object) -> FluentValue:
    if isinstance(value, ReadOnlyProperty):
        value = value.value
    if isinstance(value, Enum):
        return value.name
    return cast("FluentValue", value)


class PatternMessage(DerivedProperty[str]):
    """Formatted string of a LocalizedMessage with fixed or observable args.

    Arguments that are themselves observables are read on every
    recomputation and linked as dependencies, so the string follows them
    as well as the locale. Enum arguments are passed by member name, which
    lets selects match on ``[NORTH]``-style keys.
    """

    __slots__ = ("_args",)

    def __init__(
        self,
        localized: LocalizedMessage,
        args: Mapping[str, object] | None = None,
    ) -> None:
        self._args = dict(args or {})
        observable_args = [
            value for value in self._args.values() if isinstance(value, ReadOnlyProperty)
        ]
        super().__init__([localized, *observable_args], self._format)

    def _format(self, resolved: ResolvedMessage, *_observed: object) -> str:
        args = {name: _argument_value(value) for name, value in self._args.items()}
        if resolved.message.value is None:
            return FALLBACK_MISSING_MESSAGE.format(id=resolved.key)
        result, _errors = resolved.bundle.format_pattern(resolved.message.value, args)
        return result


def build_module(
    sources_by_locale: Mapping[str, str],
    *,
    locale_property: ReadOnlyProperty[str],
    locale_data: Mapping[str, LocaleInfo],
    base_locale: str = DEFAULT_BASE_LOCALE,
    use_isolating: bool = False,
) -> dict[str, LocalizedMessage]:
    """Build one LocalizedMessage per message id of the base locale.

    Every locale is parsed strictly; other locales may define a subset of
    the base locale's messages.

    Args:
        sources_by_locale: FTL text per locale code
        locale_property: Observable current locale
        locale_data: Fallback table for LocaleFallbackChain
        base_locale: Locale whose message ids define the module
        use_isolating: Wrap interpolated values in bidi isolation marks

    Raises:
        FluentSyntaxError: If any locale's source has a malformed entry or
            a repeated id
        ValueError: If there is no source for the base locale
    """
    if base_locale not in sources_by_locale:
        msg = (
            f"No source for base locale '{base_locale}'; "
            f"got: {', '.join(sorted(sources_by_locale)) or 'none'}"
        )
        raise ValueError(msg)

    bundles = {
        locale: Bundle(locale, source, use_isolating=use_isolating)
        for locale, source in sources_by_locale.items()
    }
    chain = LocaleFallbackChain(locale_data, base_locale=base_locale)
    keys = bundles[base_locale].message_ids

    module = {key: LocalizedMessage(key, locale_property, bundles, chain) for key in keys}
    logger.info("Built message module: %d messages, %d locales", len(module), len(bundles))
    return module
