"""Locale fallback chains.

A chain lists the locales to try for one requested locale, most specific
first. The base locale is appended unless the table already lists it, in
which case its listed position is kept::

    es_MX -> es_419 -> es -> en

The fallback data is a plain mapping so applications can ship their own
table. derive_locale_info() builds entries from CLDR through Babel.

Python 3.13+.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from ftlmodulify.constants import DEFAULT_BASE_LOCALE
from ftlmodulify.enums import TextDirection
from ftlmodulify.locale_utils import get_parent_locales, get_text_direction

__all__ = ["LocaleFallbackChain", "LocaleInfo", "derive_locale_info"]


@dataclass(frozen=True, slots=True)
class LocaleInfo:
    """Fallback and layout data for one locale.

    Attributes:
        fallback_locales: Locales to try after this one, most specific first
        direction: Writing direction
    """

    fallback_locales: tuple[str, ...] = ()
    direction: TextDirection = TextDirection.LTR


def derive_locale_info(locale_code: str) -> LocaleInfo:
    """Build LocaleInfo from CLDR parent locales and writing direction.

    Example:
        >>> derive_locale_info("pt_BR").fallback_locales
        ('pt',)
    """
    return LocaleInfo(
        fallback_locales=get_parent_locales(locale_code),
        direction=get_text_direction(locale_code),
    )


class LocaleFallbackChain:
    """Expands a requested locale into the ordered list of locales to try.

    Example:
        >>> chain = LocaleFallbackChain({"es_MX": LocaleInfo(("es",))})
        >>> chain.for_locale("es_MX")
        ('es_MX', 'es', 'en')
        >>> chain.for_locale("fr")
        ('fr', 'en')
    """

    __slots__ = ("_base_locale", "_locale_data")

    def __init__(
        self,
        locale_data: Mapping[str, LocaleInfo],
        *,
        base_locale: str = DEFAULT_BASE_LOCALE,
    ) -> None:
        self._locale_data = MappingProxyType(dict(locale_data))
        self._base_locale = base_locale

    @classmethod
    def from_cldr(
        cls, locales: Iterable[str], *, base_locale: str = DEFAULT_BASE_LOCALE
    ) -> "LocaleFallbackChain":
        """Create a chain whose data is derived from CLDR for ``locales``."""
        return cls(
            {locale: derive_locale_info(locale) for locale in locales},
            base_locale=base_locale,
        )

    @property
    def base_locale(self) -> str:
        return self._base_locale

    @property
    def locale_data(self) -> Mapping[str, LocaleInfo]:
        return self._locale_data

    def for_locale(self, locale: str) -> tuple[str, ...]:
        """Return ``[locale, *fallbacks, base_locale]`` keeping first occurrences.

        A locale missing from the data contributes only itself and the base.
        """
        info = self._locale_data.get(locale)
        fallbacks = info.fallback_locales if info is not None else ()
        return tuple(dict.fromkeys((locale, *fallbacks, self._base_locale)))

    def direction(self, locale: str) -> TextDirection:
        """Writing direction from the data table; LTR when unknown."""
        info = self._locale_data.get(locale)
        return info.direction if info is not None else TextDirection.LTR
