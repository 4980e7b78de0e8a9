"""Locale utilities backed by Babel's CLDR data.

Centralizes locale normalization so cache keys, bundle lookups and fallback
chains all agree on one spelling (POSIX, underscore separated).

Python 3.13+.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

from ftlmodulify.enums import TextDirection

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "get_babel_locale",
    "get_parent_locales",
    "get_text_direction",
    "normalize_locale",
]


def normalize_locale(locale_code: str) -> str:
    """Convert a BCP-47 locale code to POSIX format.

    Example:
        >>> normalize_locale("es-MX")
        'es_MX'
        >>> normalize_locale("en")
        'en'
    """
    return locale_code.replace("-", "_")


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


def get_text_direction(locale_code: str) -> TextDirection:
    """Return the CLDR writing direction of a locale.

    Unknown locales are treated as left-to-right.
    """
    from babel.core import UnknownLocaleError  # noqa: PLC0415

    try:
        locale = get_babel_locale(locale_code)
    except (UnknownLocaleError, ValueError):
        return TextDirection.LTR
    return TextDirection.RTL if locale.text_direction == "rtl" else TextDirection.LTR


def get_parent_locales(locale_code: str) -> tuple[str, ...]:
    """Return CLDR parent locales, most specific first.

    Follows CLDR ``parentLocales`` exceptions first (``es_MX`` -> ``es_419``),
    then truncates subtags. The locale itself is not included.

    Example:
        >>> get_parent_locales("pt_BR")
        ('pt',)
    """
    from babel.core import get_global  # noqa: PLC0415

    exceptions = get_global("parent_exceptions")
    parents: list[str] = []
    current = normalize_locale(locale_code)
    while True:
        parent = exceptions.get(current)
        if parent is None:
            if "_" not in current:
                break
            parent = current.rsplit("_", 1)[0]
        if parent == "root" or parent in parents:
            break
        parents.append(parent)
        current = parent
    return tuple(parents)
