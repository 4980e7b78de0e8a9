"""CLDR plural category selection using Babel.

Python 3.13+. Depends on Babel for CLDR data.

Reference: https://www.unicode.org/cldr/charts/47/supplemental/language_plural_rules.html
"""

from decimal import Decimal

from babel.core import UnknownLocaleError

from ftlmodulify.locale_utils import get_babel_locale

__all__ = ["select_plural_category"]


def select_plural_category(n: int | float | Decimal, locale: str) -> str:
    """Select the CLDR plural category of a number.

    Args:
        n: Number to categorize
        locale: Locale code (e.g., "es_MX", "en", "ar-SA")

    Returns:
        Plural category: "zero", "one", "two", "few", "many", or "other"

    Examples:
        >>> select_plural_category(1, "en")
        'one'
        >>> select_plural_category(5, "ru")
        'many'
        >>> select_plural_category(2, "ar")
        'two'
        >>> select_plural_category(42, "ja")
        'other'

    If the locale cannot be parsed, a simple one/other rule is used.
    """
    try:
        locale_obj = get_babel_locale(locale)
    except (UnknownLocaleError, ValueError):
        return "one" if abs(n) == 1 else "other"

    return locale_obj.plural_form(n)
