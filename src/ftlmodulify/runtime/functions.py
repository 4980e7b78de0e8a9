"""Fluent functions: the NUMBER built-in and the function registry.

Python functions use snake_case parameters; FTL calls use camelCase. The
registry converts named arguments on the way in::

    price = { NUMBER($amount, minimumFractionDigits: 2) }

calls ``number_format(amount, locale, minimum_fraction_digits=2)``.

Python 3.13+. Uses Babel for CLDR number formatting.
"""

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal

from babel import numbers as babel_numbers
from babel.core import UnknownLocaleError

from ftlmodulify.constants import DEFAULT_BASE_LOCALE
from ftlmodulify.diagnostics import ErrorTemplate, FluentResolutionError
from ftlmodulify.locale_utils import get_babel_locale
from ftlmodulify.syntax.parser.primitives import is_callee_name

__all__ = [
    "FluentFunction",
    "FluentNumber",
    "FluentValue",
    "FunctionRegistry",
    "create_default_registry",
    "number_format",
]

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY: re.Pattern[str] = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass(frozen=True, slots=True)
class FluentNumber:
    """Formatted number that still knows its numeric value.

    The resolver prints ``formatted`` but selects plural variants on
    ``value``, so ``{ NUMBER($n) -> [one] ... }`` keeps working.
    """

    value: int | float | Decimal
    formatted: str

    def __str__(self) -> str:
        return self.formatted


type FluentValue = str | int | float | bool | Decimal | FluentNumber | None
type FluentFunction = Callable[..., FluentValue]


def _to_snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _coerce_number(value: object) -> int | float | Decimal:
    match value:
        case FluentNumber(value=number):
            return number
        case bool():
            msg = f"NUMBER expects a number, got {value!r}"
            raise TypeError(msg)
        case int() | float() | Decimal():
            return value
        case str():
            return Decimal(value)
        case _:
            msg = f"NUMBER expects a number, got {type(value).__name__}"
            raise TypeError(msg)


def number_format(
    value: int | float | Decimal | str | FluentNumber,
    locale_code: str = DEFAULT_BASE_LOCALE,
    *,
    minimum_fraction_digits: int = 0,
    maximum_fraction_digits: int = 3,
    use_grouping: bool = True,
) -> FluentNumber:
    """Format a number with locale-specific separators.

    Examples:
        >>> str(number_format(1234.5, "en"))
        '1,234.5'
        >>> str(number_format(1234.5, "de"))
        '1.234,5'
        >>> str(number_format(42, "en", minimum_fraction_digits=2))
        '42.00'

    Raises:
        TypeError: If value is not numeric
        decimal.InvalidOperation: If a string value is not a number
    """
    number = _coerce_number(value)
    maximum_fraction_digits = max(maximum_fraction_digits, minimum_fraction_digits)

    integer_part = "#,##0" if use_grouping else "0"
    if maximum_fraction_digits == 0:
        format_pattern = integer_part
    else:
        required = "0" * minimum_fraction_digits
        optional = "#" * (maximum_fraction_digits - minimum_fraction_digits)
        format_pattern = f"{integer_part}.{required}{optional}"

    try:
        locale = get_babel_locale(locale_code)
    except (UnknownLocaleError, ValueError):
        logger.debug("Unknown locale %r for NUMBER, using %s", locale_code, DEFAULT_BASE_LOCALE)
        locale = get_babel_locale(DEFAULT_BASE_LOCALE)

    formatted = babel_numbers.format_decimal(number, format=format_pattern, locale=locale)
    return FluentNumber(value=number, formatted=str(formatted))


@dataclass(frozen=True, slots=True)
class _RegisteredFunction:
    func: FluentFunction
    inject_locale: bool


class FunctionRegistry:
    """Named functions callable from FTL.

    Functions that format locale-sensitive output are registered with
    ``inject_locale=True`` and receive the bundle locale as the argument
    after the FTL positional arguments.
    """

    __slots__ = ("_functions",)

    def __init__(self) -> None:
        self._functions: dict[str, _RegisteredFunction] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def register(self, name: str, func: FluentFunction, *, inject_locale: bool = False) -> None:
        """Register ``func`` under the FTL name ``name``.

        Raises:
            ValueError: If name is not a valid FTL function name (upper-case)
        """
        if not is_callee_name(name):
            msg = f"Invalid function name '{name}': must match [A-Z][A-Z0-9_-]*"
            raise ValueError(msg)
        self._functions[name] = _RegisteredFunction(func, inject_locale)

    def copy(self) -> "FunctionRegistry":
        registry = FunctionRegistry()
        registry._functions = dict(self._functions)
        return registry

    def call(
        self,
        name: str,
        positional: Sequence[FluentValue],
        named: Mapping[str, FluentValue],
        locale: str,
    ) -> FluentValue:
        """Call a registered function with FTL arguments.

        Raises:
            FluentResolutionError: If the function is unknown or raises
        """
        registered = self._functions.get(name)
        if registered is None:
            raise FluentResolutionError(ErrorTemplate.function_not_found(name))

        args = [*positional, locale] if registered.inject_locale else list(positional)
        kwargs = {_to_snake_case(key): value for key, value in named.items()}
        try:
            return registered.func(*args, **kwargs)
        except (TypeError, ValueError, ArithmeticError, LookupError) as e:
            raise FluentResolutionError(ErrorTemplate.function_failed(name, str(e))) from e


def create_default_registry() -> FunctionRegistry:
    """Create a registry holding the built-in NUMBER function."""
    registry = FunctionRegistry()
    registry.register("NUMBER", number_format, inject_locale=True)
    return registry
