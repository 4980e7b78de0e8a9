"""Fluent runtime package.

Provides bundles, the pattern resolver, locale fallback chains and
locale-reactive message modules. Depends on the syntax package for parsing.

Python 3.13+.
"""

from .bundle import Bundle
from .fallback import LocaleFallbackChain, LocaleInfo, derive_locale_info
from .functions import (
    FluentFunction,
    FluentNumber,
    FluentValue,
    FunctionRegistry,
    create_default_registry,
    number_format,
)
from .module import (
    LocalizedMessage,
    PatternMessage,
    ResolvedMessage,
    build_module,
    find_bundle,
)
from .observable import DerivedProperty, Listener, Property, ReadOnlyProperty
from .plural_rules import select_plural_category
from .resolver import FluentResolver, ResolutionContext

__all__ = [
    "Bundle",
    "DerivedProperty",
    "FluentFunction",
    "FluentNumber",
    "FluentResolver",
    "FluentValue",
    "FunctionRegistry",
    "Listener",
    "LocaleFallbackChain",
    "LocaleInfo",
    "LocalizedMessage",
    "PatternMessage",
    "Property",
    "ReadOnlyProperty",
    "ResolutionContext",
    "ResolvedMessage",
    "build_module",
    "create_default_registry",
    "derive_locale_info",
    "find_bundle",
    "number_format",
    "select_plural_category",
]
