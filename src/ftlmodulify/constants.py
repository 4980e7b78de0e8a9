"""Shared constants for ftlmodulify.

Centralized configuration used across the syntax, analysis, authoring and
runtime packages. Keeping them here avoids circular imports.

Constants are grouped by domain:
- Limits: recursion and input size protection
- Naming: reserved prefixes and keyword sets
- Locales: default base locale
- Fallback strings: readable placeholders for resolution errors

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Limits
    "MAX_DEPTH",
    "MAX_SOURCE_SIZE",
    # Naming
    "TERM_PREFIX",
    "SELECT_PREFIX",
    "SELECT_INDENT",
    "PLURAL_CATEGORIES",
    # Locales
    "DEFAULT_BASE_LOCALE",
    # Fallback strings
    "FALLBACK_MISSING_MESSAGE",
    "FALLBACK_MISSING_VARIABLE",
    "FALLBACK_MISSING_TERM",
    "FALLBACK_FUNCTION_ERROR",
]

# ============================================================================
# LIMITS
# ============================================================================

# One depth limit for parser nesting and resolver reference chains.
# Real resources rarely nest beyond 10 levels.
MAX_DEPTH: int = 100

# Default maximum source size (10 MiB, counted in characters).
MAX_SOURCE_SIZE: int = 10 * 1024 * 1024

# ============================================================================
# NAMING
# ============================================================================

# Terms share one index with messages; the prefix keeps the namespaces apart.
TERM_PREFIX: str = "-"

# Authoring shorthand: a sole mapping key ``select_<var>`` expands to a
# select expression on ``$<var>``.
SELECT_PREFIX: str = "select_"

# Leading indentation of every variant line in hoisted select text.
SELECT_INDENT: str = "  "

# CLDR plural categories. Bare variant keys with these names are numeric
# categories rather than literal strings.
PLURAL_CATEGORIES: frozenset[str] = frozenset(
    ("zero", "one", "two", "few", "many", "other")
)

# ============================================================================
# LOCALES
# ============================================================================

# Locale whose message ids define the canonical key set and which ends every
# fallback chain.
DEFAULT_BASE_LOCALE: str = "en"

# ============================================================================
# FALLBACK STRINGS
# ============================================================================

# Format strings; use .format(...) with the named field.
FALLBACK_MISSING_MESSAGE: str = "{{{id}}}"  # e.g., {my-message}
FALLBACK_MISSING_VARIABLE: str = "{{${name}}}"  # e.g., {$username}
FALLBACK_MISSING_TERM: str = "{{-{name}}}"  # e.g., {-brand}
FALLBACK_FUNCTION_ERROR: str = "{{{name}()}}"  # e.g., {NUMBER()}
