"""ftlmodulify - Fluent (FTL) message compiler and locale-reactive resolver.

Parses FTL resources, infers the parameters and internal references of each
message, expands YAML select shorthand into FTL, and resolves messages at
runtime through locale fallback chains.

Public API:
    parse_ftl - Parse FTL source to AST (malformed entries become Junk)
    serialize_ftl - Serialize AST to FTL source
    build_entry_index - Read-only id -> Message/Term mapping
    collect_params - External parameters a message depends on
    collect_internal_references - Message/term ids a message depends on
    hoist_selects - Expand select_<var> mappings into FTL select text
    validate_resource - Authoring-time checks for code generation
    Bundle - One locale's messages, parsed strictly
    build_module - Locale-reactive LocalizedMessage per message id
    LocaleFallbackChain - Ordered locales to try for a requested locale

Exceptions:
    FluentError - Base exception class
    FluentSyntaxError - Strict parse errors
    FluentReferenceError - Unknown message/term/variable references
    MissingMessageError - Message found in no bundle of the fallback chain
    FluentResolutionError - Runtime formatting errors
    FluentValidationError - Resource failed verification

Submodules:
    ftlmodulify.syntax - AST, parser, serializer, entry index
    ftlmodulify.analysis - Parameter and reference inference
    ftlmodulify.authoring - Select hoisting and YAML string trees
    ftlmodulify.validation - Resource verification
    ftlmodulify.runtime - Bundles, resolver, observables, message modules
"""

from .analysis import ParamInfo, collect_internal_references, collect_params
from .authoring import hoist_selects
from .diagnostics import (
    FluentError,
    FluentReferenceError,
    FluentResolutionError,
    FluentSyntaxError,
    FluentValidationError,
    MissingMessageError,
)
from .runtime import Bundle, LocaleFallbackChain, LocaleInfo, Property, build_module
from .syntax import build_entry_index
from .syntax import parse as parse_ftl
from .syntax import serialize as serialize_ftl
from .validation import validate_resource

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError  # noqa: E402
from importlib.metadata import version as _get_version  # noqa: E402

try:
    __version__ = _get_version("ftlmodulify")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

# Fluent specification conformance
__fluent_spec_version__ = "1.0"
__spec_url__ = "https://github.com/projectfluent/fluent/blob/master/spec/fluent.ebnf"

__all__ = [
    "Bundle",
    "FluentError",
    "FluentReferenceError",
    "FluentResolutionError",
    "FluentSyntaxError",
    "FluentValidationError",
    "LocaleFallbackChain",
    "LocaleInfo",
    "MissingMessageError",
    "ParamInfo",
    "Property",
    "__fluent_spec_version__",
    "__spec_url__",
    "__version__",
    "build_entry_index",
    "build_module",
    "collect_internal_references",
    "collect_params",
    "hoist_selects",
    "parse_ftl",
    "serialize_ftl",
    "validate_resource",
]
