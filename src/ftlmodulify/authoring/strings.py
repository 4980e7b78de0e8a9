"""YAML string trees to FTL source.

A string tree is the nested mapping an author writes in YAML. Every leaf
becomes one message whose key is the path joined with underscores::

    >>> build_fluent_source(load_strings_yaml("a:\\n  b: Hello\\n"))
    'a_b = Hello'

Dotted message references such as ``{ screen.title }`` are rewritten to the
flattened key (``{ screen_title }``) so authors can follow the tree shape.

Python 3.13+.
"""

import logging
import re
from collections import defaultdict
from collections.abc import Mapping
from dataclasses import dataclass

import yaml

from ftlmodulify.diagnostics import (
    ErrorTemplate,
    FluentValidationError,
    ValidationError,
    ValidationResult,
)

from .hoisting import YamlNode, hoist_selects

__all__ = [
    "StringLeaf",
    "build_fluent_source",
    "create_fluent_key",
    "flatten_string_tree",
    "is_legacy_pattern",
    "load_strings_yaml",
    "replace_fluent_references",
]

logger = logging.getLogger(__name__)

_KEY_INVALID_CHARS: re.Pattern[str] = re.compile(r"[^a-zA-Z0-9]")

# { a.b.c } with optional inner spaces; variables and terms never match.
_DOTTED_REFERENCE: re.Pattern[str] = re.compile(
    r"\{(\s*)([a-zA-Z][a-zA-Z0-9_-]*(?:\.[a-zA-Z][a-zA-Z0-9_-]*)+)(\s*)\}"
)

# {0} positional and {{name}} mustache placeholders from older string files.
_LEGACY_PATTERN: re.Pattern[str] = re.compile(r"\{\d+\}|\{\{\s*\w+\s*\}\}")

# Continuation lines of a multi-line value.
_VALUE_INDENT: str = "    "


@dataclass(frozen=True, slots=True)
class StringLeaf:
    """One authored string and the tree path that leads to it."""

    path: tuple[str, ...]
    value: str

    @property
    def key(self) -> str:
        return create_fluent_key(self.path)


def load_strings_yaml(text: str) -> YamlNode:
    """Load YAML keeping every scalar as a string.

    Uses PyYAML's BaseLoader so ``yes``, ``3`` and ``null`` stay text. An
    empty document loads as an empty mapping.
    """
    loaded = yaml.load(text, Loader=yaml.BaseLoader)  # noqa: S506 - BaseLoader builds no objects
    return {} if loaded is None else loaded


def create_fluent_key(path: tuple[str, ...] | list[str]) -> str:
    """Join a tree path into a message key.

    Every character outside ``[A-Za-z0-9]`` becomes an underscore.

    Example:
        >>> create_fluent_key(("screen", "home-title"))
        'screen_home_title'
    """
    return _KEY_INVALID_CHARS.sub("_", "_".join(path))


def replace_fluent_references(value: str) -> str:
    """Rewrite dotted message references inside placeables to flat keys."""

    def _flatten(match: re.Match[str]) -> str:
        before, reference, after = match.groups()
        return f"{{{before}{create_fluent_key(reference.split('.'))}{after}}}"

    return _DOTTED_REFERENCE.sub(_flatten, value)


def is_legacy_pattern(value: str) -> bool:
    """True for strings written with ``{0}`` or ``{{name}}`` placeholders."""
    return _LEGACY_PATTERN.search(value) is not None


def flatten_string_tree(tree: YamlNode, path: tuple[str, ...] = ()) -> list[StringLeaf]:
    """List every leaf of a string tree in document order.

    Mappings extend the path by key, lists by element index. Non-string
    scalars are converted with ``str()``; ``None`` becomes an empty string.
    """
    match tree:
        case Mapping():
            leaves: list[StringLeaf] = []
            for key, value in tree.items():
                leaves.extend(flatten_string_tree(value, (*path, str(key))))
            return leaves
        case list() | tuple():
            leaves = []
            for index, value in enumerate(tree):
                leaves.extend(flatten_string_tree(value, (*path, str(index))))
            return leaves
        case None:
            return [StringLeaf(path, "")]
        case str():
            return [StringLeaf(path, replace_fluent_references(tree))]
        case _:
            return [StringLeaf(path, str(tree))]


def _check_key_collisions(leaves: list[StringLeaf]) -> None:
    paths_by_key: defaultdict[str, list[str]] = defaultdict(list)
    for leaf in leaves:
        paths_by_key[leaf.key].append(".".join(leaf.path))

    collisions = {key: tuple(paths) for key, paths in paths_by_key.items() if len(paths) > 1}
    if not collisions:
        return

    errors = tuple(
        ValidationError(
            code="key-collision",
            message=f"Key '{key}' appears {len(paths)} times",
            content=", ".join(paths),
        )
        for key, paths in collisions.items()
    )
    key, paths = next(iter(collisions.items()))
    raise FluentValidationError(
        ErrorTemplate.key_collision(key, paths),
        result=ValidationResult(errors=errors, warnings=()),
    )


def build_fluent_source(tree: YamlNode) -> str:
    """Generate FTL ``key = value`` lines from a string tree.

    Selects are hoisted first, then the tree is flattened. Legacy
    placeholder strings are left out of the output.

    Raises:
        FluentValidationError: If two paths flatten to the same key
    """
    leaves = flatten_string_tree(hoist_selects(tree))
    _check_key_collisions(leaves)

    lines: list[str] = []
    for leaf in leaves:
        if is_legacy_pattern(leaf.value):
            logger.debug("Skipping legacy placeholder string at %s", ".".join(leaf.path))
            continue
        value = leaf.value.replace("\n", "\n" + _VALUE_INDENT)
        lines.append(f"{leaf.key} = {value}")
    return "\n".join(lines)
