"""Authoring-side transforms: select hoisting and YAML string trees.

Python 3.13+.
"""

from .hoisting import YamlNode, hoist_selects, render_select
from .strings import (
    StringLeaf,
    build_fluent_source,
    create_fluent_key,
    flatten_string_tree,
    is_legacy_pattern,
    load_strings_yaml,
    replace_fluent_references,
)

__all__ = [
    "StringLeaf",
    "YamlNode",
    "build_fluent_source",
    "create_fluent_key",
    "flatten_string_tree",
    "hoist_selects",
    "is_legacy_pattern",
    "load_strings_yaml",
    "render_select",
    "replace_fluent_references",
]
