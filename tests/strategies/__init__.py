"""Hypothesis strategies for ftlmodulify property-based testing.

Strategies are organized by domain:

- ftl: FTL identifiers, text, AST nodes and resources
- yaml_trees: authoring string trees, with and without select shorthand

Usage:
    from tests.strategies import ftl_identifiers, ftl_resources
    from tests.strategies.yaml_trees import string_trees

Event-Emitting Strategies:
    These strategies emit hypothesis.event() calls so coverage of the
    generated shapes shows up in Hypothesis statistics:
    - ftl_message_nodes, ftl_resources, string_trees, select_nodes
"""

from .ftl import (
    FTL_IDENTIFIER_FIRST_CHARS,
    FTL_IDENTIFIER_REST_CHARS,
    FTL_SAFE_CHARS,
    ftl_identifiers,
    ftl_message_nodes,
    ftl_resources,
    ftl_simple_text,
    ftl_term_nodes,
    ftl_variable_names,
)
from .yaml_trees import scalar_leaves, select_nodes, string_trees

__all__ = [
    "FTL_IDENTIFIER_FIRST_CHARS",
    "FTL_IDENTIFIER_REST_CHARS",
    "FTL_SAFE_CHARS",
    "ftl_identifiers",
    "ftl_message_nodes",
    "ftl_resources",
    "ftl_simple_text",
    "ftl_term_nodes",
    "ftl_variable_names",
    "scalar_leaves",
    "select_nodes",
    "string_trees",
]
