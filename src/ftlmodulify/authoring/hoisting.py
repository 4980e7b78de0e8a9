"""Select hoisting for YAML string trees.

Authors write plural and enum variants as nested mappings::

    greeting:
      select_mood:
        happy: Hi!
        sad: Oh.

hoist_selects() replaces each ``select_<var>`` mapping with the equivalent
FTL select expression text, leaving everything else in place::

    greeting: "{ $mood ->\\n  [happy] Hi!\\n  *[sad] Oh.\\n}"

The last branch of each mapping becomes the default variant.

Python 3.13+.
"""

import logging
import re
from collections.abc import Mapping

import yaml

from ftlmodulify.constants import SELECT_INDENT, SELECT_PREFIX

__all__ = ["YamlNode", "hoist_selects", "render_select"]

logger = logging.getLogger(__name__)

type YamlNode = (
    str | int | float | bool | None | list[YamlNode] | tuple[YamlNode, ...] | Mapping[str, YamlNode]
)

_VARIABLE_NAME_PATTERN: re.Pattern[str] = re.compile(r"[a-zA-Z][a-zA-Z0-9_-]*")


def _select_variable(node: Mapping[str, YamlNode]) -> str | None:
    """Return the selector variable when ``node`` is a hoisted select."""
    if len(node) != 1:
        return None

    (key,) = node
    if not isinstance(key, str) or not key.startswith(SELECT_PREFIX):
        return None

    variable = key.removeprefix(SELECT_PREFIX)
    branches = node[key]
    if not _VARIABLE_NAME_PATTERN.fullmatch(variable):
        logger.debug("Select key %r does not name a valid variable; left as-is", key)
        return None
    if not isinstance(branches, Mapping) or not branches:
        logger.debug("Select key %r has no branch mapping; left as-is", key)
        return None
    return variable


def hoist_selects(node: YamlNode) -> YamlNode:
    """Replace every ``select_<var>`` mapping with FTL select text.

    Pure and shape-preserving. Lists and tuples keep their type. Mappings of
    any type come back as plain dicts in the same key order. Scalars are
    returned unchanged and the input is never mutated. Applying it twice
    gives the same result as applying it once.

    Example:
        >>> hoist_selects({"n": {"select_count": {"one": "1 item", "other": "many"}}})
        {'n': '{ $count ->\\n  [one] 1 item\\n  *[other] many\\n}'}
    """
    match node:
        case Mapping():
            variable = _select_variable(node)
            if variable is not None:
                (branches,) = node.values()
                return render_select(variable, branches)
            return {key: hoist_selects(value) for key, value in node.items()}
        case list() | tuple():
            return type(node)(hoist_selects(item) for item in node)
        case _:
            return node


def _to_plain(value: YamlNode) -> YamlNode:
    """Convert containers to the dict and list types the safe dumper accepts."""
    match value:
        case Mapping():
            return {key: _to_plain(item) for key, item in value.items()}
        case list() | tuple():
            return [_to_plain(item) for item in value]
        case _:
            return value


def _render_branch_value(value: YamlNode) -> str:
    match value:
        case str():
            return value
        case None:
            return "null"
        case bool() | int() | float():
            return str(value)
        case _:
            dumped = yaml.safe_dump(
                _to_plain(value),
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
                width=float("inf"),
            )
            return dumped.rstrip("\n")


def _format_branch(key: str, value: str, *, default: bool) -> str:
    marker = "*" if default else ""
    header = f"{SELECT_INDENT}{marker}[{key}] "
    first, *rest = value.split("\n")
    continuation = " " * len(header)
    return "\n".join([header + first, *(continuation + line for line in rest)])


def render_select(variable: str, branches: Mapping[str, YamlNode]) -> str:
    """Render one select expression on ``$variable``.

    Branch values are hoisted first. Continuation lines of a multi-line
    value are indented to the width of their ``[key]`` header.
    """
    lines = [f"{{ ${variable} ->"]
    last = len(branches) - 1
    for position, (key, value) in enumerate(branches.items()):
        rendered = _render_branch_value(hoist_selects(value))
        lines.append(_format_branch(str(key), rendered, default=position == last))
    lines.append("}")
    return "\n".join(lines)
