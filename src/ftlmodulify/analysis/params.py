"""External parameter inference.

Determines which ``$variables`` influence a message, including through
message and term references, and which variant keys each selector can
take.

Variant keys are typed:
    - Number literal keys become ``int`` or ``float``
    - The CLDR plural keywords (zero, one, two, few, many, other) become
      ``NumericCategory`` so that a plural ``[one]`` is never confused with
      a string variant spelled ``one``
    - Any other identifier key stays a ``str``

Python 3.13+.
"""

from dataclasses import dataclass

from ftlmodulify.constants import PLURAL_CATEGORIES
from ftlmodulify.syntax.ast import (
    Expression,
    FunctionReference,
    Identifier,
    NumberLiteral,
    Placeable,
    SelectExpression,
    TermReference,
    VariableReference,
    Variant,
    VariantKey,
)
from ftlmodulify.syntax.entry_index import EntryIndex

from .walker import ReferenceWalker, iter_entry_patterns

__all__ = [
    "NumericCategory",
    "ParamInfo",
    "VariantValue",
    "collect_params",
    "get_selector_values",
    "variant_value",
]


@dataclass(frozen=True, slots=True)
class NumericCategory:
    """Plural category variant (``[one]``, ``[other]``, ...).

    Never equal to the plain string of the same name.
    """

    name: str


type VariantValue = str | int | float | NumericCategory


@dataclass(frozen=True, slots=True)
class ParamInfo:
    """Inferred influence of one external parameter.

    Attributes:
        name: Variable name without the ``$``
        variants: Selector keys in first-seen order, or None when the
            variable is only interpolated
    """

    name: str
    variants: tuple[VariantValue, ...] | None = None


def variant_value(key: VariantKey) -> VariantValue:
    """Typed form of a variant key."""
    match key:
        case NumberLiteral(value=value):
            return value
        case Identifier(name=name) if name in PLURAL_CATEGORIES:
            return NumericCategory(name)
        case Identifier(name=name):
            return name


class _ParamCollector(ReferenceWalker):
    __slots__ = ("params",)

    def __init__(self, index: EntryIndex) -> None:
        super().__init__(index)
        self.params: dict[str, list[VariantValue] | None] = {}

    def on_variable(self, name: str) -> None:
        self.params.setdefault(name, None)

    def on_select(self, name: str, variants: tuple[Variant, ...]) -> None:
        known = self.params.get(name)
        merged = [] if known is None else known
        for variant in variants:
            value = variant_value(variant.key)
            if value not in merged:
                merged.append(value)
        self.params[name] = merged


def collect_params(index: EntryIndex, root_id: str) -> list[ParamInfo]:
    """List the external parameters that influence ``root_id``.

    Args:
        index: Entry index of the resource
        root_id: Message id, or ``-id`` for a term

    Returns:
        ParamInfo per variable, sorted by name. Empty for an unknown root.

    Example:
        >>> from ftlmodulify.syntax import build_entry_index, parse
        >>> index = build_entry_index(parse("hi = Hello { $name }"))
        >>> collect_params(index, "hi")
        [ParamInfo(name='name', variants=None)]
    """
    root = index.get(root_id)
    if root is None:
        return []

    collector = _ParamCollector(index)
    collector.walk(root)

    return [
        ParamInfo(name=name, variants=None if variants is None else tuple(variants))
        for name, variants in sorted(collector.params.items())
    ]


def _collect_selector_keys(expr: Expression, param_name: str, values: set[str]) -> None:
    match expr:
        case SelectExpression(selector=selector, variants=variants):
            if isinstance(selector, VariableReference) and selector.id.name == param_name:
                for variant in variants:
                    match variant.key:
                        case NumberLiteral(raw=raw):
                            values.add(raw)
                        case Identifier(name=name):
                            values.add(name)
            _collect_selector_keys(selector, param_name, values)
            for variant in variants:
                for element in variant.value.elements:
                    if isinstance(element, Placeable):
                        _collect_selector_keys(element.expression, param_name, values)
        case Placeable(expression=inner):
            _collect_selector_keys(inner, param_name, values)
        case FunctionReference(arguments=arguments) | TermReference(arguments=arguments) if (
            arguments is not None
        ):
            for positional in arguments.positional:
                _collect_selector_keys(positional, param_name, values)
        case _:
            pass


def get_selector_values(index: EntryIndex, root_id: str, param_name: str) -> list[str]:
    """Variant keys of every select on ``$param_name`` inside ``root_id``.

    Only the root entry is inspected; references are not followed. Number
    keys are returned as written in the source.

    Returns:
        Sorted, deduplicated keys. Empty for an unknown root.
    """
    root = index.get(root_id)
    if root is None:
        return []

    values: set[str] = set()
    for pattern in iter_entry_patterns(root):
        for element in pattern.elements:
            if isinstance(element, Placeable):
                _collect_selector_keys(element.expression, param_name, values)
    return sorted(values)
