"""Depth-first walk over an entry and everything it references.

The walker visits the value pattern and every attribute pattern of an
entry, dispatching on expression kind. Message and term references are
resolved through an EntryIndex and walked in turn, so the walk covers the
transitive closure of the root entry.

Cycle safety:
    Each walker owns a ``seen`` set keyed by entry identity. A walker is
    created per top-level call and never reused, so a valid revisit from a
    different root is never suppressed.

Missing references are reported through ``on_reference`` and otherwise
ignored.

Python 3.13+.
"""

from collections.abc import Iterator

from ftlmodulify.constants import TERM_PREFIX
from ftlmodulify.syntax.ast import (
    CallArguments,
    Expression,
    FunctionReference,
    Message,
    MessageReference,
    Pattern,
    Placeable,
    SelectExpression,
    Term,
    TermReference,
    VariableReference,
    Variant,
)
from ftlmodulify.syntax.entry_index import EntryIndex

__all__ = ["ReferenceWalker", "iter_entry_patterns"]


def iter_entry_patterns(entry: Message | Term) -> Iterator[Pattern]:
    """Yield the value pattern (if any) followed by every attribute pattern."""
    if entry.value is not None:
        yield entry.value
    for attribute in entry.attributes:
        yield attribute.value


class ReferenceWalker:
    """Base class for reference-following expression walks.

    Subclasses override the ``on_*`` hooks; the traversal itself is fixed.
    Referenced entries are walked depth-first from an explicit stack, so
    reference chains of any length never grow the Python call stack. Only
    expression nesting recurses, and the parser bounds that.

    Example:
        >>> class Names(ReferenceWalker):
        ...     def __init__(self, index):
        ...         super().__init__(index)
        ...         self.names = []
        ...     def on_variable(self, name):
        ...         self.names.append(name)
    """

    __slots__ = ("_index", "_seen")

    def __init__(self, index: EntryIndex) -> None:
        self._index = index
        self._seen: set[int] = set()

    def walk(self, entry: Message | Term) -> None:
        """Walk ``entry`` and everything it references, each entry at most once."""
        if not self._enter(entry):
            return
        pending = [self._entry_targets(entry)]
        while pending:
            target = next(pending[-1], None)
            if target is None:
                pending.pop()
            elif self._enter(target):
                pending.append(self._entry_targets(target))

    def _enter(self, entry: Message | Term) -> bool:
        if id(entry) in self._seen:
            return False
        self._seen.add(id(entry))
        return True

    def _entry_targets(self, entry: Message | Term) -> Iterator[Message | Term]:
        for pattern in iter_entry_patterns(entry):
            yield from self._pattern_targets(pattern)

    def _pattern_targets(self, pattern: Pattern) -> Iterator[Message | Term]:
        for element in pattern.elements:
            if isinstance(element, Placeable):
                yield from self._visit(element.expression)

    def _visit(self, expr: Expression) -> Iterator[Message | Term]:
        """Fire hooks for ``expr`` and yield the entries it references."""
        match expr:
            case VariableReference(id=identifier):
                self.on_variable(identifier.name)

            case SelectExpression(selector=selector, variants=variants):
                if isinstance(selector, VariableReference):
                    self.on_select(selector.id.name, variants)
                yield from self._visit(selector)
                for variant in variants:
                    yield from self._pattern_targets(variant.value)

            case MessageReference(id=identifier):
                yield from self._resolve(identifier.name)

            case TermReference(id=identifier, arguments=arguments):
                yield from self._resolve(TERM_PREFIX + identifier.name)
                if arguments is not None:
                    yield from self._visit_arguments(arguments)

            case FunctionReference(arguments=arguments):
                yield from self._visit_arguments(arguments)

            case Placeable(expression=inner):
                yield from self._visit(inner)

            case _:
                # String and number literals carry nothing to collect.
                pass

    def _visit_arguments(self, arguments: CallArguments) -> Iterator[Message | Term]:
        for positional in arguments.positional:
            yield from self._visit(positional)
        for named in arguments.named:
            yield from self._visit(named.value)

    def _resolve(self, key: str) -> Iterator[Message | Term]:
        """Report the reference and yield its entry when it should be walked."""
        self.on_reference(key)
        target = self._index.get(key)
        if target is not None:
            yield target

    # Hooks -----------------------------------------------------------------

    def on_variable(self, name: str) -> None:
        """Called for every variable reference (including selectors)."""

    def on_select(self, name: str, variants: tuple[Variant, ...]) -> None:
        """Called before walking a select expression whose selector is ``$name``."""

    def on_reference(self, key: str) -> None:
        """Called with the index key (``id`` or ``-id``) of every reference."""
