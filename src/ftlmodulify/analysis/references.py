"""Internal reference collection.

Python 3.13+.
"""

from collections.abc import Iterator

from ftlmodulify.syntax.ast import Message, Term
from ftlmodulify.syntax.entry_index import EntryIndex

from .walker import ReferenceWalker

__all__ = ["build_reference_graph", "collect_direct_references", "collect_internal_references"]


class _ReferenceCollector(ReferenceWalker):
    __slots__ = ("references",)

    def __init__(self, index: EntryIndex) -> None:
        super().__init__(index)
        self.references: set[str] = set()

    def on_reference(self, key: str) -> None:
        self.references.add(key)


class _DirectReferenceCollector(_ReferenceCollector):
    """Records references without descending into the referenced entries."""

    __slots__ = ()

    def _resolve(self, key: str) -> Iterator[Message | Term]:
        self.on_reference(key)
        return iter(())


def collect_internal_references(index: EntryIndex, root_id: str) -> list[str]:
    """All message/term ids ``root_id`` uses, directly or transitively.

    Term ids carry the ``-`` prefix. Ids that are referenced but not defined
    are still listed. The root itself is never listed, even when a cycle
    leads back to it.

    Returns:
        Sorted, deduplicated ids. Empty for an unknown root.

    Example:
        >>> from ftlmodulify.syntax import build_entry_index, parse
        >>> index = build_entry_index(parse("a = { b }\\nb = { a } { -c }\\n-c = C"))
        >>> collect_internal_references(index, "a")
        ['-c', 'b']
    """
    root = index.get(root_id)
    if root is None:
        return []

    collector = _ReferenceCollector(index)
    collector.walk(root)
    collector.references.discard(root_id)
    return sorted(collector.references)


def collect_direct_references(index: EntryIndex, root_id: str) -> set[str]:
    """Ids referenced by ``root_id`` itself, without following them."""
    root = index.get(root_id)
    if root is None:
        return set()

    collector = _DirectReferenceCollector(index)
    collector.walk(root)
    return collector.references


def build_reference_graph(index: EntryIndex) -> dict[str, set[str]]:
    """Direct reference edges for every entry in the index.

    Keys and targets use index keys (``id`` for messages, ``-id`` for
    terms). Targets may name entries that are not defined.
    """
    return {key: collect_direct_references(index, key) for key in index}
