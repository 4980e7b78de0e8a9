"""Entry index: id -> Message | Term lookup for one Resource.

Messages are keyed by their id and terms by ``-id``, so both namespaces
share one read-only mapping without colliding. Comments and Junk are never
indexed.

Python 3.13+. Zero external dependencies.
"""

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from ftlmodulify.constants import TERM_PREFIX

from .ast import Message, Resource, Term

__all__ = [
    "EntryIndex",
    "build_entry_index",
    "entry_key",
    "get_message_keys",
    "missing_keys",
]

logger = logging.getLogger(__name__)

type EntryIndex = Mapping[str, Message | Term]


def entry_key(entry: Message | Term) -> str:
    """Index key of an entry (term ids carry the ``-`` prefix)."""
    if isinstance(entry, Term):
        return TERM_PREFIX + entry.id.name
    return entry.id.name


def build_entry_index(resource: Resource) -> EntryIndex:
    """Build a read-only id -> entry mapping.

    If an id repeats, the last definition wins, matching the order in which
    a runtime bundle would see the entries.

    Example:
        >>> from ftlmodulify.syntax import parse
        >>> index = build_entry_index(parse("-brand = Acme\\nhello = Hi { -brand }"))
        >>> sorted(index)
        ['-brand', 'hello']
    """
    entries: dict[str, Message | Term] = {}
    for entry in resource.entries:
        if isinstance(entry, (Message, Term)):
            key = entry_key(entry)
            if key in entries:
                logger.debug("Duplicate entry '%s': later definition wins", key)
            entries[key] = entry
    return MappingProxyType(entries)


def get_message_keys(resource: Resource) -> list[str]:
    """Message ids in source order, without terms and without repeats."""
    keys: dict[str, None] = {}
    for entry in resource.entries:
        if isinstance(entry, Message):
            keys.setdefault(entry.id.name, None)
    return list(keys)


def missing_keys(expected: Iterable[str], index: EntryIndex) -> list[str]:
    """Expected keys absent from ``index``, sorted.

    The lossy parser drops malformed entries silently; diffing the keys a
    caller expects against the parsed index is how gaps are detected.
    """
    return sorted(set(expected) - index.keys())
