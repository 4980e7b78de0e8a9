"""Per-message analysis summaries for code generation.

A code generator needs, for every message key, the parameters it takes and
the internal ids it depends on. ``summarize_resource`` produces exactly
that, as plain immutable data; writing source files is left to the caller.

Python 3.13+.
"""

import logging
from dataclasses import dataclass

from ftlmodulify.syntax import build_entry_index, get_message_keys, parse

from .params import ParamInfo, collect_params
from .references import collect_internal_references

__all__ = ["MessageSummary", "summarize_resource"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MessageSummary:
    """Analysis results for one message.

    Attributes:
        key: Message id
        params: External parameters, sorted by name
        references: Internal message/term ids, sorted
    """

    key: str
    params: tuple[ParamInfo, ...]
    references: tuple[str, ...]

    @property
    def has_params(self) -> bool:
        return bool(self.params)


def summarize_resource(source: str) -> dict[str, MessageSummary]:
    """Summarize every message of an FTL source, in source order.

    Malformed entries are dropped by the lossy parse and therefore have no
    summary; compare the result's keys against the expected key set to
    find them.
    """
    resource = parse(source)
    index = build_entry_index(resource)
    keys = get_message_keys(resource)

    summaries = {
        key: MessageSummary(
            key=key,
            params=tuple(collect_params(index, key)),
            references=tuple(collect_internal_references(index, key)),
        )
        for key in keys
    }
    logger.debug("Summarized %d messages", len(summaries))
    return summaries
