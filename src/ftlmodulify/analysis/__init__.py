"""Reference graph analysis for FTL resources.

Provides static inference of the external parameters a message takes,
the internal ids it references, and cycle detection over the reference
graph. Results are recomputed on every call; nothing is cached here.

Python 3.13+.
"""

from .graph import detect_cycles
from .params import (
    NumericCategory,
    ParamInfo,
    VariantValue,
    collect_params,
    get_selector_values,
    variant_value,
)
from .references import (
    build_reference_graph,
    collect_direct_references,
    collect_internal_references,
)
from .summary import MessageSummary, summarize_resource
from .walker import ReferenceWalker, iter_entry_patterns

__all__ = [
    "MessageSummary",
    "NumericCategory",
    "ParamInfo",
    "ReferenceWalker",
    "VariantValue",
    "build_reference_graph",
    "collect_direct_references",
    "collect_internal_references",
    "collect_params",
    "detect_cycles",
    "get_selector_values",
    "iter_entry_patterns",
    "summarize_resource",
    "variant_value",
]
