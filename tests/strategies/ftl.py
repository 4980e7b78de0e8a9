"""Hypothesis strategies for generating valid FTL syntax and AST nodes.

Strategy Categories:
- String strategies: identifiers and plain text (for parsing)
- AST strategies: Message, Term and Resource nodes (for serialization)
"""

from __future__ import annotations

import string

from hypothesis import event
from hypothesis import strategies as st
from hypothesis.strategies import composite

from ftlmodulify.syntax.ast import (
    Attribute,
    Identifier,
    Message,
    Pattern,
    Placeable,
    Resource,
    Term,
    TextElement,
    VariableReference,
)

# =============================================================================
# Constants
# =============================================================================

FTL_IDENTIFIER_FIRST_CHARS: str = string.ascii_lowercase
FTL_IDENTIFIER_REST_CHARS: str = string.ascii_lowercase + string.digits + "-_"

# No braces, no line breaks, nothing that starts a variant or attribute.
FTL_SAFE_CHARS: str = string.ascii_letters + string.digits + " ,!?'"


# =============================================================================
# String Strategies
# =============================================================================


@composite
def ftl_identifiers(draw: st.DrawFn) -> str:
    """Generate valid lower-case FTL identifiers.

    FTL grammar: [a-zA-Z][a-zA-Z0-9_-]*
    """
    first = draw(st.sampled_from(FTL_IDENTIFIER_FIRST_CHARS))
    rest = draw(st.text(alphabet=FTL_IDENTIFIER_REST_CHARS, max_size=12))
    return first + rest


def ftl_variable_names() -> st.SearchStrategy[str]:
    """Variable names, without the ``$``."""
    return ftl_identifiers()


def ftl_simple_text() -> st.SearchStrategy[str]:
    """Single-line text that survives a parse without trimming."""
    return (
        st.text(alphabet=FTL_SAFE_CHARS, min_size=1, max_size=40)
        .map(str.strip)
        .filter(bool)
    )


# =============================================================================
# AST Strategies
# =============================================================================


@composite
def ftl_patterns(draw: st.DrawFn) -> Pattern:
    """Text, optionally followed by a variable placeable and more text."""
    text = draw(ftl_simple_text())
    if not draw(st.booleans()):
        event("pattern=text")
        return Pattern((TextElement(text),))

    event("pattern=text+variable")
    variable = draw(ftl_variable_names())
    return Pattern(
        (
            TextElement(text + " "),
            Placeable(VariableReference(Identifier(variable))),
        )
    )


@composite
def ftl_message_nodes(draw: st.DrawFn, message_id: str | None = None) -> Message:
    """Generate a Message with a value and up to two attributes."""
    if message_id is None:
        message_id = draw(ftl_identifiers())
    names = draw(st.lists(ftl_identifiers(), max_size=2, unique=True))
    attributes = tuple(Attribute(Identifier(name), draw(ftl_patterns())) for name in names)
    event(f"message_attributes={len(attributes)}")
    return Message(id=Identifier(message_id), value=draw(ftl_patterns()), attributes=attributes)


@composite
def ftl_term_nodes(draw: st.DrawFn, term_id: str | None = None) -> Term:
    """Generate a Term with a plain text value."""
    if term_id is None:
        term_id = draw(ftl_identifiers())
    return Term(id=Identifier(term_id), value=Pattern((TextElement(draw(ftl_simple_text())),)))


@composite
def ftl_resources(draw: st.DrawFn) -> Resource:
    """Generate a Resource of messages and terms with unique ids per namespace."""
    ids = draw(st.lists(ftl_identifiers(), min_size=1, max_size=8, unique=True))
    entries: list[Message | Term] = []
    for entry_id in ids:
        if draw(st.booleans()):
            entries.append(draw(ftl_term_nodes(entry_id)))
        else:
            entries.append(draw(ftl_message_nodes(entry_id)))
    terms = sum(1 for entry in entries if isinstance(entry, Term))
    event(f"resource_terms={'none' if terms == 0 else 'some'}")
    return Resource(entries=tuple(entries))
