"""FTL parser package.

Module Organization:
- core.py: FluentParser class with parse() and parse_strict()
- primitives.py: Basic parsers (identifiers, numbers, strings) and error context
- whitespace.py: Whitespace handling and continuation detection
- rules.py: All grammar rules (patterns, expressions, entries)

Public API:
    FluentParser: Main parser class
    ParseContext: Parse context for depth tracking (advanced usage)
"""

from ftlmodulify.syntax.parser.core import FluentParser
from ftlmodulify.syntax.parser.rules import ParseContext

__all__ = ["FluentParser", "ParseContext"]
