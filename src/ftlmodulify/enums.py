"""Enumerations for ftlmodulify type-safe constants.

Uses StrEnum so members compare equal to their string values.

Python 3.13+.
"""

from enum import StrEnum


class CommentType(StrEnum):
    """Level of an FTL comment."""

    COMMENT = "comment"
    """Standalone or attached comment: # text"""

    GROUP = "group"
    """Group comment: ## Group Title"""

    RESOURCE = "resource"
    """Resource comment: ### Resource Description"""


class TextDirection(StrEnum):
    """Writing direction of a locale."""

    LTR = "ltr"
    RTL = "rtl"


__all__ = [
    "CommentType",
    "TextDirection",
]
