"""Validation utilities for FTL resources.

Standalone authoring-time checks, separate from Bundle so build tooling can
verify resources without runtime resolution.

Python 3.13+.
"""

from ftlmodulify.validation.resource import (
    validate_resource,
    verify_resource,
)

__all__ = [
    "validate_resource",
    "verify_resource",
]
