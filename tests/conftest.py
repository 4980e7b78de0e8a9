"""Pytest configuration for the ftlmodulify test suite.

Single Source of Truth for Hypothesis max_examples:
- dev: Local development with 500 examples (thorough property testing)
- ci: GitHub Actions with 50 examples (fast CI feedback)
- verbose: Debug mode with progress output (100 examples)

Profile auto-detection:
- CI=true environment variable -> "ci" profile (GitHub Actions sets this)
- HYPOTHESIS_PROFILE env var -> explicit override
- Otherwise -> "dev" profile (local development)

Override manually: HYPOTHESIS_PROFILE=verbose pytest tests/
"""

import os

import pytest
from hypothesis import Phase, Verbosity, settings

from ftlmodulify.runtime import LocaleInfo, Property

# =============================================================================
# HYPOTHESIS PROFILES - SINGLE SOURCE OF TRUTH
# =============================================================================

# Development profile: thorough local testing (500 examples, silent)
settings.register_profile(
    "dev",
    max_examples=500,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
)

# CI profile: fast feedback for GitHub Actions (50 examples)
settings.register_profile(
    "ci",
    max_examples=50,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=True,
    print_blob=True,
)

# Verbose profile: debug mode with progress visibility (100 examples)
settings.register_profile(
    "verbose",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    verbosity=Verbosity.verbose,
)


# =============================================================================
# AUTO-DETECT EXECUTION CONTEXT
# =============================================================================


def _detect_profile() -> str:
    """Detect appropriate Hypothesis profile based on execution context.

    Priority:
    1. HYPOTHESIS_PROFILE env var (explicit override)
    2. CI=true env var (GitHub Actions auto-detection)
    3. Default to "dev" (local development)
    """
    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit

    if os.environ.get("CI") == "true":
        return "ci"

    return "dev"


settings.load_profile(_detect_profile())


# =============================================================================
# SHARED FIXTURES
# =============================================================================


@pytest.fixture
def spanish_sources() -> dict[str, str]:
    """English base with a partial Spanish translation and no es_MX bundle."""
    return {
        "en": (
            "hello = Hello, { $name }!\n"
            "bye = Goodbye\n"
            "items = { $count ->\n"
            "    [one] One item\n"
            "   *[other] { $count } items\n"
            "}\n"
        ),
        "es": (
            "hello = Hola, { $name }!\n"
            "items = { $count ->\n"
            "    [one] Un elemento\n"
            "   *[other] { $count } elementos\n"
            "}\n"
        ),
    }


@pytest.fixture
def spanish_locale_data() -> dict[str, LocaleInfo]:
    """Fallback table routing es_MX through es."""
    return {"es_MX": LocaleInfo(("es",)), "es": LocaleInfo()}


@pytest.fixture
def locale_property() -> Property[str]:
    """Current locale, starting at es_MX."""
    return Property("es_MX")
