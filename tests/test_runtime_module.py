"""Tests for locale-reactive message modules."""

import logging
from enum import Enum

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from ftlmodulify.diagnostics import DiagnosticCode, FluentSyntaxError, MissingMessageError
from ftlmodulify.runtime import (
    Bundle,
    LocaleFallbackChain,
    LocaleInfo,
    LocalizedMessage,
    PatternMessage,
    Property,
    ResolvedMessage,
    build_module,
    find_bundle,
)

HEADING_SOURCE = """\
heading = { $dir ->
    [NORTH] Heading north
   *[other] Heading elsewhere
}
"""


class Direction(Enum):
    NORTH = 1
    SOUTH = 2


class TestBuildModule:
    """Module construction from per-locale sources."""

    def test_keys_come_from_base_locale(
        self,
        spanish_sources: dict[str, str],
        spanish_locale_data: dict[str, LocaleInfo],
        locale_property: Property[str],
    ) -> None:
        """Every base message is present; translations may be partial."""
        module = build_module(
            spanish_sources, locale_property=locale_property, locale_data=spanish_locale_data
        )
        assert list(module) == ["hello", "bye", "items"]

    def test_extra_translated_keys_ignored(self) -> None:
        """Ids only a translation defines are not exposed."""
        module = build_module(
            {"en": "a = A", "es": "a = Á\nextra = E"},
            locale_property=Property("es"),
            locale_data={},
        )
        assert list(module) == ["a"]

    def test_custom_base_locale(self) -> None:
        """The base locale decides the ids and ends every chain."""
        module = build_module(
            {"de": "hallo = Hallo\nnur = Nur deutsch", "fr": "hallo = Bonjour"},
            locale_property=Property("fr"),
            locale_data={},
            base_locale="de",
        )
        assert module["hallo"].format() == "Bonjour"
        assert module["nur"].format() == "Nur deutsch"

    def test_missing_base_source(self) -> None:
        """Without the base locale there is nothing to fall back to."""
        with pytest.raises(ValueError, match="No source for base locale 'en'"):
            build_module({"es": "a = A"}, locale_property=Property("es"), locale_data={})

    def test_any_malformed_locale_is_fatal(self) -> None:
        """Every locale is parsed strictly."""
        with pytest.raises(FluentSyntaxError):
            build_module(
                {"en": "a = A", "es": "a = { $x"},
                locale_property=Property("en"),
                locale_data={},
            )

    def test_logs_summary(
        self,
        spanish_sources: dict[str, str],
        spanish_locale_data: dict[str, LocaleInfo],
        locale_property: Property[str],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Construction logs the module size."""
        with caplog.at_level(logging.INFO, logger="ftlmodulify.runtime.module"):
            build_module(
                spanish_sources, locale_property=locale_property, locale_data=spanish_locale_data
            )
        assert "Built message module: 3 messages, 2 locales" in caplog.text


class TestLocalizedMessage:
    """Fallback resolution that follows the locale property."""

    def test_fallback_along_chain(
        self,
        spanish_sources: dict[str, str],
        spanish_locale_data: dict[str, LocaleInfo],
        locale_property: Property[str],
    ) -> None:
        """es_MX uses es where it can and en otherwise."""
        module = build_module(
            spanish_sources, locale_property=locale_property, locale_data=spanish_locale_data
        )
        assert module["hello"].format({"name": "Ana"}) == "Hola, Ana!"
        assert module["hello"].value.locale == "es"
        assert module["bye"].format() == "Goodbye"
        assert module["bye"].value.locale == "en"

    def test_plural_in_requested_locale(
        self,
        spanish_sources: dict[str, str],
        spanish_locale_data: dict[str, LocaleInfo],
        locale_property: Property[str],
    ) -> None:
        """Plural selection uses the winning bundle's locale."""
        module = build_module(
            spanish_sources, locale_property=locale_property, locale_data=spanish_locale_data
        )
        assert module["items"].format({"count": 1}) == "Un elemento"
        assert module["items"].format({"count": 3}) == "3 elementos"

    def test_rereading_keeps_identity(
        self,
        spanish_sources: dict[str, str],
        spanish_locale_data: dict[str, LocaleInfo],
        locale_property: Property[str],
    ) -> None:
        """Reads without a locale change return the same object."""
        module = build_module(
            spanish_sources, locale_property=locale_property, locale_data=spanish_locale_data
        )
        first = module["hello"].value
        assert module["hello"].value is first
        assert isinstance(first, ResolvedMessage)

    def test_locale_change_switches_bundle(
        self,
        spanish_sources: dict[str, str],
        spanish_locale_data: dict[str, LocaleInfo],
        locale_property: Property[str],
    ) -> None:
        """Changing the locale re-resolves and notifies listeners."""
        module = build_module(
            spanish_sources, locale_property=locale_property, locale_data=spanish_locale_data
        )
        seen: list[str] = []
        module["hello"].link(lambda new, _old: seen.append(new.locale))
        locale_property.value = "en"
        assert module["hello"].format({"name": "Ana"}) == "Hello, Ana!"
        assert seen == ["en"]

    def test_same_winning_bundle_is_silent(
        self,
        spanish_sources: dict[str, str],
        spanish_locale_data: dict[str, LocaleInfo],
        locale_property: Property[str],
    ) -> None:
        """A locale change that lands on the same bundle publishes nothing."""
        module = build_module(
            spanish_sources, locale_property=locale_property, locale_data=spanish_locale_data
        )
        hello_before = module["hello"].value
        bye_before = module["bye"].value
        seen: list[ResolvedMessage] = []
        module["hello"].link(lambda new, _old: seen.append(new))
        module["bye"].link(lambda new, _old: seen.append(new))

        locale_property.value = "es"
        assert module["hello"].value is hello_before
        locale_property.value = "en"
        assert module["bye"].value is bye_before
        assert [resolved.key for resolved in seen] == ["hello"]

    def test_attribute_and_missing_value(self) -> None:
        """Attributes format by name; attribute-only messages fall back to {id}."""
        module = build_module(
            {"en": "button =\n    .label = Save"},
            locale_property=Property("en"),
            locale_data={},
        )
        assert module["button"].format(attribute="label") == "Save"
        assert module["button"].format() == "{button}"

    def test_repr(self) -> None:
        """repr shows the key and winning locale."""
        module = build_module({"en": "a = A"}, locale_property=Property("en"), locale_data={})
        assert repr(module["a"]) == "LocalizedMessage('a', locale='en')"

    def test_constructed_over_bundles_lacking_key(self) -> None:
        """A key that no bundle defines cannot be localized."""
        bundles = {"en": Bundle("en", "a = A")}
        with pytest.raises(MissingMessageError) as exc_info:
            LocalizedMessage("zzz", Property("en"), bundles, LocaleFallbackChain({}))
        assert exc_info.value.key == "zzz"


class TestFindBundle:
    """First bundle along the chain that defines a key."""

    def test_first_defining_bundle_wins(self) -> None:
        """Earlier locales shadow later ones."""
        bundles = {"es": Bundle("es", "a = Á"), "en": Bundle("en", "a = A\nb = B")}
        chain = ("es_MX", "es", "en")
        assert find_bundle("a", chain, bundles) is bundles["es"]
        assert find_bundle("b", chain, bundles) is bundles["en"]

    def test_missing_everywhere(self, caplog: pytest.LogCaptureFixture) -> None:
        """A key absent from every bundle raises with the chain searched."""
        bundles = {"en": Bundle("en", "a = A")}
        chain = ("es_MX", "es", "en")
        with caplog.at_level(logging.ERROR), pytest.raises(MissingMessageError) as exc_info:
            find_bundle("zzz", chain, bundles)
        error = exc_info.value
        assert error.key == "zzz"
        assert error.locales == chain
        assert error.diagnostic is not None
        assert error.diagnostic.code is DiagnosticCode.MESSAGE_NOT_IN_CHAIN
        assert "es_MX, es, en" in caplog.text

    @given(st.sampled_from(["en", "es", "es_MX", "fr", "es_AR"]))
    def test_every_key_resolves_for_any_locale(self, locale: str) -> None:
        """Chains end at the base, so base keys always resolve."""
        bundles = {"en": Bundle("en", "a = A\nb = B"), "es": Bundle("es", "a = Á")}
        chain = LocaleFallbackChain({"es_MX": LocaleInfo(("es",)), "es_AR": LocaleInfo(("es",))})
        winners = {key: find_bundle(key, chain.for_locale(locale), bundles).locale for key in "ab"}
        event(f"a_from={winners['a']}")
        assert winners["b"] == "en"
        assert winners["a"] in chain.for_locale(locale)


class TestPatternMessage:
    """Formatted strings that track the locale and their arguments."""

    def test_observable_arguments(
        self,
        spanish_sources: dict[str, str],
        spanish_locale_data: dict[str, LocaleInfo],
        locale_property: Property[str],
    ) -> None:
        """Observable args are dependencies alongside the locale."""
        module = build_module(
            spanish_sources, locale_property=locale_property, locale_data=spanish_locale_data
        )
        name = Property("Ana")
        greeting = PatternMessage(module["hello"], {"name": name})
        assert greeting.value == "Hola, Ana!"
        name.value = "Bo"
        assert greeting.value == "Hola, Bo!"
        locale_property.value = "en"
        assert greeting.value == "Hello, Bo!"

    def test_fixed_arguments(
        self,
        spanish_sources: dict[str, str],
        spanish_locale_data: dict[str, LocaleInfo],
        locale_property: Property[str],
    ) -> None:
        """Plain args are captured once."""
        module = build_module(
            spanish_sources, locale_property=locale_property, locale_data=spanish_locale_data
        )
        items = PatternMessage(module["items"], {"count": 4})
        assert items.value == "4 elementos"

    def test_enum_arguments_select_by_name(self) -> None:
        """Enum members match variant keys named after them."""
        module = build_module(
            {"en": HEADING_SOURCE}, locale_property=Property("en"), locale_data={}
        )
        assert PatternMessage(module["heading"], {"dir": Direction.NORTH}).value == (
            "Heading north"
        )
        assert PatternMessage(module["heading"], {"dir": Direction.SOUTH}).value == (
            "Heading elsewhere"
        )

    def test_observable_enum_argument(self) -> None:
        """Enum values held in a property are unwrapped too."""
        module = build_module(
            {"en": HEADING_SOURCE}, locale_property=Property("en"), locale_data={}
        )
        direction = Property(Direction.SOUTH)
        heading = PatternMessage(module["heading"], {"dir": direction})
        assert heading.value == "Heading elsewhere"
        direction.value = Direction.NORTH
        assert heading.value == "Heading north"

    def test_message_without_value(self) -> None:
        """Attribute-only messages render as {id}."""
        module = build_module(
            {"en": "button =\n    .label = Save"}, locale_property=Property("en"), locale_data={}
        )
        assert PatternMessage(module["button"]).value == "{button}"
