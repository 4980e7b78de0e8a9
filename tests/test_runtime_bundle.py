"""Tests for Bundle construction and message formatting."""

import logging
import threading
from decimal import Decimal

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from ftlmodulify.diagnostics import (
    FluentCyclicReferenceError,
    FluentReferenceError,
    FluentResolutionError,
    FluentSyntaxError,
)
from ftlmodulify.runtime import Bundle, FunctionRegistry, number_format
from ftlmodulify.syntax import FluentParser

PLURAL_SOURCE = """\
emails = { $count ->
    [0] No emails
    [one] One email
   *[other] { $count } emails
}
"""


class TestBundleConstruction:
    """Strict parsing and indexing."""

    def test_indexes_messages_and_terms(self) -> None:
        """Messages and terms are looked up separately."""
        bundle = Bundle("en", "-brand = Acme\nhello = Hi\nbye = Bye")
        assert bundle.message_ids == ("hello", "bye")
        assert bundle.has_message("hello")
        assert not bundle.has_message("brand")
        assert bundle.has_term("brand")
        assert bundle.has_term("-brand")
        assert bundle.get_message("nope") is None

    def test_entry_index_for_analysis(self) -> None:
        """The bundle exposes the same index tooling uses."""
        bundle = Bundle("en", "-brand = Acme\nhello = Hi")
        assert set(bundle.entry_index) == {"-brand", "hello"}

    def test_syntax_error_is_fatal(self, caplog: pytest.LogCaptureFixture) -> None:
        """A malformed entry aborts construction and is logged."""
        with caplog.at_level(logging.ERROR), pytest.raises(FluentSyntaxError):
            Bundle("es", "ok = Bien\nbad = { $x")
        assert "es" in caplog.text

    def test_duplicate_id_is_fatal(self) -> None:
        """Repeated ids abort construction."""
        with pytest.raises(FluentSyntaxError):
            Bundle("en", "a = A\na = B")

    @pytest.mark.parametrize("locale", ["", "en US", "en/US"])
    def test_invalid_locale_rejected(self, locale: str) -> None:
        """Locale codes must be alphanumeric with _ or -."""
        with pytest.raises(ValueError, match="[Ll]ocale code"):
            Bundle(locale, "a = A")

    def test_custom_parser_limits(self) -> None:
        """A stricter parser applies to the bundle source."""
        with pytest.raises(ValueError, match="exceeds maximum"):
            Bundle("en", "a = A", parser=FluentParser(max_source_size=2))

    def test_logs_summary(self, caplog: pytest.LogCaptureFixture) -> None:
        """Construction logs message and term counts."""
        with caplog.at_level(logging.INFO, logger="ftlmodulify.runtime.bundle"):
            Bundle("en", "-t = T\na = A\nb = B")
        assert "Bundle created for locale en: 2 messages, 1 terms" in caplog.text

    def test_repr(self) -> None:
        """repr names the locale and size."""
        assert repr(Bundle("fr", "a = A")) == "Bundle(locale='fr', messages=1)"


class TestFormatMessage:
    """Resolution of values, attributes and references."""

    def test_variable_interpolation(self) -> None:
        """Variables are substituted."""
        bundle = Bundle("en", "hello = Hello, { $name }!")
        assert bundle.format_message("hello", {"name": "Ana"}) == ("Hello, Ana!", ())

    def test_missing_variable_fallback(self) -> None:
        """A missing variable leaves a readable placeholder and an error."""
        result, errors = Bundle("en", "hello = Hello, { $name }!").format_message("hello")
        assert result == "Hello, {$name}!"
        assert isinstance(errors[0], FluentReferenceError)

    def test_missing_message(self) -> None:
        """Unknown ids format as {id} with an error."""
        result, errors = Bundle("en", "a = A").format_message("zzz")
        assert result == "{zzz}"
        assert len(errors) == 1

    def test_attribute(self) -> None:
        """Attributes are formatted by name."""
        bundle = Bundle("en", "login = Log in\n    .title = Click { $where }")
        result, errors = bundle.format_message("login", {"where": "here"}, attribute="title")
        assert (result, errors) == ("Click here", ())

    def test_missing_attribute(self) -> None:
        """Unknown attributes fall back to {id.attr}."""
        result, errors = Bundle("en", "a = A").format_message("a", attribute="nope")
        assert result == "{a.nope}"
        assert errors

    def test_message_without_value(self) -> None:
        """Attribute-only messages have no value to format."""
        result, errors = Bundle("en", "a =\n    .t = T").format_message("a")
        assert result == "{a}"
        assert errors

    def test_message_and_term_references(self) -> None:
        """References are resolved in place."""
        source = "-brand = Acme\nname = { -brand } App\nabout = About { name }"
        assert Bundle("en", source).format_message("about") == ("About Acme App", ())

    def test_term_receives_only_call_site_arguments(self) -> None:
        """Terms never see the caller's variables."""
        source = (
            '-brand = { $case ->\n    [gen] Acme\'s\n   *[nom] Acme\n}\n'
            'a = { -brand(case: "gen") } { $case }\n'
            "b = { -brand }\n"
        )
        bundle = Bundle("en", source)
        assert bundle.format_message("a", {"case": "x"}) == ("Acme's x", ())
        result, _ = bundle.format_message("b", {"case": "gen"})
        assert result == "Acme"

    def test_term_attribute_selector(self) -> None:
        """Term attributes drive selects."""
        source = (
            "-ship = Ship\n    .gender = feminine\n"
            "a = { -ship.gender ->\n    [feminine] She\n   *[other] It\n} sails"
        )
        assert Bundle("en", source).format_message("a") == ("She sails", ())

    def test_missing_term(self) -> None:
        """Unknown terms fall back to {-id}."""
        result, errors = Bundle("en", "a = { -ghost }").format_message("a")
        assert result == "{-ghost}"
        assert isinstance(errors[0], FluentReferenceError)

    def test_cycle_reported_not_raised(self) -> None:
        """Cyclic references terminate with an error."""
        bundle = Bundle("en", "a = { b }\nb = { a }")
        result, errors = bundle.format_message("a")
        assert result == "{a}"
        assert any(isinstance(error, FluentCyclicReferenceError) for error in errors)

    def test_use_isolating(self) -> None:
        """Interpolations are wrapped in FSI/PDI when enabled."""
        bundle = Bundle("ar", "a = { $x }!", use_isolating=True)
        assert bundle.format_message("a", {"x": "y"})[0] == "\u2068y\u2069!"

    def test_value_formatting(self) -> None:
        """Booleans, None and Decimals render as text."""
        bundle = Bundle("en", "a = { $b } { $n } { $d }")
        result, _ = bundle.format_message("a", {"b": True, "n": None, "d": Decimal("1.5")})
        assert result == "true  1.5"

    def test_warning_logged_on_errors(self, caplog: pytest.LogCaptureFixture) -> None:
        """Formatting problems are logged, not raised."""
        with caplog.at_level(logging.WARNING):
            Bundle("en", "a = { $x }").format_message("a")
        assert "Formatting errors" in caplog.text


class TestSelectExpressions:
    """Variant matching order."""

    @pytest.mark.parametrize(
        ("count", "expected"),
        [(0, "No emails"), (1, "One email"), (2, "2 emails"), (Decimal(1), "One email")],
    )
    def test_exact_then_plural_then_default(self, count: int | Decimal, expected: str) -> None:
        """Exact number keys win over plural categories."""
        bundle = Bundle("en", PLURAL_SOURCE)
        assert bundle.format_message("emails", {"count": count})[0] == expected

    def test_plural_rules_per_locale(self) -> None:
        """Babel decides the category for the bundle locale."""
        source = "n = { $c ->\n    [one] one\n    [few] few\n    [many] many\n   *[other] other\n}"
        bundle = Bundle("pl", source)
        assert [bundle.format_message("n", {"c": c})[0] for c in (1, 3, 5)] == [
            "one",
            "few",
            "many",
        ]

    def test_string_selector(self) -> None:
        """Identifier keys match string values."""
        source = "g = { $g ->\n    [female] She\n   *[other] They\n}"
        assert Bundle("en", source).format_message("g", {"g": "female"})[0] == "She"

    def test_bool_is_not_a_number(self) -> None:
        """true matches [true], never [1]."""
        source = "b = { $v ->\n    [1] one\n    [true] yes\n   *[other] other\n}"
        assert Bundle("en", source).format_message("b", {"v": True})[0] == "yes"

    def test_missing_selector_uses_default(self) -> None:
        """A failed selector picks the default variant and reports why."""
        result, errors = Bundle("en", PLURAL_SOURCE).format_message("emails")
        assert result == "{$count} emails"
        assert len(errors) == 2

    def test_number_function_selector(self) -> None:
        """NUMBER output still selects plural variants."""
        source = (
            "n = { NUMBER($c, minimumFractionDigits: 1) ->\n"
            "    [one] one\n"
            "   *[other] { NUMBER($c, minimumFractionDigits: 1) }\n"
            "}"
        )
        bundle = Bundle("en", source)
        assert bundle.format_message("n", {"c": 1})[0] == "one"
        assert bundle.format_message("n", {"c": 1234})[0] == "1,234.0"

    @given(st.integers(min_value=0, max_value=10_000))
    def test_every_count_resolves(self, count: int) -> None:
        """Any count resolves without errors."""
        result, errors = Bundle("en", PLURAL_SOURCE).format_message("emails", {"count": count})
        event(f"count={min(count, 2)}")
        assert errors == ()
        assert result


class TestCustomFunctions:
    """Functions added per bundle."""

    def test_add_function(self) -> None:
        """Custom functions are callable from messages."""
        bundle = Bundle("en", "a = { SHOUT($x) }")
        bundle.add_function("SHOUT", lambda value: str(value).upper())
        assert bundle.format_message("a", {"x": "hi"}) == ("HI", ())

    def test_inject_locale(self) -> None:
        """inject_locale passes the bundle locale after positional args."""
        bundle = Bundle("de", "a = { LOC() }")
        bundle.add_function("LOC", lambda locale: locale, inject_locale=True)
        assert bundle.format_message("a")[0] == "de"

    def test_registry_is_copied(self) -> None:
        """Bundles do not share a caller's registry."""
        registry = FunctionRegistry()
        Bundle("en", "a = A", functions=registry).add_function("X", str)
        assert "X" not in registry

    def test_add_function_from_many_threads(self) -> None:
        """Concurrent registrations are all kept and formatting keeps working."""
        names = [f"FN{i}" for i in range(40)]
        source = "\n".join(f"m{i} = {{ {name}() }}" for i, name in enumerate(names))
        bundle = Bundle("en", source)

        def register(chunk: list[str]) -> None:
            for name in chunk:
                bundle.add_function(name, lambda name=name: name.lower())
                bundle.format_message("m0")

        threads = [threading.Thread(target=register, args=(names[i::4],)) for i in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert [bundle.format_message(f"m{i}")[0] for i in range(len(names))] == [
            name.lower() for name in names
        ]

    def test_invalid_name_leaves_registry_untouched(self) -> None:
        """A rejected registration does not replace the registry."""
        bundle = Bundle("en", "a = { NUMBER(1) }")
        with pytest.raises(ValueError, match="Invalid function name"):
            bundle.add_function("lower", str)
        assert bundle.format_message("a") == ("1", ())

    def test_unknown_function_fallback(self) -> None:
        """Missing functions fall back to {NAME()}."""
        result, errors = Bundle("en", "a = { MISSING() }").format_message("a")
        assert result == "{MISSING()}"
        assert isinstance(errors[0], FluentResolutionError)

    def test_number_in_message(self) -> None:
        """NUMBER uses the bundle locale."""
        bundle = Bundle("de", "a = { NUMBER($n) }")
        assert bundle.format_message("a", {"n": 1234.5})[0] == str(number_format(1234.5, "de"))
