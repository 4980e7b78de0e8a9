"""Tests for the top-level package exports."""

import ftlmodulify
from ftlmodulify import (
    Bundle,
    ParamInfo,
    Property,
    build_entry_index,
    build_module,
    collect_internal_references,
    collect_params,
    hoist_selects,
    parse_ftl,
    serialize_ftl,
    validate_resource,
)


class TestPublicApi:
    """Everything in __all__ is importable and usable together."""

    def test_all_names_exist(self) -> None:
        """__all__ lists only real attributes."""
        for name in ftlmodulify.__all__:
            assert hasattr(ftlmodulify, name), name

    def test_version_is_string(self) -> None:
        """A version is always available."""
        assert isinstance(ftlmodulify.__version__, str)
        assert ftlmodulify.__version__

    def test_tooling_pipeline(self) -> None:
        """Hoist, parse, analyze, validate and serialize one resource."""
        hoisted = hoist_selects({"greeting": {"select_mood": {"happy": "Hi!", "sad": "Oh."}}})
        source = "greeting = " + hoisted["greeting"] + "\nfarewell = Bye, { greeting }"
        resource = parse_ftl(source)
        index = build_entry_index(resource)

        assert collect_params(index, "greeting") == [ParamInfo("mood", ("happy", "sad"))]
        assert collect_internal_references(index, "farewell") == ["greeting"]
        assert validate_resource(source).is_valid
        assert build_entry_index(parse_ftl(serialize_ftl(resource))).keys() == index.keys()

    def test_runtime_pipeline(self) -> None:
        """Bundles and modules are reachable from the top level."""
        assert Bundle("en", "a = A").format_message("a") == ("A", ())
        module = build_module({"en": "a = A"}, locale_property=Property("en"), locale_data={})
        assert module["a"].format() == "A"
