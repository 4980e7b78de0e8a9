"""Tests for select hoisting over authoring string trees."""

import copy
from collections import OrderedDict
from types import MappingProxyType

from hypothesis import event, given

from ftlmodulify.analysis import NumericCategory, ParamInfo, collect_params
from ftlmodulify.authoring import hoist_selects, render_select
from ftlmodulify.syntax import Message, Placeable, SelectExpression, build_entry_index, parse
from tests.strategies import string_trees


def _select_of(text: str) -> SelectExpression:
    message = parse(f"m = {text}").entries[0]
    assert isinstance(message, Message), text
    assert message.value is not None
    (placeable,) = message.value.elements
    assert isinstance(placeable, Placeable)
    assert isinstance(placeable.expression, SelectExpression)
    return placeable.expression


class TestHoistSelects:
    """Rewriting select_<var> nodes."""

    def test_greeting_example(self) -> None:
        """Last branch becomes the default; the variable is bound."""
        tree = {"greeting": {"select_mood": {"happy": "Hi!", "sad": "Oh."}}}
        assert hoist_selects(tree) == {
            "greeting": "{ $mood ->\n  [happy] Hi!\n  *[sad] Oh.\n}",
        }

    def test_rendered_select_parses(self) -> None:
        """The rendered text is a valid select expression."""
        hoisted = hoist_selects({"select_mood": {"happy": "Hi!", "sad": "Oh."}})
        assert isinstance(hoisted, str)
        select = _select_of(hoisted)
        assert [variant.default for variant in select.variants] == [False, True]

    def test_siblings_and_lists_preserved(self) -> None:
        """Everything that is not a select node keeps its shape."""
        tree = {
            "title": "Inbox",
            "count": {"select_n": {"one": "One", "other": "Many"}},
            "tabs": ["All", {"select_k": {"a": "A"}}],
        }
        hoisted = hoist_selects(tree)
        assert isinstance(hoisted, dict)
        assert list(hoisted) == ["title", "count", "tabs"]
        assert hoisted["title"] == "Inbox"
        assert hoisted["tabs"] == ["All", "{ $k ->\n  *[a] A\n}"]

    def test_tuples_stay_tuples(self) -> None:
        """Sequences are rebuilt with their own type."""
        assert hoist_selects(("a", 1)) == ("a", 1)
        assert isinstance(hoist_selects(("a",)), tuple)

    def test_mappings_become_dicts(self) -> None:
        """Any mapping type comes back as a plain dict in the same key order."""
        tree = MappingProxyType(OrderedDict([("b", "B"), ("a", {"select_v": {"k": "K"}})]))
        hoisted = hoist_selects(tree)
        assert type(hoisted) is dict
        assert list(hoisted) == ["b", "a"]
        assert hoisted["a"] == "{ $v ->\n  *[k] K\n}"

    def test_input_not_mutated(self) -> None:
        """The transform builds a new tree."""
        tree = {"x": {"select_v": {"a": "A", "b": ["B"]}}}
        snapshot = copy.deepcopy(tree)
        hoist_selects(tree)
        assert tree == snapshot

    def test_scalars_unchanged(self) -> None:
        """Scalars pass through."""
        for value in ("text", 3, 2.5, True, None):
            assert hoist_selects(value) == value

    def test_malformed_select_left_alone(self) -> None:
        """Reserved keys without a branch mapping render literally."""
        assert hoist_selects({"select_x": "text"}) == {"select_x": "text"}
        assert hoist_selects({"select_x": {}}) == {"select_x": {}}
        assert hoist_selects({"select_1x": {"a": "A"}}) == {"select_1x": {"a": "A"}}

    def test_select_with_sibling_key_not_hoisted(self) -> None:
        """Only a sole key triggers hoisting."""
        tree = {"select_x": {"a": "A"}, "other": "O"}
        assert hoist_selects(tree) == tree


class TestBranchRendering:
    """Branch values of every shape."""

    def test_multiline_branch_is_reindented(self) -> None:
        """Continuation lines align under the branch text."""
        rendered = render_select("v", {"a": "Line one\nLine two", "b": "B"})
        assert rendered == "{ $v ->\n  [a] Line one\n      Line two\n  *[b] B\n}"
        select = _select_of(rendered)
        assert select.variants[0].value.elements[0].value == "Line one\nLine two"  # type: ignore[union-attr]

    def test_non_string_scalars(self) -> None:
        """Numbers, booleans and null are written as text."""
        rendered = render_select("v", {"a": 1, "b": None, "c": False})
        assert rendered == "{ $v ->\n  [a] 1\n  [b] null\n  *[c] False\n}"

    def test_container_branch_is_yaml_block(self) -> None:
        """Lists and mappings are dumped as YAML block text."""
        rendered = render_select("v", {"a": ["x", "y"], "b": {"k": "v"}})
        assert rendered == "{ $v ->\n  [a] - x\n      - y\n  *[b] k: v\n}"

    def test_nested_select_in_branch(self) -> None:
        """Inner selects are hoisted before the outer one is rendered."""
        hoisted = hoist_selects(
            {"select_x": {"a": {"select_y": {"p": "P", "q": "Q"}}, "b": "B"}}
        )
        assert isinstance(hoisted, str)
        outer = _select_of(hoisted)
        inner = outer.variants[0].value.elements[0]
        assert isinstance(inner, Placeable)
        assert isinstance(inner.expression, SelectExpression)

        index = build_entry_index(parse(f"m = {hoisted}"))
        assert collect_params(index, "m") == [
            ParamInfo("x", ("a", "b")),
            ParamInfo("y", ("p", "q")),
        ]

    def test_plural_branches_are_numeric_categories(self) -> None:
        """Hoisted plural keys are analysed as plural categories."""
        hoisted = hoist_selects({"select_n": {"one": "1 file", "other": "{ $n } files"}})
        index = build_entry_index(parse(f"m = {hoisted}"))
        assert collect_params(index, "m") == [
            ParamInfo("n", (NumericCategory("one"), NumericCategory("other")))
        ]


class TestHoistingProperties:
    """Idempotence over random trees."""

    @given(string_trees())
    def test_idempotent(self, tree: object) -> None:
        """Hoisting twice equals hoisting once."""
        once = hoist_selects(tree)  # type: ignore[arg-type]
        event(f"changed={once != tree}")
        assert hoist_selects(once) == once

    @given(string_trees())
    def test_shape_preserved(self, tree: object) -> None:
        """The top-level container type survives unless the root is a select."""
        hoisted = hoist_selects(tree)  # type: ignore[arg-type]
        event(f"root={type(tree).__name__}")
        if isinstance(tree, list):
            assert isinstance(hoisted, list)
            assert len(hoisted) == len(tree)
        elif not isinstance(tree, dict):
            assert hoisted == tree
