"""Tests for observable properties."""

import threading

from hypothesis import event, given
from hypothesis import strategies as st

from ftlmodulify.runtime import DerivedProperty, Property, ReadOnlyProperty


class TestProperty:
    """Mutable observable values."""

    def test_notifies_new_and_old(self) -> None:
        """Listeners receive (new, old)."""
        prop = Property("en")
        seen: list[tuple[str, str | None]] = []
        prop.link(lambda new, old: seen.append((new, old)))
        prop.value = "es"
        assert seen == [("es", "en")]

    def test_equal_value_is_silent(self) -> None:
        """Setting the current value notifies nobody."""
        prop = Property(1)
        seen: list[int] = []
        prop.link(lambda new, _old: seen.append(new))
        prop.value = 1
        assert seen == []

    def test_unlink(self) -> None:
        """Unlinked listeners are not called; unlinking twice is harmless."""
        prop = Property(0)
        seen: list[int] = []

        def listener(new: int, _old: int | None) -> None:
            seen.append(new)

        prop.link(listener)
        prop.unlink(listener)
        prop.unlink(listener)
        prop.value = 5
        assert seen == []
        assert prop.listener_count == 0

    def test_satisfies_protocol(self) -> None:
        """Property and DerivedProperty are ReadOnlyProperty instances."""
        prop = Property("x")
        assert isinstance(prop, ReadOnlyProperty)
        assert isinstance(DerivedProperty([prop], str.upper), ReadOnlyProperty)
        assert not isinstance("x", ReadOnlyProperty)


class TestDerivedProperty:
    """Memoized values recomputed on dependency change."""

    def test_computes_at_construction(self) -> None:
        """The value is available immediately."""
        a, b = Property(2), Property(3)
        total = DerivedProperty([a, b], lambda x, y: x + y)
        assert total.value == 5

    def test_recomputes_only_on_change(self) -> None:
        """Reads never call the derivation."""
        calls: list[str] = []
        source = Property("a")

        def derive(value: str) -> list[str]:
            calls.append(value)
            return [value]

        derived = DerivedProperty([source], derive)
        first = derived.value
        assert derived.value is first
        assert calls == ["a"]
        source.value = "b"
        assert calls == ["a", "b"]
        assert derived.value == ["b"]

    def test_equal_result_keeps_identity(self) -> None:
        """An equal recomputation neither replaces the value nor notifies."""
        source = Property(1)
        parity = DerivedProperty([source], lambda n: [n % 2])
        before = parity.value
        seen: list[object] = []
        parity.link(lambda new, _old: seen.append(new))
        source.value = 3
        assert parity.value is before
        assert seen == []

    def test_chains_propagate(self) -> None:
        """Derived values can depend on derived values."""
        source = Property(2)
        doubled = DerivedProperty([source], lambda n: n * 2)
        label = DerivedProperty([doubled], lambda n: f"={n}")
        source.value = 5
        assert label.value == "=10"

    def test_dispose_stops_updates(self) -> None:
        """A disposed property keeps its last value."""
        source = Property(1)
        derived = DerivedProperty([source], lambda n: n + 1)
        derived.dispose()
        source.value = 10
        assert derived.value == 2
        assert source.listener_count == 0

    def test_concurrent_changes_leave_consistent_value(self) -> None:
        """Concurrent dependency changes settle on a value from the source."""
        source = Property(0)
        derived = DerivedProperty([source], lambda n: n * 10)

        def writer(start: int) -> None:
            for offset in range(50):
                source.value = start + offset

        threads = [threading.Thread(target=writer, args=(i * 100,)) for i in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert derived.value % 10 == 0

    @given(st.lists(st.integers(min_value=-5, max_value=5), max_size=20))
    def test_tracks_latest_value(self, values: list[int]) -> None:
        """After any sequence of sets the derived value matches the source."""
        source = Property(0)
        derived = DerivedProperty([source], lambda n: n * n)
        notifications: list[int] = []
        derived.link(lambda new, _old: notifications.append(new))
        for value in values:
            source.value = value
        event(f"notifications={min(len(notifications), 5)}")
        assert derived.value == source.value**2
        assert all(a != b for a, b in zip(notifications, notifications[1:], strict=False))
