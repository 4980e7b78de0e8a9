"""Minimal observable values for locale-reactive messages.

ReadOnlyProperty is the contract the runtime depends on; Property and
DerivedProperty are small implementations of it. Any object with the same
``value``, ``link`` and ``unlink`` members can stand in for a locale
property, e.g. an adapter over an application's own settings object.

Python 3.13+.
"""

import threading
from collections.abc import Callable, Sequence
from typing import Any, Protocol, runtime_checkable

__all__ = ["DerivedProperty", "Listener", "Property", "ReadOnlyProperty"]

type Listener[T] = Callable[[T, T | None], None]
"""Called with (new_value, old_value) after a change."""


@runtime_checkable
class ReadOnlyProperty[T](Protocol):
    """Observable value that can be read and listened to."""

    @property
    def value(self) -> T: ...

    def link(self, listener: Listener[T]) -> None: ...

    def unlink(self, listener: Listener[T]) -> None: ...


class _Listeners[T]:
    """Listener list that tolerates (un)linking during notification."""

    __slots__ = ("_items", "_lock")

    def __init__(self) -> None:
        self._items: list[Listener[T]] = []
        self._lock = threading.Lock()

    def add(self, listener: Listener[T]) -> None:
        with self._lock:
            self._items.append(listener)

    def remove(self, listener: Listener[T]) -> None:
        with self._lock:
            if listener in self._items:
                self._items.remove(listener)

    def __len__(self) -> int:
        return len(self._items)

    def notify(self, new_value: T, old_value: T | None) -> None:
        with self._lock:
            snapshot = tuple(self._items)
        for listener in snapshot:
            listener(new_value, old_value)


class Property[T]:
    """Mutable observable value.

    Setting an equal value is a no-op; any other value notifies listeners.

    Example:
        >>> locale = Property("en")
        >>> seen = []
        >>> locale.link(lambda new, old: seen.append((new, old)))
        >>> locale.value = "es"
        >>> seen
        [('es', 'en')]
    """

    __slots__ = ("_listeners", "_value")

    def __init__(self, value: T) -> None:
        self._value = value
        self._listeners: _Listeners[T] = _Listeners()

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        old_value = self._value
        if new_value == old_value:
            return
        self._value = new_value
        self._listeners.notify(new_value, old_value)

    def link(self, listener: Listener[T]) -> None:
        self._listeners.add(listener)

    def unlink(self, listener: Listener[T]) -> None:
        self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def __repr__(self) -> str:
        return f"Property({self._value!r})"


class DerivedProperty[T]:
    """Read-only value computed from other observables.

    The derivation runs once at construction and again whenever a
    dependency notifies a change; reads only return the memoized value, so
    two reads without an intervening change return the identical object.
    A recomputation that produces an equal value keeps the old object and
    notifies nobody.

    Exceptions raised by the derivation propagate to whoever triggered the
    change (the constructor, or the setter of the dependency).
    """

    __slots__ = ("_dependencies", "_derivation", "_listeners", "_lock", "_value")

    def __init__(
        self,
        dependencies: Sequence[ReadOnlyProperty[Any]],
        derivation: Callable[..., T],
    ) -> None:
        self._dependencies = tuple(dependencies)
        self._derivation = derivation
        self._listeners: _Listeners[T] = _Listeners()
        self._lock = threading.RLock()
        self._value: T = self._compute()
        for dependency in self._dependencies:
            dependency.link(self._on_dependency_change)

    def _compute(self) -> T:
        return self._derivation(*(dependency.value for dependency in self._dependencies))

    def _on_dependency_change(self, _new: object, _old: object) -> None:
        with self._lock:
            old_value = self._value
            new_value = self._compute()
            if new_value == old_value:
                return
            self._value = new_value
        self._listeners.notify(new_value, old_value)

    @property
    def value(self) -> T:
        return self._value

    def link(self, listener: Listener[T]) -> None:
        self._listeners.add(listener)

    def unlink(self, listener: Listener[T]) -> None:
        self._listeners.remove(listener)

    def dispose(self) -> None:
        """Stop listening to dependencies. The last value stays readable."""
        for dependency in self._dependencies:
            dependency.unlink(self._on_dependency_change)
