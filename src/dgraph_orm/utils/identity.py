"""
Identity-keyed mapping with weak lifetime coupling.

Keys are compared with ``is``, never ``==``, so two structurally equal
objects never share an entry and unhashable objects can be keys. When a
key supports weak references its entry disappears together with it;
other keys (dicts, lists, strings) are held strongly until removed.
"""

from __future__ import annotations

import weakref
from collections.abc import Callable, Iterator
from typing import Any, Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class _StrongRef:
    """Stand-in for ``weakref.ref`` on objects that cannot be weakly referenced."""

    __slots__ = ("_obj",)

    def __init__(self, obj: Any) -> None:
        self._obj = obj

    def __call__(self) -> Any:
        return self._obj


class IdentityMap(Generic[K, V]):
    """Mapping from object identity to value.

    Usage:
        dirty = IdentityMap[object, set[str]]()
        dirty[instance] = {"name"}
        dirty.get(instance)
    """

    def __init__(self) -> None:
        self._entries: dict[int, tuple[Callable[[], Any], V]] = {}

    def _reference(self, key: K) -> Callable[[], Any]:
        key_id = id(key)
        self_ref = weakref.ref(self)

        def _evict(dead: weakref.ref) -> None:
            owner = self_ref()
            if owner is None:
                return
            entry = owner._entries.get(key_id)
            # The id may already belong to a new object.
            if entry is not None and entry[0] is dead:
                del owner._entries[key_id]

        try:
            return weakref.ref(key, _evict)
        except TypeError:
            return _StrongRef(key)

    def _lookup(self, key: K) -> tuple[Callable[[], Any], V] | None:
        entry = self._entries.get(id(key))
        if entry is None or entry[0]() is not key:
            return None
        return entry

    def __setitem__(self, key: K, value: V) -> None:
        entry = self._lookup(key)
        ref = entry[0] if entry is not None else self._reference(key)
        self._entries[id(key)] = (ref, value)

    def __getitem__(self, key: K) -> V:
        entry = self._lookup(key)
        if entry is None:
            raise KeyError(key)
        return entry[1]

    def __delitem__(self, key: K) -> None:
        if self._lookup(key) is None:
            raise KeyError(key)
        del self._entries[id(key)]

    def __contains__(self, key: object) -> bool:
        return self._lookup(key) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[K]:
        for ref, _ in list(self._entries.values()):
            key = ref()
            if key is not None:
                yield key

    def get(self, key: K, default: V | None = None) -> V | None:
        entry = self._lookup(key)
        return default if entry is None else entry[1]

    def setdefault(self, key: K, default: V) -> V:
        entry = self._lookup(key)
        if entry is not None:
            return entry[1]
        self[key] = default
        return default

    def pop(self, key: K, default: V | None = None) -> V | None:
        entry = self._lookup(key)
        if entry is None:
            return default
        del self._entries[id(key)]
        return entry[1]

    def clear(self) -> None:
        self._entries.clear()
