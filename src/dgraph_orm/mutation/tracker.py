"""
Diff tracking for scalar properties.

Tracking is opt-in per (instance, property): the object mapper installs it
for every declared property while loading, then purges the instance so
only assignments made after the load are reported as dirty.
"""

from __future__ import annotations

from typing import Any

from dgraph_orm.utils.identity import IdentityMap


class DiffTracker:
    """Per-instance baseline and dirty-property bookkeeping.

    Assignments reach the tracker through ``notify``, which
    ``dgraph_orm.node.TrackedObject`` calls from ``__setattr__``.
    """

    def __init__(self) -> None:
        self._tracked: IdentityMap[Any, dict[str, str]] = IdentityMap()
        self._dirty: IdentityMap[Any, set[str]] = IdentityMap()

    def track_property(
        self,
        instance: Any,
        property_name: str,
        external_name: str | None = None,
    ) -> None:
        """Start observing assignments to ``property_name`` on ``instance``."""
        tracked = self._tracked.setdefault(instance, {})
        tracked[property_name] = external_name or property_name

    def is_tracked(self, instance: Any, property_name: str) -> bool:
        tracked = self._tracked.get(instance)
        return tracked is not None and property_name in tracked

    def notify(self, instance: Any, property_name: str) -> None:
        """Record an assignment; untracked properties are ignored."""
        if not self.is_tracked(instance, property_name):
            return
        self._dirty.setdefault(instance, set()).add(property_name)

    def purge_instance(self, instance: Any) -> None:
        """Clear dirty marks, making the current values the new baseline."""
        self._dirty.pop(instance)

    def diff_of(self, instance: Any) -> set[str]:
        return set(self._dirty.get(instance) or ())

    def tracked_properties(self, instance: Any) -> dict[str, str]:
        """Tracked property names mapped to their external (predicate) names."""
        return dict(self._tracked.get(instance) or {})

    def dispose(self, instance: Any) -> None:
        self._tracked.pop(instance)
        self._dirty.pop(instance)

    def clear(self) -> None:
        self._tracked.clear()
        self._dirty.clear()


diff_tracker = DiffTracker()
