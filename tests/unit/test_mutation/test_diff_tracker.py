"""
Unit tests for DiffTracker and the TrackedObject assignment hook.
"""

from __future__ import annotations

import pytest

from dgraph_orm.mutation.tracker import DiffTracker, diff_tracker
from dgraph_orm.node import TrackedObject


class Plain:
    """Object without the assignment hook."""


class Tracked(TrackedObject):
    """Object reporting assignments to the global tracker."""


@pytest.fixture
def tracker() -> DiffTracker:
    return DiffTracker()


class TestDiffTracker:
    """Tests for track_property/notify/purge_instance/diff_of."""

    def test_untracked_assignment_is_ignored(self, tracker: DiffTracker) -> None:
        instance = Plain()

        tracker.notify(instance, "name")

        assert tracker.diff_of(instance) == set()

    def test_tracked_assignment_is_dirty(self, tracker: DiffTracker) -> None:
        instance = Plain()
        tracker.track_property(instance, "name", "Person.name")

        tracker.notify(instance, "name")

        assert tracker.diff_of(instance) == {"name"}

    def test_purge_resets_baseline(self, tracker: DiffTracker) -> None:
        instance = Plain()
        tracker.track_property(instance, "name")
        tracker.notify(instance, "name")

        tracker.purge_instance(instance)

        assert tracker.diff_of(instance) == set()
        tracker.notify(instance, "name")
        assert tracker.diff_of(instance) == {"name"}

    def test_tracked_properties_map_external_names(self, tracker: DiffTracker) -> None:
        instance = Plain()

        tracker.track_property(instance, "name", "name")
        tracker.track_property(instance, "hobbies", "Person.hobbies")
        tracker.track_property(instance, "since")

        assert tracker.tracked_properties(instance) == {
            "name": "name",
            "hobbies": "Person.hobbies",
            "since": "since",
        }

    def test_diff_of_returns_copy(self, tracker: DiffTracker) -> None:
        instance = Plain()
        tracker.track_property(instance, "name")
        tracker.notify(instance, "name")

        tracker.diff_of(instance).clear()

        assert tracker.diff_of(instance) == {"name"}

    def test_instances_tracked_independently(self, tracker: DiffTracker) -> None:
        first, second = Plain(), Plain()
        tracker.track_property(first, "name")
        tracker.track_property(second, "name")

        tracker.notify(first, "name")

        assert tracker.diff_of(first) == {"name"}
        assert tracker.diff_of(second) == set()

    def test_dispose_forgets_instance(self, tracker: DiffTracker) -> None:
        instance = Plain()
        tracker.track_property(instance, "name")
        tracker.notify(instance, "name")

        tracker.dispose(instance)

        assert tracker.diff_of(instance) == set()
        assert tracker.is_tracked(instance, "name") is False


class TestTrackedObject:
    """Tests for the __setattr__ hook."""

    def test_assignment_reaches_global_tracker(self) -> None:
        instance = Tracked()
        instance.name = "before"
        diff_tracker.track_property(instance, "name")

        instance.name = "after"

        assert instance.name == "after"
        assert diff_tracker.diff_of(instance) == {"name"}

    def test_assignment_before_tracking_is_baseline(self) -> None:
        instance = Tracked()

        instance.name = "value"
        diff_tracker.track_property(instance, "name")

        assert diff_tracker.diff_of(instance) == set()
