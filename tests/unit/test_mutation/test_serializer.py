"""
Unit tests for set-JSON serialization.

New nodes are written in full under blank node names; loaded nodes only
contribute assignments and added edges made after the load.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from dgraph_orm.exceptions import ConfigurationError
from dgraph_orm.mutation.serializer import SetJsonBuilder, build_set_json
from dgraph_orm.serialization.mapper import ObjectMapper


def _load(models: SimpleNamespace, data: list[dict]) -> list:
    return ObjectMapper.new_builder().add_entry_type(models.Person).add_json_data(data).build()


class Stray:
    """Class with no declared metadata."""


# =============================================================================
# Test: New Nodes
# =============================================================================


class TestNewNodes:
    """Tests for nodes that have no uid yet."""

    def test_new_node_written_in_full(self, models: SimpleNamespace) -> None:
        person = models.Person()
        person.name = "Ada"
        person.hobbies = ["chess"]

        body = build_set_json(person)

        assert body == {
            "uid": "_:person1",
            "dgraph.type": "Person",
            "name": "Ada",
            "Person.hobbies": ["chess"],
        }

    def test_new_edge_with_facet(self, models: SimpleNamespace) -> None:
        """Facet fields are inlined on the child as ``predicate|field``."""
        person = models.Person()
        person.name = "Ada"
        work = models.Work()
        work.name = "Acme"
        since = models.Since()
        since.since = "2020"

        person.get_predicate("works").with_facet(since).add(work)

        body = build_set_json(person)

        assert body["Person.works"] == [
            {
                "uid": "_:work2",
                "dgraph.type": "Work",
                "Work.name": "Acme",
                "Person.works|since": "2020",
            }
        ]

    def test_single_cardinality_predicate(self, models: SimpleNamespace) -> None:
        """A non-list predicate serializes as one object."""
        person = models.Person()
        work = models.Work()
        work.id = "0x9"

        person.get_predicate("employer").add(work)

        body = build_set_json(person)

        assert body["employer"] == {"uid": "0x9"}

    def test_scalar_predicate(self, models: SimpleNamespace) -> None:
        person = models.Person()

        person.get_predicate("tags").add("x").add("y")

        assert build_set_json(person)["Person.tags"] == ["x", "y"]

    def test_cycle_emits_reference(self, models: SimpleNamespace) -> None:
        """A node reached twice is written once, then referenced by uid."""
        ada, grace = models.Person(), models.Person()
        ada.get_predicate("friends").add(grace)
        grace.get_predicate("friends").add(ada)

        body = build_set_json(ada)

        friend = body["Person.friends"][0]
        assert friend["uid"] == "_:person2"
        assert friend["Person.friends"] == [{"uid": "_:person1"}]

    def test_blank_names_shared_across_calls(self, models: SimpleNamespace) -> None:
        """One builder keeps blank node names stable between instances."""
        builder = SetJsonBuilder()
        work = models.Work()
        first, second = models.Person(), models.Person()
        first.get_predicate("works").add(work)
        second.get_predicate("works").add(work)

        builder.serialize(first)
        body = builder.serialize(second)

        assert body["Person.works"] == [{"uid": "_:work2"}]


# =============================================================================
# Test: Loaded Nodes
# =============================================================================


class TestLoadedNodes:
    """Tests for nodes produced by the object mapper."""

    def test_unchanged_node_is_uid_only(self, models: SimpleNamespace) -> None:
        (person,) = _load(models, [{"uid": "0x1", "name": "Ada"}])

        assert build_set_json(person) == {"uid": "0x1"}

    def test_dirty_properties_only(self, models: SimpleNamespace) -> None:
        (person,) = _load(models, [{"uid": "0x1", "name": "Ada", "Person.hobbies": ["go"]}])

        person.name = "Bob"

        assert build_set_json(person) == {"uid": "0x1", "name": "Bob"}

    def test_loaded_edges_not_repeated(self, models: SimpleNamespace) -> None:
        """Only edges added after load appear."""
        (person,) = _load(
            models,
            [{"uid": "0x1", "Person.works": [{"uid": "0x9", "Work.name": "Acme"}]}],
        )
        new_work = models.Work()
        new_work.name = "Initech"

        person.get_predicate("works").add(new_work)

        body = build_set_json(person)
        assert body["Person.works"] == [
            {"uid": "_:work1", "dgraph.type": "Work", "Work.name": "Initech"}
        ]


# =============================================================================
# Test: Faults
# =============================================================================


class TestFaults:
    def test_undeclared_instance_raises(self, models: SimpleNamespace) -> None:
        with pytest.raises(ConfigurationError, match="Stray"):
            build_set_json(Stray())


# =============================================================================
# Test: Deep Graphs
# =============================================================================


class TestDeepGraphs:
    def test_long_chain_of_new_nodes(self, models: SimpleNamespace) -> None:
        """Serializing a long edge chain should not hit the recursion limit."""
        people = [models.Person() for _ in range(2000)]
        for person, friend in zip(people, people[1:]):
            person.get_predicate("friends").add(friend)

        body = build_set_json(people[0])

        depth = 0
        while "Person.friends" in body:
            (body,) = body["Person.friends"]
            depth += 1
        assert depth == 1999
        assert body == {"uid": "_:person2000", "dgraph.type": "Person"}
