"""
Pytest configuration and fixtures for dgraph-orm tests.

Node and facet classes live at module level; their metadata is declared by
the ``models`` fixture after the autouse fixture has reset the registry,
so every test starts from a clean registry.
"""

from __future__ import annotations

from collections.abc import Iterator
from types import SimpleNamespace

import pytest

from dgraph_orm.core.config import Settings
from dgraph_orm.declaration import declare_facet, declare_node
from dgraph_orm.metadata import PropertyType, metadata_registry
from dgraph_orm.mutation import diff_tracker, facet_store
from dgraph_orm.node import Facet, Node


class Work(Node):
    """Employer node."""


class Person(Node):
    """Person node with edges to works and friends."""


class Since(Facet):
    """Facet on Person.works edges."""


@pytest.fixture(autouse=True)
def reset_registry() -> Iterator[None]:
    """Isolate every test from metadata and tracking state left by other tests."""
    metadata_registry.reset()
    yield
    metadata_registry.reset()
    diff_tracker.clear()
    facet_store.clear()


@pytest.fixture
def models() -> SimpleNamespace:
    """Declare Work, Person and the Since facet."""
    declare_node(Work).uid("id").property("name", PropertyType.STRING)

    declare_facet(Since, "works").field("since").field("role")

    (
        declare_node(Person)
        .uid("id")
        .property("name", PropertyType.STRING, name="name", index="hash")
        .property("hobbies", [PropertyType.STRING])
        .predicate("works", [Work], facet=Since)
        .predicate("friends", [lambda: Person])
        .predicate("tags", [PropertyType.STRING])
        .predicate("employer", Work, name="employer")
    )

    return SimpleNamespace(Person=Person, Work=Work, Since=Since)


@pytest.fixture
def settings() -> Settings:
    """Provide test settings pointing at a local Dgraph."""
    return Settings(
        dgraph_url="http://dgraph.test:8080",
        dgraph_auth_token=None,
        dgraph_timeout=5.0,
    )
