"""
Unit tests for SchemaBuilder.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from dgraph_orm.declaration import declare_facet, declare_node
from dgraph_orm.metadata import MetadataRegistry, PropertyType
from dgraph_orm.node import Facet, Node
from dgraph_orm.schema.builder import SchemaBuilder


class Work(Node):
    pass


class Person(Node):
    pass


class Tenure(Facet):
    pass


CANONICAL_SCHEMA = (
    "type Work {\n"
    "  Work.name: string\n"
    "}\n"
    "type Person {\n"
    "  name: string\n"
    "  Person.hobbies: [string]\n"
    "}\n"
    "Work.name:string\n"
    "@index(hash) name:string\n"
    "Person.hobbies:[string]\n"
)


@pytest.fixture
def registry() -> MetadataRegistry:
    """Work and Person with a node-typed edge between them."""
    registry = MetadataRegistry()
    declare_node(Work, registry).uid("id").property("name", PropertyType.STRING)
    (
        declare_node(Person, registry)
        .uid("id")
        .property("name", PropertyType.STRING, name="name", index="hash")
        .property("hobbies", [PropertyType.STRING])
        .predicate("works", [Work])
    )
    return registry


class TestSchemaBuilder:
    """Tests for schema text generation."""

    def test_canonical_output(self, registry: MetadataRegistry) -> None:
        """Type blocks first, then flat predicate lines, in declaration order."""
        assert SchemaBuilder(registry).build() == CANONICAL_SCHEMA

    def test_empty_registry(self) -> None:
        assert SchemaBuilder(MetadataRegistry()).build() == ""

    def test_build_is_deterministic(self, registry: MetadataRegistry) -> None:
        builder = SchemaBuilder(registry)

        assert builder.build() == builder.build()

    def test_include_edges(self, registry: MetadataRegistry) -> None:
        """Node-typed predicates render as uid lists when enabled."""
        schema = SchemaBuilder(registry, include_edges=True).build()

        assert "  Person.works: [uid]\n" in schema
        assert schema.endswith("Person.works:[uid]\n")

    def test_single_edge_renders_uid(self, registry: MetadataRegistry) -> None:
        declare_node(Person, registry).predicate("employer", Work, name="employer")

        schema = SchemaBuilder(registry, include_edges=True).build()

        assert "  employer: uid\n" in schema
        assert "\nemployer:uid\n" in schema

    def test_scalar_predicate_always_rendered(self, registry: MetadataRegistry) -> None:
        declare_node(Person, registry).predicate("tags", [PropertyType.STRING])

        schema = SchemaBuilder(registry).build()

        assert "  Person.tags: [string]\n" in schema
        assert "\nPerson.tags:[string]\n" in schema

    def test_shared_predicate_name_deduplicated(self, registry: MetadataRegistry) -> None:
        """Flat lines appear once per name; the first declaration wins."""

        class Company(Node):
            pass

        declare_node(Company, registry).property(
            "name", PropertyType.STRING, name="name", index="term"
        )

        schema = SchemaBuilder(registry).build()

        assert schema.count("name:string\n") == 2  # Work.name and name
        assert "@index(hash) name:string\n" in schema
        assert "@index(term)" not in schema
        assert "type Company {\n  name: string\n}\n" in schema

    def test_multiple_tokenizers(self) -> None:
        registry = MetadataRegistry()
        declare_node(Work, registry).property(
            "title", PropertyType.STRING, index=("term", "exact")
        )

        schema = SchemaBuilder(registry).build()

        assert "@index(term, exact) Work.title:string\n" in schema

    def test_facets_are_not_types(self, registry: MetadataRegistry) -> None:
        declare_facet(Tenure, "works", registry).field("since")

        schema = SchemaBuilder(registry).build()

        assert "Tenure" not in schema
        assert schema == CANONICAL_SCHEMA

    def test_uses_global_registry_by_default(self, models: SimpleNamespace) -> None:
        schema = SchemaBuilder().build()

        assert schema.startswith("type Work {\n")
        assert "type Person {\n" in schema
        assert "Person.works" not in schema
