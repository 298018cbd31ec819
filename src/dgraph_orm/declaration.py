"""
Declaration layer: explicit registration of node and facet types.

Types are declared once at startup with a fluent builder instead of
class decorators. Scalar types are always given explicitly; nothing is
inferred from annotations.

Usage:
    declare_node(Work).uid("id").property("name", PropertyType.STRING)

    declare_facet(Membership, "members").field("role")

    (
        declare_node(Person)
        .uid("id")
        .property("name", PropertyType.STRING, name="name", index="hash")
        .property("hobbies", [PropertyType.STRING])
        .predicate("works", [Work])
        .predicate("teams", [lambda: Team], facet=Membership)
    )
"""

from __future__ import annotations

from typing import Any

from dgraph_orm.exceptions import ConfigurationError
from dgraph_orm.metadata.registry import MetadataRegistry, metadata_registry
from dgraph_orm.metadata.types import (
    Cardinality,
    FacetDescriptor,
    PredicateDescriptor,
    PropertyDescriptor,
    PropertyType,
)


def _sanitize_type(declared: Any, owner: str, property_name: str) -> tuple[Any, bool]:
    """Split a declared type into (element type, is_array).

    Raises:
        ConfigurationError: If no type is given or a list does not hold
            exactly one element.
    """
    if declared is None:
        raise ConfigurationError(
            f"Missing type for '{property_name}' on node '{owner}'. "
            "Types must be declared explicitly."
        )

    if isinstance(declared, (list, tuple)):
        if len(declared) != 1:
            raise ConfigurationError(
                f"Type definition array for '{owner}.{property_name}' "
                "should contain exactly 1 type"
            )
        return declared[0], True

    return declared, False


def _as_property_type(value: Any) -> PropertyType | None:
    if isinstance(value, PropertyType):
        return value
    if isinstance(value, str):
        try:
            return PropertyType(value)
        except ValueError:
            return None
    return None


class NodeDeclaration:
    """Registers the uid field, properties and predicates of one node class."""

    def __init__(self, cls: type, registry: MetadataRegistry | None = None) -> None:
        self._cls = cls
        self._registry = registry or metadata_registry
        self._registry.register_type(cls)

    @property
    def name(self) -> str:
        return self._cls.__name__

    def _external_name(self, property_name: str, name: str | None) -> str:
        return name or f"{self.name}.{property_name}"

    def uid(self, property_name: str) -> NodeDeclaration:
        """Name the attribute that receives the node uid (default ``uid``)."""
        self._registry.set_uid_field(self._cls, property_name)
        return self

    def property(
        self,
        property_name: str,
        type: PropertyType | str | list[Any] | None,
        *,
        name: str | None = None,
        index: str | tuple[str, ...] | None = None,
    ) -> NodeDeclaration:
        """Declare a scalar property.

        Args:
            property_name: Attribute name on the class
            type: Scalar type, or a one-element list for a list-valued scalar
            name: Explicit predicate name; defaults to ``Type.property``
            index: Index tokenizer(s) for the schema
        """
        element, is_array = _sanitize_type(type, self.name, property_name)
        scalar = _as_property_type(element)
        if scalar is None:
            raise ConfigurationError(
                f"Property '{self.name}.{property_name}' needs a scalar type, got {element!r}"
            )

        self._registry.add_property(
            self._cls,
            PropertyDescriptor(
                property_name=property_name,
                name=self._external_name(property_name, name),
                type=scalar,
                is_array=is_array,
                index=index,
            ),
        )
        return self

    def predicate(
        self,
        property_name: str,
        type: Any,
        *,
        name: str | None = None,
        facet: type | None = None,
    ) -> NodeDeclaration:
        """Declare an edge predicate (or a scalar-valued predicate).

        Args:
            property_name: Attribute name on the class; also the facet scope key
            type: Node class, type name, forward-reference callable or scalar
                type; a one-element list marks ARRAY cardinality
            name: Explicit predicate name; defaults to ``Type.property``
            facet: Facet class carried by the edges of this predicate
        """
        element, is_array = _sanitize_type(type, self.name, property_name)
        scalar = _as_property_type(element)
        target = scalar if scalar is not None else element

        if facet is not None and scalar is not None:
            raise ConfigurationError(
                f"Facets are only supported on node predicates, not '{self.name}.{property_name}'"
            )

        self._registry.add_predicate(
            self._cls,
            PredicateDescriptor(
                property_name=property_name,
                name=self._external_name(property_name, name),
                target=target,
                cardinality=Cardinality.ARRAY if is_array else Cardinality.SINGLE,
                facet=facet,
            ),
        )
        return self


class FacetDeclaration:
    """Registers the fields of a facet class carried by one predicate."""

    def __init__(
        self,
        cls: type,
        predicate_name: str,
        registry: MetadataRegistry | None = None,
    ) -> None:
        self._cls = cls
        self._predicate_name = predicate_name
        self._registry = registry or metadata_registry

    def field(self, property_name: str) -> FacetDeclaration:
        self._registry.add_facet(
            self._cls,
            FacetDescriptor(property_name=property_name, predicate_name=self._predicate_name),
        )
        return self


def declare_node(cls: type, registry: MetadataRegistry | None = None) -> NodeDeclaration:
    return NodeDeclaration(cls, registry)


def declare_facet(
    cls: type,
    predicate_name: str,
    registry: MetadataRegistry | None = None,
) -> FacetDeclaration:
    return FacetDeclaration(cls, predicate_name, registry)
