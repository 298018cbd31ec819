"""
Process-wide metadata registry.

The registry is filled once, at startup, by the declaration layer and is
read-only afterwards. Every list it returns is in declaration order, which
the schema builder relies on for deterministic output.
"""

from __future__ import annotations

from dgraph_orm.metadata.types import (
    FacetDescriptor,
    PredicateDescriptor,
    PropertyDescriptor,
    TypeDescriptor,
)

TypeRef = type | str


def type_name(ref: TypeRef) -> str:
    """Return the registry key for a class or type name."""
    return ref if isinstance(ref, str) else ref.__name__


class MetadataRegistry:
    """Store of node type, property, predicate and facet descriptors.

    Usage:
        registry = MetadataRegistry()
        registry.add_property(Person, PropertyDescriptor("name", "name", PropertyType.STRING))
        registry.properties_of("Person")
    """

    def __init__(self) -> None:
        self._types: dict[str, TypeDescriptor] = {}
        self._facets: dict[str, list[FacetDescriptor]] = {}
        self._facet_classes: dict[str, type] = {}

    # =========================================================================
    # Registration
    # =========================================================================

    def register_type(self, ref: TypeRef) -> TypeDescriptor:
        """Register a node type; returns the existing descriptor if known."""
        name = type_name(ref)
        descriptor = self._types.get(name)
        if descriptor is None:
            descriptor = TypeDescriptor(name=name)
            self._types[name] = descriptor
        if descriptor.cls is None and isinstance(ref, type):
            descriptor.cls = ref
        return descriptor

    def set_uid_field(self, ref: TypeRef, field_name: str) -> None:
        self.register_type(ref).uid_field = field_name

    def add_property(self, ref: TypeRef, descriptor: PropertyDescriptor) -> None:
        self.register_type(ref).properties.append(descriptor)

    def add_predicate(self, ref: TypeRef, descriptor: PredicateDescriptor) -> None:
        self.register_type(ref).predicates.append(descriptor)

    def add_facet(self, ref: TypeRef, descriptor: FacetDescriptor) -> None:
        """Register a field of a facet type.

        Facet types are kept apart from node types so that they never show
        up as schema type blocks.
        """
        name = type_name(ref)
        self._facets.setdefault(name, []).append(descriptor)
        if isinstance(ref, type):
            self._facet_classes.setdefault(name, ref)

    # =========================================================================
    # Lookups
    # =========================================================================

    def properties_of(self, name: str) -> list[PropertyDescriptor]:
        descriptor = self._types.get(name)
        return list(descriptor.properties) if descriptor else []

    def predicates_of(self, name: str) -> list[PredicateDescriptor]:
        descriptor = self._types.get(name)
        return list(descriptor.predicates) if descriptor else []

    def facets_of(self, name: str) -> list[FacetDescriptor]:
        return list(self._facets.get(name, []))

    def facet_class(self, name: str) -> type | None:
        return self._facet_classes.get(name)

    def type_of(self, name: str) -> TypeDescriptor | None:
        return self._types.get(name)

    def types(self) -> list[TypeDescriptor]:
        """All node types in first-registration order."""
        return list(self._types.values())

    def predicate_of(self, name: str, property_name: str) -> PredicateDescriptor | None:
        for predicate in self.predicates_of(name):
            if predicate.property_name == property_name:
                return predicate
        return None

    def reset(self) -> None:
        """Forget everything. Only meant for test isolation."""
        self._types.clear()
        self._facets.clear()
        self._facet_classes.clear()


metadata_registry = MetadataRegistry()
