"""
Base classes for mapped node and facet types.

``TrackedObject`` forwards every attribute assignment to the diff tracker,
which ignores properties it has not been asked to observe. ``Node`` adds
the explicit predicate accessor pair, ``get_predicate``/``set_predicate``.

Usage:
    class Person(Node):
        pass

    declare_node(Person).property("name", PropertyType.STRING).predicate("works", [Work])

    person.get_predicate("works").add(work)
"""

from __future__ import annotations

from typing import Any

from dgraph_orm.exceptions import ConfigurationError
from dgraph_orm.metadata.registry import metadata_registry
from dgraph_orm.metadata.types import PredicateDescriptor
from dgraph_orm.mutation.predicate import PredicateCollection
from dgraph_orm.mutation.tracker import diff_tracker
from dgraph_orm.serialization.facets import extract_facets

_PREDICATES_ATTR = "_dgraph_predicates"


class TrackedObject:
    """Object whose attribute assignments are reported to the diff tracker."""

    def __setattr__(self, name: str, value: Any) -> None:
        object.__setattr__(self, name, value)
        diff_tracker.notify(self, name)


class Facet(TrackedObject):
    """Base class for facet (edge attribute) types."""

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({fields})"


class Node(TrackedObject):
    """Base class for node types loaded by the object mapper."""

    @classmethod
    def predicate_descriptor(cls, property_name: str) -> PredicateDescriptor:
        descriptor = metadata_registry.predicate_of(cls.__name__, property_name)
        if descriptor is None:
            raise ConfigurationError(
                f"'{property_name}' is not a declared predicate of node '{cls.__name__}'"
            )
        return descriptor

    def _predicate_slots(self) -> dict[str, PredicateCollection[Any, Any]]:
        slots = self.__dict__.get(_PREDICATES_ATTR)
        if slots is None:
            slots = {}
            object.__setattr__(self, _PREDICATES_ATTR, slots)
        return slots

    def has_predicate(self, property_name: str) -> bool:
        """True once the predicate was loaded, written or read."""
        return property_name in self._predicate_slots()

    def installed_predicates(self) -> dict[str, PredicateCollection[Any, Any]]:
        return dict(self._predicate_slots())

    def get_predicate(self, property_name: str) -> PredicateCollection[Any, Any]:
        """Return the collection for ``property_name``, creating an empty one."""
        slots = self._predicate_slots()
        collection = slots.get(property_name)
        if collection is None:
            descriptor = self.predicate_descriptor(property_name)
            collection = PredicateCollection(descriptor.property_name, self, [])
            slots[property_name] = collection
        return collection

    def set_predicate(
        self,
        property_name: str,
        value: PredicateCollection[Any, Any] | list[Any] | tuple[Any, ...] | None,
    ) -> None:
        """Replace the collection for ``property_name``.

        Accepts a list of elements (wrapped in a new collection with an empty
        diff) or an existing collection. Inline facet fields found on the
        elements are moved into bound facet instances either way.
        """
        descriptor = self.predicate_descriptor(property_name)

        if isinstance(value, PredicateCollection):
            collection = value
        elif value is None or isinstance(value, (list, tuple)):
            collection = PredicateCollection(descriptor.property_name, self, list(value or []))
        else:
            raise TypeError(
                f"Predicate '{property_name}' expects a list or PredicateCollection, "
                f"got {type(value).__name__}"
            )

        elements = collection.get()
        extract_facets(self, descriptor, elements, elements)
        self._predicate_slots()[property_name] = collection

    def _install_predicate(
        self,
        descriptor: PredicateDescriptor,
        collection: PredicateCollection[Any, Any],
    ) -> None:
        self._predicate_slots()[descriptor.property_name] = collection
