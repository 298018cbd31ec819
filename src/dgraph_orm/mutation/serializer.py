"""
Set-JSON serialization of pending changes.

Reads the diff tracker, predicate collections and facet store to produce
the JSON object a Dgraph ``set`` mutation expects. Loaded nodes contribute
only what changed since load; nodes without a uid are written in full
under a blank node name.
"""

from __future__ import annotations

from collections import deque
from typing import Any

from dgraph_orm.core.config import get_settings
from dgraph_orm.exceptions import ConfigurationError
from dgraph_orm.metadata.registry import MetadataRegistry, metadata_registry
from dgraph_orm.metadata.types import PredicateDescriptor, PropertyType, TypeDescriptor
from dgraph_orm.mutation.predicate import PredicateCollection
from dgraph_orm.mutation.tracker import DiffTracker, diff_tracker
from dgraph_orm.node import Node
from dgraph_orm.serialization.facets import facet_fields_of, facet_key
from dgraph_orm.utils.identity import IdentityMap


class SetJsonBuilder:
    """Serializes one or more instances, sharing blank node names between them."""

    def __init__(
        self,
        registry: MetadataRegistry | None = None,
        tracker: DiffTracker | None = None,
        type_field: str | None = None,
    ) -> None:
        self._registry = registry or metadata_registry
        self._tracker = tracker or diff_tracker
        self._type_field = type_field or get_settings().dgraph_type_field
        self._blank_nodes: IdentityMap[Any, str] = IdentityMap()
        self._visited: IdentityMap[Any, bool] = IdentityMap()

    def _descriptor(self, instance: Any) -> TypeDescriptor:
        descriptor = self._registry.type_of(type(instance).__name__)
        if descriptor is None:
            raise ConfigurationError(f"'{type(instance).__name__}' is not a declared node type")
        return descriptor

    def _uid(self, instance: Any, descriptor: TypeDescriptor) -> str:
        uid = getattr(instance, descriptor.uid_field, None)
        if uid:
            return uid
        blank = self._blank_nodes.get(instance)
        if blank is None:
            blank = f"_:{descriptor.name.lower()}{len(self._blank_nodes) + 1}"
            self._blank_nodes[instance] = blank
        return blank

    def _open(self, instance: Any) -> tuple[dict[str, Any], TypeDescriptor, bool]:
        """Start the body for ``instance``; the flag is False for a repeat visit."""
        descriptor = self._descriptor(instance)
        body: dict[str, Any] = {"uid": self._uid(instance, descriptor)}
        if instance in self._visited:
            return body, descriptor, False
        self._visited[instance] = True
        return body, descriptor, True

    def serialize(self, instance: Any) -> dict[str, Any]:
        """Set-JSON body for ``instance``.

        Nested nodes are filled from a queue, so long edge chains do not
        grow the call stack.
        """
        body, descriptor, fresh = self._open(instance)
        pending: deque[tuple[Any, TypeDescriptor, dict[str, Any]]] = deque()
        if fresh:
            pending.append((instance, descriptor, body))

        while pending:
            self._fill(*pending.popleft(), pending)
        return body

    def _fill(
        self,
        instance: Any,
        descriptor: TypeDescriptor,
        body: dict[str, Any],
        pending: deque[tuple[Any, TypeDescriptor, dict[str, Any]]],
    ) -> None:
        is_new = body["uid"].startswith("_:")
        if is_new:
            body[self._type_field] = descriptor.name
            for prop in descriptor.properties:
                value = getattr(instance, prop.property_name, None)
                if value is not None:
                    body[prop.name] = value
        else:
            dirty = self._tracker.diff_of(instance)
            for prop in descriptor.properties:
                if prop.property_name in dirty:
                    body[prop.name] = getattr(instance, prop.property_name, None)

        if not isinstance(instance, Node):
            return

        collections = instance.installed_predicates()
        for predicate in descriptor.predicates:
            collection = collections.get(predicate.property_name)
            if collection is None:
                continue
            elements = collection.get() if is_new else tuple(collection.get_diff())
            if not elements:
                continue
            body[predicate.name] = self._serialize_edges(predicate, collection, elements, pending)

    def _serialize_edges(
        self,
        predicate: PredicateDescriptor,
        collection: PredicateCollection[Any, Any],
        elements: tuple[Any, ...],
        pending: deque[tuple[Any, TypeDescriptor, dict[str, Any]]],
    ) -> Any:
        target = predicate.resolve_target(self._registry)
        if isinstance(target, PropertyType):
            values: list[Any] = list(elements)
        else:
            fields = facet_fields_of(predicate, self._registry)
            values = []
            for element in elements:
                edge, descriptor, fresh = self._open(element)
                if fresh:
                    pending.append((element, descriptor, edge))
                facet = collection.get_facet(element)
                if facet is not None:
                    for field in fields:
                        value = getattr(facet, field.property_name, None)
                        if value is not None:
                            edge[facet_key(predicate.name, field.property_name)] = value
                values.append(edge)

        return values if predicate.is_array else values[-1]


def build_set_json(instance: Any, registry: MetadataRegistry | None = None) -> dict[str, Any]:
    """Set-JSON for ``instance`` and any new nodes reachable through added edges."""
    return SetJsonBuilder(registry).serialize(instance)
