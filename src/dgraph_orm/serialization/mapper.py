"""
Object mapper: raw Dgraph query results -> typed node instances.

Mapping runs in two phases:

1. ``expand`` walks the JSON tree and completes every partial node
   reference from the uid-keyed resource index, in place. A visited set of
   (parent, predicate, child) edges bounds the walk when the data cycles.
2. ``transform`` builds instances guided by the registry. It memoizes by
   raw list identity, raw record identity and (type, uid), so cycles
   terminate and every node reached through different paths resolves to
   one shared instance.

Every instance leaves the mapper with an empty diff.

Usage:
    people = (
        ObjectMapper.new_builder()
        .add_entry_type(Person)
        .add_json_data(response["people"])
        .add_resource_data(response["people"])
        .build()
    )
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Mapping, MutableMapping
from typing import Any, Generic, TypeVar

from dgraph_orm.core.config import get_settings
from dgraph_orm.exceptions import ConfigurationError
from dgraph_orm.metadata.registry import MetadataRegistry, metadata_registry, type_name
from dgraph_orm.metadata.types import PredicateDescriptor, PropertyType, TypeDescriptor
from dgraph_orm.mutation.predicate import PredicateCollection
from dgraph_orm.mutation.tracker import diff_tracker
from dgraph_orm.node import Node
from dgraph_orm.serialization.facets import extract_facets

logger = logging.getLogger(__name__)

T = TypeVar("T")

TYPE_FIELD = "dgraph.type"
UID_FIELD = "uid"

Record = MutableMapping[str, Any]

_STARTED = "@started"
_UID = "@uid"
_PREDICATE_PREFIX = "@predicate:"


# =============================================================================
# Phase A: expand
# =============================================================================


def _edge_key(record: Mapping[str, Any]) -> Any:
    # Records without a uid are told apart by identity.
    uid = record.get(UID_FIELD)
    return uid if uid is not None else ("id", id(record))


def expand(
    visited: set[tuple[Any, str, Any]],
    resource: Mapping[str, Record],
    source: Record,
    type_field: str = TYPE_FIELD,
) -> None:
    """Complete ``source`` and everything below it from ``resource``, in place.

    Indexed fields overwrite inline ones. Each (parent, predicate, child)
    edge is followed at most once.
    """
    pending: deque[Record] = deque([source])

    while pending:
        record = pending.popleft()

        uid = record.get(UID_FIELD)
        if uid is None:
            logger.debug("Record without uid left partial: %s", sorted(record))
        else:
            indexed = resource.get(uid)
            if indexed is not None and indexed is not record:
                record.update(indexed)

        parent_key = _edge_key(record)
        for key, value in list(record.items()):
            if key == type_field:
                continue
            nodes = [value] if isinstance(value, MutableMapping) else value
            if not isinstance(nodes, list):
                continue

            for node in nodes:
                if not isinstance(node, MutableMapping):
                    continue

                edge = (parent_key, key, _edge_key(node))
                if edge in visited:
                    continue

                visited.add(edge)
                pending.append(node)


def index_resources(
    resource: dict[str, Record],
    data: Record | list[Any],
    type_field: str = TYPE_FIELD,
) -> None:
    """Flatten a JSON tree into ``resource`` by uid.

    A uid seen more than once accumulates the union of its fields; the
    indexed record is a new dict, so inputs are not modified here.
    """
    pending: list[Any] = [data]
    seen: set[int] = set()

    while pending:
        item = pending.pop()
        if id(item) in seen:
            continue
        seen.add(id(item))

        if isinstance(item, list):
            pending.extend(reversed(item))
            continue
        if not isinstance(item, Mapping):
            continue

        uid = item.get(UID_FIELD)
        if uid is not None:
            merged = resource.setdefault(uid, {})
            for key, value in item.items():
                # Keep the longest edge list seen so shared references stay shared.
                known = merged.get(key)
                if isinstance(value, list) and isinstance(known, list) and len(value) <= len(known):
                    continue
                merged[key] = value

        for key, value in item.items():
            if key != type_field and isinstance(value, (list, Mapping)):
                pending.append(value)


# =============================================================================
# Phase B: transform
# =============================================================================


class _Transformer:
    """Memoized construction of instances from expanded raw records."""

    def __init__(self, registry: MetadataRegistry) -> None:
        self._registry = registry
        # id(raw list) -> (raw list, instances, sources)
        self._arrays: dict[int, tuple[list[Any], list[Any], list[Any]]] = {}
        # id(raw record) -> (raw record, instance)
        self._records: dict[int, tuple[Any, Any]] = {}
        self._by_uid: dict[tuple[str, str], Any] = {}
        self._loaded: dict[int, set[str]] = {}
        self._facet_cache: dict[int, tuple[Any, dict[str, Any]]] = {}
        # Records waiting to be applied; drained breadth-first by drain().
        self._pending: deque[tuple[TypeDescriptor, Any, Record]] = deque()
        self.instances: list[Any] = []

    def transform_array(
        self,
        descriptor: TypeDescriptor,
        plain: list[Any],
    ) -> tuple[list[Any], list[Any]]:
        """Return (instances, raw sources) for ``plain``, reusing earlier results.

        Instances are created and registered here; their records are queued
        and only applied by ``drain()``.
        """
        hit = self._arrays.get(id(plain))
        if hit is not None and hit[0] is plain:
            return hit[1], hit[2]

        instances: list[Any] = []
        sources: list[Any] = []
        for record in plain:
            if not isinstance(record, MutableMapping):
                logger.debug("Skipping non-object element in %s list", descriptor.name)
                continue
            instance, fresh = self._instantiate(descriptor, record)
            instances.append(instance)
            sources.append(record)
            if fresh:
                self._pending.append((descriptor, instance, record))

        self._arrays[id(plain)] = (plain, instances, sources)
        return instances, sources

    def drain(self) -> None:
        """Apply queued records until none are left.

        Binding a predicate queues the records of its target list, so the
        walk is bounded by the number of distinct records, not the depth.
        """
        while self._pending:
            descriptor, instance, record = self._pending.popleft()
            self._populate(descriptor, instance, record)

    def _instantiate(self, descriptor: TypeDescriptor, record: Record) -> tuple[Any, bool]:
        """Find or create the instance for ``record``.

        Returns the instance and whether ``record`` still has to be applied.
        """
        hit = self._records.get(id(record))
        if hit is not None and hit[0] is record:
            return hit[1], False

        uid = record.get(UID_FIELD)
        key = (descriptor.name, uid) if uid is not None else None
        instance = self._by_uid.get(key) if key is not None else None

        if instance is None:
            cls = descriptor.cls
            if cls is None:
                raise ConfigurationError(f"Node type '{descriptor.name}' has no class bound")
            instance = cls.__new__(cls)
            self._loaded[id(instance)] = set()
            self.instances.append(instance)
            if key is not None:
                self._by_uid[key] = instance

        self._records[id(record)] = (record, instance)
        return instance, True

    def _populate(self, descriptor: TypeDescriptor, instance: Any, record: Record) -> None:
        # Tracks which fields are already set, so a uid met again through
        # another record only fills the gaps.
        loaded = self._loaded[id(instance)]
        first_load = _STARTED not in loaded
        loaded.add(_STARTED)

        if UID_FIELD in record and _UID not in loaded:
            setattr(instance, descriptor.uid_field, record[UID_FIELD])
            loaded.add(_UID)
        elif first_load and not hasattr(instance, descriptor.uid_field):
            setattr(instance, descriptor.uid_field, None)

        for prop in descriptor.properties:
            if prop.property_name in loaded:
                continue
            if prop.name in record:
                setattr(instance, prop.property_name, record[prop.name])
                loaded.add(prop.property_name)
            elif first_load and not hasattr(instance, prop.property_name):
                setattr(instance, prop.property_name, None)

        if first_load:
            for prop in descriptor.properties:
                diff_tracker.track_property(instance, prop.property_name, prop.name)

        for predicate in descriptor.predicates:
            key = _PREDICATE_PREFIX + predicate.property_name
            if key in loaded or predicate.name not in record:
                continue
            loaded.add(key)
            self._bind_predicate(instance, predicate, record[predicate.name])

        diff_tracker.purge_instance(instance)

    def _bind_predicate(self, owner: Any, predicate: PredicateDescriptor, raw: Any) -> None:
        target = predicate.resolve_target(self._registry)
        raw_list = raw if isinstance(raw, list) else [raw]

        if isinstance(target, PropertyType):
            elements = list(raw_list)
            sources: list[Any] = []
        else:
            instances, sources = self.transform_array(target, raw_list)
            elements = list(instances)

        collection = PredicateCollection(predicate.property_name, owner, elements)
        if sources:
            extract_facets(
                owner,
                predicate,
                elements,
                sources,
                cache=self._facet_cache,
                registry=self._registry,
            )

        if isinstance(owner, Node):
            owner._install_predicate(predicate, collection)
        else:
            object.__setattr__(owner, predicate.property_name, collection)


def transform(
    entry_type: type[T] | str,
    plain: list[Any],
    registry: MetadataRegistry | None = None,
) -> list[T]:
    """Build instances of ``entry_type`` for every record in ``plain``.

    Raises:
        ConfigurationError: If ``entry_type`` or a predicate target is not
            a declared node type.
    """
    registry = registry or metadata_registry
    descriptor = registry.type_of(type_name(entry_type))
    if descriptor is None:
        raise ConfigurationError(f"'{type_name(entry_type)}' is not a declared node type")
    if descriptor.cls is None and isinstance(entry_type, type):
        descriptor.cls = entry_type

    transformer = _Transformer(registry)
    instances, _ = transformer.transform_array(descriptor, plain)
    transformer.drain()

    for instance in transformer.instances:
        diff_tracker.purge_instance(instance)

    logger.debug(
        "Transformed %d root record(s) into %d instance(s) of %d type(s)",
        len(plain),
        len(transformer.instances),
        len({type(i).__name__ for i in transformer.instances}),
    )
    return list(instances)


# =============================================================================
# Builder
# =============================================================================


class ObjectMapperBuilder(Generic[T]):
    """Collects the entry type, query data and resource data for one build."""

    def __init__(
        self,
        registry: MetadataRegistry | None = None,
        type_field: str | None = None,
    ) -> None:
        self._registry = registry or metadata_registry
        self._type_field = type_field or get_settings().dgraph_type_field
        self._entry_type: type[T] | str | None = None
        self._json_data: list[Any] = []
        self._resource: dict[str, Record] = {}

    def add_entry_type(self, entry_type: type[T] | str) -> ObjectMapperBuilder[T]:
        self._entry_type = entry_type
        return self

    def add_json_data(self, data: Record | list[Any]) -> ObjectMapperBuilder[T]:
        self._json_data = data if isinstance(data, list) else [data]
        return self

    def add_resource_data(self, data: Record | list[Any]) -> ObjectMapperBuilder[T]:
        """Index every node in ``data`` by uid for the expand phase."""
        index_resources(self._resource, data, self._type_field)
        logger.debug("Resource index holds %d node(s)", len(self._resource))
        return self

    def build(self) -> list[T]:
        if self._entry_type is None:
            raise ConfigurationError("No entry type set; call add_entry_type() first")

        # Nothing to complete partial references from.
        if self._resource:
            visited: set[tuple[Any, str, Any]] = set()
            for record in self._json_data:
                if isinstance(record, MutableMapping):
                    expand(visited, self._resource, record, self._type_field)
            logger.debug("Expanded %d edge(s)", len(visited))

        return transform(self._entry_type, self._json_data, self._registry)


class ObjectMapper:
    """Entry point for mapping query results."""

    @staticmethod
    def new_builder(
        registry: MetadataRegistry | None = None,
        type_field: str | None = None,
    ) -> ObjectMapperBuilder[Any]:
        return ObjectMapperBuilder(registry, type_field)
