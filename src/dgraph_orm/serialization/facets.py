"""
Facet extraction.

Query results inline edge attributes on the child record as
``<predicate>|<facet field>``. Extraction moves those fields into a facet
instance bound in the facet store to (scope, owner, child) and removes
them from the child's own data.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, MutableMapping
from typing import Any

from dgraph_orm.metadata.registry import MetadataRegistry, metadata_registry, type_name
from dgraph_orm.metadata.types import FacetDescriptor, PredicateDescriptor
from dgraph_orm.mutation.facets import FacetStore, facet_store
from dgraph_orm.mutation.tracker import DiffTracker, diff_tracker

logger = logging.getLogger(__name__)

FACET_SEPARATOR = "|"

_MISSING = object()


def facet_key(predicate_name: str, field_name: str) -> str:
    return f"{predicate_name}{FACET_SEPARATOR}{field_name}"


def pop_inline(source: Any, key: str) -> Any:
    """Remove ``key`` from a raw record or an object's ``__dict__``.

    Returns ``_MISSING`` when the field is not there.
    """
    if isinstance(source, MutableMapping):
        return source.pop(key, _MISSING)
    attributes = getattr(source, "__dict__", None)
    if attributes is None:
        return _MISSING
    return attributes.pop(key, _MISSING)


def facet_fields_of(
    descriptor: PredicateDescriptor,
    registry: MetadataRegistry | None = None,
) -> list[FacetDescriptor]:
    """Facet fields declared for the edges of ``descriptor``."""
    if descriptor.facet is None:
        return []
    registry = registry or metadata_registry
    return [
        field
        for field in registry.facets_of(type_name(descriptor.facet))
        if field.predicate_name in (descriptor.property_name, descriptor.name)
    ]


def build_facet(facet_cls: type, values: dict[str, Any], tracker: DiffTracker) -> Any:
    """Instantiate a facet without calling ``__init__`` and purge its diff."""
    facet = facet_cls.__new__(facet_cls)
    for field_name, value in values.items():
        setattr(facet, field_name, value)
        tracker.track_property(facet, field_name)
    tracker.purge_instance(facet)
    return facet


def extract_facets(
    owner: Any,
    descriptor: PredicateDescriptor,
    elements: Iterable[Any],
    sources: Iterable[Any],
    *,
    cache: dict[int, tuple[Any, dict[str, Any]]] | None = None,
    registry: MetadataRegistry | None = None,
    store: FacetStore | None = None,
    tracker: DiffTracker | None = None,
) -> int:
    """Move inline facet fields of each element into bound facet instances.

    Args:
        owner: Instance that owns the predicate
        descriptor: The predicate whose edges are processed
        elements: Child elements, used as facet store keys
        sources: Raw data holding the inline fields, parallel to ``elements``
            (the elements themselves when no separate raw record exists)
        cache: Fields already popped from a source, keyed by source identity,
            so a raw record shared by several owners yields the same values

    Returns:
        Number of facets attached
    """
    facet_cls = descriptor.facet
    fields = facet_fields_of(descriptor, registry)
    if facet_cls is None or not fields:
        return 0

    store = store or facet_store
    tracker = tracker or diff_tracker
    attached = 0

    for element, source in zip(elements, sources):
        cached = cache.get(id(source)) if cache is not None else None
        if cached is not None and cached[0] is source:
            values = cached[1]
        else:
            values = {}
            for field in fields:
                value = pop_inline(source, facet_key(descriptor.name, field.property_name))
                if value is not _MISSING:
                    values[field.property_name] = value
            if cache is not None:
                cache[id(source)] = (source, values)

        if not values:
            continue

        facet = build_facet(facet_cls, values, tracker)
        store.attach(descriptor.property_name, owner, element, facet)
        attached += 1

    if attached:
        logger.debug(
            "Attached %d facet(s) on predicate %s", attached, descriptor.name
        )
    return attached
