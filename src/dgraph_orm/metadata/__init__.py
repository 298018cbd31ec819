"""Type metadata: descriptors and the process-wide registry."""

from dgraph_orm.metadata.registry import MetadataRegistry, metadata_registry, type_name
from dgraph_orm.metadata.types import (
    Cardinality,
    FacetDescriptor,
    PredicateDescriptor,
    PropertyDescriptor,
    PropertyType,
    TypeDescriptor,
)

__all__ = [
    "MetadataRegistry",
    "metadata_registry",
    "type_name",
    "Cardinality",
    "FacetDescriptor",
    "PredicateDescriptor",
    "PropertyDescriptor",
    "PropertyType",
    "TypeDescriptor",
]
