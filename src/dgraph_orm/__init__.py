# dgraph-orm: object mapping and schema generation for Dgraph
"""
Maps Dgraph query results to typed Python objects and back:
- declare_node/declare_facet: explicit type registration
- ObjectMapper: cycle-safe mapping of query JSON to shared instances
- PredicateCollection: mutation-aware edge lists with facets
- SchemaBuilder/SchemaManager: schema text generation and pushes
- build_set_json: set-mutation JSON from tracked changes
"""

from dgraph_orm.client import DgraphClient, DgraphClientProtocol, FakeDgraphClient
from dgraph_orm.declaration import declare_facet, declare_node
from dgraph_orm.exceptions import (
    ConfigurationError,
    DgraphAlterError,
    DgraphClientError,
    DgraphConnectionError,
    DgraphOrmError,
    PredicateNotImplementedError,
)
from dgraph_orm.metadata import (
    Cardinality,
    MetadataRegistry,
    PropertyType,
    metadata_registry,
)
from dgraph_orm.mutation import (
    PredicateCollection,
    diff_tracker,
    facet_store,
)
from dgraph_orm.mutation.serializer import build_set_json
from dgraph_orm.node import Facet, Node
from dgraph_orm.schema import SchemaBuilder, SchemaManager
from dgraph_orm.serialization.mapper import ObjectMapper

__all__ = [
    # Declaration
    "declare_node",
    "declare_facet",
    "Node",
    "Facet",
    # Metadata
    "Cardinality",
    "MetadataRegistry",
    "PropertyType",
    "metadata_registry",
    # Mapping and tracking
    "ObjectMapper",
    "PredicateCollection",
    "diff_tracker",
    "facet_store",
    "build_set_json",
    # Schema
    "SchemaBuilder",
    "SchemaManager",
    # Client
    "DgraphClient",
    "DgraphClientProtocol",
    "FakeDgraphClient",
    # Exceptions
    "DgraphOrmError",
    "ConfigurationError",
    "PredicateNotImplementedError",
    "DgraphClientError",
    "DgraphConnectionError",
    "DgraphAlterError",
]
