"""Schema text generation and schema pushes."""

from dgraph_orm.schema.builder import SchemaBuilder
from dgraph_orm.schema.manager import SchemaManager

__all__ = [
    "SchemaBuilder",
    "SchemaManager",
]
