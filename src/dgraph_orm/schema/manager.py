"""
Schema manager: pushes generated schema text through a Dgraph client.

The client is any object implementing ``DgraphClientProtocol``
(``DgraphClient`` or ``FakeDgraphClient``). The outcome of an alter call
is returned to the caller as-is; nothing here retries.
"""

from __future__ import annotations

import logging
from typing import Any

from dgraph_orm.schema.builder import SchemaBuilder

logger = logging.getLogger(__name__)


class SchemaManager:
    """Manages Dgraph schema operations.

    Usage:
        manager = SchemaManager(client=dgraph_client)
        await manager.apply_schema()
    """

    def __init__(self, client: Any, builder: SchemaBuilder | None = None) -> None:
        """Initialize schema manager.

        Args:
            client: Dgraph client (DgraphClient or FakeDgraphClient)
            builder: Schema builder; defaults to one over the global registry
        """
        self._client = client
        self._builder = builder or SchemaBuilder()

    def render(self) -> str:
        return self._builder.build()

    async def apply_schema(self) -> dict[str, Any]:
        """Build the schema and push it with ``alter``."""
        schema = self.render()
        logger.info("Pushing schema (%d lines)", schema.count("\n"))
        logger.debug("Schema:\n%s", schema)
        return await self._client.alter(schema)

    async def drop_all(self) -> dict[str, Any]:
        """Drop all data and schema.

        Warning: This is destructive! Use only for testing.
        """
        logger.warning("Dropping all Dgraph data and schema")
        return await self._client.drop_all()

    async def reset_schema(self) -> dict[str, Any]:
        """Drop everything and push the schema again.

        Warning: This is destructive! Use only for testing.
        """
        await self.drop_all()
        return await self.apply_schema()
