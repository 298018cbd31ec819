"""Dgraph HTTP client used to push schemas."""

from dgraph_orm.client.dgraph_client import (
    DgraphClient,
    DgraphClientProtocol,
    FakeDgraphClient,
)

__all__ = [
    "DgraphClient",
    "DgraphClientProtocol",
    "FakeDgraphClient",
]
