"""
Dgraph HTTP client for schema alteration.

Design follows:
- Repository pattern: the schema manager only sees ``DgraphClientProtocol``
- FakeDgraphClient for testing: same interface, in-memory
- Connection reuse: one ``httpx.AsyncClient`` per client instance
- Custom exceptions: DgraphConnectionError/DgraphAlterError, chained with
  the underlying httpx error

Only the ``/alter`` endpoint is used; queries and mutations are out of
scope for this package.
"""

from __future__ import annotations

import asyncio
from typing import Any, Protocol, runtime_checkable

import httpx

from dgraph_orm.exceptions import DgraphAlterError, DgraphConnectionError


@runtime_checkable
class DgraphClientProtocol(Protocol):
    """Protocol defining the client interface used by SchemaManager."""

    async def alter(self, schema: str) -> dict[str, Any]:
        """Push schema text."""
        ...

    async def drop_all(self) -> dict[str, Any]:
        """Drop all data and schema."""
        ...


class DgraphClient:
    """Async Dgraph client over HTTP.

    Usage:
        # As async context manager (recommended)
        async with DgraphClient(settings=get_settings()) as client:
            await client.alter(SchemaBuilder().build())

        # Manual connection management
        client = DgraphClient(settings=settings)
        await client.connect()
        await client.alter(schema)
        await client.close()
    """

    def __init__(
        self,
        settings: Any,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize client with Settings object.

        Args:
            settings: Settings object with dgraph_url, dgraph_auth_token and
                      dgraph_timeout attributes
            transport: Optional httpx transport (tests use httpx.MockTransport)

        Note:
            The HTTP client is NOT created here - call connect() or use as
            async context manager.
        """
        self._settings = settings
        self._url = settings.dgraph_url.rstrip("/")
        self._auth_token = settings.dgraph_auth_token
        self._timeout = settings.dgraph_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def url(self) -> str:
        return self._url

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> None:
        """Create the HTTP client and check the server's /health endpoint.

        Raises:
            DgraphConnectionError: If the server cannot be reached.
        """
        headers = {}
        if self._auth_token:
            headers["X-Dgraph-AuthToken"] = self._auth_token

        self._client = httpx.AsyncClient(
            base_url=self._url,
            timeout=self._timeout,
            headers=headers,
            transport=self._transport,
        )
        try:
            response = await self._client.get("/health")
            response.raise_for_status()
        except httpx.HTTPError as e:
            await self.close()
            raise DgraphConnectionError(
                f"Failed to connect to Dgraph at {self._url}",
                cause=e,
            ) from e

    async def close(self) -> None:
        """Close the HTTP client. Safe to call when not connected."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> DgraphClient:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.close()

    def _ensure_connected(self) -> httpx.AsyncClient:
        if self._client is None:
            raise DgraphConnectionError(
                "Not connected to Dgraph. Call connect() first or use async context manager."
            )
        return self._client

    async def _post_alter(self, schema: str | None, **kwargs: Any) -> dict[str, Any]:
        client = self._ensure_connected()
        try:
            response = await client.post("/alter", **kwargs)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            raise DgraphAlterError(f"Alter request failed: {e}", schema=schema, cause=e) from e
        except ValueError as e:
            raise DgraphAlterError(
                "Alter response was not valid JSON", schema=schema, cause=e
            ) from e

        errors = body.get("errors")
        if errors:
            messages = "; ".join(str(error.get("message", error)) for error in errors)
            raise DgraphAlterError(f"Alter rejected: {messages}", schema=schema)
        return body

    async def alter(self, schema: str) -> dict[str, Any]:
        """POST schema text to /alter.

        Returns:
            The decoded response body

        Raises:
            DgraphConnectionError: If not connected
            DgraphAlterError: On transport failure or a rejected schema
        """
        return await self._post_alter(schema, content=schema.encode("utf-8"))

    async def drop_all(self) -> dict[str, Any]:
        """Drop all data and schema. Destructive; meant for tests."""
        return await self._post_alter(None, json={"drop_all": True})


class FakeDgraphClient:
    """In-memory fake Dgraph client for testing.

    Records every schema pushed through ``alter``.

    Usage:
        fake = FakeDgraphClient()
        await SchemaManager(client=fake).apply_schema()
        fake.schemas[-1]
    """

    def __init__(self) -> None:
        self.schemas: list[str] = []
        self.drop_count = 0

    async def alter(self, schema: str) -> dict[str, Any]:
        await asyncio.sleep(0)  # Yield to event loop for true async
        self.schemas.append(schema)
        return {"data": {"code": "Success", "message": "Done"}}

    async def drop_all(self) -> dict[str, Any]:
        await asyncio.sleep(0)  # Yield to event loop for true async
        self.schemas.clear()
        self.drop_count += 1
        return {"data": {"code": "Success", "message": "Done"}}

    @property
    def current_schema(self) -> str | None:
        return self.schemas[-1] if self.schemas else None
