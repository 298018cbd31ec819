"""
Custom exceptions for dgraph-orm.

Exception naming avoids shadowing Python builtins (ConnectionError,
NotImplementedError) while still subclassing them where callers may
reasonably catch the builtin.
"""

from __future__ import annotations


class DgraphOrmError(Exception):
    """Base exception for all dgraph-orm errors."""

    pass


class ConfigurationError(DgraphOrmError):
    """Raised when type metadata is declared or resolved incorrectly.

    Covers unresolvable predicate targets, array type declarations that
    do not hold exactly one element, missing scalar types and lookups of
    predicates that were never declared. These are startup faults and are
    never caught inside the package.
    """

    pass


class PredicateNotImplementedError(DgraphOrmError, NotImplementedError):
    """Raised by predicate collection operations that have no semantics yet."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"PredicateCollection.{operation}() is not implemented")
        self.operation = operation


class DgraphClientError(DgraphOrmError):
    """Base exception for errors talking to a Dgraph server."""

    pass


class DgraphConnectionError(DgraphClientError):
    """Raised when the Dgraph HTTP endpoint cannot be reached."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        """Initialize with message and optional cause.

        Args:
            message: Human-readable error description
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.cause = cause


class DgraphAlterError(DgraphClientError):
    """Raised when a schema alteration is rejected or fails in transport."""

    def __init__(
        self,
        message: str,
        schema: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with message, the rejected schema, and optional cause.

        Args:
            message: Human-readable error description
            schema: The schema text that was sent
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.schema = schema
        self.cause = cause
