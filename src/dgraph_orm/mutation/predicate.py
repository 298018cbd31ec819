"""
Predicate collections.

A ``PredicateCollection`` wraps the list of nodes behind one edge predicate
of one owner instance. It records which elements were added since it was
created and routes facets to the facet store under its scope key (the
predicate's property name).
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Generic, TypeVar

from dgraph_orm.exceptions import PredicateNotImplementedError
from dgraph_orm.mutation.facets import FacetStore, facet_store
from dgraph_orm.utils.identity import IdentityMap

T = TypeVar("T")
F = TypeVar("F")


class PredicateCollection(Generic[T, F]):
    """Mutation-aware list of the elements of one predicate.

    Usage:
        works = person.get_predicate("works")
        works.with_facet(Since(year=2019)).add(acme)
        works.get_facet(acme)   # -> Since(year=2019)
        works.get_diff()        # -> [acme]
    """

    def __init__(
        self,
        scope: str,
        owner: Any,
        data: list[T] | None = None,
        *,
        store: FacetStore | None = None,
    ) -> None:
        self._scope = scope
        self._owner = owner
        self._data: list[T] = data if data is not None else []
        self._store = store or facet_store
        self._facet: F | None = None
        self._added: IdentityMap[T, T] = IdentityMap()
        self._added_order: list[T] = []

    @property
    def scope(self) -> str:
        return self._scope

    @property
    def owner(self) -> Any:
        return self._owner

    def with_facet(self, facet: F | None) -> PredicateCollection[T, F]:
        """Stage ``facet`` for the next ``add`` (or every ``update``)."""
        self._facet = facet
        return self

    def add(self, element: T) -> PredicateCollection[T, F]:
        if self._facet is not None:
            self._store.attach(self._scope, self._owner, element, self._facet)
            self._facet = None

        self._data.append(element)
        if element not in self._added:
            self._added[element] = element
            self._added_order.append(element)
        return self

    def update(self, element: T) -> PredicateCollection[T, F]:
        """Re-bind the facet of ``element``.

        Without a staged facet this removes the existing binding. The staged
        facet is kept after an update, unlike ``add``.
        """
        if self._facet is None:
            self._store.detach(self._scope, self._owner, element)
            return self

        self._store.attach(self._scope, self._owner, element, self._facet)
        return self

    def get(self) -> tuple[T, ...]:
        return tuple(self._data)

    def get_facet(self, element: T) -> F | None:
        return self._store.get(self._scope, self._owner, element)

    def get_diff(self) -> list[T]:
        """Elements added since construction, in insertion order."""
        return list(self._added_order)

    def detach(self, element: T) -> PredicateCollection[T, F]:
        # TODO: removal needs a removed-set next to the added-set so the
        #  mutation serializer can emit delete JSON.
        raise PredicateNotImplementedError("detach")

    def delete(self, element: T) -> PredicateCollection[T, F]:
        raise PredicateNotImplementedError("delete")

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[T]:
        return iter(tuple(self._data))

    def __contains__(self, element: object) -> bool:
        return any(item is element for item in self._data)

    def __repr__(self) -> str:
        return f"PredicateCollection(scope={self._scope!r}, size={len(self._data)})"
