"""
Facet store: (scope, owner, child) -> facet instance.

A facet belongs to an edge, i.e. to one (predicate, owner, child) triple,
not to either node. Owners and children are matched by identity, so two
distinct instances carrying the same uid bind separately.
"""

from __future__ import annotations

from typing import Any

from dgraph_orm.utils.identity import IdentityMap


class FacetStore:
    """Identity-keyed association table for edge facets."""

    def __init__(self) -> None:
        self._bindings: IdentityMap[Any, IdentityMap[Any, dict[str, Any]]] = IdentityMap()

    def attach(self, scope: str, owner: Any, child: Any, facet: Any) -> None:
        """Bind ``facet`` to the edge, replacing any previous binding."""
        children = self._bindings.setdefault(owner, IdentityMap())
        children.setdefault(child, {})[scope] = facet

    def get(self, scope: str, owner: Any, child: Any) -> Any | None:
        children = self._bindings.get(owner)
        if children is None:
            return None
        scopes = children.get(child)
        if scopes is None:
            return None
        return scopes.get(scope)

    def detach(self, scope: str, owner: Any, child: Any) -> None:
        """Remove the binding if present; a missing binding is a no-op."""
        children = self._bindings.get(owner)
        if children is None:
            return
        scopes = children.get(child)
        if scopes is None:
            return
        scopes.pop(scope, None)
        if not scopes:
            children.pop(child)
        if not len(children):
            self._bindings.pop(owner)

    def dispose(self, owner: Any) -> None:
        """Drop every binding owned by ``owner``."""
        self._bindings.pop(owner)

    def clear(self) -> None:
        self._bindings.clear()


facet_store = FacetStore()
