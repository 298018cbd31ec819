"""Change tracking: diff tracker, facet store and predicate collections."""

from dgraph_orm.mutation.facets import FacetStore, facet_store
from dgraph_orm.mutation.predicate import PredicateCollection
from dgraph_orm.mutation.tracker import DiffTracker, diff_tracker

__all__ = [
    "FacetStore",
    "facet_store",
    "PredicateCollection",
    "DiffTracker",
    "diff_tracker",
]
