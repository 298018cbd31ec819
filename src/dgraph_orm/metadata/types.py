"""
Metadata descriptors for node types, properties, predicates and facets.

Descriptors are plain dataclasses filled in by the declaration layer
(``dgraph_orm.declaration``) and read by the mapper and schema builder.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

from dgraph_orm.exceptions import ConfigurationError

if TYPE_CHECKING:
    from dgraph_orm.metadata.registry import MetadataRegistry


# =============================================================================
# Enums
# =============================================================================


class PropertyType(str, Enum):
    """Scalar types accepted by the Dgraph schema language."""

    DEFAULT = "default"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    BOOL = "bool"
    DATETIME = "datetime"
    GEO = "geo"
    PASSWORD = "password"
    UID = "uid"


class Cardinality(Enum):
    """Whether a predicate holds one value or a list of values."""

    SINGLE = "single"
    ARRAY = "array"


# A predicate target: a scalar type, a node class, a node type name, or a
# zero-argument callable returning a node class (forward reference).
PredicateTarget = Union[PropertyType, type, str, Callable[[], Any]]


def render_type(type_name: str, is_array: bool) -> str:
    """Render a schema type as ``string`` or ``[string]``."""
    return f"[{type_name}]" if is_array else type_name


# =============================================================================
# Descriptors
# =============================================================================


@dataclass(frozen=True)
class PropertyDescriptor:
    """A scalar property of a node type.

    Attributes:
        property_name: Attribute name on the Python class
        name: Predicate name in Dgraph (explicit or ``Type.property``)
        type: Scalar type
        is_array: True for list-valued scalars (``[string]``)
        index: Index tokenizer(s), e.g. ``"hash"`` or ``("term", "exact")``
    """

    property_name: str
    name: str
    type: PropertyType
    is_array: bool = False
    index: str | tuple[str, ...] | None = None

    @property
    def schema_type(self) -> str:
        return render_type(self.type.value, self.is_array)

    @property
    def index_tokenizers(self) -> tuple[str, ...]:
        if self.index is None:
            return ()
        if isinstance(self.index, str):
            return (self.index,)
        return tuple(self.index)


@dataclass(frozen=True)
class FacetDescriptor:
    """A field of a facet type, bound to the predicate that carries it."""

    property_name: str
    predicate_name: str


@dataclass(frozen=True)
class PredicateDescriptor:
    """An edge-valued (or scalar list) predicate of a node type.

    Attributes:
        property_name: Attribute name on the Python class; also the scope
            key for facet bindings
        name: Predicate name in Dgraph (explicit or ``Type.property``)
        target: Scalar type or node type reference (see ``PredicateTarget``)
        cardinality: SINGLE or ARRAY
        facet: Optional facet class for the edges of this predicate
    """

    property_name: str
    name: str
    target: PredicateTarget
    cardinality: Cardinality = Cardinality.ARRAY
    facet: type | None = None

    @property
    def is_array(self) -> bool:
        return self.cardinality is Cardinality.ARRAY

    def resolve_target(self, registry: MetadataRegistry) -> PropertyType | TypeDescriptor:
        """Resolve the target to a scalar type or a registered node type.

        Raises:
            ConfigurationError: If the target names no registered node type.
        """
        target = self.target
        if isinstance(target, PropertyType):
            return target

        if isinstance(target, str):
            type_name = target
        elif isinstance(target, type):
            type_name = target.__name__
        elif callable(target):
            resolved = target()
            if not isinstance(resolved, type):
                raise ConfigurationError(
                    f"Predicate '{self.property_name}' target callable returned "
                    f"{resolved!r}, expected a class"
                )
            type_name = resolved.__name__
        else:
            raise ConfigurationError(
                f"Unsupported target {target!r} for predicate '{self.property_name}'"
            )

        descriptor = registry.type_of(type_name)
        if descriptor is None:
            raise ConfigurationError(
                f"Cannot resolve type '{type_name}' for predicate '{self.property_name}'. "
                "Declare the target node type before using it."
            )
        return descriptor


@dataclass
class TypeDescriptor:
    """All metadata registered for one node (or facet) class."""

    name: str
    cls: type | None = None
    properties: list[PropertyDescriptor] = field(default_factory=list)
    predicates: list[PredicateDescriptor] = field(default_factory=list)
    uid_field: str = "uid"
