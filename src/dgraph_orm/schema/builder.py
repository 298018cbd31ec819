"""
Dgraph schema text generation.

Renders one ``type`` block per registered node type, then one flat
predicate line per distinct predicate name, both in registration order:

    type Person {
      name: string
      Person.hobbies: [string]
    }
    @index(hash) name:string
    Person.hobbies:[string]

Edge predicates (node-typed targets) are left out unless
``include_edges`` is set, in which case they render as ``uid``/``[uid]``.
"""

from __future__ import annotations

from dgraph_orm.metadata.registry import MetadataRegistry, metadata_registry
from dgraph_orm.metadata.types import PropertyType, render_type


def _flat_line(name: str, schema_type: str, tokenizers: tuple[str, ...] = ()) -> str:
    line = f"{name}:{schema_type}"
    if tokenizers:
        line = f"@index({', '.join(tokenizers)}) {line}"
    return line


class SchemaBuilder:
    """Builds schema text from the metadata registry.

    Usage:
        schema = SchemaBuilder().build()
        await client.alter(schema)
    """

    def __init__(
        self,
        registry: MetadataRegistry | None = None,
        include_edges: bool = False,
    ) -> None:
        self._registry = registry or metadata_registry
        self._include_edges = include_edges

    def build(self) -> str:
        lines: list[str] = []
        # predicate name -> flat line; first registration wins
        flat: dict[str, str] = {}

        for descriptor in self._registry.types():
            lines.append(f"type {descriptor.name} {{")

            for prop in descriptor.properties:
                lines.append(f"  {prop.name}: {prop.schema_type}")
                flat.setdefault(
                    prop.name,
                    _flat_line(prop.name, prop.schema_type, prop.index_tokenizers),
                )

            for predicate in descriptor.predicates:
                target = predicate.resolve_target(self._registry)
                if isinstance(target, PropertyType):
                    schema_type = render_type(target.value, predicate.is_array)
                elif self._include_edges:
                    schema_type = render_type(PropertyType.UID.value, predicate.is_array)
                else:
                    continue

                lines.append(f"  {predicate.name}: {schema_type}")
                flat.setdefault(predicate.name, _flat_line(predicate.name, schema_type))

            lines.append("}")

        lines.extend(flat.values())
        return "".join(f"{line}\n" for line in lines)
