"""Type expansion over the schema type graph.

Decides which types a set of root types drags in through their fields and
input fields.
"""

import logging
from dataclasses import dataclass, field

from .ir import Schema, Type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeConfig:
    """A root type requested for expansion, plus its per-type metadata."""
    name: str
    skip_fields: tuple[str, ...] = field(default_factory=tuple)


def expand_type(schema: Schema, type_def: Type) -> list[Type]:
    """Return the types referenced one hop away from ``type_def``.

    Input fields are visited before fields, each in declaration order.
    References that cannot be resolved are logged and skipped.
    """
    if schema is None:
        raise ValueError("unable to expand type from None schema")
    if type_def is None:
        raise ValueError("unable to expand None type")

    result: list[Type] = []
    for type_field in [*type_def.input_fields, *type_def.fields]:
        referenced = schema.lookup_type_by_name(type_field.type.get_type_name())
        if referenced is not None:
            result.append(referenced)
    return result


def expand_types(
    schema: Schema,
    roots: list[TypeConfig],
    transitive: bool = False,
) -> list[Type]:
    """Expand root types into the ordered, de-duplicated set they require.

    The outer scan follows the schema's own type order. Each root is followed
    by the types its fields reference. With ``transitive`` the expansion keeps
    going until no new type is discovered, so nested and cyclic references
    resolve to the full closure.
    """
    if schema is None:
        raise ValueError("unable to expand types from None schema")
    if roots is None:
        raise ValueError("unable to expand None root types")

    root_names = {root.name for root in roots}
    for name in sorted(root_names):
        if name not in schema:
            logger.warning("requested type not found in schema: %s", name)

    expanded: list[Type] = []
    seen: set[str] = set()

    def add(type_def: Type) -> None:
        if type_def.name not in seen:
            seen.add(type_def.name)
            expanded.append(type_def)

    for schema_type in schema.types:
        if schema_type is None or schema_type.name not in root_names:
            continue
        add(schema_type)
        for referenced in expand_type(schema, schema_type):
            add(referenced)

    if transitive:
        # expanded grows while we walk it; seen keeps cycles finite
        index = 0
        while index < len(expanded):
            for referenced in expand_type(schema, expanded[index]):
                add(referenced)
            index += 1

    logger.debug(
        "expanded %d root types into %d types (transitive=%s)",
        len(root_names), len(expanded), transitive,
    )
    return expanded
