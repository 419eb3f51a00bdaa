"""Selection-set synthesis for GraphQL types.

Builds the nested field selection a client sends to request every field of a
type that can be requested without supplying argument values, bounded by a
maximum depth and expanded across interface and union implementations.
"""

import logging
from collections.abc import Iterable

from .ir import Field, Schema, Type, TypeKind

logger = logging.getLogger(__name__)

TYPENAME = "__typename"

# Leaf kinds that open a nested selection block
COMPOSITE_KINDS = (TypeKind.OBJECT, TypeKind.INTERFACE, TypeKind.UNION)
# Leaf kinds whose block starts with a type discriminator
POLYMORPHIC_KINDS = (TypeKind.INTERFACE, TypeKind.UNION)


class SelectionSetBuilder:
    """Builds selection-set text for types of a schema.

    The builder holds the settings shared by every recursive step: the schema,
    the depth limit, whether the selection is for a mutation, and the field
    names to leave out. All of them are fixed for the lifetime of the builder.

    Example:
        builder = SelectionSetBuilder(schema, max_depth=2)
        body = builder.build(schema.lookup_type_by_name("Account"))
    """

    def __init__(
        self,
        schema: Schema,
        max_depth: int,
        is_mutation: bool = False,
        exclude_fields: Iterable[str] = (),
        indent: str = "  ",
    ):
        if schema is None:
            raise ValueError("unable to build selections from None schema")
        self.schema = schema
        self.max_depth = max_depth
        self.is_mutation = is_mutation
        self.exclude_fields = frozenset(exclude_fields)
        self.indent = indent

    def build(self, type_def: Type, depth: int = 0) -> str:
        """Return the selection body for ``type_def``.

        An empty string means nothing could be selected and the caller should
        omit the field that led here.
        """
        if type_def is None:
            raise ValueError("unable to build selection for None type")
        return "\n".join(self.build_lines(type_def, depth))

    def build_lines(self, type_def: Type, depth: int = 0) -> list[str]:
        depth += 1
        excluded = self.exclude_fields.union(type_def.skip_fields)

        lines: list[str] = []
        selected: set[str] = set()

        for type_field in sorted(type_def.fields, key=lambda f: f.name):
            # Argument values cannot be supplied here, so a field that needs
            # them cannot be requested outside of a mutation.
            if not self.is_mutation and type_field.has_required_arg():
                self._skip(type_field, depth, "field has at least one required arg")
                continue

            if type_field.name in excluded:
                self._skip(type_field, depth, "field excluded via configuration")
                continue

            leaf_kind = type_field.type.leaf_kind
            if leaf_kind in COMPOSITE_KINDS:
                lines.extend(self._build_nested(type_field, leaf_kind, depth))
            else:
                lines.append(type_field.name)
                selected.add(type_field.name)

        for possible in type_def.possible_types:
            possible_type = self.schema.lookup_type_by_name(possible.get_type_name())
            if possible_type is None:
                continue

            lines.append(f"... on {possible_type.name} {{")
            lines.append(f"{self.indent}{TYPENAME}")
            for line in self.build_lines(possible_type, depth):
                # Already requested through the parent type
                if line in selected:
                    continue
                lines.append(f"{self.indent}{line}")
            lines.append("}")

        return lines

    def _build_nested(self, type_field: Field, leaf_kind: TypeKind, depth: int) -> list[str]:
        if depth > self.max_depth:
            self._skip(type_field, depth, "maximum depth reached")
            return []

        sub_type = self.schema.lookup_type_by_name(type_field.type.get_type_name())
        if sub_type is None:
            return []

        # Recurse first so a field without children is dropped instead of
        # ending up as `field { }`
        sub_lines = self.build_lines(sub_type, depth)
        if not sub_lines:
            self._skip(type_field, depth, "no selectable sub-fields")
            return []

        lines = [f"{type_field.name} {{"]
        if leaf_kind in POLYMORPHIC_KINDS:
            lines.append(f"{self.indent}{TYPENAME}")
        lines.extend(f"{self.indent}{line}" for line in sub_lines)
        lines.append("}")
        return lines

    def _skip(self, type_field: Field, depth: int, reason: str) -> None:
        logger.debug(
            "skipping %s (depth=%d, mutation=%s): %s",
            type_field.name, depth, self.is_mutation, reason,
        )


def get_query_string_fields(
    schema: Schema,
    type_def: Type,
    depth: int,
    max_depth: int,
    is_mutation: bool = False,
    exclude_fields: Iterable[str] = (),
) -> str:
    """Functional form of :meth:`SelectionSetBuilder.build`."""
    builder = SelectionSetBuilder(
        schema,
        max_depth=max_depth,
        is_mutation=is_mutation,
        exclude_fields=exclude_fields,
    )
    return builder.build(type_def, depth)
