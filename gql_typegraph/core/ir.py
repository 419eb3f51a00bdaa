"""Intermediate Representation (IR) for GraphQL introspection schemas.

This module defines dataclasses that mirror the introspection type graph
(types, fields, arguments and wrapped type references) together with the
Schema registry that all traversal algorithms share.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class TypeKind(str, Enum):
    """The kind tag of a GraphQL type or type reference."""
    SCALAR = "SCALAR"
    OBJECT = "OBJECT"
    INTERFACE = "INTERFACE"
    UNION = "UNION"
    ENUM = "ENUM"
    INPUT_OBJECT = "INPUT_OBJECT"
    LIST = "LIST"
    NON_NULL = "NON_NULL"

    @property
    def is_wrapper(self) -> bool:
        return self in (TypeKind.LIST, TypeKind.NON_NULL)


@dataclass
class TypeRef:
    """A possibly wrapped reference to a named type.

    LIST and NON_NULL references carry the wrapped reference in ``of_type``;
    the chain always ends in a named leaf.
    """
    kind: TypeKind
    name: str | None = None
    of_type: "TypeRef | None" = None

    def get_kinds(self) -> list[TypeKind]:
        """Return the kinds from the outermost wrapper down to the leaf."""
        kinds = []
        ref: TypeRef | None = self
        while ref is not None:
            kinds.append(ref.kind)
            ref = ref.of_type
        return kinds

    @property
    def leaf(self) -> "TypeRef":
        ref = self
        while ref.of_type is not None:
            ref = ref.of_type
        return ref

    @property
    def leaf_kind(self) -> TypeKind:
        return self.leaf.kind

    def get_type_name(self) -> str:
        """Return the name of the leaf type."""
        return self.leaf.name or ""

    @property
    def is_non_null(self) -> bool:
        return self.kind == TypeKind.NON_NULL

    def __str__(self) -> str:
        """Render in GraphQL type syntax, e.g. ``[ID!]!``."""
        if self.kind == TypeKind.NON_NULL and self.of_type is not None:
            return f"{self.of_type}!"
        if self.kind == TypeKind.LIST and self.of_type is not None:
            return f"[{self.of_type}]"
        return self.name or ""


@dataclass
class Argument:
    """Represents an argument to a field."""
    name: str
    type: TypeRef
    default_value: str | None = None
    description: str | None = None

    @property
    def is_required(self) -> bool:
        """True when the argument is non-null and has no default value."""
        return self.type.is_non_null and self.default_value is None


@dataclass
class Field:
    """Represents a field or an input field of a GraphQL type."""
    name: str
    type: TypeRef
    description: str | None = None
    arguments: list[Argument] = field(default_factory=list)
    # Only populated for input fields
    default_value: str | None = None

    def has_required_arg(self) -> bool:
        return any(arg.is_required for arg in self.arguments)


@dataclass
class EnumValue:
    """Represents a single value in a GraphQL enum."""
    name: str
    description: str | None = None


_DESCRIPTION_META = re.compile(r"(?s)(.*)\n---\n")


def filter_description(description: str | None) -> str:
    """Strip the ``---`` delimited metadata section some APIs append."""
    if not description:
        return ""
    match = _DESCRIPTION_META.match(description)
    if match:
        return match.group(1).strip()
    return description.strip()


@dataclass
class Type:
    """Represents a named GraphQL type of any kind."""
    name: str
    kind: TypeKind
    description: str | None = None
    fields: list[Field] = field(default_factory=list)
    input_fields: list[Field] = field(default_factory=list)
    interfaces: list[TypeRef] = field(default_factory=list)
    possible_types: list[TypeRef] = field(default_factory=list)
    enum_values: list[EnumValue] = field(default_factory=list)
    # Operator-configured field names never requested for this type
    skip_fields: list[str] = field(default_factory=list)

    def get_field(self, name: str) -> Field | None:
        for type_field in self.fields:
            if type_field.name == name:
                return type_field
        return None

    def get_description(self) -> str:
        return filter_description(self.description)

    @property
    def is_composite(self) -> bool:
        """True for kinds that need a selection set."""
        return self.kind in (TypeKind.OBJECT, TypeKind.INTERFACE, TypeKind.UNION)


@dataclass
class Schema:
    """Registry of every type in an introspection schema.

    Types keep the order of the source document. Lookups go through a name
    index and always return the shared Type instance.
    """
    types: list[Type] = field(default_factory=list)
    query_type_name: str | None = "Query"
    mutation_type_name: str | None = "Mutation"

    def __post_init__(self):
        self._index: dict[str, Type] = {t.name: t for t in self.types}

    def __len__(self) -> int:
        return len(self.types)

    def __contains__(self, name: str) -> bool:
        return name in self._index

    def lookup_type_by_name(self, name: str) -> Type | None:
        """Look up a type by its exact schema name.

        An unknown name is logged and reported as None.
        """
        result = self._index.get(name)
        if result is None:
            logger.warning("type not found in schema: %s", name)
        return result

    @property
    def query_type(self) -> Type | None:
        if not self.query_type_name:
            return None
        return self.lookup_type_by_name(self.query_type_name)

    @property
    def mutation_type(self) -> Type | None:
        if not self.mutation_type_name:
            return None
        return self.lookup_type_by_name(self.mutation_type_name)

    @classmethod
    def from_introspection(
        cls,
        data: dict[str, Any],
        skip_fields: dict[str, list[str]] | None = None,
    ) -> "Schema":
        """Build a Schema from a deserialized introspection result."""
        from .loader import schema_from_introspection

        return schema_from_introspection(data, skip_fields=skip_fields)

    @classmethod
    def from_sdl(
        cls,
        sdl: str,
        skip_fields: dict[str, list[str]] | None = None,
    ) -> "Schema":
        """Build a Schema from GraphQL SDL text."""
        from .loader import schema_from_sdl

        return schema_from_sdl(sdl, skip_fields=skip_fields)

    @classmethod
    def load(
        cls,
        path: str | Path,
        skip_fields: dict[str, list[str]] | None = None,
    ) -> "Schema":
        """Load a schema from a cached JSON introspection file or an SDL file."""
        from .loader import load_schema

        return load_schema(path, skip_fields=skip_fields)

    def save(self, path: str | Path) -> None:
        """Write the schema out as an introspection JSON document."""
        from .loader import schema_to_introspection

        if not path:
            raise ValueError("unable to save schema, no file specified")

        logger.debug("saving schema to %s", path)
        content = json.dumps(schema_to_introspection(self), indent=1)
        Path(path).write_text(content + "\n")
