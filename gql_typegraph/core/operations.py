"""Operation builder for GraphQL queries and mutations.

Wraps a synthesized selection set into a complete, named operation document
with variable declarations for the arguments along the root field path.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from .ir import Argument, Schema, Type
from .selection import COMPOSITE_KINDS, TYPENAME, SelectionSetBuilder


@dataclass
class Variable:
    """A variable declared by an operation and the argument it feeds."""
    name: str
    argument: Argument

    @property
    def declaration(self) -> str:
        return f"${self.name}: {self.argument.type}"


@dataclass
class PathSegment:
    """One field on the path from the root type to the selected type."""
    field_name: str
    variables: list[Variable] = field(default_factory=list)

    def render(self) -> str:
        if not self.variables:
            return self.field_name
        args = ", ".join(f"{v.argument.name}: ${v.name}" for v in self.variables)
        return f"{self.field_name}({args})"


@dataclass
class Operation:
    """A complete query or mutation document."""
    name: str
    operation_type: str  # 'query' or 'mutation'
    segments: list[PathSegment]
    selection: str = ""
    return_type: str = ""

    @property
    def path(self) -> list[str]:
        return [s.field_name for s in self.segments]

    @property
    def variables(self) -> list[Variable]:
        return [v for s in self.segments for v in s.variables]

    def render(self, indent: str = "  ") -> str:
        """Render the operation as GraphQL document text."""
        decls = ", ".join(v.declaration for v in self.variables)
        header = f"{self.operation_type} {self.name}"
        if decls:
            header = f"{header}({decls})"

        lines = [f"{header} {{"]
        last = len(self.segments) - 1
        for i, segment in enumerate(self.segments):
            prefix = indent * (i + 1)
            if i < last or self.selection:
                lines.append(f"{prefix}{segment.render()} {{")
            else:
                lines.append(f"{prefix}{segment.render()}")

        if self.selection:
            body_indent = indent * (len(self.segments) + 1)
            lines.extend(f"{body_indent}{line}" for line in self.selection.split("\n"))
            for i in range(last, -1, -1):
                lines.append(f"{indent * (i + 1)}}}")
        else:
            for i in range(last - 1, -1, -1):
                lines.append(f"{indent * (i + 1)}}}")

        lines.append("}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()


class OperationBuilder:
    """Builds query and mutation documents from root field paths."""

    def __init__(self, schema: Schema):
        if schema is None:
            raise ValueError("unable to build operations from None schema")
        self.schema = schema

    def build_query(
        self,
        path: list[str],
        max_depth: int,
        exclude_fields: Iterable[str] = (),
        name: str | None = None,
    ) -> Operation:
        """Build a query for the field reached by ``path`` from the Query type.

        Args:
            path: Field names from the root, e.g. ["actor", "account"]
            max_depth: Maximum nesting of object fields in the selection
            exclude_fields: Field names to leave out of the selection
            name: Operation name (defaults to the PascalCase path)
        """
        root = self.schema.query_type
        if root is None:
            raise ValueError("schema has no query type")
        return self._build("query", root, path, max_depth, exclude_fields, name)

    def build_mutation(
        self,
        mutation_name: str,
        max_depth: int,
        exclude_fields: Iterable[str] = (),
        name: str | None = None,
    ) -> Operation:
        """Build a mutation calling ``mutation_name`` on the Mutation type."""
        root = self.schema.mutation_type
        if root is None:
            raise ValueError("schema has no mutation type")
        return self._build("mutation", root, [mutation_name], max_depth, exclude_fields, name)

    def _build(
        self,
        operation_type: str,
        root: Type,
        path: list[str],
        max_depth: int,
        exclude_fields: Iterable[str],
        name: str | None,
    ) -> Operation:
        if not path:
            raise ValueError(f"{operation_type} path must not be empty")

        segments: list[PathSegment] = []
        seen_names: set[str] = set()
        current: Type = root
        selection = ""
        return_type = ""

        for i, segment in enumerate(path):
            type_field = current.get_field(segment)
            if type_field is None:
                raise ValueError(f"field '{segment}' not found on type '{current.name}'")

            variables = []
            for arg in type_field.arguments:
                # queries pass only required arguments, mutations pass all
                if operation_type == "query" and not arg.is_required:
                    continue
                var_name = self._unique_var_name(arg, seen_names)
                seen_names.add(var_name)
                variables.append(Variable(name=var_name, argument=arg))
            segments.append(PathSegment(field_name=segment, variables=variables))
            return_type = type_field.type.get_type_name()

            is_last = i == len(path) - 1
            is_composite = type_field.type.leaf_kind in COMPOSITE_KINDS
            if not is_composite:
                if not is_last:
                    raise ValueError(
                        f"field '{segment}' on type '{current.name}' has no sub-fields"
                    )
                break

            next_type = self.schema.lookup_type_by_name(type_field.type.get_type_name())
            if next_type is None:
                raise ValueError(
                    f"type '{type_field.type.get_type_name()}' not found in schema"
                )
            current = next_type

            if is_last:
                builder = SelectionSetBuilder(
                    self.schema,
                    max_depth=max_depth,
                    is_mutation=operation_type == "mutation",
                    exclude_fields=exclude_fields,
                )
                # A composite field always needs a non-empty selection
                selection = builder.build(current) or TYPENAME

        return Operation(
            name=name or self._to_pascal_case(path),
            operation_type=operation_type,
            segments=segments,
            selection=selection,
            return_type=return_type,
        )

    @classmethod
    def _unique_var_name(cls, arg: Argument, taken: set[str]) -> str:
        """Name a variable after its argument, suffixing on collision.

        The first collision appends the type suffix; later ones append a
        counter as well: ``id``, ``id_iD``, ``id_iD2``.
        """
        if arg.name not in taken:
            return arg.name
        base = f"{arg.name}_{cls._type_to_var_suffix(arg.type.get_type_name())}"
        var_name = base
        counter = 2
        while var_name in taken:
            var_name = f"{base}{counter}"
            counter += 1
        return var_name

    @staticmethod
    def _to_pascal_case(path: list[str]) -> str:
        return "".join(p[:1].upper() + p[1:] for p in path)

    @staticmethod
    def _type_to_var_suffix(type_name: str) -> str:
        """Convert a type name to a variable name suffix."""
        # Remove common suffixes for cleaner names
        name = type_name
        for suffix in ("Input", "Mutation", "Payload"):
            if name.endswith(suffix):
                name = name[:-len(suffix)]
        return name[0].lower() + name[1:] if name else "arg"
