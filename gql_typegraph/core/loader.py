"""Schema loading using graphql-core.

Turns introspection results (as fetched from a server or cached on disk) and
SDL files into the Schema IR, and serializes a Schema back to the
introspection JSON layout.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from graphql import build_schema, introspection_from_schema

from .ir import (
    Argument,
    EnumValue,
    Field,
    Schema,
    Type,
    TypeKind,
    TypeRef,
)

logger = logging.getLogger(__name__)

SDL_EXTENSIONS = (".graphql", ".graphqls", ".gql")


def load_schema(
    path: str | Path,
    skip_fields: dict[str, list[str]] | None = None,
) -> Schema:
    """Load a schema from a JSON introspection cache or SDL.

    A directory is treated as a set of SDL files that are concatenated in
    sorted order before building the schema.
    """
    path = Path(path)
    if path.is_dir():
        files = collect_schema_files(str(path))
        if not files:
            raise FileNotFoundError(f"no schema files found in {path}")
        logger.debug("loading %d SDL files from %s", len(files), path)
        sdl = "\n".join(Path(f).read_text() for f in files)
        return schema_from_sdl(sdl, skip_fields=skip_fields)
    if not path.is_file():
        raise FileNotFoundError(f"schema file not found: {path}")

    logger.debug("loading schema from %s", path)
    content = path.read_text()
    if path.name.endswith(SDL_EXTENSIONS):
        return schema_from_sdl(content, skip_fields=skip_fields)
    return schema_from_introspection(json.loads(content), skip_fields=skip_fields)


def schema_from_sdl(
    sdl: str,
    skip_fields: dict[str, list[str]] | None = None,
) -> Schema:
    """Build a Schema from SDL by introspecting it with graphql-core."""
    gql_schema = build_schema(sdl)
    return schema_from_introspection(
        introspection_from_schema(gql_schema),
        skip_fields=skip_fields,
    )


def schema_from_introspection(
    data: dict[str, Any],
    skip_fields: dict[str, list[str]] | None = None,
) -> Schema:
    """Build a Schema from a deserialized introspection result.

    Accepts the full response (``{"data": {"__schema": ...}}``), the bare
    ``{"__schema": ...}`` object, or the schema object itself.
    """
    schema_data = _unwrap(data)
    skip_fields = skip_fields or {}

    types = [
        _parse_type(type_data, skip_fields.get(type_data["name"], []))
        for type_data in schema_data.get("types") or []
    ]
    unknown = set(skip_fields) - {t.name for t in types}
    for name in sorted(unknown):
        logger.warning("skip_fields configured for unknown type: %s", name)

    return Schema(
        types=types,
        query_type_name=_root_name(schema_data.get("queryType")),
        mutation_type_name=_root_name(schema_data.get("mutationType")),
    )


def schema_to_introspection(schema: Schema) -> dict[str, Any]:
    """Serialize a Schema in the layout a server returns for introspection."""
    return {
        "data": {
            "__schema": {
                "queryType": _root_ref(schema.query_type_name),
                "mutationType": _root_ref(schema.mutation_type_name),
                "types": [_dump_type(t) for t in schema.types],
            }
        }
    }


def _unwrap(data: dict[str, Any]) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError("introspection document must be a JSON object")
    if "data" in data and isinstance(data["data"], dict):
        data = data["data"]
    if "__schema" in data:
        data = data["__schema"]
    if "types" not in data:
        raise ValueError("introspection document has no types")
    return data


def _root_name(ref: dict[str, Any] | None) -> str | None:
    return ref.get("name") if ref else None


def _root_ref(name: str | None) -> dict[str, str] | None:
    return {"name": name} if name else None


def _parse_type_ref(data: dict[str, Any]) -> TypeRef:
    of_type = data.get("ofType")
    return TypeRef(
        kind=TypeKind(data["kind"]),
        name=data.get("name"),
        of_type=_parse_type_ref(of_type) if of_type else None,
    )


def _parse_arguments(args: list[dict[str, Any]] | None) -> list[Argument]:
    return [
        Argument(
            name=arg["name"],
            type=_parse_type_ref(arg["type"]),
            default_value=arg.get("defaultValue"),
            description=arg.get("description"),
        )
        for arg in args or []
    ]


def _parse_fields(fields: list[dict[str, Any]] | None) -> list[Field]:
    return [
        Field(
            name=f["name"],
            type=_parse_type_ref(f["type"]),
            description=f.get("description"),
            arguments=_parse_arguments(f.get("args")),
            default_value=f.get("defaultValue"),
        )
        for f in fields or []
    ]


def _parse_type(data: dict[str, Any], skip_fields: list[str]) -> Type:
    return Type(
        name=data["name"],
        kind=TypeKind(data["kind"]),
        description=data.get("description"),
        fields=_parse_fields(data.get("fields")),
        input_fields=_parse_fields(data.get("inputFields")),
        interfaces=[_parse_type_ref(i) for i in data.get("interfaces") or []],
        possible_types=[_parse_type_ref(p) for p in data.get("possibleTypes") or []],
        enum_values=[
            EnumValue(name=v["name"], description=v.get("description"))
            for v in data.get("enumValues") or []
        ],
        skip_fields=_merge_skip_fields(data.get("skipFields") or [], skip_fields),
    )


def _merge_skip_fields(saved: list[str], configured: list[str]) -> list[str]:
    return list(dict.fromkeys([*saved, *configured]))


def _dump_type_ref(ref: TypeRef) -> dict[str, Any]:
    return {
        "kind": ref.kind.value,
        "name": ref.name,
        "ofType": _dump_type_ref(ref.of_type) if ref.of_type else None,
    }


def _dump_field(f: Field, is_input: bool) -> dict[str, Any]:
    result: dict[str, Any] = {
        "name": f.name,
        "description": f.description,
        "type": _dump_type_ref(f.type),
    }
    if is_input:
        result["defaultValue"] = f.default_value
    else:
        result["args"] = [
            {
                "name": arg.name,
                "description": arg.description,
                "type": _dump_type_ref(arg.type),
                "defaultValue": arg.default_value,
            }
            for arg in f.arguments
        ]
    return result


def _dump_type(t: Type) -> dict[str, Any]:
    result: dict[str, Any] = {
        "kind": t.kind.value,
        "name": t.name,
        "description": t.description,
        "fields": None,
        "inputFields": None,
        "interfaces": None,
        "possibleTypes": None,
        "enumValues": None,
    }
    if t.kind in (TypeKind.OBJECT, TypeKind.INTERFACE):
        result["fields"] = [_dump_field(f, is_input=False) for f in t.fields]
        result["interfaces"] = [_dump_type_ref(i) for i in t.interfaces]
    if t.kind in (TypeKind.INTERFACE, TypeKind.UNION):
        result["possibleTypes"] = [_dump_type_ref(p) for p in t.possible_types]
    if t.kind == TypeKind.INPUT_OBJECT:
        result["inputFields"] = [_dump_field(f, is_input=True) for f in t.input_fields]
    if t.kind == TypeKind.ENUM:
        result["enumValues"] = [
            {"name": v.name, "description": v.description} for v in t.enum_values
        ]
    if t.skip_fields:
        result["skipFields"] = list(t.skip_fields)
    return result


def collect_schema_files(path: str) -> list[str]:
    """Collect SDL files from a file or directory path."""
    files = []
    if os.path.isfile(path):
        if path.endswith(SDL_EXTENSIONS):
            files.append(path)
    else:
        for root, _, filenames in os.walk(path):
            for filename in filenames:
                if filename.endswith(SDL_EXTENSIONS):
                    files.append(os.path.join(root, filename))
    return sorted(files)
