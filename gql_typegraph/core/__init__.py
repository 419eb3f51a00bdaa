"""Core modules for GraphQL type expansion and selection synthesis."""

from .auth import (
    ApiKeyAuth,
    Auth,
    BasicAuth,
    BearerAuth,
    HeaderAuth,
    NoAuth,
)
from .config import Config, ConfigError, load_config
from .expander import TypeConfig, expand_type, expand_types
from .fetcher import GraphQLError, SchemaFetcher, fetch_schema
from .generator import DocumentGenerator, generate
from .hooks import (
    AddHeaderHook,
    FilterTypesHook,
    HookRunner,
    PostGenerateHook,
    PreGenerateHook,
)
from .ir import (
    Argument,
    EnumValue,
    Field,
    Schema,
    Type,
    TypeKind,
    TypeRef,
)
from .loader import load_schema, schema_from_introspection, schema_from_sdl
from .operations import Operation, OperationBuilder
from .selection import SelectionSetBuilder, get_query_string_fields

__all__ = [
    # Auth
    "Auth",
    "ApiKeyAuth",
    "BearerAuth",
    "BasicAuth",
    "HeaderAuth",
    "NoAuth",
    # Config
    "Config",
    "ConfigError",
    "load_config",
    # Hooks
    "PreGenerateHook",
    "PostGenerateHook",
    "AddHeaderHook",
    "FilterTypesHook",
    "HookRunner",
    # IR types
    "Argument",
    "EnumValue",
    "Field",
    "Schema",
    "Type",
    "TypeKind",
    "TypeRef",
    # Loader
    "load_schema",
    "schema_from_introspection",
    "schema_from_sdl",
    # Expansion
    "TypeConfig",
    "expand_type",
    "expand_types",
    # Selection sets
    "SelectionSetBuilder",
    "get_query_string_fields",
    # Operations
    "Operation",
    "OperationBuilder",
    # Fetcher
    "GraphQLError",
    "SchemaFetcher",
    "fetch_schema",
    # Generator
    "DocumentGenerator",
    "generate",
]
