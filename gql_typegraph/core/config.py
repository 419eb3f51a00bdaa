"""Configuration loading and validation.

The YAML configuration names the endpoint to fetch from, where the schema is
cached, and for each package the root types, queries and mutations to
generate documents for.
"""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .auth import (
    DEFAULT_API_KEY_ENV,
    DEFAULT_AUTH_HEADER,
    DEFAULT_PASSWORD_ENV,
    DEFAULT_USERNAME_ENV,
)
from .expander import TypeConfig

DEFAULT_CONFIG_FILE = ".gql-typegraph.yml"
DEFAULT_MAX_QUERY_FIELD_DEPTH = 2


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""


class AuthConfig(BaseModel):
    disable: bool = False
    type: Literal["api_key", "bearer", "basic", "headers", "none"] = "api_key"
    header: str = DEFAULT_AUTH_HEADER
    api_key_env_var: str = DEFAULT_API_KEY_ENV
    username_env_var: str = DEFAULT_USERNAME_ENV
    password_env_var: str = DEFAULT_PASSWORD_ENV
    headers: dict[str, str] = Field(default_factory=dict)


class CacheConfig(BaseModel):
    schema_file: str = "schema.json"


class TypeEntry(BaseModel):
    """A root type of a package."""
    name: str
    skip_fields: list[str] = Field(default_factory=list)

    def to_type_config(self) -> TypeConfig:
        return TypeConfig(name=self.name, skip_fields=tuple(self.skip_fields))


class QueryEntry(BaseModel):
    """A query reached by a field path from the Query type."""
    path: list[str]
    name: str | None = None
    max_query_field_depth: int = DEFAULT_MAX_QUERY_FIELD_DEPTH
    exclude_fields: list[str] = Field(default_factory=list)

    @field_validator("path")
    @classmethod
    def _path_not_empty(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("query path must not be empty")
        return value


class MutationEntry(BaseModel):
    """A mutation field on the Mutation type."""
    name: str
    max_query_field_depth: int = DEFAULT_MAX_QUERY_FIELD_DEPTH
    exclude_fields: list[str] = Field(default_factory=list)


class PackageConfig(BaseModel):
    name: str
    path: str
    generators: list[str] = Field(default_factory=lambda: ["documents"])
    expand_transitive: bool = False
    max_query_field_depth: int = DEFAULT_MAX_QUERY_FIELD_DEPTH
    types: list[TypeEntry] = Field(default_factory=list)
    queries: list[QueryEntry] = Field(default_factory=list)
    mutations: list[MutationEntry] = Field(default_factory=list)

    @field_validator("types")
    @classmethod
    def _unique_type_names(cls, value: list[TypeEntry]) -> list[TypeEntry]:
        names = [t.name for t in value]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"duplicate type names: {', '.join(duplicates)}")
        return value

    @property
    def type_configs(self) -> list[TypeConfig]:
        return [t.to_type_config() for t in self.types]

    @property
    def skip_fields(self) -> dict[str, list[str]]:
        return {t.name: t.skip_fields for t in self.types if t.skip_fields}


class GeneratorConfig(BaseModel):
    name: str
    file_name: str = "operations.graphql"
    template_dir: str | None = None
    header: str | None = None


class Config(BaseModel):
    """Main configuration."""
    log_level: str = "info"
    endpoint: str | None = None
    auth: AuthConfig = Field(default_factory=AuthConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    packages: list[PackageConfig] = Field(default_factory=list)
    generators: list[GeneratorConfig] = Field(
        default_factory=lambda: [GeneratorConfig(name="documents")]
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"invalid configuration: {e}") from e

    def get_generator_config(self, name: str) -> GeneratorConfig | None:
        for generator in self.generators:
            if generator.name == name:
                return generator
        return None

    @property
    def skip_fields(self) -> dict[str, list[str]]:
        """Per-type skip lists merged across all packages."""
        merged: dict[str, list[str]] = {}
        for package in self.packages:
            for name, fields in package.skip_fields.items():
                merged.setdefault(name, [])
                merged[name].extend(f for f in fields if f not in merged[name])
        return merged


def load_config(path: Path | str = DEFAULT_CONFIG_FILE) -> Config:
    """Load configuration from a YAML file."""
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"configuration file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"unable to parse {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"configuration in {path} must be a mapping")
    return Config.from_dict(data)
