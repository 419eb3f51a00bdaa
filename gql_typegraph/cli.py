"""Command-line interface for gql-typegraph."""

import asyncio
import logging
from pathlib import Path

import click
import httpx

from .core.auth import AUTH_TYPES, DEFAULT_API_KEY_ENV, DEFAULT_AUTH_HEADER, auth_from_settings
from .core.config import DEFAULT_CONFIG_FILE, Config, ConfigError, load_config
from .core.expander import TypeConfig, expand_types
from .core.fetcher import DEFAULT_SCHEMA_CACHE_FILE, GraphQLError, fetch_schema
from .core.generator import generate as generate_documents
from .core.ir import Schema
from .core.selection import SelectionSetBuilder

LOG_LEVELS = ["trace", "debug", "info", "warning", "error"]


def configure_logging(level: str) -> None:
    # trace is accepted for parity with other tools and maps to debug
    name = "DEBUG" if level.lower() == "trace" else level.upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _load_optional_config(path: str | None) -> Config:
    if path is None:
        if Path(DEFAULT_CONFIG_FILE).is_file():
            return load_config(DEFAULT_CONFIG_FILE)
        return Config()
    return load_config(path)


def _load_schema(path: str, skip_fields: dict[str, list[str]] | None = None) -> Schema:
    try:
        return Schema.load(path, skip_fields=skip_fields)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"unable to load schema {path}: {e}") from e


@click.group()
@click.version_option(package_name="gql-typegraph")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level (defaults to the config's log_level, or info).",
)
@click.pass_context
def main(ctx: click.Context, log_level: str | None):
    """Expand GraphQL type graphs and synthesize selection sets.

    Fetch an introspection schema, then generate GraphQL documents with
    fragments and operations for the types you care about.
    """
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level
    configure_logging(log_level or "info")


@main.command()
@click.option("--config", "-c", "config_path", type=click.Path(), help="Path to the YAML config file.")
@click.option("--endpoint", "-e", help="GraphQL endpoint.")
@click.option("--auth-type", type=click.Choice(AUTH_TYPES), default=None, help="Authentication scheme (default: the config's auth.type, or api_key).")
@click.option("--header", default=None, help=f"Header name set for authentication (default: {DEFAULT_AUTH_HEADER}).")
@click.option("--api-key-env", default=None, help=f"Environment variable to read the API key from (default: {DEFAULT_API_KEY_ENV}).")
@click.option("--no-auth", is_flag=True, help="Send the introspection query without authentication.")
@click.option("--schema", "-s", "schema_file", default=None, help=f"Output file for the schema (default: {DEFAULT_SCHEMA_CACHE_FILE}).")
@click.option("--refetch", is_flag=True, help="Refetch the schema even when a cached copy exists.")
@click.pass_context
def fetch(ctx, config_path, endpoint, auth_type, header, api_key_env, no_auth, schema_file, refetch):
    """Fetch the GraphQL schema and write it to a file.

    Examples:

        gql-typegraph fetch --config .gql-typegraph.yml

        gql-typegraph fetch -e https://api.example.com/graphql --refetch
    """
    try:
        cfg = _load_optional_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    if ctx.obj.get("log_level") is None:
        configure_logging(cfg.log_level)

    endpoint = endpoint or cfg.endpoint
    if not endpoint:
        raise click.UsageError("an endpoint is required (--endpoint or config 'endpoint')")
    schema_file = schema_file or cfg.cache.schema_file

    try:
        auth = auth_from_settings(
            disable=no_auth or cfg.auth.disable,
            header=header or cfg.auth.header,
            api_key_env=api_key_env or cfg.auth.api_key_env_var,
            auth_type=auth_type or cfg.auth.type,
            username_env=cfg.auth.username_env_var,
            password_env=cfg.auth.password_env_var,
            headers=cfg.auth.headers,
        )
        schema = asyncio.run(fetch_schema(endpoint, schema_file, auth=auth, refetch=refetch))
    except (ValueError, GraphQLError, httpx.HTTPError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Schema: {schema_file} ({len(schema)} types)")


@main.command()
@click.option("--config", "-c", "config_path", default=DEFAULT_CONFIG_FILE, show_default=True, type=click.Path(), help="Path to the YAML config file.")
@click.option("--schema", "-s", "schema_file", default=None, help="Schema file (defaults to the config's cache.schema_file).")
@click.option("--output", "-o", default=".", type=click.Path(), help="Directory package paths are relative to.")
@click.pass_context
def generate(ctx, config_path, schema_file, output):
    """Generate GraphQL documents for every configured package.

    Examples:

        gql-typegraph generate --config .gql-typegraph.yml

        gql-typegraph generate -c config.yml -s schema.json -o ./generated
    """
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    if ctx.obj.get("log_level") is None:
        configure_logging(cfg.log_level)

    schema = _load_schema(schema_file or cfg.cache.schema_file, skip_fields=cfg.skip_fields)

    try:
        written = generate_documents(cfg, schema, output_dir=output)
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    for path in written:
        click.echo(f"Generated {path}")
    click.echo(f"Done! Generated {len(written)} documents.")


@main.command()
@click.option("--schema", "-s", "schema_file", required=True, type=click.Path(exists=True), help="Schema JSON or SDL file.")
@click.option("--type", "-t", "type_names", required=True, multiple=True, help="Root type name (repeatable).")
@click.option("--transitive", is_flag=True, help="Follow references to the full closure instead of one hop.")
def expand(schema_file, type_names, transitive):
    """Print the types the given root types require, one per line."""
    schema = _load_schema(schema_file)
    roots = [TypeConfig(name=name) for name in dict.fromkeys(type_names)]
    for type_def in expand_types(schema, roots, transitive=transitive):
        click.echo(type_def.name)


@main.command()
@click.option("--schema", "-s", "schema_file", required=True, type=click.Path(exists=True), help="Schema JSON or SDL file.")
@click.option("--type", "-t", "type_name", required=True, help="Type to select fields of.")
@click.option("--max-depth", "-d", default=2, show_default=True, type=click.IntRange(min=0), help="Maximum nesting of object fields.")
@click.option("--mutation", is_flag=True, help="Build the selection for a mutation result.")
@click.option("--exclude", "-x", multiple=True, help="Field name to leave out (repeatable).")
def select(schema_file, type_name, max_depth, mutation, exclude):
    """Print the selection set for a type."""
    schema = _load_schema(schema_file)
    type_def = schema.lookup_type_by_name(type_name)
    if type_def is None:
        raise click.ClickException(f"type '{type_name}' not found in schema")

    builder = SelectionSetBuilder(
        schema,
        max_depth=max_depth,
        is_mutation=mutation,
        exclude_fields=exclude,
    )
    click.echo(builder.build(type_def))


if __name__ == "__main__":
    main()
