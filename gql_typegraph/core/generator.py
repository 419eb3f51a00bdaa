"""Document generator for configured packages.

Renders Jinja2 templates to produce a GraphQL operations document per
package: one fragment per expanded type plus the configured queries and
mutations.

Supports custom templates via the template_dir parameter:
    generator = DocumentGenerator(schema, output_dir, template_dir="./my_templates")

Template lookup order:
1. User's template directory (if provided)
2. Package default templates
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from graphql import GraphQLSyntaxError, parse
from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from .config import Config, GeneratorConfig, PackageConfig
from .expander import expand_types
from .hooks import AddHeaderHook, HookRunner
from .ir import Schema
from .operations import Operation, OperationBuilder
from .selection import SelectionSetBuilder

logger = logging.getLogger(__name__)

TEMPLATE_NAME = "operations.graphql.j2"


def indent_lines(text: str, indent: str = "  ") -> str:
    """Indent every line of a multi-line string."""
    return "\n".join(f"{indent}{line}" for line in text.split("\n"))


def graphql_comment(text: str) -> str:
    """Turn free text into GraphQL ``#`` comment lines."""
    if not text:
        return ""
    return "\n".join(f"# {line}".rstrip() for line in text.strip().split("\n"))


@dataclass
class Fragment:
    """A named fragment holding the full selection of one type."""
    name: str
    type_name: str
    selection: str
    description: str = ""


class DocumentGenerator:
    """Generates GraphQL operation documents from the Schema IR.

    Templates in template_dir take precedence over the built-in
    operations.graphql.j2.
    """

    def __init__(
        self,
        schema: Schema,
        output_dir: str | Path = ".",
        template_dir: str | None = None,
        hooks: HookRunner | None = None,
    ):
        if schema is None:
            raise ValueError("unable to generate from None schema")
        self.schema = schema
        self.output_dir = Path(output_dir)
        self.template_dir = template_dir
        self.hooks = hooks or HookRunner()

        # Build template loader - custom templates take precedence
        loaders = []
        if template_dir:
            template_path = Path(template_dir)
            if template_path.is_dir():
                loaders.append(FileSystemLoader(str(template_path)))
            else:
                logger.warning("template directory not found: %s", template_dir)
        loaders.append(PackageLoader("gql_typegraph", "templates"))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(),
            trim_blocks=True,
        )
        self.env.filters["indent_lines"] = indent_lines
        self.env.filters["graphql_comment"] = graphql_comment

    def build_fragments(self, schema: Schema, package: PackageConfig) -> list[Fragment]:
        """Build a fragment for every composite type the package expands to."""
        roots = package.type_configs
        root_skips = {root.name: root.skip_fields for root in roots}
        fragments = []

        for type_def in expand_types(schema, roots, transitive=package.expand_transitive):
            if not type_def.is_composite:
                continue

            builder = SelectionSetBuilder(
                schema,
                max_depth=package.max_query_field_depth,
                exclude_fields=root_skips.get(type_def.name, ()),
            )
            selection = builder.build(type_def)
            if not selection:
                logger.debug("skipping fragment for %s, nothing to select", type_def.name)
                continue

            fragments.append(
                Fragment(
                    name=f"{type_def.name}Fields",
                    type_name=type_def.name,
                    selection=selection,
                    description=type_def.get_description(),
                )
            )
        return fragments

    def build_operations(self, schema: Schema, package: PackageConfig) -> list[Operation]:
        builder = OperationBuilder(schema)
        operations = []
        for query in package.queries:
            operations.append(
                builder.build_query(
                    query.path,
                    max_depth=query.max_query_field_depth,
                    exclude_fields=query.exclude_fields,
                    name=query.name,
                )
            )
        for mutation in package.mutations:
            operations.append(
                builder.build_mutation(
                    mutation.name,
                    max_depth=mutation.max_query_field_depth,
                    exclude_fields=mutation.exclude_fields,
                )
            )
        return operations

    def render(self, package: PackageConfig) -> str | None:
        """Render the package document, or None when it would be empty."""
        schema = self.hooks.run_pre_hooks(self.schema)

        fragments = self.build_fragments(schema, package)
        operations = self.build_operations(schema, package)
        if not fragments and not operations:
            return None

        logger.info(
            "rendering package %s: %d fragments, %d operations",
            package.name, len(fragments), len(operations),
        )
        template = self.env.get_template(TEMPLATE_NAME)
        content = template.render(
            package=package,
            fragments=fragments,
            operations=operations,
        )

        # Validate GraphQL syntax
        try:
            parse(content)
        except GraphQLSyntaxError as e:
            raise ValueError(
                f"Generated invalid GraphQL for package {package.name}: {e}\n"
                f"Template: {TEMPLATE_NAME}"
            ) from e

        return content if content.endswith("\n") else content + "\n"

    def generate(self, package: PackageConfig, generator_config: GeneratorConfig) -> Path | None:
        """Render the package document and write it under the output directory."""
        content = self.render(package)
        if content is None:
            logger.warning("nothing to generate for package %s", package.name)
            return None

        content = self.hooks.run_post_hooks(generator_config.file_name, content)
        if generator_config.header:
            content = AddHeaderHook(generator_config.header).post_generate(
                generator_config.file_name, content
            )

        full_path = self.output_dir / package.path / generator_config.file_name
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content)
        logger.info("wrote %s", full_path)
        return full_path


GENERATORS: dict[str, type[DocumentGenerator]] = {
    "documents": DocumentGenerator,
}


def generate(
    config: Config,
    schema: Schema,
    output_dir: str | Path = ".",
    hooks: HookRunner | None = None,
) -> list[Path]:
    """Run every generator configured for every package.

    Unknown generator names and generators without a configuration entry are
    logged and skipped; a failing generator aborts the run.
    """
    if not config.packages:
        raise ValueError("an array of packages is required")

    logger.info(
        "starting generation: %d packages, %d generators",
        len(config.packages), len(config.generators),
    )

    written: list[Path] = []
    for package in config.packages:
        for generator_name in package.generators:
            generator_cls = GENERATORS.get(generator_name)
            if generator_cls is None:
                logger.error("no generator named %s found", generator_name)
                continue

            generator_config = config.get_generator_config(generator_name)
            if generator_config is None:
                logger.error("no generator config with name %s found", generator_name)
                continue

            generator = generator_cls(
                schema,
                output_dir,
                template_dir=generator_config.template_dir,
                hooks=hooks,
            )
            path = generator.generate(package, generator_config)
            if path is not None:
                written.append(path)

    return written
