"""Generation hooks for customizing document generation.

Pre-generation hooks may replace the Schema before types are expanded;
post-generation hooks transform each rendered document before it is written.

Example usage:
    from gql_typegraph.core.hooks import AddHeaderHook, FilterTypesHook, HookRunner

    runner = HookRunner()
    runner.add_pre_hook(FilterTypesHook(exclude_prefix="Internal"))
    runner.add_post_hook(AddHeaderHook("Code generated by gql-typegraph. DO NOT EDIT."))
"""

from typing import Protocol, runtime_checkable

from .ir import Schema


@runtime_checkable
class PreGenerateHook(Protocol):
    """Protocol for pre-generation hooks.

    Example:
        class DropDeprecatedRoots:
            def pre_generate(self, schema: Schema) -> Schema:
                return Schema(
                    types=[t for t in schema.types if not t.name.startswith("Legacy")],
                    query_type_name=schema.query_type_name,
                    mutation_type_name=schema.mutation_type_name,
                )
    """

    def pre_generate(self, schema: Schema) -> Schema:
        """Called before generation; returns the Schema to generate from."""
        ...


@runtime_checkable
class PostGenerateHook(Protocol):
    """Protocol for post-generation hooks."""

    def post_generate(self, filename: str, content: str) -> str:
        """Called for each generated file; returns the content to write."""
        ...


class AddHeaderHook:
    """Built-in hook that prefixes generated documents with a comment header.

    Every header line is turned into a GraphQL ``#`` comment.

    Example:
        hook = AddHeaderHook("Code generated by gql-typegraph. DO NOT EDIT.")
    """

    def __init__(self, header: str):
        self.header = header

    def post_generate(self, _filename: str, content: str) -> str:
        lines = []
        for line in self.header.rstrip("\n").split("\n"):
            if line.startswith("#"):
                lines.append(line)
            else:
                lines.append(f"# {line}".rstrip())
        return "\n".join(lines) + "\n\n" + content


class FilterTypesHook:
    """Built-in hook to drop schema types by name prefix/suffix.

    Root operation types are always kept.

    Example:
        # Remove all types starting with underscore
        hook = FilterTypesHook(exclude_prefix="_")
    """

    def __init__(
        self,
        exclude_prefix: str | None = None,
        exclude_suffix: str | None = None,
        include_prefix: str | None = None,
        include_suffix: str | None = None,
    ):
        self.exclude_prefix = exclude_prefix
        self.exclude_suffix = exclude_suffix
        self.include_prefix = include_prefix
        self.include_suffix = include_suffix

    def _should_include(self, name: str) -> bool:
        if self.exclude_prefix and name.startswith(self.exclude_prefix):
            return False
        if self.exclude_suffix and name.endswith(self.exclude_suffix):
            return False
        if self.include_prefix and not name.startswith(self.include_prefix):
            return False
        if self.include_suffix and not name.endswith(self.include_suffix):
            return False
        return True

    def pre_generate(self, schema: Schema) -> Schema:
        roots = {schema.query_type_name, schema.mutation_type_name}
        return Schema(
            types=[t for t in schema.types if t.name in roots or self._should_include(t.name)],
            query_type_name=schema.query_type_name,
            mutation_type_name=schema.mutation_type_name,
        )


class HookRunner:
    """Runs a collection of hooks in order."""

    def __init__(self):
        self.pre_hooks: list[PreGenerateHook] = []
        self.post_hooks: list[PostGenerateHook] = []

    def add_pre_hook(self, hook: PreGenerateHook):
        self.pre_hooks.append(hook)

    def add_post_hook(self, hook: PostGenerateHook):
        self.post_hooks.append(hook)

    def run_pre_hooks(self, schema: Schema) -> Schema:
        for hook in self.pre_hooks:
            schema = hook.pre_generate(schema)
        return schema

    def run_post_hooks(self, filename: str, content: str) -> str:
        for hook in self.post_hooks:
            content = hook.post_generate(filename, content)
        return content
