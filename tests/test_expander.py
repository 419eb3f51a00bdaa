"""Unit tests for type expansion."""

import logging

import pytest

from gql_typegraph.core.expander import TypeConfig, expand_type, expand_types
from gql_typegraph.core.ir import Field, Schema, Type, TypeKind, TypeRef


WIDGET_SDL = """
type Query {
  widget: Widget
}

type Widget {
  part: Part
  name: String
}

type Part {
  id: ID
  widget: Widget
}
"""


def ref(name: str, kind: TypeKind = TypeKind.OBJECT) -> TypeRef:
    return TypeRef(kind=kind, name=name)


def names(types: list[Type]) -> list[str]:
    return [t.name for t in types]


@pytest.fixture
def widget_schema():
    return Schema.from_sdl(WIDGET_SDL)


@pytest.fixture
def ordered_schema():
    """A hand-built schema with a known type order."""
    string = Type(name="String", kind=TypeKind.SCALAR)
    part = Type(
        name="Part",
        kind=TypeKind.OBJECT,
        fields=[Field(name="label", type=ref("String", TypeKind.SCALAR))],
    )
    widget = Type(
        name="Widget",
        kind=TypeKind.OBJECT,
        fields=[
            Field(name="primary", type=ref("Part")),
            Field(
                name="spares",
                type=TypeRef(kind=TypeKind.LIST, of_type=TypeRef(kind=TypeKind.NON_NULL, of_type=ref("Part"))),
            ),
            Field(name="name", type=ref("String", TypeKind.SCALAR)),
        ],
    )
    filter_input = Type(
        name="WidgetFilter",
        kind=TypeKind.INPUT_OBJECT,
        input_fields=[
            Field(name="part", type=ref("PartFilter", TypeKind.INPUT_OBJECT)),
            Field(name="name", type=ref("String", TypeKind.SCALAR)),
        ],
    )
    part_filter = Type(
        name="PartFilter",
        kind=TypeKind.INPUT_OBJECT,
        input_fields=[Field(name="label", type=ref("String", TypeKind.SCALAR))],
    )
    return Schema(types=[widget, part, filter_input, part_filter, string])


class TestExpandType:
    """Tests for the single-type, one-hop expansion."""

    def test_follows_unwrapped_field_types(self, ordered_schema):
        widget = ordered_schema.lookup_type_by_name("Widget")

        assert names(expand_type(ordered_schema, widget)) == ["Part", "Part", "String"]

    def test_input_fields_come_before_fields(self):
        mixed = Type(
            name="Mixed",
            kind=TypeKind.OBJECT,
            fields=[Field(name="b", type=ref("B"))],
            input_fields=[Field(name="a", type=ref("A"))],
        )
        schema = Schema(types=[
            mixed,
            Type(name="A", kind=TypeKind.OBJECT),
            Type(name="B", kind=TypeKind.OBJECT),
        ])

        assert names(expand_type(schema, mixed)) == ["A", "B"]

    def test_unresolved_reference_is_skipped(self, caplog):
        lonely = Type(name="Lonely", kind=TypeKind.OBJECT, fields=[Field(name="x", type=ref("Missing"))])
        schema = Schema(types=[lonely])

        with caplog.at_level(logging.WARNING):
            assert expand_type(schema, lonely) == []
        assert "Missing" in caplog.text

    def test_type_without_fields(self, ordered_schema):
        string = ordered_schema.lookup_type_by_name("String")

        assert expand_type(ordered_schema, string) == []

    def test_none_arguments_raise(self, ordered_schema):
        with pytest.raises(ValueError):
            expand_type(None, ordered_schema.types[0])
        with pytest.raises(ValueError):
            expand_type(ordered_schema, None)


class TestExpandTypes:
    """Tests for root expansion."""

    def test_single_hop_scenario(self, widget_schema):
        result = expand_types(widget_schema, [TypeConfig(name="Query")])

        assert names(result) == ["Query", "Widget"]

    def test_transitive_closure(self, widget_schema):
        result = expand_types(widget_schema, [TypeConfig(name="Query")], transitive=True)

        assert names(result) == ["Query", "Widget", "Part", "String", "ID"]

    def test_cycle_terminates(self, widget_schema):
        result = expand_types(widget_schema, [TypeConfig(name="Part")], transitive=True)

        assert names(result) == ["Part", "ID", "Widget", "String"]

    def test_no_duplicates(self, ordered_schema):
        roots = [TypeConfig(name="Widget"), TypeConfig(name="Part")]
        result = expand_types(ordered_schema, roots)

        assert len(names(result)) == len(set(names(result)))
        assert names(result) == ["Widget", "Part", "String"]

    def test_outer_scan_follows_schema_order(self, ordered_schema):
        roots = [TypeConfig(name="WidgetFilter"), TypeConfig(name="Part")]
        result = expand_types(ordered_schema, roots)

        assert names(result) == ["Part", "String", "WidgetFilter", "PartFilter"]

    def test_missing_root_is_logged_and_skipped(self, ordered_schema, caplog):
        roots = [TypeConfig(name="Nope"), TypeConfig(name="Part")]

        with caplog.at_level(logging.WARNING):
            result = expand_types(ordered_schema, roots)

        assert names(result) == ["Part", "String"]
        assert "Nope" in caplog.text

    def test_deterministic(self, widget_schema):
        roots = [TypeConfig(name="Query"), TypeConfig(name="Part")]

        first = names(expand_types(widget_schema, roots, transitive=True))
        second = names(expand_types(widget_schema, roots, transitive=True))

        assert first == second

    def test_returns_shared_instances(self, ordered_schema):
        result = expand_types(ordered_schema, [TypeConfig(name="Widget")])

        assert result[0] is ordered_schema.lookup_type_by_name("Widget")

    def test_none_schema_raises(self):
        with pytest.raises(ValueError):
            expand_types(None, [TypeConfig(name="Query")])

    def test_none_roots_raise(self, ordered_schema):
        with pytest.raises(ValueError):
            expand_types(ordered_schema, None)
