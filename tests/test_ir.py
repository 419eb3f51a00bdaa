"""Unit tests for the schema IR."""

import logging

from gql_typegraph.core.ir import Argument, Field, Schema, Type, TypeKind, TypeRef


def named(name, kind=TypeKind.SCALAR):
    return TypeRef(kind=kind, name=name)


def non_null(ref):
    return TypeRef(kind=TypeKind.NON_NULL, of_type=ref)


class TestTypeRef:
    def test_unwraps_to_leaf(self):
        ref = non_null(TypeRef(kind=TypeKind.LIST, of_type=non_null(named("Widget", TypeKind.OBJECT))))

        assert ref.get_type_name() == "Widget"
        assert ref.leaf_kind == TypeKind.OBJECT
        assert ref.is_non_null
        assert str(ref) == "[Widget!]!"

    def test_named_leaf(self):
        ref = named("String")

        assert ref.get_kinds() == [TypeKind.SCALAR]
        assert not ref.is_non_null
        assert str(ref) == "String"

    def test_wrapper_kinds(self):
        assert TypeKind.LIST.is_wrapper
        assert TypeKind.NON_NULL.is_wrapper
        assert not TypeKind.OBJECT.is_wrapper


class TestArguments:
    def test_required(self):
        assert Argument(name="id", type=non_null(named("ID"))).is_required

    def test_default_makes_optional(self):
        assert not Argument(name="first", type=non_null(named("Int")), default_value="10").is_required

    def test_nullable_is_optional(self):
        assert not Argument(name="after", type=named("String")).is_required

    def test_list_of_non_null_is_optional(self):
        ref = TypeRef(kind=TypeKind.LIST, of_type=non_null(named("ID")))
        assert not Argument(name="ids", type=ref).is_required

    def test_field_has_required_arg(self):
        field = Field(
            name="owner",
            type=named("Owner", TypeKind.OBJECT),
            arguments=[
                Argument(name="first", type=named("Int")),
                Argument(name="id", type=non_null(named("ID"))),
            ],
        )
        assert field.has_required_arg()
        assert not Field(name="name", type=named("String")).has_required_arg()


class TestSchema:
    def test_lookup_returns_shared_instance(self):
        widget = Type(name="Widget", kind=TypeKind.OBJECT)
        schema = Schema(types=[widget])

        assert schema.lookup_type_by_name("Widget") is widget
        assert "Widget" in schema
        assert len(schema) == 1

    def test_lookup_is_case_sensitive(self, caplog):
        schema = Schema(types=[Type(name="Widget", kind=TypeKind.OBJECT)])

        with caplog.at_level(logging.WARNING):
            assert schema.lookup_type_by_name("widget") is None
        assert "widget" in caplog.text

    def test_get_field(self):
        widget = Type(name="Widget", kind=TypeKind.OBJECT, fields=[Field(name="id", type=named("ID"))])

        assert widget.get_field("id").name == "id"
        assert widget.get_field("nope") is None

    def test_composite_kinds(self):
        assert Type(name="A", kind=TypeKind.OBJECT).is_composite
        assert Type(name="B", kind=TypeKind.UNION).is_composite
        assert not Type(name="C", kind=TypeKind.ENUM).is_composite
