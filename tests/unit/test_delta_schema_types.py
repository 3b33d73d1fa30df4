"""Tests for the Delta schema type algebra."""

from __future__ import annotations

import pytest

from delta_log_schema.types import (
    ArrayType,
    MapType,
    Schema,
    SchemaField,
    StructType,
    contains_map,
    copy_data_type,
    copy_field,
    is_known_primitive,
    is_primitive,
    nullable_field,
    struct_of,
)


def _map() -> MapType:
    return MapType(key_type="string", value_type="string", value_contains_null=True)


def test_struct_rejects_duplicate_names() -> None:
    """Refuse to build a struct with repeated field names."""
    with pytest.raises(ValueError, match="Duplicate"):
        struct_of([nullable_field("a", "long"), nullable_field("a", "string")])


def test_struct_field_lookup() -> None:
    """Look fields up by exact name."""
    struct = struct_of([nullable_field("a", "long"), nullable_field("b", "string")])
    assert struct.field_names() == ("a", "b")
    field = struct.get_field("b")
    assert field is not None
    assert field.data_type == "string"
    assert struct.get_field("B") is None


def test_nullable_field_defaults() -> None:
    """Build nullable fields with empty metadata."""
    field = nullable_field("x", "double")
    assert field == SchemaField(name="x", data_type="double", nullable=True, metadata={})


def test_values_are_frozen() -> None:
    """Prevent in-place mutation of schema values."""
    field = nullable_field("x", "double")
    with pytest.raises(AttributeError):
        field.name = "y"  # type: ignore[misc]


def test_schema_and_struct_are_distinct() -> None:
    """Keep table roots distinct from nested structs while sharing fields."""
    fields = (nullable_field("a", "long"),)
    schema = Schema(fields=fields)
    struct = StructType(fields=fields)
    assert schema != struct
    assert schema.as_struct() == struct
    assert Schema.from_struct(struct) == schema
    assert isinstance(schema, StructType)


def test_primitive_predicates() -> None:
    """Classify primitive names."""
    assert is_primitive("string")
    assert is_primitive("made_up")
    assert not is_primitive(ArrayType(element_type="string", contains_null=True))
    assert is_known_primitive("timestamp")
    assert is_known_primitive("decimal(10,2)")
    assert not is_known_primitive("made_up")
    assert not is_known_primitive(_map())


def test_contains_map_searches_nested_types() -> None:
    """Find maps nested inside arrays and structs."""
    assert contains_map(_map())
    assert contains_map(ArrayType(element_type=_map(), contains_null=False))
    assert contains_map(struct_of([nullable_field("m", _map())]))
    assert not contains_map(struct_of([nullable_field("a", "long")]))
    assert not contains_map("string")


def test_copy_field_shares_no_metadata() -> None:
    """Deep-copy fields down through arrays, maps and structs."""
    inner = SchemaField(name="k", data_type="long", nullable=False, metadata={"a": "1"})
    value = struct_of([inner])
    original = SchemaField(
        name="m",
        data_type=ArrayType(
            element_type=MapType(key_type="string", value_type=value, value_contains_null=True),
            contains_null=False,
        ),
        nullable=True,
        metadata={"comment": "x"},
    )
    copied = copy_field(original)
    assert copied == original
    assert copied.metadata is not original.metadata
    copied_value = copied.data_type.element_type.value_type  # type: ignore[union-attr]
    copied_value.fields[0].metadata["a"] = "2"
    assert inner.metadata == {"a": "1"}


def test_copy_data_type_keeps_schema_class() -> None:
    """Keep primitives as-is and preserve the Schema subclass."""
    assert copy_data_type("string") == "string"
    schema = Schema(fields=(nullable_field("a", "long"),))
    copied = copy_data_type(schema)
    assert isinstance(copied, Schema)
    assert copied == schema
