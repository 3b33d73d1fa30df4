"""Tests for Delta schema to Arrow conversion."""

from __future__ import annotations

import pyarrow as pa
import pytest

from delta_log_schema import DeltaLogSchemaFactory, Schema
from delta_log_schema.arrow import (
    data_type_from_arrow,
    schema_from_arrow,
    to_arrow_field,
    to_arrow_schema,
    to_arrow_type,
)
from delta_log_schema.errors import ErrorKind, SchemaConversionError
from delta_log_schema.types import ArrayType, MapType, SchemaField, nullable_field, struct_of


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("string", pa.string()),
        ("long", pa.int64()),
        ("integer", pa.int32()),
        ("short", pa.int16()),
        ("byte", pa.int8()),
        ("float", pa.float32()),
        ("double", pa.float64()),
        ("boolean", pa.bool_()),
        ("binary", pa.binary()),
        ("date", pa.date32()),
        ("timestamp", pa.timestamp("us", tz="UTC")),
        ("decimal(10,2)", pa.decimal128(10, 2)),
        ("decimal(38, 0)", pa.decimal128(38, 0)),
    ],
)
def test_primitive_types(name: str, expected: pa.DataType) -> None:
    """Map primitive names to Arrow types."""
    assert to_arrow_type(name) == expected


def test_unknown_primitive_raises_conversion_error() -> None:
    """Refuse primitive names without Arrow semantics."""
    with pytest.raises(SchemaConversionError) as excinfo:
        to_arrow_type("interval")
    assert excinfo.value.kind is ErrorKind.CONVERSION


def test_invalid_decimal_precision_chains_cause() -> None:
    """Chain the Arrow error for decimals outside the supported range."""
    with pytest.raises(SchemaConversionError) as excinfo:
        to_arrow_type("decimal(99,2)")
    assert excinfo.value.cause is not None


def test_array_element_nullability() -> None:
    """Carry containsNull onto the list element field."""
    dtype = to_arrow_type(ArrayType(element_type="long", contains_null=False))
    assert pa.types.is_list(dtype)
    assert dtype.value_field.name == "element"
    assert dtype.value_field.nullable is False
    assert dtype.value_type == pa.int64()


def test_map_conversion() -> None:
    """Convert maps with non-null keys and flagged value nullability."""
    dtype = to_arrow_type(
        MapType(key_type="string", value_type="double", value_contains_null=False)
    )
    assert pa.types.is_map(dtype)
    assert dtype.key_type == pa.string()
    assert dtype.item_type == pa.float64()
    assert dtype.key_field.nullable is False
    assert dtype.item_field.nullable is False


def test_map_rejected_without_map_support() -> None:
    """Refuse maps, even nested ones, when maps are unsupported."""
    nested = struct_of(
        [
            nullable_field(
                "m",
                MapType(key_type="string", value_type="string", value_contains_null=True),
            )
        ]
    )
    with pytest.raises(SchemaConversionError):
        to_arrow_type(nested, support_maps=False)


def test_field_metadata_and_nullability() -> None:
    """Carry nullability and metadata onto Arrow fields."""
    field = to_arrow_field(
        SchemaField(name="id", data_type="long", nullable=False, metadata={"comment": "key"})
    )
    assert field.name == "id"
    assert field.nullable is False
    assert field.metadata == {b"comment": b"key"}
    assert to_arrow_field(nullable_field("x", "long")).metadata is None


def test_schema_roundtrip_through_arrow() -> None:
    """Convert a schema to Arrow and back without loss."""
    schema = Schema(
        fields=(
            SchemaField(name="id", data_type="long", nullable=False, metadata={"k": "v"}),
            nullable_field("ts", "timestamp"),
            nullable_field("amount", "decimal(12,4)"),
            nullable_field("tags", ArrayType(element_type="string", contains_null=True)),
            nullable_field(
                "props",
                MapType(key_type="string", value_type="integer", value_contains_null=True),
            ),
            nullable_field(
                "nested",
                struct_of([nullable_field("flag", "boolean"), nullable_field("day", "date")]),
            ),
        )
    )
    assert schema_from_arrow(to_arrow_schema(schema)) == schema


def test_large_arrow_types_normalize() -> None:
    """Read large string and large list types as their Delta equivalents."""
    assert data_type_from_arrow(pa.large_string()) == "string"
    assert data_type_from_arrow(pa.large_list(pa.int32())) == ArrayType(
        element_type="integer",
        contains_null=True,
    )


def test_arrow_type_without_delta_equivalent() -> None:
    """Refuse Arrow types the Delta protocol cannot describe."""
    with pytest.raises(SchemaConversionError):
        data_type_from_arrow(pa.uint32())


def test_envelope_converts_to_arrow(factory: DeltaLogSchemaFactory, table_schema: Schema) -> None:
    """Convert the derived envelope to an Arrow schema."""
    arrow_schema = to_arrow_schema(factory.build(table_schema, ["pcol"]))
    assert arrow_schema.names == ["metaData", "protocol", "txn", "add", "remove"]
    add = arrow_schema.field("add").type
    stats = add.field("stats_parsed").type
    assert stats.field("minValues").type == pa.struct([pa.field("col1", pa.int32())])
    partition_values = add.field("partitionValues_parsed").type
    assert partition_values == pa.struct([pa.field("pcol", pa.int32())])
