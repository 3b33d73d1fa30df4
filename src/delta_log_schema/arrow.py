"""Conversion between Delta schemas and pyarrow schemas."""

from __future__ import annotations

import re
from collections.abc import Mapping

import pyarrow as pa
import pyarrow.types as patypes

from delta_log_schema.errors import SchemaConversionError
from delta_log_schema.types import (
    ArrayType,
    MapType,
    Schema,
    SchemaDataType,
    SchemaField,
    StructType,
)

ARRAY_ELEMENT_NAME = "element"
MAP_KEY_NAME = "key"
MAP_VALUE_NAME = "value"

_DECIMAL_RE = re.compile(r"^decimal\(\s*(?P<precision>\d+)\s*,\s*(?P<scale>\d+)\s*\)$")

_PRIMITIVE_BUILDERS: dict[str, pa.DataType] = {
    "string": pa.string(),
    "long": pa.int64(),
    "integer": pa.int32(),
    "short": pa.int16(),
    "byte": pa.int8(),
    "float": pa.float32(),
    "double": pa.float64(),
    "boolean": pa.bool_(),
    "binary": pa.binary(),
    "date": pa.date32(),
    "timestamp": pa.timestamp("us", tz="UTC"),
}


def _decode_metadata(metadata: Mapping[bytes, bytes] | None) -> dict[str, str]:
    if not metadata:
        return {}
    return {
        key.decode("utf-8", errors="replace"): value.decode("utf-8", errors="replace")
        for key, value in metadata.items()
    }


def _encode_metadata(metadata: Mapping[str, str]) -> dict[bytes, bytes] | None:
    if not metadata:
        return None
    return {str(key).encode("utf-8"): str(value).encode("utf-8") for key, value in metadata.items()}


def _primitive_to_arrow(name: str) -> pa.DataType:
    builder = _PRIMITIVE_BUILDERS.get(name)
    if builder is not None:
        return builder
    match = _DECIMAL_RE.match(name)
    if match is None:
        msg = f"Unsupported primitive type {name!r}."
        raise SchemaConversionError(msg)
    precision = int(match.group("precision"))
    scale = int(match.group("scale"))
    try:
        return pa.decimal128(precision, scale)
    except (ValueError, pa.ArrowException) as exc:
        msg = f"Invalid decimal type {name!r}: {exc}"
        raise SchemaConversionError(msg) from exc


def to_arrow_type(data_type: SchemaDataType, *, support_maps: bool = True) -> pa.DataType:
    """Return the pyarrow type for a Delta data type.

    Parameters
    ----------
    data_type
        Delta data type to convert.
    support_maps
        Whether map types may be emitted.

    Returns
    -------
    pyarrow.DataType
        Equivalent Arrow type.

    Raises
    ------
    SchemaConversionError
        Raised for unknown primitive names, or for maps when unsupported.
    """
    if isinstance(data_type, str):
        return _primitive_to_arrow(data_type)
    if isinstance(data_type, StructType):
        return pa.struct(
            [to_arrow_field(field, support_maps=support_maps) for field in data_type.fields]
        )
    if isinstance(data_type, ArrayType):
        element = pa.field(
            ARRAY_ELEMENT_NAME,
            to_arrow_type(data_type.element_type, support_maps=support_maps),
            nullable=data_type.contains_null,
        )
        return pa.list_(element)
    if isinstance(data_type, MapType):
        if not support_maps:
            msg = "Map types are not supported by the configured Arrow conversion."
            raise SchemaConversionError(msg)
        key = pa.field(
            MAP_KEY_NAME,
            to_arrow_type(data_type.key_type, support_maps=support_maps),
            nullable=False,
        )
        value = pa.field(
            MAP_VALUE_NAME,
            to_arrow_type(data_type.value_type, support_maps=support_maps),
            nullable=data_type.value_contains_null,
        )
        try:
            return pa.map_(key, value)
        except (TypeError, pa.ArrowException) as exc:
            msg = f"Cannot build Arrow map type: {exc}"
            raise SchemaConversionError(msg) from exc
    msg = f"Unexpected data type {data_type!r}."
    raise SchemaConversionError(msg)


def to_arrow_field(field: SchemaField, *, support_maps: bool = True) -> pa.Field:
    """Return the pyarrow field for a Delta schema field.

    Returns
    -------
    pyarrow.Field
        Arrow field carrying name, type, nullability and metadata.
    """
    return pa.field(
        field.name,
        to_arrow_type(field.data_type, support_maps=support_maps),
        nullable=field.nullable,
        metadata=_encode_metadata(field.metadata),
    )


def to_arrow_schema(schema: Schema, *, support_maps: bool = True) -> pa.Schema:
    """Return the pyarrow schema for a Delta table schema.

    Returns
    -------
    pyarrow.Schema
        Arrow schema with one field per top-level Delta field.
    """
    return pa.schema([to_arrow_field(field, support_maps=support_maps) for field in schema.fields])


def _primitive_from_arrow(dtype: pa.DataType) -> str | None:
    checks = (
        (patypes.is_string, "string"),
        (patypes.is_large_string, "string"),
        (patypes.is_int64, "long"),
        (patypes.is_int32, "integer"),
        (patypes.is_int16, "short"),
        (patypes.is_int8, "byte"),
        (patypes.is_float32, "float"),
        (patypes.is_float64, "double"),
        (patypes.is_boolean, "boolean"),
        (patypes.is_binary, "binary"),
        (patypes.is_large_binary, "binary"),
        (patypes.is_date32, "date"),
        (patypes.is_timestamp, "timestamp"),
    )
    for check, name in checks:
        if check(dtype):
            return name
    if patypes.is_decimal(dtype):
        return f"decimal({dtype.precision},{dtype.scale})"
    return None


def data_type_from_arrow(dtype: pa.DataType) -> SchemaDataType:
    """Return the Delta data type for a pyarrow type.

    Returns
    -------
    SchemaDataType
        Equivalent Delta data type.

    Raises
    ------
    SchemaConversionError
        Raised when the Arrow type has no Delta counterpart.
    """
    primitive = _primitive_from_arrow(dtype)
    if primitive is not None:
        return primitive
    if patypes.is_struct(dtype):
        return StructType(
            fields=tuple(field_from_arrow(dtype.field(index)) for index in range(dtype.num_fields))
        )
    if patypes.is_map(dtype):
        return MapType(
            key_type=data_type_from_arrow(dtype.key_type),
            value_type=data_type_from_arrow(dtype.item_type),
            value_contains_null=dtype.item_field.nullable,
        )
    if patypes.is_list(dtype) or patypes.is_large_list(dtype):
        return ArrayType(
            element_type=data_type_from_arrow(dtype.value_type),
            contains_null=dtype.value_field.nullable,
        )
    msg = f"Arrow type {dtype} has no Delta equivalent."
    raise SchemaConversionError(msg)


def field_from_arrow(field: pa.Field) -> SchemaField:
    """Return the Delta schema field for a pyarrow field.

    Returns
    -------
    SchemaField
        Delta field with decoded metadata.
    """
    return SchemaField(
        name=field.name,
        data_type=data_type_from_arrow(field.type),
        nullable=field.nullable,
        metadata=_decode_metadata(field.metadata),
    )


def schema_from_arrow(schema: pa.Schema) -> Schema:
    """Return the Delta table schema for a pyarrow schema.

    Returns
    -------
    Schema
        Delta table schema.
    """
    return Schema(fields=tuple(field_from_arrow(field) for field in schema))


__all__ = [
    "ARRAY_ELEMENT_NAME",
    "MAP_KEY_NAME",
    "MAP_VALUE_NAME",
    "data_type_from_arrow",
    "field_from_arrow",
    "schema_from_arrow",
    "to_arrow_field",
    "to_arrow_schema",
    "to_arrow_type",
]
