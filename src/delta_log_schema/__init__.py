"""Delta transaction log schema derivation."""

from __future__ import annotations

from delta_log_schema.codec import (
    data_type_from_builtins,
    decode_data_type,
    decode_schema,
    encode_data_type,
    encode_schema,
    schema_from_builtins,
    schema_to_builtins,
)
from delta_log_schema.config import LogSchemaSettings
from delta_log_schema.errors import (
    CheckpointReadError,
    DeltaLogSchemaError,
    ErrorKind,
    SchemaConversionError,
    SchemaParseError,
)
from delta_log_schema.factory import DeltaLogSchemaFactory, build_log_schema
from delta_log_schema.types import (
    ArrayType,
    MapType,
    Schema,
    SchemaDataType,
    SchemaField,
    StructType,
)

__all__ = [
    "ArrayType",
    "CheckpointReadError",
    "DeltaLogSchemaError",
    "DeltaLogSchemaFactory",
    "ErrorKind",
    "LogSchemaSettings",
    "MapType",
    "Schema",
    "SchemaConversionError",
    "SchemaDataType",
    "SchemaField",
    "SchemaParseError",
    "StructType",
    "build_log_schema",
    "data_type_from_builtins",
    "decode_data_type",
    "decode_schema",
    "encode_data_type",
    "encode_schema",
    "schema_from_builtins",
    "schema_to_builtins",
]
