"""JSON codec for Delta schema serialization.

Decoding is structural: a JSON string is a primitive name, and an object is
routed by its ``"type"`` value to the struct/array/map variant, whose keys
must then all be present. Unknown object keys are ignored and never
re-emitted.
"""

from __future__ import annotations

from typing import Any

import msgspec

from delta_log_schema.errors import SchemaParseError
from delta_log_schema.types import Schema, SchemaDataType, SchemaField
from serde_msgspec import convert, dumps_json, loads_json, to_builtins, validation_error_payload

_FIELD_LIST = tuple[SchemaField, ...]


def _parse_error(what: str, exc: msgspec.ValidationError | msgspec.DecodeError) -> SchemaParseError:
    detail = validation_error_payload(exc)
    location = f" at {detail['path']}" if "path" in detail else ""
    summary = detail.get("summary", str(exc))
    return SchemaParseError(f"Invalid {what}{location}: {summary}", detail=detail)


def _decode(buf: bytes | str, *, target_type: Any, what: str) -> Any:
    try:
        return loads_json(buf, target_type=target_type)
    except (msgspec.ValidationError, msgspec.DecodeError) as exc:
        raise _parse_error(what, exc) from exc


def _convert(obj: object, *, target_type: Any, what: str) -> Any:
    try:
        return convert(obj, target_type=target_type)
    except (msgspec.ValidationError, msgspec.DecodeError) as exc:
        raise _parse_error(what, exc) from exc


def decode_schema(buf: bytes | str) -> Schema:
    """Decode a table schema from JSON.

    Parameters
    ----------
    buf
        JSON text of the form ``{"type": "struct", "fields": [...]}``.

    Returns
    -------
    Schema
        Decoded table schema.

    Raises
    ------
    SchemaParseError
        Raised when the payload is not valid JSON or matches no variant.
    """
    return _decode(buf, target_type=Schema, what="schema")


def decode_data_type(buf: bytes | str) -> SchemaDataType:
    """Decode a single data type from JSON.

    Returns
    -------
    SchemaDataType
        Primitive name or nested data type.

    Raises
    ------
    SchemaParseError
        Raised when the payload matches no data type variant.
    """
    return _decode(buf, target_type=SchemaDataType, what="data type")


def decode_fields(buf: bytes | str) -> tuple[SchemaField, ...]:
    """Decode a bare JSON array of field definitions.

    Returns
    -------
    tuple[SchemaField, ...]
        Decoded fields in array order.
    """
    return _decode(buf, target_type=_FIELD_LIST, what="field list")


def schema_from_builtins(obj: object) -> Schema:
    """Build a table schema from an already-parsed JSON tree.

    Parameters
    ----------
    obj
        Mapping produced by a JSON parser.

    Returns
    -------
    Schema
        Decoded table schema.
    """
    return _convert(obj, target_type=Schema, what="schema")


def data_type_from_builtins(obj: object) -> SchemaDataType:
    """Build a data type from an already-parsed JSON value.

    Returns
    -------
    SchemaDataType
        Decoded data type.
    """
    return _convert(obj, target_type=SchemaDataType, what="data type")


def encode_schema(schema: Schema, *, pretty: bool = False) -> bytes:
    """Encode a table schema as JSON bytes.

    Returns
    -------
    bytes
        JSON payload in Delta schema serialization format.
    """
    return dumps_json(schema, pretty=pretty)


def encode_data_type(data_type: SchemaDataType) -> bytes:
    """Encode a data type as JSON bytes.

    Returns
    -------
    bytes
        JSON string for primitives, JSON object otherwise.
    """
    return dumps_json(data_type)


def schema_to_builtins(schema: Schema) -> dict[str, Any]:
    """Return the schema as builtin dicts and lists.

    Returns
    -------
    dict[str, Any]
        JSON-compatible representation of the schema.
    """
    return to_builtins(schema)  # type: ignore[return-value]


__all__ = [
    "data_type_from_builtins",
    "decode_data_type",
    "decode_fields",
    "decode_schema",
    "encode_data_type",
    "encode_schema",
    "schema_from_builtins",
    "schema_to_builtins",
]
