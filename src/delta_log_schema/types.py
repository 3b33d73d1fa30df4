"""Delta table schema type algebra.

The wire format is the Delta protocol schema serialization: primitives are
bare JSON strings and nested types are objects discriminated by their
``"type"`` key together with the keys that variant requires.
"""

from __future__ import annotations

import msgspec

from serde_msgspec import StructBaseCompat

PRIMITIVE_TYPE_NAMES: frozenset[str] = frozenset(
    {
        "string",
        "long",
        "integer",
        "short",
        "byte",
        "float",
        "double",
        "boolean",
        "binary",
        "date",
        "timestamp",
    }
)


class SchemaField(StructBaseCompat, frozen=True):
    """Named column of a struct, with nullability and opaque metadata.

    Metadata keys prefixed with ``delta.`` are reserved for the table format
    implementation; this package never interprets them.
    """

    name: str
    data_type: SchemaDataType = msgspec.field(name="type")
    nullable: bool
    metadata: dict[str, str]


class DataTypeBase(StructBaseCompat, frozen=True, tag_field="type"):
    """Base for the object-shaped (non-primitive) data types."""


def _check_unique_names(fields: tuple[SchemaField, ...]) -> None:
    seen: set[str] = set()
    duplicates: list[str] = []
    for field in fields:
        if field.name in seen:
            duplicates.append(field.name)
        seen.add(field.name)
    if duplicates:
        msg = f"Duplicate struct field names: {sorted(set(duplicates))!r}."
        raise ValueError(msg)


class StructType(DataTypeBase, tag="struct", frozen=True):
    """Ordered collection of uniquely named fields."""

    fields: tuple[SchemaField, ...]

    def __post_init__(self) -> None:
        _check_unique_names(self.fields)

    def field_names(self) -> tuple[str, ...]:
        """Return field names in declaration order.

        Returns
        -------
        tuple[str, ...]
            Field names.
        """
        return tuple(field.name for field in self.fields)

    def get_field(self, name: str) -> SchemaField | None:
        """Return the field with the given name, or None.

        Parameters
        ----------
        name
            Case-sensitive field name.

        Returns
        -------
        SchemaField | None
            Matching field when present.
        """
        for field in self.fields:
            if field.name == name:
                return field
        return None


class ArrayType(DataTypeBase, tag="array", frozen=True):
    """Sequence of elements of a single data type."""

    element_type: SchemaDataType = msgspec.field(name="elementType")
    contains_null: bool = msgspec.field(name="containsNull")


class MapType(DataTypeBase, tag="map", frozen=True):
    """Key/value mapping between two data types."""

    key_type: SchemaDataType = msgspec.field(name="keyType")
    value_type: SchemaDataType = msgspec.field(name="valueType")
    value_contains_null: bool = msgspec.field(name="valueContainsNull")


class Schema(StructType, tag="struct", frozen=True):
    """Top-level table schema.

    Serialized exactly like a struct data type; kept as its own type so a
    table root is never confused with a nested struct column.
    """

    @classmethod
    def from_struct(cls, struct: StructType) -> Schema:
        """Return a Schema holding the fields of ``struct``.

        Returns
        -------
        Schema
            Table schema with the same fields.
        """
        return cls(fields=struct.fields)

    def as_struct(self) -> StructType:
        """Return the schema as a nested struct data type.

        Returns
        -------
        StructType
            Struct type with the same fields.
        """
        return StructType(fields=self.fields)


type SchemaDataType = str | StructType | ArrayType | MapType


def is_primitive(data_type: SchemaDataType) -> bool:
    """Return True when the data type is a primitive type name.

    Returns
    -------
    bool
        True for primitive names, including unknown ones.
    """
    return isinstance(data_type, str)


def is_known_primitive(data_type: SchemaDataType) -> bool:
    """Return True for primitive names defined by the protocol.

    ``decimal(p,s)`` names are recognised in addition to the fixed set.

    Returns
    -------
    bool
        True when the primitive name has known semantics.
    """
    if not isinstance(data_type, str):
        return False
    return data_type in PRIMITIVE_TYPE_NAMES or data_type.startswith("decimal(")


def contains_map(data_type: SchemaDataType) -> bool:
    """Return True when a map type appears anywhere in the data type.

    Returns
    -------
    bool
        True when the tree holds at least one map.
    """
    if isinstance(data_type, MapType):
        return True
    if isinstance(data_type, ArrayType):
        return contains_map(data_type.element_type)
    if isinstance(data_type, StructType):
        return any(contains_map(field.data_type) for field in data_type.fields)
    return False


def copy_data_type(data_type: SchemaDataType) -> SchemaDataType:
    """Return a deep copy of a data type with fresh metadata dicts.

    Returns
    -------
    SchemaDataType
        Equal data type sharing no mutable state with the input.
    """
    if isinstance(data_type, StructType):
        return type(data_type)(fields=tuple(copy_field(field) for field in data_type.fields))
    if isinstance(data_type, ArrayType):
        return msgspec.structs.replace(
            data_type,
            element_type=copy_data_type(data_type.element_type),
        )
    if isinstance(data_type, MapType):
        return msgspec.structs.replace(
            data_type,
            key_type=copy_data_type(data_type.key_type),
            value_type=copy_data_type(data_type.value_type),
        )
    return data_type


def copy_field(field: SchemaField) -> SchemaField:
    """Return a deep copy of a field.

    Returns
    -------
    SchemaField
        Equal field sharing no mutable state with the input.
    """
    return msgspec.structs.replace(
        field,
        data_type=copy_data_type(field.data_type),
        metadata=dict(field.metadata),
    )


def nullable_field(name: str, data_type: SchemaDataType) -> SchemaField:
    """Return a nullable field with empty metadata.

    Returns
    -------
    SchemaField
        New field definition.
    """
    return SchemaField(name=name, data_type=data_type, nullable=True, metadata={})


def struct_of(fields: tuple[SchemaField, ...] | list[SchemaField]) -> StructType:
    """Return a struct data type over ``fields``.

    Returns
    -------
    StructType
        Struct data type.
    """
    return StructType(fields=tuple(fields))


__all__ = [
    "PRIMITIVE_TYPE_NAMES",
    "ArrayType",
    "DataTypeBase",
    "MapType",
    "Schema",
    "SchemaDataType",
    "SchemaField",
    "StructType",
    "contains_map",
    "copy_data_type",
    "copy_field",
    "is_known_primitive",
    "is_primitive",
    "nullable_field",
    "struct_of",
]
