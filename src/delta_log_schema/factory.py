"""Delta log (checkpoint) schema factory."""

from __future__ import annotations

from collections.abc import Collection
from functools import cache

from delta_log_schema.config import LogSchemaSettings
from delta_log_schema.templates import ADD_ACTION, ActionTemplates, action_templates
from delta_log_schema.types import Schema, SchemaField, copy_field, nullable_field, struct_of

PARTITION_VALUES_PARSED = "partitionValues_parsed"
STATS_PARSED = "stats_parsed"
MIN_VALUES = "minValues"
MAX_VALUES = "maxValues"
NULL_COUNTS = "nullCounts"

STATS_FIELD_NAMES: tuple[str, ...] = (MIN_VALUES, MAX_VALUES, NULL_COUNTS)


def split_partition_fields(
    table_schema: Schema,
    partition_columns: Collection[str],
) -> tuple[tuple[SchemaField, ...], tuple[SchemaField, ...]]:
    """Split table fields into partition and data fields.

    Names are matched case-sensitively. Partition names absent from the table
    are ignored.

    Parameters
    ----------
    table_schema
        Table schema to split.
    partition_columns
        Names of the partition columns.

    Returns
    -------
    tuple[tuple[SchemaField, ...], tuple[SchemaField, ...]]
        Partition fields and non-partition fields, each in table order.
    """
    names = frozenset(partition_columns)
    partition_fields = tuple(field for field in table_schema.fields if field.name in names)
    data_fields = tuple(field for field in table_schema.fields if field.name not in names)
    return partition_fields, data_fields


def _copy_fields(fields: tuple[SchemaField, ...]) -> tuple[SchemaField, ...]:
    return tuple(copy_field(field) for field in fields)


def _stats_parsed_field(data_fields: tuple[SchemaField, ...]) -> SchemaField:
    stats = struct_of(
        [nullable_field(name, struct_of(_copy_fields(data_fields))) for name in STATS_FIELD_NAMES]
    )
    return nullable_field(STATS_PARSED, stats)


class DeltaLogSchemaFactory:
    """Create checkpoint schemas for specific Delta tables.

    The factory only holds the read-only action templates, so one instance can
    serve any number of threads.
    """

    def __init__(self, settings: LogSchemaSettings | None = None) -> None:
        self._settings = settings or LogSchemaSettings()
        self._templates = action_templates(include_map_fields=self._settings.include_map_fields)

    @property
    def settings(self) -> LogSchemaSettings:
        """Return the settings this factory was built with."""
        return self._settings

    @property
    def templates(self) -> ActionTemplates:
        """Return the action templates backing this factory."""
        return self._templates

    def add_fields(
        self,
        table_schema: Schema,
        partition_columns: Collection[str],
    ) -> tuple[SchemaField, ...]:
        """Return the ``add`` action fields augmented for a table.

        Parameters
        ----------
        table_schema
            Table schema providing partition and statistics columns.
        partition_columns
            Names of the partition columns.

        Returns
        -------
        tuple[SchemaField, ...]
            Template fields, then ``partitionValues_parsed`` when the table
            has partition columns, then ``stats_parsed`` when it has data
            columns.
        """
        partition_fields, data_fields = split_partition_fields(table_schema, partition_columns)
        fields = list(_copy_fields(self._templates[ADD_ACTION]))
        if partition_fields:
            parsed = struct_of(_copy_fields(partition_fields))
            fields.append(nullable_field(PARTITION_VALUES_PARSED, parsed))
        if data_fields:
            fields.append(_stats_parsed_field(data_fields))
        return tuple(fields)

    def build(self, table_schema: Schema, partition_columns: Collection[str]) -> Schema:
        """Return the checkpoint schema for a table.

        The result owns copies of every field, so mutating its metadata never
        reaches the templates, the table schema, or later builds.

        Parameters
        ----------
        table_schema
            Logical schema of the table.
        partition_columns
            Names of the table's partition columns.

        Returns
        -------
        Schema
            Envelope schema with one nullable struct per checkpoint action.
        """
        envelope: list[SchemaField] = []
        for action, template_fields in self._templates.items():
            if action == ADD_ACTION:
                action_fields = self.add_fields(table_schema, partition_columns)
            else:
                action_fields = _copy_fields(template_fields)
            envelope.append(nullable_field(action, struct_of(action_fields)))
        return Schema(fields=tuple(envelope))

    delta_log_schema_for_table = build


@cache
def _default_factory(settings: LogSchemaSettings) -> DeltaLogSchemaFactory:
    return DeltaLogSchemaFactory(settings)


def build_log_schema(
    table_schema: Schema,
    partition_columns: Collection[str],
    *,
    settings: LogSchemaSettings | None = None,
) -> Schema:
    """Return the checkpoint schema for a table using a shared factory.

    Returns
    -------
    Schema
        Envelope schema for the table.
    """
    return _default_factory(settings or LogSchemaSettings()).build(table_schema, partition_columns)


__all__ = [
    "MAX_VALUES",
    "MIN_VALUES",
    "NULL_COUNTS",
    "PARTITION_VALUES_PARSED",
    "STATS_FIELD_NAMES",
    "STATS_PARSED",
    "DeltaLogSchemaFactory",
    "build_log_schema",
    "split_partition_fields",
]
