"""Parquet checkpoint reads against the derived log schema."""

from __future__ import annotations

import logging
from collections.abc import Collection, Sequence
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from delta_log_schema.arrow import to_arrow_schema
from delta_log_schema.errors import CheckpointReadError
from delta_log_schema.factory import DeltaLogSchemaFactory
from delta_log_schema.types import Schema

logger = logging.getLogger(__name__)

type PathLike = str | Path

CHECKPOINT_SUFFIX = ".checkpoint.parquet"


def checkpoint_file_name(version: int) -> str:
    """Return the single-part checkpoint file name for a table version.

    Parameters
    ----------
    version
        Non-negative table version.

    Returns
    -------
    str
        File name such as ``00000000000000000010.checkpoint.parquet``.
    """
    if version < 0:
        msg = f"Checkpoint version must be non-negative, got {version}."
        raise ValueError(msg)
    return f"{version:020d}{CHECKPOINT_SUFFIX}"


def checkpoint_arrow_schema(
    table_schema: Schema,
    partition_columns: Collection[str],
    *,
    factory: DeltaLogSchemaFactory | None = None,
) -> pa.Schema:
    """Return the Arrow schema of a checkpoint for a table.

    Returns
    -------
    pyarrow.Schema
        Envelope schema converted for the columnar reader.
    """
    resolved = factory or DeltaLogSchemaFactory()
    log_schema = resolved.build(table_schema, partition_columns)
    return to_arrow_schema(log_schema, support_maps=resolved.settings.arrow_map_support)


def read_checkpoint(
    path: PathLike,
    *,
    table_schema: Schema,
    partition_columns: Collection[str],
    factory: DeltaLogSchemaFactory | None = None,
    columns: Sequence[str] | None = None,
) -> pa.Table:
    """Read a Parquet checkpoint file using the table's log schema.

    Parameters
    ----------
    path
        Checkpoint file location.
    table_schema
        Logical schema of the table the checkpoint belongs to.
    partition_columns
        Partition column names of the table.
    factory
        Optional factory; a default one is used when omitted.
    columns
        Optional subset of top-level action columns to read.

    Returns
    -------
    pyarrow.Table
        Checkpoint rows.

    Raises
    ------
    CheckpointReadError
        Raised when the file cannot be read with the derived schema.
    """
    schema = checkpoint_arrow_schema(table_schema, partition_columns, factory=factory)
    location = str(path)
    logger.debug("Reading checkpoint %s", location)
    try:
        return pq.read_table(
            location,
            schema=schema,
            columns=list(columns) if columns is not None else None,
        )
    except (OSError, pa.ArrowException) as exc:
        logger.warning("Failed to read checkpoint %s: %s", location, exc)
        msg = f"Failed to read checkpoint {location}: {exc}"
        raise CheckpointReadError(msg, path=location) from exc


__all__ = [
    "CHECKPOINT_SUFFIX",
    "checkpoint_arrow_schema",
    "checkpoint_file_name",
    "read_checkpoint",
]
