"""Checkpoint action templates.

REF: https://github.com/delta-io/delta/blob/master/PROTOCOL.md#checkpoint-schema
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import cache
from types import MappingProxyType

import msgspec

from delta_log_schema.codec import decode_fields
from delta_log_schema.types import SchemaField, StructType, contains_map

logger = logging.getLogger(__name__)

METADATA_ACTION = "metaData"
PROTOCOL_ACTION = "protocol"
TXN_ACTION = "txn"
ADD_ACTION = "add"
REMOVE_ACTION = "remove"

ACTION_NAMES: tuple[str, ...] = (
    METADATA_ACTION,
    PROTOCOL_ACTION,
    TXN_ACTION,
    ADD_ACTION,
    REMOVE_ACTION,
)

type ActionTemplates = Mapping[str, tuple[SchemaField, ...]]

# Map-typed fields below are pruned unless include_map_fields is set.
_ACTION_TEMPLATES_JSON = b"""
{
  "metaData": [
    {"name": "id", "type": "string", "nullable": true, "metadata": {}},
    {"name": "name", "type": "string", "nullable": true, "metadata": {}},
    {"name": "description", "type": "string", "nullable": true, "metadata": {}},
    {"name": "schemaString", "type": "string", "nullable": true, "metadata": {}},
    {"name": "createdTime", "type": "long", "nullable": true, "metadata": {}},
    {
      "name": "partitionColumns",
      "type": {"type": "array", "elementType": "string", "containsNull": true},
      "nullable": true,
      "metadata": {}
    },
    {
      "name": "format",
      "type": {
        "type": "struct",
        "fields": [
          {"name": "provider", "type": "string", "nullable": true, "metadata": {}},
          {
            "name": "options",
            "type": {
              "type": "map",
              "keyType": "string",
              "valueType": "string",
              "valueContainsNull": true
            },
            "nullable": true,
            "metadata": {}
          }
        ]
      },
      "nullable": true,
      "metadata": {}
    },
    {
      "name": "configuration",
      "type": {
        "type": "map",
        "keyType": "string",
        "valueType": "string",
        "valueContainsNull": true
      },
      "nullable": true,
      "metadata": {}
    }
  ],
  "protocol": [
    {"name": "minReaderVersion", "type": "integer", "nullable": true, "metadata": {}},
    {"name": "minWriterVersion", "type": "integer", "nullable": true, "metadata": {}}
  ],
  "txn": [
    {"name": "appId", "type": "string", "nullable": true, "metadata": {}},
    {"name": "version", "type": "long", "nullable": true, "metadata": {}}
  ],
  "add": [
    {"name": "path", "type": "string", "nullable": true, "metadata": {}},
    {"name": "size", "type": "long", "nullable": true, "metadata": {}},
    {"name": "modificationTime", "type": "long", "nullable": true, "metadata": {}},
    {"name": "dataChange", "type": "boolean", "nullable": true, "metadata": {}},
    {"name": "stats", "type": "string", "nullable": true, "metadata": {}},
    {
      "name": "partitionValues",
      "type": {
        "type": "map",
        "keyType": "string",
        "valueType": "string",
        "valueContainsNull": true
      },
      "nullable": true,
      "metadata": {}
    }
  ],
  "remove": [
    {"name": "path", "type": "string", "nullable": true, "metadata": {}},
    {"name": "size", "type": "long", "nullable": true, "metadata": {}},
    {"name": "modificationTime", "type": "long", "nullable": true, "metadata": {}},
    {"name": "dataChange", "type": "boolean", "nullable": true, "metadata": {}},
    {"name": "stats", "type": "string", "nullable": true, "metadata": {}},
    {
      "name": "partitionValues",
      "type": {
        "type": "map",
        "keyType": "string",
        "valueType": "string",
        "valueContainsNull": true
      },
      "nullable": true,
      "metadata": {}
    }
  ]
}
"""


def _prune_map_fields(fields: tuple[SchemaField, ...]) -> tuple[SchemaField, ...]:
    pruned: list[SchemaField] = []
    for field in fields:
        data_type = field.data_type
        if isinstance(data_type, StructType):
            nested = StructType(fields=_prune_map_fields(data_type.fields))
            pruned.append(msgspec.structs.replace(field, data_type=nested))
            continue
        if contains_map(data_type):
            continue
        pruned.append(field)
    return tuple(pruned)


def _split_actions(raw: Mapping[str, msgspec.Raw]) -> dict[str, tuple[SchemaField, ...]]:
    missing = [name for name in ACTION_NAMES if name not in raw]
    if missing:
        msg = f"Action template document is missing actions: {missing!r}."
        raise ValueError(msg)
    return {name: decode_fields(bytes(raw[name])) for name in ACTION_NAMES}


def action_templates(*, include_map_fields: bool = False) -> ActionTemplates:
    """Return the parsed field lists for the five checkpoint actions.

    The embedded document is parsed once per flag value; the result is
    read-only and safe to share between threads.

    Parameters
    ----------
    include_map_fields
        Keep the map-typed fields declared by the protocol.

    Returns
    -------
    ActionTemplates
        Read-only mapping of action name to field list, in action order.
    """
    return _parse_action_templates(include_map_fields)


@cache
def _parse_action_templates(include_map_fields: bool) -> ActionTemplates:
    raw = msgspec.json.decode(_ACTION_TEMPLATES_JSON, type=dict[str, msgspec.Raw])
    templates = _split_actions(raw)
    if not include_map_fields:
        templates = {name: _prune_map_fields(fields) for name, fields in templates.items()}
    logger.debug(
        "Parsed checkpoint action templates (map fields %s): %s",
        "kept" if include_map_fields else "pruned",
        {name: len(fields) for name, fields in templates.items()},
    )
    return MappingProxyType(templates)


__all__ = [
    "ACTION_NAMES",
    "ADD_ACTION",
    "METADATA_ACTION",
    "PROTOCOL_ACTION",
    "REMOVE_ACTION",
    "TXN_ACTION",
    "ActionTemplates",
    "action_templates",
]
