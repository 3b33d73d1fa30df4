"""Shared fixtures for log schema tests."""

from __future__ import annotations

import pytest

from delta_log_schema import DeltaLogSchemaFactory, Schema, decode_schema

SCENARIO_TABLE_SCHEMA_JSON = """
{
  "type": "struct",
  "fields": [
    {"name": "pcol", "type": "integer", "nullable": true, "metadata": {}},
    {"name": "col1", "type": "integer", "nullable": true, "metadata": {}}
  ]
}
"""


@pytest.fixture
def table_schema() -> Schema:
    """Return the two-column integer table schema.

    Returns
    -------
    Schema
        Schema with ``pcol`` and ``col1`` integer columns.
    """
    return decode_schema(SCENARIO_TABLE_SCHEMA_JSON)


@pytest.fixture(scope="session")
def factory() -> DeltaLogSchemaFactory:
    """Return a factory with default settings.

    Returns
    -------
    DeltaLogSchemaFactory
        Shared default factory.
    """
    return DeltaLogSchemaFactory()
