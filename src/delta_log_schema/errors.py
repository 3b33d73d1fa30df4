"""Error types for Delta log schema derivation."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class ErrorKind(StrEnum):
    """Categorize log schema errors by the boundary that failed."""

    PARSE = "parse"
    CONVERSION = "conversion"
    CHECKPOINT = "checkpoint"


class DeltaLogSchemaError(Exception):
    """Base exception for Delta log schema failures."""

    kind: ErrorKind

    def __init__(self, message: str, *, kind: ErrorKind) -> None:
        super().__init__(message)
        self.kind = kind

    @property
    def cause(self) -> BaseException | None:
        """Return the underlying error this failure was raised from."""
        return self.__cause__


class SchemaParseError(DeltaLogSchemaError, ValueError):
    """Raised when schema JSON is malformed or matches no data type variant."""

    def __init__(self, message: str, *, detail: Mapping[str, str] | None = None) -> None:
        super().__init__(message, kind=ErrorKind.PARSE)
        self.detail: dict[str, str] = dict(detail or {})

    @property
    def path(self) -> str | None:
        """Return the JSON path of the offending value when known."""
        return self.detail.get("path")


class SchemaConversionError(DeltaLogSchemaError, TypeError):
    """Raised when a schema cannot be mapped to or from a columnar type."""

    def __init__(self, message: str) -> None:
        super().__init__(message, kind=ErrorKind.CONVERSION)


class CheckpointReadError(DeltaLogSchemaError, RuntimeError):
    """Raised when reading a Parquet checkpoint fails."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message, kind=ErrorKind.CHECKPOINT)
        self.path = path


__all__ = [
    "CheckpointReadError",
    "DeltaLogSchemaError",
    "ErrorKind",
    "SchemaConversionError",
    "SchemaParseError",
]
