"""Shared msgspec policy and helpers."""

from __future__ import annotations

import re
from typing import Any

import msgspec


class StructBaseStrict(
    msgspec.Struct,
    frozen=True,
    kw_only=True,
    omit_defaults=True,
    repr_omit_defaults=True,
    forbid_unknown_fields=True,
):
    """Base struct for strict contracts."""


class StructBaseCompat(
    msgspec.Struct,
    frozen=True,
    kw_only=True,
    repr_omit_defaults=True,
    forbid_unknown_fields=False,
):
    """Base struct for forward-compatible wire payloads.

    Unknown keys are dropped on decode. Defaults are always emitted so the
    encoded form carries every declared key.
    """


_VALIDATION_RE = re.compile(r"^(?P<summary>.*?)(?:\s+-\s+at\s+`(?P<path>[^`]+)`)?$")


# Mapping keys are emitted in insertion order.
JSON_ENCODER = msgspec.json.Encoder(order=None)


def validation_error_payload(exc: msgspec.ValidationError | msgspec.DecodeError) -> dict[str, str]:
    """Normalize a msgspec decode or validation error for diagnostics.

    Parameters
    ----------
    exc
        Error raised by msgspec decoding/conversion.

    Returns
    -------
    dict[str, str]
        Normalized error payload containing type, summary, and optional path.
    """
    message = str(exc).strip()
    match = _VALIDATION_RE.match(message)
    payload: dict[str, str] = {"type": exc.__class__.__name__}
    if match:
        summary = (match.group("summary") or "").strip()
        if summary:
            payload["summary"] = summary
        path = match.group("path")
        if path:
            payload["path"] = path
        return payload
    payload["summary"] = message
    return payload


def dumps_json(obj: object, *, pretty: bool = False) -> bytes:
    """Serialize an object to JSON bytes.

    Parameters
    ----------
    obj
        Object to serialize.
    pretty
        Whether to format with indentation.

    Returns
    -------
    bytes
        JSON payload.
    """
    raw = JSON_ENCODER.encode(obj)
    if not pretty:
        return raw
    return msgspec.json.format(raw, indent=2)


def loads_json[T](buf: bytes | str, *, target_type: type[T] | Any, strict: bool = True) -> T:
    """Deserialize JSON bytes into the requested type.

    Parameters
    ----------
    buf
        JSON payload.
    target_type
        Target type for decoding.
    strict
        Whether to enforce strict decoding.

    Returns
    -------
    T
        Decoded payload.
    """
    decoder = msgspec.json.Decoder(type=target_type, strict=strict)
    return decoder.decode(buf)


def convert[T](obj: object, *, target_type: type[T] | Any, strict: bool = True) -> T:
    """Convert builtin objects into a target type.

    Parameters
    ----------
    obj
        Object to convert, usually the output of ``json.loads``.
    target_type
        Target type for conversion.
    strict
        Whether to enforce strict conversion.

    Returns
    -------
    T
        Converted payload.
    """
    return msgspec.convert(obj, type=target_type, strict=strict)


def to_builtins(obj: object) -> object:
    """Convert an object into builtin JSON-friendly types.

    The result matches decoding the object's JSON encoding, so sequences
    come back as lists.

    Returns
    -------
    object
        Builtin-friendly representation.
    """
    return msgspec.json.decode(JSON_ENCODER.encode(obj))


__all__ = [
    "JSON_ENCODER",
    "StructBaseCompat",
    "StructBaseStrict",
    "convert",
    "dumps_json",
    "loads_json",
    "to_builtins",
    "validation_error_payload",
]
