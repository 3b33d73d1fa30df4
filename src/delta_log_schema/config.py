"""Settings for log schema derivation."""

from __future__ import annotations

import logging
import os

import msgspec

from serde_msgspec import StructBaseStrict

logger = logging.getLogger(__name__)

INCLUDE_MAP_FIELDS_ENV = "DELTA_LOG_SCHEMA_INCLUDE_MAP_FIELDS"
ARROW_MAP_SUPPORT_ENV = "DELTA_LOG_SCHEMA_ARROW_MAP_SUPPORT"

_ENV_TRUE_VALUES = frozenset({"1", "true", "yes", "y"})
_ENV_FALSE_VALUES = frozenset({"0", "false", "no", "n"})


class LogSchemaSettings(StructBaseStrict, frozen=True):
    """Knobs for the envelope template and its downstream conversion.

    Parameters
    ----------
    include_map_fields:
        Keep the ``map<string,string>`` action fields (``configuration``,
        ``format.options`` and ``partitionValues``) in the templates.
    arrow_map_support:
        Whether the downstream Arrow conversion may emit map types.
    """

    include_map_fields: bool = False
    arrow_map_support: bool = True

    @classmethod
    def from_env(cls) -> LogSchemaSettings:
        """Return settings with environment overrides applied.

        Returns
        -------
        LogSchemaSettings
            Settings resolved from ``DELTA_LOG_SCHEMA_*`` variables.
        """
        defaults = cls()
        patch = {
            "include_map_fields": _env_patch_bool(INCLUDE_MAP_FIELDS_ENV),
            "arrow_map_support": _env_patch_bool(ARROW_MAP_SUPPORT_ENV),
        }
        overrides = {key: value for key, value in patch.items() if value is not msgspec.UNSET}
        if not overrides:
            return defaults
        return msgspec.structs.replace(defaults, **overrides)


def _env_patch_bool(name: str) -> bool | msgspec.UnsetType:
    raw = os.environ.get(name)
    if raw is None:
        return msgspec.UNSET
    value = raw.strip().lower()
    if not value or value in {"none", "null"}:
        return msgspec.UNSET
    if value in _ENV_TRUE_VALUES:
        return True
    if value in _ENV_FALSE_VALUES:
        return False
    logger.warning("Ignoring invalid boolean %s=%r", name, raw)
    return msgspec.UNSET


__all__ = ["ARROW_MAP_SUPPORT_ENV", "INCLUDE_MAP_FIELDS_ENV", "LogSchemaSettings"]
