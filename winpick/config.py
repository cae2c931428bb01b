"""Configuration: typed access to sections and TOML file loading."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

import aiofiles
import aiofiles.os

from .constants import CONFIG_FILE
from .models import WinpickError

if TYPE_CHECKING:
    import logging

    from .validation import ConfigItems

__all__ = ["BOOL_FALSE_STRINGS", "BOOL_STRINGS", "BOOL_TRUE_STRINGS", "ConfigLoader", "Configuration", "coerce_to_bool", "merge"]

ConfigValueType = float | bool | str | list | dict

BOOL_TRUE_STRINGS = frozenset({"true", "yes", "on", "1", "enabled"})
BOOL_FALSE_STRINGS = frozenset({"false", "no", "off", "0", "disabled"})
BOOL_STRINGS = BOOL_TRUE_STRINGS | BOOL_FALSE_STRINGS


def coerce_to_bool(value: ConfigValueType | None, default: bool = False) -> bool:
    """Coerce a value to boolean, handling loose typing.

    Args:
        value: The value to coerce
        default: Default value if value is None

    Behavior:
        - None → default
        - Empty string → False
        - Explicit falsy strings ("false", "no", "off", "0", "disabled") → False
        - Any other non-empty string → True
        - Non-string values → bool(value)
    """
    if value is None:
        return default
    if isinstance(value, str):
        if not value.strip():
            return False
        return value.lower().strip() not in BOOL_FALSE_STRINGS
    return bool(value)


def merge(merged: dict[str, Any], obj2: dict[str, Any]) -> dict[str, Any]:
    """Merge the content of obj2 into merged.

    Dictionaries are merged recursively and lists are concatenated.

    Eg:
        merge({"a": {"b": 1}}, {"a": {"c": 2}}) == {"a": {"b": 1, "c": 2}}
    """
    for key, value in obj2.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merge(merged[key], value)
        elif key in merged and isinstance(merged[key], list) and isinstance(value, list):
            merged[key] += value
        else:
            merged[key] = value
    return merged


class Configuration(dict):
    """Configuration section wrapper providing typed access.

    Optionally accepts a schema to provide default values automatically.
    """

    def __init__(
        self,
        *args: Any,  # noqa: ANN401
        logger: logging.Logger,
        schema: ConfigItems | None = None,
        **kwargs: Any,  # noqa: ANN401
    ):
        """Initialize the configuration object.

        Args:
            *args: Arguments for dict
            logger: Logger instance to use for warnings
            schema: Optional list of ConfigField definitions for automatic defaults
            **kwargs: Keyword arguments for dict
        """
        super().__init__(*args, **kwargs)
        self.log = logger
        self._schema_defaults: dict[str, ConfigValueType] = {}
        if schema:
            self.set_schema(schema)

    def set_schema(self, schema: ConfigItems) -> None:
        """Set or update the schema used for default value lookups."""
        self._schema_defaults = {field.name: field.default for field in schema if field.default is not None}

    def get(self, name: str, default: ConfigValueType | None = None) -> ConfigValueType | None:  # type: ignore[override]
        """Get a value with schema-aware defaults.

        Args:
            name: The configuration key
            default: Fallback if key is missing and not in schema defaults
        """
        if name in self:
            return dict.get(self, name)  # type: ignore[return-value]
        if name in self._schema_defaults:
            return self._schema_defaults[name]
        return default

    def get_bool(self, name: str, default: bool = False) -> bool:
        """Get a boolean value, handling loose typing (see `coerce_to_bool`)."""
        return coerce_to_bool(self.get(name), default)

    def get_int(self, name: str, default: int = 0) -> int:
        """Get an integer value, `default` if missing or invalid."""
        value = self.get(name)
        if value is None:
            return default
        try:
            return int(value)  # type: ignore[arg-type]
        except (ValueError, TypeError):
            self.log.warning("Invalid integer value for %s: %s", name, value)
            return default

    def get_str(self, name: str, default: str = "") -> str:
        """Get a string value."""
        value = self.get(name)
        if value is None:
            return default
        return str(value)

    def get_dict(self, name: str) -> dict[str, Any]:
        """Get a sub-section, an empty dict if missing or invalid."""
        value = self.get(name)
        if isinstance(value, dict):
            return value
        if value is not None:
            self.log.warning("Invalid section value for %s: %s", name, value)
        return {}


class ConfigLoader:
    """Loads and merges configuration files.

    Supports:
    - a single TOML file
    - a directory of .toml files, merged in sorted order
    - `include` directives in the [winpick] section
    """

    def __init__(self, log: logging.Logger) -> None:
        self.log = log

    async def load(self, config_filename: str | Path | None = None) -> dict[str, Any]:
        """Load configuration from file or directory.

        Args:
            config_filename: path to a config file or directory, defaults to `CONFIG_FILE`

        Raises:
            WinpickError: the file has syntax errors
        """
        fname = Path(os.path.expandvars(config_filename)).expanduser() if config_filename else CONFIG_FILE
        config = await self._open_config(fname)
        for extra_config in list(config.get("winpick", {}).get("include", [])):
            merge(config, await self._open_config(Path(os.path.expandvars(extra_config)).expanduser()))
        return config

    async def _open_config(self, fname: Path) -> dict[str, Any]:
        if await aiofiles.os.path.isdir(fname):
            config: dict[str, Any] = {}
            for toml_file in sorted(await aiofiles.os.listdir(fname)):
                if toml_file.endswith(".toml"):
                    merge(config, await self._load_config_file(fname / toml_file))
            return config
        return await self._load_config_file(fname)

    async def _load_config_file(self, fname: Path) -> dict[str, Any]:
        if not await aiofiles.os.path.exists(fname):
            self.log.info("%s not found, using default settings", fname)
            return {}
        self.log.info("Loading %s", fname)
        async with aiofiles.open(fname, "rb") as f:
            raw = await f.read()
        try:
            return tomllib.loads(raw.decode("utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            self.log.critical("Problem reading %s: %s", fname, e)
            raise WinpickError from e
