"""Configuration validation with schema definitions.

Schemas are lists of `ConfigField`. Plugins declare one as `config_schema` and the
daemon checks each section on (re)load: types, choices, custom validators and unknown
keys (with a fuzzy "did you mean" hint).
"""

import difflib
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .config import BOOL_STRINGS

__all__ = [
    "ConfigField",
    "ConfigItems",
    "ConfigValidator",
    "format_config_error",
]


@dataclass
class ConfigField:
    """Describes an expected configuration field.

    Attributes:
        name: The configuration key name
        field_type: Expected type (str, int, bool, list, dict) or tuple of types for union
        default: Default value if not provided
        description: Human-readable description
        choices: List of valid values for enum-like fields
        validator: Custom validator function returning list of error messages
    """

    name: str
    field_type: type | tuple[type, ...] = str
    default: Any = None
    description: str = ""
    choices: list | None = None
    validator: Callable[[Any], list[str]] | None = None

    @property
    def type_name(self) -> str:
        """Return human-readable type name."""
        if isinstance(self.field_type, tuple):
            return " or ".join(typ.__name__ for typ in self.field_type)
        return self.field_type.__name__


class ConfigItems(list):
    """A list of ConfigField items."""

    def __init__(self, *args: ConfigField) -> None:
        super().__init__(args)

    def get(self, name: str) -> ConfigField | None:
        """Get a ConfigField by name."""
        return next((prop for prop in self if prop.name == name), None)


def _find_similar_key(unknown_key: str, known_keys: list[str]) -> str | None:
    """Find a similar key using fuzzy matching."""
    matches = difflib.get_close_matches(unknown_key, known_keys, n=1)
    if matches:
        return matches[0]
    return None


def format_config_error(plugin: str, field: str, message: str, suggestion: str = "") -> str:
    """Format a configuration error message.

    Args:
        plugin: Plugin name
        field: Field name that has the error
        message: Error description
        suggestion: Optional suggestion for fixing the error
    """
    msg = f"[{plugin}] Config error for '{field}': {message}"
    if suggestion:
        msg += f" -> {suggestion}"
    return msg


class ConfigValidator:
    """Validates a configuration section against a schema."""

    def __init__(self, config: dict, plugin_name: str, logger: logging.Logger) -> None:
        self.config = config
        self.plugin_name = plugin_name
        self.log = logger

    def validate(self, schema: ConfigItems) -> list[str]:
        """Validate configuration against schema.

        Returns:
            List of error messages (empty if validation passed)
        """
        errors = []
        for field_def in schema:
            value = self.config.get(field_def.name)
            if value is None:
                continue

            type_error = self._check_type(field_def, value)
            if type_error:
                errors.append(type_error)
                continue

            if field_def.choices is not None and value not in field_def.choices:
                choices_str = ", ".join(repr(c) for c in field_def.choices)
                errors.append(format_config_error(self.plugin_name, field_def.name, f"Invalid value {value!r}", f"Valid options: {choices_str}"))
            if field_def.validator:
                errors.extend(format_config_error(self.plugin_name, field_def.name, error) for error in field_def.validator(value))
        return errors

    def _check_type(self, field_def: ConfigField, value: Any) -> str | None:  # noqa: ANN401
        expected_types = field_def.field_type if isinstance(field_def.field_type, tuple) else (field_def.field_type,)
        if any(self._matches(typ, value) for typ in expected_types):
            return None
        suggestion = "Use true/false (without quotes)" if expected_types == (bool,) else ""
        return format_config_error(self.plugin_name, field_def.name, f"Expected {field_def.type_name}, got {type(value).__name__}", suggestion)

    @staticmethod
    def _matches(expected_type: type, value: Any) -> bool:  # noqa: ANN401
        if expected_type is bool:
            return isinstance(value, bool) or (isinstance(value, str) and value.lower() in BOOL_STRINGS)
        if expected_type in (int, float):
            # bool is a subclass of int
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        return isinstance(value, expected_type)

    def warn_unknown_keys(self, schema: ConfigItems) -> list[str]:
        """Log warnings for unknown configuration keys.

        Returns:
            List of warning messages
        """
        warnings = []
        known_keys = [f.name for f in schema]

        for key in self.config:
            if key in known_keys:
                continue
            similar = _find_similar_key(key, known_keys)
            if similar:
                msg = f"[{self.plugin_name}] Unknown option '{key}' (did you mean '{similar}'?)"
            else:
                msg = f"[{self.plugin_name}] Unknown option '{key}' - will be ignored"
            self.log.warning(msg)
            warnings.append(msg)

        return warnings
