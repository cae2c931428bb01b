"""Common plugin interface."""

from typing import Any

from ..adapters.backend import EnvironmentBackend
from ..config import Configuration
from ..logging_setup import get_logger
from ..state import SharedState
from ..validation import ConfigItems, ConfigValidator


class Plugin:
    """Base class for any winpick plugin."""

    config_schema: ConfigItems = ConfigItems()
    " configuration fields, used for defaults and validation "

    backend: EnvironmentBackend
    " compositor access, bound to the plugin's logger "

    state: SharedState
    " state shared with the daemon and the other plugins "

    config: Configuration
    " This plugin configuration section as a `Configuration` object "

    def __init__(self, name: str) -> None:
        """Create a new plugin `name` and the matching logger."""
        self.name = name
        """ the plugin name """
        self.log = get_logger(name)
        """ the logger to use for this plugin """
        self.config = Configuration({}, logger=self.log, schema=self.config_schema)

    # Functions to override

    async def init(self) -> None:
        """Initialize the plugin.

        Note that the `config` attribute isn't ready yet when this is called.
        """

    async def on_reload(self) -> None:
        """Add the code which requires the `config` attribute here.

        This is called on *init* and *reload*
        """

    async def exit(self) -> None:
        """Empty exit function."""

    # Generic implementations

    async def load_config(self, config: dict[str, Any]) -> None:
        """Load the configuration section from the passed `config`."""
        self.config.clear()
        self.config.update(config.get(self.name, {}))

    def validate_config(self) -> list[str]:
        """Check the configuration section against `config_schema`.

        Unknown keys are only warnings, logged here. Returns the errors.
        """
        if not self.config_schema:
            return []
        validator = ConfigValidator(self.config, self.name, self.log)
        validator.warn_unknown_keys(self.config_schema)
        return validator.validate(self.config_schema)
