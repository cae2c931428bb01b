"""Not a real plugin: provides the built-in commands of the daemon."""

import json
from typing import TYPE_CHECKING

from ..help import get_command_help, get_help
from ..validation import ConfigField, ConfigItems
from ..version import VERSION
from .interface import Plugin

if TYPE_CHECKING:
    from ..manager import Winpick

WINPICK_CONFIG_SCHEMA = ConfigItems(
    ConfigField("plugins", list, default=["windows"], description="List of plugins to load"),
    ConfigField("include", list, default=[], description="Additional config files or folders to include"),
    ConfigField("colored_handlers_log", bool, default=True, description="Enable colored log output for command handlers (debugging)"),
)


class Extension(Plugin):
    """Internal built-in plugin implementing the daemon commands."""

    config_schema = WINPICK_CONFIG_SCHEMA
    manager: "Winpick"  # Set by manager during init

    def run_version(self) -> str:
        """Show the winpick version."""
        return f"{VERSION}\n"

    def run_dumpjson(self) -> str:
        """Dump the configuration in JSON format (after includes are processed)."""
        return json.dumps(self.manager.config, indent=2)

    def run_help(self, command: str = "") -> str:
        """[command] Show available commands or detailed help.

        Usage:
          winpick help           List all commands
          winpick help <command> Show detailed help
        """
        return get_command_help(self.manager, command.strip()) if command.strip() else get_help(self.manager)

    async def run_reload(self) -> None:
        """Reload the configuration file.

        New plugins will be loaded and configuration options will be updated.
        """
        await self.manager.load_config()

    def run_exit(self) -> None:
        """Terminate the winpick daemon."""
        self.manager.stopped = True
