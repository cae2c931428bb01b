"""Winpick manager - the core daemon class."""

import asyncio
import contextlib
import importlib
import inspect
from collections.abc import Callable
from pathlib import Path
from typing import Any

from .adapters.hyprland import HyprlandBackend
from .config import ConfigLoader, Configuration
from .constants import ERROR_NOTIFICATION_DURATION_MS, TASK_TIMEOUT
from .logging_setup import HandlerStyles, colorize, get_logger
from .models import ResponsePrefix, WinpickError
from .plugins.interface import Plugin
from .plugins.winpick import WINPICK_CONFIG_SCHEMA
from .state import SharedState

__all__: list[str] = ["Winpick"]

CORE_PLUGIN = "winpick"


class Winpick:
    """Main app object."""

    server: asyncio.Server
    stopped = False
    config: dict[str, Any]
    log_handler: Callable[[Plugin, str, tuple], None]
    _winpick_conf: Configuration

    def __init__(self, config_filename: str | Path | None = None) -> None:
        """Create the daemon.

        Args:
            config_filename: configuration file or folder, the default location if not set
        """
        self.config_filename = config_filename
        self.config = {}
        self.plugins: dict[str, Plugin] = {}
        self.log = get_logger()
        self.state = SharedState()
        self.backend = HyprlandBackend(self.log)
        self.log_handler = self.plain_log_handler

    async def initialize(self) -> None:
        """Initialize the main structures."""
        await self.load_config()

    async def _load_single_plugin(self, name: str, init: bool) -> bool:
        """Load a single plugin, optionally calling `init`.

        Args:
            name: Plugin name, or dotted path of a module providing an `Extension` class
            init: Whether to initialize the plugin
        """
        modname = name if "." in name else f"winpick.plugins.{name}"
        try:
            plug = importlib.import_module(modname).Extension(name)
            plug.state = self.state
            # Each plugin gets its own backend with its own logger
            plug.backend = HyprlandBackend(plug.log)
            if init:
                await plug.init()
            self.plugins[name] = plug
        except ModuleNotFoundError as e:
            self.log.exception("Unable to locate plugin called '%s'", name)
            await self.backend.notify_info(f'Config requires plugin "{name}" but winpick can\'t find it: {e}')
            return False
        except Exception as e:
            await self.backend.notify_info(f"Error loading plugin {name}: {e}")
            self.log.exception("Error loading plugin %s:", name)
            raise WinpickError from e
        return True

    async def _init_plugin(self, name: str) -> None:
        """Configure a single plugin.

        Args:
            name: Plugin name
        """
        plugin = self.plugins[name]
        try:
            await plugin.load_config(self.config)
            validation_errors = plugin.validate_config()
            for error in validation_errors:
                self.log.error(error)
            if validation_errors:
                await self.backend.notify_error(f"Plugin '{name}' has {len(validation_errors)} config error(s). Check logs for details.")
            await asyncio.wait_for(plugin.on_reload(), timeout=TASK_TIMEOUT / 2)
        except TimeoutError:
            plugin.log.info("timed out on reload")
        except Exception as e:
            await self.backend.notify_info(f"Error initializing plugin {name}: {e}")
            self.log.exception("Error initializing plugin %s:", name)
            raise WinpickError from e
        else:
            plugin.log.info("configured")

    async def _load_plugins_config(self, init: bool = True) -> None:
        """Load the plugins mentioned in the config.

        Plugins no longer listed are unloaded. If init is `True`, call the `init()` method on new plugins.

        Args:
            init: Whether to initialize the plugins
        """
        names = [CORE_PLUGIN] + [name for name in self._winpick_conf.get("plugins") or [] if name != CORE_PLUGIN]

        for name in set(self.plugins) - set(names):
            self.log.info("Unloading plugin %s", name)
            await self.plugins.pop(name).exit()

        for name in names:
            if name not in self.plugins and not await self._load_single_plugin(name, init):
                continue
            if name == CORE_PLUGIN:
                self.plugins[name].manager = self  # type: ignore[attr-defined]
            await self._init_plugin(name)

    async def load_config(self, init: bool = True) -> None:
        """Load the configuration (new plugins will be added & config updated).

        Args:
            init: Whether to initialize the new plugins
        """
        self.config = await ConfigLoader(self.log).load(self.config_filename)
        self._winpick_conf = Configuration(self.config.get(CORE_PLUGIN, {}), logger=self.log, schema=WINPICK_CONFIG_SCHEMA)

        await self._load_plugins_config(init=init)

        colored_logs = self._winpick_conf.get_bool("colored_handlers_log")
        self.log_handler = self.colored_log_handler if colored_logs else self.plain_log_handler

    def plain_log_handler(self, plugin: Plugin, name: str, params: tuple[str, ...]) -> None:
        """Log a handler method without color."""
        plugin.log.debug("%s%s", name, params)

    def colored_log_handler(self, plugin: Plugin, name: str, params: tuple[str, ...]) -> None:
        """Log a handler method with color."""
        plugin.log.debug(colorize(f"{name}{params}", *HandlerStyles.COMMAND))

    async def _run_plugin_handler(self, plugin: Plugin, full_name: str, params: tuple[str, ...]) -> tuple[bool, str]:
        """Run a single handler on a plugin.

        Args:
            plugin: The plugin instance
            full_name: The full name of the handler
            params: Parameters to pass to the handler

        Returns:
            A tuple of (success, message).
            On success: message contains handler return value (if string) or empty.
            On failure: message contains error description.
        """
        self.log_handler(plugin, full_name, params)
        try:
            handler = getattr(plugin, full_name)
            if inspect.iscoroutinefunction(handler):
                result = await handler(*params)
            else:
                result = handler(*params)
        except WinpickError:
            # already logged
            error_msg = f"{plugin.name}::{full_name}: Command failed."
            await self.backend.notify_error(f"Winpick error {error_msg}", duration=ERROR_NOTIFICATION_DURATION_MS)
            return (False, error_msg)
        except Exception as e:  # pylint: disable=W0718
            self.log.exception("%s::%s(%s) failed:", plugin.name, full_name, params)
            error_msg = f"{plugin.name}::{full_name}: {e}"
            await self.backend.notify_error(f"Winpick error {error_msg}", duration=ERROR_NOTIFICATION_DURATION_MS)
            return (False, error_msg)

        return_data = result if isinstance(result, str) else ""
        return (True, return_data)

    async def _call_handler(self, full_name: str, *params: str, notify: str = "") -> tuple[bool, bool, str]:
        """Call a command handler with params.

        Args:
            full_name: The full name of the handler
            *params: Parameters to pass to the handler
            notify: Command name, notified to the user if no handler was found

        Returns:
            A tuple of (handled, success, message).
            - handled: True if at least one handler was found
            - success: True if all handlers succeeded (only meaningful when handled=True)
            - message: Error if failed, return data if succeeded
        """
        handled = False
        result_msg = ""
        error_msg = ""
        for plugin in list(self.plugins.values()):
            if not hasattr(plugin, full_name):
                continue
            handled = True
            success, msg = await self._run_plugin_handler(plugin, full_name, params)
            if success:
                if msg and not result_msg:
                    result_msg = msg
            elif not error_msg:
                error_msg = msg
        if notify and not handled:
            error_msg = f'Unknown command "{notify}". Try "help" for available commands.'
            await self.backend.notify_info(error_msg)
        if error_msg:
            return (handled, False, error_msg)
        return (handled, True, result_msg)

    async def exit_plugins(self) -> None:
        """Exit all plugins."""
        await asyncio.wait_for(asyncio.gather(*(p.exit() for p in self.plugins.values())), timeout=TASK_TIMEOUT / 2)

    async def _process_plugin_command(self, data: str) -> str:
        """Process a plugin command and return the response.

        Args:
            data: The command string

        Returns:
            Response string to send to client
        """
        args = data.split(None, 1)
        cmd = args[0].replace("-", "_")
        full_name = f"run_{cmd}"

        handled, success, msg = await self._call_handler(full_name, *args[1:], notify=cmd)
        if not handled:
            self.log.warning("No such command: %s", cmd)
            return f"{ResponsePrefix.ERROR}: {msg}\n"
        if not success:
            return f"{ResponsePrefix.ERROR}: {msg}\n"
        if msg:
            return f"{ResponsePrefix.OK}\n{msg}"
        return f"{ResponsePrefix.OK}\n"

    async def _stop(self) -> None:
        """Exit the plugins and stop the server."""
        await self.exit_plugins()
        self.server.close()

    async def read_command(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        """Receive a socket command.

        Every connection runs in its own task, so a long selector session doesn't block other commands.

        Args:
            reader: The stream reader
            writer: The stream writer
        """
        data = (await reader.readline()).decode()

        if not data.strip():
            self.log.warning("Empty command received")
            writer.write(f"{ResponsePrefix.ERROR}: No command provided\n".encode())
        else:
            response = await self._process_plugin_command(data.strip())
            writer.write(response.encode())

        with contextlib.suppress(BrokenPipeError, ConnectionResetError):
            await writer.drain()
        writer.close()
        if self.stopped:
            await self._stop()

    async def serve(self) -> None:
        """Run the server."""
        async with self.server:
            await self.server.wait_closed()

    async def run(self) -> None:
        """Run the server until the "exit" command."""
        await self.serve()
