"""Winpick - fuzzy window switcher for Hyprland (cli client & daemon)."""

import asyncio
import os
import signal
import sys
from pathlib import Path

from . import constants as winpick_constants
from .client import run_client
from .logging_setup import get_logger, init_logger
from .manager import Winpick
from .models import ExitCode, WinpickError

__all__ = ["main", "run_daemon", "use_param"]


def use_param(txt: str) -> str:
    """Check if parameter `txt` is in sys.argv.

    If found, removes it from sys.argv & returns the argument value.
    """
    v = ""
    if txt in sys.argv:
        i = sys.argv.index(txt)
        if i + 1 < len(sys.argv):
            v = sys.argv[i + 1]
        del sys.argv[i : i + 2]
    return v


async def run_daemon(config_filename: str | None = None) -> None:
    """Run the server / daemon."""
    manager = Winpick(config_filename)
    signal.signal(signal.SIGTERM, lambda *_: sys.exit(0))

    ipc_folder = Path(winpick_constants.CONTROL).parent
    try:
        ipc_folder.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        manager.log.critical("Cannot create IPC folder %s: %s", ipc_folder, e)
        raise WinpickError from e

    await manager.initialize()

    # Start server after initialization to avoid race conditions with plugin loading
    manager.server = await asyncio.start_unix_server(manager.read_command, winpick_constants.CONTROL)

    manager.log.debug("[ initialized ]".center(80, "="))

    try:
        await manager.run()
    except asyncio.CancelledError:
        manager.log.critical("cancelled")


def main() -> None:
    """Run the command."""
    debug_flag = use_param("--debug")
    if debug_flag:
        init_logger(filename=debug_flag, force_debug=True)
    else:
        init_logger()
    log = get_logger("startup")
    config_override = use_param("--config") or None

    if winpick_constants.HYPRLAND_INSTANCE_SIGNATURE == "NO_INSTANCE":
        log.critical("HYPRLAND_INSTANCE_SIGNATURE is not set, is Hyprland running?")
        sys.exit(ExitCode.ENV_ERROR)

    invoke_daemon = len(sys.argv) <= 1
    if invoke_daemon and os.path.exists(winpick_constants.CONTROL):
        log.critical(
            """%s exists,
is winpick already running ?
If that's not the case, delete this file and run again.""",
            winpick_constants.CONTROL,
        )
        sys.exit(ExitCode.USAGE_ERROR)

    exit_code = ExitCode.SUCCESS
    try:
        if invoke_daemon:
            asyncio.run(run_daemon(config_override))
        else:
            exit_code = asyncio.run(run_client(sys.argv[1:]))
    except KeyboardInterrupt:
        pass
    except WinpickError:
        log.critical("Command failed.")
        exit_code = ExitCode.COMMAND_ERROR
    except Exception:  # pylint: disable=W0718
        log.critical("Unhandled exception:", exc_info=True)
        exit_code = ExitCode.COMMAND_ERROR
    finally:
        if invoke_daemon and os.path.exists(winpick_constants.CONTROL):
            os.unlink(winpick_constants.CONTROL)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
