"""Client-side functions for the winpick CLI."""

import asyncio
import shlex
import sys

from . import constants as winpick_constants
from .adapters.hyprland import HyprlandBackend
from .logging_setup import get_logger
from .models import ExitCode, ResponsePrefix

__all__ = ["parse_response", "run_client"]


def parse_response(return_value: str) -> tuple[ExitCode, str]:
    """Split a daemon answer into the exit code and the text to print."""
    if return_value.startswith(f"{ResponsePrefix.ERROR}:"):
        return (ExitCode.COMMAND_ERROR, return_value[len(ResponsePrefix.ERROR) + 2 :].strip())
    if return_value.startswith(f"{ResponsePrefix.OK}"):
        return (ExitCode.SUCCESS, return_value[len(ResponsePrefix.OK) :].strip())
    return (ExitCode.SUCCESS, return_value.rstrip())


async def run_client(args: list[str]) -> ExitCode:
    """Send the command in `args` to the daemon and print the answer."""
    log = get_logger("client")
    if args[0] in {"--help", "-h"}:
        args[0] = "help"
    args[0] = args[0].replace("-", "_")

    try:
        reader, writer = await asyncio.open_unix_connection(winpick_constants.CONTROL)
    except (ConnectionRefusedError, FileNotFoundError):
        log.critical(
            "Cannot connect to winpick daemon at %s.\nIs the daemon running? Start it with: winpick (no arguments)",
            winpick_constants.CONTROL,
        )
        await HyprlandBackend(log).notify_error("Winpick can't connect. Is daemon running?")
        return ExitCode.CONNECTION_ERROR

    writer.write((shlex.join(args) + "\n").encode())
    writer.write_eof()
    await writer.drain()
    return_value = (await reader.read()).decode("utf-8")
    writer.close()
    await writer.wait_closed()

    code, text = parse_response(return_value)
    if code == ExitCode.COMMAND_ERROR:
        print(f"Error: {text}", file=sys.stderr)
    elif text:
        print(text)
    return code
