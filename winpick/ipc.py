"""Interact with hyprland using sockets."""

__all__ = [
    "hyprctl",
    "hyprctl_connection",
    "hyprctl_json",
    "notify",
    "retry_on_reset",
]

import asyncio
import contextlib
import functools
import json
from collections.abc import AsyncIterator, Callable
from logging import Logger
from typing import Any

from .constants import DEFAULT_NOTIFICATION_DURATION_MS, IPC_FOLDER, IPC_MAX_RETRIES, IPC_RETRY_DELAY_MULTIPLIER
from .models import JSONResponse, WinpickError

HYPRCTL = f"{IPC_FOLDER}/.socket.sock"


def retry_on_reset(func: Callable) -> Callable:
    """Retry the wrapped IPC call when the connection gets reset."""

    @functools.wraps(func)
    async def wrapper(*args: Any, logger: Logger, **kwargs: Any) -> Any:  # noqa: ANN401
        exc = None
        for count in range(IPC_MAX_RETRIES):
            try:
                return await func(*args, logger=logger, **kwargs)
            except ConnectionResetError as e:  # noqa: PERF203
                exc = e
                logger.warning("ipc connection problem, retrying...")
                await asyncio.sleep(IPC_RETRY_DELAY_MULTIPLIER * count)
        logger.error("ipc connection failed.")
        raise ConnectionResetError from exc

    return wrapper


@contextlib.asynccontextmanager
async def hyprctl_connection(logger: Logger) -> AsyncIterator[tuple[asyncio.StreamReader, asyncio.StreamWriter]]:
    """Open a connection to the hyprctl socket, closed on exit."""
    try:
        reader, writer = await asyncio.open_unix_connection(HYPRCTL)
    except FileNotFoundError as e:
        logger.critical("hyprctl socket not found! is it running ?")
        raise WinpickError from e
    try:
        yield reader, writer
    finally:
        writer.close()
        await writer.wait_closed()


async def _get_response(command: bytes, logger: Logger) -> JSONResponse:
    """Get the JSON response of `command` from the IPC socket."""
    async with hyprctl_connection(logger) as (reader, writer):
        writer.write(command)
        await writer.drain()
        reader_data = await reader.read()
    return json.loads(reader_data.decode("utf-8", errors="replace"))  # type: ignore[no-any-return]


@retry_on_reset
async def hyprctl_json(command: str, *, logger: Logger) -> JSONResponse:
    """Run an IPC command and return the JSON output."""
    logger.debug(command)
    return await _get_response(f"-j/{command}".encode(), logger)


@retry_on_reset
async def hyprctl(command: str | list[str], base_command: str = "dispatch", *, logger: Logger, weak: bool = False) -> bool:
    """Run an IPC command. Returns success value.

    Args:
        command: single command (str) or list of commands to send to Hyprland
        base_command: type of command to send
        logger: logger to use in case of error
        weak: if True, only log a warning on failure

    Returns:
        True on success
    """
    if not command:
        logger.warning("%s triggered without a command!", base_command)
        return False
    logger.debug("%s %s", base_command, command)

    async with hyprctl_connection(logger) as (ctl_reader, ctl_writer):
        if isinstance(command, list):
            nb_cmds = len(command)
            ctl_writer.write(f"[[BATCH]] {' ; '.join(f'{base_command} {cmd}' for cmd in command)}".encode())
        else:
            nb_cmds = 1
            ctl_writer.write(f"/{base_command} {command}".encode())
        await ctl_writer.drain()
        resp = await ctl_reader.read(100)

    # remove "\n" from the response
    resp = b"".join(resp.split(b"\n"))
    r: bool = resp == b"ok" * nb_cmds
    if not r:
        if weak:
            logger.warning("FAILED %s", resp)
        else:
            logger.error("FAILED %s", resp)
    return r


async def notify(text: str, duration: int = DEFAULT_NOTIFICATION_DURATION_MS, color: str = "ff1010", icon: int = -1, *, logger: Logger) -> bool:
    """Hyprland notification system.

    Args:
        text: message to display
        duration: display time in milliseconds
        color: hex color, without the leading "#"
        icon: Hyprland icon number (-1 = none, 0 = warning, 1 = info, 3 = error)
        logger: logger to use in case of error
    """
    return await hyprctl(f"{icon} {duration} rgb({color})  {text}", "notify", logger=logger, weak=True)

