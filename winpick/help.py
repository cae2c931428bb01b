"""Help for the daemon commands, built from the `run_*` handlers docstrings."""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .manager import Winpick

__all__ = ["get_command_help", "get_commands_help", "get_help"]


def get_commands_help(manager: Winpick) -> dict[str, tuple[str, str]]:
    """Get the available commands and their short documentation.

    Returns:
        Dict mapping command name to (short_description, plugin name) tuple
    """
    result: dict[str, tuple[str, str]] = {}
    for plugin in manager.plugins.values():
        for name, method in inspect.getmembers(plugin, callable):
            if name.startswith("run_"):
                doc = inspect.getdoc(method) or ""
                result[name[4:]] = (doc.split("\n", 1)[0], plugin.name)
    return result


def get_help(manager: Winpick) -> str:
    """Get the help documentation for all commands, grouped by plugin."""
    intro = """Syntax: winpick [command]

If the command is omitted, runs the daemon which will start every configured plugin.

Available commands:
"""
    by_source: dict[str, list[tuple[str, str]]] = {}
    for name, (desc, source) in sorted(get_commands_help(manager).items()):
        by_source.setdefault(source, []).append((name, desc))

    lines: list[str] = []
    # built-in commands first
    for source in sorted(by_source, key=lambda s: (s != "winpick", s)):
        lines.append(f"\n{'built-in' if source == 'winpick' else source}:")
        lines.extend(f"  {name:20s} {desc}" for name, desc in by_source[source])
    return intro + "\n".join(lines) + "\n"


def get_command_help(manager: Winpick, command: str) -> str:
    """Get the full docstring of `command`.

    Raises:
        ValueError: unknown command
    """
    full_name = f"run_{command.replace('-', '_')}"
    for plugin in manager.plugins.values():
        method = getattr(plugin, full_name, None)
        if method is not None:
            return f"{inspect.getdoc(method) or ''}\n\nProvided by: {plugin.name}\n"
    msg = f"Unknown command: {command}"
    raise ValueError(msg)
