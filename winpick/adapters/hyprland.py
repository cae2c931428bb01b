"""Hyprland adapter."""

from typing import cast

from ..constants import DEFAULT_NOTIFICATION_DURATION_MS
from ..ipc import hyprctl, hyprctl_json, notify
from ..models import ClientInfo, MonitorInfo
from .backend import EnvironmentBackend


class HyprlandBackend(EnvironmentBackend):
    """Hyprland backend implementation."""

    async def get_clients(self) -> list[ClientInfo]:
        """Return every client known to Hyprland."""
        return cast("list[ClientInfo]", await hyprctl_json("clients", logger=self.log))

    async def get_active_window(self) -> ClientInfo | None:
        """Return the focused client, or None.

        Hyprland answers `{}` when no window has the focus.
        """
        client = cast("ClientInfo", await hyprctl_json("activewindow", logger=self.log))
        return client if client and client.get("address") else None

    async def get_active_workspace(self) -> str:
        """Return the focused workspace ID."""
        workspace = cast("dict", await hyprctl_json("activeworkspace", logger=self.log))
        return str(workspace["id"])

    async def get_monitors(self) -> list[MonitorInfo]:
        """Return the list of monitors."""
        return cast("list[MonitorInfo]", await hyprctl_json("monitors", logger=self.log))

    async def execute(self, command: str | list[str], *, weak: bool = False) -> bool:
        """Run dispatcher command(s), batched when given a list."""
        return await hyprctl(command, logger=self.log, weak=weak)

    async def notify(self, message: str, duration: int = DEFAULT_NOTIFICATION_DURATION_MS, color: str = "ff1010") -> None:
        """Show a Hyprland notification."""
        await notify(message, duration, color, logger=self.log)
