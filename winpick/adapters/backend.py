"""Window manager backend interface."""

from abc import ABC, abstractmethod
from logging import Logger

from ..constants import DEFAULT_NOTIFICATION_DURATION_MS
from ..models import ClientInfo, MonitorInfo


class EnvironmentBackend(ABC):
    """Abstract base class for window manager backends.

    A backend is bound to the logger of the plugin using it, so operations are
    logged under the caller's name.
    """

    def __init__(self, log: Logger) -> None:
        """Initialize the backend.

        Args:
            log: Logger to use for every operation
        """
        self.log = log

    @abstractmethod
    async def get_clients(self) -> list[ClientInfo]:
        """Return every client known to the window manager."""

    @abstractmethod
    async def get_active_window(self) -> ClientInfo | None:
        """Return the focused client, or None when nothing has the focus."""

    @abstractmethod
    async def get_active_workspace(self) -> str:
        """Return the identifier of the focused workspace."""

    @abstractmethod
    async def get_monitors(self) -> list[MonitorInfo]:
        """Return the list of monitors."""

    @abstractmethod
    async def execute(self, command: str | list[str], *, weak: bool = False) -> bool:
        """Execute a dispatcher command (or a list of commands).

        Args:
            command: The command to execute
            weak: If True, a failure is only a warning

        Returns:
            True if the window manager accepted every command
        """

    @abstractmethod
    async def notify(self, message: str, duration: int, color: str) -> None:
        """Send a notification.

        Args:
            message: The notification message
            duration: Duration in milliseconds
            color: Hex color code
        """

    async def notify_info(self, message: str, duration: int = DEFAULT_NOTIFICATION_DURATION_MS) -> None:
        """Send an info notification (blue)."""
        await self.notify(message, duration, "0000ff")

    async def notify_error(self, message: str, duration: int = DEFAULT_NOTIFICATION_DURATION_MS) -> None:
        """Send an error notification (red)."""
        await self.notify(message, duration, "ff0000")

    # ─── Window Operation Helpers ─────────────────────────────────────────────

    async def focus_window(self, address: str) -> bool:
        """Focus a window by address."""
        return await self.execute(f"focuswindow address:{address}")

    async def close_window(self, address: str) -> bool:
        """Close a window.

        Returns:
            False when the window no longer exists
        """
        return await self.execute(f"closewindow address:{address}", weak=True)

    async def spawn(self, program: str) -> bool:
        """Start `program` without waiting for it.

        The window manager runs the command, launch failures are its business.
        """
        return await self.execute(f"exec {program}")

    async def preselect_split(self, direction: str) -> bool:
        """Choose where the next window opens, relative to the focused one."""
        return await self.execute(f"layoutmsg preselect {direction}", weak=True)

    async def move_window_to_workspace(self, address: str, workspace: str, *, silent: bool = True) -> bool:
        """Move a window to a workspace.

        Args:
            address: Window address
            workspace: Target workspace name or ID
            silent: If True, don't follow the window
        """
        cmd = "movetoworkspacesilent" if silent else "movetoworkspace"
        return await self.execute(f"{cmd} {workspace},address:{address}")

    async def bring_window(self, address: str, split: str = "") -> bool:
        """Show a window next to the focused one, then focus it.

        Args:
            address: Window address
            split: preselected split direction, empty to let the layout decide
        """
        workspace = await self.get_active_workspace()
        if split:
            await self.preselect_split(split)
        if not await self.move_window_to_workspace(address, workspace):
            return False
        return await self.focus_window(address)

    async def send_to_other_monitor(self, address: str) -> bool:
        """Show a window on the next monitor's active workspace and focus it.

        With a single monitor this is a plain focus.
        """
        monitors = sorted(await self.get_monitors(), key=lambda mon: mon["id"])
        focused = next((i for i, mon in enumerate(monitors) if mon.get("focused")), 0)
        if len(monitors) < 2:  # noqa: PLR2004
            return await self.focus_window(address)
        target = monitors[(focused + 1) % len(monitors)]
        if not await self.move_window_to_workspace(address, str(target["activeWorkspace"]["id"])):
            return False
        return await self.focus_window(address)
