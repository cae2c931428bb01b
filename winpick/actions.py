"""Actions available on selected windows."""

from .adapters.backend import EnvironmentBackend
from .models import WindowEntry
from .selector import Action

__all__ = ["WindowActions"]


class WindowActions:
    """Window actions, bound to a backend.

    Every handler returns the entries the compositor accepted the command for.
    """

    action_names = ("switch", "switch_other_window", "switch_other_frame", "kill")

    def __init__(self, backend: EnvironmentBackend, split_direction: str = "") -> None:
        self.backend = backend
        self.split_direction = split_direction

    async def switch(self, entries: list[WindowEntry]) -> list[WindowEntry]:
        """Focus the window."""
        entry = entries[0]
        return [entry] if await self.backend.focus_window(entry.id) else []

    async def switch_other_window(self, entries: list[WindowEntry]) -> list[WindowEntry]:
        """Bring the window next to the focused one."""
        entry = entries[0]
        return [entry] if await self.backend.bring_window(entry.id, self.split_direction) else []

    async def switch_other_frame(self, entries: list[WindowEntry]) -> list[WindowEntry]:
        """Show the window on the next monitor."""
        entry = entries[0]
        return [entry] if await self.backend.send_to_other_monitor(entry.id) else []

    async def kill(self, entries: list[WindowEntry]) -> list[WindowEntry]:
        """Close the windows, windows which vanished meanwhile are not counted."""
        return [entry for entry in entries if await self.backend.close_window(entry.id)]

    def as_dict(self) -> dict[str, Action]:
        """Return the actions, indexed by identifier."""
        actions = [
            Action("switch", self.switch, description="Focus the window"),
            Action("switch_other_window", self.switch_other_window, description="Show the window next to the current one"),
            Action("switch_other_frame", self.switch_other_frame, description="Show the window on the next monitor"),
            Action("kill", self.kill, persistent=True, multi=True, removes=True, description="Close the windows"),
        ]
        return {action.name: action for action in actions}
