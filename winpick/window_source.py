"""Snapshots of the windows managed by the compositor."""

from collections.abc import Callable

from .adapters.backend import EnvironmentBackend
from .models import ClientInfo, WindowEntry

__all__ = ["WindowSource", "is_managed", "order_current_last"]

EntryPredicate = Callable[[WindowEntry], bool]


def is_managed(client: ClientInfo) -> bool:
    """Tell if the client is a real, visible application window."""
    return bool(client.get("mapped")) and not client.get("hidden") and client.get("monitor", -1) != -1


def order_current_last(entries: list[WindowEntry]) -> list[WindowEntry]:
    """Move the focused entry to the end, keeping the others in order.

    Single entry lists are returned as is.
    """
    if len(entries) < 2:  # noqa: PLR2004
        return entries
    current = [entry for entry in entries if entry.is_current]
    return [entry for entry in entries if not entry.is_current] + current


class WindowSource:
    """Lists the managed windows.

    Each call works on one point-in-time `clients` answer, windows created or
    destroyed meanwhile show up in the next call only.
    """

    def __init__(self, backend: EnvironmentBackend, current_last: bool = True) -> None:
        self.backend = backend
        self.current_last = current_last

    async def list_entries(self, predicate: EntryPredicate | None = None) -> list[WindowEntry]:
        """Return the managed windows, in compositor order.

        Args:
            predicate: keep only the entries for which it returns True
        """
        active = await self.backend.get_active_window()
        active_address = active["address"] if active else ""
        entries = [WindowEntry.from_client(client, active_address) for client in await self.backend.get_clients() if is_managed(client)]
        if predicate:
            entries = [entry for entry in entries if predicate(entry)]
        if self.current_last:
            entries = order_current_last(entries)
        return entries

    async def class_entries(self, class_name: str) -> list[WindowEntry]:
        """Return the windows of the given class, compared case-insensitively."""
        wanted = class_name.casefold()
        return await self.list_entries(lambda entry: entry.class_name.casefold() == wanted)
