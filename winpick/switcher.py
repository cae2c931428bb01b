"""Switch to an application by window class, launching it when needed."""

from collections.abc import Awaitable, Callable
from logging import Logger

from .adapters.backend import EnvironmentBackend
from .models import SessionOutcome, SwitchOutcome
from .selector import SessionGuard
from .window_source import WindowSource

__all__ = ["ClassSwitcher"]

OpenClassSelector = Callable[[str], Awaitable[SessionOutcome]]


class ClassSwitcher:
    """Focus, pick among, or launch the windows of a class."""

    def __init__(
        self,
        windows: WindowSource,
        backend: EnvironmentBackend,
        guard: SessionGuard,
        open_selector: OpenClassSelector,
        log: Logger,
        split_direction: str = "",
    ) -> None:
        """Initialize the switcher.

        Args:
            windows: source of the window snapshots
            backend: compositor used to focus and launch
            guard: the selector session guard
            open_selector: coroutine opening a selector scoped to a class
            log: logger to use
            split_direction: preselected split for the "other window" variants
        """
        self.windows = windows
        self.backend = backend
        self.guard = guard
        self.open_selector = open_selector
        self.log = log
        self.split_direction = split_direction

    async def switch_to_class(self, class_name: str, program: str | None = None, other_window: bool = False) -> SwitchOutcome:
        """Go to a window of `class_name`.

        The first matching rule wins:

        - the focused window is of this class: pick among the class windows
        - some window is of this class: focus the most recently used one
        - else run `program` (defaults to the class name)

        Does nothing while a selector session is active.

        Args:
            class_name: window class, case insensitive
            program: command to run when there is no window
            other_window: show the window (or the new one) next to the current one
        """
        if self.guard.active is not None:
            self.log.info("Selector session in progress, not switching to %s", class_name)
            return SwitchOutcome.IGNORED

        entries = await self.windows.class_entries(class_name)
        if any(entry.is_current for entry in entries):
            if await self.open_selector(class_name) == SessionOutcome.REJECTED:
                return SwitchOutcome.IGNORED
            return SwitchOutcome.SELECTOR

        # a session may have started while the windows were listed
        if self.guard.active is not None:
            self.log.info("Selector session started, not switching to %s", class_name)
            return SwitchOutcome.IGNORED

        if entries:
            target = min(entries, key=lambda entry: entry.last_focus_rank)
            self.log.debug("Focusing %s (%s)", target.title, target.id)
            if other_window:
                await self.backend.bring_window(target.id, self.split_direction)
            else:
                await self.backend.focus_window(target.id)
            return SwitchOutcome.FOCUSED

        command = program or class_name
        self.log.info("No %s window, running %s", class_name, command)
        if other_window and self.split_direction:
            await self.backend.preselect_split(self.split_direction)
        await self.backend.spawn(command)
        return SwitchOutcome.LAUNCHED
