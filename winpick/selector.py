"""Interactive window selector.

A `Source` describes what to show and what can be done with it, a `Selector` runs
sessions over a source with a menu engine. Only one session may be active at a time
in the whole daemon, the `SessionGuard` enforces it.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .constants import AUTO_WIDTH, DEFAULT_END_MARKER, MAX_CUSTOM_KEYS
from .formatter import CandidateFormatter
from .models import DisplayRow, FilterQuery, MenuRequest, MenuResult, SessionOutcome, SessionState, WindowEntry

if TYPE_CHECKING:
    import logging

    from .adapters.menus import MenuEngine

__all__ = ["SESSION_COMMANDS", "TOGGLE_DETAIL", "Action", "SessionGuard", "Selector", "SelectorSession", "Source"]

TOGGLE_DETAIL = "toggle_detail"
SESSION_COMMANDS = frozenset({TOGGLE_DETAIL})
" commands handled by the selector itself, usable in keymaps "

ActionHandler = Callable[[list[WindowEntry]], Awaitable[list[WindowEntry]]]
CandidatesProvider = Callable[[], Awaitable[list[WindowEntry]]]
StatusCallback = Callable[[str], Awaitable[None]]


@dataclass
class Action:
    """Something done with the selected windows.

    The handler returns the entries it really affected.
    """

    name: str
    handler: ActionHandler
    persistent: bool = False
    " keep the session open after running "
    multi: bool = False
    " applies to every selected window, else to the first one only "
    removes: bool = False
    " affected windows are gone, hide them from the next snapshot "
    description: str = ""


@dataclass
class Source:
    """Candidates, display settings, actions and keymap for one kind of selector."""

    name: str
    candidates: CandidatesProvider
    actions: dict[str, Action]
    default_action: str
    keymap: dict[str, str] = field(default_factory=dict)
    " key binding => action identifier "
    max_length: int | str = AUTO_WIDTH
    end_marker: str = DEFAULT_END_MARKER
    detail: bool = True
    multi: bool = False
    prompt: str = ""
    fuzzy: bool = True

    def __post_init__(self) -> None:
        if self.default_action not in self.actions:
            msg = f"{self.name}: unknown default action {self.default_action!r}"
            raise ValueError(msg)
        for key, target in self.keymap.items():
            if target not in self.actions and target not in SESSION_COMMANDS:
                msg = f"{self.name}: key {key!r} is bound to unknown action {target!r}"
                raise ValueError(msg)
        if len(self.keymap) > MAX_CUSTOM_KEYS:
            msg = f"{self.name}: too many key bindings ({len(self.keymap)} > {MAX_CUSTOM_KEYS})"
            raise ValueError(msg)
        if self.max_length != AUTO_WIDTH and (isinstance(self.max_length, bool) or not isinstance(self.max_length, int) or self.max_length < 1):
            msg = f"{self.name}: max_length must be {AUTO_WIDTH!r} or a positive integer, got {self.max_length!r}"
            raise ValueError(msg)


@dataclass
class SelectorSession:
    """State of one selector session, discarded when it ends."""

    source: Source
    detail_mode: bool = True
    width: int = 0
    query: FilterQuery = field(default_factory=FilterQuery)
    selected_row: int = 0
    entries: list[WindowEntry] = field(default_factory=list)
    rows: list[DisplayRow] = field(default_factory=list)
    selection: list[WindowEntry] = field(default_factory=list)
    removed: set[str] = field(default_factory=set)
    status: str = ""
    history: list[SessionState] = field(default_factory=lambda: [SessionState.IDLE])

    @classmethod
    def for_source(cls, source: Source) -> SelectorSession:
        """Return a fresh session using the source settings."""
        return cls(source=source, detail_mode=source.detail, query=FilterQuery(fuzzy=source.fuzzy))

    @property
    def state(self) -> SessionState:
        """Current state."""
        return self.history[-1]

    def transition(self, state: SessionState) -> None:
        """Enter a new state."""
        self.history.append(state)


class SessionGuard:
    """Allows a single active selector session."""

    def __init__(self) -> None:
        self._session: SelectorSession | None = None

    @property
    def active(self) -> SelectorSession | None:
        """The session in progress, if any."""
        return self._session

    def acquire(self, session: SelectorSession) -> bool:
        """Register `session` as the active one, False if another one is running."""
        if self._session is not None:
            return False
        self._session = session
        return True

    def release(self, session: SelectorSession) -> None:
        """Free the guard if `session` holds it."""
        if self._session is session:
            self._session = None


class Selector:
    """Runs selector sessions with a menu engine."""

    def __init__(
        self,
        menu: MenuEngine,
        guard: SessionGuard,
        log: logging.Logger,
        notify: StatusCallback | None = None,
        class_color: str = "",
    ) -> None:
        """Initialize the selector.

        Args:
            menu: engine used to display the rows
            guard: shared single session guard
            log: logger to use
            notify: coroutine showing status messages to the user
            class_color: color of the class column, for engines supporting markup
        """
        self.menu = menu
        self.guard = guard
        self.log = log
        self.notify = notify
        self.class_color = class_color
        self.session: SelectorSession | None = None

    async def open(self, source: Source) -> SessionOutcome:
        """Run a session over `source` until the user selects or cancels.

        Returns REJECTED without touching anything if a session is already active.
        """
        session = SelectorSession.for_source(source)
        if not self.guard.acquire(session):
            self.log.info("A selector session is already active, ignoring %s", source.name)
            return SessionOutcome.REJECTED
        self.session = session
        try:
            session.transition(SessionState.OPEN)
            await self._snapshot(session)
            return await self._loop(session)
        finally:
            if session.state in (SessionState.OPEN, SessionState.SELECTING):
                session.transition(SessionState.CANCELLED)
            self.guard.release(session)

    def toggle_detail_mode(self) -> bool:
        """Show or hide the class column of the current session.

        The width is kept and the selected window stays selected when it is still listed.

        Returns:
            False when there is no session
        """
        session = self.session
        if session is None:
            return False
        selected_id = session.rows[session.selected_row].source_id if 0 <= session.selected_row < len(session.rows) else None
        session.detail_mode = not session.detail_mode
        self._render(session)
        session.selected_row = next((i for i, row in enumerate(session.rows) if row.source_id == selected_id), 0)
        return True

    def get_selection(self) -> WindowEntry | list[WindowEntry] | None:
        """Return the windows picked in the last session.

        A list for multi selection sources, else a single entry (None if nothing was picked).
        """
        if self.session is None:
            return None
        if self.session.source.multi:
            return list(self.session.selection)
        return self.session.selection[0] if self.session.selection else None

    async def _loop(self, session: SelectorSession) -> SessionOutcome:
        source = session.source
        while True:
            result = await self.menu.run(self._build_request(session))
            if result.cancelled:
                session.transition(SessionState.CANCELLED)
                return SessionOutcome.CANCELLED
            if self.menu.supports_query:
                session.query.text = result.query
            if result.indices:
                session.selected_row = result.indices[0]

            target = source.keymap[result.key] if result.key is not None else source.default_action
            if target == TOGGLE_DETAIL:
                self.toggle_detail_mode()
                continue

            action = source.actions[target]
            selected = self._selected_entries(session, result, action)
            if not selected:
                # the filter matched nothing
                session.transition(SessionState.CANCELLED)
                return SessionOutcome.CANCELLED
            session.selection = selected
            session.transition(SessionState.SELECTING)
            affected = await action.handler(selected)
            await self._report(session, action, selected, affected)

            if not action.persistent:
                session.transition(SessionState.IDLE)
                return SessionOutcome.SELECTED
            if action.removes:
                session.removed.update(entry.id for entry in affected)
            session.transition(SessionState.OPEN)
            await self._snapshot(session)
            if not session.entries:
                session.transition(SessionState.IDLE)
                return SessionOutcome.SELECTED

    def _selected_entries(self, session: SelectorSession, result: MenuResult, action: Action) -> list[WindowEntry]:
        selected = [session.entries[i] for i in result.indices if 0 <= i < len(session.entries)]
        if not (action.multi and session.source.multi):
            return selected[:1]
        return selected

    async def _snapshot(self, session: SelectorSession) -> None:
        """Take a new candidates snapshot and render it, "auto" width is recomputed."""
        entries = await session.source.candidates()
        session.entries = [entry for entry in entries if entry.id not in session.removed]
        session.width = CandidateFormatter.resolve_width(session.entries, session.source.max_length)
        self._render(session)
        session.selected_row = min(session.selected_row, max(0, len(session.rows) - 1))

    def _render(self, session: SelectorSession) -> None:
        formatter = CandidateFormatter(session.source.end_marker)
        session.rows = formatter.format(session.entries, session.width, session.detail_mode)

    def _build_request(self, session: SelectorSession) -> MenuRequest:
        source = session.source
        markup = self.menu.supports_markup
        return MenuRequest(
            lines=[self.menu.render(row, self.class_color) if markup else row.text for row in session.rows],
            prompt=source.prompt or source.name,
            query=session.query,
            selected_row=session.selected_row,
            keys=list(source.keymap) if self.menu.supports_keys else [],
            multi=source.multi and self.menu.supports_multi,
            markup=markup,
        )

    async def _report(self, session: SelectorSession, action: Action, attempted: list[WindowEntry], affected: list[WindowEntry]) -> None:
        """Tell the user what the action really did."""
        count = len(affected)
        if count == 0:
            message = f"{action.name}: no window affected, the list was stale"
        elif count < len(attempted):
            self.log.warning("%s: only %d of %d windows affected", action.name, count, len(attempted))
            message = f"{action.name}: {count} window(s) affected"
        elif action.multi:
            message = f"{action.name}: {count} window(s) affected"
        else:
            return
        session.status = message
        self.log.info(message)
        if self.notify:
            await self.notify(message)
