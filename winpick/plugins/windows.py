"""Fuzzy window switcher, with a launch-or-focus command per application class."""

import shlex
from functools import partial
from typing import Any

from ..actions import WindowActions
from ..adapters.menus import MenuMixin
from ..constants import AUTO_WIDTH, DEFAULT_END_MARKER, DEFAULT_KEYS
from ..models import SessionOutcome, SwitchOutcome
from ..selector import SESSION_COMMANDS, Selector, Source
from ..switcher import ClassSwitcher
from ..validation import ConfigField, ConfigItems
from ..window_source import WindowSource
from .interface import Plugin

OTHER_WINDOW_FLAGS = frozenset({"other", "true", "yes", "1"})
SPLIT_DIRECTIONS = ["", "l", "r", "u", "d"]
ACTION_NAMES = frozenset(WindowActions.action_names) | SESSION_COMMANDS


def _check_max_length(value: Any) -> list[str]:  # noqa: ANN401
    if value == AUTO_WIDTH or (isinstance(value, int) and not isinstance(value, bool) and value > 0):
        return []
    return [f"must be {AUTO_WIDTH!r} or a positive integer, got {value!r}"]


def _check_keys(value: Any) -> list[str]:  # noqa: ANN401
    errors = []
    for action, key in value.items():
        if action not in ACTION_NAMES:
            errors.append(f"unknown action {action!r}, valid actions: {', '.join(sorted(ACTION_NAMES))}")
        elif not isinstance(key, str):
            errors.append(f"the key for {action!r} must be a string")
    if not errors:
        errors.extend(
            f"key {key!r} is bound to {' and '.join(actions)}, set the unused ones to \"\" to unbind them"
            for key, actions in key_conflicts({**DEFAULT_KEYS, **value}).items()
        )
    return errors


def key_conflicts(bindings: dict[str, str]) -> dict[str, list[str]]:
    """Return the keys bound to more than one action, with those actions."""
    by_key: dict[str, list[str]] = {}
    for action, key in bindings.items():
        if key:
            by_key.setdefault(key, []).append(action)
    return {key: actions for key, actions in by_key.items() if len(actions) > 1}


WINDOWS_SCHEMA = ConfigItems(
    ConfigField("engine", str, default="", description="Menu engine to use, auto-detected if empty"),
    ConfigField("parameters", str, default="", description="Replaces the default menu engine parameters"),
    ConfigField("prompt", str, default="windows", description="Prompt shown by the menu"),
    ConfigField("max_length", (int, str), default=AUTO_WIDTH, description="Title column width, or 'auto'", validator=_check_max_length),
    ConfigField("end_marker", str, default=DEFAULT_END_MARKER, description="Appended to truncated titles"),
    ConfigField("detail", bool, default=True, description="Show the class column when opening"),
    ConfigField("current_last", bool, default=True, description="List the focused window last"),
    ConfigField("fuzzy", bool, default=True, description="Fuzzy matching (else substring)"),
    ConfigField("class_color", str, default="#888888", description="Class column color, for engines supporting markup"),
    ConfigField("split_direction", str, default="r", description="Split used by the 'other window' variants", choices=SPLIT_DIRECTIONS),
    ConfigField("keys", dict, default={}, description="Key bindings: action name => key, empty to unbind", validator=_check_keys),
)


class Extension(MenuMixin, Plugin):
    """Pick windows with a menu, switch to applications by class."""

    config_schema = WINDOWS_SCHEMA

    # Commands

    async def run_windows(self, args: str = "") -> str:
        """[class] Pick a window, among the windows of `class` if given.

        Actions are bound to keys (see the "keys" option): switch (Return),
        switch_other_window, switch_other_frame, kill and toggle_detail.
        """
        parts = shlex.split(args)
        outcome = await self.open_selector(parts[0] if parts else "")
        return f"{outcome}\n"

    async def run_switch_class(self, args: str = "") -> str:
        """<class> [program] [other] Focus a window of `class`, or run `program`.

        If the focused window is already of this class, pick among the class windows.
        Pass "other" to show the window next to the current one.
        """
        parts = shlex.split(args)
        if not parts:
            msg = "usage: switch_class <class> [program] [other]"
            raise ValueError(msg)
        class_name, *rest = parts
        other_window = bool(rest) and rest[-1].lower() in OTHER_WINDOW_FLAGS
        if other_window:
            rest.pop()
        switcher = ClassSwitcher(
            self._window_source(),
            self.backend,
            self.state.sessions,
            self.open_selector,
            self.log,
            split_direction=self.config.get_str("split_direction"),
        )
        outcome: SwitchOutcome = await switcher.switch_to_class(class_name, " ".join(rest) or None, other_window)
        return f"{outcome}\n"

    # Utils

    async def open_selector(self, class_name: str = "") -> SessionOutcome:
        """Run a selector session over the managed windows, scoped to `class_name` if set."""
        self.ensure_menu_configured()
        selector = Selector(
            self.menu,
            self.state.sessions,
            self.log,
            notify=self.backend.notify_info,
            class_color=self.config.get_str("class_color"),
        )
        return await selector.open(self.build_source(class_name))

    def build_source(self, class_name: str = "") -> Source:
        """Return the selector source for all the windows, or those of `class_name`."""
        windows = self._window_source()
        prompt = self.config.get_str("prompt")
        if class_name:
            candidates = partial(windows.class_entries, class_name)
            prompt = f"{prompt} ({class_name})"
        else:
            candidates = windows.list_entries
        max_length = self.config.get("max_length")
        return Source(
            name=self.name,
            candidates=candidates,
            actions=WindowActions(self.backend, self.config.get_str("split_direction")).as_dict(),
            default_action="switch",
            keymap=self.keymap(),
            max_length=max_length if max_length == AUTO_WIDTH else self.config.get_int("max_length"),
            end_marker=self.config.get_str("end_marker"),
            # a single class view has no use for the class column
            detail=self.config.get_bool("detail") and not class_name,
            multi=True,
            prompt=prompt,
            fuzzy=self.config.get_bool("fuzzy"),
        )

    def keymap(self) -> dict[str, str]:
        """Return the key => action bindings, defaults overridden by the "keys" option."""
        bindings = {**DEFAULT_KEYS, **self.config.get_dict("keys")}
        for key, actions in key_conflicts(bindings).items():
            self.log.warning("Key %s is bound to %s, only %s is kept", key, " and ".join(actions), actions[-1])
        return {key: action for action, key in bindings.items() if key}

    def _window_source(self) -> WindowSource:
        return WindowSource(self.backend, current_last=self.config.get_bool("current_last"))
