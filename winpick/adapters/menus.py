"""Menu engine adapter.

A menu engine is an external picker program: rows go in on stdin, the user's choice
comes back on stdout. Engines declare what they can do beyond a plain pick (custom
keys, multiple selection, query restore, markup); the selector degrades gracefully
to "default action on one window" for the simple ones.
"""

import asyncio
import html
import re
import shlex
import shutil
from logging import Logger

from ..config import Configuration
from ..logging_setup import get_logger
from ..models import DisplayRow, MenuRequest, MenuResult, WinpickError

__all__ = ["MenuEngine", "MenuMixin", "apply_variables", "init", "unique_lines"]

menu_logger = get_logger("menus adapter")

ROFI_CUSTOM_KEY_BASE = 10
" rofi exits with 10 for kb-custom-1, 11 for kb-custom-2... "


def apply_variables(template: str, variables: dict[str, str]) -> str:
    """Replace [var_name] with content from supplied variables.

    Args:
        template: the string template
        variables: a dict containing the variables to replace
    """
    pattern = r"\[([^\[\]]+)\]"

    def replace(match: re.Match[str]) -> str:
        var_name = match.group(1)
        return variables.get(var_name, match.group(0))

    return re.sub(pattern, replace, template)


def unique_lines(lines: list[str]) -> list[str]:
    """Number the repeated lines: "a", "a", "a" becomes "a", "a (2)", "a (3)"."""
    used: set[str] = set()
    result = []
    for line in lines:
        candidate, number = line, 1
        while candidate in used:
            number += 1
            candidate = f"{line} ({number})"
        used.add(candidate)
        result.append(candidate)
    return result


class MenuEngine:
    """Menu backend interface."""

    proc_name: str
    " process name for this engine "
    proc_extra_parameters: str = ""
    " process parameters to use for this engine "

    supports_keys = False
    supports_multi = False
    supports_query = False
    supports_markup = False
    selects_by_text = True
    " the program prints the selected line, not its index "

    def __init__(self, extra_parameters: str = "") -> None:
        """Initialize the engine with extra parameters.

        Args:
            extra_parameters: extra parameters to pass to the program
        """
        if extra_parameters:
            self.proc_extra_parameters = extra_parameters

    @classmethod
    def is_available(cls) -> bool:
        """Check engine availability."""
        return shutil.which(cls.proc_name) is not None

    def render(self, row: DisplayRow, class_color: str = "") -> str:  # noqa: ARG002
        """Return the line displayed for `row`."""
        return row.text

    def displayed_lines(self, request: MenuRequest) -> list[str]:
        """Return the lines fed to the program, repeated ones numbered when selecting by text."""
        return unique_lines(request.lines) if self.selects_by_text else request.lines

    def build_command(self, request: MenuRequest) -> list[str]:
        """Return the argv used to run the engine for `request`."""
        variables = {"prompt": request.prompt}
        return [self.proc_name, *(apply_variables(arg, variables) for arg in shlex.split(self.proc_extra_parameters))]

    def parse_output(self, output: str, returncode: int, request: MenuRequest) -> MenuResult:
        """Turn the program output into a `MenuResult`.

        Plain engines print the selected line, mapped back to its index.
        """
        selection = output.rstrip("\n")
        if returncode != 0 or not selection:
            return MenuResult(cancelled=True)
        try:
            return MenuResult(indices=[self.displayed_lines(request).index(selection)])
        except ValueError:
            menu_logger.info("Unknown selection: %s", selection)
            return MenuResult(cancelled=True)

    async def run(self, request: MenuRequest) -> MenuResult:
        """Run the engine and get the user's answer for `request`.

        An empty list of lines is answered with a cancellation, without running anything.
        """
        if not request.lines:
            return MenuResult(cancelled=True)
        command = self.build_command(request)
        menu_logger.debug(command)
        proc = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
        )
        stdout, _ = await proc.communicate("\n".join(self.displayed_lines(request)).encode())
        assert proc.returncode is not None
        return self.parse_output(stdout.decode(errors="replace"), proc.returncode, request)


class RofiMenu(MenuEngine):
    """A rofi based menu, the only engine supporting every feature."""

    proc_name = "rofi"
    proc_extra_parameters = "-p '[prompt]'"

    supports_keys = True
    supports_multi = True
    supports_query = True
    supports_markup = True
    selects_by_text = False

    def render(self, row: DisplayRow, class_color: str = "") -> str:
        """Pango markup version of the row, class name in `class_color`."""
        title = html.escape(row.truncated_title, quote=False)
        if not row.detail:
            return title
        class_name = html.escape(row.class_name, quote=False)
        if class_color:
            class_name = f'<span foreground="{class_color}">{class_name}</span>'
        return f"{title}  {class_name}"

    def build_command(self, request: MenuRequest) -> list[str]:
        """Rofi in dmenu mode, printing "index:filter" for each selected row."""
        command = ["rofi", "-dmenu", "-i", "-format", "i:f", "-selected-row", str(request.selected_row)]
        command += ["-matching", "fuzzy" if request.query.fuzzy else "normal"]
        if request.query.text:
            command += ["-filter", request.query.text]
        if request.multi:
            command.append("-multi-select")
        if request.markup:
            command.append("-markup-rows")
        for number, key in enumerate(request.keys, start=1):
            command += [f"-kb-custom-{number}", key]
        return command + super().build_command(request)[1:]

    def parse_output(self, output: str, returncode: int, request: MenuRequest) -> MenuResult:
        """Decode the exit code (accept, cancel or custom key) and the printed rows."""
        if returncode == 0:
            key = None
        elif ROFI_CUSTOM_KEY_BASE <= returncode < ROFI_CUSTOM_KEY_BASE + len(request.keys):
            key = request.keys[returncode - ROFI_CUSTOM_KEY_BASE]
        else:
            if returncode != 1:
                menu_logger.warning("rofi exited with code %d", returncode)
            return MenuResult(cancelled=True)

        indices: list[int] = []
        query = ""
        for line in output.splitlines():
            index, _, query = line.partition(":")
            try:
                position = int(index)
            except ValueError:
                menu_logger.warning("Unexpected rofi output: %s", line)
                continue
            # -1 when nothing matches the filter
            if 0 <= position < len(request.lines):
                indices.append(position)
        return MenuResult(indices=indices, key=key, query=query)


class FuzzelMenu(MenuEngine):
    """A fuzzel based menu."""

    proc_name = "fuzzel"
    proc_extra_parameters = "--dmenu --index --prompt '[prompt]: '"
    selects_by_text = False

    def parse_output(self, output: str, returncode: int, request: MenuRequest) -> MenuResult:
        """Fuzzel prints the index of the selected row."""
        if returncode != 0 or not output.strip():
            return MenuResult(cancelled=True)
        try:
            position = int(output.strip())
        except ValueError:
            return MenuResult(cancelled=True)
        if not 0 <= position < len(request.lines):
            return MenuResult(cancelled=True)
        return MenuResult(indices=[position])


class TofiMenu(MenuEngine):
    """A tofi based menu."""

    proc_name = "tofi"
    proc_extra_parameters = "--prompt-text '[prompt]: '"


class WofiMenu(MenuEngine):
    """A wofi based menu."""

    proc_name = "wofi"
    proc_extra_parameters = "-dmenu -i -p '[prompt]'"


class BemenuMenu(MenuEngine):
    """A bemenu based menu."""

    proc_name = "bemenu"
    proc_extra_parameters = "-c -p '[prompt]'"


class DmenuMenu(MenuEngine):
    """A dmenu based menu."""

    proc_name = "dmenu"
    proc_extra_parameters = "-i -p '[prompt]'"


class WalkerMenu(MenuEngine):
    """A walker based menu."""

    proc_name = "walker"
    proc_extra_parameters = "-d -k -p '[prompt]'"


class AnyrunMenu(MenuEngine):
    """An anyrun based menu."""

    proc_name = "anyrun"
    proc_extra_parameters = "--plugins libstdin.so --show-results-immediately true"


every_menu_engine: list[type[MenuEngine]] = [RofiMenu, FuzzelMenu, WalkerMenu, TofiMenu, WofiMenu, BemenuMenu, DmenuMenu, AnyrunMenu]


def init(force_engine: str | None = None, extra_parameters: str = "") -> MenuEngine:
    """Return the menu engine to use.

    Args:
        force_engine: name of the program to use, auto-detected if not set
        extra_parameters: replaces the engine's default parameters

    Raises:
        WinpickError: no engine available
    """
    if force_engine:
        engine = next((e for e in every_menu_engine if e.proc_name == force_engine), None)
        if engine:
            return engine(extra_parameters)
        # Attempt to use the user-supplied command as a plain dmenu-like program
        me = MenuEngine(extra_parameters)
        me.proc_name = force_engine
        return me

    for engine in every_menu_engine:
        if engine.is_available():
            return engine(extra_parameters)

    menu_logger.critical("No menu engine found, install one of: %s", ", ".join(e.proc_name for e in every_menu_engine))
    raise WinpickError


class MenuMixin:
    """A plugin mixin supporting 'engine' and 'parameters' config options to show a menu."""

    _menu_configured = False
    menu: MenuEngine
    """ provided `MenuEngine` """
    config: Configuration
    " used by the mixin but provided by `winpick.plugins.interface.Plugin` "
    log: Logger
    " used by the mixin but provided by `winpick.plugins.interface.Plugin` "

    def ensure_menu_configured(self) -> None:
        """If not configured, init the menu system."""
        if not self._menu_configured:
            self.menu = init(self.config.get_str("engine") or None, self.config.get_str("parameters"))
            self.log.info("Using %s engine", self.menu.proc_name)
            self._menu_configured = True

    async def on_reload(self) -> None:
        """Reset the configuration status."""
        self._menu_configured = False
