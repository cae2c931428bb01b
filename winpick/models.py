"""Common types: Hyprland API payloads and window picker entities."""

from dataclasses import dataclass, field
from enum import IntEnum, StrEnum
from typing import TypedDict

PlainTypes = float | str | dict[str, "PlainTypes"] | list["PlainTypes"]
JSONResponse = dict[str, PlainTypes] | list[dict[str, PlainTypes]] | PlainTypes


class WorkspaceDf(TypedDict):
    """Workspace definition."""

    id: int
    name: str


# "class" is a keyword, hence the functional syntax
ClientInfo = TypedDict(
    "ClientInfo",
    {
        "address": str,
        "mapped": bool,
        "hidden": bool,
        "workspace": WorkspaceDf,
        "floating": bool,
        "monitor": int,
        "class": str,
        "title": str,
        "initialClass": str,
        "initialTitle": str,
        "pid": int,
        "focusHistoryID": int,
    },
    total=False,
)
"""Client information as returned by Hyprland."""


class MonitorInfo(TypedDict, total=False):
    """Monitor information as returned by Hyprland."""

    id: int
    name: str
    focused: bool
    activeWorkspace: WorkspaceDf


@dataclass(frozen=True)
class WindowEntry:
    """Snapshot of one managed window, valid for a single query session."""

    id: str
    " opaque handle (the client address) "
    title: str
    class_name: str
    is_current: bool = False
    last_focus_rank: int = 0
    " 0 is the most recently focused window "
    workspace: str = ""

    @classmethod
    def from_client(cls, client: ClientInfo, active_address: str = "") -> "WindowEntry":
        """Build an entry from a Hyprland client.

        Args:
            client: the client as returned by `hyprctl clients`
            active_address: address of the focused window, if any
        """
        return cls(
            id=client["address"],
            title=client.get("title", ""),
            class_name=client.get("class", ""),
            is_current=bool(active_address) and client["address"] == active_address,
            last_focus_rank=client.get("focusHistoryID", 0),
            workspace=client.get("workspace", {}).get("name", ""),
        )


@dataclass(frozen=True)
class DisplayRow:
    """Rendered projection of a `WindowEntry`."""

    truncated_title: str
    class_name: str
    source_id: str
    detail: bool = False

    @property
    def text(self) -> str:
        """Plain text version of the row."""
        if self.detail:
            return f"{self.truncated_title}  {self.class_name}"
        return self.truncated_title


@dataclass
class FilterQuery:
    """Text typed by the user in the picker."""

    text: str = ""
    fuzzy: bool = True


@dataclass
class MenuRequest:
    """Everything a menu engine needs to display one picker round."""

    lines: list[str]
    prompt: str = ""
    query: FilterQuery = field(default_factory=FilterQuery)
    selected_row: int = 0
    keys: list[str] = field(default_factory=list)
    " custom key bindings, in kb-custom order "
    multi: bool = False
    markup: bool = False


@dataclass
class MenuResult:
    """What the user did in the picker."""

    indices: list[int] = field(default_factory=list)
    key: str | None = None
    " custom key used to accept, None for the default action "
    query: str = ""
    cancelled: bool = False


class SessionState(StrEnum):
    """Selector session states."""

    IDLE = "idle"
    OPEN = "open"
    SELECTING = "selecting"
    CANCELLED = "cancelled"


class SessionOutcome(StrEnum):
    """How a selector session ended."""

    SELECTED = "selected"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


class SwitchOutcome(StrEnum):
    """Branch taken by the class switcher."""

    SELECTOR = "selector"
    FOCUSED = "focused"
    LAUNCHED = "launched"
    IGNORED = "ignored"


class WinpickError(BaseException):
    """Used for errors which already triggered logging."""


class ExitCode(IntEnum):
    """Standard exit codes for the winpick client."""

    SUCCESS = 0
    USAGE_ERROR = 1  # No command provided, invalid arguments
    ENV_ERROR = 2  # Missing environment variables
    CONNECTION_ERROR = 3  # Cannot connect to daemon
    COMMAND_ERROR = 4  # Command execution failed


class ResponsePrefix(StrEnum):
    """Response prefixes for daemon-client communication."""

    OK = "OK"
    ERROR = "ERROR"
