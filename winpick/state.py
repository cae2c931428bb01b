"""Shared state between the daemon and its plugins."""

from dataclasses import dataclass, field

from .selector import SessionGuard

__all__ = ["SharedState"]


@dataclass
class SharedState:
    """Stores the state shared by every plugin."""

    sessions: SessionGuard = field(default_factory=SessionGuard)
    " the single selector session allowed at a time "
