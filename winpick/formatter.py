"""Render window entries into aligned picker rows."""

import unicodedata

from .constants import AUTO_WIDTH, DEFAULT_END_MARKER
from .models import DisplayRow, WindowEntry

__all__ = ["CandidateFormatter", "clean_title", "display_width", "pad", "truncate"]

WidthPolicy = int | str


def char_width(char: str) -> int:
    """Number of terminal columns used by `char`."""
    # combining and variation marks (Mn, Me), zero width joiners and other format chars (Cf)
    if unicodedata.category(char) in ("Mn", "Me", "Cf"):
        return 0
    return 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1


def display_width(text: str) -> int:
    """Number of columns used by `text`, wide characters counting twice."""
    return sum(char_width(char) for char in text)


def clean_title(title: str) -> str:
    """Make a title fit on a single row."""
    return title.replace("\r", " ").replace("\n", " ").replace("\t", " ")


def truncate(text: str, max_length: int, end_marker: str = DEFAULT_END_MARKER) -> str:
    """Cut `text` so it fits in `max_length` columns, marking the cut.

    The marker is dropped when it doesn't fit in `max_length` by itself.
    """
    if display_width(text) <= max_length:
        return text
    marker_width = display_width(end_marker)
    if marker_width > max_length:
        end_marker = ""
        marker_width = 0
    budget = max_length - marker_width
    width = 0
    kept = []
    for char in text:
        width += char_width(char)
        if width > budget:
            break
        kept.append(char)
    return "".join(kept) + end_marker


def pad(text: str, max_length: int) -> str:
    """Right-pad `text` with spaces up to `max_length` columns."""
    return text + " " * max(0, max_length - display_width(text))


class CandidateFormatter:
    """Turns `WindowEntry` lists into `DisplayRow` lists.

    Every title is truncated or padded to the same width so the class column lines up.
    Match highlighting is left to the menu engine.
    """

    def __init__(self, end_marker: str = DEFAULT_END_MARKER) -> None:
        self.end_marker = end_marker

    @staticmethod
    def resolve_width(entries: list[WindowEntry], max_length: WidthPolicy) -> int:
        """Return the column width to use for this batch.

        "auto" means the widest title of the batch.
        """
        if max_length == AUTO_WIDTH:
            return max((display_width(clean_title(entry.title)) for entry in entries), default=0)
        return int(max_length)

    def format_title(self, title: str, width: int) -> str:
        """Return the title cut and padded to exactly `width` columns."""
        return pad(truncate(clean_title(title), width, self.end_marker), width)

    def format(self, entries: list[WindowEntry], max_length: WidthPolicy, detail_mode: bool) -> list[DisplayRow]:
        """Render the entries.

        Args:
            entries: snapshot to render
            max_length: title column width, or "auto"
            detail_mode: show the class column
        """
        width = self.resolve_width(entries, max_length)
        return [
            DisplayRow(
                truncated_title=self.format_title(entry.title, width),
                class_name=entry.class_name,
                source_id=entry.id,
                detail=detail_mode,
            )
            for entry in entries
        ]
