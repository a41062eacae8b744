"""Reporter implementations.

- :class:`ConsoleReporter` prints colorized, optionally bordered lines through
  a Rich console.
- :class:`RecordingReporter` keeps every entry in memory and can summarize
  assertion results; used by tests and by embedding applications.
- :class:`NullReporter` drops everything.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.text import Text

from fortest.interfaces import reporter
from fortest.interfaces.reporter import FAIL, FALSE, INFO, PASS, TRUE

# pylint: disable=too-few-public-methods

TAG_STYLES: dict[str, str | None] = {
    PASS: "green",
    FAIL: "red",
    INFO: None,
    TRUE: "green",
    FALSE: "red",
}


class ConsoleReporter(reporter.Reporter):
    """Colorized reporter writing ``[TAG] message`` lines to a Rich console.

    Known tags (PASS, FAIL, INFO, TRUE, FALSE) are printed with a bracketed
    label and their color; any other tag prints the bare message. When a
    border is given it is printed above and below the line in the same color.

    Args:
        console: Target console. Defaults to a new stdout console.
        prefix: Text printed before the tag label, e.g. ``"[ASSERT]"`` for the
            assertion engine's reporter.
    """

    def __init__(self, console: Console | None = None, prefix: str = "") -> None:
        self.console = console or Console()
        self.prefix = prefix
        self._last: tuple[str, str] | None = None

    def log(self, message: str, tag: str, border: str | None = None) -> None:
        self._last = (tag, message)

        if tag not in TAG_STYLES:
            self.console.print(Text(message))
            return

        style = TAG_STYLES[tag] or ""
        if border:
            self.console.print(Text(border, style=style))
        self.console.print(Text(f"{self.prefix}[{tag}] {message}", style=style))
        if border:
            self.console.print(Text(border, style=style))

    def __str__(self) -> str:
        if self._last is None:
            return "(no log yet)"
        tag, message = self._last
        return f"[{tag}] {message}"


@dataclass(frozen=True, slots=True)
class Entry:
    """One recorded reporter call."""

    tag: str
    message: str
    border: str | None = None


class RecordingReporter(reporter.Reporter):
    """Reporter that stores every call in memory."""

    def __init__(self) -> None:
        self._entries: list[Entry] = []

    def log(self, message: str, tag: str, border: str | None = None) -> None:
        self._entries.append(Entry(tag, message, border))

    @property
    def entries(self) -> list[Entry]:
        """Recorded entries, oldest first."""
        return list(self._entries)

    def messages(self, tag: str | None = None) -> list[str]:
        """Recorded messages, optionally only those with ``tag``."""
        return [e.message for e in self._entries if tag is None or e.tag == tag]

    def summary(self) -> str:
        """Count PASS and FAIL entries, e.g. ``"Assertions Summary: 3 passed, 1 failed"``."""
        passes = sum(1 for e in self._entries if e.tag == PASS)
        fails = sum(1 for e in self._entries if e.tag == FAIL)
        return f"Assertions Summary: {passes} passed, {fails} failed"

    def clear(self) -> None:
        """Drop every recorded entry."""
        self._entries.clear()


class NullReporter(reporter.Reporter):
    """Reporter that discards everything."""

    def log(self, message: str, tag: str, border: str | None = None) -> None:
        return None
