"""Output sink implementations for the process supervisor.

This module provides concrete implementations of the OutputSink protocol
for displaying and buffering worker output.
"""

import re
from collections import deque
from typing import final

from rich.console import Console
from rich.style import Style
from rich.text import Text

# Lines emitted by the launcher itself rather than by the worker
_LAUNCHER_LINE = re.compile(r"^\[(process exited|[\w ]+ error)\b")


@final
class ConsoleOutputSink:
    """Output sink that writes worker output to a rich console.

    Worker lines are written verbatim. Lines produced by the launcher itself
    (``[process exited]``, ``[... error] ...``) are highlighted. Once closed,
    the sink reports itself unavailable and drops further lines.
    """

    __slots__ = ("_closed", "_console", "_marker_style")

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the output sink.

        Args:
            console: Rich Console instance for output. If None, creates a new one.
        """
        self._console = console or Console()
        self._marker_style = Style(color="yellow", bold=True)
        self._closed = False

    def append(self, line: str) -> None:
        if self._closed:
            return

        if _LAUNCHER_LINE.match(line):
            text = Text(line.rstrip("\r\n"), style=self._marker_style)
            self._console.print(text)
            return

        self._console.out(line, end="", highlight=False)

    def is_available(self) -> bool:
        return not self._closed

    def close(self) -> None:
        """Tear the sink down; later lines are dropped."""
        self._closed = True

    def reopen(self) -> None:
        """Make the sink available again after a close."""
        self._closed = False


@final
class BufferOutputSink:
    """Output sink that keeps the most recent lines in memory.

    Acts as the launcher's log window: a bounded scroll-back that can be
    opened, read, and closed independently of the worker.

    Attributes:
        max_lines: Maximum number of lines retained.
    """

    __slots__ = ("_closed", "_lines", "max_lines")

    def __init__(self, max_lines: int = 10_000) -> None:
        self.max_lines = max_lines
        self._lines: deque[str] = deque(maxlen=max_lines)
        self._closed = False

    def append(self, line: str) -> None:
        if not self._closed:
            self._lines.append(line)

    def is_available(self) -> bool:
        return not self._closed

    def close(self) -> None:
        self._closed = True

    def reopen(self) -> None:
        """Make the sink available again, keeping its scroll-back."""
        self._closed = False

    @property
    def lines(self) -> list[str]:
        """Return a snapshot of the buffered lines."""
        return list(self._lines)

    @property
    def text(self) -> str:
        """Return the buffered lines joined into one string."""
        return "".join(self._lines)
