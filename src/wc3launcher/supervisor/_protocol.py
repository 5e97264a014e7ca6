"""Protocol definitions for the process supervisor.

This module defines the interfaces that decouple the supervisor core from
the presentation layer:
- OutputSink: Consumes worker output lines
- LifecycleObserver: Learns when a worker process has exited
- Dispatcher: Marshals calls onto the presentation layer's context
- ExecutableResolver: Produces the worker executable path
"""

from collections.abc import Callable
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class OutputSink(Protocol):
    """Protocol for consuming worker output lines.

    The sink is owned by the presentation layer and may be torn down
    independently of the supervisor, so the supervisor checks
    :meth:`is_available` before posting each line.
    """

    def append(self, line: str) -> None:
        """Append a line of text, including its line terminator.

        Args:
            line: The text to append.
        """
        ...

    def is_available(self) -> bool:
        """Return True while the sink can still accept lines."""
        ...


@runtime_checkable
class LifecycleObserver(Protocol):
    """Protocol for observing worker lifecycle transitions."""

    def on_exited(self, exit_code: int | None, generation: int) -> None:
        """Handle the exit of a worker process.

        Called exactly once per process generation. Callbacks run on the
        dispatcher, so one for an older generation can arrive after a newer
        generation has started.

        Args:
            exit_code: The exit code, or None if it was never confirmed.
            generation: Number of the generation that exited.
        """
        ...


@runtime_checkable
class Dispatcher(Protocol):
    """Protocol for posting callbacks onto the presentation context.

    Posting is fire-and-forget: implementations must not block and must not
    raise because of the callback itself.
    """

    def post(self, callback: Callable[[], object]) -> None:
        """Schedule a callback to run on the presentation context.

        Args:
            callback: Zero-argument callable to run.
        """
        ...


@runtime_checkable
class ExecutableResolver(Protocol):
    """Protocol for producing the worker executable path."""

    def resolve(self) -> Path | None:
        """Return the path to a runnable worker, or None if unavailable."""
        ...
