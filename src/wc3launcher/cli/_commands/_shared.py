"""Exit codes and output helpers shared by the wc3launcher commands."""

from enum import IntEnum
from typing import TYPE_CHECKING, Never

import orjson

if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "ExitCode",
    "exit_with_error",
    "exit_with_success",
    "format_json",
]


class ExitCode(IntEnum):
    """Process exit codes of the wc3launcher CLI.

    ``run`` exits with the worker's own exit code when the worker ends by
    itself; these values cover the launcher's own failures.
    """

    SUCCESS = 0
    LOAD_ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    IO_ERROR = 4
    INTERNAL_ERROR = 5


def format_json(data: dict[str, object]) -> str:
    """Render a mapping as 2-space indented JSON, keeping key order."""
    return orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8")


def exit_with_error(
    message: str,
    code: ExitCode,
    *,
    console: "Console",  # noqa: UP037
) -> Never:
    """Report a failure on ``console`` and end the command.

    Raises:
        SystemExit: Always, carrying ``code``.
    """
    console.print(f"[red]Error:[/red] {message}")
    raise SystemExit(code)


def exit_with_success(
    message: str | None = None,
    *,
    console: "Console",  # noqa: UP037
) -> Never:
    """Print an optional message and end the command successfully.

    Raises:
        SystemExit: Always, carrying ``ExitCode.SUCCESS``.
    """
    if message is not None:
        console.print(message, highlight=False)
    raise SystemExit(ExitCode.SUCCESS)
