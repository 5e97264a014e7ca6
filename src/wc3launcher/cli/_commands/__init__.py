"""wc3launcher CLI commands."""
# pyright: reportUnusedCallResult=false

from typing import TYPE_CHECKING

from ._context import CLIContext
from ._resolve import app as resolve_app
from ._run import app as run_app
from ._settings import app as settings_app
from ._shared import (
    ExitCode,
    exit_with_error,
    exit_with_success,
    format_json,
)

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "CLIContext",
    "ExitCode",
    "exit_with_error",
    "exit_with_success",
    "format_json",
    "register_commands",
    "resolve_app",
    "run_app",
    "settings_app",
]


def register_commands(app: "App") -> None:  # noqa: UP037
    app.command(resolve_app)
    app.command(run_app)
    app.command(settings_app)
