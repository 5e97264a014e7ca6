# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415
"""Write commands for editing the saved settings."""

from typing import Annotated

from cyclopts import Parameter

from wc3launcher.cli._commands._context import CLIContext
from wc3launcher.cli._commands._shared import (
    ExitCode,
    exit_with_error,
    exit_with_success,
)
from wc3launcher.exceptions import SettingsIOError
from wc3launcher.settings import DEFAULT_SETTINGS, SettingsStore
from wc3launcher.supervisor import Expansion
from wc3launcher.utils import open_with_default_app

from ._app import app


@app.command(name="set")
def _set(
    *,
    address: Annotated[str | None, Parameter(help="Game host IPv4 address")] = None,
    version: Annotated[str | None, Parameter(help="Game version")] = None,
    expansion: Annotated[Expansion | None, Parameter(help="Game expansion")] = None,
) -> None:
    """Change one or more saved settings

    Values are stored as entered; they are validated when the worker starts.
    """
    ctx = CLIContext.get_current()
    if address is None and version is None and expansion is None:
        exit_with_error(
            "Nothing to set. Pass --address, --version, or --expansion.",
            ExitCode.VALIDATION_ERROR,
            console=ctx.error_console,
        )

    store = SettingsStore(ctx.settings_path, ctx.logger)
    settings = store.load() or DEFAULT_SETTINGS

    changes: dict[str, object] = {}
    if address is not None:
        changes["address"] = address
    if version is not None:
        changes["version"] = version
    if expansion is not None:
        changes["is_tft"] = expansion == Expansion.TFT

    try:
        store.save(settings.model_copy(update=changes))
    except SettingsIOError as e:
        exit_with_error(str(e), ExitCode.IO_ERROR, console=ctx.error_console)

    exit_with_success(f"Saved settings to {store.path}", console=ctx.console)


@app.command(name="open")
def _open() -> None:
    """Open the settings file with the system's default application

    A missing file is created with the default settings first.
    """
    ctx = CLIContext.get_current()
    store = SettingsStore(ctx.settings_path, ctx.logger)

    try:
        store.ensure_exists(DEFAULT_SETTINGS)
        open_with_default_app(store.path)
    except (SettingsIOError, OSError) as e:
        store.logger.warning(
            "settings_open_failed", path=str(store.path), error=str(e)
        )
        exit_with_error(
            f"Failed to open settings file: {e}",
            ExitCode.IO_ERROR,
            console=ctx.error_console,
        )
