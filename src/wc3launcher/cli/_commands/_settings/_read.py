# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415, A002
"""Read commands for viewing the saved settings."""

from typing import Annotated

from cyclopts import Parameter

from wc3launcher.cli._commands._context import CLIContext
from wc3launcher.cli._commands._shared import format_json
from wc3launcher.settings import DEFAULT_SETTINGS, SettingsStore

from ._app import app


@app.command(name="show")
def _show(
    *,
    json: Annotated[
        bool, Parameter(name="--json", help="Print the on-disk JSON form")
    ] = False,
) -> None:
    """Show the saved settings

    Missing or unreadable settings files show the defaults.
    """
    ctx = CLIContext.get_current()
    store = SettingsStore(ctx.settings_path, ctx.logger)
    loaded = store.load()
    settings = loaded or DEFAULT_SETTINGS

    if json:
        ctx.console.print(format_json(settings.to_json_dict()), highlight=False)
        return

    source = str(store.path) if loaded is not None else "defaults"
    ctx.console.print(f"address:   {settings.address}", highlight=False)
    ctx.console.print(f"version:   {settings.version}", highlight=False)
    ctx.console.print(f"expansion: {settings.expansion.value}", highlight=False)
    ctx.console.print(f"[dim]source: {source}[/dim]", highlight=False)


@app.command(name="path")
def _path() -> None:
    """Print the location of the settings file"""
    ctx = CLIContext.get_current()
    ctx.console.print(str(ctx.settings_path), highlight=False, soft_wrap=True)
