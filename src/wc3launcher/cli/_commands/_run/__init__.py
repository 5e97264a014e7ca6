# pyright: reportUnusedCallResult=false
"""wc3launcher run command - launches and supervises the worker."""

from functools import partial
from typing import Annotated

import anyio
from cyclopts import App, Parameter

from wc3launcher.exceptions import ValidationError
from wc3launcher.settings import DEFAULT_SETTINGS, SettingsStore
from wc3launcher.supervisor import Expansion
from wc3launcher.validation import build_worker_spec

from .._context import CLIContext
from .._shared import ExitCode, exit_with_error
from ._session import run_session, save_settings

app = App(
    name="run",
    help="Start the worker and stream its output",
    help_on_error=True,
)


@app.default
def run(
    *,
    address: Annotated[
        str | None,
        Parameter(help="Game host IPv4 address. Defaults to the saved value."),
    ] = None,
    version: Annotated[
        str | None,
        Parameter(help="Game version (1.2x or 1.3x). Defaults to the saved value."),
    ] = None,
    expansion: Annotated[
        Expansion | None,
        Parameter(help="Game expansion. Defaults to the saved value."),
    ] = None,
    interactive: Annotated[
        bool,
        Parameter(help="Read start/stop/restart/status/quit commands from stdin."),
    ] = False,
) -> None:
    """Start the worker with the saved settings and stream its output.

    Any of --address, --version, or --expansion given on the command line are
    saved before the worker starts. Without --interactive the command returns
    when the worker exits or on SIGINT/SIGTERM; the worker is always stopped
    and the settings saved before returning.
    """
    ctx = CLIContext.get_current()
    store = SettingsStore(ctx.settings_path, ctx.logger)
    settings = store.load() or DEFAULT_SETTINGS

    # Field changes are flushed immediately, before validation
    changes: dict[str, object] = {}
    if address is not None:
        changes["address"] = address
    if version is not None:
        changes["version"] = version
    if expansion is not None:
        changes["is_tft"] = expansion == Expansion.TFT
    if changes:
        settings = settings.model_copy(update=changes)
        save_settings(store, settings, ctx.error_console)

    if not interactive:
        try:
            _ = build_worker_spec(
                settings.address, settings.version, is_tft=settings.is_tft
            )
        except ValidationError as e:
            exit_with_error(
                str(e), ExitCode.VALIDATION_ERROR, console=ctx.error_console
            )

    exit_code = anyio.run(
        partial(
            run_session,
            store,
            settings,
            console=ctx.console,
            interactive=interactive,
            logger=ctx.logger,
        )
    )
    if exit_code != ExitCode.SUCCESS:
        raise SystemExit(exit_code)


if __name__ == "__main__":
    app()
