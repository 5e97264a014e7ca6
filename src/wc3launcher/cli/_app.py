"""The command-line interface for wc3launcher."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from wc3launcher.utils import create_logger, get_settings_file

from ._commands import register_commands
from ._commands._context import CLIContext

APP_HELP = "Launch, supervise, and stream the output of the wc3proxy worker."


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    """Build the CLI app with its global options.

    Run it through ``app.meta`` so the global options are parsed and the
    CLIContext is set before a command runs.
    """
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="wc3launcher",
        help=APP_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        settings: Annotated[
            Path | None,
            Parameter(name="--settings", help="Path to the settings file"),
        ] = None,
        log_level: Annotated[
            str | None,
            Parameter(name="--log-level", help="Log level (debug, info, warning)"),
        ] = None,
        log_file: Annotated[
            Path | None, Parameter(name="--log-file", help="Path to the log file")
        ] = None,
        no_color: Annotated[
            bool, Parameter(name="--no-color", help="Disable colored output")
        ] = False,
    ) -> None:
        """Launch wc3launcher with global options.

        Args:
            tokens: Command tokens to pass to subcommands.
            settings: Explicit path to the settings file.
            log_level: Log level for the log file.
            log_file: Explicit path to the log file.
            no_color: Disable colored output.
        """
        if no_color:
            console.no_color = True
            error_console.no_color = True

        ctx = CLIContext(
            settings_path=get_settings_file(settings),
            console=console,
            error_console=error_console,
            no_color=no_color,
            logger=create_logger(level=log_level, log_file=log_file or ""),
        )
        CLIContext.set_current(ctx)

        try:
            app(tokens)
        finally:
            CLIContext.reset()

    register_commands(app)
    return app


app = create_app()


def main() -> None:
    """Default entrypoint for the `wc3launcher` CLI."""
    create_app().meta()


if __name__ == "__main__":
    main()
