# pyright: reportUnusedCallResult=false
"""wc3launcher resolve command - materializes the embedded worker."""

from cyclopts import App

from wc3launcher.resolver import BinaryResolver

from .._context import CLIContext
from .._shared import ExitCode, exit_with_error

app = App(
    name="resolve",
    help="Extract the embedded worker and print its path",
    help_on_error=True,
)


@app.default
def resolve() -> None:
    """Extract the embedded worker executable and print where it was written.

    Exits with NOT_FOUND when no bundled resource qualifies.
    """
    ctx = CLIContext.get_current()
    path = BinaryResolver(logger=ctx.logger).resolve()
    if path is None:
        exit_with_error(
            "Embedded CLI not found.", ExitCode.NOT_FOUND, console=ctx.error_console
        )
    ctx.console.print(str(path), highlight=False, soft_wrap=True)
