# pyright: reportUnusedCallResult=false
"""Per-invocation state shared by the CLI commands.

The root app's meta handler turns the global options into a CLIContext and
installs it before dispatching to a command; commands read it back with
:meth:`CLIContext.get_current`.
"""

import contextvars
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console

from wc3launcher.utils import get_settings_file

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

_active: contextvars.ContextVar["CLIContext | None"] = contextvars.ContextVar(
    "wc3launcher_cli_context", default=None
)


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Resolved global options for one CLI invocation.

    Attributes:
        settings_path: Settings file the commands read and write.
        console: Where command output and worker output go.
        error_console: Where error messages go.
        no_color: Whether color was disabled with ``--no-color``.
        logger: Log file logger, or None to let components create the
            default one.
    """

    settings_path: Path
    console: Console = field(default_factory=Console, repr=False)
    error_console: Console = field(
        default_factory=lambda: Console(stderr=True), repr=False
    )
    no_color: bool = False
    logger: "FilteringBoundLogger | None" = field(  # noqa: UP037
        default=None, repr=False
    )

    @classmethod
    def get_current(cls) -> "CLIContext":  # noqa: UP037
        """Return the installed context, or one built from the environment.

        Commands invoked without the meta handler (for example through the
        bare command app) still get a usable settings path and consoles.
        """
        ctx = _active.get()
        return ctx if ctx is not None else cls(settings_path=get_settings_file())

    @classmethod
    def set_current(cls, ctx: "CLIContext") -> None:  # noqa: UP037
        _active.set(ctx)

    @classmethod
    def reset(cls) -> None:
        """Forget the installed context."""
        _active.set(None)
