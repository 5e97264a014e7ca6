from collections.abc import Callable
from pathlib import Path

import pytest
from rich.console import Console

from wc3launcher.cli import create_app


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / "config" / "wc3launcher-settings.json"


@pytest.fixture
def launcher_cli(
    console: Console, settings_path: Path, tmp_path: Path
) -> Callable[..., int]:
    """Create the CLI app for testing and return a runner.

    The runner passes the global options pointing at temporary files and
    returns the exit code (0 if no SystemExit).
    """
    app = create_app(console=console, error_console=console)
    global_options = [
        "--settings",
        str(settings_path),
        "--log-file",
        str(tmp_path / "logs" / "cli.log"),
    ]

    def _run(*args: str) -> int:
        try:
            app.meta([*global_options, *args])
        except SystemExit as e:
            return e.code if isinstance(e.code, int) else 1
        else:
            return 0

    return _run
