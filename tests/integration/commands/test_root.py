"""Integration tests for the root app and its global options."""

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from rich.console import Console

from wc3launcher.cli import CLIContext, create_app
from wc3launcher.cli._commands import ExitCode

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


class TestRootApp:
    def test_help_succeeds(
        self, launcher_cli: Callable[..., int], capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = launcher_cli("--help")

        assert exit_code == ExitCode.SUCCESS
        assert "wc3launcher" in capsys.readouterr().out

    def test_unknown_command_fails(self, launcher_cli: Callable[..., int]) -> None:
        exit_code = launcher_cli("nonexistent-command-xyz")

        assert exit_code != ExitCode.SUCCESS

    def test_context_is_reset_after_command(
        self, launcher_cli: Callable[..., int]
    ) -> None:
        _ = launcher_cli("settings", "path")

        assert CLIContext.get_current().logger is None

    def test_log_file_option_receives_events(
        self, console: Console, tmp_path: Path, mocker: "MockerFixture"
    ) -> None:
        _ = mocker.patch(
            "wc3launcher.cli._commands._settings._write.open_with_default_app",
            side_effect=OSError("no handler"),
        )
        log_file = tmp_path / "custom.log"
        app = create_app(console=console, error_console=console)

        with pytest.raises(SystemExit):
            app.meta(
                [
                    "--settings",
                    str(tmp_path / "settings.json"),
                    "--log-file",
                    str(log_file),
                    "settings",
                    "open",
                ]
            )

        assert "settings_open_failed" in log_file.read_text()

    def test_no_color_option_disables_color(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        console = Console(force_terminal=True, color_system="truecolor")
        app = create_app(console=console, error_console=console)

        with pytest.raises(SystemExit):
            app.meta(
                [
                    "--settings",
                    str(tmp_path / "settings.json"),
                    "--log-file",
                    str(tmp_path / "cli.log"),
                    "--no-color",
                    "settings",
                    "set",
                ]
            )

        out = capsys.readouterr().out
        assert "Nothing to set" in out
        assert "\x1b[31m" not in out
