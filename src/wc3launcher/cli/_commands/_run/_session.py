"""Launcher session connecting the supervisor to the console.

This module plays the part of the launcher window: it holds the current
settings, flushes them whenever a field changes, starts and stops the
worker, and shows worker output in the console.
"""

import signal
import sys
from typing import TYPE_CHECKING, final

import anyio
import anyio.to_thread

from wc3launcher.exceptions import (
    BinaryNotFoundError,
    LaunchError,
    SettingsIOError,
    ValidationError,
)
from wc3launcher.resolver import BinaryResolver
from wc3launcher.settings import SettingsStore, UserSettings
from wc3launcher.supervisor import (
    ConsoleOutputSink,
    Expansion,
    ProcessSupervisor,
    QueuedDispatcher,
    StopOutcome,
)
from wc3launcher.validation import build_worker_spec

from .._shared import ExitCode

if TYPE_CHECKING:
    from rich.console import Console
    from structlog.typing import FilteringBoundLogger

    from wc3launcher.supervisor import ExecutableResolver

HELP_TEXT = (
    "Commands: start, stop, restart, status, "
    "address <ip>, version <version>, expansion <roc|tft>, quit"
)


@final
class ExitSignal:
    """Lifecycle observer that records worker exits.

    The signal is armed for one generation at a time; exits reported for
    older generations are ignored.

    Attributes:
        exit_code: Exit code reported for the armed generation.
    """

    __slots__ = ("_console", "_event", "_generation", "exit_code")

    def __init__(self, console: "Console | None" = None) -> None:  # noqa: UP037
        self._console = console
        self._event = anyio.Event()
        self._generation = 0
        self.exit_code: int | None = None

    def on_exited(self, exit_code: int | None, generation: int) -> None:
        if generation < self._generation:
            return
        self.exit_code = exit_code
        self._event.set()
        if self._console is not None:
            self._console.print(
                "[dim]Worker stopped. Type 'start' to launch it again.[/dim]"
            )

    def is_set(self) -> bool:
        return self._event.is_set()

    def reset(self, generation: int) -> None:
        """Arm the signal for process generation ``generation``."""
        self._event = anyio.Event()
        self._generation = generation
        self.exit_code = None

    async def wait(self) -> int | None:
        """Wait until the armed generation has exited."""
        await self._event.wait()
        return self.exit_code


@final
class LauncherSession:
    """Operator-facing controller for one supervisor.

    Attributes:
        supervisor: The process supervisor being controlled.
        sink: The console sink worker output is shown in.
    """

    __slots__ = (
        "_console",
        "_exit_signal",
        "_settings",
        "_store",
        "sink",
        "supervisor",
    )

    def __init__(  # noqa: PLR0913
        self,
        supervisor: ProcessSupervisor,
        sink: ConsoleOutputSink,
        store: SettingsStore,
        settings: UserSettings,
        console: "Console",  # noqa: UP037
        exit_signal: ExitSignal,
    ) -> None:
        self.supervisor = supervisor
        self.sink = sink
        self._store = store
        self._settings = settings
        self._console = console
        self._exit_signal = exit_signal

    @property
    def settings(self) -> UserSettings:
        return self._settings

    async def update_settings(
        self,
        *,
        address: str | None = None,
        version: str | None = None,
        expansion: Expansion | None = None,
    ) -> None:
        """Apply field changes and flush them if anything changed."""
        changes: dict[str, object] = {}
        if address is not None:
            changes["address"] = address
        if version is not None:
            changes["version"] = version
        if expansion is not None:
            changes["is_tft"] = expansion == Expansion.TFT

        updated = self._settings.model_copy(update=changes)
        if updated != self._settings:
            self._settings = updated
            _ = await self.save_settings()

    async def save_settings(self) -> bool:
        """Persist the current settings, reporting failure as a message."""
        return await anyio.to_thread.run_sync(
            save_settings, self._store, self._settings, self._console
        )

    async def start(self) -> ExitCode:
        """Validate the current settings and (re)start the worker."""
        try:
            spec = build_worker_spec(
                self._settings.address,
                self._settings.version,
                is_tft=self._settings.is_tft,
            )
        except ValidationError as e:
            self._console.print(f"[red]Error:[/red] {e}")
            return ExitCode.VALIDATION_ERROR

        self.sink.reopen()
        self._exit_signal.reset(self.supervisor.generation + 1)
        try:
            await self.supervisor.start(spec)
        except BinaryNotFoundError:
            self._console.print("[red]Error:[/red] Embedded CLI not found.")
            return ExitCode.NOT_FOUND
        except LaunchError as e:
            self._console.print(f"[red]Error:[/red] {e}")
            return ExitCode.INTERNAL_ERROR

        command_line = spec.command_line(_executable_of(self.supervisor))
        self._console.print(
            f"[green]Started[/green] {command_line} (pid {self.supervisor.pid})"
        )
        return ExitCode.SUCCESS

    async def stop(self) -> StopOutcome:
        """Stop the worker and close the output view."""
        outcome = await self.supervisor.stop()
        self.sink.close()
        if outcome == StopOutcome.TIMED_OUT:
            self._console.print(
                "[yellow]Worker did not confirm exit in time; "
                "it may still be running.[/yellow]"
            )
        elif outcome == StopOutcome.NOT_RUNNING:
            self._console.print("Worker is not running.")
        return outcome

    async def restart(self) -> ExitCode:
        _ = await self.stop()
        return await self.start()

    def status(self) -> None:
        supervisor = self.supervisor
        line = f"state={supervisor.state.value}"
        if supervisor.pid is not None:
            line += f" pid={supervisor.pid}"
        if supervisor.last_exit_code is not None:
            line += f" last_exit_code={supervisor.last_exit_code}"
        settings = self._settings
        line += (
            f" address={settings.address} version={settings.version}"
            f" expansion={settings.expansion.value}"
        )
        self._console.print(line, highlight=False)

    async def handle(self, command_line: str) -> bool:
        """Run one operator command.

        Returns:
            False when the operator asked to quit, True otherwise.
        """
        command, _, argument = command_line.strip().partition(" ")
        command = command.lower()
        argument = argument.strip()

        match command:
            case "":
                pass
            case "start":
                _ = await self.start()
            case "stop":
                _ = await self.stop()
            case "restart":
                _ = await self.restart()
            case "status":
                self.status()
            case "address" if argument:
                await self.update_settings(address=argument)
            case "version" if argument:
                await self.update_settings(version=argument)
            case "expansion" if argument.upper() in Expansion.__members__:
                await self.update_settings(expansion=Expansion[argument.upper()])
            case "quit" | "exit":
                return False
            case _:
                self._console.print(HELP_TEXT)
        return True

    async def run_interactive(self) -> None:
        """Read operator commands from stdin until quit or end of input."""
        self._console.print(HELP_TEXT)
        while True:
            line = await anyio.to_thread.run_sync(
                sys.stdin.readline, abandon_on_cancel=True
            )
            if not line:
                return
            if not await self.handle(line):
                return


def save_settings(
    store: SettingsStore,
    settings: UserSettings,
    console: "Console",  # noqa: UP037
) -> bool:
    """Save settings, printing failures instead of raising.

    Returns:
        True if the settings were written.
    """
    try:
        store.save(settings)
    except SettingsIOError as e:
        console.print(f"[red]Error:[/red] {e}")
        return False
    return True


def _executable_of(supervisor: ProcessSupervisor) -> str:
    """Return the executable of the running worker, for display."""
    command = supervisor.command
    return command[0] if command else "<worker>"


async def _wait_for_shutdown(exit_signal: ExitSignal) -> None:
    """Return when the worker exits or the process receives SIGINT/SIGTERM."""
    async with anyio.create_task_group() as tg:

        async def wait_for_exit() -> None:
            _ = await exit_signal.wait()
            tg.cancel_scope.cancel()

        async def wait_for_signal() -> None:
            with anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM) as signals:
                async for _signum in signals:
                    break
            tg.cancel_scope.cancel()

        tg.start_soon(wait_for_exit)
        if sys.platform != "win32":
            tg.start_soon(wait_for_signal)


async def run_session(  # noqa: PLR0913
    store: SettingsStore,
    settings: UserSettings,
    *,
    console: "Console",  # noqa: UP037
    interactive: bool = False,
    resolver: "ExecutableResolver | None" = None,  # noqa: UP037
    logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
) -> int:
    """Run the launcher until the worker exits or the operator quits.

    The worker is stopped (bounded) before returning, and the settings are
    saved on the way out.

    Returns:
        The process exit code for the CLI.
    """
    dispatcher = QueuedDispatcher(logger)
    sink = ConsoleOutputSink(console)
    exit_signal = ExitSignal(console if interactive else None)
    exit_code: int = ExitCode.SUCCESS

    async with anyio.create_task_group() as tg:
        tg.start_soon(dispatcher.run)
        try:
            async with ProcessSupervisor(
                resolver or BinaryResolver(logger=logger),
                sink,
                exit_signal,
                dispatcher=dispatcher,
                logger=logger,
            ) as supervisor:
                session = LauncherSession(
                    supervisor, sink, store, settings, console, exit_signal
                )
                started = await session.start()

                if interactive:
                    await session.run_interactive()
                elif started == ExitCode.SUCCESS:
                    await _wait_for_shutdown(exit_signal)
                    if exit_signal.exit_code is not None:
                        exit_code = exit_signal.exit_code
                else:
                    exit_code = started

                if supervisor.is_running():
                    _ = await session.stop()
                settings = session.settings
        finally:
            dispatcher.close()

    _ = await anyio.to_thread.run_sync(save_settings, store, settings, console)
    return exit_code
