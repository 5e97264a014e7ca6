"""Data models for the process supervisor.

This module defines the core data types for worker supervision:
- Expansion: Game expansion passed to the worker
- WorkerSpec: Immutable, validated worker invocation
- SupervisorState: Lifecycle states of the supervisor
- StopOutcome: Observable result of a stop request
- ProcessGeneration: One worker process plus its drains and cancel scope
"""

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

import anyio
import anyio.abc


class Expansion(StrEnum):
    """Game expansion the worker proxies for.

    The value is the literal token passed on the worker command line.
    """

    ROC = "RoC"
    TFT = "TFT"

    @classmethod
    def from_flag(cls, *, is_tft: bool) -> "Expansion":  # noqa: UP037
        """Map the persisted ``IsTft`` flag to an expansion."""
        return cls.TFT if is_tft else cls.ROC


class SupervisorState(StrEnum):
    """Supervisor lifecycle states.

    - IDLE: No worker has been started yet (or the last start failed)
    - STARTING: A start is resolving the binary and spawning the process
    - RUNNING: A worker process is live
    - STOPPING: A stop is cancelling drains and terminating the worker
    - EXITED: The last worker process has exited

    STARTING and STOPPING are transient and only block re-entrant calls.
    """

    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    EXITED = "exited"


class StopOutcome(StrEnum):
    """Result of a stop request.

    - NOT_RUNNING: There was no worker to stop
    - ALREADY_EXITED: The worker had exited on its own before the stop
    - EXITED: Termination was requested and the exit was confirmed
    - TIMED_OUT: Exit was not confirmed within the stop timeout; the
      handle was retired anyway
    """

    NOT_RUNNING = "not_running"
    ALREADY_EXITED = "already_exited"
    EXITED = "exited"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True, slots=True)
class WorkerSpec:
    """Immutable description of how to invoke the worker.

    Only constructed from validated input; see
    :func:`wc3launcher.validation.build_worker_spec`.

    Attributes:
        address: IPv4 dotted-quad of the game host.
        version: Game version, ``1.2x`` or ``1.3x``.
        expansion: Game expansion.
    """

    address: str
    version: str
    expansion: Expansion

    def arguments(self) -> tuple[str, ...]:
        """Return the three positional worker arguments, in order."""
        return (self.address, self.version, self.expansion.value)

    def command(self, executable: Path) -> tuple[str, ...]:
        """Return the argv used to spawn the worker without a shell."""
        return (str(executable), *self.arguments())

    def command_line(self, executable: Path) -> str:
        """Render the invocation the way it is shown to the operator.

        Address and version are always quoted; the expansion token is not.
        """
        return f'{executable} "{self.address}" "{self.version}" {self.expansion.value}'


@dataclass(slots=True, eq=False)
class ProcessGeneration:
    """One worker process together with the resources retired alongside it.

    The process handle, its two drain tasks, and the cancel scope shared by
    those drains are created by a single start and retired together.

    Attributes:
        number: Monotonic generation counter, starting at 1.
        process: The worker process handle.
        command: The argv the process was spawned with.
        drain_scope: Cancel scope shared by both drain tasks.
        drains_done: Set once both drain tasks have finished.
        retired: Set once the handle has been closed after exit.
        exit_code: Exit code once the process has exited.
        finished: Set once the exit has been reported to the sink and observer.
    """

    number: int
    process: anyio.abc.Process
    command: tuple[str, ...]
    drain_scope: anyio.CancelScope = field(default_factory=anyio.CancelScope)
    drains_done: anyio.Event = field(default_factory=anyio.Event)
    retired: anyio.Event = field(default_factory=anyio.Event)
    exit_code: int | None = None
    finished: bool = False

    @property
    def pid(self) -> int:
        """Return the OS process ID of the worker."""
        return self.process.pid

    def cancel_drains(self) -> None:
        """Cancel both drain tasks. Safe to call any number of times."""
        self.drain_scope.cancel()
