"""Process supervisor for the worker executable.

This module provides the ProcessSupervisor class that starts the worker,
drains its stdout and stderr concurrently into an OutputSink, and stops it
within a bounded time.
"""

import os
import subprocess
import sys
from contextlib import AsyncExitStack
from functools import partial
from types import TracebackType
from typing import TYPE_CHECKING, Literal, Self, final

import anyio
import anyio.abc
import anyio.to_thread
import psutil
from anyio.streams.text import TextReceiveStream

from wc3launcher.exceptions import (
    BinaryNotFoundError,
    LaunchError,
    SpawnFailedError,
    SupervisorBusyError,
)
from wc3launcher.utils import create_logger

from ._dispatch import DirectDispatcher
from ._models import (
    ProcessGeneration,
    StopOutcome,
    SupervisorState,
    WorkerSpec,
)
from ._protocol import Dispatcher, ExecutableResolver, LifecycleObserver, OutputSink

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

DEFAULT_STOP_TIMEOUT = 3.0
DEFAULT_DRAIN_GRACE = 1.0


@final
class ProcessSupervisor:
    """Supervises a single worker process.

    At most one worker process is live at a time. Each start creates a new
    process generation: the process handle, one drain task per output
    stream, and a cancel scope shared by those drains. A generation is
    retired as a unit once the process has exited and both drains finished.

    The supervisor owns a task group and must be used as an async context
    manager. Leaving the context stops the worker (bounded by
    ``stop_timeout``), so the host cannot exit with a live child.

    Example:
        >>> async with ProcessSupervisor(resolver, sink, observer) as supervisor:
        ...     await supervisor.start(spec)
        ...     ...
        ...     await supervisor.stop()
    """

    __slots__ = (
        "_dispatcher",
        "_drain_grace",
        "_exit_stack",
        "_generation",
        "_generation_count",
        "_last_exit_code",
        "_logger",
        "_observer",
        "_output_sink",
        "_resolver",
        "_state",
        "_stop_timeout",
        "_task_group",
    )

    def __init__(  # noqa: PLR0913
        self,
        resolver: ExecutableResolver,
        output_sink: OutputSink,
        observer: LifecycleObserver | None = None,
        *,
        dispatcher: Dispatcher | None = None,
        stop_timeout: float = DEFAULT_STOP_TIMEOUT,
        drain_grace: float = DEFAULT_DRAIN_GRACE,
        logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
    ) -> None:
        """Initialize the supervisor.

        Args:
            resolver: Produces the worker executable path on each start.
            output_sink: Receives worker output and launcher messages.
            observer: Notified once per generation when the worker exits.
            dispatcher: Marshals sink and observer calls. Runs them directly
                if None.
            stop_timeout: Seconds ``stop`` waits for exit confirmation.
            drain_grace: Seconds to let drains reach end-of-stream after the
                process exited before cancelling them.
            logger: Structured logger. Uses the default log file if None.
        """
        self._resolver = resolver
        self._output_sink = output_sink
        self._observer = observer
        self._logger = logger
        self._dispatcher: Dispatcher = dispatcher or DirectDispatcher(logger)
        self._stop_timeout = stop_timeout
        self._drain_grace = drain_grace
        self._state = SupervisorState.IDLE
        self._generation: ProcessGeneration | None = None
        self._generation_count = 0
        self._last_exit_code: int | None = None
        self._exit_stack: AsyncExitStack | None = None
        self._task_group: anyio.abc.TaskGroup | None = None

    @property
    def logger(self) -> "FilteringBoundLogger":  # noqa: UP037
        if self._logger is None:
            self._logger = create_logger()
        return self._logger

    @property
    def state(self) -> SupervisorState:
        """Return the current supervisor state."""
        return self._state

    @property
    def pid(self) -> int | None:
        """Return the worker's process ID if one is live, None otherwise."""
        return self._generation.pid if self._generation is not None else None

    @property
    def command(self) -> tuple[str, ...] | None:
        """Return the argv of the live worker, None if none is live."""
        return self._generation.command if self._generation is not None else None

    @property
    def generation(self) -> int:
        """Return the number of the most recent process generation."""
        return self._generation_count

    @property
    def last_exit_code(self) -> int | None:
        """Return the exit code of the last retired worker, if known."""
        return self._last_exit_code

    def is_running(self) -> bool:
        """Check if a worker process is currently live."""
        return self._state == SupervisorState.RUNNING and self._generation is not None

    async def __aenter__(self) -> Self:
        stack = AsyncExitStack()
        self._task_group = await stack.enter_async_context(anyio.create_task_group())
        self._exit_stack = stack
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        with anyio.CancelScope(shield=True):
            _ = await self.stop()

        # Exit watchers of generations abandoned after a stop timeout
        if self._task_group is not None:
            self._task_group.cancel_scope.cancel()

        stack, self._exit_stack, self._task_group = self._exit_stack, None, None
        if stack is None:
            return None
        return await stack.__aexit__(exc_type, exc_val, exc_tb)

    async def start(self, spec: WorkerSpec) -> None:
        """Start the worker.

        If a worker is already running it is stopped first (bounded by the
        stop timeout), so callers never need to stop before starting.

        Args:
            spec: Validated worker invocation.

        Raises:
            BinaryNotFoundError: If the worker executable cannot be resolved.
            SpawnFailedError: If the OS refuses to create the process.
            SupervisorBusyError: If a start or stop is already in progress.
        """
        task_group = self._require_task_group()

        if self._state in (SupervisorState.STARTING, SupervisorState.STOPPING):
            msg = f"Cannot start worker while supervisor is {self._state.value}"
            raise SupervisorBusyError(msg)

        if self._state == SupervisorState.RUNNING:
            _ = await self.stop()

        self._state = SupervisorState.STARTING
        try:
            executable = await anyio.to_thread.run_sync(self._resolver.resolve)
            if executable is None:
                msg = "Embedded worker executable not found"
                raise BinaryNotFoundError(msg)

            command = spec.command(executable)
            process = await self._spawn(command)
        except LaunchError as e:
            self._state = SupervisorState.IDLE
            self.logger.warning("worker_start_failed", error=str(e))
            raise

        self._generation_count += 1
        generation = ProcessGeneration(
            number=self._generation_count,
            process=process,
            command=command,
        )
        self._generation = generation
        self._state = SupervisorState.RUNNING

        self.logger.info(
            "worker_started",
            pid=generation.pid,
            generation=generation.number,
            command=spec.command_line(executable),
        )

        task_group.start_soon(
            self._supervise, generation, name=f"wc3launcher-worker-{generation.number}"
        )

    async def restart(self, spec: WorkerSpec) -> None:
        """Stop the running worker, if any, and start a new one.

        Raises:
            BinaryNotFoundError: If the worker executable cannot be resolved.
            SpawnFailedError: If the OS refuses to create the process.
            SupervisorBusyError: If a start or stop is already in progress.
        """
        _ = await self.stop()
        await self.start(spec)

    async def stop(self) -> StopOutcome:
        """Stop the worker.

        Cancels both drains, force-kills the worker and its child processes
        if it is still alive, and waits up to ``stop_timeout`` seconds for
        the exit to be confirmed. On timeout the generation is retired anyway.
        Never raises.

        Returns:
            How the stop concluded.
        """
        generation = self._generation
        if generation is None or generation.finished:
            return StopOutcome.NOT_RUNNING

        self._state = SupervisorState.STOPPING
        generation.cancel_drains()

        already_exited = generation.process.returncode is not None
        if not already_exited:
            self._kill_tree(generation)

        with anyio.move_on_after(self._stop_timeout):
            await generation.retired.wait()

        if generation.retired.is_set():
            outcome = (
                StopOutcome.ALREADY_EXITED if already_exited else StopOutcome.EXITED
            )
            self.logger.info(
                "worker_stopped",
                pid=generation.pid,
                generation=generation.number,
                outcome=outcome.value,
                exit_code=generation.exit_code,
            )
            return outcome

        self.logger.warning(
            "stop_timeout",
            pid=generation.pid,
            generation=generation.number,
            timeout=self._stop_timeout,
        )
        self._finish(generation, announce=False)
        return StopOutcome.TIMED_OUT

    def _require_task_group(self) -> anyio.abc.TaskGroup:
        if self._task_group is None:
            msg = "ProcessSupervisor must be entered with 'async with' before use"
            raise RuntimeError(msg)
        return self._task_group

    async def _spawn(self, command: tuple[str, ...]) -> anyio.abc.Process:
        """Spawn the worker with piped output and no shell.

        Raises:
            SpawnFailedError: If the OS refuses to create the process.
        """
        # Own session on POSIX so the whole tree can be found and killed;
        # no console window on Windows.
        creationflags = subprocess.CREATE_NO_WINDOW if sys.platform == "win32" else 0
        try:
            return await anyio.open_process(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                creationflags=creationflags,
                start_new_session=sys.platform != "win32",
            )
        except OSError as e:
            msg = f"Failed to start process: {e}"
            raise SpawnFailedError(msg, command=command, cause=e) from e

    def _kill_tree(self, generation: ProcessGeneration) -> None:
        """Force-kill the worker and every descendant process."""
        try:
            children = psutil.Process(generation.pid).children(recursive=True)
        except psutil.Error:
            children = []

        for child in children:
            try:
                child.kill()
            except psutil.NoSuchProcess:
                continue
            except psutil.Error as e:
                self.logger.warning(
                    "worker_child_kill_failed", pid=child.pid, error=str(e)
                )

        try:
            generation.process.kill()
        except ProcessLookupError:
            # Exited between the returncode check and the kill
            pass
        except OSError as e:
            self.logger.warning(
                "worker_kill_failed", pid=generation.pid, error=str(e)
            )
            self._emit_line(f"[stop error] {e}{os.linesep}")

    async def _supervise(self, generation: ProcessGeneration) -> None:
        """Drain output, wait for exit, then retire the generation."""
        try:
            async with anyio.create_task_group() as tg:
                tg.start_soon(self._drain_streams, generation)

                generation.exit_code = await generation.process.wait()

                # Drains normally hit end-of-stream right after exit, unless a
                # grandchild still holds the pipes open.
                with anyio.move_on_after(self._drain_grace):
                    await generation.drains_done.wait()
                generation.cancel_drains()
        finally:
            with anyio.CancelScope(shield=True):
                await self._retire(generation)

    async def _retire(self, generation: ProcessGeneration) -> None:
        """Close the handle's streams and report the exit."""
        generation.cancel_drains()
        process = generation.process
        for stream in (process.stdout, process.stderr):
            if stream is not None:
                await stream.aclose()

        self.logger.info(
            "worker_exited",
            pid=generation.pid,
            generation=generation.number,
            exit_code=generation.exit_code,
        )
        self._finish(generation, announce=True)
        generation.retired.set()

    def _finish(self, generation: ProcessGeneration, *, announce: bool) -> None:
        """Transition to EXITED and notify the observer, once per generation."""
        if generation.finished:
            return
        generation.finished = True

        if self._generation is generation:
            self._generation = None
            self._last_exit_code = generation.exit_code
            self._state = SupervisorState.EXITED

        if announce:
            self._emit_line(_exit_line(generation.exit_code))

        if self._observer is not None:
            self._dispatcher.post(
                partial(
                    self._observer.on_exited, generation.exit_code, generation.number
                )
            )

    async def _drain_streams(self, generation: ProcessGeneration) -> None:
        """Run one drain per output stream under the generation's cancel scope."""
        process = generation.process
        try:
            with generation.drain_scope:
                async with anyio.create_task_group() as tg:
                    if process.stdout is not None:
                        tg.start_soon(self._drain, generation, process.stdout, "stdout")
                    if process.stderr is not None:
                        tg.start_soon(self._drain, generation, process.stderr, "stderr")
        finally:
            generation.drains_done.set()

    async def _drain(
        self,
        generation: ProcessGeneration,
        stream: anyio.abc.ByteReceiveStream,
        stream_name: Literal["stdout", "stderr"],
    ) -> None:
        """Forward lines from one output stream to the sink until EOF.

        Each line keeps its own terminator; a final unterminated line gets
        the platform line separator.
        """
        text_stream = TextReceiveStream(stream, encoding="utf-8", errors="replace")
        pending = ""
        try:
            async for chunk in text_stream:
                pending += chunk
                while (index := pending.find("\n")) != -1:
                    line, pending = pending[: index + 1], pending[index + 1 :]
                    if generation.drain_scope.cancel_called:
                        return
                    self._emit_line(line)
        except (anyio.ClosedResourceError, anyio.BrokenResourceError):
            # Stream closed while retiring the handle
            return
        except Exception as e:  # noqa: BLE001
            self.logger.warning(
                "stream_read_failed",
                pid=generation.pid,
                stream=stream_name,
                error=str(e),
            )
            self._emit_line(f"[{stream_name} reader error] {e}{os.linesep}")
            return

        if pending and not generation.drain_scope.cancel_called:
            self._emit_line(pending + os.linesep)

    def _emit_line(self, line: str) -> None:
        """Post a line to the output sink if it is still available."""
        sink = self._output_sink
        if sink.is_available():
            self._dispatcher.post(partial(sink.append, line))


def _exit_line(exit_code: int | None) -> str:
    if exit_code is None:
        return f"[process exited]{os.linesep}"
    return f"[process exited with code {exit_code}]{os.linesep}"
