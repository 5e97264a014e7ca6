"""Process supervisor package for the worker executable.

This package starts the worker, streams its output, and stops it safely,
including while the host application is shutting down.

Key Components:
    - WorkerSpec: Validated worker invocation
    - Expansion: Game expansion token passed to the worker
    - SupervisorState: Lifecycle state enumeration
    - StopOutcome: Result of a stop request
    - OutputSink: Protocol for output consumption
    - LifecycleObserver: Protocol for exit notifications
    - Dispatcher: Protocol for marshaling onto the presentation context
    - ConsoleOutputSink: Rich console output implementation
    - BufferOutputSink: In-memory scroll-back implementation
    - ProcessSupervisor: Single worker lifecycle manager

Example:
    >>> from wc3launcher.resolver import BinaryResolver
    >>> from wc3launcher.supervisor import ConsoleOutputSink, ProcessSupervisor
    >>> from wc3launcher.validation import build_worker_spec
    >>> spec = build_worker_spec("1.0.0.1", "1.29", is_tft=False)
    >>> async with ProcessSupervisor(BinaryResolver(), ConsoleOutputSink()) as sup:
    ...     await sup.start(spec)
"""

from ._dispatch import DirectDispatcher, QueuedDispatcher
from ._models import (
    Expansion,
    ProcessGeneration,
    StopOutcome,
    SupervisorState,
    WorkerSpec,
)
from ._output import BufferOutputSink, ConsoleOutputSink
from ._protocol import Dispatcher, ExecutableResolver, LifecycleObserver, OutputSink
from ._supervisor import DEFAULT_DRAIN_GRACE, DEFAULT_STOP_TIMEOUT, ProcessSupervisor

__all__ = [
    "DEFAULT_DRAIN_GRACE",
    "DEFAULT_STOP_TIMEOUT",
    "BufferOutputSink",
    "ConsoleOutputSink",
    "DirectDispatcher",
    "Dispatcher",
    "ExecutableResolver",
    "Expansion",
    "LifecycleObserver",
    "OutputSink",
    "ProcessGeneration",
    "ProcessSupervisor",
    "QueuedDispatcher",
    "StopOutcome",
    "SupervisorState",
    "WorkerSpec",
]
