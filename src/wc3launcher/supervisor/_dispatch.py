"""Dispatcher implementations for the process supervisor.

Drain tasks and the exit watcher never call into the presentation layer
directly; they post callbacks through a Dispatcher.
"""

import math
from collections.abc import Callable
from typing import TYPE_CHECKING, final

import anyio

from wc3launcher.utils import create_logger

if TYPE_CHECKING:
    from anyio.streams.memory import (
        MemoryObjectReceiveStream,
        MemoryObjectSendStream,
    )
    from structlog.typing import FilteringBoundLogger


@final
class DirectDispatcher:
    """Dispatcher that runs callbacks immediately.

    Suitable when the presentation layer lives on the same event loop as
    the supervisor, so there is no other context to marshal onto.
    """

    __slots__ = ("_logger",)

    def __init__(
        self,
        logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
    ) -> None:
        self._logger = logger

    def post(self, callback: Callable[[], object]) -> None:
        try:
            _ = callback()
        except Exception as e:  # noqa: BLE001
            if self._logger is None:
                self._logger = create_logger()
            self._logger.warning("dispatch_callback_failed", error=str(e))


@final
class QueuedDispatcher:
    """Dispatcher that queues callbacks for a pump task to run.

    ``post`` never blocks and never runs the callback inline. The
    presentation layer runs :meth:`run` in its own task; callbacks execute
    there in posting order. After :meth:`close`, pending callbacks are still
    run and later posts are dropped.
    """

    __slots__ = ("_logger", "_receive", "_send")

    def __init__(
        self,
        logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
    ) -> None:
        """Initialize the dispatcher.

        Args:
            logger: Logger for callback failures. Created on demand if None.
        """
        self._logger = logger
        send, receive = anyio.create_memory_object_stream[Callable[[], object]](
            math.inf
        )
        self._send: MemoryObjectSendStream[Callable[[], object]] = send
        self._receive: MemoryObjectReceiveStream[Callable[[], object]] = receive

    def post(self, callback: Callable[[], object]) -> None:
        try:
            self._send.send_nowait(callback)
        except (anyio.ClosedResourceError, anyio.BrokenResourceError):
            # Presentation context has shut down
            pass

    def close(self) -> None:
        """Stop accepting callbacks; :meth:`run` returns once drained."""
        self._send.close()

    async def run(self) -> None:
        """Run posted callbacks until the dispatcher is closed."""
        async with self._receive:
            async for callback in self._receive:
                try:
                    _ = callback()
                except Exception as e:  # noqa: BLE001
                    if self._logger is None:
                        self._logger = create_logger()
                    self._logger.warning("dispatch_callback_failed", error=str(e))
