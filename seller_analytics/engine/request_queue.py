"""
Request Queue: bounded-concurrency FIFO scheduler for backend fetches.

Views that need per-article details issue one request per article; the
analytics backend is rate limited, so the requests go through this queue.
At most ``max_concurrent`` tasks are in flight, tasks start in submission
order, and a slot reopens only ``delay_between_starts`` seconds after the
task occupying it settles.

Everything runs on a single asyncio event loop, so the pending deque and
the running counter need no locking.
"""

import asyncio
from collections import deque
from typing import Awaitable, Callable, Optional, TypeVar

from seller_analytics.config import get_settings
from seller_analytics.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

QueueTask = Callable[[], Awaitable[T]]


class RequestQueue:
    """
    FIFO task scheduler capping simultaneous in-flight async operations.

    A failing task rejects only its own future; the queue keeps draining.
    There is no timeout or cancellation for running tasks: a task that never
    settles keeps its slot.

    Attributes:
        max_concurrent: Maximum number of tasks running at once
        delay_between_starts: Seconds to wait after a task settles before
            its slot is released

    Example:
        >>> queue = RequestQueue(max_concurrent=2, delay_between_starts=0.2)
        >>> article = await queue.add(lambda: client.get_article(nm_id))
    """

    def __init__(self, max_concurrent: int = 2, delay_between_starts: float = 0.2):
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {max_concurrent}")
        if delay_between_starts < 0:
            raise ValueError(
                f"delay_between_starts must be >= 0, got {delay_between_starts}"
            )
        self.max_concurrent = max_concurrent
        self.delay_between_starts = delay_between_starts
        self._queue: deque[tuple[QueueTask, asyncio.Future]] = deque()
        self._running = 0
        # Strong references so runner tasks are not garbage collected mid-flight
        self._runners: set[asyncio.Task] = set()

    def add(self, task: QueueTask[T]) -> "asyncio.Future[T]":
        """
        Enqueue a task and return a future settling with its outcome.

        The task is queued synchronously, so calling ``add`` several times in
        a row fixes the start order even before anything is awaited.

        Args:
            task: Zero-argument callable returning an awaitable

        Returns:
            Future resolved with the task's result or rejected with its exception

        Raises:
            RuntimeError: If called without a running event loop
        """
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._queue.append((task, future))
        self._process()
        return future

    def clear(self) -> int:
        """
        Drop every task that has not started yet.

        Running tasks are unaffected. Futures of dropped tasks are left
        pending: they are neither resolved nor rejected.

        Returns:
            Number of tasks dropped
        """
        dropped = len(self._queue)
        self._queue.clear()
        if dropped:
            logger.debug("request_queue_cleared", dropped=dropped, running=self._running)
        return dropped

    def get_queue_length(self) -> int:
        """Number of tasks waiting to start."""
        return len(self._queue)

    def get_running_count(self) -> int:
        """Number of occupied slots, including slots in their post-task delay."""
        return self._running

    def _process(self) -> None:
        while self._running < self.max_concurrent and self._queue:
            task, future = self._queue.popleft()
            self._running += 1
            runner = asyncio.ensure_future(self._run(task, future))
            self._runners.add(runner)
            runner.add_done_callback(self._runners.discard)

    async def _run(self, task: QueueTask, future: asyncio.Future) -> None:
        # A cancelled runner means the loop is going away; nothing new may start on it
        cancelled = False
        try:
            try:
                result = await task()
            except asyncio.CancelledError:
                future.cancel()
                raise
            except BaseException as exc:
                logger.debug("request_queue_task_failed", error=str(exc), error_type=type(exc).__name__)
                if not future.done():
                    future.set_exception(exc)
            else:
                if not future.done():
                    future.set_result(result)

            if self.delay_between_starts > 0:
                await asyncio.sleep(self.delay_between_starts)
        except asyncio.CancelledError:
            cancelled = True
            raise
        finally:
            self._running -= 1
            if not cancelled:
                self._process()


_shared_queue: Optional[RequestQueue] = None


def get_analytics_request_queue() -> RequestQueue:
    """
    Get the process-wide queue for analytics detail requests.

    Created on first use from settings.
    """
    global _shared_queue
    if _shared_queue is None:
        settings = get_settings()
        _shared_queue = RequestQueue(
            max_concurrent=settings.request_queue_max_concurrent,
            delay_between_starts=settings.request_queue_delay_seconds,
        )
    return _shared_queue


def reset_analytics_request_queue() -> None:
    """Forget the shared queue (tests and event-loop restarts)."""
    global _shared_queue
    _shared_queue = None


__all__ = [
    "RequestQueue",
    "get_analytics_request_queue",
    "reset_analytics_request_queue",
]
