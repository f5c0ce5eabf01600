"""Detached asyncio tasks that outlive the request which scheduled them."""
import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class BackgroundTaskRunner:
    """
    Owns fire-and-forget tasks scheduled from request handlers.

    Tasks are created on the running event loop, not inside the request's
    cancellation scope, so cancelling the request that spawned a task does not
    cancel the task. The runner keeps a strong reference to every pending task
    (the event loop only keeps weak ones) and logs any exception a task ends
    with instead of letting it surface as "Task exception was never retrieved".
    """

    def __init__(self, shutdown_timeout_seconds: float = 5.0):
        """
        Initialize the runner.

        Args:
            shutdown_timeout_seconds: How long drain() waits for pending tasks
                before cancelling the rest.
        """
        self.shutdown_timeout_seconds = shutdown_timeout_seconds
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task:
        """
        Schedule a coroutine as a detached task and return immediately.

        Args:
            coro: The coroutine to run
            name: Optional task name used in log lines

        Returns:
            The scheduled task (callers normally ignore it)
        """
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        logger.debug("Scheduled background task %s", task.get_name())
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("Background task %s was cancelled", task.get_name())
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Background task %s failed: %s",
                task.get_name(),
                exc,
                exc_info=(type(exc), exc, exc.__traceback__),
            )

    async def drain(self, timeout: float | None = None) -> None:
        """
        Wait for pending tasks, cancelling whatever is still running after the timeout.

        Called from application shutdown; completion of every task is not guaranteed.
        """
        if not self._tasks:
            return
        timeout = self.shutdown_timeout_seconds if timeout is None else timeout
        pending = set(self._tasks)
        logger.info("Waiting up to %.1fs for %d background task(s)", timeout, len(pending))
        _, still_running = await asyncio.wait(pending, timeout=timeout)
        for task in still_running:
            task.cancel()
        if still_running:
            logger.warning("Cancelled %d background task(s) at shutdown", len(still_running))
            await asyncio.gather(*still_running, return_exceptions=True)
