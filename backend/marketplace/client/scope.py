"""
Task scope tied to a view's lifetime.

A view spawns its requests inside a ViewScope. Closing the scope cancels
whatever is still in flight, and `run_latest` guarantees that a response is
applied only if the view is still open and no newer request of the same kind
has started since.
"""

import asyncio
from typing import Any, Awaitable, Callable, Coroutine, Optional, TypeVar

from marketplace.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ScopeClosed(RuntimeError):
    pass


class ViewScope:
    def __init__(self, name: str = "view"):
        self.name = name
        self._tasks: set[asyncio.Task] = set()
        self._closed = False
        self._generation = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def spawn(self, coro: Coroutine[Any, Any, T]) -> "asyncio.Task[T]":
        if self._closed:
            coro.close()
            raise ScopeClosed(f"Scope '{self.name}' is closed")
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def run_latest(
        self,
        coro: Coroutine[Any, Any, T],
        apply: Callable[[T], Optional[Awaitable[None]]],
    ) -> bool:
        """
        Run `coro` and hand its result to `apply`.

        Returns False without calling `apply` when the scope closed or a newer
        run_latest started in the meantime. Exceptions from `coro` propagate,
        unless the result would have been dropped anyway.
        """
        self._generation += 1
        generation = self._generation
        task = self.spawn(coro)
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise

        if self._closed or task.cancelled() or generation != self._generation:
            if not task.cancelled() and task.exception() is not None:
                logger.debug("stale_failure_dropped", scope=self.name, error=str(task.exception()))
            else:
                logger.debug("stale_result_dropped", scope=self.name)
            return False

        result = task.result()
        outcome = apply(result)
        if asyncio.iscoroutine(outcome):
            await outcome
        return True

    def invalidate(self) -> None:
        """Drop the result of any run_latest still in flight."""
        self._generation += 1

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        pending = [task for task in self._tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            logger.debug("scope_closed", scope=self.name, cancelled=len(pending))

    async def aclose(self) -> None:
        """Close and wait until the cancelled tasks have finished unwinding."""
        tasks = list(self._tasks)
        self.close()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
