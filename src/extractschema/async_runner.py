"""Helpers to run blocking extraction work from sync or async contexts."""

from __future__ import annotations

import asyncio
import threading
from queue import Queue
from typing import TYPE_CHECKING, Any

from extractschema.exceptions import AsyncExecutionError

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine, Sequence


def _run_in_background_thread[T](coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine in a dedicated thread with its own event loop.

    Args:
        coro: The coroutine to run.

    Raises:
        AsyncExecutionError: If the coroutine raises an exception.

    Returns:
        The result of the coroutine.
    """
    output: Queue[T | BaseException] = Queue(maxsize=1)

    def _runner() -> None:
        try:
            output.put(asyncio.run(coro))
        except BaseException as exc:  # noqa: BLE001
            output.put(exc)

    thread = threading.Thread(target=_runner, daemon=True)
    thread.start()
    thread.join()

    result = output.get()
    if isinstance(result, BaseException):
        raise AsyncExecutionError(result=result) from result
    return result


def run_async[T](coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine from both sync and async contexts.

    Without a running loop the coroutine runs through `asyncio.run`; inside a
    running loop it runs on a dedicated thread with its own loop.

    Args:
        coro: The coroutine to run.

    Returns:
        The result of the coroutine.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    return _run_in_background_thread(coro)


async def gather_in_threads[T, R](
    func: Callable[[T], R],
    items: Sequence[T],
    *,
    concurrency: int,
) -> list[R | Exception]:
    """Apply a blocking function to every item on worker threads.

    At most `concurrency` calls run at once. Results keep the order of `items`;
    a call that raises yields its exception in place of a result.

    Args:
        func: Blocking function applied to each item.
        items: Inputs.
        concurrency: Maximum number of concurrent calls.

    Returns:
        Results or exceptions, one per item.
    """
    semaphore = asyncio.Semaphore(max(concurrency, 1))

    async def _run_one(item: T) -> R:
        async with semaphore:
            return await asyncio.to_thread(func, item)

    results = await asyncio.gather(*[_run_one(item) for item in items], return_exceptions=True)
    outcomes: list[R | Exception] = []
    for result in results:
        if isinstance(result, BaseException) and not isinstance(result, Exception):
            raise result
        outcomes.append(result)
    return outcomes
