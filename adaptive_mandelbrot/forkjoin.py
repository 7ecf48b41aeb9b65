"""Bounded fork-join pool for the recursive partition scheduler."""

from __future__ import annotations

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Sequence

from .errors import ResourceError

logger = logging.getLogger(__name__)

Task = tuple[Callable[..., Any], tuple]


class ForkJoinPool:
    """Run groups of tasks on a fixed number of worker threads and join them.

    A parent blocked in :meth:`invoke_all` never waits on a task that has not
    started: pending children are cancelled and executed by the parent itself.
    Nested joins therefore cannot exhaust the pool.

    Tasks run on threads, so CPU-bound mpmath work only runs in parallel on
    free-threaded builds of Python; elsewhere ``workers > 1`` gives the same
    result without a speedup.
    """

    def __init__(self, workers: int | None = None) -> None:
        if workers is None:
            workers = os.cpu_count() or 1
        if workers < 1:
            raise ValueError(f"worker count must be positive, got {workers}")
        self.workers = workers
        self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="partition")
        logger.debug("Started fork-join pool with %d workers", workers)

    def __enter__(self) -> "ForkJoinPool":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)

    def _fork(self, fn: Callable[..., Any], args: tuple) -> Future:
        try:
            return self._executor.submit(fn, *args)
        except RuntimeError as exc:
            raise ResourceError(f"cannot schedule partition task: {exc}") from exc

    def invoke_all(self, tasks: Sequence[Task]) -> list[Any]:
        """Run ``tasks`` concurrently and return their results in order.

        The first task runs on the calling thread. If any task raises, the
        remaining ones are cancelled or awaited before the error propagates.
        """

        if not tasks:
            return []

        forked: list[tuple[Future, Callable[..., Any], tuple]] = []
        try:
            for fn, args in tasks[1:]:
                forked.append((self._fork(fn, args), fn, args))

            first_fn, first_args = tasks[0]
            results = [first_fn(*first_args)]
            for future, fn, args in forked:
                if future.cancel():
                    results.append(fn(*args))
                else:
                    results.append(future.result())
            return results
        except BaseException:
            running = [future for future, _, _ in forked if not future.cancel()]
            wait(running)
            raise
