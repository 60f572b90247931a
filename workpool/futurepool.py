"""A thread pool that runs plain callables and hands back futures."""

from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Callable

from .pool import SUBMIT_TIMEOUT, THREAD_MAX_IDLE_TIME, ThreadPool
from .task import Task

TASK_MAX_THRESHOLD = 2


class _CallableTask(Task):
    """Wraps a callable and its arguments; delivers the outcome to a future."""

    def __init__(
        self, func: Callable[..., Any], args: tuple, kwargs: dict, future: Future
    ) -> None:
        self._func = func
        self._args = args
        self._kwargs = kwargs
        self._future = future

    def run(self) -> Any:
        return self._func(*self._args, **self._kwargs)

    def execute(self) -> None:
        if not self._future.set_running_or_notify_cancel():
            return
        try:
            value = self.run()
        except BaseException as exc:  # handed to whoever reads the future
            self._future.set_exception(exc)
        else:
            self._future.set_result(value)


class FuturePool(ThreadPool):
    """A ThreadPool whose submit() takes any callable and returns a Future.

    The task queue holds at most two entries unless configured otherwise.
    When the queue stays full past the submit timeout, the returned future
    is already resolved with None.
    """

    def __init__(
        self,
        submit_timeout: float = SUBMIT_TIMEOUT,
        max_idle_time: float = THREAD_MAX_IDLE_TIME,
    ) -> None:
        super().__init__(submit_timeout=submit_timeout, max_idle_time=max_idle_time)
        self.set_task_queue_max_threshold(TASK_MAX_THRESHOLD)

    def submit(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Queue ``func(*args, **kwargs)`` and return a future for its value."""
        future: Future = Future()
        task = _CallableTask(func, args, kwargs, future)
        result = self.submit_task(task)
        if not result.valid:
            fallback: Future = Future()
            fallback.set_running_or_notify_cancel()
            fallback.set_result(None)
            return fallback
        return future