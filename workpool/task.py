"""Tasks, their results and the counting semaphore that links them."""

from __future__ import annotations

import abc
import threading
from typing import Any

_EMPTY = object()


class AnyValue:
    """Holds a single value of any type and hands it back by type."""

    __slots__ = ("_data",)

    def __init__(self, data: Any = _EMPTY) -> None:
        self._data = data

    def __repr__(self) -> str:
        if self._data is _EMPTY:
            return "AnyValue()"
        return f"AnyValue({self._data!r})"

    def cast(self, kind: type | tuple[type, ...]) -> Any:
        """Return the held value if it is of ``kind``; raise TypeError otherwise."""
        if self._data is _EMPTY or not isinstance(self._data, kind):
            raise TypeError("type is unmatch")
        return self._data


class Semaphore:
    """A counting semaphore that stops blocking once closed."""

    def __init__(self, limit: int = 0) -> None:
        self._count = limit
        self._cond = threading.Condition()
        self._closed = False

    def wait(self) -> None:
        """Take one unit, blocking until one is available or the semaphore closes."""
        if self._closed:
            return
        with self._cond:
            self._cond.wait_for(lambda: self._count > 0 or self._closed)
            if self._count > 0:
                self._count -= 1

    def post(self) -> None:
        """Release one unit and wake the waiters."""
        if self._closed:
            return
        with self._cond:
            self._count += 1
            self._cond.notify_all()

    def close(self) -> None:
        """Stop the semaphore; waiting and posting become no-ops."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()


class Result:
    """The pending outcome of a task submitted to a pool."""

    def __init__(self, task: Task, valid: bool = True) -> None:
        self._task = task
        self._valid = valid
        self._value = AnyValue()
        self._error: BaseException | None = None
        self._sem = Semaphore()
        task.bind_result(self)

    @property
    def valid(self) -> bool:
        """Whether the task was accepted by the pool."""
        return self._valid

    @property
    def task(self) -> Task:
        return self._task

    def get(self) -> AnyValue:
        """Block until the task has run and return its value.

        A result for a task the pool refused yields an empty string at once.
        If the task raised, the exception is raised here.
        """
        if not self._valid:
            return AnyValue("")
        self._sem.wait()
        if self._error is not None:
            raise self._error
        return self._value

    def set_value(self, value: Any) -> None:
        """Store the task's value and wake whoever waits in get()."""
        self._value = value if isinstance(value, AnyValue) else AnyValue(value)
        self._sem.post()

    def _set_error(self, error: BaseException) -> None:
        self._error = error
        self._sem.post()


class Task(abc.ABC):
    """Base class for user work: subclasses implement run()."""

    _result: Result | None = None

    @abc.abstractmethod
    def run(self) -> Any:
        """Do the work and return its value."""

    def bind_result(self, result: Result) -> None:
        """Attach the result object that receives this task's value."""
        self._result = result

    def execute(self) -> None:
        """Run the task and deliver its value, or its exception, to the result."""
        result = self._result
        if result is None:
            raise RuntimeError("task has no result bound")
        try:
            value = self.run()
        except Exception as exc:  # delivered to the caller of Result.get()
            result._set_error(exc)
            return
        result.set_value(value)