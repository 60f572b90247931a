"""A pool of worker threads that hand received messages to a handler."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

from .msgqueue import MessageQueue

EMERGENCY_LOG_INTERVAL = 10.0

_log = logging.getLogger(__name__)


@dataclass
class MessageHeader:
    """Bookkeeping recorded alongside a received message."""

    connection: Any = None
    current_sequence: int = 0
    sequence: int = 0


Handler = Callable[[MessageHeader, bytes], Any]


class MessageWorkerPool:
    """Worker threads that take (header, payload) pairs off a queue.

    Each non-empty payload is passed to ``handler(header, payload)``; an
    exception raised by the handler is logged and the worker carries on.
    """

    def __init__(self, handler: Handler) -> None:
        self._handler = handler
        self._queue: MessageQueue[tuple[MessageHeader, bytes]] = MessageQueue()
        self._cond = threading.Condition()
        self._shutdown = False
        self._threads: list[threading.Thread] = []
        self._started = 0
        self._running = 0
        self._last_emergency: float | None = None

    @property
    def thread_count(self) -> int:
        with self._cond:
            return len(self._threads)

    @property
    def running_thread_count(self) -> int:
        """Number of workers currently inside the handler."""
        with self._cond:
            return self._running

    @property
    def recv_queue_count(self) -> int:
        """Number of messages waiting to be handled."""
        return len(self._queue)

    def create(self, thread_num: int) -> None:
        """Start ``thread_num`` workers and wait until every one is running."""
        if thread_num < 0:
            raise ValueError("thread count must not be negative")
        with self._cond:
            if self._shutdown:
                raise RuntimeError("pool has been stopped")
            target = self._started + thread_num
            for _ in range(thread_num):
                thread = threading.Thread(
                    target=self._worker_loop,
                    name=f"msgworker-{len(self._threads)}",
                    daemon=True,
                )
                self._threads.append(thread)
                thread.start()
            self._cond.wait_for(lambda: self._started >= target)

    def stop_all(self) -> None:
        """Tell every worker to stop and wait for all of them to exit."""
        with self._cond:
            if self._shutdown:
                return
            self._shutdown = True
            self._cond.notify_all()
            threads = list(self._threads)
        for thread in threads:
            thread.join()
        with self._cond:
            self._threads.clear()
        _log.info("message worker pool stopped")

    def push(self, header: MessageHeader, payload: bytes) -> None:
        """Queue a received message and wake a worker to handle it."""
        self._queue.enqueue((header, bytes(payload)))
        self.call()

    def call(self) -> None:
        """Wake one worker; warn, at most every ten seconds, if none is idle."""
        with self._cond:
            self._cond.notify()
            all_busy = self._threads and self._running >= len(self._threads)
            if all_busy:
                now = time.monotonic()
                if (
                    self._last_emergency is None
                    or now - self._last_emergency > EMERGENCY_LOG_INTERVAL
                ):
                    self._last_emergency = now
                    _log.warning(
                        "no idle worker threads left; consider enlarging the pool"
                    )

    def _worker_loop(self) -> None:
        with self._cond:
            self._started += 1
            self._cond.notify_all()
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._shutdown or len(self._queue) > 0)
                if self._shutdown:
                    return
            item = self._queue.try_dequeue()
            if item is None:
                continue
            header, payload = item
            with self._cond:
                self._running += 1
            try:
                if payload:
                    self._handler(header, payload)
            except Exception:
                _log.exception("message handler failed")
            finally:
                with self._cond:
                    self._running -= 1