"""A thread pool with a fixed or a growing set of workers."""

from __future__ import annotations

import enum
import itertools
import logging
import os
import threading
import time
from collections import deque

from .task import Result, Task

TASK_MAX_THRESHOLD = 1024
THREAD_MAX_THRESHOLD = 1024
THREAD_MAX_IDLE_TIME = 60
SUBMIT_TIMEOUT = 1.0
_IDLE_POLL_INTERVAL = 1.0

_log = logging.getLogger(__name__)


class PoolMode(enum.Enum):
    """FIXED keeps its initial workers; CACHED adds workers under load."""

    FIXED = "fixed"
    CACHED = "cached"


class Worker:
    """A detached thread that runs ``target(worker_id)``."""

    _ids = itertools.count()
    _id_lock = threading.Lock()

    def __init__(self, target) -> None:
        self._target = target
        with Worker._id_lock:
            self.id = next(Worker._ids)

    def start(self) -> None:
        thread = threading.Thread(
            target=self._target,
            args=(self.id,),
            name=f"workpool-{self.id}",
            daemon=True,
        )
        thread.start()


class ThreadPool:
    """Runs submitted tasks on worker threads; finishes queued work before shutting down."""

    def __init__(
        self,
        submit_timeout: float = SUBMIT_TIMEOUT,
        max_idle_time: float = THREAD_MAX_IDLE_TIME,
    ) -> None:
        self._submit_timeout = submit_timeout
        self._max_idle_time = max_idle_time
        self._workers: dict[int, Worker] = {}
        self._init_thread_size = 4
        self._thread_size_threshold = THREAD_MAX_THRESHOLD
        self._cur_thread_size = 0
        self._idle_thread_size = 0
        self._tasks: deque[Task] = deque()
        self._task_queue_max_threshold = TASK_MAX_THRESHOLD
        self._lock = threading.Lock()
        self._not_full = threading.Condition(self._lock)
        self._not_empty = threading.Condition(self._lock)
        self._exit_cond = threading.Condition(self._lock)
        self._mode = PoolMode.FIXED
        self._running = False

    @property
    def mode(self) -> PoolMode:
        return self._mode

    @property
    def running(self) -> bool:
        return self._running

    @property
    def task_queue_max_threshold(self) -> int:
        return self._task_queue_max_threshold

    @property
    def thread_size_threshold(self) -> int:
        return self._thread_size_threshold

    @property
    def thread_count(self) -> int:
        with self._lock:
            return self._cur_thread_size

    @property
    def idle_thread_count(self) -> int:
        with self._lock:
            return self._idle_thread_size

    @property
    def pending_tasks(self) -> int:
        with self._lock:
            return len(self._tasks)

    def start(self, init_thread_size: int | None = None) -> None:
        """Start the pool with ``init_thread_size`` workers (default: CPU count)."""
        if init_thread_size is None:
            init_thread_size = os.cpu_count() or 1
        with self._lock:
            self._running = True
            self._init_thread_size = init_thread_size
            self._cur_thread_size = init_thread_size
            workers = [self._add_worker() for _ in range(init_thread_size)]
            for worker in workers:
                worker.start()
                self._idle_thread_size += 1

    def set_mode(self, mode: PoolMode) -> None:
        """Choose the pool mode; ignored once the pool is running."""
        if self._running:
            return
        self._mode = mode

    def set_task_queue_max_threshold(self, threshold: int) -> None:
        """Limit the task queue length; ignored once the pool is running."""
        if self._running:
            return
        self._task_queue_max_threshold = threshold

    def set_thread_size_threshold(self, threshold: int) -> None:
        """Cap the worker count in cached mode; ignored when running or not cached."""
        if self._running:
            return
        if self._mode is PoolMode.CACHED:
            self._thread_size_threshold = threshold

    def submit_task(self, task: Task) -> Result:
        """Queue a task; if the queue stays full past the timeout return an invalid Result."""
        with self._lock:
            has_room = self._not_full.wait_for(
                lambda: len(self._tasks) < self._task_queue_max_threshold,
                timeout=self._submit_timeout,
            )
            if not has_room:
                _log.warning("task queue is full")
                return Result(task, valid=False)

            result = Result(task)
            self._tasks.append(task)
            self._not_empty.notify_all()

            if (
                self._mode is PoolMode.CACHED
                and len(self._tasks) > self._idle_thread_size
                and self._cur_thread_size < self._thread_size_threshold
            ):
                _log.info("create new thread")
                self._add_worker().start()
                self._idle_thread_size += 1
                self._cur_thread_size += 1
            return result

    def shutdown(self) -> None:
        """Stop the pool once every queued task has run and all workers have left."""
        with self._lock:
            self._running = False
            self._not_empty.notify_all()
            self._exit_cond.wait_for(lambda: not self._workers)

    def __enter__(self) -> ThreadPool:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def _add_worker(self) -> Worker:
        worker = Worker(self._worker_loop)
        self._workers[worker.id] = worker
        return worker

    def _worker_loop(self, worker_id: int) -> None:
        last_active = time.monotonic()
        while True:
            with self._lock:
                _log.debug("worker %d trying to get task", worker_id)
                while not self._tasks:
                    if not self._running:
                        self._workers.pop(worker_id, None)
                        _log.debug("worker %d exit", worker_id)
                        self._exit_cond.notify_all()
                        return
                    if self._mode is PoolMode.CACHED:
                        woken = self._not_empty.wait(timeout=_IDLE_POLL_INTERVAL)
                        if (
                            not woken
                            and time.monotonic() - last_active >= self._max_idle_time
                            and self._cur_thread_size > self._init_thread_size
                        ):
                            self._workers.pop(worker_id, None)
                            self._cur_thread_size -= 1
                            self._idle_thread_size -= 1
                            _log.debug("worker %d exit after idling", worker_id)
                            self._exit_cond.notify_all()
                            return
                    else:
                        self._not_empty.wait()

                self._idle_thread_size -= 1
                task = self._tasks.popleft()
                _log.debug("worker %d got a task", worker_id)
                if self._tasks:
                    self._not_empty.notify_all()
                self._not_full.notify_all()

            try:
                task.execute()
            except Exception:
                _log.exception("task failed in worker %d", worker_id)

            with self._lock:
                self._idle_thread_size += 1
            last_active = time.monotonic()