import threading

import pytest

from workpool.futurepool import FuturePool
from workpool.pool import PoolMode


def _raise_value_error():
    raise ValueError("boom")


def test_submit_returns_callable_result():
    with FuturePool() as pool:
        pool.start(2)
        future = pool.submit(str.upper, "abc")
        assert future.result(timeout=5) == "ABC"


def test_keyword_arguments_are_passed():
    with FuturePool() as pool:
        pool.start(1)
        future = pool.submit(dict, a=1, b="two")
        assert future.result(timeout=5) == {"a": 1, "b": "two"}


def test_exception_is_delivered_through_future():
    with FuturePool() as pool:
        pool.start(1)
        future = pool.submit(_raise_value_error)
        with pytest.raises(ValueError, match="boom"):
            future.result(timeout=5)


def test_default_queue_limit_is_two():
    pool = FuturePool()
    assert pool.task_queue_max_threshold == 2
    assert pool.mode is PoolMode.FIXED


def test_full_queue_yields_resolved_none_future():
    pool = FuturePool(submit_timeout=0.05)
    queued = [pool.submit(sum, [1, 2]) for _ in range(2)]
    rejected = pool.submit(sum, [1, 2])
    assert rejected.done()
    assert rejected.result() is None
    assert not any(f.done() for f in queued)
    assert pool.pending_tasks == 2
    pool.shutdown()


def test_shutdown_finishes_queued_work():
    results = []
    lock = threading.Lock()

    def record(value):
        with lock:
            results.append(value)
        return value

    with FuturePool() as pool:
        pool.set_task_queue_max_threshold(100)
        pool.start(2)
        futures = [pool.submit(record, i) for i in range(20)]
    assert all(f.done() for f in futures)
    assert sorted(results) == list(range(20))
    assert [f.result() for f in futures] == list(range(20))


def test_single_worker_runs_in_submission_order():
    order = []
    with FuturePool() as pool:
        pool.set_task_queue_max_threshold(50)
        pool.start(1)
        for i in range(10):
            pool.submit(order.append, i)
    assert order == list(range(10))


def test_cached_mode_adds_workers_under_load():
    release = threading.Event()
    pool = FuturePool()
    pool.set_mode(PoolMode.CACHED)
    pool.set_task_queue_max_threshold(10)
    pool.start(1)
    futures = [pool.submit(release.wait, 5) for _ in range(3)]
    try:
        assert pool.thread_count >= 2
    finally:
        release.set()
        pool.shutdown()
    assert all(f.result() is True for f in futures)