"""A small demonstration of the future-returning pool."""

from __future__ import annotations

import argparse
import sys
import time

from .futurepool import FuturePool


def sum1(a, b):
    """Return the sum of two values."""
    return a + b


def sum2(a, b, c):
    """Return the sum of three values."""
    return a + b + c


def _parse_args(argv):
    parser = argparse.ArgumentParser(
        prog="workpool-demo",
        description="Submit a sum and a few sleeping tasks to a pool.",
    )
    parser.add_argument("--threads", type=int, default=2, help="initial workers")
    parser.add_argument(
        "--task-seconds",
        type=float,
        default=5.0,
        help="how long each sleeping task sleeps",
    )
    parser.add_argument(
        "--linger",
        type=float,
        default=5.0,
        help="seconds to wait after the pool has shut down",
    )
    parser.add_argument(
        "--no-pause",
        action="store_true",
        help="do not wait for a key press before exiting",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)
    with FuturePool() as pool:
        pool.start(args.threads)
        first = pool.submit(sum1, 1, 2)
        for _ in range(5):
            pool.submit(time.sleep, args.task_seconds)
        print(first.result())

    time.sleep(args.linger)
    if not args.no_pause:
        sys.stdin.read(1)
    return 0


if __name__ == "__main__":
    sys.exit(main())