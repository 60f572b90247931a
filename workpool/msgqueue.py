"""A thread-safe FIFO queue of received messages."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class MessageQueue(Generic[T]):
    """A first-in first-out queue that many threads may share.

    ``None`` cannot be queued, so ``try_dequeue`` can use it to mean empty.
    """

    def __init__(self) -> None:
        self._items: deque[T] = deque()
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"MessageQueue(size={len(self)})"

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __bool__(self) -> bool:
        return len(self) > 0

    def enqueue(self, item: T) -> None:
        """Add ``item`` at the back of the queue."""
        if item is None:
            raise TypeError("None cannot be queued")
        with self._lock:
            self._items.append(item)

    def try_dequeue(self) -> Any:
        """Remove and return the front item, or return None if the queue is empty."""
        with self._lock:
            if not self._items:
                return None
            return self._items.popleft()