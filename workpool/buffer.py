"""A growable byte buffer with separate read and write positions."""

from __future__ import annotations

CHEAP_PREPEND = 8
INITIAL_SIZE = 1024


class Buffer:
    """Bytes are appended at the write position and consumed from the read position.

    A small reserved area sits in front of the readable data. When more room
    is needed, the buffer first slides its readable bytes back to the front
    and grows only if that does not free enough space.
    """

    CHEAP_PREPEND = CHEAP_PREPEND
    INITIAL_SIZE = INITIAL_SIZE

    def __init__(self, initial_size: int = INITIAL_SIZE) -> None:
        if initial_size < 0:
            raise ValueError("initial size must not be negative")
        self._data = bytearray(initial_size + CHEAP_PREPEND)
        self._reader = CHEAP_PREPEND
        self._writer = CHEAP_PREPEND

    def __len__(self) -> int:
        return self.readable_bytes()

    def __repr__(self) -> str:
        return (
            f"Buffer(readable={self.readable_bytes()}, "
            f"writable={self.writable_bytes()})"
        )

    def readable_bytes(self) -> int:
        return self._writer - self._reader

    def writable_bytes(self) -> int:
        return len(self._data) - self._writer

    def prependable_bytes(self) -> int:
        return self._reader

    def peek(self) -> bytes:
        """Return the readable bytes without consuming them."""
        return bytes(self._data[self._reader : self._writer])

    def retrieve(self, length: int) -> None:
        """Consume ``length`` bytes; consuming all of them resets the positions."""
        if length < 0:
            raise ValueError("length must not be negative")
        if length < self.readable_bytes():
            self._reader += length
        else:
            self.retrieve_all()

    def retrieve_all(self) -> None:
        self._reader = self._writer = CHEAP_PREPEND

    def retrieve_all_as_bytes(self) -> bytes:
        return self.retrieve_as_bytes(self.readable_bytes())

    def retrieve_as_bytes(self, length: int) -> bytes:
        """Consume and return ``length`` readable bytes."""
        if length < 0 or length > self.readable_bytes():
            raise ValueError(
                f"cannot retrieve {length} bytes; {self.readable_bytes()} readable"
            )
        chunk = bytes(self._data[self._reader : self._reader + length])
        self.retrieve(length)
        return chunk

    def ensure_writable_bytes(self, length: int) -> None:
        if self.writable_bytes() < length:
            self._make_space(length)

    def append(self, data: bytes | bytearray | memoryview | str) -> None:
        """Copy ``data`` to the end of the readable region."""
        if isinstance(data, str):
            data = data.encode()
        view = memoryview(data).cast("B")
        length = len(view)
        self.ensure_writable_bytes(length)
        self._data[self._writer : self._writer + length] = view
        self._writer += length

    def _make_space(self, length: int) -> None:
        if self.writable_bytes() + self.prependable_bytes() < length + CHEAP_PREPEND:
            self._data.extend(bytes(self._writer + length - len(self._data)))
        else:
            readable = self.readable_bytes()
            self._data[CHEAP_PREPEND : CHEAP_PREPEND + readable] = self._data[
                self._reader : self._writer
            ]
            self._reader = CHEAP_PREPEND
            self._writer = CHEAP_PREPEND + readable