"""Per-connection HTTP parsing state and upload filename helpers."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from .http_request import HttpRequest

LARGE_FILE_THRESHOLD = 1 * 1024 * 1024
MAX_BASENAME_LENGTH = 10
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_SAFE_BYTES = frozenset(
    b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_."
)


class ParseState(enum.Enum):
    EXPECT_REQUEST_LINE = "request_line"
    EXPECT_HEADERS = "headers"
    EXPECT_BODY = "body"
    GOT_ALL = "got_all"


def _url_decode_bytes(src: str) -> bytes:
    raw = src.encode()
    out = bytearray()
    i = 0
    length = len(raw)
    while i < length:
        ch = raw[i]
        if ch == ord("%"):
            if i + 2 >= length:
                raise ValueError("Invalid URL encoding.")
            hex_str = raw[i + 1 : i + 3].decode("ascii", errors="replace")
            if not set(hex_str) <= _HEX_DIGITS:
                raise ValueError("Invalid URL encoding.")
            out.append(int(hex_str, 16))
            i += 3
        elif ch == ord("+"):
            out.append(ord(" "))
            i += 1
        else:
            out.append(ch)
            i += 1
    return bytes(out)


def url_decode(src: str) -> str:
    """Decode ``%XX`` escapes and ``+`` as space.

    A ``%`` must be followed by two hex digits and at least one further
    character; otherwise ValueError is raised.
    """
    return _url_decode_bytes(src).decode("utf-8", errors="replace")


def sanitize_filename(raw_filename: str) -> str:
    """Turn a client-supplied filename into a short, safe one.

    The name is URL-decoded, every byte other than ASCII letters, digits,
    ``_`` and ``.`` becomes ``_``, and the part before the last dot is cut
    to ten characters.
    """
    decoded = _url_decode_bytes(raw_filename)
    safe = "".join(chr(b) if b in _SAFE_BYTES else "_" for b in decoded)
    base, dot, ext = safe.rpartition(".")
    if not dot:
        base, ext = safe, ""
    else:
        ext = dot + ext
    return base[:MAX_BASENAME_LENGTH] + ext


@dataclass
class HttpContext:
    """Holds one connection's request while it is being parsed."""

    state: ParseState = ParseState.EXPECT_REQUEST_LINE
    request: HttpRequest = field(default_factory=HttpRequest)
    buffer: bytearray = field(default_factory=bytearray)
    parsed_pos: int = 0
    body_bytes_received: int = 0
    sequence: int = 0

    def got_all(self) -> bool:
        return self.state is ParseState.GOT_ALL

    def reset(self) -> None:
        """Drop the current request and buffered bytes, ready for the next request."""
        self.state = ParseState.EXPECT_REQUEST_LINE
        self.request.file_writer.close()
        self.request = HttpRequest()
        self.buffer.clear()
        self.parsed_pos = 0
        self.body_bytes_received = 0