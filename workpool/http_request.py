"""HTTP request and response objects, with helpers for uploaded parts."""

from __future__ import annotations

import enum
import itertools
import logging
import os
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import BinaryIO

_log = logging.getLogger(__name__)

_upload_counter = itertools.count()
_upload_lock = threading.Lock()


class Method(enum.Enum):
    INVALID = "INVALID"
    GET = "GET"
    POST = "POST"
    HEAD = "HEAD"
    PUT = "PUT"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"


class FileWriter:
    """Streams binary data to one file; usable as a context manager."""

    def __init__(self) -> None:
        self._stream: BinaryIO | None = None

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    def open(self, path: str | os.PathLike) -> None:
        """Open ``path`` for writing, replacing any existing content."""
        self.close()
        try:
            self._stream = open(path, "wb")
        except OSError:
            _log.error("failed to open file: %s", path)
            raise
        _log.info("opened file: %s", path)

    def write(self, data: bytes | bytearray | memoryview) -> None:
        if self._stream is None:
            raise ValueError("file writer is not open")
        self._stream.write(data)

    def close(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None

    def __enter__(self) -> FileWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def parse_field_name(header: str) -> str:
    """Return the value of the first ``name="..."`` in a part header, or ''."""
    token = 'name="'
    start = header.find(token)
    if start == -1:
        return ""
    start += len(token)
    end = header.find('"', start)
    if end == -1:
        return ""
    return header[start:end]


def _unique_upload_name() -> str:
    with _upload_lock:
        count = next(_upload_counter)
    return f"upload_{time.time_ns() // 1_000_000}_{count}.dat"


@dataclass
class HttpRequest:
    """A parsed HTTP request together with any uploaded form data."""

    method: Method = Method.INVALID
    version: str = "Unknown"
    path: str = ""
    path_parameters: dict[str, str] = field(default_factory=dict)
    query_parameters: dict[str, str] = field(default_factory=dict)
    receive_time: datetime | None = None
    headers: dict[str, str] = field(default_factory=dict)
    body: bytearray = field(default_factory=bytearray)
    content_length: int = 0
    boundary: str = ""
    file_header: str = ""
    file_writer: FileWriter = field(default_factory=FileWriter)
    form_fields: dict[str, str] = field(default_factory=dict)
    uploaded_files: list[str] = field(default_factory=list)

    def append_body(self, data: bytes | bytearray | memoryview) -> None:
        self.body.extend(data)

    def save_file_part(
        self, part_data: bytes | str, directory: str | os.PathLike = "."
    ) -> str:
        """Write an uploaded part to a new uniquely named file and record its path."""
        if isinstance(part_data, str):
            part_data = part_data.encode()
        path = os.path.join(os.fspath(directory), _unique_upload_name())
        with open(path, "wb") as stream:
            stream.write(part_data)
        self.uploaded_files.append(path)
        _log.info("saved file: %s", path)
        return path

    def save_form_field(self, part_header: str, data: str) -> str:
        """Store a plain form field under the name given in its part header."""
        name = parse_field_name(part_header)
        if not name:
            raise ValueError("form field name not found in part header")
        self.form_fields[name] = data
        _log.info("saved form field: %s", name)
        return name


class HttpStatusCode(enum.IntEnum):
    UNKNOWN = 0
    OK = 200
    NO_CONTENT = 204
    PARTIAL_CONTENT = 206
    MOVED_PERMANENTLY = 301
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    RANGE_NOT_SATISFIABLE = 416
    INTERNAL_SERVER_ERROR = 500
    SERVICE_UNAVAILABLE = 503


@dataclass
class HttpResponse:
    """An HTTP response under construction."""

    close_connection: bool = True
    version: str = ""
    status_code: HttpStatusCode = HttpStatusCode.UNKNOWN
    status_message: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""

    def add_header(self, key: str, value: str) -> None:
        self.headers[key] = value

    def set_content_type(self, content_type: str) -> None:
        self.add_header("Content-Type", content_type)

    def set_content_length(self, length: int) -> None:
        self.add_header("Content-Length", str(length))