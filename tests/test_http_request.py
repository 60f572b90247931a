import os

import pytest

from workpool.http_request import (
    FileWriter,
    HttpRequest,
    HttpResponse,
    HttpStatusCode,
    Method,
    parse_field_name,
)


def test_parse_field_name_found():
    header = 'Content-Disposition: form-data; name="title"'
    assert parse_field_name(header) == "title"


def test_parse_field_name_missing_token():
    assert parse_field_name("Content-Disposition: form-data") == ""


def test_parse_field_name_unterminated():
    assert parse_field_name('form-data; name="broken') == ""


def test_parse_field_name_takes_first_occurrence():
    header = 'form-data; name="video"; filename="clip.mp4"'
    assert parse_field_name(header) == "video"


def test_request_defaults():
    req = HttpRequest()
    assert req.method is Method.INVALID
    assert req.version == "Unknown"
    assert req.content_length == 0
    assert req.body == b""


def test_append_body_accumulates():
    req = HttpRequest()
    req.append_body(b"abc")
    req.append_body(b"def")
    assert bytes(req.body) == b"abcdef"


def test_save_form_field_stores_value():
    req = HttpRequest()
    name = req.save_form_field('form-data; name="user"', "alice")
    assert name == "user"
    assert req.form_fields == {"user": "alice"}


def test_save_form_field_without_name_raises():
    req = HttpRequest()
    with pytest.raises(ValueError):
        req.save_form_field("form-data", "value")
    assert req.form_fields == {}


def test_save_file_part_writes_file(tmp_path):
    req = HttpRequest()
    path = req.save_file_part(b"\x00\x01payload", tmp_path)
    assert req.uploaded_files == [path]
    with open(path, "rb") as stream:
        assert stream.read() == b"\x00\x01payload"
    name = os.path.basename(path)
    assert name.startswith("upload_") and name.endswith(".dat")


def test_save_file_part_names_are_unique(tmp_path):
    req = HttpRequest()
    first = req.save_file_part(b"a", tmp_path)
    second = req.save_file_part(b"b", tmp_path)
    assert first != second
    assert len(req.uploaded_files) == 2


def test_file_writer_round_trip(tmp_path):
    target = tmp_path / "out.bin"
    with FileWriter() as writer:
        writer.open(target)
        assert writer.is_open
        writer.write(b"part1")
        writer.write(b"part2")
    assert target.read_bytes() == b"part1part2"


def test_file_writer_write_when_closed_raises():
    writer = FileWriter()
    with pytest.raises(ValueError):
        writer.write(b"data")


def test_file_writer_open_failure_raises(tmp_path):
    writer = FileWriter()
    with pytest.raises(OSError):
        writer.open(tmp_path / "missing" / "out.bin")
    assert writer.is_open is False


def test_file_writer_close_is_idempotent(tmp_path):
    writer = FileWriter()
    writer.open(tmp_path / "f.bin")
    writer.close()
    writer.close()
    assert writer.is_open is False


def test_status_code_lookup_by_number():
    assert HttpStatusCode(200) is HttpStatusCode.OK
    assert HttpStatusCode(404) is HttpStatusCode.NOT_FOUND
    assert HttpStatusCode(0) is HttpStatusCode.UNKNOWN
    with pytest.raises(ValueError):
        HttpStatusCode(999)


def test_response_headers():
    resp = HttpResponse()
    resp.set_content_type("text/html")
    resp.set_content_length(42)
    resp.add_header("Content-Type", "application/json")
    assert resp.headers == {
        "Content-Type": "application/json",
        "Content-Length": "42",
    }
    assert resp.close_connection is True
    assert resp.status_code is HttpStatusCode.UNKNOWN