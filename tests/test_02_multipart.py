#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for the multipart form parser."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import time

from canvaswiki.services.multipart import (
    MultipartParser, get_boundary, parse_form,
)
from tests.conftest import multipart_body


# -----------------------------------------------------------------------------

BOUNDARY = "----wikiBoundary7MA4YWxk"
CT = f"multipart/form-data; boundary={BOUNDARY}"

FIELD = ('Content-Disposition: form-data; name="author"', b"Alice")
FILE = (
    'Content-Disposition: form-data; name="file"; filename="pic.png"\r\n'
    "Content-Type: image/png",
    b"PNGDATA",
)


# ── Boundary ──────────────────────────────────────────────────────────────────

def test_boundary_plain_and_quoted():
    assert get_boundary(CT) == BOUNDARY
    assert get_boundary('multipart/form-data; boundary="abc def"') == "abc def"
    assert get_boundary("multipart/form-data; boundary=xyz; charset=utf-8") == "xyz"


def test_no_boundary():
    assert get_boundary("application/x-www-form-urlencoded") is None
    assert get_boundary(None) is None


# ── Multipart ─────────────────────────────────────────────────────────────────

def test_field_and_file():
    form = parse_form(CT, multipart_body(BOUNDARY, [FIELD, FILE]))
    assert form.fields == {"author": "Alice"}
    assert form.file is not None
    assert form.file.filename == "pic.png"
    assert form.file.content_type == "image/png"
    assert form.file.data == b"PNGDATA"


def test_no_file_part_is_not_an_error():
    form = parse_form(CT, multipart_body(BOUNDARY, [FIELD]))
    assert form.fields == {"author": "Alice"}
    assert form.file is None


def test_binary_payload_is_untouched():
    payload = bytes(range(256)) + b"\r\n\r\n\x00\xff"
    part = ('Content-Disposition: form-data; name="file"; filename="blob.bin"', payload)
    form = parse_form(CT, multipart_body(BOUNDARY, [part]))
    assert form.file.data == payload
    assert form.file.content_type == "application/octet-stream"


def test_directory_components_stripped_from_filename():
    for raw in ("../../etc/passwd", "C:\\Users\\me\\pic.png"):
        part = (f'Content-Disposition: form-data; name="file"; filename="{raw}"', b"x")
        form = parse_form(CT, multipart_body(BOUNDARY, [part]))
        assert "/" not in form.file.filename
        assert "\\" not in form.file.filename
    assert form.file.filename == "pic.png"


def test_last_file_part_wins():
    second = (
        'Content-Disposition: form-data; name="other"; filename="b.gif"\r\n'
        "Content-Type: image/gif",
        b"GIF",
    )
    form = parse_form(CT, multipart_body(BOUNDARY, [FILE, second]))
    assert form.file.filename == "b.gif"
    assert form.file.data == b"GIF"


def test_empty_filename_is_a_plain_field():
    part = ('Content-Disposition: form-data; name="file"; filename=""', b"")
    form = parse_form(CT, multipart_body(BOUNDARY, [part]))
    assert form.file is None
    assert form.fields == {"file": ""}


def test_part_without_name_is_skipped():
    part = ("Content-Disposition: form-data", b"orphan")
    form = parse_form(CT, multipart_body(BOUNDARY, [part, FIELD]))
    assert form.fields == {"author": "Alice"}


def test_field_values_are_not_escaped():
    part = ('Content-Disposition: form-data; name="text"', "<b>é</b>".encode())
    form = parse_form(CT, multipart_body(BOUNDARY, [part]))
    assert form.fields["text"] == "<b>é</b>"


def test_malformed_body_gives_empty_result():
    form = parse_form(CT, b"this is not multipart at all")
    assert form.fields == {}
    assert form.file is None


def test_part_without_blank_line_is_skipped():
    body = f"--{BOUNDARY}\r\nContent-Disposition: form-data; name=\"a\"\r\n--{BOUNDARY}--\r\n".encode()
    form = parse_form(CT, body)
    assert form.fields == {}


# ── Streaming ─────────────────────────────────────────────────────────────────

def test_chunked_feed_matches_whole_body():
    body = multipart_body(BOUNDARY, [FIELD, FILE])
    for size in (1, 3, 7, 64):
        parser = MultipartParser(BOUNDARY)
        for i in range(0, len(body), size):
            parser.feed(body[i:i + size])
        form = parser.close()
        assert form.fields == {"author": "Alice"}
        assert form.file.data == b"PNGDATA"


def _feed_in_chunks(body: bytes, size: int = 64 * 1024) -> float:
    start = time.perf_counter()
    parser = MultipartParser(BOUNDARY)
    for i in range(0, len(body), size):
        parser.feed(body[i:i + size])
    form = parser.close()
    elapsed = time.perf_counter() - start
    assert form.file is not None
    assert len(form.file.data) + 4096 > len(body) > len(form.file.data)
    return elapsed


def test_large_upload_parses_in_linear_time():
    def body_of(size: int) -> bytes:
        return multipart_body(BOUNDARY, [(FILE[0], b"x" * size)])

    small, large = body_of(2 * 1024 * 1024), body_of(16 * 1024 * 1024)
    t_small = min(_feed_in_chunks(small) for _ in range(3))
    t_large = min(_feed_in_chunks(large) for _ in range(3))
    # 8x the data: about 8x the time when linear, about 64x when quadratic.
    assert t_large < max(t_small, 1e-3) * 24


def test_scan_resumes_near_buffer_tail():
    parser = MultipartParser(BOUNDARY)
    parser.feed(b"--" + BOUNDARY.encode() + b"\r\n" + FILE[0].encode() + b"\r\n\r\n")
    parser.feed(b"x" * 100_000)
    assert parser._scan_from >= len(parser._buffer) - len(BOUNDARY) - 2


def test_preamble_is_ignored():
    body = b"preamble text\r\n" + multipart_body(BOUNDARY, [FIELD])
    assert parse_form(CT, body).fields == {"author": "Alice"}


# ── URL-encoded fallback ──────────────────────────────────────────────────────

def test_urlencoded_fallback():
    form = parse_form("application/x-www-form-urlencoded", b"name=Foo+Bar&content=a%26b&name=Last")
    assert form.fields == {"name": "Last", "content": "a&b"}
    assert form.file is None


# -----------------------------------------------------------------------------
