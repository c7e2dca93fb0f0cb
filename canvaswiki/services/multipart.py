#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Multipart form parser
=====================
A small byte-oriented ``multipart/form-data`` reader for the upload endpoint.

It is deliberately minimal and keeps the upload contract of the wiki:

- at most one file survives per request (a later file part replaces an
  earlier one);
- field values are returned as-is, never escaped;
- malformed input yields an empty or partial result, never an exception.

Without a ``boundary`` parameter the body is read as
``application/x-www-form-urlencoded`` and no file is produced.

Usage::

    parser = MultipartParser(boundary)
    async for chunk in request.stream():
        parser.feed(chunk)
    form = parser.close()
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import re
from typing import Optional
from urllib.parse import parse_qsl

from canvaswiki.models import FileUpload, ParsedForm

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

DEFAULT_FILE_TYPE = "application/octet-stream"

_BOUNDARY_RE    = re.compile(r'boundary=(?:"([^"]+)"|([^\s;]+))', re.IGNORECASE)
_DISPOSITION_RE = re.compile(r'([\w*-]+)\s*=\s*(?:"([^"]*)"|([^;\s]*))')

_HEADER_SEP = b"\r\n\r\n"
_CRLF       = b"\r\n"


# -----------------------------------------------------------------------------

def get_boundary(content_type: str | None) -> Optional[str]:
    """Return the ``boundary`` parameter of a Content-Type header, or None."""
    if not content_type:
        return None
    m = _BOUNDARY_RE.search(content_type)
    if not m:
        return None
    return m.group(1) or m.group(2)


# -----------------------------------------------------------------------------

def _basename(filename: str) -> str:
    """Strip any directory components, POSIX or Windows style."""
    return re.split(r"[\\/]", filename)[-1] or "upload"


def _disposition_params(value: str) -> dict[str, str]:
    # Skip the disposition type itself ("form-data").
    _, _, rest = value.partition(";")
    params: dict[str, str] = {}
    for m in _DISPOSITION_RE.finditer(rest):
        params[m.group(1).lower()] = m.group(2) if m.group(2) is not None else m.group(3)
    return params


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Parser
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class MultipartParser:
    """
    Incremental parser: feed it byte chunks, then call :meth:`close`.

    The body is treated as a sequence of segments separated by the delimiter
    ``--<boundary>``.  The segment before the first delimiter (preamble) and
    the one after the last delimiter (terminator and epilogue) are discarded;
    every segment in between is a part.  A part is complete as soon as the
    next delimiter has been seen, so only the current part is ever buffered
    beyond what has already been handed out.
    """

    def __init__(self, boundary: str | bytes):
        if isinstance(boundary, str):
            boundary = boundary.encode("latin-1", "replace")
        self._delimiter = b"--" + boundary
        self._buffer = bytearray()
        self._scan_from = 0
        self._started = False
        self._closed = False
        self.form = ParsedForm()

    # ── Feeding ─────────────────────────────────────────────────────────────

    def feed(self, chunk: bytes) -> None:
        if self._closed or not chunk:
            return
        self._buffer.extend(chunk)
        self._drain()

    def close(self) -> ParsedForm:
        """Finish parsing.  Whatever follows the last delimiter is dropped."""
        self._closed = True
        self._buffer.clear()
        return self.form

    def _drain(self) -> None:
        delim = self._delimiter
        while True:
            idx = self._buffer.find(delim, self._scan_from)
            if idx < 0:
                # Resume next time where a delimiter split across chunks could start.
                self._scan_from = max(0, len(self._buffer) - len(delim) + 1)
                if not self._started:
                    # Keep only enough tail to match a delimiter split across chunks.
                    keep = len(delim) - 1
                    if len(self._buffer) > keep:
                        del self._buffer[:-keep]
                        self._scan_from = 0
                return
            if self._started:
                self._handle_part(bytes(self._buffer[:idx]))
            self._started = True
            del self._buffer[: idx + len(delim)]
            self._scan_from = 0

    # ── Parts ───────────────────────────────────────────────────────────────

    def _handle_part(self, part: bytes) -> None:
        raw_headers, sep, body = part.partition(_HEADER_SEP)
        if not sep or not raw_headers.strip():
            return
        if body.endswith(_CRLF):
            body = body[:-2]

        headers: dict[str, str] = {}
        for line in raw_headers.decode("utf-8", "replace").split("\r\n"):
            key, colon, value = line.strip().partition(":")
            if colon:
                headers[key.strip().lower()] = value.strip()

        params = _disposition_params(headers.get("content-disposition", ""))
        name = params.get("name")
        filename = params.get("filename")

        if filename:
            if self.form.file is not None:
                log.warning(
                    "multipart body carries more than one file; %r replaces %r",
                    filename, self.form.file.filename,
                )
            self.form.file = FileUpload(
                filename=_basename(filename),
                content_type=headers.get("content-type") or DEFAULT_FILE_TYPE,
                data=body,
            )
        elif name:
            self.form.fields[name] = body.decode("utf-8", "replace")


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Whole-body helpers
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def parse_urlencoded(body: bytes) -> ParsedForm:
    pairs = parse_qsl(body.decode("utf-8", "replace"), keep_blank_values=True)
    return ParsedForm(fields=dict(pairs))


def parse_form(content_type: str | None, body: bytes) -> ParsedForm:
    """Parse a complete request body according to its Content-Type."""
    boundary = get_boundary(content_type)
    if boundary is None:
        return parse_urlencoded(body)
    parser = MultipartParser(boundary)
    parser.feed(body)
    return parser.close()


# -----------------------------------------------------------------------------
