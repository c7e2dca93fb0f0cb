#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
In-memory data model.

Nothing here is persisted: pages and comments live for the lifetime of the
process, uploaded assets live in the upload directory.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


# -----------------------------------------------------------------------------

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Comment
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class Comment:
    """A comment attached to a page.

    ``author`` and ``text`` are stored already HTML-escaped.
    """

    id: int
    page: str
    author: str
    text: str
    created_at: datetime = field(default_factory=_utcnow)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Uploads
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass
class FileUpload:
    """The file part of a multipart request."""

    filename: str
    content_type: str = "application/octet-stream"
    data: bytes = b""


@dataclass
class ParsedForm:
    fields: dict[str, str] = field(default_factory=dict)
    file: Optional[FileUpload] = None


# -----------------------------------------------------------------------------

_IMAGE_EXTS = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg")
_VIDEO_EXTS = (".mp4", ".webm")
_AUDIO_EXTS = (".mp3", ".wav")


@dataclass(frozen=True)
class Asset:
    """A stored upload, as seen through the asset index."""

    name: str
    url: str

    @property
    def kind(self) -> str:
        lower = self.name.lower()
        if lower.endswith(_IMAGE_EXTS):
            return "image"
        if lower.endswith(_VIDEO_EXTS):
            return "video"
        if lower.endswith(_AUDIO_EXTS):
            return "audio"
        return "file"


# -----------------------------------------------------------------------------
