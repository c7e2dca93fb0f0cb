#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Upload service — store uploaded files and list them back.

There is no manifest: the upload directory itself is the asset index.  The
``AssetIndex`` protocol is the seam where a different backend could be
plugged in; route handlers only ever talk to the protocol.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import re
import time
from pathlib import Path
from typing import Protocol

import aiofiles

from canvaswiki.core.config import get_settings
from canvaswiki.models import Asset, FileUpload

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

_UNSAFE_CHARS_RE = re.compile(r"[^\w\-.]")


def sanitize_filename(filename: str) -> str:
    """Keep word characters, ``-`` and ``.``; everything else becomes ``_``."""
    return _UNSAFE_CHARS_RE.sub("_", filename)


def _now_millis() -> int:
    return time.time_ns() // 1_000_000


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Interface
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class AssetIndex(Protocol):

    def list_assets(self) -> list[Asset]:
        ...

    async def save(self, upload: FileUpload) -> Asset:
        ...


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Directory backend
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class DirectoryAssetIndex:
    """
    Files in *root*, named ``<epoch-millis>-<sanitized original name>``.

    Names are claimed with exclusive-create, so two uploads of the same file
    in the same millisecond still end up under different names.  Files are
    never modified or removed once written.
    """

    def __init__(self, root: Path, url_prefix: str):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def url_for(self, name: str) -> str:
        return f"{self.url_prefix}/{name}"

    def list_assets(self) -> list[Asset]:
        """All stored files, oldest first (the timestamp prefix sorts)."""
        if not self.root.is_dir():
            return []
        return [
            Asset(name=p.name, url=self.url_for(p.name))
            for p in sorted(self.root.iterdir())
            if p.is_file()
        ]

    async def save(self, upload: FileUpload) -> Asset:
        """Write *upload* to disk.  ``OSError`` propagates to the caller."""
        self.root.mkdir(parents=True, exist_ok=True)
        safe = sanitize_filename(upload.filename)
        stamp = _now_millis()
        while True:
            name = f"{stamp}-{safe}"
            try:
                async with aiofiles.open(self.root / name, "xb") as f:
                    await f.write(upload.data)
                break
            except FileExistsError:
                stamp += 1

        log.info(
            "upload stored: %s (%d bytes, %s)",
            name, len(upload.data), upload.content_type,
        )
        return Asset(name=name, url=self.url_for(name))


# -----------------------------------------------------------------------------

def get_assets() -> AssetIndex:
    """FastAPI dependency returning the configured asset index."""
    settings = get_settings()
    return DirectoryAssetIndex(settings.upload_dir_resolved, settings.upload_url_prefix)


# -----------------------------------------------------------------------------
