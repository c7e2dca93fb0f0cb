#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Public files router
===================
GET /public/{path}   — serve a file from the public root (uploads live here)

Content types come from a small fixed table; anything else is served as
``application/octet-stream``.  Paths are resolved before use and must stay
inside the public root.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from canvaswiki.core.config import Settings, get_settings


# -----------------------------------------------------------------------------

router = APIRouter(tags=["public"])

MIME_TYPES: dict[str, str] = {
    ".png":  "image/png",
    ".jpg":  "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif":  "image/gif",
    ".webm": "video/webm",
    ".mp4":  "video/mp4",
    ".mp3":  "audio/mpeg",
    ".wav":  "audio/wav",
    ".css":  "text/css",
    ".js":   "application/javascript",
}
DEFAULT_MIME = "application/octet-stream"


# -----------------------------------------------------------------------------

def resolve_public_path(root: Path, rel_path: str) -> Path | None:
    """Return the file for *rel_path* under *root*, or None if it escapes or is missing."""
    base = root.resolve()
    target = (base / rel_path).resolve()
    if not target.is_relative_to(base) or not target.is_file():
        return None
    return target


# -----------------------------------------------------------------------------

@router.get("/public/{file_path:path}")
async def serve_public(
    file_path: str,
    settings: Settings = Depends(get_settings),
):
    abs_path = resolve_public_path(settings.public_root, file_path)
    if abs_path is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return FileResponse(
        path=str(abs_path),
        media_type=MIME_TYPES.get(abs_path.suffix.lower(), DEFAULT_MIME),
    )


# -----------------------------------------------------------------------------
