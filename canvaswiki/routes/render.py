#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Render endpoint — live preview for the editor.

GET /preview?text=...
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, Query
from fastapi.responses import HTMLResponse

from canvaswiki.services.renderer import render


# -----------------------------------------------------------------------------

router = APIRouter(tags=["render"])


# -----------------------------------------------------------------------------

@router.get("/preview", response_class=HTMLResponse)
async def render_preview(text: str = Query(default="")):
    """Return the rendered HTML fragment for *text*; nothing is stored."""
    return HTMLResponse(render(text))


# -----------------------------------------------------------------------------
