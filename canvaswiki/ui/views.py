#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Jinja2 UI views (server-rendered HTML pages)
============================================
GET  /                 — redirect to the home page
GET  /page?name=...    — view a page (created empty if missing)
GET  /edit?name=...    — edit a page (created empty if missing)
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from canvaswiki.core.config import get_settings
from canvaswiki.core.store import WikiStore, get_store
from canvaswiki.routes.pages import page_url
from canvaswiki.services.renderer import render as render_markup
from canvaswiki.services.uploads import AssetIndex, get_assets


# -----------------------------------------------------------------------------

router = APIRouter(tags=["ui"])
templates = Jinja2Templates(directory=str(Path(__file__).parent.parent / "templates"))


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _ctx(**extra) -> dict:
    """Base template context (request passed separately as first arg to TemplateResponse)."""
    settings = get_settings()
    return {
        "site_name": settings.site_name,
        "app_version": settings.app_version,
        "home_page": settings.home_page,
        **extra,
    }


def _page_name(name: Optional[str]) -> str:
    return name or get_settings().home_page


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Home
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.get("/")
async def home():
    return RedirectResponse(url=page_url(get_settings().home_page), status_code=302)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Page view
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.get("/page", response_class=HTMLResponse)
async def view_page(
    request: Request,
    name: Optional[str] = None,
    store: WikiStore    = Depends(get_store),
    assets: AssetIndex  = Depends(get_assets),
):
    page = _page_name(name)
    content = store.pages.setdefault(page)

    return templates.TemplateResponse(
        request,
        "page_view.html",
        _ctx(page_name=page,
             rendered=render_markup(content),
             comments=store.comments.list(page),
             uploads=assets.list_assets()),
    )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Page edit
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.get("/edit", response_class=HTMLResponse)
async def edit_page_form(
    request: Request,
    name: Optional[str] = None,
    store: WikiStore    = Depends(get_store),
):
    page = _page_name(name)
    content = store.pages.setdefault(page)

    return templates.TemplateResponse(
        request,
        "page_edit.html",
        _ctx(page_name=page, content=content),
    )


# -----------------------------------------------------------------------------
