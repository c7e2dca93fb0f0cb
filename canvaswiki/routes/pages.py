#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pages router
============
GET  /pages              — JSON list of page names (insertion order)
POST /add                — create or overwrite a page
POST /edit               — overwrite an existing page
POST /delete?name=...    — delete a page and its comments
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, HTTPException, Query, status
from fastapi.responses import RedirectResponse

from canvaswiki.core.config import get_settings
from canvaswiki.core.store import WikiStore, get_store


# -----------------------------------------------------------------------------

router = APIRouter(tags=["pages"])


# -----------------------------------------------------------------------------

def page_url(name: str) -> str:
    return f"/page?name={quote(name, safe='')}"


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


# ── List ─────────────────────────────────────────────────────────────────────

@router.get("/pages", response_model=list[str])
async def list_pages(store: WikiStore = Depends(get_store)):
    return store.pages.list()


# ── Create ────────────────────────────────────────────────────────────────────

@router.post("/add")
async def add_page(
    name: str        = Form(default=""),
    content: str     = Form(default=""),
    store: WikiStore = Depends(get_store),
):
    if not name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name required")
    store.pages.put(name, content)
    return _redirect(page_url(name))


# ── Save ──────────────────────────────────────────────────────────────────────

@router.post("/edit")
async def save_page(
    name: str        = Form(default=""),
    content: str     = Form(default=""),
    store: WikiStore = Depends(get_store),
):
    if not name or not store.pages.exists(name):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No such page")
    store.pages.put(name, content)
    return _redirect(page_url(name))


# ── Delete ────────────────────────────────────────────────────────────────────

@router.post("/delete")
async def delete_page(
    name: str        = Query(default=""),
    store: WikiStore = Depends(get_store),
):
    if not name or not store.delete_page(name):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found")
    return _redirect(page_url(get_settings().home_page))


# -----------------------------------------------------------------------------
