#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Comments router
===============
POST /comment   — append a comment; returns every comment on the page
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, Depends, Form, HTTPException, status

from canvaswiki.core.store import PageNotFoundError, WikiStore, get_store
from canvaswiki.schemas import CommentResponse


# -----------------------------------------------------------------------------

router = APIRouter(tags=["comments"])


# -----------------------------------------------------------------------------

@router.post("/comment", response_model=list[CommentResponse])
async def add_comment(
    page: str        = Form(default=""),
    author: str      = Form(default=""),
    text: str        = Form(default=""),
    store: WikiStore = Depends(get_store),
):
    try:
        store.comments.add(page, author, text)
    except PageNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return [CommentResponse.from_comment(c) for c in store.comments.list(page)]


# -----------------------------------------------------------------------------
