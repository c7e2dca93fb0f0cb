#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Uploads router
==============
POST /upload   — multipart/form-data with a ``file`` part

The body is buffered in full before anything is written.  The client's
declared content type is trusted.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from canvaswiki.models import ParsedForm
from canvaswiki.schemas import UploadResponse
from canvaswiki.services.multipart import MultipartParser, get_boundary, parse_urlencoded
from canvaswiki.services.uploads import AssetIndex, get_assets

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

router = APIRouter(tags=["uploads"])


# -----------------------------------------------------------------------------

async def read_form(request: Request) -> ParsedForm:
    """Stream the request body through the multipart parser."""
    boundary = get_boundary(request.headers.get("content-type"))
    if boundary is None:
        return parse_urlencoded(await request.body())
    parser = MultipartParser(boundary)
    async for chunk in request.stream():
        parser.feed(chunk)
    return parser.close()


# -----------------------------------------------------------------------------

@router.post("/upload", response_model=UploadResponse)
async def upload_file(
    request: Request,
    assets: AssetIndex = Depends(get_assets),
):
    form = await read_form(request)
    if form.file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file")

    try:
        asset = await assets.save(form.file)
    except OSError:
        log.exception("failed to store upload %r", form.file.filename)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Write error")

    return UploadResponse(path=asset.url)


# -----------------------------------------------------------------------------
