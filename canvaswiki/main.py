#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
CanvasWiki — FastAPI application factory
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from canvaswiki.core.config import get_settings
from canvaswiki.core.store import init_store
from canvaswiki.routes import comments, pages, public, render, uploads
from canvaswiki.ui import views

log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

WELCOME_TEXT = """Welcome to CanvasWiki!

Use the editor to add **bold**, *italic*, [links](https://example.com) and media.
Upload images, audio or video with the Upload button on the edit screen.

Media can be placed anywhere on the page with positioning metadata:
![thumb](/public/uploads/example.png){x:50,y:60,w:200}
"""


# -----------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    settings = get_settings()
    init_store(seed={settings.home_page: WELCOME_TEXT})
    log.info("%s %s ready (uploads in %s)",
             settings.app_name, settings.app_version, settings.upload_dir_resolved)
    yield


# -----------------------------------------------------------------------------

def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="An in-memory wiki with positioned media, uploads and comments.",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    # ── Static files ──────────────────────────────────────────────────────

    static_dir = Path(__file__).parent / "static"
    app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    # ── CORS ──────────────────────────────────────────────────────────────

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ───────────────────────────────────────────────────────────

    app.include_router(public.router)
    app.include_router(pages.router)
    app.include_router(comments.router)
    app.include_router(uploads.router)
    app.include_router(render.router)
    app.include_router(views.router)

    # ── Global exception handlers ─────────────────────────────────────────

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        # Unknown path and known path with the wrong method look the same.
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return PlainTextResponse("Not found", status_code=status.HTTP_404_NOT_FOUND)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return PlainTextResponse("Bad request", status_code=status.HTTP_400_BAD_REQUEST)

    return app


# -----------------------------------------------------------------------------

app = create_app()


# -----------------------------------------------------------------------------
