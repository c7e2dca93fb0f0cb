#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pytest fixtures for CanvasWiki tests.
Each test gets a fresh in-memory store and its own upload directory.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from canvaswiki.core.config import Settings, get_settings
from canvaswiki.core.store import WikiStore, get_store
from canvaswiki.main import create_app
from canvaswiki.services.uploads import DirectoryAssetIndex, get_assets


# -----------------------------------------------------------------------------

@pytest.fixture
def store() -> WikiStore:
    return WikiStore()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(environment="testing", public_root=tmp_path / "public")


@pytest.fixture
def assets(settings) -> DirectoryAssetIndex:
    return DirectoryAssetIndex(settings.upload_dir_resolved, settings.upload_url_prefix)


@pytest_asyncio.fixture(scope="function")
async def client(store, settings, assets):
    """HTTP test client wired to an isolated store and upload directory."""
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_assets] = lambda: assets

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# -----------------------------------------------------------------------------
# Helper functions for tests
# -----------------------------------------------------------------------------

async def create_page(client: AsyncClient, name: str, content: str = "") -> None:
    resp = await client.post("/add", data={"name": name, "content": content})
    assert resp.status_code == 303, resp.text


async def post_comment(client: AsyncClient, page: str, author: str = "alice",
                       text: str = "hello"):
    return await client.post("/comment", data={"page": page, "author": author, "text": text})


def multipart_body(boundary: str, parts: list[tuple[str, bytes]]) -> bytes:
    """Assemble a multipart body from (header block, payload) pairs."""
    out = b""
    for headers, payload in parts:
        out += b"--" + boundary.encode() + b"\r\n" + headers.encode() + b"\r\n\r\n" + payload + b"\r\n"
    return out + b"--" + boundary.encode() + b"--\r\n"


# -----------------------------------------------------------------------------
