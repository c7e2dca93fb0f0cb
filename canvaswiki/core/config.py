#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Application configuration.

All values can be overridden via environment variables or a .env file.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from canvaswiki._version import __version__ as _pkg_version


# -----------------------------------------------------------------------------

class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ────────────────────────────────────────────────────────

    app_name: str = "CanvasWiki"
    app_version: str = _pkg_version
    debug: bool = False
    environment: Literal["development", "testing", "production"] = "development"
    log_level: str = "INFO"

    # ── Server ─────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    port: int = 3000

    # ── Storage ────────────────────────────────────────────────────────────

    public_root: Path = Path("./public")
    uploads_dirname: str = "uploads"

    # ── Wiki defaults ──────────────────────────────────────────────────────

    home_page: str = "Home"
    site_name: str = "CanvasWiki"

    # ── CORS ───────────────────────────────────────────────────────────────

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"

    @property
    def upload_dir_resolved(self) -> Path:
        p = self.public_root / self.uploads_dirname
        p.mkdir(parents=True, exist_ok=True)
        return p

    @property
    def upload_url_prefix(self) -> str:
        return f"/public/{self.uploads_dirname}"


# -----------------------------------------------------------------------------

@lru_cache
def get_settings() -> Settings:
    return Settings()


# -----------------------------------------------------------------------------
