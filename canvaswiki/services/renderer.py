#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Markup renderer
===============
Renders wiki page text to an HTML fragment.

The renderer is an ordered pipeline of independent passes.  Each pass takes
the output of the previous one, so the order is part of the contract:
escaping happens first and every later pass works on already-escaped text.

Grammar, one rule per pass (``.`` never matches a newline)::

    link       := "[" label "](" url ")"         label := [^\\]]+
                                                  url   := https?://[^\\s)]+
                  (left alone when preceded by "!" and followed by "{")
    bold       := "**" .+? "**"
    italic     := "*" .+? "*"
    positioned := "![" alt "](" path "){" meta "}"
                                                  alt   := [^\\]]*
                                                  path  := [^)]+
                                                  meta  := [^}]+
                                                  meta  := pair ("," pair)*
                                                  pair  := key ":" value
    bare-media := ^ https?://\\S+ "." ext $       (whole line, ext case-insensitive)

Supported syntax
----------------
**bold**  /  *italic*  /  [label](https://example.com)
![alt](uploads/pic.png){x:50,y:60,w:200}     — absolutely positioned image
![alt](uploads/clip.webm){x:0,y:0}           — absolutely positioned video
https://example.com/song.mp3                 — on its own line: audio player
https://example.com/clip.mp4                 — on its own line: video player
https://example.com/pic.png                  — on its own line: inline image
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html
import math
import re
from dataclasses import dataclass
from typing import Callable, Optional


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def escape_html(text: str) -> str:
    """Escape ``&``, ``<`` and ``>``.  Quotes are left alone."""
    if not text:
        return ""
    return html.escape(str(text), quote=False)


def _attr(value: str) -> str:
    # Input is already entity-escaped; only the attribute delimiter remains.
    return value.replace('"', "&quot;")


_LEADING_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _leading_number(raw: str) -> float:
    """Parse the numeric prefix of *raw* (``"50px"`` → 50.0); 0.0 if there is none."""
    m = _LEADING_NUMBER_RE.match(raw)
    if not m:
        return 0.0
    try:
        value = float(m.group(1))
    except (ValueError, OverflowError):
        return 0.0
    return value if math.isfinite(value) else 0.0


_EXPONENT_PAD_RE = re.compile(r"e([+-])0+(?=\d)")


def _fmt(n: float) -> str:
    if n == int(n):
        return str(int(n))
    return _EXPONENT_PAD_RE.sub(r"e\1", repr(n))


# -----------------------------------------------------------------------------
# Positioning metadata
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0
    w: Optional[float] = None

    @property
    def style(self) -> str:
        style = f"left:{_fmt(self.x)}px;top:{_fmt(self.y)}px;"
        if self.w:
            style += f"width:{_fmt(self.w)}px;"
        return style


def parse_position(meta: str) -> Position:
    """
    Parse ``x:50,y:60,w:200`` style metadata.

    Unknown keys are ignored.  A missing or non-numeric value is 0; a zero or
    missing width means "no width".  Never raises.
    """
    values: dict[str, float] = {}
    for pair in meta.split(","):
        key, _, raw = pair.partition(":")
        key = key.strip()
        if key:
            values[key] = _leading_number(raw)
    return Position(
        x=values.get("x", 0.0),
        y=values.get("y", 0.0),
        w=values.get("w") or None,
    )


# -----------------------------------------------------------------------------
# Passes
# -----------------------------------------------------------------------------

def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


# -----------------------------------------------------------------------------

_LINK_RE = re.compile(r"\[([^\]]+)\]\((https?://[^\s)]+)\)")


def render_links(text: str) -> str:
    def _replace(m: re.Match) -> str:
        # "![alt](url){meta}" is a positioned embed, left for its own pass.
        if text[m.start() - 1 : m.start()] == "!" and text.startswith("{", m.end()):
            return m.group(0)
        return (
            f'<a href="{_attr(m.group(2))}" target="_blank" '
            f'rel="noopener noreferrer">{m.group(1)}</a>'
        )

    return _LINK_RE.sub(_replace, text)


# -----------------------------------------------------------------------------

_BOLD_RE   = re.compile(r"\*\*(.+?)\*\*")
_ITALIC_RE = re.compile(r"\*(.+?)\*")


def render_emphasis(text: str) -> str:
    """Bold first, then italic.  The first closing marker ends the span."""
    text = _BOLD_RE.sub(r"<strong>\1</strong>", text)
    return _ITALIC_RE.sub(r"<em>\1</em>", text)


# -----------------------------------------------------------------------------

_POSITIONED_RE  = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)\{([^}]+)\}")
_VIDEO_PATH_RE  = re.compile(r"\.(mp4|webm)$", re.IGNORECASE)


def render_positioned_media(text: str) -> str:
    def _replace(m: re.Match) -> str:
        alt, src, meta = m.group(1), m.group(2), m.group(3)
        style = parse_position(meta).style
        if _VIDEO_PATH_RE.search(src):
            return f'<video class="pos" src="{_attr(src)}" controls style="{style}"></video>'
        return f'<img class="pos" src="{_attr(src)}" alt="{_attr(alt)}" style="{style}">'

    return _POSITIONED_RE.sub(_replace, text)


# -----------------------------------------------------------------------------

_BARE_AUDIO_RE = re.compile(r"^(https?://\S+\.(?:mp3|wav))$", re.IGNORECASE | re.MULTILINE)
_BARE_VIDEO_RE = re.compile(r"^(https?://\S+\.(?:mp4|webm))$", re.IGNORECASE | re.MULTILINE)
_BARE_IMAGE_RE = re.compile(r"^(https?://\S+\.(?:png|jpe?g|gif))$", re.IGNORECASE | re.MULTILINE)


def render_bare_media(text: str) -> str:
    """Embed a media URL that occupies a whole line."""
    text = _BARE_AUDIO_RE.sub(lambda m: f'<audio controls src="{_attr(m.group(1))}"></audio>', text)
    text = _BARE_VIDEO_RE.sub(lambda m: f'<video controls src="{_attr(m.group(1))}"></video>', text)
    return _BARE_IMAGE_RE.sub(lambda m: f'<img class="inline" src="{_attr(m.group(1))}">', text)


# -----------------------------------------------------------------------------

def render_line_breaks(text: str) -> str:
    return text.replace("\n", "<br>")


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------

PIPELINE: tuple[Callable[[str], str], ...] = (
    normalize_newlines,
    escape_html,
    render_links,
    render_emphasis,
    render_positioned_media,
    render_bare_media,
    render_line_breaks,
)


def render(text: str | None) -> str:
    """Render wiki markup to an HTML fragment.  Never raises on any input."""
    if not text:
        return ""
    out = str(text)
    for step in PIPELINE:
        out = step(out)
    return out


# -----------------------------------------------------------------------------
