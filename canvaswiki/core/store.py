#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
In-memory page and comment store.

A single ``WikiStore`` owns both maps and one re-entrant lock.  Every
read-modify-write (page delete with comment cascade, comment append after the
page existence check) runs under that lock, so the store is safe whether the
server runs on one event loop or on a pool of worker threads.

Concurrent saves to the same page are last-write-wins.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html
import itertools
import logging
import threading
from typing import Optional

from canvaswiki.models import Comment


log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

class PageNotFoundError(LookupError):
    """Raised when an operation references a page that does not exist."""

    def __init__(self, name: str):
        super().__init__(f"Page '{name}' not found")
        self.name = name


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Pages
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class PageStore:
    """Page name → raw markup.  Names are case-sensitive."""

    def __init__(self, lock: threading.RLock):
        self._lock = lock
        self._pages: dict[str, str] = {}

    def get(self, name: str) -> Optional[str]:
        with self._lock:
            return self._pages.get(name)

    def exists(self, name: str) -> bool:
        with self._lock:
            return name in self._pages

    __contains__ = exists

    def put(self, name: str, content: str) -> None:
        with self._lock:
            created = name not in self._pages
            self._pages[name] = content
        log.debug("page %s: %r (%d chars)", "created" if created else "updated", name, len(content))

    def setdefault(self, name: str, content: str = "") -> str:
        """Return the page content, creating the page with *content* if missing."""
        with self._lock:
            if name not in self._pages:
                self._pages[name] = content
                log.debug("page auto-created: %r", name)
            return self._pages[name]

    def remove(self, name: str) -> bool:
        with self._lock:
            return self._pages.pop(name, None) is not None

    def list(self) -> list[str]:
        """Page names in insertion order."""
        with self._lock:
            return list(self._pages)

    def __len__(self) -> int:
        with self._lock:
            return len(self._pages)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Comments
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class CommentStore:
    """Page name → comments, oldest first."""

    def __init__(self, lock: threading.RLock, pages: PageStore):
        self._lock = lock
        self._pages = pages
        self._comments: dict[str, list[Comment]] = {}
        self._ids = itertools.count(1)

    def add(self, page: str, author: str, text: str) -> Comment:
        """Append a comment to *page*.

        ``author`` and ``text`` are escaped here, once.  The page must exist;
        the check and the append happen under the same lock so a concurrent
        delete cannot leave an orphaned comment behind.
        """
        with self._lock:
            if not self._pages.exists(page):
                raise PageNotFoundError(page)
            comment = Comment(
                id=next(self._ids),
                page=page,
                author=html.escape(author or "anon", quote=False),
                text=html.escape(text or "", quote=False),
            )
            self._comments.setdefault(page, []).append(comment)
        log.debug("comment #%d added to %r", comment.id, page)
        return comment

    def list(self, page: str) -> list[Comment]:
        with self._lock:
            return list(self._comments.get(page, ()))

    def drop(self, page: str) -> int:
        """Remove every comment on *page*; returns how many were removed."""
        with self._lock:
            return len(self._comments.pop(page, ()))


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Store
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class WikiStore:

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.pages = PageStore(self._lock)
        self.comments = CommentStore(self._lock, self.pages)

    def delete_page(self, name: str) -> bool:
        """Delete a page and its comments.  Returns False if it did not exist."""
        with self._lock:
            if not self.pages.remove(name):
                return False
            dropped = self.comments.drop(name)
        log.debug("page deleted: %r (%d comments removed)", name, dropped)
        return True


# -----------------------------------------------------------------------------

_store: WikiStore | None = None


# -----------------------------------------------------------------------------

def init_store(seed: dict[str, str] | None = None) -> WikiStore:
    """Create the process-wide store.  Call once at startup."""
    global _store
    _store = WikiStore()
    for name, content in (seed or {}).items():
        _store.pages.put(name, content)
    if seed:
        log.info("store seeded with %d page(s)", len(seed))
    return _store


# -----------------------------------------------------------------------------

def get_store() -> WikiStore:
    """FastAPI dependency returning the process-wide store."""
    if _store is None:
        init_store()
    return _store


# -----------------------------------------------------------------------------
