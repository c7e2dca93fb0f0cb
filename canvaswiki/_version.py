#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Package version, taken from the installed distribution's metadata."""
# -----------------------------------------------------------------------------

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION = "canvaswiki"

try:
    __version__: str = version(DISTRIBUTION)
except PackageNotFoundError:
    # Not installed, e.g. imported straight from a checkout.
    __version__ = "0.0.0"
