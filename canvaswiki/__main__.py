#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Run the wiki server:  python -m canvaswiki  (or the ``canvaswiki`` script)
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import argparse
import logging

import uvicorn

from canvaswiki.core.config import get_settings


# -----------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(prog="canvaswiki", description=__doc__.strip())
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--reload", action="store_true", help="restart on code changes")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    uvicorn.run(
        "canvaswiki.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


# -----------------------------------------------------------------------------

if __name__ == "__main__":
    main()


# -----------------------------------------------------------------------------
