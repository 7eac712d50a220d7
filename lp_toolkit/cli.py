# -*- coding: utf-8 -*-

"""
Command-line interface for LP Toolkit.

    lp-toolkit build [--project-root DIR] [--strict] [--verbose]
    lp-toolkit images [--project-root DIR]
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from lp_toolkit.core.exceptions import BuildError
from lp_toolkit.core.services import BuildService
from lp_toolkit.logging_config import setup_logging
from lp_toolkit.version import get_app_version

logger = logging.getLogger("lp_toolkit.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lp-toolkit",
        description="Build an optimized, deployable landing page from src/ into build/",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_app_version()}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug output")
    sub = parser.add_subparsers(dest="command")

    build = sub.add_parser("build", help="Run the full build")
    build.add_argument("--project-root", default=".", help="Directory holding src/ and .env")
    build.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when any stage fails",
    )

    images = sub.add_parser("images", help="Record image dimensions to .image-dimensions.json")
    images.add_argument("--project-root", default=".", help="Directory holding src/")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, configure logging and dispatch the sub-command."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    command = args.command or "build"

    setup_logging(verbose=args.verbose)

    try:
        service = BuildService(getattr(args, "project_root", "."))
        if command == "images":
            service.analyze_images()
            return 0
        report = service.run()
    except BuildError as exc:
        logger.error("Build failed: %s", exc)
        return 1
    except Exception:
        logger.exception("Build failed")
        return 1

    if getattr(args, "strict", False) and not report.ok:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
