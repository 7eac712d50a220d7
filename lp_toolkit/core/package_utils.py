"""Output directory utilities for the build.

These utilities handle the disk side of a build:
- Clearing and recreating the output directory
- Copying the images tree
- Detecting smartphone (``-sp``) image variants
- Writing built files
"""

from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path
from typing import FrozenSet, Set

from lp_toolkit.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

__all__ = [
    "reset_output_dir",
    "copy_tree",
    "find_sp_images",
    "write_text_file",
]

_SP_IMAGE_PATTERN = re.compile(r"-sp(\.(?:png|jpe?g))$", re.IGNORECASE)


def reset_output_dir(output_dir: Path) -> None:
    """Remove *output_dir* entirely and recreate it empty.

    This is the only fatal step of a build: failures raise
    :class:`ConfigurationError`.
    """
    try:
        if output_dir.exists():
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("I/O FAIL: reset output dir path=%s", output_dir, exc_info=True)
        raise ConfigurationError(f"Cannot prepare output directory {output_dir}: {exc}", cause=exc) from exc
    logger.debug("Output directory ready: %s", output_dir)


def copy_tree(source: Path, destination: Path) -> int:
    """Recursively copy *source* into *destination*; return the number of files.

    A missing *source* counts as an empty tree.
    """
    if not source.is_dir():
        return 0
    destination.mkdir(parents=True, exist_ok=True)
    count = 0
    for entry in sorted(source.iterdir()):
        target = destination / entry.name
        if entry.is_dir():
            count += copy_tree(entry, target)
        else:
            shutil.copy2(entry, target)
            count += 1
    return count


def find_sp_images(root: Path) -> FrozenSet[str]:
    """Return PC-side paths (relative to *root*, ``/``-separated) with an SP variant.

    ``images/banner-sp.jpg`` yields ``images/banner.jpg``.  The PC file itself
    need not exist.  A missing *root* yields an empty set.
    """
    found: Set[str] = set()

    def _scan(current: Path) -> None:
        try:
            entries = sorted(current.iterdir())
        except (FileNotFoundError, NotADirectoryError):
            return
        for entry in entries:
            if entry.is_dir():
                _scan(entry)
            elif entry.is_file() and _SP_IMAGE_PATTERN.search(entry.name):
                pc_name = _SP_IMAGE_PATTERN.sub(r"\1", entry.name)
                found.add((entry.parent / pc_name).relative_to(root).as_posix())

    _scan(root)
    return frozenset(found)


def write_text_file(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.debug("I/O: wrote path=%s chars=%d", path, len(content))
    except Exception:
        logger.error("I/O FAIL: write path=%s", path, exc_info=True)
        raise
