from __future__ import annotations

"""Image dimension table loading.

The table is produced by :class:`~lp_toolkit.core.services.ImageService`
(or any external analysis tool) as a JSON object mapping a path to
``{"width": int, "height": int}``.
"""

import json
import logging
from pathlib import Path

from lp_toolkit.core.models import ImageDimensionTable

logger = logging.getLogger(__name__)

__all__ = ["load_image_dimensions"]


def load_image_dimensions(path: Path) -> ImageDimensionTable:
    """Load the dimension table at *path*.

    A missing file yields an empty table.  An unreadable or malformed file is
    logged and also yields an empty table so the HTML stage can still run.
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.debug("No image dimension file at %s", path)
        return ImageDimensionTable()
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable image dimension file %s: %s", path, exc)
        return ImageDimensionTable()

    if not isinstance(payload, dict):
        logger.warning("Ignoring image dimension file %s: expected a JSON object", path)
        return ImageDimensionTable()

    table = ImageDimensionTable.from_json_payload(payload)
    logger.debug("Loaded %d image dimension(s) from %s", len(table), path)
    return table
