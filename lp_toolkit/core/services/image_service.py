from __future__ import annotations

"""Image analysis and next-generation format variants.

The HTML stage needs two things from the images:

- pixel sizes, recorded in ``.image-dimensions.json`` so ``<img>`` tags get
  explicit ``width``/``height``;
- ``.avif``/``.webp`` siblings for every PNG/JPEG, since the generated
  ``<picture>`` sources point at them.

A Pillow build without AVIF support fails the images stage after writing
the WebP files.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import PIL
from PIL import Image, UnidentifiedImageError, features

from lp_toolkit.config import ConfigManager
from lp_toolkit.core.exceptions import StageError
from lp_toolkit.core.models import ImageDimensionTable, ImageSize

logger = logging.getLogger(__name__)

__all__ = ["ImageService", "VARIANT_SOURCE_SUFFIXES"]

VARIANT_SOURCE_SUFFIXES = {".png", ".jpg", ".jpeg"}
_ANALYSED_SUFFIXES = VARIANT_SOURCE_SUFFIXES | {".gif", ".webp", ".avif"}


def _iter_images(root: Path, suffixes: set[str]) -> Iterator[Path]:
    if not root.is_dir():
        return
    for path in sorted(root.rglob("*")):
        if path.is_file() and path.suffix.lower() in suffixes:
            yield path


class ImageService:
    """Pillow-backed helpers for the images tree."""

    def __init__(self, settings: Optional[Dict[str, Any]] = None) -> None:
        if settings is None:
            settings = ConfigManager().get_build_config().get("images", {})
        self.webp_quality = int(settings.get("webp_quality", 80))
        self.avif_quality = int(settings.get("avif_quality", 60))
        self._avif_supported: Optional[bool] = None

    # ------------------------------------------------------------------
    # Dimensions
    # ------------------------------------------------------------------
    def analyze(self, images_dir: Path, relative_to: Path) -> ImageDimensionTable:
        """Measure every image under *images_dir*.

        Keys are ``/``-separated paths relative to *relative_to* (normally the
        source directory, giving ``images/hero.jpg``).  Unreadable files are
        logged and skipped.
        """
        entries: Dict[str, ImageSize] = {}
        for path in _iter_images(images_dir, _ANALYSED_SUFFIXES):
            try:
                with Image.open(path) as img:
                    width, height = img.size
            except (UnidentifiedImageError, OSError) as exc:
                logger.warning("Skipping unreadable image %s: %s", path, exc)
                continue
            key = path.relative_to(relative_to).as_posix()
            entries[key] = ImageSize(width, height)
        logger.info("✓ Analysed %d image(s)", len(entries))
        return ImageDimensionTable(entries)

    @staticmethod
    def write_dimensions(table: ImageDimensionTable, path: Path) -> None:
        payload = table.to_json_payload()
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        logger.debug("I/O: wrote image dimensions path=%s entries=%d", path, len(payload))

    # ------------------------------------------------------------------
    # Variants
    # ------------------------------------------------------------------
    @property
    def avif_supported(self) -> bool:
        if self._avif_supported is None:
            self._avif_supported = bool(features.check("avif"))
        return self._avif_supported

    def write_variants(self, images_dir: Path) -> int:
        """Write ``.webp`` and ``.avif`` siblings for PNG/JPEG files in place.

        Returns the number of variant files written.

        Raises:
            StageError: if there are sources to convert but the installed
                Pillow cannot write AVIF.  WebP siblings are written first.
        """
        written = 0
        sources = list(_iter_images(images_dir, VARIANT_SOURCE_SUFFIXES))
        for path in sources:
            try:
                with Image.open(path) as img:
                    img.load()
                    if img.mode not in ("RGB", "RGBA"):
                        img = img.convert("RGBA" if "A" in img.getbands() or "transparency" in img.info else "RGB")
                    img.save(path.with_suffix(".webp"), format="WEBP", quality=self.webp_quality)
                    written += 1
                    if self.avif_supported:
                        img.save(path.with_suffix(".avif"), format="AVIF", quality=self.avif_quality)
                        written += 1
            except (UnidentifiedImageError, OSError) as exc:
                logger.warning("Could not convert %s: %s", path, exc)
        if sources and not self.avif_supported:
            raise StageError(
                "images",
                f"Pillow {PIL.__version__} was built without AVIF support; "
                f"{len(sources)} image(s) have no .avif variant",
            )
        return written
