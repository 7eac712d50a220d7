from __future__ import annotations

"""Loaders for the build's external inputs.

Key components:
- load_env: parses the project ``.env`` file into a flat string map
- load_image_dimensions: reads ``.image-dimensions.json`` into an
  :class:`~lp_toolkit.core.models.ImageDimensionTable`
"""

from .env_file import load_env, parse_env_text
from .image_dimensions import load_image_dimensions

__all__ = ["load_env", "parse_env_text", "load_image_dimensions"]
