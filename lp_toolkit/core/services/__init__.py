from __future__ import annotations

"""High-level orchestration services (build, minification, images)."""

from .build_service import BuildService  # noqa: F401
from .image_service import ImageService  # noqa: F401
from .optimization_service import OptimizationService  # noqa: F401

__all__: list[str] = [
    "BuildService",
    "ImageService",
    "OptimizationService",
]
