from __future__ import annotations

"""High-level build service for the landing page.

Entry-point for any front-end (CLI, tests) that needs to turn a project's
``src/`` tree into a deployable ``build/`` directory.  The build is a linear
sequence of stages:

    images -> favicon -> htaccess -> html -> css -> js

Each stage is wrapped on its own: a failure is logged, recorded in the
returned :class:`~lp_toolkit.core.models.BuildReport` and the next stage still
runs.  Only preparing the output directory is fatal.
"""

import logging
import shutil
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, Optional, TypeVar

from lp_toolkit.config import ConfigManager
from lp_toolkit.core.converter import assemble_document
from lp_toolkit.core.exceptions import AssetError
from lp_toolkit.core.generators import generate_favicons, parse_favicon_sizes
from lp_toolkit.core.importers import load_env, load_image_dimensions
from lp_toolkit.core.models import BuildContext, BuildReport, ImageDimensionTable, SiteConfig
from lp_toolkit.core.package_utils import (
    copy_tree,
    find_sp_images,
    reset_output_dir,
    write_text_file,
)
from lp_toolkit.core.services.image_service import ImageService
from lp_toolkit.core.services.optimization_service import OptimizationService

logger = logging.getLogger(__name__)

__all__ = ["BuildService"]

T = TypeVar("T")

_STAGE_LABELS = {
    "images": "Image copy",
    "favicon": "Favicon generation",
    "htaccess": ".htaccess copy",
    "html": "HTML optimization",
    "css": "CSS optimization",
    "js": "JS optimization",
}


class BuildService:
    """Builds one project directory; zero knowledge of the front-end."""

    def __init__(
        self,
        project_root: str | Path,
        build_config: Optional[Dict[str, Any]] = None,
        image_service: Optional[ImageService] = None,
        optimizer: Optional[OptimizationService] = None,
    ) -> None:
        self.project_root = Path(project_root).resolve()
        cfg = build_config if build_config is not None else ConfigManager().get_build_config()
        self.paths = cfg.get("paths", {})
        self.sources = cfg.get("sources", {})
        self.outputs = cfg.get("outputs", {})
        self.favicon_settings = cfg.get("favicon", {})

        self.source_dir = self.project_root / self.paths.get("source_dir", "src")
        self.output_dir = self.project_root / self.paths.get("output_dir", "build")
        self.images_dir_name = self.paths.get("images_dir", "images")

        self.image_service = image_service or ImageService(cfg.get("images", {}))
        self.optimizer = optimizer or OptimizationService(cfg.get("minify", {}))

    # ---------------------------------------------------------------------
    # PUBLIC API
    # ---------------------------------------------------------------------
    def load_site_config(self) -> SiteConfig:
        return SiteConfig.from_mapping(load_env(self.project_root / self.paths.get("env_file", ".env")))

    def load_dimensions(self) -> ImageDimensionTable:
        return load_image_dimensions(self.project_root / self.paths.get("dimensions_file", ".image-dimensions.json"))

    def analyze_images(self) -> ImageDimensionTable:
        """Measure ``src/images`` and write the dimension file for later builds."""
        table = self.image_service.analyze(self.source_dir / self.images_dir_name, self.source_dir)
        target = self.project_root / self.paths.get("dimensions_file", ".image-dimensions.json")
        self.image_service.write_dimensions(table, target)
        logger.info("✓ Image dimensions written to %s", target.name)
        return table

    def run(self) -> BuildReport:
        """Run every stage and return the per-stage report.

        Raises:
            ConfigurationError: if the output directory cannot be prepared.
        """
        logger.info("Building LP...")

        site = self.load_site_config()
        dimensions = self.load_dimensions()
        if site.normalized_base_path():
            logger.info("Using BASE_PATH: %s", site.normalized_base_path())

        reset_output_dir(self.output_dir)
        report = BuildReport()

        images_dir = self.source_dir / self.images_dir_name
        sp_images = self._run_stage(report, "images", lambda: self._copy_images(report)) or frozenset()
        if not len(dimensions) and images_dir.is_dir():
            logger.debug("No recorded image dimensions; measuring %s", images_dir)
            dimensions = self.image_service.analyze(images_dir, self.source_dir)

        context = BuildContext(site=site, dimensions=dimensions, sp_images=sp_images)

        favicon_tags = self._run_stage(report, "favicon", lambda: self._build_favicons(context, report)) or ""
        self._run_stage(report, "htaccess", lambda: self._copy_htaccess(report))
        self._run_stage(report, "html", lambda: self._build_html(context, favicon_tags))
        self._run_stage(report, "css", self._build_css)
        self._run_stage(report, "js", lambda: self._build_js(site))

        if report.ok:
            logger.info("✓ Build complete! Output: %s/", self.output_dir.name)
        else:
            logger.warning("Build finished with errors: %s", report.summary())
        return report

    # ---------------------------------------------------------------------
    # Stage runner
    # ---------------------------------------------------------------------
    def _run_stage(self, report: BuildReport, stage: str, func: Callable[[], T]) -> Optional[T]:
        label = _STAGE_LABELS.get(stage, stage)
        try:
            result = func()
        except Exception as exc:
            logger.error("✗ %s failed: %s", label, exc)
            logger.debug("Stage %s traceback", stage, exc_info=True)
            report.failed[stage] = str(exc)
            return None
        if stage not in report.skipped:
            report.succeeded.append(stage)
        return result

    # ---------------------------------------------------------------------
    # Stages
    # ---------------------------------------------------------------------
    def _copy_images(self, report: BuildReport) -> FrozenSet[str]:
        images_dir = self.source_dir / self.images_dir_name
        if not images_dir.is_dir():
            logger.info("  No images directory")
            report.skipped.append("images")
            return frozenset()

        copied_to = self.output_dir / self.images_dir_name
        count = copy_tree(images_dir, copied_to)
        variants = self.image_service.write_variants(copied_to)
        sp_images = find_sp_images(self.source_dir)
        if sp_images:
            logger.info("✓ Images copied (%d SP images detected)", len(sp_images))
        else:
            logger.info("✓ Images copied")
        logger.debug("Copied %d file(s), wrote %d variant(s)", count, variants)
        return sp_images

    def _build_favicons(self, context: BuildContext, report: BuildReport) -> str:
        source = self.source_dir / self.images_dir_name / self.favicon_settings.get("source", "favicon.png")
        sizes = parse_favicon_sizes(self.favicon_settings.get("sizes")) or None
        tags = generate_favicons(
            source,
            self.output_dir,
            context.base_path,
            sizes=sizes,
            ico_size=self.favicon_settings.get("ico_size"),
        )
        if not tags:
            report.skipped.append("favicon")
        return tags

    def _copy_htaccess(self, report: BuildReport) -> None:
        source = self.source_dir / self.sources.get("htaccess", ".htaccess")
        if not source.is_file():
            report.skipped.append("htaccess")
            return
        shutil.copy2(source, self.output_dir / source.name)
        logger.info("✓ .htaccess copied")

    def _build_html(self, context: BuildContext, favicon_tags: str) -> None:
        html = self._read_source("html", "index.html")
        assembled = assemble_document(
            html,
            context,
            favicon_tags=favicon_tags,
            asset_names=(
                self.sources.get("css", "style.css"),
                self.outputs.get("css", "style.min.css"),
                self.sources.get("js", "script.js"),
                self.outputs.get("js", "script.min.js"),
            ),
        )
        write_text_file(self.output_dir / self.outputs.get("html", "index.html"), self.optimizer.minify_html(assembled))
        logger.info("✓ HTML optimized")

    def _build_css(self) -> None:
        css = self._read_source("css", "style.css")
        write_text_file(self.output_dir / self.outputs.get("css", "style.min.css"), self.optimizer.minify_css(css))
        logger.info("✓ CSS optimized")

    def _build_js(self, site: SiteConfig) -> None:
        js = self._read_source("js", "script.js")
        write_text_file(self.output_dir / self.outputs.get("js", "script.min.js"), self.optimizer.optimize_script(js, site))
        logger.info("✓ JS optimized")

    def _read_source(self, stage: str, default_name: str) -> str:
        path = self.source_dir / self.sources.get(stage, default_name)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise AssetError(str(path), stage=stage, cause=exc) from exc
