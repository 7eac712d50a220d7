import json

import pytest

from lp_toolkit.core.exceptions import ConfigurationError
from lp_toolkit.core.services import BuildService, ImageService
from tests.conftest import write_image


def _write_env(root, **values):
    (root / ".env").write_text("\n".join(f"{k}={v}" for k, v in values.items()) + "\n", encoding="utf-8")


class TestBuildServiceRun:
    """Test cases for stage orchestration."""

    def test_full_build_outputs(self, sample_project):
        report = BuildService(sample_project).run()

        build = sample_project / "build"
        assert report.ok, report.failed
        assert {"images", "html", "css", "js"} <= set(report.succeeded)
        assert (build / "index.html").is_file()
        assert (build / "style.min.css").is_file()
        assert (build / "script.min.js").is_file()
        assert (build / "images" / "hero.jpg").is_file()
        assert (build / "images" / "hero.webp").is_file()

    def test_html_uses_sp_set_and_measured_dimensions(self, sample_project):
        BuildService(sample_project).run()
        html = (sample_project / "build" / "index.html").read_text(encoding="utf-8")

        assert "images/banner-sp.avif" in html
        assert "images/hero-sp" not in html
        assert "120" in html and "60" in html
        assert "style.min.css" in html
        assert "script.min.js" in html

    def test_optional_inputs_skipped(self, sample_project):
        report = BuildService(sample_project).run()
        assert "favicon" in report.skipped
        assert "htaccess" in report.skipped
        assert not (sample_project / "build" / "favicon.ico").exists()

    def test_favicon_and_htaccess(self, sample_project):
        write_image(sample_project / "src" / "images" / "favicon.png", (256, 256))
        (sample_project / "src" / ".htaccess").write_text("Options -Indexes\n", encoding="utf-8")
        _write_env(sample_project, BASE_PATH="/lp/")

        report = BuildService(sample_project).run()

        build = sample_project / "build"
        assert "favicon" in report.succeeded
        assert (build / "favicon.ico").is_file()
        assert (build / "apple-touch-icon.png").is_file()
        assert (build / ".htaccess").read_text(encoding="utf-8") == "Options -Indexes\n"
        html = (build / "index.html").read_text(encoding="utf-8")
        assert "/lp/favicon.ico" in html
        assert "/lp/style.min.css" in html

    def test_favicon_links_follow_configured_sizes(self, sample_project):
        write_image(sample_project / "src" / "images" / "favicon.png", (64, 64))
        config = {
            "favicon": {"sizes": [{"size": 48, "name": "icon-48.png", "link": "icon"}]},
            "minify": {"html": False},
        }

        BuildService(sample_project, build_config=config).run()

        html = (sample_project / "build" / "index.html").read_text(encoding="utf-8")
        assert (sample_project / "build" / "icon-48.png").is_file()
        assert 'sizes="48x48" href="/icon-48.png"' in html
        assert "apple-touch-icon" not in html

    def test_htaccess_copied_byte_for_byte(self, sample_project):
        payload = "# caf\xe9\nOptions -Indexes\n".encode("latin-1")
        (sample_project / "src" / ".htaccess").write_bytes(payload)

        report = BuildService(sample_project).run()

        assert "htaccess" in report.succeeded
        assert (sample_project / "build" / ".htaccess").read_bytes() == payload

    def test_env_configuration_reaches_outputs(self, sample_project):
        _write_env(
            sample_project,
            SITE_TITLE="Spring Sale",
            GA_MEASUREMENT_ID="G-TEST",
            STRUCTURED_DATA_TYPE="FAQPage",
        )
        BuildService(sample_project).run()
        build = sample_project / "build"
        html = (build / "index.html").read_text(encoding="utf-8")
        js = (build / "script.min.js").read_text(encoding="utf-8")

        assert "Spring Sale" in html
        assert "G-TEST" in html
        assert "FAQPage" in html
        assert "gtag" in js
        assert "__CONVERSION_CODE_PLACEHOLDER__" not in js

    def test_failed_stage_does_not_block_siblings(self, sample_project):
        (sample_project / "src" / "style.css").unlink()

        report = BuildService(sample_project).run()

        assert "css" in report.failed
        assert "html" in report.succeeded
        assert "js" in report.succeeded
        assert (sample_project / "build" / "script.min.js").is_file()
        assert not (sample_project / "build" / "style.min.css").exists()

    def test_missing_avif_support_fails_images_stage(self, sample_project):
        images = ImageService({})
        images._avif_supported = False

        report = BuildService(sample_project, image_service=images).run()

        assert "images" in report.failed
        assert "html" in report.succeeded
        assert (sample_project / "build" / "images" / "hero.webp").is_file()

    def test_html_without_head_fails_only_html(self, sample_project):
        (sample_project / "src" / "index.html").write_text("<p>x</p>", encoding="utf-8")
        _write_env(sample_project, SITE_TITLE="T")

        report = BuildService(sample_project).run()

        assert "html" in report.failed
        assert "css" in report.succeeded

    def test_stale_output_removed(self, sample_project):
        stale = sample_project / "build" / "old.html"
        stale.parent.mkdir()
        stale.write_text("old")
        BuildService(sample_project).run()
        assert not stale.exists()

    def test_output_dir_failure_is_fatal(self, sample_project):
        (sample_project / "blocker").write_text("file")
        config = {"paths": {"source_dir": "src", "output_dir": "blocker/build"}}
        with pytest.raises(ConfigurationError):
            BuildService(sample_project, build_config=config).run()

    def test_recorded_dimensions_take_precedence(self, sample_project):
        (sample_project / ".image-dimensions.json").write_text(
            json.dumps({"src/images/hero.jpg": {"width": 777, "height": 333}}), encoding="utf-8"
        )
        BuildService(sample_project).run()
        html = (sample_project / "build" / "index.html").read_text(encoding="utf-8")
        assert "777" in html


class TestAnalyzeImages:
    def test_writes_dimension_file(self, sample_project):
        table = BuildService(sample_project).analyze_images()
        payload = json.loads((sample_project / ".image-dimensions.json").read_text(encoding="utf-8"))
        assert payload["images/hero.jpg"] == {"width": 120, "height": 60}
        assert len(table) == 3
