"""Test configuration and fixtures for LP Toolkit.

This module provides shared fixtures: temporary directories, a sample landing
page project on disk, and isolation of the configuration singleton from the
developer's own ``~/.lp_toolkit`` overrides.
"""

import pytest
import tempfile
import shutil
import logging
from pathlib import Path

# Add project root to path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from PIL import Image

from lp_toolkit.config import ConfigManager

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


SAMPLE_HTML = """<!DOCTYPE html>
<html lang="ja">
<head>
<meta charset="utf-8">
<title>Placeholder</title>
<link rel="stylesheet" href="style.css">
</head>
<body>
<img src="images/hero.jpg" alt="Hero">
<img src="images/banner.jpg" alt="Banner">
<img src="images/icon.svg" alt="Icon">
<details><summary>What is it?</summary><p>A landing page.</p></details>
<a href="tel:0000" data-cv="tel">Call</a>
<script src="script.js"></script>
</body>
</html>
"""

SAMPLE_CSS = """/* main */
body {
    margin: 0;
    color: #333;
}
"""

SAMPLE_JS = """// app
const greet = () => console.log('hello');
greet();
// __CONVERSION_CODE_PLACEHOLDER__
"""


def write_image(path: Path, size=(40, 20), color=(200, 30, 30)) -> Path:
    """Write a small solid-colour image; format follows the suffix."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path)
    return path


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Point user overrides at an empty dir and reload config for each test."""
    monkeypatch.setenv("LP_CONFIG_DIR", str(tmp_path_factory.mktemp("lp_config")))
    ConfigManager.reset()
    yield
    ConfigManager.reset()


@pytest.fixture
def temp_dir():
    """Creates a temporary directory for test operations."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_project(temp_dir):
    """A project root with src/ (html, css, js, images incl. an SP variant)."""
    src = temp_dir / "src"
    src.mkdir()
    (src / "index.html").write_text(SAMPLE_HTML, encoding="utf-8")
    (src / "style.css").write_text(SAMPLE_CSS, encoding="utf-8")
    (src / "script.js").write_text(SAMPLE_JS, encoding="utf-8")

    images = src / "images"
    write_image(images / "hero.jpg", (120, 60))
    write_image(images / "banner.jpg", (300, 100))
    write_image(images / "banner-sp.jpg", (150, 100))
    (images / "icon.svg").write_text('<svg xmlns="http://www.w3.org/2000/svg"/>', encoding="utf-8")
    return temp_dir
