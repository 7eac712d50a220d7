import re

from lp_toolkit.core.converter import rewrite_images
from lp_toolkit.core.converter.image_rewriter import attribute_names
from lp_toolkit.core.models import ImageDimensionTable, ImageSize


def _sources(block):
    return re.findall(r"<source\b[^>]*>", block)


def _pictures(html):
    return re.findall(r"<picture>[\s\S]*?</picture>", html)


DIMS = ImageDimensionTable({
    "src/images/hero.jpg": ImageSize(800, 400),
    "src/images/banner.jpg": ImageSize(1200, 300),
    "src/images/logo.svg": ImageSize(120, 40),
})


class TestDimensions:
    """Test cases for width/height completion."""

    def test_missing_dimensions_added(self):
        out = rewrite_images('<img src="images/logo.svg" alt="">', DIMS).html
        assert out == '<img src="images/logo.svg" alt="" width="120" height="40">'

    def test_explicit_dimensions_never_touched(self):
        html = '<img width="5" src="images/logo.svg" height="7">'
        assert rewrite_images(html, DIMS).html == html

    def test_only_missing_side_added(self):
        out = rewrite_images('<img src="images/logo.svg" width="60">', DIMS).html
        assert 'width="60"' in out
        assert 'height="40"' in out
        assert 'width="120"' not in out

    def test_leading_slash_stripped_for_lookup(self):
        out = rewrite_images('<img src="/images/logo.svg">', DIMS).html
        assert 'width="120" height="40"' in out

    def test_unknown_image_left_without_dimensions(self):
        out = rewrite_images('<img src="images/none.svg">', DIMS).html
        assert out == '<img src="images/none.svg">'

    def test_lookalike_attributes_do_not_count(self):
        out = rewrite_images('<img data-width="1" style="line-height:2" src="images/logo.svg">', DIMS).html
        assert 'width="120" height="40"' in out


class TestLazyLoading:
    """Test cases for loading="lazy" insertion."""

    def test_first_image_never_lazy(self):
        out = rewrite_images('<img src="a.svg"><img src="b.svg"><img src="c.svg" loading="eager">').html
        tags = re.findall(r"<img[^>]*>", out)
        assert 'loading="lazy"' not in tags[0]
        assert tags[1] == '<img src="b.svg" loading="lazy">'
        assert tags[2] == '<img src="c.svg" loading="eager">'

    def test_images_inside_existing_picture_do_not_count(self):
        html = '<picture><img src="first.jpg"></picture><img src="second.svg">'
        out = rewrite_images(html).html
        assert out.endswith('<img src="second.svg">')

    def test_noscript_pixels_do_not_count(self):
        pixel = '<noscript><img height="1" width="1" src="https://px.example/tr?id=1"/></noscript>'
        out = rewrite_images(f"<head>{pixel}</head><body><img src='hero.svg'><img src='b.svg'></body>").html
        assert pixel in out
        assert "<img src='hero.svg'>" in out
        assert "<img src='b.svg' loading=\"lazy\">" in out


class TestPictureConversion:
    """Test cases for <picture> generation and SP variants."""

    def test_jpeg_without_sp_variant_has_two_sources(self):
        out = rewrite_images('<img src="images/hero.jpg" alt="Hero">', DIMS).html
        (block,) = _pictures(out)
        sources = _sources(block)
        assert sources == [
            '<source srcset="images/hero.avif" type="image/avif">',
            '<source srcset="images/hero.webp" type="image/webp">',
        ]
        assert '<img src="images/hero.jpg" alt="Hero" width="800" height="400">' in block

    def test_sp_variant_has_five_sources(self):
        out = rewrite_images(
            '<img src="images/banner.jpg">', DIMS, sp_images={"images/banner.jpg"}
        ).html
        (block,) = _pictures(out)
        sources = _sources(block)
        assert len(sources) == 5
        assert sources[:3] == [
            '<source media="(max-width: 767px)" srcset="images/banner-sp.avif" type="image/avif">',
            '<source media="(max-width: 767px)" srcset="images/banner-sp.webp" type="image/webp">',
            '<source media="(max-width: 767px)" srcset="images/banner-sp.jpg">',
        ]
        assert "media" not in sources[3] and "media" not in sources[4]
        assert block.count("<img ") == 1

    def test_hero_and_banner_example(self):
        html = '<img src="images/hero.jpg"><img src="images/banner.jpg">'
        out = rewrite_images(html, DIMS, sp_images=frozenset({"images/banner.jpg"})).html
        hero, banner = _pictures(out)
        assert len(_sources(hero)) == 2
        assert len(_sources(banner)) == 5
        assert 'loading="lazy"' not in hero
        assert 'loading="lazy"' in banner

    def test_extension_case_insensitive(self):
        out = rewrite_images('<img src="images/Photo.PNG">').html
        (block,) = _pictures(out)
        assert 'srcset="images/Photo.avif"' in block
        assert '<img src="images/Photo.PNG">' in block

    def test_non_raster_formats_stay_plain(self):
        for src in ("a.svg", "a.gif", "a.webp"):
            out = rewrite_images(f'<img src="{src}">').html
            assert "<picture>" not in out


class TestBasePath:
    """Test cases for path-prefix rewriting."""

    def test_relative_paths_prefixed(self):
        out = rewrite_images('<img src="images/hero.jpg">', base_path="/lp/").html
        assert 'srcset="/lp/images/hero.avif"' in out
        assert '<img src="/lp/images/hero.jpg">' in out

    def test_sp_sources_prefixed(self):
        out = rewrite_images('<img src="images/b.jpg">', base_path="/lp", sp_images={"images/b.jpg"}).html
        assert 'srcset="/lp/images/b-sp.jpg"' in out

    def test_absolute_and_url_never_prefixed(self):
        out = rewrite_images('<img src="/images/a.jpg"><img src="https://cdn.x/a.svg">', base_path="/lp").html
        assert 'srcset="/images/a.avif"' in out
        assert '<img src="/images/a.jpg">' in out
        assert 'src="https://cdn.x/a.svg"' in out
        assert "/lp" not in out

    def test_plain_img_prefixed(self):
        out = rewrite_images('<img src="icon.svg">', base_path="/lp").html
        assert out == '<img src="/lp/icon.svg">'


class TestPictureProtection:
    """Test cases for hand-written <picture> blocks."""

    def test_existing_picture_unchanged(self):
        block = (
            '<picture>\n  <source srcset="x.webp" type="image/webp">\n'
            '  <img src="x.jpg" alt="kept">\n</picture>'
        )
        html = f"<body>{block}<img src='y.svg'></body>"
        out = rewrite_images(html, DIMS, base_path="/lp").html
        assert block in out
        assert out.count("<picture>") == 1

    def test_placeholder_text_never_leaks(self):
        html = "<picture><img src='a.jpg'></picture><picture><img src='b.jpg'></picture>"
        out = rewrite_images(html).html
        assert out == html
        assert "__PROTECTED_BLOCK_" not in out


class TestMisc:
    def test_single_quoted_src_preserved(self):
        out = rewrite_images("<img alt='x' src='a.svg'>").html
        assert out == "<img alt='x' src='a.svg'>"

    def test_self_closing_tag_keeps_slash_last(self):
        out = rewrite_images('<img src="a.svg"/><img src="b.svg" />').html
        assert out == '<img src="a.svg"/><img src="b.svg" loading="lazy" />'

    def test_data_src_not_mistaken_for_src(self):
        out = rewrite_images('<img data-src="lazy.jpg" src="real.svg">').html
        assert out == '<img data-src="lazy.jpg" src="real.svg">'

    def test_warnings_contract(self):
        assert rewrite_images('<img src="a.jpg">').warnings == []

    def test_attribute_names(self):
        assert attribute_names(' alt="a b" WIDTH=10 hidden') == {"alt", "width", "hidden"}
