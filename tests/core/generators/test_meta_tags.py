from lp_toolkit.core.generators import generate_meta_tags
from lp_toolkit.core.models import SiteConfig


class TestGenerateMetaTags:
    """Test cases for the OGP/Twitter meta fragment."""

    def test_empty_config_gives_empty_fragment(self):
        assert generate_meta_tags(SiteConfig()) == ""

    def test_title_and_image_example(self):
        site = SiteConfig.from_mapping({"SITE_TITLE": "A&B", "OG_IMAGE_URL": "https://x/y.jpg"})
        out = generate_meta_tags(site)
        assert '<meta property="og:image" content="https://x/y.jpg">' in out
        assert '<meta property="og:title" content="A&amp;B">' in out
        assert "twitter:description" not in out

    def test_image_dimensions_default_and_override(self):
        out = generate_meta_tags(SiteConfig(og_image_url="https://x/y.jpg"))
        assert '<meta property="og:image:width" content="1200">' in out
        assert '<meta property="og:image:height" content="630">' in out

        out = generate_meta_tags(SiteConfig(og_image_url="https://x/y.jpg", og_image_width="800", og_image_height="400"))
        assert '<meta property="og:image:width" content="800">' in out
        assert '<meta property="og:image:height" content="400">' in out

    def test_always_emitted_defaults(self):
        out = generate_meta_tags(SiteConfig(site_title="T"))
        assert '<meta property="og:type" content="website">' in out
        assert '<meta property="og:locale" content="ja_JP">' in out
        assert '<meta name="twitter:card" content="summary_large_image">' in out
        assert "og:image" not in out

    def test_description_emits_three_tags(self):
        out = generate_meta_tags(SiteConfig(site_description='Say "hi"'))
        assert '<meta name="description" content="Say &quot;hi&quot;">' in out
        assert '<meta property="og:description" content="Say &quot;hi&quot;">' in out
        assert '<meta name="twitter:description" content="Say &quot;hi&quot;">' in out

    def test_fragment_header_and_order(self):
        out = generate_meta_tags(SiteConfig(site_title="T", twitter_site="@lp", og_site_name="S"))
        lines = out.splitlines()
        assert lines[0] == "<!-- OGP -->"
        assert lines.index('<meta property="og:type" content="website">') < lines.index('<meta property="og:title" content="T">')
        assert lines.index('<meta name="twitter:card" content="summary_large_image">') < lines.index('<meta name="twitter:site" content="@lp">')
