from lp_toolkit.core.generators import generate_analytics_tags
from lp_toolkit.core.models import SiteConfig


class TestGenerateAnalyticsTags:
    """Test cases for tracking provider snippets."""

    def test_no_ids_no_output(self):
        assert generate_analytics_tags(SiteConfig()) == ""

    def test_google_analytics_with_ads(self):
        out = generate_analytics_tags(SiteConfig(ga_measurement_id="G-ABC", ga_ads_id="AW-123"))
        assert "googletagmanager.com/gtag/js?id=G-ABC" in out
        assert "gtag('config', 'G-ABC');" in out
        assert "gtag('config', 'AW-123');" in out

    def test_google_analytics_without_ads(self):
        out = generate_analytics_tags(SiteConfig(ga_measurement_id="G-ABC"))
        assert "AW-" not in out
        assert out.count("gtag('config'") == 1

    def test_ads_id_alone_emits_nothing(self):
        assert generate_analytics_tags(SiteConfig(ga_ads_id="AW-123")) == ""

    def test_each_provider_independent(self):
        out = generate_analytics_tags(SiteConfig(meta_pixel_id="999", clarity_project_id="clr1"))
        assert "<!-- Meta Pixel -->" in out
        assert "fbq('init', '999');" in out
        assert "<!-- Microsoft Clarity -->" in out
        assert '"clr1"' in out
        assert "Google Analytics" not in out
        assert "LINE Tag" not in out
        assert "Yahoo Tag" not in out

    def test_fixed_order(self):
        out = generate_analytics_tags(SiteConfig(
            clarity_project_id="c1",
            yahoo_retargeting_id="y1",
            line_tag_id="l1",
            meta_pixel_id="m1",
            ga_measurement_id="G-1",
        ))
        positions = [
            out.index("<!-- Google Analytics -->"),
            out.index("<!-- Meta Pixel -->"),
            out.index("<!-- LINE Tag -->"),
            out.index("<!-- Yahoo Tag -->"),
            out.index("<!-- Microsoft Clarity -->"),
        ]
        assert positions == sorted(positions)

    def test_line_and_yahoo_ids(self):
        out = generate_analytics_tags(SiteConfig(line_tag_id="abc-123", yahoo_retargeting_id="YR1"))
        assert "tagId:'abc-123'" in out
        assert "t_id=abc-123" in out
        assert "yahoo_ss_retargeting_id: 'YR1'" in out

    def test_unsafe_identifier_suppresses_block(self):
        out = generate_analytics_tags(SiteConfig(ga_measurement_id="G-1');alert(1);//"))
        assert out == ""
