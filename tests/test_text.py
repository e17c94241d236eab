"""Tests for slug derivation and rich text cleaning."""

import re

import pytest

from catalog_admin.core.text import clean_rich_text, create_slug, like_pattern, render_rich_text

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


class TestCreateSlug:
    """Slugs are derived from display names."""

    def test_example_name(self):
        assert create_slug("Spa & Pool Equipment!!") == "spa-pool-equipment"

    @pytest.mark.parametrize(
        "name",
        [
            "Spa & Pool Equipment!!",
            "  Leading and trailing  ",
            "--Hyphen--Heavy--",
            "Ünïcödé Pümps 2000",
            "under_scored_name",
            "a - b - c",
            "Filters (Sand / Cartridge)",
            "100% Stainless-Steel",
        ],
    )
    def test_slug_shape(self, name):
        """Derived slugs only hold lowercase alphanumerics and single inner hyphens."""
        slug = create_slug(name)
        assert slug
        assert SLUG_PATTERN.match(slug), slug
        assert "--" not in slug
        assert not slug.startswith("-") and not slug.endswith("-")

    def test_collapses_whitespace_and_hyphens(self):
        assert create_slug("Heat   Pumps -- Inverter") == "heat-pumps-inverter"

    def test_only_plain_spaces_separate_words(self):
        assert create_slug("Tabs\tand\nnewlines") == "tabsandnewlines"
        assert create_slug("Heat\u00a0Pumps Inverter") == "heatpumps-inverter"

    def test_non_latin_name_yields_empty_slug(self):
        assert create_slug("!!! ???") == ""
        assert create_slug("") == ""

    def test_slug_is_stable(self):
        slug = create_slug("Chlorinators & Salt Systems")
        assert create_slug(slug) == slug


class TestRichText:
    def test_strips_scripts(self):
        cleaned = clean_rich_text("<p>Pump</p><script>alert(1)</script>")
        assert "<script>" not in cleaned
        assert "<p>Pump</p>" in cleaned

    def test_renders_markdown(self):
        html = str(render_rich_text("**Quiet** operation"))
        assert "<strong>Quiet</strong>" in html

    def test_empty_value(self):
        assert str(render_rich_text(None)) == ""
        assert clean_rich_text("   ") == ""


class TestLikePattern:
    def test_wraps_term(self):
        assert like_pattern("  pump ") == "%pump%"

    def test_escapes_wildcards(self):
        assert like_pattern("100%_a\\b") == "%100\\%\\_a\\\\b%"
