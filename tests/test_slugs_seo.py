"""Tests for id/slug helpers and generated SEO metadata."""

import pytest

from animebing.services.seo import fill_seo_fields, seo_description, seo_keywords, seo_title
from animebing.services.slugs import derive_slug, generate_slug, is_object_id, new_object_id


class TestObjectIds:
    @pytest.mark.parametrize("value", [
        "507f1f77bcf86cd799439011",
        "0" * 24,
    ])
    def test_accepts_24_lowercase_hex(self, value):
        assert is_object_id(value)

    @pytest.mark.parametrize("value", [
        "",
        "naruto",
        "507f1f77bcf86cd79943901",       # 23 chars
        "507f1f77bcf86cd7994390111",     # 25 chars
        "507F1F77BCF86CD799439011",      # uppercase
        "507f1f77bcf86cd79943901g",
        "507f1f77bcf86cd799439011\n",    # trailing newline
    ])
    def test_rejects_everything_else(self, value):
        assert not is_object_id(value)

    def test_new_ids_are_object_ids(self):
        first, second = new_object_id(), new_object_id()
        assert is_object_id(first)
        assert first != second


class TestDeriveSlug:
    def test_collapses_non_alphanumeric_runs(self):
        assert derive_slug("Naruto: Shippuden!!") == "naruto-shippuden-"

    def test_strip_trims_edge_hyphens(self):
        assert derive_slug("  Naruto: Shippuden!! ", strip=True) == "naruto-shippuden"

    def test_empty_title(self):
        assert derive_slug("") == ""
        assert derive_slug(None) == ""


class TestGenerateSlug:
    def test_drops_punctuation_and_hyphenates_spaces(self):
        assert generate_slug("Attack on Titan: Final Season") == "attack-on-titan-final-season"

    def test_collapses_repeated_hyphens(self):
        assert generate_slug("Re - Zero") == "re-zero"

    def test_blank_title(self):
        assert generate_slug("   ") == ""


class TestSeo:
    def test_title_and_description(self):
        assert seo_title("Naruto", "Hindi Dub") == "Watch Naruto Online in Hindi Dub | AnimeBing"
        assert "Read manga online" in seo_description("Berserk", "English Sub", "Manga")
        assert "Full movie available" in seo_description("Your Name", "Hindi Dub", "Movie")
        assert "All episodes available" in seo_description("Naruto", "Hindi Dub", "Anime")

    def test_keywords_are_unique_and_include_language_templates(self):
        keywords = seo_keywords("Naruto", ["Action", "action"], "Hindi Dub", "Anime").split(", ")

        assert len(keywords) == len(set(keywords))
        assert "Naruto hindi dubbed" in keywords
        assert "action anime" in keywords
        assert "Naruto all episodes" in keywords
        assert keywords[-1] == "free anime downloads"

    def test_fill_only_touches_blank_fields(self):
        entry = {"title": "One Piece", "slug": "op", "seoTitle": "", "contentType": "Anime"}

        fill_seo_fields(entry)

        assert entry["slug"] == "op"
        assert entry["seoTitle"] == "Watch One Piece Online in Hindi Sub | AnimeBing"
        assert entry["seoDescription"]
        assert "One Piece anime" in entry["seoKeywords"]

    def test_fill_generates_slug_from_title(self):
        entry = fill_seo_fields({"title": "Demon Slayer: Kimetsu no Yaiba"})

        assert entry["slug"] == "demon-slayer-kimetsu-no-yaiba"
