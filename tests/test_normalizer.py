"""
Normalization Tests

Generator output of any shape must come out as fully-typed artifacts.
"""

import math

import pytest

from marketscope.output.normalizer import (
    coerce_confidence,
    coerce_count,
    coerce_enum,
    coerce_score,
    coerce_str,
    normalize_article,
    normalize_blog_ideas,
    normalize_competitor_insight,
    normalize_content_strategy,
    normalize_landscape,
    normalize_positioning,
    normalize_seo_metrics,
)
from marketscope.output.schemas import DIFFICULTIES, LEVELS, UNAVAILABLE, seo_strength_for


# =============================================================================
# FIELD RULES
# =============================================================================

class TestFieldCoercion:
    """Per-field rules shared by every artifact."""

    @pytest.mark.parametrize("value,expected", [
        (1.4, 1.0),
        (-0.2, 0.0),
        ("high", 0.7),
        (None, 0.7),
        (float("nan"), 0.7),
        (True, 0.7),
        ("0.35", 0.35),
        (0.9, 0.9),
    ])
    def test_confidence_clamped_or_defaulted(self, value, expected):
        assert coerce_confidence(value) == pytest.approx(expected)

    def test_score_clamped_to_range(self):
        assert coerce_score(140) == 100
        assert coerce_score(-3) == 0
        assert coerce_score("n/a") == 50
        assert coerce_score(72.6) == 73

    def test_counts_never_negative(self):
        assert coerce_count(-10) == 0
        assert coerce_count("abc") == 0
        assert coerce_count(12.9) == 12
        assert coerce_count(math.inf) == 0

    def test_enum_matches_case_insensitively(self):
        assert coerce_enum("high", LEVELS) == "High"
        assert coerce_enum(" LOW ", LEVELS) == "Low"
        assert coerce_enum("hard", DIFFICULTIES) == "Hard"

    def test_enum_unknown_defaults_to_medium(self):
        assert coerce_enum("critical", LEVELS) == "Medium"
        assert coerce_enum(3, DIFFICULTIES) == "Medium"
        assert coerce_enum(None, LEVELS) == "Medium"

    def test_string_fallbacks(self):
        assert coerce_str(None, UNAVAILABLE) == UNAVAILABLE
        assert coerce_str("   ", UNAVAILABLE) == UNAVAILABLE
        assert coerce_str(42, UNAVAILABLE) == UNAVAILABLE
        assert coerce_str(["First point", "Second point"]) == "First point\nSecond point"


# =============================================================================
# SEO METRICS
# =============================================================================

class TestSEOMetrics:

    @pytest.mark.parametrize("da,tier", [
        (0, "Weak"), (29, "Weak"), (30, "Medium"), (49, "Medium"),
        (50, "Strong"), (69, "Strong"), (70, "Very Strong"), (100, "Very Strong"),
    ])
    def test_strength_tiers(self, da, tier):
        assert seo_strength_for(da) == tier
        assert normalize_seo_metrics({"domain_authority": da}).seo_strength == tier

    def test_negative_authority_clamped(self):
        metrics = normalize_seo_metrics({"domain_authority": -8, "spam_score": -1})
        assert metrics.domain_authority == 0
        assert metrics.spam_score == 0
        assert metrics.seo_strength == "Weak"

    def test_moz_field_names_mapped(self):
        metrics = normalize_seo_metrics({
            "domain_authority": 72,
            "page_authority": 65,
            "root_domains_to_root_domain": 840,
            "external_pages_to_root_domain": 15230,
        })
        assert metrics.linking_domains == 840
        assert metrics.total_links == 15230
        assert metrics.seo_strength == "Very Strong"
        assert metrics.top_keywords == []
        assert metrics.degraded is False


# =============================================================================
# ARTIFACTS
# =============================================================================

class TestCompetitorInsight:

    def test_missing_fields_fall_back(self):
        insight = normalize_competitor_insight({"insights": "Good content"})
        assert insight.insights == "Good content"
        assert insight.threats == UNAVAILABLE
        assert insight.recommendations == UNAVAILABLE

    def test_non_object_input(self):
        insight = normalize_competitor_insight(["not", "an", "object"])
        assert insight.insights == UNAVAILABLE


class TestLandscape:

    def test_recommendations_not_a_list(self):
        landscape = normalize_landscape({"recommendations": "not-an-array"})
        assert landscape.recommendations == []

    def test_missing_lists_become_empty(self):
        landscape = normalize_landscape({})
        assert landscape.summary == UNAVAILABLE
        assert landscape.key_insights == []
        assert landscape.competitor_insights == []
        assert landscape.market_opportunities == []
        assert landscape.strategic_implications == []
        assert landscape.competitive_position.strengths == []

    def test_nested_items_normalized_with_ids(self):
        landscape = normalize_landscape({
            "summary": "Busy market",
            "competitorInsights": [
                {"name": "Acme", "threatLevel": "HIGH"},
                "garbage",
                {"id": "acme-2", "name": "Globex", "threat_level": "extreme"},
            ],
            "recommendations": [{"title": "Do SEO", "action_items": "not a list"}],
        })
        first, second = landscape.competitor_insights
        assert first.id == "competitor-1"
        assert first.threat_level == "High"
        assert second.id == "acme-2"
        assert second.threat_level == "Medium"
        assert landscape.recommendations[0].id == "rec-1"
        assert landscape.recommendations[0].action_items == []


class TestPositioning:

    def test_confidence_clamped_per_recommendation(self):
        positioning = normalize_positioning({
            "recommendations": [
                {"title": "A", "confidence": 1.4},
                {"title": "B", "confidence": -0.2},
                {"title": "C", "confidence": "high"},
            ]
        })
        assert [r.confidence for r in positioning.recommendations] == [1.0, 0.0, 0.7]
        assert [r.id for r in positioning.recommendations] == ["rec-1", "rec-2", "rec-3"]

    def test_current_positioning_defaults(self):
        positioning = normalize_positioning({"currentPositioning": None})
        assert positioning.current_positioning.overview == UNAVAILABLE
        assert positioning.current_positioning.strengths == []
        assert positioning.recommendations == []


class TestBlogIdeas:

    def test_accepts_wrapped_or_bare_list(self):
        wrapped = normalize_blog_ideas({"blogIdeas": [{"title": "One"}]})
        bare = normalize_blog_ideas([{"title": "One"}])
        assert wrapped == bare

    def test_untitled_ideas_dropped_ids_keep_position(self):
        ideas = normalize_blog_ideas({"ideas": [
            {"title": "First"},
            {"title": "  "},
            {"description": "no title"},
            {"title": "Fourth", "seoScore": 250, "difficulty": "impossible"},
        ]})
        assert [i.title for i in ideas] == ["First", "Fourth"]
        assert [i.id for i in ideas] == ["idea-1", "idea-4"]
        assert ideas[1].seo_score == 100
        assert ideas[1].difficulty == "Medium"

    def test_not_a_list(self):
        assert normalize_blog_ideas({"ideas": "none"}) == []
        assert normalize_blog_ideas(None) == []


class TestArticle:

    def test_word_count_recomputed_when_missing(self):
        article = normalize_article({"content": "## Intro\n\nOne two three four."}, "Fallback")
        assert article.title == "Fallback"
        assert article.word_count == 5

    @pytest.mark.parametrize("reported", [0, -12, "lots", None])
    def test_word_count_recomputed_when_invalid(self, reported):
        article = normalize_article({"content": "alpha beta gamma", "wordCount": reported})
        assert article.word_count == 3

    def test_reported_word_count_kept(self):
        article = normalize_article({"content": "alpha beta", "word_count": "1200"})
        assert article.word_count == 1200


class TestContentStrategy:

    def test_defaults(self):
        strategy = normalize_content_strategy({"targetKeywords": "crm"})
        assert strategy.title == "Content Strategy"
        assert strategy.target_keywords == []
        assert strategy.content_pillars == []
