"""
Output Module

Typed analysis artifacts and the normalization layer that produces them.
"""

from .schemas import (
    BlogIdea,
    CompetitivePosition,
    CompetitorInsight,
    CompetitorLandscapeInsight,
    ContentStrategyDraft,
    CurrentPositioning,
    GeneratedArticle,
    LandscapeAnalysis,
    LandscapeRecommendation,
    PositioningAnalysis,
    PositioningRecommendation,
    SEOMetrics,
    seo_strength_for,
)
from .normalizer import (
    normalize_article,
    normalize_blog_idea,
    normalize_blog_ideas,
    normalize_competitor_insight,
    normalize_content_strategy,
    normalize_landscape,
    normalize_positioning,
    normalize_positioning_recommendation,
    normalize_seo_metrics,
)

__all__ = [
    "BlogIdea",
    "CompetitivePosition",
    "CompetitorInsight",
    "CompetitorLandscapeInsight",
    "ContentStrategyDraft",
    "CurrentPositioning",
    "GeneratedArticle",
    "LandscapeAnalysis",
    "LandscapeRecommendation",
    "PositioningAnalysis",
    "PositioningRecommendation",
    "SEOMetrics",
    "seo_strength_for",
    "normalize_article",
    "normalize_blog_idea",
    "normalize_blog_ideas",
    "normalize_competitor_insight",
    "normalize_content_strategy",
    "normalize_landscape",
    "normalize_positioning",
    "normalize_positioning_recommendation",
    "normalize_seo_metrics",
]
