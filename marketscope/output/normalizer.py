"""
Generator Output Normalization

Turns whatever the AI (or SEO) provider returned into the typed artifacts in
schemas.py. Pure functions, no I/O, never raise on missing or mistyped fields.

Rules applied per field:
- required string: fallback string when absent, blank or not a string
- list: non-list -> [], each element through its own item normalizer
- enumerated string: case-insensitive match, otherwise "Medium"
- confidence/score: clamped to range, non-numeric -> documented default
- list item id: synthesized from position when the generator omits it
"""

import logging
import math
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from marketscope.utils.text import count_words
from .schemas import (
    BlogIdea,
    CompetitivePosition,
    CompetitorInsight,
    CompetitorLandscapeInsight,
    ContentStrategyDraft,
    CurrentPositioning,
    DEFAULT_CONFIDENCE,
    DEFAULT_LEVEL,
    DEFAULT_SEO_SCORE,
    DIFFICULTIES,
    GeneratedArticle,
    LandscapeAnalysis,
    LandscapeRecommendation,
    LEVELS,
    PositioningAnalysis,
    PositioningRecommendation,
    SEOMetrics,
    UNAVAILABLE,
    UNTITLED,
    seo_strength_for,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# FIELD COERCION
# =============================================================================

def pick(data: Dict[str, Any], *keys: str) -> Any:
    """First present key wins; lets camelCase and snake_case both through."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def coerce_str(value: Any, fallback: str = "") -> str:
    """
    Coerce to a stripped string.

    A list of strings is joined one per line; anything else that is not a
    non-blank string yields the fallback.
    """
    if isinstance(value, list):
        parts = [item.strip() for item in value if isinstance(item, str) and item.strip()]
        return "\n".join(parts) if parts else fallback
    if isinstance(value, str) and value.strip():
        return value.strip()
    return fallback


def coerce_list(value: Any, item_normalizer: Callable[[Any, int], Optional[T]]) -> List[T]:
    """
    Non-list -> []. Each element goes through item_normalizer(item, index);
    items it returns None for are dropped.
    """
    if not isinstance(value, list):
        return []
    result = []
    for index, item in enumerate(value):
        normalized = item_normalizer(item, index)
        if normalized is not None:
            result.append(normalized)
    return result


def _string_item(item: Any, index: int) -> Optional[str]:
    if isinstance(item, str):
        return item.strip() or None
    if isinstance(item, (int, float)) and not isinstance(item, bool):
        return str(item)
    return None


def coerce_str_list(value: Any) -> List[str]:
    """List of non-blank strings; numbers are stringified, other items dropped."""
    return coerce_list(value, _string_item)


def coerce_enum(value: Any, allowed: Sequence[str], default: str = DEFAULT_LEVEL) -> str:
    """Case-insensitive match against the allowed set, returning its canonical form."""
    if isinstance(value, str):
        wanted = value.strip().lower()
        for option in allowed:
            if option.lower() == wanted:
                return option
    return default


def _to_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().rstrip("%"))
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number):
        return None
    return number


def clamp_number(value: Any, low: float, high: float, default: float) -> float:
    """Clamp into [low, high]; non-numeric or NaN -> default."""
    number = _to_float(value)
    if number is None:
        return default
    return max(low, min(high, number))


def coerce_confidence(value: Any) -> float:
    """Confidence in [0, 1], default 0.7."""
    return clamp_number(value, 0.0, 1.0, DEFAULT_CONFIDENCE)


def coerce_score(value: Any, default: int = DEFAULT_SEO_SCORE) -> int:
    """Integer score in [0, 100]."""
    return int(round(clamp_number(value, 0, 100, default)))


def coerce_count(value: Any) -> int:
    """Non-negative integer, default 0."""
    number = _to_float(value)
    if number is None or math.isinf(number):
        return 0
    return max(0, int(number))


def item_id(raw: Dict[str, Any], prefix: str, index: int) -> str:
    """
    Keep the generator's id, otherwise synthesize one from list position.

    Synthesized ids are 1-based: the first item is "<prefix>-1".
    """
    value = raw.get("id")
    if isinstance(value, bool):
        value = None
    if isinstance(value, (str, int)) and str(value).strip():
        return str(value).strip()
    return f"{prefix}-{index + 1}"


# =============================================================================
# SEO METRICS
# =============================================================================

def normalize_seo_metrics(raw: Any) -> SEOMetrics:
    """
    Normalize one Moz url_metrics result.

    Strength is always derived from the clamped domain authority so it can
    never disagree with the tier table.
    """
    data = as_dict(raw)
    domain_authority = int(clamp_number(pick(data, "domain_authority", "domainAuthority"), 0, 100, 0))
    return SEOMetrics(
        domain_authority=domain_authority,
        page_authority=int(clamp_number(pick(data, "page_authority", "pageAuthority"), 0, 100, 0)),
        spam_score=int(clamp_number(pick(data, "spam_score", "spamScore"), 0, 100, 0)),
        linking_domains=coerce_count(pick(data, "linking_domains", "linkingDomains", "root_domains_to_root_domain")),
        total_links=coerce_count(pick(data, "total_links", "totalLinks", "external_pages_to_root_domain")),
        seo_strength=seo_strength_for(domain_authority),
        top_keywords=coerce_str_list(pick(data, "top_keywords", "topKeywords")),
        degraded=False,
    )


# =============================================================================
# COMPETITOR ANALYSIS
# =============================================================================

def normalize_competitor_insight(raw: Any) -> CompetitorInsight:
    data = as_dict(raw)
    return CompetitorInsight(
        insights=coerce_str(data.get("insights"), UNAVAILABLE),
        threats=coerce_str(data.get("threats"), UNAVAILABLE),
        opportunities=coerce_str(data.get("opportunities"), UNAVAILABLE),
        recommendations=coerce_str(data.get("recommendations"), UNAVAILABLE),
    )


# =============================================================================
# LANDSCAPE ANALYSIS
# =============================================================================

def _landscape_competitor(item: Any, index: int) -> Optional[CompetitorLandscapeInsight]:
    if not isinstance(item, dict):
        return None
    return CompetitorLandscapeInsight(
        id=item_id(item, "competitor", index),
        name=coerce_str(pick(item, "name", "competitor"), UNTITLED),
        threat_level=coerce_enum(pick(item, "threatLevel", "threat_level"), LEVELS),
        positioning=coerce_str(item.get("positioning")),
        market_share=coerce_str(pick(item, "marketShare", "market_share"), "Unknown"),
        strengths=coerce_str_list(item.get("strengths")),
        weaknesses=coerce_str_list(item.get("weaknesses")),
    )


def _landscape_recommendation(item: Any, index: int) -> Optional[LandscapeRecommendation]:
    if not isinstance(item, dict):
        return None
    return LandscapeRecommendation(
        id=item_id(item, "rec", index),
        title=coerce_str(item.get("title"), UNTITLED),
        description=coerce_str(item.get("description")),
        priority=coerce_enum(item.get("priority"), LEVELS),
        timeline=coerce_str(item.get("timeline")),
        expected_impact=coerce_str(pick(item, "expectedImpact", "expected_impact")),
        action_items=coerce_str_list(pick(item, "actionItems", "action_items")),
    )


def normalize_landscape(raw: Any) -> LandscapeAnalysis:
    data = as_dict(raw)
    position = as_dict(pick(data, "competitivePosition", "competitive_position"))
    return LandscapeAnalysis(
        summary=coerce_str(data.get("summary"), UNAVAILABLE),
        key_insights=coerce_str_list(pick(data, "keyInsights", "key_insights")),
        competitive_position=CompetitivePosition(
            market_position=coerce_str(pick(position, "marketPosition", "market_position"), UNAVAILABLE),
            strengths=coerce_str_list(position.get("strengths")),
            weaknesses=coerce_str_list(position.get("weaknesses")),
            opportunities=coerce_str_list(position.get("opportunities")),
            threats=coerce_str_list(position.get("threats")),
        ),
        competitor_insights=coerce_list(
            pick(data, "competitorInsights", "competitor_insights"), _landscape_competitor
        ),
        recommendations=coerce_list(data.get("recommendations"), _landscape_recommendation),
        market_opportunities=coerce_str_list(
            pick(data, "marketOpportunities", "market_opportunities", "opportunities")
        ),
        strategic_implications=coerce_str_list(
            pick(data, "strategicImplications", "strategic_implications", "implications")
        ),
    )


# =============================================================================
# POSITIONING
# =============================================================================

def normalize_positioning_recommendation(item: Any, index: int) -> Optional[PositioningRecommendation]:
    if not isinstance(item, dict):
        return None
    return PositioningRecommendation(
        id=item_id(item, "rec", index),
        category=coerce_str(item.get("category"), "General"),
        title=coerce_str(item.get("title"), UNTITLED),
        description=coerce_str(item.get("description")),
        key_points=coerce_str_list(pick(item, "keyPoints", "key_points")),
        messaging_style=coerce_str(pick(item, "messagingStyle", "messaging_style")),
        value_proposition=coerce_str(pick(item, "valueProposition", "value_proposition")),
        differentiators=coerce_str_list(item.get("differentiators")),
        target_segments=coerce_str_list(pick(item, "targetSegments", "target_segments")),
        confidence=coerce_confidence(item.get("confidence")),
    )


def normalize_positioning(raw: Any) -> PositioningAnalysis:
    data = as_dict(raw)
    current = as_dict(pick(data, "currentPositioning", "current_positioning"))
    return PositioningAnalysis(
        current_positioning=CurrentPositioning(
            overview=coerce_str(current.get("overview"), UNAVAILABLE),
            strengths=coerce_str_list(current.get("strengths")),
            weaknesses=coerce_str_list(current.get("weaknesses")),
            market_position=coerce_str(pick(current, "marketPosition", "market_position"), UNAVAILABLE),
        ),
        recommendations=coerce_list(data.get("recommendations"), normalize_positioning_recommendation),
    )


# =============================================================================
# BLOG IDEAS & ARTICLES
# =============================================================================

def _blog_idea(item: Any, index: int) -> Optional[BlogIdea]:
    if not isinstance(item, dict):
        return None
    title = coerce_str(item.get("title"))
    if not title:
        logger.debug(f"Dropping blog idea #{index + 1}: no title")
        return None
    return BlogIdea(
        id=item_id(item, "idea", index),
        title=title,
        description=coerce_str(item.get("description")),
        keywords=coerce_str_list(item.get("keywords")),
        estimated_length=coerce_str(pick(item, "estimatedLength", "estimated_length")),
        difficulty=coerce_enum(item.get("difficulty"), DIFFICULTIES),
        target_audience=coerce_str(pick(item, "targetAudience", "target_audience")),
        content_pillars=coerce_str_list(pick(item, "contentPillars", "content_pillars")),
        seo_score=coerce_score(pick(item, "seoScore", "seo_score")),
        rationale=coerce_str(item.get("rationale")),
    )


def normalize_blog_ideas(raw: Any) -> List[BlogIdea]:
    """
    Accepts {"ideas": [...]}, {"blogIdeas": [...]} or a bare list.

    Ideas without a title are dropped individually; the batch survives.
    """
    items = raw if isinstance(raw, list) else pick(as_dict(raw), "ideas", "blogIdeas", "blog_ideas")
    return coerce_list(items, _blog_idea)


def normalize_blog_idea(raw: Any) -> Optional[BlogIdea]:
    """Normalize a single idea coming back from the client."""
    return _blog_idea(raw, 0)


def normalize_article(raw: Any, fallback_title: str = UNTITLED) -> GeneratedArticle:
    """
    Word count must be a positive integer; it is recomputed from the content
    when the generator's figure is missing, non-numeric or not positive.
    """
    data = as_dict(raw)
    content = coerce_str(pick(data, "content", "body"))

    reported = _to_float(pick(data, "wordCount", "word_count"))
    if reported is not None and not math.isinf(reported) and reported >= 1:
        word_count = int(reported)
    else:
        word_count = count_words(content)

    return GeneratedArticle(
        title=coerce_str(data.get("title"), fallback_title),
        content=content,
        meta_description=coerce_str(pick(data, "metaDescription", "meta_description")),
        keywords=coerce_str_list(data.get("keywords")),
        word_count=word_count,
    )


def normalize_content_strategy(raw: Any) -> ContentStrategyDraft:
    data = as_dict(raw)
    return ContentStrategyDraft(
        title=coerce_str(data.get("title"), "Content Strategy"),
        description=coerce_str(data.get("description")),
        target_keywords=coerce_str_list(pick(data, "targetKeywords", "target_keywords")),
        content_pillars=coerce_str_list(pick(data, "contentPillars", "content_pillars")),
        recommendations=coerce_str(data.get("recommendations")),
    )
