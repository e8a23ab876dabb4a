"""
Typed Analysis Artifacts

Every AI or SEO result that leaves the normalizer is one of these dataclasses.
Field names are snake_case; the generator's camelCase keys are mapped in
normalizer.py.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List


# =============================================================================
# ENUMERATIONS & FALLBACKS
# =============================================================================

LEVELS = ("High", "Medium", "Low")
DIFFICULTIES = ("Easy", "Medium", "Hard")
DEFAULT_LEVEL = "Medium"

UNAVAILABLE = "Analysis unavailable"
UNTITLED = "Untitled"

DEFAULT_CONFIDENCE = 0.7
DEFAULT_SEO_SCORE = 50

# SEO strength tiers, checked top-down against domain authority
SEO_STRENGTH_TIERS = (
    (70, "Very Strong"),
    (50, "Strong"),
    (30, "Medium"),
    (0, "Weak"),
)
UNKNOWN_STRENGTH = "Unknown"


def seo_strength_for(domain_authority: int) -> str:
    """
    Map a Moz domain authority score to its strength tier.

    <30 Weak, 30-49 Medium, 50-69 Strong, >=70 Very Strong.
    """
    for threshold, label in SEO_STRENGTH_TIERS:
        if domain_authority >= threshold:
            return label
    return SEO_STRENGTH_TIERS[-1][1]


class _Serializable:
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =============================================================================
# SEO METRICS
# =============================================================================

@dataclass
class SEOMetrics(_Serializable):
    """Authority and link metrics for one URL."""
    domain_authority: int = 0
    page_authority: int = 0
    spam_score: int = 0
    linking_domains: int = 0
    total_links: int = 0
    seo_strength: str = UNKNOWN_STRENGTH
    top_keywords: List[str] = field(default_factory=list)
    degraded: bool = False

    @classmethod
    def unavailable(cls) -> "SEOMetrics":
        """Zeroed metrics used when the provider cannot answer."""
        return cls(seo_strength=UNKNOWN_STRENGTH, degraded=True)


# =============================================================================
# COMPETITOR ANALYSIS
# =============================================================================

@dataclass
class CompetitorInsight(_Serializable):
    """Narrative half of a competitor analysis."""
    insights: str = UNAVAILABLE
    threats: str = UNAVAILABLE
    opportunities: str = UNAVAILABLE
    recommendations: str = UNAVAILABLE


# =============================================================================
# LANDSCAPE ANALYSIS
# =============================================================================

@dataclass
class CompetitivePosition(_Serializable):
    market_position: str = UNAVAILABLE
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    opportunities: List[str] = field(default_factory=list)
    threats: List[str] = field(default_factory=list)


@dataclass
class CompetitorLandscapeInsight(_Serializable):
    id: str
    name: str = UNTITLED
    threat_level: str = DEFAULT_LEVEL
    positioning: str = ""
    market_share: str = "Unknown"
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)


@dataclass
class LandscapeRecommendation(_Serializable):
    id: str
    title: str = UNTITLED
    description: str = ""
    priority: str = DEFAULT_LEVEL
    timeline: str = ""
    expected_impact: str = ""
    action_items: List[str] = field(default_factory=list)


@dataclass
class LandscapeAnalysis(_Serializable):
    """Company-vs-all-competitors report."""
    summary: str = UNAVAILABLE
    key_insights: List[str] = field(default_factory=list)
    competitive_position: CompetitivePosition = field(default_factory=CompetitivePosition)
    competitor_insights: List[CompetitorLandscapeInsight] = field(default_factory=list)
    recommendations: List[LandscapeRecommendation] = field(default_factory=list)
    market_opportunities: List[str] = field(default_factory=list)
    strategic_implications: List[str] = field(default_factory=list)


# =============================================================================
# POSITIONING
# =============================================================================

@dataclass
class CurrentPositioning(_Serializable):
    overview: str = UNAVAILABLE
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    market_position: str = UNAVAILABLE


@dataclass
class PositioningRecommendation(_Serializable):
    id: str
    category: str = "General"
    title: str = UNTITLED
    description: str = ""
    key_points: List[str] = field(default_factory=list)
    messaging_style: str = ""
    value_proposition: str = ""
    differentiators: List[str] = field(default_factory=list)
    target_segments: List[str] = field(default_factory=list)
    confidence: float = DEFAULT_CONFIDENCE


@dataclass
class PositioningAnalysis(_Serializable):
    current_positioning: CurrentPositioning = field(default_factory=CurrentPositioning)
    recommendations: List[PositioningRecommendation] = field(default_factory=list)


# =============================================================================
# CONTENT
# =============================================================================

@dataclass
class BlogIdea(_Serializable):
    id: str
    title: str
    description: str = ""
    keywords: List[str] = field(default_factory=list)
    estimated_length: str = ""
    difficulty: str = DEFAULT_LEVEL
    target_audience: str = ""
    content_pillars: List[str] = field(default_factory=list)
    seo_score: int = DEFAULT_SEO_SCORE
    rationale: str = ""


@dataclass
class GeneratedArticle(_Serializable):
    title: str = UNTITLED
    content: str = ""
    meta_description: str = ""
    keywords: List[str] = field(default_factory=list)
    word_count: int = 0


@dataclass
class ContentStrategyDraft(_Serializable):
    title: str = "Content Strategy"
    description: str = ""
    target_keywords: List[str] = field(default_factory=list)
    content_pillars: List[str] = field(default_factory=list)
    recommendations: str = ""
