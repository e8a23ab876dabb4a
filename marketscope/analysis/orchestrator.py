"""
Analysis Orchestrator

Coordinates the metrics provider, the insight generator and the record store
to produce the five analysis artifacts:

1. Competitor analysis   - Moz metrics + Claude narrative, persisted per run
2. Landscape analysis    - one report over all competitors, append-only
3. Positioning analysis  - regenerated on demand, never persisted
4. Blog ideas            - steered away from previously rejected ideas
5. Full article          - from one blog idea, returned to the caller

Every generator response goes through marketscope.output.normalizer before it
is returned or written.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from marketscope.database import repository
from marketscope.database.models import (
    Company,
    CompetitiveAnalysisRecord,
    CompetitiveLandscapeAnalysis,
    Competitor,
    ContentStrategy,
)
from marketscope.output.normalizer import (
    normalize_article,
    normalize_blog_ideas,
    normalize_competitor_insight,
    normalize_content_strategy,
    normalize_landscape,
    normalize_positioning,
)
from marketscope.output.schemas import (
    BlogIdea,
    GeneratedArticle,
    LandscapeAnalysis,
    PositioningAnalysis,
    SEOMetrics,
    UNTITLED,
)
from .errors import AnalysisError, GenerationFailed, InvalidState, NotFound, ProviderDegraded

logger = logging.getLogger(__name__)


def competitor_context(
    competitor: Competitor,
    latest: Optional[CompetitiveAnalysisRecord] = None,
) -> Dict[str, Any]:
    """Prompt context for one competitor, with stored SEO fields when present."""
    context = {
        "name": competitor.name,
        "website": competitor.website,
        "description": competitor.description,
    }
    if latest is not None:
        context.update({
            "domain_authority": latest.domain_authority,
            "page_authority": latest.page_authority,
            "spam_score": latest.spam_score,
            "linking_domains": latest.linking_domains,
            "total_links": latest.total_links,
            "seo_strength": latest.seo_strength,
        })
    return context


class AnalysisOrchestrator:
    """
    Runs analyses for one database session.

    Usage:
        orchestrator = AnalysisOrchestrator(db, MozClient(...), InsightGenerator())
        company = orchestrator.get_company_for_user(user.id)
        record = await orchestrator.run_competitor_analysis(company.id, competitor_id)

    Collaborators:
        metrics_provider: anything with `async analyze(url) -> SEOMetrics`
        insight_generator: InsightGenerator or an object with the same methods
    """

    def __init__(self, db: Session, metrics_provider, insight_generator):
        self.db = db
        self.metrics = metrics_provider
        self.generator = insight_generator

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    def get_company_for_user(self, user_id: str) -> Company:
        """Root lookup. Every analysis starts from the caller's company."""
        company = repository.get_company_by_user(self.db, user_id)
        if company is None:
            raise NotFound("Company profile not found. Create your company first.")
        return company

    def _load_company(self, company_id: int) -> Company:
        company = self.db.get(Company, company_id)
        if company is None:
            raise NotFound(f"Company {company_id} not found")
        return company

    def _load_competitor(self, company_id: int, competitor_id: int) -> Competitor:
        competitor = repository.get_competitor(self.db, company_id, competitor_id)
        if competitor is None:
            raise NotFound(f"Competitor {competitor_id} not found")
        return competitor

    def _competitor_contexts(self, company_id: int) -> List[Dict[str, Any]]:
        latest = repository.latest_analyses_by_competitor(self.db, company_id)
        return [
            competitor_context(c, latest.get(c.id))
            for c in repository.list_competitors(self.db, company_id)
        ]

    # =========================================================================
    # COMPETITOR ANALYSIS
    # =========================================================================

    async def _fetch_metrics(self, website: str) -> SEOMetrics:
        """Metrics for a site; raises ProviderDegraded on any provider failure."""
        try:
            return await self.metrics.analyze(website)
        except Exception as e:
            raise ProviderDegraded(f"SEO metrics unavailable for {website}: {e}")

    async def _analyze_competitor(
        self,
        company: Company,
        competitor: Competitor,
        metrics: SEOMetrics,
    ) -> CompetitiveAnalysisRecord:
        raw = await self.generator.analyze_competitor(
            competitor.name,
            competitor.website,
            metrics,
            company.to_context(),
        )
        insight = normalize_competitor_insight(raw)
        record = repository.create_competitive_analysis(
            self.db, company.id, competitor.id, metrics, insight
        )
        logger.info(
            f"Analyzed competitor {competitor.name} ({competitor.website}): "
            f"DA={metrics.domain_authority}, strength={metrics.seo_strength}"
            f"{', metrics degraded' if metrics.degraded else ''}"
        )
        return record

    async def run_competitor_analysis(self, company_id: int, competitor_id: int) -> CompetitiveAnalysisRecord:
        """
        Analyze one competitor and persist exactly one new record.

        Metrics failures degrade to zeroed "Unknown" metrics; generation
        failures raise GenerationFailed and nothing is written.
        """
        company = self._load_company(company_id)
        competitor = self._load_competitor(company.id, competitor_id)
        if not competitor.website:
            raise InvalidState(f"Competitor '{competitor.name}' has no website to analyze")

        try:
            metrics = await self._fetch_metrics(competitor.website)
        except ProviderDegraded as e:
            logger.warning(f"{e.message}; continuing with zeroed metrics")
            metrics = SEOMetrics.unavailable()

        return await self._analyze_competitor(company, competitor, metrics)

    async def analyze_all_competitors(self, company_id: int) -> List[CompetitiveAnalysisRecord]:
        """
        Analyze every competitor in turn, returning only the successes.

        Competitors without a website are skipped, as is any competitor whose
        fetch, generation or save raises an AnalysisError. Never raises for a
        single competitor's failure.
        """
        company = self._load_company(company_id)
        competitors = repository.list_competitors(self.db, company.id)
        results = []

        for competitor in competitors:
            if not competitor.website:
                logger.warning(f"Skipping competitor {competitor.name}: no website")
                continue
            try:
                metrics = await self._fetch_metrics(competitor.website)
                results.append(await self._analyze_competitor(company, competitor, metrics))
            except AnalysisError as e:
                logger.warning(f"Skipping competitor {competitor.name}: {e.message}")

        logger.info(
            f"Batch analysis for company {company.id}: "
            f"{len(results)}/{len(competitors)} competitors analyzed"
        )
        return results

    # =========================================================================
    # LANDSCAPE ANALYSIS
    # =========================================================================

    async def run_landscape_analysis(self, company_id: int) -> LandscapeAnalysis:
        """
        One report over all competitors, built from stored SEO fields.

        Raises InvalidState when the company has no competitors.
        """
        company = self._load_company(company_id)
        competitors = self._competitor_contexts(company.id)
        if not competitors:
            raise InvalidState("Add competitors before running a landscape analysis")

        raw = await self.generator.analyze_landscape(company.to_context(), competitors)
        landscape = normalize_landscape(raw)
        repository.save_landscape_analysis(self.db, company.id, landscape)
        return landscape

    def get_latest_landscape(self, company_id: int) -> Optional[CompetitiveLandscapeAnalysis]:
        return repository.get_latest_landscape_analysis(self.db, company_id)

    # =========================================================================
    # POSITIONING
    # =========================================================================

    async def run_positioning_analysis(self, company_id: int) -> PositioningAnalysis:
        company = self._load_company(company_id)
        competitors = self._competitor_contexts(company.id)
        raw = await self.generator.analyze_positioning(company.to_context(), competitors)
        return normalize_positioning(raw)

    # =========================================================================
    # BLOG IDEAS & ARTICLES
    # =========================================================================

    async def generate_blog_ideas(self, company_id: int) -> List[BlogIdea]:
        """Fresh ideas that avoid everything the user already rejected."""
        company = self._load_company(company_id)
        rejected = []
        for row in repository.list_rejected_blog_ideas(self.db, company.id):
            idea = row.idea_data if isinstance(row.idea_data, dict) else {}
            rejected.append({"title": idea.get("title"), "reason": row.rejection_reason})

        raw = await self.generator.blog_ideas(
            company.to_context(),
            self._competitor_contexts(company.id),
            repository.list_positioning_recommendations(self.db, company.id),
            rejected,
        )
        ideas = normalize_blog_ideas(raw)
        logger.info(f"Generated {len(ideas)} blog ideas for company {company.id} ({len(rejected)} rejected excluded)")
        return ideas

    async def generate_article(self, idea: Dict[str, Any], company_id: int) -> GeneratedArticle:
        """
        Full article for one idea. Not persisted here.

        Raises GenerationFailed when the generator returns no content.
        """
        company = self._load_company(company_id)
        raw = await self.generator.full_article(
            idea,
            company.to_context(),
            self._competitor_contexts(company.id),
            repository.list_positioning_recommendations(self.db, company.id),
        )
        article = normalize_article(raw, fallback_title=idea.get("title") or UNTITLED)
        if not article.content:
            raise GenerationFailed("Failed to generate article: no content returned")
        return article

    # =========================================================================
    # CONTENT
    # =========================================================================

    async def generate_content(
        self,
        company_id: Optional[int],
        topic: str,
        content_type: str,
        keywords: str = "",
        tone: str = "professional",
        word_count: str = "500",
        additional_instructions: Optional[str] = None,
    ) -> str:
        """Free-form copy; company context is added when the user has one."""
        company = self._load_company(company_id) if company_id is not None else None
        content = await self.generator.generate_content(
            topic=topic,
            content_type=content_type,
            keywords=keywords,
            tone=tone,
            word_count=word_count,
            additional_instructions=additional_instructions,
            company=company.to_context() if company else None,
        )
        if not content:
            raise GenerationFailed("Failed to generate content: no content returned")
        return content

    async def generate_content_strategy(self, company_id: int) -> ContentStrategy:
        company = self._load_company(company_id)
        raw = await self.generator.generate_content_strategy(
            company.description or company.name,
            company.target_audience or company.ideal_customer_profiles or "",
            company.industry or "",
        )
        draft = normalize_content_strategy(raw)
        return repository.create_content_strategy(self.db, company.id, draft)
