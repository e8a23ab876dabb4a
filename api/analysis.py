"""
API Endpoints for Competitive & Positioning Analysis

Handles:
1. Competitor analyses (single, batch, history)
2. Competitive landscape analysis (generate, latest)
3. Positioning analysis and the saved recommendation set
4. Blog ideas (generate, reject, rejected history)
5. Full article generation from a blog idea

GET endpoints return the latest stored artifact where one is persisted
(competitor analyses, landscape) and generate fresh where it is not
(positioning, blog ideas).
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from marketscope.analysis.errors import AnalysisError
from marketscope.analysis.orchestrator import AnalysisOrchestrator
from marketscope.auth.dependencies import get_current_user
from marketscope.database import repository
from marketscope.database.models import Company
from marketscope.database.session import get_db
from marketscope.output.normalizer import normalize_blog_idea, normalize_positioning_recommendation
from api.dependencies import get_current_company, get_orchestrator, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["Analysis"],
    dependencies=[Depends(get_current_user)],
)


# =============================================================================
# REQUEST / RESPONSE MODELS
# =============================================================================

class CompetitorAnalysisRequest(BaseModel):
    competitor_id: int


class CompetitiveAnalysisResponse(BaseModel):
    """One stored competitor analysis."""
    id: int
    company_id: int
    competitor_id: int
    domain_authority: int
    page_authority: int
    spam_score: int
    linking_domains: int
    total_links: int
    seo_strength: str
    top_keywords: List[str] = []
    metrics_degraded: bool = False
    insights: str
    threats: str
    opportunities: str
    recommendations: str
    analyzed_at: datetime

    class Config:
        from_attributes = True


class LandscapeResponse(BaseModel):
    summary: str
    key_insights: List[str] = []
    competitive_position: Dict[str, Any] = {}
    competitor_insights: List[Dict[str, Any]] = []
    recommendations: List[Dict[str, Any]] = []
    market_opportunities: List[str] = []
    strategic_implications: List[str] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PositioningRecommendationsRequest(BaseModel):
    """The recommendations the user adopts; replaces the saved set."""
    recommendations: List[Dict[str, Any]]


class RejectBlogIdeaRequest(BaseModel):
    idea: Dict[str, Any]
    reason: Optional[str] = None


class RejectedBlogIdeaResponse(BaseModel):
    id: int
    idea_data: Dict[str, Any]
    rejection_reason: Optional[str] = None
    rejected_at: datetime

    class Config:
        from_attributes = True


class GenerateArticleRequest(BaseModel):
    idea: Dict[str, Any]


# =============================================================================
# COMPETITOR ANALYSES
# =============================================================================

@router.get("/competitive-analyses", response_model=List[CompetitiveAnalysisResponse])
async def list_competitive_analyses(
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    """All stored analyses, newest first."""
    return repository.list_competitive_analyses(db, company.id)


@router.post("/competitive-analyses", response_model=CompetitiveAnalysisResponse)
async def run_competitor_analysis(
    request: CompetitorAnalysisRequest,
    company: Company = Depends(get_current_company),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    """Fetch Moz metrics, generate insights and store one new analysis."""
    try:
        return await orchestrator.run_competitor_analysis(company.id, request.competitor_id)
    except AnalysisError as e:
        raise to_http_exception(e)


@router.post("/competitive-analyses/analyze-all", response_model=List[CompetitiveAnalysisResponse])
async def analyze_all_competitors(
    company: Company = Depends(get_current_company),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    """
    Analyze every competitor in sequence.

    Competitors that fail are skipped; only successful analyses are returned.
    """
    try:
        return await orchestrator.analyze_all_competitors(company.id)
    except AnalysisError as e:
        raise to_http_exception(e)


# =============================================================================
# LANDSCAPE
# =============================================================================

@router.get("/competitive-landscape-analysis", response_model=Optional[LandscapeResponse])
async def get_landscape_analysis(
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    """Most recent landscape snapshot, or null if none has been run."""
    return repository.get_latest_landscape_analysis(db, company.id)


@router.post("/competitive-landscape-analysis", response_model=LandscapeResponse)
async def run_landscape_analysis(
    company: Company = Depends(get_current_company),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    try:
        landscape = await orchestrator.run_landscape_analysis(company.id)
    except AnalysisError as e:
        raise to_http_exception(e)
    return landscape.to_dict()


# =============================================================================
# POSITIONING
# =============================================================================

async def _positioning(company: Company, orchestrator: AnalysisOrchestrator) -> Dict[str, Any]:
    try:
        analysis = await orchestrator.run_positioning_analysis(company.id)
    except AnalysisError as e:
        raise to_http_exception(e)
    return analysis.to_dict()


@router.get("/positioning-analysis")
async def get_positioning_analysis(
    company: Company = Depends(get_current_company),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    """Positioning is not stored; every read generates a fresh analysis."""
    return await _positioning(company, orchestrator)


@router.post("/positioning-analysis")
async def run_positioning_analysis(
    company: Company = Depends(get_current_company),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    return await _positioning(company, orchestrator)


@router.get("/positioning-recommendations")
async def get_positioning_recommendations(
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    return {"recommendations": repository.list_positioning_recommendations(db, company.id)}


@router.post("/positioning-recommendations")
async def save_positioning_recommendations(
    request: PositioningRecommendationsRequest,
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    """Replace the saved set. Each entry is normalized before storing."""
    normalized = []
    for index, item in enumerate(request.recommendations):
        rec = normalize_positioning_recommendation(item, index)
        if rec is not None:
            normalized.append(rec.to_dict())

    try:
        saved = repository.replace_positioning_recommendations(db, company.id, normalized)
    except AnalysisError as e:
        raise to_http_exception(e)
    return {"recommendations": saved}


# =============================================================================
# BLOG IDEAS
# =============================================================================

async def _blog_ideas(company: Company, orchestrator: AnalysisOrchestrator) -> Dict[str, Any]:
    try:
        ideas = await orchestrator.generate_blog_ideas(company.id)
    except AnalysisError as e:
        raise to_http_exception(e)
    return {"ideas": [idea.to_dict() for idea in ideas]}


@router.get("/blog-ideas")
async def get_blog_ideas(
    company: Company = Depends(get_current_company),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    return await _blog_ideas(company, orchestrator)


@router.post("/blog-ideas")
async def generate_blog_ideas(
    company: Company = Depends(get_current_company),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    return await _blog_ideas(company, orchestrator)


@router.post("/blog-ideas/reject", response_model=RejectedBlogIdeaResponse)
async def reject_blog_idea(
    request: RejectBlogIdeaRequest,
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    """Remember a rejected idea so future generations avoid it."""
    idea = normalize_blog_idea(request.idea)
    if idea is None:
        raise HTTPException(status_code=400, detail="Blog idea must have a title")

    try:
        return repository.reject_blog_idea(db, company.id, idea.to_dict(), request.reason)
    except AnalysisError as e:
        raise to_http_exception(e)


@router.get("/blog-ideas/rejected", response_model=List[RejectedBlogIdeaResponse])
async def list_rejected_blog_ideas(
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    return repository.list_rejected_blog_ideas(db, company.id)


# =============================================================================
# ARTICLES
# =============================================================================

@router.post("/generate-article")
async def generate_article(
    request: GenerateArticleRequest,
    company: Company = Depends(get_current_company),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    """Write a full article for one blog idea. Saving it is a separate content call."""
    idea = normalize_blog_idea(request.idea)
    if idea is None:
        raise HTTPException(status_code=400, detail="Blog idea must have a title")

    try:
        article = await orchestrator.generate_article(idea.to_dict(), company.id)
    except AnalysisError as e:
        raise to_http_exception(e)
    return article.to_dict()
