"""
Repository Layer - Clean Interface for Data Operations

Simple functions to store and retrieve records. Every function takes the
session it works in; writes commit before returning and raise
PersistenceFailed (after rolling back) when the database refuses them.

Ownership is enforced here: lookups by id always filter on company_id too,
so a record belonging to another company reads as missing.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marketscope.analysis.errors import PersistenceFailed
from marketscope.output.schemas import (
    CompetitorInsight,
    ContentStrategyDraft,
    LandscapeAnalysis,
    SEOMetrics,
)
from .models import (
    AnalysisJob,
    AnalysisKind,
    Company,
    CompetitiveAnalysisRecord,
    CompetitiveLandscapeAnalysis,
    Competitor,
    ContentItem,
    ContentStatus,
    ContentStrategy,
    JobStatus,
    PositioningRecommendationRecord,
    RejectedBlogIdea,
)

logger = logging.getLogger(__name__)

COMPANY_FIELDS = (
    "name", "domain", "website", "linkedin_url", "industry", "size",
    "description", "unique_selling_proposition", "products", "services",
    "ideal_customer_profiles", "customer_pain_points", "target_audience",
)

CONTENT_FIELDS = (
    "title", "content", "type", "status", "keywords", "tone",
    "word_count", "scheduled_for", "published_at",
)


def _commit(db: Session, what: str) -> None:
    """Commit or roll back and raise PersistenceFailed."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to save {what}: {e}")
        raise PersistenceFailed(f"Failed to save {what}")


# =============================================================================
# COMPANY
# =============================================================================

def get_company_by_user(db: Session, user_id: str) -> Optional[Company]:
    return db.query(Company).filter(Company.user_id == user_id).first()


def upsert_company(db: Session, user_id: str, data: Dict[str, Any]) -> Company:
    """
    Create the user's company on first save, otherwise apply a partial update.

    Only keys in COMPANY_FIELDS are written; None values are ignored on
    update so a partial payload never blanks existing fields.
    """
    company = get_company_by_user(db, user_id)
    values = {k: v for k, v in data.items() if k in COMPANY_FIELDS and v is not None}

    if company is None:
        company = Company(user_id=user_id, **values)
        db.add(company)
        logger.info(f"Creating company '{values.get('name')}' for user {user_id}")
    else:
        for key, value in values.items():
            setattr(company, key, value)
        company.updated_at = datetime.utcnow()

    _commit(db, "company")
    db.refresh(company)
    return company


# =============================================================================
# COMPETITORS
# =============================================================================

def list_competitors(db: Session, company_id: int) -> List[Competitor]:
    return (
        db.query(Competitor)
        .filter(Competitor.company_id == company_id)
        .order_by(Competitor.created_at, Competitor.id)
        .all()
    )


def get_competitor(db: Session, company_id: int, competitor_id: int) -> Optional[Competitor]:
    return (
        db.query(Competitor)
        .filter(Competitor.id == competitor_id, Competitor.company_id == company_id)
        .first()
    )


def create_competitor(
    db: Session,
    company_id: int,
    name: str,
    website: Optional[str] = None,
    description: Optional[str] = None,
) -> Competitor:
    competitor = Competitor(
        company_id=company_id,
        name=name,
        website=website or None,
        description=description,
    )
    db.add(competitor)
    _commit(db, "competitor")
    db.refresh(competitor)
    return competitor


def delete_competitor(db: Session, company_id: int, competitor_id: int) -> bool:
    """Delete a competitor and its analysis records. False if not found."""
    competitor = get_competitor(db, company_id, competitor_id)
    if competitor is None:
        return False
    db.delete(competitor)
    _commit(db, "competitor deletion")
    logger.info(f"Deleted competitor {competitor_id} of company {company_id}")
    return True


# =============================================================================
# COMPETITIVE ANALYSES
# =============================================================================

def create_competitive_analysis(
    db: Session,
    company_id: int,
    competitor_id: int,
    metrics: SEOMetrics,
    insight: CompetitorInsight,
) -> CompetitiveAnalysisRecord:
    """Insert one immutable analysis row."""
    record = CompetitiveAnalysisRecord(
        company_id=company_id,
        competitor_id=competitor_id,
        domain_authority=metrics.domain_authority,
        page_authority=metrics.page_authority,
        spam_score=metrics.spam_score,
        linking_domains=metrics.linking_domains,
        total_links=metrics.total_links,
        seo_strength=metrics.seo_strength,
        top_keywords=list(metrics.top_keywords),
        metrics_degraded=metrics.degraded,
        insights=insight.insights,
        threats=insight.threats,
        opportunities=insight.opportunities,
        recommendations=insight.recommendations,
        analyzed_at=datetime.utcnow(),
    )
    db.add(record)
    _commit(db, "competitive analysis")
    db.refresh(record)
    return record


def list_competitive_analyses(db: Session, company_id: int) -> List[CompetitiveAnalysisRecord]:
    """Newest first."""
    return (
        db.query(CompetitiveAnalysisRecord)
        .filter(CompetitiveAnalysisRecord.company_id == company_id)
        .order_by(CompetitiveAnalysisRecord.analyzed_at.desc(), CompetitiveAnalysisRecord.id.desc())
        .all()
    )


def latest_analyses_by_competitor(db: Session, company_id: int) -> Dict[int, CompetitiveAnalysisRecord]:
    """Most recent analysis per competitor id."""
    latest: Dict[int, CompetitiveAnalysisRecord] = {}
    for record in list_competitive_analyses(db, company_id):
        latest.setdefault(record.competitor_id, record)
    return latest


# =============================================================================
# LANDSCAPE
# =============================================================================

def save_landscape_analysis(
    db: Session,
    company_id: int,
    landscape: LandscapeAnalysis,
) -> CompetitiveLandscapeAnalysis:
    """Append a snapshot; older snapshots are kept."""
    data = landscape.to_dict()
    row = CompetitiveLandscapeAnalysis(
        company_id=company_id,
        summary=data["summary"],
        key_insights=data["key_insights"],
        competitive_position=data["competitive_position"],
        competitor_insights=data["competitor_insights"],
        recommendations=data["recommendations"],
        market_opportunities=data["market_opportunities"],
        strategic_implications=data["strategic_implications"],
        created_at=datetime.utcnow(),
    )
    db.add(row)
    _commit(db, "landscape analysis")
    db.refresh(row)
    return row


def get_latest_landscape_analysis(db: Session, company_id: int) -> Optional[CompetitiveLandscapeAnalysis]:
    return (
        db.query(CompetitiveLandscapeAnalysis)
        .filter(CompetitiveLandscapeAnalysis.company_id == company_id)
        .order_by(CompetitiveLandscapeAnalysis.created_at.desc(), CompetitiveLandscapeAnalysis.id.desc())
        .first()
    )


# =============================================================================
# POSITIONING RECOMMENDATIONS
# =============================================================================

def list_positioning_recommendations(db: Session, company_id: int) -> List[Dict[str, Any]]:
    rows = (
        db.query(PositioningRecommendationRecord)
        .filter(PositioningRecommendationRecord.company_id == company_id)
        .order_by(PositioningRecommendationRecord.id)
        .all()
    )
    return [row.data for row in rows]


def replace_positioning_recommendations(
    db: Session,
    company_id: int,
    recommendations: List[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """Swap the saved set for a new one in a single transaction."""
    db.query(PositioningRecommendationRecord).filter(
        PositioningRecommendationRecord.company_id == company_id
    ).delete(synchronize_session=False)
    for rec in recommendations:
        db.add(PositioningRecommendationRecord(company_id=company_id, data=rec))
    _commit(db, "positioning recommendations")
    return list_positioning_recommendations(db, company_id)


# =============================================================================
# BLOG IDEAS
# =============================================================================

def reject_blog_idea(
    db: Session,
    company_id: int,
    idea_data: Dict[str, Any],
    reason: Optional[str] = None,
) -> RejectedBlogIdea:
    row = RejectedBlogIdea(
        company_id=company_id,
        idea_data=idea_data,
        rejection_reason=reason,
        rejected_at=datetime.utcnow(),
    )
    db.add(row)
    _commit(db, "rejected blog idea")
    db.refresh(row)
    return row


def list_rejected_blog_ideas(db: Session, company_id: int) -> List[RejectedBlogIdea]:
    return (
        db.query(RejectedBlogIdea)
        .filter(RejectedBlogIdea.company_id == company_id)
        .order_by(RejectedBlogIdea.rejected_at.desc(), RejectedBlogIdea.id.desc())
        .all()
    )


# =============================================================================
# CONTENT ITEMS
# =============================================================================

def list_content_items(db: Session, company_id: int) -> List[ContentItem]:
    return (
        db.query(ContentItem)
        .filter(ContentItem.company_id == company_id)
        .order_by(ContentItem.created_at.desc(), ContentItem.id.desc())
        .all()
    )


def get_content_item(db: Session, company_id: int, item_id: int) -> Optional[ContentItem]:
    return (
        db.query(ContentItem)
        .filter(ContentItem.id == item_id, ContentItem.company_id == company_id)
        .first()
    )


def _apply_status(values: Dict[str, Any], published: bool = False) -> Dict[str, Any]:
    """Coerce status to the enum and stamp published_at on first publish."""
    status = values.get("status")
    if isinstance(status, str):
        values["status"] = ContentStatus(status)
    if values.get("status") == ContentStatus.PUBLISHED and not published and not values.get("published_at"):
        values["published_at"] = datetime.utcnow()
    return values


def create_content_item(db: Session, company_id: int, data: Dict[str, Any]) -> ContentItem:
    values = _apply_status({k: v for k, v in data.items() if k in CONTENT_FIELDS and v is not None})
    item = ContentItem(company_id=company_id, **values)
    db.add(item)
    _commit(db, "content item")
    db.refresh(item)
    return item


def update_content_item(
    db: Session,
    company_id: int,
    item_id: int,
    data: Dict[str, Any],
) -> Optional[ContentItem]:
    """Partial update. None if the item does not exist for this company."""
    item = get_content_item(db, company_id, item_id)
    if item is None:
        return None
    values = _apply_status(
        {k: v for k, v in data.items() if k in CONTENT_FIELDS and v is not None},
        published=item.published_at is not None,
    )
    for key, value in values.items():
        setattr(item, key, value)
    item.updated_at = datetime.utcnow()
    _commit(db, "content item")
    db.refresh(item)
    return item


def delete_content_item(db: Session, company_id: int, item_id: int) -> bool:
    item = get_content_item(db, company_id, item_id)
    if item is None:
        return False
    db.delete(item)
    _commit(db, "content item deletion")
    return True


# =============================================================================
# CONTENT STRATEGIES
# =============================================================================

def create_content_strategy(db: Session, company_id: int, draft: ContentStrategyDraft) -> ContentStrategy:
    strategy = ContentStrategy(
        company_id=company_id,
        title=draft.title,
        description=draft.description,
        target_keywords=list(draft.target_keywords),
        content_pillars=list(draft.content_pillars),
        recommendations=draft.recommendations,
    )
    db.add(strategy)
    _commit(db, "content strategy")
    db.refresh(strategy)
    return strategy


def list_content_strategies(db: Session, company_id: int) -> List[ContentStrategy]:
    """Newest first."""
    return (
        db.query(ContentStrategy)
        .filter(ContentStrategy.company_id == company_id)
        .order_by(ContentStrategy.created_at.desc(), ContentStrategy.id.desc())
        .all()
    )


# =============================================================================
# JOBS
# =============================================================================

def create_job(
    db: Session,
    company_id: int,
    kind: AnalysisKind,
    params: Optional[Dict[str, Any]] = None,
) -> AnalysisJob:
    job = AnalysisJob(
        company_id=company_id,
        kind=kind,
        status=JobStatus.PENDING,
        params=params or {},
        created_at=datetime.utcnow(),
    )
    db.add(job)
    _commit(db, "analysis job")
    db.refresh(job)
    logger.info(f"Created {kind.value} job {job.id} for company {company_id}")
    return job


def get_job(db: Session, company_id: int, job_id: int) -> Optional[AnalysisJob]:
    return (
        db.query(AnalysisJob)
        .filter(AnalysisJob.id == job_id, AnalysisJob.company_id == company_id)
        .first()
    )


def finish_job(
    db: Session,
    job_id: int,
    result: Any = None,
    error_message: Optional[str] = None,
) -> Optional[AnalysisJob]:
    """Mark a job succeeded (no error) or failed (error_message set)."""
    job = db.query(AnalysisJob).filter(AnalysisJob.id == job_id).first()
    if job is None:
        return None
    job.status = JobStatus.FAILED if error_message else JobStatus.SUCCEEDED
    job.result = result
    job.error_message = error_message
    job.completed_at = datetime.utcnow()
    _commit(db, "analysis job")
    return job
