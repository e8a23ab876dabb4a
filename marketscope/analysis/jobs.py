"""
Background Analysis Jobs

Long-running analyses run after the HTTP response is sent (FastAPI
BackgroundTasks). The AnalysisJob row is the only shared state: the client
polls it until status leaves "pending".
"""

import logging
from typing import Any, Dict

from marketscope.database import repository
from marketscope.database.models import AnalysisJob, AnalysisKind, CompetitiveAnalysisRecord
from marketscope.database.session import get_db_context
from .errors import AnalysisError, InvalidState
from .orchestrator import AnalysisOrchestrator

logger = logging.getLogger(__name__)


def analysis_record_to_dict(record: CompetitiveAnalysisRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "competitor_id": record.competitor_id,
        "domain_authority": record.domain_authority,
        "page_authority": record.page_authority,
        "spam_score": record.spam_score,
        "linking_domains": record.linking_domains,
        "total_links": record.total_links,
        "seo_strength": record.seo_strength,
        "top_keywords": list(record.top_keywords or []),
        "metrics_degraded": bool(record.metrics_degraded),
        "insights": record.insights,
        "threats": record.threats,
        "opportunities": record.opportunities,
        "recommendations": record.recommendations,
        "analyzed_at": record.analyzed_at.isoformat() if record.analyzed_at else None,
    }


async def _dispatch(orchestrator: AnalysisOrchestrator, job: AnalysisJob) -> Any:
    params = job.params or {}

    if job.kind == AnalysisKind.COMPETITOR:
        competitor_id = params.get("competitor_id")
        if competitor_id is None:
            raise InvalidState("competitor_id is required for a competitor analysis job")
        record = await orchestrator.run_competitor_analysis(job.company_id, int(competitor_id))
        return analysis_record_to_dict(record)

    if job.kind == AnalysisKind.ANALYZE_ALL:
        records = await orchestrator.analyze_all_competitors(job.company_id)
        return [analysis_record_to_dict(r) for r in records]

    if job.kind == AnalysisKind.LANDSCAPE:
        return (await orchestrator.run_landscape_analysis(job.company_id)).to_dict()

    if job.kind == AnalysisKind.POSITIONING:
        return (await orchestrator.run_positioning_analysis(job.company_id)).to_dict()

    if job.kind == AnalysisKind.BLOG_IDEAS:
        return [idea.to_dict() for idea in await orchestrator.generate_blog_ideas(job.company_id)]

    raise InvalidState(f"Unsupported job kind: {job.kind}")


async def run_analysis_job(job_id: int, metrics_provider, insight_generator) -> None:
    """
    Execute a pending job in its own session and record the outcome.

    Analysis errors mark the job failed with their message; anything else is
    logged with a traceback and marked failed with a generic message.
    """
    with get_db_context() as db:
        job = db.get(AnalysisJob, job_id)
        if job is None:
            logger.error(f"Job {job_id} vanished before it could run")
            return

        logger.info(f"Running {job.kind.value} job {job_id} for company {job.company_id}")
        orchestrator = AnalysisOrchestrator(db, metrics_provider, insight_generator)

        try:
            result = await _dispatch(orchestrator, job)
        except AnalysisError as e:
            db.rollback()
            logger.warning(f"Job {job_id} failed: {e.message}")
            repository.finish_job(db, job_id, error_message=e.message)
            return
        except Exception as e:
            db.rollback()
            logger.exception(f"Job {job_id} crashed: {e}")
            repository.finish_job(db, job_id, error_message="Unexpected error while running analysis")
            return

        repository.finish_job(db, job_id, result=result)
        logger.info(f"Job {job_id} succeeded")
