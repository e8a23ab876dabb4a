"""
Shared Route Dependencies

- Collaborators (Moz client, insight generator), one per process
- Orchestrator bound to the request's session
- Company resolution for the current user
- AnalysisError -> HTTPException translation
"""

import logging
from functools import lru_cache

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from marketscope.analysis.errors import AnalysisError
from marketscope.analysis.orchestrator import AnalysisOrchestrator
from marketscope.analyzer.insights import InsightGenerator
from marketscope.auth.dependencies import get_current_user
from marketscope.database import repository
from marketscope.database.models import Company, User
from marketscope.database.session import get_db
from marketscope.integrations.config import build_moz_client
from marketscope.integrations.moz import MozClient

logger = logging.getLogger(__name__)


@lru_cache
def get_metrics_provider() -> MozClient:
    return build_moz_client()


@lru_cache
def get_insight_generator() -> InsightGenerator:
    return InsightGenerator()


def get_orchestrator(
    db: Session = Depends(get_db),
    metrics_provider=Depends(get_metrics_provider),
    insight_generator=Depends(get_insight_generator),
) -> AnalysisOrchestrator:
    return AnalysisOrchestrator(db, metrics_provider, insight_generator)


def get_current_company(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Company:
    """The caller's company, or 404 when it has not been created yet."""
    company = repository.get_company_by_user(db, current_user.id)
    if company is None:
        raise HTTPException(status_code=404, detail="Company not found")
    return company


def to_http_exception(error: AnalysisError) -> HTTPException:
    if error.status_code >= 500:
        logger.error(f"{type(error).__name__}: {error.message}")
    return HTTPException(status_code=error.status_code, detail=error.message)
