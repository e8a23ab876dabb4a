"""
API Endpoints for Background Analysis Jobs

Submit an analysis to run after the response is sent, then poll it.
"""

import logging
from datetime import datetime
from typing import Any, Literal, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from marketscope.analysis.errors import AnalysisError
from marketscope.analysis.jobs import run_analysis_job
from marketscope.auth.dependencies import get_current_user
from marketscope.database import repository
from marketscope.database.models import AnalysisJob, AnalysisKind, Company
from marketscope.database.session import get_db
from api.dependencies import (
    get_current_company,
    get_insight_generator,
    get_metrics_provider,
    to_http_exception,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/jobs",
    tags=["Jobs"],
    dependencies=[Depends(get_current_user)],
)


class JobRequest(BaseModel):
    kind: Literal["competitor", "analyze_all", "landscape", "positioning", "blog_ideas"]
    competitor_id: Optional[int] = None


class JobResponse(BaseModel):
    id: int
    kind: str
    status: str
    result: Optional[Any] = None
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


def job_to_response(job: AnalysisJob) -> JobResponse:
    return JobResponse(
        id=job.id,
        kind=job.kind.value,
        status=job.status.value,
        result=job.result,
        error_message=job.error_message,
        created_at=job.created_at,
        completed_at=job.completed_at,
    )


@router.post("", response_model=JobResponse, status_code=202)
async def submit_job(
    request: JobRequest,
    background_tasks: BackgroundTasks,
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
    metrics_provider=Depends(get_metrics_provider),
    insight_generator=Depends(get_insight_generator),
):
    """
    Queue an analysis and return immediately with a pending job.

    Competitor jobs are checked up front so an unknown competitor is a 404
    now rather than a failed job later.
    """
    kind = AnalysisKind(request.kind)
    params = {}
    if kind == AnalysisKind.COMPETITOR:
        if request.competitor_id is None:
            raise HTTPException(status_code=400, detail="competitor_id is required")
        if repository.get_competitor(db, company.id, request.competitor_id) is None:
            raise HTTPException(status_code=404, detail="Competitor not found")
        params["competitor_id"] = request.competitor_id

    try:
        job = repository.create_job(db, company.id, kind, params)
    except AnalysisError as e:
        raise to_http_exception(e)

    background_tasks.add_task(run_analysis_job, job.id, metrics_provider, insight_generator)
    return job_to_response(job)


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: int,
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    job = repository.get_job(db, company.id, job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return job_to_response(job)
