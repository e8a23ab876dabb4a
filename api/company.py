"""
API Endpoints for Company & Competitor Management

Handles:
1. Get the user's company profile
2. Create or partially update it
3. List, add and delete competitors
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from marketscope.analysis.errors import AnalysisError
from marketscope.auth.dependencies import get_current_user
from marketscope.database import repository
from marketscope.database.models import Company, User
from marketscope.database.session import get_db
from marketscope.utils.text import normalize_domain
from api.dependencies import get_current_company, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["Company"],
    dependencies=[Depends(get_current_user)],
)


# =============================================================================
# REQUEST / RESPONSE MODELS
# =============================================================================

class CompanyRequest(BaseModel):
    """Create-or-update payload. Omitted fields are left unchanged."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    industry: Optional[str] = None
    size: Optional[str] = None
    domain: Optional[str] = None
    website: Optional[str] = None
    linkedin_url: Optional[str] = None
    description: Optional[str] = None
    unique_selling_proposition: Optional[str] = None
    products: Optional[List[str]] = None
    services: Optional[List[str]] = None
    ideal_customer_profiles: Optional[str] = None
    customer_pain_points: Optional[List[str]] = None
    target_audience: Optional[str] = None


class CompanyResponse(BaseModel):
    id: int
    name: str
    industry: Optional[str] = None
    size: Optional[str] = None
    domain: Optional[str] = None
    website: Optional[str] = None
    linkedin_url: Optional[str] = None
    description: Optional[str] = None
    unique_selling_proposition: Optional[str] = None
    products: List[str] = []
    services: List[str] = []
    ideal_customer_profiles: Optional[str] = None
    customer_pain_points: List[str] = []
    target_audience: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CompetitorRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    website: Optional[str] = None
    description: Optional[str] = None


class CompetitorResponse(BaseModel):
    id: int
    company_id: int
    name: str
    website: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# =============================================================================
# COMPANY
# =============================================================================

@router.get("/company", response_model=Optional[CompanyResponse])
async def get_company(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The user's company, or null before it has been created."""
    return repository.get_company_by_user(db, current_user.id)


@router.post("/company", response_model=CompanyResponse)
async def save_company(
    request: CompanyRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create the company on first save, otherwise apply a partial update.

    A name is required the first time.
    """
    data = request.model_dump(exclude_unset=True)
    if data.get("website") and not data.get("domain"):
        data["domain"] = normalize_domain(data["website"])

    existing = repository.get_company_by_user(db, current_user.id)
    if existing is None and not data.get("name"):
        raise HTTPException(status_code=400, detail="Company name is required")

    try:
        return repository.upsert_company(db, current_user.id, data)
    except AnalysisError as e:
        raise to_http_exception(e)


# =============================================================================
# COMPETITORS
# =============================================================================

@router.get("/competitors", response_model=List[CompetitorResponse])
async def list_competitors(
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    return repository.list_competitors(db, company.id)


@router.post("/competitors", response_model=CompetitorResponse)
async def create_competitor(
    request: CompetitorRequest,
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    try:
        competitor = repository.create_competitor(
            db,
            company.id,
            name=request.name.strip(),
            website=(request.website or "").strip() or None,
            description=request.description,
        )
    except AnalysisError as e:
        raise to_http_exception(e)

    logger.info(f"Added competitor {competitor.name} for company {company.id}")
    return competitor


@router.delete("/competitors/{competitor_id}")
async def delete_competitor(
    competitor_id: int,
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    """Delete a competitor and all of its analyses."""
    try:
        deleted = repository.delete_competitor(db, company.id, competitor_id)
    except AnalysisError as e:
        raise to_http_exception(e)

    if not deleted:
        raise HTTPException(status_code=404, detail="Competitor not found")
    return {"success": True}
