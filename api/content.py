"""
API Endpoints for Content

Handles:
1. Content calendar items (list, create, update, delete)
2. Free-form content generation
3. Content strategy (list, generate)
"""

import logging
from datetime import datetime
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from marketscope.analysis.errors import AnalysisError
from marketscope.analysis.orchestrator import AnalysisOrchestrator
from marketscope.auth.dependencies import get_current_user
from marketscope.database import repository
from marketscope.database.models import Company, User
from marketscope.database.session import get_db
from marketscope.utils.text import count_words
from api.dependencies import get_current_company, get_orchestrator, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["Content"],
    dependencies=[Depends(get_current_user)],
)

ContentStatusValue = Literal["draft", "review", "published"]


# =============================================================================
# REQUEST / RESPONSE MODELS
# =============================================================================

class ContentItemRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=500)
    type: str = Field(..., min_length=1, max_length=50)
    content: Optional[str] = None
    status: ContentStatusValue = "draft"
    keywords: Optional[str] = None
    tone: Optional[str] = None
    word_count: Optional[int] = Field(default=None, ge=0)
    scheduled_for: Optional[datetime] = None


class ContentItemUpdateRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    type: Optional[str] = None
    content: Optional[str] = None
    status: Optional[ContentStatusValue] = None
    keywords: Optional[str] = None
    tone: Optional[str] = None
    word_count: Optional[int] = Field(default=None, ge=0)
    scheduled_for: Optional[datetime] = None


class ContentItemResponse(BaseModel):
    id: int
    company_id: int
    title: str
    type: str
    content: Optional[str] = None
    status: str
    keywords: Optional[str] = None
    tone: Optional[str] = None
    word_count: Optional[int] = None
    scheduled_for: Optional[datetime] = None
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GenerateContentRequest(BaseModel):
    """Accepts the dashboard's camelCase field names as well."""
    topic: str = Field(..., min_length=1)
    content_type: str = Field(default="blog post", alias="contentType")
    keywords: str = ""
    tone: str = "professional"
    word_count: str = Field(default="500", alias="wordCount")
    additional_instructions: Optional[str] = Field(default=None, alias="additionalInstructions")

    class Config:
        populate_by_name = True


class ContentStrategyResponse(BaseModel):
    id: int
    company_id: int
    title: str
    description: Optional[str] = None
    target_keywords: List[str] = []
    content_pillars: List[str] = []
    recommendations: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


def item_to_response(item) -> ContentItemResponse:
    return ContentItemResponse(
        id=item.id,
        company_id=item.company_id,
        title=item.title,
        type=item.type,
        content=item.content,
        status=item.status.value,
        keywords=item.keywords,
        tone=item.tone,
        word_count=item.word_count,
        scheduled_for=item.scheduled_for,
        published_at=item.published_at,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


# =============================================================================
# CONTENT ITEMS
# =============================================================================

@router.get("/content", response_model=List[ContentItemResponse])
async def list_content(
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    return [item_to_response(item) for item in repository.list_content_items(db, company.id)]


@router.post("/content", response_model=ContentItemResponse)
async def create_content(
    request: ContentItemRequest,
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    data = request.model_dump()
    if data["word_count"] is None and data["content"]:
        data["word_count"] = count_words(data["content"])

    try:
        item = repository.create_content_item(db, company.id, data)
    except AnalysisError as e:
        raise to_http_exception(e)
    return item_to_response(item)


@router.patch("/content/{item_id}", response_model=ContentItemResponse)
async def update_content(
    item_id: int,
    request: ContentItemUpdateRequest,
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    data = request.model_dump(exclude_unset=True)
    if "content" in data and "word_count" not in data:
        data["word_count"] = count_words(data["content"] or "")

    try:
        item = repository.update_content_item(db, company.id, item_id, data)
    except AnalysisError as e:
        raise to_http_exception(e)

    if item is None:
        raise HTTPException(status_code=404, detail="Content item not found")
    return item_to_response(item)


@router.delete("/content/{item_id}")
async def delete_content(
    item_id: int,
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    try:
        deleted = repository.delete_content_item(db, company.id, item_id)
    except AnalysisError as e:
        raise to_http_exception(e)

    if not deleted:
        raise HTTPException(status_code=404, detail="Content item not found")
    return {"success": True}


@router.post("/content/generate")
async def generate_content(
    request: GenerateContentRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    """Free-form copy. Works without a company profile; uses it when present."""
    company = repository.get_company_by_user(db, current_user.id)
    try:
        content = await orchestrator.generate_content(
            company.id if company else None,
            topic=request.topic,
            content_type=request.content_type,
            keywords=request.keywords,
            tone=request.tone,
            word_count=request.word_count,
            additional_instructions=request.additional_instructions,
        )
    except AnalysisError as e:
        raise to_http_exception(e)
    return {"content": content}


# =============================================================================
# CONTENT STRATEGY
# =============================================================================

@router.get("/content-strategy", response_model=List[ContentStrategyResponse])
async def list_content_strategies(
    company: Company = Depends(get_current_company),
    db: Session = Depends(get_db),
):
    return repository.list_content_strategies(db, company.id)


@router.post("/content-strategy/generate", response_model=ContentStrategyResponse)
async def generate_content_strategy(
    company: Company = Depends(get_current_company),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    try:
        return await orchestrator.generate_content_strategy(company.id)
    except AnalysisError as e:
        raise to_http_exception(e)
