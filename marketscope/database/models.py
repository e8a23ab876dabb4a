"""
SQLAlchemy Models for MarketScope

Design Principles:
1. One company per user; everything else hangs off the company
2. Analysis records are immutable - a re-run inserts a new row
3. AI artifacts are stored already normalized (JSON columns hold typed dicts)
4. Jobs make long-running generation explicit instead of a client-side flag
"""

import enum
from datetime import datetime

from sqlalchemy import (
    Column, String, Integer, Boolean, DateTime, Text,
    ForeignKey, Enum, Index, JSON,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


# =============================================================================
# ENUMS
# =============================================================================

class UserRole(enum.Enum):
    """User role for access control."""
    USER = "user"
    ADMIN = "admin"


class ContentStatus(enum.Enum):
    """Lifecycle of a content item"""
    DRAFT = "draft"
    REVIEW = "review"
    PUBLISHED = "published"


class AnalysisKind(enum.Enum):
    """The analysis flavors the orchestrator can run"""
    COMPETITOR = "competitor"
    ANALYZE_ALL = "analyze_all"
    LANDSCAPE = "landscape"
    POSITIONING = "positioning"
    BLOG_IDEAS = "blog_ideas"


class JobStatus(enum.Enum):
    """Status of a background analysis job"""
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# =============================================================================
# CORE TABLES
# =============================================================================

class User(Base):
    """
    Local user record keyed by the auth subject.

    Created on first authenticated request.
    """
    __tablename__ = "users"

    id = Column(String(255), primary_key=True)
    email = Column(String(255), unique=True)
    full_name = Column(String(255))
    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    company = relationship("Company", back_populates="user", uselist=False)

    def __repr__(self):
        return f"<User {self.email or self.id} ({self.role.value if self.role else 'user'})>"


class Company(Base):
    """The user's own business - the subject of every analysis"""
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), ForeignKey("users.id"), nullable=False, unique=True)

    name = Column(String(255), nullable=False)
    domain = Column(String(255))
    website = Column(String(500))
    linkedin_url = Column(String(500))
    industry = Column(String(255))
    size = Column(String(100))
    description = Column(Text)
    unique_selling_proposition = Column(Text)
    products = Column(JSON, default=list)
    services = Column(JSON, default=list)
    ideal_customer_profiles = Column(Text)
    customer_pain_points = Column(JSON, default=list)
    target_audience = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="company")
    competitors = relationship("Competitor", back_populates="company", cascade="all, delete-orphan")
    content_items = relationship("ContentItem", back_populates="company", cascade="all, delete-orphan")

    def to_context(self) -> dict:
        """Plain dict handed to prompt builders."""
        return {
            "name": self.name,
            "industry": self.industry,
            "size": self.size,
            "website": self.website or self.domain,
            "description": self.description,
            "unique_selling_proposition": self.unique_selling_proposition,
            "products": list(self.products or []),
            "services": list(self.services or []),
            "ideal_customer_profiles": self.ideal_customer_profiles,
            "customer_pain_points": list(self.customer_pain_points or []),
            "target_audience": self.target_audience,
        }


class Competitor(Base):
    """A competitor tracked by a company"""
    __tablename__ = "competitors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)

    name = Column(String(255), nullable=False)
    website = Column(String(500))
    description = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)

    company = relationship("Company", back_populates="competitors")
    analyses = relationship(
        "CompetitiveAnalysisRecord",
        back_populates="competitor",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_competitor_company", "company_id"),
    )


# =============================================================================
# ANALYSIS TABLES
# =============================================================================

class CompetitiveAnalysisRecord(Base):
    """One SEO + AI analysis of one competitor. Never updated in place."""
    __tablename__ = "competitive_analyses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    competitor_id = Column(Integer, ForeignKey("competitors.id"), nullable=False)

    # SEO metrics (Moz)
    domain_authority = Column(Integer, default=0)
    page_authority = Column(Integer, default=0)
    spam_score = Column(Integer, default=0)
    linking_domains = Column(Integer, default=0)
    total_links = Column(Integer, default=0)
    seo_strength = Column(String(50))
    top_keywords = Column(JSON, default=list)
    metrics_degraded = Column(Boolean, default=False)

    # AI narrative
    insights = Column(Text)
    threats = Column(Text)
    opportunities = Column(Text)
    recommendations = Column(Text)

    analyzed_at = Column(DateTime, default=datetime.utcnow)

    competitor = relationship("Competitor", back_populates="analyses")

    __table_args__ = (
        Index("idx_analysis_company", "company_id", "analyzed_at"),
    )


class CompetitiveLandscapeAnalysis(Base):
    """Snapshot of a company-vs-all-competitors report. Newest row wins."""
    __tablename__ = "competitive_landscape_analyses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)

    summary = Column(Text, nullable=False)
    key_insights = Column(JSON, default=list)
    competitive_position = Column(JSON, default=dict)
    competitor_insights = Column(JSON, default=list)
    recommendations = Column(JSON, default=list)
    market_opportunities = Column(JSON, default=list)
    strategic_implications = Column(JSON, default=list)

    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_landscape_company", "company_id", "created_at"),
    )


class PositioningRecommendationRecord(Base):
    """A positioning recommendation the user chose to keep"""
    __tablename__ = "positioning_recommendations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)

    # Normalized recommendation dict (see output.schemas.PositioningRecommendation)
    data = Column(JSON, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)


class RejectedBlogIdea(Base):
    """Blog ideas the user turned down - fed back to avoid repeats"""
    __tablename__ = "rejected_blog_ideas"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)

    idea_data = Column(JSON, nullable=False)
    rejection_reason = Column(Text)

    rejected_at = Column(DateTime, default=datetime.utcnow)


# =============================================================================
# CONTENT TABLES
# =============================================================================

class ContentItem(Base):
    """A piece of content on the calendar"""
    __tablename__ = "content_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)

    title = Column(String(500), nullable=False)
    content = Column(Text)
    type = Column(String(50), nullable=False)  # blog, social, email, ...
    status = Column(Enum(ContentStatus), default=ContentStatus.DRAFT, nullable=False)
    keywords = Column(Text)
    tone = Column(String(100))
    word_count = Column(Integer)
    scheduled_for = Column(DateTime)
    published_at = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    company = relationship("Company", back_populates="content_items")


class ContentStrategy(Base):
    """AI-generated content strategy"""
    __tablename__ = "content_strategies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)

    title = Column(String(500), nullable=False)
    description = Column(Text)
    target_keywords = Column(JSON, default=list)
    content_pillars = Column(JSON, default=list)
    recommendations = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class AnalysisJob(Base):
    """An analysis run in the background; polled by the client"""
    __tablename__ = "analysis_jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)

    kind = Column(Enum(AnalysisKind), nullable=False)
    status = Column(Enum(JobStatus), default=JobStatus.PENDING, nullable=False)
    params = Column(JSON, default=dict)
    result = Column(JSON)
    error_message = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    completed_at = Column(DateTime)

    __table_args__ = (
        Index("idx_job_company", "company_id", "created_at"),
    )
