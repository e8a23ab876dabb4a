"""
Pytest Configuration and Shared Fixtures

Provides an in-memory database, seeded records and stub collaborators for
the orchestrator and API tests.
"""

import copy
import os

# Settings are cached on first use; configure the environment before any
# marketscope import reads them.
os.environ["AUTH_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "super-secret-jwt-key-for-testing"
os.environ.pop("DATABASE_URL", None)
os.environ.pop("MOZ_ACCESS_ID", None)
os.environ.pop("MOZ_SECRET_KEY", None)

from typing import Any, Dict, List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from marketscope.analysis.errors import GenerationFailed
from marketscope.database import init_db, repository, set_engine
from marketscope.database.models import Base, User
from marketscope.database.session import get_session_factory
from marketscope.integrations.moz import MozError
from marketscope.output.normalizer import normalize_seo_metrics
from marketscope.output.schemas import SEOMetrics
from marketscope.utils.config import get_settings

get_settings.cache_clear()


# ============================================================================
# Stub Collaborators
# ============================================================================

class StubMetricsProvider:
    """
    Returns metrics for a fixed domain authority.

    fail_on holds 1-based call numbers that raise MozError instead.
    """

    def __init__(self, domain_authority: int = 45, fail_on=(), by_url: Optional[Dict[str, int]] = None):
        self.domain_authority = domain_authority
        self.fail_on = set(fail_on)
        self.by_url = by_url or {}
        self.calls: List[str] = []

    async def analyze(self, url: str) -> SEOMetrics:
        self.calls.append(url)
        if len(self.calls) in self.fail_on:
            raise MozError(f"Moz unavailable for {url}", status_code=503)
        da = self.by_url.get(url, self.domain_authority)
        return normalize_seo_metrics({
            "domain_authority": da,
            "page_authority": max(da - 5, 0),
            "spam_score": 2,
            "root_domains_to_root_domain": 120,
            "external_pages_to_root_domain": 4500,
        })


DEFAULT_RESPONSES: Dict[str, Any] = {
    "analyze_competitor": {
        "insights": "Strong blog presence",
        "threats": "Outranks us on core terms",
        "opportunities": "Thin product comparison pages",
        "recommendations": "Publish comparison content",
    },
    "analyze_landscape": {
        "summary": "Crowded mid-market",
        "keyInsights": ["Price competition is intense"],
        "competitivePosition": {
            "marketPosition": "Challenger",
            "strengths": ["Support"],
            "weaknesses": ["Brand awareness"],
            "opportunities": ["SMB segment"],
            "threats": ["Incumbents"],
        },
        "competitorInsights": [
            {"name": "Acme", "threatLevel": "high", "strengths": ["SEO"], "weaknesses": []},
        ],
        "recommendations": [
            {"title": "Own the SMB niche", "priority": "High", "actionItems": ["Launch SMB plan"]},
        ],
        "marketOpportunities": ["Vertical templates"],
        "strategicImplications": ["Differentiate on service"],
    },
    "analyze_positioning": {
        "currentPositioning": {
            "overview": "Friendly all-rounder",
            "strengths": ["Onboarding"],
            "weaknesses": ["Generic message"],
            "marketPosition": "Follower",
        },
        "recommendations": [
            {"title": "Specialist for agencies", "category": "Niche", "confidence": 0.8},
            {"title": "Fastest setup", "category": "Speed", "confidence": 1.4},
        ],
    },
    "blog_ideas": {
        "ideas": [
            {"title": f"Idea number {n}", "keywords": ["crm"], "difficulty": "easy", "seoScore": 60 + n}
            for n in range(1, 6)
        ]
    },
    "full_article": {
        "title": "How agencies pick a CRM",
        "content": "# How agencies pick a CRM\n\nAgencies juggle many clients at once.",
        "metaDescription": "A guide for agencies",
        "keywords": ["crm", "agencies"],
    },
    "generate_content": "Short launch announcement copy.",
    "generate_content_strategy": {
        "title": "Agency-first content plan",
        "description": "Focus on agency workflows",
        "targetKeywords": ["agency crm"],
        "contentPillars": ["Workflows", "Case studies"],
        "recommendations": "Publish weekly",
    },
}


class StubInsightGenerator:
    """
    Deterministic stand-in for InsightGenerator.

    responses maps a method name to the raw payload it returns; an Exception
    instance is raised instead. Every call is recorded in calls.
    """

    def __init__(self, **responses):
        self.responses = copy.deepcopy(DEFAULT_RESPONSES)
        self.responses.update(responses)
        self.calls: List[tuple] = []

    def _respond(self, name: str, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        response = self.responses[name]
        if isinstance(response, Exception):
            raise response
        return copy.deepcopy(response)

    async def analyze_competitor(self, name, website, metrics, company=None):
        return self._respond("analyze_competitor", name, website, metrics, company)

    async def analyze_landscape(self, company, competitors):
        return self._respond("analyze_landscape", company, competitors)

    async def analyze_positioning(self, company, competitors):
        return self._respond("analyze_positioning", company, competitors)

    async def blog_ideas(self, company, competitors, positioning, rejected, count=None):
        return self._respond("blog_ideas", company, competitors, positioning, rejected)

    async def full_article(self, idea, company, competitors, positioning):
        return self._respond("full_article", idea, company, competitors, positioning)

    async def generate_content(self, **kwargs):
        return self._respond("generate_content", **kwargs)

    async def generate_content_strategy(self, description, target_audience, industry):
        return self._respond("generate_content_strategy", description, target_audience, industry)


def failing_generator(method: str) -> StubInsightGenerator:
    return StubInsightGenerator(**{method: GenerationFailed("Failed to generate: upstream timeout")})


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def engine():
    """Fresh in-memory SQLite database shared across sessions of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    set_engine(engine)
    init_db()
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = get_session_factory()()
    yield session
    session.close()


@pytest.fixture
def user(db) -> User:
    user = User(id="user-1", email="owner@example.com", full_name="Owner")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def company(db, user):
    return repository.upsert_company(db, user.id, {
        "name": "Northwind",
        "industry": "SaaS",
        "website": "https://northwind.example",
        "description": "CRM for agencies",
        "products": ["Northwind CRM"],
        "target_audience": "Agency owners",
    })


@pytest.fixture
def competitors(db, company):
    return [
        repository.create_competitor(db, company.id, "Acme", "acme.com"),
        repository.create_competitor(db, company.id, "Globex", "globex.com"),
        repository.create_competitor(db, company.id, "Initech", "initech.com"),
    ]


@pytest.fixture
def metrics_provider() -> StubMetricsProvider:
    return StubMetricsProvider()


@pytest.fixture
def insight_generator() -> StubInsightGenerator:
    return StubInsightGenerator()
