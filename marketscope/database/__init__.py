"""
MarketScope Database Layer

Usage:
    from marketscope.database import init_db, get_db, get_db_context
    from marketscope.database import repository

    init_db()

    with get_db_context() as db:
        company = repository.get_company_by_user(db, user_id)
"""

# Models
from .models import (
    Base,
    User,
    UserRole,
    Company,
    Competitor,
    CompetitiveAnalysisRecord,
    CompetitiveLandscapeAnalysis,
    PositioningRecommendationRecord,
    RejectedBlogIdea,
    ContentItem,
    ContentStatus,
    ContentStrategy,
    AnalysisJob,
    AnalysisKind,
    JobStatus,
)

# Session management
from .session import (
    get_database_url,
    create_db_engine,
    get_engine,
    set_engine,
    get_db,
    get_db_context,
    init_db,
    check_db_connection,
)

from . import repository

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Company",
    "Competitor",
    "CompetitiveAnalysisRecord",
    "CompetitiveLandscapeAnalysis",
    "PositioningRecommendationRecord",
    "RejectedBlogIdea",
    "ContentItem",
    "ContentStatus",
    "ContentStrategy",
    "AnalysisJob",
    "AnalysisKind",
    "JobStatus",
    "get_database_url",
    "create_db_engine",
    "get_engine",
    "set_engine",
    "get_db",
    "get_db_context",
    "init_db",
    "check_db_connection",
    "repository",
]
