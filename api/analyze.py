"""
MarketScope API Application

FastAPI app that:
1. Stores the user's company, competitors and content
2. Runs Moz + Claude competitor, landscape and positioning analyses
3. Generates blog ideas, articles and content strategies
4. Runs long analyses as background jobs the dashboard can poll
"""

import logging
import sys
from datetime import datetime

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marketscope import __version__
from marketscope.database import check_db_connection, init_db
from marketscope.utils.config import get_settings
from api.analysis import router as analysis_router
from api.company import router as company_router
from api.content import router as content_router
from api.jobs import router as jobs_router

load_dotenv()

# Configure logging to stdout
logging.basicConfig(
    level=get_settings().LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
    force=True,
)
logger = logging.getLogger(__name__)

# Quiet down chatty loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

app = FastAPI(
    title="MarketScope API",
    description="Competitive, positioning and content intelligence powered by Moz and Claude",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(company_router)
app.include_router(analysis_router)
app.include_router(content_router)
app.include_router(jobs_router)


# ============================================================================
# STARTUP - Initialize Database
# ============================================================================

@app.on_event("startup")
async def startup_event():
    """Initialize database on startup."""
    logger.info("Initializing database...")
    try:
        init_db()
        if check_db_connection():
            logger.info("Database connection verified")
        else:
            logger.warning("Database connection check failed - continuing anyway")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")


# ============================================================================
# HEALTH
# ============================================================================

@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "MarketScope API"}


@app.get("/api/health")
async def health():
    """Detailed health check including database and provider status."""
    settings = get_settings()
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": __version__,
        "database": "connected" if check_db_connection() else "disconnected",
        "moz": "configured" if settings.has_moz else "not configured",
        "claude": "configured" if settings.ANTHROPIC_API_KEY else "not configured",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.analyze:app", host="0.0.0.0", port=8000, reload=False)
