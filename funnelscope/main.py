"""
FastAPI application entry point for the Funnel Compass analytics API.

This module configures logging and CORS, manages the database pool lifecycle,
and registers the API routers. The analytics themselves are pure functions in
funnelscope.services; only record lookups and the LLM call do I/O.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from funnelscope import __version__
from funnelscope.api import api_router
from funnelscope.core.config import get_settings
from funnelscope.core.database import init_db, close_db

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application startup and shutdown events.

    On startup:
        - Initialize database connection pool

    On shutdown:
        - Close database connection pool
    """
    # Startup
    logger.info("Funnel Compass API starting")
    try:
        await init_db()
        logger.info("Database connection pool initialized")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        # Continue startup even if DB fails - the analytics endpoints do not need it

    yield

    # Shutdown
    logger.info("Funnel Compass API shutting down")
    try:
        await close_db()
        logger.info("Database connection pool closed")
    except Exception as e:
        logger.error(f"Error closing database pool: {e}")


# Create FastAPI application
app = FastAPI(
    title="Funnel Compass API",
    version=__version__,
    description=(
        "Funnel analytics for the sales-intelligence CRM: metric derivation, "
        "benchmark gap analysis, revenue projections and AI recommendations."
    ),
    lifespan=lifespan,
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API routers
app.include_router(api_router)


@app.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring and load balancer probes.

    Returns:
        Dict with status 'healthy'
    """
    return {"status": "healthy"}


@app.get("/")
async def root():
    """
    Root endpoint providing API information.

    Returns:
        Dict with API name and version
    """
    return {
        "name": "Funnel Compass API",
        "version": __version__,
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


# Run with uvicorn when executed directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "funnelscope.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
