"""
FastAPI dependency injection module for the Funnel Compass backend.

This module provides reusable FastAPI dependencies for database sessions and
configuration access, so route handlers stay thin and tests can substitute
collaborators through ``app.dependency_overrides``.

Key Dependencies Provided:
- get_db_session: Async generator yielding database connections from the pool
- get_settings_dependency: Returns the cached Settings singleton
- SettingsDep: Type alias for injecting Settings into endpoints
- DBSessionDep: Type alias for injecting database connections into endpoints

Usage Examples:
    @router.get("/funnels/{funnel_id}")
    async def get_funnel_analysis(
        funnel_id: str,
        db: DBSessionDep,
    ) -> GapAnalysisResult:
        funnel = await fetch_funnel(db, funnel_id)
        ...
"""

from typing import AsyncGenerator, Annotated

from fastapi import Depends
from asyncpg import Connection

from funnelscope.core.config import Settings, get_settings
from funnelscope.core.database import get_db_pool


# =============================================================================
# Database Session Dependency
# =============================================================================

async def get_db_session() -> AsyncGenerator[Connection, None]:
    """
    Yield an async database connection from the pool.

    The connection is released back to the pool when the endpoint completes,
    regardless of whether the operation succeeded or raised an exception.

    Yields:
        asyncpg.Connection: An active database connection from the pool.

    Raises:
        asyncpg.PostgresError: If connection acquisition fails.
    """
    pool = await get_db_pool()
    async with pool.acquire() as connection:
        yield connection


# =============================================================================
# Settings Dependency
# =============================================================================

def get_settings_dependency() -> Settings:
    """
    Return the Settings singleton instance.

    Thin wrapper around get_settings() to enable FastAPI's dependency override
    mechanism for testing:

        app.dependency_overrides[get_settings_dependency] = lambda: test_settings
    """
    return get_settings()


# =============================================================================
# Type Aliases for Dependency Injection
# =============================================================================

# Usage: async def endpoint(settings: SettingsDep)
SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]

# Usage: async def endpoint(db: DBSessionDep)
DBSessionDep = Annotated[Connection, Depends(get_db_session)]
