"""
Async PostgreSQL connection pool module for the prospect/funnel record store.

The CRUD application keeps prospects, products, funnels and metrics snapshots in
a hosted PostgreSQL database. This service only reads from it: every analytics
request fetches one snapshot, runs the pure calculations on it, and returns.

Key Components:
- Global connection pool singleton (_pool)
- init_db(): Initialize the connection pool at application startup
- get_db_pool(): Get the pool instance (initializes if needed)
- close_db(): Gracefully close the pool at application shutdown

Connection Pool Configuration (from Settings):
- database_pool_min_size: minimum idle connections kept in pool (default 2)
- database_pool_max_size: maximum connections in pool (default 10)
- database_command_timeout: query timeout in seconds (default 60)

Usage:
    # At application startup (in FastAPI lifespan)
    await init_db()

    # In services
    pool = await get_db_pool()
    async with pool.acquire() as conn:
        row = await conn.fetchrow("SELECT * FROM funnels WHERE id = $1", funnel_id)

    # At application shutdown
    await close_db()
"""

import asyncpg
from asyncpg import Pool
from typing import Optional

from funnelscope.core.config import get_settings


# =============================================================================
# Global Pool Singleton
# =============================================================================

# Global connection pool instance - None until init_db() is called
_pool: Optional[Pool] = None


# =============================================================================
# Pool Lifecycle Functions
# =============================================================================

async def init_db() -> Pool:
    """
    Initialize the database connection pool.

    Should be called once at application startup, typically in the FastAPI
    lifespan context manager. If the pool is already initialized, the existing
    pool is returned (idempotent behavior).

    Returns:
        Pool: The asyncpg connection pool instance.

    Raises:
        asyncpg.PostgresError: If connection to the database fails.
        OSError: If the database host is unreachable.
    """
    global _pool

    if _pool is None:
        settings = get_settings()

        _pool = await asyncpg.create_pool(
            dsn=settings.database_url,
            min_size=settings.database_pool_min_size,
            max_size=settings.database_pool_max_size,
            command_timeout=settings.database_command_timeout,
        )

    return _pool


async def get_db_pool() -> Pool:
    """
    Get the database connection pool, initializing if needed.

    Returns:
        Pool: The asyncpg connection pool instance.

    Raises:
        asyncpg.PostgresError: If connection to the database fails during lazy init.
    """
    global _pool

    if _pool is None:
        await init_db()

    assert _pool is not None, "Pool should be initialized after init_db()"

    return _pool


async def close_db() -> None:
    """
    Close the database connection pool gracefully.

    After calling close_db(), the pool is reset to None. Subsequent calls to
    get_db_pool() will create a new pool. Calling it when no pool exists is a
    no-op.
    """
    global _pool

    if _pool is not None:
        await _pool.close()
        _pool = None
