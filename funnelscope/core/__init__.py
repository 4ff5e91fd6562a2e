"""
Core infrastructure package for the FastAPI backend.

Provides:
- Configuration management via pydantic-settings
- Async PostgreSQL connectivity via asyncpg (read-only record store)
- FastAPI dependency injection utilities

Re-exports key components so other modules can write:

    from funnelscope.core import get_settings, DBSessionDep
"""

from funnelscope.core.config import Settings, get_settings
from funnelscope.core.database import init_db, close_db, get_db_pool
from funnelscope.core.dependencies import (
    get_db_session,
    get_settings_dependency,
    SettingsDep,
    DBSessionDep,
)

__all__ = [
    # Configuration management (from config.py)
    'Settings',
    'get_settings',
    # Database pool lifecycle (from database.py)
    'init_db',
    'close_db',
    'get_db_pool',
    # FastAPI dependency injection (from dependencies.py)
    'get_db_session',
    'get_settings_dependency',
    'SettingsDep',
    'DBSessionDep',
]
