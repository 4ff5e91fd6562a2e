"""
Database Pool Lifecycle Tests

asyncpg.create_pool is patched with the mock pool from conftest, so these
tests never open a socket.
"""

from unittest.mock import AsyncMock, patch

import pytest

from funnelscope.core import database
from funnelscope.core.dependencies import get_db_session


@pytest.fixture(autouse=True)
def reset_pool():
    database._pool = None
    yield
    database._pool = None


class TestPoolLifecycle:

    @pytest.mark.asyncio
    async def test_init_db_is_idempotent(self, mock_db_pool):
        create_pool = AsyncMock(return_value=mock_db_pool)

        with patch("funnelscope.core.database.asyncpg.create_pool", create_pool):
            first = await database.init_db()
            second = await database.init_db()

        assert first is mock_db_pool
        assert second is mock_db_pool
        create_pool.assert_awaited_once()
        kwargs = create_pool.call_args.kwargs
        assert kwargs["dsn"].startswith("postgresql://")
        assert kwargs["min_size"] == 2
        assert kwargs["max_size"] == 10

    @pytest.mark.asyncio
    async def test_get_db_pool_initializes_lazily(self, mock_db_pool):
        with patch(
            "funnelscope.core.database.asyncpg.create_pool",
            AsyncMock(return_value=mock_db_pool),
        ):
            assert await database.get_db_pool() is mock_db_pool

    @pytest.mark.asyncio
    async def test_close_db(self, mock_db_pool):
        database._pool = mock_db_pool

        await database.close_db()

        mock_db_pool.close.assert_awaited_once()
        assert database._pool is None

    @pytest.mark.asyncio
    async def test_close_without_pool_is_noop(self):
        await database.close_db()
        assert database._pool is None

    @pytest.mark.asyncio
    async def test_init_failure_propagates(self):
        with patch(
            "funnelscope.core.database.asyncpg.create_pool",
            AsyncMock(side_effect=OSError("host unreachable")),
        ):
            with pytest.raises(OSError):
                await database.init_db()

        assert database._pool is None


class TestDBSessionDependency:

    @pytest.mark.asyncio
    async def test_yields_pooled_connection(self, mock_db_pool, mock_conn):
        database._pool = mock_db_pool

        session = get_db_session()
        connection = await session.__anext__()

        assert connection is mock_conn
        mock_db_pool.acquire.assert_called_once()
        await session.aclose()
