"""
Record Repository Service

Read-only access to the records the CRUD application stores: prospects,
their products, funnels, and per-funnel metrics snapshots.

Every function takes an asyncpg connection (see DBSessionDep) so routes and
tests control the connection lifecycle. Missing rows return None or an empty
list; database errors propagate to the caller.

Identifier columns are UUIDs. Ids are parsed before querying, and an id
that is not a UUID matches nothing (None or an empty list) instead of
reaching the database. Ids are converted back to str on the records.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional
from uuid import UUID

from asyncpg import Connection

from funnelscope.models.schemas import Funnel, FunnelMetrics, Product, Prospect


logger = logging.getLogger(__name__)


_ID_COLUMNS = ("id", "user_id", "prospect_id", "funnel_id", "session_id")


def _parse_id(value: str) -> Optional[UUID]:
    """Parse a record id; None when it is not a UUID, so no row can match."""
    try:
        return UUID(str(value))
    except ValueError:
        logger.debug(f"Not a record id: {value!r}")
        return None


def _row_to_dict(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert an asyncpg Record to a dict with string identifiers."""
    data = dict(row)
    for column in _ID_COLUMNS:
        if data.get(column) is not None:
            data[column] = str(data[column])
    return data


async def fetch_prospect(conn: Connection, prospect_id: str) -> Optional[Prospect]:
    """Fetch one prospect by id."""
    key = _parse_id(prospect_id)
    if key is None:
        return None
    row = await conn.fetchrow(
        """
        SELECT *
        FROM prospects
        WHERE id = $1
        """,
        key,
    )
    if row is None:
        logger.debug(f"Prospect {prospect_id} not found")
        return None
    return Prospect.model_validate(_row_to_dict(row))


async def fetch_products(conn: Connection, prospect_id: str) -> List[Product]:
    """Fetch a prospect's products, oldest first."""
    key = _parse_id(prospect_id)
    if key is None:
        return []
    rows = await conn.fetch(
        """
        SELECT *
        FROM products
        WHERE prospect_id = $1
        ORDER BY created_at ASC
        """,
        key,
    )
    return [Product.model_validate(_row_to_dict(row)) for row in rows]


async def fetch_funnel(conn: Connection, funnel_id: str) -> Optional[Funnel]:
    """Fetch one funnel by id."""
    key = _parse_id(funnel_id)
    if key is None:
        return None
    row = await conn.fetchrow(
        """
        SELECT *
        FROM funnels
        WHERE id = $1
        """,
        key,
    )
    if row is None:
        logger.debug(f"Funnel {funnel_id} not found")
        return None
    return Funnel.model_validate(_row_to_dict(row))


async def fetch_latest_metrics(conn: Connection, funnel_id: str) -> Optional[FunnelMetrics]:
    """
    Fetch the newest metrics snapshot of a funnel.

    Derived fields are returned as stored; nothing is recomputed on read.
    """
    key = _parse_id(funnel_id)
    if key is None:
        return None
    row = await conn.fetchrow(
        """
        SELECT *
        FROM metrics
        WHERE funnel_id = $1
        ORDER BY created_at DESC
        LIMIT 1
        """,
        key,
    )
    if row is None:
        logger.debug(f"No metrics recorded for funnel {funnel_id}")
        return None
    return FunnelMetrics.model_validate(_row_to_dict(row))


def select_primary_product(products: List[Product]) -> Optional[Product]:
    """The product flagged primary, else the first one, else None."""
    for product in products:
        if product.is_primary:
            return product
    return products[0] if products else None
