"""
FastAPI router module for the benchmark table.

- GET /benchmarks: every funnel type's benchmark set plus the market-wide ranges
- GET /benchmarks/{funnel_type}: one funnel type's set (404 when unknown)

Funnel types contain '/' (e.g. "Challenge/Bootcamp Funnel"), so the path
parameter accepts the rest of the path.
"""

import logging
from typing import Dict

from fastapi import APIRouter, HTTPException

from funnelscope.models.schemas import BenchmarkRange
from funnelscope.services.benchmarks import (
    COST_PER_LEAD_BENCHMARK,
    CTR_BENCHMARK,
    DEFAULT_BENCHMARKS,
    ROAS_BENCHMARK,
)


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=Dict[str, Dict[str, BenchmarkRange]])
async def list_benchmarks() -> Dict[str, Dict[str, BenchmarkRange]]:
    """
    Return the full benchmark table.

    Keyed by funnel type value, then metric name. The fixed India-market
    ranges are listed under "market".
    """
    table = {
        funnel_type.value: dict(DEFAULT_BENCHMARKS.for_funnel(funnel_type) or {})
        for funnel_type in DEFAULT_BENCHMARKS.funnel_types()
    }
    table["market"] = {
        "ctr": CTR_BENCHMARK,
        "cost_per_lead": COST_PER_LEAD_BENCHMARK,
        "roas": ROAS_BENCHMARK,
    }
    return table


@router.get("/{funnel_type:path}", response_model=Dict[str, BenchmarkRange])
async def get_funnel_benchmarks(funnel_type: str) -> Dict[str, BenchmarkRange]:
    """
    Return the benchmark set of one funnel type.

    Raises:
        HTTPException 404: If the funnel type has no benchmarks
    """
    benchmarks = DEFAULT_BENCHMARKS.for_funnel(funnel_type)
    if benchmarks is None:
        logger.warning(f"Benchmark lookup for unknown funnel type {funnel_type!r}")
        raise HTTPException(
            status_code=404,
            detail=f"No benchmarks for funnel type: {funnel_type}",
        )
    return dict(benchmarks)
