"""
FastAPI router module for gap analysis endpoints.

- POST /gap-analysis: analyze a posted metrics snapshot
- GET /gap-analysis/funnels/{funnel_id}: analyze a stored funnel's latest snapshot

An unknown funnel type is not an error: the result has overallHealth
"unknown" and empty lists.
"""

import logging

from fastapi import APIRouter, HTTPException

from funnelscope.core.dependencies import DBSessionDep
from funnelscope.models.schemas import GapAnalysisRequest, GapAnalysisResult
from funnelscope.services.gap_analysis import analyze_gap
from funnelscope.services.records import fetch_funnel, fetch_latest_metrics


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=GapAnalysisResult)
async def analyze_snapshot(request: GapAnalysisRequest) -> GapAnalysisResult:
    """Compare a metrics snapshot against the funnel type's benchmarks."""
    try:
        return analyze_gap(request.metrics, request.funnelType)
    except Exception as e:
        logger.error(f"Error running gap analysis: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error running gap analysis: {str(e)}")


@router.get("/funnels/{funnel_id}", response_model=GapAnalysisResult)
async def analyze_funnel(funnel_id: str, db: DBSessionDep) -> GapAnalysisResult:
    """
    Gap analysis of a stored funnel's latest metrics snapshot.

    Raises:
        HTTPException 404: If the funnel does not exist or has no metrics
        HTTPException 500: If the lookup or analysis fails
    """
    try:
        funnel = await fetch_funnel(db, funnel_id)
        if funnel is None:
            raise HTTPException(status_code=404, detail=f"Funnel not found: {funnel_id}")

        metrics = await fetch_latest_metrics(db, funnel_id)
        if metrics is None:
            raise HTTPException(
                status_code=404,
                detail="No metrics data available. Please input metrics first.",
            )

        return analyze_gap(metrics, funnel.funnel_type)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error analyzing funnel {funnel_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error analyzing funnel: {str(e)}")
