"""
FastAPI router module for AI recommendations.

- POST /recommendations/funnels/{funnel_id}: fetch the funnel's records, run
  gap analysis, and ask the LLM for structured recommendations

Status codes:
- 404: funnel, prospect or metrics missing
- 503: no LLM API key configured
- 502: the LLM call failed
"""

import logging

from fastapi import APIRouter, HTTPException

from funnelscope.core.dependencies import DBSessionDep, SettingsDep
from funnelscope.models.schemas import AIRecommendationsResponse
from funnelscope.services.gap_analysis import analyze_gap
from funnelscope.services.recommendations import (
    RecommendationServiceError,
    generate_recommendations,
)
from funnelscope.services.records import (
    fetch_funnel,
    fetch_latest_metrics,
    fetch_products,
    fetch_prospect,
)


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/funnels/{funnel_id}", response_model=AIRecommendationsResponse)
async def recommend_for_funnel(
    funnel_id: str,
    db: DBSessionDep,
    settings: SettingsDep,
) -> AIRecommendationsResponse:
    """
    Generate AI recommendations for a stored funnel.

    Raises:
        HTTPException 404: If the funnel, its prospect or its metrics are missing
        HTTPException 502: If the LLM call fails
        HTTPException 503: If the LLM is not configured
        HTTPException 500: If anything else fails
    """
    try:
        funnel = await fetch_funnel(db, funnel_id)
        if funnel is None:
            raise HTTPException(status_code=404, detail=f"Funnel not found: {funnel_id}")

        prospect = await fetch_prospect(db, funnel.prospect_id)
        if prospect is None:
            raise HTTPException(
                status_code=404,
                detail=f"Prospect not found: {funnel.prospect_id}",
            )

        metrics = await fetch_latest_metrics(db, funnel_id)
        if metrics is None:
            raise HTTPException(
                status_code=404,
                detail="No metrics data available. Please input metrics first.",
            )

        products = await fetch_products(db, prospect.id)
        gap = analyze_gap(metrics, funnel.funnel_type)

        return await generate_recommendations(
            prospect, funnel, metrics, gap, products, settings,
        )

    except HTTPException:
        raise
    except RecommendationServiceError as e:
        if e.not_configured:
            logger.warning(f"Recommendations requested but LLM not configured: {e}")
            raise HTTPException(status_code=503, detail=str(e))
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error(f"Error generating recommendations for funnel {funnel_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error generating recommendations: {str(e)}",
        )
