"""
FastAPI router module for projection endpoints.

- POST /projections: required volume per funnel stage for a revenue target
- POST /projections/scenarios: current / benchmark / optimized comparison
- POST /projections/timeline: months of compounding growth to the target
- POST /projections/effective-value: upsell-weighted sales-intake projection
- POST /projections/funnels/{funnel_id}: projection and scenarios of a stored
  funnel, from its prospect's target and primary product
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException

from funnelscope.core.dependencies import DBSessionDep
from funnelscope.models.schemas import (
    CurrentFunnelSnapshot,
    EffectiveValueProjection,
    FunnelProjectionRequest,
    FunnelProjectionResponse,
    GrowthTimeline,
    ProjectionInputs,
    ProjectionRequest,
    ProjectionResult,
    SalesIntakeData,
    ScenarioComparison,
    TimelineRequest,
)
from funnelscope.services.effective_value import calculate_effective_value_projection
from funnelscope.services.projections import (
    calculate_projections,
    calculate_timeline,
    create_scenarios,
)
from funnelscope.services.records import (
    fetch_funnel,
    fetch_latest_metrics,
    fetch_products,
    fetch_prospect,
    select_primary_product,
)


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=ProjectionResult)
async def project_target(request: ProjectionRequest) -> ProjectionResult:
    """
    Reverse-calculate every funnel stage from the revenue target.

    Unset rates resolve from currentMetrics, then the funnel type's
    benchmark averages, then defaults. The rates used are returned in
    `assumptions`.
    """
    try:
        return calculate_projections(
            request.inputs,
            request.funnelType,
            request.currentMetrics,
        )
    except Exception as e:
        logger.error(f"Error calculating projections: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error calculating projections: {str(e)}")


@router.post("/scenarios", response_model=List[ScenarioComparison])
async def project_scenarios(request: ProjectionRequest) -> List[ScenarioComparison]:
    """Project the target under current, benchmark and optimized rates."""
    try:
        return create_scenarios(
            request.inputs,
            request.funnelType,
            request.currentMetrics,
        )
    except Exception as e:
        logger.error(f"Error creating scenarios: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error creating scenarios: {str(e)}")


@router.post("/timeline", response_model=GrowthTimeline)
async def project_timeline(request: TimelineRequest) -> GrowthTimeline:
    """Monthly milestones until the target is reached, capped at 24 months."""
    try:
        return calculate_timeline(
            request.currentRevenue,
            request.targetRevenue,
            request.monthlyGrowthRate,
        )
    except Exception as e:
        logger.error(f"Error calculating timeline: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error calculating timeline: {str(e)}")


@router.post("/effective-value", response_model=EffectiveValueProjection)
async def project_effective_value(data: SalesIntakeData) -> EffectiveValueProjection:
    """Sales and ad spend needed, valuing each customer at L1 plus upsell share."""
    try:
        return calculate_effective_value_projection(data)
    except Exception as e:
        logger.error(f"Error calculating effective-value projection: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error calculating effective-value projection: {str(e)}",
        )


@router.post("/funnels/{funnel_id}", response_model=FunnelProjectionResponse)
async def project_stored_funnel(
    funnel_id: str,
    db: DBSessionDep,
    request: Optional[FunnelProjectionRequest] = None,
) -> FunnelProjectionResponse:
    """
    Project a stored funnel toward its prospect's revenue target.

    The target defaults to the prospect's target_monthly_revenue and the
    ticket price to the primary product's price; both can be overridden in
    the body. The latest metrics, when any exist, feed the assumptions and
    the current-performance scenario.

    Raises:
        HTTPException 404: If the funnel or its prospect is missing
        HTTPException 422: If no positive target revenue or ticket price is known
        HTTPException 500: If anything else fails
    """
    request = request or FunnelProjectionRequest()
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
        products = await fetch_products(db, prospect.id)
        primary = select_primary_product(products)

        target_revenue = request.targetRevenue or prospect.target_monthly_revenue
        ticket_price = request.ticketPrice or (primary.ticket_price if primary else 0.0)
        if target_revenue <= 0 or ticket_price <= 0:
            raise HTTPException(
                status_code=422,
                detail=(
                    "Target revenue and ticket price are required. Set them on the "
                    "prospect and its primary product, or pass them in the request."
                ),
            )

        inputs = ProjectionInputs(
            **request.model_dump(exclude={"targetRevenue", "ticketPrice"}),
            targetRevenue=target_revenue,
            ticketPrice=ticket_price,
        )
        current = CurrentFunnelSnapshot.from_metrics(metrics) if metrics else None
        if current is None:
            logger.info(f"Funnel {funnel_id} has no metrics; projecting from benchmarks")

        return FunnelProjectionResponse(
            funnelId=funnel.id,
            funnelType=funnel.funnel_type,
            inputs=inputs,
            currentMetrics=current,
            projection=calculate_projections(inputs, funnel.funnel_type, current),
            scenarios=create_scenarios(inputs, funnel.funnel_type, current),
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error projecting funnel {funnel_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error calculating projections: {str(e)}")
