"""
FastAPI router module for metric derivation endpoints.

- POST /metrics/derive: derive the 12 secondary metrics from raw counters
- POST /metrics/reverse: un-rounded volumes needed for a revenue target

Both are pure computations; negative counters or targets are rejected by
request validation with 422.
"""

import logging

from fastapi import APIRouter, HTTPException

from funnelscope.models.schemas import (
    DerivedMetrics,
    RawFunnelCounters,
    RequiredVolumes,
    ReverseDerivationInput,
)
from funnelscope.services.metric_derivation import derive_metrics, reverse_derive_metrics


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/derive", response_model=DerivedMetrics)
async def derive_metrics_endpoint(counters: RawFunnelCounters) -> DerivedMetrics:
    """
    Derive cpm, ctr, cpc, cost per stage, stage rates, AOV, CPA and ROAS.

    Any zero denominator yields 0 for that metric.
    """
    try:
        return derive_metrics(counters)
    except Exception as e:
        logger.error(f"Error deriving metrics: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error deriving metrics: {str(e)}")


@router.post("/reverse", response_model=RequiredVolumes)
async def reverse_metrics_endpoint(body: ReverseDerivationInput) -> RequiredVolumes:
    """Walk the funnel backwards from a revenue target without rounding."""
    try:
        return reverse_derive_metrics(
            target_revenue=body.target_revenue,
            ticket_price=body.ticket_price,
            close_rate=body.close_rate,
            show_up_rate=body.show_up_rate,
            registration_rate=body.registration_rate,
            cost_per_lpv=body.cost_per_lpv,
        )
    except Exception as e:
        logger.error(f"Error reverse-deriving metrics: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error reverse-deriving metrics: {str(e)}")
