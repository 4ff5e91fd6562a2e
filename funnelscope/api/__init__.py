"""
Backend API package initialization.

This package contains FastAPI router modules for the Funnel Compass analytics
service:
- metrics: Metric derivation and reverse derivation
- benchmarks: Benchmark table lookup
- gap_analysis: Gap analysis of posted or stored metrics snapshots
- projections: Revenue projections, scenarios, growth timeline, effective value
- recommendations: AI recommendations from gap analysis
"""

from fastapi import APIRouter

# Import router modules
from funnelscope.api.metrics import router as metrics_router
from funnelscope.api.benchmarks import router as benchmarks_router
from funnelscope.api.gap_analysis import router as gap_analysis_router
from funnelscope.api.projections import router as projections_router
from funnelscope.api.recommendations import router as recommendations_router

# Create main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(metrics_router, prefix="/metrics", tags=["metrics"])
api_router.include_router(benchmarks_router, prefix="/benchmarks", tags=["benchmarks"])
api_router.include_router(gap_analysis_router, prefix="/gap-analysis", tags=["gap-analysis"])
api_router.include_router(projections_router, prefix="/projections", tags=["projections"])
api_router.include_router(recommendations_router, prefix="/recommendations", tags=["recommendations"])

# Export all routers for selective imports
__all__ = [
    "api_router",
    "metrics_router",
    "benchmarks_router",
    "gap_analysis_router",
    "projections_router",
    "recommendations_router",
]
