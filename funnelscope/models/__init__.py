"""
Package initialization file for backend models.

This module exports all Pydantic schemas and enumerations from schemas.py and enums.py,
making them importable from funnelscope.models directly.

Usage:
    from funnelscope.models import (
        FunnelType,
        FunnelMetrics,
        GapAnalysisResult,
        ProjectionInputs,
        # ... etc
    )
"""

# =============================================================================
# Enums
# =============================================================================

from funnelscope.models.enums import (
    FunnelType,
    MetricKey,
    BetterDirection,
    MetricUnit,
    IndicatorStatus,
    Priority,
    RecommendationCategory,
    ProspectStatus,
)

# =============================================================================
# Schemas
# =============================================================================

from funnelscope.models.schemas import (
    # Stored records
    Prospect,
    Product,
    Funnel,
    FunnelMetrics,
    # Metric derivation
    RawFunnelCounters,
    DerivedMetrics,
    ReverseDerivationInput,
    RequiredVolumes,
    # Benchmarks and gap analysis
    BenchmarkRange,
    MetricComparison,
    GapAnalysisResult,
    GapAnalysisRequest,
    BenchmarkRangeResult,
    # Projections
    ProjectionInputs,
    CurrentFunnelSnapshot,
    ProjectionAssumptions,
    ProjectionResult,
    ScenarioGap,
    ScenarioComparison,
    ProjectionRequest,
    TimelineMilestone,
    GrowthTimeline,
    TimelineRequest,
    FunnelProjectionRequest,
    FunnelProjectionResponse,
    # Effective-value projection
    SalesIntakeData,
    EffectiveValueProjection,
    SalesRequirement,
    # AI recommendations
    AIRecommendation,
    AIRecommendationsResponse,
)

__all__ = [
    # Enums
    "FunnelType",
    "MetricKey",
    "BetterDirection",
    "MetricUnit",
    "IndicatorStatus",
    "Priority",
    "RecommendationCategory",
    "ProspectStatus",
    # Stored records
    "Prospect",
    "Product",
    "Funnel",
    "FunnelMetrics",
    # Metric derivation
    "RawFunnelCounters",
    "DerivedMetrics",
    "ReverseDerivationInput",
    "RequiredVolumes",
    # Benchmarks and gap analysis
    "BenchmarkRange",
    "MetricComparison",
    "GapAnalysisResult",
    "GapAnalysisRequest",
    "BenchmarkRangeResult",
    # Projections
    "ProjectionInputs",
    "CurrentFunnelSnapshot",
    "ProjectionAssumptions",
    "ProjectionResult",
    "ScenarioGap",
    "ScenarioComparison",
    "ProjectionRequest",
    "TimelineMilestone",
    "GrowthTimeline",
    "TimelineRequest",
    "FunnelProjectionRequest",
    "FunnelProjectionResponse",
    # Effective-value projection
    "SalesIntakeData",
    "EffectiveValueProjection",
    "SalesRequirement",
    # AI recommendations
    "AIRecommendation",
    "AIRecommendationsResponse",
]
