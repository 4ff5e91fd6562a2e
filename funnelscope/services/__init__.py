"""
Backend Services Module

This module contains the business logic services of Funnel Compass.
Analytics services are pure functions over a single metrics snapshot; only
the record repository and the recommendation service perform I/O.

Services:
- benchmarks: Static benchmark table and range-band classification
- metric_derivation: Derived metrics from raw counters, and the reverse chain
- gap_analysis: Benchmark comparison, bottleneck and overall health
- projections: Stage-by-stage revenue projection, scenarios, growth timeline
- effective_value: Upsell-weighted sales-intake projection
- projection_strategies: Shared interface over both projection paths
- formatting: en-IN display formatting per metric unit
- records: Read access to prospects, products, funnels and metrics
- recommendations: LLM prompt, call and reply parsing

All services are designed to be consumed by the API layer (funnelscope/api/).
"""

# =============================================================================
# Benchmark Table Exports
# =============================================================================

from funnelscope.services.benchmarks import (
    BenchmarkTable,
    DEFAULT_BENCHMARKS,
    CTR_BENCHMARK,
    COST_PER_LEAD_BENCHMARK,
    ROAS_BENCHMARK,
    build_default_benchmarks,
    resolve_funnel_type,
    calculate_variance,
    classify_against_range,
    analyze_benchmark_ranges,
    identify_bottleneck,
    identify_opportunities,
)

# =============================================================================
# Metric Derivation Exports
# =============================================================================

from funnelscope.services.metric_derivation import (
    safe_divide,
    derive_metrics,
    apply_derived_metrics,
    reverse_derive_metrics,
)

# =============================================================================
# Gap Analysis Exports
# =============================================================================

from funnelscope.services.gap_analysis import (
    BenchmarkedMetric,
    BENCHMARKED_METRICS,
    classify_status,
    classify_priority,
    compare_metric,
    calculate_overall_health,
    analyze_gap,
)

# =============================================================================
# Projection Exports
# Two independent algorithms behind a shared strategy interface
# =============================================================================

from funnelscope.services.projections import (
    resolve_assumptions,
    calculate_projections,
    calculate_gaps,
    create_scenarios,
    calculate_timeline,
)
from funnelscope.services.effective_value import (
    calculate_effective_value,
    calculate_effective_value_projection,
)
from funnelscope.services.projection_strategies import (
    ProjectionStrategy,
    BenchmarkProjectionStrategy,
    EffectiveValueProjectionStrategy,
)

# =============================================================================
# Formatting Exports
# =============================================================================

from funnelscope.services.formatting import (
    METRIC_UNITS,
    format_inr,
    format_number,
    format_percentage,
    format_roas,
    format_metric,
)

# =============================================================================
# Record Repository and Recommendation Exports (I/O)
# =============================================================================

from funnelscope.services.records import (
    fetch_prospect,
    fetch_products,
    fetch_funnel,
    fetch_latest_metrics,
    select_primary_product,
)
from funnelscope.services.recommendations import (
    RecommendationServiceError,
    build_recommendation_prompt,
    parse_recommendations,
    generate_recommendations,
)

__all__ = [
    # benchmarks
    "BenchmarkTable",
    "DEFAULT_BENCHMARKS",
    "CTR_BENCHMARK",
    "COST_PER_LEAD_BENCHMARK",
    "ROAS_BENCHMARK",
    "build_default_benchmarks",
    "resolve_funnel_type",
    "classify_against_range",
    "analyze_benchmark_ranges",
    "identify_bottleneck",
    "identify_opportunities",
    # metric_derivation
    "safe_divide",
    "derive_metrics",
    "apply_derived_metrics",
    "reverse_derive_metrics",
    # gap_analysis
    "BenchmarkedMetric",
    "BENCHMARKED_METRICS",
    "calculate_variance",
    "classify_status",
    "classify_priority",
    "compare_metric",
    "calculate_overall_health",
    "analyze_gap",
    # projections
    "resolve_assumptions",
    "calculate_projections",
    "calculate_gaps",
    "create_scenarios",
    "calculate_timeline",
    "calculate_effective_value",
    "calculate_effective_value_projection",
    "ProjectionStrategy",
    "BenchmarkProjectionStrategy",
    "EffectiveValueProjectionStrategy",
    # formatting
    "METRIC_UNITS",
    "format_inr",
    "format_number",
    "format_percentage",
    "format_roas",
    "format_metric",
    # records
    "fetch_prospect",
    "fetch_products",
    "fetch_funnel",
    "fetch_latest_metrics",
    "select_primary_product",
    # recommendations
    "RecommendationServiceError",
    "build_recommendation_prompt",
    "parse_recommendations",
    "generate_recommendations",
]
