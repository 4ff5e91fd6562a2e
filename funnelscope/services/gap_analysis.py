"""
Gap Analysis Engine Service

Classifies a funnel's current metrics against its funnel-type benchmark and
identifies the single most urgent bottleneck.

Benchmarked metrics (in evaluation order):
- Registration Rate, Show-Up Rate, Close Rate: funnel-type benchmark table
- CTR, Cost Per Lead, ROAS: fixed India-market ranges, any funnel type

Each metric declares its better direction as data. One classification function
reads that tag:

    higher is better: variance >= 20 excellent, >= 0 good, >= -20 warning, else critical
    lower is better:  variance <= -20 excellent, <= 0 good, <= 20 warning, else critical

where variance = (current - average) / average * 100.

A metric is a bottleneck when its variance is more than 20% in the unfavourable
direction, and an opportunity when more than 20% in the favourable direction.

Only metrics with a current value > 0 are compared; zero or unset metrics are
skipped, not treated as critical. An unknown funnel type yields an `unknown`
result with empty lists. Nothing here raises for data-quality reasons.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from funnelscope.models.enums import (
    BetterDirection,
    FunnelType,
    IndicatorStatus,
    MetricKey,
    Priority,
)
from funnelscope.models.schemas import (
    BenchmarkRange,
    FunnelMetrics,
    GapAnalysisResult,
    MetricComparison,
)
from funnelscope.services.benchmarks import (
    COST_PER_LEAD_BENCHMARK,
    CTR_BENCHMARK,
    DEFAULT_BENCHMARKS,
    ROAS_BENCHMARK,
    BenchmarkTable,
    FunnelBenchmarks,
    calculate_variance,
)


logger = logging.getLogger(__name__)


# =============================================================================
# Benchmarked metric definitions
# =============================================================================

@dataclass(frozen=True)
class BenchmarkedMetric:
    """
    A metric the gap analysis compares.

    Exactly one of `table_key` (looked up in the funnel's benchmark set) or
    `fixed_range` (market-wide) is set.
    """
    key: MetricKey
    name: str
    direction: BetterDirection
    table_key: Optional[str] = None
    fixed_range: Optional[BenchmarkRange] = None
    threshold: float = 20.0

    def resolve_range(self, funnel_benchmarks: FunnelBenchmarks) -> Optional[BenchmarkRange]:
        if self.fixed_range is not None:
            return self.fixed_range
        return funnel_benchmarks.get(self.table_key)

    def favourable_variance(self, variance: float) -> float:
        """Variance with its sign flipped so that positive always means better."""
        return variance if self.direction == BetterDirection.HIGHER else -variance


BENCHMARKED_METRICS: List[BenchmarkedMetric] = [
    BenchmarkedMetric(
        key=MetricKey.REGISTRATION_RATE,
        name="Registration Rate",
        direction=BetterDirection.HIGHER,
        table_key="registration_rate",
    ),
    BenchmarkedMetric(
        key=MetricKey.SHOW_UP_RATE,
        name="Show-Up Rate",
        direction=BetterDirection.HIGHER,
        table_key="show_up_rate",
    ),
    BenchmarkedMetric(
        key=MetricKey.CLOSE_RATE,
        name="Close Rate",
        direction=BetterDirection.HIGHER,
        table_key="close_rate",
    ),
    BenchmarkedMetric(
        key=MetricKey.CTR,
        name="CTR",
        direction=BetterDirection.HIGHER,
        fixed_range=CTR_BENCHMARK,
    ),
    BenchmarkedMetric(
        key=MetricKey.COST_PER_LEAD,
        name="Cost Per Lead",
        direction=BetterDirection.LOWER,
        fixed_range=COST_PER_LEAD_BENCHMARK,
    ),
    BenchmarkedMetric(
        key=MetricKey.ROAS,
        name="ROAS",
        direction=BetterDirection.HIGHER,
        fixed_range=ROAS_BENCHMARK,
    ),
]


# Current value of each benchmarked metric on a snapshot
_METRIC_VALUES = {
    MetricKey.REGISTRATION_RATE: lambda m: m.registration_rate,
    MetricKey.SHOW_UP_RATE: lambda m: m.show_up_rate,
    MetricKey.CLOSE_RATE: lambda m: m.close_rate,
    MetricKey.CTR: lambda m: m.ctr,
    MetricKey.COST_PER_LEAD: lambda m: m.cost_per_lead,
    MetricKey.ROAS: lambda m: m.roas,
}


RECOMMENDATIONS: Dict[str, str] = {
    "Registration Rate": (
        "Improve landing page copy, add social proof, simplify form fields, "
        "test different headlines."
    ),
    "Show-Up Rate": (
        "Send reminder emails/SMS, create urgency, improve event positioning, "
        "offer bonuses for attendance."
    ),
    "Close Rate": (
        "Improve sales script, handle objections better, create urgency, "
        "offer payment plans, strengthen value proposition."
    ),
    "CTR": (
        "Test new ad creatives, improve targeting, use more compelling hooks, "
        "add urgency to ad copy."
    ),
    "Cost Per Lead": (
        "Optimize ad targeting, improve landing page conversion, "
        "test lower-cost traffic sources."
    ),
    "Cost Per Attendee": (
        "Improve show-up rate through reminders, reduce ad spend waste, "
        "optimize targeting."
    ),
    "ROAS": (
        "Focus on improving close rate and average order value, reduce "
        "acquisition costs, optimize entire funnel."
    ),
}

_STATUS_SCORES: Dict[IndicatorStatus, int] = {
    IndicatorStatus.EXCELLENT: 4,
    IndicatorStatus.GOOD: 3,
    IndicatorStatus.WARNING: 2,
    IndicatorStatus.CRITICAL: 1,
    IndicatorStatus.UNKNOWN: 0,
}

_PRIORITY_ORDER: Dict[Priority, int] = {
    Priority.HIGH: 0,
    Priority.MEDIUM: 1,
    Priority.LOW: 2,
}


# =============================================================================
# Classification
# =============================================================================


def classify_status(
    variance: float,
    direction: BetterDirection = BetterDirection.HIGHER,
    threshold: float = 20.0,
) -> IndicatorStatus:
    """
    Map a variance onto a status, honouring the metric's better direction.

    Beyond +threshold (favourable) is excellent, beyond -threshold critical.
    """
    favourable = variance if direction == BetterDirection.HIGHER else -variance

    if favourable >= threshold:
        return IndicatorStatus.EXCELLENT
    elif favourable >= 0:
        return IndicatorStatus.GOOD
    elif favourable >= -threshold:
        return IndicatorStatus.WARNING
    return IndicatorStatus.CRITICAL


def classify_priority(variance: float, is_bottleneck: bool) -> Priority:
    """Bottlenecks are always high; otherwise by absolute variance."""
    if is_bottleneck:
        return Priority.HIGH
    if abs(variance) >= 30:
        return Priority.HIGH
    if abs(variance) >= 15:
        return Priority.MEDIUM
    return Priority.LOW


def recommendation_for(metric_name: str, status: IndicatorStatus) -> str:
    if status in (IndicatorStatus.EXCELLENT, IndicatorStatus.GOOD):
        return f"{metric_name} is performing well. Maintain current strategies."
    return RECOMMENDATIONS.get(
        metric_name,
        f"{metric_name} needs improvement. Analyze and optimize this metric.",
    )


def compare_metric(
    metric: BenchmarkedMetric,
    current: float,
    benchmark: BenchmarkRange,
) -> MetricComparison:
    """Build the comparison record of one metric against its range."""
    variance = calculate_variance(current, benchmark.average)
    favourable = metric.favourable_variance(variance)
    status = classify_status(variance, metric.direction, metric.threshold)
    is_bottleneck = favourable < -metric.threshold

    return MetricComparison(
        metricName=metric.name,
        metricKey=metric.key.value,
        currentValue=current,
        benchmarkMin=benchmark.min,
        benchmarkMax=benchmark.max,
        benchmarkAvg=benchmark.average,
        variance=variance,
        status=status,
        priority=classify_priority(variance, is_bottleneck),
        isBottleneck=is_bottleneck,
        isOpportunity=favourable > metric.threshold,
        recommendation=recommendation_for(metric.name, status),
    )


def calculate_overall_health(comparisons: List[MetricComparison]) -> IndicatorStatus:
    """
    Average the status scores (excellent=4 .. critical=1) and threshold.

    An empty comparison set is always `unknown`.
    """
    if not comparisons:
        return IndicatorStatus.UNKNOWN

    avg_score = sum(_STATUS_SCORES[c.status] for c in comparisons) / len(comparisons)

    if avg_score >= 3.5:
        return IndicatorStatus.EXCELLENT
    elif avg_score >= 2.5:
        return IndicatorStatus.GOOD
    elif avg_score >= 1.5:
        return IndicatorStatus.WARNING
    return IndicatorStatus.CRITICAL


# =============================================================================
# Analysis
# =============================================================================


def analyze_gap(
    metrics: FunnelMetrics,
    funnel_type: Union[FunnelType, str],
    benchmarks: BenchmarkTable = DEFAULT_BENCHMARKS,
) -> GapAnalysisResult:
    """
    Perform gap analysis for a funnel's latest metrics snapshot.

    Args:
        metrics: The snapshot to analyze (derived fields as last stored)
        funnel_type: Funnel archetype, as enum or stored string
        benchmarks: Benchmark table to compare against

    Returns:
        GapAnalysisResult with comparisons sorted by priority (high first),
        then by descending absolute variance.
    """
    funnel_type_label = funnel_type.value if isinstance(funnel_type, FunnelType) else str(funnel_type)
    funnel_benchmarks = benchmarks.for_funnel(funnel_type)

    if funnel_benchmarks is None:
        logger.info(f"No benchmarks for funnel type {funnel_type_label!r}; health unknown")
        return GapAnalysisResult(
            funnelType=funnel_type_label,
            overallHealth=IndicatorStatus.UNKNOWN,
        )

    comparisons: List[MetricComparison] = []
    for metric in BENCHMARKED_METRICS:
        current = _METRIC_VALUES[metric.key](metrics)
        if current <= 0:
            continue
        benchmark = metric.resolve_range(funnel_benchmarks)
        if benchmark is None:
            continue
        comparisons.append(compare_metric(metric, current, benchmark))

    # Stable: equal keys keep evaluation order
    comparisons.sort(key=lambda c: (_PRIORITY_ORDER[c.priority], -abs(c.variance)))

    bottlenecks = [c for c in comparisons if c.isBottleneck]
    issues = [
        c for c in comparisons
        if c.status in (IndicatorStatus.WARNING, IndicatorStatus.CRITICAL)
    ]
    overall_health = calculate_overall_health(comparisons)

    logger.debug(
        f"Gap analysis for {funnel_type_label!r}: {len(comparisons)} comparisons, "
        f"{len(bottlenecks)} bottlenecks, health={overall_health.value}"
    )

    return GapAnalysisResult(
        funnelType=funnel_type_label,
        overallHealth=overall_health,
        comparisons=comparisons,
        primaryBottleneck=bottlenecks[0] if bottlenecks else None,
        secondaryIssues=issues[:3],
        opportunities=[c for c in comparisons if c.isOpportunity],
        strengths=[
            c for c in comparisons
            if c.status in (IndicatorStatus.EXCELLENT, IndicatorStatus.GOOD)
        ],
    )
