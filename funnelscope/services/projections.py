"""
Projection Engine Service

Reverse-calculates the volume needed at every funnel stage to hit a revenue
target, compares assumption scenarios, and simulates a compounding growth
timeline.

Stage chain (rates in percent, ceiling at every integral stage):

    closes        = ceil(target / ticket_price)
    sales calls   = ceil(closes / close_rate)
    attendees     = ceil(sales calls / show_up_rate)
    registrations = ceil(attendees / attendance_rate)
    LP views      = ceil(registrations / registration_rate)
    clicks        = ceil(LP views / ctr)
    impressions   = ceil(clicks / ctr)
    budget        = ceil(clicks * cost_per_click)
    ROAS          = target / budget

attendance_rate defaults to show_up_rate, i.e. the show-up rate is applied to
both the attendees and registrations stages unless a distinct rate is given.

Assumption precedence: explicit input, then current metrics, then funnel
benchmark average, then a fixed default. A zero or missing value falls
through to the next source.
"""

import logging
import math
from typing import List, Optional, Union

from funnelscope.models.enums import FunnelType
from funnelscope.models.schemas import (
    CurrentFunnelSnapshot,
    GrowthTimeline,
    ProjectionAssumptions,
    ProjectionInputs,
    ProjectionResult,
    ScenarioComparison,
    ScenarioGap,
    TimelineMilestone,
)
from funnelscope.services.benchmarks import DEFAULT_BENCHMARKS, BenchmarkTable
from funnelscope.services.metric_derivation import safe_divide


logger = logging.getLogger(__name__)


# =============================================================================
# Defaults
# =============================================================================

DEFAULT_CLOSE_RATE = 20.0
DEFAULT_SHOW_UP_RATE = 60.0
DEFAULT_REGISTRATION_RATE = 40.0
DEFAULT_CTR = 1.5            # India market
DEFAULT_COST_PER_CLICK = 15.0  # INR
DEFAULT_COST_PER_LEAD = 150.0  # INR

DEFAULT_MONTHLY_GROWTH_RATE = 20.0
MAX_TIMELINE_MONTHS = 24

SCENARIO_CURRENT = "Current Performance"
SCENARIO_BENCHMARK = "Benchmark Performance"
SCENARIO_OPTIMIZED = "Optimized Performance"


def _first_set(*candidates: Optional[float]) -> float:
    """First candidate that is neither None nor 0."""
    for value in candidates:
        if value:
            return value
    return 0.0


def _ceil(value: float) -> int:
    """Round a stage volume up; a stage that overflowed to infinity is 0."""
    if not math.isfinite(value):
        return 0
    return int(math.ceil(value))


# =============================================================================
# Projections
# =============================================================================


def resolve_assumptions(
    inputs: ProjectionInputs,
    funnel_type: Union[FunnelType, str, None],
    current_metrics: Optional[CurrentFunnelSnapshot] = None,
    benchmarks: BenchmarkTable = DEFAULT_BENCHMARKS,
) -> ProjectionAssumptions:
    """Resolve every rate assumption through the precedence chain."""
    current = current_metrics or CurrentFunnelSnapshot()
    funnel_benchmarks = benchmarks.for_funnel(funnel_type) or {}

    def benchmark_avg(metric_name: str) -> Optional[float]:
        benchmark = funnel_benchmarks.get(metric_name)
        return benchmark.average if benchmark is not None else None

    show_up_rate = _first_set(
        inputs.showUpRate, current.showUpRate,
        benchmark_avg("show_up_rate"), DEFAULT_SHOW_UP_RATE,
    )

    return ProjectionAssumptions(
        closeRate=_first_set(
            inputs.closeRate, current.closeRate,
            benchmark_avg("close_rate"), DEFAULT_CLOSE_RATE,
        ),
        showUpRate=show_up_rate,
        attendanceRate=_first_set(inputs.attendanceRate, show_up_rate),
        registrationRate=_first_set(
            inputs.registrationRate, current.registrationRate,
            benchmark_avg("registration_rate"), DEFAULT_REGISTRATION_RATE,
        ),
        ctr=_first_set(inputs.ctr, current.ctr, DEFAULT_CTR),
        costPerClick=_first_set(inputs.costPerClick, current.cpc, DEFAULT_COST_PER_CLICK),
        costPerLead=_first_set(inputs.costPerLead, current.costPerLead, DEFAULT_COST_PER_LEAD),
    )


def calculate_projections(
    inputs: ProjectionInputs,
    funnel_type: Union[FunnelType, str, None],
    current_metrics: Optional[CurrentFunnelSnapshot] = None,
    benchmarks: BenchmarkTable = DEFAULT_BENCHMARKS,
) -> ProjectionResult:
    """
    Reverse-walk the funnel from a revenue target.

    Args:
        inputs: Target revenue, ticket price and optional rate overrides
        funnel_type: Selects the benchmark averages used as fallbacks
        current_metrics: Current funnel rates, used before benchmarks
        benchmarks: Benchmark table to read averages from

    Returns:
        ProjectionResult with the resolved assumptions attached. A zero ticket
        price or zero budget yields 0 rather than infinity.
    """
    a = resolve_assumptions(inputs, funnel_type, current_metrics, benchmarks)

    required_closes = _ceil(safe_divide(inputs.targetRevenue, inputs.ticketPrice))
    required_calls = _ceil(safe_divide(required_closes, a.closeRate / 100))
    required_attendees = _ceil(safe_divide(required_calls, a.showUpRate / 100))
    required_registrations = _ceil(safe_divide(required_attendees, a.attendanceRate / 100))
    required_lpv = _ceil(safe_divide(required_registrations, a.registrationRate / 100))
    required_clicks = _ceil(safe_divide(required_lpv, a.ctr / 100))
    required_impressions = _ceil(safe_divide(required_clicks, a.ctr / 100))
    required_budget = _ceil(required_clicks * a.costPerClick)

    return ProjectionResult(
        targetRevenue=inputs.targetRevenue,
        requiredCloses=required_closes,
        requiredSalesCalls=required_calls,
        requiredAttendees=required_attendees,
        requiredRegistrations=required_registrations,
        requiredLandingPageViews=required_lpv,
        requiredClicks=required_clicks,
        requiredImpressions=required_impressions,
        requiredBudget=required_budget,
        projectedROAS=safe_divide(inputs.targetRevenue, required_budget),
        assumptions=a,
    )


# =============================================================================
# Scenarios
# =============================================================================


def _gap(current: Optional[float], required: float) -> float:
    if not current:
        return 100.0
    return (required - current) / current * 100


def calculate_gaps(
    projection: ProjectionResult,
    current_metrics: Optional[CurrentFunnelSnapshot] = None,
) -> ScenarioGap:
    """
    Percentage gap between required and current volume at each stage.

    A current value of 0 (or missing) is always a gap of exactly 100.
    """
    current = current_metrics or CurrentFunnelSnapshot()
    return ScenarioGap(
        revenue=_gap(current.revenue, projection.targetRevenue),
        closes=_gap(current.closes, projection.requiredCloses),
        calls=_gap(current.salesCalls, projection.requiredSalesCalls),
        attendees=_gap(current.attendees, projection.requiredAttendees),
        registrations=_gap(current.registrations, projection.requiredRegistrations),
        budget=_gap(current.adSpend, projection.requiredBudget),
    )


def create_scenarios(
    base_inputs: ProjectionInputs,
    funnel_type: Union[FunnelType, str, None],
    current_metrics: Optional[CurrentFunnelSnapshot] = None,
    benchmarks: BenchmarkTable = DEFAULT_BENCHMARKS,
) -> List[ScenarioComparison]:
    """
    Project the target under three assumption sets.

    - Current Performance: the funnel's current rates replace the base inputs
    - Benchmark Performance: funnel benchmark averages for the stage rates
    - Optimized Performance: funnel benchmark maxima for the stage rates

    The benchmark scenarios keep the base traffic-cost inputs and ignore
    current metrics. Every scenario is gapped against the current volumes.
    """
    current = current_metrics or CurrentFunnelSnapshot()
    funnel_benchmarks = benchmarks.for_funnel(funnel_type) or {}

    def benchmark_rates(attr: str) -> dict:
        rates = {}
        for field, metric_name in (
            ("closeRate", "close_rate"),
            ("showUpRate", "show_up_rate"),
            ("registrationRate", "registration_rate"),
        ):
            benchmark = funnel_benchmarks.get(metric_name)
            rates[field] = getattr(benchmark, attr) if benchmark is not None else None
        return rates

    current_scenario = calculate_projections(
        base_inputs.model_copy(update={
            "closeRate": current.closeRate,
            "showUpRate": current.showUpRate,
            "registrationRate": current.registrationRate,
            "ctr": current.ctr,
            "costPerClick": current.cpc,
            "costPerLead": current.costPerLead,
        }),
        funnel_type,
        current_metrics,
        benchmarks,
    )
    benchmark_scenario = calculate_projections(
        base_inputs.model_copy(update=benchmark_rates("average")),
        funnel_type,
        benchmarks=benchmarks,
    )
    optimized_scenario = calculate_projections(
        base_inputs.model_copy(update=benchmark_rates("max")),
        funnel_type,
        benchmarks=benchmarks,
    )

    return [
        ScenarioComparison(
            name=name,
            projection=projection,
            gapPercentage=calculate_gaps(projection, current_metrics),
        )
        for name, projection in (
            (SCENARIO_CURRENT, current_scenario),
            (SCENARIO_BENCHMARK, benchmark_scenario),
            (SCENARIO_OPTIMIZED, optimized_scenario),
        )
    ]


# =============================================================================
# Growth timeline
# =============================================================================


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_timeline(
    current_revenue: float,
    target_revenue: float,
    monthly_growth_rate: float = DEFAULT_MONTHLY_GROWTH_RATE,
) -> GrowthTimeline:
    """
    Simulate compounding monthly growth until the target is reached.

    Capped at 24 months. When the target is already met the timeline is
    empty (0 months).
    """
    if current_revenue >= target_revenue:
        return GrowthTimeline(months=0, milestones=[])

    milestones: List[TimelineMilestone] = []
    revenue = current_revenue
    month = 0

    while revenue < target_revenue and month < MAX_TIMELINE_MONTHS:
        month += 1
        revenue = revenue * (1 + monthly_growth_rate / 100)
        milestones.append(TimelineMilestone(month=month, revenue=_round_half_up(revenue)))

    if revenue < target_revenue:
        logger.debug(
            f"Target {target_revenue} not reached within {MAX_TIMELINE_MONTHS} months "
            f"at {monthly_growth_rate}% growth"
        )

    return GrowthTimeline(months=month, milestones=milestones)
