"""
Benchmark Table Service

Static industry reference ranges for every funnel archetype, and the
range-band classification that reads them.

Structure: { funnel_type: { metric_name: BenchmarkRange(min, max, average, label) } }

The table is built once at import time as DEFAULT_BENCHMARKS and exposed only
through read-only mapping views, so callers (gap analysis, projections, tests)
receive it by reference and can never mutate it. A different table can be
injected wherever DEFAULT_BENCHMARKS is the default argument.

Besides the funnel-specific stage rates, three market-wide ranges apply to
every funnel type (India market, INR):
- CTR: 1.0 - 2.5 %, average 1.5
- Cost Per Lead: 80 - 250 INR, average 150
- ROAS: 2.0 - 5.0x, average 3.0
"""

import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Union

from funnelscope.models.enums import FunnelType, IndicatorStatus
from funnelscope.models.schemas import BenchmarkRange, BenchmarkRangeResult


logger = logging.getLogger(__name__)


FunnelBenchmarks = Mapping[str, BenchmarkRange]


# =============================================================================
# Raw benchmark data
# Values are percentages for rates.
# =============================================================================

_FUNNEL_BENCHMARK_DATA: Dict[FunnelType, Dict[str, tuple]] = {
    FunnelType.SALES_CALL: {
        "landing_to_application": (12, 28, 20, "Landing Page → Application"),
        "application_to_booked": (55, 75, 65, "Application → Booked Call"),
        "show_up_rate": (50, 70, 60, "Show-Up Rate"),
        "close_rate": (15, 25, 20, "Close Rate"),
    },
    FunnelType.LIVE_WEBINAR: {
        "registration_rate": (30, 50, 40, "Registration Rate"),
        "show_up_rate": (20, 35, 27.5, "Show-Up Rate (Live)"),
        "pitch_to_application": (3, 10, 6.5, "Pitch → Application"),
        "application_to_close": (8, 15, 10, "Application → Close"),
    },
    FunnelType.AUTOMATED_WEBINAR: {
        "registration_rate": (30, 50, 40, "Registration Rate"),
        "show_up_rate": (10, 25, 17.5, "Show-Up Rate (Automated)"),
        "pitch_to_application": (3, 10, 6.5, "Pitch → Application"),
        "application_to_close": (8, 15, 10, "Application → Close"),
    },
    FunnelType.CHALLENGE: {
        "registration_rate": (35, 55, 45, "Registration Rate"),
        "day1_show_up": (35, 50, 42.5, "Day 1 Show-Up"),
        "day5_retention": (10, 22, 16, "Day 5 Retention"),
        "offer_conversion": (2, 6, 4, "Offer Conversion (% of registrants)"),
        "close_rate": (8, 15, 10, "Close Rate"),
    },
    FunnelType.WORKSHOP: {
        "registration_rate": (30, 45, 37.5, "Registration Rate"),
        "attendance_rate": (25, 40, 32.5, "Attendance Rate"),
        "offer_conversion": (4, 12, 8, "Offer Conversion"),
    },
    FunnelType.DIRECT_SALES_PAGE: {
        "sales_page_conversion": (0.8, 3.5, 2.15, "Sales Page Conversion"),
        "upsell_take_rate": (8, 25, 16.5, "Upsell Take Rate"),
    },
    FunnelType.HYBRID: {
        "registration_rate": (25, 50, 37.5, "Registration Rate"),
        "show_up_rate": (20, 60, 40, "Show-Up Rate"),
        "close_rate": (10, 25, 17.5, "Close Rate"),
    },
}

# Market-wide ranges, independent of funnel type
CTR_BENCHMARK = BenchmarkRange(min=1.0, max=2.5, average=1.5, label="CTR")
COST_PER_LEAD_BENCHMARK = BenchmarkRange(min=80, max=250, average=150, label="Cost Per Lead")
ROAS_BENCHMARK = BenchmarkRange(min=2.0, max=5.0, average=3.0, label="ROAS")


# =============================================================================
# Immutable lookup table
# =============================================================================


class BenchmarkTable:
    """
    Read-only lookup of benchmark ranges keyed by funnel type, then metric name.

    Funnel types may be given as FunnelType members or their string values;
    anything unrecognised simply has no benchmarks.
    """

    def __init__(self, data: Mapping[FunnelType, Mapping[str, BenchmarkRange]]):
        self._table: Mapping[FunnelType, FunnelBenchmarks] = MappingProxyType({
            FunnelType(funnel_type): MappingProxyType(dict(ranges))
            for funnel_type, ranges in data.items()
        })

    def __contains__(self, funnel_type: object) -> bool:
        return self.for_funnel(funnel_type) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._table)

    def funnel_types(self) -> List[FunnelType]:
        return list(self._table)

    def for_funnel(self, funnel_type: Union[FunnelType, str, None]) -> Optional[FunnelBenchmarks]:
        """Benchmarks of one funnel type, or None if the type is unknown."""
        resolved = resolve_funnel_type(funnel_type)
        if resolved is None:
            return None
        return self._table.get(resolved)

    def get(
        self,
        funnel_type: Union[FunnelType, str, None],
        metric_name: str,
    ) -> Optional[BenchmarkRange]:
        """Range of one metric for one funnel type, or None."""
        benchmarks = self.for_funnel(funnel_type)
        if benchmarks is None:
            return None
        return benchmarks.get(metric_name)


def resolve_funnel_type(funnel_type: Union[FunnelType, str, None]) -> Optional[FunnelType]:
    """
    Map a stored funnel_type string onto the FunnelType enum.

    Returns None for unknown or empty values instead of raising.
    """
    if funnel_type is None:
        return None
    if isinstance(funnel_type, FunnelType):
        return funnel_type
    try:
        return FunnelType(funnel_type)
    except ValueError:
        return None


def build_default_benchmarks() -> BenchmarkTable:
    """Construct the benchmark table from the static reference data."""
    return BenchmarkTable({
        funnel_type: {
            metric_name: BenchmarkRange(min=low, max=high, average=avg, label=label)
            for metric_name, (low, high, avg, label) in ranges.items()
        }
        for funnel_type, ranges in _FUNNEL_BENCHMARK_DATA.items()
    })


DEFAULT_BENCHMARKS: BenchmarkTable = build_default_benchmarks()


# =============================================================================
# Range-band classification
# =============================================================================

_RANGE_PRIORITY: Dict[IndicatorStatus, int] = {
    IndicatorStatus.CRITICAL: 1,
    IndicatorStatus.WARNING: 2,
    IndicatorStatus.GOOD: 3,
    IndicatorStatus.EXCELLENT: 4,
}


def calculate_variance(current: float, average: float) -> float:
    """Percentage deviation of current from the benchmark average, 0 when the average is 0."""
    if average == 0:
        return 0.0
    return (current - average) / average * 100


def classify_against_range(current: float, benchmark: BenchmarkRange) -> IndicatorStatus:
    """
    Place a value within a benchmark range.

    - current >= max: excellent
    - current >= average: good
    - current >= min: warning
    - otherwise: critical
    """
    if current >= benchmark.max:
        return IndicatorStatus.EXCELLENT
    elif current >= benchmark.average:
        return IndicatorStatus.GOOD
    elif current >= benchmark.min:
        return IndicatorStatus.WARNING
    return IndicatorStatus.CRITICAL


def analyze_benchmark_ranges(
    funnel_type: Union[FunnelType, str, None],
    metrics: Mapping[str, float],
    benchmarks: BenchmarkTable = DEFAULT_BENCHMARKS,
) -> List[BenchmarkRangeResult]:
    """
    Classify every metric of a funnel's benchmark set against its range.

    Covers the funnel-specific stage rates (e.g. day5_retention) which have no
    stored counterpart; callers pass whatever values they have, keyed by
    metric name, and missing values count as 0.

    Returns:
        Results sorted weakest first (priority 1 = critical). Empty when the
        funnel type has no benchmarks.
    """
    funnel_benchmarks = benchmarks.for_funnel(funnel_type)
    if funnel_benchmarks is None:
        logger.info(f"No benchmark set for funnel type {funnel_type!r}")
        return []

    results: List[BenchmarkRangeResult] = []
    for metric_key, benchmark in funnel_benchmarks.items():
        current = metrics.get(metric_key) or 0
        variance = calculate_variance(current, benchmark.average)
        status = classify_against_range(current, benchmark)

        results.append(BenchmarkRangeResult(
            metric=benchmark.label,
            metricKey=metric_key,
            current=current,
            benchmark=benchmark,
            variance=variance,
            status=status,
            priority=_RANGE_PRIORITY[status],
        ))

    results.sort(key=lambda r: r.priority)
    return results


def identify_bottleneck(results: List[BenchmarkRangeResult]) -> Optional[BenchmarkRangeResult]:
    """
    Pick the single worst metric.

    The lowest-variance critical metric, else the lowest-variance warning
    metric, else None.
    """
    for status in (IndicatorStatus.CRITICAL, IndicatorStatus.WARNING):
        candidates = [r for r in results if r.status == status]
        if candidates:
            return min(candidates, key=lambda r: r.variance)
    return None


def identify_opportunities(results: List[BenchmarkRangeResult]) -> List[BenchmarkRangeResult]:
    """Metrics at or above the benchmark average."""
    return [
        r for r in results
        if r.status in (IndicatorStatus.EXCELLENT, IndicatorStatus.GOOD)
    ]
