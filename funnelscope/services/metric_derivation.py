"""
Metric Derivation Service

Converts raw funnel counters into the standard marketing-metric vocabulary.

Derived Metrics (rates in percent, costs in INR):
- cpm = ad_spend / impressions * 1000
- ctr = clicks / impressions * 100
- cpc = ad_spend / clicks
- cost_per_lpv = ad_spend / landing_page_views
- registration_rate = registrations / landing_page_views * 100
- cost_per_lead = ad_spend / registrations
- show_up_rate = attendees / registrations * 100
- cost_per_attendee = ad_spend / attendees
- close_rate = closes / sales_calls_completed * 100
- average_order_value = revenue_generated / closes
- cost_per_acquisition = ad_spend / closes
- roas = revenue_generated / ad_spend

Every formula is guarded: a zero denominator yields exactly 0, never an error,
NaN or infinity. The reverse derivation walks the same chain backwards from a
revenue target without rounding.

All functions are pure.
"""

import math
from typing import Any, Mapping, Union

from funnelscope.models.schemas import (
    DerivedMetrics,
    FunnelMetrics,
    RawFunnelCounters,
    RequiredVolumes,
)


CounterSource = Union[RawFunnelCounters, FunnelMetrics, Mapping[str, Any]]


def safe_divide(numerator: float, denominator: float) -> float:
    """
    numerator / denominator, or 0.0 when the denominator is not positive or
    the quotient overflows to infinity.
    """
    if denominator <= 0:
        return 0.0
    result = numerator / denominator
    return result if math.isfinite(result) else 0.0


def _to_counters(source: CounterSource) -> RawFunnelCounters:
    if isinstance(source, RawFunnelCounters):
        return source
    if isinstance(source, FunnelMetrics):
        return RawFunnelCounters.model_validate(source.model_dump())
    return RawFunnelCounters.model_validate(dict(source))


def derive_metrics(counters: CounterSource) -> DerivedMetrics:
    """
    Compute the 12 derived metrics from raw counters.

    Args:
        counters: RawFunnelCounters, a FunnelMetrics snapshot, or any mapping
            with the counter names. Absent or None counters count as 0.

    Returns:
        DerivedMetrics with every field defined.

    Example:
        >>> m = derive_metrics({"ad_spend": 1000, "impressions": 10000, "clicks": 200})
        >>> (m.cpm, m.ctr, m.cpc)
        (100.0, 2.0, 5.0)
    """
    c = _to_counters(counters)

    return DerivedMetrics(
        # Traffic
        cpm=safe_divide(c.ad_spend, c.impressions) * 1000,
        ctr=safe_divide(c.clicks, c.impressions) * 100,
        cpc=safe_divide(c.ad_spend, c.clicks),

        # Conversion
        cost_per_lpv=safe_divide(c.ad_spend, c.landing_page_views),
        registration_rate=safe_divide(c.registrations, c.landing_page_views) * 100,
        cost_per_lead=safe_divide(c.ad_spend, c.registrations),

        # Engagement
        show_up_rate=safe_divide(c.attendees, c.registrations) * 100,
        cost_per_attendee=safe_divide(c.ad_spend, c.attendees),

        # Sales
        close_rate=safe_divide(c.closes, c.sales_calls_completed) * 100,
        average_order_value=safe_divide(c.revenue_generated, c.closes),
        cost_per_acquisition=safe_divide(c.ad_spend, c.closes),
        roas=safe_divide(c.revenue_generated, c.ad_spend),
    )


def apply_derived_metrics(metrics: FunnelMetrics) -> FunnelMetrics:
    """
    Return a copy of a snapshot with its derived fields recomputed.

    Run whenever a counter changes, before the snapshot is stored. Besides the
    12 derived metrics this refreshes cost_per_qualified_lead, which only the
    stored snapshot carries.
    """
    update = derive_metrics(metrics).model_dump()
    update["cost_per_qualified_lead"] = safe_divide(metrics.ad_spend, metrics.qualified_leads)
    return metrics.model_copy(update=update)


def reverse_derive_metrics(
    target_revenue: float,
    ticket_price: float,
    close_rate: float,
    show_up_rate: float,
    registration_rate: float,
    cost_per_lpv: float,
) -> RequiredVolumes:
    """
    Walk the funnel backwards from a revenue target.

    Rates are percentages. Each stage divides by its rate as a fraction; the
    registrations stage applies show_up_rate a second time, matching the
    projection engine. Nothing is rounded.

    Returns:
        RequiredVolumes; any stage whose rate (or ticket price) is 0 is 0, and
        projected_roas is 0 when the budget is 0.
    """
    required_closes = safe_divide(target_revenue, ticket_price)
    required_calls = safe_divide(required_closes, close_rate / 100)
    required_attendees = safe_divide(required_calls, show_up_rate / 100)
    required_registrations = safe_divide(required_attendees, show_up_rate / 100)
    required_lpv = safe_divide(required_registrations, registration_rate / 100)
    required_budget = required_lpv * cost_per_lpv
    projected_roas = safe_divide(target_revenue, required_budget)

    return RequiredVolumes(
        required_closes=required_closes,
        required_calls=required_calls,
        required_attendees=required_attendees,
        required_registrations=required_registrations,
        required_lpv=required_lpv,
        required_budget=required_budget,
        projected_roas=projected_roas,
    )
