"""
Effective-Value Projection Service

The sales-intake projection: how many sales, and how much ad spend, a revenue
target needs when each customer is valued at the entry offer plus a share of
the upsell tiers.

    effective value = L1 + 10% of L2 (if offered) + 1% of L3 (if offered)
    sales needed    = ceil(target / effective value)
    ad spend        = sales needed * CPA, plus a fixed 20% buffer

CPA comes from history (ad spend / sales). Without sales history it is
estimated from the cost per lead and the lead-to-sale conversion, assuming 5%
conversion when either stage rate is unknown.

When fewer than half of the leads attend, a what-if scenario recomputes the
leads (and ad spend) needed if attendance were 50%.

This path is independent of the benchmark-driven projection engine; see
projection_strategies for the shared interface.
"""

import math

from funnelscope.models.schemas import EffectiveValueProjection, SalesIntakeData
from funnelscope.services.metric_derivation import safe_divide


L2_UPSELL_SHARE = 0.10
L3_UPSELL_SHARE = 0.01
AD_SPEND_BUFFER = 1.2
FALLBACK_LEAD_CONVERSION = 0.05
SCENARIO_ATTENDANCE_RATE = 0.5
FALLBACK_SALES_CONVERSION = 0.1


def calculate_effective_value(l1_price: float, l2_price: float = 0.0, l3_price: float = 0.0) -> float:
    """Upsell-weighted value of one customer."""
    effective_value = l1_price
    if l2_price > 0:
        effective_value += l2_price * L2_UPSELL_SHARE
    if l3_price > 0:
        effective_value += l3_price * L3_UPSELL_SHARE
    return effective_value


def calculate_effective_value_projection(data: SalesIntakeData) -> EffectiveValueProjection:
    """
    Project sales and ad spend for the intake's revenue target.

    Args:
        data: Numeric answers of the sales intake questionnaire

    Returns:
        EffectiveValueProjection. Rates are fractions. scenarioLeadsNeeded is
        only set for the low-attendance scenario; otherwise scenarioAdSpend
        equals adSpendRequiredWithBuffer.
    """
    attendance_rate = safe_divide(data.total_calls, data.total_leads)
    sales_conversion_rate = safe_divide(data.total_sales, data.total_calls)
    cost_per_lead = safe_divide(data.monthly_ad_spend, data.total_leads)
    cost_per_attendee = safe_divide(data.monthly_ad_spend, data.total_calls)

    effective_value = calculate_effective_value(data.l1_price, data.l2_price, data.l3_price)

    average_order_value = safe_divide(data.current_monthly_revenue, data.total_sales)
    if average_order_value == 0:
        average_order_value = effective_value

    sales_needed = int(math.ceil(safe_divide(data.target_monthly_revenue, effective_value)))

    cost_per_acquisition = safe_divide(data.monthly_ad_spend, data.total_sales)
    if cost_per_acquisition == 0 and effective_value > 0 and cost_per_lead > 0:
        if attendance_rate > 0 and sales_conversion_rate > 0:
            lead_conversion = attendance_rate * sales_conversion_rate
        else:
            lead_conversion = FALLBACK_LEAD_CONVERSION
        cost_per_acquisition = cost_per_lead / lead_conversion

    ad_spend_raw = sales_needed * cost_per_acquisition
    ad_spend_with_buffer = ad_spend_raw * AD_SPEND_BUFFER

    is_low_attendance = attendance_rate < SCENARIO_ATTENDANCE_RATE
    scenario_leads = None
    if is_low_attendance and effective_value > 0:
        conversion = sales_conversion_rate or FALLBACK_SALES_CONVERSION
        scenario_leads = sales_needed / (SCENARIO_ATTENDANCE_RATE * conversion)
        scenario_ad_spend = scenario_leads * cost_per_lead * AD_SPEND_BUFFER
    else:
        scenario_ad_spend = ad_spend_with_buffer

    return EffectiveValueProjection(
        attendanceRate=attendance_rate,
        salesConversionRate=sales_conversion_rate,
        costPerLead=cost_per_lead,
        costPerAttendee=cost_per_attendee,
        effectiveValue=effective_value,
        averageOrderValue=average_order_value,
        salesNeededForTarget=sales_needed,
        costPerAcquisition=cost_per_acquisition,
        adSpendRequiredRaw=ad_spend_raw,
        adSpendRequiredWithBuffer=ad_spend_with_buffer,
        scenarioLeadsNeeded=scenario_leads,
        scenarioAdSpend=scenario_ad_spend,
        isLowAttendance=is_low_attendance,
    )
