"""
Display formatting for metric values (en-IN conventions).

Indian digit grouping puts the first separator after three digits and every
following one after two: 1,00,000 (one lakh), 1,00,00,000 (one crore).

Each metric's display unit is declared in METRIC_UNITS; format_metric looks
the unit up there and never selects fields by attribute name.
"""

from typing import Dict, Union

from funnelscope.models.enums import MetricKey, MetricUnit


RUPEE = "₹"


METRIC_UNITS: Dict[MetricKey, MetricUnit] = {
    # Counters
    MetricKey.AD_SPEND: MetricUnit.CURRENCY,
    MetricKey.IMPRESSIONS: MetricUnit.COUNT,
    MetricKey.CLICKS: MetricUnit.COUNT,
    MetricKey.LANDING_PAGE_VIEWS: MetricUnit.COUNT,
    MetricKey.REGISTRATIONS: MetricUnit.COUNT,
    MetricKey.ATTENDEES: MetricUnit.COUNT,
    MetricKey.SALES_CALLS_COMPLETED: MetricUnit.COUNT,
    MetricKey.CLOSES: MetricUnit.COUNT,
    MetricKey.REVENUE_GENERATED: MetricUnit.CURRENCY,
    # Derived
    MetricKey.CPM: MetricUnit.CURRENCY,
    MetricKey.CTR: MetricUnit.PERCENT,
    MetricKey.CPC: MetricUnit.CURRENCY,
    MetricKey.COST_PER_LPV: MetricUnit.CURRENCY,
    MetricKey.REGISTRATION_RATE: MetricUnit.PERCENT,
    MetricKey.COST_PER_LEAD: MetricUnit.CURRENCY,
    MetricKey.SHOW_UP_RATE: MetricUnit.PERCENT,
    MetricKey.COST_PER_ATTENDEE: MetricUnit.CURRENCY,
    MetricKey.CLOSE_RATE: MetricUnit.PERCENT,
    MetricKey.AVERAGE_ORDER_VALUE: MetricUnit.CURRENCY,
    MetricKey.COST_PER_ACQUISITION: MetricUnit.CURRENCY,
    MetricKey.ROAS: MetricUnit.MULTIPLIER,
}


def _group_indian(digits: str) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_number(value: float, decimals: int = 0) -> str:
    """Format with Indian digit grouping, e.g. 1234567 -> '12,34,567'."""
    text = f"{abs(value):.{decimals}f}"
    whole, _, fraction = text.partition(".")
    grouped = _group_indian(whole)
    if fraction:
        grouped = f"{grouped}.{fraction}"
    if value < 0 and any(ch not in "0.," for ch in grouped):
        grouped = f"-{grouped}"
    return grouped


def format_inr(amount: float, decimals: int = 0) -> str:
    """Format as rupees, e.g. 100000 -> '₹1,00,000', -500 -> '-₹500'."""
    text = format_number(amount, decimals)
    if text.startswith("-"):
        return f"-{RUPEE}{text[1:]}"
    return f"{RUPEE}{text}"


def format_percentage(value: float, decimals: int = 2) -> str:
    return f"{value:.{decimals}f}%"


def format_roas(value: float, decimals: int = 2) -> str:
    return f"{value:.{decimals}f}x"


def format_metric(key: Union[MetricKey, str], value: float) -> str:
    """
    Format a metric value in its declared unit.

    Raises:
        ValueError: If key is not a known metric
    """
    unit = METRIC_UNITS[MetricKey(key)]

    if unit == MetricUnit.CURRENCY:
        return format_inr(value, 2 if 0 < abs(value) < 100 else 0)
    elif unit == MetricUnit.PERCENT:
        return format_percentage(value)
    elif unit == MetricUnit.MULTIPLIER:
        return format_roas(value)
    return format_number(value)
