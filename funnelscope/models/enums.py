"""
Enumeration definitions for the Funnel Compass backend.

All enums inherit from both `str` and `Enum` so they serialize as plain strings
in Pydantic models and JSON responses.

- FunnelType: funnel archetypes; selects benchmark set and projection path
- MetricKey: the benchmarkable / formattable metric vocabulary
- BetterDirection: whether a metric improves upward or downward
- MetricUnit: display unit for a metric value
- IndicatorStatus / Priority: gap analysis classification outputs
- RecommendationCategory: AI recommendation tag
- ProspectStatus: prospect record lifecycle
"""

from enum import Enum


class FunnelType(str, Enum):
    """
    Funnel archetypes a prospect's funnel can be configured as.

    Fixed when the funnel is created. The value selects which benchmark set
    the gap analysis compares against and which benchmark averages seed the
    projection engine.
    """
    SALES_CALL = "1:1 Sales Call Funnel"
    LIVE_WEBINAR = "Live Webinar Funnel"
    AUTOMATED_WEBINAR = "Automated Webinar Funnel"
    CHALLENGE = "Challenge/Bootcamp Funnel"
    WORKSHOP = "Workshop Funnel"
    DIRECT_SALES_PAGE = "Direct Sales Page Funnel"
    HYBRID = "Hybrid/Custom"


class MetricKey(str, Enum):
    """
    Stored metric fields that carry a display unit or a benchmark.

    Values match the column names of the metrics record.
    """
    AD_SPEND = "ad_spend"
    IMPRESSIONS = "impressions"
    CLICKS = "clicks"
    LANDING_PAGE_VIEWS = "landing_page_views"
    REGISTRATIONS = "registrations"
    ATTENDEES = "attendees"
    SALES_CALLS_COMPLETED = "sales_calls_completed"
    CLOSES = "closes"
    REVENUE_GENERATED = "revenue_generated"
    CPM = "cpm"
    CTR = "ctr"
    CPC = "cpc"
    COST_PER_LPV = "cost_per_lpv"
    REGISTRATION_RATE = "registration_rate"
    COST_PER_LEAD = "cost_per_lead"
    SHOW_UP_RATE = "show_up_rate"
    COST_PER_ATTENDEE = "cost_per_attendee"
    CLOSE_RATE = "close_rate"
    AVERAGE_ORDER_VALUE = "average_order_value"
    COST_PER_ACQUISITION = "cost_per_acquisition"
    ROAS = "roas"


class BetterDirection(str, Enum):
    """
    Direction in which a metric improves.

    - higher: rates and ROAS
    - lower: costs
    """
    HIGHER = "higher"
    LOWER = "lower"


class MetricUnit(str, Enum):
    """Display unit of a metric value."""
    CURRENCY = "currency"
    PERCENT = "percent"
    MULTIPLIER = "multiplier"
    COUNT = "count"


class IndicatorStatus(str, Enum):
    """
    Health classification of a metric or a whole funnel.

    Ranked critical < warning < good < excellent. `unknown` is only produced
    for an entire analysis with no benchmark or no comparable metrics.
    """
    EXCELLENT = "excellent"
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"
    UNKNOWN = "unknown"


class Priority(str, Enum):
    """Remediation priority of a metric comparison."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecommendationCategory(str, Enum):
    """Category tag of an AI recommendation."""
    IMMEDIATE = "immediate"
    STRUCTURAL = "structural"
    FUNNEL = "funnel"
    CREATIVE = "creative"
    BUDGET = "budget"


class ProspectStatus(str, Enum):
    """Lifecycle status of a prospect record."""
    ACTIVE = "active"
    CLOSED_WON = "closed_won"
    CLOSED_LOST = "closed_lost"
    ARCHIVED = "archived"
