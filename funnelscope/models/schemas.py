"""
Pydantic request/response models for the Funnel Compass backend.

This module provides type-safe data validation and serialization for:
- Stored records read from the CRUD application's database (prospects, products,
  funnels, metrics snapshots)
- Metric derivation inputs and outputs
- Benchmark ranges and gap analysis results
- Projection inputs, results, scenario comparisons and growth timelines
- The effective-value (sales intake) projection
- AI recommendation payloads

Stored records keep the snake_case column names of the database. Analysis and
projection records use the camelCase field names the frontend already consumes.

All models use Pydantic v2 syntax.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

from funnelscope.models.enums import (
    IndicatorStatus,
    Priority,
    ProspectStatus,
    RecommendationCategory,
)


def _none_to_zero(value):
    """Nullable numeric columns read as 0."""
    return 0 if value is None else value


# =============================================================================
# Stored Records (read models)
# =============================================================================


class Prospect(BaseModel):
    """
    A prospective client business.

    Revenue figures are monthly, in INR.
    """
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: Optional[str] = None
    business_name: str
    contact_name: Optional[str] = None
    industry_vertical: Optional[str] = None
    niche_description: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    current_monthly_revenue: float = 0.0
    target_monthly_revenue: float = 0.0
    timeline_months: int = 0
    notes: Optional[str] = None
    status: ProspectStatus = ProspectStatus.ACTIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator(
        "current_monthly_revenue", "target_monthly_revenue", "timeline_months",
        mode="before")
    @classmethod
    def zero_nulls(cls, value):
        return _none_to_zero(value)


class Product(BaseModel):
    """A product offering of a prospect."""
    model_config = ConfigDict(extra="ignore")

    id: str
    prospect_id: str
    product_name: str
    product_type: Optional[str] = None
    ticket_price: float = 0.0
    delivery_method: Optional[str] = None
    fulfillment_capacity: Optional[int] = None
    current_conversion_rate: Optional[float] = None
    is_primary: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("ticket_price", mode="before")
    @classmethod
    def zero_nulls(cls, value):
        return _none_to_zero(value)


class Funnel(BaseModel):
    """
    A configured marketing/sales funnel of a prospect.

    funnel_type is kept as a plain string: records created before a funnel
    archetype existed still load, and simply have no benchmark set.
    """
    model_config = ConfigDict(extra="ignore")

    id: str
    prospect_id: str
    funnel_type: str
    funnel_name: Optional[str] = None
    stage_count: int = 0
    custom_stages: Optional[List[str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


_METRIC_NUMBER_FIELDS = (
    # Traffic
    "ad_spend", "impressions", "reach", "cpm", "clicks", "ctr", "cpc",
    # Conversion
    "landing_page_views", "cost_per_lpv", "registrations", "registration_rate",
    "cost_per_lead", "qualified_leads", "cost_per_qualified_lead", "lead_quality_score",
    # Engagement
    "attendees", "show_up_rate", "cost_per_attendee", "engagement_score",
    "completion_rate", "replay_views",
    # Sales
    "sales_calls_booked", "sales_calls_completed", "proposals_made", "closes",
    "close_rate", "revenue_generated", "average_order_value",
    "cost_per_acquisition", "roas",
)


class FunnelMetrics(BaseModel):
    """
    Latest metrics snapshot of a funnel.

    Raw counters are entered by the user; the derived ratios are whatever was
    last computed and stored (see metric_derivation.apply_derived_metrics).
    Nothing is recomputed on read.
    """
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    funnel_id: Optional[str] = None
    session_id: Optional[str] = None

    # Traffic
    ad_spend: float = Field(default=0.0, ge=0.0)
    impressions: float = Field(default=0.0, ge=0.0)
    reach: float = Field(default=0.0, ge=0.0)
    cpm: float = 0.0
    clicks: float = Field(default=0.0, ge=0.0)
    ctr: float = 0.0
    cpc: float = 0.0

    # Conversion
    landing_page_views: float = Field(default=0.0, ge=0.0)
    cost_per_lpv: float = 0.0
    registrations: float = Field(default=0.0, ge=0.0)
    registration_rate: float = 0.0
    cost_per_lead: float = 0.0
    qualified_leads: float = Field(default=0.0, ge=0.0)
    cost_per_qualified_lead: float = 0.0
    lead_quality_score: float = 0.0

    # Engagement
    attendees: float = Field(default=0.0, ge=0.0)
    show_up_rate: float = 0.0
    cost_per_attendee: float = 0.0
    engagement_score: float = 0.0
    completion_rate: float = 0.0
    replay_views: float = Field(default=0.0, ge=0.0)

    # Sales
    sales_calls_booked: float = Field(default=0.0, ge=0.0)
    sales_calls_completed: float = Field(default=0.0, ge=0.0)
    proposals_made: float = Field(default=0.0, ge=0.0)
    closes: float = Field(default=0.0, ge=0.0)
    close_rate: float = 0.0
    revenue_generated: float = Field(default=0.0, ge=0.0)
    average_order_value: float = 0.0
    cost_per_acquisition: float = 0.0
    roas: float = 0.0

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator(*_METRIC_NUMBER_FIELDS, mode="before")
    @classmethod
    def zero_nulls(cls, value):
        return _none_to_zero(value)


# =============================================================================
# Metric Derivation
# =============================================================================


class RawFunnelCounters(BaseModel):
    """Raw counters the derived metrics are computed from. Absent means 0."""
    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {"ad_spend": 1000, "impressions": 10000, "clicks": 200}
        },
    )

    ad_spend: float = Field(default=0.0, ge=0.0)
    impressions: float = Field(default=0.0, ge=0.0)
    clicks: float = Field(default=0.0, ge=0.0)
    landing_page_views: float = Field(default=0.0, ge=0.0)
    registrations: float = Field(default=0.0, ge=0.0)
    attendees: float = Field(default=0.0, ge=0.0)
    sales_calls_completed: float = Field(default=0.0, ge=0.0)
    closes: float = Field(default=0.0, ge=0.0)
    revenue_generated: float = Field(default=0.0, ge=0.0)

    @field_validator(
        "ad_spend", "impressions", "clicks", "landing_page_views", "registrations",
        "attendees", "sales_calls_completed", "closes", "revenue_generated",
        mode="before")
    @classmethod
    def zero_nulls(cls, value):
        return _none_to_zero(value)


class DerivedMetrics(BaseModel):
    """
    The 12 secondary metrics derived from raw counters.

    Rates are percentages (2.0 means 2%), costs are INR, roas is a multiplier.
    A zero denominator yields exactly 0 for that field.
    """
    cpm: float = 0.0
    ctr: float = 0.0
    cpc: float = 0.0
    cost_per_lpv: float = 0.0
    registration_rate: float = 0.0
    cost_per_lead: float = 0.0
    show_up_rate: float = 0.0
    cost_per_attendee: float = 0.0
    close_rate: float = 0.0
    average_order_value: float = 0.0
    cost_per_acquisition: float = 0.0
    roas: float = 0.0


class ReverseDerivationInput(BaseModel):
    """Target and rate assumptions for the un-rounded reverse derivation."""
    target_revenue: float = Field(..., ge=0.0)
    ticket_price: float = Field(..., ge=0.0)
    close_rate: float = Field(..., ge=0.0, description="Percent of completed calls that close")
    show_up_rate: float = Field(..., ge=0.0, description="Percent of registrants that attend")
    registration_rate: float = Field(..., ge=0.0, description="Percent of landing page views that register")
    cost_per_lpv: float = Field(..., ge=0.0, description="INR spent per landing page view")


class RequiredVolumes(BaseModel):
    """Un-rounded volumes and budget needed to hit a revenue target."""
    required_closes: float = 0.0
    required_calls: float = 0.0
    required_attendees: float = 0.0
    required_registrations: float = 0.0
    required_lpv: float = 0.0
    required_budget: float = 0.0
    projected_roas: float = 0.0


# =============================================================================
# Benchmarks and Gap Analysis
# =============================================================================


class BenchmarkRange(BaseModel):
    """Industry range of one metric for one funnel type."""
    model_config = ConfigDict(frozen=True)

    min: float
    max: float
    average: float
    label: str

    @model_validator(mode="after")
    def _check_ordering(self) -> "BenchmarkRange":
        if not (self.min <= self.average <= self.max):
            raise ValueError(
                f"benchmark '{self.label}' must satisfy min <= average <= max, "
                f"got {self.min} / {self.average} / {self.max}"
            )
        return self


class MetricComparison(BaseModel):
    """
    One benchmarked metric compared against its benchmark range.

    variance is the percentage deviation from the benchmark average:
    (current - average) / average * 100.
    """
    metricName: str
    metricKey: str
    currentValue: float
    benchmarkMin: float
    benchmarkMax: float
    benchmarkAvg: float
    variance: float
    status: IndicatorStatus
    priority: Priority
    isBottleneck: bool
    isOpportunity: bool
    recommendation: str


class GapAnalysisResult(BaseModel):
    """Aggregate gap analysis of one funnel's metrics snapshot."""
    funnelType: str
    overallHealth: IndicatorStatus
    comparisons: List[MetricComparison] = Field(default_factory=list)
    primaryBottleneck: Optional[MetricComparison] = None
    secondaryIssues: List[MetricComparison] = Field(default_factory=list)
    opportunities: List[MetricComparison] = Field(default_factory=list)
    strengths: List[MetricComparison] = Field(default_factory=list)


class GapAnalysisRequest(BaseModel):
    """Body of POST /gap-analysis."""
    funnelType: str
    metrics: FunnelMetrics


class BenchmarkRangeResult(BaseModel):
    """
    Range-band classification of one funnel-table metric.

    priority runs 1 (critical) to 4 (excellent).
    """
    metric: str
    metricKey: str
    current: float
    benchmark: BenchmarkRange
    variance: float
    status: IndicatorStatus
    priority: int


# =============================================================================
# Projections
# =============================================================================


class ProjectionInputs(BaseModel):
    """
    Revenue target plus optional rate assumptions (all rates in percent).

    An assumption left empty (or 0) is resolved from current metrics, then the
    funnel benchmark average, then a fixed default.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "targetRevenue": 1000000,
                "ticketPrice": 50000,
                "closeRate": 20,
                "showUpRate": 60,
                "registrationRate": 40,
            }
        }
    )

    targetRevenue: float = Field(..., ge=0.0)
    ticketPrice: float = Field(..., ge=0.0)
    closeRate: Optional[float] = Field(default=None, ge=0.0)
    showUpRate: Optional[float] = Field(default=None, ge=0.0)
    registrationRate: Optional[float] = Field(default=None, ge=0.0)
    ctr: Optional[float] = Field(default=None, ge=0.0)
    costPerClick: Optional[float] = Field(default=None, ge=0.0)
    costPerLead: Optional[float] = Field(default=None, ge=0.0)
    attendanceRate: Optional[float] = Field(
        default=None,
        ge=0.0,
        description=(
            "Registrant-to-attendee rate for the registrations stage. "
            "When empty the show-up rate is applied to that stage as well."
        ),
    )


class CurrentFunnelSnapshot(BaseModel):
    """Current rates and volumes of a funnel, as fed to the projection engine."""
    closeRate: Optional[float] = None
    showUpRate: Optional[float] = None
    registrationRate: Optional[float] = None
    ctr: Optional[float] = None
    cpc: Optional[float] = None
    costPerLead: Optional[float] = None
    revenue: Optional[float] = None
    closes: Optional[float] = None
    salesCalls: Optional[float] = None
    attendees: Optional[float] = None
    registrations: Optional[float] = None
    adSpend: Optional[float] = None

    @classmethod
    def from_metrics(cls, metrics: FunnelMetrics) -> "CurrentFunnelSnapshot":
        return cls(
            closeRate=metrics.close_rate,
            showUpRate=metrics.show_up_rate,
            registrationRate=metrics.registration_rate,
            ctr=metrics.ctr,
            cpc=metrics.cpc,
            costPerLead=metrics.cost_per_lead,
            revenue=metrics.revenue_generated,
            closes=metrics.closes,
            salesCalls=metrics.sales_calls_completed,
            attendees=metrics.attendees,
            registrations=metrics.registrations,
            adSpend=metrics.ad_spend,
        )


class ProjectionAssumptions(BaseModel):
    """The rates actually used by a projection, recorded for audit."""
    closeRate: float
    showUpRate: float
    attendanceRate: float
    registrationRate: float
    ctr: float
    costPerClick: float
    costPerLead: float


class ProjectionResult(BaseModel):
    """Required volume at every funnel stage for a revenue target."""
    targetRevenue: float
    requiredCloses: int
    requiredSalesCalls: int
    requiredAttendees: int
    requiredRegistrations: int
    requiredLandingPageViews: int
    requiredClicks: int
    requiredImpressions: int
    requiredBudget: int
    projectedROAS: float
    assumptions: ProjectionAssumptions


class ScenarioGap(BaseModel):
    """Percentage gap between required and current volume, per stage."""
    revenue: float
    closes: float
    calls: float
    attendees: float
    registrations: float
    budget: float


class ScenarioComparison(BaseModel):
    """A named projection paired with its gap against current volumes."""
    name: str
    projection: ProjectionResult
    gapPercentage: ScenarioGap


class ProjectionRequest(BaseModel):
    """Body of POST /projections and POST /projections/scenarios."""
    inputs: ProjectionInputs
    funnelType: str
    currentMetrics: Optional[CurrentFunnelSnapshot] = None


class TimelineMilestone(BaseModel):
    month: int
    revenue: int


class GrowthTimeline(BaseModel):
    """Months of compounding growth needed to reach a revenue target."""
    months: int
    milestones: List[TimelineMilestone] = Field(default_factory=list)


class TimelineRequest(BaseModel):
    """Body of POST /projections/timeline."""
    currentRevenue: float = Field(..., ge=0.0)
    targetRevenue: float = Field(..., ge=0.0)
    monthlyGrowthRate: float = Field(default=20.0, description="Percent growth per month")


class FunnelProjectionRequest(BaseModel):
    """
    Optional body of POST /projections/funnels/{funnel_id}.

    targetRevenue defaults to the prospect's target and ticketPrice to the
    primary product's price. Rate fields override the stored snapshot.
    """
    targetRevenue: Optional[float] = Field(default=None, ge=0.0)
    ticketPrice: Optional[float] = Field(default=None, ge=0.0)
    closeRate: Optional[float] = Field(default=None, ge=0.0)
    showUpRate: Optional[float] = Field(default=None, ge=0.0)
    registrationRate: Optional[float] = Field(default=None, ge=0.0)
    ctr: Optional[float] = Field(default=None, ge=0.0)
    costPerClick: Optional[float] = Field(default=None, ge=0.0)
    costPerLead: Optional[float] = Field(default=None, ge=0.0)
    attendanceRate: Optional[float] = Field(default=None, ge=0.0)


class FunnelProjectionResponse(BaseModel):
    """Projection and scenarios of a stored funnel, with the inputs used."""
    funnelId: str
    funnelType: str
    inputs: ProjectionInputs
    currentMetrics: Optional[CurrentFunnelSnapshot] = None
    projection: ProjectionResult
    scenarios: List[ScenarioComparison] = Field(default_factory=list)


# =============================================================================
# Effective-Value Projection (sales intake questionnaire)
# =============================================================================


class SalesIntakeData(BaseModel):
    """
    Numeric answers of the sales intake questionnaire.

    l1/l2/l3 are the entry offer and the two upsell tiers. total_calls counts
    attendees of the call/event, total_leads counts registrations.
    """
    model_config = ConfigDict(extra="ignore")

    l1_price: float = Field(default=0.0, ge=0.0)
    l2_price: float = Field(default=0.0, ge=0.0)
    l3_price: float = Field(default=0.0, ge=0.0)
    monthly_ad_spend: float = Field(default=0.0, ge=0.0)
    total_leads: float = Field(default=0.0, ge=0.0)
    total_calls: float = Field(default=0.0, ge=0.0)
    total_sales: float = Field(default=0.0, ge=0.0)
    current_monthly_revenue: float = Field(default=0.0, ge=0.0)
    target_monthly_revenue: float = Field(default=0.0, ge=0.0)

    @field_validator(
        "l1_price", "l2_price", "l3_price", "monthly_ad_spend", "total_leads",
        "total_calls", "total_sales", "current_monthly_revenue",
        "target_monthly_revenue",
        mode="before")
    @classmethod
    def zero_nulls(cls, value):
        return _none_to_zero(value)


class EffectiveValueProjection(BaseModel):
    """
    Output of the upsell-weighted projection.

    attendanceRate and salesConversionRate are fractions (0.5 means 50%).
    Ad spend figures include the 20% buffer where noted.
    """
    attendanceRate: float
    salesConversionRate: float
    costPerLead: float
    costPerAttendee: float
    effectiveValue: float
    averageOrderValue: float
    salesNeededForTarget: int
    costPerAcquisition: float
    adSpendRequiredRaw: float
    adSpendRequiredWithBuffer: float
    scenarioLeadsNeeded: Optional[float] = None
    scenarioAdSpend: float
    isLowAttendance: bool


class SalesRequirement(BaseModel):
    """Common summary returned by every projection strategy."""
    strategy: str
    targetRevenue: float
    requiredSales: int
    requiredAdSpend: float


# =============================================================================
# AI Recommendations
# =============================================================================


class AIRecommendation(BaseModel):
    """One structured recommendation returned by the LLM collaborator."""
    model_config = ConfigDict(extra="ignore")

    category: RecommendationCategory
    title: str
    description: str
    expectedImpact: str = ""
    implementationTime: str = ""
    priority: Priority = Priority.MEDIUM
    actionItems: List[str] = Field(default_factory=list)


class AIRecommendationsResponse(BaseModel):
    """Parsed LLM reply."""
    recommendations: List[AIRecommendation] = Field(default_factory=list)
    summary: str
    keyInsights: List[str] = Field(default_factory=list)
