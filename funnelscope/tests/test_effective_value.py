"""
Effective-Value Projection and Projection Strategy Test Module

Tests the upsell-weighted sales-intake projection and the shared strategy
interface over both projection paths.
"""

import pytest

from funnelscope.models.enums import FunnelType
from funnelscope.models.schemas import ProjectionInputs, SalesIntakeData
from funnelscope.services.effective_value import (
    calculate_effective_value,
    calculate_effective_value_projection,
)
from funnelscope.services.projection_strategies import (
    BenchmarkProjectionStrategy,
    EffectiveValueProjectionStrategy,
    ProjectionStrategy,
)


@pytest.fixture
def intake() -> SalesIntakeData:
    """500 leads, 100 attend (20%), 10 buy (10% of attendees)."""
    return SalesIntakeData(
        l1_price=1000,
        l2_price=5000,
        l3_price=0,
        monthly_ad_spend=50000,
        total_leads=500,
        total_calls=100,
        total_sales=10,
        current_monthly_revenue=20000,
        target_monthly_revenue=150000,
    )


class TestEffectiveValue:

    def test_upsell_example(self):
        assert calculate_effective_value(1000, 5000, 0) == pytest.approx(1500)

    def test_all_tiers(self):
        assert calculate_effective_value(1000, 5000, 100000) == pytest.approx(2500)

    def test_entry_offer_only(self):
        assert calculate_effective_value(2000) == 2000


class TestEffectiveValueProjection:

    def test_rates_and_costs(self, intake):
        result = calculate_effective_value_projection(intake)

        assert result.attendanceRate == pytest.approx(0.2)
        assert result.salesConversionRate == pytest.approx(0.1)
        assert result.costPerLead == pytest.approx(100)
        assert result.costPerAttendee == pytest.approx(500)
        assert result.effectiveValue == pytest.approx(1500)
        assert result.averageOrderValue == pytest.approx(2000)

    def test_sales_and_ad_spend(self, intake):
        result = calculate_effective_value_projection(intake)

        assert result.salesNeededForTarget == 100
        assert result.costPerAcquisition == pytest.approx(5000)
        assert result.adSpendRequiredRaw == pytest.approx(500000)
        assert result.adSpendRequiredWithBuffer == pytest.approx(600000)

    def test_low_attendance_scenario(self, intake):
        result = calculate_effective_value_projection(intake)

        assert result.isLowAttendance is True
        assert result.scenarioLeadsNeeded == pytest.approx(2000)
        assert result.scenarioAdSpend == pytest.approx(240000)

    def test_healthy_attendance_skips_scenario(self, intake):
        data = intake.model_copy(update={"total_calls": 300, "total_sales": 30})

        result = calculate_effective_value_projection(data)

        assert result.isLowAttendance is False
        assert result.scenarioLeadsNeeded is None
        assert result.scenarioAdSpend == result.adSpendRequiredWithBuffer

    def test_estimated_cpa_without_sales_history(self, intake):
        data = intake.model_copy(update={"total_sales": 0, "current_monthly_revenue": 0})

        result = calculate_effective_value_projection(data)

        # No conversion history: 5% lead-to-sale assumed
        assert result.costPerAcquisition == pytest.approx(100 / 0.05)
        assert result.adSpendRequiredWithBuffer == pytest.approx(240000)
        assert result.averageOrderValue == pytest.approx(1500)
        # Scenario assumes 10% sales conversion
        assert result.scenarioLeadsNeeded == pytest.approx(2000)

    def test_no_prices(self, intake):
        data = intake.model_copy(update={"l1_price": 0, "l2_price": 0, "l3_price": 0})

        result = calculate_effective_value_projection(data)

        assert result.effectiveValue == 0
        assert result.salesNeededForTarget == 0
        assert result.adSpendRequiredWithBuffer == 0
        assert result.scenarioLeadsNeeded is None
        assert result.scenarioAdSpend == 0

    def test_empty_intake(self):
        result = calculate_effective_value_projection(SalesIntakeData())

        assert result.attendanceRate == 0
        assert result.costPerLead == 0
        assert result.salesNeededForTarget == 0
        assert result.isLowAttendance is True
        assert result.scenarioAdSpend == 0

    def test_zero_cost_per_lead_scenario(self, intake):
        data = intake.model_copy(update={"monthly_ad_spend": 0})

        result = calculate_effective_value_projection(data)

        assert result.scenarioLeadsNeeded == pytest.approx(2000)
        assert result.scenarioAdSpend == 0


class TestProjectionStrategies:
    """Both algorithms behind one interface, not merged."""

    def test_interface_is_abstract(self):
        with pytest.raises(TypeError):
            ProjectionStrategy()

    def test_benchmark_strategy(self):
        strategy = BenchmarkProjectionStrategy(
            ProjectionInputs(
                targetRevenue=0,
                ticketPrice=50000,
                closeRate=20,
                showUpRate=60,
                registrationRate=40,
            ),
            FunnelType.LIVE_WEBINAR,
        )

        requirement = strategy.project(1000000)

        assert isinstance(strategy, ProjectionStrategy)
        assert requirement.strategy == "benchmark"
        assert requirement.targetRevenue == 1000000
        assert requirement.requiredSales == 20
        assert requirement.requiredAdSpend == pytest.approx(698010)

    def test_effective_value_strategy(self, intake):
        strategy = EffectiveValueProjectionStrategy(intake)

        requirement = strategy.project(150000)

        assert isinstance(strategy, ProjectionStrategy)
        assert requirement.strategy == "effective_value"
        assert requirement.requiredSales == 100
        assert requirement.requiredAdSpend == pytest.approx(600000)

    def test_strategies_disagree(self, intake):
        benchmark = BenchmarkProjectionStrategy(
            ProjectionInputs(targetRevenue=0, ticketPrice=1000),
            FunnelType.WORKSHOP,
        )
        effective = EffectiveValueProjectionStrategy(intake)

        # Same entry price, but upsells lower the effective-value sales count
        assert benchmark.project(150000).requiredSales == 150
        assert effective.project(150000).requiredSales == 100
