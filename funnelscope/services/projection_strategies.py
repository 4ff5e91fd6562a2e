"""
Projection Strategies

Two independent answers to "what does it take to reach this revenue?":

- BenchmarkProjectionStrategy: the stage-by-stage projection engine, driven by
  conversion-rate assumptions and funnel benchmarks
- EffectiveValueProjectionStrategy: the sales-intake calculation, driven by
  the upsell-weighted customer value and historical acquisition cost

Both sit behind ProjectionStrategy so callers can compare them side by side.
The algorithms are not merged; each strategy delegates to its own module.
"""

from abc import ABC, abstractmethod
from typing import Optional, Union

from funnelscope.models.enums import FunnelType
from funnelscope.models.schemas import (
    CurrentFunnelSnapshot,
    ProjectionInputs,
    SalesIntakeData,
    SalesRequirement,
)
from funnelscope.services.benchmarks import DEFAULT_BENCHMARKS, BenchmarkTable
from funnelscope.services.effective_value import calculate_effective_value_projection
from funnelscope.services.projections import calculate_projections


class ProjectionStrategy(ABC):
    """Computes the sales and ad spend a revenue target requires."""

    name: str = ""

    @abstractmethod
    def project(self, target_revenue: float) -> SalesRequirement:
        raise NotImplementedError


class BenchmarkProjectionStrategy(ProjectionStrategy):
    """Stage chain projection; requiredAdSpend is the click budget."""

    name = "benchmark"

    def __init__(
        self,
        inputs: ProjectionInputs,
        funnel_type: Union[FunnelType, str, None],
        current_metrics: Optional[CurrentFunnelSnapshot] = None,
        benchmarks: BenchmarkTable = DEFAULT_BENCHMARKS,
    ):
        self.inputs = inputs
        self.funnel_type = funnel_type
        self.current_metrics = current_metrics
        self.benchmarks = benchmarks

    def project(self, target_revenue: float) -> SalesRequirement:
        projection = calculate_projections(
            self.inputs.model_copy(update={"targetRevenue": target_revenue}),
            self.funnel_type,
            self.current_metrics,
            self.benchmarks,
        )
        return SalesRequirement(
            strategy=self.name,
            targetRevenue=target_revenue,
            requiredSales=projection.requiredCloses,
            requiredAdSpend=float(projection.requiredBudget),
        )


class EffectiveValueProjectionStrategy(ProjectionStrategy):
    """Upsell-weighted projection; requiredAdSpend includes the 20% buffer."""

    name = "effective_value"

    def __init__(self, intake: SalesIntakeData):
        self.intake = intake

    def project(self, target_revenue: float) -> SalesRequirement:
        projection = calculate_effective_value_projection(
            self.intake.model_copy(update={"target_monthly_revenue": target_revenue})
        )
        return SalesRequirement(
            strategy=self.name,
            targetRevenue=target_revenue,
            requiredSales=projection.salesNeededForTarget,
            requiredAdSpend=projection.adSpendRequiredWithBuffer,
        )
