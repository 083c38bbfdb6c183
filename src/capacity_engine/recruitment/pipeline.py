"""
Pipeline Module (The Manager)
=============================

Orchestrates the full workflow: Capacity -> Deficit -> Two-month projection
-> {Monte Carlo, Budget allocation}. Connects every engine component into a
single planning run.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date

import pandas as pd

from .budget_optimizer import BudgetOptimizer
from .capacity_model import CapacityModel
from .config import PlanningConfig
from .deficit_calculator import DeficitCalculator
from .models import (
    Channel,
    ChannelAllocation,
    DeficitResult,
    MultiMonthPlan,
    RecruitmentScenario,
    SimulationResult,
    ZoneSnapshot,
)
from .monte_carlo import MonteCarloSimulator
from .multi_month_projector import MultiMonthProjector

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Complete result from running the pipeline.

    Attributes:
        as_of: Planning date.
        deficits: Current deficit per zone, in input order.
        plan: Two-month recruitment plan.
        simulation: Monte Carlo outcome, when a scenario was supplied.
        allocations: Channel allocation, when channels were supplied.
    """
    as_of: date
    deficits: list[DeficitResult]
    plan: MultiMonthPlan
    simulation: SimulationResult | None = None
    allocations: list[ChannelAllocation] | None = None

    @property
    def total_deficit(self) -> int:
        return sum(d.total_deficit for d in self.deficits)

    def deficit_frame(self) -> pd.DataFrame:
        """One row per zone with per-category deficits and urgency."""
        rows = []
        for deficit in self.deficits:
            row = {"zone_id": deficit.zone_id, "zone_name": deficit.zone_name}
            for category_id, value in deficit.category_deficits.items():
                row[f"deficit_{category_id}"] = value
            row["total_deficit"] = deficit.total_deficit
            row["urgency_score"] = deficit.urgency_score
            rows.append(row)
        return pd.DataFrame(rows)


class CapacityPlanningPipeline:
    """Runs every engine stage for one planning invocation.

    Uses Dependency Injection: any component can be passed in pre-configured;
    missing ones are built from ``config`` so all stages share the same
    policy constants.

    Workflow (run method):
        1. DeficitCalculator.compute_deficit() per zone snapshot
        2. MultiMonthProjector.project_two_months() over all zones
        3. MonteCarloSimulator.simulate() if a scenario is supplied
        4. BudgetOptimizer.optimize_allocation() if channels are supplied
    """

    def __init__(
        self,
        config: PlanningConfig | None = None,
        capacity_model: CapacityModel | None = None,
        deficit_calculator: DeficitCalculator | None = None,
        projector: MultiMonthProjector | None = None,
        simulator: MonteCarloSimulator | None = None,
        optimizer: BudgetOptimizer | None = None
    ) -> None:
        self.config = config or PlanningConfig()
        self.capacity_model = capacity_model or CapacityModel(self.config)
        self.deficit_calculator = deficit_calculator or DeficitCalculator(
            self.config, self.capacity_model
        )
        self.projector = projector or MultiMonthProjector(self.config, self.deficit_calculator)
        self.simulator = simulator or MonteCarloSimulator()
        self.optimizer = optimizer or BudgetOptimizer()

    def run(
        self,
        snapshots: Sequence[ZoneSnapshot],
        rotation_rate: float | Mapping[str, float],
        as_of: date,
        monthly_forecast: float,
        scenario: RecruitmentScenario | None = None,
        variance: RecruitmentScenario | None = None,
        channels: Sequence[Channel] | None = None,
        marketing_budget: float | None = None,
        trials: int = 1000
    ) -> PipelineResult:
        """Execute the full capacity-planning workflow.

        Args:
            snapshots: Zone snapshots from the surrounding application.
            rotation_rate: Monthly attrition, global or per zone id.
            as_of: Planning date.
            monthly_forecast: National monthly service forecast.
            scenario: Expected campaign values for the Monte Carlo stage.
            variance: Variances for the campaign values (zero if omitted).
            channels: Marketing channels for the allocation stage.
            marketing_budget: Budget to allocate. Defaults to the scenario
                budget, then to the plan's overall budget.
            trials: Monte Carlo trial count.

        Returns:
            PipelineResult with deficits, plan and optional stages.
        """
        # Step 1: Current deficit per zone
        deficits = [
            self.deficit_calculator.compute_deficit(
                snapshot.zone, snapshot.metrics, snapshot.demand_per_day, snapshot.category_demands
            )
            for snapshot in snapshots
        ]

        # Step 2: Two-month projection
        plan = self.projector.project_two_months(snapshots, rotation_rate, as_of, monthly_forecast)

        # Step 3: Recruitment outcome distribution
        simulation = None
        if scenario is not None:
            variance = variance or RecruitmentScenario(0.0, 0.0, 0.0, 0.0)
            simulation = self.simulator.simulate(
                scenario, variance, trials=trials, target=plan.kpis.total_recruitment_need
            )

        # Step 4: Channel allocation
        allocations = None
        if channels:
            if marketing_budget is None:
                marketing_budget = scenario.budget if scenario is not None else plan.overall_budget
            allocations = self.optimizer.optimize_allocation(marketing_budget, channels)

        result = PipelineResult(
            as_of=as_of,
            deficits=deficits,
            plan=plan,
            simulation=simulation,
            allocations=allocations,
        )
        logger.info(
            "Planning run %s: %d zones, total deficit %d, two-month need %d",
            as_of, len(deficits), result.total_deficit, plan.kpis.total_recruitment_need,
        )
        return result
