"""
Recruitment Capacity Planning
=============================

Core components for field-workforce capacity planning:

1. CapacityModel - Effective capacity per zone and service category
2. DeficitCalculator - Demand minus capacity, urgency and recommendations
3. SeasonalAdjuster - Monthly demand multipliers
4. MultiMonthProjector - Rolling two-month recruitment need and budget
5. MonteCarloSimulator - Distribution of recruitment outcomes
6. BudgetOptimizer - Greedy marketing budget allocation
7. CapacityPlanningPipeline - Orchestrates the full workflow

Data Flow:
    zone records -> data_loader -> ZoneSnapshot[]
                                       |
                                       v
    CapacityModel -> DeficitCalculator.compute_deficit() -> DeficitResult
                                       |
                                       v
    MultiMonthProjector.project_two_months() -> MultiMonthPlan
                                       |
                     +-----------------+-----------------+
                     v                                   v
    MonteCarloSimulator.simulate()       BudgetOptimizer.optimize_allocation()
"""

from .budget_optimizer import BudgetOptimizer
from .capacity_model import CapacityModel
from .config import PlanningConfig, ServiceCategory, Zone
from .deficit_calculator import DeficitCalculator, calculate_urgency
from .errors import InvalidInputError, SimulationCancelled
from .models import (
    CapacityResult,
    Channel,
    ChannelAllocation,
    DeficitResult,
    HiringImpact,
    MonitoringImpact,
    MonthlyNeed,
    MultiMonthPlan,
    OperationalMetrics,
    PlanKPIs,
    RecruitmentScenario,
    RotationPlan,
    SimulationResult,
    UrgencyLevel,
    ZoneNeed,
    ZoneSnapshot,
)
from .monte_carlo import MonteCarloSimulator
from .multi_month_projector import MultiMonthProjector
from .pipeline import CapacityPlanningPipeline, PipelineResult
from .seasonal_adjuster import SeasonalAdjuster

__all__ = [
    "BudgetOptimizer",
    "CapacityModel",
    "CapacityPlanningPipeline",
    "CapacityResult",
    "Channel",
    "ChannelAllocation",
    "DeficitCalculator",
    "DeficitResult",
    "HiringImpact",
    "InvalidInputError",
    "MonitoringImpact",
    "MonteCarloSimulator",
    "MonthlyNeed",
    "MultiMonthPlan",
    "MultiMonthProjector",
    "OperationalMetrics",
    "PipelineResult",
    "PlanKPIs",
    "PlanningConfig",
    "RecruitmentScenario",
    "RotationPlan",
    "SeasonalAdjuster",
    "ServiceCategory",
    "SimulationCancelled",
    "SimulationResult",
    "UrgencyLevel",
    "Zone",
    "ZoneNeed",
    "ZoneSnapshot",
    "calculate_urgency",
]
