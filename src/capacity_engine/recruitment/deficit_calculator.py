"""
Deficit Calculator
==================

Compares a zone's demand against its effective capacity, category by
category, and scores how urgent the resulting deficit is.

Data Flow:
    OperationalMetrics -> CapacityModel.capacities_for() -> CapacityResult[]
                                                              |
    demand_per_day (+ category split) ------------------------+
                                                              v
                                  compute_deficit() -> DeficitResult
"""

import logging
import math
from collections.abc import Mapping

from .capacity_model import CapacityModel
from .config import PlanningConfig, Zone
from .models import (
    CapacityResult,
    DeficitResult,
    HiringImpact,
    OperationalMetrics,
    RotationPlan,
)
from .seasonal_adjuster import SeasonalAdjuster

logger = logging.getLogger(__name__)

DEFICIT_WEIGHT = 40.0
CAPACITY_WEIGHT = 30.0
DEMAND_WEIGHT = 30.0
# Workers below this count get the full capacity-criticality weight
CRITICAL_WORKERS = 2
# Daily demand at which the demand-pressure factor saturates
DEMAND_SATURATION = 10.0

ACCEPTANCE_RECOMMENDATION = "Offer acceptance bonuses to bring the rejection rate down"
ROUTING_RECOMMENDATION = "Optimize routes to raise operational efficiency"
SUFFICIENT_RECOMMENDATION = "Capacity sufficient - keep the current number of workers"


def urgency_points(deficit_total: float, demand_per_day: float, active_workers: int) -> float:
    """Raw weighted urgency points before clamping.

    Three capped factors are summed:
        deficit:  min(deficit / demand * 40, 40) (negative for a surplus)
        capacity: 30 below two workers, else max(0, 30 - 5 * workers)
        demand:   min(demand / 10 * 30, 30)

    Callers guard ``demand_per_day == 0``; the deficit factor is 0 then.
    """
    if demand_per_day > 0:
        deficit_factor = min(deficit_total / demand_per_day * DEFICIT_WEIGHT, DEFICIT_WEIGHT)
    else:
        deficit_factor = 0.0

    if active_workers < CRITICAL_WORKERS:
        capacity_factor = CAPACITY_WEIGHT
    else:
        capacity_factor = max(0.0, CAPACITY_WEIGHT - active_workers * 5)

    demand_factor = min(demand_per_day / DEMAND_SATURATION * DEMAND_WEIGHT, DEMAND_WEIGHT)

    return deficit_factor + capacity_factor + demand_factor


def calculate_urgency(deficit_total: float, demand_per_day: float, active_workers: int) -> int:
    """Urgency score in [1, 10].

    The weighted points run 0-100 and are brought onto the ten-point scale.
    A zone with no demand baseline or no workers is maximally urgent (10).
    """
    if demand_per_day == 0 or active_workers == 0:
        return 10
    points = urgency_points(deficit_total, demand_per_day, active_workers)
    return int(round(min(max(points / 10.0, 1.0), 10.0)))


class DeficitCalculator:
    """Per-category and total deficit for a zone, with recommendations.

    Uses Dependency Injection: takes a CapacityModel so tests can swap the
    capacity rules. Never raises on degenerate arithmetic; every division is
    guarded.

    Example:
        >>> calculator = DeficitCalculator()
        >>> result = calculator.compute_deficit(zone, metrics, demand_per_day=25)
        >>> result.total_deficit, result.urgency_score
    """

    def __init__(
        self,
        config: PlanningConfig | None = None,
        capacity_model: CapacityModel | None = None,
        seasonal: SeasonalAdjuster | None = None
    ) -> None:
        self.config = config or PlanningConfig()
        self.capacity_model = capacity_model or CapacityModel(self.config)
        self.seasonal = seasonal or SeasonalAdjuster(self.config)

    def split_demand(
        self,
        demand_per_day: float,
        category_demands: Mapping[str, float] | None = None
    ) -> dict[str, float]:
        """Demand per category id.

        Category-specific demand wins when present and positive; otherwise
        the configured proportional split of ``demand_per_day`` is used.
        """
        category_demands = category_demands or {}
        demands: dict[str, float] = {}
        for category in self.config.categories:
            explicit = category_demands.get(category.category_id)
            if explicit is not None and explicit > 0:
                demands[category.category_id] = float(explicit)
            else:
                demands[category.category_id] = demand_per_day * category.demand_share
        return demands

    def compute_deficit(
        self,
        zone: Zone,
        metrics: OperationalMetrics,
        demand_per_day: float,
        category_demands: Mapping[str, float] | None = None,
        month: int | None = None
    ) -> DeficitResult:
        """Deficit of one zone.

        Args:
            zone: Reference zone.
            metrics: Workforce snapshot of the zone.
            demand_per_day: Total daily demand.
            category_demands: Optional explicit daily demand per category.
            month: When given, every demand figure is scaled by the month's
                seasonal factor.

        Returns:
            DeficitResult whose ``total_deficit`` is the sum of the signed
            category deficits.
        """
        demands = self.split_demand(demand_per_day, category_demands)
        if month is not None:
            factor = self.seasonal.factor(month)
            demands = {cid: d * factor for cid, d in demands.items()}
        total_demand = sum(demands.values())

        capacities = self.capacity_model.capacities_for(metrics)

        deficits: dict[str, int] = {}
        for category in self.config.categories:
            cid = category.category_id
            deficits[cid] = math.ceil(demands[cid] - capacities[cid].possible_jobs_per_day)

        total_deficit = sum(deficits.values())
        urgency = calculate_urgency(total_deficit, total_demand, metrics.active_workers)
        recommendations = self.generate_recommendations(deficits, capacities, metrics)

        logger.debug(
            "Deficit for zone %s: %s (total %d, urgency %d)",
            zone.zone_id, deficits, total_deficit, urgency,
        )

        return DeficitResult(
            zone_id=zone.zone_id,
            zone_name=zone.name,
            category_deficits=deficits,
            capacities=capacities,
            category_demands=demands,
            total_deficit=total_deficit,
            urgency_score=urgency,
            recommendations=recommendations,
        )

    def _workers_for(
        self,
        deficit: int,
        capacity: CapacityResult,
        metrics: OperationalMetrics
    ) -> int:
        """Additional workers needed to absorb ``deficit`` jobs per day."""
        if capacity.possible_jobs_per_day > 0:
            return math.ceil(deficit / capacity.possible_jobs_per_day * capacity.nominal_capacity)

        # No capacity to scale from: size against a default worker
        category = self.config.category(capacity.category_id)
        hours = metrics.available_hours_per_worker_per_day or self.config.default_available_hours
        jobs_per_worker = hours / category.avg_duration_hours
        return math.ceil(deficit / jobs_per_worker)

    def generate_recommendations(
        self,
        deficits: Mapping[str, int],
        capacities: Mapping[str, CapacityResult],
        metrics: OperationalMetrics
    ) -> list[str]:
        """Deterministic recommendation lines.

        One hiring line per category with a positive deficit, in category
        declaration order, followed by the two operational lines. A zone
        without any deficit gets a single "capacity sufficient" line.
        """
        recommendations: list[str] = []
        for category in self.config.categories:
            deficit = deficits[category.category_id]
            if deficit > 0:
                workers = self._workers_for(deficit, capacities[category.category_id], metrics)
                recommendations.append(f"Hire {workers} workers for {category.label} services")

        if recommendations:
            recommendations.append(ACCEPTANCE_RECOMMENDATION)
            recommendations.append(ROUTING_RECOMMENDATION)
        else:
            recommendations.append(SUFFICIENT_RECOMMENDATION)
        return recommendations

    def simulate_hiring_impact(
        self,
        zone: Zone,
        metrics: OperationalMetrics,
        demand_per_day: float,
        additional_workers: int,
        category_demands: Mapping[str, float] | None = None
    ) -> HiringImpact:
        """Compare the zone's deficit today with ``additional_workers`` more."""
        current = self.compute_deficit(zone, metrics, demand_per_day, category_demands)
        reinforced = OperationalMetrics(
            active_workers=metrics.active_workers + additional_workers,
            rejection_rate=metrics.rejection_rate,
            available_hours_per_worker_per_day=metrics.available_hours_per_worker_per_day,
            operational_efficiency=metrics.operational_efficiency,
            zone_id=metrics.zone_id,
        )
        improved = self.compute_deficit(zone, reinforced, demand_per_day, category_demands)
        return HiringImpact(
            additional_workers=additional_workers,
            current=current,
            improved=improved,
            deficit_improvement=current.total_deficit - improved.total_deficit,
            recommendations=improved.recommendations,
        )

    def plan_with_rotation(
        self,
        deficit: DeficitResult,
        metrics: OperationalMetrics,
        rotation_rate: float,
        workers_at_risk: int = 0
    ) -> RotationPlan:
        """Three-month hiring plan that also replaces expected attrition.

        Rotation loss is charged on active plus at-risk workers for three
        months, padded with a 10% safety buffer. The total is front-loaded
        according to the zone's urgency score:
            >= 8: 60% / 30% / 10%   (alta)
            >= 5: 40% / 40% / 20%   (media)
            else: even thirds       (baja)
        """
        headcount = metrics.active_workers + workers_at_risk
        monthly_loss = math.ceil(headcount * rotation_rate)
        rotation_deficit = monthly_loss * 3
        buffer = math.ceil(rotation_deficit * 0.1)
        total = max(0, deficit.total_deficit + rotation_deficit + buffer)

        if deficit.urgency_score >= 8:
            split, priority = ((6, 10), (3, 10), (1, 10)), "alta"
        elif deficit.urgency_score >= 5:
            split, priority = ((2, 5), (2, 5), (1, 5)), "media"
        else:
            split, priority = ((1, 3), (1, 3), (1, 3)), "baja"
        # integer ceiling of total * num / den
        month_1, month_2, month_3 = (-(-total * num // den) for num, den in split)

        recommendations = list(deficit.recommendations)
        if workers_at_risk > 0:
            recommendations.append(f"Run a retention program for {workers_at_risk} workers at risk")
            recommendations.append("Activate tenure bonuses and preferential job assignment")
        if rotation_deficit > 0:
            recommendations.append(
                f"Recruit {rotation_deficit} additional workers to offset projected rotation"
            )
            recommendations.append("Speed up onboarding to shorten time to first job")

        return RotationPlan(
            zone_id=deficit.zone_id,
            monthly_rotation_loss=monthly_loss,
            rotation_deficit=rotation_deficit,
            safety_buffer=buffer,
            total_need=total,
            month_1=month_1,
            month_2=month_2,
            month_3=month_3,
            priority=priority,
            recommendations=recommendations,
        )
