"""
Capacity Model
==============

Turns a raw worker count into the capacity a zone can actually deliver per
service category, discounted by rejection rate and operational efficiency.

    effective_capacity    = workers * (1 - rejection_rate) * efficiency
    possible_jobs_per_day = effective_capacity * hours / category_duration

Both figures are truncated (not rounded) to 2 decimals so capacity is never
over-promised.
"""

import logging
import math

from .config import PlanningConfig, ServiceCategory
from .models import CapacityResult, OperationalMetrics

logger = logging.getLogger(__name__)


def floor2(value: float) -> float:
    """Truncate to 2 decimals toward negative infinity.

    The scaled value is rounded to 6 places first so binary artifacts such
    as 2294.9999999999995 (for 22.95) do not lose a cent.
    """
    return math.floor(round(value * 100, 6)) / 100


class CapacityModel:
    """Computes effective capacity per zone and service category.

    Stateless: every call is a pure function of its inputs.

    Example:
        >>> model = CapacityModel()
        >>> metrics = OperationalMetrics(30, 0.1, 16, 0.85)
        >>> model.effective_capacity(metrics, model.config.category("local"))
        CapacityResult(category_id='local', nominal_capacity=30, effective_capacity=22.95, possible_jobs_per_day=61.2)
    """

    def __init__(self, config: PlanningConfig | None = None) -> None:
        self.config = config or PlanningConfig()

    def effective_capacity(
        self,
        metrics: OperationalMetrics,
        category: ServiceCategory
    ) -> CapacityResult:
        """Capacity of one zone for one service category.

        Args:
            metrics: Validated workforce snapshot of the zone.
            category: Service category (duration is always > 0).

        Returns:
            CapacityResult with nominal, effective and per-day job capacity.
            All three are exactly 0 when the zone has no active workers.
        """
        if metrics.active_workers == 0:
            return CapacityResult(
                category_id=category.category_id,
                nominal_capacity=0,
                effective_capacity=0.0,
                possible_jobs_per_day=0.0,
            )

        effective = (
            metrics.active_workers
            * (1 - metrics.rejection_rate)
            * metrics.operational_efficiency
        )
        jobs_per_worker = metrics.available_hours_per_worker_per_day / category.avg_duration_hours
        possible_jobs = effective * jobs_per_worker

        return CapacityResult(
            category_id=category.category_id,
            nominal_capacity=metrics.active_workers,
            effective_capacity=floor2(effective),
            possible_jobs_per_day=floor2(possible_jobs),
        )

    def capacities_for(self, metrics: OperationalMetrics) -> dict[str, CapacityResult]:
        """CapacityResult for every configured category, in declaration order."""
        capacities = {
            category.category_id: self.effective_capacity(metrics, category)
            for category in self.config.categories
        }
        logger.debug(
            "Capacity for zone %s: %s",
            metrics.zone_id,
            {cid: c.possible_jobs_per_day for cid, c in capacities.items()},
        )
        return capacities

    def monthly_capacity(
        self,
        metrics: OperationalMetrics,
        category: ServiceCategory,
        working_days: int = 30
    ) -> float:
        """Jobs the zone can complete over ``working_days`` days."""
        daily = self.effective_capacity(metrics, category).possible_jobs_per_day
        return floor2(daily * working_days)
