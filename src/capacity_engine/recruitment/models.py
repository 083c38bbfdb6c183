"""
Value Objects
=============

Inputs handed over by the surrounding application and the results produced
by each engine component. Inputs validate themselves on construction;
results are plain containers recomputed on every call.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

import numpy as np
import pandas as pd

from .config import Zone
from .errors import InvalidInputError


class UrgencyLevel(str, Enum):
    """Four-level recruitment urgency scale, most urgent first."""
    CRITICO = "critico"
    URGENTE = "urgente"
    ESTABLE = "estable"
    SOBREABASTECIDO = "sobreabastecido"


def _is_whole(value) -> bool:
    try:
        return float(value).is_integer()
    except (TypeError, ValueError):
        return False


def _check_finite(value: float, name: str, zone_id: str | None) -> None:
    if value is None or not math.isfinite(value):
        raise InvalidInputError(f"{name} must be a finite number, got {value!r}", zone_id, name)


@dataclass(frozen=True)
class OperationalMetrics:
    """Snapshot of a zone's workforce for one planning period.

    Attributes:
        active_workers: Number of active field workers (>= 0).
        rejection_rate: Fraction of offered jobs workers turn down (0-1).
        available_hours_per_worker_per_day: Hours a worker can be on duty.
        operational_efficiency: Fraction of available time that turns into
            service (0 excluded, 1 included).
        zone_id: Optional owner, only used to make errors actionable.
    """
    active_workers: int
    rejection_rate: float
    available_hours_per_worker_per_day: float
    operational_efficiency: float
    zone_id: str | None = None

    def __post_init__(self) -> None:
        zone_id = self.zone_id
        if isinstance(self.active_workers, bool) or not _is_whole(self.active_workers):
            raise InvalidInputError(
                f"active_workers must be a whole number, got {self.active_workers!r}",
                zone_id, "active_workers",
            )
        if self.active_workers < 0:
            raise InvalidInputError(
                f"active_workers cannot be negative, got {self.active_workers}",
                zone_id, "active_workers",
            )
        object.__setattr__(self, "active_workers", int(self.active_workers))

        _check_finite(self.rejection_rate, "rejection_rate", zone_id)
        if not 0.0 <= self.rejection_rate <= 1.0:
            raise InvalidInputError(
                f"rejection_rate must be in [0, 1], got {self.rejection_rate}",
                zone_id, "rejection_rate",
            )

        _check_finite(self.available_hours_per_worker_per_day, "available_hours_per_worker_per_day", zone_id)
        if self.available_hours_per_worker_per_day < 0:
            raise InvalidInputError(
                "available_hours_per_worker_per_day cannot be negative, "
                f"got {self.available_hours_per_worker_per_day}",
                zone_id, "available_hours_per_worker_per_day",
            )

        _check_finite(self.operational_efficiency, "operational_efficiency", zone_id)
        if not 0.0 < self.operational_efficiency <= 1.0:
            raise InvalidInputError(
                f"operational_efficiency must be in (0, 1], got {self.operational_efficiency}",
                zone_id, "operational_efficiency",
            )


@dataclass(frozen=True)
class ZoneSnapshot:
    """Everything the engine needs to know about one zone for a run.

    Attributes:
        zone: Reference zone.
        metrics: Workforce snapshot.
        demand_per_day: Total daily demand (services/day).
        category_demands: Optional daily demand per category id. Missing or
            non-positive entries fall back to the configured demand split.
    """
    zone: Zone
    metrics: OperationalMetrics
    demand_per_day: float
    category_demands: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _check_finite(self.demand_per_day, "demand_per_day", self.zone.zone_id)
        if self.demand_per_day < 0:
            raise InvalidInputError(
                f"demand_per_day cannot be negative, got {self.demand_per_day}",
                self.zone.zone_id, "demand_per_day",
            )
        for category_id, demand in self.category_demands.items():
            if demand is not None and demand < 0:
                raise InvalidInputError(
                    f"demand for category '{category_id}' cannot be negative, got {demand}",
                    self.zone.zone_id, "category_demands",
                )

    @property
    def zone_id(self) -> str:
        return self.zone.zone_id


@dataclass(frozen=True)
class CapacityResult:
    """Capacity of one zone for one service category."""
    category_id: str
    nominal_capacity: int
    effective_capacity: float
    possible_jobs_per_day: float


@dataclass
class DeficitResult:
    """Demand minus capacity for a zone.

    Attributes:
        zone_id: Zone identifier.
        zone_name: Zone display name.
        category_deficits: Signed, ceiling-rounded deficit per category id
            (negative means surplus), in category declaration order.
        capacities: CapacityResult per category id.
        category_demands: Demand used per category id.
        total_deficit: Sum of the category deficits.
        urgency_score: 1 (relaxed) to 10 (critical).
        recommendations: Ordered recommendation lines.
    """
    zone_id: str
    zone_name: str
    category_deficits: dict[str, int]
    capacities: dict[str, CapacityResult]
    category_demands: dict[str, float]
    total_deficit: int
    urgency_score: int
    recommendations: list[str]

    @property
    def has_deficit(self) -> bool:
        return any(d > 0 for d in self.category_deficits.values())


@dataclass
class HiringImpact:
    """Before/after comparison of adding workers to a zone."""
    additional_workers: int
    current: DeficitResult
    improved: DeficitResult
    deficit_improvement: int
    recommendations: list[str]


@dataclass
class RotationPlan:
    """Three-month recruitment plan that compensates for attrition.

    Attributes:
        zone_id: Zone identifier.
        monthly_rotation_loss: Workers expected to leave each month.
        rotation_deficit: Three months of rotation loss.
        safety_buffer: Extra hires on top of the rotation deficit.
        total_need: Deficit plus rotation plus buffer, never negative.
        month_1, month_2, month_3: Hires scheduled per month.
        priority: ``alta``, ``media`` or ``baja`` depending on urgency.
        recommendations: Deficit recommendations plus retention lines.
    """
    zone_id: str
    monthly_rotation_loss: int
    rotation_deficit: int
    safety_buffer: int
    total_need: int
    month_1: int
    month_2: int
    month_3: int
    priority: str
    recommendations: list[str]


@dataclass
class ZoneNeed:
    """Recruitment need of one zone for one month."""
    zone_id: str
    zone_name: str
    current_workers: int
    projected_services: int
    avg_services_per_worker: float
    required_workers: int
    current_gap: int
    rotation_impact: int
    final_need: int
    urgency_score: int
    urgency_level: UrgencyLevel
    budget_required: float
    deficit: DeficitResult | None = None


@dataclass
class MonthlyNeed:
    """Aggregated recruitment need for one calendar month."""
    month: int
    year: int
    month_name: str
    zone_needs: list[ZoneNeed]
    total_need: int
    budget_estimate: float
    urgency_level: UrgencyLevel
    days_to_deadline: int
    recommended_start_date: date
    seasonal_factor: float = 1.0

    def zones_at(self, level: UrgencyLevel) -> list[ZoneNeed]:
        return [z for z in self.zone_needs if z.urgency_level == level]


@dataclass
class MonitoringImpact:
    """Monitoring team sizing implied by the projected workforce."""
    current_capacity: int
    required_capacity: int
    needs_expansion: bool


@dataclass
class PlanKPIs:
    total_recruitment_need: int
    critical_zones: int
    urgent_zones: int
    days_until_action: int
    budget_required: float


@dataclass
class MultiMonthPlan:
    """Rolling two-month recruitment plan.

    Attributes:
        target_month: Need for the month after ``as_of``.
        next_month: Need for the month after the target month.
        overall_budget: Combined budget for both months.
        critical_actions: Ordered action lines.
        monitoring: Monitoring team impact.
        kpis: Consolidated indicators.
    """
    target_month: MonthlyNeed
    next_month: MonthlyNeed
    overall_budget: float
    critical_actions: list[str]
    monitoring: MonitoringImpact
    kpis: PlanKPIs

    def to_frame(self):
        """Flatten both months into a DataFrame, one row per zone and month."""
        rows = []
        for month in (self.target_month, self.next_month):
            for need in month.zone_needs:
                rows.append({
                    "year": month.year,
                    "month": month.month,
                    "zone_id": need.zone_id,
                    "zone_name": need.zone_name,
                    "current_workers": need.current_workers,
                    "projected_services": need.projected_services,
                    "required_workers": need.required_workers,
                    "current_gap": need.current_gap,
                    "rotation_impact": need.rotation_impact,
                    "final_need": need.final_need,
                    "urgency_score": need.urgency_score,
                    "urgency_level": need.urgency_level.value,
                    "budget_required": need.budget_required,
                })
        columns = [
            "year", "month", "zone_id", "zone_name", "current_workers",
            "projected_services", "required_workers", "current_gap",
            "rotation_impact", "final_need", "urgency_score", "urgency_level",
            "budget_required",
        ]
        return pd.DataFrame(rows, columns=columns)


@dataclass(frozen=True)
class RecruitmentScenario:
    """Expected values (or variances) for a recruitment campaign.

    Attributes:
        budget: Marketing budget.
        cpa: Cost per acquisition.
        conversion_rate: Fraction of acquisitions that become workers.
        retention_rate: Fraction of converted workers still active.
    """
    budget: float
    cpa: float
    conversion_rate: float
    retention_rate: float


@dataclass
class SimulationResult:
    """Distribution of recruitment outcomes from a Monte Carlo run."""
    mean_outcome: float
    confidence_interval_95: tuple[float, float]
    success_probability: float
    target: int
    trials: int
    outcomes: np.ndarray = field(repr=False, default_factory=lambda: np.empty(0, dtype=np.int64))


@dataclass(frozen=True)
class Channel:
    """Marketing channel with observed or assumed performance.

    Attributes:
        channel_id: Identifier.
        cpa: Cost per acquisition.
        conversion_rate: Fraction of acquisitions converting into workers.
        capacity: Maximum acquisitions the channel can deliver.
    """
    channel_id: str
    cpa: float
    conversion_rate: float
    capacity: float

    @classmethod
    def from_spend(
        cls,
        channel_id: str,
        spend: float,
        acquired: int,
        conversion_rate: float,
        capacity: float,
    ) -> "Channel":
        """Build a channel whose CPA is observed spend over acquisitions.

        A channel that acquired nobody gets a CPA of 0 and is later
        excluded by the optimizer.
        """
        cpa = spend / acquired if acquired > 0 else 0.0
        return cls(channel_id, cpa, conversion_rate, capacity)

    @property
    def efficiency(self) -> float:
        return self.conversion_rate / self.cpa if self.cpa > 0 else 0.0


@dataclass(frozen=True)
class ChannelAllocation:
    channel_id: str
    budget_allocated: float
    expected_recruits: float
