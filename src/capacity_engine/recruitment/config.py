"""
Planning Configuration
======================

Every policy constant used by the engine lives in ``PlanningConfig`` and is
passed into each component at construction time. Reference data (service
categories and zones) is declared here as well, keyed by stable identifiers.
"""

import math
from dataclasses import dataclass, field, replace

from .errors import InvalidInputError


@dataclass(frozen=True)
class ServiceCategory:
    """A class of job with its own duration and share of daily demand.

    Attributes:
        category_id: Stable identifier (e.g. "local").
        label: Human readable name used in recommendations.
        avg_duration_hours: Average job duration in hours. Must be > 0.
        demand_share: Fraction of a zone's daily demand falling in this
            category when no category-specific demand is available.
    """
    category_id: str
    label: str
    avg_duration_hours: float
    demand_share: float

    def __post_init__(self) -> None:
        if not self.avg_duration_hours or self.avg_duration_hours <= 0:
            raise InvalidInputError(
                f"Category '{self.category_id}' must have a positive duration, "
                f"got {self.avg_duration_hours}",
                field="avg_duration_hours",
            )
        if not 0.0 <= self.demand_share <= 1.0:
            raise InvalidInputError(
                f"Category '{self.category_id}' demand_share must be in [0, 1], "
                f"got {self.demand_share}",
                field="demand_share",
            )


@dataclass(frozen=True)
class Zone:
    """A geographic operating region.

    Attributes:
        zone_id: Stable identifier used for every lookup.
        name: Display name.
        regions: States or municipalities included in the zone.
    """
    zone_id: str
    name: str
    regions: tuple[str, ...] = ()


DEFAULT_CATEGORIES: tuple[ServiceCategory, ...] = (
    ServiceCategory("local", "local", avg_duration_hours=6.0, demand_share=0.60),
    ServiceCategory("long_haul", "long-haul", avg_duration_hours=14.0, demand_share=0.30),
    ServiceCategory("express", "express", avg_duration_hours=4.0, demand_share=0.10),
)

DEFAULT_ZONES: tuple[Zone, ...] = (
    Zone("centro", "Centro de México", ("Ciudad de México", "Estado de México", "Hidalgo", "Morelos")),
    Zone("bajio", "Bajío", ("Guanajuato", "Querétaro", "Aguascalientes")),
    Zone("occidente", "Occidente", ("Jalisco", "Colima", "Nayarit")),
    Zone("norte", "Norte", ("Nuevo León", "Coahuila", "Chihuahua", "Tamaulipas")),
    Zone("pacifico", "Pacífico", ("Sinaloa", "Sonora", "Baja California")),
    Zone("golfo", "Golfo", ("Veracruz", "Tabasco")),
    Zone("sureste", "Sureste", ("Yucatán", "Quintana Roo", "Campeche", "Chiapas")),
    Zone("centro_occidente", "Centro-Occidente", ("Michoacán", "San Luis Potosí", "Zacatecas")),
)

DEFAULT_ZONE_SHARES: dict[str, float] = {
    "centro": 0.35,
    "bajio": 0.14,
    "occidente": 0.14,
    "norte": 0.10,
    "pacifico": 0.09,
    "golfo": 0.07,
    "sureste": 0.06,
    "centro_occidente": 0.05,
}

# January .. December
DEFAULT_SEASONAL_FACTORS: tuple[float, ...] = (
    0.90, 0.95, 1.05, 1.10, 1.00, 0.95,
    0.85, 0.90, 1.00, 1.10, 1.15, 0.95,
)


@dataclass(frozen=True)
class PlanningConfig:
    """Policy constants for one planning run.

    Attributes:
        categories: Service categories in declaration order. This order is
            also the order of per-category recommendations.
        zones: Reference zones, keyed by ``zone_id``.
        zone_shares: Share of the national monthly forecast per zone id.
            Must sum to 1.0 when non-empty.
        default_rejection_rate: Boundary default for missing rejection data.
        default_available_hours: Boundary default for worker hours per day.
        default_operational_efficiency: Boundary default for efficiency.
        avg_services_per_worker_per_month: Services one worker covers in a
            month. Used to turn projected services into required workers.
        cost_per_hire: Recruitment cost charged per hired worker.
        default_rotation_rate: Monthly attrition used for zones missing from
            a rotation dataset.
        month_critical_need: Total monthly need above which the month is
            escalated to ``critico``.
        month_urgent_need: Total monthly need above which the month is
            escalated to ``urgente``.
        next_month_deadline_offset_days: Days added to the target month's
            deadline to obtain the next month's deadline.
        budget_approval_threshold: Combined budget above which a budget
            approval action is emitted.
        currency: Currency code used in generated text.
        seasonal_factors: Twelve demand multipliers, January first.
        apply_seasonality: Scale projected monthly services by the month's
            seasonal factor.
        workers_per_monitor: Field workers one monitoring agent can follow.
        monitoring_capacity: Current monitoring team size.
    """
    categories: tuple[ServiceCategory, ...] = DEFAULT_CATEGORIES
    zones: tuple[Zone, ...] = DEFAULT_ZONES
    zone_shares: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_ZONE_SHARES))
    default_rejection_rate: float = 0.25
    default_available_hours: float = 16.0
    default_operational_efficiency: float = 0.85
    avg_services_per_worker_per_month: float = 8.0
    cost_per_hire: float = 8500.0
    default_rotation_rate: float = 0.05
    month_critical_need: int = 50
    month_urgent_need: int = 20
    next_month_deadline_offset_days: int = 30
    budget_approval_threshold: float = 100000.0
    currency: str = "MXN"
    seasonal_factors: tuple[float, ...] = DEFAULT_SEASONAL_FACTORS
    apply_seasonality: bool = True
    workers_per_monitor: int = 10
    monitoring_capacity: int = 50

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check table invariants.

        Raises:
            InvalidInputError: If any policy table is inconsistent.
        """
        if not self.categories:
            raise InvalidInputError("At least one service category is required", field="categories")

        ids = [c.category_id for c in self.categories]
        if len(set(ids)) != len(ids):
            raise InvalidInputError(f"Duplicate category ids: {ids}", field="categories")

        category_total = sum(c.demand_share for c in self.categories)
        if not math.isclose(category_total, 1.0, abs_tol=1e-6):
            raise InvalidInputError(
                f"Category demand shares must sum to 1.0, got {category_total:.6f}",
                field="categories",
            )

        if self.zone_shares:
            if any(share < 0 for share in self.zone_shares.values()):
                raise InvalidInputError("Zone shares must be non-negative", field="zone_shares")
            share_total = sum(self.zone_shares.values())
            if not math.isclose(share_total, 1.0, abs_tol=1e-6):
                raise InvalidInputError(
                    f"Zone shares must sum to 1.0, got {share_total:.6f}",
                    field="zone_shares",
                )

        if len(self.seasonal_factors) != 12 or any(f <= 0 for f in self.seasonal_factors):
            raise InvalidInputError(
                "Seasonal table must hold 12 positive factors", field="seasonal_factors"
            )

        if self.avg_services_per_worker_per_month <= 0:
            raise InvalidInputError(
                "avg_services_per_worker_per_month must be positive",
                field="avg_services_per_worker_per_month",
            )
        if self.cost_per_hire < 0:
            raise InvalidInputError("cost_per_hire must be non-negative", field="cost_per_hire")
        if not 0.0 <= self.default_rejection_rate <= 1.0:
            raise InvalidInputError(
                "default_rejection_rate must be in [0, 1]", field="default_rejection_rate"
            )
        if not self.default_available_hours > 0:
            raise InvalidInputError(
                "default_available_hours must be positive", field="default_available_hours"
            )
        if not 0.0 < self.default_operational_efficiency <= 1.0:
            raise InvalidInputError(
                "default_operational_efficiency must be in (0, 1]",
                field="default_operational_efficiency",
            )
        if not 0.0 <= self.default_rotation_rate <= 1.0:
            raise InvalidInputError(
                "default_rotation_rate must be in [0, 1]", field="default_rotation_rate"
            )
        if self.workers_per_monitor <= 0:
            raise InvalidInputError("workers_per_monitor must be positive", field="workers_per_monitor")

    def with_overrides(self, **changes) -> "PlanningConfig":
        """Return a validated copy with some constants replaced."""
        return replace(self, **changes)

    def category(self, category_id: str) -> ServiceCategory:
        for category in self.categories:
            if category.category_id == category_id:
                return category
        raise InvalidInputError(f"Unknown service category '{category_id}'", field="category_id")

    def zone(self, zone_id: str) -> Zone:
        for zone in self.zones:
            if zone.zone_id == zone_id:
                return zone
        raise InvalidInputError(f"Unknown zone '{zone_id}'", zone_id=zone_id, field="zone_id")
