"""
Multi-Month Projector
=====================

Rolls the capacity and deficit analysis forward over a two-month horizon:
the month after ``as_of`` (target month) and the one after it (next month).

Per zone and month:
    projected_services = forecast * seasonal_factor(month) * zone_share
    required_workers   = ceil(projected_services / services_per_worker)
    current_gap        = max(0, required_workers - current_workers)
    rotation_impact    = ceil(current_workers * rotation_rate)
    final_need         = current_gap + rotation_impact

Rotation is charged even when the zone is fully staffed: attrition happens
regardless. Month urgency is escalated from the zones, never averaged.
"""

import calendar
import logging
import math
from collections.abc import Mapping, Sequence
from datetime import date, timedelta

from .config import PlanningConfig
from .deficit_calculator import DeficitCalculator, urgency_points
from .errors import InvalidInputError
from .models import (
    MonitoringImpact,
    MonthlyNeed,
    MultiMonthPlan,
    PlanKPIs,
    UrgencyLevel,
    ZoneNeed,
    ZoneSnapshot,
)
from .seasonal_adjuster import SeasonalAdjuster

logger = logging.getLogger(__name__)

# (max days to deadline, bonus points) checked in order
DEADLINE_BONUSES = ((10, 30.0), (20, 20.0), (30, 10.0))

LEVEL_THRESHOLDS = (
    (7, UrgencyLevel.CRITICO),
    (5, UrgencyLevel.URGENTE),
    (2, UrgencyLevel.ESTABLE),
)


def add_months(day: date, months: int) -> tuple[int, int]:
    """(year, month) ``months`` calendar months after ``day``."""
    index = day.year * 12 + (day.month - 1) + months
    return index // 12, index % 12 + 1


def days_remaining_in_month(day: date) -> int:
    days_in_month = calendar.monthrange(day.year, day.month)[1]
    return max(0, days_in_month - day.day)


def deadline_bonus(days_to_deadline: int) -> float:
    """Extra urgency points for a close recruitment deadline."""
    for max_days, bonus in DEADLINE_BONUSES:
        if days_to_deadline <= max_days:
            return bonus
    return 0.0


def classify_urgency(score: int) -> UrgencyLevel:
    """Map a 0-10 urgency score onto the four-level scale."""
    for threshold, level in LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return UrgencyLevel.SOBREABASTECIDO


def escalate_month(zone_needs: Sequence[ZoneNeed], total_need: int, config: PlanningConfig) -> UrgencyLevel:
    """Month-level urgency: the worst zone or the total need, whichever is higher."""
    if total_need <= 0:
        return UrgencyLevel.SOBREABASTECIDO
    levels = {need.urgency_level for need in zone_needs}
    if UrgencyLevel.CRITICO in levels or total_need > config.month_critical_need:
        return UrgencyLevel.CRITICO
    if UrgencyLevel.URGENTE in levels or total_need > config.month_urgent_need:
        return UrgencyLevel.URGENTE
    return UrgencyLevel.ESTABLE


class MultiMonthProjector:
    """Projects recruitment need per zone for the next two months.

    Drives DeficitCalculator (and through it CapacityModel) for every zone
    and folds in the time horizon and attrition. Tolerates partial upstream
    data: missing zone shares and rotation rates fall back to documented
    defaults with a warning, and an empty zone list yields empty months.

    Example:
        >>> projector = MultiMonthProjector(PlanningConfig())
        >>> plan = projector.project_two_months(
        ...     snapshots, rotation_rate=0.05, as_of=date(2025, 7, 18),
        ...     monthly_forecast=2400)
        >>> plan.target_month.urgency_level
    """

    def __init__(
        self,
        config: PlanningConfig | None = None,
        deficit_calculator: DeficitCalculator | None = None,
        seasonal: SeasonalAdjuster | None = None
    ) -> None:
        self.config = config or PlanningConfig()
        self.seasonal = seasonal or SeasonalAdjuster(self.config)
        self.deficit_calculator = deficit_calculator or DeficitCalculator(
            self.config, seasonal=self.seasonal
        )

    def _zone_share(self, zone_id: str, zone_count: int) -> float:
        share = self.config.zone_shares.get(zone_id)
        if share is None:
            logger.warning(
                "Zone %s has no forecast share configured, using an even split of 1/%d",
                zone_id, zone_count,
            )
            return 1.0 / zone_count
        return share

    def _rotation_rate(self, zone_id: str, rotation_rate: float | Mapping[str, float]) -> float:
        if isinstance(rotation_rate, Mapping):
            rate = rotation_rate.get(zone_id)
            if rate is None:
                logger.warning(
                    "Zone %s missing from rotation data, using default rate %.2f",
                    zone_id, self.config.default_rotation_rate,
                )
                rate = self.config.default_rotation_rate
        else:
            rate = rotation_rate
        if not 0.0 <= rate <= 1.0:
            raise InvalidInputError(
                f"rotation rate must be in [0, 1], got {rate}", zone_id, "rotation_rate"
            )
        return rate

    def zone_urgency(
        self,
        final_need: int,
        current_workers: int,
        demand_per_day: float,
        days_to_deadline: int
    ) -> int:
        """Urgency score (0-10) of a zone's monthly need.

        Reuses the deficit urgency points, adds the deadline bonus and brings
        the sum back onto the 1-10 scale. A zone with nothing to recruit
        scores 0; a zone with need but no workers scores 10.
        """
        if final_need <= 0:
            return 0
        if current_workers == 0:
            return 10
        points = urgency_points(final_need, demand_per_day, current_workers)
        points += deadline_bonus(days_to_deadline)
        return int(round(min(max(points / 10.0, 1.0), 10.0)))

    def _zone_need(
        self,
        snapshot: ZoneSnapshot,
        year: int,
        month: int,
        days_to_deadline: int,
        monthly_forecast: float,
        zone_count: int,
        rotation_rate: float | Mapping[str, float],
        seasonal_factor: float
    ) -> ZoneNeed:
        zone_id = snapshot.zone_id
        share = self._zone_share(zone_id, zone_count)
        rate = self._rotation_rate(zone_id, rotation_rate)

        per_worker = self.config.avg_services_per_worker_per_month
        projected = int(round(monthly_forecast * seasonal_factor * share))
        current = snapshot.metrics.active_workers
        required = math.ceil(projected / per_worker)
        current_gap = max(0, required - current)
        rotation_impact = math.ceil(current * rate)
        final_need = current_gap + rotation_impact

        days_in_month = calendar.monthrange(year, month)[1]
        score = self.zone_urgency(final_need, current, projected / days_in_month, days_to_deadline)

        deficit = self.deficit_calculator.compute_deficit(
            snapshot.zone,
            snapshot.metrics,
            snapshot.demand_per_day,
            snapshot.category_demands,
            month=month if self.config.apply_seasonality else None,
        )

        logger.debug(
            "%s %d-%02d: projected=%d required=%d gap=%d rotation=%d need=%d score=%d",
            zone_id, year, month, projected, required, current_gap,
            rotation_impact, final_need, score,
        )

        return ZoneNeed(
            zone_id=zone_id,
            zone_name=snapshot.zone.name,
            current_workers=current,
            projected_services=projected,
            avg_services_per_worker=per_worker,
            required_workers=required,
            current_gap=current_gap,
            rotation_impact=rotation_impact,
            final_need=final_need,
            urgency_score=score,
            urgency_level=classify_urgency(score),
            budget_required=final_need * self.config.cost_per_hire,
            deficit=deficit,
        )

    def project_month(
        self,
        zones: Sequence[ZoneSnapshot],
        rotation_rate: float | Mapping[str, float],
        as_of: date,
        months_ahead: int,
        days_to_deadline: int,
        monthly_forecast: float
    ) -> MonthlyNeed:
        """Recruitment need for the month ``months_ahead`` after ``as_of``."""
        year, month = add_months(as_of, months_ahead)
        factor = self.seasonal.factor(month) if self.config.apply_seasonality else 1.0

        zone_needs = [
            self._zone_need(
                snapshot, year, month, days_to_deadline, monthly_forecast,
                len(zones), rotation_rate, factor,
            )
            for snapshot in zones
        ]
        total_need = sum(need.final_need for need in zone_needs)
        budget = sum(need.budget_required for need in zone_needs)

        return MonthlyNeed(
            month=month,
            year=year,
            month_name=calendar.month_name[month],
            zone_needs=zone_needs,
            total_need=total_need,
            budget_estimate=budget,
            urgency_level=escalate_month(zone_needs, total_need, self.config),
            days_to_deadline=days_to_deadline,
            recommended_start_date=as_of + timedelta(days=days_to_deadline),
            seasonal_factor=factor,
        )

    def critical_actions(self, target: MonthlyNeed, following: MonthlyNeed) -> list[str]:
        """Ordered action lines for the planning team."""
        actions: list[str] = []

        critical = target.zones_at(UrgencyLevel.CRITICO)
        if critical:
            actions.append(f"CRITICAL: start recruiting immediately in {len(critical)} zones")
            actions.append("Zones: " + ", ".join(need.zone_name for need in critical))

        urgent = target.zones_at(UrgencyLevel.URGENTE)
        if urgent:
            actions.append(f"URGENT: plan recruitment in {len(urgent)} additional zones")

        if following.total_need > 0:
            actions.append(
                f"PLANNING: prepare {following.total_need} hires for {following.month_name}"
            )

        total_budget = target.budget_estimate + following.budget_estimate
        if total_budget > self.config.budget_approval_threshold:
            actions.append(f"BUDGET: approve {total_budget:,.2f} {self.config.currency}")

        return actions

    def project_two_months(
        self,
        zones: Sequence[ZoneSnapshot],
        rotation_rate: float | Mapping[str, float],
        as_of: date,
        monthly_forecast: float
    ) -> MultiMonthPlan:
        """Rolling two-month recruitment plan.

        Args:
            zones: Zone snapshots from the surrounding application.
            rotation_rate: Monthly attrition for every zone, or a mapping
                zone id -> rate (missing zones use the configured default).
            as_of: Planning date. Target month is the following month.
            monthly_forecast: National monthly service forecast.

        Returns:
            MultiMonthPlan with both months, the overall budget, action
            lines, monitoring impact and KPIs.

        Raises:
            InvalidInputError: If the forecast is negative or a rotation rate
                is outside [0, 1].
        """
        if monthly_forecast is None or not math.isfinite(monthly_forecast) or monthly_forecast < 0:
            raise InvalidInputError(
                f"monthly_forecast must be a non-negative number, got {monthly_forecast!r}",
                field="monthly_forecast",
            )
        if not zones:
            logger.warning("No zone data supplied for %s, returning empty months", as_of)

        days_to_deadline = days_remaining_in_month(as_of)
        target = self.project_month(
            zones, rotation_rate, as_of, 1, days_to_deadline, monthly_forecast
        )
        following = self.project_month(
            zones, rotation_rate, as_of, 2,
            days_to_deadline + self.config.next_month_deadline_offset_days,
            monthly_forecast,
        )

        overall_budget = target.budget_estimate + following.budget_estimate

        future_workforce = (
            sum(snapshot.metrics.active_workers for snapshot in zones)
            + target.total_need
            + following.total_need
        )
        required_monitors = math.ceil(future_workforce / self.config.workers_per_monitor)
        monitoring = MonitoringImpact(
            current_capacity=self.config.monitoring_capacity,
            required_capacity=required_monitors,
            needs_expansion=required_monitors > self.config.monitoring_capacity,
        )

        kpis = PlanKPIs(
            total_recruitment_need=target.total_need + following.total_need,
            critical_zones=len(target.zones_at(UrgencyLevel.CRITICO)),
            urgent_zones=len(target.zones_at(UrgencyLevel.URGENTE)),
            days_until_action=days_to_deadline,
            budget_required=overall_budget,
        )

        logger.info(
            "Two-month plan from %s: %s %d need=%d (%s), %s %d need=%d (%s), budget=%.2f",
            as_of,
            target.month_name, target.year, target.total_need, target.urgency_level.value,
            following.month_name, following.year, following.total_need,
            following.urgency_level.value, overall_budget,
        )

        return MultiMonthPlan(
            target_month=target,
            next_month=following,
            overall_budget=overall_budget,
            critical_actions=self.critical_actions(target, following),
            monitoring=monitoring,
            kpis=kpis,
        )
