"""
Data Loader (Boundary)
======================

Converts the record sets handed over by the surrounding application into the
engine's fixed-schema inputs. Missing or NaN values are filled with the
configured defaults here, so the core components never see partial records.

Expected frames:
    zone metrics:  zone_id, active_workers, rejection_rate, available_hours,
                   operational_efficiency, demand_per_day, demand_<category>
    rotation:      zone_id, rotation_rate
    completed jobs: zone_id, completed_at
"""

import logging
from datetime import date, timedelta

import pandas as pd

from .config import PlanningConfig, Zone
from .errors import InvalidInputError
from .models import OperationalMetrics, ZoneSnapshot

logger = logging.getLogger(__name__)


def _value(row: pd.Series, column: str, default: float) -> float:
    value = row.get(column)
    if value is None or pd.isna(value):
        return default
    return float(value)


def metrics_from_frame(
    df: pd.DataFrame,
    config: PlanningConfig | None = None
) -> dict[str, OperationalMetrics]:
    """Build OperationalMetrics per zone id from a metrics frame.

    Args:
        df: One row per zone. Only ``zone_id`` is mandatory; every other
            column falls back to the config defaults (0 active workers).
        config: Source of boundary defaults.

    Returns:
        Mapping zone id -> OperationalMetrics, in frame order.
    """
    config = config or PlanningConfig()
    metrics: dict[str, OperationalMetrics] = {}
    for _, row in df.iterrows():
        zone_id = str(row["zone_id"])
        metrics[zone_id] = OperationalMetrics(
            active_workers=_value(row, "active_workers", 0),
            rejection_rate=_value(row, "rejection_rate", config.default_rejection_rate),
            available_hours_per_worker_per_day=_value(
                row, "available_hours", config.default_available_hours
            ),
            operational_efficiency=_value(
                row, "operational_efficiency", config.default_operational_efficiency
            ),
            zone_id=zone_id,
        )
    return metrics


def snapshots_from_frame(
    df: pd.DataFrame,
    config: PlanningConfig | None = None,
    zones: dict[str, Zone] | None = None
) -> list[ZoneSnapshot]:
    """Build one ZoneSnapshot per row.

    Zones are resolved by id against ``zones`` (default: the configured
    reference zones). An id without reference data gets a bare Zone whose
    name is the id, and a warning is logged.
    """
    config = config or PlanningConfig()
    if zones is None:
        zones = {zone.zone_id: zone for zone in config.zones}

    metrics = metrics_from_frame(df, config)
    snapshots: list[ZoneSnapshot] = []
    for _, row in df.iterrows():
        zone_id = str(row["zone_id"])
        zone = zones.get(zone_id)
        if zone is None:
            logger.warning("Zone %s has no reference data, using its id as name", zone_id)
            zone = Zone(zone_id, zone_id)

        category_demands = {}
        for category in config.categories:
            column = f"demand_{category.category_id}"
            if column in row.index and not pd.isna(row[column]):
                category_demands[category.category_id] = float(row[column])

        snapshots.append(
            ZoneSnapshot(
                zone=zone,
                metrics=metrics[zone_id],
                demand_per_day=_value(row, "demand_per_day", 0.0),
                category_demands=category_demands,
            )
        )
    return snapshots


def rotation_rates_from_frame(df: pd.DataFrame) -> dict[str, float]:
    """Mapping zone id -> monthly rotation rate. Rows with NaN are skipped."""
    rates = {}
    for zone_id, rate in zip(df["zone_id"], df["rotation_rate"]):
        if pd.isna(rate):
            logger.warning("Rotation rate missing for zone %s", zone_id)
            continue
        rates[str(zone_id)] = float(rate)
    return rates


def daily_demand_from_jobs(
    jobs: pd.DataFrame,
    as_of: date,
    window_days: int = 90
) -> dict[str, float]:
    """Average completed jobs per day per zone over a trailing window.

    Args:
        jobs: Completed job records with ``zone_id`` and ``completed_at``.
        as_of: Last day of the window (inclusive).
        window_days: Length of the window in days.

    Returns:
        Mapping zone id -> average jobs per day. Zones without jobs in the
        window are absent.
    """
    if window_days < 1:
        raise InvalidInputError(f"window_days must be >= 1, got {window_days}", field="window_days")
    if jobs.empty:
        return {}

    completed = pd.to_datetime(jobs["completed_at"]).dt.normalize()
    start = pd.Timestamp(as_of - timedelta(days=window_days - 1))
    end = pd.Timestamp(as_of)
    in_window = jobs[(completed >= start) & (completed <= end)]

    counts = in_window.groupby("zone_id").size()
    return {str(zone_id): count / window_days for zone_id, count in counts.items()}
