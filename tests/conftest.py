from datetime import date

import pytest

from capacity_engine.recruitment import (
    OperationalMetrics,
    PlanningConfig,
    ServiceCategory,
    Zone,
    ZoneSnapshot,
)


@pytest.fixture
def config():
    return PlanningConfig()


@pytest.fixture
def single_category_config():
    """One 6-hour category carrying all demand."""
    return PlanningConfig(
        categories=(ServiceCategory("local", "local", avg_duration_hours=6.0, demand_share=1.0),),
    )


@pytest.fixture
def healthy_metrics():
    return OperationalMetrics(
        active_workers=30,
        rejection_rate=0.1,
        available_hours_per_worker_per_day=16,
        operational_efficiency=0.85,
        zone_id="centro",
    )


@pytest.fixture
def centro(config):
    return config.zone("centro")


@pytest.fixture
def snapshots(config):
    """Eight zones with realistic staffing; centro_occidente is nearly empty."""
    staffing = {
        "centro": (85, 28.0),
        "bajio": (65, 14.0),
        "occidente": (72, 16.0),
        "norte": (58, 11.0),
        "pacifico": (42, 9.0),
        "golfo": (38, 6.0),
        "sureste": (35, 5.0),
        "centro_occidente": (1, 4.0),
    }
    result = []
    for zone in config.zones:
        workers, demand = staffing[zone.zone_id]
        metrics = OperationalMetrics(workers, 0.25, 16.0, 0.85, zone_id=zone.zone_id)
        result.append(ZoneSnapshot(zone=zone, metrics=metrics, demand_per_day=demand))
    return result


@pytest.fixture
def as_of():
    # 13 days left in July
    return date(2025, 7, 18)


@pytest.fixture
def make_snapshot():
    def _make(zone_id, workers, demand=10.0, name=None):
        zone = Zone(zone_id, name or zone_id.title())
        metrics = OperationalMetrics(workers, 0.25, 16.0, 0.85, zone_id=zone_id)
        return ZoneSnapshot(zone=zone, metrics=metrics, demand_per_day=demand)
    return _make
