import math

import numpy as np
import pytest

from capacity_engine.recruitment import InvalidInputError, OperationalMetrics, Zone, ZoneSnapshot
from capacity_engine.recruitment.models import Channel


def test_metrics_accept_numpy_whole_numbers():
    metrics = OperationalMetrics(np.int64(12), 0.2, 16.0, 0.9)
    assert metrics.active_workers == 12
    assert isinstance(metrics.active_workers, int)


@pytest.mark.parametrize(
    "kwargs,field",
    [
        ({"active_workers": -1}, "active_workers"),
        ({"active_workers": 2.5}, "active_workers"),
        ({"active_workers": math.nan}, "active_workers"),
        ({"rejection_rate": 1.2}, "rejection_rate"),
        ({"rejection_rate": -0.1}, "rejection_rate"),
        ({"available_hours_per_worker_per_day": -4}, "available_hours_per_worker_per_day"),
        ({"operational_efficiency": 0.0}, "operational_efficiency"),
        ({"operational_efficiency": 1.5}, "operational_efficiency"),
        ({"operational_efficiency": math.nan}, "operational_efficiency"),
    ],
)
def test_invalid_metrics_are_rejected(kwargs, field):
    values = {
        "active_workers": 10,
        "rejection_rate": 0.25,
        "available_hours_per_worker_per_day": 16.0,
        "operational_efficiency": 0.85,
        "zone_id": "norte",
    }
    values.update(kwargs)
    with pytest.raises(InvalidInputError) as excinfo:
        OperationalMetrics(**values)
    assert excinfo.value.field == field
    assert "zone=norte" in str(excinfo.value)


def test_snapshot_rejects_negative_demand():
    metrics = OperationalMetrics(10, 0.25, 16.0, 0.85)
    with pytest.raises(InvalidInputError, match="demand_per_day"):
        ZoneSnapshot(Zone("norte", "Norte"), metrics, demand_per_day=-1)
    with pytest.raises(InvalidInputError, match="long_haul"):
        ZoneSnapshot(Zone("norte", "Norte"), metrics, demand_per_day=5, category_demands={"long_haul": -2})


def test_channel_from_spend():
    channel = Channel.from_spend("referrals", spend=42000.0, acquired=28, conversion_rate=0.7, capacity=25)
    assert channel.cpa == pytest.approx(1500.0)
    assert channel.efficiency == pytest.approx(0.7 / 1500.0)

    silent = Channel.from_spend("radio", spend=30000.0, acquired=0, conversion_rate=0.2, capacity=50)
    assert silent.cpa == 0.0
    assert silent.efficiency == 0.0
