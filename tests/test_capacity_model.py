import pytest

from capacity_engine.recruitment import CapacityModel, OperationalMetrics, ServiceCategory
from capacity_engine.recruitment.capacity_model import floor2


def test_healthy_zone_capacity(config, healthy_metrics):
    model = CapacityModel(config)
    result = model.effective_capacity(healthy_metrics, config.category("local"))

    assert result.nominal_capacity == 30
    assert result.effective_capacity == 22.95
    assert result.possible_jobs_per_day == 61.2


def test_long_haul_capacity_is_truncated(config, healthy_metrics):
    result = CapacityModel(config).effective_capacity(healthy_metrics, config.category("long_haul"))
    # 22.95 * 16 / 14 = 26.2285...
    assert result.possible_jobs_per_day == 26.22


def test_zero_workers_yield_exact_zero(config):
    metrics = OperationalMetrics(0, 0.1, 16, 0.85)
    for category in config.categories:
        result = CapacityModel(config).effective_capacity(metrics, category)
        assert result.nominal_capacity == 0
        assert result.effective_capacity == 0
        assert result.possible_jobs_per_day == 0


def test_capacity_floors_instead_of_rounding():
    category = ServiceCategory("solo", "solo", avg_duration_hours=1.0, demand_share=1.0)
    metrics = OperationalMetrics(1, 0.0, 1.0, 0.999)
    result = CapacityModel().effective_capacity(metrics, category)
    assert result.effective_capacity == 0.99
    assert result.possible_jobs_per_day == 0.99


@pytest.mark.parametrize("rejection,efficiency", [(0.0, 1.0), (0.1, 0.85), (0.25, 0.85), (0.5, 0.6), (1.0, 0.5)])
def test_effective_capacity_monotonic_in_workers(config, rejection, efficiency):
    model = CapacityModel(config)
    category = config.category("local")
    previous = -1.0
    for workers in range(0, 120):
        metrics = OperationalMetrics(workers, rejection, 16, efficiency)
        result = model.effective_capacity(metrics, category)
        assert result.effective_capacity >= previous
        previous = result.effective_capacity


def test_capacities_follow_category_order(config, healthy_metrics):
    capacities = CapacityModel(config).capacities_for(healthy_metrics)
    assert list(capacities) == ["local", "long_haul", "express"]
    assert capacities["express"].possible_jobs_per_day == 91.8


def test_monthly_capacity(config, healthy_metrics):
    model = CapacityModel(config)
    assert model.monthly_capacity(healthy_metrics, config.category("local")) == 1836.0
    assert model.monthly_capacity(healthy_metrics, config.category("local"), working_days=22) == 1346.4


@pytest.mark.parametrize("value,expected", [(22.95, 22.95), (61.199999999999996, 61.2), (1.239, 1.23), (0.0, 0.0)])
def test_floor2(value, expected):
    assert floor2(value) == expected
