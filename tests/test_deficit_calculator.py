import pytest

from capacity_engine.recruitment import (
    DeficitCalculator,
    MultiMonthProjector,
    OperationalMetrics,
    PlanningConfig,
    Zone,
    calculate_urgency,
)
from capacity_engine.recruitment.deficit_calculator import (
    ACCEPTANCE_RECOMMENDATION,
    ROUTING_RECOMMENDATION,
    SUFFICIENT_RECOMMENDATION,
    urgency_points,
)

ZONE = Zone("centro", "Centro de México")


@pytest.fixture
def critical_metrics():
    return OperationalMetrics(1, 0.5, 16, 0.85, zone_id="centro")


def test_healthy_zone_shows_surplus(single_category_config, healthy_metrics):
    calculator = DeficitCalculator(single_category_config)
    result = calculator.compute_deficit(ZONE, healthy_metrics, demand_per_day=10)

    assert result.category_deficits == {"local": -51}
    assert result.total_deficit == -51
    assert result.urgency_score == 1
    assert result.recommendations == [SUFFICIENT_RECOMMENDATION]
    assert not result.has_deficit


def test_critical_zone_is_urgent(config, critical_metrics):
    result = DeficitCalculator(config).compute_deficit(ZONE, critical_metrics, demand_per_day=20)

    assert result.category_deficits == {"local": 11, "long_haul": 6, "express": 1}
    assert result.total_deficit == 18
    # 36 deficit + 30 capacity + 30 demand points
    assert result.urgency_score == 10
    assert result.recommendations == [
        "Hire 10 workers for local services",
        "Hire 13 workers for long-haul services",
        "Hire 1 workers for express services",
        ACCEPTANCE_RECOMMENDATION,
        ROUTING_RECOMMENDATION,
    ]


@pytest.mark.parametrize("workers", [0, 1, 2, 5, 13, 40, 120])
@pytest.mark.parametrize("demand", [0.0, 0.5, 7.0, 20.0, 85.0, 400.0])
def test_total_is_sum_of_categories_and_score_bounded(config, workers, demand):
    metrics = OperationalMetrics(workers, 0.25, 16, 0.85)
    result = DeficitCalculator(config).compute_deficit(ZONE, metrics, demand)

    assert result.total_deficit == sum(result.category_deficits.values())
    assert 1 <= result.urgency_score <= 10


def test_default_demand_split(config, healthy_metrics):
    calculator = DeficitCalculator(config)
    assert calculator.split_demand(20) == pytest.approx({"local": 12.0, "long_haul": 6.0, "express": 2.0})


def test_explicit_category_demand_overrides_split(config, healthy_metrics):
    calculator = DeficitCalculator(config)
    demands = calculator.split_demand(20, {"local": 80.0, "express": 0})
    # express has no usable figure and falls back to its share
    assert demands == pytest.approx({"local": 80.0, "long_haul": 6.0, "express": 2.0})

    result = calculator.compute_deficit(ZONE, healthy_metrics, 20, {"local": 80.0})
    assert result.category_deficits["local"] == 19  # ceil(80 - 61.2)


def test_seasonal_month_scales_demand(single_category_config, healthy_metrics):
    calculator = DeficitCalculator(single_category_config)
    result = calculator.compute_deficit(ZONE, healthy_metrics, 10, month=11)
    assert result.category_demands["local"] == pytest.approx(11.5)
    assert result.total_deficit == -49


def test_zero_capacity_recommendation_does_not_divide_by_zero(single_category_config):
    metrics = OperationalMetrics(0, 0.25, 16, 0.85)
    result = DeficitCalculator(single_category_config).compute_deficit(ZONE, metrics, 12)

    assert result.total_deficit == 12
    assert result.urgency_score == 10
    # 12 jobs / (16 h / 6 h per job)
    assert result.recommendations[0] == "Hire 5 workers for local services"


def test_urgency_guards():
    assert calculate_urgency(5, 0, 10) == 10
    assert calculate_urgency(5, 10, 0) == 10
    assert calculate_urgency(-5, 20, 0) == 10


def test_urgency_non_decreasing_in_deficit():
    for workers in (2, 4, 6, 12):
        scores = [calculate_urgency(d, 25.0, workers) for d in range(-80, 80)]
        assert scores == sorted(scores)
        assert all(1 <= s <= 10 for s in scores)


def test_surplus_zone_is_never_urgent(single_category_config):
    calculator = DeficitCalculator(single_category_config)
    for workers in (1, 2, 5, 30, 120):
        metrics = OperationalMetrics(workers, 0.1, 16, 0.85)
        for demand in (0.5, 3.5, 10.0, 40.0, 60.0, 200.0, 900.0):
            result = calculator.compute_deficit(ZONE, metrics, demand)
            if result.total_deficit < 0:
                assert result.urgency_score <= 5

    # 30 workers cover 61.2 jobs a day, so 60 a day is a narrow surplus
    narrow = calculator.compute_deficit(ZONE, OperationalMetrics(30, 0.1, 16, 0.85), 60)
    assert narrow.total_deficit == -1
    assert narrow.urgency_score == 3


def test_urgency_uses_ten_point_scale(config):
    assert calculate_urgency(100, 10, 1) == 10
    assert calculate_urgency(0, 10, 10) == 3
    # same points as the monthly zone score without a deadline bonus
    projector = MultiMonthProjector(config)
    assert calculate_urgency(12, 20.0, 30) == projector.zone_urgency(12, 30, 20.0, 45) == 5


def test_explicit_demand_without_baseline(config, healthy_metrics):
    result = DeficitCalculator(config).compute_deficit(ZONE, healthy_metrics, 0, {"local": 80.0})

    assert result.category_deficits == {"local": 19, "long_haul": -26, "express": -91}
    # demand comes from the explicit figure, so the no-baseline guard is skipped
    assert result.urgency_score == 1


def test_urgency_points_factors():
    # deficit factor capped at 40, one worker gets the full capacity weight
    assert urgency_points(100, 10, 1) == pytest.approx(40 + 30 + 30)
    # four workers: 30 - 20 = 10 capacity points; demand 5 -> 15 points
    assert urgency_points(0, 5, 4) == pytest.approx(0 + 10 + 15)
    assert urgency_points(-10, 5, 10) == pytest.approx(-80 + 0 + 15)


def test_simulate_hiring_impact(config, critical_metrics):
    impact = DeficitCalculator(config).simulate_hiring_impact(ZONE, critical_metrics, 20, additional_workers=10)

    assert impact.current.total_deficit == 18
    assert impact.improved.total_deficit < impact.current.total_deficit
    assert impact.deficit_improvement == impact.current.total_deficit - impact.improved.total_deficit
    assert impact.recommendations == impact.improved.recommendations


def test_rotation_plan_front_loads_urgent_zones(config, critical_metrics):
    calculator = DeficitCalculator(config)
    deficit = calculator.compute_deficit(ZONE, critical_metrics, 20)
    plan = calculator.plan_with_rotation(deficit, critical_metrics, rotation_rate=0.5, workers_at_risk=1)

    assert plan.monthly_rotation_loss == 1
    assert plan.rotation_deficit == 3
    assert plan.safety_buffer == 1
    assert plan.total_need == 22
    assert (plan.month_1, plan.month_2, plan.month_3) == (14, 7, 3)
    assert plan.priority == "alta"
    assert "Run a retention program for 1 workers at risk" in plan.recommendations
    assert "Recruit 3 additional workers to offset projected rotation" in plan.recommendations


def test_rotation_plan_never_negative(single_category_config, healthy_metrics):
    calculator = DeficitCalculator(single_category_config)
    deficit = calculator.compute_deficit(ZONE, healthy_metrics, 10)
    plan = calculator.plan_with_rotation(deficit, healthy_metrics, rotation_rate=0.05)

    assert plan.rotation_deficit == 6
    assert plan.total_need == 0
    assert (plan.month_1, plan.month_2, plan.month_3) == (0, 0, 0)
    assert plan.priority == "baja"


def test_rotation_plan_medium_priority():
    config = PlanningConfig()
    calculator = DeficitCalculator(config)
    metrics = OperationalMetrics(10, 0.25, 16, 0.85)
    deficit = calculator.compute_deficit(ZONE, metrics, 2)
    deficit.urgency_score = 6
    deficit.total_deficit = 7
    plan = calculator.plan_with_rotation(deficit, metrics, rotation_rate=0.0)

    assert plan.total_need == 7
    assert (plan.month_1, plan.month_2, plan.month_3) == (3, 3, 2)
    assert plan.priority == "media"
