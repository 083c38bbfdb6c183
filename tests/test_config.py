import pytest

from capacity_engine.recruitment import InvalidInputError, PlanningConfig, ServiceCategory


def test_default_tables_are_consistent(config):
    assert sum(config.zone_shares.values()) == pytest.approx(1.0)
    assert sum(c.demand_share for c in config.categories) == pytest.approx(1.0)
    assert {z.zone_id for z in config.zones} == set(config.zone_shares)
    assert len(config.seasonal_factors) == 12


def test_zone_shares_must_sum_to_one():
    with pytest.raises(InvalidInputError, match="Zone shares"):
        PlanningConfig(zone_shares={"a": 0.5, "b": 0.4})


def test_empty_zone_shares_are_allowed():
    assert PlanningConfig(zone_shares={}).zone_shares == {}


def test_category_shares_must_sum_to_one():
    categories = (ServiceCategory("local", "local", 6.0, 0.5),)
    with pytest.raises(InvalidInputError, match="demand shares"):
        PlanningConfig(categories=categories)


@pytest.mark.parametrize("duration", [0, -3.0])
def test_zero_duration_category_is_rejected(duration):
    with pytest.raises(InvalidInputError, match="positive duration"):
        ServiceCategory("local", "local", duration, 1.0)


def test_seasonal_table_needs_twelve_entries():
    with pytest.raises(InvalidInputError, match="12 positive"):
        PlanningConfig(seasonal_factors=(1.0,) * 11)


@pytest.mark.parametrize(
    "field,value",
    [
        ("default_available_hours", 0.0),
        ("default_available_hours", -4.0),
        ("default_rejection_rate", 1.2),
        ("default_rejection_rate", -0.1),
        ("default_operational_efficiency", 0.0),
        ("default_operational_efficiency", 1.5),
    ],
)
def test_boundary_defaults_are_validated(field, value):
    with pytest.raises(InvalidInputError) as excinfo:
        PlanningConfig(**{field: value})
    assert excinfo.value.field == field


def test_with_overrides_returns_validated_copy(config):
    cheaper = config.with_overrides(cost_per_hire=5000.0)
    assert cheaper.cost_per_hire == 5000.0
    assert config.cost_per_hire == 8500.0

    with pytest.raises(InvalidInputError):
        config.with_overrides(default_rotation_rate=1.5)


def test_lookup_by_id(config):
    assert config.zone("bajio").name == "Bajío"
    assert config.category("express").avg_duration_hours == 4.0
    with pytest.raises(InvalidInputError, match="Unknown zone"):
        config.zone("atlantis")
    with pytest.raises(InvalidInputError, match="Unknown service category"):
        config.category("overnight")
