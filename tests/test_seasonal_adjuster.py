import pytest

from capacity_engine.recruitment import InvalidInputError, PlanningConfig, SeasonalAdjuster


@pytest.fixture
def seasonal(config):
    return SeasonalAdjuster(config)


def test_peak_and_trough(seasonal):
    assert seasonal.factor(11) == 1.15
    assert seasonal.factor(7) == 0.85


def test_every_month_is_within_range(seasonal):
    factors = [seasonal.factor(month) for month in range(1, 13)]
    assert len(factors) == 12
    assert all(0.85 <= f <= 1.15 for f in factors)


@pytest.mark.parametrize("month", [0, 13, -1, 1.5, True, "3"])
def test_invalid_month_raises(seasonal, month):
    with pytest.raises(InvalidInputError, match="month"):
        seasonal.factor(month)


def test_adjust_scales_value(seasonal):
    assert seasonal.adjust(100, 4) == pytest.approx(110.0)
    assert seasonal.adjust(0, 11) == 0


def test_custom_table():
    flat = PlanningConfig(seasonal_factors=(1.0,) * 12)
    assert SeasonalAdjuster(flat).adjust(42.0, 11) == 42.0
