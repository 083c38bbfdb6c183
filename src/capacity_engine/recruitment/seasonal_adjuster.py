"""Seasonal demand multipliers by calendar month."""

import numbers

from .config import PlanningConfig
from .errors import InvalidInputError


class SeasonalAdjuster:
    """Maps a calendar month (1-12) to its demand multiplier.

    The table comes from ``PlanningConfig.seasonal_factors`` (January first).
    A month outside 1..12 is a caller error and raises.
    """

    def __init__(self, config: PlanningConfig | None = None) -> None:
        self.config = config or PlanningConfig()

    def factor(self, month: int) -> float:
        if isinstance(month, bool) or not isinstance(month, numbers.Integral) or not 1 <= month <= 12:
            raise InvalidInputError(f"month must be an integer in 1..12, got {month!r}", field="month")
        return self.config.seasonal_factors[int(month) - 1]

    def adjust(self, value: float, month: int) -> float:
        """Scale a baseline demand figure to the given month."""
        return value * self.factor(month)
