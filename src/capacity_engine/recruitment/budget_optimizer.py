"""Budget Optimizer - Greedy allocation of a marketing budget across channels."""

import logging
import math
from collections.abc import Sequence

from .errors import InvalidInputError
from .models import Channel, ChannelAllocation

logger = logging.getLogger(__name__)


class BudgetOptimizer:
    """Allocates a fixed budget to maximise expected recruits.

    Channels are ranked by efficiency (conversion_rate / cpa); ties go to
    the higher conversion rate, then to input order. Each channel in turn
    receives as much of the remaining budget as its capacity allows
    (``capacity * cpa``), so the allocation never exceeds the budget and
    never exceeds any channel's ceiling.

    Example:
        >>> optimizer = BudgetOptimizer()
        >>> channels = [Channel("referrals", 1500, 0.7, 20), Channel("ads", 2500, 0.4, 100)]
        >>> optimizer.optimize_allocation(80000, channels)
    """

    def rank_channels(self, channels: Sequence[Channel]) -> list[Channel]:
        """Valid channels ordered from most to least efficient.

        Channels with a non-positive CPA are invalid data and are dropped.
        """
        valid = []
        for channel in channels:
            if channel.cpa <= 0:
                logger.warning("Excluding channel %s: CPA %s is not positive", channel.channel_id, channel.cpa)
                continue
            valid.append(channel)
        # sorted() is stable, so equal keys keep input order
        return sorted(valid, key=lambda c: (-c.efficiency, -c.conversion_rate))

    def optimize_allocation(
        self,
        total_budget: float,
        channels: Sequence[Channel]
    ) -> list[ChannelAllocation]:
        """Greedy allocation of ``total_budget``.

        Args:
            total_budget: Budget to distribute (>= 0).
            channels: Candidate channels.

        Returns:
            One ChannelAllocation per valid channel, in ranking order.
            Channels reached after the budget runs out get zero.

        Raises:
            InvalidInputError: If the budget is negative or a channel has a
                negative capacity or a conversion rate outside [0, 1].
        """
        if total_budget < 0:
            raise InvalidInputError(f"total_budget cannot be negative, got {total_budget}", field="total_budget")
        for channel in channels:
            if channel.capacity < 0:
                raise InvalidInputError(
                    f"channel {channel.channel_id} capacity cannot be negative", field="capacity"
                )
            if not 0.0 <= channel.conversion_rate <= 1.0:
                raise InvalidInputError(
                    f"channel {channel.channel_id} conversion_rate must be in [0, 1]",
                    field="conversion_rate",
                )

        total_budget = float(total_budget)
        spent: list[float] = []
        allocations: list[ChannelAllocation] = []
        for channel in self.rank_channels(channels):
            budget = max(0.0, min(total_budget - math.fsum(spent), channel.capacity * channel.cpa))
            # float rounding must not push the sum past the total
            step = math.ulp(total_budget)
            while budget > 0 and sum(spent + [budget]) > total_budget:
                budget = max(0.0, budget - step)
                step *= 2
            spent.append(budget)
            allocations.append(
                ChannelAllocation(
                    channel_id=channel.channel_id,
                    budget_allocated=budget,
                    expected_recruits=budget / channel.cpa * channel.conversion_rate,
                )
            )

        logger.info(
            "Allocated %.2f of %.2f across %d channels",
            sum(spent), total_budget, len(allocations),
        )
        return allocations
