"""
Monte Carlo Simulator
=====================

Estimates the distribution of recruitment outcomes for a campaign whose
budget, CPA, conversion and retention are uncertain.

Sampling model (one trial):
    budget     ~ Normal(mu, sigma) clipped at 0
    cpa        ~ Normal(mu, sigma) clipped at 1% of the expected CPA
    conversion ~ Normal(mu, sigma) clipped to [0, 1]
    retention  ~ Normal(mu, sigma) clipped to [0, 1]
    recruits   = floor(budget / cpa * conversion * retention)

where sigma = sqrt(variance). Results are reproducible for a given seed.
"""

import logging
import math
from typing import Protocol

import numpy as np

from .errors import InvalidInputError, SimulationCancelled
from .models import RecruitmentScenario, SimulationResult

logger = logging.getLogger(__name__)

# Sampled CPA never drops below this fraction of its expected value
MIN_CPA_FRACTION = 0.01


class CancelSignal(Protocol):
    def is_set(self) -> bool: ...


def expected_recruits(scenario: RecruitmentScenario) -> int:
    """Recruits produced by the expected values alone, without variance."""
    if scenario.cpa <= 0:
        return 0
    return math.floor(scenario.budget / scenario.cpa * scenario.conversion_rate * scenario.retention_rate)


class MonteCarloSimulator:
    """Draws recruitment outcomes around expected campaign values.

    Trials are drawn in batches of ``batch_size``; a cancel signal (anything
    with ``is_set()``, such as ``threading.Event``) is checked before each
    batch. Every call builds a fresh generator from ``seed`` so repeated
    calls with the same inputs are bit-identical.

    Example:
        >>> simulator = MonteCarloSimulator(seed=7)
        >>> expected = RecruitmentScenario(100000, 2000, 0.6, 0.8)
        >>> variance = RecruitmentScenario(1e8, 90000, 0.0025, 0.0016)
        >>> result = simulator.simulate(expected, variance, trials=5000)
        >>> result.confidence_interval_95
    """

    def __init__(self, seed: int | None = None, batch_size: int = 1000) -> None:
        if batch_size < 1:
            raise InvalidInputError(f"batch_size must be >= 1, got {batch_size}", field="batch_size")
        self.seed = seed
        self.batch_size = batch_size

    @staticmethod
    def _validate(expected: RecruitmentScenario, variance: RecruitmentScenario, trials: int) -> None:
        if trials < 1:
            raise InvalidInputError(f"trials must be >= 1, got {trials}", field="trials")
        for name in ("budget", "cpa", "conversion_rate", "retention_rate"):
            value = getattr(expected, name)
            if not math.isfinite(value):
                raise InvalidInputError(f"expected {name} must be finite, got {value}", field=name)
        if expected.cpa <= 0:
            raise InvalidInputError(f"expected CPA must be positive, got {expected.cpa}", field="cpa")
        if expected.budget < 0:
            raise InvalidInputError(f"expected budget cannot be negative, got {expected.budget}", field="budget")
        for name in ("conversion_rate", "retention_rate"):
            value = getattr(expected, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidInputError(f"expected {name} must be in [0, 1], got {value}", field=name)
        for name in ("budget", "cpa", "conversion_rate", "retention_rate"):
            value = getattr(variance, name)
            if value < 0 or not math.isfinite(value):
                raise InvalidInputError(f"variance of {name} must be >= 0, got {value}", field=name)

    def _draw_batch(
        self,
        rng: np.random.Generator,
        expected: RecruitmentScenario,
        variance: RecruitmentScenario,
        size: int
    ) -> np.ndarray:
        budget = np.clip(rng.normal(expected.budget, math.sqrt(variance.budget), size), 0.0, None)
        cpa = np.clip(
            rng.normal(expected.cpa, math.sqrt(variance.cpa), size),
            expected.cpa * MIN_CPA_FRACTION,
            None,
        )
        conversion = np.clip(
            rng.normal(expected.conversion_rate, math.sqrt(variance.conversion_rate), size), 0.0, 1.0
        )
        retention = np.clip(
            rng.normal(expected.retention_rate, math.sqrt(variance.retention_rate), size), 0.0, 1.0
        )
        return np.floor(budget / cpa * conversion * retention).astype(np.int64)

    def simulate(
        self,
        expected: RecruitmentScenario,
        variance: RecruitmentScenario,
        trials: int = 1000,
        target: int | None = None,
        cancel_event: CancelSignal | None = None
    ) -> SimulationResult:
        """Run ``trials`` independent draws and summarise the outcomes.

        Args:
            expected: Expected budget, CPA, conversion and retention.
            variance: Variance of each of the same four inputs.
            trials: Number of trials (>= 1).
            target: Recruits counted as success. Defaults to the outcome of
                the expected values without variance.
            cancel_event: Optional cooperative cancellation signal.

        Returns:
            SimulationResult with mean, 95% percentile interval and the
            fraction of trials reaching ``target``.

        Raises:
            InvalidInputError: On invalid trial count or scenario values.
            SimulationCancelled: If ``cancel_event`` is set mid-run.
        """
        self._validate(expected, variance, trials)
        if target is None:
            target = expected_recruits(expected)

        rng = np.random.default_rng(self.seed)
        outcomes = np.empty(trials, dtype=np.int64)

        for start in range(0, trials, self.batch_size):
            if cancel_event is not None and cancel_event.is_set():
                logger.info("Simulation cancelled after %d of %d trials", start, trials)
                raise SimulationCancelled(start, trials)
            size = min(self.batch_size, trials - start)
            outcomes[start:start + size] = self._draw_batch(rng, expected, variance, size)

        lower, upper = np.percentile(outcomes, [2.5, 97.5])
        result = SimulationResult(
            mean_outcome=float(outcomes.mean()),
            confidence_interval_95=(float(lower), float(upper)),
            success_probability=float(np.mean(outcomes >= target)),
            target=target,
            trials=trials,
            outcomes=outcomes,
        )
        logger.info(
            "Monte Carlo (%d trials): mean=%.2f ci95=(%.1f, %.1f) p(>=%d)=%.3f",
            trials, result.mean_outcome, lower, upper, target, result.success_probability,
        )
        return result
