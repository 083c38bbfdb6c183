"""Exceptions raised by the capacity-planning engine."""


class InvalidInputError(ValueError):
    """Raised when an input violates the engine's value contracts.

    Negative counts, rates outside [0, 1], zero-duration categories and
    malformed months all end up here. The message names the offending field
    and, when known, the zone or category it belongs to.
    """

    def __init__(self, message: str, zone_id: str | None = None, field: str | None = None) -> None:
        self.zone_id = zone_id
        self.field = field
        prefix = f"[zone={zone_id}] " if zone_id else ""
        super().__init__(f"{prefix}{message}")


class SimulationCancelled(RuntimeError):
    """Raised when a Monte Carlo run is aborted through its cancel signal."""

    def __init__(self, completed_trials: int, requested_trials: int) -> None:
        self.completed_trials = completed_trials
        self.requested_trials = requested_trials
        super().__init__(
            f"Simulation cancelled after {completed_trials} of {requested_trials} trials"
        )
