"""Central repository for tunable search and planner defaults.

All numerical values that influence the centralized planner (iteration
budget, stopping rule, acceptance policy, host timeouts) are collected here
so they can be updated from a single location without touching algorithmic
code.  The constants are exposed as frozen dataclasses to provide structure
and discoverability while keeping them easily serialisable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


ACCEPTANCE_POLICIES = ("greedy", "annealing")


@dataclass(frozen=True)
class AnnealingParams:
    """Cooling schedule used by the simulated annealing acceptance rule."""

    initial_temperature: float = 100.0
    cooling_rate: float = 0.995

    def __post_init__(self) -> None:
        if self.initial_temperature <= 0:
            raise ValueError(f"initial_temperature must be positive: {self.initial_temperature}")
        if not 0.0 < self.cooling_rate <= 1.0:
            raise ValueError(f"cooling_rate must be in (0, 1]: {self.cooling_rate}")


@dataclass(frozen=True)
class SearchParams:
    """Budget, stopping rule and acceptance policy of the SLS loop.

    ``stall_limit`` is the number of consecutive iterations whose adopted
    solution costs the same as the current one before the loop declares a
    fixed point; ``None`` disables the early exit.  ``time_limit_s`` is turned
    into a monotonic deadline when the search starts.
    """

    max_iterations: int = 10_000
    stall_limit: Optional[int] = None
    seed: Optional[int] = None
    time_limit_s: Optional[float] = None
    workers: int = 1
    acceptance: str = "greedy"
    log_every: int = 500
    annealing: AnnealingParams = field(default_factory=AnnealingParams)

    def __post_init__(self) -> None:
        if self.max_iterations < 0:
            raise ValueError(f"max_iterations must be non-negative: {self.max_iterations}")
        if self.stall_limit is not None and self.stall_limit <= 0:
            raise ValueError(f"stall_limit must be positive: {self.stall_limit}")
        if self.time_limit_s is not None and self.time_limit_s < 0:
            raise ValueError(f"time_limit_s must be non-negative: {self.time_limit_s}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1: {self.workers}")
        if self.acceptance not in ACCEPTANCE_POLICIES:
            raise ValueError(
                f"Unsupported acceptance policy {self.acceptance!r}; "
                f"expected one of {ACCEPTANCE_POLICIES}"
            )
        if self.log_every <= 0:
            raise ValueError(f"log_every must be positive: {self.log_every}")


@dataclass(frozen=True)
class PlannerSettings:
    """Host-imposed timeouts plus the search configuration.

    The host kills a ``plan`` call that overruns ``plan_timeout_ms``; the
    planner keeps ``plan_safety_margin`` of it for the search and leaves the
    rest for plan conversion.
    """

    setup_timeout_ms: int = 300_000
    plan_timeout_ms: int = 300_000
    plan_safety_margin: float = 0.9
    search: SearchParams = field(default_factory=SearchParams)

    def __post_init__(self) -> None:
        if self.setup_timeout_ms <= 0 or self.plan_timeout_ms <= 0:
            raise ValueError("Timeouts must be positive")
        if not 0.0 < self.plan_safety_margin <= 1.0:
            raise ValueError(f"plan_safety_margin must be in (0, 1]: {self.plan_safety_margin}")

    def plan_time_budget_s(self) -> float:
        """Seconds the search may use inside one ``plan`` call."""
        return self.plan_timeout_ms * self.plan_safety_margin / 1000.0


DEFAULT_ANNEALING_PARAMS = AnnealingParams()
DEFAULT_SEARCH_PARAMS = SearchParams()
DEFAULT_PLANNER_SETTINGS = PlannerSettings()


__all__ = [
    "ACCEPTANCE_POLICIES",
    "AnnealingParams",
    "SearchParams",
    "PlannerSettings",
    "DEFAULT_ANNEALING_PARAMS",
    "DEFAULT_SEARCH_PARAMS",
    "DEFAULT_PLANNER_SETTINGS",
]
