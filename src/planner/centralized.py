"""Host-facing centralized planner.

The host hands over the whole fleet and the whole task set once per round
and expects one executable plan per vehicle back, in the order the vehicles
were given.  ``CentralizedPlanner`` wires the pieces together:

* ``"sls"`` strategy (default): run ``SLSPlanner`` within the time budget
  derived from ``PlannerSettings`` and expand the best solution into plans.
* ``"naive"`` strategy: the first vehicle serves every task sequentially and
  the rest of the fleet stays idle.  Handy as a baseline and as a fallback
  when the search is not wanted.

Plan generation time is measured with a monotonic clock and logged in
milliseconds, mirroring what the host reports for each round.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
import time
from typing import Iterable, List, Optional, Sequence

from config.defaults import DEFAULT_PLANNER_SETTINGS, PlannerSettings
from core.plan import PathFn, VehiclePlan, build_vehicle_plans, empty_plan
from core.task import Task
from core.vehicle import Vehicle
from physics.distance import DistanceFn
from planner.naive import naive_plan
from planner.sls import SearchResult, SLSPlanner

logger = logging.getLogger(__name__)

PLANNING_STRATEGIES = ("sls", "naive")


@dataclass
class CentralizedPlanResult:
    """Outcome of the last ``plan`` call.

    Attributes
    ----------
    plans:
        One plan per vehicle, in input order.
    strategy:
        Strategy that produced the plans.
    search:
        SLS result, ``None`` for the naive strategy.
    total_distance:
        Distance travelled by the whole fleet when executing ``plans``.
    elapsed_ms:
        Wall-clock time spent inside ``plan``.
    """

    plans: List[VehiclePlan]
    strategy: str
    search: Optional[SearchResult]
    total_distance: float
    elapsed_ms: float


class CentralizedPlanner:
    """Plan routes for a whole fleet in one call."""

    def __init__(
        self,
        distance: DistanceFn,
        path: Optional[PathFn] = None,
        settings: PlannerSettings = DEFAULT_PLANNER_SETTINGS,
        *,
        strategy: str = "sls",
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        if strategy not in PLANNING_STRATEGIES:
            raise ValueError(
                f"Unsupported planning strategy {strategy!r}; expected one of {PLANNING_STRATEGIES}"
            )
        self.distance = distance
        self.path = path
        self.settings = settings
        self.strategy = strategy
        self.cancel_event = cancel_event
        self.last_result: Optional[CentralizedPlanResult] = None

    def plan(self, vehicles: Sequence[Vehicle], tasks: Iterable[Task]) -> List[VehiclePlan]:
        """Return one ``VehiclePlan`` per vehicle, in the order of ``vehicles``."""
        if not vehicles:
            raise ValueError("CentralizedPlanner requires at least one vehicle")

        started = time.monotonic()
        search: Optional[SearchResult] = None

        if self.strategy == "naive":
            first, others = vehicles[0], vehicles[1:]
            plans = [naive_plan(first, tasks, self.path)]
            plans.extend(empty_plan(vehicle) for vehicle in others)
        else:
            search = self._search(vehicles, tasks, started)
            plans = build_vehicle_plans(search.solution, self.path)

        elapsed_ms = (time.monotonic() - started) * 1000.0
        total = sum(plan.total_distance(self.distance) for plan in plans)
        self.last_result = CentralizedPlanResult(
            plans=plans,
            strategy=self.strategy,
            search=search,
            total_distance=total,
            elapsed_ms=elapsed_ms,
        )
        logger.info(
            f"[PLAN] {self.strategy} plan for {len(vehicles)} vehicles generated in "
            f"{elapsed_ms:.0f} ms (total distance {total:.2f})"
        )
        return plans

    def _search(self, vehicles: Sequence[Vehicle], tasks: Iterable[Task], started: float) -> SearchResult:
        params = self.settings.search
        deadline = None
        if params.time_limit_s is None:
            deadline = started + self.settings.plan_time_budget_s()

        planner = SLSPlanner(self.distance, params, cancel_event=self.cancel_event)
        return planner.optimize(vehicles, tasks, deadline=deadline)


__all__ = ["CentralizedPlanner", "CentralizedPlanResult", "PLANNING_STRATEGIES"]
