"""Stochastic local search (SLS) for the centralized pickup-and-delivery problem.

State machine::

    START → INITIALIZE → ITERATE (× N) → DONE

* INITIALIZE builds the initial solution (everything on the biggest
  vehicle).  An ``InfeasibleTaskError`` aborts the whole search.
* ITERATE generates the neighbourhood of the current solution, costs every
  candidate (optionally on a thread pool), lets the selector choose the next
  state and adopts it.  The best solution seen so far is tracked separately,
  so the returned cost never exceeds the initial cost.
* The loop ends on the iteration cap, on a fixed point (the adopted cost
  stayed equal to the current cost for ``stall_limit`` consecutive
  iterations), on the deadline, or when the caller sets the cancellation
  event.  Deadline and cancellation are not errors: the best solution so far
  is returned and ``SearchResult.stop_reason`` says why the loop stopped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
import random
import threading
import time
from typing import Callable, Iterable, List, Optional, Sequence

from config.defaults import DEFAULT_SEARCH_PARAMS, SearchParams
from core.solution import Solution
from core.task import Task, as_task_set
from core.vehicle import Vehicle
from physics.distance import DistanceFn
from planner.cost import CostEvaluator, cost_breakdown
from planner.errors import PlanningInvariantError
from planner.initial import build_initial_solution
from planner.neighborhood import NeighborhoodGenerator
from planner.selector import AnnealingSelector, select_min_cost

logger = logging.getLogger(__name__)

_COST_EPSILON = 1e-9


class SearchPhase(Enum):
    START = "start"
    INITIALIZE = "initialize"
    ITERATE = "iterate"
    DONE = "done"


class StopReason(Enum):
    """Why the search loop returned."""

    ITERATION_LIMIT = "iteration_limit"
    FIXED_POINT = "fixed_point"
    DEADLINE = "deadline"
    CANCELLED = "cancelled"


@dataclass
class SearchResult:
    """Outcome of one SLS run.

    Attributes
    ----------
    solution:
        Best solution found; always satisfies every solution invariant.
    cost:
        Total distance of ``solution``.
    initial_cost:
        Total distance of the initial solution.
    iterations:
        Number of completed iterations.
    stop_reason:
        Which termination condition fired.
    elapsed_s:
        Wall-clock duration of the run (monotonic clock).
    empty_neighbourhoods:
        Iterations whose neighbourhood had no feasible candidate.
    cost_history:
        Cost of the current solution after every iteration.
    """

    solution: Solution
    cost: float
    initial_cost: float
    iterations: int
    stop_reason: StopReason
    elapsed_s: float
    empty_neighbourhoods: int = 0
    cost_history: List[float] = field(default_factory=list)

    @property
    def improvement(self) -> float:
        return self.initial_cost - self.cost


class SLSPlanner:
    """Centralized SLS planner over a fixed distance function.

    Parameters
    ----------
    distance:
        ``(city, city) -> float``; treated as pure and thread-safe.
    params:
        Iteration budget, stopping rule, acceptance policy and seed.
    cancel_event:
        Optional event the caller sets to stop the search early.
    clock:
        Monotonic clock used for deadlines (injectable for tests).
    """

    def __init__(
        self,
        distance: DistanceFn,
        params: SearchParams = DEFAULT_SEARCH_PARAMS,
        *,
        cancel_event: Optional[threading.Event] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.distance = distance
        self.params = params
        self.cancel_event = cancel_event
        self.clock = clock
        self.phase = SearchPhase.START

    def _enter(self, phase: SearchPhase) -> None:
        logger.debug(f"[SLS] {self.phase.value} → {phase.value}")
        self.phase = phase

    def _resolve_deadline(self, started: float, deadline: Optional[float]) -> Optional[float]:
        limits = []
        if self.params.time_limit_s is not None:
            limits.append(started + self.params.time_limit_s)
        if deadline is not None:
            limits.append(deadline)
        return min(limits) if limits else None

    def _interrupted(self, deadline: Optional[float]) -> Optional[StopReason]:
        if self.cancel_event is not None and self.cancel_event.is_set():
            return StopReason.CANCELLED
        if deadline is not None and self.clock() >= deadline:
            return StopReason.DEADLINE
        return None

    def optimize(
        self,
        vehicles: Sequence[Vehicle],
        tasks: Iterable[Task],
        *,
        deadline: Optional[float] = None,
    ) -> SearchResult:
        """Run the search.

        Parameters
        ----------
        vehicles:
            The fleet, in host order.
        tasks:
            Tasks to serve; iterated read-only.
        deadline:
            Absolute time on ``clock`` after which no new iteration starts.
        """
        started = self.clock()
        deadline = self._resolve_deadline(started, deadline)
        params = self.params

        self._enter(SearchPhase.INITIALIZE)
        task_set = as_task_set(tasks)
        current = build_initial_solution(vehicles, task_set)

        rng = random.Random(params.seed)
        generator = NeighborhoodGenerator(rng)
        if params.acceptance == "annealing":
            select = AnnealingSelector(params.annealing, rng)
        else:
            select = select_min_cost

        with CostEvaluator(self.distance, workers=params.workers) as evaluator:
            current_cost = evaluator.evaluate(current)
            initial_cost = current_cost
            best, best_cost = current, current_cost
            logger.info(
                f"[SLS] initial cost {initial_cost:.2f} "
                f"({len(task_set)} tasks, {len(vehicles)} vehicles)"
            )

            self._enter(SearchPhase.ITERATE)
            history: List[float] = []
            stop_reason = StopReason.ITERATION_LIMIT
            iterations = 0
            stalled = 0
            empty = 0

            for iteration in range(params.max_iterations):
                interrupted = self._interrupted(deadline)
                if interrupted is not None:
                    stop_reason = interrupted
                    logger.warning(
                        f"[SLS] {interrupted.value} after {iterations} iterations, "
                        f"returning best cost {best_cost:.2f}"
                    )
                    break

                candidates = generator.generate(current)
                if not candidates:
                    empty += 1
                costs = evaluator.evaluate_many(candidates)
                chosen, chosen_cost = select(candidates, costs, current, current_cost)

                if abs(chosen_cost - current_cost) <= _COST_EPSILON:
                    stalled += 1
                else:
                    stalled = 0
                current, current_cost = chosen, chosen_cost
                iterations = iteration + 1
                history.append(current_cost)

                if current_cost < best_cost - _COST_EPSILON:
                    best, best_cost = current, current_cost
                    logger.debug(f"[SLS] iteration {iterations}: new best cost {best_cost:.2f}")

                if iterations % params.log_every == 0:
                    logger.info(
                        f"[SLS] progress {iterations}/{params.max_iterations} iterations, "
                        f"current {current_cost:.2f}, best {best_cost:.2f}"
                    )

                if params.stall_limit is not None and stalled >= params.stall_limit:
                    stop_reason = StopReason.FIXED_POINT
                    logger.info(f"[SLS] fixed point reached after {iterations} iterations")
                    break
            evaluations = evaluator.evaluations

        self._enter(SearchPhase.DONE)
        valid, reason = best.validate(task_set)
        if not valid:
            raise PlanningInvariantError(f"Search produced an invalid solution: {reason}")

        elapsed = self.clock() - started
        logger.info(
            f"[SLS] done ({stop_reason.value}): cost {best_cost:.2f} "
            f"(improvement {initial_cost - best_cost:.2f}) in {elapsed:.3f}s, "
            f"{evaluations} evaluations"
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"[SLS] per-vehicle distance: {cost_breakdown(best, self.distance)}")
        return SearchResult(
            solution=best,
            cost=best_cost,
            initial_cost=initial_cost,
            iterations=iterations,
            stop_reason=stop_reason,
            elapsed_s=elapsed,
            empty_neighbourhoods=empty,
            cost_history=history,
        )


def run_sls(
    vehicles: Sequence[Vehicle],
    tasks: Iterable[Task],
    distance: DistanceFn,
    params: SearchParams = DEFAULT_SEARCH_PARAMS,
    *,
    cancel_event: Optional[threading.Event] = None,
) -> SearchResult:
    """Convenience wrapper around ``SLSPlanner.optimize``."""
    planner = SLSPlanner(distance, params, cancel_event=cancel_event)
    return planner.optimize(vehicles, tasks)
