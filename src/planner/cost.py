"""Route cost evaluation for centralized solutions.

The cost of a solution is the total travel distance of the fleet: each
vehicle drives from its current city through the cities of its actions in
chain order.  Idle vehicles cost nothing.  Evaluation is linear in the number
of actions and has no side effects, so a batch of candidates can be costed
on a thread pool and joined before selection.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence

from core.solution import Solution
from core.vehicle import Vehicle
from physics.distance import DistanceFn


def vehicle_cost(solution: Solution, vehicle: Vehicle, distance: DistanceFn) -> float:
    """Distance driven by ``vehicle``: home city → a1 → ... → aL."""
    total = 0.0
    current = vehicle.home_city
    for action in solution.chain(vehicle):
        total += distance(current, action.city)
        current = action.city
    return total


def solution_cost(solution: Solution, distance: DistanceFn) -> float:
    """Total distance driven by the fleet."""
    return sum(vehicle_cost(solution, vehicle, distance) for vehicle in solution.vehicles)


def cost_breakdown(solution: Solution, distance: DistanceFn) -> Dict[int, float]:
    """Per-vehicle distances keyed by vehicle id."""
    return {
        vehicle.vehicle_id: vehicle_cost(solution, vehicle, distance)
        for vehicle in solution.vehicles
    }


class CostEvaluator:
    """
    Costs solutions against a fixed distance function.

    Args:
        distance: ``(city, city) -> float`` callable; must be thread-safe when
            ``workers > 1``
        workers: thread count for ``evaluate_many``; 1 evaluates inline
    """

    def __init__(self, distance: DistanceFn, workers: int = 1):
        if workers < 1:
            raise ValueError(f"workers must be at least 1: {workers}")
        self.distance = distance
        self.workers = workers
        self._executor: Optional[ThreadPoolExecutor] = None
        self.evaluations = 0

    def evaluate(self, solution: Solution) -> float:
        self.evaluations += 1
        return solution_cost(solution, self.distance)

    def evaluate_many(self, candidates: Sequence[Solution]) -> List[float]:
        """Costs of ``candidates``, in candidate order."""
        self.evaluations += len(candidates)
        if self.workers == 1 or len(candidates) < 2:
            return [solution_cost(candidate, self.distance) for candidate in candidates]

        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.workers,
                thread_name_prefix="sls-cost",
            )
        return list(self._executor.map(lambda s: solution_cost(s, self.distance), candidates))

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "CostEvaluator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
