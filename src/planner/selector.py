"""Local choice (acceptance) rules for the SLS loop.

``select_min_cost`` is the default policy: adopt the cheapest candidate,
first one on ties, and keep the current solution when the neighbourhood is
empty.  ``AnnealingSelector`` adds the simulated annealing acceptance used
by the ALNS planners, for searches that must be able to climb out of local
minima.
"""

from __future__ import annotations

import math
import random
from typing import Optional, Sequence, Tuple

from config.defaults import AnnealingParams, DEFAULT_ANNEALING_PARAMS
from core.solution import Solution


def select_min_cost(
    candidates: Sequence[Solution],
    costs: Sequence[float],
    current: Solution,
    current_cost: float,
) -> Tuple[Solution, float]:
    """
    Pick the minimum-cost candidate.

    Args:
        candidates: this iteration's neighbourhood
        costs: cost of each candidate, same order
        current: solution to fall back on for an empty neighbourhood
        current_cost: its cost

    Returns:
        ``(solution, cost)`` of the chosen next state.
    """
    if len(candidates) != len(costs):
        raise ValueError(f"Got {len(costs)} costs for {len(candidates)} candidates")
    if not candidates:
        return current, current_cost

    best_index = 0
    for index in range(1, len(costs)):
        if costs[index] < costs[best_index]:
            best_index = index
    return candidates[best_index], costs[best_index]


class AnnealingSelector:
    """
    Simulated annealing acceptance over the best neighbour.

    The cheapest candidate is always adopted when it does not worsen the
    current cost; otherwise it is adopted with probability exp(-Δ / T).
    The temperature cools geometrically once per call.
    """

    def __init__(self,
                 params: AnnealingParams = DEFAULT_ANNEALING_PARAMS,
                 rng: Optional[random.Random] = None):
        self.params = params
        self.temperature = params.initial_temperature
        self.rng = rng if rng is not None else random.Random()

    def accept(self, new_cost: float, current_cost: float) -> bool:
        if new_cost <= current_cost:
            return True
        if self.temperature <= 1e-12:
            return False
        probability = math.exp(-(new_cost - current_cost) / self.temperature)
        return self.rng.random() < probability

    def __call__(
        self,
        candidates: Sequence[Solution],
        costs: Sequence[float],
        current: Solution,
        current_cost: float,
    ) -> Tuple[Solution, float]:
        best, best_cost = select_min_cost(candidates, costs, current, current_cost)
        accepted = best is current or self.accept(best_cost, current_cost)
        self.temperature *= self.params.cooling_rate
        if accepted:
            return best, best_cost
        return current, current_cost
