"""Neighbourhood generation for the centralized SLS planner.

One call to ``NeighborhoodGenerator.generate`` picks a random busy vehicle
``v`` and enumerates every feasible single-edit neighbour around it:

(a) vehicle reassignment
    The task whose pickup heads ``v``'s chain is detached from ``v`` and
    prepended to every other vehicle ``v'`` that can carry it (pickup at
    time 1, delivery at time 2).  The full prefix load of ``v'`` is
    re-validated, since the moved weight fitting on its own does not
    guarantee the rest of the chain still fits.

(b) task-order swap
    When ``v``'s chain holds more than two actions, the actions at every
    pair of positions ``1 <= i < j <= L`` are swapped.  Candidates that put
    a delivery before its pickup or overload a prefix are dropped.

Every candidate is an independent copy of the current solution, so
candidates can be costed concurrently without touching the state the search
loop iterates on.  Only the choice of ``v`` is random; for a fixed seed and
current solution the candidate list is deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import random
from typing import List, Optional

from core.solution import Solution
from core.vehicle import Vehicle

logger = logging.getLogger(__name__)


@dataclass
class NeighborhoodStats:
    """Bookkeeping for the last generated neighbourhood."""

    vehicle_id: Optional[int] = None
    reassign_emitted: int = 0
    reassign_rejected: int = 0
    swap_emitted: int = 0
    swap_rejected: int = 0

    @property
    def emitted(self) -> int:
        return self.reassign_emitted + self.swap_emitted

    @property
    def rejected(self) -> int:
        return self.reassign_rejected + self.swap_rejected


def change_vehicle(solution: Solution, source: Vehicle, target: Vehicle) -> Optional[Solution]:
    """
    Move the task heading ``source``'s chain to the front of ``target``.

    Returns:
        The edited copy, or ``None`` when ``target`` cannot carry the result.
    """
    head = solution.first_action(source)
    if head is None:
        return None
    if not target.can_carry(head.weight):
        return None

    candidate = solution.copy()
    candidate.move_task_to_front(head.task, source, target)

    feasible, reason = candidate.check_capacity_feasibility(target)
    if not feasible:
        logger.debug(f"[NEIGHBOURHOOD] reassignment rejected: {reason}")
        return None
    return candidate


def change_task_order(solution: Solution, vehicle: Vehicle, first: int, second: int) -> Optional[Solution]:
    """
    Swap the actions at 1-based positions ``first`` < ``second``.

    Returns:
        The edited copy, or ``None`` when precedence or capacity breaks.
    """
    candidate = solution.copy()
    candidate.swap_positions(vehicle, first, second)

    valid, reason = candidate.validate_precedence(vehicle)
    if valid:
        valid, reason = candidate.check_capacity_feasibility(vehicle)
    if not valid:
        logger.debug(f"[NEIGHBOURHOOD] swap ({first}, {second}) rejected: {reason}")
        return None
    return candidate


class NeighborhoodGenerator:
    """Produces the candidate set for one SLS iteration."""

    def __init__(self, rng: Optional[random.Random] = None, *, seed: Optional[int] = None):
        self.rng = rng if rng is not None else random.Random(seed)
        self.last_stats = NeighborhoodStats()

    def pick_vehicle(self, solution: Solution) -> Optional[Vehicle]:
        """Uniformly random vehicle among those with a nonempty chain."""
        busy = solution.nonempty_vehicles()
        if not busy:
            return None
        return self.rng.choice(busy)

    def generate(self, solution: Solution) -> List[Solution]:
        """Candidate solutions one edit away from ``solution``."""
        vehicle = self.pick_vehicle(solution)
        if vehicle is None:
            self.last_stats = NeighborhoodStats()
            logger.debug("[NEIGHBOURHOOD] no busy vehicle, empty neighbourhood")
            return []
        return self.neighbours_of(solution, vehicle)

    def neighbours_of(self, solution: Solution, vehicle: Vehicle) -> List[Solution]:
        """Enumerate every feasible reassignment and swap around ``vehicle``."""
        stats = NeighborhoodStats(vehicle_id=vehicle.vehicle_id)
        candidates: List[Solution] = []

        # (a) hand the leading task over to each other vehicle
        for target in solution.vehicles:
            if target.vehicle_id == vehicle.vehicle_id:
                continue
            candidate = change_vehicle(solution, vehicle, target)
            if candidate is None:
                stats.reassign_rejected += 1
            else:
                stats.reassign_emitted += 1
                candidates.append(candidate)

        # (b) swap two positions inside the chain
        length = solution.chain_length(vehicle)
        if length > 2:
            for first in range(1, length):
                for second in range(first + 1, length + 1):
                    candidate = change_task_order(solution, vehicle, first, second)
                    if candidate is None:
                        stats.swap_rejected += 1
                    else:
                        stats.swap_emitted += 1
                        candidates.append(candidate)

        self.last_stats = stats
        logger.debug(
            f"[NEIGHBOURHOOD] vehicle {vehicle.vehicle_id}: "
            f"{stats.reassign_emitted} reassignments, {stats.swap_emitted} swaps "
            f"({stats.rejected} rejected)"
        )
        return candidates
