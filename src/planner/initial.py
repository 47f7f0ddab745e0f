"""Initial solution builder for the centralized SLS planner.

Every task is handed to the vehicle with the largest capacity, in the task
set's iteration order, as consecutive pickup/delivery pairs::

    P1 D1 P2 D2 ... Pn Dn      (times 1 .. 2n)

Only one task is ever on board, so the solution is feasible as soon as the
heaviest task fits in that vehicle.  All weights are checked before anything
is inserted, which means a failing build never leaks a partial solution.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from core.solution import Solution
from core.task import Task, as_task_set
from core.vehicle import Vehicle, largest_vehicle
from planner.errors import InfeasibleTaskError

logger = logging.getLogger(__name__)


def build_initial_solution(vehicles: Sequence[Vehicle], tasks: Iterable[Task]) -> Solution:
    """
    Assign all tasks to the biggest vehicle.

    Args:
        vehicles: the fleet; ties on capacity go to the first vehicle
        tasks: task collection, iterated read-only

    Returns:
        A feasible solution where every other vehicle is idle.

    Raises:
        ValueError: when the fleet is empty or a task id repeats
        InfeasibleTaskError: when a task is heavier than the chosen vehicle
    """
    biggest = largest_vehicle(vehicles)
    ordered_tasks = as_task_set(tasks)

    for task in ordered_tasks:
        if task.weight > biggest.capacity:
            raise InfeasibleTaskError(task, biggest.capacity)

    solution = Solution(vehicles)
    for task in ordered_tasks:
        solution.append_task(biggest, task)

    logger.debug(
        f"[INIT] {len(ordered_tasks)} tasks assigned to {biggest} "
        f"(capacity {biggest.capacity})"
    )
    return solution
