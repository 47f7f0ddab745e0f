"""Error taxonomy of the centralized planner.

Only two conditions ever reach the caller as exceptions: a task that no
vehicle can carry (raised while building the initial solution) and a broken
invariant on the solution about to be returned, which indicates a bug.
Dead-end neighbourhoods, deadlines and cancellation are recovered inside the
search loop and reported through ``planner.sls.StopReason`` instead.
"""

from __future__ import annotations

from typing import Optional

from core.task import Task


class PlanningError(Exception):
    """Base class for planner failures."""


class InfeasibleTaskError(PlanningError, ValueError):
    """A task is heavier than the capacity of the vehicle meant to carry it."""

    def __init__(self, task: Task, capacity: int, message: Optional[str] = None):
        self.task = task
        self.capacity = capacity
        super().__init__(
            message
            or f"Task {task.task_id} weight {task.weight} exceeds the biggest vehicle capacity {capacity}"
        )


class PlanningInvariantError(PlanningError):
    """The search produced a solution violating one of its invariants."""
