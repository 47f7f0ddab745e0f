"""Naive single-vehicle baseline.

The vehicle serves the tasks one at a time in iteration order: drive to the
pickup city, pick up, drive to the delivery city, deliver, then continue
from there to the next pickup.  Useful as a reference cost and as the
fallback strategy of ``CentralizedPlanner``.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from core.plan import PathFn, VehiclePlan, empty_plan
from core.task import Task
from core.vehicle import Vehicle
from planner.errors import InfeasibleTaskError

logger = logging.getLogger(__name__)


def naive_plan(vehicle: Vehicle, tasks: Iterable[Task], path: Optional[PathFn] = None) -> VehiclePlan:
    """
    Sequential pickup/delivery plan for ``vehicle``.

    Raises:
        InfeasibleTaskError: when a task does not fit in the vehicle
    """
    plan = empty_plan(vehicle)
    count = 0
    for task in tasks:
        if not vehicle.can_carry(task.weight):
            raise InfeasibleTaskError(task, vehicle.capacity)
        plan.move_to(task.pickup_city, path)
        plan.pickup(task)
        plan.move_to(task.delivery_city, path)
        plan.deliver(task)
        count += 1

    logger.debug(f"[PLAN] naive plan for {vehicle}: {count} tasks, {len(plan)} steps")
    return plan
