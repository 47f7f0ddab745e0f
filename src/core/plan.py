"""
Executable per-vehicle plans.

A ``Solution`` only says which actions a vehicle performs and in which
order.  The host simulator wants a flat list of steps instead: move to a
city, pick a task up, deliver a task.  This module expands each chain into
such a ``VehiclePlan``.

Moves between consecutive action cities are expanded with an optional
``path(a, b)`` callable returning the cities travelled through, excluding
``a`` and including ``b``.  Without one, a single direct move is emitted per
change of city.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence

from core.solution import Solution
from core.task import City, Task
from core.vehicle import Vehicle
from physics.distance import DistanceFn, straight_path

PathFn = Callable[[City, City], Sequence[City]]


class StepKind(Enum):
    MOVE = "move"
    PICKUP = "pickup"
    DELIVERY = "delivery"


@dataclass(frozen=True)
class PlanStep:
    """One instruction for the host: move to ``city`` or handle a task there."""
    kind: StepKind
    city: City
    task_id: Optional[int] = None

    def __str__(self) -> str:
        if self.kind == StepKind.MOVE:
            return f"Move({self.city})"
        label = "Pickup" if self.kind == StepKind.PICKUP else "Deliver"
        return f"{label}(task={self.task_id}@{self.city})"


@dataclass
class VehiclePlan:
    """
    Ordered steps of one vehicle, starting at ``start_city``.

    Attributes:
        vehicle_id: id of the vehicle executing the plan
        start_city: where the vehicle stands when the plan starts
        steps: instructions in execution order
    """
    vehicle_id: int
    start_city: City
    steps: List[PlanStep] = field(default_factory=list)

    # ========== Building ==========

    def move_to(self, destination: City, path: Optional[PathFn] = None) -> None:
        """Append the moves from the current city to ``destination``."""
        origin = self.current_city()
        if origin == destination:
            return
        expand = path if path is not None else straight_path
        for city in expand(origin, destination):
            self.steps.append(PlanStep(StepKind.MOVE, city))

    def pickup(self, task: Task) -> None:
        self.steps.append(PlanStep(StepKind.PICKUP, task.pickup_city, task.task_id))

    def deliver(self, task: Task) -> None:
        self.steps.append(PlanStep(StepKind.DELIVERY, task.delivery_city, task.task_id))

    # ========== Queries ==========

    def current_city(self) -> City:
        """City the vehicle is in after the last step."""
        for step in reversed(self.steps):
            if step.kind == StepKind.MOVE:
                return step.city
        return self.start_city

    def is_empty(self) -> bool:
        return not self.steps

    def cities(self) -> List[City]:
        """Start city followed by every city moved to."""
        return [self.start_city] + [s.city for s in self.steps if s.kind == StepKind.MOVE]

    def total_distance(self, distance: DistanceFn) -> float:
        """Distance travelled along the plan's moves."""
        total = 0.0
        route = self.cities()
        for origin, destination in zip(route, route[1:]):
            total += distance(origin, destination)
        return total

    def task_ids(self, kind: StepKind) -> List[int]:
        return [s.task_id for s in self.steps if s.kind == kind]

    def __len__(self) -> int:
        return len(self.steps)

    def __str__(self) -> str:
        body = ", ".join(str(step) for step in self.steps)
        return f"Plan(vehicle={self.vehicle_id}, start={self.start_city}: [{body}])"


def empty_plan(vehicle: Vehicle) -> VehiclePlan:
    return VehiclePlan(vehicle_id=vehicle.vehicle_id, start_city=vehicle.home_city)


def build_vehicle_plan(solution: Solution, vehicle: Vehicle, path: Optional[PathFn] = None) -> VehiclePlan:
    """Expand one vehicle's chain into a plan."""
    plan = empty_plan(vehicle)
    for action in solution.chain(vehicle):
        plan.move_to(action.city, path)
        if action.is_pickup():
            plan.pickup(action.task)
        else:
            plan.deliver(action.task)
    return plan


def build_vehicle_plans(solution: Solution, path: Optional[PathFn] = None) -> List[VehiclePlan]:
    """One plan per vehicle, in the solution's vehicle order; idle vehicles get an empty plan."""
    return [build_vehicle_plan(solution, vehicle, path) for vehicle in solution.vehicles]
