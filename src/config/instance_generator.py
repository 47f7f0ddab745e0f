"""Reproducible random instances for the centralized planner.

Used by the property tests and the command line runner.  Cities are named
``C0 .. Ck`` and scattered uniformly over a square grid; tasks pick two
distinct cities and a weight; vehicles start in random cities.  Weights are
capped at the largest vehicle capacity so every generated instance admits an
initial solution.
"""

from __future__ import annotations

from dataclasses import dataclass
import random as _random
from typing import Dict, List, Optional, Tuple

from core.task import Task, TaskSet, create_task
from core.vehicle import Vehicle, create_vehicle
from physics.distance import DistanceMatrix


@dataclass(frozen=True)
class InstanceConfig:
    """Shape of a random instance."""

    num_tasks: int = 10
    num_vehicles: int = 3
    num_cities: int = 12
    grid_size: float = 100.0
    weight_range: Tuple[int, int] = (1, 10)
    capacity_range: Tuple[int, int] = (10, 30)
    use_manhattan: bool = False
    seed: Optional[int] = 7

    def __post_init__(self) -> None:
        if self.num_tasks < 0:
            raise ValueError(f"num_tasks must be non-negative: {self.num_tasks}")
        if self.num_vehicles < 1:
            raise ValueError(f"num_vehicles must be at least 1: {self.num_vehicles}")
        if self.num_cities < 2:
            raise ValueError(f"num_cities must be at least 2: {self.num_cities}")
        if not 1 <= self.weight_range[0] <= self.weight_range[1]:
            raise ValueError(f"Invalid weight_range: {self.weight_range}")
        if not 1 <= self.capacity_range[0] <= self.capacity_range[1]:
            raise ValueError(f"Invalid capacity_range: {self.capacity_range}")


@dataclass
class CentralizedInstance:
    """Everything the planner consumes for one run."""

    vehicles: List[Vehicle]
    tasks: TaskSet
    coordinates: Dict[str, Tuple[float, float]]
    distance: DistanceMatrix
    config: InstanceConfig

    def describe(self) -> str:
        capacities = ", ".join(str(v.capacity) for v in self.vehicles)
        return (f"{len(self.tasks)} tasks, {len(self.vehicles)} vehicles "
                f"(capacities {capacities}), {len(self.coordinates)} cities")


def generate_instance(config: InstanceConfig = InstanceConfig()) -> CentralizedInstance:
    """Create a reproducible instance from ``config``."""

    rng = _random.Random(config.seed)

    # 1. Cities
    coordinates: Dict[str, Tuple[float, float]] = {
        f"C{idx}": (
            round(rng.uniform(0.0, config.grid_size), 3),
            round(rng.uniform(0.0, config.grid_size), 3),
        )
        for idx in range(config.num_cities)
    }
    cities = list(coordinates)

    # 2. Vehicles
    vehicles = [
        create_vehicle(
            vehicle_id=idx,
            capacity=rng.randint(*config.capacity_range),
            home_city=rng.choice(cities),
        )
        for idx in range(config.num_vehicles)
    ]
    max_capacity = max(vehicle.capacity for vehicle in vehicles)

    # 3. Tasks
    tasks: List[Task] = []
    for task_id in range(config.num_tasks):
        pickup_city, delivery_city = rng.sample(cities, 2)
        weight = min(rng.randint(*config.weight_range), max_capacity)
        tasks.append(create_task(task_id, pickup_city, delivery_city, weight=weight))

    # 4. Distance matrix
    distance = DistanceMatrix.from_coordinates(coordinates, use_manhattan=config.use_manhattan)

    return CentralizedInstance(
        vehicles=vehicles,
        tasks=TaskSet(tasks),
        coordinates=coordinates,
        distance=distance,
        config=config,
    )
