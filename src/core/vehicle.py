"""
Vehicle data structures
=======================
Defines the static view of a vehicle that the centralized planner needs.

Design notes:
    - Vehicles are supplied by the host runtime and are never mutated by the
      planner, so the dataclass is frozen and hashable
    - ``home_city`` is the vehicle's current location; every chain starts
      there when costs are computed
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from core.task import City


# ========== Vehicle ==========

@dataclass(frozen=True)
class Vehicle:
    """
    Vehicle of the fleet

    Attributes:
        vehicle_id: unique identifier inside the fleet
        capacity: maximum in-transit load (capacity units)
        home_city: current location of the vehicle
        name: optional display name
    """
    vehicle_id: int
    capacity: int
    home_city: City
    name: Optional[str] = None

    def __post_init__(self):
        if self.capacity <= 0:
            raise ValueError(
                f"Vehicle {self.vehicle_id} capacity must be positive: {self.capacity}"
            )

    def can_carry(self, weight: int) -> bool:
        """Whether a single load of ``weight`` fits in an empty vehicle."""
        return weight <= self.capacity

    def __str__(self) -> str:
        if self.name:
            return f"Vehicle({self.name})"
        return f"Vehicle{self.vehicle_id}"


# ========== Convenience constructors ==========

def create_vehicle(vehicle_id: int,
                   capacity: int,
                   home_city: City,
                   name: Optional[str] = None) -> Vehicle:
    """
    Convenience constructor for a vehicle.

    Example:
        truck = create_vehicle(1, capacity=30, home_city="Bern")
    """
    return Vehicle(
        vehicle_id=vehicle_id,
        capacity=capacity,
        home_city=home_city,
        name=name,
    )


def create_fleet(capacities: Sequence[int],
                 home_cities: Sequence[City]) -> List[Vehicle]:
    """
    Build a fleet from parallel capacity / location sequences.

    Vehicle ids are assigned 0..k-1 in input order.
    """
    if len(capacities) != len(home_cities):
        raise ValueError(
            f"Got {len(capacities)} capacities for {len(home_cities)} home cities"
        )
    return [
        create_vehicle(index, capacity, city)
        for index, (capacity, city) in enumerate(zip(capacities, home_cities))
    ]


def largest_vehicle(vehicles: Sequence[Vehicle]) -> Vehicle:
    """Vehicle with the maximum capacity, first in input order on ties."""
    if not vehicles:
        raise ValueError("The fleet must contain at least one vehicle")
    best = vehicles[0]
    for vehicle in vehicles[1:]:
        if vehicle.capacity > best.capacity:
            best = vehicle
    return best
